"""S3-backed implementation of BlobStore."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, unquote

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import (
    KeyCollisionError,
    NotFoundError,
    ObjectUploadFailedError,
    StorageError,
)
from core.models.storage import ObjectMetadata
from core.repositories.blob_store import BlobStore
from core.utils.mime import cache_control_for
from core.utils.time import to_utc_iso, utc_now_iso

logger = Logger(UTC=True)

# S3 user metadata travels as HTTP headers, so free-form values are
# percent-encoded on the way in and decoded on the way out.
META_ORIGINAL_NAME = "original_name"
META_UPLOADED_AT = "uploaded_at"

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})
_COLLISION_CODES = frozenset({"412", "PreconditionFailed", "ConditionalRequestConflict"})


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3BlobStore(BlobStore):
    """Blob store implementation backed by Amazon S3."""

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter or S3Adapter()

    def exists(self, bucket: str, key: str) -> bool:
        try:
            self._s3.head_object(bucket=bucket, key=key)
            return True

        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                return False

            logger.error(
                "S3 existence probe failed",
                extra={"bucket": bucket, "key": key, "code": _error_code(exc)},
            )
            raise StorageError(
                message="Unable to check storage at this time",
                details={"bucket": bucket, "key": key},
            ) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected error probing object existence")
            raise StorageError(
                message="Unable to check storage at this time",
                details={"bucket": bucket, "key": key},
            ) from exc

    def put(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        *,
        overwrite: bool = False,
    ) -> ObjectMetadata:
        stored_metadata = {name: quote(value, safe="") for name, value in metadata.items()}
        stored_metadata.setdefault(META_UPLOADED_AT, utc_now_iso())

        logger.debug(
            "Uploading object",
            extra={"bucket": bucket, "key": key, "size": len(body)},
        )

        try:
            self._s3.put_object(
                bucket=bucket,
                key=key,
                body=body,
                content_type=content_type,
                metadata=stored_metadata,
                cache_control=cache_control_for(content_type),
                if_none_match=not overwrite,
            )

        except ClientError as exc:
            if _error_code(exc) in _COLLISION_CODES:
                logger.warning(
                    "Conditional put rejected, key already taken",
                    extra={"bucket": bucket, "key": key},
                )
                raise KeyCollisionError(
                    message="Storage key is already in use",
                    details={"bucket": bucket, "key": key},
                ) from exc

            logger.error(
                "S3 upload failed",
                extra={"bucket": bucket, "key": key, "code": _error_code(exc)},
            )
            raise ObjectUploadFailedError(
                message="Unable to upload file at this time",
                details={"bucket": bucket, "key": key},
            ) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected error uploading object")
            raise ObjectUploadFailedError(
                message="Unable to upload file at this time",
                details={"bucket": bucket, "key": key},
            ) from exc

        logger.info("Object uploaded successfully", extra={"bucket": bucket, "key": key})

        return self._to_metadata(
            bucket=bucket,
            key=key,
            content_type=content_type,
            size=len(body),
            raw_metadata=stored_metadata,
        )

    def head(self, bucket: str, key: str) -> ObjectMetadata:
        try:
            response = self._s3.head_object(bucket=bucket, key=key)

        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                raise NotFoundError(
                    message="File not found",
                    details={"bucket": bucket, "key": key},
                ) from exc

            logger.error(
                "S3 head failed",
                extra={"bucket": bucket, "key": key, "code": _error_code(exc)},
            )
            raise StorageError(
                message="Failed to get file information",
                details={"bucket": bucket, "key": key},
            ) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected error reading object metadata")
            raise StorageError(
                message="Failed to get file information",
                details={"bucket": bucket, "key": key},
            ) from exc

        return self._to_metadata(
            bucket=bucket,
            key=key,
            content_type=response.get("ContentType", "application/octet-stream"),
            size=int(response.get("ContentLength", 0)),
            raw_metadata=response.get("Metadata") or {},
            last_modified=response.get("LastModified"),
        )

    @staticmethod
    def _to_metadata(
        *,
        bucket: str,
        key: str,
        content_type: str,
        size: int,
        raw_metadata: Mapping[str, str],
        last_modified: Any = None,
    ) -> ObjectMetadata:
        tags = {name.lower(): unquote(value) for name, value in raw_metadata.items()}
        original_name = tags.pop(META_ORIGINAL_NAME, None)
        uploaded_at = tags.pop(META_UPLOADED_AT, None)

        return ObjectMetadata(
            bucket=bucket,
            key=key,
            content_type=content_type,
            size=size,
            created_at=uploaded_at or to_utc_iso(last_modified),
            original_filename=original_name,
            tags=tags,
        )
