"""Business logic for file uploads.

This module coordinates validation, key assignment and the blob store
write, translating failures into domain-specific errors.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.s3_blob_store import META_ORIGINAL_NAME, S3BlobStore
from core.models.errors import FileSizeError, KeyCollisionError, ValidationError
from core.models.storage import ObjectMetadata, StorageKey
from core.repositories.blob_store import BlobStore
from core.services.key_assignment import KeyAssignmentService
from core.utils.config import GatewaySettings, get_settings
from core.utils.constants import format_file_size, get_max_file_size_mb
from core.utils.mime import validate_content_type

logger = Logger(UTC=True)


class UploadService:
    """Application service responsible for uploads.

    This service orchestrates:
    - Size and media type validation
    - Storage key assignment
    - Writing the object with a conditional put
    """

    def __init__(
        self,
        *,
        settings: GatewaySettings | None = None,
        blob_store: BlobStore | None = None,
        key_service: KeyAssignmentService | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.storage = blob_store or S3BlobStore()
        self.keys = key_service or KeyAssignmentService(
            self.storage,
            max_attempts=self.settings.key_assignment_max_attempts,
        )

    def validate_size(self, file_data: bytes) -> None:
        if not file_data:
            raise ValidationError(message="File is empty")

        if len(file_data) > self.settings.max_file_size:
            raise FileSizeError(
                message=(
                    "File size exceeds maximum limit of "
                    f"{get_max_file_size_mb(self.settings.max_file_size)}MB"
                ),
                details={
                    "size": format_file_size(len(file_data)),
                    "max_size": format_file_size(self.settings.max_file_size),
                },
            )

    def upload(
        self,
        *,
        filename: str,
        content_type: str,
        file_data: bytes,
        bucket: str,
        folder: str,
        tags: dict[str, str] | None = None,
    ) -> tuple[StorageKey, ObjectMetadata]:
        """Store an uploaded file under a freshly assigned key.

        The upload flow is:
        1. Validate size, extension and declared MIME type
        2. Assign a key that does not exist yet
        3. Write with a conditional put; if another writer took the key
           in between, assign a new key and write once more

        Raises:
            ValidationError: If the file is empty, too large or of an
                unsupported type
            KeyAssignmentExhaustedError: If no free key was found
            KeyCollisionError: If both conditional writes lost the race
            ObjectUploadFailedError: If the write fails
        """
        logger.debug("Starting upload", extra={"bucket": bucket, "folder": folder})

        self.validate_size(file_data)
        _, _, extension = self.keys.prepare(filename, folder)
        mime_type = validate_content_type(
            content_type,
            extension=extension,
            file_data=file_data,
        )

        metadata = {**(tags or {}), META_ORIGINAL_NAME: filename}

        storage_key = self.keys.assign_key(filename, folder, bucket)
        try:
            stored = self.storage.put(bucket, storage_key.key, file_data, mime_type, metadata)
        except KeyCollisionError:
            logger.warning(
                "Lost write race for storage key, reassigning",
                extra={"bucket": bucket, "key": storage_key.key},
            )
            storage_key = self.keys.assign_key(filename, folder, bucket)
            stored = self.storage.put(bucket, storage_key.key, file_data, mime_type, metadata)

        logger.info(
            "File uploaded successfully",
            extra={"bucket": bucket, "key": storage_key.key, "size": stored.size},
        )
        return storage_key, stored
