"""
Business logic for reading back uploaded object metadata.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.s3_blob_store import S3BlobStore
from core.models.storage import ObjectMetadata
from core.repositories.blob_store import BlobStore
from core.utils.config import GatewaySettings, get_settings

logger = Logger(UTC=True)


class GetFileService:
    """Looks up stored objects and builds their public URLs."""

    def __init__(
        self,
        *,
        settings: GatewaySettings | None = None,
        blob_store: BlobStore | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.storage = blob_store or S3BlobStore()

    def get_file(self, *, bucket: str, key: str) -> tuple[ObjectMetadata, str]:
        """Return object metadata and its public URL.

        Raises:
            NotFoundError: If the object does not exist
            StorageError: If the lookup fails
        """
        logger.debug("Fetching object metadata", extra={"bucket": bucket, "key": key})

        metadata = self.storage.head(bucket, key)

        return metadata, self.settings.object_url(bucket, key)
