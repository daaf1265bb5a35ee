"""Abstract contract for bucket-scoped object storage."""

from abc import ABC, abstractmethod

from core.models.storage import ObjectMetadata


class BlobStore(ABC):
    """Contract for storing objects and probing their existence.

    Implementations could be S3, MinIO, GCS, local disk, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def exists(self, bucket: str, key: str) -> bool:
        """Return True if an object is stored under the key.

        Raises:
            StorageError: If the probe itself fails
        """

    @abstractmethod
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
        """Store an object and return its metadata.

        Args:
            bucket: Target bucket
            key: Object key
            body: Object content
            content_type: MIME type
            metadata: Caller-supplied tags; `original_name` and
                `uploaded_at` are recognized
            overwrite: Replace an existing object instead of failing

        Raises:
            KeyCollisionError: If overwrite is False and the key is taken
            ObjectUploadFailedError: If the write fails
        """

    @abstractmethod
    def head(self, bucket: str, key: str) -> ObjectMetadata:
        """Return metadata of a stored object.

        Raises:
            NotFoundError: If no object exists under the key
            StorageError: If the lookup fails
        """
