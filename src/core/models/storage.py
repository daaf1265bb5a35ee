"""Shared storage models."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from core.utils.constants import KEY_SEPARATOR


class StorageKey(BaseModel):
    """Unique object key assigned to an upload within a bucket."""

    model_config = ConfigDict(frozen=True)

    folder: StrictStr = Field("", description="Sanitized folder prefix, no slashes at the ends")
    stem: StrictStr = Field(..., description="Sanitized name derived from the original filename")
    token: StrictStr = Field(..., description="Random uniqueness token")
    extension: StrictStr = Field(..., description="Lower-cased file extension without dot")

    @property
    def filename(self) -> str:
        return f"{self.stem}{KEY_SEPARATOR}{self.token}.{self.extension}"

    @property
    def key(self) -> str:
        if not self.folder:
            return self.filename
        return f"{self.folder}/{self.filename}"

    def __str__(self) -> str:
        return self.key


class ObjectMetadata(BaseModel):
    """Metadata describing an object held by the blob store."""

    bucket: StrictStr = Field(..., description="Bucket holding the object")
    key: StrictStr = Field(..., description="Object key within the bucket")
    content_type: StrictStr = Field(..., description="MIME type of the object")
    size: StrictInt = Field(..., ge=0, description="Object size in bytes")
    created_at: StrictStr | None = Field(None, description="ISO-8601 creation timestamp (UTC)")
    original_filename: StrictStr | None = Field(None, description="Untrusted client filename")
    tags: dict[str, str] = Field(default_factory=dict, description="Caller-supplied tags")
