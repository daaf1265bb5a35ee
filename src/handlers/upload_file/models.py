"""Pydantic models for file upload request/response."""

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import BUCKET_NAME_PATTERN


class FileUploadRequest(BaseModel):
    """Validation model for the multipart upload form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    filename: str = Field(..., min_length=1, max_length=255, description="Original file name")
    content_type: str = Field(..., min_length=1, description="Declared MIME type of the file part")
    bucket: str = Field(..., pattern=BUCKET_NAME_PATTERN, description="Target bucket")
    folder: str = Field(..., max_length=255, description="Target folder prefix")


class FileUploadResponse(BaseModel):
    """Response model for a successful upload."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(..., description="Assigned storage key")
    url: str = Field(..., description="Public object URL")
    bucket: str = Field(..., description="Bucket holding the object")
    folder: str = Field(..., description="Sanitized folder prefix")
    size: int = Field(..., description="Object size in bytes")
    type: str = Field(..., description="MIME type")
    filename: str = Field(..., description="Generated file name")
    original_name: str = Field(..., serialization_alias="originalName")
