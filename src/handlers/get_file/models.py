from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from core.utils.constants import BUCKET_NAME_PATTERN


class GetFileRequest(BaseModel):
    """Validation model for the upload info request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    key: StrictStr = Field(..., min_length=1, max_length=1024, description="Object key")
    bucket: StrictStr = Field(..., pattern=BUCKET_NAME_PATTERN, description="Bucket name")

    @field_validator("key")
    @classmethod
    def validate_key(cls, value: str) -> str:
        if ".." in value.split("/"):
            raise ValueError("key must not contain '..' segments")
        return value


class GetFileResponse(BaseModel):
    """Object metadata returned to the caller."""

    model_config = ConfigDict(populate_by_name=True)

    key: str
    bucket: str
    size: int
    type: str
    last_modified: str | None = Field(None, serialization_alias="lastModified")
    original_name: str | None = Field(None, serialization_alias="originalName")
    metadata: dict[str, str] = Field(default_factory=dict)
    url: str
