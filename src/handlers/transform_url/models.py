"""
Pydantic models for the transformation URL request and response.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.models.transformation import ImageSourceInfo
from core.utils.constants import DEFAULT_MAX_DIMENSION

# Query parameters forwarded to the codec as transformation options.
TRANSFORMATION_PARAMS: tuple[str, ...] = (
    "width",
    "height",
    "quality",
    "format",
    "resize",
    "gravity",
    "blur",
    "sharpen",
    "enlarge",
)


class TransformUrlRequest(BaseModel):
    """Validation model for the transformation URL request.

    Transformation options themselves are validated by the codec so that
    out-of-domain values surface as INVALID_TRANSFORMATION_PARAMETER.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    url: StrictStr = Field(..., min_length=1, max_length=2048, description="Source reference")
    preset: Literal["thumbnail", "avatar"] | None = Field(None, description="Named preset")
    size: int | None = Field(
        None,
        gt=0,
        le=DEFAULT_MAX_DIMENSION,
        description="Preset edge length in pixels",
    )
    srcset: bool = Field(False, description="Also return a responsive srcset value")
    options: dict[str, Any] = Field(default_factory=dict)


class TransformUrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_url: str = Field(..., serialization_alias="originalUrl")
    optimized_url: str = Field(..., serialization_alias="optimizedUrl")
    signed: bool
    parameters: dict[str, Any]
    source: ImageSourceInfo
    srcset: str | None = None
