"""Transformation request model and its canonical token grammar."""

import re
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError as PydanticValidationError,
    ValidationInfo,
    field_validator,
)

from core.models.errors import InvalidTransformationParameterError
from core.utils.constants import (
    DEFAULT_HEIGHT,
    DEFAULT_MAX_DIMENSION,
    DEFAULT_QUALITY,
    DEFAULT_WIDTH,
    FILTER_DECIMAL_PLACES,
    MAX_FILTER_SIGMA,
    MAX_QUALITY,
    MIN_QUALITY,
    TOKEN_SEPARATOR,
)
from core.utils.validators import sanitize_validation_errors

ResizeMode = Literal["fit", "fill", "crop"]
Gravity = Literal[
    "center",
    "north",
    "south",
    "east",
    "west",
    "northeast",
    "northwest",
    "southeast",
    "southwest",
]
OutputFormat = Literal["webp", "avif", "jpg", "png", "auto"]

_NUMBER = r"\d+(?:\.\d+)?"

# Canonical order; each token may appear at most once.
TOKEN_GRAMMAR: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("rs", re.compile(r"^rs:(fit|fill|crop):(\d+):(\d+):([01])$")),
    ("g", re.compile(r"^g:([a-z]+)$")),
    ("q", re.compile(r"^q:(\d+)$")),
    ("f", re.compile(r"^f:([a-z]+)$")),
    ("bl", re.compile(rf"^bl:({_NUMBER})$")),
    ("sh", re.compile(rf"^sh:({_NUMBER})$")),
)


class TransformationSpec(BaseModel):
    """Ordered set of image operations requested from the renderer.

    Field declaration order is the canonical serialization order, so two
    specs with equal values always produce byte-identical paths.

    The width/height bound is read from the validation context key
    ``max_dimension`` and falls back to ``DEFAULT_MAX_DIMENSION``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    resize: ResizeMode = "fit"
    width: int = Field(DEFAULT_WIDTH, gt=0)
    height: int = Field(DEFAULT_HEIGHT, gt=0)
    enlarge: StrictBool = False
    gravity: Gravity = "center"
    quality: int = Field(DEFAULT_QUALITY, ge=MIN_QUALITY, le=MAX_QUALITY)
    format: OutputFormat = "auto"
    blur: float | None = Field(None, gt=0, le=MAX_FILTER_SIGMA, allow_inf_nan=False)
    sharpen: float | None = Field(None, gt=0, le=MAX_FILTER_SIGMA, allow_inf_nan=False)

    @field_validator("width", "height", "quality", mode="before")
    @classmethod
    def reject_boolean(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be an integer, not a boolean")
        return value

    @field_validator("blur", "sharpen", mode="before")
    @classmethod
    def drop_non_positive_filter(cls, value: Any) -> Any:
        """Non-positive filter strengths mean "no filter"."""
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")

        try:
            number = float(value)
        except (TypeError, ValueError):
            return value

        return None if number <= 0 else value

    @field_validator("blur", "sharpen")
    @classmethod
    def validate_filter_precision(cls, value: float | None) -> float | None:
        if value is not None and float(format_number(value)) != value:
            raise ValueError(
                f"must have at most {FILTER_DECIMAL_PLACES} decimal places"
            )
        return value

    @field_validator("width", "height")
    @classmethod
    def validate_dimension(cls, value: int, info: ValidationInfo) -> int:
        max_dimension = (info.context or {}).get("max_dimension", DEFAULT_MAX_DIMENSION)
        if value > max_dimension:
            raise ValueError(f"must not exceed {max_dimension} pixels")
        return value

    @classmethod
    def from_options(
        cls,
        options: dict[str, Any] | None = None,
        *,
        max_dimension: int = DEFAULT_MAX_DIMENSION,
    ) -> "TransformationSpec":
        """Validate caller options into a spec.

        Unset (None) options fall back to their defaults, and a
        non-positive blur or sharpen means no filter. Nothing is clamped:
        any other out-of-domain value is rejected, including filter
        strengths the token grammar cannot carry exactly.

        Raises:
            InvalidTransformationParameterError: If any option is invalid.
        """
        data = {name: value for name, value in (options or {}).items() if value is not None}

        try:
            return cls.model_validate(data, context={"max_dimension": max_dimension})
        except PydanticValidationError as exc:
            errors = sanitize_validation_errors(exc.errors())
            raise InvalidTransformationParameterError(
                message="Invalid transformation parameters",
                details={"errors": errors},
            ) from exc

    def tokens(self) -> list[str]:
        """Serialize operations into canonical processing tokens."""
        tokens = [
            f"rs:{self.resize}:{self.width}:{self.height}:{int(self.enlarge)}",
        ]

        if self.resize == "crop":
            tokens.append(f"g:{self.gravity}")

        tokens.append(f"q:{self.quality}")

        if self.format != "auto":
            tokens.append(f"f:{self.format}")

        if self.blur:
            tokens.append(f"bl:{format_number(self.blur)}")

        if self.sharpen:
            tokens.append(f"sh:{format_number(self.sharpen)}")

        return tokens

    def canonical(self) -> str:
        return TOKEN_SEPARATOR.join(self.tokens())

    @classmethod
    def parse_tokens(
        cls,
        tokens: list[str],
        *,
        max_dimension: int = DEFAULT_MAX_DIMENSION,
    ) -> "TransformationSpec":
        """Rebuild a spec from canonical tokens.

        Raises:
            ValueError: If a token is unknown, repeated, out of order,
                out of domain, or the tokens are not in canonical form.
        """
        values: dict[str, Any] = {}
        position = 0

        for token in tokens:
            for index in range(position, len(TOKEN_GRAMMAR)):
                name, pattern = TOKEN_GRAMMAR[index]
                match = pattern.match(token)
                if match:
                    _apply_token(values, name, match.groups())
                    position = index + 1
                    break
            else:
                raise ValueError(f"Unexpected processing token '{token}'")

        if "resize" not in values:
            raise ValueError("Missing resize token")

        try:
            spec = cls.model_validate(values, context={"max_dimension": max_dimension})
        except PydanticValidationError as exc:
            raise ValueError("Processing token value out of range") from exc

        if spec.tokens() != tokens:
            raise ValueError("Processing tokens are not in canonical form")

        return spec


class ImageSourceInfo(BaseModel):
    """What can be told about a source reference from the URL alone."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_image: bool = Field(..., serialization_alias="isImage")
    extension: str | None = Field(None, description="Lower-cased file extension")
    is_s3_url: bool = Field(..., serialization_alias="isS3Url")


def format_number(value: float) -> str:
    """Render a number without a trailing '.0' for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.{FILTER_DECIMAL_PLACES}f}".rstrip("0").rstrip(".")


def _apply_token(values: dict[str, Any], name: str, groups: tuple[str, ...]) -> None:
    if name == "rs":
        mode, width, height, enlarge = groups
        values.update(
            resize=mode,
            width=int(width),
            height=int(height),
            enlarge=enlarge == "1",
        )
    elif name == "g":
        values["gravity"] = groups[0]
    elif name == "q":
        values["quality"] = int(groups[0])
    elif name == "f":
        values["format"] = groups[0]
    elif name == "bl":
        values["blur"] = float(groups[0])
    elif name == "sh":
        values["sharpen"] = float(groups[0])
