"""Process-wide gateway configuration loaded from the environment."""

from functools import lru_cache
from typing import Annotated, Any
from urllib.parse import urlsplit

from aws_lambda_powertools import Logger
from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from core.models.signing import SigningSecret, decode_hex
from core.utils.constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_BUCKET,
    DEFAULT_FOLDER,
    DEFAULT_MAX_DIMENSION,
    ENV_ALLOW_UNSIGNED_URLS,
    ENV_ALLOWED_SOURCE_BUCKETS,
    ENV_ALLOWED_SOURCE_ORIGINS,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_DEFAULT_BUCKET,
    ENV_DEFAULT_FOLDER,
    ENV_IMGPROXY_BASE_URL,
    ENV_IMGPROXY_KEY,
    ENV_IMGPROXY_SALT,
    ENV_KEY_ASSIGNMENT_MAX_ATTEMPTS,
    ENV_MAX_FILE_SIZE,
    ENV_S3_PUBLIC_ENDPOINT,
    ENV_TRANSFORM_MAX_DIMENSION,
    KEY_ASSIGNMENT_MAX_ATTEMPTS,
    MAX_FILE_SIZE,
)

logger = Logger(UTC=True)

CommaList = Annotated[tuple[str, ...], NoDecode]


class GatewaySettings(BaseSettings):
    """Immutable configuration injected into services at startup.

    Values come from constructor arguments first, then environment
    variables. Malformed values fail validation; a malformed signing
    key or salt only disables signing.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        case_sensitive=False,
        env_ignore_empty=True,
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="ignore",
    )

    aws_region: str = Field(DEFAULT_AWS_REGION, validation_alias=ENV_AWS_REGION)
    aws_endpoint_url: str | None = Field(None, validation_alias=ENV_AWS_ENDPOINT_URL)
    s3_public_endpoint: str | None = Field(
        None,
        validation_alias=ENV_S3_PUBLIC_ENDPOINT,
        description="Public base URL used to build object URLs",
    )
    default_bucket: str = Field(DEFAULT_BUCKET, validation_alias=ENV_DEFAULT_BUCKET)
    default_folder: str = Field(DEFAULT_FOLDER, validation_alias=ENV_DEFAULT_FOLDER)
    max_file_size: int = Field(MAX_FILE_SIZE, gt=0, validation_alias=ENV_MAX_FILE_SIZE)
    key_assignment_max_attempts: int = Field(
        KEY_ASSIGNMENT_MAX_ATTEMPTS,
        ge=1,
        validation_alias=ENV_KEY_ASSIGNMENT_MAX_ATTEMPTS,
    )

    imgproxy_base_url: str | None = Field(None, validation_alias=ENV_IMGPROXY_BASE_URL)
    imgproxy_key: SecretStr | None = Field(None, validation_alias=ENV_IMGPROXY_KEY)
    imgproxy_salt: SecretStr | None = Field(None, validation_alias=ENV_IMGPROXY_SALT)
    allow_unsigned_urls: bool = Field(False, validation_alias=ENV_ALLOW_UNSIGNED_URLS)
    max_dimension: int = Field(
        DEFAULT_MAX_DIMENSION, gt=0, validation_alias=ENV_TRANSFORM_MAX_DIMENSION
    )
    allowed_source_origins: CommaList = Field(
        (), validation_alias=ENV_ALLOWED_SOURCE_ORIGINS, validate_default=True
    )
    allowed_source_buckets: CommaList = Field(
        (), validation_alias=ENV_ALLOWED_SOURCE_BUCKETS, validate_default=True
    )

    @field_validator("imgproxy_key", "imgproxy_salt")
    @classmethod
    def validate_secret_hex(
        cls, value: SecretStr | None, info: ValidationInfo
    ) -> SecretStr | None:
        if value is None:
            return None

        try:
            decode_hex(value.get_secret_value(), info.field_name)
        except ValueError as exc:
            # Never log the values themselves.
            logger.error(
                "Signing secret is malformed; signing disabled",
                extra={"field": info.field_name, "reason": str(exc)},
            )
            return None

        return value

    @field_validator("allowed_source_origins", mode="before")
    @classmethod
    def validate_origins(cls, value: Any, info: ValidationInfo) -> tuple[str, ...]:
        origins = _split_list(value)
        if not origins and info.data.get("s3_public_endpoint"):
            origins = (_origin_of(info.data["s3_public_endpoint"]),)
        return origins

    @field_validator("allowed_source_buckets", mode="before")
    @classmethod
    def validate_buckets(cls, value: Any, info: ValidationInfo) -> tuple[str, ...]:
        buckets = _split_list(value)
        if not buckets and info.data.get("default_bucket"):
            buckets = (info.data["default_bucket"],)
        return buckets

    @property
    def signing_secret(self) -> SigningSecret | None:
        if self.imgproxy_key is None or self.imgproxy_salt is None:
            return None

        return SigningSecret.from_hex(
            self.imgproxy_key.get_secret_value(),
            self.imgproxy_salt.get_secret_value(),
        )

    @property
    def signing_enabled(self) -> bool:
        return self.signing_secret is not None and bool(self.imgproxy_base_url)

    def object_url(self, bucket: str, key: str) -> str:
        """Public URL of a stored object."""
        base = (self.s3_public_endpoint or "").rstrip("/")
        return f"{base}/{bucket}/{key}"


@lru_cache(maxsize=1)
def get_settings() -> GatewaySettings:
    """Return the process-wide settings, loaded once.

    Raises:
        pydantic.ValidationError: If the environment holds a malformed value.
    """
    settings = GatewaySettings()

    logger.info(
        "Gateway settings loaded",
        extra={
            "default_bucket": settings.default_bucket,
            "default_folder": settings.default_folder,
            "signing_enabled": settings.signing_enabled,
            "allow_unsigned_urls": settings.allow_unsigned_urls,
        },
    )
    if not settings.signing_enabled and settings.allow_unsigned_urls:
        logger.warning(
            "Signing secret not configured; transformation URLs will be unsigned"
        )

    return settings


def _split_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()

    items = value.split(",") if isinstance(value, str) else value
    return tuple(item.strip().rstrip("/") for item in items if item and item.strip())


def _origin_of(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}".lower()
