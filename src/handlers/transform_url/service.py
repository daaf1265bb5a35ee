"""
Business logic for building transformation URLs.
"""

from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import ValidationError
from core.models.transformation import ImageSourceInfo
from core.services import transformation_presets as presets
from core.services.transformation_codec import TransformationCodec, TransformationURL
from core.utils.config import GatewaySettings, get_settings

logger = Logger(UTC=True)


class TransformUrlService:
    """Builds signed transformation URLs for image sources."""

    def __init__(
        self,
        *,
        settings: GatewaySettings | None = None,
        codec: TransformationCodec | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.codec = codec or TransformationCodec.from_settings(self.settings)

    def describe(self, source: str) -> ImageSourceInfo:
        return presets.describe_source(source, self.settings.s3_public_endpoint)

    def generate(
        self,
        *,
        source: str,
        options: dict[str, Any] | None = None,
        preset: str | None = None,
        size: int | None = None,
        include_srcset: bool = False,
    ) -> tuple[TransformationURL, str | None]:
        """Build the transformation URL and, optionally, a srcset value.

        A preset takes precedence over individual options.

        Raises:
            ValidationError: If the source does not look like an image
            InvalidTransformationParameterError: If an option is out of domain
            SigningUnavailableError: If signing is not configured
        """
        if not self.describe(source).is_image:
            raise ValidationError(
                message="URL does not point to a supported image",
                details={"url": source},
            )

        if preset == "thumbnail":
            result = (
                presets.thumbnail_url(self.codec, source, size)
                if size
                else presets.thumbnail_url(self.codec, source)
            )
        elif preset == "avatar":
            result = (
                presets.avatar_url(self.codec, source, size)
                if size
                else presets.avatar_url(self.codec, source)
            )
        else:
            result = self.codec.build_url(source, options)

        srcset = presets.srcset(self.codec, source) if include_srcset and result.signed else None

        logger.debug(
            "Transformation URL built",
            extra={"preset": preset, "signed": result.signed, "path": result.path},
        )

        return result, srcset
