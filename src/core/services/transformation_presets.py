"""Common transformation presets built on top of the codec."""

import re
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import urlsplit

from core.models.transformation import ImageSourceInfo
from core.services.transformation_codec import TransformationCodec, TransformationURL
from core.utils.constants import (
    AVATAR_QUALITY,
    AVATAR_SIZE,
    DEFAULT_SRCSET_WIDTHS,
    IMAGE_URL_EXTENSION_PATTERN,
    RESPONSIVE_ASPECT_RATIO,
    THUMBNAIL_QUALITY,
    THUMBNAIL_SIZE,
    URL_EXTENSION_PATTERN,
)

_IMAGE_EXTENSION = re.compile(IMAGE_URL_EXTENSION_PATTERN, re.IGNORECASE)
_URL_EXTENSION = re.compile(URL_EXTENSION_PATTERN)


def thumbnail_url(
    codec: TransformationCodec,
    source: str,
    size: int = THUMBNAIL_SIZE,
) -> TransformationURL:
    """Square, center-cropped webp thumbnail."""
    return codec.build_url(
        source,
        {
            "width": size,
            "height": size,
            "resize": "crop",
            "gravity": "center",
            "format": "webp",
            "quality": THUMBNAIL_QUALITY,
        },
    )


def avatar_url(
    codec: TransformationCodec,
    source: str,
    size: int = AVATAR_SIZE,
) -> TransformationURL:
    """Square, center-cropped webp avatar at a higher quality than thumbnails."""
    return codec.build_url(
        source,
        {
            "width": size,
            "height": size,
            "resize": "crop",
            "gravity": "center",
            "format": "webp",
            "quality": AVATAR_QUALITY,
        },
    )


def _responsive_height(width: int) -> int:
    return round(width * RESPONSIVE_ASPECT_RATIO)


def responsive_urls(
    codec: TransformationCodec,
    source: str,
    sizes: Iterable[Mapping[str, Any]],
) -> dict[str, str]:
    """Build webp URLs keyed by suffix (or '<width>w').

    Each size is a mapping with ``width`` and optional ``height`` and
    ``suffix``. Height defaults to a 4:3 aspect ratio.
    """
    urls: dict[str, str] = {}

    for size in sizes:
        width = int(size["width"])
        height = size.get("height") or _responsive_height(width)
        key = str(size.get("suffix") or f"{width}w")

        urls[key] = codec.build_url(
            source,
            {"width": width, "height": height, "format": "webp"},
        ).url

    return urls


def srcset(
    codec: TransformationCodec,
    source: str,
    widths: Iterable[int] = DEFAULT_SRCSET_WIDTHS,
) -> str:
    """Build an HTML srcset attribute value."""
    entries = []

    for width in widths:
        url = codec.build_url(
            source,
            {"width": width, "height": _responsive_height(width), "format": "webp"},
        ).url
        entries.append(f"{url} {width}w")

    return ", ".join(entries)


def _strip_query(url: str) -> str:
    return url.split("?", 1)[0].split("#", 1)[0]


def _is_under(url: str, endpoint: str | None) -> bool:
    if not endpoint:
        return False
    return url.startswith(endpoint.rstrip("/") + "/")


def is_image_source(url: str, s3_endpoint: str | None = None) -> bool:
    """Guess whether a source reference points at an image.

    Objects under the configured S3 endpoint are assumed to be images
    even without an extension.
    """
    if not url:
        return False

    if _IMAGE_EXTENSION.search(_strip_query(url)):
        return True

    if url.startswith("data:image/"):
        return True

    return _is_under(url, s3_endpoint)


def describe_source(url: str, s3_endpoint: str | None = None) -> ImageSourceInfo:
    """Report image-ness, extension and S3 origin of a source reference."""
    last_segment = urlsplit(url or "").path.rsplit("/", 1)[-1]
    match = _URL_EXTENSION.search(last_segment)

    return ImageSourceInfo(
        is_image=is_image_source(url, s3_endpoint),
        extension=match.group(1).lower() if match else None,
        is_s3_url=_is_under(url or "", s3_endpoint),
    )
