from collections.abc import Mapping

from core.models.errors import UnsupportedMediaTypeError
from core.utils.constants import (
    ALLOWED_IMAGE_MIME_TYPES,
    ALLOWED_MIME_TYPES,
    DOCUMENT_CACHE_CONTROL,
    IMAGE_CACHE_CONTROL,
    MIME_TYPE_EXTENSION_MAP,
)

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"RIFF": "image/webp",
    b"%PDF-": "application/pdf",
}


def detect_mime_type(file_data: bytes) -> str | None:
    """Sniff a MIME type from leading magic bytes, or None if unknown."""
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    return None


def normalize_mime_type(declared: str | None) -> str:
    """Strip parameters (e.g. charset) and lower-case a declared MIME type."""
    if not declared:
        return ""

    return declared.split(";", 1)[0].strip().lower()


def validate_content_type(
    declared: str | None,
    *,
    extension: str,
    file_data: bytes,
) -> str:
    """Validate a declared MIME type against the allow-list and extension.

    Returns the normalized MIME type.

    Raises:
        UnsupportedMediaTypeError: If the type is not allowed, does not
            match the filename extension, or contradicts the content.
    """
    mime_type = normalize_mime_type(declared)

    if mime_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedMediaTypeError(
            message=f"File type {mime_type or 'unknown'} is not allowed",
            details={"mime_type": mime_type},
        )

    if extension not in MIME_TYPE_EXTENSION_MAP[mime_type]:
        raise UnsupportedMediaTypeError(
            message=f"File extension '{extension}' does not match type {mime_type}",
            details={"mime_type": mime_type, "extension": extension},
        )

    # Only reject on a positive mismatch; many allowed types have no magic bytes.
    sniffed = detect_mime_type(file_data)
    if sniffed is not None and not _same_family(sniffed, mime_type):
        raise UnsupportedMediaTypeError(
            message=f"File content does not match declared type {mime_type}",
            details={"mime_type": mime_type, "detected": sniffed},
        )

    return mime_type


def is_image_mime_type(mime_type: str) -> bool:
    return mime_type in ALLOWED_IMAGE_MIME_TYPES


def cache_control_for(mime_type: str) -> str:
    return IMAGE_CACHE_CONTROL if is_image_mime_type(mime_type) else DOCUMENT_CACHE_CONTROL


def _same_family(sniffed: str, declared: str) -> bool:
    if declared == "image/jpg":
        declared = "image/jpeg"
    return sniffed == declared
