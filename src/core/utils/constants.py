"""Global constants used throughout the application.

This module centralizes magic numbers, string literals, and configuration
defaults that are used across multiple modules.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_INVALID_TRANSFORMATION_PARAMETER = "INVALID_TRANSFORMATION_PARAMETER"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_OBJECT_UPLOAD_FAILED = "OBJECT_UPLOAD_FAILED"
ERROR_CODE_KEY_COLLISION = "KEY_COLLISION"
ERROR_CODE_KEY_ASSIGNMENT_EXHAUSTED = "KEY_ASSIGNMENT_EXHAUSTED"

# Signing / Verification Errors
ERROR_CODE_SIGNING_UNAVAILABLE = "SIGNING_UNAVAILABLE"
ERROR_CODE_SIGNATURE_INVALID = "SIGNATURE_INVALID"
ERROR_CODE_MALFORMED_SOURCE = "MALFORMED_SOURCE"
ERROR_CODE_MALFORMED_TRANSFORMATION = "MALFORMED_TRANSFORMATION"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes

IMAGE_MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/jpg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/gif": ("gif",),
    "image/webp": ("webp",),
    "image/avif": ("avif",),
}

DOCUMENT_MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "application/pdf": ("pdf",),
    "text/plain": ("txt",),
    "application/msword": ("doc",),
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": (
        "docx",
    ),
}

MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    **IMAGE_MIME_TYPE_EXTENSION_MAP,
    **DOCUMENT_MIME_TYPE_EXTENSION_MAP,
}

ALLOWED_IMAGE_MIME_TYPES: Final[frozenset[str]] = frozenset(
    IMAGE_MIME_TYPE_EXTENSION_MAP.keys()
)

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())

ALLOWED_EXTENSIONS: Final[frozenset[str]] = frozenset(
    ext for extensions in MIME_TYPE_EXTENSION_MAP.values() for ext in extensions
)

IMAGE_CACHE_CONTROL = "public, max-age=31536000"
DOCUMENT_CACHE_CONTROL = "public, max-age=86400"

# ============================================================================
# Storage Key Constraints
# ============================================================================

KEY_STEM_MAX_LENGTH = 50
KEY_TOKEN_BYTES = 4  # 8 hex characters
KEY_SEPARATOR = "_"
KEY_ASSIGNMENT_MAX_ATTEMPTS = 5
UNSAFE_KEY_CHARS_PATTERN = r"[^A-Za-z0-9\-_]"
BUCKET_NAME_PATTERN = r"^[a-z0-9][a-z0-9.\-]{1,61}[a-z0-9]$"

DEFAULT_BUCKET = "uploads"
DEFAULT_FOLDER = "files"

# ============================================================================
# Transformation Constraints
# ============================================================================

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_QUALITY = 85
DEFAULT_MAX_DIMENSION = 8192
MIN_QUALITY = 0
MAX_QUALITY = 100
MAX_FILTER_SIGMA = 100
FILTER_DECIMAL_PLACES = 6

TOKEN_SEPARATOR = "/"

THUMBNAIL_SIZE = 150
THUMBNAIL_QUALITY = 80
AVATAR_SIZE = 100
AVATAR_QUALITY = 90
DEFAULT_SRCSET_WIDTHS: Final[tuple[int, ...]] = (320, 640, 960, 1280, 1920)
RESPONSIVE_ASPECT_RATIO = 0.75

IMAGE_URL_EXTENSION_PATTERN = r"\.(jpg|jpeg|png|gif|webp|avif|bmp|tiff)$"
URL_EXTENSION_PATTERN = r"\.([A-Za-z0-9]+)$"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

METRICS_NAMESPACE = "MediaGateway"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_S3_PUBLIC_ENDPOINT = "S3_PUBLIC_ENDPOINT"
ENV_DEFAULT_BUCKET = "S3_BUCKET"
ENV_DEFAULT_FOLDER = "UPLOAD_DEFAULT_FOLDER"
ENV_MAX_FILE_SIZE = "UPLOAD_MAX_FILE_SIZE"
ENV_KEY_ASSIGNMENT_MAX_ATTEMPTS = "KEY_ASSIGNMENT_MAX_ATTEMPTS"
ENV_IMGPROXY_BASE_URL = "IMGPROXY_BASE_URL"
ENV_IMGPROXY_KEY = "IMGPROXY_KEY"
ENV_IMGPROXY_SALT = "IMGPROXY_SALT"
ENV_ALLOW_UNSIGNED_URLS = "ALLOW_UNSIGNED_URLS"
ENV_TRANSFORM_MAX_DIMENSION = "TRANSFORM_MAX_DIMENSION"
ENV_ALLOWED_SOURCE_ORIGINS = "ALLOWED_SOURCE_ORIGINS"
ENV_ALLOWED_SOURCE_BUCKETS = "ALLOWED_SOURCE_BUCKETS"

DEFAULT_AWS_REGION = "us-east-1"
S3_CONNECT_TIMEOUT_SECONDS = 5
S3_READ_TIMEOUT_SECONDS = 10

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb(max_file_size: int = MAX_FILE_SIZE) -> int:
    """Get maximum file size in megabytes."""
    return max_file_size // (1024 * 1024)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
