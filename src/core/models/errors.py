"""Custom exception classes for the media gateway."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_INVALID_TRANSFORMATION_PARAMETER,
    ERROR_CODE_KEY_ASSIGNMENT_EXHAUSTED,
    ERROR_CODE_KEY_COLLISION,
    ERROR_CODE_MALFORMED_SOURCE,
    ERROR_CODE_MALFORMED_TRANSFORMATION,
    ERROR_CODE_OBJECT_UPLOAD_FAILED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_SIGNATURE_INVALID,
    ERROR_CODE_SIGNING_UNAVAILABLE,
    ERROR_CODE_STORAGE,
    ERROR_CODE_UNSUPPORTED_MEDIA_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)


class MediaGatewayError(Exception):
    """
    Base exception for all media gateway errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


# ----------------------------------------------------------------------------
# Client errors
# ----------------------------------------------------------------------------


class ValidationError(MediaGatewayError):
    """Raised when request validation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class UnsupportedMediaTypeError(ValidationError):
    """Raised when a file extension or MIME type is not on the allow-list."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UNSUPPORTED_MEDIA_TYPE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class FileSizeError(ValidationError):
    """Raised when file size exceeds the allowed limit."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FILE_SIZE_EXCEEDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class InvalidTransformationParameterError(ValidationError):
    """Raised when a transformation parameter falls outside its domain."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVALID_TRANSFORMATION_PARAMETER,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(MediaGatewayError):
    """Raised when a requested object is not found."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


# ----------------------------------------------------------------------------
# Storage errors
# ----------------------------------------------------------------------------


class StorageError(MediaGatewayError):
    """Raised when a blob store operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ObjectUploadFailedError(StorageError):
    """Raised when writing an object to the blob store fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_OBJECT_UPLOAD_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class KeyCollisionError(StorageError):
    """Raised when a conditional write finds the key already taken."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_KEY_COLLISION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class KeyAssignmentExhaustedError(MediaGatewayError):
    """Raised when no free storage key was found within the retry bound."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_KEY_ASSIGNMENT_EXHAUSTED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


# ----------------------------------------------------------------------------
# Signing and verification errors
# ----------------------------------------------------------------------------


class SigningUnavailableError(MediaGatewayError):
    """Raised when a signed URL is required but no signing secret is loaded."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_SIGNING_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class VerificationError(MediaGatewayError):
    """Base class for rejected signed transformation requests."""


class SignatureInvalidError(VerificationError):
    """Raised when the supplied signature does not match the path."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_SIGNATURE_INVALID,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MalformedSourceError(VerificationError):
    """Raised when the encoded source cannot be decoded or is not allowed."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_MALFORMED_SOURCE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MalformedTransformationError(VerificationError):
    """Raised when processing tokens do not match the canonical grammar."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_MALFORMED_TRANSFORMATION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
