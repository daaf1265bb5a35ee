"""
Unit tests for core.models.errors
"""

import pytest

from core.models.errors import (
    FileSizeError,
    InvalidTransformationParameterError,
    KeyAssignmentExhaustedError,
    KeyCollisionError,
    MalformedSourceError,
    MalformedTransformationError,
    MediaGatewayError,
    NotFoundError,
    ObjectUploadFailedError,
    SignatureInvalidError,
    SigningUnavailableError,
    StorageError,
    UnsupportedMediaTypeError,
    ValidationError,
    VerificationError,
)


class TestMediaGatewayError:
    def test_base_error(self) -> None:
        err = MediaGatewayError(
            message="Something went wrong",
            error_code="TEST_ERROR",
            details={"foo": "bar"},
        )

        assert err.message == "Something went wrong"
        assert err.error_code == "TEST_ERROR"
        assert err.details == {"foo": "bar"}
        assert str(err) == "Something went wrong"

    def test_details_default_to_empty_dict(self) -> None:
        err = MediaGatewayError(message="x", error_code="X")

        assert err.details == {}


class TestValidationError:
    def test_validation_error_defaults(self) -> None:
        err = ValidationError(message="Invalid input")

        assert err.error_code == "VALIDATION_FAILED"
        assert err.details == {}
        assert str(err) == "Invalid input"

    def test_validation_error_with_details(self) -> None:
        err = ValidationError(message="Invalid value", details={"field": "folder"})

        assert err.details == {"field": "folder"}


@pytest.mark.parametrize(
    "error_cls,parent,code",
    [
        (UnsupportedMediaTypeError, ValidationError, "UNSUPPORTED_MEDIA_TYPE"),
        (FileSizeError, ValidationError, "FILE_SIZE_EXCEEDED"),
        (
            InvalidTransformationParameterError,
            ValidationError,
            "INVALID_TRANSFORMATION_PARAMETER",
        ),
        (NotFoundError, MediaGatewayError, "NOT_FOUND"),
        (StorageError, MediaGatewayError, "STORAGE_ERROR"),
        (ObjectUploadFailedError, StorageError, "OBJECT_UPLOAD_FAILED"),
        (KeyCollisionError, StorageError, "KEY_COLLISION"),
        (KeyAssignmentExhaustedError, MediaGatewayError, "KEY_ASSIGNMENT_EXHAUSTED"),
        (SigningUnavailableError, MediaGatewayError, "SIGNING_UNAVAILABLE"),
        (SignatureInvalidError, VerificationError, "SIGNATURE_INVALID"),
        (MalformedSourceError, VerificationError, "MALFORMED_SOURCE"),
        (MalformedTransformationError, VerificationError, "MALFORMED_TRANSFORMATION"),
    ],
)
def test_default_error_codes_and_hierarchy(error_cls, parent, code) -> None:
    err = error_cls(message="boom")

    assert isinstance(err, parent)
    assert isinstance(err, MediaGatewayError)
    assert err.error_code == code


def test_key_assignment_exhausted_is_not_a_client_error() -> None:
    err = KeyAssignmentExhaustedError(message="exhausted")

    assert not isinstance(err, ValidationError)
    assert not isinstance(err, StorageError)


def test_error_code_can_be_overridden() -> None:
    err = StorageError(message="x", error_code="CUSTOM")

    assert err.error_code == "CUSTOM"
