import json
from types import SimpleNamespace
from typing import Any

import pytest

from core.models.errors import (
    KeyAssignmentExhaustedError,
    NotFoundError,
    SignatureInvalidError,
    SigningUnavailableError,
    ValidationError,
)
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder

CONTEXT = SimpleNamespace(aws_request_id="req-deco")


def raising(exc: Exception):
    @api_gateway_handler
    def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
        raise exc

    return handler


def test_passes_through_success() -> None:
    @api_gateway_handler
    def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
        return ResponseBuilder.ok({"key": "files/a_1234abcd.png"})

    resp = handler({"httpMethod": "GET"}, CONTEXT)

    assert resp["statusCode"] == 200
    assert json.loads(resp["body"])["key"] == "files/a_1234abcd.png"


def test_options_preflight() -> None:
    resp = raising(RuntimeError("never called"))({"httpMethod": "OPTIONS"}, CONTEXT)

    assert resp["statusCode"] == 204


@pytest.mark.parametrize(
    "exc,status,code",
    [
        (ValidationError(message="bad"), 400, "VALIDATION_FAILED"),
        (NotFoundError(message="missing"), 404, "NOT_FOUND"),
        (SignatureInvalidError(message="forged"), 403, "SIGNATURE_INVALID"),
        (SigningUnavailableError(message="no secret"), 503, "SIGNING_UNAVAILABLE"),
        (KeyAssignmentExhaustedError(message="full"), 500, "KEY_ASSIGNMENT_EXHAUSTED"),
    ],
)
def test_maps_domain_errors(exc, status, code) -> None:
    resp = raising(exc)({}, CONTEXT)
    body = json.loads(resp["body"])

    assert resp["statusCode"] == status
    assert body["success"] is False
    assert body["code"] == code
    assert body["request_id"] == "req-deco"


@pytest.mark.parametrize(
    "exc,status",
    [
        (PermissionError("denied"), 403),
        (TimeoutError("slow"), 504),
        (ConnectionError("down"), 503),
        (RuntimeError("boom"), 500),
    ],
)
def test_maps_unexpected_errors(exc, status) -> None:
    resp = raising(exc)({}, CONTEXT)
    body = json.loads(resp["body"])

    assert resp["statusCode"] == status
    assert "boom" not in body["error"]
