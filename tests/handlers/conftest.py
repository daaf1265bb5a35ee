import base64
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

BOUNDARY = "----gatewaytestboundary"


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


def build_multipart_body(
    fields: dict[str, str] | None = None,
    file: tuple[str, str, bytes] | None = None,
    *,
    boundary: str = BOUNDARY,
) -> bytes:
    """Encode form fields and an optional (filename, content_type, data) file part."""
    lines: list[bytes] = []

    for name, value in (fields or {}).items():
        lines.append(f"--{boundary}".encode())
        lines.append(f'Content-Disposition: form-data; name="{name}"'.encode())
        lines.append(b"")
        lines.append(value.encode("utf-8"))

    if file is not None:
        filename, content_type, data = file
        lines.append(f"--{boundary}".encode())
        lines.append(
            f'Content-Disposition: form-data; name="file"; filename="{filename}"'.encode()
        )
        lines.append(f"Content-Type: {content_type}".encode())
        lines.append(b"")
        lines.append(data)

    lines.append(f"--{boundary}--".encode())
    lines.append(b"")

    return b"\r\n".join(lines)


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway proxy event carrying a multipart upload.

    Usage:
        event = multipart_event(file=("a.png", "image/png", png_bytes), fields={"folder": "docs"})
    """

    def _build(
        *,
        file: tuple[str, str, bytes] | None = None,
        fields: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        body = build_multipart_body(fields, file)
        return {
            "httpMethod": "POST",
            "path": "/upload",
            "headers": {"Content-Type": f"multipart/form-data; boundary={BOUNDARY}"},
            "body": base64.b64encode(body).decode("ascii"),
            "isBase64Encoded": True,
        }

    return _build


@pytest.fixture
def get_file_event() -> dict[str, Any]:
    return {
        "httpMethod": "GET",
        "path": "/upload",
        "queryStringParameters": {"key": "files/photo_1234abcd.png"},
    }


@pytest.fixture
def transform_url_event() -> dict[str, Any]:
    return {
        "httpMethod": "GET",
        "path": "/imgproxy",
        "queryStringParameters": {
            "url": "https://s3.example.com/uploads/files/photo_1234abcd.jpg",
            "width": "300",
            "height": "200",
            "quality": "85",
            "format": "webp",
        },
    }
