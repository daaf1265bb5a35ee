import base64

import pytest

from core.models.errors import ValidationError
from core.utils.multipart import event_body_bytes, get_header, parse_form_data

BOUNDARY = "----unitboundary"


def multipart_body(parts: list[tuple[str, str | None, str | None, bytes]]) -> bytes:
    """Encode (name, filename, content_type, data) parts."""
    chunks: list[bytes] = []

    for name, filename, content_type, data in parts:
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'

        chunks.append(f"--{BOUNDARY}\r\n".encode())
        chunks.append(f"Content-Disposition: {disposition}\r\n".encode())
        if content_type:
            chunks.append(f"Content-Type: {content_type}\r\n".encode())
        chunks.append(b"\r\n" + data + b"\r\n")

    chunks.append(f"--{BOUNDARY}--\r\n".encode())
    return b"".join(chunks)


def event_for(body: bytes, content_type: str | None = None, *, encoded: bool = True) -> dict:
    return {
        "headers": {
            "content-type": content_type or f"multipart/form-data; boundary={BOUNDARY}"
        },
        "body": base64.b64encode(body).decode() if encoded else body.decode("latin-1"),
        "isBase64Encoded": encoded,
    }


class TestParseFormData:
    def test_parses_fields_and_file(self, sample_image_binary) -> None:
        body = multipart_body(
            [
                ("folder", None, None, b"docs"),
                ("file", "photo.png", "image/png", sample_image_binary),
            ]
        )

        form = parse_form_data(event_for(body))

        assert form.fields == {"folder": "docs"}
        upload = form.files["file"]
        assert upload.filename == "photo.png"
        assert upload.content_type == "image/png"
        assert upload.data == sample_image_binary
        assert upload.size == len(sample_image_binary)

    def test_file_without_content_type_defaults_to_octet_stream(self) -> None:
        body = multipart_body([("file", "notes.txt", None, b"hello")])

        form = parse_form_data(event_for(body))

        assert form.files["file"].content_type == "application/octet-stream"

    def test_plain_text_body(self) -> None:
        body = multipart_body([("bucket", None, None, b"uploads")])

        form = parse_form_data(event_for(body, encoded=False))

        assert form.fields["bucket"] == "uploads"

    def test_content_type_is_case_insensitive(self) -> None:
        body = multipart_body([("bucket", None, None, b"uploads")])

        form = parse_form_data(
            event_for(body, f"Multipart/Form-Data; boundary={BOUNDARY}")
        )

        assert form.fields["bucket"] == "uploads"

    def test_missing_content_type(self) -> None:
        with pytest.raises(ValidationError):
            parse_form_data({"headers": {}, "body": ""})

    def test_rejects_non_multipart(self) -> None:
        with pytest.raises(ValidationError) as exc:
            parse_form_data(event_for(b"{}", "application/json"))

        assert exc.value.details["content_type"] == "application/json"

    def test_missing_boundary(self) -> None:
        with pytest.raises(ValidationError):
            parse_form_data(event_for(b"", "multipart/form-data"))

    def test_part_without_name(self) -> None:
        body = (
            f"--{BOUNDARY}\r\nContent-Disposition: form-data\r\n\r\nx\r\n--{BOUNDARY}--\r\n"
        ).encode()

        with pytest.raises(ValidationError):
            parse_form_data(event_for(body))


class TestEventBodyBytes:
    def test_invalid_base64(self) -> None:
        with pytest.raises(ValidationError):
            event_body_bytes({"body": "!!!not-base64!!!", "isBase64Encoded": True})

    def test_empty_body(self) -> None:
        assert event_body_bytes({}) == b""


def test_get_header_is_case_insensitive() -> None:
    event = {"headers": {"X-Custom": "1"}}

    assert get_header(event, "x-custom") == "1"
    assert get_header(event, "missing") is None
    assert get_header({"headers": None}, "x-custom") is None
