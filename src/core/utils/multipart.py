"""Parse multipart/form-data bodies delivered through API Gateway events."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any

from python_multipart.multipart import MultipartParser, parse_options_header

from core.models.errors import ValidationError


@dataclass
class FormFile:
    """A file part of a multipart form."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class FormData:
    """Decoded multipart form: plain fields and file parts by field name."""

    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, FormFile] = field(default_factory=dict)


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup on an API Gateway event."""
    headers = event.get("headers") or {}
    name = name.lower()

    for key, value in headers.items():
        if key.lower() == name:
            return value

    return None


def event_body_bytes(event: dict[str, Any]) -> bytes:
    """Return the raw request body, undoing API Gateway base64 encoding."""
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(message="Request body is not valid base64") from exc

    return body.encode("utf-8") if isinstance(body, str) else body


def parse_form_data(event: dict[str, Any]) -> FormData:
    """Parse a multipart/form-data API Gateway event.

    Raises:
        ValidationError: If the content type is not multipart/form-data,
            the boundary is missing, or the body is malformed.
    """
    content_type = get_header(event, "content-type")
    if not content_type:
        raise ValidationError(message="Content-Type header is required")

    media_type, params = parse_options_header(content_type)
    media_type = media_type.strip().lower()
    if media_type != b"multipart/form-data":
        raise ValidationError(
            message="Content-Type must be multipart/form-data",
            details={"content_type": media_type.decode("latin-1")},
        )

    boundary = params.get(b"boundary")
    if not boundary:
        raise ValidationError(message="Multipart boundary is missing")

    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks())

    try:
        parser.write(event_body_bytes(event))
        parser.finalize()
    except ValidationError:
        raise
    except Exception as exc:
        raise ValidationError(message="Invalid multipart formatting") from exc

    return collector.form


class _PartCollector:
    """Accumulates parser callbacks into a FormData."""

    def __init__(self) -> None:
        self.form = FormData()
        self._headers: dict[bytes, bytes] = {}
        self._header_field = b""
        self._header_value = b""
        self._data = bytearray()

    def callbacks(self) -> dict[str, Any]:
        return {
            "on_part_begin": self._on_part_begin,
            "on_part_data": self._on_part_data,
            "on_part_end": self._on_part_end,
            "on_header_field": self._on_header_field,
            "on_header_value": self._on_header_value,
            "on_header_end": self._on_header_end,
        }

    def _on_part_begin(self) -> None:
        self._headers = {}
        self._data = bytearray()

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._data.extend(data[start:end])

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def _on_part_end(self) -> None:
        disposition = self._headers.get(b"content-disposition", b"")
        _, options = parse_options_header(disposition)

        name = options.get(b"name")
        if not name:
            raise ValidationError(message="Multipart part is missing a field name")

        field_name = name.decode("utf-8", errors="replace")

        if b"filename" in options:
            part_type = self._headers.get(b"content-type", b"application/octet-stream")
            self.form.files[field_name] = FormFile(
                filename=options[b"filename"].decode("utf-8", errors="replace"),
                content_type=part_type.decode("latin-1").strip(),
                data=bytes(self._data),
            )
        else:
            self.form.fields[field_name] = self._data.decode("utf-8", errors="replace")
