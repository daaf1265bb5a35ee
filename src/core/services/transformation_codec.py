"""Signed transformation URL codec.

URLs have the imgproxy-compatible shape::

    <base_url>/<signature>/<token>/<token>/.../<base64url(source)>

where ``signature = base64url(HMAC-SHA256(key, salt || path))`` and
``path`` is everything after the signature, leading slash included.
All base64 here is the URL-safe alphabet without padding.
"""

import base64
import binascii
import hashlib
import hmac
import re
from typing import Any
from urllib.parse import urlsplit

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict

from core.models.errors import (
    MalformedSourceError,
    MalformedTransformationError,
    SignatureInvalidError,
    SigningUnavailableError,
    ValidationError,
    VerificationError,
)
from core.models.signing import SigningSecret
from core.models.transformation import TransformationSpec
from core.utils.config import GatewaySettings, get_settings
from core.utils.constants import DEFAULT_MAX_DIMENSION, TOKEN_SEPARATOR

logger = Logger(UTC=True)

_BASE64URL = re.compile(r"^[A-Za-z0-9_-]+$")


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    """Strict inverse of b64url_encode.

    Raises:
        ValueError: If the value contains characters outside the
            URL-safe alphabet or has an impossible length.
    """
    if not _BASE64URL.match(value):
        raise ValueError("Value is not URL-safe base64")

    padded = value + "=" * (-len(value) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii"))
    except binascii.Error as exc:
        raise ValueError("Value is not URL-safe base64") from exc


def encode_source(source: str) -> str:
    """Encode a source reference for use as the final path segment."""
    return b64url_encode(source.encode("utf-8"))


def decode_source(encoded: str) -> str:
    """Decode a source reference produced by encode_source.

    Raises:
        ValueError: If the segment is not valid base64url or not UTF-8.
    """
    return b64url_decode(encoded).decode("utf-8")


def compute_signature(secret: SigningSecret, path: str) -> str:
    """base64url(HMAC-SHA256(key, salt || path))."""
    mac = hmac.new(secret.key_bytes(), digestmod=hashlib.sha256)
    mac.update(secret.salt_bytes())
    mac.update(path.encode("utf-8"))
    return b64url_encode(mac.digest())


class TransformationURL(BaseModel):
    """Result of building a transformation URL.

    ``signed`` is False for an unsigned passthrough, in which case ``url``
    is the untouched source reference.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    source: str
    signed: bool
    spec: TransformationSpec
    path: str | None = None

    def require_signed(self) -> "TransformationURL":
        """Return self, or raise if this URL is an unsigned passthrough."""
        if not self.signed:
            raise SigningUnavailableError(
                message="Signed transformation URL required but signing is not configured",
            )
        return self


class VerifiedRequest(BaseModel):
    """A signed request that passed verification."""

    model_config = ConfigDict(frozen=True)

    source: str
    spec: TransformationSpec


class TransformationCodec:
    """Builds and verifies signed transformation URLs.

    Stateless apart from the immutable signing secret, so one instance
    can be shared freely across concurrent requests.
    """

    def __init__(
        self,
        *,
        secret: SigningSecret | None,
        base_url: str | None,
        s3_endpoint: str | None = None,
        allow_unsigned: bool = False,
        max_dimension: int = DEFAULT_MAX_DIMENSION,
        allowed_origins: tuple[str, ...] = (),
        allowed_buckets: tuple[str, ...] = (),
    ) -> None:
        self._secret = secret
        self._base_url = base_url.rstrip("/") if base_url else None
        self._s3_endpoint = s3_endpoint.rstrip("/") if s3_endpoint else None
        self._allow_unsigned = allow_unsigned
        self._max_dimension = max_dimension
        self._allowed_origins = frozenset(origin.rstrip("/").lower() for origin in allowed_origins)
        self._allowed_buckets = frozenset(allowed_buckets)

    @classmethod
    def from_settings(cls, settings: GatewaySettings | None = None) -> "TransformationCodec":
        settings = settings or get_settings()
        return cls(
            secret=settings.signing_secret,
            base_url=settings.imgproxy_base_url,
            s3_endpoint=settings.s3_public_endpoint,
            allow_unsigned=settings.allow_unsigned_urls,
            max_dimension=settings.max_dimension,
            allowed_origins=settings.allowed_source_origins,
            allowed_buckets=settings.allowed_source_buckets,
        )

    @property
    def signing_available(self) -> bool:
        return self._secret is not None and self._base_url is not None

    @property
    def max_dimension(self) -> int:
        return self._max_dimension

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def resolve_source(self, source: str) -> str:
        """Expand a bucket-relative key into an absolute object URL.

        Absolute http(s) URLs and root-relative paths are used as given.
        """
        if source.startswith("http") or source.startswith("/") or not self._s3_endpoint:
            return source
        return f"{self._s3_endpoint}/{source}"

    def build_path(self, source: str, spec: TransformationSpec) -> str:
        """Assemble '/<tokens>/<encoded source>' for an already resolved source."""
        return f"/{spec.canonical()}{TOKEN_SEPARATOR}{encode_source(source)}"

    def build_url(
        self,
        source: str,
        options: TransformationSpec | dict[str, Any] | None = None,
    ) -> TransformationURL:
        """Build a signed transformation URL for a source reference.

        Parameters are validated before anything is signed.

        Raises:
            ValidationError: If the source is empty
            InvalidTransformationParameterError: If any parameter is out of domain
            SigningUnavailableError: If signing is not configured and the
                unsigned passthrough mode is disabled
        """
        if not source or not source.strip():
            raise ValidationError(message="Source reference must not be empty")

        spec = (
            options
            if isinstance(options, TransformationSpec)
            else TransformationSpec.from_options(options, max_dimension=self._max_dimension)
        )

        if self._secret is None or self._base_url is None:
            if not self._allow_unsigned:
                raise SigningUnavailableError(
                    message="Transformation URL signing is not configured",
                )

            logger.warning(
                "Signing not configured, returning unsigned source URL",
                extra={"mode": "unsigned_passthrough"},
            )
            return TransformationURL(url=source, source=source, signed=False, spec=spec)

        path = self.build_path(self.resolve_source(source), spec)
        signature = compute_signature(self._secret, path)

        return TransformationURL(
            url=f"{self._base_url}/{signature}{path}",
            source=source,
            signed=True,
            spec=spec,
            path=path,
        )

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def verify(self, signed_path: str) -> VerifiedRequest:
        """Verify an inbound '/<signature>/<tokens>/<encoded source>' path.

        A full URL is accepted as well; only its path is used.

        Raises:
            SigningUnavailableError: If no secret is loaded
            SignatureInvalidError: If the signature does not match
            MalformedSourceError: If the source is undecodable or not allowed
            MalformedTransformationError: If the tokens break the grammar
        """
        if self._secret is None:
            raise SigningUnavailableError(
                message="Cannot verify signed requests without a signing secret",
            )

        try:
            return self._verify(self._secret, self._strip_base(signed_path))
        except VerificationError as exc:
            logger.warning(
                "Signed transformation request rejected",
                extra={"reason": exc.error_code, "detail": exc.message},
            )
            raise

    def _verify(self, secret: SigningSecret, path: str) -> VerifiedRequest:
        if not path.startswith("/"):
            raise MalformedTransformationError(message="Signed path must start with '/'")

        parts = path[1:].split(TOKEN_SEPARATOR)
        if len(parts) < 3 or not all(parts):
            raise MalformedTransformationError(
                message="Signed path must contain a signature, processing tokens and a source",
            )

        supplied = parts[0]
        signed_part = "/" + TOKEN_SEPARATOR.join(parts[1:])
        expected = compute_signature(secret, signed_part)

        if not hmac.compare_digest(expected.encode("ascii"), supplied.encode("utf-8")):
            raise SignatureInvalidError(message="Signature does not match")

        try:
            source = decode_source(parts[-1])
        except ValueError as exc:
            raise MalformedSourceError(message="Source reference cannot be decoded") from exc

        if not self.is_allowed_source(source):
            raise MalformedSourceError(
                message="Source reference is not an allowed origin",
                details={"source": source},
            )

        try:
            spec = TransformationSpec.parse_tokens(
                parts[1:-1], max_dimension=self._max_dimension
            )
        except ValueError as exc:
            raise MalformedTransformationError(message=str(exc)) from exc

        return VerifiedRequest(source=source, spec=spec)

    def is_allowed_source(self, source: str) -> bool:
        """Check a decoded source against the origin and bucket allow-lists."""
        parts = urlsplit(source)

        if parts.scheme:
            if parts.scheme not in ("http", "https") or not parts.netloc:
                return False
            origin = f"{parts.scheme}://{parts.netloc}".lower()
            if origin not in self._allowed_origins:
                return False
            path = parts.path
            if not self._allowed_buckets:
                return ".." not in path.split("/")
        else:
            path = source

        segments = path.lstrip("/").split("/")
        if ".." in segments:
            return False

        return segments[0] in self._allowed_buckets

    def _strip_base(self, signed_path: str) -> str:
        path = urlsplit(signed_path).path if "://" in signed_path else signed_path

        if self._base_url:
            prefix = urlsplit(self._base_url).path.rstrip("/")
            if prefix and path.startswith(prefix + "/"):
                path = path[len(prefix):]

        return path
