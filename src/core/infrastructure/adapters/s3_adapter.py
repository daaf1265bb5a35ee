"""Thin adapter for interacting with Amazon S3 (or an S3-compatible store)."""

from collections.abc import Mapping
from typing import Any, Protocol

import boto3
from botocore.config import Config

from core.utils.config import GatewaySettings, get_settings
from core.utils.constants import S3_CONNECT_TIMEOUT_SECONDS, S3_READ_TIMEOUT_SECONDS


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(self, **kwargs: Any) -> Any: ...

    def head_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        cache_control: str | None = None,
        if_none_match: bool = False,
    ) -> None: ...

    def head_object(self, *, bucket: str, key: str) -> Mapping[str, Any]: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, settings: GatewaySettings | None = None) -> None:
        """Create S3 client from gateway configuration."""
        settings = settings or get_settings()

        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=settings.aws_endpoint_url,
            region_name=settings.aws_region,
            config=Config(
                connect_timeout=S3_CONNECT_TIMEOUT_SECONDS,
                read_timeout=S3_READ_TIMEOUT_SECONDS,
                retries={"max_attempts": 2, "mode": "standard"},
                s3={"addressing_style": "path"},
            ),
        )

    def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        cache_control: str | None = None,
        if_none_match: bool = False,
    ) -> None:
        """Store object in S3.

        With `if_none_match` the write only succeeds when no object
        exists under the key yet (conditional put).
        Raises boto3 exceptions - caught by domain implementation.
        """
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
            "ContentLength": len(body),
            "Metadata": metadata,
        }
        if cache_control:
            params["CacheControl"] = cache_control
        if if_none_match:
            params["IfNoneMatch"] = "*"

        self._client.put_object(**params)

    def head_object(self, *, bucket: str, key: str) -> Mapping[str, Any]:
        """Fetch object headers from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.head_object(
            Bucket=bucket,
            Key=key,
        )
