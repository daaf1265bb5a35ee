"""
Pytest configuration and fixtures for media gateway tests.
Provides AWS mocking, S3 fixtures with proper cleanup and gateway settings.
"""

import os

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "media-gateway")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "MediaGateway")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("S3_BUCKET", "uploads")
os.environ.setdefault("S3_PUBLIC_ENDPOINT", "https://s3.example.com")
os.environ.setdefault("IMGPROXY_BASE_URL", "https://img.example.com")
os.environ.setdefault("IMGPROXY_KEY", "00" * 32)
os.environ.setdefault("IMGPROXY_SALT", "11" * 32)

from collections.abc import Callable  # noqa: E402
from typing import Any  # noqa: E402

import boto3  # noqa: E402
import pytest  # noqa: E402
from botocore.exceptions import ClientError  # noqa: E402
from moto import mock_aws  # noqa: E402

from core.models.signing import SigningSecret  # noqa: E402
from core.utils.config import GatewaySettings, get_settings  # noqa: E402

TEST_KEY_HEX = "00" * 32
TEST_SALT_HEX = "11" * 32


@pytest.fixture(autouse=True)
def reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def signing_secret() -> SigningSecret:
    return SigningSecret.from_hex(TEST_KEY_HEX, TEST_SALT_HEX)


@pytest.fixture
def settings() -> GatewaySettings:
    """Explicit settings mirroring the test environment."""
    return GatewaySettings(
        aws_region=os.getenv("AWS_REGION"),
        s3_public_endpoint="https://s3.example.com",
        default_bucket="uploads",
        default_folder="files",
        imgproxy_base_url="https://img.example.com",
        imgproxy_key=TEST_KEY_HEX,
        imgproxy_salt=TEST_SALT_HEX,
        allowed_source_origins=("https://s3.example.com",),
        allowed_source_buckets=("uploads", "imgs"),
    )


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage the default upload bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (reused, moto cleans up on context exit)
    """
    bucket_name = os.getenv("S3_BUCKET")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        try:
            s3_client.create_bucket(Bucket=bucket_name)
        except ClientError as e:
            if e.response["Error"]["Code"] != "BucketAlreadyOwnedByYou":
                raise

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_put_object(s3_bucket) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        response = s3_put_object("files/a_1234abcd.png", image_bytes, "image/png")
    """

    def _put(
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ):
        return s3_bucket.put_object(
            Bucket=os.getenv("S3_BUCKET"),
            Key=key,
            Body=body,
            ContentType=content_type,
            Metadata=metadata or {},
        )

    return _put


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    import base64

    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """Sample binary JPEG data (minimal valid JPEG)."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xdb\x00C\x00\x08\x06\x06\x07\x06\x05\x08\x07\x07\x07\t\t\x08\n\x0c"
        b"\x14\r\x0c\x0b\x0b\x0c\x19\x12\x13\x0f\x14\x1d\x1a\x1f\x1e\x1d\x1a\x1c"
        b"\x1c $.' \",#\x1c\x1c(7),01444\x1f'9=82<.342\xff\xc0\x00\x0b\x08"
        b"\x00\x01\x00\x01\x01\x01\x11\x00\xff\xc4\x00\x14\x00\x01\x00\x00\x00"
        b"\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\t\xff\xc4\x00\x14\x10"
        b"\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00"
        b"\xff\xda\x00\x08\x01\x01\x00\x00?\x00\x7f\x00\xff\xd9"
    )


@pytest.fixture
def sample_pdf_binary() -> bytes:
    return b"%PDF-1.4\n%fake-pdf-body\n%%EOF"
