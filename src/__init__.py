"""Signed Media Gateway Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless upload and signed image transformation gateway using AWS Lambda and S3"
)

__all__ = ["handlers", "core"]
