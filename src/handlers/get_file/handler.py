"""
Lambda handler returning information about an uploaded file.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import NotFoundError, StorageError
from core.utils.config import get_settings
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GetFileRequest, GetFileResponse
from .service import GetFileService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle upload info requests.

    Query parameters:
        key     (required) object key returned by the upload endpoint
        bucket  (optional) bucket name, defaults to the configured bucket

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response dictionary.
    """
    request_id = getattr(context, "aws_request_id", None)
    query_params = event.get("queryStringParameters") or {}

    logger.info(
        "Received file info request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": query_params,
            "request_id": request_id,
        },
    )

    settings = get_settings()

    if not query_params.get("key"):
        return ResponseBuilder.bad_request("Key parameter required", request_id=request_id)

    is_valid, result = validate_request(
        GetFileRequest,
        {
            "key": query_params.get("key"),
            "bucket": query_params.get("bucket") or settings.default_bucket,
        },
        request_id=request_id,
    )
    if not is_valid:
        return result  # type: ignore[return-value]

    request: GetFileRequest = result  # type: ignore[assignment]

    try:
        metadata, url = GetFileService(settings=settings).get_file(
            bucket=request.bucket,
            key=request.key,
        )

    except NotFoundError:
        logger.info(
            "File not found",
            extra={"bucket": request.bucket, "key": request.key},
        )
        return ResponseBuilder.not_found("File not found", request_id=request_id)

    except StorageError as exc:
        logger.exception(
            "Get file info failed",
            extra={"bucket": request.bucket, "key": request.key},
        )
        return ResponseBuilder.internal_error(
            "Failed to get file information", error=exc.error_code, request_id=request_id
        )

    response = GetFileResponse(
        key=metadata.key,
        bucket=metadata.bucket,
        size=metadata.size,
        type=metadata.content_type,
        last_modified=metadata.created_at,
        original_name=metadata.original_filename,
        metadata=metadata.tags,
        url=url,
    )

    return ResponseBuilder.ok(response.model_dump(by_alias=True), request_id=request_id)
