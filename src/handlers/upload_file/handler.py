"""
Lambda handler responsible for multipart file uploads.
"""

from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import (
    KeyAssignmentExhaustedError,
    StorageError,
    ValidationError,
)
from core.utils.config import get_settings
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.multipart import parse_form_data
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import FileUploadRequest, FileUploadResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle multipart file upload requests.

    Expected form fields:
        file    (required) the uploaded file part
        bucket  (optional) target bucket, defaults to the configured bucket
        folder  (optional) target folder, defaults to the configured folder

    Args:
        event: API Gateway Lambda proxy event with a multipart body
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response describing the stored object
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received file upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    settings = get_settings()

    try:
        form = parse_form_data(event)
    except ValidationError as exc:
        logger.warning("Invalid multipart body", extra={"error": exc.message})
        return ResponseBuilder.from_exception(
            exc, status=HTTPStatus.BAD_REQUEST, request_id=request_id
        )

    upload = form.files.get("file")
    if upload is None:
        return ResponseBuilder.bad_request("No file provided", request_id=request_id)

    is_valid, result = validate_request(
        FileUploadRequest,
        {
            "filename": upload.filename,
            "content_type": upload.content_type,
            "bucket": form.fields.get("bucket") or settings.default_bucket,
            "folder": form.fields.get("folder") or settings.default_folder,
        },
        request_id=request_id,
    )
    if not is_valid:
        logger.warning("Upload request validation failed")
        return result  # type: ignore[return-value]

    request: FileUploadRequest = result  # type: ignore[assignment]

    try:
        service = UploadService(settings=settings)
        storage_key, stored = service.upload(
            filename=request.filename,
            content_type=request.content_type,
            file_data=upload.data,
            bucket=request.bucket,
            folder=request.folder,
        )

    except ValidationError as exc:
        logger.warning(
            "Upload rejected",
            extra={"bucket": request.bucket, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_exception(
            exc, status=HTTPStatus.BAD_REQUEST, request_id=request_id
        )

    except KeyAssignmentExhaustedError as exc:
        logger.exception(
            "Key assignment exhausted, operator attention required",
            extra={"bucket": request.bucket, "folder": request.folder},
        )
        return ResponseBuilder.internal_error(
            exc.message, error=exc.error_code, request_id=request_id
        )

    except StorageError as exc:
        logger.exception(
            "Infrastructure error during upload",
            extra={"bucket": request.bucket},
        )
        return ResponseBuilder.internal_error(
            exc.message, error=exc.error_code, request_id=request_id
        )

    metrics.add_metric(name="UploadSucceeded", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name="UploadBytes", unit=MetricUnit.Bytes, value=stored.size)

    response = FileUploadResponse(
        key=storage_key.key,
        url=settings.object_url(request.bucket, storage_key.key),
        bucket=request.bucket,
        folder=storage_key.folder,
        size=stored.size,
        type=stored.content_type,
        filename=storage_key.filename,
        original_name=request.filename,
    )

    return ResponseBuilder.ok(response.model_dump(by_alias=True), request_id=request_id)
