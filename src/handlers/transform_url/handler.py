"""
Lambda handler returning signed image transformation URLs.
"""

from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import SigningUnavailableError, ValidationError
from core.utils.config import get_settings
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import TRANSFORMATION_PARAMS, TransformUrlRequest, TransformUrlResponse
from .service import TransformUrlService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


def _query_flag(value: str) -> bool | str:
    """Map 'true'/'1' and 'false'/'0' to booleans, leave anything else as is."""
    lowered = value.strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    return value


def _transformation_options(query_params: dict[str, str]) -> dict[str, Any]:
    options: dict[str, Any] = {}

    for name in TRANSFORMATION_PARAMS:
        value = query_params.get(name)
        if value is None or value == "":
            continue
        options[name] = _query_flag(value) if name == "enlarge" else value

    return options


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle transformation URL requests.

    Query parameters:
        url       (required) source image URL or bucket-relative key
        width, height, quality, format, resize, gravity, blur, sharpen, enlarge
        preset    (optional) 'thumbnail' or 'avatar', overrides the options above
        size      (optional) preset edge length
        srcset    (optional) 'true' to include a responsive srcset value

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response dictionary.
    """
    request_id = getattr(context, "aws_request_id", None)
    query_params = event.get("queryStringParameters") or {}

    logger.info(
        "Received transformation URL request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": query_params,
            "request_id": request_id,
        },
    )

    if not query_params.get("url"):
        return ResponseBuilder.bad_request("URL parameter required", request_id=request_id)

    is_valid, result = validate_request(
        TransformUrlRequest,
        {
            "url": query_params.get("url"),
            "preset": query_params.get("preset") or None,
            "size": query_params.get("size") or None,
            "srcset": query_params.get("srcset") or False,
            "options": _transformation_options(query_params),
        },
        request_id=request_id,
    )
    if not is_valid:
        return result  # type: ignore[return-value]

    request: TransformUrlRequest = result  # type: ignore[assignment]

    try:
        service = TransformUrlService(settings=get_settings())
        transformed, srcset = service.generate(
            source=request.url,
            options=request.options,
            preset=request.preset,
            size=request.size,
            include_srcset=request.srcset,
        )

    except ValidationError as exc:
        logger.info(
            "Transformation URL request rejected",
            extra={"error_code": exc.error_code},
        )
        return ResponseBuilder.from_exception(
            exc, status=HTTPStatus.BAD_REQUEST, request_id=request_id
        )

    except SigningUnavailableError as exc:
        logger.error("Transformation URL signing unavailable")
        return ResponseBuilder.from_exception(
            exc, status=HTTPStatus.SERVICE_UNAVAILABLE, request_id=request_id
        )

    metrics.add_metric(
        name="TransformUrlSigned" if transformed.signed else "TransformUrlUnsigned",
        unit=MetricUnit.Count,
        value=1,
    )

    response = TransformUrlResponse(
        original_url=request.url,
        optimized_url=transformed.url,
        signed=transformed.signed,
        parameters=transformed.spec.model_dump(exclude_none=True),
        source=service.describe(request.url),
        srcset=srcset,
    )

    return ResponseBuilder.ok(
        response.model_dump(by_alias=True, exclude_none=True), request_id=request_id
    )
