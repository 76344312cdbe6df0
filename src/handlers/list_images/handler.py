"""
Lambda handler responsible for returning the aggregate image list.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import ContentStoreError
from core.models.image import ListImagesResponse
from core.utils.constants import LIST_CACHE_CONTROL, METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, require_method
from core.utils.response import ResponseBuilder

from .service import ListService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@require_method("GET")
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle requests for the aggregate image list.

    Entries that fail to load individually are dropped; only a failure to
    list the metadata directory itself fails the request (500 with an
    empty image list).

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image list request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        result = ListService().list_images()
    except RuntimeError:
        logger.exception("Image store is not configured")
        return ResponseBuilder.internal_error(
            "Image store is not configured",
            error="Failed to fetch images",
            extra={"images": []},
            request_id=request_id,
        )
    except ContentStoreError as exc:
        logger.exception("Failed to list images", extra={"error_code": exc.error_code})
        return ResponseBuilder.internal_error(
            exc.message,
            error="Failed to fetch images",
            extra={"images": []},
            request_id=request_id,
        )

    if result.dropped:
        metrics.add_metric(name="MetadataEntriesDropped", unit=MetricUnit.Count, value=result.dropped)

    response = ListImagesResponse(count=len(result.images), images=result.images)

    return ResponseBuilder.ok(
        response.to_body(),
        cache_control=LIST_CACHE_CONTROL,
        request_id=request_id,
    )
