"""
Lambda handler responsible for image download.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import (
    ContentStoreError,
    MetadataOperationFailedError,
    NotFoundError,
    ValidationError,
)
from core.utils.constants import CORS_ORIGIN, DOWNLOAD_CACHE_CONTROL, METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, require_method
from core.utils.events import event_json_body
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import DownloadImageRequest
from .service import DownloadService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@require_method("POST")
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image download requests.

    Expects a JSON body ``{"imageId": "..."}`` and answers with the raw
    image (base64 wrapped for API Gateway) as an attachment.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response dictionary.
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image download request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        body = event_json_body(event)
    except ValidationError as exc:
        return ResponseBuilder.bad_request(exc.message, error=exc.error_code, request_id=request_id)

    if not body.get("imageId"):
        return ResponseBuilder.bad_request("Missing imageId", request_id=request_id)

    is_valid, result = validate_request(DownloadImageRequest, body, request_id=request_id)
    if not is_valid:
        return result
    request: DownloadImageRequest = result

    service = DownloadService()

    try:
        image = service.download_image(request.image_id)

    except NotFoundError as exc:
        return ResponseBuilder.not_found(
            exc.message,
            error=exc.error_code,
            request_id=request_id,
        )

    except (ContentStoreError, MetadataOperationFailedError) as exc:
        logger.exception("Download failed", extra={"image_id": request.image_id})
        return ResponseBuilder.internal_error(
            exc.message,
            error="Download failed",
            request_id=request_id,
        )

    # Access event; best effort only
    logger.info(
        f"Image downloaded: {image.record.title} ({image.record.id})",
        extra={"image_id": image.record.id, "size": len(image.content)},
    )
    metrics.add_metric(name="ImageDownloaded", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.binary_response(
        image.content,
        content_type=image.content_type,
        headers={
            "Content-Disposition": image.content_disposition,
            "Cache-Control": DOWNLOAD_CACHE_CONTROL,
        },
        cors_origin=CORS_ORIGIN,
    )
