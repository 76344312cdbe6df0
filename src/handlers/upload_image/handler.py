"""
Lambda handler responsible for image upload and metadata creation.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import (
    ContentStoreError,
    FileSizeError,
    MetadataOperationFailedError,
    ValidationError,
)
from core.utils.constants import (
    IMAGE_FORM_FIELD,
    MAX_FILE_SIZE,
    MAX_FORM_OVERHEAD,
    METRICS_NAMESPACE,
    get_max_file_size_mb,
)
from core.utils.decorators import api_gateway_handler, require_method
from core.utils.events import event_body_bytes, get_header
from core.utils.multipart import parse_multipart
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import ImageUploadRequest, ImageUploadResponse
from .service import UploadService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@require_method("POST")
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    The handler splits the multipart body into named parts, validates the
    image part and the text fields before touching the store, then commits
    the image and its metadata entry.

    Expected API Gateway event structure:
    {
        "headers": {"Content-Type": "multipart/form-data; boundary=..."},
        "body": "<base64 multipart body>",
        "isBase64Encoded": true
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload form
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response containing the new image id
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        body = event_body_bytes(event)

        # Reject before parsing so an oversized body is never split into parts
        if len(body) > MAX_FILE_SIZE + MAX_FORM_OVERHEAD:
            raise FileSizeError(
                message=f"File is too large (max {get_max_file_size_mb()}MB)",
                details={"body_size": len(body)},
            )

        form = parse_multipart(body, get_header(event, "Content-Type"))

        if form.count_files(IMAGE_FORM_FIELD) > 1:
            raise ValidationError(message="Exactly one image must be provided")

        image = form.get_file(IMAGE_FORM_FIELD)
        UploadService.validate_image(image)

    except ValidationError as exc:
        logger.warning(
            "Upload rejected",
            extra={"error_code": exc.error_code, "reason": exc.message},
        )
        return ResponseBuilder.bad_request(
            exc.message,
            error=exc.error_code,
            details=exc.details,
            request_id=request_id,
        )

    is_valid, result = validate_request(ImageUploadRequest, form.fields, request_id=request_id)
    if not is_valid:
        logger.warning("Upload form validation failed")
        return result
    request: ImageUploadRequest = result

    service = UploadService()

    try:
        record = service.upload_image(request=request, image=image)

    except ValidationError as exc:
        logger.warning("Validation error during image upload", extra={"error_code": exc.error_code})
        return ResponseBuilder.bad_request(exc.message, error=exc.error_code, request_id=request_id)

    except MetadataOperationFailedError as exc:
        logger.exception("Image upload left an orphaned binary", extra=exc.details)
        return ResponseBuilder.internal_error(
            exc.message,
            error="Upload failed",
            request_id=request_id,
        )

    except ContentStoreError as exc:
        logger.exception("Infrastructure error during image upload")
        return ResponseBuilder.internal_error(
            exc.message,
            error="Upload failed",
            request_id=request_id,
        )

    metrics.add_metric(name="ImageUploaded", unit=MetricUnit.Count, value=1)

    response = ImageUploadResponse(image_id=record.id)
    return ResponseBuilder.ok(response.model_dump(by_alias=True), request_id=request_id)
