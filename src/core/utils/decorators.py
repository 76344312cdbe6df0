"""
Common decorators for API Gateway Lambda handlers.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import (
    ContentStoreError,
    ImageServiceError,
    NotFoundError,
    ValidationError,
)
from core.utils.constants import ERROR_CODE_INTERNAL_ERROR
from core.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", utc=True)

JsonDict = dict[str, Any]
Handler = Callable[..., JsonDict]

# Domain errors first; order matters because subclasses share bases
_DOMAIN_STATUS: tuple[tuple[type[ImageServiceError], HTTPStatus], ...] = (
    (ValidationError, HTTPStatus.BAD_REQUEST),
    (NotFoundError, HTTPStatus.NOT_FOUND),
    (ContentStoreError, HTTPStatus.INTERNAL_SERVER_ERROR),
)

_GENERIC_STATUS: tuple[tuple[tuple[type[Exception], ...], HTTPStatus, str], ...] = (
    (
        (ValueError, KeyError, TypeError, AttributeError),
        HTTPStatus.BAD_REQUEST,
        "The request could not be understood. Please check the fields and try again.",
    ),
    (
        (PermissionError,),
        HTTPStatus.FORBIDDEN,
        "You don't have permission to perform this action.",
    ),
    (
        (TimeoutError,),
        HTTPStatus.GATEWAY_TIMEOUT,
        "The image store took too long to respond. Please try again.",
    ),
)

_FALLBACK_MESSAGE = "We're experiencing technical difficulties. Please try again in a few moments."

# Messages starting with these are written for callers and are passed through
_CALLER_FACING_PREFIXES = ("Invalid", "Missing", "Image", "File", "Unable to", "Failed to")


def _public_message(exc: Exception, default: str) -> str:
    text = str(exc)
    if text.startswith(_CALLER_FACING_PREFIXES):
        return text
    return default


def _log_failure(exc: Exception, *, handler_name: str, request_id: str | None, status: HTTPStatus) -> None:
    """Server errors are logged with the traceback attached, client errors as warnings."""
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "status": status.value,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.exception("Handler failed", extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning("Handler rejected request", extra=log_extra)


def _domain_error_response(
    exc: ImageServiceError,
    *,
    request_id: str | None,
    cors_origin: str | None,
) -> tuple[HTTPStatus, JsonDict]:
    status = next(
        (status for error_cls, status in _DOMAIN_STATUS if isinstance(exc, error_cls)),
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )
    response = ResponseBuilder.error(
        status=status,
        message=exc.message,
        error=exc.error_code,
        details=exc.details if status == HTTPStatus.BAD_REQUEST else None,
        request_id=request_id,
        cors_origin=cors_origin,
    )
    return status, response


def _generic_error_response(
    exc: Exception,
    *,
    request_id: str | None,
    cors_origin: str | None,
) -> tuple[HTTPStatus, JsonDict]:
    for error_types, status, default in _GENERIC_STATUS:
        if isinstance(exc, error_types):
            return status, ResponseBuilder.error(
                status=status,
                message=_public_message(exc, default),
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return HTTPStatus.INTERNAL_SERVER_ERROR, ResponseBuilder.internal_error(
        _FALLBACK_MESSAGE,
        error=ERROR_CODE_INTERNAL_ERROR,
        request_id=request_id,
        cors_origin=cors_origin,
    )


def require_method(*methods: str) -> Callable[[Handler], Handler]:
    """
    Reject requests whose HTTP method is not one of ``methods`` with 405.

    Events without an ``httpMethod`` (direct invocations) pass through.
    """
    allowed = ",".join(methods)

    def decorator(func: Handler) -> Handler:
        @wraps(func)
        def wrapper(event: Any, context: Any) -> JsonDict:
            method = (event or {}).get("httpMethod")
            if method and method.upper() not in methods:
                logger.warning(
                    "Rejected request with unsupported method",
                    extra={"http_method": method, "allowed": allowed},
                )
                return ResponseBuilder.method_not_allowed(
                    allowed,
                    request_id=getattr(context, "aws_request_id", None),
                )
            return func(event, context)

        return wrapper

    return decorator


def api_gateway_handler(func: Handler) -> Handler:
    """
    Decorator for API Gateway Lambda handlers.

    Provides:
    - CORS preflight (OPTIONS) answered with 204
    - Domain errors mapped to 400/404/500 with their error code
    - Anything else mapped to a friendly 4xx/5xx, never a raw traceback

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok({"success": True})
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if (event or {}).get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)

        except ImageServiceError as exc:
            status, response = _domain_error_response(exc, request_id=request_id, cors_origin=cors_origin)
            _log_failure(exc, handler_name=func.__name__, request_id=request_id, status=status)
            return response

        except Exception as exc:
            status, response = _generic_error_response(exc, request_id=request_id, cors_origin=cors_origin)
            _log_failure(exc, handler_name=func.__name__, request_id=request_id, status=status)
            return response

    return wrapper
