"""Request validation helpers shared by the handlers."""

from typing import Any, TypeVar

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ValidationError

from core.utils.response import ResponseBuilder

logger = Logger(utc=True)

ModelT = TypeVar("ModelT", bound=BaseModel)

# pydantic error type -> message shown to API callers
_MESSAGES_BY_TYPE: dict[str, str] = {
    "missing": "This field is required",
    "string_type": "Must be text",
    "list_type": "Must be a list",
    "string_pattern_mismatch": "Contains characters that are not allowed",
}


def describe_error(error: dict[str, Any]) -> dict[str, str]:
    """Reduce one pydantic error to ``{field, message}``.

    Field names are the wire names (``aiTool``, ``imageId``); the raw input
    and pydantic's internal context never leave this function.
    """
    field = ".".join(str(part) for part in error.get("loc", ())) or "body"
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind in _MESSAGES_BY_TYPE:
        message = _MESSAGES_BY_TYPE[kind]
    elif kind == "string_too_short":
        min_length = ctx.get("min_length", 1)
        message = "Must not be empty" if min_length == 1 else f"Must be at least {min_length} characters"
    elif kind == "string_too_long":
        message = f"Must be at most {ctx.get('max_length')} characters"
    elif kind == "value_error" and ctx.get("error") is not None:
        # Raised by our own validators, already phrased for callers
        message = str(ctx["error"])
    else:
        message = str(error.get("msg") or "Invalid value")

    return {"field": field, "message": message}


def field_errors(exc: ValidationError) -> list[dict[str, str]]:
    return [describe_error(dict(error)) for error in exc.errors()]


def validate_request(
    model: type[ModelT],
    data: dict[str, Any],
    *,
    request_id: str | None = None,
    cors_origin: str | None = None,
) -> tuple[bool, ModelT | dict[str, Any]]:
    """Validate ``data`` against ``model``.

    Returns:
        ``(True, instance)`` when the payload is valid, otherwise
        ``(False, response)`` where ``response`` is a ready 400 listing
        every offending field.
    """
    try:
        return True, model.model_validate(data)

    except ValidationError as exc:
        details = field_errors(exc)
        logger.info(
            "Request payload rejected",
            extra={"model": model.__name__, "fields": [d["field"] for d in details]},
        )
        return False, ResponseBuilder.validation_error(
            message="Invalid request payload",
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )
