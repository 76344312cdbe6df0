"""Helpers for reading API Gateway proxy events."""

import base64
import binascii
import json
from typing import Any

from core.models.errors import ValidationError


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Return a request header value, matching the name case-insensitively."""
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def event_body_bytes(event: dict[str, Any]) -> bytes:
    """Return the raw request body, undoing API Gateway's base64 wrapping."""
    body = event.get("body") or ""

    if isinstance(body, bytes):
        return body

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(
                message="Invalid base64 encoded request body",
                details={"encoding": "base64"},
            ) from exc

    return body.encode("utf-8")


def event_json_body(event: dict[str, Any]) -> dict[str, Any]:
    """Parse the request body as a JSON object."""
    raw = event_body_bytes(event)
    if not raw.strip():
        return {}

    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError(message="Invalid JSON body") from exc

    if not isinstance(payload, dict):
        raise ValidationError(message="Invalid JSON body: expected an object")

    return payload
