"""
Time-related utilities for the application.

All timestamps are generated in UTC and serialized using
ISO-8601 format with timezone information so metadata
documents sort correctly as plain strings.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as an aware datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return utc_now().isoformat()


def epoch_millis(moment: datetime | None = None) -> int:
    """Return milliseconds since the Unix epoch for ``moment`` (default: now)."""
    moment = moment or utc_now()
    return int(moment.timestamp() * 1000)
