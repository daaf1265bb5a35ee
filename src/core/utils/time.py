"""
Time-related utilities for the application.

All timestamps are produced in UTC and serialized as ISO-8601 strings
with timezone information, both for object metadata written at upload
time and for timestamps read back from the blob store.
"""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return datetime.now(timezone.utc).isoformat()


def to_utc_iso(value: datetime | str | None) -> str | None:
    """Normalize a timestamp returned by the blob store to ISO-8601 UTC.

    Naive datetimes are assumed to already be in UTC. Strings are passed
    through untouched since S3 user metadata is stored as text.
    """
    if value is None:
        return None

    if isinstance(value, str):
        return value

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    return value.astimezone(timezone.utc).isoformat()
