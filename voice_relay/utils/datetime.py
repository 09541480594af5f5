"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

from datetime import datetime, timezone


def now_in_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def to_iso_timestamp(value: datetime) -> str:
    """Render ``value`` as an ISO-8601 UTC string with millisecond precision.

    Naive datetimes are assumed to already be expressed in UTC.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["now_in_utc", "to_iso_timestamp"]
