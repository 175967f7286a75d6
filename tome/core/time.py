"""Time-related helpers.

Revision timestamps are always written through :func:`utc_now` so that every
stored value is UTC.  SQLite drops timezone information on the way back, so
:func:`as_utc` is used when reading timestamps out of storage.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as an aware ``datetime`` instance."""

    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Return *value* as an aware UTC datetime, treating naive values as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_z(value: datetime | None) -> str | None:
    """Return *value* in ISO 8601 format ending with ``Z``."""

    normalized = as_utc(value)
    if normalized is None:
        return None
    return normalized.isoformat().replace("+00:00", "Z")
