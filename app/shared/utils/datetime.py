"""
UTC datetime utilities for consistent timezone handling.

Every expiry comparison in the consent flows uses timezone-aware UTC
values produced or normalized here.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Injected as the default clock of the consent services; tests pass a
    fixed clock instead.
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive (SQLite returns naive values), assumes UTC
    - If aware, converts to UTC

    Use at repository boundaries when building entities from rows.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def require_utc(dt: datetime) -> datetime:
    """ensure_utc for non-nullable columns."""
    result = ensure_utc(dt)
    assert result is not None
    return result
