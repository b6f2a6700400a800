"""
Timestamp helpers.

All timestamps are timezone-aware UTC. They are persisted as fixed-width
ISO-8601 strings so that string order equals chronological order.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_utc(value).isoformat(timespec="microseconds")


def from_iso(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return ensure_utc(datetime.fromisoformat(value))


def day_key(value: datetime) -> str:
    """UTC calendar day of a timestamp (YYYY-MM-DD)."""
    return ensure_utc(value).date().isoformat()


def parse_day(value: Union[str, date]) -> date:
    """Accept a date, a datetime, a YYYY-MM-DD string or a full ISO timestamp."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.split("T")[0])
