"""
Date helpers shared by the filter, aggregation and export code.

Booking documents carry dates in whatever shape the writer produced: plain
"YYYY-MM-DD" strings, ISO timestamps, epoch milliseconds, datetimes or a
``{"seconds": ..., "nanoseconds": ...}`` timestamp map. Everything is
normalised to timezone-aware UTC datetimes; anything unparseable becomes None.
"""
from datetime import datetime, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_calendar_date(value: Any) -> Optional[datetime]:
    """
    Parse a slot date. Date-only strings are read as midnight UTC.
    """
    if isinstance(value, datetime):
        return _as_utc(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a creation timestamp (datetime, ISO string, epoch millis or a
    seconds/nanoseconds map).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if not isinstance(seconds, (int, float)) or isinstance(seconds, bool):
            return None
        nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
        try:
            return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
        except (OverflowError, OSError, ValueError, TypeError):
            return None
    return parse_calendar_date(value)


def month_key(value: datetime) -> str:
    return f"{value.year}-{value.month:02d}"
