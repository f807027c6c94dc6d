"""
Logical day clock
The GitPoor day starts at 05:00 KST (UTC+4 applied to UTC instants), not at midnight.

Every "which day is this" question in the engine (event filtering, commit
bucketing, streak comparison) goes through logical_day(); nothing else may
compute a day from a timestamp.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

from gitpoor.core.config import settings

Instant = Union[datetime, str]


def parse_instant(value: Instant) -> datetime:
    """
    Normalize an instant to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC) and ISO-8601 strings,
    including GitHub's trailing "Z".
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def logical_day(instant: Instant, offset_hours: Optional[int] = None) -> date:
    """
    Map an instant to its GitPoor calendar day.

    Args:
        instant: Any instant (datetime or ISO string)
        offset_hours: Override of settings.day_boundary_offset_hours (tests)

    Returns:
        Calendar date of (instant in UTC + offset)

    Example:
        2026-01-28T19:59:59Z -> 2026-01-28
        2026-01-28T20:00:00Z -> 2026-01-29   (05:00 KST)
    """
    if offset_hours is None:
        offset_hours = settings.day_boundary_offset_hours
    return (parse_instant(instant) + timedelta(hours=offset_hours)).date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def today(now: Optional[datetime] = None) -> date:
    """Logical day of `now` (defaults to the current instant)."""
    return logical_day(now or utc_now())


def previous_day(day: date) -> date:
    return day - timedelta(days=1)
