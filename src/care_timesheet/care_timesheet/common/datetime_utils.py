from __future__ import annotations

import re
from datetime import date, datetime, time

from ..core.exceptions import ValidationError

_CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

END_OF_DAY = time(23, 59, 59, 999000)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def require_iso_date(value, field_name: str) -> date:
    """Like parse_iso_date, but raises ValidationError and accepts date objects as-is."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    v = (value or "").strip() if isinstance(value, str) else ""
    if not v:
        raise ValidationError(f"{field_name} is required")
    try:
        # tolerate full ISO timestamps such as 2025-03-18T00:00:00.000Z
        return parse_iso_date(v[:10])
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def parse_clock_time(value, field_name: str) -> time:
    """Parse a 24-hour HH:MM clock time."""
    if isinstance(value, time):
        return value
    v = (value or "").strip() if isinstance(value, str) else ""
    if not _CLOCK_RE.match(v):
        raise ValidationError(f"{v or field_name} is not a valid time format (HH:MM)")
    return datetime.strptime(v, "%H:%M").time()


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, END_OF_DAY)


def as_date(value: date | datetime) -> date:
    """Normalize a date or datetime to its local calendar date (midnight)."""
    return value.date() if isinstance(value, datetime) else value


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
