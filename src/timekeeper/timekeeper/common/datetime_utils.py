from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator

from ..core.exceptions import ValidationError


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid {field_name} (expected YYYY-MM-DD)")


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a time of day."""
    v = (value or "").strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time of day: {value!r}")


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def week_start(day: date) -> date:
    """Sunday opening the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def range_cutoff(end: date, now: datetime) -> datetime:
    """Instant open sessions are measured to for a range ending on ``end``.

    ``now`` while the range is still running, otherwise midnight after ``end``.
    """
    closing = datetime.combine(end + timedelta(days=1), time.min, tzinfo=now.tzinfo)
    return min(now, closing)
