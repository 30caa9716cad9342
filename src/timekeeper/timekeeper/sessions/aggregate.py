from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..common.datetime_utils import iter_days, week_start
from ..core.constants import DEFAULT_LATE_THRESHOLD
from ..core.enums import DayStatus
from .model import DaySummary, RangeSummary, Session, WeekSummary
from .reconstruct import group_by_day

Number = Union[int, float, Decimal, str]

_CENTS = Decimal("0.01")


def summarize_day(
    sessions: Iterable[Session],
    *,
    day: Optional[date] = None,
    late_threshold: time = DEFAULT_LATE_THRESHOLD,
    arrived_at: Optional[datetime] = None,
) -> DaySummary:
    """Summarize the sessions that start on ``day``.

    Without ``day`` the sessions are assumed to already belong to one day,
    the one the earliest session starts on. ``arrived_at`` is the day's
    earliest raw clock-in; it decides lateness when a later clock-in
    replaced it.
    """

    items = sorted(sessions, key=lambda s: s.start)
    if day is None and items:
        day = items[0].start.date()
    if day is not None:
        items = [s for s in items if s.start.date() == day]

    if not items:
        return DaySummary(date=day)

    first = min(arrived_at, items[0].start) if arrived_at is not None else items[0].start
    return DaySummary(
        date=day,
        sessions=tuple(items),
        total_duration_seconds=sum(s.duration_seconds for s in items),
        status=DayStatus.PRESENT,
        is_late=first.time() >= late_threshold,
        arrived_at=first,
    )


def summarize_days(
    sessions: Iterable[Session],
    *,
    start: date,
    end: date,
    late_threshold: time = DEFAULT_LATE_THRESHOLD,
    arrivals: Optional[Mapping[date, datetime]] = None,
) -> list[DaySummary]:
    """One summary per calendar day of ``[start, end]``, absent days included."""
    by_day = group_by_day(sessions)
    arrivals = arrivals or {}
    return [
        summarize_day(by_day.get(d, ()), day=d, late_threshold=late_threshold, arrived_at=arrivals.get(d))
        for d in iter_days(start, end)
    ]


def compute_pay(total_seconds: float, hourly_rate: Number) -> Decimal:
    """Hours times rate, rounded half-up to cents once at the end."""
    hours = Decimal(str(total_seconds)) / Decimal(3600)
    return (hours * Decimal(str(hourly_rate))).quantize(_CENTS, rounding=ROUND_HALF_UP)


def summarize_range(days: Sequence[DaySummary], *, hourly_rate: Optional[Number] = None) -> RangeSummary:
    """Totals over a run of days.

    A working day is a day with positive paired duration. This differs from
    ``status == present``: a day holding only zero-length sessions is present
    but does not count as worked.
    """

    total = sum(d.total_duration_seconds for d in days)
    return RangeSummary(
        days=tuple(days),
        total_duration_seconds=total,
        working_days_count=sum(1 for d in days if d.total_duration_seconds > 0),
        total_pay=compute_pay(total, hourly_rate) if hourly_rate is not None else None,
    )


def summarize_weeks(
    sessions: Iterable[Session],
    *,
    late_threshold: time = DEFAULT_LATE_THRESHOLD,
    arrivals: Optional[Mapping[date, datetime]] = None,
) -> list[WeekSummary]:
    """Weekly activity: Sunday-start weeks, newest first, worked days only."""
    by_day = group_by_day(sessions)
    arrivals = arrivals or {}
    weeks: dict[date, list[DaySummary]] = {}
    for d in sorted(by_day):
        summary = summarize_day(by_day[d], day=d, late_threshold=late_threshold, arrived_at=arrivals.get(d))
        weeks.setdefault(week_start(d), []).append(summary)

    return [
        WeekSummary(
            week_start=first,
            week_end=first + timedelta(days=6),
            days=tuple(weeks[first]),
            total_duration_seconds=sum(d.total_duration_seconds for d in weeks[first]),
        )
        for first in sorted(weeks, reverse=True)
    ]


def format_duration(seconds: float) -> str:
    """Compact hours/minutes label: ``"3h 15m"``, ``"45m"`` or ``"2h"``."""
    total_minutes = max(int(seconds // 60), 0)
    hours, minutes = divmod(total_minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def format_clock(seconds: float) -> str:
    """Elapsed time as ``HH:MM:SS`` for the live timer."""
    total = max(int(seconds), 0)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
