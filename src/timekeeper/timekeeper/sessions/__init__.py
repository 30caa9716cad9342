"""Session reconstruction and aggregation.

Pure functions: they take already-fetched events plus an explicit ``now``
and configuration values, and never touch the database or the clock.
"""

from .aggregate import (
    compute_pay,
    format_clock,
    format_duration,
    summarize_day,
    summarize_days,
    summarize_range,
    summarize_weeks,
)
from .model import (
    AbsenceEntry,
    AttendanceEvent,
    DaySummary,
    LateEntry,
    Member,
    PresenceRow,
    RangeSummary,
    Session,
    WeekSummary,
)
from .reconstruct import (
    active_session,
    current_status,
    first_clock_ins,
    group_by_day,
    group_by_user,
    pair_sessions,
    sort_events,
)
from .views import absences, daily_status, late_entries

__all__ = [
    "AbsenceEntry",
    "AttendanceEvent",
    "DaySummary",
    "LateEntry",
    "Member",
    "PresenceRow",
    "RangeSummary",
    "Session",
    "WeekSummary",
    "absences",
    "active_session",
    "compute_pay",
    "current_status",
    "first_clock_ins",
    "daily_status",
    "format_clock",
    "format_duration",
    "group_by_day",
    "group_by_user",
    "late_entries",
    "pair_sessions",
    "sort_events",
    "summarize_day",
    "summarize_days",
    "summarize_range",
    "summarize_weeks",
]
