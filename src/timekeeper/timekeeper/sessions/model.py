from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Hashable, Optional

from ..core.enums import AttendanceAction, DayStatus, Workplace


@dataclass(frozen=True)
class AttendanceEvent:
    """A single clock-in or clock-out, as stored in the attendance log."""

    user_id: Hashable
    timestamp: datetime
    action: AttendanceAction
    workplace: Optional[Workplace] = None


@dataclass(frozen=True)
class Session:
    """One clock-in matched with its clock-out, or a still-open clock-in.

    An open session is evaluated against a reference ``now``: ``end`` holds
    that instant and ``duration_seconds`` the elapsed time so far.
    """

    start: datetime
    end: datetime
    duration_seconds: float
    is_active: bool = False


@dataclass(frozen=True)
class DaySummary:
    date: Optional[date]
    sessions: tuple[Session, ...] = ()
    total_duration_seconds: float = 0.0
    status: DayStatus = DayStatus.ABSENT
    is_late: bool = False
    arrived_at: Optional[datetime] = None

    @property
    def is_live(self) -> bool:
        return any(s.is_active for s in self.sessions)

    @property
    def first_clock_in(self) -> Optional[datetime]:
        if self.arrived_at is not None:
            return self.arrived_at
        return self.sessions[0].start if self.sessions else None


@dataclass(frozen=True)
class RangeSummary:
    days: tuple[DaySummary, ...]
    total_duration_seconds: float
    working_days_count: int
    total_pay: Optional[Decimal] = None

    @property
    def total_hours(self) -> float:
        return self.total_duration_seconds / 3600


@dataclass(frozen=True)
class WeekSummary:
    week_start: date
    week_end: date
    days: tuple[DaySummary, ...]
    total_duration_seconds: float


@dataclass(frozen=True)
class Member:
    """Roster entry used by the report views (who is expected at work)."""

    user_id: Hashable
    name: str
    email: str = ""
    profile_url: str = ""


@dataclass(frozen=True)
class PresenceRow:
    member: Member
    status: DayStatus
    total_minutes: int
    is_currently_clocked_in: bool
    formatted_time: str
    last_clock_in: Optional[datetime] = None
    workplace: Optional[Workplace] = None


@dataclass(frozen=True)
class LateEntry:
    member: Member
    date: date
    clock_in_time: datetime
    late_minutes: int


@dataclass(frozen=True)
class AbsenceEntry:
    member: Member
    date: date
    reason: str = field(default="No attendance recorded")
