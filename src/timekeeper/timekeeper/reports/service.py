from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local, range_cutoff
from ..core.constants import DEFAULT_LATE_THRESHOLD
from ..core.enums import Role, Workplace
from ..core.exceptions import AuthorizationError, ValidationError
from ..sessions import (
    AbsenceEntry,
    LateEntry,
    PresenceRow,
    absences,
    daily_status,
    first_clock_ins,
    format_duration,
    late_entries,
    pair_sessions,
    summarize_days,
    summarize_range,
)
from ..users.service import UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimesheetData:
    rows: list[dict]
    summary: list[dict]


class ReportService:
    """Admin reports over the whole roster: presence, lateness, absences, timesheets."""

    def __init__(
        self,
        attendance: AttendanceService,
        users: UserService,
        *,
        late_threshold: time = DEFAULT_LATE_THRESHOLD,
        default_workplace: Workplace = Workplace.OFFICE,
    ):
        self._attendance = attendance
        self._users = users
        self._late_threshold = late_threshold
        self._default_workplace = default_workplace

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required.")

    @staticmethod
    def _check_range(start: date, end: date) -> None:
        if end < start:
            raise ValidationError("End date must be on or after start date")

    def _roster(self):
        return [u.to_member() for u in self._users.list_users()]

    def present(self, *, current_role: Role, day: date, now: Optional[datetime] = None) -> Sequence[PresenceRow]:
        self._require_admin(current_role)
        now = now or now_local()
        events = self._attendance.events_by_user(start=day, end=day)
        return daily_status(self._roster(), events, day=day, now=now, default_workplace=self._default_workplace)

    def lates(
        self,
        *,
        current_role: Role,
        start: date,
        end: date,
        now: Optional[datetime] = None,
    ) -> Sequence[LateEntry]:
        self._require_admin(current_role)
        self._check_range(start, end)
        now = now or now_local()
        events = self._attendance.events_by_user(start=start, end=end)
        return late_entries(
            self._roster(), events, start=start, end=end, now=now, late_threshold=self._late_threshold
        )

    def absences(
        self,
        *,
        current_role: Role,
        start: date,
        end: date,
        now: Optional[datetime] = None,
    ) -> Sequence[AbsenceEntry]:
        self._require_admin(current_role)
        self._check_range(start, end)
        now = now or now_local()
        events = self._attendance.events_by_user(start=start, end=end)
        return absences(self._roster(), events, start=start, end=end, now=now)

    def timesheet(
        self,
        *,
        current_role: Role,
        start: date,
        end: date,
        now: Optional[datetime] = None,
    ) -> TimesheetData:
        """Per-day rows and per-user totals, ready for CSV export."""
        self._require_admin(current_role)
        self._check_range(start, end)
        now = now or now_local()
        events = self._attendance.events_by_user(start=start, end=end)
        cutoff = range_cutoff(end, now)

        rows: list[dict] = []
        summary: list[dict] = []
        for member in self._roster():
            member_events = events.get(member.user_id, ())
            sessions = pair_sessions(member_events, cutoff)
            days = summarize_days(
                sessions,
                start=start,
                end=end,
                late_threshold=self._late_threshold,
                arrivals=first_clock_ins(member_events),
            )
            for d in days:
                if not d.sessions:
                    continue
                last = d.sessions[-1]
                rows.append(
                    {
                        "work_date": d.date.isoformat(),
                        "user_id": member.user_id,
                        "name": member.name,
                        "email": member.email,
                        "first_clock_in": d.first_clock_in.strftime("%H:%M"),
                        "last_clock_out": "-" if last.is_active else last.end.strftime("%H:%M"),
                        "sessions": len(d.sessions),
                        "worked_hours": format_duration(d.total_duration_seconds),
                        "late": "yes" if d.is_late else "no",
                    }
                )

            totals = summarize_range(days)
            summary.append(
                {
                    "user_id": member.user_id,
                    "name": member.name,
                    "total_hours": round(totals.total_hours, 2),
                    "working_days": totals.working_days_count,
                }
            )

        summary.sort(key=lambda s: s["total_hours"], reverse=True)
        logger.info("Timesheet %s..%s: %d rows", start, end, len(rows))
        return TimesheetData(rows=rows, summary=summary)
