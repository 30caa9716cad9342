from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..common.datetime_utils import end_of_day, now_local, start_of_day
from ..common.serializers import day_to_dict, week_to_dict
from ..core.constants import DEFAULT_LATE_THRESHOLD
from ..core.enums import AttendanceAction, ClockStatus, Workplace
from ..core.exceptions import NotFoundError, ValidationError
from ..sessions import (
    AttendanceEvent,
    active_session,
    first_clock_ins,
    format_clock,
    group_by_user,
    pair_sessions,
    summarize_day,
    summarize_weeks,
)
from ..users.model import User
from ..users.repository import UserRepository
from .model import AttendanceLog
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12.")
    last = monthrange(int(year), int(month))[1]
    return start_of_day(date(int(year), int(month), 1)), end_of_day(date(int(year), int(month), last))


def previous_month_start(day: date) -> date:
    if day.month == 1:
        return date(day.year - 1, 12, 1)
    return date(day.year, day.month - 1, 1)


def chronological_events(logs: Sequence[AttendanceLog]) -> list[AttendanceEvent]:
    """Repository rows come newest first; flip them so ties keep insertion order."""
    return [log.to_event() for log in reversed(logs)]


class AttendanceService:
    def __init__(
        self,
        logs: AttendanceRepository,
        users: UserRepository,
        *,
        late_threshold: time = DEFAULT_LATE_THRESHOLD,
        default_workplace: Workplace = Workplace.OFFICE,
    ):
        self._logs = logs
        self._users = users
        self._late_threshold = late_threshold
        self._default_workplace = default_workplace

    def _next_action(self, user_id: int) -> AttendanceAction:
        last = self._logs.get_last_for_user(user_id)
        if not last or last.action == AttendanceAction.CLOCK_OUT:
            return AttendanceAction.CLOCK_IN
        return AttendanceAction.CLOCK_OUT

    def log_attendance(
        self,
        user: User,
        *,
        action: Optional[str] = None,
        workplace: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceLog:
        """Append a clock event; without ``action`` it toggles from the user's last one."""
        now = now or now_local()

        if action:
            try:
                kind = AttendanceAction(action)
            except ValueError:
                raise ValidationError("Action must be clock-in or clock-out.")
        else:
            kind = self._next_action(user.user_id)

        place = self._default_workplace
        if workplace:
            try:
                place = Workplace(workplace)
            except ValueError:
                raise ValidationError("Workplace must be office or home.")

        log_id = self._logs.create_log(
            user_id=user.user_id,
            user_name=user.name,
            user_email=user.email or "",
            action=kind,
            timestamp=now,
            workplace=place,
        )
        logger.info("User %s %s at %s (%s)", user.user_id, kind.value, now.isoformat(), place.value)

        log = self._logs.get_log(log_id)
        if not log:
            raise NotFoundError("Attendance record not found after saving.")
        return log

    def history_for_month(self, user_id: int, *, year: int, month: int) -> Sequence[AttendanceLog]:
        start, end = month_bounds(year, month)
        return self._logs.list_for_user(int(user_id), start=start, end=end)

    def all_for_month(self, *, year: int, month: int) -> Sequence[AttendanceLog]:
        start, end = month_bounds(year, month)
        return self._logs.list_between(start=start, end=end)

    def events_for_user(self, user_id: int, *, start: date, end: date) -> list[AttendanceEvent]:
        logs = self._logs.list_for_user(int(user_id), start=start_of_day(start), end=end_of_day(end))
        return chronological_events(logs)

    def events_by_user(self, *, start: date, end: date) -> dict[int, list[AttendanceEvent]]:
        logs = self._logs.list_between(start=start_of_day(start), end=end_of_day(end))
        return group_by_user(chronological_events(logs))

    @staticmethod
    def _status(session) -> dict:
        if session is None:
            return {"status": ClockStatus.CLOCKED_OUT.value, "since": None, "elapsedSeconds": 0, "elapsed": "00:00:00"}
        return {
            "status": ClockStatus.CLOCKED_IN.value,
            "since": session.start.isoformat(),
            "elapsedSeconds": int(session.duration_seconds),
            "elapsed": format_clock(session.duration_seconds),
        }

    def current_status(self, user_id: int, *, now: Optional[datetime] = None) -> dict:
        """Live status widget: clocked in or out, and for how long."""
        now = now or now_local()
        events = self.events_for_user(user_id, start=previous_month_start(now.date()), end=now.date())
        return self._status(active_session(events, now))

    def dashboard(self, user_id: int, *, now: Optional[datetime] = None) -> dict:
        """Status, today's sessions and the weekly breakdown of the last two months."""
        now = now or now_local()
        events = self.events_for_user(user_id, start=previous_month_start(now.date()), end=now.date())
        sessions = pair_sessions(events, now)
        arrivals = first_clock_ins(events)
        today = summarize_day(
            sessions, day=now.date(), late_threshold=self._late_threshold, arrived_at=arrivals.get(now.date())
        )
        weeks = summarize_weeks(sessions, late_threshold=self._late_threshold, arrivals=arrivals)
        return {
            "currentStatus": self._status(sessions[-1] if sessions and sessions[-1].is_active else None),
            "today": day_to_dict(today),
            "weeks": [week_to_dict(w) for w in weeks],
        }
