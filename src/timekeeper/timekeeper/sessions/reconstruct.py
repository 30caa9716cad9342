"""Rebuild clock-in/clock-out sessions from an unordered attendance log."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from operator import attrgetter
from typing import Iterable, Optional

from ..core.enums import AttendanceAction, ClockStatus
from .model import AttendanceEvent, Session

logger = logging.getLogger(__name__)


def sort_events(events: Iterable[AttendanceEvent]) -> list[AttendanceEvent]:
    """Chronological order. Events sharing a timestamp keep their input order."""
    return sorted(events, key=attrgetter("timestamp"))


def _closed_session(start: datetime, end: datetime) -> Session:
    return Session(start=start, end=end, duration_seconds=(end - start).total_seconds(), is_active=False)


def _open_session(start: datetime, now: datetime) -> Session:
    elapsed = (now - start).total_seconds()
    if elapsed < 0:
        logger.warning("Open session starting at %s is ahead of now=%s; counting it as 0s", start, now)
        return Session(start=start, end=start, duration_seconds=0.0, is_active=True)
    return Session(start=start, end=now, duration_seconds=elapsed, is_active=True)


def pair_sessions(events: Iterable[AttendanceEvent], now: datetime) -> list[Session]:
    """Pair one user's events into sessions.

    A clock-in replaces any clock-in still waiting for its clock-out, a
    clock-out with nothing to close is dropped, and a clock-in left over at
    the end becomes an active session measured up to ``now``.
    """

    sessions: list[Session] = []
    pending: Optional[datetime] = None

    for event in sort_events(events):
        if event.action == AttendanceAction.CLOCK_IN:
            pending = event.timestamp
        elif event.action == AttendanceAction.CLOCK_OUT and pending is not None:
            sessions.append(_closed_session(pending, event.timestamp))
            pending = None

    if pending is not None:
        sessions.append(_open_session(pending, now))

    return sessions


def current_status(events: Iterable[AttendanceEvent], now: datetime) -> ClockStatus:
    sessions = pair_sessions(events, now)
    if sessions and sessions[-1].is_active:
        return ClockStatus.CLOCKED_IN
    return ClockStatus.CLOCKED_OUT


def active_session(events: Iterable[AttendanceEvent], now: datetime) -> Optional[Session]:
    sessions = pair_sessions(events, now)
    if sessions and sessions[-1].is_active:
        return sessions[-1]
    return None


def group_by_day(sessions: Iterable[Session]) -> dict[date, list[Session]]:
    """Bucket sessions by the calendar day their clock-in falls on."""
    days: dict[date, list[Session]] = defaultdict(list)
    for s in sessions:
        days[s.start.date()].append(s)
    return dict(days)


def group_by_user(events: Iterable[AttendanceEvent]) -> dict:
    by_user: dict = defaultdict(list)
    for e in events:
        by_user[e.user_id].append(e)
    return dict(by_user)


def first_clock_ins(events: Iterable[AttendanceEvent]) -> dict[date, datetime]:
    """Earliest raw clock-in per calendar day, replaced clock-ins included."""
    arrivals: dict[date, datetime] = {}
    for e in events:
        if e.action != AttendanceAction.CLOCK_IN:
            continue
        day = e.timestamp.date()
        if day not in arrivals or e.timestamp < arrivals[day]:
            arrivals[day] = e.timestamp
    return arrivals
