"""Roster-wide report views built on top of session reconstruction."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterable, Mapping, Sequence

from ..common.datetime_utils import iter_days
from ..core.constants import DEFAULT_LATE_THRESHOLD
from ..core.enums import AttendanceAction, DayStatus, Workplace
from .aggregate import format_duration, summarize_days
from .model import AbsenceEntry, AttendanceEvent, LateEntry, Member, PresenceRow
from .reconstruct import first_clock_ins, group_by_day, pair_sessions, sort_events


def daily_status(
    roster: Iterable[Member],
    events_by_user: Mapping[object, Sequence[AttendanceEvent]],
    *,
    day: date,
    now: datetime,
    default_workplace: Workplace = Workplace.OFFICE,
) -> list[PresenceRow]:
    """Who is present on ``day``, sorted by name.

    Presence here means at least one recorded event that day, so a lone
    clock-out still marks the user present with zero minutes.
    """

    rows: list[PresenceRow] = []
    for member in roster:
        events = sort_events(e for e in events_by_user.get(member.user_id, ()) if e.timestamp.date() == day)
        if not events:
            rows.append(
                PresenceRow(
                    member=member,
                    status=DayStatus.ABSENT,
                    total_minutes=0,
                    is_currently_clocked_in=False,
                    formatted_time="0m",
                )
            )
            continue

        sessions = pair_sessions(events, now)
        total_minutes = sum(int(s.duration_seconds // 60) for s in sessions)
        clock_ins = [e.timestamp for e in events if e.action == AttendanceAction.CLOCK_IN]
        rows.append(
            PresenceRow(
                member=member,
                status=DayStatus.PRESENT,
                total_minutes=total_minutes,
                is_currently_clocked_in=bool(sessions) and sessions[-1].is_active,
                formatted_time=format_duration(total_minutes * 60),
                last_clock_in=clock_ins[-1] if clock_ins else None,
                workplace=events[-1].workplace or default_workplace,
            )
        )

    return sorted(rows, key=lambda r: r.member.name.lower())


def late_entries(
    roster: Iterable[Member],
    events_by_user: Mapping[object, Sequence[AttendanceEvent]],
    *,
    start: date,
    end: date,
    now: datetime,
    late_threshold: time = DEFAULT_LATE_THRESHOLD,
) -> list[LateEntry]:
    """Days in range where a user's first clock-in came at or after the threshold."""
    entries: list[LateEntry] = []
    for member in roster:
        events = events_by_user.get(member.user_id, ())
        sessions = pair_sessions(events, now)
        days = summarize_days(
            sessions, start=start, end=end, late_threshold=late_threshold, arrivals=first_clock_ins(events)
        )
        for summary in days:
            if not summary.is_late:
                continue
            first = summary.first_clock_in
            threshold_at = datetime.combine(summary.date, late_threshold, tzinfo=first.tzinfo)
            entries.append(
                LateEntry(
                    member=member,
                    date=summary.date,
                    clock_in_time=first,
                    late_minutes=int((first - threshold_at).total_seconds() // 60),
                )
            )

    entries.sort(key=lambda e: (e.date, e.clock_in_time), reverse=True)
    return entries


def absences(
    roster: Iterable[Member],
    events_by_user: Mapping[object, Sequence[AttendanceEvent]],
    *,
    start: date,
    end: date,
    now: datetime,
) -> list[AbsenceEntry]:
    """Every (user, weekday) pair in range that has no session."""
    weekdays = [d for d in iter_days(start, end) if d.weekday() < 5]
    entries: list[AbsenceEntry] = []
    for member in roster:
        worked = group_by_day(pair_sessions(events_by_user.get(member.user_id, ()), now))
        entries.extend(AbsenceEntry(member=member, date=d) for d in weekdays if d not in worked)

    entries.sort(key=lambda e: (e.date, e.member.name.lower()))
    return entries
