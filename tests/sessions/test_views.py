from __future__ import annotations

from datetime import date, datetime

from src.timekeeper.timekeeper.core.enums import AttendanceAction, DayStatus, Workplace
from src.timekeeper.timekeeper.sessions import AttendanceEvent, Member, absences, daily_status, late_entries

IN = AttendanceAction.CLOCK_IN
OUT = AttendanceAction.CLOCK_OUT

ALICE = Member(user_id=1, name="alice")
BOB = Member(user_id=2, name="Bob")
CARA = Member(user_id=3, name="Cara")


def ev(user: Member, ts: datetime, action: AttendanceAction, workplace=None) -> AttendanceEvent:
    return AttendanceEvent(user_id=user.user_id, timestamp=ts, action=action, workplace=workplace)


def test_daily_status_rows():
    day = date(2026, 1, 15)
    now = datetime(2026, 1, 15, 14, 0)
    events = {
        1: [
            ev(ALICE, datetime(2026, 1, 15, 9, 0), IN),
            ev(ALICE, datetime(2026, 1, 15, 12, 15), OUT),
            ev(ALICE, datetime(2026, 1, 15, 13, 0), IN, Workplace.HOME),
        ],
        2: [ev(BOB, datetime(2026, 1, 15, 8, 0), OUT)],
    }

    rows = daily_status([CARA, BOB, ALICE], events, day=day, now=now)

    assert [r.member.name for r in rows] == ["alice", "Bob", "Cara"]
    alice, bob, cara = rows

    assert alice.status == DayStatus.PRESENT
    assert alice.total_minutes == 195 + 60
    assert alice.formatted_time == "4h 15m"
    assert alice.is_currently_clocked_in is True
    assert alice.last_clock_in == datetime(2026, 1, 15, 13, 0)
    assert alice.workplace == Workplace.HOME

    # a lone clock-out still counts as present
    assert bob.status == DayStatus.PRESENT
    assert bob.total_minutes == 0
    assert bob.last_clock_in is None
    assert bob.workplace == Workplace.OFFICE

    assert cara.status == DayStatus.ABSENT
    assert cara.formatted_time == "0m"


def test_daily_status_ignores_other_days():
    events = {1: [ev(ALICE, datetime(2026, 1, 14, 9, 0), IN)]}

    rows = daily_status([ALICE], events, day=date(2026, 1, 15), now=datetime(2026, 1, 15, 12, 0))

    assert rows[0].status == DayStatus.ABSENT


def test_late_entries_sorted_newest_first():
    events = {
        1: [
            ev(ALICE, datetime(2026, 1, 12, 10, 15), IN),
            ev(ALICE, datetime(2026, 1, 12, 17, 0), OUT),
            ev(ALICE, datetime(2026, 1, 13, 9, 59), IN),
            ev(ALICE, datetime(2026, 1, 13, 17, 0), OUT),
        ],
        2: [
            ev(BOB, datetime(2026, 1, 13, 11, 30), IN),
            ev(BOB, datetime(2026, 1, 13, 18, 0), OUT),
        ],
    }

    entries = late_entries(
        [ALICE, BOB],
        events,
        start=date(2026, 1, 12),
        end=date(2026, 1, 13),
        now=datetime(2026, 1, 15, 12, 0),
    )

    assert [(e.member.name, e.date, e.late_minutes) for e in entries] == [
        ("Bob", date(2026, 1, 13), 90),
        ("alice", date(2026, 1, 12), 15),
    ]


def test_replaced_clock_in_still_sets_arrival_time():
    events = {
        1: [
            ev(ALICE, datetime(2026, 1, 15, 9, 55), IN),
            ev(ALICE, datetime(2026, 1, 15, 10, 5), IN),
            ev(ALICE, datetime(2026, 1, 15, 17, 0), OUT),
        ],
        2: [
            ev(BOB, datetime(2026, 1, 15, 10, 20), IN),
            ev(BOB, datetime(2026, 1, 15, 10, 40), IN),
            ev(BOB, datetime(2026, 1, 15, 17, 0), OUT),
        ],
    }

    entries = late_entries(
        [ALICE, BOB], events, start=date(2026, 1, 15), end=date(2026, 1, 15), now=datetime(2026, 1, 15, 18, 0)
    )

    assert [(e.member.name, e.clock_in_time, e.late_minutes) for e in entries] == [
        ("Bob", datetime(2026, 1, 15, 10, 20), 20),
    ]


def test_absences_skip_weekends_and_worked_days():
    # Fri 9th .. Mon 12th
    events = {
        1: [
            ev(ALICE, datetime(2026, 1, 9, 9, 0), IN),
            ev(ALICE, datetime(2026, 1, 9, 17, 0), OUT),
        ],
    }

    entries = absences(
        [ALICE, BOB],
        events,
        start=date(2026, 1, 9),
        end=date(2026, 1, 12),
        now=datetime(2026, 1, 15, 12, 0),
    )

    assert [(e.date, e.member.name) for e in entries] == [
        (date(2026, 1, 9), "Bob"),
        (date(2026, 1, 12), "alice"),
        (date(2026, 1, 12), "Bob"),
    ]
    assert entries[0].reason == "No attendance recorded"
