from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timekeeper.timekeeper.core.enums import AttendanceAction, DayStatus, Role
from src.timekeeper.timekeeper.core.exceptions import AuthorizationError, ValidationError

IN = AttendanceAction.CLOCK_IN
OUT = AttendanceAction.CLOCK_OUT


@pytest.fixture
def week(logs_repo, admin, alice, bob):
    logs_repo.add(alice, IN, datetime(2026, 1, 12, 10, 20))
    logs_repo.add(alice, OUT, datetime(2026, 1, 12, 18, 0))
    logs_repo.add(bob, IN, datetime(2026, 1, 12, 8, 55))
    logs_repo.add(bob, OUT, datetime(2026, 1, 12, 17, 0))
    logs_repo.add(bob, IN, datetime(2026, 1, 13, 9, 0))
    return alice, bob


def test_present_report_uses_roster_of_users_only(container, week):
    rows = container.report_service.present(
        current_role=Role.ADMIN, day=date(2026, 1, 13), now=datetime(2026, 1, 13, 11, 0)
    )

    assert [(r.member.name, r.status) for r in rows] == [("Alice", DayStatus.ABSENT), ("Bob", DayStatus.PRESENT)]
    assert rows[1].is_currently_clocked_in is True
    assert rows[1].total_minutes == 120


def test_lates_report(container, week):
    entries = container.report_service.lates(
        current_role=Role.ADMIN, start=date(2026, 1, 12), end=date(2026, 1, 13), now=datetime(2026, 1, 13, 11, 0)
    )

    assert [(e.member.name, e.late_minutes) for e in entries] == [("Alice", 20)]


def test_absences_report(container, week):
    entries = container.report_service.absences(
        current_role=Role.ADMIN, start=date(2026, 1, 12), end=date(2026, 1, 13), now=datetime(2026, 1, 13, 11, 0)
    )

    assert [(e.member.name, e.date) for e in entries] == [("Alice", date(2026, 1, 13))]


def test_timesheet_rows_and_totals(container, week):
    data = container.report_service.timesheet(
        current_role=Role.ADMIN, start=date(2026, 1, 12), end=date(2026, 1, 13), now=datetime(2026, 1, 13, 11, 0)
    )

    assert [(r["name"], r["work_date"]) for r in data.rows] == [
        ("Bob", "2026-01-12"),
        ("Bob", "2026-01-13"),
        ("Alice", "2026-01-12"),
    ]
    alice_row = data.rows[-1]
    assert alice_row["late"] == "yes"
    assert alice_row["worked_hours"] == "7h 40m"
    assert data.rows[1]["last_clock_out"] == "-"
    assert data.summary[0] == {"user_id": week[1].user_id, "name": "Bob", "total_hours": 10.08, "working_days": 2}


def test_timesheet_caps_open_session_at_range_end(container, logs_repo, alice):
    logs_repo.add(alice, IN, datetime(2026, 1, 9, 9, 55))
    logs_repo.add(alice, IN, datetime(2026, 1, 9, 20, 0))

    data = container.report_service.timesheet(
        current_role=Role.ADMIN, start=date(2026, 1, 5), end=date(2026, 1, 9), now=datetime(2026, 10, 17, 12, 0)
    )

    row = next(r for r in data.rows if r["name"] == "Alice")
    assert row["worked_hours"] == "4h"
    assert row["first_clock_in"] == "09:55"
    assert row["late"] == "no"
    assert next(s for s in data.summary if s["name"] == "Alice")["total_hours"] == 4.0


def test_reports_are_admin_only(container, week):
    with pytest.raises(AuthorizationError):
        container.report_service.present(current_role=Role.USER, day=date(2026, 1, 13))


def test_reports_reject_inverted_range(container, week):
    with pytest.raises(ValidationError):
        container.report_service.absences(current_role=Role.ADMIN, start=date(2026, 1, 13), end=date(2026, 1, 12))
