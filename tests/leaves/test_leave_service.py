from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timekeeper.timekeeper.core.enums import LeaveStatus, LeaveType, Role
from src.timekeeper.timekeeper.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def submit(container, user, **overrides):
    fields = dict(
        user_id=user.user_id,
        leave_type="vacation",
        start_date=date(2026, 2, 9),
        end_date=date(2026, 2, 13),
        reason="Family trip",
    )
    fields.update(overrides)
    return container.leave_service.create_leave(**fields)


def test_create_leave(container, alice):
    leave = submit(container, alice)

    assert leave.status == LeaveStatus.PENDING
    assert leave.leave_type == LeaveType.VACATION
    assert leave.user_name == "Alice"
    assert leave.days == 5
    assert leave.to_dict()["reviewedBy"] is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"leave_type": ""},
        {"leave_type": "holiday"},
        {"start_date": None},
        {"end_date": date(2026, 2, 1)},
        {"reason": "   "},
        {"reason": "x" * 501},
    ],
)
def test_create_leave_validation(container, alice, overrides):
    with pytest.raises(ValidationError):
        submit(container, alice, **overrides)


def test_create_leave_for_missing_user(container):
    class Ghost:
        user_id = 99

    with pytest.raises(NotFoundError):
        submit(container, Ghost())


def test_list_leaves_visibility(container, admin, alice, bob):
    a = submit(container, alice)
    b = submit(container, bob, leave_type="sick")

    own = container.leave_service.list_leaves(current_role=Role.USER, current_user_id=alice.user_id, user_id=bob.user_id)
    everything = container.leave_service.list_leaves(current_role=Role.ADMIN, current_user_id=admin.user_id)
    filtered = container.leave_service.list_leaves(
        current_role=Role.ADMIN, current_user_id=admin.user_id, user_id=bob.user_id
    )

    assert [leave.leave_id for leave in own] == [a.leave_id]
    assert [leave.leave_id for leave in everything] == [b.leave_id, a.leave_id]
    assert [leave.leave_id for leave in filtered] == [b.leave_id]


def test_list_leaves_status_filter(container, admin, alice):
    submit(container, alice)

    assert container.leave_service.list_leaves(current_role=Role.ADMIN, current_user_id=admin.user_id, status="approved") == []
    with pytest.raises(ValidationError):
        container.leave_service.list_leaves(current_role=Role.ADMIN, current_user_id=admin.user_id, status="maybe")


def test_admin_decides_leave(container, admin, alice, fixed_now):
    leave = submit(container, alice)

    decided = container.leave_service.decide_leave(
        current_role=Role.ADMIN,
        admin_user_id=admin.user_id,
        leave_id=leave.leave_id,
        status="approved",
        admin_comments="  Enjoy ",
        now=fixed_now,
    )

    assert decided.status == LeaveStatus.APPROVED
    assert decided.admin_comments == "Enjoy"
    assert decided.reviewed_by_name == "Administrator"
    assert decided.reviewed_at == fixed_now
    assert decided.to_dict()["reviewedBy"] == {"id": admin.user_id, "name": "Administrator"}


def test_decide_leave_rules(container, admin, alice):
    leave = submit(container, alice)

    with pytest.raises(ValidationError):
        container.leave_service.decide_leave(
            current_role=Role.ADMIN, admin_user_id=admin.user_id, leave_id=leave.leave_id, status="pending"
        )
    with pytest.raises(AuthorizationError):
        container.leave_service.decide_leave(
            current_role=Role.USER, admin_user_id=alice.user_id, leave_id=leave.leave_id, status="approved"
        )
    with pytest.raises(NotFoundError):
        container.leave_service.decide_leave(
            current_role=Role.ADMIN, admin_user_id=admin.user_id, leave_id=404, status="rejected"
        )
    with pytest.raises(ValidationError):
        container.leave_service.decide_leave(
            current_role=Role.ADMIN,
            admin_user_id=admin.user_id,
            leave_id=leave.leave_id,
            status="rejected",
            admin_comments="x" * 501,
            now=datetime(2026, 1, 15),
        )
