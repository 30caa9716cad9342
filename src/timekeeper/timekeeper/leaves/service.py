from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import MAX_REASON_LENGTH
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Use cases: submit, list and review leave requests."""

    def __init__(self, leaves: LeaveRepository, users: UserRepository):
        self._leaves = leaves
        self._users = users

    @staticmethod
    def _parse_type(value: str) -> LeaveType:
        try:
            return LeaveType((value or "").strip().lower())
        except ValueError:
            allowed = ", ".join(t.value for t in LeaveType)
            raise ValidationError(f"Leave type must be one of: {allowed}.")

    def create_leave(
        self,
        *,
        user_id: int,
        leave_type: str,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str,
    ) -> LeaveRequest:
        if not leave_type or start_date is None or end_date is None or not (reason or "").strip():
            raise ValidationError("Type, start date, end date, and reason are required.")
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date.")

        kind = self._parse_type(leave_type)
        reason = require_max_length(require_non_empty(reason, "Reason"), "Reason", MAX_REASON_LENGTH)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found.")

        leave_id = self._leaves.create_leave(
            user_id=user.user_id,
            user_name=user.name,
            user_email=user.email or "",
            user_profile_url=user.profile_url or "",
            leave_type=kind,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        logger.info("Leave %s submitted by user %s (%s, %s..%s)", leave_id, user.user_id, kind.value, start_date, end_date)
        return self._get(leave_id)

    def _get(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get_leave(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found.")
        return leave

    def list_leaves(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        """Admins see every request and may filter by user; users see their own."""

        status_filter = None
        if status:
            try:
                status_filter = LeaveStatus(status.strip().lower())
            except ValueError:
                raise ValidationError("Unknown leave status.")

        if current_role == Role.ADMIN:
            owner = int(user_id) if user_id is not None else None
        else:
            owner = int(current_user_id)

        return self._leaves.list_leaves(status=status_filter, user_id=owner)

    def decide_leave(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        leave_id: int,
        status: str,
        admin_comments: str = "",
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        if not leave_id or not status:
            raise ValidationError("Leave ID and status are required.")
        if status not in (LeaveStatus.APPROVED.value, LeaveStatus.REJECTED.value):
            raise ValidationError("Status must be either approved or rejected.")
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required to update leave status.")

        self._get(leave_id)

        comments = (admin_comments or "").strip() or None
        if comments:
            require_max_length(comments, "Admin comments", MAX_REASON_LENGTH)

        self._leaves.decide_leave(
            leave_id=int(leave_id),
            status=LeaveStatus(status),
            reviewed_by=int(admin_user_id),
            reviewed_at=now or now_local(),
            admin_comments=comments,
        )
        logger.info("Leave %s %s by admin %s", leave_id, status, admin_user_id)
        return self._get(leave_id)
