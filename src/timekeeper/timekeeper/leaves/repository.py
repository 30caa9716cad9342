from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create_leave(
        self,
        *,
        user_id: int,
        user_name: str,
        user_email: str,
        user_profile_url: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_leave(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_leaves(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError

    def decide_leave(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        admin_comments: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def update_user_details(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        profile_url: Optional[str] = None,
    ) -> int:
        """Refresh the requester details copied onto every leave of a user."""

        raise NotImplementedError
