from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: an employee's request for time off.

    The requester's name, email and picture are copied onto the request so
    listings do not need a join; they are refreshed when the user changes.
    """

    leave_id: int
    user_id: int
    user_name: str
    user_email: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    created_at: datetime
    user_profile_url: str = ""
    admin_comments: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_by_name: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def to_dict(self) -> dict:
        return {
            "id": self.leave_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "userProfileURL": self.user_profile_url or "",
            "type": self.leave_type.value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "days": self.days,
            "reason": self.reason,
            "status": self.status.value,
            "adminComments": self.admin_comments,
            "reviewedBy": {"id": self.reviewed_by, "name": self.reviewed_by_name} if self.reviewed_by else None,
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
