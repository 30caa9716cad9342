from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceAction, Workplace
from ..sessions.model import AttendanceEvent


@dataclass(frozen=True)
class AttendanceLog:
    """Domain entity: one clock-in or clock-out stored in the attendance log."""

    log_id: int
    user_id: int
    user_name: str
    user_email: str
    action: AttendanceAction
    timestamp: datetime
    workplace: Optional[Workplace] = None
    created_at: Optional[datetime] = None

    def to_event(self) -> AttendanceEvent:
        return AttendanceEvent(
            user_id=self.user_id,
            timestamp=self.timestamp,
            action=self.action,
            workplace=self.workplace,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.log_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "action": self.action.value,
            "timestamp": self.timestamp.isoformat(),
            "workplace": self.workplace.value if self.workplace else None,
        }
