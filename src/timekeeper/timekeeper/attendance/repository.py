from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceAction, Workplace
from .model import AttendanceLog


class AttendanceRepository(Protocol):
    def create_log(
        self,
        *,
        user_id: int,
        user_name: str,
        user_email: str,
        action: AttendanceAction,
        timestamp: datetime,
        workplace: Optional[Workplace] = None,
    ) -> int:
        raise NotImplementedError

    def get_log(self, log_id: int) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def get_last_for_user(self, user_id: int) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, start: datetime, end: datetime) -> Sequence[AttendanceLog]:
        """Logs of one user with ``start <= timestamp <= end``, newest first."""

        raise NotImplementedError

    def list_between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceLog]:
        """Logs of every user with ``start <= timestamp <= end``, newest first."""

        raise NotImplementedError
