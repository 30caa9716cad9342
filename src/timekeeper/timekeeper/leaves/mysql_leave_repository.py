from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT l.leave_id, l.user_id, l.user_name, l.user_email, l.user_profile_url,
           l.leave_type, l.start_date, l.end_date, l.reason, l.status,
           l.admin_comments, l.reviewed_by, r.name AS reviewed_by_name, l.reviewed_at,
           l.created_at
    FROM leaves l
    LEFT JOIN users r ON r.user_id = l.reviewed_by
"""


def _to_leave(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        user_email=r["user_email"],
        user_profile_url=r.get("user_profile_url") or "",
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        admin_comments=r.get("admin_comments"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_by_name=r.get("reviewed_by_name"),
        reviewed_at=r.get("reviewed_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(
                    user_id, user_name, user_email, user_profile_url,
                    leave_type, start_date, end_date, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    user_name,
                    user_email,
                    user_profile_url,
                    leave_type.value,
                    start_date,
                    end_date,
                    reason,
                    LeaveStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_leave(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE l.leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_leaves(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses: list[str] = []
        params: list[object] = []
        if status is not None:
            clauses.append("l.status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("l.user_id=%s")
            params.append(int(user_id))

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY l.created_at DESC, l.leave_id DESC LIMIT %s", tuple(params))
            return [_to_leave(r) for r in fetchall(cur)]

    def decide_leave(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        admin_comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, reviewed_by=%s, reviewed_at=%s,
                    admin_comments=COALESCE(%s, admin_comments)
                WHERE leave_id=%s
                """,
                (status.value, int(reviewed_by), reviewed_at, admin_comments, int(leave_id)),
            )
            return cur.rowcount > 0

    def update_user_details(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        profile_url: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if profile_url is None:
                cur.execute(
                    "UPDATE leaves SET user_name=%s, user_email=%s WHERE user_id=%s",
                    (name, email, int(user_id)),
                )
            else:
                cur.execute(
                    "UPDATE leaves SET user_name=%s, user_email=%s, user_profile_url=%s WHERE user_id=%s",
                    (name, email, profile_url, int(user_id)),
                )
            return int(cur.rowcount)
