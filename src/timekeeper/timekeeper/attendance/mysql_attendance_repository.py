from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceAction, Workplace
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceLog
from .repository import AttendanceRepository

_COLUMNS = "log_id, user_id, user_name, user_email, action, timestamp, workplace, created_at"


def _to_log(r: Dict[str, Any]) -> AttendanceLog:
    return AttendanceLog(
        log_id=int(r["log_id"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        user_email=r["user_email"],
        action=AttendanceAction(r["action"]),
        timestamp=r["timestamp"],
        workplace=Workplace(r["workplace"]) if r.get("workplace") else None,
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_logs(user_id, user_name, user_email, action, timestamp, workplace)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    user_name,
                    user_email,
                    action.value,
                    timestamp,
                    workplace.value if workplace else None,
                ),
            )
            return int(cur.lastrowid)

    def get_log(self, log_id: int) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_logs WHERE log_id=%s", (int(log_id),))
            r = fetchone(cur)
            return _to_log(r) if r else None

    def get_last_for_user(self, user_id: int) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs
                WHERE user_id=%s
                ORDER BY timestamp DESC, log_id DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_log(r) if r else None

    def list_for_user(self, user_id: int, *, start: datetime, end: datetime) -> Sequence[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs
                WHERE user_id=%s AND timestamp BETWEEN %s AND %s
                ORDER BY timestamp DESC, log_id DESC
                """,
                (int(user_id), start, end),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def list_between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs
                WHERE timestamp BETWEEN %s AND %s
                ORDER BY timestamp DESC, log_id DESC
                """,
                (start, end),
            )
            return [_to_log(r) for r in fetchall(cur)]
