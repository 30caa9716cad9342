from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, email, username, password_hash, role, profile_url, created_at, updated_at"


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row.get("email"),
        username=row.get("username"),
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        profile_url=row.get("profile_url") or "",
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: object) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}=%s LIMIT 1", (value,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("username", username)

    def get_by_name(self, name: str) -> Optional[User]:
        return self._get_one("name", name)

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY created_at DESC, user_id DESC",
                (role.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        name: str,
        email: Optional[str],
        username: Optional[str],
        password_hash: str,
        role: Role,
        profile_url: str = "",
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, username, password_hash, role, profile_url)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, email, username, password_hash, role.value, profile_url),
            )
            return int(cur.lastrowid)

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        password_hash: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if password_hash:
                cur.execute(
                    "UPDATE users SET name=%s, email=%s, password_hash=%s WHERE user_id=%s",
                    (name, email, password_hash, int(user_id)),
                )
            else:
                cur.execute(
                    "UPDATE users SET name=%s, email=%s WHERE user_id=%s",
                    (name, email, int(user_id)),
                )
            return cur.rowcount > 0

    def update_profile_url(self, user_id: int, profile_url: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET profile_url=%s WHERE user_id=%s", (profile_url, int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
