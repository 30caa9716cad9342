"""Schema and demo-data setup for a fresh MySQL database."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

DEMO_ADMIN = {"name": "Administrator", "username": "admin", "password": "admin123"}
DEMO_USER = {"name": "Demo User", "email": "demo@example.com", "password": "user123"}


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the script.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside of quoted strings; ``--`` comment lines are dropped."""
    sql = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    buf: list[str] = []
    quote = ""
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(conn: DatabaseConnection, path: str | Path) -> int:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    count = 0
    with db_cursor(conn, dictionary=False) as (_, cur):
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    raw = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = raw.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        raw.commit()
    finally:
        raw.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    count = _run_script(conn, schema_path)
    logger.info("Applied %s (%d statements) to %s", Path(schema_path).name, count, conn.config.describe())


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    count = _run_script(conn, seed_path)
    logger.info("Applied %s (%d statements) to %s", Path(seed_path).name, count, conn.config.describe())


def ensure_demo_users(db_config: dict) -> None:
    """Create or reset the demo administrator and employee accounts."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    with db_cursor(conn) as (_, cur):
        cur.execute("SELECT user_id FROM users WHERE username=%s", (DEMO_ADMIN["username"],))
        if cur.fetchone():
            cur.execute(
                "UPDATE users SET name=%s, password_hash=%s, role=%s WHERE username=%s",
                (DEMO_ADMIN["name"], generate_password_hash(DEMO_ADMIN["password"]), Role.ADMIN.value, DEMO_ADMIN["username"]),
            )
        else:
            cur.execute(
                "INSERT INTO users (name, username, password_hash, role) VALUES (%s, %s, %s, %s)",
                (DEMO_ADMIN["name"], DEMO_ADMIN["username"], generate_password_hash(DEMO_ADMIN["password"]), Role.ADMIN.value),
            )

        cur.execute("SELECT user_id FROM users WHERE email=%s", (DEMO_USER["email"],))
        if cur.fetchone():
            cur.execute(
                "UPDATE users SET name=%s, password_hash=%s, role=%s WHERE email=%s",
                (DEMO_USER["name"], generate_password_hash(DEMO_USER["password"]), Role.USER.value, DEMO_USER["email"]),
            )
        else:
            cur.execute(
                "INSERT INTO users (name, email, password_hash, role) VALUES (%s, %s, %s, %s)",
                (DEMO_USER["name"], DEMO_USER["email"], generate_password_hash(DEMO_USER["password"]), Role.USER.value),
            )
    logger.info("Demo accounts ready: admin=%s user=%s", DEMO_ADMIN["username"], DEMO_USER["email"])


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    with db_cursor(conn, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
