from __future__ import annotations

import os
from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

os.environ.setdefault("APP_ENV", "testing")

from src.timekeeper.timekeeper.attendance.model import AttendanceLog
from src.timekeeper.timekeeper.core.enums import AttendanceAction, LeaveStatus, Role
from src.timekeeper.timekeeper.core.exceptions import NotFoundError
from src.timekeeper.timekeeper.leaves.model import LeaveRequest
from src.timekeeper.timekeeper.scanning.face_client import FaceMatch
from src.timekeeper.timekeeper.users.model import User


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self._id = 0

    def add(self, *, name: str, email: Optional[str] = None, username: Optional[str] = None,
            password: str = "secret1", role: Role = Role.USER, profile_url: str = "") -> User:
        user_id = self.create_user(
            name=name,
            email=email,
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            profile_url=profile_url,
        )
        return self.users[user_id]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def get_by_name(self, name: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.name == name), None)

    def list_by_role(self, role: Role):
        return sorted((u for u in self.users.values() if u.role == role), key=lambda u: u.user_id, reverse=True)

    def create_user(self, *, name, email, username, password_hash, role, profile_url=""):
        self._id += 1
        self.users[self._id] = User(
            user_id=self._id,
            name=name,
            email=email,
            username=username,
            password_hash=password_hash,
            role=role,
            profile_url=profile_url,
            created_at=datetime(2026, 1, 1, 9, 0),
        )
        return self._id

    def update_user(self, *, user_id, name, email, password_hash=None):
        user = self.users[user_id]
        self.users[user_id] = replace(user, name=name, email=email, password_hash=password_hash or user.password_hash)
        return True

    def update_profile_url(self, user_id, profile_url):
        self.users[user_id] = replace(self.users[user_id], profile_url=profile_url)
        return True

    def delete_by_id(self, user_id):
        return self.users.pop(user_id, None) is not None


class InMemoryAttendanceLogs:
    def __init__(self):
        self.logs: list[AttendanceLog] = []

    def add(self, user: User, action: AttendanceAction, timestamp: datetime, workplace=None) -> int:
        return self.create_log(
            user_id=user.user_id,
            user_name=user.name,
            user_email=user.email or "",
            action=action,
            timestamp=timestamp,
            workplace=workplace,
        )

    def create_log(self, *, user_id, user_name, user_email, action, timestamp, workplace=None):
        log_id = len(self.logs) + 1
        self.logs.append(
            AttendanceLog(
                log_id=log_id,
                user_id=user_id,
                user_name=user_name,
                user_email=user_email,
                action=action,
                timestamp=timestamp,
                workplace=workplace,
            )
        )
        return log_id

    def get_log(self, log_id):
        return next((log for log in self.logs if log.log_id == log_id), None)

    def _newest_first(self, logs):
        return sorted(logs, key=lambda log: (log.timestamp, log.log_id), reverse=True)

    def get_last_for_user(self, user_id):
        logs = self._newest_first(log for log in self.logs if log.user_id == user_id)
        return logs[0] if logs else None

    def list_for_user(self, user_id, *, start, end):
        return self._newest_first(log for log in self.logs if log.user_id == user_id and start <= log.timestamp <= end)

    def list_between(self, *, start, end):
        return self._newest_first(log for log in self.logs if start <= log.timestamp <= end)


class InMemoryLeaves:
    def __init__(self, users: InMemoryUsers):
        self.leaves: dict[int, LeaveRequest] = {}
        self._users = users

    def create_leave(self, *, user_id, user_name, user_email, user_profile_url, leave_type, start_date, end_date, reason):
        leave_id = len(self.leaves) + 1
        self.leaves[leave_id] = LeaveRequest(
            leave_id=leave_id,
            user_id=user_id,
            user_name=user_name,
            user_email=user_email,
            user_profile_url=user_profile_url,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=datetime(2026, 1, 1, 8, leave_id),
        )
        return leave_id

    def get_leave(self, leave_id):
        return self.leaves.get(leave_id)

    def list_leaves(self, *, status=None, user_id=None, limit=200):
        items = [
            leave
            for leave in self.leaves.values()
            if (status is None or leave.status == status) and (user_id is None or leave.user_id == user_id)
        ]
        items.sort(key=lambda leave: (leave.created_at, leave.leave_id), reverse=True)
        return items[:limit]

    def decide_leave(self, *, leave_id, status, reviewed_by, reviewed_at, admin_comments=None):
        reviewer = self._users.get_by_id(reviewed_by)
        self.leaves[leave_id] = replace(
            self.leaves[leave_id],
            status=status,
            reviewed_by=reviewed_by,
            reviewed_by_name=reviewer.name if reviewer else None,
            reviewed_at=reviewed_at,
            admin_comments=admin_comments,
        )
        return True

    def update_user_details(self, *, user_id, name, email, profile_url=None):
        count = 0
        for leave_id, leave in list(self.leaves.items()):
            if leave.user_id != user_id:
                continue
            changes = {"user_name": name, "user_email": email}
            if profile_url is not None:
                changes["user_profile_url"] = profile_url
            self.leaves[leave_id] = replace(leave, **changes)
            count += 1
        return count


class FakeFaceClient:
    """Stands in for the HTTP face service: returns a preset name or raises."""

    def __init__(self, name: Optional[str] = None, error: Optional[Exception] = None):
        self.name = name
        self.error = error
        self.registered: list[str] = []

    @property
    def configured(self) -> bool:
        return True

    def register_face(self, *, name: str, image_data: str) -> dict:
        if self.error:
            raise self.error
        self.registered.append(name)
        return {"success": True}

    def scan(self, *, image_data: str) -> FaceMatch:
        if self.error:
            raise self.error
        if not self.name:
            raise NotFoundError("No matching face found")
        return FaceMatch(name=self.name, payload={"name": self.name})


@pytest.fixture
def fixed_now() -> datetime:
    # Thursday
    return datetime(2026, 1, 15, 17, 0, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def logs_repo() -> InMemoryAttendanceLogs:
    return InMemoryAttendanceLogs()


@pytest.fixture
def leaves_repo(users_repo) -> InMemoryLeaves:
    return InMemoryLeaves(users_repo)


@pytest.fixture
def face_client() -> FakeFaceClient:
    return FakeFaceClient()


@pytest.fixture
def admin(users_repo) -> User:
    return users_repo.add(name="Administrator", username="admin", password="admin123", role=Role.ADMIN)


@pytest.fixture
def alice(users_repo) -> User:
    return users_repo.add(name="Alice", email="alice@example.com", password="alice123")


@pytest.fixture
def bob(users_repo) -> User:
    return users_repo.add(name="Bob", email="bob@example.com", password="bob1234")


@pytest.fixture
def container(users_repo, logs_repo, leaves_repo, face_client, tmp_path):
    from src.timekeeper.timekeeper.container import wire_container
    from src.timekeeper.timekeeper.users.profile_store import ProfilePictureStore

    return wire_container(
        users_repo=users_repo,
        attendance_repo=logs_repo,
        leaves_repo=leaves_repo,
        face_client=face_client,
        profile_store=ProfilePictureStore(tmp_path / "user-profile"),
    )
