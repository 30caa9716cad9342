from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..sessions import Member


@dataclass(frozen=True)
class User:
    """Domain entity: an employee or an administrator account.

    Employees sign in with their email, administrators with their username.
    Plain data only, no database access here.
    """

    user_id: int
    name: str
    email: Optional[str]
    username: Optional[str]
    password_hash: str
    role: Role
    profile_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_member(self) -> Member:
        return Member(user_id=self.user_id, name=self.name, email=self.email or "", profile_url=self.profile_url or "")

    def public_dict(self) -> dict:
        """Serializable view without the password hash."""
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "username": self.username,
            "role": self.role.value,
            "profileURL": self.profile_url or "",
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
