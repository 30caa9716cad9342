from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        password_hash: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def update_profile_url(self, user_id: int, profile_url: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
