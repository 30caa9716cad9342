from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import normalize_email, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..leaves.repository import LeaveRepository
from ..scanning.face_client import FaceRecognitionClient
from .model import User
from .profile_store import ProfilePictureStore
from .repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    role: Role
    email: Optional[str]


class AuthService:
    """Use case: authenticate a user or an administrator (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _lookup(self, identifier: str) -> Optional[User]:
        ident = identifier.strip().lower()
        user = self._users.get_by_email(ident)
        if user and user.role == Role.USER:
            return user
        # Administrators sign in by username; the email box is accepted too.
        admin = self._users.get_by_username(ident)
        if admin and admin.role == Role.ADMIN:
            return admin
        return None

    def authenticate(self, identifier: str, password: str) -> SessionUser:
        if not identifier or not identifier.strip() or not password:
            raise ValidationError("Email/username and password are required.")

        user = self._lookup(identifier)
        if not user:
            raise AuthenticationError("Invalid credentials.")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials.")

        logger.info("User %s (%s) signed in", user.user_id, user.role.value)
        return SessionUser(user_id=user.user_id, name=user.name, role=user.role, email=user.email)


class UserService:
    """Use case: manage employee accounts (admin)."""

    def __init__(self, users: UserRepository, leaves: Optional[LeaveRepository] = None):
        self._users = users
        self._leaves = leaves

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required.")

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found.")
        return user

    def find_by_name(self, name: str) -> User:
        user = self._users.get_by_name((name or "").strip())
        if not user or user.role != Role.USER:
            raise NotFoundError("User not found. Please contact your administrator.")
        return user

    def list_users(self) -> Sequence[User]:
        return self._users.list_by_role(Role.USER)

    def create_user(self, *, current_role: Role, name: str, email: str, password: str) -> User:
        self._require_admin(current_role)
        return self.create_account(name=name, email=email, password=password)

    def create_account(self, *, name: str, email: str, password: str, profile_url: str = "") -> User:
        name = require_non_empty(name, "Name")
        email = normalize_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            username=None,
            password_hash=generate_password_hash(password),
            role=Role.USER,
            profile_url=profile_url,
        )
        logger.info("Created user %s <%s>", user_id, email)
        return self.get_user(user_id)

    def update_user(
        self,
        *,
        current_role: Role,
        user_id: int,
        name: str,
        email: str,
        password: Optional[str] = None,
    ) -> User:
        self._require_admin(current_role)
        existing = self.get_user(user_id)

        name = require_non_empty(name, "Name")
        email = normalize_email(email)
        other = self._users.get_by_email(email)
        if other and other.user_id != existing.user_id:
            raise ConflictError("Email is already taken by another user")

        password_hash = None
        if password and password.strip():
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            password_hash = generate_password_hash(password)

        self._users.update_user(user_id=existing.user_id, name=name, email=email, password_hash=password_hash)
        if self._leaves is not None:
            self._leaves.update_user_details(user_id=existing.user_id, name=name, email=email)
        return self.get_user(existing.user_id)

    def delete_user(self, *, current_role: Role, user_id: int) -> None:
        self._require_admin(current_role)
        user = self.get_user(user_id)
        if user.role == Role.ADMIN:
            raise ValidationError("Cannot delete an admin account")
        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Failed to delete user")
        logger.info("Deleted user %s", user.user_id)


class RegistrationService:
    """Use case: employee self-registration with face enrolment."""

    def __init__(
        self,
        users: UserService,
        face_client: FaceRecognitionClient,
        profiles: ProfilePictureStore,
        user_repo: UserRepository,
    ):
        self._users = users
        self._face = face_client
        self._profiles = profiles
        self._user_repo = user_repo

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        face_image: str,
        profile_picture: Optional[str] = None,
    ) -> User:
        if not name or not email or not password or not face_image:
            raise ValidationError("Name, email, password, and face image are required")
        if self._user_repo.get_by_email(normalize_email(email)):
            raise ConflictError("User with this email already exists")

        self._face.register_face(name=name.strip(), image_data=face_image)

        profile_url = ""
        if profile_picture:
            try:
                profile_url = self._profiles.save_data_url(name=name, data_url=profile_picture) or ""
            except (ValidationError, OSError) as e:
                logger.error("Error saving profile picture for %r: %s", name, e)

        return self._users.create_account(name=name, email=email, password=password, profile_url=profile_url)


class ProfilePictureService:
    """Use case: admin replaces or removes an employee's profile picture."""

    def __init__(
        self,
        users: UserRepository,
        profiles: ProfilePictureStore,
        leaves: Optional[LeaveRepository] = None,
    ):
        self._users = users
        self._profiles = profiles
        self._leaves = leaves

    def update(
        self,
        *,
        current_role: Role,
        user_id: int,
        remove: bool = False,
        filename: str = "",
        content_type: str = "",
        data: Optional[bytes] = None,
    ) -> User:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required.")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found.")

        if remove:
            profile_url = ""
        else:
            if data is None:
                raise ValidationError("Profile image is required.")
            profile_url = self._profiles.save_upload(
                user_id=user.user_id,
                filename=filename,
                content_type=content_type,
                data=data,
            )

        self._profiles.delete(user.profile_url)
        self._users.update_profile_url(user.user_id, profile_url)
        if self._leaves is not None:
            self._leaves.update_user_details(
                user_id=user.user_id,
                name=user.name,
                email=user.email or "",
                profile_url=profile_url,
            )

        updated = self._users.get_by_id(user.user_id)
        if not updated:
            raise NotFoundError("User not found.")
        return updated
