from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from pathlib import Path
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_FACE_SERVICE_TIMEOUT, DEFAULT_LATE_THRESHOLD, MAX_PROFILE_BYTES
from .core.enums import Workplace
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .payroll.service import RateCalculatorService
from .reports.service import ReportService
from .scanning.face_client import FaceRecognitionClient
from .scanning.service import ScanService
from .users.mysql_user_repository import MySQLUserRepository
from .users.profile_store import ProfilePictureStore
from .users.repository import UserRepository
from .users.service import AuthService, ProfilePictureService, RegistrationService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository

    face_client: FaceRecognitionClient
    profile_store: ProfilePictureStore

    auth_service: AuthService
    user_service: UserService
    registration_service: RegistrationService
    profile_service: ProfilePictureService
    attendance_service: AttendanceService
    scan_service: ScanService
    leave_service: LeaveService
    report_service: ReportService
    rate_service: RateCalculatorService


def wire_container(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    face_client: FaceRecognitionClient,
    profile_store: ProfilePictureStore,
    late_threshold: time = DEFAULT_LATE_THRESHOLD,
    default_workplace: Workplace = Workplace.OFFICE,
) -> Container:
    """Build services on top of already constructed repositories (MySQL or in-memory)."""
    user_service = UserService(users_repo, leaves_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        late_threshold=late_threshold,
        default_workplace=default_workplace,
    )

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        face_client=face_client,
        profile_store=profile_store,
        auth_service=AuthService(users_repo),
        user_service=user_service,
        registration_service=RegistrationService(user_service, face_client, profile_store, users_repo),
        profile_service=ProfilePictureService(users_repo, profile_store, leaves_repo),
        attendance_service=attendance_service,
        scan_service=ScanService(user_service, attendance_service, face_client),
        leave_service=LeaveService(leaves_repo, users_repo),
        report_service=ReportService(
            attendance_service,
            user_service,
            late_threshold=late_threshold,
            default_workplace=default_workplace,
        ),
        rate_service=RateCalculatorService(attendance_service, user_service),
    )


def build_container(
    *,
    db_config: dict,
    late_threshold: time = DEFAULT_LATE_THRESHOLD,
    default_workplace: Workplace = Workplace.OFFICE,
    face_service_url: str = "",
    face_service_timeout: float = DEFAULT_FACE_SERVICE_TIMEOUT,
    profile_upload_dir: str | Path = "static/user-profile",
    max_profile_bytes: int = MAX_PROFILE_BYTES,
    base_dir: Optional[Path] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    upload_dir = Path(profile_upload_dir)
    if not upload_dir.is_absolute() and base_dir is not None:
        upload_dir = base_dir / upload_dir

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        face_client=FaceRecognitionClient(face_service_url, timeout=face_service_timeout),
        profile_store=ProfilePictureStore(upload_dir.resolve(), max_bytes=max_profile_bytes),
        late_threshold=late_threshold,
        default_workplace=default_workplace,
    )
