from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional

from ..attendance.model import AttendanceLog
from ..attendance.service import AttendanceService
from ..core.enums import AttendanceAction
from ..core.exceptions import ValidationError
from ..users.model import User
from ..users.service import UserService
from .face_client import FaceRecognitionClient
from .qr import decode_qr_image, make_qr_png

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    user: User
    log: AttendanceLog

    @property
    def message(self) -> str:
        verb = "clocked in" if self.log.action == AttendanceAction.CLOCK_IN else "clocked out"
        return f"Successfully {verb}"

    def to_dict(self) -> dict:
        return {
            "success": True,
            "message": self.message,
            "attendance": {
                "action": self.log.action.value,
                "timestamp": self.log.timestamp.isoformat(),
                "userName": self.log.user_name,
                "workplace": self.log.workplace.value if self.log.workplace else None,
            },
        }


class ScanService:
    """Clock users in and out from a scanned QR code or a recognised face.

    A user's QR code carries their name; the face service answers with the
    matched name. Either way the name selects the user whose next action is
    logged.
    """

    def __init__(self, users: UserService, attendance: AttendanceService, face_client: FaceRecognitionClient):
        self._users = users
        self._attendance = attendance
        self._face = face_client

    def _clock(self, name: str, *, workplace: Optional[str], now: Optional[datetime], source: str) -> ScanResult:
        user = self._users.find_by_name(name)
        log = self._attendance.log_attendance(user, workplace=workplace, now=now)
        logger.info("%s scan: %s -> %s", source, user.name, log.action.value)
        return ScanResult(user=user, log=log)

    def scan_qr(self, code: str, *, workplace: Optional[str] = None, now: Optional[datetime] = None) -> ScanResult:
        code = (code or "").strip()
        if not code:
            raise ValidationError("QR code is required")
        return self._clock(code, workplace=workplace, now=now, source="QR")

    def scan_qr_image(
        self,
        stream: BinaryIO,
        *,
        workplace: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ScanResult:
        code = decode_qr_image(stream)
        if not code:
            raise ValidationError("No QR code detected in the image")
        return self._clock(code, workplace=workplace, now=now, source="QR image")

    def scan_face(self, image_data: str, *, workplace: Optional[str] = None, now: Optional[datetime] = None) -> ScanResult:
        if not image_data:
            raise ValidationError("Image data is required")
        match = self._face.scan(image_data=image_data)
        return self._clock(match.name, workplace=workplace, now=now, source="Face")

    def user_qr_png(self, user_id: int):
        user = self._users.get_user(user_id)
        return make_qr_png(user.name)
