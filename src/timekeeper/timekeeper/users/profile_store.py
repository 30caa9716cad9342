from __future__ import annotations

import base64
import binascii
import logging
import re
import time
from pathlib import Path
from typing import Optional

from werkzeug.utils import secure_filename

from ..core.constants import MAX_PROFILE_BYTES, PROFILE_IMAGE_EXTENSIONS, PROFILE_URL_PREFIX
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ProfilePictureStore:
    """Profile pictures on local disk, served under ``/user-profile/``."""

    def __init__(self, root: str | Path, *, max_bytes: int = MAX_PROFILE_BYTES):
        self._root = Path(root)
        self._max_bytes = int(max_bytes)

    @property
    def root(self) -> Path:
        return self._root

    def _write(self, filename: str, data: bytes) -> str:
        self._root.mkdir(parents=True, exist_ok=True)
        (self._root / filename).write_bytes(data)
        return f"{PROFILE_URL_PREFIX}{filename}"

    def save_upload(self, *, user_id: int, filename: str, content_type: str, data: bytes) -> str:
        ext = PROFILE_IMAGE_EXTENSIONS.get((content_type or "").split(";", 1)[0].strip().lower())
        if ext is None:
            raise ValidationError("Only PNG, JPEG, GIF or WebP images are allowed.")
        if len(data) > self._max_bytes:
            raise ValidationError(f"File size must be less than {self._max_bytes // (1024 * 1024)}MB.")
        url = self._write(f"{user_id}-{int(time.time() * 1000)}.{ext}", data)
        logger.info("Stored profile picture %r for user %s as %s", filename, user_id, url)
        return url

    def save_data_url(self, *, name: str, data_url: str) -> Optional[str]:
        """Store a ``data:image/...;base64,`` picture sent by the registration form.

        Returns None when the payload is not an image data URL.
        """

        if not data_url or not data_url.startswith("data:image/"):
            return None
        try:
            data = base64.b64decode(data_url.split(",", 1)[1], validate=True)
        except (IndexError, binascii.Error):
            raise ValidationError("Profile picture is not valid base64 image data.")
        if len(data) > self._max_bytes:
            raise ValidationError(f"File size must be less than {self._max_bytes // (1024 * 1024)}MB.")

        safe_name = re.sub(r"[^a-zA-Z0-9]", "_", name)
        return self._write(f"{safe_name}-{int(time.time() * 1000)}.png", data)

    def delete(self, profile_url: str) -> None:
        if not profile_url or not profile_url.strip():
            return
        path = self._root / secure_filename(profile_url.replace(PROFILE_URL_PREFIX, "", 1))
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Could not delete old profile picture %s: %s", path, e)
