"""HTTP client for the external face-recognition service.

The service exposes two multipart endpoints: ``/register`` (image + name)
to enrol a face, and ``/scan`` (image) to identify one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..core.constants import DEFAULT_FACE_SERVICE_TIMEOUT
from ..core.exceptions import ExternalServiceError, NotFoundError

logger = logging.getLogger(__name__)

NO_MATCH_MARKER = "No matching face found"


@dataclass(frozen=True)
class FaceMatch:
    name: str
    payload: dict


class FaceRecognitionClient:
    def __init__(
        self,
        base_url: Optional[str],
        *,
        timeout: float = DEFAULT_FACE_SERVICE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = (base_url or "").rstrip("/")
        self._timeout = float(timeout)
        self._http = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self._base_url)

    def _post(self, path: str, data: dict) -> requests.Response:
        if not self.configured:
            logger.error("Face recognition service URL is not configured")
            raise ExternalServiceError("Face recognition service not configured", status=500)
        try:
            return self._http.post(f"{self._base_url}{path}", files={k: (None, v) for k, v in data.items()}, timeout=self._timeout)
        except requests.exceptions.RequestException as e:
            logger.error("Face recognition service unreachable: %s", e)
            raise ExternalServiceError("Face recognition service unavailable") from e

    @staticmethod
    def _json(response: requests.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def register_face(self, *, name: str, image_data: str) -> dict:
        response = self._post("/register", {"image": image_data, "name": name})
        body = self._json(response)
        if not response.ok:
            logger.warning("Face registration for %r rejected (%s)", name, response.status_code)
            raise ExternalServiceError(body.get("error") or "Face registration failed", status=response.status_code)
        return body

    def scan(self, *, image_data: str) -> FaceMatch:
        response = self._post("/scan", {"image": image_data})
        body = self._json(response)
        if not response.ok:
            logger.error("Face recognition service error: %s %s", response.status_code, response.reason)
            raise ExternalServiceError("Face recognition service unavailable")

        error = body.get("error")
        if error and NO_MATCH_MARKER in error:
            raise NotFoundError(error)
        if error:
            raise ExternalServiceError(error)

        name = (body.get("name") or "").strip()
        if not name:
            raise NotFoundError(NO_MATCH_MARKER)
        return FaceMatch(name=name, payload=body)
