"""Settings shared by every environment, read from the process environment."""

import os


def env_bool(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timekeeper"),
}

# First clock-in at or after this time of day marks the day late.
LATE_THRESHOLD = os.getenv("LATE_THRESHOLD", "10:00")
DEFAULT_WORKPLACE = os.getenv("DEFAULT_WORKPLACE", "office")

# Face-recognition service (POST /register, POST /scan). Empty disables face features.
FACE_SERVICE_URL = os.getenv("FACE_SERVICE_URL", os.getenv("PYTHON_URL", ""))
FACE_SERVICE_TIMEOUT = float(os.getenv("FACE_SERVICE_TIMEOUT", "15"))

PROFILE_UPLOAD_DIR = os.getenv("PROFILE_UPLOAD_DIR", "static/user-profile")
MAX_PROFILE_BYTES = int(os.getenv("MAX_PROFILE_BYTES", str(5 * 1024 * 1024)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None
