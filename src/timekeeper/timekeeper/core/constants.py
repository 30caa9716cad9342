"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_LATE_THRESHOLD = time(10, 0)
DEFAULT_FACE_SERVICE_TIMEOUT = 15
MAX_PROFILE_BYTES = 5 * 1024 * 1024
MAX_REASON_LENGTH = 500
PROFILE_URL_PREFIX = "/user-profile/"

# Upload content type -> stored file extension
PROFILE_IMAGE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
}
