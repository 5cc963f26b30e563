import os

from .config import (  # noqa: F401
    FETCH_TIMEOUT_SECONDS,
    QR_SESSION_HOURS,
    SITE_URL,
    TOP_ATTENDEES_LIMIT,
    _db_config,
)

SECRET_KEY = "test-secret"

DB_CONFIG = _db_config()

TIMEZONE = "UTC"

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
