import os

from .config import (  # noqa: F401
    FETCH_TIMEOUT_SECONDS,
    QR_SESSION_HOURS,
    SITE_URL,
    TIMEZONE,
    TOP_ATTENDEES_LIMIT,
    _db_config,
)

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = _db_config()

DEBUG = True

# If enabled, app will apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
