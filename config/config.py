"""Settings shared by every environment; env-specific modules override."""

import os


def _db_config() -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", "church_attendance_db"),
    }


# Calendar dates (periods, QR expiry) are computed in this IANA zone.
TIMEZONE = os.getenv("TIMEZONE", "UTC")

# Base URL printed into QR check-in codes
SITE_URL = os.getenv("SITE_URL", "http://localhost:5000")

QR_SESSION_HOURS = int(os.getenv("QR_SESSION_HOURS", "4"))
FETCH_TIMEOUT_SECONDS = int(os.getenv("FETCH_TIMEOUT_SECONDS", "10"))
TOP_ATTENDEES_LIMIT = int(os.getenv("TOP_ATTENDEES_LIMIT", "10"))
