"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PERIOD = "monthly"
DEFAULT_TOP_ATTENDEES = 10
DEFAULT_QR_SESSION_HOURS = 4
DEFAULT_FETCH_TIMEOUT_SECONDS = 10
RECENT_CHECKINS_LIMIT = 10
PHONE_SUFFIX_DIGITS = 9
QR_CHECKIN_NOTE = "Checked in via QR code"
