from __future__ import annotations

from datetime import date, datetime

import pytz

from ..core.exceptions import ConfigurationError, ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def get_timezone(name: str):
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as e:
        raise ConfigurationError(f"Unknown timezone: {name}") from e


def now_in(tz_name: str) -> datetime:
    """Current aware time in the configured zone.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(pytz.UTC).astimezone(get_timezone(tz_name))


def today_in(tz_name: str) -> date:
    return now_in(tz_name).date()


def to_utc(value: datetime) -> datetime:
    """Normalize naive (assumed UTC) or aware datetimes to aware UTC."""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)
