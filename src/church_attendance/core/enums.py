from __future__ import annotations

from enum import Enum


class SessionType(str, Enum):
    """Known attendance session types.

    Aggregation treats types as opaque strings, so values outside this set
    still flow through the engine untouched.
    """

    SUNDAY_SERVICE = "sunday_service"
    MIDWEEK_FELLOWSHIP = "midweek_fellowship"
    SPECIAL_EVENT = "special_event"
    DEPARTMENT_MEETING = "department_meeting"


class MemberStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class Period(str, Enum):
    """Reporting periods accepted by the stats endpoint."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class PresenceType(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"

    @classmethod
    def of(cls, present: bool) -> "PresenceType":
        return cls.PRESENT if present else cls.ABSENT
