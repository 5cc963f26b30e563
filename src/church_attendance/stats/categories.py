"""Display categories for the attendance trend chart.

Raw session types are re-bucketed through this table. `special_event`
sessions are what the congregation runs as zone meetings, so they chart
under `zone_meetings`. Types missing from the table are left out of the
trend.
"""

from __future__ import annotations

from ..core.enums import SessionType

CHURCH_SERVICES = "church_services"
DEPARTMENT_MEETINGS = "department_meetings"
ZONE_MEETINGS = "zone_meetings"

SERVICE_CATEGORIES: tuple[str, ...] = (CHURCH_SERVICES, DEPARTMENT_MEETINGS, ZONE_MEETINGS)

CATEGORY_BY_SESSION_TYPE: dict[str, str] = {
    SessionType.SUNDAY_SERVICE.value: CHURCH_SERVICES,
    SessionType.MIDWEEK_FELLOWSHIP.value: CHURCH_SERVICES,
    SessionType.DEPARTMENT_MEETING.value: DEPARTMENT_MEETINGS,
    SessionType.SPECIAL_EVENT.value: ZONE_MEETINGS,
}
