from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .checkin.mysql_qr_session_repository import MySQLQRSessionRepository
from .checkin.repository import QRSessionRepository
from .checkin.service import CheckinService
from .common.datetime_utils import get_timezone
from .core.constants import DEFAULT_FETCH_TIMEOUT_SECONDS, DEFAULT_QR_SESSION_HOURS, DEFAULT_TOP_ATTENDEES
from .database.connection import DBConfig, DatabaseConnection
from .members.mysql_department_repository import MySQLDepartmentMembershipRepository
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import DepartmentMembershipRepository, MemberRepository
from .members.service import MemberLookupService
from .stats.service import AttendanceStatsService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    members_repo: MemberRepository
    departments_repo: DepartmentMembershipRepository
    attendance_repo: AttendanceRepository
    qr_sessions_repo: QRSessionRepository

    attendance_service: AttendanceService
    stats_service: AttendanceStatsService
    checkin_service: CheckinService


def wire_services(
    *,
    members_repo: MemberRepository,
    departments_repo: DepartmentMembershipRepository,
    attendance_repo: AttendanceRepository,
    qr_sessions_repo: QRSessionRepository,
    conn: Optional[DatabaseConnection] = None,
    timezone: str = "UTC",
    site_url: str = "http://localhost:5000",
    qr_session_hours: int = DEFAULT_QR_SESSION_HOURS,
    top_limit: int = DEFAULT_TOP_ATTENDEES,
) -> Container:
    get_timezone(timezone)

    attendance_service = AttendanceService(attendance_repo, members_repo, qr_sessions_repo)
    stats_service = AttendanceStatsService(
        attendance_repo,
        members_repo,
        departments_repo,
        timezone=timezone,
        top_limit=top_limit,
    )
    checkin_service = CheckinService(
        qr_sessions_repo,
        attendance_repo,
        MemberLookupService(members_repo),
        site_url=site_url,
        session_hours=qr_session_hours,
    )

    return Container(
        conn=conn,
        members_repo=members_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        qr_sessions_repo=qr_sessions_repo,
        attendance_service=attendance_service,
        stats_service=stats_service,
        checkin_service=checkin_service,
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = "UTC",
    site_url: str = "http://localhost:5000",
    qr_session_hours: int = DEFAULT_QR_SESSION_HOURS,
    fetch_timeout: int = DEFAULT_FETCH_TIMEOUT_SECONDS,
    top_limit: int = DEFAULT_TOP_ATTENDEES,
) -> Container:
    config = DBConfig.from_mapping(db_config, timeout=fetch_timeout)
    conn = DatabaseConnection.get_instance(config)

    return wire_services(
        conn=conn,
        members_repo=MySQLMemberRepository(conn),
        departments_repo=MySQLDepartmentMembershipRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        qr_sessions_repo=MySQLQRSessionRepository(conn),
        timezone=timezone,
        site_url=site_url,
        qr_session_hours=qr_session_hours,
        top_limit=top_limit,
    )
