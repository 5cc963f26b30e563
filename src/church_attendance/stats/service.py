from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import today_in
from ..core.constants import DEFAULT_PERIOD, DEFAULT_TOP_ATTENDEES
from ..core.enums import Period
from ..core.exceptions import DataFetchError, ValidationError
from ..members.repository import DepartmentMembershipRepository, MemberRepository
from . import engine
from .model import DateTypeStat, Overview, TopAttendee, TrendPoint, TypeStat, round_rate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceStatistics:
    period: Period
    start_date: str
    end_date: str
    total_members: int
    overview: Overview
    weekly_trend: float
    date_stats: list[DateTypeStat]
    trend_data: list[TrendPoint]
    type_stats: list[TypeStat]
    top_attendees: list[TopAttendee]

    def to_dict(self) -> dict:
        return {
            "overview": {
                "totalMembers": self.total_members,
                "presentCount": self.overview.present_count,
                "absentCount": self.overview.absent_count,
                "attendanceRate": round_rate(self.overview.attendance_rate),
                "totalSessions": len(self.date_stats),
                "period": self.period.value,
                "weeklyTrend": round_rate(self.weekly_trend),
            },
            "dateStats": [s.to_dict() for s in self.date_stats],
            "trendData": [p.to_dict() for p in self.trend_data],
            "typeStats": [s.to_dict() for s in self.type_stats],
            "topAttendees": [a.to_dict() for a in self.top_attendees],
            "period": {
                "type": self.period.value,
                "startDate": self.start_date,
                "endDate": self.end_date,
            },
        }


class AttendanceStatsService:
    """Fetch attendance for a reporting period and run the aggregation engine.

    Statistics are recomputed from scratch on every call; there is no cache.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        members: MemberRepository,
        departments: DepartmentMembershipRepository,
        *,
        timezone: str = "UTC",
        top_limit: int = DEFAULT_TOP_ATTENDEES,
    ):
        self._attendance = attendance
        self._members = members
        self._departments = departments
        self._timezone = timezone
        self._top_limit = int(top_limit)

    def build_statistics(
        self,
        *,
        period: str = DEFAULT_PERIOD,
        department_id: Optional[str] = None,
        session_type: Optional[str] = None,
        now: Optional[date] = None,
    ) -> AttendanceStatistics:
        try:
            period_ = Period(period or DEFAULT_PERIOD)
        except ValueError as e:
            raise ValidationError(f"Unknown period: {period}") from e

        today = now or today_in(self._timezone)
        start_date, end_date = engine.compute_period_range(period_, today)

        member_ids = self._department_member_ids(department_id)
        records = engine.filter_records(
            self._attendance.list_in_range(
                start_date=start_date,
                end_date=end_date,
                session_type=session_type,
                member_ids=member_ids,
            ),
            start_date,
            end_date,
            session_type,
            member_ids,
        )
        total_members = len(self._members.list_active_ids(member_ids))

        overview = engine.compute_overview(records, total_members, period_)

        weekly_trend = 0.0
        if period_ == Period.WEEKLY:
            weekly_trend = self._weekly_trend(
                current_rate=overview.attendance_rate,
                start_date=start_date,
                session_type=session_type,
                member_ids=member_ids,
                total_members=total_members,
            )

        roster = self._members.get_by_ids({r.member_id for r in records})

        logger.debug(
            "Attendance stats period=%s range=%s..%s records=%d members=%d",
            period_.value, start_date, end_date, len(records), total_members,
        )

        return AttendanceStatistics(
            period=period_,
            start_date=start_date,
            end_date=end_date,
            total_members=total_members,
            overview=overview,
            weekly_trend=weekly_trend,
            date_stats=engine.compute_date_type_breakdown(records),
            trend_data=engine.compute_trend_by_service_category(records),
            type_stats=engine.compute_type_breakdown(records),
            top_attendees=engine.compute_top_attendees(records, roster, self._top_limit),
        )

    def _department_member_ids(self, department_id: Optional[str]) -> Optional[Sequence[str]]:
        if not department_id:
            return None
        # An empty department yields an empty subset (zeroed stats), not org-wide stats.
        return list(self._departments.active_member_ids(department_id))

    def _weekly_trend(
        self,
        *,
        current_rate: float,
        start_date: str,
        session_type: Optional[str],
        member_ids: Optional[Sequence[str]],
        total_members: int,
    ) -> float:
        prev_start, prev_end = engine.previous_week_range(start_date)
        try:
            previous: Sequence[AttendanceRecord] = self._attendance.list_in_range(
                start_date=prev_start,
                end_date=prev_end,
                session_type=session_type,
                member_ids=member_ids,
            )
        except DataFetchError:
            logger.warning("Weekly trend unavailable for %s..%s, using 0", prev_start, prev_end, exc_info=True)
            return 0.0

        previous = engine.filter_records(previous, prev_start, prev_end, session_type, member_ids)
        return engine.compute_weekly_trend(current_rate, previous, total_members)
