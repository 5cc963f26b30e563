"""Attendance aggregation engine.

Pure functions over already-fetched attendance records and member rosters.
Nothing here touches the store, the clock or any module state, so every
function can be called on each request and returns the same output for the
same input. Empty input always yields zeroed statistics.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import DEFAULT_TOP_ATTENDEES
from ..core.enums import Period, PresenceType
from ..members.model import Member
from .categories import CATEGORY_BY_SESSION_TYPE, SERVICE_CATEGORIES
from .model import (
    DateTypeStat,
    MemberSummary,
    MonthlyStat,
    Overview,
    Streak,
    Tally,
    TopAttendee,
    TrendPoint,
    TypeStat,
    percentage,
)


def compute_period_range(period: Period | str, now: date) -> tuple[str, str]:
    """Return the ISO (start, end) of the reporting period ending on `now`."""
    period = Period(period)

    if period == Period.WEEKLY:
        # isoweekday: Monday=1 .. Sunday=7, so Sunday maps to 0.
        start = now - timedelta(days=now.isoweekday() % 7)
    elif period == Period.QUARTERLY:
        start = now.replace(month=now.month - (now.month - 1) % 3, day=1)
    elif period == Period.YEARLY:
        start = now.replace(month=1, day=1)
    else:
        start = now.replace(day=1)

    return start.isoformat(), now.isoformat()


def previous_week_range(start_date: str) -> tuple[str, str]:
    """The 7 days immediately before `start_date`."""
    start = date.fromisoformat(start_date)
    return (start - timedelta(days=7)).isoformat(), (start - timedelta(days=1)).isoformat()


def filter_records(
    records: Iterable[AttendanceRecord],
    start_date: str,
    end_date: str,
    session_type: Optional[str] = None,
    member_ids: Optional[Iterable[str]] = None,
) -> list[AttendanceRecord]:
    subset = set(member_ids) if member_ids is not None else None
    return [
        r
        for r in records
        if start_date <= r.date <= end_date
        and (not session_type or r.session_type == session_type)
        and (subset is None or r.member_id in subset)
    ]


def compute_overview(
    records: Sequence[AttendanceRecord],
    total_active_members: int,
    period: Period | str,
) -> Overview:
    """Headline counts.

    Weekly periods count each member once (present if any session was
    attended) and use the active roster size as a floor for the denominator,
    so members with no records still count as absent. Other periods tally
    raw records.
    """
    if Period(period) == Period.WEEKLY:
        present_members = {r.member_id for r in records if r.present}
        all_members = {r.member_id for r in records}
        present_count = len(present_members)
        total = max(len(all_members), total_active_members)
        absent_count = total - present_count
    else:
        present_count = sum(1 for r in records if r.present)
        absent_count = sum(1 for r in records if not r.present)
        total = present_count + absent_count

    return Overview(
        present_count=present_count,
        absent_count=absent_count,
        total_records=total,
        attendance_rate=percentage(present_count, total),
    )


def compute_weekly_trend(
    current_rate: float,
    previous_records: Sequence[AttendanceRecord],
    total_active_members: int,
) -> float:
    """Change in rate against the previous week.

    The previous week's rate is unique present members over the active
    roster, without the floor applied in `compute_overview`.
    """
    if not previous_records:
        return 0.0
    present_members = {r.member_id for r in previous_records if r.present}
    return current_rate - percentage(len(present_members), total_active_members)


def compute_date_type_breakdown(records: Iterable[AttendanceRecord]) -> list[DateTypeStat]:
    groups: dict[tuple[str, str], Tally] = {}
    for r in records:
        groups.setdefault(r.session_key, Tally()).add(r.present)

    stats = [
        DateTypeStat(
            date=day,
            session_type=session_type,
            present=t.present,
            absent=t.absent,
            total=t.total,
            percentage=t.percentage,
        )
        for (day, session_type), t in groups.items()
    ]
    # ISO dates order correctly as strings.
    stats.sort(key=lambda s: s.date)
    return stats


def compute_trend_by_service_category(records: Iterable[AttendanceRecord]) -> list[TrendPoint]:
    by_date: dict[str, dict[str, Tally]] = {}
    for r in records:
        categories = by_date.setdefault(r.date, {})
        category = CATEGORY_BY_SESSION_TYPE.get(r.session_type)
        if category is not None:
            categories.setdefault(category, Tally()).add(r.present)

    points = [
        TrendPoint(
            date=day,
            categories={c: categories.get(c, Tally()).percentage for c in SERVICE_CATEGORIES},
        )
        for day, categories in by_date.items()
    ]
    points.sort(key=lambda p: p.date)
    return points


def compute_type_breakdown(records: Iterable[AttendanceRecord]) -> list[TypeStat]:
    groups: dict[str, Tally] = {}
    for r in records:
        groups.setdefault(r.session_type, Tally()).add(r.present)

    return [
        TypeStat(type=session_type, present=t.present, absent=t.absent, total=t.total, percentage=t.percentage)
        for session_type, t in groups.items()
    ]


def compute_top_attendees(
    records: Iterable[AttendanceRecord],
    members: Iterable[Member],
    limit: int = DEFAULT_TOP_ATTENDEES,
) -> list[TopAttendee]:
    """Members ranked by attendance rate, highest first.

    Equal rates keep their first-seen order. Records of members missing from
    `members` are dropped.
    """
    tallies: dict[str, Tally] = {}
    for r in records:
        tallies.setdefault(r.member_id, Tally()).add(r.present)

    roster = {m.id: m for m in members}
    attendees: list[TopAttendee] = []
    for member_id, t in tallies.items():
        m = roster.get(member_id)
        if m is None:
            continue
        attendees.append(
            TopAttendee(
                id=m.id,
                first_name=m.first_name,
                last_name=m.last_name,
                member_number=m.member_number,
                photo_url=m.photo_url,
                attendance_rate=t.percentage,
                total_sessions=t.total,
                present_count=t.present,
            )
        )
    attendees.sort(key=lambda a: a.attendance_rate, reverse=True)
    return attendees[: max(limit, 0)]


def _member_records_newest_first(records: Iterable[AttendanceRecord], member_id: str) -> list[AttendanceRecord]:
    own = [r for r in records if r.member_id == member_id]
    own.sort(key=lambda r: r.date, reverse=True)
    return own


def compute_member_streak(records: Iterable[AttendanceRecord], member_id: str) -> Streak:
    ordered = _member_records_newest_first(records, member_id)
    if not ordered:
        return Streak()

    longest = 0
    run = 0
    run_value = ordered[0].present
    for r in ordered:
        if r.present == run_value:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
            run_value = r.present
    longest = max(longest, run)

    current_value = ordered[0].present
    current = 0
    for r in ordered:
        if r.present != current_value:
            break
        current += 1

    return Streak(current=current, longest=longest, type=PresenceType.of(current_value))


def compute_monthly_rollup(records: Iterable[AttendanceRecord], member_id: str) -> list[MonthlyStat]:
    months: dict[str, Tally] = {}
    for r in records:
        if r.member_id == member_id:
            months.setdefault(r.month, Tally()).add(r.present)

    return [
        MonthlyStat(month=month, total=t.total, present=t.present, rate=t.percentage)
        for month, t in sorted(months.items())
    ]


def compute_member_summary(records: Sequence[AttendanceRecord], member_id: str) -> MemberSummary:
    own = [r for r in records if r.member_id == member_id]
    present = sum(1 for r in own if r.present)
    return MemberSummary(
        member_id=member_id,
        total_sessions=len(own),
        present_count=present,
        absent_count=len(own) - present,
        attendance_rate=percentage(present, len(own)),
        streak=compute_member_streak(own, member_id),
        monthly_stats=compute_monthly_rollup(own, member_id),
    )
