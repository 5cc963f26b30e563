from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence

import pytz

from ..checkin.model import QRSession, default_session_name
from ..checkin.repository import QRSessionRepository
from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_str, require_non_empty
from ..core.exceptions import DataFetchError, NotFoundError, ValidationError
from ..members.repository import MemberRepository
from ..stats.engine import compute_member_summary
from ..stats.model import MemberSummary
from .model import AttendanceEntry, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# Roster sweeps leave a session record open for a day.
ROSTER_SESSION_TTL = timedelta(hours=24)


def roster_session_id(date: str, session_type: str, event_id: Optional[str]) -> str:
    return f"{date}_{session_type}_{event_id or 'regular'}"


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        members: MemberRepository,
        qr_sessions: QRSessionRepository | None = None,
    ):
        self._attendance = attendance
        self._members = members
        self._qr_sessions = qr_sessions

    @staticmethod
    def parse_entries(raw_records: Any) -> list[AttendanceEntry]:
        if not isinstance(raw_records, list) or not raw_records:
            raise ValidationError("attendanceRecords must be a non-empty array")

        entries = []
        for raw in raw_records:
            if not isinstance(raw, dict) or not raw.get("member_id") or not isinstance(raw.get("present"), bool):
                raise ValidationError("Each attendance record must have member_id and present fields")
            entries.append(
                AttendanceEntry(
                    member_id=str(raw["member_id"]),
                    present=raw["present"],
                    notes=optional_str(raw.get("notes")),
                )
            )
        return entries

    def save_session(
        self,
        entries: Sequence[AttendanceEntry],
        *,
        date: str,
        session_type: str,
        event_id: Optional[str] = None,
        recorded_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        """Save a roster sweep, replacing whatever the session held before."""

        date = parse_iso_date(require_non_empty(date, "date")).isoformat()
        session_type = require_non_empty(session_type, "attendance_type")
        if not entries:
            raise ValidationError("attendanceRecords must be a non-empty array")

        # One row per member; a later entry for the same member wins.
        latest: dict[str, AttendanceEntry] = {}
        for e in entries:
            latest[e.member_id] = e

        saved = self._attendance.replace_session(
            date=date,
            session_type=session_type,
            entries=list(latest.values()),
            event_id=event_id,
            recorded_by=recorded_by,
        )
        logger.info("Saved %d attendance records for %s %s", len(saved), date, session_type)

        self._sync_roster_session(
            date=date,
            session_type=session_type,
            event_id=event_id,
            recorded_by=recorded_by,
            present_count=sum(1 for e in latest.values() if e.present),
            now=now,
        )
        return saved

    def _sync_roster_session(
        self,
        *,
        date: str,
        session_type: str,
        event_id: Optional[str],
        recorded_by: Optional[str],
        present_count: int,
        now: Optional[datetime],
    ) -> None:
        if self._qr_sessions is None:
            return

        now = now or datetime.now(pytz.UTC)
        session = QRSession(
            id=roster_session_id(date, session_type, event_id),
            date=date,
            session_type=session_type,
            event_id=event_id,
            session_name=default_session_name(session_type, date),
            created_by=recorded_by,
            expires_at=now + ROSTER_SESSION_TTL,
            check_ins=present_count,
        )
        try:
            self._qr_sessions.upsert_check_ins(session)
        except DataFetchError:
            # The attendance rows are already saved.
            logger.warning("Could not update session record %s", session.id, exc_info=True)

    def list_records(
        self,
        *,
        member_id: Optional[str] = None,
        date: Optional[str] = None,
        session_type: Optional[str] = None,
        event_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        if not member_id and not (date and session_type):
            raise ValidationError("Either member_id or both date and type are required")

        if member_id:
            records = self._attendance.list_for_member(member_id, session_type=session_type)
            if date:
                records = [r for r in records if r.date == date]
            if event_id:
                records = [r for r in records if r.event_id == event_id]
            return records

        parse_iso_date(date)
        return self._attendance.list_for_session(date=date, session_type=session_type, event_id=event_id)

    def member_summary(self, member_id: str, *, session_type: Optional[str] = None) -> MemberSummary:
        if not self._members.get_by_id(member_id):
            raise NotFoundError("Member not found")

        records = self._attendance.list_for_member(member_id, session_type=session_type)
        return compute_member_summary(records, member_id)
