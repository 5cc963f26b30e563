from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

import pytz

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_iso_date, to_utc
from ..common.validators import optional_str, require_non_empty
from ..core.constants import DEFAULT_QR_SESSION_HOURS, QR_CHECKIN_NOTE, RECENT_CHECKINS_LIMIT
from ..core.exceptions import DataFetchError, NotFoundError, SessionExpiredError, ValidationError
from ..members.model import Member
from ..members.service import MemberLookupService
from .model import QRSession, default_session_name
from .qr import qr_data_url
from .repository import QRSessionRepository

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def new_session_id(now: datetime) -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"qr_{int(now.timestamp() * 1000)}_{suffix}"


@dataclass(frozen=True)
class CreatedSession:
    session: QRSession
    check_in_url: str
    qr_code: str

    def to_dict(self) -> dict:
        return {
            "session_id": self.session.id,
            "qr_code": self.qr_code,
            "check_in_url": self.check_in_url,
            "session_info": self.session.to_dict(),
            "expires_at": self.session.expires_at.isoformat(),
        }


@dataclass(frozen=True)
class CheckinResult:
    member: Member
    attendance_id: Optional[int]
    already_present: bool = False
    checked_in_at: Optional[datetime] = None

    @property
    def message(self) -> str:
        if self.already_present:
            return f"Welcome back! {self.member.full_name} was already marked present."
        return f"Welcome! {self.member.full_name} has been checked in successfully."

    def to_dict(self) -> dict:
        data = {
            "member": self.member.to_dict(),
            "attendance_id": self.attendance_id,
        }
        if self.already_present:
            data["already_present"] = True
        else:
            data["checked_in_at"] = self.checked_in_at.isoformat() if self.checked_in_at else None
        return data


class CheckinService:
    """QR attendance sessions: creation, member self check-in and live counts."""

    def __init__(
        self,
        sessions: QRSessionRepository,
        attendance: AttendanceRepository,
        member_lookup: MemberLookupService,
        *,
        site_url: str = "http://localhost:5000",
        session_hours: int = DEFAULT_QR_SESSION_HOURS,
        clock: Callable[[], datetime] | None = None,
    ):
        self._sessions = sessions
        self._attendance = attendance
        self._member_lookup = member_lookup
        self._site_url = site_url.rstrip("/")
        self._session_ttl = timedelta(hours=int(session_hours))
        self._clock = clock or (lambda: datetime.now(pytz.UTC))

    def _now(self, now: Optional[datetime]) -> datetime:
        return to_utc(now or self._clock())

    def check_in_url(self, session_id: str) -> str:
        return f"{self._site_url}/attendance/qr-checkin/{session_id}"

    def create_session(
        self,
        *,
        date: str,
        session_type: str,
        recorded_by: str,
        event_id: Optional[str] = None,
        department_id: Optional[str] = None,
        session_name: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> CreatedSession:
        date = require_non_empty(date, "date")
        session_type = require_non_empty(session_type, "attendance_type")
        recorded_by = require_non_empty(recorded_by, "recorded_by")
        parse_iso_date(date)

        now = self._now(now)
        session = QRSession(
            id=new_session_id(now),
            date=date,
            session_type=session_type,
            event_id=optional_str(event_id),
            department_id=optional_str(department_id),
            session_name=optional_str(session_name) or default_session_name(session_type, date),
            created_by=recorded_by,
            expires_at=to_utc(expires_at) if expires_at else now + self._session_ttl,
        )
        self._sessions.create(session)
        logger.info("QR session %s created for %s %s", session.id, date, session_type)

        url = self.check_in_url(session.id)
        return CreatedSession(session=session, check_in_url=url, qr_code=qr_data_url(url))

    def get_active_session(self, session_id: str, *, now: Optional[datetime] = None) -> QRSession:
        session_id = require_non_empty(session_id, "Session ID")
        session = self._sessions.get(session_id)
        if not session:
            raise NotFoundError("Session not found or expired")
        if not session.is_open(self._now(now)):
            raise SessionExpiredError("Session has expired")
        return session

    def check_in(
        self,
        session_id: str,
        *,
        member_id: Optional[str] = None,
        phone_number: Optional[str] = None,
        member_number: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CheckinResult:
        session = self.get_active_session(session_id, now=now)

        member = self._member_lookup.find_active(
            member_id=optional_str(member_id),
            phone_number=optional_str(phone_number),
            member_number=optional_str(member_number),
        )
        if not member:
            logger.info(
                "QR check-in lookup failed session=%s member_id=%s phone=%s member_number=%s",
                session.id, member_id, phone_number, member_number,
            )
            raise NotFoundError(self._member_not_found_message(phone_number, member_number))

        existing = self._attendance.get_for_member_session(
            member_id=member.id, date=session.date, session_type=session.session_type
        )
        if existing and existing.present:
            return CheckinResult(member=member, attendance_id=existing.id, already_present=True)

        if existing:
            updated = self._attendance.mark_present(existing.id, notes=QR_CHECKIN_NOTE)
            if not updated:
                raise NotFoundError("Attendance record disappeared during check-in")
            return CheckinResult(member=member, attendance_id=updated.id, checked_in_at=self._now(now))

        created = self._attendance.create(
            member_id=member.id,
            date=session.date,
            session_type=session.session_type,
            present=True,
            notes=QR_CHECKIN_NOTE,
            event_id=session.event_id,
        )
        try:
            self._sessions.increment_check_ins(session.id)
        except DataFetchError:
            logger.warning("Could not bump check-in count for session %s", session.id, exc_info=True)

        return CheckinResult(
            member=member,
            attendance_id=created.id,
            checked_in_at=created.created_at or self._now(now),
        )

    @staticmethod
    def _member_not_found_message(phone_number: Optional[str], member_number: Optional[str]) -> str:
        message = "Member not found or inactive."
        if phone_number:
            message += f" Phone number: {phone_number}"
        elif member_number:
            message += f" Member number: {member_number}"
        return message + " Please contact church administration."

    def session_stats(self, session_id: str, *, now: Optional[datetime] = None) -> dict:
        session_id = require_non_empty(session_id, "Session ID")
        session = self._sessions.get(session_id)
        if not session:
            raise NotFoundError("Session not found")

        checked_in: list[AttendanceRecord] = list(
            self._attendance.list_for_session(date=session.date, session_type=session.session_type, present_only=True)
        )
        qr_checkins = [r for r in checked_in if r.notes and "QR code" in r.notes]

        return {
            "session": session.to_dict(),
            "total_checkins": len(checked_in),
            "qr_checkins": len(qr_checkins),
            "manual_checkins": len(checked_in) - len(qr_checkins),
            "recent_checkins": [r.to_dict() for r in checked_in[:RECENT_CHECKINS_LIMIT]],
            "session_status": "active" if session.is_open(self._now(now)) else "expired",
        }

    @staticmethod
    def parse_expires_at(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        try:
            return to_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
        except ValueError as e:
            raise ValidationError(f"Invalid expires_at {value!r}") from e
