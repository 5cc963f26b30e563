from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional, Sequence

from church_attendance.attendance.model import AttendanceEntry, AttendanceRecord
from church_attendance.checkin.model import QRSession
from church_attendance.core.enums import MemberStatus
from church_attendance.core.exceptions import DataFetchError
from church_attendance.members.model import Member


def rec(member_id: str, date: str, session_type: str = "sunday_service", present: bool = True, **kw) -> AttendanceRecord:
    return AttendanceRecord(member_id=member_id, date=date, session_type=session_type, present=present, **kw)


def member(member_id: str, *, status: MemberStatus = MemberStatus.ACTIVE, phone: Optional[str] = None) -> Member:
    return Member(
        id=member_id,
        first_name=f"First{member_id}",
        last_name=f"Last{member_id}",
        member_number=f"M-{member_id}",
        status=status,
        phone=phone,
    )


class InMemoryMembers:
    def __init__(self, members: Iterable[Member] = ()):
        self._by_id = {m.id: m for m in members}
        self.phone_queries: list[str] = []

    def get_by_id(self, member_id: str) -> Optional[Member]:
        return self._by_id.get(member_id)

    def get_by_ids(self, member_ids: Iterable[str]) -> Sequence[Member]:
        return [self._by_id[i] for i in member_ids if i in self._by_id]

    def list_active_ids(self, member_ids: Optional[Iterable[str]] = None) -> Sequence[str]:
        subset = set(member_ids) if member_ids is not None else None
        return [m.id for m in self._by_id.values() if m.is_active and (subset is None or m.id in subset)]

    def _active(self, pred) -> Optional[Member]:
        return next((m for m in self._by_id.values() if m.is_active and pred(m)), None)

    def find_active_by_id(self, member_id: str) -> Optional[Member]:
        return self._active(lambda m: m.id == member_id)

    def find_active_by_number(self, member_number: str) -> Optional[Member]:
        return self._active(lambda m: m.member_number == member_number)

    def find_active_by_phone(self, phone: str) -> Optional[Member]:
        self.phone_queries.append(phone)
        return self._active(lambda m: m.phone == phone)

    def find_active_by_phone_suffix(self, suffix: str) -> Optional[Member]:
        self.phone_queries.append(f"%{suffix}")
        return self._active(lambda m: bool(m.phone) and m.phone.endswith(suffix))


class InMemoryDepartments:
    def __init__(self, members_by_department: Optional[dict[str, list[str]]] = None):
        self._members = members_by_department or {}

    def active_member_ids(self, department_id: str) -> Sequence[str]:
        return list(self._members.get(department_id, []))


class InMemoryAttendance:
    def __init__(self, records: Iterable[AttendanceRecord] = ()):
        self.records: list[AttendanceRecord] = []
        self._next_id = 1
        self.failing_ranges: set[tuple[str, str]] = set()
        for r in records:
            self._store(r)

    def _store(self, r: AttendanceRecord) -> AttendanceRecord:
        stored = AttendanceRecord(
            id=self._next_id,
            member_id=r.member_id,
            date=r.date,
            session_type=r.session_type,
            present=r.present,
            notes=r.notes,
            recorded_by=r.recorded_by,
            event_id=r.event_id,
            created_at=r.created_at or datetime(2026, 1, 1, 0, 0, self._next_id % 60),
        )
        self._next_id += 1
        self.records.append(stored)
        return stored

    def list_in_range(self, *, start_date, end_date, session_type=None, member_ids=None):
        if (start_date, end_date) in self.failing_ranges:
            raise DataFetchError("store unavailable")
        subset = set(member_ids) if member_ids is not None else None
        return [
            r
            for r in self.records
            if start_date <= r.date <= end_date
            and (not session_type or r.session_type == session_type)
            and (subset is None or r.member_id in subset)
        ]

    def list_for_member(self, member_id, *, session_type=None):
        return [
            r for r in self.records if r.member_id == member_id and (not session_type or r.session_type == session_type)
        ]

    def list_for_session(self, *, date, session_type, event_id=None, present_only=False):
        rows = [
            r
            for r in self.records
            if r.date == date
            and r.session_type == session_type
            and (not event_id or r.event_id == event_id)
            and (not present_only or r.present)
        ]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return rows

    def replace_session(self, *, date, session_type, entries: Sequence[AttendanceEntry], event_id=None, recorded_by=None):
        ids = {e.member_id for e in entries}
        self.records = [
            r
            for r in self.records
            if not (
                r.date == date
                and r.session_type == session_type
                and ((not event_id or r.event_id == event_id) or r.member_id in ids)
            )
        ]
        return [
            self._store(
                AttendanceRecord(
                    member_id=e.member_id,
                    date=date,
                    session_type=session_type,
                    present=e.present,
                    notes=e.notes,
                    event_id=event_id,
                    recorded_by=recorded_by,
                )
            )
            for e in entries
        ]

    def get_for_member_session(self, *, member_id, date, session_type):
        return next(
            (r for r in self.records if r.member_id == member_id and r.date == date and r.session_type == session_type),
            None,
        )

    def mark_present(self, record_id, *, notes=None):
        for i, r in enumerate(self.records):
            if r.id == record_id:
                updated = AttendanceRecord(
                    id=r.id,
                    member_id=r.member_id,
                    date=r.date,
                    session_type=r.session_type,
                    present=True,
                    notes=notes,
                    event_id=r.event_id,
                    recorded_by=None,
                    created_at=r.created_at,
                )
                self.records[i] = updated
                return updated
        return None

    def create(self, *, member_id, date, session_type, present, notes=None, event_id=None, recorded_by=None):
        return self._store(
            AttendanceRecord(
                member_id=member_id,
                date=date,
                session_type=session_type,
                present=present,
                notes=notes,
                event_id=event_id,
                recorded_by=recorded_by,
            )
        )


class InMemoryQRSessions:
    def __init__(self, sessions: Iterable[QRSession] = ()):
        self.sessions: dict[str, QRSession] = {s.id: s for s in sessions}
        self.fail_writes = False

    def _check(self):
        if self.fail_writes:
            raise DataFetchError("session table unavailable")

    def create(self, session: QRSession) -> QRSession:
        self._check()
        self.sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Optional[QRSession]:
        return self.sessions.get(session_id)

    def increment_check_ins(self, session_id: str) -> bool:
        self._check()
        s = self.sessions.get(session_id)
        if not s:
            return False
        self.sessions[session_id] = replace(s, check_ins=s.check_ins + 1)
        return True

    def upsert_check_ins(self, session: QRSession) -> None:
        self._check()
        existing = self.sessions.get(session.id)
        self.sessions[session.id] = replace(existing, check_ins=session.check_ins) if existing else session
