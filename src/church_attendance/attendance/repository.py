from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceRecord


class AttendanceRepository(Protocol):
    def list_in_range(
        self,
        *,
        start_date: str,
        end_date: str,
        session_type: Optional[str] = None,
        member_ids: Optional[Iterable[str]] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_member(self, member_id: str, *, session_type: Optional[str] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_session(
        self,
        *,
        date: str,
        session_type: str,
        event_id: Optional[str] = None,
        present_only: bool = False,
    ) -> Sequence[AttendanceRecord]:
        """Records of one session, newest first."""

        raise NotImplementedError

    def replace_session(
        self,
        *,
        date: str,
        session_type: str,
        entries: Sequence[AttendanceEntry],
        event_id: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Overwrite every record of a session with `entries` (last write wins)."""

        raise NotImplementedError

    def get_for_member_session(self, *, member_id: str, date: str, session_type: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def mark_present(self, record_id: int, *, notes: Optional[str] = None) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        member_id: str,
        date: str,
        session_type: str,
        present: bool,
        notes: Optional[str] = None,
        event_id: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> AttendanceRecord:
        raise NotImplementedError
