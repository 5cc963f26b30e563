from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one member's presence/absence for one session.

    `date` stays an ISO `YYYY-MM-DD` string so ordering is a plain string
    compare and never goes through timezone-sensitive parsing.
    """

    member_id: str
    date: str
    session_type: str
    present: bool
    notes: Optional[str] = None
    recorded_by: Optional[str] = None
    event_id: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def session_key(self) -> tuple[str, str]:
        return (self.date, self.session_type)

    @property
    def month(self) -> str:
        return self.date[:7]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "member_id": self.member_id,
            "date": self.date,
            "attendance_type": self.session_type,
            "present": self.present,
            "notes": self.notes,
            "event_id": self.event_id,
            "recorded_by": self.recorded_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class AttendanceEntry:
    """Input row of a roster sweep before it is bound to a session."""

    member_id: str
    present: bool
    notes: Optional[str] = None
