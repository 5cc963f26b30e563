from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def default_session_name(session_type: str, date: str) -> str:
    return f"{session_type.replace('_', ' ', 1)} - {date}"


@dataclass(frozen=True)
class QRSession:
    """A time-boxed window during which members can check themselves in.

    `expires_at` is always timezone-aware UTC.
    """

    id: str
    date: str
    session_type: str
    session_name: str
    expires_at: datetime
    created_by: Optional[str] = None
    event_id: Optional[str] = None
    department_id: Optional[str] = None
    is_active: bool = True
    check_ins: int = 0

    def is_open(self, now: datetime) -> bool:
        return self.is_active and now <= self.expires_at

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "attendance_type": self.session_type,
            "event_id": self.event_id,
            "department_id": self.department_id,
            "session_name": self.session_name,
            "created_by": self.created_by,
            "expires_at": self.expires_at.isoformat(),
            "is_active": self.is_active,
            "check_ins": self.check_ins,
        }
