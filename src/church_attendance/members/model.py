from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import MemberStatus


@dataclass(frozen=True)
class Member:
    """Roster entry used for denominators and identity joins.

    Note: Plain data object (no DB access code here).
    """

    id: str
    first_name: str
    last_name: str
    member_number: Optional[str]
    status: MemberStatus
    photo_url: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "member_number": self.member_number,
            "status": self.status.value,
            "photo_url": self.photo_url,
            "phone": self.phone,
        }
