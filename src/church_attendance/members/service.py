from __future__ import annotations

import re
from typing import Optional

from ..core.constants import PHONE_SUFFIX_DIGITS
from .model import Member
from .repository import MemberRepository

_PHONE_NOISE = re.compile(r"[\s\-+]")


class MemberLookupService:
    """Resolve an active member from whatever a QR check-in form supplies."""

    def __init__(self, members: MemberRepository):
        self._members = members

    def find_active(
        self,
        *,
        member_id: Optional[str] = None,
        phone_number: Optional[str] = None,
        member_number: Optional[str] = None,
    ) -> Optional[Member]:
        if member_id:
            return self._members.find_active_by_id(member_id)
        if phone_number:
            return self._find_by_phone(phone_number)
        if member_number:
            return self._members.find_active_by_number(member_number)
        return None

    def _find_by_phone(self, phone_number: str) -> Optional[Member]:
        member = self._members.find_active_by_phone(phone_number)
        if member:
            return member

        clean = _PHONE_NOISE.sub("", phone_number)
        if clean != phone_number:
            member = self._members.find_active_by_phone(clean)
            if member:
                return member

        # Local numbers are stored with and without country prefix.
        if len(clean) >= PHONE_SUFFIX_DIGITS:
            return self._members.find_active_by_phone_suffix(clean[-PHONE_SUFFIX_DIGITS:])
        return None
