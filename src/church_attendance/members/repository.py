from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Member


class MemberRepository(Protocol):
    """Repository interface for Member.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, member_id: str) -> Optional[Member]:
        raise NotImplementedError

    def get_by_ids(self, member_ids: Iterable[str]) -> Sequence[Member]:
        raise NotImplementedError

    def list_active_ids(self, member_ids: Optional[Iterable[str]] = None) -> Sequence[str]:
        """Active member ids, optionally restricted to a subset."""

        raise NotImplementedError

    def find_active_by_id(self, member_id: str) -> Optional[Member]:
        raise NotImplementedError

    def find_active_by_number(self, member_number: str) -> Optional[Member]:
        raise NotImplementedError

    def find_active_by_phone(self, phone: str) -> Optional[Member]:
        raise NotImplementedError

    def find_active_by_phone_suffix(self, suffix: str) -> Optional[Member]:
        raise NotImplementedError


class DepartmentMembershipRepository(Protocol):
    def active_member_ids(self, department_id: str) -> Sequence[str]:
        raise NotImplementedError
