from __future__ import annotations

from church_attendance.core.enums import MemberStatus
from church_attendance.members.service import MemberLookupService
from fakes import InMemoryMembers, member


def test_lookup_prefers_member_id():
    members = InMemoryMembers([member("a", phone="0712345678"), member("b")])

    found = MemberLookupService(members).find_active(member_id="b", phone_number="0712345678")

    assert found.id == "b"
    assert members.phone_queries == []


def test_lookup_by_exact_phone():
    members = InMemoryMembers([member("a", phone="0712 345 678")])

    assert MemberLookupService(members).find_active(phone_number="0712 345 678").id == "a"
    assert members.phone_queries == ["0712 345 678"]


def test_lookup_by_cleaned_phone():
    members = InMemoryMembers([member("a", phone="0712345678")])

    found = MemberLookupService(members).find_active(phone_number="0712-345 678")

    assert found.id == "a"
    assert members.phone_queries == ["0712-345 678", "0712345678"]


def test_lookup_falls_back_to_last_nine_digits():
    members = InMemoryMembers([member("a", phone="0712345678")])

    found = MemberLookupService(members).find_active(phone_number="+254 712 345 678")

    assert found.id == "a"
    assert members.phone_queries[-1] == "%712345678"


def test_short_numbers_skip_suffix_match():
    members = InMemoryMembers([member("a", phone="0712345678")])

    assert MemberLookupService(members).find_active(phone_number="5678") is None
    assert members.phone_queries == ["5678"]


def test_lookup_by_member_number_ignores_inactive():
    members = InMemoryMembers([member("a", status=MemberStatus.INACTIVE)])
    lookup = MemberLookupService(members)

    assert lookup.find_active(member_number="M-a") is None
    assert lookup.find_active(member_id="a") is None


def test_lookup_without_identifiers():
    assert MemberLookupService(InMemoryMembers([member("a")])).find_active() is None
