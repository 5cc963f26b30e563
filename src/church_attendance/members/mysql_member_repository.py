from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import MemberStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Member
from .repository import MemberRepository

_COLUMNS = "id, first_name, last_name, member_number, status, photo_url, phone"


def _to_member(r: dict) -> Member:
    return Member(
        id=str(r["id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        member_number=r.get("member_number"),
        status=MemberStatus(r["status"]),
        photo_url=r.get("photo_url"),
        phone=r.get("phone"),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, member_id: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE id=%s", (member_id,))
            r = fetchone(cur)
            return _to_member(r) if r else None

    def get_by_ids(self, member_ids: Iterable[str]) -> Sequence[Member]:
        ids = list(dict.fromkeys(member_ids))
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE id IN ({in_clause(ids)})", tuple(ids))
            return [_to_member(r) for r in fetchall(cur)]

    def list_active_ids(self, member_ids: Optional[Iterable[str]] = None) -> Sequence[str]:
        clauses = ["status=%s"]
        params: list[object] = [MemberStatus.ACTIVE.value]
        if member_ids is not None:
            ids = list(member_ids)
            if not ids:
                return []
            clauses.append(f"id IN ({in_clause(ids)})")
            params.extend(ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT id FROM members WHERE {' AND '.join(clauses)}", tuple(params))
            return [str(r["id"]) for r in fetchall(cur)]

    def _find_active(self, column: str, value: str, *, like: bool = False) -> Optional[Member]:
        op = "LIKE" if like else "="
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM members WHERE {column} {op} %s AND status=%s LIMIT 1",
                (value, MemberStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return _to_member(r) if r else None

    def find_active_by_id(self, member_id: str) -> Optional[Member]:
        return self._find_active("id", member_id)

    def find_active_by_number(self, member_number: str) -> Optional[Member]:
        return self._find_active("member_number", member_number)

    def find_active_by_phone(self, phone: str) -> Optional[Member]:
        return self._find_active("phone", phone)

    def find_active_by_phone_suffix(self, suffix: str) -> Optional[Member]:
        return self._find_active("phone", f"%{suffix}", like=True)
