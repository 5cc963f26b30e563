from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import DepartmentMembershipRepository


class MySQLDepartmentMembershipRepository(DepartmentMembershipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def active_member_ids(self, department_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT member_id FROM department_members WHERE department_id=%s AND is_active=1",
                (department_id,),
            )
            return [str(r["member_id"]) for r in fetchall(cur)]
