from __future__ import annotations

from datetime import date as date_type
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceEntry, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, member_id, date, attendance_type, present, notes, event_id, recorded_by, created_at"


def _iso(value) -> str:
    if isinstance(value, date_type):
        return value.isoformat()
    return str(value)[:10]


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        member_id=str(r["member_id"]),
        date=_iso(r["date"]),
        session_type=r["attendance_type"],
        present=bool(r["present"]),
        notes=r.get("notes"),
        event_id=r.get("event_id"),
        recorded_by=r.get("recorded_by"),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_in_range(
        self,
        *,
        start_date: str,
        end_date: str,
        session_type: Optional[str] = None,
        member_ids: Optional[Iterable[str]] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if session_type:
            clauses.append("attendance_type=%s")
            params.append(session_type)
        if member_ids is not None:
            ids = list(member_ids)
            if not ids:
                return []
            clauses.append(f"member_id IN ({in_clause(ids)})")
            params.extend(ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE {where} ORDER BY date ASC", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_member(self, member_id: str, *, session_type: Optional[str] = None) -> Sequence[AttendanceRecord]:
        clauses = ["member_id=%s"]
        params: list[object] = [member_id]
        if session_type:
            clauses.append("attendance_type=%s")
            params.append(session_type)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE {' AND '.join(clauses)} ORDER BY created_at DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_session(
        self,
        *,
        date: str,
        session_type: str,
        event_id: Optional[str] = None,
        present_only: bool = False,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["date=%s", "attendance_type=%s"]
        params: list[object] = [date, session_type]
        if event_id:
            clauses.append("event_id=%s")
            params.append(event_id)
        if present_only:
            clauses.append("present=1")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE {' AND '.join(clauses)} ORDER BY created_at DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def replace_session(
        self,
        *,
        date: str,
        session_type: str,
        entries: Sequence[AttendanceEntry],
        event_id: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        delete_sql = "DELETE FROM attendance WHERE date=%s AND attendance_type=%s"
        delete_params: list[object] = [date, session_type]
        if event_id:
            delete_sql += " AND event_id=%s"
            delete_params.append(event_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(delete_sql, tuple(delete_params))
            # Member/date/type is unique; a row left by another event is overwritten.
            cur.executemany(
                """
                INSERT INTO attendance(member_id, date, attendance_type, present, notes, event_id, recorded_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    present=VALUES(present), notes=VALUES(notes),
                    event_id=VALUES(event_id), recorded_by=VALUES(recorded_by)
                """,
                [
                    (e.member_id, date, session_type, int(e.present), e.notes, event_id, recorded_by)
                    for e in entries
                ],
            )
            ids = [e.member_id for e in entries]
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE date=%s AND attendance_type=%s AND member_id IN ({in_clause(ids)})
                """,
                (date, session_type, *ids),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_member_session(self, *, member_id: str, date: str, session_type: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE member_id=%s AND date=%s AND attendance_type=%s",
                (member_id, date, session_type),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def mark_present(self, record_id: int, *, notes: Optional[str] = None) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET present=1, notes=%s, recorded_by=NULL WHERE id=%s",
                (notes, int(record_id)),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(member_id, date, attendance_type, present, notes, event_id, recorded_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (member_id, date, session_type, int(present), notes, event_id, recorded_by),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (int(cur.lastrowid),))
            return _to_record(fetchone(cur))
