from __future__ import annotations

from datetime import date as date_type
from typing import Optional

from ..common.datetime_utils import to_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import QRSession
from .repository import QRSessionRepository

_COLUMNS = (
    "id, date, attendance_type, event_id, department_id, session_name, "
    "created_by, expires_at, is_active, check_ins"
)


def _to_session(r: dict) -> QRSession:
    day = r["date"]
    return QRSession(
        id=r["id"],
        date=day.isoformat() if isinstance(day, date_type) else str(day),
        session_type=r["attendance_type"],
        event_id=r.get("event_id"),
        department_id=r.get("department_id"),
        session_name=r["session_name"],
        created_by=r.get("created_by"),
        # Stored as naive UTC.
        expires_at=to_utc(r["expires_at"]),
        is_active=bool(r["is_active"]),
        check_ins=int(r.get("check_ins") or 0),
    )


def _params(s: QRSession) -> tuple:
    return (
        s.id,
        s.date,
        s.session_type,
        s.event_id,
        s.department_id,
        s.session_name,
        s.created_by,
        to_utc(s.expires_at).replace(tzinfo=None),
        int(s.is_active),
        int(s.check_ins),
    )


class MySQLQRSessionRepository(QRSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, session: QRSession) -> QRSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO qr_attendance_sessions({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)",
                _params(session),
            )
        return session

    def get(self, session_id: str) -> Optional[QRSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM qr_attendance_sessions WHERE id=%s", (session_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def increment_check_ins(self, session_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE qr_attendance_sessions SET check_ins = check_ins + 1 WHERE id=%s",
                (session_id,),
            )
            return cur.rowcount > 0

    def upsert_check_ins(self, session: QRSession) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO qr_attendance_sessions({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE check_ins=VALUES(check_ins)
                """,
                _params(session),
            )
