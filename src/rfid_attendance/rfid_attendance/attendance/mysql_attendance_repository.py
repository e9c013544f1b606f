from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, in_placeholders
from .model import AttendanceEvent
from .repository import AttendanceRepository

_SELECT = """
    SELECT
        a.session_id, a.student_id, a.status, a.timestamp,
        st.name AS student_name, st.student_number, st.program
    FROM attendance a
    LEFT JOIN students st ON st.id = a.student_id
"""


def _to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        session_id=str(r["session_id"]),
        student_id=str(r["student_id"]),
        status=AttendanceStatus(r["status"]),
        timestamp=r["timestamp"],
        student_name=r.get("student_name"),
        student_number=r.get("student_number"),
        program=r.get("program"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_session(self, session_id: str) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.session_id=%s ORDER BY a.timestamp ASC", (session_id,))
            return [_to_event(r) for r in fetchall(cur)]

    def list_for_sessions(self, session_ids: Sequence[str]) -> Sequence[AttendanceEvent]:
        ids = list(session_ids)
        if not ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE a.session_id IN ({in_placeholders(ids)}) ORDER BY a.timestamp ASC",
                tuple(ids),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def count_since(self, since: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance WHERE timestamp >= %s", (since,))
            return fetch_count(cur)
