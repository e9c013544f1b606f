from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_SESSION_LIST_LIMIT
from ..core.enums import SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .model import SessionRecord
from .repository import SessionRepository

_SELECT = """
    SELECT
        s.id, s.subject, s.start_time, s.end_time, s.status, s.late_threshold_minutes, s.classroom_id,
        p.name AS professor_name,
        c.name AS classroom_name, c.building,
        (SELECT sr.course_id FROM session_roster sr WHERE sr.session_id = s.id LIMIT 1) AS course_id
    FROM sessions s
    LEFT JOIN professors p ON p.id = s.professor_id
    LEFT JOIN classrooms c ON c.id = s.classroom_id
"""


def _to_session(r: dict) -> SessionRecord:
    return SessionRecord(
        session_id=str(r["id"]),
        subject=r.get("subject"),
        professor_name=r.get("professor_name"),
        classroom_name=r.get("classroom_name"),
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        status=SessionStatus(r["status"]),
        late_threshold_minutes=int(r.get("late_threshold_minutes") or 0),
        course_id=str(r["course_id"]) if r.get("course_id") else None,
        building=r.get("building"),
        classroom_id=str(r["classroom_id"]) if r.get("classroom_id") else None,
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_reportable(self) -> Sequence[SessionRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE s.status IN (%s, %s)
                ORDER BY s.start_time DESC
                """,
                (SessionStatus.ACTIVE.value, SessionStatus.ENDED.value),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_recent(self, *, limit: int = DEFAULT_SESSION_LIST_LIMIT) -> Sequence[SessionRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE s.status IN (%s, %s)
                ORDER BY s.start_time DESC
                LIMIT %s
                """,
                (SessionStatus.ACTIVE.value, SessionStatus.ENDED.value, int(limit)),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[SessionRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.status=%s ORDER BY s.start_time DESC", (SessionStatus.ACTIVE.value,))
            return [_to_session(r) for r in fetchall(cur)]

    def get_by_id(self, session_id: str) -> Optional[SessionRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.id=%s", (session_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM sessions")
            return fetch_count(cur)

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM sessions WHERE status=%s", (SessionStatus.ACTIVE.value,))
            return fetch_count(cur)
