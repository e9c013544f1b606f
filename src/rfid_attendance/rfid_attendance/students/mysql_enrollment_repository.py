from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall
from .model import EnrollmentRecord
from .repository import EnrollmentRepository


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_session(self, session_id: str) -> Sequence[EnrollmentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT st.id, st.name, st.student_number, st.program, st.email
                FROM course_enrollments ce
                JOIN students st ON st.id = ce.student_id
                WHERE ce.course_id = (
                    SELECT sr.course_id FROM session_roster sr WHERE sr.session_id=%s LIMIT 1
                )
                ORDER BY st.name ASC
                """,
                (session_id,),
            )
            return [
                EnrollmentRecord(
                    student_id=str(r["id"]),
                    student_name=r["name"],
                    student_number=r["student_number"],
                    program=r.get("program"),
                    email=r.get("email"),
                )
                for r in fetchall(cur)
            ]

    def count_students(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students")
            return fetch_count(cur)
