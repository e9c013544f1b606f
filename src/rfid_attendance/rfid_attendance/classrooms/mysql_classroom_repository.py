from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Classroom
from .repository import ClassroomRepository


class MySQLClassroomRepository(ClassroomRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Classroom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, building, esp32_device_id
                FROM classrooms
                ORDER BY name ASC
                """
            )
            return [
                Classroom(
                    classroom_id=str(r["id"]),
                    name=r["name"],
                    building=r.get("building"),
                    device_id=r.get("esp32_device_id"),
                )
                for r in fetchall(cur)
            ]
