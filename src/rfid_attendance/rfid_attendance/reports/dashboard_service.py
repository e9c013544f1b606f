from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..classrooms.repository import ClassroomRepository
from ..common.datetime_utils import now_local, start_of_day
from ..sessions.repository import SessionRepository
from ..students.repository import EnrollmentRepository
from .live import active_session_views, classroom_occupancy
from .model import ActiveSessionView, ClassroomStatus, DashboardStats


class DashboardService:
    def __init__(
        self,
        sessions: SessionRepository,
        enrollment: EnrollmentRepository,
        attendance: AttendanceRepository,
        classrooms: ClassroomRepository,
    ):
        self._sessions = sessions
        self._enrollment = enrollment
        self._attendance = attendance
        self._classrooms = classrooms

    def stats(self, *, now: Optional[datetime] = None) -> DashboardStats:
        """Headline counters; "today" starts at local midnight."""
        now = now or now_local()
        return DashboardStats(
            total_sessions=self._sessions.count_all(),
            active_now=self._sessions.count_active(),
            total_students=self._enrollment.count_students(),
            today_attendance=self._attendance.count_since(start_of_day(now)),
        )

    def active_sessions(self) -> list[ActiveSessionView]:
        sessions = list(self._sessions.list_active())
        if not sessions:
            return []
        events = self._attendance.list_for_sessions([s.session_id for s in sessions])
        return active_session_views(sessions, events)

    def classroom_status(self, *, now: Optional[datetime] = None) -> list[ClassroomStatus]:
        now = now or now_local()
        return classroom_occupancy(self._classrooms.list_all(), self._sessions.list_active(), now)
