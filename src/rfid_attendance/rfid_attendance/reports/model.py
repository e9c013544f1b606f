from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..attendance.model import AttendanceEvent, ClassifiedRoster
from ..sessions.model import SessionRecord


@dataclass(frozen=True)
class SessionSummary:
    """One line of a course's session history."""

    session_id: str
    subject: str
    date: datetime
    professor: str
    classroom: str
    total_enrolled: int
    present_count: int
    late_count: int
    absent_count: int
    attendance_rate: int


@dataclass(frozen=True)
class CourseRollup:
    course_id: str
    course_name: str
    total_enrolled: int
    total_sessions: int
    present_count: int
    late_count: int
    absent_count: int
    attendance_rate: int
    last_session: Optional[datetime]
    sessions: tuple[SessionSummary, ...]


@dataclass(frozen=True)
class OverallStats:
    total_courses: int
    total_enrolled: int
    total_sessions: int
    total_present: int
    total_late: int
    total_absent: int
    overall_attendance_rate: int


@dataclass(frozen=True)
class SessionReport:
    session: SessionRecord
    roster: ClassifiedRoster


@dataclass(frozen=True)
class CourseOverview:
    courses: list[CourseRollup]
    stats: OverallStats


@dataclass(frozen=True)
class DashboardStats:
    total_sessions: int
    active_now: int
    total_students: int
    today_attendance: int


@dataclass(frozen=True)
class ActiveSessionView:
    """A running session with the scans recorded so far."""

    session: SessionRecord
    scans: tuple[AttendanceEvent, ...]
    present_count: int
    late_count: int


@dataclass(frozen=True)
class OccupyingSession:
    session_id: str
    professor_name: str
    subject: str
    start_time: datetime
    duration_minutes: int


@dataclass(frozen=True)
class ClassroomStatus:
    classroom_id: str
    classroom_name: str
    building: Optional[str]
    is_occupied: bool
    active_session: Optional[OccupyingSession] = None
