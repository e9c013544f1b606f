from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .classrooms.mysql_classroom_repository import MySQLClassroomRepository
from .classrooms.repository import ClassroomRepository
from .core.enums import DuplicatePolicy
from .database.connection import DBConfig, DatabaseConnection
from .reports.dashboard_service import DashboardService
from .reports.service import AttendanceReportService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .students.mysql_enrollment_repository import MySQLEnrollmentRepository
from .students.repository import EnrollmentRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    sessions_repo: SessionRepository
    enrollment_repo: EnrollmentRepository
    attendance_repo: AttendanceRepository
    classrooms_repo: ClassroomRepository

    report_service: AttendanceReportService
    dashboard_service: DashboardService


def build_services(
    *,
    sessions_repo: SessionRepository,
    enrollment_repo: EnrollmentRepository,
    attendance_repo: AttendanceRepository,
    classrooms_repo: ClassroomRepository,
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.EARLIEST,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    report_service = AttendanceReportService(
        sessions_repo,
        enrollment_repo,
        attendance_repo,
        duplicate_policy=duplicate_policy,
    )
    dashboard_service = DashboardService(sessions_repo, enrollment_repo, attendance_repo, classrooms_repo)

    return Container(
        conn=conn,
        sessions_repo=sessions_repo,
        enrollment_repo=enrollment_repo,
        attendance_repo=attendance_repo,
        classrooms_repo=classrooms_repo,
        report_service=report_service,
        dashboard_service=dashboard_service,
    )


def build_container(*, db_config: dict, duplicate_policy: str = DuplicatePolicy.EARLIEST.value) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return build_services(
        sessions_repo=MySQLSessionRepository(conn),
        enrollment_repo=MySQLEnrollmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        classrooms_repo=MySQLClassroomRepository(conn),
        duplicate_policy=DuplicatePolicy(duplicate_policy),
        conn=conn,
    )
