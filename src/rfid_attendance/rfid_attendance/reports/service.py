from __future__ import annotations

import logging
from typing import Optional

from ..attendance.aggregator import classify
from ..attendance.model import ClassifiedRoster
from ..attendance.repository import AttendanceRepository
from ..core.constants import DEFAULT_SESSION_LIST_LIMIT
from ..core.enums import DuplicatePolicy
from ..core.exceptions import NotFoundError, ValidationError
from ..sessions.model import SessionRecord
from ..sessions.repository import SessionRepository
from ..students.repository import EnrollmentRepository
from .export import all_course_rows, course_rows, session_roster_rows, to_delimited_text
from .model import CourseOverview, SessionReport
from .rollup import overall_stats, rollup, sort_rollups

logger = logging.getLogger(__name__)


class AttendanceReportService:
    """Loads sessions, rosters and scans, then hands them to the pure aggregators.

    Every call recomputes from fresh reads; nothing is cached between calls.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        enrollment: EnrollmentRepository,
        attendance: AttendanceRepository,
        *,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.EARLIEST,
    ):
        self._sessions = sessions
        self._enrollment = enrollment
        self._attendance = attendance
        self._duplicate_policy = duplicate_policy

    def _get_session(self, session_id: str) -> SessionRecord:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def _classify(self, session_id: str) -> ClassifiedRoster:
        enrollment = self._enrollment.list_for_session(session_id)
        events = self._attendance.list_for_session(session_id)
        if not enrollment:
            logger.info("session=%s has no linked course enrollment", session_id)
        return classify(enrollment, events, session_id=session_id, duplicate_policy=self._duplicate_policy)

    def session_report(self, session_id: str) -> SessionReport:
        session = self._get_session(session_id)
        return SessionReport(session=session, roster=self._classify(session_id))

    def course_overview(self, *, sort_key: Optional[str] = None, descending: Optional[bool] = None) -> CourseOverview:
        sessions = list(self._sessions.list_reportable())
        rosters = {s.session_id: self._classify(s.session_id) for s in sessions}
        by_subject = rollup(sessions, rosters)

        courses = sort_rollups(by_subject, key=sort_key, descending=descending) if sort_key else list(by_subject.values())
        logger.debug("course overview: %d sessions in %d courses", len(sessions), len(courses))
        return CourseOverview(courses=courses, stats=overall_stats(courses))

    def session_csv(self, session_id: str) -> tuple[SessionRecord, str]:
        report = self.session_report(session_id)
        return report.session, to_delimited_text(session_roster_rows(report.session, report.roster))

    def course_csv(self, subject: str) -> str:
        overview = self.course_overview()
        for course in overview.courses:
            if course.course_name == subject:
                return to_delimited_text(course_rows(course))
        raise NotFoundError(f"Course {subject} not found")

    def all_courses_csv(self) -> str:
        overview = self.course_overview()
        return to_delimited_text(all_course_rows(overview.courses))

    def recent_sessions(self, *, limit: int = DEFAULT_SESSION_LIST_LIMIT) -> list[SessionRecord]:
        """Active and ended sessions, newest first."""
        if limit < 1:
            raise ValidationError("limit must be a positive integer")
        return list(self._sessions.list_recent(limit=limit))
