"""Course rollup: fold per-session rosters into per-subject totals."""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional

from ..attendance.model import ClassifiedRoster
from ..core.constants import DEFAULT_SUBJECT, UNKNOWN_NAME
from ..core.exceptions import ValidationError
from ..core.rates import percent
from ..sessions.model import SessionRecord
from .model import CourseRollup, OverallStats, SessionSummary

SORT_KEYS = {"last_session", "course_name", "attendance_rate"}
SORT_ORDERS = {"asc", "desc"}


def subject_of(session: SessionRecord) -> str:
    return session.subject or DEFAULT_SUBJECT


def course_slug(subject: str) -> str:
    return "course_" + re.sub(r"\s+", "_", subject).lower()


def summarize_session(session: SessionRecord, roster: ClassifiedRoster) -> SessionSummary:
    return SessionSummary(
        session_id=session.session_id,
        subject=subject_of(session),
        date=session.start_time,
        professor=session.professor_name or UNKNOWN_NAME,
        classroom=session.classroom_name or UNKNOWN_NAME,
        total_enrolled=roster.enrolled_count,
        present_count=roster.present_count,
        late_count=roster.late_count,
        absent_count=roster.absent_count,
        attendance_rate=roster.attendance_rate,
    )


def _fold(subject: str, summaries: list[SessionSummary]) -> CourseRollup:
    total_sessions = len(summaries)
    total_enrolled = max((s.total_enrolled for s in summaries), default=0)
    present = sum(s.present_count for s in summaries)
    late = sum(s.late_count for s in summaries)
    absent = sum(s.absent_count for s in summaries)
    history = sorted(summaries, key=lambda s: s.date, reverse=True)

    return CourseRollup(
        course_id=course_slug(subject),
        course_name=subject,
        total_enrolled=total_enrolled,
        total_sessions=total_sessions,
        present_count=present,
        late_count=late,
        absent_count=absent,
        attendance_rate=percent(present + late, total_enrolled * total_sessions),
        last_session=history[0].date if history else None,
        sessions=tuple(history),
    )


def rollup(
    sessions: Iterable[SessionRecord],
    rosters: Mapping[str, ClassifiedRoster],
) -> dict[str, CourseRollup]:
    """Group sessions by subject and total their classified rosters.

    A session with no roster in ``rosters`` counts as held with nobody enrolled.
    The result keeps the order in which subjects are first seen.
    """

    grouped: dict[str, list[SessionSummary]] = {}
    for session in sessions:
        roster = rosters.get(session.session_id) or ClassifiedRoster(session_id=session.session_id)
        grouped.setdefault(subject_of(session), []).append(summarize_session(session, roster))

    return {subject: _fold(subject, items) for subject, items in grouped.items()}


def sort_rollups(
    rollups: Mapping[str, CourseRollup],
    *,
    key: str = "last_session",
    descending: Optional[bool] = None,
) -> list[CourseRollup]:
    """Courses in a caller-chosen order.

    Without an explicit direction names sort A to Z; dates and rates sort
    newest/highest first.
    """
    if key not in SORT_KEYS:
        raise ValidationError(f"Unsupported sort key: {key}")
    if descending is None:
        descending = key != "course_name"

    items = list(rollups.values())
    if key == "last_session":
        # Courses without sessions go last whatever the direction.
        dated = [c for c in items if c.last_session is not None]
        undated = [c for c in items if c.last_session is None]
        dated.sort(key=lambda c: c.last_session, reverse=descending)
        return dated + undated
    if key == "course_name":
        return sorted(items, key=lambda c: c.course_name.lower(), reverse=descending)
    return sorted(items, key=lambda c: c.attendance_rate, reverse=descending)


def overall_stats(rollups: Iterable[CourseRollup]) -> OverallStats:
    courses = list(rollups)
    rate_sum = sum(c.attendance_rate for c in courses)
    return OverallStats(
        total_courses=len(courses),
        total_enrolled=sum(c.total_enrolled for c in courses),
        total_sessions=sum(c.total_sessions for c in courses),
        total_present=sum(c.present_count for c in courses),
        total_late=sum(c.late_count for c in courses),
        total_absent=sum(c.absent_count for c in courses),
        # mean of the course rates, rounded half up
        overall_attendance_rate=percent(rate_sum, len(courses) * 100),
    )
