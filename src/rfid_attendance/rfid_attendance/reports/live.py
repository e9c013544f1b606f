"""Live views: running sessions with their scans, and classroom occupancy."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

from ..attendance.model import AttendanceEvent
from ..classrooms.model import Classroom
from ..core.constants import DEFAULT_SUBJECT, UNKNOWN_NAME
from ..core.enums import AttendanceStatus
from ..sessions.model import SessionRecord
from .model import ActiveSessionView, ClassroomStatus, OccupyingSession


def group_scans_by_session(events: Iterable[AttendanceEvent]) -> dict[str, list[AttendanceEvent]]:
    grouped: dict[str, list[AttendanceEvent]] = {}
    for event in events:
        grouped.setdefault(event.session_id, []).append(event)
    return grouped


def active_session_views(
    sessions: Sequence[SessionRecord],
    events: Iterable[AttendanceEvent],
) -> list[ActiveSessionView]:
    """One view per session, in the given order; scans for other sessions are ignored."""
    by_session = group_scans_by_session(events)
    views = []
    for session in sessions:
        scans = tuple(sorted(by_session.get(session.session_id, []), key=lambda e: e.timestamp))
        views.append(
            ActiveSessionView(
                session=session,
                scans=scans,
                present_count=sum(1 for e in scans if e.status == AttendanceStatus.PRESENT),
                late_count=sum(1 for e in scans if e.status == AttendanceStatus.LATE),
            )
        )
    return views


def minutes_elapsed(start: datetime, now: datetime) -> int:
    """Whole minutes since ``start``, rounded down; never negative."""
    return max(0, int((now - start).total_seconds() // 60))


def classroom_occupancy(
    classrooms: Iterable[Classroom],
    active_sessions: Iterable[SessionRecord],
    now: datetime,
) -> list[ClassroomStatus]:
    """Occupied/free state per classroom.

    ``active_sessions`` is expected newest first; when a room has several
    running sessions the first one listed is reported.
    """
    occupying: dict[str, SessionRecord] = {}
    for session in active_sessions:
        if session.classroom_id and session.classroom_id not in occupying:
            occupying[session.classroom_id] = session

    statuses = []
    for room in classrooms:
        session = occupying.get(room.classroom_id)
        current = None
        if session is not None:
            current = OccupyingSession(
                session_id=session.session_id,
                professor_name=session.professor_name or UNKNOWN_NAME,
                subject=session.subject or DEFAULT_SUBJECT,
                start_time=session.start_time,
                duration_minutes=minutes_elapsed(session.start_time, now),
            )
        statuses.append(
            ClassroomStatus(
                classroom_id=room.classroom_id,
                classroom_name=room.name,
                building=room.building,
                is_occupied=current is not None,
                active_session=current,
            )
        )
    return statuses
