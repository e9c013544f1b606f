"""Attendance aggregation: classify a course roster against a session's scans.

Pure functions only. Fetching the roster and the scans is the caller's job
(see ``reports.service``); nothing here touches the database.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..core.enums import AttendanceStatus, DuplicatePolicy
from ..core.exceptions import DuplicateEventError, MalformedInputError
from ..students.model import EnrollmentRecord
from .model import AttendanceEvent, ClassifiedRoster, RosterEntry

logger = logging.getLogger(__name__)

_ATTENDED = {AttendanceStatus.PRESENT, AttendanceStatus.LATE}


def _resolve_session_id(events: Sequence[AttendanceEvent], session_id: Optional[str]) -> Optional[str]:
    ids = {e.session_id for e in events}
    if session_id is not None:
        ids.add(session_id)
    if len(ids) > 1:
        raise MalformedInputError(f"Events span more than one session: {sorted(ids)}")
    return next(iter(ids), None)


def _pick(current: AttendanceEvent, candidate: AttendanceEvent, policy: DuplicatePolicy) -> AttendanceEvent:
    if policy == DuplicatePolicy.EARLIEST:
        return candidate if candidate.timestamp < current.timestamp else current
    if policy == DuplicatePolicy.LATEST:
        return candidate if candidate.timestamp > current.timestamp else current
    return current


def index_events(
    events: Iterable[AttendanceEvent],
    *,
    policy: DuplicatePolicy = DuplicatePolicy.EARLIEST,
) -> tuple[dict[str, AttendanceEvent], list[AttendanceEvent]]:
    """Map student_id -> the scan that counts, plus the scans that were dropped."""

    by_student: dict[str, AttendanceEvent] = {}
    dropped: list[AttendanceEvent] = []

    for event in events:
        current = by_student.get(event.student_id)
        if current is None:
            by_student[event.student_id] = event
            continue

        if policy == DuplicatePolicy.REJECT:
            raise DuplicateEventError(
                f"Student {event.student_id} has more than one scan for session {event.session_id}"
            )

        kept = _pick(current, event, policy)
        dropped.append(event if kept is current else current)
        by_student[event.student_id] = kept
        logger.warning(
            "duplicate scan for student=%s session=%s resolved by %s policy",
            event.student_id,
            event.session_id,
            policy.value,
        )

    return by_student, dropped


def _entry(record: EnrollmentRecord, status: AttendanceStatus, event: Optional[AttendanceEvent]) -> RosterEntry:
    return RosterEntry(
        student_id=record.student_id,
        student_name=record.student_name,
        student_number=record.student_number,
        status=status,
        timestamp=event.timestamp if event else None,
        program=record.program,
        email=record.email,
    )


def classify(
    enrollment: Iterable[EnrollmentRecord],
    events: Sequence[AttendanceEvent],
    *,
    session_id: Optional[str] = None,
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.EARLIEST,
) -> ClassifiedRoster:
    """Partition a course roster into present / late / absent for one session.

    Every enrolled student lands in exactly one bucket. Scans by students who
    are not enrolled are kept aside as orphans and logged.
    """

    sid = _resolve_session_id(events, session_id)
    by_student, dropped = index_events(events, policy=duplicate_policy)

    present: list[RosterEntry] = []
    late: list[RosterEntry] = []
    absent: list[RosterEntry] = []
    seen: set[str] = set()

    for record in enrollment:
        if record.student_id in seen:
            continue
        seen.add(record.student_id)

        event = by_student.get(record.student_id)
        if event is None or event.status not in _ATTENDED:
            absent.append(_entry(record, AttendanceStatus.ABSENT, None))
        elif event.status == AttendanceStatus.PRESENT:
            present.append(_entry(record, AttendanceStatus.PRESENT, event))
        else:
            late.append(_entry(record, AttendanceStatus.LATE, event))

    orphans = [e for student_id, e in by_student.items() if student_id not in seen]
    for orphan in orphans:
        logger.warning(
            "scan for student=%s in session=%s has no enrollment record; ignored",
            orphan.student_id,
            orphan.session_id,
        )

    present.sort(key=lambda r: r.timestamp)
    late.sort(key=lambda r: r.timestamp)
    absent.sort(key=lambda r: ((r.student_name or "").lower(), r.student_id))

    return ClassifiedRoster(
        session_id=sid,
        present=tuple(present),
        late=tuple(late),
        absent=tuple(absent),
        orphans=tuple(orphans),
        duplicates=tuple(dropped),
    )
