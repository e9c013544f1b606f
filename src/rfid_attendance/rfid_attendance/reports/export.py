"""Delimited-text export of rosters and course rollups.

Formatting only: writing the text to a file or an HTTP response is up to the
caller.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..attendance.model import ClassifiedRoster
from ..common.datetime_utils import format_timestamp
from ..core.constants import CSV_DELIMITER, DEFAULT_SUBJECT, NOT_AVAILABLE
from ..core.exceptions import MalformedInputError
from ..sessions.model import SessionRecord
from .model import CourseRollup


def _cell(value: Any, delimiter: str) -> str:
    """One field, RFC 4180 quoted only when it has to be; None and "" stay bare."""
    text = "" if value is None else str(value)
    if any(ch in text for ch in (delimiter, '"', "\n", "\r")):
        return '"' + text.replace('"', '""') + '"'
    return text


def _line(values: Iterable[Any], delimiter: str) -> str:
    return delimiter.join(_cell(v, delimiter) for v in values)


def to_delimited_text(rows: Sequence[Mapping[str, Any]], *, delimiter: str = CSV_DELIMITER) -> str:
    """Header line from the first row's keys, then one line per row.

    Values holding the delimiter, quotes or line breaks are quoted (RFC 4180);
    everything else is written bare. No trailing newline.
    """

    if not rows:
        return ""

    fieldnames = list(rows[0].keys())
    expected = set(fieldnames)
    for i, row in enumerate(rows):
        if set(row.keys()) != expected:
            raise MalformedInputError(f"Row {i} keys {sorted(row.keys())} do not match header {fieldnames}")

    lines = [_line(fieldnames, delimiter)]
    lines.extend(_line((row[name] for name in fieldnames), delimiter) for row in rows)
    return "\n".join(lines)


def session_roster_rows(session: SessionRecord, roster: ClassifiedRoster) -> list[dict]:
    return [
        {
            "session_id": session.session_id,
            "subject": session.subject,
            "classroom": session.classroom_name,
            "professor": session.professor_name,
            "student_name": entry.student_name,
            "student_number": entry.student_number,
            "student_email": entry.email,
            "status": entry.status.value,
            "timestamp": format_timestamp(entry.timestamp) or NOT_AVAILABLE,
        }
        for entry in roster.entries()
    ]


def course_rows(course: CourseRollup) -> list[dict]:
    return [
        {
            "Course": course.course_name,
            "Session": s.subject,
            "Date": s.date.strftime("%Y-%m-%d"),
            "Professor": s.professor,
            "Classroom": s.classroom,
            "Total Enrolled": s.total_enrolled,
            "Present": s.present_count,
            "Late": s.late_count,
            "Absent": s.absent_count,
            "Attendance Rate": f"{s.attendance_rate}%",
        }
        for s in course.sessions
    ]


def all_course_rows(courses: Iterable[CourseRollup]) -> list[dict]:
    rows: list[dict] = []
    for course in courses:
        rows.extend(course_rows(course))
    return rows


def _underscored(text: str) -> str:
    return re.sub(r"\s+", "_", text)


def session_filename(session: SessionRecord) -> str:
    return f"{_underscored(session.subject or 'session')}_{session.session_id}.csv"


def course_filename(course_name: Optional[str] = None) -> str:
    if course_name is None:
        return "all_courses_attendance.csv"
    return f"attendance_{_underscored(course_name or DEFAULT_SUBJECT)}.csv"
