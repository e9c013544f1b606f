from __future__ import annotations

from datetime import datetime

import pytest

from src.rfid_attendance.rfid_attendance.attendance.aggregator import classify
from src.rfid_attendance.rfid_attendance.attendance.model import AttendanceEvent
from src.rfid_attendance.rfid_attendance.core.enums import AttendanceStatus
from src.rfid_attendance.rfid_attendance.core.exceptions import MalformedInputError
from src.rfid_attendance.rfid_attendance.reports.export import (
    all_course_rows,
    course_filename,
    course_rows,
    session_filename,
    session_roster_rows,
    to_delimited_text,
)
from src.rfid_attendance.rfid_attendance.reports.rollup import rollup
from src.rfid_attendance.rfid_attendance.sessions.model import SessionRecord
from src.rfid_attendance.rfid_attendance.students.model import EnrollmentRecord


def test_header_from_first_row_and_none_as_empty():
    assert to_delimited_text([{"a": 1, "b": 2}, {"a": 3, "b": None}]) == "a,b\n1,2\n3,"


def test_empty_single_column_cells_stay_bare():
    assert to_delimited_text([{"a": None}, {"a": ""}]) == "a\n\n"
    assert to_delimited_text([{"a": ""}, {"a": "x"}]) == "a\n\nx"


def test_empty_rows_give_empty_text():
    assert to_delimited_text([]) == ""


def test_values_with_delimiter_or_quotes_are_quoted():
    text = to_delimited_text([{"name": "Smith, Jane", "note": 'said "hi"'}])

    assert text == 'name,note\n"Smith, Jane","said ""hi"""'


def test_custom_delimiter():
    assert to_delimited_text([{"a": 1, "b": "x;y"}], delimiter=";") == 'a;b\n1;"x;y"'


def test_heterogeneous_rows_are_rejected():
    with pytest.raises(MalformedInputError):
        to_delimited_text([{"a": 1, "b": 2}, {"a": 3}])


def test_to_delimited_text_is_idempotent():
    rows = [{"a": 1, "b": "x"}]

    assert to_delimited_text(rows) == to_delimited_text(rows)


SESSION = SessionRecord(
    session_id="abc",
    subject="Data Structures",
    professor_name="Dr. Ito",
    classroom_name="B-101",
    start_time=datetime(2025, 3, 3, 9, 0),
)
ROSTER = [
    EnrollmentRecord(student_id="1", student_name="Alice", student_number="N1", email="alice@uni.edu"),
    EnrollmentRecord(student_id="2", student_name="Bob", student_number="N2", email=None),
]


def test_session_roster_rows_cover_every_enrolled_student():
    events = [
        AttendanceEvent(
            session_id="abc",
            student_id="1",
            status=AttendanceStatus.PRESENT,
            timestamp=datetime(2025, 3, 3, 9, 2, 30),
        )
    ]
    rows = session_roster_rows(SESSION, classify(ROSTER, events))

    assert rows[0]["student_name"] == "Alice"
    assert rows[0]["status"] == "present"
    assert rows[0]["timestamp"] == "2025-03-03 09:02:30"
    assert rows[1]["status"] == "absent"
    assert rows[1]["timestamp"] == "N/A"

    text = to_delimited_text(rows)
    assert text.splitlines()[0] == (
        "session_id,subject,classroom,professor,student_name,student_number,student_email,status,timestamp"
    )
    assert text.splitlines()[2] == "abc,Data Structures,B-101,Dr. Ito,Bob,N2,,absent,N/A"


def test_course_rows_and_filenames():
    courses = rollup([SESSION], {"abc": classify(ROSTER, [])})
    course = courses["Data Structures"]

    rows = course_rows(course)

    assert rows == [
        {
            "Course": "Data Structures",
            "Session": "Data Structures",
            "Date": "2025-03-03",
            "Professor": "Dr. Ito",
            "Classroom": "B-101",
            "Total Enrolled": 2,
            "Present": 0,
            "Late": 0,
            "Absent": 2,
            "Attendance Rate": "0%",
        }
    ]
    assert all_course_rows(courses.values()) == rows
    assert course_filename("Data Structures") == "attendance_Data_Structures.csv"
    assert course_filename() == "all_courses_attendance.csv"
    assert session_filename(SESSION) == "Data_Structures_abc.csv"
