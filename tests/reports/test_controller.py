from __future__ import annotations

from datetime import datetime
from urllib.parse import unquote

import config.testing as testing_settings

from src.rfid_attendance.rfid_attendance.attendance.model import AttendanceEvent
from src.rfid_attendance.rfid_attendance.classrooms.model import Classroom
from src.rfid_attendance.rfid_attendance.container import build_services
from src.rfid_attendance.rfid_attendance import main
from src.rfid_attendance.rfid_attendance.core.enums import AttendanceStatus, SessionStatus
from src.rfid_attendance.rfid_attendance.main import create_app
from src.rfid_attendance.rfid_attendance.reports import dashboard_service
from src.rfid_attendance.rfid_attendance.sessions.model import SessionRecord
from src.rfid_attendance.rfid_attendance.students.model import EnrollmentRecord


class FakeSessions:
    def __init__(self, sessions):
        self._sessions = sessions

    def list_reportable(self):
        return [s for s in self._sessions if s.status != SessionStatus.CANCELLED]

    def get_by_id(self, session_id):
        return next((s for s in self._sessions if s.session_id == session_id), None)

    def list_recent(self, *, limit=50):
        return self.list_reportable()[:limit]

    def list_active(self):
        return [s for s in self._sessions if s.status == SessionStatus.ACTIVE]

    def count_all(self):
        return len(self._sessions)

    def count_active(self):
        return sum(1 for s in self._sessions if s.status == SessionStatus.ACTIVE)


class FakeEnrollment:
    def __init__(self, roster):
        self._roster = roster

    def list_for_session(self, session_id):
        return list(self._roster)

    def count_students(self):
        return len(self._roster)


class FakeAttendance:
    def __init__(self, events):
        self._events = events

    def list_for_session(self, session_id):
        return [e for e in self._events if e.session_id == session_id]

    def list_for_sessions(self, session_ids):
        return [e for e in self._events if e.session_id in session_ids]

    def count_since(self, since):
        return sum(1 for e in self._events if e.timestamp >= since)


class FakeClassrooms:
    def __init__(self, rooms):
        self._rooms = rooms

    def list_all(self):
        return list(self._rooms)


class BrokenSessions(FakeSessions):
    def list_reportable(self):
        raise RuntimeError("connection lost")


SESSIONS = [
    SessionRecord(
        session_id="s1",
        subject="Operating Systems",
        professor_name="Dr. Ito",
        classroom_name="B-101",
        start_time=datetime(2025, 3, 3, 9, 0),
        status=SessionStatus.ACTIVE,
        classroom_id="r1",
    )
]
ROOMS = [Classroom("r1", "B-101", building="B"), Classroom("r2", "B-102", building="B")]
ROSTER = [
    EnrollmentRecord(student_id="1", student_name="Alice", student_number="N1"),
    EnrollmentRecord(student_id="2", student_name="Bob", student_number="N2"),
]
EVENTS = [
    AttendanceEvent(session_id="s1", student_id="1", status=AttendanceStatus.PRESENT, timestamp=datetime(2025, 3, 3, 9, 1)),
]


def _client(monkeypatch, sessions_repo=None, roster=ROSTER, rooms=ROOMS):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_services(
        sessions_repo=sessions_repo or FakeSessions(SESSIONS),
        enrollment_repo=FakeEnrollment(roster),
        attendance_repo=FakeAttendance(EVENTS),
        classrooms_repo=FakeClassrooms(rooms),
    )
    return create_app(container).test_client()


def test_session_endpoint(monkeypatch):
    resp = _client(monkeypatch).get("/api/sessions/s1")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["stats"] == {"enrolled": 2, "present": 1, "late": 0, "absent": 1, "on_time_rate": 50}
    assert body["present"][0]["student_name"] == "Alice"
    assert body["present"][0]["status"] == "present"
    assert body["absent"][0]["timestamp"] is None
    assert body["session"]["start_time"] == "2025-03-03T09:00:00"


def test_unknown_session_is_404(monkeypatch):
    resp = _client(monkeypatch).get("/api/sessions/nope")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_attendance_overview(monkeypatch):
    resp = _client(monkeypatch).get("/api/attendance?sort=attendance_rate")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["courses"][0]["course_name"] == "Operating Systems"
    assert body["courses"][0]["attendance_rate"] == 50
    assert body["stats"]["total_courses"] == 1


def test_attendance_overview_bad_sort(monkeypatch):
    resp = _client(monkeypatch).get("/api/attendance?sort=enrolled")

    assert resp.status_code == 400


def test_session_csv_download(monkeypatch):
    resp = _client(monkeypatch).get("/api/sessions/s1/report.csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "Operating_Systems_s1.csv" in resp.headers["Content-Disposition"]
    lines = resp.get_data(as_text=True).splitlines()
    assert lines[0].startswith("session_id,subject")
    assert len(lines) == 3


def test_course_csv_download(monkeypatch):
    resp = _client(monkeypatch).get("/api/attendance/Operating%20Systems/report.csv")

    assert resp.status_code == 200
    assert "attendance_Operating_Systems.csv" in resp.headers["Content-Disposition"]


def test_empty_export_returns_no_content(monkeypatch):
    resp = _client(monkeypatch, roster=[]).get("/api/sessions/s1/report.csv")

    assert resp.status_code == 204
    assert resp.get_data() == b""


def test_dashboard(monkeypatch):
    resp = _client(monkeypatch).get("/api/dashboard")

    body = resp.get_json()
    assert body["stats"]["total_sessions"] == 1
    assert body["stats"]["active_now"] == 1
    assert body["stats"]["total_students"] == 2
    assert body["refresh_seconds"] == 5


def test_unexpected_error_is_500(monkeypatch):
    resp = _client(monkeypatch, sessions_repo=BrokenSessions(SESSIONS)).get("/api/attendance")

    assert resp.status_code == 500
    assert resp.get_json()["success"] is False


def test_unknown_route_stays_404(monkeypatch):
    resp = _client(monkeypatch).get("/api/does-not-exist")

    assert resp.status_code == 404


def test_session_csv_with_non_ascii_subject(monkeypatch):
    session = SessionRecord(
        session_id="s1",
        subject="Cơ sở dữ liệu",
        professor_name="Dr. Ito",
        classroom_name="B-101",
        start_time=datetime(2025, 3, 3, 9, 0),
    )
    resp = _client(monkeypatch, sessions_repo=FakeSessions([session])).get("/api/sessions/s1/report.csv")

    assert resp.status_code == 200
    disposition = resp.headers["Content-Disposition"]
    disposition.encode("latin-1")
    assert 'filename="' in disposition
    encoded = disposition.split("filename*=UTF-8''", 1)[1]
    assert unquote(encoded) == "Cơ sở dữ liệu".replace(" ", "_") + "_s1.csv"
    assert "Cơ sở dữ liệu" in resp.get_data(as_text=True)


def test_attendance_overview_name_order(monkeypatch):
    sessions = [
        SessionRecord("s1", "Networks", "Dr. Ito", "B-101", datetime(2025, 3, 3, 9, 0)),
        SessionRecord("s2", "Algebra", "Dr. Ito", "B-101", datetime(2025, 3, 4, 9, 0)),
    ]
    client = _client(monkeypatch, sessions_repo=FakeSessions(sessions))

    def names(query):
        return [c["course_name"] for c in client.get("/api/attendance" + query).get_json()["courses"]]

    assert names("?sort=course_name") == ["Algebra", "Networks"]
    assert names("?sort=course_name&order=desc") == ["Networks", "Algebra"]
    assert names("?sort=last_session") == ["Algebra", "Networks"]
    assert names("?sort=last_session&order=asc") == ["Networks", "Algebra"]
    assert client.get("/api/attendance?sort=course_name&order=up").status_code == 400


def test_sessions_list(monkeypatch):
    sessions = [
        SessionRecord("s1", "Networks", "Dr. Ito", "B-101", datetime(2025, 3, 3, 9, 0), status=SessionStatus.ENDED),
        SessionRecord("s2", "Algebra", "Dr. Sato", "B-102", datetime(2025, 3, 4, 9, 0)),
        SessionRecord("s3", "Algebra", "Dr. Sato", "B-102", datetime(2025, 3, 5, 9, 0), status=SessionStatus.CANCELLED),
    ]
    client = _client(monkeypatch, sessions_repo=FakeSessions(sessions))

    body = client.get("/api/sessions").get_json()
    assert body["count"] == 2
    assert {s["session_id"] for s in body["sessions"]} == {"s1", "s2"}
    assert body["sessions"][0]["professor_name"] == "Dr. Ito"

    assert client.get("/api/sessions?limit=1").get_json()["count"] == 1
    assert client.get("/api/sessions?limit=abc").status_code == 400
    assert client.get("/api/sessions?limit=0").status_code == 400


def test_dashboard_lists_active_sessions_with_scans(monkeypatch):
    body = _client(monkeypatch).get("/api/dashboard").get_json()

    assert len(body["active_sessions"]) == 1
    active = body["active_sessions"][0]
    assert active["session"]["session_id"] == "s1"
    assert [scan["student_id"] for scan in active["scans"]] == ["1"]
    assert active["present_count"] == 1


def test_classroom_status(monkeypatch):
    monkeypatch.setattr(dashboard_service, "now_local", lambda: datetime(2025, 3, 3, 10, 15))

    body = _client(monkeypatch).get("/api/classrooms/status").get_json()

    assert (body["occupied"], body["available"]) == (1, 1)
    busy, free = body["classrooms"]
    assert busy["classroom_name"] == "B-101"
    assert busy["is_occupied"] is True
    assert busy["active_session"]["duration_minutes"] == 75
    assert busy["active_session"]["professor_name"] == "Dr. Ito"
    assert busy["active_session"]["start_time"] == "2025-03-03T09:00:00"
    assert free["is_occupied"] is False
    assert free["active_session"] is None


def test_log_level_setting_is_case_insensitive(monkeypatch):
    seen = {}
    monkeypatch.setattr(testing_settings, "LOG_LEVEL", "debug")
    monkeypatch.setattr(main.logging, "basicConfig", lambda **kwargs: seen.update(kwargs))

    _client(monkeypatch)

    assert seen["level"] == "DEBUG"
