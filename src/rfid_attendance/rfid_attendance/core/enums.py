from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Classification of a student for one session."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"
    CANCELLED = "cancelled"


class DuplicatePolicy(str, Enum):
    """How to resolve more than one scan for the same (session, student)."""

    EARLIEST = "earliest"
    LATEST = "latest"
    FIRST = "first"
    REJECT = "reject"
