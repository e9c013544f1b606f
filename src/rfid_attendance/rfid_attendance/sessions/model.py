from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES
from ..core.enums import SessionStatus


@dataclass(frozen=True)
class SessionRecord:
    """A scheduled occurrence of a course in a classroom."""

    session_id: str
    subject: Optional[str]
    professor_name: Optional[str]
    classroom_name: Optional[str]
    start_time: datetime
    end_time: Optional[datetime] = None
    status: SessionStatus = SessionStatus.ACTIVE
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES
    course_id: Optional[str] = None
    building: Optional[str] = None
    classroom_id: Optional[str] = None
