from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    def list_for_session(self, session_id: str) -> Sequence[AttendanceEvent]:
        """Scans of one session ordered by timestamp, with student display fields."""

        raise NotImplementedError

    def list_for_sessions(self, session_ids: Sequence[str]) -> Sequence[AttendanceEvent]:
        """Scans of several sessions at once, ordered by timestamp."""

        raise NotImplementedError

    def count_since(self, since: datetime) -> int:
        raise NotImplementedError
