from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_SESSION_LIST_LIMIT
from .model import SessionRecord


class SessionRepository(Protocol):
    def list_reportable(self) -> Sequence[SessionRecord]:
        """Active and ended sessions, newest start time first."""

        raise NotImplementedError

    def list_recent(self, *, limit: int = DEFAULT_SESSION_LIST_LIMIT) -> Sequence[SessionRecord]:
        """Like ``list_reportable`` but capped at ``limit`` rows."""

        raise NotImplementedError

    def list_active(self) -> Sequence[SessionRecord]:
        """Sessions currently running, newest start time first."""

        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[SessionRecord]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError
