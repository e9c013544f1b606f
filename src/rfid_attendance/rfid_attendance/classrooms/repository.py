from __future__ import annotations

from typing import Protocol, Sequence

from .model import Classroom


class ClassroomRepository(Protocol):
    def list_all(self) -> Sequence[Classroom]:
        """All classrooms ordered by name."""

        raise NotImplementedError
