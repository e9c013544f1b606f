from __future__ import annotations

from typing import Protocol, Sequence

from .model import EnrollmentRecord


class EnrollmentRepository(Protocol):
    def list_for_session(self, session_id: str) -> Sequence[EnrollmentRecord]:
        """Enrollment of the course the session belongs to.

        Returns an empty sequence when the session is not linked to a course.
        """

        raise NotImplementedError

    def count_students(self) -> int:
        raise NotImplementedError
