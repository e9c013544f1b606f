from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EnrollmentRecord:
    """A student expected to attend every session of a course."""

    student_id: str
    student_name: str
    student_number: str
    program: Optional[str] = None
    email: Optional[str] = None
