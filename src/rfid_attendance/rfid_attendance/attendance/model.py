from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.rates import percent


@dataclass(frozen=True)
class AttendanceEvent:
    """One RFID scan as stored by the scanner.

    ``status`` is set upstream when the scan is recorded (the scanner compares
    the scan time with the session's late threshold); it is trusted as-is.
    """

    session_id: str
    student_id: str
    status: AttendanceStatus
    timestamp: datetime
    student_name: Optional[str] = None
    student_number: Optional[str] = None
    program: Optional[str] = None


@dataclass(frozen=True)
class RosterEntry:
    """Read-model of one enrolled student's outcome for a session."""

    student_id: str
    student_name: str
    student_number: str
    status: AttendanceStatus
    timestamp: Optional[datetime] = None
    program: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class ClassifiedRoster:
    session_id: Optional[str]
    present: tuple[RosterEntry, ...] = ()
    late: tuple[RosterEntry, ...] = ()
    absent: tuple[RosterEntry, ...] = ()
    orphans: tuple[AttendanceEvent, ...] = ()
    duplicates: tuple[AttendanceEvent, ...] = ()

    @property
    def present_count(self) -> int:
        return len(self.present)

    @property
    def late_count(self) -> int:
        return len(self.late)

    @property
    def absent_count(self) -> int:
        return len(self.absent)

    @property
    def attended_count(self) -> int:
        return self.present_count + self.late_count

    @property
    def enrolled_count(self) -> int:
        return self.present_count + self.late_count + self.absent_count

    @property
    def on_time_rate(self) -> int:
        return percent(self.present_count, self.enrolled_count)

    @property
    def attendance_rate(self) -> int:
        return percent(self.attended_count, self.enrolled_count)

    def entries(self) -> list[RosterEntry]:
        """Present first, then late, then absent."""
        return [*self.present, *self.late, *self.absent]
