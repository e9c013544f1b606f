from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Classroom:
    classroom_id: str
    name: str
    building: Optional[str] = None
    device_id: Optional[str] = None
