from __future__ import annotations

from typing import Iterable

from ..core.exceptions import ValidationError


def require_choice(value: str, field_name: str, choices: Iterable[str]) -> str:
    allowed = sorted(choices)
    if value not in allowed:
        raise ValidationError(f"{field_name} must be one of: {', '.join(allowed)}")
    return value
