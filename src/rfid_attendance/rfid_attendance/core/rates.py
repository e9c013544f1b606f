from __future__ import annotations


def percent(numerator: int, denominator: int) -> int:
    """Whole-number percentage, rounding halves up; 0 when denominator is 0."""
    if denominator <= 0:
        return 0
    return (200 * int(numerator) + int(denominator)) // (2 * int(denominator))
