"""Half-up rounding helpers.

Python's round() uses banker's rounding, which makes 572.5 round to 572 and
573.5 round to 574. Paces, times and percentages round half-up everywhere.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def round_to_tenth(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return round_half_up(value * 10) / 10
