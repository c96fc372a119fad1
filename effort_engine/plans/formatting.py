"""Pace and time formatting/parsing helpers.

Deterministic, stateless helpers shared by pace derivation and plan
resolution. Paces are seconds per mile unless a unit is given.
"""

from __future__ import annotations

import re

from effort_engine.core.rounding import round_half_up
from effort_engine.plans.pace import KM_PER_MILE, paces_to_km
from effort_engine.plans.types import PaceUnit, RaceDistance, TrainingPaces, ZoneDescription

_PACE_WITH_UNIT = re.compile(r"^\s*(\d+):(\d{2})\s*/\s*(mi|km)\s*$", re.IGNORECASE)
_PACE_PLAIN = re.compile(r"^\s*(\d+):(\d{2})\s*$")


def format_pace(seconds: int) -> str:
    """Format seconds as M:SS."""
    mins = seconds // 60
    secs = seconds % 60
    return f"{mins}:{secs:02d}"


def format_pace_with_unit(seconds: int, unit: PaceUnit) -> str:
    """Format seconds as M:SS/unit."""
    return f"{format_pace(seconds)}/{unit}"


def format_time(seconds: int) -> str:
    """Format a duration as H:MM:SS, or M:SS under an hour.

    Example:
        >>> format_time(12750)
        '3:32:30'
        >>> format_time(1326)
        '22:06'
    """
    hours = seconds // 3600
    mins = (seconds % 3600) // 60
    secs = seconds % 60
    if hours > 0:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"


def parse_pace(pace_str: str) -> int | None:
    """Parse an M:SS pace string to seconds, or None if malformed."""
    match = _PACE_PLAIN.match(pace_str or "")
    if not match:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def parse_pace_with_unit(pace_str: str) -> int | None:
    """Parse "7:30/mi" or "4:40/km" to seconds per mile.

    Plain "M:SS" strings are read as seconds per mile.

    Returns:
        Pace in seconds per mile, or None if the string is not a pace
    """
    match = _PACE_WITH_UNIT.match(pace_str or "")
    if not match:
        return parse_pace(pace_str)

    seconds = int(match.group(1)) * 60 + int(match.group(2))
    if match.group(3).lower() == "km":
        return round_half_up(seconds * KM_PER_MILE)
    return seconds


def parse_time_to_seconds(time_str: str, distance: RaceDistance | None = None) -> int | None:
    """Parse a race time string to seconds.

    Two-part times are H:MM for half/marathon and MM:SS otherwise;
    three-part times are always H:MM:SS.

    Args:
        time_str: Time string (e.g., "22:00", "3:55", "1:45:30")
        distance: Race distance giving context to two-part times

    Returns:
        Time in seconds, or None if malformed
    """
    parts = (time_str or "").strip().split(":")
    if not all(part.isdigit() for part in parts):
        return None
    values = [int(part) for part in parts]

    if len(values) == 2:
        if distance in ("half", "marathon"):
            return values[0] * 3600 + values[1] * 60
        return values[0] * 60 + values[1]
    if len(values) == 3:
        return values[0] * 3600 + values[1] * 60 + values[2]
    return None


def get_zone_descriptions(paces: TrainingPaces, unit: PaceUnit = "mi") -> list[ZoneDescription]:
    """Describe the five training zones for display.

    Args:
        paces: Paces in seconds per mile
        unit: Unit to render ("mi" or "km")
    """
    p = paces_to_km(paces) if unit == "km" else paces

    return [
        ZoneDescription(
            name="Easy",
            brand_name="Base",
            pace=format_pace_with_unit(p.base, unit),
            purpose="Aerobic foundation and recovery",
        ),
        ZoneDescription(
            name="Marathon",
            brand_name="Race",
            pace=format_pace_with_unit(p.race, unit),
            purpose="Goal race pace and rhythm",
        ),
        ZoneDescription(
            name="Threshold",
            brand_name="Steady",
            pace=format_pace_with_unit(p.steady, unit),
            purpose="Lactate threshold and stamina",
        ),
        ZoneDescription(
            name="Interval",
            brand_name="Power",
            pace=format_pace_with_unit(p.power, unit),
            purpose="VO2max and aerobic power",
        ),
        ZoneDescription(
            name="Repetition",
            brand_name="Speed",
            pace=format_pace_with_unit(p.speed, unit),
            purpose="Running economy and speed",
        ),
    ]
