"""Duration and distance strings used by structured plans."""

from __future__ import annotations

import re

METERS_PER_MILE = 1609.34
METERS_PER_YARD = 0.9144

_DURATION_PART = re.compile(
    r"(\d+(?:\.\d+)?)\s*(hours|hour|hrs|hr|h|minutes|minute|mins|min|seconds|second|secs|sec|s)(?![a-z])",
    re.IGNORECASE,
)
_CLOCK = re.compile(r"^\s*(\d+):(\d{2})(?::(\d{2}))?\s*$")
_DISTANCE = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*(miles|mile|mi|km|meters|meter|m|yards|yard|yd)\s*$",
    re.IGNORECASE,
)

_SECONDS_PER_UNIT = {"h": 3600, "m": 60, "s": 1}
_METERS_PER_UNIT = {"mi": METERS_PER_MILE, "km": 1000.0, "m": 1.0, "yd": METERS_PER_YARD}


def parse_duration(text: str | None) -> int | None:
    """Parse "10min", "90s", "1h30min", "5:00" or "1:30:00" to seconds.

    Two-part clock strings are M:SS. Returns None when nothing parses.
    """
    if not text:
        return None

    clock = _CLOCK.match(text)
    if clock:
        first, second, third = clock.groups()
        if third is None:
            return int(first) * 60 + int(second)
        return int(first) * 3600 + int(second) * 60 + int(third)

    parts = _DURATION_PART.findall(text)
    if not parts:
        return None
    total = 0.0
    for amount, unit in parts:
        total += float(amount) * _SECONDS_PER_UNIT[unit[0].lower()]
    return int(total)


def parse_distance(text: str | None) -> float | None:
    """Parse "800m", "1mi", "400yd" or "1.5km" to meters."""
    if not text:
        return None
    match = _DISTANCE.match(text)
    if not match:
        return None

    unit = match.group(2).lower()
    if unit.startswith("mi"):
        key = "mi"
    elif unit.startswith("y"):
        key = "yd"
    elif unit == "km":
        key = "km"
    else:
        key = "m"
    return float(match.group(1)) * _METERS_PER_UNIT[key]
