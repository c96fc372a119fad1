"""Baseline reference resolution.

Plans reference user baselines as ``user.<field>`` strings or
``{baseline, modifier}`` objects. Pace baselines may be "7:30/mi",
"4:40/km" or a number of seconds per mile; power and 1RM baselines are
numbers.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from loguru import logger

from effort_engine.core.rounding import round_half_up
from effort_engine.errors import MissingBaselineError
from effort_engine.plans.formatting import parse_pace_with_unit
from effort_engine.plans.pace import KM_PER_MILE
from effort_engine.workouts.plan_schema import BaselineRef, LoadSpec, PowerTarget

_REFERENCE = re.compile(r"^\s*user\.(\w+)\s*(.*?)\s*$", re.IGNORECASE)
_PACE_VALUE = re.compile(r"^\s*(\d+):(\d{2})\s*(?:/\s*(mi|km))?\s*$", re.IGNORECASE)
_CLOCK_OFFSET = re.compile(r"^([+-])\s*(\d+):(\d{2})$")
_SECONDS_OFFSET = re.compile(r"^([+-])\s*(\d+)\s*s$", re.IGNORECASE)
_PERCENT = re.compile(r"^(\d+(?:\.\d+)?)\s*%$")
_WATT_OFFSET = re.compile(r"^([+-])\s*(\d+(?:\.\d+)?)\s*w$", re.IGNORECASE)
_WATT_RANGE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*-\s*(\d+(?:\.\d+)?)\s*w?\s*$", re.IGNORECASE)
_WATT_SINGLE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*w\s*$", re.IGNORECASE)

# Strength loads are rounded to plate increments
LOAD_INCREMENT_LB = 5

Baselines = Mapping[str, Any]


def split_reference(text: str) -> tuple[str, str | None] | None:
    """Split "user.easyPace +0:15" into ("easyPace", "+0:15").

    Returns:
        (field name, modifier or None), or None if text is not a reference
    """
    match = _REFERENCE.match(text)
    if not match:
        return None
    return match.group(1), match.group(2) or None


def baseline_field(reference: str) -> str:
    """Strip the "user." prefix from a baseline reference."""
    return re.sub(r"^\s*user\.", "", reference, flags=re.IGNORECASE).strip()


def lookup_baseline(baselines: Baselines, field_name: str) -> Any:
    """Fetch a baseline value.

    Raises:
        MissingBaselineError: If the field is absent or empty
    """
    value = baselines.get(field_name)
    if value is None or value == "":
        raise MissingBaselineError(field_name)
    return value


def pace_offset_seconds(modifier: str | None) -> int:
    """Seconds added by a pace modifier ("+0:15", "+10s", "-5s")."""
    if not modifier:
        return 0
    text = modifier.strip()

    clock = _CLOCK_OFFSET.match(text)
    if clock:
        sign = -1 if clock.group(1) == "-" else 1
        return sign * (int(clock.group(2)) * 60 + int(clock.group(3)))

    seconds = _SECONDS_OFFSET.match(text)
    if seconds:
        sign = -1 if seconds.group(1) == "-" else 1
        return sign * int(seconds.group(2))

    logger.warning(f"Ignoring unrecognized pace modifier: {modifier!r}")
    return 0


def _pace_parts(value: Any) -> tuple[int, str] | None:
    if isinstance(value, int | float):
        return round_half_up(value), "mi"
    match = _PACE_VALUE.match(str(value))
    if not match:
        return None
    unit = (match.group(3) or "mi").lower()
    return int(match.group(1)) * 60 + int(match.group(2)), unit


def resolve_pace(target: str | BaselineRef, baselines: Baselines) -> int | None:
    """Resolve a pace target to seconds per mile.

    Modifiers are applied in the baseline's own unit before converting.

    Raises:
        MissingBaselineError: If a referenced baseline is absent
    """
    if isinstance(target, BaselineRef):
        field_name, modifier = baseline_field(target.baseline), target.modifier
    else:
        reference = split_reference(target)
        if reference is None:
            pace = parse_pace_with_unit(target)
            if pace is None:
                logger.warning(f"Unparseable pace target: {target!r}")
            return pace
        field_name, modifier = reference

    parts = _pace_parts(lookup_baseline(baselines, field_name))
    if parts is None:
        logger.warning(f"Baseline '{field_name}' is not a pace")
        return None

    seconds, unit = parts
    seconds += pace_offset_seconds(modifier)
    if unit == "km":
        return round_half_up(seconds * KM_PER_MILE)
    return seconds


def _apply_power_modifier(base: float, modifier: str | None) -> float:
    if not modifier:
        return base
    text = modifier.strip()

    percent = _PERCENT.match(text)
    if percent:
        return base * float(percent.group(1)) / 100

    offset = _WATT_OFFSET.match(text)
    if offset:
        sign = -1 if offset.group(1) == "-" else 1
        return base + sign * float(offset.group(2))

    logger.warning(f"Ignoring unrecognized power modifier: {modifier!r}")
    return base


def resolve_power(target: str | PowerTarget, baselines: Baselines) -> tuple[float, float] | None:
    """Resolve a power target to a (lower, upper) watt range.

    Single values resolve to a zero-width range; the caller widens it by
    the step tolerance.

    Raises:
        MissingBaselineError: If a referenced baseline is absent
    """
    if isinstance(target, PowerTarget):
        if target.range:
            return resolve_power(target.range, baselines)
        if not target.baseline:
            return None
        field_name, modifier = baseline_field(target.baseline), target.modifier
    else:
        reference = split_reference(target)
        if reference is None:
            watt_range = _WATT_RANGE.match(target)
            if watt_range:
                return float(watt_range.group(1)), float(watt_range.group(2))
            single = _WATT_SINGLE.match(target)
            if single:
                return float(single.group(1)), float(single.group(1))
            logger.warning(f"Unparseable power target: {target!r}")
            return None
        field_name, modifier = reference

    base = float(lookup_baseline(baselines, field_name))
    watts = round_half_up(_apply_power_modifier(base, modifier))
    return float(watts), float(watts)


def resolve_load(load: LoadSpec, baselines: Baselines) -> float | None:
    """Resolve a % of 1RM load to pounds, rounded to 5 lb (minimum 5 lb).

    Raises:
        MissingBaselineError: If the 1RM baseline is absent
    """
    if not load.percentage or not load.baseline:
        return None
    one_rep_max = float(lookup_baseline(baselines, baseline_field(load.baseline)))
    raw = one_rep_max * load.percentage / 100
    return float(max(LOAD_INCREMENT_LB, round_half_up(raw / LOAD_INCREMENT_LB) * LOAD_INCREMENT_LB))
