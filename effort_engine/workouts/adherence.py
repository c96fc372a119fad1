"""Per-step adherence scoring.

Duration adherence is symmetric: running 20% long scores the same as
running 20% short. Pace adherence is the sample time-in-range when samples
exist, otherwise a nearness score of the interval average to the band
center.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from effort_engine.core.settings import AnalyticsSettings, settings
from effort_engine.workouts.compliance import GranularAnalysis, analyze_interval
from effort_engine.workouts.models import ExecutedInterval, PlannedStep

StepStatus = Literal["scored", "no data", "excluded"]

RUN_DISCIPLINES = frozenset({"run", "walk"})
RIDE_DISCIPLINES = frozenset({"ride", "bike", "cycling"})

# Inside this ratio band the score falls off linearly from 100
NEAR_RATIO_LOW = 0.9
NEAR_RATIO_HIGH = 1.1


@dataclass(frozen=True)
class StepAdherence:
    """Adherence of one planned step (all percentages 0..100 floats)."""

    step_id: str
    status: StepStatus
    weight: float
    pace_adherence: float | None = None
    duration_adherence: float | None = None
    execution_adherence: float | None = None
    time_in_range_pct: float | None = None
    analysis: GranularAnalysis | None = None


def duration_adherence(planned: float | None, actual: float | None) -> float | None:
    """Symmetric closeness of an actual amount to a planned amount.

    With r = actual / planned: 100 - |r - 1| * 100 for 0.9 <= r <= 1.1,
    min(r, 1/r) * 100 otherwise.

    Example:
        >>> duration_adherence(600, 1200) == duration_adherence(1200, 600)
        True
    """
    if not planned or planned <= 0 or actual is None:
        return None
    if actual <= 0:
        return 0.0

    ratio = actual / planned
    if NEAR_RATIO_LOW <= ratio <= NEAR_RATIO_HIGH:
        return 100 - abs(ratio - 1) * 100
    return min(ratio, 1 / ratio) * 100


def nearness_score(actual: float, center: float) -> float:
    """100 minus the relative distance (in %) of actual from center, floored at 0."""
    if center <= 0:
        return 0.0
    return 100 - min(100.0, abs(actual - center) / center * 100)


def step_weight(step: PlannedStep) -> float:
    """Weight of a step in the session aggregate.

    Swim steps weigh by distance, strength by reps x sets, everything else
    by planned seconds. Recovery and rest steps weigh nothing.
    """
    if step.is_rest:
        return 0.0
    if step.discipline == "swim":
        return float(step.distance_meters or 0)
    if step.discipline == "strength":
        return float((step.reps or 0) * (step.sets or 0))
    return float(step.planned_seconds or 0)


def _has_varied_durations(steps: Sequence[PlannedStep], ratio: float) -> bool:
    durations = [step.planned_seconds for step in steps if not step.is_rest and step.planned_seconds]
    if not durations:
        return False
    return max(durations) / min(durations) > ratio


def method_label(
    discipline: str,
    steps: Sequence[PlannedStep],
    config: AnalyticsSettings | None = None,
) -> str:
    """Describe the weighting and metric behind the session score."""
    config = config or settings
    discipline = (discipline or "").lower()

    if discipline == "swim":
        return "Distance-weighted pace adherence"
    if discipline == "strength":
        return "Rep-weighted load adherence"

    prefix = "Duration-weighted" if _has_varied_durations(steps, config.varied_duration_ratio) else "Average"
    if discipline in RUN_DISCIPLINES:
        return f"{prefix} pace adherence"
    if discipline in RIDE_DISCIPLINES:
        return f"{prefix} power adherence"
    return f"{prefix} adherence"


def _pace_adherence(step: PlannedStep, analysis: GranularAnalysis | None) -> float | None:
    if analysis is None or step.target_range is None:
        return None
    if analysis.low_resolution:
        if analysis.average_value is None:
            return None
        return nearness_score(analysis.average_value, step.target_range.center)
    return analysis.time_in_range_pct


def _duration_adherence(step: PlannedStep, interval: ExecutedInterval) -> float | None:
    if step.discipline == "strength":
        planned_reps = (step.reps or 0) * (step.sets or 0)
        if interval.reps is None or interval.sets is None:
            return None
        return duration_adherence(planned_reps, interval.reps * interval.sets)

    if step.distance_meters and not step.duration_seconds and interval.distance_meters is not None:
        return duration_adherence(step.distance_meters, interval.distance_meters)

    return duration_adherence(step.planned_seconds, interval.duration_seconds)


def score_step(
    step: PlannedStep,
    interval: ExecutedInterval | None,
    config: AnalyticsSettings | None = None,
) -> StepAdherence:
    """Score one planned step against its matched interval.

    Unmatched steps are "no data". Rest steps and zero-weight steps are
    scored for display but "excluded" from the session aggregate.
    """
    weight = step_weight(step)
    if interval is None:
        return StepAdherence(step_id=step.id, status="no data", weight=weight)

    analysis = analyze_interval(step, interval, config)
    pace = _pace_adherence(step, analysis)
    duration = _duration_adherence(step, interval)

    available = [value for value in (pace, duration) if value is not None]
    execution = sum(available) / len(available) if available else None

    if weight <= 0 or execution is None:
        status: StepStatus = "excluded"
    else:
        status = "scored"

    return StepAdherence(
        step_id=step.id,
        status=status,
        weight=weight,
        pace_adherence=pace,
        duration_adherence=duration,
        execution_adherence=execution,
        time_in_range_pct=analysis.time_in_range_pct if analysis else None,
        analysis=analysis,
    )
