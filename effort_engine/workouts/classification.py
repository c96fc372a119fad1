"""Workout shape classification.

Uses step counts only, never targets or executed values:
- interval: more than one work step, or work + recovery with more than two steps
- continuous: everything else
A single targeted step longer than an hour is flagged long continuous.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from effort_engine.core.settings import AnalyticsSettings, settings
from effort_engine.workouts.models import REST_KINDS, ExecutedInterval, PlannedStep


class WorkoutShape(StrEnum):
    INTERVAL = "interval"
    CONTINUOUS = "continuous"


class BreakdownSection(StrEnum):
    INTERVAL_BREAKDOWN = "interval_breakdown"
    DISTANCE_BREAKDOWN = "distance_breakdown"


@dataclass(frozen=True)
class WorkoutClassification:
    """Shape of a session and the report section it selects."""

    shape: WorkoutShape
    is_long_continuous: bool
    work_count: int
    recovery_count: int
    total_steps: int

    @property
    def breakdown_section(self) -> BreakdownSection:
        if self.shape == WorkoutShape.INTERVAL:
            return BreakdownSection.INTERVAL_BREAKDOWN
        return BreakdownSection.DISTANCE_BREAKDOWN


def classify_counts(work_count: int, recovery_count: int, total: int) -> WorkoutShape:
    if work_count > 1 or (work_count >= 1 and recovery_count >= 1 and total > 2):
        return WorkoutShape.INTERVAL
    return WorkoutShape.CONTINUOUS


def classify_workout(
    steps: Sequence[PlannedStep],
    executed: Sequence[ExecutedInterval] | None = None,
    config: AnalyticsSettings | None = None,
) -> WorkoutClassification:
    """Classify a session as interval or continuous.

    Planned steps are authoritative. Executed interval roles are counted
    only when the plan resolved to no steps.

    Args:
        steps: Resolved planned steps
        executed: Executed intervals, used when there are no planned steps
        config: Settings providing the long continuous threshold

    Returns:
        WorkoutClassification
    """
    config = config or settings

    if steps:
        kinds = [step.kind for step in steps]
    else:
        kinds = [(interval.kind or "").lower() for interval in executed or ()]

    work_count = sum(1 for kind in kinds if kind == "work")
    recovery_count = sum(1 for kind in kinds if kind in REST_KINDS)
    shape = classify_counts(work_count, recovery_count, len(kinds))

    is_long = False
    if shape == WorkoutShape.CONTINUOUS and len(steps) == 1:
        only = steps[0]
        planned = only.planned_seconds or 0
        is_long = planned > config.long_continuous_seconds and only.target_range is not None

    return WorkoutClassification(
        shape=shape,
        is_long_continuous=is_long,
        work_count=work_count,
        recovery_count=recovery_count,
        total_steps=len(kinds),
    )
