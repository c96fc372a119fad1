"""Tests for interval vs. continuous workout classification."""

import pytest

from effort_engine.workouts.classification import (
    BreakdownSection,
    WorkoutShape,
    classify_counts,
    classify_workout,
)
from effort_engine.workouts.models import ExecutedInterval, PlannedStep, TargetRange
from effort_engine.workouts.structure_resolver import resolve_plan

EASY_BAND = TargetRange(lower=508, upper=572)


def _step(index, kind, duration=600, target=EASY_BAND):
    return PlannedStep(id=f"step_{index}", kind=kind, order_index=index, duration_seconds=duration, target_range=target)


@pytest.mark.parametrize(
    ("work", "recovery", "total", "expected"),
    [
        (2, 0, 2, WorkoutShape.INTERVAL),
        (1, 1, 3, WorkoutShape.INTERVAL),
        (1, 1, 2, WorkoutShape.CONTINUOUS),
        (1, 0, 3, WorkoutShape.CONTINUOUS),
        (0, 0, 1, WorkoutShape.CONTINUOUS),
        (0, 2, 4, WorkoutShape.CONTINUOUS),
    ],
)
def test_classify_counts(work, recovery, total, expected):
    assert classify_counts(work, recovery, total) == expected


def test_interval_session(interval_plan, baselines):
    classification = classify_workout(resolve_plan(interval_plan, baselines))

    assert classification.shape == WorkoutShape.INTERVAL
    assert classification.work_count == 4
    assert classification.recovery_count == 3
    assert classification.total_steps == 9
    assert classification.breakdown_section == BreakdownSection.INTERVAL_BREAKDOWN
    assert classification.is_long_continuous is False


def test_long_run_is_long_continuous(long_run_plan, baselines):
    classification = classify_workout(resolve_plan(long_run_plan, baselines))

    assert classification.shape == WorkoutShape.CONTINUOUS
    assert classification.is_long_continuous is True
    assert classification.breakdown_section == BreakdownSection.DISTANCE_BREAKDOWN


def test_hour_exactly_is_not_long():
    classification = classify_workout([_step(0, "main", duration=3600)])
    assert classification.is_long_continuous is False


def test_long_step_without_target_is_not_long():
    classification = classify_workout([_step(0, "main", duration=5400, target=None)])
    assert classification.is_long_continuous is False


def test_long_threshold_from_settings(analytics_settings):
    config = analytics_settings.model_copy(update={"long_continuous_seconds": 1800})
    classification = classify_workout([_step(0, "main", duration=2400)], config=config)
    assert classification.is_long_continuous is True


def test_warmup_work_cooldown_is_continuous():
    steps = [_step(0, "warmup"), _step(1, "work"), _step(2, "cooldown")]
    assert classify_workout(steps).shape == WorkoutShape.CONTINUOUS


def test_rest_steps_count_as_recovery():
    steps = [_step(0, "work"), _step(1, "rest"), _step(2, "cooldown")]
    classification = classify_workout(steps)

    assert classification.recovery_count == 1
    assert classification.shape == WorkoutShape.INTERVAL


def test_targets_do_not_affect_shape():
    with_targets = [_step(0, "work"), _step(1, "work")]
    without_targets = [_step(0, "work", target=None), _step(1, "work", target=None)]
    assert classify_workout(with_targets).shape == classify_workout(without_targets).shape


def test_executed_roles_used_without_plan():
    executed = [
        ExecutedInterval(order_index=0, kind="Work", duration_seconds=240),
        ExecutedInterval(order_index=1, kind="recovery", duration_seconds=120),
        ExecutedInterval(order_index=2, kind="work", duration_seconds=240),
    ]
    classification = classify_workout([], executed)

    assert classification.shape == WorkoutShape.INTERVAL
    assert classification.work_count == 2


def test_empty_session_is_continuous():
    classification = classify_workout([])
    assert classification.shape == WorkoutShape.CONTINUOUS
    assert classification.total_steps == 0
