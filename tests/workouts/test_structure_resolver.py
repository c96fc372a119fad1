"""Tests for structured plan resolution into flat planned steps."""

import pytest

from effort_engine.errors import InvalidPlanError, MissingBaselineError
from effort_engine.workouts.plan_schema import parse_plan
from effort_engine.workouts.structure_resolver import plan_discipline, plan_tolerances, resolve_plan


class TestIntervalSession:
    def test_repeat_expansion(self, interval_plan, baselines):
        """Recoveries sit between repeats, not after the last one."""
        steps = resolve_plan(interval_plan, baselines)

        assert [step.kind for step in steps] == [
            "warmup",
            "work",
            "recovery",
            "work",
            "recovery",
            "work",
            "recovery",
            "work",
            "cooldown",
        ]
        assert [step.order_index for step in steps] == list(range(9))
        assert [step.id for step in steps] == [f"step_{i}" for i in range(9)]

    def test_work_band_uses_quality_tolerance(self, interval_plan, baselines):
        work = resolve_plan(interval_plan, baselines)[1]

        assert work.duration_seconds == 240
        assert work.tolerance_class == "quality"
        assert (work.target_range.lower, work.target_range.upper) == (403, 437)

    def test_warmup_and_recovery_get_implicit_easy_pace(self, interval_plan, baselines):
        steps = resolve_plan(interval_plan, baselines)
        warmup, recovery, cooldown = steps[0], steps[2], steps[8]

        assert (warmup.target_range.lower, warmup.target_range.upper) == (508, 572)
        assert recovery.duration_seconds == 120
        assert recovery.target_range == warmup.target_range
        assert cooldown.duration_seconds == 600
        assert warmup.tolerance_class == "easy"

    def test_no_implicit_pace_without_easy_baseline(self, interval_plan, baselines):
        del baselines["easyPace"]
        steps = resolve_plan(interval_plan, baselines)

        assert steps[0].target_range is None
        assert steps[0].unresolved_reference is None

    def test_export_hints_override_tolerance(self, interval_plan, baselines):
        interval_plan["export_hints"] = {"pace_tolerance_quality": 0.1}
        work = resolve_plan(interval_plan, baselines)[1]

        assert (work.target_range.lower, work.target_range.upper) == (378, 462)

    def test_settings_tolerance(self, interval_plan, baselines, analytics_settings):
        config = analytics_settings.model_copy(update={"pace_tolerance_quality": 0.1})
        work = resolve_plan(interval_plan, baselines, config=config)[1]

        assert (work.target_range.lower, work.target_range.upper) == (378, 462)

    def test_distance_step_gets_estimated_seconds(self, baselines):
        """800m at a 420 s/mi center is ~209 s."""
        plan = {
            "type": "interval_session",
            "structure": [
                {
                    "type": "main_set",
                    "repetitions": 2,
                    "work_segment": {"distance": "800m", "target_pace": "user.fiveKPace"},
                    "recovery_segment": {"duration": "90s"},
                }
            ],
        }
        steps = resolve_plan(plan, baselines)

        assert len(steps) == 3
        assert steps[0].distance_meters == 800
        assert steps[0].duration_seconds is None
        assert steps[0].estimated_seconds == 209
        assert steps[0].planned_seconds == 209
        assert steps[1].duration_seconds == 90

    def test_resolution_is_deterministic(self, interval_plan, baselines):
        assert resolve_plan(interval_plan, baselines) == resolve_plan(interval_plan, baselines)


def test_tempo_with_modifier(baselines):
    plan = {
        "type": "tempo_session",
        "structure": [
            {"type": "tempo", "duration": "20min", "target_pace": {"baseline": "user.thresholdPace", "modifier": "+0:05"}}
        ],
    }
    (step,) = resolve_plan(plan, baselines)

    assert step.kind == "work"
    assert step.duration_seconds == 1200
    assert (step.target_range.lower, step.target_range.upper) == (437, 473)


def test_long_run_is_single_main_step(long_run_plan, baselines):
    (step,) = resolve_plan(long_run_plan, baselines)

    assert step.kind == "main"
    assert step.duration_seconds == 5400
    assert (step.target_range.lower, step.target_range.upper) == (508, 572)


def test_bike_intervals_power_range(baselines):
    plan = {
        "type": "bike_intervals",
        "structure": [
            {
                "type": "main_set",
                "repetitions": 3,
                "work_segment": {"duration": "8min", "target_power": "240-260W"},
                "recovery_segment": {"duration": "4min"},
            }
        ],
    }
    steps = resolve_plan(plan, baselines)

    assert len(steps) == 5
    assert {step.discipline for step in steps} == {"ride"}
    work = steps[0]
    assert work.target_range.metric == "power"
    assert (work.target_range.lower, work.target_range.upper) == (240, 260)
    # Recoveries on the bike have no implicit pace
    assert steps[1].target_range is None


def test_single_watt_target_is_widened(baselines):
    """A zero-width power target becomes +/- the quality tolerance."""
    plan = {
        "type": "bike_intervals",
        "structure": [{"type": "tempo", "duration": "20min", "target_power": {"baseline": "user.ftp", "modifier": "90%"}}],
    }
    (step,) = resolve_plan(plan, baselines)

    assert (step.target_range.lower, step.target_range.upper) == (216, 234)


def test_swim_session(baselines):
    plan = {
        "type": "swim_session",
        "structure": [
            {"type": "warmup", "distance": "200yd"},
            {"type": "drill_set", "drill_type": "catch_up", "repetitions": 4, "distance": "50yd", "rest": "15s"},
            {"type": "main_set", "set_type": "aerobic", "repetitions": 3, "distance": "100yd", "rest": "20s"},
            {"type": "cooldown", "distance": "100yd"},
        ],
    }
    steps = resolve_plan(plan, baselines)

    assert len(steps) == 14
    assert {step.discipline for step in steps} == {"swim"}
    assert steps[1].label == "drill catch up"
    assert steps[1].distance_meters == pytest.approx(45.72)
    assert steps[2].kind == "rest"
    assert steps[2].duration_seconds == 15
    # Swim steps carry no implicit run pace
    assert steps[0].target_range is None


def test_strength_session(baselines):
    plan = {
        "type": "strength_session",
        "structure": [
            {"type": "main_lift", "exercise": "back_squat", "sets": 5, "reps": 5, "load": {"percentage": 75, "baseline": "user.squat"}},
            {"type": "accessory", "exercise": "pull_ups", "sets": 3, "reps": "AMRAP"},
        ],
    }
    squat, pull_ups = resolve_plan(plan, baselines)

    assert squat.discipline == "strength"
    assert squat.label == "back squat"
    assert (squat.sets, squat.reps) == (5, 5)
    assert squat.target_range.metric == "load"
    assert squat.target_range.lower == squat.target_range.upper == 170
    assert pull_ups.reps is None
    assert pull_ups.target_range is None


def test_brick_session(baselines):
    plan = {
        "type": "brick_session",
        "structure": [
            {"type": "bike_segment", "duration": "60min", "target_power": "200-220W"},
            {"type": "transition", "duration": "2min"},
            {"type": "run_segment", "duration": "20min", "target_pace": "user.thresholdPace"},
        ],
    }
    bike, transition, run = resolve_plan(plan, baselines)

    assert [bike.label, transition.label, run.label] == ["bike", "T1", "run"]
    assert [bike.discipline, run.discipline] == ["ride", "run"]
    assert transition.kind == "rest"
    assert bike.target_range.metric == "power"
    assert run.target_range.metric == "pace"


class TestMissingBaselines:
    def test_leaves_target_unresolved(self, baselines):
        plan = {"type": "tempo_session", "structure": [{"type": "tempo", "duration": "20min", "target_pace": "user.marathonPace"}]}
        (step,) = resolve_plan(plan, baselines)

        assert step.target_range is None
        assert step.unresolved_reference == "user.marathonPace"
        assert step.duration_seconds == 1200

    def test_strict_raises(self, baselines):
        plan = {"type": "tempo_session", "structure": [{"type": "tempo", "duration": "20min", "target_pace": "user.marathonPace"}]}
        with pytest.raises(MissingBaselineError) as exc_info:
            resolve_plan(plan, baselines, strict=True)
        assert exc_info.value.code == "MISSING_BASELINE"

    def test_unparseable_literal_is_unresolved(self, baselines):
        plan = {"type": "tempo_session", "structure": [{"type": "tempo", "duration": "20min", "target_pace": "comfortably hard"}]}
        (step,) = resolve_plan(plan, baselines)

        assert step.target_range is None
        assert step.unresolved_reference == "comfortably hard"


def test_unknown_segment_is_skipped(baselines):
    plan = {"type": "endurance_session", "structure": [{"type": "stretching", "duration": "5min"}, {"type": "main_effort", "duration": "30min"}]}
    steps = resolve_plan(plan, baselines)

    assert len(steps) == 1
    assert steps[0].order_index == 0


def test_zero_repetitions_emit_no_steps(baselines):
    plan = {
        "type": "interval_session",
        "structure": [
            {
                "type": "main_set",
                "repetitions": 0,
                "work_segment": {"duration": "4min", "target_pace": "user.thresholdPace"},
                "recovery_segment": {"duration": "2min"},
            }
        ],
    }
    assert resolve_plan(plan, baselines) == []


def test_missing_repetitions_default_to_one(baselines):
    plan = {
        "type": "bike_intervals",
        "structure": [{"type": "main_set", "work_segment": {"duration": "20min", "target_power": "240-260W"}}],
    }
    (step,) = resolve_plan(plan, baselines)

    assert step.kind == "work"
    assert step.duration_seconds == 1200


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "interval_session", "structure": [{"duration": "10min"}]},
        {"type": "interval_session", "structure": "warmup then intervals"},
        {"type": "interval_session", "structure": [{"type": "main_set", "repetitions": -1}]},
    ],
)
def test_invalid_plan(payload, baselines):
    with pytest.raises(InvalidPlanError) as exc_info:
        resolve_plan(payload, baselines)
    assert exc_info.value.code == "INVALID_PLAN"
    assert exc_info.value.details


@pytest.mark.parametrize(
    ("payload", "explicit", "expected"),
    [
        ({"type": "interval_session"}, None, "run"),
        ({"type": "bike_intervals"}, None, "ride"),
        ({"type": "swim_session"}, None, "swim"),
        ({"type": "Strength_Session"}, None, "strength"),
        ({"type": "interval_session", "discipline": "Ride"}, None, "ride"),
        ({"type": "bike_intervals"}, "run", "run"),
    ],
)
def test_plan_discipline(payload, explicit, expected):
    assert plan_discipline(parse_plan(payload), explicit) == expected


def test_plan_tolerances_defaults(analytics_settings):
    tolerances = plan_tolerances(parse_plan({"type": "interval_session"}), analytics_settings)
    assert tolerances == {"quality": 0.04, "easy": 0.06}
