"""Tests for baseline reference resolution."""

import pytest

from effort_engine.errors import MissingBaselineError
from effort_engine.workouts.baselines import (
    lookup_baseline,
    pace_offset_seconds,
    resolve_load,
    resolve_pace,
    resolve_power,
    split_reference,
)
from effort_engine.workouts.plan_schema import BaselineRef, LoadSpec, PowerTarget


class TestReferences:
    def test_split_reference(self):
        assert split_reference("user.easyPace") == ("easyPace", None)
        assert split_reference("user.easyPace +0:15") == ("easyPace", "+0:15")
        assert split_reference("user.ftp 95%") == ("ftp", "95%")

    def test_literal_is_not_reference(self):
        assert split_reference("7:30/mi") is None

    def test_lookup_missing(self):
        with pytest.raises(MissingBaselineError) as exc_info:
            lookup_baseline({"easyPace": ""}, "easyPace")
        assert exc_info.value.field_name == "easyPace"


@pytest.mark.parametrize(("modifier", "expected"), [("+0:15", 15), ("+1:05", 65), ("+10s", 10), ("-5s", -5), (None, 0)])
def test_pace_offset_seconds(modifier, expected):
    assert pace_offset_seconds(modifier) == expected


def test_unrecognized_pace_modifier_is_ignored():
    assert pace_offset_seconds("a bit slower") == 0


class TestResolvePace:
    def test_reference(self, baselines):
        assert resolve_pace("user.easyPace", baselines) == 540

    def test_reference_with_clock_modifier(self, baselines):
        assert resolve_pace("user.easyPace+0:15", baselines) == 555

    def test_object_with_seconds_modifier(self, baselines):
        assert resolve_pace(BaselineRef(baseline="user.easyPace", modifier="+10s"), baselines) == 550

    def test_km_baseline_modified_in_km_then_converted(self):
        """5:00/km + 0:10 = 5:10/km = 499 s/mi."""
        assert resolve_pace("user.easyPace +0:10", {"easyPace": "5:00/km"}) == 499

    def test_numeric_baseline_is_seconds_per_mile(self):
        assert resolve_pace("user.tempoPace", {"tempoPace": 480}) == 480

    def test_literal_pace(self, baselines):
        assert resolve_pace("7:30/mi", baselines) == 450

    def test_unparseable_literal(self, baselines):
        assert resolve_pace("comfortably hard", baselines) is None

    def test_missing_baseline_raises(self):
        with pytest.raises(MissingBaselineError) as exc_info:
            resolve_pace("user.fiveKPace", {"easyPace": "9:00/mi"})
        assert exc_info.value.field_name == "fiveKPace"


class TestResolvePower:
    def test_literal_range(self, baselines):
        assert resolve_power("240-260W", baselines) == (240.0, 260.0)

    def test_literal_single(self, baselines):
        assert resolve_power("250W", baselines) == (250.0, 250.0)

    def test_range_object(self, baselines):
        assert resolve_power(PowerTarget(range="200-220W"), baselines) == (200.0, 220.0)

    def test_percent_of_ftp(self, baselines):
        """95% of 250 W = 237.5, rounded half-up."""
        assert resolve_power(PowerTarget(baseline="user.ftp", modifier="95%"), baselines) == (238.0, 238.0)

    def test_offset_from_ftp(self, baselines):
        assert resolve_power(PowerTarget(baseline="user.ftp", modifier="+10W"), baselines) == (260.0, 260.0)

    def test_reference_string(self, baselines):
        assert resolve_power("user.ftp", baselines) == (250.0, 250.0)

    def test_missing_ftp(self):
        with pytest.raises(MissingBaselineError):
            resolve_power("user.ftp", {})


class TestResolveLoad:
    def test_percent_of_one_rep_max_rounds_to_5lb(self, baselines):
        """75% of 225 = 168.75 lb -> 170 lb."""
        assert resolve_load(LoadSpec(percentage=75, baseline="user.squat"), baselines) == 170.0

    def test_minimum_load(self):
        assert resolve_load(LoadSpec(percentage=1, baseline="user.squat"), {"squat": 100}) == 5.0

    def test_no_percentage(self, baselines):
        assert resolve_load(LoadSpec(baseline="user.squat"), baselines) is None

    def test_missing_one_rep_max(self):
        with pytest.raises(MissingBaselineError):
            resolve_load(LoadSpec(percentage=75, baseline="user.deadlift"), {"squat": 225})
