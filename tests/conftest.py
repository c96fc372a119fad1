"""Root conftest for all tests.

Shared fixtures: baseline maps, structured plan payloads and executed
interval payload builders.
"""

import pytest

from effort_engine.core.settings import AnalyticsSettings


@pytest.fixture
def analytics_settings():
    """Default settings, independent of the environment."""
    return AnalyticsSettings(_env_file=None)


@pytest.fixture
def baselines():
    """Baseline map of a ~7:00/mi 5K runner."""
    return {
        "easyPace": "9:00/mi",
        "fiveKPace": "7:00/mi",
        "thresholdPace": "7:30/mi",
        "ftp": 250,
        "squat": 225,
        "bench": 185,
    }


@pytest.fixture
def interval_plan():
    """Warmup, 4 x 4min @ 5K pace with 2min recoveries, cooldown.

    Resolves to 9 steps: warmup, work/recovery x 3, work, cooldown.
    """
    return {
        "type": "interval_session",
        "title": "4 x 4min @ 5K",
        "structure": [
            {"type": "warmup", "duration": "15min"},
            {
                "type": "main_set",
                "set_type": "intervals",
                "repetitions": 4,
                "work_segment": {"duration": "4min", "target_pace": "user.fiveKPace"},
                "recovery_segment": {"duration": "2min"},
            },
            {"type": "cooldown", "duration": "10min"},
        ],
    }


@pytest.fixture
def long_run_plan():
    """Single 90 minute easy effort."""
    return {
        "type": "endurance_session",
        "title": "Long run",
        "structure": [{"type": "main_effort", "duration": "90min"}],
    }


@pytest.fixture
def make_payload():
    """Build an executed interval payload as delivered by ingestion."""

    def _make(duration_s, avg_pace=None, samples=None, planned_step_id=None, planned_index=None, **executed):
        payload = {
            "executed": {"duration_s": duration_s, "avg_pace_s_per_mi": avg_pace, **executed},
            "samples": [{"t": i, "pace_s_per_mi": value} for i, value in enumerate(samples or [])],
        }
        if planned_step_id is not None:
            payload["planned_step_id"] = planned_step_id
        if planned_index is not None:
            payload["planned_index"] = planned_index
        return payload

    return _make
