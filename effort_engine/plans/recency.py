"""Recency adjustment of an Effort Score.

Fitness stability matrix, additive delta by how stale the source result is
and current weekly volume (miles per week):

| Recency     | Low (<20) | Medium (20-35) | High (35+) |
|-------------|-----------|----------------|------------|
| < 3 months  | 0         | 0              | +1         |
| 3-6 months  | -2        | -1             | 0          |
| 6-12 months | -4        | -2             | -1         |
| > 1 year    | -6        | -4             | -2         |
"""

from __future__ import annotations

from datetime import date

from effort_engine.core.rounding import round_to_tenth
from effort_engine.core.settings import AnalyticsSettings, settings
from effort_engine.plans.types import RaceRecency, VolumeLevel

FITNESS_STABILITY_MATRIX: dict[str, dict[str, int]] = {
    "recent": {"low": 0, "medium": 0, "high": 1},
    "3-6months": {"low": -2, "medium": -1, "high": 0},
    "6-12months": {"low": -4, "medium": -2, "high": -1},
    "over1year": {"low": -6, "medium": -4, "high": -2},
}

MPW_RANGE_MIDPOINTS: dict[str, float] = {
    "12-15": 13.5,
    "16-19": 17.5,
    "20-25": 22.5,
    "25-35": 30,
    "35-45": 40,
    "45+": 50,
}

DEFAULT_MPW = 25.0


def mpw_to_volume_level(mpw: float) -> VolumeLevel:
    if mpw >= 35:
        return "high"
    if mpw >= 20:
        return "medium"
    return "low"


def mpw_range_to_number(mpw_range: str | None) -> float:
    """Midpoint of a weekly-volume range string; medium volume when unknown."""
    return float(MPW_RANGE_MIDPOINTS.get(mpw_range or "", DEFAULT_MPW))


def recency_for_race_date(race_date: date, today: date) -> RaceRecency:
    """Bucket a dated race result by its age."""
    age_days = (today - race_date).days
    if age_days <= 91:
        return "recent"
    if age_days <= 182:
        return "3-6months"
    if age_days <= 365:
        return "6-12months"
    return "over1year"


def adjust_score_for_recency(
    score: float,
    recency: RaceRecency,
    current_mpw: float | str | None = None,
    config: AnalyticsSettings | None = None,
) -> float:
    """Apply the stability matrix delta to a score.

    Args:
        score: Effort Score from the source result
        recency: Age bucket of the source result
        current_mpw: Weekly miles as a number or range string ("25-35")
        config: Settings providing the score floor

    Returns:
        Adjusted score, rounded to one decimal and never below the floor
    """
    config = config or settings
    if recency not in FITNESS_STABILITY_MATRIX:
        raise ValueError(f"Unknown recency: {recency}. Valid values: {list(FITNESS_STABILITY_MATRIX)}")

    if isinstance(current_mpw, str):
        mpw = mpw_range_to_number(current_mpw)
    elif current_mpw is None:
        mpw = DEFAULT_MPW
    else:
        mpw = float(current_mpw)

    delta = FITNESS_STABILITY_MATRIX[recency][mpw_to_volume_level(mpw)]
    return max(config.fitness_floor, round_to_tenth(score + delta))
