"""Pace model: table interpolation, projected finish times and training paces.

Both lookup tables are calibrated independently, so the race (marathon) pace
is always derived from the marathon projection rather than read from the pace
table. That keeps ``race * 26.2`` within a second of the projected marathon.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from effort_engine.core.rounding import round_half_up
from effort_engine.plans.tables import PACE_TABLE, RACE_TIME_TABLE, SCORE_KEY
from effort_engine.plans.types import RaceDistance, TrainingPaces

KM_PER_MILE = 1.60934
MARATHON_MILES = 26.2

# Race distances expressed in miles
RACE_MILES: dict[str, float] = {
    "5k": 3.1,
    "10k": 6.2,
    "half": 13.1,
    "marathon": MARATHON_MILES,
}

_PACE_FIELDS = ("base", "race", "steady", "power", "speed")


def interpolate(table: Sequence[dict[str, float]], key: float) -> dict[str, float]:
    """Linearly interpolate every column of a score-keyed table.

    Keys outside the table clamp to the first or last row; there is no
    extrapolation. Values are returned unrounded so callers round once.

    Args:
        table: Rows ordered by ascending score
        key: Effort Score to look up

    Returns:
        Column name to interpolated value, including the score column
    """
    first = table[0]
    last = table[-1]

    if key <= first[SCORE_KEY]:
        if key < first[SCORE_KEY]:
            logger.debug(f"Score {key} below table range, clamping to {first[SCORE_KEY]}")
        return dict(first)
    if key >= last[SCORE_KEY]:
        if key > last[SCORE_KEY]:
            logger.debug(f"Score {key} above table range, clamping to {last[SCORE_KEY]}")
        return dict(last)

    for lower, upper in zip(table, table[1:]):
        if lower[SCORE_KEY] <= key <= upper[SCORE_KEY]:
            fraction = (key - lower[SCORE_KEY]) / (upper[SCORE_KEY] - lower[SCORE_KEY])
            return {column: lower[column] + fraction * (upper[column] - lower[column]) for column in lower}

    # Unreachable for an ordered table
    raise ValueError(f"Table is not ordered by {SCORE_KEY}")


def get_projected_finish_time(score: float, distance: RaceDistance) -> int:
    """Projected race time in whole seconds for an Effort Score.

    Example:
        >>> get_projected_finish_time(41, "marathon")
        12750
    """
    if distance not in RACE_MILES:
        raise ValueError(f"Unknown race distance: {distance}. Valid distances: {list(RACE_MILES)}")
    row = interpolate(RACE_TIME_TABLE, score)
    return round_half_up(row[distance])


def get_paces(score: float) -> TrainingPaces:
    """Training paces (seconds per mile) for an Effort Score.

    base/steady/power/speed come from the pace table; race is the projected
    marathon time divided by 26.2.
    """
    row = interpolate(PACE_TABLE, score)
    marathon_time = get_projected_finish_time(score, "marathon")

    paces = {field: round_half_up(row[field]) for field in _PACE_FIELDS}
    paces["race"] = round_half_up(marathon_time / MARATHON_MILES)
    return TrainingPaces(**paces)


def paces_to_km(paces: TrainingPaces) -> TrainingPaces:
    """Convert seconds per mile to seconds per kilometer."""
    return TrainingPaces(
        **{field: round_half_up(getattr(paces, field) / KM_PER_MILE) for field in _PACE_FIELDS}
    )
