"""Effort Score calculation.

An Effort Score is derived from one of three sources:
- a race result (distance + time), interpolated on the race-time table
- a known short-race pace, converted to a race time first
- a self-reported fitness tier, mapped to a fixed calibration score
"""

from __future__ import annotations

from loguru import logger

from effort_engine.core.rounding import round_to_tenth
from effort_engine.errors import UnsupportedDistanceError
from effort_engine.plans.formatting import format_pace
from effort_engine.plans.pace import RACE_MILES, get_paces, paces_to_km
from effort_engine.plans.recency import adjust_score_for_recency
from effort_engine.plans.tables import RACE_TIME_TABLE, SCORE_KEY
from effort_engine.plans.types import (
    EffortScoreResult,
    FitnessLevel,
    PaceConsistency,
    RaceDistance,
    RaceRecency,
    RaceResult,
)

# Accepted meter ranges per canonical distance (inclusive)
DISTANCE_BANDS: dict[str, tuple[float, float]] = {
    "5k": (4950, 5050),
    "10k": (9900, 10100),
    "half": (21000, 21200),
    "marathon": (42000, 42300),
}

DISTANCE_METERS: dict[str, int] = {
    "5k": 5000,
    "10k": 10000,
    "half": 21097,
    "marathon": 42195,
}

# Calibration scores for users without a race result
FITNESS_TIER_SCORES: dict[str, float] = {
    "beginner": 32,  # ~28:00 5K
    "intermediate": 40,  # ~24:00 5K
    "advanced": 48,  # ~20:00 5K
}

# Easy pace window around the table base pace (seconds per mile)
EASY_RANGE_FASTER = 15
EASY_RANGE_SLOWER = 30


def classify_race_distance(distance_meters: float) -> RaceDistance:
    """Map a distance in meters to a canonical race distance.

    Raises:
        UnsupportedDistanceError: If no canonical distance band contains it
    """
    for distance, (low, high) in DISTANCE_BANDS.items():
        if low <= distance_meters <= high:
            return distance  # type: ignore[return-value]
    logger.warning(f"Unsupported race distance: {distance_meters} m")
    raise UnsupportedDistanceError(distance_meters)


def race_distance_to_meters(distance: RaceDistance) -> int:
    return DISTANCE_METERS[distance]


def score_from_race_time(distance: RaceDistance, time_seconds: float) -> float:
    """Interpolate the Effort Score for a time over a canonical distance.

    Times decrease as the score increases. Times slower than the lowest row
    or faster than the highest row clamp to that row's score.
    """
    first = RACE_TIME_TABLE[0]
    last = RACE_TIME_TABLE[-1]

    if time_seconds >= first[distance]:
        return float(first[SCORE_KEY])
    if time_seconds <= last[distance]:
        return float(last[SCORE_KEY])

    for lower, upper in zip(RACE_TIME_TABLE, RACE_TIME_TABLE[1:]):
        if upper[distance] <= time_seconds <= lower[distance]:
            fraction = (lower[distance] - time_seconds) / (lower[distance] - upper[distance])
            score = lower[SCORE_KEY] + fraction * (upper[SCORE_KEY] - lower[SCORE_KEY])
            return round_to_tenth(score)

    raise ValueError(f"Race time table is not ordered for {distance}")


def calculate_effort_score(distance_meters: float, time_seconds: float) -> float:
    """Effort Score from a race result, rounded to one decimal.

    Args:
        distance_meters: Race distance in meters
        time_seconds: Finish time in seconds

    Returns:
        Effort Score (30..85)

    Raises:
        UnsupportedDistanceError: If the distance is not 5k/10k/half/marathon
    """
    distance = classify_race_distance(distance_meters)
    return score_from_race_time(distance, time_seconds)


def calculate_score_from_pace(pace_seconds_per_mile: float, distance: RaceDistance = "5k") -> float:
    """Effort Score from a known race pace (seconds per mile)."""
    if distance not in RACE_MILES:
        raise ValueError(f"Unknown race distance: {distance}. Valid distances: {list(RACE_MILES)}")
    estimated_time = pace_seconds_per_mile * RACE_MILES[distance]
    return score_from_race_time(distance, estimated_time)


def estimate_score_from_fitness(level: FitnessLevel) -> float:
    """Fixed calibration score for a self-reported fitness tier."""
    if level not in FITNESS_TIER_SCORES:
        raise ValueError(f"Unknown fitness level: {level}. Valid levels: {list(FITNESS_TIER_SCORES)}")
    return float(FITNESS_TIER_SCORES[level])


def calculate_effort_score_result(distance_meters: float, time_seconds: float) -> EffortScoreResult:
    """Race result to Effort Score plus paces per mile and per kilometer."""
    score = calculate_effort_score(distance_meters, time_seconds)
    paces = get_paces(score)
    return EffortScoreResult(score=score, paces=paces, paces_km=paces_to_km(paces))


def get_expected_easy_pace_range(score: float) -> tuple[int, int]:
    """Return (fastest, slowest) acceptable easy pace for a score."""
    base = get_paces(score).base
    return base - EASY_RANGE_FASTER, base + EASY_RANGE_SLOWER


def validate_pace_consistency(easy_pace_seconds: int, five_k_pace_seconds: int) -> PaceConsistency:
    """Check whether a user's easy pace fits their 5K pace.

    An easy pace faster than the expected window is flagged invalid with a
    suggested replacement. A slower one stays valid but carries a note.
    """
    score = calculate_score_from_pace(five_k_pace_seconds, "5k")
    fastest, slowest = get_expected_easy_pace_range(score)

    if fastest <= easy_pace_seconds <= slowest:
        return PaceConsistency(is_valid=True)

    expected_base = get_paces(score).base
    if easy_pace_seconds < fastest:
        return PaceConsistency(
            is_valid=False,
            warning=(
                f"Your easy pace seems fast for a {format_pace(five_k_pace_seconds)}/mi 5K pace. "
                f"Expected around {format_pace(expected_base)}/mi."
            ),
            suggested_easy_pace=expected_base,
        )
    return PaceConsistency(
        is_valid=True,
        warning="Your easy pace is slower than typical for your 5K pace, but that's okay if it feels right.",
    )


def calculate_paces_from_known_paces(easy_pace_seconds: int, five_k_pace_seconds: int) -> EffortScoreResult:
    """Derive paces from a 5K pace, keeping the user's own easy pace as base."""
    score = calculate_score_from_pace(five_k_pace_seconds, "5k")
    paces = get_paces(score).model_copy(update={"base": easy_pace_seconds})
    return EffortScoreResult(score=score, paces=paces, paces_km=paces_to_km(paces))


def derive_paces(
    race_result: RaceResult | dict | None = None,
    pace_seconds_per_mile: float | None = None,
    tier: FitnessLevel | None = None,
    pace_distance: RaceDistance = "5k",
    recency: RaceRecency | None = None,
    weekly_mileage: float | str | None = None,
) -> EffortScoreResult:
    """Pace-derivation entry point.

    Exactly one source must be given. A recency bucket, when provided,
    decays the score by the recency/volume matrix before paces are derived.

    Args:
        race_result: Race result ({distanceMeters, timeSeconds} accepted)
        pace_seconds_per_mile: Known race pace for ``pace_distance``
        tier: Self-reported fitness tier
        pace_distance: Distance the known pace was run over
        recency: How long ago the source result was achieved
        weekly_mileage: Current weekly volume (number or range string)

    Returns:
        EffortScoreResult with paces per mile and per kilometer
    """
    sources = [source for source in (race_result, pace_seconds_per_mile, tier) if source is not None]
    if len(sources) != 1:
        raise ValueError("Provide exactly one of race_result, pace_seconds_per_mile or tier")

    if race_result is not None:
        result = race_result if isinstance(race_result, RaceResult) else RaceResult.model_validate(race_result)
        score = calculate_effort_score(result.distance_meters, result.time_seconds)
    elif pace_seconds_per_mile is not None:
        score = calculate_score_from_pace(pace_seconds_per_mile, pace_distance)
    else:
        score = estimate_score_from_fitness(tier)  # type: ignore[arg-type]

    if recency is not None:
        score = adjust_score_for_recency(score, recency, weekly_mileage)

    logger.debug(f"Derived Effort Score {score}")
    paces = get_paces(score)
    return EffortScoreResult(score=score, paces=paces, paces_km=paces_to_km(paces))
