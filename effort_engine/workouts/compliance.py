"""Granular time-in-range analysis for one matched step.

Pure math over the executed sample stream of an interval:
- time-in-range: share of samples inside the step's target band
- coefficient of variation of the instantaneous values
- surges and crashes: excursions beyond the band by more than the surge
  threshold, counted once per contiguous excursion
- steadiness score and average sample-to-sample change

The channel analyzed (pace, power or load) follows the step target. Without
samples on that channel the interval average is compared to the band instead
(binary in/out) and the result is marked low-resolution.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from loguru import logger

from effort_engine.core.settings import AnalyticsSettings, settings
from effort_engine.workouts.models import ExecutedInterval, PlannedStep, TargetRange

# Steadiness penalties: (CV% above, points)
CV_PENALTIES: tuple[tuple[float, int], ...] = ((10, 40), (7, 30), (5, 20), (3, 10))
# Average pace change (s/mi between samples) penalties: (above, points)
CHANGE_PENALTIES: tuple[tuple[float, int], ...] = ((15, 20), (10, 15), (5, 10))
# Share of samples in surges (or crashes) above which steadiness is penalized
EXCURSION_SHARE_LIMIT = 0.1
EXCURSION_PENALTY = 20


@dataclass(frozen=True)
class GranularAnalysis:
    """Result of analyzing one planned/executed pair."""

    low_resolution: bool
    time_in_range_pct: float | None
    samples_in_range: int = 0
    samples_total: int = 0
    average_value: float | None = None
    coefficient_of_variation: float | None = None
    is_consistent: bool | None = None
    surges: int | None = None
    crashes: int | None = None
    avg_change: float | None = None
    steadiness_score: int | None = None


def count_excursions(mask: np.ndarray) -> int:
    """Number of contiguous True runs in a boolean mask."""
    if mask.size == 0:
        return 0
    as_int = mask.astype(np.int8)
    return int(as_int[0] + np.count_nonzero(np.diff(as_int) == 1))


def excursion_masks(values: np.ndarray, target: TargetRange, threshold: float) -> tuple[np.ndarray, np.ndarray]:
    """Boolean (surge, crash) masks for samples far outside the band.

    For pace a surge is running faster (lower value) than the band, for
    power and load a surge is a higher value.
    """
    below = values < target.lower * (1 - threshold)
    above = values > target.upper * (1 + threshold)
    if target.metric == "pace":
        return below, above
    return above, below


def steadiness_score(cv_pct: float, surge_share: float, crash_share: float, avg_change: float | None) -> int:
    """100 minus penalties for variability, surges, crashes and jumpiness."""
    score = 100
    for limit, penalty in CV_PENALTIES:
        if cv_pct > limit:
            score -= penalty
            break
    if surge_share > EXCURSION_SHARE_LIMIT:
        score -= EXCURSION_PENALTY
    if crash_share > EXCURSION_SHARE_LIMIT:
        score -= EXCURSION_PENALTY
    if avg_change is not None:
        for limit, penalty in CHANGE_PENALTIES:
            if avg_change > limit:
                score -= penalty
                break
    return max(0, score)


def _low_resolution(target: TargetRange, interval: ExecutedInterval) -> GranularAnalysis:
    average = interval.average_for(target.metric)
    if average is None or average <= 0:
        return GranularAnalysis(low_resolution=True, time_in_range_pct=None)
    logger.debug(f"Interval {interval.order_index}: no samples, using average {average}")
    return GranularAnalysis(
        low_resolution=True,
        time_in_range_pct=100.0 if target.contains(average) else 0.0,
        average_value=float(average),
    )


def analyze_interval(
    step: PlannedStep,
    interval: ExecutedInterval,
    config: AnalyticsSettings | None = None,
) -> GranularAnalysis | None:
    """Analyze one matched step against its executed interval.

    Args:
        step: Planned step with a target band
        interval: Executed interval; the channel read follows the target metric
        config: Settings providing CV and surge thresholds

    Returns:
        GranularAnalysis, or None if the step has no target band
    """
    config = config or settings
    target = step.target_range
    if target is None:
        return None

    readings = interval.sample_values(target.metric)
    if not readings:
        return _low_resolution(target, interval)

    values = np.array(readings, dtype=float)
    total = int(values.size)

    in_range = (values >= target.lower) & (values <= target.upper)
    samples_in_range = int(np.count_nonzero(in_range))

    mean = float(values.mean())
    cv_pct = float(values.std(ddof=0) / mean * 100) if mean > 0 else 0.0

    surge_mask, crash_mask = excursion_masks(values, target, config.surge_threshold)

    avg_change: float | None = None
    if total >= 2:
        avg_change = float(np.abs(np.diff(values)).mean())

    steadiness = steadiness_score(
        cv_pct,
        float(np.count_nonzero(surge_mask)) / total,
        float(np.count_nonzero(crash_mask)) / total,
        avg_change if target.metric == "pace" else None,
    )

    return GranularAnalysis(
        low_resolution=False,
        time_in_range_pct=samples_in_range / total * 100,
        samples_in_range=samples_in_range,
        samples_total=total,
        average_value=mean,
        coefficient_of_variation=cv_pct,
        is_consistent=cv_pct <= config.cv_threshold_pct,
        surges=count_excursions(surge_mask),
        crashes=count_excursions(crash_mask),
        avg_change=avg_change,
        steadiness_score=steadiness,
    )
