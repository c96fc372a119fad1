"""Effort Score and training pace derivation."""

from effort_engine.plans.effort_score import (
    calculate_effort_score,
    calculate_effort_score_result,
    calculate_paces_from_known_paces,
    calculate_score_from_pace,
    derive_paces,
    estimate_score_from_fitness,
)
from effort_engine.plans.pace import get_paces, get_projected_finish_time, interpolate, paces_to_km
from effort_engine.plans.recency import adjust_score_for_recency

__all__ = [
    "adjust_score_for_recency",
    "calculate_effort_score",
    "calculate_effort_score_result",
    "calculate_paces_from_known_paces",
    "calculate_score_from_pace",
    "derive_paces",
    "estimate_score_from_fitness",
    "get_paces",
    "get_projected_finish_time",
    "interpolate",
    "paces_to_km",
]
