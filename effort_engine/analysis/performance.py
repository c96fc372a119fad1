"""Session performance report.

Pipeline: plan + baselines -> resolved steps -> matched intervals ->
per-step adherence -> weighted session aggregate. Every call builds a fresh
report; identical inputs always serialize to identical output.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from effort_engine.core.rounding import round_half_up, round_to_tenth
from effort_engine.core.settings import AnalyticsSettings, settings
from effort_engine.pairing.interval_matcher import AdherencePair, match_intervals
from effort_engine.workouts.adherence import StepAdherence, StepStatus, method_label, score_step
from effort_engine.workouts.classification import WorkoutClassification, classify_workout
from effort_engine.workouts.models import ExecutedInterval
from effort_engine.workouts.plan_schema import StructuredPlan, parse_plan
from effort_engine.workouts.structure_resolver import plan_discipline, resolve_plan


class StepBreakdown(BaseModel):
    """Per-step row of the report (percentages are integers 0..100)."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    step_id: str
    kind: str
    label: str | None = None
    status: StepStatus
    match_method: str | None = None
    pace_adherence_pct: int | None = None
    duration_adherence_pct: int | None = None
    time_in_range_pct: int | None = None
    weight: float
    low_resolution: bool | None = None
    coefficient_of_variation: float | None = None
    surges: int | None = None
    crashes: int | None = None
    steadiness_score: int | None = None
    unresolved_reference: str | None = None


class SegmentAdherence(BaseModel):
    """Sample time-in-range pooled over every step of one role."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    adherence_pct: int
    samples_in_range: int
    samples_total: int


class SegmentAdherenceSummary(BaseModel):
    """Per-role roll-up; a role with no analyzed samples is None."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    warmup: SegmentAdherence | None = None
    work_intervals: SegmentAdherence | None = None
    recovery: SegmentAdherence | None = None
    cooldown: SegmentAdherence | None = None


SEGMENT_ROLES: dict[str, frozenset[str]] = {
    "warmup": frozenset({"warmup"}),
    "work_intervals": frozenset({"work"}),
    "recovery": frozenset({"recovery", "rest"}),
    "cooldown": frozenset({"cooldown"}),
}


class PerformanceReport(BaseModel):
    """Adherence report for one executed session.

    Session percentages are None when no step could be scored, which
    distinguishes "no data" from a poor execution.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    execution_adherence: int | None
    pace_adherence: int | None
    duration_adherence: int | None
    method_label: str
    workout_shape: str
    is_long_continuous: bool
    breakdown_section: str
    matched_steps: int
    total_steps: int
    per_step_breakdown: tuple[StepBreakdown, ...]
    segment_adherence: SegmentAdherenceSummary = SegmentAdherenceSummary()
    work_average_heart_rate: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Dump with camelCase keys ({executionAdherence, perStepBreakdown, ...})."""
        return self.model_dump(by_alias=True, mode="json")


def _percent(value: float | None) -> int | None:
    if value is None:
        return None
    return max(0, min(100, round_half_up(value)))


def weighted_average(values: Iterable[tuple[float | None, float]]) -> float | None:
    """Weighted mean of (value, weight) pairs, skipping None values.

    Returns:
        The mean, or None if no value carries positive weight
    """
    total_weight = 0.0
    total = 0.0
    for value, weight in values:
        if value is None or weight <= 0:
            continue
        total += value * weight
        total_weight += weight
    if total_weight <= 0:
        return None
    return total / total_weight


def _breakdown_row(pair: AdherencePair, scored: StepAdherence) -> StepBreakdown:
    analysis = scored.analysis
    cv = analysis.coefficient_of_variation if analysis else None
    return StepBreakdown(
        step_id=pair.step.id,
        kind=pair.step.kind,
        label=pair.step.label,
        status=scored.status,
        match_method=pair.match_method,
        pace_adherence_pct=_percent(scored.pace_adherence),
        duration_adherence_pct=_percent(scored.duration_adherence),
        time_in_range_pct=_percent(scored.time_in_range_pct),
        weight=scored.weight,
        low_resolution=analysis.low_resolution if analysis else None,
        coefficient_of_variation=round_to_tenth(cv) if cv is not None else None,
        surges=analysis.surges if analysis else None,
        crashes=analysis.crashes if analysis else None,
        steadiness_score=analysis.steadiness_score if analysis else None,
        unresolved_reference=pair.step.unresolved_reference,
    )


def segment_adherence(pairs: Sequence[AdherencePair], scored: Sequence[StepAdherence]) -> SegmentAdherenceSummary:
    """Pool samples in range over samples analyzed, per step role.

    Only matched steps with sample-level analysis contribute; average-only
    intervals carry no sample counts.
    """
    roles: dict[str, SegmentAdherence | None] = {}
    for role, kinds in SEGMENT_ROLES.items():
        in_range = 0
        total = 0
        for pair, step in zip(pairs, scored):
            analysis = step.analysis
            if pair.step.kind not in kinds or analysis is None or analysis.low_resolution:
                continue
            in_range += analysis.samples_in_range
            total += analysis.samples_total
        if total == 0:
            roles[role] = None
            continue
        roles[role] = SegmentAdherence(
            adherence_pct=_percent(in_range / total * 100),
            samples_in_range=in_range,
            samples_total=total,
        )
    return SegmentAdherenceSummary(**roles)


def work_heart_rate(pairs: Sequence[AdherencePair]) -> int | None:
    """Mean heart rate over matched work intervals.

    Uses valid HR samples when any exist, otherwise the per-interval
    averages.
    """
    work = [pair.interval for pair in pairs if pair.interval is not None and pair.step.kind == "work"]
    readings = [value for interval in work for value in interval.heart_rate_values()]
    if not readings:
        readings = [interval.average_heart_rate for interval in work if interval.average_heart_rate]
    if not readings:
        return None
    return round_half_up(sum(readings) / len(readings))


def build_performance_report(
    pairs: Sequence[AdherencePair],
    classification: WorkoutClassification,
    discipline: str,
    config: AnalyticsSettings | None = None,
) -> PerformanceReport:
    """Aggregate matched pairs into a performance report.

    Args:
        pairs: One pair per planned step, in step order
        classification: Workout shape of the session
        discipline: Session discipline (selects the method label)
        config: Settings for thresholds

    Returns:
        PerformanceReport
    """
    config = config or settings
    scored = [score_step(pair.step, pair.interval, config) for pair in pairs]
    counted = [step for step in scored if step.status == "scored"]

    execution = weighted_average((step.execution_adherence, step.weight) for step in counted)
    pace = weighted_average((step.pace_adherence, step.weight) for step in counted)
    duration = weighted_average((step.duration_adherence, step.weight) for step in counted)

    matched = sum(1 for pair in pairs if pair.is_matched)
    if not counted:
        logger.info(f"No scorable steps ({matched} of {len(pairs)} matched); session adherence is null")

    return PerformanceReport(
        execution_adherence=_percent(execution),
        pace_adherence=_percent(pace),
        duration_adherence=_percent(duration),
        method_label=method_label(discipline, [pair.step for pair in pairs], config),
        workout_shape=classification.shape.value,
        is_long_continuous=classification.is_long_continuous,
        breakdown_section=classification.breakdown_section.value,
        matched_steps=matched,
        total_steps=len(pairs),
        per_step_breakdown=tuple(_breakdown_row(pair, step) for pair, step in zip(pairs, scored)),
        segment_adherence=segment_adherence(pairs, scored),
        work_average_heart_rate=work_heart_rate(pairs),
    )


def normalize_executed(executed: Sequence[ExecutedInterval | Mapping[str, Any]]) -> list[ExecutedInterval]:
    """Convert executed payload dicts to ExecutedInterval, keeping order.

    All reported channels are kept; the one scored is picked per matched
    step from its target band.
    """
    intervals: list[ExecutedInterval] = []
    for index, item in enumerate(executed):
        if isinstance(item, ExecutedInterval):
            intervals.append(item)
        else:
            intervals.append(ExecutedInterval.from_payload(dict(item), index))
    return intervals


def analyze_workout(
    plan: StructuredPlan | dict[str, Any],
    baselines: Mapping[str, Any],
    executed: Sequence[ExecutedInterval | Mapping[str, Any]],
    discipline: str | None = None,
    strict: bool = False,
    config: AnalyticsSettings | None = None,
) -> PerformanceReport:
    """Analyze one executed session against its structured plan.

    Args:
        plan: Structured plan (model or raw payload)
        baselines: Flat baseline map
        executed: Executed intervals (models or ingestion payload dicts)
        discipline: Session discipline; inferred from the plan when None
        strict: Raise on missing baselines instead of leaving targets empty
        config: Settings override

    Returns:
        PerformanceReport

    Raises:
        InvalidPlanError: If the plan payload is malformed
        MissingBaselineError: If strict and a baseline reference is missing
    """
    config = config or settings
    structured = parse_plan(plan)
    session_discipline = plan_discipline(structured, discipline)

    steps = resolve_plan(structured, baselines, discipline=session_discipline, strict=strict, config=config)
    intervals = normalize_executed(executed)
    classification = classify_workout(steps, intervals, config)
    pairs = match_intervals(steps, intervals)

    logger.info(
        f"Analyzing {session_discipline} session: {len(steps)} steps, "
        f"{len(intervals)} executed intervals, shape={classification.shape.value}"
    )
    return build_performance_report(pairs, classification, session_discipline, config)
