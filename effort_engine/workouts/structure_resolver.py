"""Structured plan resolver.

Expands a structured plan into a flat, ordered list of PlannedStep:
1. Validate the plan payload
2. Walk segments in order, dispatching on segment type
3. Expand repeat blocks (recoveries between repeats, not after the last)
4. Resolve baseline references and attach tolerance bands

Resolution is deterministic: the same plan and baselines always produce the
same steps. Unresolvable baseline references leave the step target empty.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

from effort_engine.core.rounding import round_half_up
from effort_engine.core.settings import AnalyticsSettings, settings
from effort_engine.errors import MissingBaselineError
from effort_engine.workouts.baselines import Baselines, resolve_load, resolve_pace, resolve_power
from effort_engine.workouts.models import PlannedStep, StepKind, TargetRange, ToleranceClass
from effort_engine.workouts.plan_schema import (
    BaselineRef,
    EffortSpec,
    LoadSpec,
    PlanSegment,
    PowerTarget,
    StructuredPlan,
    parse_plan,
)
from effort_engine.workouts.quantities import METERS_PER_MILE, parse_distance, parse_duration

EASY_PACE_BASELINE = "user.easyPace"

PLAN_TYPE_DISCIPLINES: dict[str, str] = {
    "bike_intervals": "ride",
    "swim_session": "swim",
    "strength_session": "strength",
    "brick_session": "brick",
}

BRICK_SEGMENT_DISCIPLINES: dict[str, str] = {
    "bike_segment": "ride",
    "run_segment": "run",
    "swim_segment": "swim",
    "strength_segment": "strength",
}


def _reference_text(target: Any) -> str | None:
    if target is None:
        return None
    if isinstance(target, str):
        return target
    if isinstance(target, BaselineRef):
        return f"{target.baseline} {target.modifier or ''}".strip()
    if isinstance(target, PowerTarget):
        return target.range or f"{target.baseline or ''} {target.modifier or ''}".strip()
    if isinstance(target, LoadSpec):
        return target.baseline
    return str(target)


def _int_reps(reps: int | str | None) -> int | None:
    if isinstance(reps, int):
        return reps
    if isinstance(reps, str) and reps.strip().isdigit():
        return int(reps.strip())
    return None


class _StepBuilder:
    """Accumulates flat steps with a running order index."""

    def __init__(
        self,
        baselines: Baselines,
        discipline: str,
        tolerances: dict[str, float],
        strict: bool,
    ) -> None:
        self.baselines = baselines
        self.discipline = discipline
        self.tolerances = tolerances
        self.strict = strict
        self.steps: list[PlannedStep] = []
        self.transitions = 0

    def implicit_easy_pace(self, discipline: str) -> str | None:
        """Easy pace reference for run warmups/recoveries, if the user has one."""
        if discipline != "run" or not self.baselines.get("easyPace"):
            return None
        return EASY_PACE_BASELINE

    def _target(
        self,
        pace: str | BaselineRef | None,
        power: str | PowerTarget | None,
        load: LoadSpec | None,
        tolerance: float,
    ) -> TargetRange | None:
        if load is not None:
            pounds = resolve_load(load, self.baselines)
            if pounds is None:
                return None
            return TargetRange(lower=pounds, upper=pounds, metric="load")

        if power is not None:
            watts = resolve_power(power, self.baselines)
            if watts is None:
                return None
            lower, upper = watts
            if lower >= upper:
                return TargetRange.around(lower, tolerance, metric="power")
            return TargetRange(lower=lower, upper=upper, metric="power")

        if pace is not None:
            seconds = resolve_pace(pace, self.baselines)
            if seconds is None:
                return None
            return TargetRange.around(seconds, tolerance, metric="pace")

        return None

    def add(
        self,
        kind: StepKind,
        tolerance_class: ToleranceClass,
        duration: str | None = None,
        distance: str | None = None,
        pace: str | BaselineRef | None = None,
        power: str | PowerTarget | None = None,
        load: LoadSpec | None = None,
        discipline: str | None = None,
        label: str | None = None,
        reps: int | None = None,
        sets: int | None = None,
    ) -> None:
        order_index = len(self.steps)
        discipline = discipline or self.discipline
        tolerance = self.tolerances[tolerance_class]

        target_range: TargetRange | None = None
        unresolved: str | None = None
        try:
            target_range = self._target(pace, power, load, tolerance)
        except MissingBaselineError as e:
            if self.strict:
                raise
            logger.warning(f"Step {order_index}: {e.message}; leaving target unresolved")
            unresolved = _reference_text(load or power or pace)
        else:
            if target_range is None and (load or power or pace) is not None:
                unresolved = _reference_text(load or power or pace)

        duration_seconds = parse_duration(duration)
        distance_meters = parse_distance(distance)
        if duration and duration_seconds is None:
            logger.warning(f"Step {order_index}: unparseable duration {duration!r}")
        if distance and distance_meters is None:
            logger.warning(f"Step {order_index}: unparseable distance {distance!r}")

        estimated_seconds = None
        if distance_meters and not duration_seconds and target_range is not None and target_range.metric == "pace":
            estimated_seconds = round_half_up(distance_meters / METERS_PER_MILE * target_range.center)

        self.steps.append(
            PlannedStep(
                id=f"step_{order_index}",
                kind=kind,
                order_index=order_index,
                duration_seconds=duration_seconds,
                distance_meters=distance_meters,
                estimated_seconds=estimated_seconds,
                target_range=target_range,
                tolerance_class=tolerance_class,
                discipline=discipline,
                reps=reps,
                sets=sets,
                label=label,
                unresolved_reference=unresolved,
            )
        )

    def add_repeats(
        self,
        repetitions: int | None,
        work: EffortSpec,
        work_kind: StepKind,
        work_tolerance: ToleranceClass,
        recovery: EffortSpec | None = None,
        recovery_kind: StepKind = "recovery",
        label: str | None = None,
    ) -> None:
        """Expand N x (work [+ recovery]); no recovery after the last repeat."""
        count = 1 if repetitions is None else repetitions
        recovery_pace = None
        if recovery is not None:
            recovery_pace = recovery.target_pace or self.implicit_easy_pace(self.discipline)

        for rep in range(count):
            self.add(
                work_kind,
                work_tolerance,
                duration=work.duration,
                distance=work.distance,
                pace=work.target_pace,
                power=work.target_power,
                label=label,
            )
            if recovery is not None and rep < count - 1 and (recovery.duration or recovery.distance):
                self.add(
                    recovery_kind,
                    "easy",
                    duration=recovery.duration,
                    distance=recovery.distance,
                    pace=recovery_pace,
                    power=recovery.target_power,
                )


def _warmup_or_cooldown(builder: _StepBuilder, segment: PlanSegment) -> None:
    pace = segment.target_pace or builder.implicit_easy_pace(builder.discipline)
    builder.add(
        segment.type,  # type: ignore[arg-type]
        "easy",
        duration=segment.duration,
        distance=segment.distance,
        pace=pace,
        power=segment.target_power,
    )


def _main_set(builder: _StepBuilder, segment: PlanSegment) -> None:
    set_type = (segment.set_type or "").lower()

    if segment.work_segment is not None:
        builder.add_repeats(
            segment.repetitions,
            segment.work_segment,
            "work",
            "quality",
            recovery=segment.recovery_segment,
        )
        return

    # Swim sets: N x distance with rest between repeats
    if "aerobic" in set_type or segment.distance:
        builder.add_repeats(
            segment.repetitions,
            EffortSpec(duration=segment.duration, distance=segment.distance, target_pace=segment.target_pace),
            "work",
            "easy",
            recovery=EffortSpec(duration=segment.rest) if segment.rest else None,
            recovery_kind="rest",
            label=set_type or None,
        )
        return

    _single_effort(builder, segment)


def _drill_set(builder: _StepBuilder, segment: PlanSegment) -> None:
    drill = (segment.drill_type or "").replace("_", " ").strip()
    builder.add_repeats(
        segment.repetitions,
        EffortSpec(duration=segment.duration, distance=segment.distance),
        "work",
        "easy",
        recovery=EffortSpec(duration=segment.rest) if segment.rest else None,
        recovery_kind="rest",
        label=f"drill {drill}".strip(),
    )


def _tempo(builder: _StepBuilder, segment: PlanSegment) -> None:
    work = segment.work_segment or EffortSpec(
        duration=segment.duration,
        distance=segment.distance,
        target_pace=segment.target_pace,
        target_power=segment.target_power,
    )
    builder.add(
        "work",
        "quality",
        duration=work.duration,
        distance=work.distance,
        pace=work.target_pace,
        power=work.target_power,
    )


def _single_effort(builder: _StepBuilder, segment: PlanSegment) -> None:
    pace = segment.target_pace
    if pace is None and segment.target_power is None:
        pace = builder.implicit_easy_pace(builder.discipline)
    builder.add(
        "main",
        "easy",
        duration=segment.duration,
        distance=segment.distance,
        pace=pace,
        power=segment.target_power,
    )


def _strength_lift(builder: _StepBuilder, segment: PlanSegment) -> None:
    # One step per exercise; sets and reps stay on the step
    builder.add(
        "work",
        "quality",
        load=segment.load,
        discipline="strength",
        label=(segment.exercise or "").replace("_", " ") or None,
        reps=_int_reps(segment.reps),
        sets=segment.sets or 1,
    )


def _brick_leg(builder: _StepBuilder, segment: PlanSegment) -> None:
    discipline = BRICK_SEGMENT_DISCIPLINES[segment.type]
    pace = segment.target_pace if discipline == "run" else None
    builder.add(
        "main",
        "quality",
        duration=segment.duration,
        distance=segment.distance,
        pace=pace,
        power=segment.target_power if discipline == "ride" else None,
        discipline=discipline,
        label=segment.type.replace("_segment", ""),
    )


def _transition(builder: _StepBuilder, segment: PlanSegment) -> None:
    builder.transitions += 1
    builder.add("rest", "easy", duration=segment.duration, label=f"T{builder.transitions}")


SegmentHandler = Callable[[_StepBuilder, PlanSegment], None]

SEGMENT_HANDLERS: dict[str, SegmentHandler] = {
    "warmup": _warmup_or_cooldown,
    "cooldown": _warmup_or_cooldown,
    "main_set": _main_set,
    "main_effort": _single_effort,
    "main": _single_effort,
    "tempo": _tempo,
    "work": _tempo,
    "drill_set": _drill_set,
    "main_lift": _strength_lift,
    "accessory": _strength_lift,
    "bike_segment": _brick_leg,
    "run_segment": _brick_leg,
    "swim_segment": _brick_leg,
    "strength_segment": _brick_leg,
    "transition": _transition,
}


def plan_discipline(plan: StructuredPlan, discipline: str | None = None) -> str:
    """Discipline of a plan: explicit argument, then plan field, then plan type."""
    if discipline:
        return discipline.lower()
    if plan.discipline:
        return plan.discipline.lower()
    return PLAN_TYPE_DISCIPLINES.get(plan.type, "run")


def plan_tolerances(plan: StructuredPlan, config: AnalyticsSettings | None = None) -> dict[str, float]:
    """Pace tolerance per class, with per-plan overrides applied."""
    config = config or settings
    hints = plan.export_hints
    quality = hints.pace_tolerance_quality if hints and hints.pace_tolerance_quality else None
    easy = hints.pace_tolerance_easy if hints and hints.pace_tolerance_easy else None
    return {
        "quality": quality or config.pace_tolerance_quality,
        "easy": easy or config.pace_tolerance_easy,
    }


def resolve_plan(
    plan: StructuredPlan | dict[str, Any],
    baselines: Baselines,
    discipline: str | None = None,
    strict: bool = False,
    config: AnalyticsSettings | None = None,
) -> list[PlannedStep]:
    """Resolve a structured plan into flat planned steps.

    Args:
        plan: Structured plan (validated model or raw payload)
        baselines: Flat baseline map (easyPace, fiveKPace, ftp, squat...)
        discipline: Session discipline; inferred from the plan when None
        strict: Raise on missing baselines instead of leaving targets empty
        config: Settings providing default tolerances

    Returns:
        Steps ordered by order_index, ids "step_<order_index>"

    Raises:
        InvalidPlanError: If the plan payload is malformed
        MissingBaselineError: If strict and a baseline reference is missing
    """
    structured = parse_plan(plan)
    builder = _StepBuilder(
        baselines=baselines,
        discipline=plan_discipline(structured, discipline),
        tolerances=plan_tolerances(structured, config),
        strict=strict,
    )

    for segment in structured.structure:
        handler = SEGMENT_HANDLERS.get(segment.type)
        if handler is None:
            logger.warning(f"Skipping unknown plan segment type: {segment.type}")
            continue
        handler(builder, segment)

    logger.debug(f"Resolved plan '{structured.title or structured.type}' into {len(builder.steps)} steps")
    return builder.steps
