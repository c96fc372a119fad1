"""Schema for structured plan payloads.

A structured plan is the declarative ``workout_structure`` of a planned
workout: a session type plus an ordered list of typed segments. Durations
and distances stay as strings ("10min", "800m") until resolution.

Example:
    {
        "type": "interval_session",
        "structure": [
            {"type": "warmup", "duration": "15min"},
            {"type": "main_set", "set_type": "intervals", "repetitions": 4,
             "work_segment": {"distance": "800m", "target_pace": "user.fiveKPace"},
             "recovery_segment": {"duration": "2min"}},
            {"type": "cooldown", "duration": "10min"}
        ]
    }
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from effort_engine.errors import InvalidPlanError


class BaselineRef(BaseModel):
    """Reference to a user baseline with an optional modifier.

    Modifiers: "+0:15" / "+15s" for paces, "95%" / "+10W" for power,
    a percentage for strength loads.
    """

    model_config = ConfigDict(frozen=True)

    baseline: str
    modifier: str | None = None


class PowerTarget(BaseModel):
    """Power target: literal range ("240-260W") or baseline reference."""

    model_config = ConfigDict(frozen=True)

    range: str | None = None
    baseline: str | None = None
    modifier: str | None = None


class LoadSpec(BaseModel):
    """Strength load as a percentage of a 1RM baseline."""

    model_config = ConfigDict(frozen=True)

    percentage: float | None = None
    baseline: str | None = None


PaceTarget = str | BaselineRef


class EffortSpec(BaseModel):
    """Work or recovery part of a repeated block."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    duration: str | None = None
    distance: str | None = None
    target_pace: PaceTarget | None = None
    target_power: str | PowerTarget | None = None


class PlanSegment(BaseModel):
    """One typed segment of a structured plan."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    duration: str | None = None
    distance: str | None = None
    repetitions: int | None = Field(default=None, ge=0)
    set_type: str | None = None
    work_segment: EffortSpec | None = None
    recovery_segment: EffortSpec | None = None
    target_pace: PaceTarget | None = None
    target_power: str | PowerTarget | None = None
    rest: str | None = None
    drill_type: str | None = None
    exercise: str | None = None
    sets: int | None = Field(default=None, ge=0)
    reps: int | str | None = None
    load: LoadSpec | None = None

    @field_validator("type")
    @classmethod
    def normalize_type(cls, value: str) -> str:
        return value.strip().lower()


class ExportHints(BaseModel):
    """Per-plan overrides of the pace tolerance bands."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    pace_tolerance_quality: float | None = Field(default=None, gt=0, lt=0.5)
    pace_tolerance_easy: float | None = Field(default=None, gt=0, lt=0.5)


class StructuredPlan(BaseModel):
    """Declarative workout structure prior to resolution."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = ""
    title: str | None = None
    discipline: str | None = None
    structure: list[PlanSegment] = Field(default_factory=list)
    total_duration_estimate: str | None = None
    export_hints: ExportHints | None = None

    @field_validator("type")
    @classmethod
    def normalize_type(cls, value: str) -> str:
        return value.strip().lower()


def parse_plan(payload: StructuredPlan | dict[str, Any]) -> StructuredPlan:
    """Validate a plan payload.

    Raises:
        InvalidPlanError: If the payload does not match the plan schema
    """
    if isinstance(payload, StructuredPlan):
        return payload
    try:
        return StructuredPlan.model_validate(payload)
    except ValidationError as e:
        details = [f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}" for error in e.errors()]
        raise InvalidPlanError(details) from e
