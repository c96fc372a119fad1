"""Resolved workout steps and executed interval data.

PlannedStep is produced by the structure resolver; ExecutedInterval is
normalized from the payload supplied by activity ingestion. Both are
immutable and rebuilt on every analysis request.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from effort_engine.core.rounding import round_half_up

StepKind = Literal["warmup", "work", "recovery", "rest", "cooldown", "main"]
ToleranceClass = Literal["quality", "easy"]
TargetMetric = Literal["pace", "power", "load"]

REST_KINDS: frozenset[str] = frozenset({"recovery", "rest"})


class TargetRange(BaseModel):
    """Inclusive target band.

    Pace bands are seconds per mile (lower = faster), power bands are
    watts and load bands are pounds.
    """

    model_config = ConfigDict(frozen=True)

    lower: float
    upper: float
    metric: TargetMetric = "pace"

    @property
    def center(self) -> float:
        return (self.lower + self.upper) / 2

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    @classmethod
    def around(cls, center: float, tolerance: float, metric: TargetMetric = "pace") -> TargetRange:
        """Symmetric band of +/- tolerance around a center value."""
        return cls(
            lower=round_half_up(center * (1 - tolerance)),
            upper=round_half_up(center * (1 + tolerance)),
            metric=metric,
        )


class PlannedStep(BaseModel):
    """One concrete, flat step of a resolved plan.

    Attributes:
        id: Stable step id ("step_<order_index>")
        kind: Step role
        order_index: Position in the resolved plan (0-based)
        duration_seconds: Planned duration for time-based steps
        distance_meters: Planned distance for distance-based steps
        estimated_seconds: Duration estimate for distance steps with a pace target
        target_range: Resolved target band, None when unresolved or untargeted
        tolerance_class: quality (+/-4%) or easy (+/-6%)
        discipline: run, ride, swim, strength...
        reps: Repetitions per set (strength)
        sets: Number of sets (strength)
        label: Display label
        unresolved_reference: Baseline reference that could not be resolved
    """

    model_config = ConfigDict(frozen=True)

    id: str
    kind: StepKind
    order_index: int
    duration_seconds: float | None = None
    distance_meters: float | None = None
    estimated_seconds: int | None = None
    target_range: TargetRange | None = None
    tolerance_class: ToleranceClass = "easy"
    discipline: str = "run"
    reps: int | None = None
    sets: int | None = None
    label: str | None = None
    unresolved_reference: str | None = None

    @property
    def is_rest(self) -> bool:
        return self.kind in REST_KINDS

    @property
    def planned_seconds(self) -> float | None:
        """Planned duration, falling back to the distance-based estimate."""
        if self.duration_seconds:
            return self.duration_seconds
        return self.estimated_seconds


class Sample(BaseModel):
    """One instantaneous reading; any channel may be missing.

    Attributes:
        timestamp: Seconds from the interval start (or device clock)
        pace: Instantaneous pace (s/mi)
        power: Instantaneous power (W)
        heart_rate: Instantaneous heart rate (bpm)
    """

    model_config = ConfigDict(frozen=True)

    timestamp: float
    pace: float | None = None
    power: float | None = None
    heart_rate: float | None = None


# Heart rate readings at or above this are sensor noise
MAX_VALID_HEART_RATE = 250

_AVERAGE_FIELDS: dict[str, str] = {
    "pace": "average_pace",
    "power": "average_power",
    "load": "average_load",
}


class ExecutedInterval(BaseModel):
    """Executed interval as recorded by the device.

    Every channel the device reported is kept; the metric compared against
    the plan is chosen per matched step from its target band.

    Attributes:
        planned_step_id: Planned step id carried by the device export, if any
        planned_index: Planned step order index carried by the export, if any
        order_index: Position in the executed interval list
        kind: Role reported by the device
        duration_seconds: Moving duration
        distance_meters: Covered distance
        average_pace: Average pace (s/mi)
        average_power: Average power (W)
        average_load: Lifted load (lb)
        average_heart_rate: Average heart rate (bpm)
        samples: Ordered instantaneous readings
        reps: Completed repetitions per set (strength)
        sets: Completed sets (strength)
    """

    model_config = ConfigDict(frozen=True)

    planned_step_id: str | None = None
    planned_index: int | None = None
    order_index: int = 0
    kind: str | None = None
    duration_seconds: float | None = Field(default=None, ge=0)
    distance_meters: float | None = Field(default=None, ge=0)
    average_pace: float | None = None
    average_power: float | None = None
    average_load: float | None = None
    average_heart_rate: float | None = None
    samples: tuple[Sample, ...] = ()
    reps: int | None = None
    sets: int | None = None

    def average_for(self, metric: TargetMetric) -> float | None:
        """Interval average of the channel a target band is expressed in."""
        return getattr(self, _AVERAGE_FIELDS[metric])

    def sample_values(self, metric: TargetMetric) -> list[float]:
        """Valid readings of one channel, in order.

        Missing and zero readings are pauses and are skipped. Loads have no
        sample stream.
        """
        if metric == "load":
            return []
        values = []
        for sample in self.samples:
            value = getattr(sample, metric)
            if value is not None and value > 0:
                values.append(float(value))
        return values

    def heart_rate_values(self) -> list[float]:
        """Heart rate readings inside the plausible sensor range."""
        return [
            float(sample.heart_rate)
            for sample in self.samples
            if sample.heart_rate is not None and 0 < sample.heart_rate < MAX_VALID_HEART_RATE
        ]

    @classmethod
    def from_payload(cls, payload: dict[str, Any], order_index: int) -> ExecutedInterval:
        """Normalize the ingestion wire shape.

        Expected payload:
            {
                "planned_step_id": "step_3",
                "planned_index": 3,
                "role": "work",
                "executed": {"duration_s": 300, "distance_m": 1000,
                             "avg_pace_s_per_mi": 480, "avg_power_w": null, "avg_hr": 162},
                "samples": [{"t": 0, "pace_s_per_mi": 478, "power_w": 251, "heart_rate": 160}, ...]
            }

        Args:
            payload: Raw executed interval dict
            order_index: Position of the interval in the executed list

        Returns:
            Normalized ExecutedInterval
        """
        executed = payload.get("executed") or {}

        samples = []
        for index, raw in enumerate(payload.get("samples") or []):
            pace = _first_present(raw, ("pace_s_per_mi", "pace"))
            power = _first_present(raw, ("power_w", "watts", "power"))
            heart_rate = _first_present(raw, ("heart_rate", "hr"))
            if pace is None and power is None and heart_rate is None:
                continue
            timestamp = raw.get("timestamp", raw.get("t", index))
            samples.append(Sample(timestamp=float(timestamp), pace=pace, power=power, heart_rate=heart_rate))

        planned_index = payload.get("planned_index")
        return cls(
            planned_step_id=payload.get("planned_step_id"),
            planned_index=int(planned_index) if planned_index is not None else None,
            order_index=order_index,
            kind=payload.get("role") or payload.get("kind"),
            duration_seconds=executed.get("duration_s"),
            distance_meters=executed.get("distance_m"),
            average_pace=executed.get("avg_pace_s_per_mi"),
            average_power=executed.get("avg_power_w"),
            average_load=executed.get("avg_load_lb") or executed.get("weight"),
            average_heart_rate=executed.get("avg_hr"),
            samples=tuple(samples),
            reps=executed.get("reps"),
            sets=executed.get("sets"),
        )


def _first_present(raw: dict[str, Any], keys: tuple[str, ...]) -> float | None:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return float(value)
    return None
