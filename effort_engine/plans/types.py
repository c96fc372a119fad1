"""Pace derivation value objects.

All paces are whole seconds per distance unit (mile unless noted).
"""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

RaceDistance = Literal["5k", "10k", "half", "marathon"]
FitnessLevel = Literal["beginner", "intermediate", "advanced"]
RaceRecency = Literal["recent", "3-6months", "6-12months", "over1year"]
VolumeLevel = Literal["low", "medium", "high"]
PaceUnit = Literal["mi", "km"]


class TrainingPaces(BaseModel):
    """Training paces for one Effort Score.

    Attributes:
        base: Easy pace
        race: Marathon pace (anchored on the marathon projection)
        steady: Threshold pace
        power: Interval pace
        speed: Repetition pace
    """

    model_config = ConfigDict(frozen=True)

    base: int
    race: int
    steady: int
    power: int
    speed: int


class RaceResult(BaseModel):
    """A race performance used to derive an Effort Score."""

    model_config = ConfigDict(frozen=True)

    distance_meters: float = Field(..., gt=0, validation_alias=AliasChoices("distance_meters", "distanceMeters"))
    time_seconds: float = Field(..., gt=0, validation_alias=AliasChoices("time_seconds", "timeSeconds"))


class EffortScoreResult(BaseModel):
    """Effort Score with the paces derived from it."""

    model_config = ConfigDict(frozen=True)

    score: float
    paces: TrainingPaces
    paces_km: TrainingPaces = Field(..., serialization_alias="pacesKm")

    def to_dict(self) -> dict:
        """Dump with the wire field names ({score, paces, pacesKm})."""
        return self.model_dump(by_alias=True)


class PaceConsistency(BaseModel):
    """Outcome of checking an easy pace against a 5K pace."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    warning: str | None = None
    suggested_easy_pace: int | None = None


class ZoneDescription(BaseModel):
    """Display row for one training zone."""

    model_config = ConfigDict(frozen=True)

    name: str
    brand_name: str
    pace: str
    purpose: str
