"""Tunable thresholds for pace derivation and adherence scoring.

Values can be overridden through environment variables prefixed with
``EFFORT_`` (e.g. ``EFFORT_PACE_TOLERANCE_QUALITY=0.05``) or a ``.env`` file.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    pace_tolerance_quality: float = Field(default=0.04, description="Band half-width for quality steps")
    pace_tolerance_easy: float = Field(default=0.06, description="Band half-width for easy steps")
    cv_threshold_pct: float = Field(default=5.0, description="CV above this marks inconsistent pacing")
    surge_threshold: float = Field(default=0.15, description="Relative excursion beyond the band counted as surge/crash")
    long_continuous_seconds: int = Field(default=3600, description="Single steps longer than this are long continuous")
    varied_duration_ratio: float = Field(default=2.0, description="max/min planned duration ratio for duration weighting label")
    fitness_floor: float = Field(default=30.0, description="Lowest calibrated Effort Score")
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EFFORT_",
        extra="ignore",
    )

    @field_validator("pace_tolerance_quality", "pace_tolerance_easy")
    @classmethod
    def validate_tolerance(cls, value: float) -> float:
        if not 0 < value < 0.5:
            raise ValueError(f"Pace tolerance must be between 0 and 0.5, got {value}")
        return value

    @field_validator("cv_threshold_pct", "surge_threshold", "long_continuous_seconds", "varied_duration_ratio")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"Threshold must be positive, got {value}")
        return value


settings = AnalyticsSettings()
