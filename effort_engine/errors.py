"""Canonical engine error types.

Standard error codes:
- UNSUPPORTED_DISTANCE: Race distance does not map to 5k/10k/half/marathon
- MISSING_BASELINE: Plan references a baseline absent from the baseline map
- INVALID_PLAN: Structured plan payload fails schema validation
"""


class EngineError(RuntimeError):
    """Base class for effort engine errors.

    Attributes:
        code: Error code (e.g., "UNSUPPORTED_DISTANCE", "MISSING_BASELINE")
        message: Error message
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class UnsupportedDistanceError(EngineError, ValueError):
    """Raised when a race distance has no canonical counterpart."""

    def __init__(self, distance_meters: float) -> None:
        self.distance_meters = distance_meters
        super().__init__(
            "UNSUPPORTED_DISTANCE",
            f"{distance_meters} m does not match 5k, 10k, half or marathon",
        )


class MissingBaselineError(EngineError):
    """Raised when a baseline reference cannot be resolved."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__("MISSING_BASELINE", f"Baseline '{field_name}' is not in the baseline map")


class InvalidPlanError(EngineError):
    """Raised when a structured plan payload is malformed."""

    def __init__(self, details: list[str]) -> None:
        self.details = details
        super().__init__("INVALID_PLAN", "; ".join(details))
