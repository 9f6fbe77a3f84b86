"""Plan generation error types.

Input and stage failures derive from PlannerError. Invariant violations found
in a finished plan raise PlanningInvariantError with a code and the list of
failed checks.

Standard invariant codes:
- RUN_ON_WORKDAY: A run was scheduled on a workday outside the fallback
- MULTIPLE_LONG_EFFORTS: A 7-day window holds more than one long effort
- QUALITY_CAP_EXCEEDED: A 7-day window exceeds its phase quality cap
- CONSECUTIVE_QUALITY: Two quality days are adjacent
- NEGATIVE_LOAD: A distance or load is below zero
- LOAD_MISMATCH: total_load differs from run_load + cross_train_load
- PHASE_REGRESSION: Phases go backwards across the plan
- REST_SPACING: Two rest days fall within the same 7-day window
"""


class PlannerError(Exception):
    """Base exception for all plan generation errors."""

    pass


class InvalidPlanInputError(PlannerError):
    """Raised when a request cannot produce a plan (e.g., goal not after start)."""

    pass


class PlanningInvariantError(RuntimeError):
    """Raised when a planning invariant is violated.

    Attributes:
        code: Error code (e.g., "INVALID_PLAN")
        details: List of failed invariant codes
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}")
