"""Planning invariant observability.

Call ``log_planning_invariant_failure`` before re-raising PlanningInvariantError.
"""

from loguru import logger

from shiftplan.plans.errors import PlanningInvariantError


def log_planning_invariant_failure(err: PlanningInvariantError, context: dict[str, str | int | float | bool | None]) -> None:
    """Log a planning invariant failure with context.

    Args:
        err: The PlanningInvariantError that occurred
        context: Additional context dictionary for logging
    """
    logger.error(
        "PLANNING_INVARIANT_FAILED",
        code=err.code,
        details=err.details,
        **context,
    )
