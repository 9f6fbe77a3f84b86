"""Plan generation entry point.

``generate_plan`` validates the request, runs the forward assignment pass
and then the consistency repair pass over the finished plan.
"""

from loguru import logger

from shiftplan.plans.assignment import DayAssignmentEngine
from shiftplan.plans.context import PlanContext
from shiftplan.plans.errors import InvalidPlanInputError
from shiftplan.plans.policy import PlanPolicy
from shiftplan.plans.repair.consistency_repair import enforce_consistency
from shiftplan.plans.types import PlanRequest, PlanResult


def generate_plan(
    request: PlanRequest,
    policy: PlanPolicy | None = None,
    default_vo2max: float | None = None,
) -> PlanResult:
    """Generate a day-by-day plan from start to goal, inclusive.

    Args:
        request: Validated plan request
        policy: Scheduling policy (defaults to PlanPolicy())
        default_vo2max: VO2max used for paces when the request has none

    Returns:
        PlanResult with one PlanDay per date and any recorded anomalies

    Raises:
        InvalidPlanInputError: If the goal date is not after the start date
    """
    if request.goal_date <= request.start_date:
        raise InvalidPlanInputError(
            f"Goal date {request.goal_date.isoformat()} must be after start date {request.start_date.isoformat()}"
        )

    policy = policy or PlanPolicy()
    context = PlanContext.from_request(request, default_vo2max=default_vo2max)

    logger.info(
        "Generating plan",
        start=request.start_date.isoformat(),
        goal=request.goal_date.isoformat(),
        days=context.total_days,
        event_distance=request.event_distance,
        starting_load=request.starting_load,
        peak_load=request.peak_load,
    )

    engine = DayAssignmentEngine(context, request.workday_map, policy)
    plan = engine.run()
    anomalies = [*engine.anomalies, *enforce_consistency(plan, context)]

    logger.info(
        "Plan generated",
        days=len(plan),
        runs=sum(1 for day in plan if day.is_run),
        quality_days=sum(1 for day in plan if day.is_quality_day),
        long_efforts=sum(1 for day in plan if day.is_long_effort),
        anomalies=len(anomalies),
    )
    return PlanResult(days=plan, anomalies=anomalies)
