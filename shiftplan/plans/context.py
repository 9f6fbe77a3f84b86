"""Plan context for day sizing.

This module defines the immutable context object shared by the assignment
engine and the consistency repair pass. It answers every date-relative
question (days to goal, goal week, weekly target, long/easy sizing) so both
passes size demoted runs identically.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from shiftplan.plans.invariants import TAPER_PROTECTION_DAYS
from shiftplan.plans.pace import PaceSet, paces_from_vo2max
from shiftplan.plans.ramp import target_rolling_load, weekly_target_load
from shiftplan.plans.types import Phase, PlanRequest
from shiftplan.plans.workouts import derive_long_run_miles, easy_run_miles, goal_week_easy_miles


@dataclass(frozen=True)
class PlanContext:
    """Immutable sizing context for one plan.

    Attributes:
        start_date: First plan day
        goal_date: Event day (last plan day)
        event_distance: Event distance in miles
        starting_load: 10-day rolling load at the start
        peak_load: 10-day rolling load to reach by the goal
        paces: Optional display paces for segment annotations
    """

    start_date: date
    goal_date: date
    event_distance: float
    starting_load: float
    peak_load: float
    paces: PaceSet | None = None

    @classmethod
    def from_request(cls, request: PlanRequest, default_vo2max: float | None = None) -> "PlanContext":
        vo2max = request.vo2max if request.vo2max is not None else default_vo2max
        return cls(
            start_date=request.start_date,
            goal_date=request.goal_date,
            event_distance=request.event_distance,
            starting_load=request.starting_load,
            peak_load=request.peak_load,
            paces=paces_from_vo2max(vo2max) if vo2max is not None else None,
        )

    @property
    def total_days(self) -> int:
        """Inclusive day count of the plan."""
        return (self.goal_date - self.start_date).days + 1

    def dates(self) -> list[date]:
        return [self.start_date + timedelta(days=offset) for offset in range(self.total_days)]

    def days_to_goal(self, day: date) -> int:
        return (self.goal_date - day).days

    def in_goal_week(self, day: date) -> bool:
        """True for the six days immediately before the goal (goal day excluded)."""
        return 1 <= self.days_to_goal(day) <= TAPER_PROTECTION_DAYS

    def weekly_target(self, day: date) -> float:
        rolling = target_rolling_load(day, self.start_date, self.goal_date, self.starting_load, self.peak_load)
        return weekly_target_load(rolling)

    def long_run_target(self, day: date, phase: Phase) -> float:
        capped = self.days_to_goal(day) <= TAPER_PROTECTION_DAYS
        return derive_long_run_miles(
            phase,
            self.weekly_target(day),
            event_distance=self.event_distance if capped else None,
        )

    def easy_miles(self, day: date, phase: Phase, long_target: float | None = None) -> float:
        """Distance of an easy run (or of a run demoted to easy) on ``day``.

        ``long_target`` overrides the phase long-run target the easy run is
        scaled against.
        """
        weekly = self.weekly_target(day)
        if long_target is None:
            long_target = self.long_run_target(day, phase)
        if self.in_goal_week(day):
            return goal_week_easy_miles(weekly, long_target, self.event_distance)
        return easy_run_miles(weekly, long_target)
