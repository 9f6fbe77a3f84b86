"""Day assignment engine (forward greedy pass).

Iterates the plan dates in order and assigns one workout per day:

1. Designated rest day -> rest
2. Workday -> cross-training (strength on the policy's strength slots),
   promoted to quality when the trailing window allows it
3. Non-workday -> run: goal-day effort, goal-week easy run, long effort,
   threshold/interval run or easy run, in that order of preference
4. Guards: no two consecutive quality days, trailing quality cap per phase

Weekly state lives in an explicit ``WeekState`` that is reset every 7th day
from the plan start and threaded through ``assign_day``. Look-back
corrections mutate already-assigned days by index on the plan under
construction.
"""

from dataclasses import dataclass, replace
from datetime import date

from loguru import logger

from shiftplan.calendar.workday_map import is_workday
from shiftplan.plans.context import PlanContext
from shiftplan.plans.invariants import (
    DEFAULT_LAST_LONG_DISTANCE,
    MIN_DAYS_TO_GOAL_FOR_QUALITY,
    MIN_REST_SPACING_DAYS,
    TAPER_MAX_WORKOUT_RUNS_IN_WINDOW,
    TRAILING_WINDOW_DAYS,
    WEEK_LENGTH_DAYS,
)
from shiftplan.plans.phase import get_phase, phase_quality_cap
from shiftplan.plans.policy import PlanPolicy, RestDayPolicy
from shiftplan.plans.types import Phase, PlanAnomaly, PlanDay, WorkoutType
from shiftplan.plans.workouts import (
    build_cross_train_day,
    build_easy_run,
    build_long_run,
    build_rest_day,
    build_strength_day,
    build_workout_run,
    demote_to_easy,
    quality_run_miles,
)
from shiftplan.utils.numbers import round_distance, safe_num

# BUILD alternates between these to avoid monotony
QUALITY_ROTATION: tuple[str, ...] = ("threshold", "interval")

_RUN_TYPE_BY_KIND: dict[str, WorkoutType] = {
    "threshold": WorkoutType.RUN_QUALITY_T,
    "interval": WorkoutType.RUN_QUALITY_I,
}

_CROSS_TYPE_BY_KIND: dict[str, WorkoutType] = {
    "threshold": WorkoutType.CROSS_QUALITY_T,
    "interval": WorkoutType.CROSS_QUALITY_I,
}


@dataclass
class WeekState:
    """Rolling state carried from one day to the next.

    Attributes:
        week_index: Index of the current plan week (day offset // 7)
        long_scheduled: A long effort has been assigned this week
        quality_count: Quality days assigned this week
        last_long_distance: Most recent long effort distance (persists across weeks);
            stands in for the long-run target when that cannot be sized
        rotation_index: Position in QUALITY_ROTATION (persists across weeks)
        fallback_used: A workday fallback run has been assigned this week
    """

    week_index: int = 0
    long_scheduled: bool = False
    quality_count: int = 0
    last_long_distance: float = DEFAULT_LAST_LONG_DISTANCE
    rotation_index: int = 0
    fallback_used: bool = False

    def start_week(self, week_index: int) -> "WeekState":
        """Fresh weekly counters; cross-week fields are kept."""
        return replace(
            self,
            week_index=week_index,
            long_scheduled=False,
            quality_count=0,
            fallback_used=False,
        )


def select_rest_days(
    dates: list[date],
    goal_date: date,
    workday_map: dict[str, bool],
    policy: PlanPolicy,
) -> set[int]:
    """Choose the single rest day of each plan week.

    Candidates are the week's days other than the goal date that fall at
    least 7 days after the previous rest day. Under FIRST_WORKDAY the
    earliest workday candidate wins. A week whose workdays all fall too close
    to the previous rest day gets no rest day, so the next week can land on
    its first workday again instead of drifting onto a run day. A week with
    no workdays at all (or under WEEK_START) takes the earliest candidate.
    A week without candidates has no rest day.

    Returns:
        Set of plan indices designated as rest days
    """
    rest_indices: set[int] = set()
    last_rest: int | None = None

    for week_start in range(0, len(dates), WEEK_LENGTH_DAYS):
        week = range(week_start, min(week_start + WEEK_LENGTH_DAYS, len(dates)))
        candidates = [
            i
            for i in week
            if dates[i] != goal_date and (last_rest is None or i - last_rest >= MIN_REST_SPACING_DAYS)
        ]
        if not candidates:
            continue

        choice = candidates[0]
        if policy.rest_day_policy == RestDayPolicy.FIRST_WORKDAY:
            workdays = [i for i in week if dates[i] != goal_date and is_workday(workday_map, dates[i])]
            eligible = [i for i in workdays if i in candidates]
            if eligible:
                choice = eligible[0]
            elif workdays:
                continue

        rest_indices.add(choice)
        last_rest = choice

    return rest_indices


class DayAssignmentEngine:
    """Forward pass that builds the plan one day at a time."""

    def __init__(
        self,
        context: PlanContext,
        workday_map: dict[str, bool],
        policy: PlanPolicy | None = None,
    ):
        self.context = context
        self.workday_map = workday_map
        self.policy = policy or PlanPolicy()
        self.dates = context.dates()
        self.rest_indices = select_rest_days(self.dates, context.goal_date, workday_map, self.policy)
        self.plan: list[PlanDay] = []
        self.anomalies: list[PlanAnomaly] = []
        self.weeks_without_run_slot = self._find_weeks_without_run_slot()

    # ---- public ----

    def run(self) -> list[PlanDay]:
        """Assign every date in order and return the plan."""
        state = WeekState()
        for index in range(len(self.dates)):
            state = self.assign_day(index, state)
        return self.plan

    def assign_day(self, index: int, state: WeekState) -> WeekState:
        """Assign the workout for ``self.dates[index]`` and append it.

        Args:
            index: Plan index of the day (must equal ``len(self.plan)``)
            state: State after the previous day

        Returns:
            State after this day
        """
        if index % WEEK_LENGTH_DAYS == 0:
            state = state.start_week(index // WEEK_LENGTH_DAYS)

        day = self.dates[index]
        workday = is_workday(self.workday_map, day)
        phase = get_phase(day, self.context.start_date, self.context.goal_date)

        if index in self.rest_indices:
            self.plan.append(build_rest_day(day, phase, workday))
            return state

        if workday:
            plan_day = self._assign_workday(index, day, phase, state)
        else:
            plan_day = self._assign_run_day(index, day, phase, state)

        self._guard_consecutive_quality(index, plan_day)
        self._guard_window_cap(index, plan_day, state)

        self.plan.append(plan_day)

        if plan_day.is_quality_day:
            state.quality_count += 1
        if plan_day.is_long_effort:
            state.long_scheduled = True
            state.last_long_distance = plan_day.run_distance
        return state

    # ---- trailing window ----

    def _trailing(self, index: int) -> list[PlanDay]:
        return self.plan[max(0, index - TRAILING_WINDOW_DAYS):index]

    def _trailing_indices(self, index: int) -> range:
        return range(max(0, index - TRAILING_WINDOW_DAYS), index)

    def _recent_quality_count(self, index: int) -> int:
        return sum(1 for d in self._trailing(index) if d.is_quality_day)

    def _recent_long_count(self, index: int) -> int:
        return sum(1 for d in self._trailing(index) if d.is_long_effort)

    def _recent_non_long_quality_count(self, index: int) -> int:
        return sum(1 for d in self._trailing(index) if d.is_quality_day and not d.is_long_effort)

    def _recent_workout_run_count(self, index: int) -> int:
        return sum(1 for d in self._trailing(index) if d.is_workout_run)

    def _previous_is_quality(self, index: int) -> bool:
        return index > 0 and self.plan[index - 1].is_quality_day

    def _has_later_run_slot(self, index: int) -> bool:
        """True if a non-workday, non-rest day remains after ``index`` in its week."""
        week_end = (index // WEEK_LENGTH_DAYS + 1) * WEEK_LENGTH_DAYS
        for later in range(index + 1, min(week_end, len(self.dates))):
            if later in self.rest_indices:
                continue
            if not is_workday(self.workday_map, self.dates[later]):
                return True
        return False

    def _find_weeks_without_run_slot(self) -> set[int]:
        weeks: set[int] = set()
        for week_start in range(0, len(self.dates), WEEK_LENGTH_DAYS):
            week = range(week_start, min(week_start + WEEK_LENGTH_DAYS, len(self.dates)))
            has_slot = any(
                i not in self.rest_indices and not is_workday(self.workday_map, self.dates[i])
                for i in week
            )
            if has_slot:
                continue
            week_index = week_start // WEEK_LENGTH_DAYS
            weeks.add(week_index)
            if not self.policy.allow_workday_run_fallback:
                self.anomalies.append(
                    PlanAnomaly(
                        code="NO_RUN_SLOT",
                        date=self.dates[week_start],
                        detail=f"Week {week_index + 1} has no non-workday slot; no run scheduled",
                    )
                )
                logger.warning("Week has no run slot", week=week_index + 1, start=self.dates[week_start].isoformat())
        return weeks

    # ---- eligibility ----

    def _quality_allowed(self, index: int, day: date, phase: Phase, state: WeekState) -> bool:
        """Shared eligibility for quality cross-training and quality runs."""
        if phase == Phase.BASE:
            return False
        if self._previous_is_quality(index):
            return False
        cap = phase_quality_cap(phase)
        if self._recent_quality_count(index) >= cap or state.quality_count >= cap:
            return False
        if self.context.days_to_goal(day) <= MIN_DAYS_TO_GOAL_FOR_QUALITY:
            return False
        return self._recent_non_long_quality_count(index) == 0

    def _taper_blocks_workout_run(self, index: int, phase: Phase) -> bool:
        return phase == Phase.TAPER and self._recent_workout_run_count(index) >= TAPER_MAX_WORKOUT_RUNS_IN_WINDOW

    def _long_allowed(self, index: int, state: WeekState) -> bool:
        return (
            not state.long_scheduled
            and self._recent_long_count(index) == 0
            and not self._previous_is_quality(index)
        )

    def _long_target(self, day: date, phase: Phase, state: WeekState) -> float:
        """Phase long-run target, or the last long effort when it cannot be sized."""
        target = safe_num(self.context.long_run_target(day, phase))
        return target if target > 0 else state.last_long_distance

    def _next_quality_kind(self, phase: Phase, state: WeekState) -> str:
        if phase == Phase.BUILD:
            kind = QUALITY_ROTATION[state.rotation_index % len(QUALITY_ROTATION)]
            state.rotation_index += 1
            return kind
        if phase == Phase.PEAK:
            return "interval"
        return "threshold"

    # ---- assignment ----

    def _assign_workday(self, index: int, day: date, phase: Phase, state: WeekState) -> PlanDay:
        if self._fallback_run_due(index, state):
            state.fallback_used = True
            miles = self.context.easy_miles(day, phase)
            self.anomalies.append(
                PlanAnomaly(
                    code="RUN_ON_WORKDAY_FALLBACK",
                    date=day,
                    detail="Week has no non-workday slot; easy run scheduled on a workday",
                )
            )
            logger.warning("Scheduling fallback run on workday", date=day.isoformat())
            return build_easy_run(day, phase, True, miles, self.context.paces)

        if index % WEEK_LENGTH_DAYS in self.policy.strength_slot_offsets:
            return build_strength_day(day, phase, True)

        workout_type = WorkoutType.CROSS_EASY
        if self._quality_allowed(index, day, phase, state):
            workout_type = _CROSS_TYPE_BY_KIND[self._next_quality_kind(phase, state)]
        return build_cross_train_day(day, phase, True, workout_type)

    def _fallback_run_due(self, index: int, state: WeekState) -> bool:
        if not self.policy.allow_workday_run_fallback or state.fallback_used:
            return False
        if index // WEEK_LENGTH_DAYS not in self.weeks_without_run_slot:
            return False
        return index % WEEK_LENGTH_DAYS not in self.policy.strength_slot_offsets

    def _assign_run_day(self, index: int, day: date, phase: Phase, state: WeekState) -> PlanDay:
        paces = self.context.paces
        weekly = self.context.weekly_target(day)
        long_target = self._long_target(day, phase, state)
        easy_miles = self.context.easy_miles(day, phase, long_target)
        days_to_goal = self.context.days_to_goal(day)

        self._release_previous_quality(index, day, state)

        if days_to_goal == 0:
            if self._long_allowed(index, state):
                return build_long_run(day, phase, False, self.context.event_distance, paces, label="Goal event")
            if not self._taper_blocks_workout_run(index, phase):
                miles = min(self.context.event_distance, quality_run_miles(weekly, long_target))
                return build_workout_run(day, phase, False, WorkoutType.RUN_QUALITY_T, miles, paces)
            return build_easy_run(day, phase, False, easy_miles, paces)

        if self.context.in_goal_week(day):
            return build_easy_run(day, phase, False, easy_miles, paces)

        if self._long_allowed(index, state):
            return build_long_run(day, phase, False, round_distance(long_target), paces)

        if self._quality_allowed(index, day, phase, state) and not self._taper_blocks_workout_run(index, phase):
            workout_type = _RUN_TYPE_BY_KIND[self._next_quality_kind(phase, state)]
            return build_workout_run(day, phase, False, workout_type, quality_run_miles(weekly, long_target), paces)

        return build_easy_run(day, phase, False, easy_miles, paces)

    # ---- corrections ----

    def _demote(self, index: int, state: WeekState, reason: str) -> None:
        target = self.plan[index]
        easy_miles = self.context.easy_miles(target.date, target.phase)
        if demote_to_easy(target, easy_miles, self.context.paces, reason=reason):
            if index // WEEK_LENGTH_DAYS == state.week_index:
                state.quality_count = max(0, state.quality_count - 1)

    def _release_previous_quality(self, index: int, day: date, state: WeekState) -> None:
        """Free the previous day's quality slot when today is the week's last chance for a long effort."""
        if index == 0:
            return
        previous = self.plan[index - 1]
        if not previous.is_quality_day or previous.is_long_effort:
            return
        if state.long_scheduled or self._recent_long_count(index) > 0:
            return
        if self.context.in_goal_week(day) or self._has_later_run_slot(index):
            return
        self._demote(index - 1, state, reason="look-back: free long effort slot")

    def _guard_consecutive_quality(self, index: int, plan_day: PlanDay) -> None:
        if plan_day.is_quality_day and self._previous_is_quality(index):
            demote_to_easy(
                plan_day,
                self.context.easy_miles(plan_day.date, plan_day.phase),
                self.context.paces,
                reason="consecutive quality days",
            )

    def _guard_window_cap(self, index: int, plan_day: PlanDay, state: WeekState) -> None:
        if not plan_day.is_quality_day:
            return

        cap = phase_quality_cap(plan_day.phase)
        while self._recent_quality_count(index) + 1 > cap:
            if plan_day.is_long_effort:
                victim = next(
                    (
                        i
                        for i in self._trailing_indices(index)
                        if self.plan[i].is_quality_day and not self.plan[i].is_long_effort
                    ),
                    None,
                )
                if victim is not None:
                    self._demote(victim, state, reason="trailing quality cap: protect long effort")
                    continue
            demote_to_easy(
                plan_day,
                self.context.easy_miles(plan_day.date, plan_day.phase),
                self.context.paces,
                reason="trailing quality cap",
            )
            return
