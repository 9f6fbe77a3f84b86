"""Root conftest for all tests.

This file makes shared plan requests available across all test modules.
"""

from datetime import date, timedelta

import pytest

from shiftplan.plans.types import PlanRequest

EXAMPLE_WORKDAYS = {
    "2026-01-01": True,
    "2026-01-02": True,
    "2026-01-05": True,
    "2026-01-06": True,
}

TWELVE_WEEK_START = date(2026, 1, 5)  # Monday
TWELVE_WEEK_DAYS = 84


def twelve_week_workdays() -> dict[str, bool]:
    """Mon-Wed shifts every week, plus Thursday in the final two weeks."""
    workdays: dict[str, bool] = {}
    for offset in range(TWELVE_WEEK_DAYS):
        day = TWELVE_WEEK_START + timedelta(days=offset)
        weekday_offset = offset % 7
        final_two_weeks = offset >= TWELVE_WEEK_DAYS - 14
        if weekday_offset in (0, 1, 2) or (final_two_weeks and weekday_offset == 3):
            workdays[day.isoformat()] = True
    return workdays


@pytest.fixture
def example_request() -> PlanRequest:
    """8-day plan with four shift days and an 8 mile goal event."""
    return PlanRequest(
        start_date=date(2026, 1, 1),
        goal_date=date(2026, 1, 8),
        event_distance=8.0,
        workday_map=EXAMPLE_WORKDAYS,
        starting_load=25,
        peak_load=55,
    )


@pytest.fixture
def twelve_week_request() -> PlanRequest:
    """84-day half marathon plan with denser shifts in the last two weeks."""
    return PlanRequest(
        start_date=TWELVE_WEEK_START,
        goal_date=TWELVE_WEEK_START + timedelta(days=TWELVE_WEEK_DAYS - 1),
        event_distance=13.1,
        workday_map=twelve_week_workdays(),
        starting_load=25,
        peak_load=55,
        vo2max=45,
    )
