"""CLI for the shiftplan generator.

Developer CLI to generate a plan offline from a workday map and print it,
write it as JSON, or check it against the plan invariants.
"""

import json
from datetime import date
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shiftplan.calendar.workday_map import build_workday_map, load_workday_map
from shiftplan.config.settings import settings
from shiftplan.core.logger import setup_logger
from shiftplan.plans.errors import PlannerError, PlanningInvariantError
from shiftplan.plans.generate import generate_plan
from shiftplan.plans.logging import log_planning_invariant_failure
from shiftplan.plans.pace import paces_from_vo2max
from shiftplan.plans.policy import PlanPolicy
from shiftplan.plans.stats import PlanStatistics, compute_plan_statistics
from shiftplan.plans.types import PlanDay, PlanRequest, PlanResult, WorkoutCategory
from shiftplan.plans.validate import validate_plan

# Initialize Rich console for output
console = Console()

# Initialize Typer app
app = typer.Typer(
    name="shiftplan",
    help="Shift-aware training plan generator",
    add_completion=False,
)

# Row style per workout category
CATEGORY_STYLES: dict[WorkoutCategory, str] = {
    WorkoutCategory.RUN: "green",
    WorkoutCategory.CROSS_TRAIN: "cyan",
    WorkoutCategory.STRENGTH: "magenta",
    WorkoutCategory.REST: "dim",
}


def _setup_logging(debug: bool = False) -> None:
    """Set up logging from settings.

    Args:
        debug: Force DEBUG level regardless of SHIFTPLAN_LOG_LEVEL
    """
    log_level = "DEBUG" if debug else settings.log_level
    setup_logger(level=log_level, log_file=settings.log_file)


def _parse_date(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"{option} must be an ISO date (YYYY-MM-DD), got {value!r}") from e


def _write_file_sync(file_path: Path, content: str) -> None:
    """Write file synchronously (acceptable for CLI)."""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8")


def _describe(day: PlanDay) -> str:
    if not day.segments:
        return str(day.workout_type)
    parts = []
    for segment in day.segments:
        text = segment.label
        if segment.distance_miles is not None:
            text += f" {segment.distance_miles:.1f} mi"
        if segment.pace:
            text += f" @ {segment.pace}"
        if segment.duration_min is not None:
            text += f" (~{segment.duration_min} min)"
        parts.append(text)
    return ", ".join(parts)


def _plan_table(result: PlanResult) -> Table:
    table = Table(title="Training plan", show_lines=False)
    table.add_column("Date")
    table.add_column("Phase")
    table.add_column("Work", justify="center")
    table.add_column("Workout")
    table.add_column("Details")
    table.add_column("Miles", justify="right")
    table.add_column("Load", justify="right")

    for day in result.days:
        flags = []
        if day.is_long_effort:
            flags.append("long")
        elif day.is_quality_day:
            flags.append("quality")
        workout = str(day.workout_type) + (f" ({', '.join(flags)})" if flags else "")
        table.add_row(
            day.date.isoformat(),
            str(day.phase),
            "✓" if day.is_workday else "",
            workout,
            _describe(day),
            f"{day.run_distance:.1f}",
            f"{day.total_load:.1f}",
            style=CATEGORY_STYLES.get(day.workout_category),
        )
    return table


def _stats_table(stats: PlanStatistics) -> Table:
    table = Table(title="Plan statistics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    for workout_type, count in stats.counts.items():
        table.add_row(workout_type, str(count))
    table.add_row("Runs on workdays", str(stats.run_on_workday_count))
    table.add_row("Longest run streak", str(stats.max_run_streak))
    if stats.rolling_10_day_load:
        table.add_row("Peak 10-day load", f"{max(stats.rolling_10_day_load):.1f}")
        table.add_row("Final 10-day load", f"{stats.rolling_10_day_load[-1]:.1f}")
    for phase, span in stats.phase_ranges.items():
        table.add_row(f"{phase} phase", f"{span.start.isoformat()} → {span.end.isoformat()}")
    return table


@app.command()
def generate(
    start: str = typer.Option(..., "--start", help="Plan start date (YYYY-MM-DD)"),
    goal: str = typer.Option(..., "--goal", help="Goal/event date (YYYY-MM-DD)"),
    event_distance: float = typer.Option(5.0, "--event-distance", help="Event distance in miles"),
    workdays: Path | None = typer.Option(None, "--workdays", "-w", help="Workday map or shift events JSON file"),
    starting_load: float = typer.Option(..., "--starting-load", help="Current 10-day rolling load (miles)"),
    peak_load: float = typer.Option(..., "--peak-load", help="Target 10-day rolling load at the goal (miles)"),
    vo2max: float | None = typer.Option(None, "--vo2max", help="VO2max for pace annotations"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the plan as JSON to this file"),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON instead of a table"),
    stats: bool = typer.Option(False, "--stats", help="Print plan statistics"),
    strict: bool = typer.Option(False, "--strict", help="Fail if the plan violates any invariant"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Generate a training plan.

    Examples:
        shiftplan generate --start 2026-01-01 --goal 2026-03-26 \\
            --starting-load 25 --peak-load 55 --event-distance 13.1 -w shifts.json
    """
    _setup_logging(debug)

    start_date = _parse_date(start, "--start")
    goal_date = _parse_date(goal, "--goal")

    try:
        workday_map = load_workday_map(workdays) if workdays else {}
    except (OSError, ValueError) as e:
        console.print(f"[bold red]✗ Could not read workdays:[/bold red] {e}")
        raise typer.Exit(1) from e

    request = PlanRequest(
        start_date=start_date,
        goal_date=goal_date,
        event_distance=event_distance,
        workday_map=workday_map,
        starting_load=starting_load,
        peak_load=peak_load,
        vo2max=vo2max,
    )
    policy = PlanPolicy.from_settings(settings)

    try:
        result = generate_plan(request, policy=policy, default_vo2max=settings.default_vo2max)
    except PlannerError as e:
        console.print(
            Panel(
                Text("Plan generation failed", style="bold red"),
                subtitle=str(e),
                border_style="red",
            )
        )
        raise typer.Exit(1) from e

    if strict:
        try:
            validate_plan(result.days, allow_workday_runs=policy.allow_workday_run_fallback)
        except PlanningInvariantError as e:
            log_planning_invariant_failure(e, {"start": start, "goal": goal})
            console.print(
                Panel(
                    Text("Plan violates invariants", style="bold red"),
                    subtitle=", ".join(e.details),
                    border_style="red",
                )
            )
            raise typer.Exit(1) from e

    if output:
        _write_file_sync(output, result.model_dump_json(indent=2))
        logger.info(f"Plan written to {output}")

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        console.print(_plan_table(result))

    for anomaly in result.anomalies:
        when = anomaly.date.isoformat() if anomaly.date else "-"
        console.print(f"[yellow]⚠️  {anomaly.code}[/yellow] {when}: {anomaly.detail}")

    if stats:
        console.print(_stats_table(compute_plan_statistics(result.days, request.starting_load)))


@app.command()
def workdays(
    events_file: Path = typer.Argument(..., help="JSON list of {start, end} shift events"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the workday map to this file"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Convert shift events into a workday map.

    An event ending exactly at midnight does not mark the following day.
    """
    _setup_logging(debug)

    try:
        events = json.loads(events_file.read_text(encoding="utf-8"))
        if not isinstance(events, list):
            raise ValueError("expected a JSON list of events")
        workday_map = build_workday_map(events)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]✗ Could not build workday map:[/bold red] {e}")
        raise typer.Exit(1) from e

    content = json.dumps(dict(sorted(workday_map.items())), indent=2)
    if output:
        _write_file_sync(output, content)
        console.print(f"[green]✓ {len(workday_map)} workdays written to {output}[/green]")
    else:
        typer.echo(content)


@app.command()
def paces(
    vo2max: float = typer.Option(..., "--vo2max", help="VO2max in ml/kg/min"),
) -> None:
    """Print the display pace ranges for a VO2max."""
    try:
        pace_set = paces_from_vo2max(vo2max)
    except ValueError as e:
        console.print(f"[bold red]✗ {e}[/bold red]")
        raise typer.Exit(1) from e

    table = Table(title=f"Paces for VO2max {vo2max:g}")
    table.add_column("Intensity")
    table.add_column("Pace")
    table.add_row("Easy", pace_set.easy)
    table.add_row("Threshold", pace_set.threshold)
    table.add_row("Interval", pace_set.interval)
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
