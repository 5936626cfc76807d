"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans, logs and analysis results.
"""

from rich.console import Console
from rich.table import Table

from ..core.metrics import completed_sets, workout_volume
from ..core.models import (
    MRVWarning,
    Plan,
    ProgressionRecommendation,
    SplitSuggestion,
    ValidationWarning,
    WeeklySummary,
    WorkoutDay,
    WorkoutLog,
)
from ..core.phases import PhaseConfig, get_phase_name

console = Console()

_ACTION_STYLE = {"increase": "green", "maintain": "yellow", "decrease": "red", "swap": "magenta"}


def _humanize(value: str) -> str:
    return value.replace("_", " ").title()


def format_day_table(day: WorkoutDay) -> Table:
    """
    Create a Rich table for one workout day.

    Superset pairs share a group number shown in the first column.

    Args:
        day: Day to display

    Returns:
        Rich Table object
    """
    title = f"Day {day.day_index + 1}: {day.name}  (~{day.estimated_duration} min, {day.total_sets} sets)"
    table = Table(title=title, title_justify="left")

    table.add_column("SS", justify="center", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("RIR", justify="right", style="bold")
    table.add_column("Tempo")
    table.add_column("Rest(s)", justify="right")
    table.add_column("Why", style="dim")

    for p in day.exercises:
        table.add_row(
            str(p.superset_group) if p.superset_group is not None else "",
            p.exercise.name,
            str(p.sets),
            p.reps,
            str(p.rir),
            p.tempo or "-",
            str(p.rest_seconds) if p.rest_seconds is not None else "-",
            p.rationale,
        )

    return table


def format_volume_table(plan: Plan) -> Table:
    """
    Create a Rich table of planned weekly sets against MEV/MRV.

    Args:
        plan: Plan to display

    Returns:
        Rich Table object
    """
    table = Table(title="Weekly Volume")

    table.add_column("Muscle", style="cyan")
    table.add_column("Sets", justify="right", style="bold")
    table.add_column("MEV", justify="right")
    table.add_column("MRV", justify="right")
    table.add_column("Within cap", justify="center")

    for v in plan.weekly_volume:
        table.add_row(
            _humanize(v.muscle_group),
            str(v.sets),
            str(v.mev),
            str(v.mrv),
            "[green]yes[/green]" if v.is_within_cap else "[red]no[/red]",
        )

    return table


def print_plan(plan: Plan, show_volume: bool = True) -> None:
    """
    Print a full plan: header, days, weekly volume and RIR progression.

    Args:
        plan: Plan to display
        show_volume: Include the weekly volume table
    """
    s = plan.selections
    console.print()
    console.print(f"[bold]Plan[/bold] [dim]{plan.id}[/dim]")
    console.print(
        f"Goal: [bold]{s.goal}[/bold]  Level: [bold]{s.experience_level}[/bold]  "
        f"Split: [bold]{_humanize(plan.split_type)}[/bold]  "
        f"Phase: [bold]{get_phase_name(plan.opt_phase)}[/bold]"
    )
    if s.first_name:
        console.print(f"Prepared for: {s.first_name} {s.last_name or ''}".rstrip())
    if s.personal_goal_note:
        console.print(f"[italic]{s.personal_goal_note}[/italic]")
    console.print()

    for day in plan.workout_days:
        if day.warm_up:
            console.print(f"[dim]Warm-up: {'; '.join(day.warm_up)}[/dim]")
        console.print(format_day_table(day))
        if day.cool_down:
            console.print(f"[dim]Cool-down: {'; '.join(day.cool_down)}[/dim]")
        console.print()

    if show_volume and plan.weekly_volume:
        console.print(format_volume_table(plan))

    if plan.rir_progression:
        weeks = "  ".join(
            f"W{r.week}: RIR {r.target_rir}{' (deload)' if r.is_deload else ''}" for r in plan.rir_progression
        )
        console.print(f"[bold]RIR progression[/bold]  {weeks}")

    for note in plan.notes:
        console.print(f"[blue]- {note}[/blue]")
    if s.coach_notes:
        console.print(f"[magenta]Coach: {s.coach_notes}[/magenta]")


def format_plans_table(plans: list[Plan]) -> Table:
    """
    Create a Rich table listing saved plans.

    Args:
        plans: Plans to list (newest first)

    Returns:
        Rich Table object
    """
    table = Table(title="Saved Plans")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Created", style="cyan")
    table.add_column("Goal", style="magenta")
    table.add_column("Level")
    table.add_column("Days", justify="right")
    table.add_column("Split")
    table.add_column("Id", style="dim")

    for i, plan in enumerate(plans, 1):
        table.add_row(
            str(i),
            plan.created_at.strftime("%Y-%m-%d %H:%M"),
            plan.selections.goal,
            plan.selections.experience_level,
            str(plan.days_per_week),
            _humanize(plan.split_type),
            plan.id,
        )

    return table


def format_history_table(logs: list[WorkoutLog]) -> Table:
    """
    Create a Rich table displaying workout history.

    Args:
        logs: Logs to display

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Day", style="magenta")
    table.add_column("Exercises", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Avg RIR", justify="right")
    table.add_column("Volume", justify="right", style="bold")

    for i, log in enumerate(logs, 1):
        sets = [s for e in log.exercises for s in completed_sets(e)]
        avg_rir = sum(s.rir for s in sets) / len(sets) if sets else None
        table.add_row(
            str(i),
            log.started_at.strftime("%Y-%m-%d"),
            log.day_name or f"Day {log.day_index + 1}",
            str(sum(1 for e in log.exercises if not e.skipped)),
            str(len(sets)),
            f"{avg_rir:.1f}" if avg_rir is not None else "-",
            f"{log.total_volume or workout_volume(log):.0f}",
        )

    return table


def print_history(logs: list[WorkoutLog]) -> None:
    """
    Print workout history to console.

    Args:
        logs: Logs to display
    """
    if not logs:
        console.print("[yellow]No workouts logged yet.[/yellow]")
        return

    console.print(format_history_table(logs))


def print_balance_warnings(warnings: list[ValidationWarning]) -> None:
    for w in warnings:
        if w.type == "warning":
            print_warning(w.message)
        else:
            print_info(w.message)


def print_mrv_warnings(warnings: list[MRVWarning]) -> None:
    if not warnings:
        print_success("All muscles within their recoverable volume.")
        return
    for w in warnings:
        print_warning(
            f"{_humanize(w.muscle_group)}: {w.actual_sets} sets in a week exceeds MRV of {w.mrv}. "
            "Consider reducing volume."
        )


def print_split_suggestion(suggestion: SplitSuggestion | None) -> None:
    if suggestion is None:
        print_success("Training frequency matches the plan.")
        return
    print_warning(suggestion.message)


def format_recommendations_table(recommendations: list[ProgressionRecommendation]) -> Table:
    """
    Create a Rich table of load recommendations.

    Args:
        recommendations: Output of analyze_performance()

    Returns:
        Rich Table object
    """
    table = Table(title="Progression")

    table.add_column("Exercise", style="cyan")
    table.add_column("Action")
    table.add_column("Current", justify="right")
    table.add_column("Next", justify="right", style="bold")
    table.add_column("Change", justify="right")
    table.add_column("Confidence")
    table.add_column("Why", style="dim")

    for r in recommendations:
        style = _ACTION_STYLE.get(r.action, "white")
        table.add_row(
            r.exercise_name,
            f"[{style}]{r.action}[/{style}]",
            f"{r.current_load:g}",
            f"{r.recommended_load:g}",
            f"{r.change_percentage:+.1f}%",
            r.confidence,
            r.rationale,
        )

    return table


def print_weekly_summary(summary: WeeklySummary) -> None:
    """
    Print one week's summary.

    Args:
        summary: WeeklySummary to display
    """
    console.print(
        f"[bold]Week {summary.week_number}[/bold] "
        f"({summary.start_date:%Y-%m-%d} to {summary.end_date:%Y-%m-%d})"
    )
    lines = [
        f"- Workouts: {summary.workouts_completed}/{summary.workouts_planned} "
        f"({summary.completion_rate:.0f}%)",
        f"- Volume: {summary.total_volume:.0f}",
        f"- Avg RIR: {summary.avg_rir:.1f} (target {summary.target_rir})",
    ]
    for b in summary.muscle_group_breakdown:
        lines.append(f"  {_humanize(b.muscle_group)}: {b.sets} sets")
    for pr in summary.personal_records:
        lines.append(f"[green]- PR {pr.exercise_name} ({pr.type}): {pr.previous_value:g} -> {pr.new_value:g}[/green]")
    console.print("\n".join(lines))


def format_phases_table(phases: list[tuple[str, PhaseConfig]]) -> Table:
    """
    Create a Rich table describing OPT phases.

    Args:
        phases: (phase key, config) pairs

    Returns:
        Rich Table object
    """
    table = Table(title="OPT Phases")

    table.add_column("Phase", style="cyan")
    table.add_column("Reps", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Tempo")
    table.add_column("Rest(s)", justify="right")
    table.add_column("Intensity")
    table.add_column("RIR", justify="right")
    table.add_column("Superset", justify="center")

    for key, cfg in phases:
        table.add_row(
            get_phase_name(key),
            cfg.reps,
            str(cfg.sets),
            cfg.tempo,
            str(cfg.rest),
            cfg.intensity,
            str(cfg.rir),
            "yes" if cfg.is_superset else "",
        )

    return table


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
