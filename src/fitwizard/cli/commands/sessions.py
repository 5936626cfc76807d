"""Session commands: log-workout, history."""

import json
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.metrics import detect_personal_records, workout_volume
from ...core.models import ExerciseLog, Plan, WorkoutLog
from ...io.serializers import ValidationError, parse_sets_string, workout_log_to_dict
from .. import views
from ..app import JsonOption, StoreDirOption, app, get_store


def _parse_started_at(date: str | None) -> datetime:
    """Parse --date as YYYY-MM-DD or a full ISO timestamp (default: now)."""
    if date is None:
        return datetime.now().replace(second=0, microsecond=0)
    try:
        return datetime.fromisoformat(date)
    except ValueError:
        views.print_error(f"Invalid date '{date}'. Use YYYY-MM-DD or YYYY-MM-DDTHH:MM")
        raise typer.Exit(1)


def _parse_exercise_entry(entry: str, plan: Plan, unit: str) -> ExerciseLog:
    """
    Parse one --sets entry of the form ``exercise_id=8@135/2,8@135/1``.

    Raises:
        ValidationError: If the entry or its sets are malformed
    """
    if "=" not in entry:
        raise ValidationError(f"Expected exercise_id=sets, got {entry!r}")
    exercise_id, sets_str = (part.strip() for part in entry.split("=", 1))
    exercise = plan.find_exercise(exercise_id)
    if exercise is None:
        raise ValidationError(f"Exercise '{exercise_id}' is not in plan {plan.id}")
    return ExerciseLog(
        exercise_id=exercise_id,
        exercise_name=exercise.name,
        sets=parse_sets_string(sets_str, default_unit=unit),
    )


@app.command("log-workout")
def log_workout(
    sets: Annotated[
        list[str],
        typer.Option(
            "--sets",
            help="Per exercise: exercise_id=reps@weight/rir,... (repeat for each exercise)",
        ),
    ],
    day: Annotated[int, typer.Option("--day", "-d", help="Plan day number (1-based)")] = 1,
    plan_id: Annotated[
        Optional[str], typer.Option("--plan-id", "-p", help="Plan id (default: most recent)")
    ] = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Workout start (YYYY-MM-DD or ISO timestamp, default: now)"),
    ] = None,
    skip: Annotated[
        Optional[list[str]], typer.Option("--skip", help="Exercise id skipped this session (repeatable)")
    ] = None,
    unit: Annotated[str, typer.Option("--unit", "-u", help="Weight unit: lbs or kg")] = "lbs",
    duration: Annotated[int, typer.Option("--duration", help="Session length in minutes")] = 0,
    difficulty: Annotated[
        Optional[int], typer.Option("--difficulty", help="Perceived difficulty 1-10")
    ] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", "-n", help="Session notes")] = None,
    store_dir: StoreDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log a completed workout against a plan day.

      fitwizard log-workout --day 1 \\
        --sets "barbell_bench_press=8@135/2,8@135/1" --sets "plank=30/3"
    """
    store = get_store(store_dir)

    if unit not in ("lbs", "kg"):
        views.print_error("Unit must be lbs or kg")
        raise typer.Exit(1)

    if difficulty is not None and not 1 <= difficulty <= 10:
        views.print_error("Difficulty must be between 1 and 10")
        raise typer.Exit(1)

    try:
        plan = store.load_plan(plan_id) if plan_id else store.latest_plan()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if plan is None:
        views.print_error("No saved plans.")
        views.print_info("Run 'generate' first to create a plan.")
        raise typer.Exit(1)

    if not 1 <= day <= len(plan.workout_days):
        views.print_error(f"Day must be between 1 and {len(plan.workout_days)}")
        raise typer.Exit(1)
    workout_day = plan.workout_days[day - 1]

    try:
        exercises = [_parse_exercise_entry(entry, plan, unit) for entry in sets]
    except ValidationError as e:
        views.print_error(f"Invalid sets format: {e}")
        raise typer.Exit(1)

    for exercise_id in skip or []:
        exercise = plan.find_exercise(exercise_id)
        exercises.append(
            ExerciseLog(
                exercise_id=exercise_id,
                exercise_name=exercise.name if exercise is not None else exercise_id,
                skipped=True,
                skip_reason="skipped",
            )
        )

    started_at = _parse_started_at(date)
    draft = WorkoutLog(
        id=f"log_{uuid.uuid4().hex[:12]}",
        plan_id=plan.id,
        day_index=workout_day.day_index,
        day_name=workout_day.name,
        started_at=started_at,
        completed_at=started_at,
        duration=duration,
        exercises=exercises,
        perceived_difficulty=difficulty,
        notes=notes,
    )
    log = replace(draft, total_volume=workout_volume(draft))

    try:
        past_logs = store.load_logs()
        store.append_log(log)
    except ValidationError as e:
        views.print_error(f"Invalid workout data: {e}")
        raise typer.Exit(1)

    records = detect_personal_records(log, past_logs)

    if json_out:
        print(json.dumps({
            "log": workout_log_to_dict(log),
            "personal_records": [
                {"exercise_id": r.exercise_id, "type": r.type, "previous": r.previous_value, "new": r.new_value}
                for r in records
            ],
        }, indent=2))
        return

    views.print_success(
        f"Logged {workout_day.name} on {started_at:%Y-%m-%d}: "
        f"{sum(len(e.sets) for e in exercises)} sets, volume {log.total_volume:.0f} {unit}"
    )
    for r in records:
        views.print_success(f"New {r.type} PR on {r.exercise_name}: {r.previous_value:g} -> {r.new_value:g}")


@app.command()
def history(
    plan_id: Annotated[
        Optional[str], typer.Option("--plan-id", "-p", help="Only show logs for this plan")
    ] = None,
    limit: Annotated[
        Optional[int], typer.Option("--limit", "-l", help="Limit number of workouts to show")
    ] = None,
    store_dir: StoreDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display logged workouts.
    """
    store = get_store(store_dir)

    try:
        logs = store.load_logs(plan_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if limit is not None and limit > 0:
        logs = logs[-limit:]

    if json_out:
        print(json.dumps([workout_log_to_dict(log) for log in logs], indent=2))
        return

    views.print_history(logs)
