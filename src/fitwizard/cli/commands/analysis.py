"""Analysis commands: analyze."""

import json
from datetime import datetime, timedelta
from typing import Annotated, Optional

import typer

from ...core.adaptation import analyze_performance, detect_mrv_warnings, suggest_split_adjustment
from ...core.config import DAYS_PER_BUCKET
from ...core.metrics import generate_weekly_summary
from ...io.serializers import ValidationError
from .. import views
from ..app import JsonOption, StoreDirOption, app, get_store


@app.command()
def analyze(
    plan_id: Annotated[
        Optional[str], typer.Option("--plan-id", "-p", help="Plan id (default: most recent)")
    ] = None,
    window: Annotated[
        int, typer.Option("--window", "-w", help="Days of history to analyze")
    ] = 28,
    week: Annotated[
        Optional[int], typer.Option("--week", help="Mesocycle week for the target RIR")
    ] = None,
    as_of: Annotated[
        Optional[str], typer.Option("--as-of", help="End of the window (YYYY-MM-DD, default: now)")
    ] = None,
    store_dir: StoreDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Check logged workouts against the plan.

    Reports muscles over their MRV, a split change if you keep training
    fewer days than planned, and load recommendations from reported RIR.
    """
    store = get_store(store_dir)

    if window < 1:
        views.print_error("Window must be at least 1 day")
        raise typer.Exit(1)

    if as_of is None:
        now = datetime.now()
    else:
        try:
            now = datetime.fromisoformat(as_of)
        except ValueError:
            views.print_error(f"Invalid date '{as_of}'. Use YYYY-MM-DD")
            raise typer.Exit(1)
        if now.time() == datetime.min.time():
            now = now + timedelta(days=1) - timedelta(microseconds=1)

    try:
        plan = store.load_plan(plan_id) if plan_id else store.latest_plan()
        logs = store.load_logs(plan.id) if plan is not None else []
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if plan is None:
        views.print_error("No saved plans.")
        views.print_info("Run 'generate' first to create a plan.")
        raise typer.Exit(1)

    recent = [log for log in logs if now - timedelta(days=window) <= log.started_at <= now]

    mrv_warnings = detect_mrv_warnings(logs, plan, window, now=now)
    split = suggest_split_adjustment(logs, plan, window, now=now)
    recommendations = analyze_performance(recent, plan, week)
    summary = generate_weekly_summary(
        logs, plan, week or 1, now - timedelta(days=DAYS_PER_BUCKET) + timedelta(microseconds=1)
    )

    if json_out:
        print(json.dumps({
            "plan_id": plan.id,
            "window_days": window,
            "workouts": len(recent),
            "mrv_warnings": [
                {"muscle_group": w.muscle_group, "mrv": w.mrv, "actual_sets": w.actual_sets}
                for w in mrv_warnings
            ],
            "split_suggestion": None if split is None else {
                "recommended_split": split.recommended_split,
                "current_split": split.current_split,
                "planned_days_per_week": split.planned_days_per_week,
                "actual_days_per_week": split.actual_days_per_week,
                "weekly_days": list(split.weekly_days),
            },
            "recommendations": [
                {
                    "exercise_id": r.exercise_id,
                    "action": r.action,
                    "current_load": r.current_load,
                    "recommended_load": r.recommended_load,
                    "change_percentage": round(r.change_percentage, 1),
                    "confidence": r.confidence,
                }
                for r in recommendations
            ],
            "this_week": {
                "workouts_completed": summary.workouts_completed,
                "workouts_planned": summary.workouts_planned,
                "total_volume": summary.total_volume,
                "avg_rir": round(summary.avg_rir, 2),
            },
        }, indent=2))
        return

    if not recent:
        views.console.print(f"[yellow]No workouts logged in the last {window} days.[/yellow]")
        return

    views.print_weekly_summary(summary)
    views.console.print()
    views.print_mrv_warnings(mrv_warnings)
    views.print_split_suggestion(split)
    if recommendations:
        views.console.print()
        views.console.print(views.format_recommendations_table(recommendations))
