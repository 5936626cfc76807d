"""Planning commands: generate, validate, show-plan, list-plans, suggest, phases."""

import json
from typing import Annotated, Optional

import typer

from ...core.balance import validate_plan_balance
from ...core.config import EXPERIENCE_LEVELS, GOALS
from ...core.models import WizardSelections
from ...core.phases import determine_opt_phase, get_all_phases, get_phase_config, get_phase_name
from ...core.planner import generate_plan, validate_wizard_inputs
from ...core.selection import exercise_preview, suggest_exercises
from ...io.serializers import ValidationError, plan_to_dict
from .. import views
from ..app import JsonOption, StoreDirOption, app, get_store

GoalOption = Annotated[str, typer.Option("--goal", "-g", help="strength, hypertrophy or general")]
ExperienceOption = Annotated[
    str, typer.Option("--experience", "-x", help="beginner, intermediate or advanced")
]
EquipmentOption = Annotated[
    str, typer.Option("--equipment", "-e", help="Comma-separated equipment, e.g. dumbbells,bench")
]
MusclesOption = Annotated[
    str, typer.Option("--muscles", "-m", help="Comma-separated target muscles, e.g. chest,lats,quads")
]
ConstraintsOption = Annotated[
    str, typer.Option("--constraints", "-c", help="Comma-separated constraints, e.g. knee_injury,no_jumping")
]
DaysOption = Annotated[int, typer.Option("--days", "-d", help="Training days per week (2-6)")]
DurationOption = Annotated[int, typer.Option("--duration", help="Session length in minutes (30+)")]
PhaseOption = Annotated[
    Optional[str], typer.Option("--phase", help="Force an OPT phase instead of the goal/level mapping")
]


def _split_csv(value: str) -> list[str]:
    """Split a comma-separated option into trimmed, non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _build_selections(
    goal: str,
    experience: str,
    equipment: str,
    muscles: str,
    constraints: str,
    days: int,
    duration: int,
    phase: str | None,
    **personal,
) -> WizardSelections:
    return WizardSelections(
        goal=goal,
        experience_level=experience,
        equipment=_split_csv(equipment),
        target_muscles=_split_csv(muscles),
        constraints=_split_csv(constraints),
        days_per_week=days,
        session_duration=duration,
        opt_phase=phase,
        **personal,
    )


def _check_vocabulary(selections: WizardSelections) -> None:
    """Exit on a goal or experience level that the generator does not know."""
    if selections.goal and selections.goal not in GOALS:
        views.print_error(f"Unknown goal '{selections.goal}'. Choose from: {', '.join(GOALS)}")
        raise typer.Exit(1)
    if selections.experience_level not in EXPERIENCE_LEVELS:
        views.print_error(
            f"Unknown experience level '{selections.experience_level}'. "
            f"Choose from: {', '.join(EXPERIENCE_LEVELS)}"
        )
        raise typer.Exit(1)
    if selections.opt_phase is not None and selections.opt_phase not in get_all_phases():
        views.print_error(
            f"Unknown phase '{selections.opt_phase}'. Choose from: {', '.join(get_all_phases())}"
        )
        raise typer.Exit(1)


@app.command()
def generate(
    goal: GoalOption = "general",
    experience: ExperienceOption = "beginner",
    equipment: EquipmentOption = "bodyweight",
    muscles: MusclesOption = "chest,upper_back,quads,glutes,abs",
    constraints: ConstraintsOption = "",
    days: DaysOption = 3,
    duration: DurationOption = 60,
    phase: PhaseOption = None,
    first_name: Annotated[Optional[str], typer.Option("--first-name", help="Client first name")] = None,
    last_name: Annotated[Optional[str], typer.Option("--last-name", help="Client last name")] = None,
    note: Annotated[Optional[str], typer.Option("--note", help="Personal goal note")] = None,
    trainer: Annotated[bool, typer.Option("--trainer", help="Plan is written by a trainer for a client")] = False,
    coach_notes: Annotated[Optional[str], typer.Option("--coach-notes", help="Notes from the coach")] = None,
    timestamp: Annotated[
        bool,
        typer.Option("--timestamp/--no-timestamp", help="Append a creation timestamp to the plan id"),
    ] = True,
    save: Annotated[bool, typer.Option("--save/--no-save", help="Save the plan to the store")] = True,
    store_dir: StoreDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Generate a weekly workout plan from wizard choices.
    """
    selections = _build_selections(
        goal, experience, equipment, muscles, constraints, days, duration, phase,
        first_name=first_name,
        last_name=last_name,
        personal_goal_note=note,
        is_trainer=trainer,
        coach_notes=coach_notes,
    )
    _check_vocabulary(selections)

    result = validate_wizard_inputs(selections)
    if not result.valid:
        for err in result.errors:
            views.print_error(err)
        raise typer.Exit(1)

    plan = generate_plan(selections, append_timestamp=timestamp)

    if save:
        store = get_store(store_dir)
        path = store.save_plan(plan)

    if json_out:
        print(json.dumps(plan_to_dict(plan), indent=2))
        return

    views.print_balance_warnings(validate_plan_balance(selections))
    views.print_plan(plan)
    if save:
        views.print_success(f"Saved plan to {path}")


@app.command()
def validate(
    goal: GoalOption = "",
    experience: ExperienceOption = "beginner",
    equipment: EquipmentOption = "",
    muscles: MusclesOption = "",
    constraints: ConstraintsOption = "",
    days: DaysOption = 3,
    duration: DurationOption = 60,
    phase: PhaseOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Check wizard choices without generating a plan.

    Exits with status 1 when the choices cannot produce a plan.
    """
    selections = _build_selections(goal, experience, equipment, muscles, constraints, days, duration, phase)
    result = validate_wizard_inputs(selections)
    warnings = validate_plan_balance(selections)

    if json_out:
        print(json.dumps({
            "valid": result.valid,
            "errors": list(result.errors),
            "warnings": [
                {"id": w.id, "type": w.type, "message": w.message, "context": w.context}
                for w in warnings
            ],
        }, indent=2))
    else:
        for err in result.errors:
            views.print_error(err)
        views.print_balance_warnings(warnings)
        if result.valid:
            views.print_success("Selections are valid.")

    if not result.valid:
        raise typer.Exit(1)


@app.command("show-plan")
def show_plan(
    plan_id: Annotated[Optional[str], typer.Argument(help="Plan id (default: most recent)")] = None,
    store_dir: StoreDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display a saved plan.
    """
    store = get_store(store_dir)

    try:
        plan = store.load_plan(plan_id) if plan_id else store.latest_plan()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if plan is None:
        views.print_error("No saved plans.")
        views.print_info("Run 'generate' first to create a plan.")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(plan_to_dict(plan), indent=2))
        return

    views.print_plan(plan)


@app.command("list-plans")
def list_plans(
    store_dir: StoreDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List saved plans, newest first.
    """
    store = get_store(store_dir)

    try:
        plans = store.list_plans()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([
            {
                "id": p.id,
                "created_at": p.created_at.isoformat(),
                "goal": p.selections.goal,
                "experience_level": p.selections.experience_level,
                "days_per_week": p.days_per_week,
                "split_type": p.split_type,
                "opt_phase": p.opt_phase,
            }
            for p in plans
        ], indent=2))
        return

    if not plans:
        views.console.print("[yellow]No saved plans.[/yellow]")
        return

    views.console.print(views.format_plans_table(plans))


@app.command()
def suggest(
    muscles: MusclesOption = "chest",
    equipment: EquipmentOption = "bodyweight",
    experience: Annotated[
        Optional[str], typer.Option("--experience", "-x", help="Rank by fit for this level")
    ] = None,
    constraints: ConstraintsOption = "",
    limit: Annotated[int, typer.Option("--limit", "-n", help="Maximum exercises to list")] = 5,
    preview: Annotated[
        bool, typer.Option("--preview", help="Show up to three options per muscle instead")
    ] = False,
    json_out: JsonOption = False,
) -> None:
    """
    Suggest exercises for muscles with the given equipment.
    """
    muscle_list = _split_csv(muscles)
    equipment_list = _split_csv(equipment)

    if preview:
        by_muscle = exercise_preview(muscle_list, equipment_list)
        if json_out:
            print(json.dumps(by_muscle, indent=2))
            return
        for muscle, names in by_muscle.items():
            views.console.print(
                f"[cyan]{muscle.replace('_', ' ').title()}[/cyan]: {', '.join(names) or '[dim]none[/dim]'}"
            )
        return

    picks = suggest_exercises(
        muscle_list,
        equipment_list,
        limit=limit,
        experience_level=experience,
        constraints=_split_csv(constraints),
    )

    if json_out:
        print(json.dumps([
            {"id": ex.id, "name": ex.name, "primary_muscles": list(ex.primary_muscles), "equipment": list(ex.equipment)}
            for ex in picks
        ], indent=2))
        return

    if not picks:
        views.print_warning("No matching exercises for that equipment.")
        return

    for i, ex in enumerate(picks, 1):
        views.console.print(
            f"{i}. [bold]{ex.name}[/bold] [dim]({', '.join(ex.equipment)})[/dim]  "
            f"primary: {', '.join(ex.primary_muscles)}"
        )


@app.command()
def phases(
    goal: Annotated[Optional[str], typer.Option("--goal", "-g", help="Show the phase for this goal")] = None,
    experience: Annotated[
        Optional[str], typer.Option("--experience", "-x", help="Show the phase for this level")
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Describe the OPT phases, or the phase a goal and level map to.
    """
    if goal is not None or experience is not None:
        if goal is None or experience is None:
            views.print_error("Give both --goal and --experience to look up a phase.")
            raise typer.Exit(1)
        keys = [determine_opt_phase(goal, experience)]
    else:
        keys = get_all_phases()

    rows = [(key, get_phase_config(key)) for key in keys]

    if json_out:
        print(json.dumps([
            {
                "phase": key,
                "name": get_phase_name(key),
                "reps": cfg.reps,
                "sets": cfg.sets,
                "tempo": cfg.tempo,
                "rest": cfg.rest,
                "intensity": cfg.intensity,
                "rir": cfg.rir,
                "is_superset": cfg.is_superset,
            }
            for key, cfg in rows
        ], indent=2))
        return

    views.console.print(views.format_phases_table(rows))
