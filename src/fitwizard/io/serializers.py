"""
JSON serialization for plan and log models.

Handles conversion between dataclasses and JSON-compatible dicts, plan
schema migration, and parsing of compact set strings typed on the CLI.
Datetimes are stored as ISO-8601 strings.
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.exercises.base import Exercise
from ..core.models import (
    ExerciseLog,
    ExercisePrescription,
    Plan,
    RIRProgression,
    SetLog,
    WeeklyVolume,
    WizardSelections,
    WorkoutDay,
    WorkoutLog,
)

CURRENT_SCHEMA_VERSION = 1


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


# =============================================================================
# Field helpers
# =============================================================================


def _require(d: dict, key: str, where: str) -> Any:
    if key not in d:
        raise ValidationError(f"{where}: missing field '{key}'")
    return d[key]


def parse_datetime(value: str | None, name: str = "datetime") -> datetime | None:
    """
    Parse an ISO-8601 string (None passes through).

    Raises:
        ValidationError: If the string is not ISO-8601
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be an ISO-8601 string, got {value!r}")
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {value}") from e


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _build(cls, where: str, **kwargs):
    """Construct a model, turning its __post_init__ ValueError into ValidationError."""
    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{where}: {e}") from e


# =============================================================================
# Selections
# =============================================================================


def selections_to_dict(s: WizardSelections) -> dict[str, Any]:
    return {
        "goal": s.goal,
        "experience_level": s.experience_level,
        "equipment": list(s.equipment),
        "target_muscles": list(s.target_muscles),
        "constraints": list(s.constraints),
        "days_per_week": s.days_per_week,
        "session_duration": s.session_duration,
        "opt_phase": s.opt_phase,
        "first_name": s.first_name,
        "last_name": s.last_name,
        "personal_goal_note": s.personal_goal_note,
        "is_trainer": s.is_trainer,
        "coach_notes": s.coach_notes,
    }


def dict_to_selections(d: dict[str, Any]) -> WizardSelections:
    """
    Convert dict to WizardSelections.

    Raises:
        ValidationError: If required fields are missing or of the wrong type
    """
    where = "selections"
    return _build(
        WizardSelections,
        where,
        goal=str(_require(d, "goal", where)),
        experience_level=str(_require(d, "experience_level", where)),
        equipment=list(_require(d, "equipment", where)),
        target_muscles=list(_require(d, "target_muscles", where)),
        constraints=list(d.get("constraints", [])),
        days_per_week=int(_require(d, "days_per_week", where)),
        session_duration=int(_require(d, "session_duration", where)),
        opt_phase=d.get("opt_phase"),
        first_name=d.get("first_name"),
        last_name=d.get("last_name"),
        personal_goal_note=d.get("personal_goal_note"),
        is_trainer=bool(d.get("is_trainer", False)),
        coach_notes=d.get("coach_notes"),
    )


# =============================================================================
# Plan
# =============================================================================


def exercise_to_dict(e: Exercise) -> dict[str, Any]:
    return {
        "id": e.id,
        "name": e.name,
        "primary_muscles": list(e.primary_muscles),
        "secondary_muscles": list(e.secondary_muscles),
        "equipment": list(e.equipment),
        "patterns": list(e.patterns),
        "contraindications": list(e.contraindications),
        "difficulty": e.difficulty,
        "category": e.category,
        "stability_level": e.stability_level,
        "exercise_type": e.exercise_type,
        "cues": list(e.cues),
    }


def dict_to_exercise(d: dict[str, Any]) -> Exercise:
    where = f"exercise {d.get('id', '?')}"
    return _build(
        Exercise,
        where,
        id=str(_require(d, "id", where)),
        name=str(_require(d, "name", where)),
        primary_muscles=list(_require(d, "primary_muscles", where)),
        secondary_muscles=list(d.get("secondary_muscles", [])),
        equipment=list(_require(d, "equipment", where)),
        patterns=list(d.get("patterns", [])),
        contraindications=list(d.get("contraindications", [])),
        difficulty=d.get("difficulty", "All Levels"),
        category=d.get("category", "strength"),
        stability_level=d.get("stability_level"),
        exercise_type=d.get("exercise_type"),
        cues=list(d.get("cues", [])),
    )


def prescription_to_dict(p: ExercisePrescription) -> dict[str, Any]:
    return {
        "exercise": exercise_to_dict(p.exercise),
        "sets": p.sets,
        "reps": p.reps,
        "rir": p.rir,
        "tempo": p.tempo,
        "rest_seconds": p.rest_seconds,
        "superset_group": p.superset_group,
        "notes": p.notes,
        "rationale": p.rationale,
    }


def dict_to_prescription(d: dict[str, Any]) -> ExercisePrescription:
    where = "prescription"
    return _build(
        ExercisePrescription,
        where,
        exercise=dict_to_exercise(_require(d, "exercise", where)),
        sets=int(_require(d, "sets", where)),
        reps=str(_require(d, "reps", where)),
        rir=int(_require(d, "rir", where)),
        tempo=d.get("tempo"),
        rest_seconds=d.get("rest_seconds"),
        superset_group=d.get("superset_group"),
        notes=d.get("notes"),
        rationale=d.get("rationale", ""),
    )


def plan_to_dict(plan: Plan) -> dict[str, Any]:
    """
    Convert Plan to a JSON-compatible dict (current schema version).
    """
    return {
        "schema_version": CURRENT_SCHEMA_VERSION,
        "id": plan.id,
        "created_at": _iso(plan.created_at),
        "selections": selections_to_dict(plan.selections),
        "split_type": plan.split_type,
        "opt_phase": plan.opt_phase,
        "workout_days": [
            {
                "day_index": day.day_index,
                "name": day.name,
                "focus_tags": list(day.focus_tags),
                "exercises": [prescription_to_dict(p) for p in day.exercises],
                "estimated_duration": day.estimated_duration,
                "warm_up": list(day.warm_up),
                "cool_down": list(day.cool_down),
            }
            for day in plan.workout_days
        ],
        "weekly_volume": [
            {
                "muscle_group": v.muscle_group,
                "sets": v.sets,
                "is_within_cap": v.is_within_cap,
                "mev": v.mev,
                "mrv": v.mrv,
            }
            for v in plan.weekly_volume
        ],
        "rir_progression": [
            {"week": r.week, "target_rir": r.target_rir, "is_deload": r.is_deload}
            for r in plan.rir_progression
        ],
        "notes": list(plan.notes),
    }


def dict_to_plan(d: dict[str, Any]) -> Plan:
    """
    Convert dict to Plan, migrating older schemas first.

    Raises:
        ValidationError: If the data is malformed or from a newer schema
    """
    d = migrate_plan_dict(d)
    where = f"plan {d.get('id', '?')}"

    days = []
    for raw in _require(d, "workout_days", where):
        days.append(
            _build(
                WorkoutDay,
                f"{where} day",
                day_index=int(_require(raw, "day_index", where)),
                name=str(_require(raw, "name", where)),
                focus_tags=list(raw.get("focus_tags", [])),
                exercises=[dict_to_prescription(p) for p in raw.get("exercises", [])],
                estimated_duration=int(raw.get("estimated_duration", 0)),
                warm_up=list(raw.get("warm_up", [])),
                cool_down=list(raw.get("cool_down", [])),
            )
        )

    volume = [
        WeeklyVolume(
            muscle_group=str(v["muscle_group"]),
            sets=int(v["sets"]),
            is_within_cap=bool(v["is_within_cap"]),
            mev=int(v.get("mev", 0)),
            mrv=int(v.get("mrv", 0)),
        )
        for v in d.get("weekly_volume", [])
    ]
    progression = [
        RIRProgression(week=int(r["week"]), target_rir=int(r["target_rir"]), is_deload=bool(r.get("is_deload", False)))
        for r in d.get("rir_progression", [])
    ]

    return _build(
        Plan,
        where,
        id=str(_require(d, "id", where)),
        created_at=parse_datetime(_require(d, "created_at", where), "created_at"),
        selections=dict_to_selections(_require(d, "selections", where)),
        split_type=str(_require(d, "split_type", where)),
        opt_phase=str(d.get("opt_phase", "")),
        workout_days=days,
        weekly_volume=volume,
        rir_progression=progression,
        notes=list(d.get("notes", [])),
    )


# =============================================================================
# Schema migration
# =============================================================================


def needs_migration(d: dict[str, Any]) -> bool:
    """True if a stored plan dict predates the current schema."""
    return int(d.get("schema_version", 0)) < CURRENT_SCHEMA_VERSION


def _migrate_v0_to_v1(d: dict[str, Any]) -> dict[str, Any]:
    """
    v0 plans were written before opt_phase and volume landmarks were stored,
    and used camelCase keys for a few fields.
    """
    renames = {
        "createdAt": "created_at",
        "splitType": "split_type",
        "workoutDays": "workout_days",
        "weeklyVolume": "weekly_volume",
        "rirProgression": "rir_progression",
        "optPhase": "opt_phase",
    }
    out = {renames.get(k, k): v for k, v in d.items()}
    out.setdefault("opt_phase", "")
    out.setdefault("notes", [])
    out["schema_version"] = 1
    return out


_MIGRATIONS = {0: _migrate_v0_to_v1}


def migrate_plan_dict(d: dict[str, Any]) -> dict[str, Any]:
    """
    Bring a stored plan dict up to CURRENT_SCHEMA_VERSION.

    Raises:
        ValidationError: If the dict comes from a newer schema than this code
    """
    try:
        version = int(d.get("schema_version", 0))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid schema_version: {d.get('schema_version')!r}") from e
    if version > CURRENT_SCHEMA_VERSION:
        raise ValidationError(
            f"Plan schema version {version} is newer than supported ({CURRENT_SCHEMA_VERSION})"
        )
    while version < CURRENT_SCHEMA_VERSION:
        d = _MIGRATIONS[version](d)
        version = int(d["schema_version"])
    return d


# =============================================================================
# Workout logs
# =============================================================================


def workout_log_to_dict(log: WorkoutLog) -> dict[str, Any]:
    return {
        "id": log.id,
        "plan_id": log.plan_id,
        "day_index": log.day_index,
        "day_name": log.day_name,
        "started_at": _iso(log.started_at),
        "completed_at": _iso(log.completed_at),
        "duration": log.duration,
        "exercises": [
            {
                "exercise_id": e.exercise_id,
                "exercise_name": e.exercise_name,
                "sets": [
                    {
                        "set_number": s.set_number,
                        "weight": s.weight,
                        "weight_unit": s.weight_unit,
                        "reps": s.reps,
                        "rir": s.rir,
                        "completed": s.completed,
                        "notes": s.notes,
                    }
                    for s in e.sets
                ],
                "perceived_effort": e.perceived_effort,
                "skipped": e.skipped,
                "skip_reason": e.skip_reason,
            }
            for e in log.exercises
        ],
        "perceived_difficulty": log.perceived_difficulty,
        "notes": log.notes,
        "total_volume": log.total_volume,
    }


def dict_to_workout_log(d: dict[str, Any]) -> WorkoutLog:
    """
    Convert dict to WorkoutLog.

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    where = f"workout log {d.get('id', '?')}"
    exercises = []
    for e in d.get("exercises", []):
        sets = [
            _build(
                SetLog,
                where,
                set_number=int(_require(s, "set_number", where)),
                weight=float(s.get("weight", 0.0)),
                weight_unit=s.get("weight_unit", "lbs"),
                reps=int(_require(s, "reps", where)),
                rir=int(s.get("rir", 0)),
                completed=bool(s.get("completed", True)),
                notes=s.get("notes"),
            )
            for s in e.get("sets", [])
        ]
        exercises.append(
            _build(
                ExerciseLog,
                where,
                exercise_id=str(_require(e, "exercise_id", where)),
                exercise_name=str(e.get("exercise_name", "")),
                sets=sets,
                perceived_effort=e.get("perceived_effort"),
                skipped=bool(e.get("skipped", False)),
                skip_reason=e.get("skip_reason"),
            )
        )

    return _build(
        WorkoutLog,
        where,
        id=str(_require(d, "id", where)),
        plan_id=str(_require(d, "plan_id", where)),
        day_index=int(d.get("day_index", 0)),
        day_name=str(d.get("day_name", "")),
        started_at=parse_datetime(_require(d, "started_at", where), "started_at"),
        completed_at=parse_datetime(d.get("completed_at"), "completed_at"),
        duration=int(d.get("duration", 0)),
        exercises=exercises,
        perceived_difficulty=d.get("perceived_difficulty"),
        notes=d.get("notes"),
        total_volume=float(d.get("total_volume", 0.0)),
    )


def workout_log_to_json_line(log: WorkoutLog) -> str:
    """Convert a workout log to a single JSON line (no trailing newline)."""
    return json.dumps(workout_log_to_dict(log), separators=(",", ":"))


def json_line_to_workout_log(line: str) -> WorkoutLog:
    """
    Parse a JSON line to WorkoutLog.

    Raises:
        ValidationError: If the line is not valid JSON or not a valid log
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Workout log line must be a JSON object")
    return dict_to_workout_log(data)


# =============================================================================
# CLI set strings
# =============================================================================

_SET_PATTERN = re.compile(
    r"^\s*(?P<reps>\d+)\s*(?:@\s*(?P<weight>\d+(?:\.\d+)?)\s*(?P<unit>kg|lbs)?)?\s*(?:/\s*(?P<rir>\d+))?\s*$"
)


def parse_sets_string(sets_str: str, default_unit: str = "lbs", default_rir: int = 2) -> list[SetLog]:
    """
    Parse a compact set list.

    Format: ``reps@weight[unit]/rir`` entries separated by commas, e.g.
    ``8@135/2, 8@135/1, 6@135lbs/0``.  Weight and RIR are optional
    (``10`` is 10 bodyweight reps at the default RIR).

    Args:
        sets_str: Comma-separated set entries
        default_unit: Unit for weights without an explicit unit
        default_rir: RIR for entries without one

    Returns:
        List of completed SetLog, numbered from 1

    Raises:
        ValidationError: If any entry cannot be parsed
    """
    entries = [part for part in sets_str.split(",") if part.strip()]
    if not entries:
        raise ValidationError("No sets given")

    sets: list[SetLog] = []
    for i, part in enumerate(entries, start=1):
        m = _SET_PATTERN.match(part)
        if m is None:
            raise ValidationError(f"Invalid set format: {part.strip()!r}. Expected reps@weight/rir, e.g. 8@135/2")
        rir = int(m.group("rir")) if m.group("rir") is not None else default_rir
        if rir > 10:
            raise ValidationError(f"RIR must be between 0 and 10, got {rir}")
        sets.append(
            SetLog(
                set_number=i,
                weight=float(m.group("weight") or 0.0),
                weight_unit=m.group("unit") or default_unit,
                reps=int(m.group("reps")),
                rir=rir,
                completed=True,
            )
        )
    return sets
