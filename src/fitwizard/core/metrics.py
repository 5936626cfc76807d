"""
Metrics over workout logs.

Set and load arithmetic (volume, estimated 1RM, unit conversion), weekly
summaries against a plan, and personal-record detection.
"""

from datetime import datetime, timedelta

from .config import KG_TO_LBS, LBS_TO_KG, WEIGHT_INCREMENTS
from .models import (
    ExerciseLog,
    MuscleBreakdown,
    PersonalRecord,
    Plan,
    SetLog,
    WeeklySummary,
    WorkoutLog,
)


def completed_sets(exercise_log: ExerciseLog) -> list[SetLog]:
    """Completed sets of a non-skipped exercise log (empty if skipped)."""
    if exercise_log.skipped:
        return []
    return [s for s in exercise_log.sets if s.completed]


def calculate_total_volume(sets: list[SetLog] | tuple[SetLog, ...]) -> float:
    """Sum of weight × reps over completed sets."""
    return sum(s.weight * s.reps for s in sets if s.completed)


def workout_volume(log: WorkoutLog) -> float:
    """Total volume of a workout from its sets (skipped exercises excluded)."""
    return sum(calculate_total_volume(completed_sets(e)) for e in log.exercises)


def calculate_one_rep_max(weight: float, reps: int) -> float:
    """
    Estimated one-rep max (Epley).

    1RM = w × (1 + r / 30); a single rep is its own max.
    """
    if reps <= 1:
        return float(weight)
    return weight * (1 + reps / 30)


def convert_weight(weight: float, from_unit: str, to_unit: str) -> float:
    """Convert between "lbs" and "kg"."""
    if from_unit == to_unit:
        return weight
    if from_unit == "lbs" and to_unit == "kg":
        return weight * LBS_TO_KG
    if from_unit == "kg" and to_unit == "lbs":
        return weight * KG_TO_LBS
    raise ValueError(f"Unsupported weight units: {from_unit} -> {to_unit}")


def round_to_increment(weight: float, unit: str = "lbs") -> float:
    """Round to the nearest loadable increment (2.5 lbs or 1 kg)."""
    increment = WEIGHT_INCREMENTS.get(unit, WEIGHT_INCREMENTS["lbs"])
    return round(weight / increment) * increment


def logs_between(logs: list[WorkoutLog], start: datetime, end: datetime) -> list[WorkoutLog]:
    """Logs started in [start, end], oldest first."""
    return sorted(
        (log for log in logs if start <= log.started_at <= end),
        key=lambda log: log.started_at,
    )


def generate_weekly_summary(
    logs: list[WorkoutLog],
    plan: Plan,
    week_number: int,
    start_date: datetime,
    personal_records: list[PersonalRecord] | None = None,
) -> WeeklySummary:
    """
    Summarise one week of training against the plan.

    Only logs started within the seven days from *start_date* are counted.
    Sets are attributed to the primary muscles of the matching plan
    exercise; exercises not in the plan still count toward volume and RIR.

    Args:
        logs: Workout logs (any range)
        plan: Active plan
        week_number: Mesocycle week (selects the target RIR)
        start_date: First day of the week
        personal_records: Records to attach to the summary

    Returns:
        WeeklySummary
    """
    end_date = start_date + timedelta(days=7) - timedelta(microseconds=1)
    week_logs = logs_between(logs, start_date, end_date)

    total_volume = 0.0
    total_rir = 0
    total_sets = 0
    muscle_sets: dict[str, int] = {}
    muscle_load: dict[str, float] = {}

    for log in week_logs:
        total_volume += log.total_volume or workout_volume(log)
        for ex_log in log.exercises:
            sets = completed_sets(ex_log)
            if not sets:
                continue
            total_rir += sum(s.rir for s in sets)
            total_sets += len(sets)
            exercise = plan.find_exercise(ex_log.exercise_id)
            if exercise is None:
                continue
            for m in exercise.primary_muscles:
                muscle_sets[m] = muscle_sets.get(m, 0) + len(sets)
                muscle_load[m] = muscle_load.get(m, 0.0) + sum(s.weight for s in sets)

    target = plan.target_rir_for_week(week_number)
    planned = len(plan.workout_days)
    breakdown = tuple(
        MuscleBreakdown(muscle_group=m, sets=n, avg_load=muscle_load[m] / n if n else 0.0)
        for m, n in muscle_sets.items()
    )

    return WeeklySummary(
        week_number=week_number,
        start_date=start_date,
        end_date=start_date + timedelta(days=6),
        workouts_completed=len(week_logs),
        workouts_planned=planned,
        completion_rate=(len(week_logs) / planned * 100) if planned else 0.0,
        total_volume=total_volume,
        avg_rir=total_rir / total_sets if total_sets else 0.0,
        target_rir=target if target is not None else 2,
        muscle_group_breakdown=breakdown,
        personal_records=tuple(personal_records or ()),
    )


def detect_personal_records(
    current: WorkoutLog,
    history: list[WorkoutLog],
    now: datetime | None = None,
) -> list[PersonalRecord]:
    """
    New weight and single-set volume bests in *current* versus *history*.

    An exercise with no history sets no record: a first attempt is a
    baseline, not a PR.

    Args:
        current: The workout just logged
        history: Earlier logs (the current log is ignored if present)
        now: Timestamp for the records (default: current.completed_at or now)

    Returns:
        List of PersonalRecord
    """
    achieved_at = now or current.completed_at or datetime.now()
    records: list[PersonalRecord] = []

    for ex_log in current.exercises:
        if ex_log.skipped:
            continue

        best_weight = 0.0
        best_volume = 0.0
        for log in history:
            if log.id == current.id:
                continue
            for past in log.exercises:
                if past.exercise_id != ex_log.exercise_id:
                    continue
                for s in completed_sets(past):
                    best_weight = max(best_weight, s.weight)
                    best_volume = max(best_volume, s.volume)

        for s in completed_sets(ex_log):
            if best_weight > 0 and s.weight > best_weight:
                records.append(
                    PersonalRecord(
                        id=f"{current.id}-{ex_log.exercise_id}-weight-{s.set_number}",
                        exercise_id=ex_log.exercise_id,
                        exercise_name=ex_log.exercise_name,
                        type="weight",
                        previous_value=best_weight,
                        new_value=s.weight,
                        achieved_at=achieved_at,
                        workout_log_id=current.id,
                    )
                )
                best_weight = s.weight
            if best_volume > 0 and s.volume > best_volume:
                records.append(
                    PersonalRecord(
                        id=f"{current.id}-{ex_log.exercise_id}-volume-{s.set_number}",
                        exercise_id=ex_log.exercise_id,
                        exercise_name=ex_log.exercise_name,
                        type="volume",
                        previous_value=best_volume,
                        new_value=s.volume,
                        achieved_at=achieved_at,
                        workout_log_id=current.id,
                    )
                )
                best_volume = s.volume

    return records
