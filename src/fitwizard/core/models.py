"""
Data models for fitwizard.

Value objects for wizard input, generated plans, workout logs and the
advisory results derived from them.  All models are frozen; sequence
fields are stored as tuples so a Plan can be shared freely once built.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .exercises.base import Exercise

Goal = Literal["strength", "hypertrophy", "general"]
ExperienceLevel = Literal["beginner", "intermediate", "advanced"]
SplitType = Literal["full_body", "upper_lower", "push_pull_legs"]
OptPhase = Literal[
    "stabilization_endurance",
    "strength_endurance",
    "muscular_development",
    "maximal_strength",
    "power",
]
WeightUnit = Literal["lbs", "kg"]
WarningType = Literal["warning", "info"]
ProgressionAction = Literal["increase", "maintain", "decrease", "swap"]
ProgressionConfidence = Literal["high", "medium", "low"]
RecordType = Literal["weight", "reps", "volume"]


def _freeze(obj: object, *names: str) -> None:
    """Convert list-valued fields of a frozen dataclass to tuples in place."""
    for name in names:
        object.__setattr__(obj, name, tuple(getattr(obj, name)))


@dataclass(frozen=True)
class WizardSelections:
    """
    User intent captured by the plan wizard.

    Ranges are not enforced here; validate_wizard_inputs() reports every
    problem at once so callers can show them together.
    """

    goal: str
    experience_level: str
    equipment: tuple[str, ...]
    target_muscles: tuple[str, ...]
    constraints: tuple[str, ...] = ()
    days_per_week: int = 3
    session_duration: int = 60  # minutes
    opt_phase: str | None = None  # explicit phase override

    # Personalization, never used by generation
    first_name: str | None = None
    last_name: str | None = None
    personal_goal_note: str | None = None
    is_trainer: bool = False
    coach_notes: str | None = None

    def __post_init__(self) -> None:
        _freeze(self, "equipment", "target_muscles", "constraints")

    @property
    def is_bodyweight_only(self) -> bool:
        """True when the user owns nothing but their own bodyweight."""
        return tuple(self.equipment) == ("bodyweight",)


@dataclass(frozen=True)
class ExercisePrescription:
    """An Exercise bound to sets, reps and effort targets for one day."""

    exercise: Exercise
    sets: int
    reps: str  # range string, e.g. "8-12"
    rir: int
    tempo: str | None = None
    rest_seconds: int | None = None
    superset_group: int | None = None
    notes: str | None = None
    rationale: str = ""

    def __post_init__(self) -> None:
        """Validate prescription data."""
        if self.sets < 1:
            raise ValueError("sets must be at least 1")
        if not 0 <= self.rir <= 10:
            raise ValueError("rir must be between 0 and 10")
        if self.rest_seconds is not None and self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")


@dataclass(frozen=True)
class WorkoutDay:
    """One training day of the weekly template."""

    day_index: int
    name: str
    focus_tags: tuple[str, ...]
    exercises: tuple[ExercisePrescription, ...]
    estimated_duration: int  # minutes
    warm_up: tuple[str, ...] = ()
    cool_down: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "focus_tags", "exercises", "warm_up", "cool_down")

    @property
    def total_sets(self) -> int:
        return sum(p.sets for p in self.exercises)


@dataclass(frozen=True)
class WeeklyVolume:
    """Weekly set total for one muscle group against its landmarks."""

    muscle_group: str
    sets: int
    is_within_cap: bool
    mev: int = 0
    mrv: int = 0


@dataclass(frozen=True)
class RIRProgression:
    """Target effort for one week of the mesocycle."""

    week: int
    target_rir: int
    is_deload: bool = False


@dataclass(frozen=True)
class Plan:
    """
    A generated weekly plan.

    Invariant: len(workout_days) == selections.days_per_week.
    """

    id: str
    created_at: datetime
    selections: WizardSelections
    split_type: str
    opt_phase: str
    workout_days: tuple[WorkoutDay, ...]
    weekly_volume: tuple[WeeklyVolume, ...]
    rir_progression: tuple[RIRProgression, ...]
    notes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "workout_days", "weekly_volume", "rir_progression", "notes")

    @property
    def days_per_week(self) -> int:
        return self.selections.days_per_week

    def all_prescriptions(self) -> list[ExercisePrescription]:
        """Return every prescription in day order."""
        return [p for day in self.workout_days for p in day.exercises]

    def find_exercise(self, exercise_id: str) -> Exercise | None:
        """Return the plan's Exercise with this id, or None."""
        for p in self.all_prescriptions():
            if p.exercise.id == exercise_id:
                return p.exercise
        return None

    def target_rir_for_week(self, week: int) -> int | None:
        for entry in self.rir_progression:
            if entry.week == week:
                return entry.target_rir
        return None


# =============================================================================
# Workout logs
# =============================================================================


@dataclass(frozen=True)
class SetLog:
    """One performed (or abandoned) set."""

    set_number: int
    weight: float
    reps: int
    rir: int
    weight_unit: str = "lbs"
    completed: bool = True
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if not 0 <= self.rir <= 10:
            raise ValueError("rir must be between 0 and 10")
        if self.weight_unit not in ("lbs", "kg"):
            raise ValueError(f"weight_unit must be 'lbs' or 'kg', got {self.weight_unit!r}")

    @property
    def volume(self) -> float:
        return self.weight * self.reps


@dataclass(frozen=True)
class ExerciseLog:
    """All sets logged for one exercise within a workout."""

    exercise_id: str
    exercise_name: str
    sets: tuple[SetLog, ...] = ()
    perceived_effort: int | None = None
    skipped: bool = False
    skip_reason: str | None = None

    def __post_init__(self) -> None:
        _freeze(self, "sets")

    @property
    def completed_sets(self) -> list[SetLog]:
        return [s for s in self.sets if s.completed]


@dataclass(frozen=True)
class WorkoutLog:
    """A logged training session against a plan day."""

    id: str
    plan_id: str
    day_index: int
    day_name: str
    started_at: datetime
    completed_at: datetime | None = None
    duration: int = 0  # minutes
    exercises: tuple[ExerciseLog, ...] = ()
    perceived_difficulty: int | None = None
    notes: str | None = None
    total_volume: float = 0.0

    def __post_init__(self) -> None:
        _freeze(self, "exercises")
        if self.duration < 0:
            raise ValueError("duration must be non-negative")


# =============================================================================
# Advisory results
# =============================================================================


@dataclass(frozen=True)
class WizardValidation:
    """Outcome of validate_wizard_inputs()."""

    valid: bool
    errors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "errors")


@dataclass(frozen=True)
class ValidationWarning:
    """Non-blocking advice about a set of wizard selections."""

    id: str
    type: str  # "warning" | "info"
    message: str
    context: str = ""


@dataclass(frozen=True)
class MRVWarning:
    """A muscle whose logged weekly sets exceeded its recoverable volume."""

    muscle_group: str
    mrv: int
    actual_sets: int
    week_start: datetime | None = None


@dataclass(frozen=True)
class SplitSuggestion:
    """Recommendation to move to a split that fits the days actually trained."""

    recommended_split: str
    planned_days_per_week: int
    actual_days_per_week: float
    current_split: str
    weekly_days: tuple[int, ...] = ()  # distinct days per week, most recent first
    message: str = ""

    def __post_init__(self) -> None:
        _freeze(self, "weekly_days")


@dataclass(frozen=True)
class ProgressionRecommendation:
    """Load advice for one exercise, derived from logged RIR."""

    exercise_id: str
    exercise_name: str
    action: str  # ProgressionAction
    current_load: float
    recommended_load: float
    change_percentage: float
    rationale: str
    confidence: str  # ProgressionConfidence


@dataclass(frozen=True)
class PersonalRecord:
    """A new best set for an exercise."""

    id: str
    exercise_id: str
    exercise_name: str
    type: str  # RecordType
    previous_value: float
    new_value: float
    achieved_at: datetime
    workout_log_id: str


@dataclass(frozen=True)
class MuscleBreakdown:
    muscle_group: str
    sets: int
    avg_load: float


@dataclass(frozen=True)
class WeeklySummary:
    """Aggregate of one week of logs against the plan."""

    week_number: int
    start_date: datetime
    end_date: datetime
    workouts_completed: int
    workouts_planned: int
    completion_rate: float  # percent
    total_volume: float
    avg_rir: float
    target_rir: int
    muscle_group_breakdown: tuple[MuscleBreakdown, ...] = ()
    personal_records: tuple[PersonalRecord, ...] = field(default=())

    def __post_init__(self) -> None:
        _freeze(self, "muscle_group_breakdown", "personal_records")
