"""
Plan generator.

Turns WizardSelections into a weekly Plan:

1. choose a split from days per week,
2. resolve the OPT phase and its training variables,
3. fill each day with ranked, eligible exercises until the session set
   budget or the per-muscle day target is reached,
4. keep every muscle's weekly sets at or below its (experience-scaled) MRV,
5. attach a mesocycle RIR progression ending in a deload week.

Generation is deterministic: identical selections produce an identical
plan id and identical exercise choices.
"""

import hashlib
import json
import math
from dataclasses import dataclass, field
from datetime import datetime

from .config import (
    COMPOUND_PATTERNS,
    CONTRAST_PAIR_TEMPO,
    DEFAULT_MESOCYCLE_WEEKS,
    MAX_DAYS_PER_WEEK,
    MAX_EXERCISES_PER_DAY,
    MAX_RIR,
    MIN_DAYS_PER_WEEK,
    MIN_SESSION_MINUTES,
    MIN_SETS_PER_EXERCISE,
    MINUTES_PER_SET,
    MUSCLE_GROUPS,
    PAIR_RIR,
    REP_RANGES,
    STABILIZATION_PAIR_TEMPO,
)
from .exercises.base import Exercise
from .exercises.registry import ExerciseCatalog, get_default_catalog
from .landmarks import VolumeLandmarkTable, get_default_landmarks
from .models import (
    ExercisePrescription,
    Plan,
    RIRProgression,
    WeeklyVolume,
    WizardSelections,
    WizardValidation,
    WorkoutDay,
)
from .phases import PHASE_CONFIGS, PhaseConfig, determine_opt_phase, get_phase_config, get_phase_name
from .selection import filter_eligible, score_exercise
from .warmups import cool_down_for_day, warm_up_for_day

# =============================================================================
# Split and day structure
# =============================================================================

UPPER_MUSCLES = (
    "chest", "front_deltoid", "side_deltoid", "rear_deltoid",
    "upper_back", "lats", "biceps", "triceps", "traps",
)
LOWER_MUSCLES = ("quads", "hamstrings", "glutes", "calves", "hip_flexors", "adductors")
PUSH_MUSCLES = ("chest", "front_deltoid", "side_deltoid", "triceps")
PULL_MUSCLES = ("upper_back", "lats", "rear_deltoid", "biceps", "traps", "forearms")
CORE_MUSCLES = ("abs", "obliques", "lower_back")

_TAG_MUSCLES: dict[str, tuple[str, ...]] = {
    "upper": UPPER_MUSCLES,
    "lower": LOWER_MUSCLES,
    "push": PUSH_MUSCLES,
    "pull": PULL_MUSCLES,
}

UPPER_TAGS = ("upper", "push", "pull")
LOWER_TAGS = ("lower", "quads", "hinge")
PUSH_TAGS = ("push", "chest", "shoulders", "triceps")
PULL_TAGS = ("pull", "back", "biceps")
LEGS_TAGS = ("lower", "quads", "hinge", "calves")


def select_split(days_per_week: int) -> str:
    """≤3 days → full_body, 4 → upper_lower, ≥5 → push_pull_legs."""
    if days_per_week <= 3:
        return "full_body"
    if days_per_week == 4:
        return "upper_lower"
    return "push_pull_legs"


def get_day_structure(split_type: str, days_per_week: int) -> list[tuple[str, tuple[str, ...]]]:
    """
    Return (day name, focus tags) for each training day.

    Args:
        split_type: full_body, upper_lower or push_pull_legs
        days_per_week: Number of training days

    Returns:
        List of length days_per_week
    """
    if split_type == "upper_lower":
        template = [
            ("Upper A", UPPER_TAGS),
            ("Lower A", LOWER_TAGS),
            ("Upper B", UPPER_TAGS),
            ("Lower B", LOWER_TAGS),
        ]
        return [template[i % len(template)] for i in range(days_per_week)]

    if split_type == "push_pull_legs":
        rotation = [("Push", PUSH_TAGS), ("Pull", PULL_TAGS), ("Legs", LEGS_TAGS)]
        days = []
        for i in range(days_per_week):
            name, tags = rotation[i % 3]
            cycle = i // 3 + 1
            days.append((name if cycle == 1 else f"{name} {cycle}", tags))
        return days

    letters = "ABCDEFG"
    return [(f"Full Body {letters[i % len(letters)]}", ("full_body",)) for i in range(days_per_week)]


def canonical_muscle_order(muscles) -> list[str]:
    """De-duplicate and sort muscles in canonical order (unknown ones last, by name)."""
    index = {m: i for i, m in enumerate(MUSCLE_GROUPS)}
    unique = set(muscles)
    return sorted(unique, key=lambda m: (index.get(m, len(index)), m))


def muscles_for_day(
    focus_tags: tuple[str, ...],
    target_muscles: tuple[str, ...],
    split_type: str,
) -> list[str]:
    """
    Target muscles trained on a day with these focus tags.

    Full body days train every target.  Split days train the upper, lower,
    push and pull groups implied by their tags plus the trunk.  A day whose
    tags match no target falls back to all targets so it is never empty.
    """
    targets = canonical_muscle_order(target_muscles)
    if split_type == "full_body" or "full_body" in focus_tags:
        return targets

    relevant: set[str] = set()
    for tag in focus_tags:
        relevant.update(_TAG_MUSCLES.get(tag, ()))
    if relevant:
        relevant.update(CORE_MUSCLES)

    day = [m for m in targets if m in relevant]
    return day or targets


# =============================================================================
# Identity and progression
# =============================================================================


def canonical_selections(selections: WizardSelections) -> dict:
    """Order-independent dict of the selections used to derive the plan id."""
    return {
        "goal": selections.goal,
        "experience_level": selections.experience_level,
        "equipment": sorted(set(selections.equipment)),
        "target_muscles": sorted(set(selections.target_muscles)),
        "constraints": sorted(set(selections.constraints)),
        "days_per_week": selections.days_per_week,
        "session_duration": selections.session_duration,
        "opt_phase": selections.opt_phase,
        "first_name": selections.first_name,
        "last_name": selections.last_name,
        "personal_goal_note": selections.personal_goal_note,
        "is_trainer": selections.is_trainer,
        "coach_notes": selections.coach_notes,
    }


def plan_id_for(selections: WizardSelections, timestamp: datetime | None = None) -> str:
    """
    Content-derived plan id: ``plan_<sha256>`` with an optional
    ``_<YYYYMMDDHHMM>`` suffix.
    """
    payload = json.dumps(canonical_selections(selections), sort_keys=True, separators=(",", ":"))
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    plan_id = f"plan_{digest}"
    if timestamp is not None:
        plan_id += "_" + timestamp.strftime("%Y%m%d%H%M")
    return plan_id


def build_rir_progression(target_rir: int, weeks: int = DEFAULT_MESOCYCLE_WEEKS) -> list[RIRProgression]:
    """
    Accumulation weeks with RIR falling by one each week down to
    *target_rir*, then a deload week one RIR above the starting week.

    Example (target 1, 4 weeks): 3, 2, 1, deload 4.

    Raises:
        ValueError: If weeks < 2 (a mesocycle needs at least one
            accumulation week and the deload)
    """
    if weeks < 2:
        raise ValueError(f"mesocycle must span at least 2 weeks, got {weeks}")
    accumulation = weeks - 1
    start = target_rir + accumulation - 1
    progression = [
        RIRProgression(week=w, target_rir=min(MAX_RIR, start - (w - 1)), is_deload=False)
        for w in range(1, accumulation + 1)
    ]
    progression.append(RIRProgression(week=weeks, target_rir=min(MAX_RIR, start + 1), is_deload=True))
    return progression


# =============================================================================
# Input validation
# =============================================================================


def validate_wizard_inputs(selections: WizardSelections) -> WizardValidation:
    """
    Check selections before generation; every failing rule is reported.

    Args:
        selections: Untrusted wizard input

    Returns:
        WizardValidation with valid == (no errors)
    """
    errors: list[str] = []

    if not selections.goal or not str(selections.goal).strip():
        errors.append("Please select a training goal")

    if not selections.equipment:
        errors.append("Please select at least one equipment option")

    if not selections.target_muscles:
        errors.append("Please select at least one muscle group to target")

    if not MIN_DAYS_PER_WEEK <= selections.days_per_week <= MAX_DAYS_PER_WEEK:
        errors.append(
            f"Please select between {MIN_DAYS_PER_WEEK} and {MAX_DAYS_PER_WEEK} training days per week"
        )

    if selections.session_duration < MIN_SESSION_MINUTES:
        errors.append(f"Sessions should be at least {MIN_SESSION_MINUTES} minutes")

    return WizardValidation(valid=not errors, errors=tuple(errors))


# =============================================================================
# Generation internals
# =============================================================================


class _VolumeLedger:
    """Weekly sets per muscle, credited to each exercise's primary muscles."""

    def __init__(self, landmarks: VolumeLandmarkTable, experience_level: str):
        self.landmarks = landmarks
        self.experience_level = experience_level
        self.sets: dict[str, int] = {}

    def mrv(self, muscle: str) -> int:
        return self.landmarks.mrv(muscle, self.experience_level)

    def room(self, exercise: Exercise) -> int:
        """Sets this exercise can still take without pushing any primary muscle past MRV."""
        return min(self.mrv(m) - self.sets.get(m, 0) for m in exercise.primary_muscles)

    def credit(self, exercise: Exercise, sets: int) -> None:
        for m in exercise.primary_muscles:
            self.sets[m] = self.sets.get(m, 0) + sets


@dataclass
class _DayBuilder:
    """Mutable state while one workout day is assembled."""

    set_budget: int
    prescriptions: list[ExercisePrescription] = field(default_factory=list)
    used_today: set[str] = field(default_factory=set)
    credit: dict[str, int] = field(default_factory=dict)
    sets_used: int = 0
    superset_groups: int = 0

    def has_room(self, exercises_needed: int = 1) -> bool:
        return (
            len(self.prescriptions) + exercises_needed <= MAX_EXERCISES_PER_DAY
            and self.sets_used < self.set_budget
        )

    @property
    def sets_left(self) -> int:
        return self.set_budget - self.sets_used

    def add(self, prescription: ExercisePrescription) -> None:
        self.prescriptions.append(prescription)
        self.used_today.add(prescription.exercise.id)
        self.sets_used += prescription.sets
        for m in prescription.exercise.primary_muscles:
            self.credit[m] = self.credit.get(m, 0) + prescription.sets


def _humanize(tag: str) -> str:
    return tag.replace("_", " ")


def _rationale(exercise: Exercise, muscle: str, phase: str) -> str:
    if exercise.is_compound:
        pattern = next(p for p in exercise.patterns if p in COMPOUND_PATTERNS)
        return (
            f"Compound {_humanize(pattern)} movement for {_humanize(muscle)}, "
            f"chosen for {get_phase_name(phase)}."
        )
    return f"Isolation assistance for {_humanize(muscle)} in {get_phase_name(phase)}."


class _Generator:
    """Holds the per-plan context shared by all days."""

    def __init__(
        self,
        selections: WizardSelections,
        phase: str,
        catalog: ExerciseCatalog,
        landmarks: VolumeLandmarkTable,
    ):
        self.selections = selections
        self.phase = phase
        self.phase_cfg: PhaseConfig = get_phase_config(phase)
        self.catalog = catalog
        self.landmarks = landmarks
        self.reps = REP_RANGES.get(selections.goal, self.phase_cfg.reps)
        self.eligible = filter_eligible(catalog, selections.equipment, selections.constraints, phase)
        self.ledger = _VolumeLedger(landmarks, selections.experience_level)
        self.used_in_plan: set[str] = set()
        self.targets = canonical_muscle_order(selections.target_muscles)

    # -- ranking ------------------------------------------------------------

    def _ranked(self, candidates: list[Exercise], muscles: list[str]) -> list[Exercise]:
        """Unused-in-plan first, then by score, then catalog order."""
        level = self.selections.experience_level
        return sorted(
            candidates,
            key=lambda ex: (
                ex.id in self.used_in_plan,
                -score_exercise(ex, muscles, level, self.phase),
                self.catalog.position(ex.id) if ex.id in self.catalog else len(self.catalog),
            ),
        )

    def _pick(self, day: _DayBuilder, muscle: str, day_muscles: list[str]) -> Exercise | None:
        pool = [
            ex
            for ex in self.eligible
            if muscle in ex.primary_muscles
            and ex.id not in day.used_today
            and self.ledger.room(ex) > 0
        ]
        ranked = self._ranked(pool, day_muscles)
        return ranked[0] if ranked else None

    def _find_pair(self, day: _DayBuilder, primary: Exercise) -> Exercise | None:
        """Second leg of a superset (unstable) or contrast set (plyometric, then power)."""
        if self.phase == "strength_endurance":
            wanted = [lambda ex: ex.stability_level == "unstable"]
        elif self.phase == "power":
            wanted = [
                lambda ex: ex.exercise_type == "plyometric",
                lambda ex: ex.exercise_type == "power",
            ]
        else:
            return None

        for predicate in wanted:
            pool = [
                ex
                for ex in self.eligible
                if ex.id != primary.id
                and ex.id not in day.used_today
                and set(ex.primary_muscles) & set(primary.primary_muscles)
                and predicate(ex)
                and self.ledger.room(ex) > 0
            ]
            ranked = self._ranked(pool, list(primary.primary_muscles))
            if ranked:
                return ranked[0]
        return None

    # -- prescription -------------------------------------------------------

    def _prescribe(self, day: _DayBuilder, exercise: Exercise, sets: int, muscle: str, rationale: str | None = None) -> None:
        """Add *exercise* (and its superset partner, if the phase calls for one)."""
        cfg = self.phase_cfg
        self.ledger.credit(exercise, sets)
        self.used_in_plan.add(exercise.id)
        rationale = rationale or _rationale(exercise, muscle, self.phase)

        pair: Exercise | None = None
        pair_sets = 0
        if cfg.is_superset and day.has_room(exercises_needed=2) and day.sets_left > sets:
            pair = self._find_pair(day, exercise)
            if pair is not None:
                pair_sets = min(sets, day.sets_left - sets, self.ledger.room(pair))
                if pair_sets < 1:
                    pair = None

        if pair is None:
            day.add(
                ExercisePrescription(
                    exercise=exercise,
                    sets=sets,
                    reps=self.reps,
                    rir=cfg.rir,
                    tempo=cfg.tempo,
                    rest_seconds=cfg.rest,
                    rationale=rationale,
                )
            )
            return

        day.superset_groups += 1
        group = day.superset_groups
        if self.phase == "strength_endurance":
            lead_note = "Perform the strength movement first"
            pair_tempo = STABILIZATION_PAIR_TEMPO
            pair_rationale = (
                f"Superset: biomechanically similar stabilization exercise for {_humanize(muscle)}."
            )
        else:
            lead_note = "Heavy resistance exercise"
            pair_tempo = CONTRAST_PAIR_TEMPO
            pair_rationale = (
                f"Contrast set: explosive movement for {_humanize(muscle)} to recruit fast-twitch fibers."
            )

        day.add(
            ExercisePrescription(
                exercise=exercise,
                sets=sets,
                reps=self.reps,
                rir=cfg.rir,
                tempo=cfg.tempo,
                rest_seconds=0,
                superset_group=group,
                notes=lead_note,
                rationale=rationale,
            )
        )
        self.ledger.credit(pair, pair_sets)
        self.used_in_plan.add(pair.id)
        day.add(
            ExercisePrescription(
                exercise=pair,
                sets=pair_sets,
                reps=self.reps,
                rir=PAIR_RIR,
                tempo=pair_tempo,
                rest_seconds=cfg.rest,
                superset_group=group,
                notes="Perform immediately after the previous exercise",
                rationale=pair_rationale,
            )
        )

    # -- day assembly -------------------------------------------------------

    def _fill_muscles(self, day: _DayBuilder, muscles: list[str], day_targets: dict[str, int]) -> None:
        """
        Add work for each muscle until it reaches its per-day share of the weekly target.

        session_duration is only a ceiling: once every muscle has its share the
        day stops, and spare minutes are not topped up with extra sets.
        """
        for muscle in muscles:
            goal_sets = day_targets.get(muscle, 0)
            while day.has_room() and day.credit.get(muscle, 0) < goal_sets:
                remaining = goal_sets - day.credit.get(muscle, 0)
                if remaining < MIN_SETS_PER_EXERCISE and day.credit.get(muscle, 0) > 0:
                    break
                exercise = self._pick(day, muscle, muscles)
                if exercise is None:
                    break
                sets = min(self.phase_cfg.sets, remaining, day.sets_left, self.ledger.room(exercise))
                self._prescribe(day, exercise, sets, muscle)

    def _fallback(self, day: _DayBuilder, day_targets: dict[str, int]) -> None:
        """Make sure a day gets at least one exercise when anything is eligible."""
        # 1. any target muscle as a primary mover
        self._fill_muscles(day, self.targets, {m: self.phase_cfg.sets for m in self.targets})
        if day.prescriptions:
            return

        # 2. exercises that reach a target as a secondary mover
        targets = set(self.targets)
        pool = [
            ex
            for ex in self.eligible
            if targets & set(ex.secondary_muscles) and self.ledger.room(ex) > 0
        ]
        ranked = self._ranked(pool, self.targets)
        if ranked:
            ex = ranked[0]
            sets = min(self.phase_cfg.sets, day.sets_left, self.ledger.room(ex))
            muscle = next(m for m in self.targets if m in ex.secondary_muscles)
            self._prescribe(
                day, ex, sets, muscle,
                rationale=f"Fallback selection: trains {_humanize(muscle)} as a secondary mover.",
            )
            return

        # 3. caps exhausted everywhere: one set of the best eligible exercise
        ranked = self._ranked(list(self.eligible), self.targets)
        if ranked:
            ex = ranked[0]
            self.ledger.credit(ex, 1)
            self.used_in_plan.add(ex.id)
            day.add(
                ExercisePrescription(
                    exercise=ex,
                    sets=1,
                    reps=self.reps,
                    rir=self.phase_cfg.rir,
                    tempo=self.phase_cfg.tempo,
                    rest_seconds=self.phase_cfg.rest,
                    rationale="Fallback selection: weekly volume caps reached, single maintenance set.",
                )
            )

    def build_day(
        self,
        day_index: int,
        name: str,
        focus_tags: tuple[str, ...],
        day_muscles: list[str],
        day_targets: dict[str, int],
    ) -> WorkoutDay:
        set_budget = max(1, self.selections.session_duration // MINUTES_PER_SET)
        day = _DayBuilder(set_budget=set_budget)

        self._fill_muscles(day, day_muscles, day_targets)
        if not day.prescriptions:
            self._fallback(day, day_targets)

        constraints = self.selections.constraints
        return WorkoutDay(
            day_index=day_index,
            name=name,
            focus_tags=focus_tags,
            exercises=tuple(day.prescriptions),
            estimated_duration=day.sets_used * MINUTES_PER_SET,
            warm_up=tuple(warm_up_for_day(focus_tags, day_muscles, constraints)),
            cool_down=tuple(cool_down_for_day(focus_tags, day_muscles, constraints)),
        )

    def weekly_volume(self) -> list[WeeklyVolume]:
        """Target muscles first, then any other muscle that received sets."""
        level = self.selections.experience_level
        muscles = list(self.targets)
        muscles += [m for m in canonical_muscle_order(self.ledger.sets) if m not in self.targets]
        volume = []
        for m in muscles:
            sets = self.ledger.sets.get(m, 0)
            mrv = self.landmarks.mrv(m, level)
            volume.append(
                WeeklyVolume(
                    muscle_group=m,
                    sets=sets,
                    is_within_cap=sets <= mrv,
                    mev=self.landmarks.mev(m, level),
                    mrv=mrv,
                )
            )
        return volume


def _plan_notes(selections: WizardSelections, split_type: str, phase: str) -> list[str]:
    notes = [
        f"Split: {_humanize(split_type).upper()}",
        f"Goal: {selections.goal.capitalize()}",
        f"Phase: {get_phase_name(phase)}",
        f"Experience: {selections.experience_level.capitalize()}",
        f"Days per week: {selections.days_per_week}",
        f"Session length: {selections.session_duration} min",
    ]
    if selections.constraints:
        notes.append(f"Constraints applied: {', '.join(selections.constraints)}")
    return notes


# =============================================================================
# Public API
# =============================================================================


def resolve_phase(selections: WizardSelections) -> str:
    """Explicit phase override if it names a known phase, else the OPT mapping."""
    if selections.opt_phase and selections.opt_phase in PHASE_CONFIGS:
        return selections.opt_phase
    return determine_opt_phase(selections.goal, selections.experience_level)


def generate_plan(
    selections: WizardSelections,
    append_timestamp: bool = False,
    *,
    catalog: ExerciseCatalog | None = None,
    landmarks: VolumeLandmarkTable | None = None,
    mesocycle_weeks: int | None = None,
    now: datetime | None = None,
) -> Plan:
    """
    Generate a weekly plan from wizard selections.

    Callers accepting untrusted input should run validate_wizard_inputs()
    first; generation itself does not raise for valid selections.

    Args:
        selections: Wizard input
        append_timestamp: Add a ``_YYYYMMDDHHMM`` suffix to the plan id
        catalog: Exercise catalog (default: bundled YAML catalog)
        landmarks: Volume landmark table (default: model.yaml)
        mesocycle_weeks: Length of the RIR progression including the deload
        now: Creation time (default: datetime.now())

    Returns:
        Plan with one WorkoutDay per training day
    """
    if catalog is None:
        catalog = get_default_catalog()
    if landmarks is None:
        landmarks = get_default_landmarks()
    if mesocycle_weeks is None:
        mesocycle_weeks = DEFAULT_MESOCYCLE_WEEKS
    created_at = now if now is not None else datetime.now()

    split_type = select_split(selections.days_per_week)
    phase = resolve_phase(selections)
    gen = _Generator(selections, phase, catalog, landmarks)

    structure = get_day_structure(split_type, selections.days_per_week)
    day_muscles = [muscles_for_day(tags, selections.target_muscles, split_type) for _, tags in structure]

    # Spread each muscle's weekly target evenly over the days that train it
    frequency: dict[str, int] = {}
    for muscles in day_muscles:
        for m in muscles:
            frequency[m] = frequency.get(m, 0) + 1
    per_day = {
        m: math.ceil(landmarks.weekly_target(m, selections.experience_level) / freq)
        for m, freq in frequency.items()
    }

    workout_days = [
        gen.build_day(i, name, tags, day_muscles[i], per_day)
        for i, (name, tags) in enumerate(structure)
    ]

    return Plan(
        id=plan_id_for(selections, created_at if append_timestamp else None),
        created_at=created_at,
        selections=selections,
        split_type=split_type,
        opt_phase=phase,
        workout_days=tuple(workout_days),
        weekly_volume=tuple(gen.weekly_volume()),
        rir_progression=tuple(build_rir_progression(gen.phase_cfg.rir, mesocycle_weeks)),
        notes=tuple(_plan_notes(selections, split_type, phase)),
    )
