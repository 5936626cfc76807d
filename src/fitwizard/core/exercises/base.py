"""
Base type for exercise catalog entries.

An Exercise describes what a movement trains, what it needs and who should
avoid it.  The planner never mutates catalog entries; prescriptions bind an
Exercise to sets, reps and effort targets.
"""

from dataclasses import dataclass, field
from typing import Literal

from ..config import COMPOUND_PATTERNS

Difficulty = Literal["Beginner", "Intermediate", "Advanced", "Elite", "All Levels"]
StabilityLevel = Literal["stable", "unstable"]
ExerciseType = Literal["strength", "plyometric", "power", "cardio"]


@dataclass(frozen=True)
class Exercise:
    """
    One catalog entry.

    ``equipment`` uses any-of semantics: the exercise can be performed if the
    user owns at least one of the listed items.  ``bodyweight`` is always
    available.
    """

    # Identity
    id: str                   # e.g. "barbell_bench_press"
    name: str                 # e.g. "Barbell Bench Press"

    # What it trains
    primary_muscles: tuple[str, ...]
    secondary_muscles: tuple[str, ...] = ()

    # What it needs
    equipment: tuple[str, ...] = ("bodyweight",)

    # Movement pattern tags (compound: squat, hinge, *_push, *_pull)
    patterns: tuple[str, ...] = ()

    # Constraint tags that exclude this exercise
    contraindications: tuple[str, ...] = ()

    difficulty: Difficulty = "All Levels"
    category: str = "strength"
    stability_level: StabilityLevel | None = None
    exercise_type: ExerciseType | None = None
    cues: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate structural invariants and normalise sequences to tuples."""
        if not self.id:
            raise ValueError("exercise id must be non-empty")
        for name in (
            "primary_muscles",
            "secondary_muscles",
            "equipment",
            "patterns",
            "contraindications",
            "cues",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if not self.primary_muscles:
            raise ValueError(f"exercise '{self.id}' must list at least one primary muscle")
        if not self.equipment:
            raise ValueError(f"exercise '{self.id}' must list at least one equipment tag")

    @property
    def is_compound(self) -> bool:
        """True if any movement pattern is a multi-joint pattern."""
        return any(p in COMPOUND_PATTERNS for p in self.patterns)

    @property
    def is_bodyweight_only(self) -> bool:
        return self.equipment == ("bodyweight",)
