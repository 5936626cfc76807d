"""
Configuration constants for the plan generator and analyzer.

All adjustable parameters are centralized here for easy tuning.
Volume landmarks and the experience scale can also be overridden from
model.yaml (bundled) or ~/.fitwizard/model.yaml; the values below are
the defaults used when no YAML is available.
"""

from typing import Final

# =============================================================================
# VOCABULARY
# =============================================================================

GOALS: Final[tuple[str, ...]] = ("strength", "hypertrophy", "general")

EXPERIENCE_LEVELS: Final[tuple[str, ...]] = ("beginner", "intermediate", "advanced")

SPLIT_TYPES: Final[tuple[str, ...]] = ("full_body", "upper_lower", "push_pull_legs")

# Canonical muscle order. Day muscles, weekly volume and warnings follow it.
MUSCLE_GROUPS: Final[tuple[str, ...]] = (
    "chest",
    "front_deltoid",
    "side_deltoid",
    "rear_deltoid",
    "biceps",
    "triceps",
    "forearms",
    "abs",
    "obliques",
    "quads",
    "hip_flexors",
    "adductors",
    "upper_back",
    "lats",
    "lower_back",
    "glutes",
    "hamstrings",
    "calves",
    "traps",
    "neck",
)

COMPOUND_PATTERNS: Final[frozenset[str]] = frozenset(
    {"squat", "hinge", "horizontal_push", "horizontal_pull", "vertical_push", "vertical_pull"}
)

# =============================================================================
# VOLUME LANDMARKS (weekly hard sets, intermediate lifter)
# =============================================================================

DEFAULT_VOLUME_LANDMARKS: Final[dict[str, tuple[int, int]]] = {
    # muscle: (MEV, MRV)
    "chest": (8, 22),
    "front_deltoid": (0, 12),
    "side_deltoid": (8, 26),
    "rear_deltoid": (8, 26),
    "biceps": (8, 20),
    "triceps": (6, 18),
    "forearms": (2, 20),
    "abs": (0, 25),
    "obliques": (0, 16),
    "quads": (8, 20),
    "hip_flexors": (0, 10),
    "adductors": (0, 12),
    "upper_back": (10, 25),
    "lats": (10, 22),
    "lower_back": (0, 10),
    "glutes": (0, 16),
    "hamstrings": (6, 20),
    "calves": (8, 20),
    "traps": (0, 26),
    "neck": (0, 8),
}

# Landmarks are scaled by experience and floored to whole sets.
EXPERIENCE_VOLUME_SCALE: Final[dict[str, float]] = {
    "beginner": 0.6,
    "intermediate": 1.0,
    "advanced": 1.15,
}

# Used when a muscle is missing from the landmark table.
FALLBACK_LANDMARK: Final[tuple[int, int]] = (0, 10)

# =============================================================================
# PRESCRIPTION
# =============================================================================

REP_RANGES: Final[dict[str, str]] = {
    "strength": "3-6",
    "hypertrophy": "8-12",
    "general": "8-15",
}

# Target RIR at the end of the accumulation block, per OPT phase.
PHASE_RIR: Final[dict[str, int]] = {
    "stabilization_endurance": 3,
    "strength_endurance": 2,
    "muscular_development": 2,
    "maximal_strength": 1,
    "power": 1,
}

SUPERSET_PHASES: Final[frozenset[str]] = frozenset({"strength_endurance", "power"})

# Second leg of a superset / contrast pair
STABILIZATION_PAIR_TEMPO: Final[str] = "4-2-1"
CONTRAST_PAIR_TEMPO: Final[str] = "X-X-X"
PAIR_RIR: Final[int] = 0

# =============================================================================
# SESSION BUDGET
# =============================================================================

MINUTES_PER_SET: Final[int] = 3  # Work + rest, averaged
MAX_EXERCISES_PER_DAY: Final[int] = 8
MIN_SETS_PER_EXERCISE: Final[int] = 2  # Smaller remainders are dropped once a muscle has work
MIN_SESSION_MINUTES: Final[int] = 30
MIN_DAYS_PER_WEEK: Final[int] = 2
MAX_DAYS_PER_WEEK: Final[int] = 6

# =============================================================================
# EXERCISE RANKING
# =============================================================================

SCORE_PRIMARY_MATCH: Final[int] = 10
SCORE_SECONDARY_MATCH: Final[int] = 3
SCORE_COMPOUND_BONUS: Final[int] = 5
SCORE_DIFFICULTY_EXACT: Final[int] = 3
SCORE_DIFFICULTY_NEAR: Final[int] = 1
SCORE_UNSTABLE_BONUS: Final[int] = 4  # stabilization_endurance only

DIFFICULTY_LEVELS: Final[dict[str, int]] = {
    "Beginner": 1,
    "Intermediate": 2,
    "Advanced": 3,
    "Elite": 3,
    "All Levels": 2,
}

EXPERIENCE_DIFFICULTY: Final[dict[str, int]] = {
    "beginner": 1,
    "intermediate": 2,
    "advanced": 3,
}

# Phases that never prescribe unstable-surface work
STABLE_ONLY_PHASES: Final[frozenset[str]] = frozenset({"maximal_strength", "power"})

# =============================================================================
# MESOCYCLE
# =============================================================================

DEFAULT_MESOCYCLE_WEEKS: Final[int] = 4  # Accumulation weeks + 1 deload
MAX_RIR: Final[int] = 10

# =============================================================================
# ADHERENCE ANALYSIS
# =============================================================================

DAYS_PER_BUCKET: Final[int] = 7
ADHERENCE_CONSISTENCY_RATIO: Final[float] = 0.75  # Share of weeks below plan
ADHERENCE_MIN_GAP_DAYS: Final[float] = 1.0  # Planned minus average actual

# =============================================================================
# LOAD PROGRESSION
# =============================================================================

RIR_TOLERANCE: Final[float] = 0.5
RIR_SPREAD_LOW: Final[float] = 0.5
RIR_SPREAD_STEADY: Final[float] = 1.0
RIR_SPREAD_HIGH: Final[float] = 1.5
NEAR_FAILURE_RIR: Final[float] = 1.0
INCREASE_STANDARD: Final[float] = 0.05
INCREASE_STAGNANT: Final[float] = 0.10
INCREASE_ON_TARGET: Final[float] = 0.025
DECREASE_NEAR_FAILURE: Final[float] = 0.05
STAGNATION_SESSIONS: Final[int] = 3
STAGNATION_TOLERANCE: Final[float] = 0.025  # Relative load spread

WEIGHT_INCREMENTS: Final[dict[str, float]] = {"lbs": 2.5, "kg": 1.0}
LBS_TO_KG: Final[float] = 0.453592
KG_TO_LBS: Final[float] = 2.20462
