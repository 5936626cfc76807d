"""
NASM OPT phase mapping.

Maps (goal, experience level) to an Optimum Performance Training phase and
holds the canonical training variables for each phase.  Both lookups are
total: unknown inputs fall back to Phase 1 (stabilization endurance), the
safest starting point.
"""

from dataclasses import dataclass

from .config import PHASE_RIR, SUPERSET_PHASES

DEFAULT_PHASE = "stabilization_endurance"


@dataclass(frozen=True)
class PhaseConfig:
    """Training variables for one OPT phase."""

    reps: str
    sets: int
    tempo: str
    rest: int  # seconds
    intensity: str
    rir: int
    focus: str = ""
    is_superset: bool = False


# experience -> goal -> phase
PHASE_MATRIX: dict[str, dict[str, str]] = {
    "beginner": {
        "strength": "stabilization_endurance",
        "hypertrophy": "stabilization_endurance",
        "general": "stabilization_endurance",
    },
    "intermediate": {
        "strength": "strength_endurance",
        "hypertrophy": "muscular_development",
        "general": "stabilization_endurance",
    },
    "advanced": {
        "strength": "maximal_strength",
        "hypertrophy": "muscular_development",
        "general": "power",
    },
}

PHASE_CONFIGS: dict[str, PhaseConfig] = {
    "stabilization_endurance": PhaseConfig(
        reps="12-20",
        sets=2,
        tempo="4-2-1",
        rest=90,
        intensity="50-70%",
        rir=PHASE_RIR["stabilization_endurance"],
        focus="unstable",
    ),
    "strength_endurance": PhaseConfig(
        reps="8-12",
        sets=3,
        tempo="2-0-2",
        rest=60,
        intensity="70-80%",
        rir=PHASE_RIR["strength_endurance"],
        is_superset="strength_endurance" in SUPERSET_PHASES,
    ),
    "muscular_development": PhaseConfig(
        reps="6-12",
        sets=3,
        tempo="2-0-2",
        rest=90,
        intensity="75-85%",
        rir=PHASE_RIR["muscular_development"],
    ),
    "maximal_strength": PhaseConfig(
        reps="1-5",
        sets=4,
        tempo="X-0-X",
        rest=180,
        intensity="85-100%",
        rir=PHASE_RIR["maximal_strength"],
    ),
    "power": PhaseConfig(
        reps="1-5",
        sets=3,
        tempo="X-0-X",
        rest=180,
        intensity="30-45% or 85-100%",
        rir=PHASE_RIR["power"],
        is_superset="power" in SUPERSET_PHASES,
    ),
}

PHASE_NAMES: dict[str, str] = {
    "stabilization_endurance": "Phase 1: Stabilization Endurance",
    "strength_endurance": "Phase 2: Strength Endurance",
    "muscular_development": "Phase 3: Muscular Development",
    "maximal_strength": "Phase 4: Maximal Strength",
    "power": "Phase 5: Power",
}


def determine_opt_phase(goal: str, experience_level: str) -> str:
    """
    Resolve the OPT phase for a goal and experience level.

    Beginners always start in stabilization endurance regardless of goal.

    Args:
        goal: "strength", "hypertrophy" or "general"
        experience_level: "beginner", "intermediate" or "advanced"

    Returns:
        OPT phase id
    """
    return PHASE_MATRIX.get(experience_level, PHASE_MATRIX["beginner"]).get(goal, DEFAULT_PHASE)


def get_phase_config(phase: str | None) -> PhaseConfig:
    """Return the training variables for *phase* (stabilization endurance if unknown)."""
    if phase is None:
        return PHASE_CONFIGS[DEFAULT_PHASE]
    return PHASE_CONFIGS.get(phase, PHASE_CONFIGS[DEFAULT_PHASE])


def get_phase_name(phase: str) -> str:
    return PHASE_NAMES.get(phase, phase.replace("_", " ").title())


def get_all_phases() -> list[str]:
    """All phases in progression order."""
    return list(PHASE_NAMES)


def is_beginner_safe_phase(phase: str) -> bool:
    """Only Phase 1 is recommended for lifters without a training base."""
    return phase == DEFAULT_PHASE
