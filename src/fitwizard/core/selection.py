"""
Exercise eligibility and ranking.

Eligibility is a hard filter (equipment, constraints, phase); ranking is a
score used to order eligible candidates.  The final tie-break is catalog
order, so equal scores always resolve the same way.
"""

from collections.abc import Iterable

from .config import (
    DIFFICULTY_LEVELS,
    EXPERIENCE_DIFFICULTY,
    SCORE_COMPOUND_BONUS,
    SCORE_DIFFICULTY_EXACT,
    SCORE_DIFFICULTY_NEAR,
    SCORE_PRIMARY_MATCH,
    SCORE_SECONDARY_MATCH,
    SCORE_UNSTABLE_BONUS,
    STABLE_ONLY_PHASES,
)
from .exercises.base import Exercise
from .exercises.registry import ExerciseCatalog, get_default_catalog


def has_equipment(exercise: Exercise, equipment: Iterable[str]) -> bool:
    """
    True if the user's equipment lets them perform *exercise*.

    Bodyweight is always available.  A user who owns *only* bodyweight gets
    exercises that need nothing else: an exercise listing bodyweight among
    other options is excluded for them.
    """
    owned = tuple(equipment)
    if owned == ("bodyweight",):
        return exercise.is_bodyweight_only
    available = set(owned) | {"bodyweight"}
    return any(item in available for item in exercise.equipment)


def is_eligible(
    exercise: Exercise,
    equipment: Iterable[str],
    constraints: Iterable[str] = (),
    phase: str | None = None,
) -> bool:
    """
    Hard eligibility filter.

    Args:
        exercise: Catalog entry
        equipment: User's equipment tags
        constraints: User's injury/movement restriction tags
        phase: OPT phase; maximal strength and power exclude unstable work

    Returns:
        True if the exercise may be prescribed
    """
    if not has_equipment(exercise, equipment):
        return False
    if set(exercise.contraindications) & set(constraints):
        return False
    if phase in STABLE_ONLY_PHASES and exercise.stability_level == "unstable":
        return False
    return True


def filter_eligible(
    catalog: Iterable[Exercise],
    equipment: Iterable[str],
    constraints: Iterable[str] = (),
    phase: str | None = None,
) -> list[Exercise]:
    """Eligible exercises in catalog order."""
    equipment = tuple(equipment)
    constraints = tuple(constraints)
    return [ex for ex in catalog if is_eligible(ex, equipment, constraints, phase)]


def difficulty_score(exercise: Exercise, experience_level: str | None) -> int:
    """+3 for an exact difficulty match, +1 for one level off, else 0."""
    if experience_level is None:
        return 0
    target = EXPERIENCE_DIFFICULTY.get(experience_level)
    level = DIFFICULTY_LEVELS.get(exercise.difficulty)
    if target is None or level is None:
        return 0
    gap = abs(target - level)
    if gap == 0:
        return SCORE_DIFFICULTY_EXACT
    if gap == 1:
        return SCORE_DIFFICULTY_NEAR
    return 0


def score_exercise(
    exercise: Exercise,
    muscles: Iterable[str],
    experience_level: str | None = None,
    phase: str | None = None,
) -> int:
    """
    Relevance score of *exercise* for a set of target muscles.

    primary match (x10 each) > secondary match (x3 each) > compound (+5) >
    difficulty proximity (+3 exact / +1 near).  In stabilization endurance,
    unstable exercises get a bonus so Phase 1 days lead with balance work.
    """
    wanted = set(muscles)
    score = SCORE_PRIMARY_MATCH * len(wanted.intersection(exercise.primary_muscles))
    score += SCORE_SECONDARY_MATCH * len(wanted.intersection(exercise.secondary_muscles))
    if exercise.is_compound:
        score += SCORE_COMPOUND_BONUS
    score += difficulty_score(exercise, experience_level)
    if phase == "stabilization_endurance" and exercise.stability_level == "unstable":
        score += SCORE_UNSTABLE_BONUS
    return score


def rank_exercises(
    candidates: Iterable[Exercise],
    muscles: Iterable[str],
    experience_level: str | None = None,
    phase: str | None = None,
    catalog: ExerciseCatalog | None = None,
) -> list[Exercise]:
    """
    Order candidates by descending score; ties keep catalog order.

    If *catalog* is given, its order is the tie-break; otherwise the order
    of *candidates* is (Python's sort is stable).
    """
    muscles = tuple(muscles)
    pool = list(candidates)
    if catalog is not None:
        pool.sort(key=lambda ex: catalog.position(ex.id) if ex.id in catalog else len(catalog))
    return sorted(pool, key=lambda ex: -score_exercise(ex, muscles, experience_level, phase))


def suggest_exercises(
    muscles: Iterable[str],
    equipment: Iterable[str],
    limit: int = 5,
    experience_level: str | None = None,
    constraints: Iterable[str] = (),
    catalog: ExerciseCatalog | None = None,
) -> list[Exercise]:
    """
    Best-matching eligible exercises for the given muscles.

    Only exercises that hit at least one of the muscles (as primary or
    secondary mover) are returned.
    """
    if catalog is None:
        catalog = get_default_catalog()
    muscles = tuple(muscles)
    wanted = set(muscles)
    eligible = [
        ex
        for ex in filter_eligible(catalog, equipment, constraints)
        if wanted.intersection(ex.primary_muscles) or wanted.intersection(ex.secondary_muscles)
    ]
    return rank_exercises(eligible, muscles, experience_level, catalog=catalog)[: max(0, limit)]


def exercise_preview(
    muscles: Iterable[str],
    equipment: Iterable[str],
    catalog: ExerciseCatalog | None = None,
) -> dict[str, list[str]]:
    """
    Per-muscle preview of what the wizard's choices unlock.

    Returns:
        {muscle: [exercise names]} with up to three names per muscle
    """
    if catalog is None:
        catalog = get_default_catalog()
    equipment = tuple(equipment)
    preview: dict[str, list[str]] = {}
    for muscle in muscles:
        picks = suggest_exercises([muscle], equipment, limit=3, catalog=catalog)
        preview[muscle] = [ex.name for ex in picks]
    return preview
