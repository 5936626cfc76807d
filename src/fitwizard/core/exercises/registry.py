"""
Exercise catalog.

The default catalog is loaded from the bundled YAML files the first time
it is requested and then reused for the life of the process.  If no
exercise can be loaded, a RuntimeError is raised: nothing can be planned
without a catalog.

Planner and analyzer functions take an optional ``catalog`` argument so
tests (and callers with their own data) can inject a synthetic one.
"""

from collections.abc import Iterable, Iterator

from .base import Exercise


class ExerciseCatalog:
    """Read-only, ordered collection of exercises keyed by id.

    Catalog order is meaningful: it is the final tie-break when ranking
    candidates, which keeps generation reproducible.
    """

    def __init__(self, exercises: Iterable[Exercise]):
        self._exercises: tuple[Exercise, ...] = tuple(exercises)
        self._by_id: dict[str, Exercise] = {}
        self._order: dict[str, int] = {}
        for i, ex in enumerate(self._exercises):
            if ex.id in self._by_id:
                raise ValueError(f"duplicate exercise id '{ex.id}' in catalog")
            self._by_id[ex.id] = ex
            self._order[ex.id] = i

    def __iter__(self) -> Iterator[Exercise]:
        return iter(self._exercises)

    def __len__(self) -> int:
        return len(self._exercises)

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._by_id

    @property
    def exercises(self) -> tuple[Exercise, ...]:
        return self._exercises

    def position(self, exercise_id: str) -> int:
        """Return the catalog index of an exercise (used as a tie-break)."""
        return self._order[exercise_id]

    def get(self, exercise_id: str) -> Exercise:
        """
        Return the Exercise with this id.

        Raises:
            ValueError: If exercise_id is not in the catalog
        """
        if exercise_id not in self._by_id:
            raise ValueError(f"Unknown exercise '{exercise_id}'")
        return self._by_id[exercise_id]

    def with_muscle(self, muscle: str) -> list[Exercise]:
        """Exercises that list *muscle* as a primary mover, in catalog order."""
        return [ex for ex in self._exercises if muscle in ex.primary_muscles]


_DEFAULT_CATALOG: ExerciseCatalog | None = None


def _build_catalog() -> ExerciseCatalog:
    from .loader import load_exercises_from_yaml

    loaded = load_exercises_from_yaml()
    if not loaded:
        raise RuntimeError(
            "fitwizard: no exercise definitions could be loaded from YAML. "
            "Check that src/fitwizard/exercises/*.yaml files are present and valid."
        )
    return ExerciseCatalog(loaded)


def get_default_catalog() -> ExerciseCatalog:
    """Return the process-wide catalog, loading it on first use."""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = _build_catalog()
    return _DEFAULT_CATALOG
