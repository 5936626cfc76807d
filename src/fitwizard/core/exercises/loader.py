"""
YAML → Exercise loader.

Loads catalog entries from the YAML files in the bundled
``src/fitwizard/exercises/`` directory.  Each file (e.g. chest.yaml)
holds a list of exercises under an ``exercises:`` key.

User overrides: place YAML files of the same shape in
``~/.fitwizard/exercises/``.  An entry whose id matches a bundled
exercise is deep-merged over it, so only changed keys need to be listed.
An entry with a new id is appended to the catalog.

Usage (internal, called by registry.py):
    from .loader import load_exercises_from_yaml
    exercises = load_exercises_from_yaml()   # list, possibly empty
"""

from __future__ import annotations

import warnings
from pathlib import Path

from ..engine.config_loader import deep_merge, get_package_dir, get_user_config_dir, load_yaml_file
from .base import Exercise

_REQUIRED_FIELDS: frozenset[str] = frozenset({"id", "name", "primary_muscles", "equipment"})

_LIST_FIELDS: tuple[str, ...] = (
    "primary_muscles",
    "secondary_muscles",
    "equipment",
    "patterns",
    "contraindications",
    "cues",
)


def exercise_from_dict(d: dict) -> Exercise:
    """Convert a raw dict (from YAML) to an Exercise.

    Raises ValueError if any required field is absent or malformed.
    """
    missing = _REQUIRED_FIELDS - set(d)
    if missing:
        raise ValueError(f"exercise missing fields: {sorted(missing)}")

    lists: dict[str, tuple[str, ...]] = {}
    for key in _LIST_FIELDS:
        raw = d.get(key) or []
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, list):
            raise ValueError(f"field '{key}' must be a list, got {type(raw).__name__}")
        lists[key] = tuple(str(v) for v in raw)

    return Exercise(
        id=str(d["id"]),
        name=str(d["name"]),
        difficulty=str(d.get("difficulty", "All Levels")),  # type: ignore[arg-type]
        category=str(d.get("category", "strength")),
        stability_level=d.get("stability_level"),
        exercise_type=d.get("exercise_type"),
        **lists,
    )


def _read_entries(path: Path) -> list[dict]:
    """Return the raw exercise dicts in one catalog file."""
    data = load_yaml_file(path)
    if data is None:
        return []
    entries = data.get("exercises") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        warnings.warn(
            f"fitwizard: {path.name} has no 'exercises' list; skipped",
            stacklevel=3,
        )
        return []
    return [e for e in entries if isinstance(e, dict)]


def _get_bundled_exercises_dir() -> Path | None:
    """Return path to the bundled exercises/ data directory, or None if not found."""
    candidate = get_package_dir() / "exercises"
    return candidate if candidate.is_dir() else None


def _get_user_exercises_dir() -> Path | None:
    """Return ~/.fitwizard/exercises/ if it exists, else None."""
    p = get_user_config_dir() / "exercises"
    return p if p.is_dir() else None


def load_exercises_from_yaml(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> list[Exercise]:
    """Return catalog entries in file order, with user overrides applied.

    Entries that fail validation are skipped with a warning; a duplicate id
    within the bundled files keeps the first definition.

    Args:
        bundled_dir: Directory of bundled catalog files (default: package data)
        user_dir: Directory of user override files (default: ~/.fitwizard/exercises)

    Returns:
        List of Exercise, possibly empty
    """
    if bundled_dir is None:
        bundled_dir = _get_bundled_exercises_dir()
    if user_dir is None:
        user_dir = _get_user_exercises_dir()

    raw_by_id: dict[str, dict] = {}

    if bundled_dir is not None:
        for path in sorted(bundled_dir.glob("*.yaml")):
            for entry in _read_entries(path):
                ex_id = entry.get("id")
                if not ex_id:
                    warnings.warn(f"fitwizard: entry without id in {path.name}; skipped", stacklevel=2)
                    continue
                if ex_id in raw_by_id:
                    warnings.warn(f"fitwizard: duplicate exercise id '{ex_id}' in {path.name}; skipped", stacklevel=2)
                    continue
                raw_by_id[ex_id] = entry

    if user_dir is not None:
        for path in sorted(user_dir.glob("*.yaml")):
            for entry in _read_entries(path):
                ex_id = entry.get("id")
                if not ex_id:
                    continue
                if ex_id in raw_by_id:
                    raw_by_id[ex_id] = deep_merge(raw_by_id[ex_id], entry)
                else:
                    raw_by_id[ex_id] = entry

    result: list[Exercise] = []
    for ex_id, raw in raw_by_id.items():
        try:
            result.append(exercise_from_dict(raw))
        except ValueError as exc:
            warnings.warn(f"fitwizard: skipping exercise '{ex_id}': {exc}", stacklevel=2)
    return result
