"""
Exercise catalog for fitwizard.

Each exercise is described by an Exercise object; the catalog is an
ordered, read-only collection loaded from YAML.
"""

from .base import Exercise
from .registry import ExerciseCatalog, get_default_catalog

__all__ = [
    "Exercise",
    "ExerciseCatalog",
    "get_default_catalog",
]
