"""fitwizard: workout plan generation and progression analysis."""

__version__ = "0.3.0"
