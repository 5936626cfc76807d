"""
CLI entry point using Typer.

Provides commands for plan management:
- generate: Build a weekly plan from wizard choices
- validate: Check choices and show balance advice
- show-plan / list-plans: Display saved plans
- log-workout / history: Record and review workouts
- analyze: MRV warnings, split adherence and load progression
- suggest / phases: Browse exercises and OPT phases
"""

from .app import app
from .commands import analysis, planning, sessions  # noqa: F401  (registers commands)


if __name__ == "__main__":
    app()
