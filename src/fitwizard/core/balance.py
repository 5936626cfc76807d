"""
Plan balance checks on wizard selections.

Heuristic, advisory rules: they never block generation.  Each rule is
independent, so the result does not depend on rule order.
"""

from .models import ValidationWarning, WizardSelections

LEG_MUSCLES: frozenset[str] = frozenset({"quads", "hamstrings", "glutes", "calves", "legs"})
PUSH_MUSCLES: frozenset[str] = frozenset({"chest", "shoulders", "front_deltoid", "triceps"})
PULL_MUSCLES: frozenset[str] = frozenset({"back", "lats", "upper_back", "biceps", "rear_deltoid"})
FREQUENCY_SENSITIVE_GOALS: frozenset[str] = frozenset({"hypertrophy", "strength"})
MIN_FREQUENCY_DAYS = 3


def _frequency_low(s: WizardSelections) -> ValidationWarning | None:
    if s.goal in FREQUENCY_SENSITIVE_GOALS and s.days_per_week < MIN_FREQUENCY_DAYS:
        return ValidationWarning(
            id="frequency_low",
            type="warning",
            message=(
                f"Training {s.days_per_week} days per week is low for a {s.goal} goal. "
                f"Consider at least {MIN_FREQUENCY_DAYS} days to hit each muscle twice."
            ),
            context=f"days_per_week={s.days_per_week}",
        )
    return None


def _missing_legs(s: WizardSelections) -> ValidationWarning | None:
    if s.target_muscles and not LEG_MUSCLES.intersection(s.target_muscles):
        return ValidationWarning(
            id="missing_legs",
            type="warning",
            message="No leg muscles selected. Lower-body training supports overall strength and balance.",
            context="target_muscles",
        )
    return None


def _imbalance_push(s: WizardSelections) -> ValidationWarning | None:
    targets = set(s.target_muscles)
    if targets & PUSH_MUSCLES and not targets & PULL_MUSCLES:
        return ValidationWarning(
            id="imbalance_push",
            type="info",
            message="Push muscles selected without pull muscles. Add back work to balance the shoulders.",
            context=", ".join(sorted(targets & PUSH_MUSCLES)),
        )
    return None


def _equip_strength(s: WizardSelections) -> ValidationWarning | None:
    if s.goal == "strength" and s.is_bodyweight_only:
        return ValidationWarning(
            id="equip_strength",
            type="info",
            message=(
                "A strength goal with bodyweight only limits progressive loading. "
                "Expect harder variations and higher reps instead of added weight."
            ),
            context="equipment=bodyweight",
        )
    return None


_RULES = (_frequency_low, _missing_legs, _imbalance_push, _equip_strength)


def validate_plan_balance(selections: WizardSelections) -> list[ValidationWarning]:
    """
    Run every balance rule over *selections*.

    Args:
        selections: Wizard input (need not pass validate_wizard_inputs)

    Returns:
        Warnings in rule order; empty for a balanced selection
    """
    warnings = []
    for rule in _RULES:
        w = rule(selections)
        if w is not None:
            warnings.append(w)
    return warnings
