"""
Warm-up and cool-down suggestions for a workout day.

Each suggestion carries the focus tags it suits and the constraints that
rule it out.  "general" suggestions fit any day.
"""

from dataclasses import dataclass

CORE_MUSCLES: frozenset[str] = frozenset({"abs", "obliques", "lower_back"})
MAX_SUGGESTIONS = 3


@dataclass(frozen=True)
class Suggestion:
    text: str
    tags: tuple[str, ...]
    avoid_constraints: tuple[str, ...] = ()


WARM_UP_SUGGESTIONS: tuple[Suggestion, ...] = (
    Suggestion("2-3 min easy cardio (walk, bike, or row)", ("general",)),
    Suggestion("Diaphragmatic breathing + core brace (5 breaths)", ("general",)),
    Suggestion("Arm circles x10/side", ("upper", "push", "pull"), ("shoulder_injury", "no_overhead")),
    Suggestion("Scapular retractions x10", ("upper", "pull")),
    Suggestion("Wall slides x8", ("upper", "push"), ("shoulder_injury", "no_overhead")),
    Suggestion("Cat-cow x6", ("general", "core"), ("back_injury",)),
    Suggestion("Glute bridges x10", ("lower", "hinge"), ("back_injury",)),
    Suggestion("Bodyweight squats x8", ("lower", "quads"), ("knee_injury",)),
    Suggestion("Leg swings x8/side", ("lower",), ("knee_injury",)),
    Suggestion("Dead bug x6/side", ("core",), ("back_injury",)),
)

COOL_DOWN_SUGGESTIONS: tuple[Suggestion, ...] = (
    Suggestion("Slow nasal breathing 1-2 min", ("general",)),
    Suggestion("Doorway chest stretch 20-30s/side", ("upper", "push"), ("shoulder_injury", "no_overhead")),
    Suggestion("Lat stretch on wall 20-30s/side", ("upper", "pull"), ("shoulder_injury", "no_overhead")),
    Suggestion("Child's pose breathing 20-30s", ("general", "core"), ("back_injury", "no_overhead")),
    Suggestion("Figure-4 glute stretch 20-30s/side", ("lower",), ("knee_injury",)),
    Suggestion("Hamstring stretch 20-30s/side", ("lower",), ("back_injury",)),
    Suggestion("Calf stretch 20-30s/side", ("lower",)),
)


def build_suggestions(
    suggestions: tuple[Suggestion, ...],
    focus_tags: tuple[str, ...] | list[str],
    day_muscles: tuple[str, ...] | list[str],
    constraints: tuple[str, ...] | list[str],
    max_items: int = MAX_SUGGESTIONS,
) -> list[str]:
    """
    Pick suggestions that fit a day's focus and respect the user's constraints.

    A day training any trunk muscle also matches "core" suggestions.  Full
    body days match upper and lower suggestions.

    Returns:
        Up to *max_items* unique texts in table order
    """
    blocked = set(constraints)
    tags = set(focus_tags)
    if "full_body" in tags:
        tags |= {"upper", "lower", "push", "pull"}
    if CORE_MUSCLES.intersection(day_muscles):
        tags.add("core")

    picked: list[str] = []
    for s in suggestions:
        if blocked.intersection(s.avoid_constraints):
            continue
        if "general" not in s.tags and not tags.intersection(s.tags):
            continue
        if s.text not in picked:
            picked.append(s.text)
        if len(picked) >= max_items:
            break
    return picked


def warm_up_for_day(focus_tags, day_muscles, constraints) -> list[str]:
    return build_suggestions(WARM_UP_SUGGESTIONS, focus_tags, day_muscles, constraints)


def cool_down_for_day(focus_tags, day_muscles, constraints) -> list[str]:
    return build_suggestions(COOL_DOWN_SUGGESTIONS, focus_tags, day_muscles, constraints)
