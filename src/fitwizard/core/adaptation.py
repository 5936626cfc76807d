"""
Adaptation rules: volume ceilings, schedule adherence and load progression.

Derives advisory output from logged workouts and the active plan:
- MRV warnings when a muscle's weekly sets exceed its recoverable volume,
- a split suggestion when the user keeps training fewer days than planned,
- per-exercise load recommendations from reported RIR.

Weeks are rolling 7-day buckets counted back from ``now``, so "this week"
always means the last seven days regardless of the calendar.
"""

import math
from datetime import datetime, timedelta
from statistics import mean, pstdev

from .config import (
    ADHERENCE_CONSISTENCY_RATIO,
    ADHERENCE_MIN_GAP_DAYS,
    DAYS_PER_BUCKET,
    DECREASE_NEAR_FAILURE,
    INCREASE_ON_TARGET,
    INCREASE_STAGNANT,
    INCREASE_STANDARD,
    MIN_DAYS_PER_WEEK,
    NEAR_FAILURE_RIR,
    RIR_SPREAD_HIGH,
    RIR_SPREAD_LOW,
    RIR_SPREAD_STEADY,
    RIR_TOLERANCE,
    STAGNATION_SESSIONS,
    STAGNATION_TOLERANCE,
)
from .landmarks import VolumeLandmarkTable, get_default_landmarks
from .metrics import completed_sets, round_to_increment
from .models import (
    ExerciseLog,
    MRVWarning,
    Plan,
    ProgressionRecommendation,
    SplitSuggestion,
    WorkoutLog,
)
from .planner import canonical_muscle_order, select_split

# =============================================================================
# Windowing
# =============================================================================


def _window_logs(logs: list[WorkoutLog], window_days: int, now: datetime) -> list[WorkoutLog]:
    """Logs started within the trailing window ending at *now*."""
    start = now - timedelta(days=window_days)
    return [log for log in logs if start <= log.started_at <= now]


def _bucket(started_at: datetime, now: datetime) -> int:
    """0 for the last seven days, 1 for the seven before that, and so on."""
    return (now - started_at).days // DAYS_PER_BUCKET


# =============================================================================
# MRV warnings
# =============================================================================


def weekly_sets_by_muscle(
    logs: list[WorkoutLog],
    plan: Plan,
    window_days: int,
    now: datetime | None = None,
) -> dict[int, dict[str, int]]:
    """
    Completed sets per muscle for each rolling week in the window.

    Sets are attributed to the primary muscles of the plan exercise with the
    same id; exercises not in the plan and skipped exercises are ignored.

    Returns:
        {week bucket: {muscle: sets}}
    """
    if now is None:
        now = datetime.now()

    weeks: dict[int, dict[str, int]] = {}
    for log in _window_logs(logs, window_days, now):
        bucket = weeks.setdefault(_bucket(log.started_at, now), {})
        for ex_log in log.exercises:
            exercise = plan.find_exercise(ex_log.exercise_id)
            if exercise is None:
                continue
            done = len(completed_sets(ex_log))
            if done == 0:
                continue
            for m in exercise.primary_muscles:
                bucket[m] = bucket.get(m, 0) + done
    return weeks


def detect_mrv_warnings(
    logs: list[WorkoutLog],
    plan: Plan,
    window_days: int,
    *,
    landmarks: VolumeLandmarkTable | None = None,
    now: datetime | None = None,
) -> list[MRVWarning]:
    """
    Flag muscles whose logged weekly sets exceed their MRV.

    The busiest week in the window is compared against the MRV scaled to
    the plan's experience level.

    Args:
        logs: Workout history (any range; filtered to the window)
        plan: Active plan, used to map exercise ids to muscles
        window_days: Trailing window length in days
        landmarks: Landmark table (default: model.yaml)
        now: End of the window (default: datetime.now())

    Returns:
        One MRVWarning per muscle over its cap, in canonical muscle order
    """
    if landmarks is None:
        landmarks = get_default_landmarks()
    if now is None:
        now = datetime.now()

    peak: dict[str, tuple[int, int]] = {}  # muscle -> (sets, bucket)
    for bucket, muscles in weekly_sets_by_muscle(logs, plan, window_days, now).items():
        for m, sets in muscles.items():
            if m not in peak or sets > peak[m][0]:
                peak[m] = (sets, bucket)

    level = plan.selections.experience_level
    warnings: list[MRVWarning] = []
    for m in canonical_muscle_order(peak):
        sets, bucket = peak[m]
        mrv = landmarks.mrv(m, level)
        if sets > mrv:
            warnings.append(
                MRVWarning(
                    muscle_group=m,
                    mrv=mrv,
                    actual_sets=sets,
                    week_start=now - timedelta(days=DAYS_PER_BUCKET * (bucket + 1)),
                )
            )
    return warnings


# =============================================================================
# Split adjustment
# =============================================================================


def training_days_per_week(
    logs: list[WorkoutLog],
    window_days: int,
    now: datetime | None = None,
    since: datetime | None = None,
) -> list[int]:
    """
    Distinct training dates in each complete rolling week of the window.

    Only whole weeks are counted: days left over when window_days is not a
    multiple of 7 are ignored, and a window shorter than 7 days has no
    weeks at all.  With *since*, weeks that start before it are dropped too.

    Returns:
        One count per week, most recent first; empty when no complete week fits
    """
    if now is None:
        now = datetime.now()
    n_weeks = window_days // DAYS_PER_BUCKET
    if since is not None:
        n_weeks = min(n_weeks, max(0, (now - since) // timedelta(days=DAYS_PER_BUCKET)))
    if n_weeks <= 0:
        return []

    dates: list[set] = [set() for _ in range(n_weeks)]
    for log in _window_logs(logs, n_weeks * DAYS_PER_BUCKET, now):
        bucket = _bucket(log.started_at, now)
        if bucket < n_weeks:
            dates[bucket].add(log.started_at.date())
    return [len(d) for d in dates]


def suggest_split_adjustment(
    logs: list[WorkoutLog],
    plan: Plan,
    window_days: int,
    *,
    now: datetime | None = None,
) -> SplitSuggestion | None:
    """
    Suggest a lower-frequency split when adherence is consistently below plan.

    "Consistently" means at least 75% of the counted weeks fall short of
    the planned days and the average is at least one day below plan.  The
    recommended split is the one the day-count mapping gives for the
    rounded average (never below two days).

    Only complete weeks that start on or after the plan's creation (or the
    first logged workout, if earlier) are counted, so a new plan is not
    judged on weeks before it existed.

    Args:
        logs: Workout history
        plan: Active plan
        window_days: Trailing window length in days; leftover days past the
            last whole week are ignored
        now: End of the window (default: datetime.now())

    Returns:
        SplitSuggestion, or None when adherence matches the plan, there are
        no logs in the window, no complete week has passed, or the lower
        frequency maps to the same split
    """
    if now is None:
        now = datetime.now()
    whole_weeks_days = (window_days // DAYS_PER_BUCKET) * DAYS_PER_BUCKET
    recent = _window_logs(logs, whole_weeks_days, now)
    if not recent:
        return None

    since = min(plan.created_at, min(log.started_at for log in logs))
    weekly = training_days_per_week(recent, whole_weeks_days, now, since=since)
    if not weekly:
        return None

    planned = plan.days_per_week
    average = sum(weekly) / len(weekly)

    short_weeks = sum(1 for days in weekly if days < planned)
    if short_weeks < math.ceil(ADHERENCE_CONSISTENCY_RATIO * len(weekly)):
        return None
    if planned - average < ADHERENCE_MIN_GAP_DAYS:
        return None

    recommended_days = max(MIN_DAYS_PER_WEEK, int(average + 0.5))
    recommended = select_split(recommended_days)
    if recommended == plan.split_type:
        return None

    return SplitSuggestion(
        recommended_split=recommended,
        planned_days_per_week=planned,
        actual_days_per_week=round(average, 2),
        current_split=plan.split_type,
        weekly_days=tuple(weekly),
        message=(
            f"You averaged {average:.1f} training days per week against {planned} planned. "
            f"A {recommended.replace('_', ' ')} split fits {recommended_days} days better."
        ),
    )


# =============================================================================
# Load progression
# =============================================================================


def _group_by_exercise(logs: list[WorkoutLog]) -> dict[str, list[ExerciseLog]]:
    """Non-skipped exercise logs per exercise id, oldest first."""
    grouped: dict[str, list[ExerciseLog]] = {}
    for log in sorted(logs, key=lambda l: l.started_at):
        for ex_log in log.exercises:
            if ex_log.skipped:
                continue
            grouped.setdefault(ex_log.exercise_id, []).append(ex_log)
    return grouped


def _avg_load(ex_log: ExerciseLog) -> float:
    sets = completed_sets(ex_log)
    return mean(s.weight for s in sets) if sets else 0.0


def is_stagnant(history: list[ExerciseLog], sessions: int = STAGNATION_SESSIONS) -> bool:
    """
    True if the last *sessions* logs all used (nearly) the same load.

    Loads within 2.5% of their mean count as the same.
    """
    if len(history) < sessions:
        return False
    loads = [_avg_load(e) for e in history[-sessions:]]
    center = mean(loads)
    if center <= 0:
        return False
    return all(abs(load - center) / center < STAGNATION_TOLERANCE for load in loads)


def analyze_performance(
    logs: list[WorkoutLog],
    plan: Plan,
    week: int | None = None,
) -> list[ProgressionRecommendation]:
    """
    Recommend load changes per exercise from reported RIR.

    Rules, in order:
    1. RIR above target (and steady): increase 5% (10% if stagnant).
    2. RIR below target: decrease 5% when close to failure, else maintain.
    3. RIR on target and steady: increase 2.5%.
    4. RIR erratic: maintain until consistent.

    Args:
        logs: Recent workout logs (ideally 1-4 weeks)
        plan: Active plan (names exercises and sets the target RIR)
        week: Mesocycle week for the target RIR (default: number of logs, capped
            at the mesocycle length)

    Returns:
        Recommendations sorted increase → maintain → decrease
    """
    if not logs:
        return []

    if week is None:
        week = min(len(logs), len(plan.rir_progression) or 1)
    target = plan.target_rir_for_week(week)
    if target is None:
        target = 2

    recommendations: list[ProgressionRecommendation] = []

    for exercise_id, history in _group_by_exercise(logs).items():
        done = [s for e in history for s in completed_sets(e)]
        if not done:
            continue
        rirs = [s.rir for s in done]
        loads = [s.weight for s in done]
        unit = done[-1].weight_unit

        avg_rir = mean(rirs)
        spread = pstdev(rirs) if len(rirs) >= 2 else 0.0
        current = mean(loads)
        stagnant = is_stagnant(history)

        exercise = plan.find_exercise(exercise_id)
        name = exercise.name if exercise is not None else history[-1].exercise_name or exercise_id

        recommended = current
        if avg_rir > target + RIR_TOLERANCE and spread < RIR_SPREAD_HIGH:
            bump = INCREASE_STAGNANT if stagnant else INCREASE_STANDARD
            recommended = current * (1 + bump)
            action = "increase"
            confidence = "high" if spread < RIR_SPREAD_LOW else "medium"
            if stagnant:
                rationale = (
                    f"Plateau detected after {STAGNATION_SESSIONS}+ sessions at the same load. "
                    f"Avg RIR {avg_rir:.1f} is above target {target}. Time for a bigger jump."
                )
            else:
                rationale = f"Consistently hitting RIR {avg_rir:.1f} (target: {target}). There is room to push harder."
        elif avg_rir < target - RIR_TOLERANCE:
            if avg_rir < NEAR_FAILURE_RIR:
                recommended = current * (1 - DECREASE_NEAR_FAILURE)
                action = "decrease"
                confidence = "high"
                rationale = (
                    f"Avg RIR {avg_rir:.1f} is very close to failure. Reducing load for recovery."
                )
            else:
                action = "maintain"
                confidence = "medium"
                rationale = f"RIR {avg_rir:.1f} is below target {target}. Maintain the current load until consistent."
        elif spread < RIR_SPREAD_STEADY:
            recommended = current * (1 + INCREASE_ON_TARGET)
            action = "increase"
            confidence = "high"
            rationale = f"Solid execution at target RIR {target}. Applying progressive overload (+2.5%)."
        else:
            action = "maintain"
            confidence = "low"
            rationale = f"RIR spread is high ({spread:.1f}). Focus on consistency before progressing."

        # A single maintain session carries no signal worth showing
        if action == "maintain" and len(history) < 2:
            continue

        recommendations.append(
            ProgressionRecommendation(
                exercise_id=exercise_id,
                exercise_name=name,
                action=action,
                current_load=round_to_increment(current, unit),
                recommended_load=round_to_increment(recommended, unit),
                change_percentage=((recommended - current) / current * 100) if current > 0 else 0.0,
                rationale=rationale,
                confidence=confidence,
            )
        )

    order = {"increase": 0, "maintain": 1, "decrease": 2, "swap": 3}
    recommendations.sort(key=lambda r: order[r.action])
    return recommendations
