"""
Pure metric computation functions.

Weight calculation, one-rep-max estimation and the analytics derived from
completed sets.  All functions are pure and typed for testability.
Only completed sets ever contribute to estimates, records or volume.
"""

import math
from dataclasses import dataclass
from typing import Sequence

from .config import (
    EPLEY_DIVISOR,
    STRENGTH_LEVELS,
    STRENGTH_RATIOS,
    TM_FACTOR,
    TM_RESET_FACTOR,
)
from .models import LIFTS, Exercise, SetData, WorkoutSession, validate_lift


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 rounding toward +infinity."""
    return math.floor(value + 0.5)


def calculate_weight(training_max: float, percent: float, rounding: float = 5.0) -> float:
    """
    Calculate a prescribed weight from a training max.

    weight = round(TM * pct / increment) * increment

    A missing (zero/None) training max or percentage yields 0 rather than
    an error, so partially-migrated profiles still generate a workout.

    Args:
        training_max: Training max for the lift
        percent: Fraction of training max (e.g. 0.85)
        rounding: Increment to round to (e.g. 5 or 2.5)

    Returns:
        Weight rounded to the nearest multiple of rounding
    """
    if not training_max or not percent:
        return 0.0
    if not rounding or rounding <= 0:
        rounding = 1.0
    steps = round_half_up(training_max * percent / rounding)
    return float(steps * rounding)


def estimate_1rm(weight: float, reps: int) -> int:
    """
    Epley one-rep-max estimate.

    1RM = weight * (1 + reps / 30), rounded to the nearest integer.

    Args:
        weight: Weight lifted
        reps: Reps actually performed

    Returns:
        Estimated 1RM
    """
    return round_half_up(weight * (1 + reps / EPLEY_DIVISOR))


def set_estimated_1rm(s: SetData) -> int:
    """Epley estimate for a single set using its performed reps."""
    return estimate_1rm(s.weight, s.performed_reps)


def best_estimated_1rm(exercise: Exercise) -> int:
    """Highest Epley estimate across the completed sets of an exercise (0 if none)."""
    estimates = [set_estimated_1rm(s) for s in exercise.completed_sets]
    return max(estimates, default=0)


# =============================================================================
# Training max helpers
# =============================================================================

def initial_training_maxes(one_rep_maxes: dict[str, float]) -> dict[str, float]:
    """
    Seed training maxes from one-rep maxes.

    TM = round(1RM * 0.9) per lift; lifts without a 1RM get 0.
    """
    return {lift: round_half_up((one_rep_maxes.get(lift) or 0) * TM_FACTOR) for lift in LIFTS}


def training_max_from_reps(weight: float, reps: int, rounding: float = 5.0) -> float:
    """
    Training max from a rep-max ("I can do N reps at W").

    TM = calculate_weight(Epley(W, N), 0.9, rounding)
    """
    return calculate_weight(estimate_1rm(weight, reps), TM_FACTOR, rounding)


def reset_training_max(training_max: float) -> int:
    """Apply the -10% reset used on a stalled lift."""
    return round_half_up(training_max * TM_RESET_FACTOR)


def scale_training_maxes(training_maxes: dict[str, float], percent: float) -> dict[str, float]:
    """
    Scale every training max by percent of its current value.

    Args:
        training_maxes: Current training maxes
        percent: Whole-number percentage, e.g. 90 for a 10% reduction

    Returns:
        New training-max map
    """
    return {
        lift: round_half_up(tm * (percent / 100))
        for lift, tm in training_maxes.items()
    }


# =============================================================================
# Session analytics
# =============================================================================

def session_volume(session: WorkoutSession) -> float:
    """
    Total tonnage of a session: sum(weight * performed reps) over completed sets.
    """
    return sum(
        s.weight * s.performed_reps
        for ex in session.exercises
        for s in ex.sets
        if s.completed
    )


def volume_by_week(history: Sequence[WorkoutSession]) -> dict[str, float]:
    """
    Tonnage grouped by cycle/week, keyed "C{cycle}W{week}" in first-seen order.
    """
    volumes: dict[str, float] = {}
    for session in history:
        key = f"C{session.cycle}W{session.week}"
        volumes[key] = volumes.get(key, 0.0) + session_volume(session)
    return volumes


@dataclass(frozen=True)
class TrendPoint:
    """Best estimated 1RM for one session."""

    date: str
    session_id: str
    estimated_1rm: int


def estimated_1rm_trend(history: Sequence[WorkoutSession], lift: str) -> list[TrendPoint]:
    """
    Best Epley estimate per session that contains a Main exercise for lift.

    Sessions where no main set was completed report 0.
    """
    validate_lift(lift)
    points: list[TrendPoint] = []
    for session in history:
        main = next(
            (ex for ex in session.exercises if ex.type == "Main" and ex.name == lift),
            None,
        )
        if main is None:
            continue
        points.append(TrendPoint(session.date, session.id, best_estimated_1rm(main)))
    return points


@dataclass(frozen=True)
class PersonalRecord:
    """Heaviest completed weight for a rep bracket."""

    weight: float = 0.0
    date: str = "-"


REP_RECORD_BRACKETS: tuple[int, ...] = (1, 3, 5, 10)


def personal_records(history: Sequence[WorkoutSession], lift: str) -> dict[int, PersonalRecord]:
    """
    Heaviest weight completed for at least 1, 3, 5 and 10 reps on the main lift.

    Returns:
        {bracket: PersonalRecord}; brackets never hit keep weight 0 and date "-"
    """
    validate_lift(lift)
    records = {bracket: PersonalRecord() for bracket in REP_RECORD_BRACKETS}
    for session in history:
        if session.lift != lift:
            continue
        for ex in session.exercises:
            if ex.type != "Main":
                continue
            for s in ex.completed_sets:
                reps = s.performed_reps
                for bracket in REP_RECORD_BRACKETS:
                    if reps >= bracket and s.weight > records[bracket].weight:
                        records[bracket] = PersonalRecord(s.weight, session.date)
    return records


@dataclass(frozen=True)
class StrengthLevel:
    level: str
    ratio: float
    next_target: int
    progress: float  # 0-100 toward the next level


def strength_level(lift: str, one_rep_max: float, bodyweight: float) -> StrengthLevel:
    """
    Classify a 1RM against bodyweight-ratio strength standards.

    Args:
        lift: Lift name
        one_rep_max: One-rep max in the lifter's unit
        bodyweight: Bodyweight in the same unit

    Returns:
        StrengthLevel; level "Unknown" when bodyweight is missing
    """
    validate_lift(lift)
    if not bodyweight or bodyweight <= 0:
        return StrengthLevel("Unknown", 0.0, 0, 0.0)

    standards = STRENGTH_RATIOS[lift]
    ratio = one_rep_max / bodyweight

    idx = 0
    while idx < len(standards) and ratio >= standards[idx]:
        idx += 1

    prev = 0.0 if idx == 0 else standards[idx - 1]
    nxt = standards[-1] * 1.2 if idx == len(standards) else standards[idx]
    percent = (ratio - prev) / (nxt - prev) * 100

    return StrengthLevel(
        level=STRENGTH_LEVELS[idx],
        ratio=round(ratio, 2),
        next_target=round_half_up(nxt * bodyweight),
        progress=min(100.0, max(0.0, percent)),
    )
