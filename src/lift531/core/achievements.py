"""
Achievement catalog and evaluator.

Achievements are milestone ids unlocked by simple predicates over a
profile and its history.  Evaluation is pure and idempotent: an id already
in profile.achievements is never re-reported, and the returned set only
ever grows.
"""

from dataclasses import dataclass
from typing import Callable, Sequence

from .config import (
    BENCH_MILESTONE,
    COMMITTED_SESSIONS,
    CONSISTENCY_SESSIONS,
    DEADLIFT_MILESTONE,
    SQUAT_MILESTONE,
    TOTAL_MILESTONE,
)
from .models import LIFTS, TrainingProfile, WorkoutSession, relevant_history


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement("first_blood", "First Blood", "Complete your first workout"),
    Achievement("consistency", "Consistency", "Complete 10 workouts"),
    Achievement("committed", "Committed", "Complete 50 workouts"),
    Achievement("squat_225", "2 Plate Squat", "Squat 225lbs (100kg)"),
    Achievement("bench_135", "1 Plate Bench", "Bench 135lbs (60kg)"),
    Achievement("deadlift_315", "3 Plate Pull", "Deadlift 315lbs (140kg)"),
    Achievement("cycle_complete", "Cycle Master", "Finish a full training cycle"),
    Achievement("heavy_hitter", "1000lb Club", "Total 1RM over 1000lbs (450kg)"),
)

ACHIEVEMENTS_BY_ID: dict[str, Achievement] = {a.id: a for a in ACHIEVEMENTS}


@dataclass(frozen=True)
class AchievementResult:
    """Complete unlocked set plus the single id to announce, if any."""

    achievements: frozenset[str]
    newly_unlocked: str | None = None


def _predicates(
    profile: TrainingProfile,
    history: Sequence[WorkoutSession],
) -> list[tuple[str, Callable[[], bool]]]:
    unit = profile.unit
    sessions = len(history)
    total = sum(profile.one_rep_max(lift) for lift in LIFTS)
    return [
        ("first_blood", lambda: sessions > 0),
        ("consistency", lambda: sessions >= CONSISTENCY_SESSIONS),
        ("committed", lambda: sessions >= COMMITTED_SESSIONS),
        ("cycle_complete", lambda: profile.current_cycle > 1),
        ("squat_225", lambda: profile.one_rep_max("Squat") >= SQUAT_MILESTONE[unit]),
        ("bench_135", lambda: profile.one_rep_max("Bench Press") >= BENCH_MILESTONE[unit]),
        ("deadlift_315", lambda: profile.one_rep_max("Deadlift") >= DEADLIFT_MILESTONE[unit]),
        ("heavy_hitter", lambda: total >= TOTAL_MILESTONE[unit]),
    ]


def evaluate_achievements(
    profile: TrainingProfile,
    history: Sequence[WorkoutSession],
) -> AchievementResult:
    """
    Evaluate every milestone against profile and its own history.

    History is filtered to sessions attributed to the profile first (see
    models.belongs_to).  When several milestones unlock in one call, all are
    added to the returned set and the last one evaluated is announced.

    Args:
        profile: Lifter profile (its achievements are the already-unlocked set)
        history: Full training history

    Returns:
        AchievementResult; newly_unlocked is None when nothing new unlocked
    """
    relevant = relevant_history(history, profile.id)
    unlocked = set(profile.achievements)
    newly: str | None = None

    for achievement_id, condition in _predicates(profile, relevant):
        if achievement_id not in unlocked and condition():
            unlocked.add(achievement_id)
            newly = achievement_id

    return AchievementResult(frozenset(unlocked), newly)
