"""
Session completion processor.

Folds a finished session into the lifter's state: the session is appended
to history, one-rep maxes are raised from its completed main sets and
achievements are re-evaluated against the updated profile and history.
Pure composition with no I/O; the caller persists the result.
"""

from __future__ import annotations

import copy
import warnings
from dataclasses import dataclass, replace
from typing import Sequence

from .achievements import evaluate_achievements
from .max_estimator import update_maxes_from_session
from .models import (
    TrainingProfile,
    WorkoutSession,
    with_unlocked_achievements,
    with_updated_maxes,
)


@dataclass
class CompletionResult:
    profile: TrainingProfile
    history: list[WorkoutSession]
    newly_unlocked: str | None = None


def process_finished_session(
    profile: TrainingProfile,
    history: Sequence[WorkoutSession],
    session: WorkoutSession,
) -> CompletionResult:
    """
    Append a finished session and update maxes and achievements.

    The appended session is a deep copy re-attributed to profile.id, so
    later edits to the caller's session never reach history.  Neither the
    input profile nor the input history is mutated.  If achievement
    evaluation raises, the error is reported as a warning and the history
    append and max update are still returned.

    Args:
        profile: Profile that performed the session
        history: Existing history, oldest first
        session: Finished session (sets marked completed by the lifter)

    Returns:
        CompletionResult with the updated profile and history
    """
    attributed = replace(copy.deepcopy(session), profile_id=profile.id)
    updated_history = [*history, attributed]

    new_maxes, changed = update_maxes_from_session(profile.one_rep_maxes, attributed)
    updated_profile = with_updated_maxes(profile, new_maxes) if changed else profile

    try:
        result = evaluate_achievements(updated_profile, updated_history)
    except Exception as exc:
        warnings.warn(f"lift531: achievement evaluation failed: {exc}", stacklevel=2)
        return CompletionResult(updated_profile, updated_history, None)

    if result.newly_unlocked is not None:
        updated_profile = with_unlocked_achievements(updated_profile, result.achievements)

    return CompletionResult(updated_profile, updated_history, result.newly_unlocked)
