"""
One-rep-max updates from a finished session.

Every completed set of the session's Main exercise is run through the
Epley estimate (metrics.estimate_1rm) using its performed reps.  A stored
one-rep max is only ever raised by this path, never lowered.
"""

from __future__ import annotations

from .metrics import set_estimated_1rm
from .models import LIFTS, WorkoutSession


def update_maxes_from_session(
    one_rep_maxes: dict[str, float],
    session: WorkoutSession,
) -> tuple[dict[str, float], bool]:
    """
    Raise stored one-rep maxes from a session's completed main sets.

    Conditioning sessions, and sessions whose lift is not one of the four
    barbell lifts, leave the maxes untouched.

    Args:
        one_rep_maxes: Current lift -> 1RM map (not mutated)
        session: Finished session

    Returns:
        (new_maxes, changed) where new_maxes is always a fresh dict
    """
    updated = dict(one_rep_maxes)
    if session.type != "Strength" or session.lift not in LIFTS:
        return updated, False

    lift = session.lift
    changed = False
    for ex in session.exercises:
        if ex.type != "Main" or ex.name != lift:
            continue
        for s in ex.completed_sets:
            estimate = set_estimated_1rm(s)
            if estimate > (updated.get(lift) or 0):
                updated[lift] = estimate
                changed = True

    return updated, changed
