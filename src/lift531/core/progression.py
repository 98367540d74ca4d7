"""
Cycle transition and week advancement.

At the end of a 4-week cycle propose_cycle_transition() computes new
training maxes; the lifter may edit the proposal before
confirm_cycle_transition() applies it, moves to week 1 of the next cycle
and re-evaluates achievements.

Progression schemes:

  Standard     every lift gets its fixed increment every cycle.

  Performance  the week-3 ("1+") session of the current cycle gates the
               increment.  The best performed reps over qualifying main
               sets (completed AND either the AMRAP set or weight >= 90% TM)
               must reach pass_reps (default 3).  A lift that fails is held
               flat; a lift with no week-3 session passes.

Increments (per cycle):
  lbs  +5 upper body (Bench, Overhead)   +10 lower body (Squat, Deadlift)
  kg   +2.5 upper body                   +5 lower body
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Sequence

from .achievements import evaluate_achievements
from .config import DELOAD_WEEK, LOWER_BODY_LIFTS, WEEKS_PER_CYCLE
from .engine.config_loader import ProgressionSettings, load_progression_settings
from .models import (
    LIFTS,
    InvalidDomainValue,
    TrainingProfile,
    WorkoutSession,
    relevant_history,
    validate_lift,
    with_advanced_cycle,
    with_advanced_week,
    with_unlocked_achievements,
)


@dataclass(frozen=True)
class LiftPerformance:
    """Week-3 outcome for one lift."""

    reps_achieved: int
    passed: bool
    week3_found: bool = True


@dataclass
class CycleProposal:
    """Proposed training maxes for the next cycle, open to lifter edits."""

    next_cycle: int
    proposed_training_maxes: dict[str, float]
    per_lift_performance: dict[str, LiftPerformance] = field(default_factory=dict)

    def override(self, lift: str, training_max: float) -> None:
        """Replace one lift's proposed training max (lifter edit)."""
        validate_lift(lift)
        if training_max < 0:
            raise ValueError("training max must be non-negative")
        self.proposed_training_maxes[lift] = training_max


def tm_increment(lift: str, unit: str, settings: ProgressionSettings | None = None) -> float:
    """Fixed per-cycle training-max increment for lift in unit."""
    validate_lift(lift)
    settings = settings or ProgressionSettings()
    return settings.increment_for(unit, lift in LOWER_BODY_LIFTS)


def find_week3_session(
    profile: TrainingProfile,
    history: Sequence[WorkoutSession],
    lift: str,
) -> WorkoutSession | None:
    """Most recent week-3 session for lift in the profile's current cycle."""
    for session in reversed(relevant_history(history, profile.id)):
        if (
            session.type == "Strength"
            and session.cycle == profile.current_cycle
            and session.week == 3
            and session.lift == lift
        ):
            return session
    return None


def best_qualifying_reps(
    session: WorkoutSession,
    training_max: float,
    qualifying_fraction: float,
) -> int:
    """
    Best performed reps over the qualifying main sets of a week-3 session.

    A set qualifies when it is completed, is not a warmup, and is either the
    AMRAP set or loaded at >= qualifying_fraction of the training max.
    """
    main = session.main_exercise()
    if main is None:
        main = next((ex for ex in session.exercises if ex.type == "Main"), None)
    if main is None:
        return 0

    threshold = training_max * qualifying_fraction
    best = 0
    for s in main.completed_sets:
        if s.is_warmup:
            continue
        if s.is_amrap or s.weight >= threshold:
            best = max(best, s.performed_reps)
    return best


def propose_cycle_transition(
    profile: TrainingProfile,
    history: Sequence[WorkoutSession],
    pass_reps: int | None = None,
    settings: ProgressionSettings | None = None,
) -> CycleProposal:
    """
    Compute next-cycle training maxes for every lift.

    Args:
        profile: Lifter profile at the end of its current cycle
        history: Full training history (filtered to this profile internally)
        pass_reps: Explicit pass threshold (default: engine.yaml / 3)
        settings: Pre-loaded progression settings (default: engine.yaml)

    Returns:
        CycleProposal with a proposed TM and performance record per lift
    """
    settings = settings or load_progression_settings()
    threshold = settings.pass_reps if pass_reps is None else pass_reps

    proposed: dict[str, float] = dict(profile.training_maxes)
    performance: dict[str, LiftPerformance] = {}

    for lift in LIFTS:
        current = profile.training_max(lift)
        week3 = find_week3_session(profile, history, lift)
        reps = (
            best_qualifying_reps(week3, current, settings.qualifying_fraction)
            if week3 is not None
            else 0
        )

        if profile.progression_scheme == "Performance":
            passed = week3 is None or reps >= threshold
        else:
            passed = True

        performance[lift] = LiftPerformance(
            reps_achieved=reps,
            passed=passed,
            week3_found=week3 is not None,
        )
        increment = tm_increment(lift, profile.unit, settings) if passed else 0
        proposed[lift] = current + increment

    return CycleProposal(
        next_cycle=profile.current_cycle + 1,
        proposed_training_maxes=proposed,
        per_lift_performance=performance,
    )


def confirm_cycle_transition(
    profile: TrainingProfile,
    new_training_maxes: dict[str, float],
    next_cycle: int,
    history: Sequence[WorkoutSession] = (),
) -> TrainingProfile:
    """
    Apply a (possibly edited) proposal and start the next cycle.

    Sets the new training maxes, moves to week 1 of next_cycle and
    re-evaluates achievements against the advanced profile so that
    cycle-count milestones unlock at the transition.  A failure in the
    achievement step is reported as a warning and leaves achievements as
    they were.

    Raises:
        InvalidDomainValue: If next_cycle < 1 or a key is not a lift
    """
    if next_cycle < 1:
        raise InvalidDomainValue("next_cycle must be >= 1")

    merged = dict(profile.training_maxes)
    merged.update(new_training_maxes)
    advanced = with_advanced_cycle(profile, merged, next_cycle)

    try:
        result = evaluate_achievements(advanced, history)
    except Exception as exc:
        warnings.warn(f"lift531: achievement evaluation failed: {exc}", stacklevel=2)
        return advanced

    if result.newly_unlocked is None:
        return advanced
    return with_unlocked_achievements(advanced, result.achievements)


# =============================================================================
# Week advancement
# =============================================================================

def completed_lifts_this_week(
    profile: TrainingProfile,
    history: Sequence[WorkoutSession],
) -> list[str]:
    """Lifts with a strength session logged at the profile's current cycle/week."""
    done: list[str] = []
    for session in relevant_history(history, profile.id):
        if (
            session.type != "Conditioning"
            and session.cycle == profile.current_cycle
            and session.week == profile.current_week
            and session.lift in LIFTS
            and session.lift not in done
        ):
            done.append(session.lift)
    return done


def is_week_complete(profile: TrainingProfile, history: Sequence[WorkoutSession]) -> bool:
    """True once all four lifts have a session logged this week."""
    done = completed_lifts_this_week(profile, history)
    return all(lift in done for lift in LIFTS)


def is_cycle_complete(profile: TrainingProfile, history: Sequence[WorkoutSession]) -> bool:
    """True when the deload week is finished and a cycle transition is due."""
    return profile.current_week == DELOAD_WEEK and is_week_complete(profile, history)


def advance_week(profile: TrainingProfile) -> TrainingProfile:
    """
    Move to the next week of the current cycle (1 -> 2 -> 3 -> 4).

    Raises:
        InvalidDomainValue: On week 4; the next step is a cycle transition
    """
    if profile.current_week >= WEEKS_PER_CYCLE:
        raise InvalidDomainValue(
            "Week 4 is the last week of the cycle; run a cycle transition instead"
        )
    return with_advanced_week(profile, profile.current_week + 1)


def effective_lift_order(profile: TrainingProfile) -> list[str]:
    """The profile's lift order when it names every lift exactly once, else LIFTS."""
    order = profile.lift_order
    if order and len(order) == len(LIFTS) and set(order) == set(LIFTS):
        return list(order)
    return list(LIFTS)


def next_lift(profile: TrainingProfile, history: Sequence[WorkoutSession]) -> str | None:
    """First lift in the effective order not yet trained this week, or None."""
    done = completed_lifts_this_week(profile, history)
    for lift in effective_lift_order(profile):
        if lift not in done:
            return lift
    return None
