"""
Workout generator.

Turns a profile plus training history into one fully pre-populated
WorkoutSession: a Main exercise (warmups then the three work sets), the
program's Supplemental exercise if any, then Assistance exercises.

Generation never mutates the profile and never checks premium access;
callers gate premium programs before calling generate_workout().
"""

import uuid
from datetime import date as _date
from typing import Sequence

from .config import AMRAP_SET_INDEX, AMRAP_WEEK
from .metrics import calculate_weight
from .models import (
    CONDITIONING_LIFT,
    ConditioningData,
    Exercise,
    SetData,
    TrainingProfile,
    WorkoutSession,
)
from .programs import build_supplemental
from .schedule import EffectiveSchedule, resolve_schedule


def _new_session_id() -> str:
    return uuid.uuid4().hex


def _today() -> str:
    return _date.today().isoformat()


def get_last_used_weight(history: Sequence[WorkoutSession], exercise_name: str) -> float:
    """
    Most recent completed weight used for an exercise name.

    Sessions are searched from newest (end of history) to oldest.  Within
    the first session holding a matching exercise that has a completed set
    with weight > 0, the last such set wins.

    Args:
        history: Sessions in append order
        exercise_name: Exact exercise name, e.g. "Leg Press"

    Returns:
        Weight, or 0 if the exercise was never performed with load
    """
    for session in reversed(history):
        ex = next((e for e in session.exercises if e.name == exercise_name), None)
        if ex is None:
            continue
        for s in reversed(ex.sets):
            if s.completed and s.weight > 0:
                return s.weight
    return 0.0


def build_main_exercise(schedule: EffectiveSchedule, training_max: float) -> Exercise:
    """Warmup sets followed by the week's three work sets, as one Main exercise."""
    sets: list[SetData] = []
    for warmup in schedule.warmups:
        sets.append(
            SetData(
                reps=warmup.reps,
                weight=calculate_weight(training_max, warmup.percentage, schedule.rounding),
                is_warmup=True,
                actual_reps=warmup.reps,
            )
        )

    for idx, (pct, reps) in enumerate(zip(schedule.percentages, schedule.reps)):
        sets.append(
            SetData(
                reps=reps,
                weight=calculate_weight(training_max, pct, schedule.rounding),
                is_amrap=schedule.week == AMRAP_WEEK and idx == AMRAP_SET_INDEX,
                actual_reps=reps,
            )
        )

    return Exercise(name=schedule.lift, type="Main", sets=sets)


def build_assistance_exercises(
    schedule: EffectiveSchedule,
    history: Sequence[WorkoutSession],
) -> list[Exercise]:
    """One Assistance exercise per selected name, loaded at its last used weight."""
    exercises = []
    for name in schedule.selected_assistance:
        weight = get_last_used_weight(history, name)
        exercises.append(
            Exercise(
                name=name,
                type="Assistance",
                sets=[
                    SetData(
                        reps=schedule.assistance_reps,
                        weight=weight,
                        actual_reps=schedule.assistance_reps,
                    )
                    for _ in range(schedule.assistance_sets)
                ],
            )
        )
    return exercises


def generate_workout(
    profile: TrainingProfile,
    lift: str,
    history: Sequence[WorkoutSession],
    date: str | None = None,
    session_id: str | None = None,
) -> WorkoutSession:
    """
    Generate the prescribed session for lift at the profile's current week.

    Args:
        profile: Lifter profile
        lift: Lift to train
        history: Prior sessions, oldest first (drives assistance weights)
        date: ISO date for the session (default: today)
        session_id: Explicit id (default: random)

    Returns:
        WorkoutSession with every set completed=False

    Raises:
        InvalidDomainValue: If lift or the profile's week is invalid
    """
    schedule = resolve_schedule(profile, lift)
    training_max = profile.training_max(lift)

    exercises = [build_main_exercise(schedule, training_max)]

    supplemental = build_supplemental(schedule.program, lift, training_max, schedule)
    if supplemental is not None:
        exercises.append(supplemental)

    exercises.extend(build_assistance_exercises(schedule, history))

    return WorkoutSession(
        id=session_id or _new_session_id(),
        date=date or _today(),
        title=f"C{profile.current_cycle} W{profile.current_week} - {lift}",
        cycle=profile.current_cycle,
        week=profile.current_week,
        lift=lift,
        type="Strength",
        exercises=exercises,
        completed=False,
        duration_seconds=0,
        program_type=profile.selected_program,
        profile_id=profile.id,
    )


def build_conditioning_session(
    profile: TrainingProfile,
    data: ConditioningData,
    date: str | None = None,
    session_id: str | None = None,
) -> WorkoutSession:
    """
    Create a completed conditioning session at the profile's current position.

    Conditioning sessions hold no exercises and never affect maxes.
    """
    return WorkoutSession(
        id=session_id or _new_session_id(),
        date=date or _today(),
        title=data.activity,
        cycle=profile.current_cycle,
        week=profile.current_week,
        lift=CONDITIONING_LIFT,
        type="Conditioning",
        exercises=[],
        completed=True,
        duration_seconds=data.duration_seconds,
        notes=data.notes,
        program_type=profile.selected_program,
        profile_id=profile.id,
        conditioning=data,
    )
