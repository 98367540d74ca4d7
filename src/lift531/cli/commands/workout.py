"""Workout commands: workout, log-workout, log-conditioning, history, delete-session."""

import json
from typing import Annotated, Optional

import typer

from ...core.achievements import ACHIEVEMENTS_BY_ID
from ...core.completion import process_finished_session
from ...core.config import CONDITIONING_ACTIVITIES, DELOAD_WEEK
from ...core.generator import build_conditioning_session, generate_workout
from ...core.models import ConditioningData, TrainingProfile, WorkoutSession
from ...core.programs import get_program, requires_premium
from ...core.progression import is_week_complete, next_lift
from ...core.summary import workout_summary
from ...io.serializers import (
    ValidationError,
    parse_name_list,
    parse_reps_string,
    session_to_dict,
    validate_date,
)
from .. import views
from ..app import DataDirOption, app, get_store, lift_or_exit, load_state_or_exit


def _pick_lift(lift: str | None, profile: TrainingProfile, history: list[WorkoutSession]) -> str:
    """Explicit lift, else the next lift not yet trained this week."""
    if lift is not None:
        return lift_or_exit(lift)
    chosen = next_lift(profile, history)
    if chosen is None:
        views.print_info("All four lifts are done this week.")
        if profile.current_week == DELOAD_WEEK:
            views.print_info("Run 'lift531 cycle' to review and start the next cycle.")
        else:
            views.print_info("Run 'lift531 advance-week' to move on.")
        raise typer.Exit(0)
    return chosen


def _check_premium(profile: TrainingProfile) -> None:
    if requires_premium(profile):
        program = get_program(profile.selected_program)
        views.print_error(f"{program.display_name} requires premium access.")
        views.print_info("Enable it with 'lift531 settings --premium' or pick another program.")
        raise typer.Exit(1)


@app.command()
def workout(
    lift: Annotated[Optional[str], typer.Argument(help="Lift (default: next lift this week)")] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Show the prescribed workout for a lift at the current week."""
    store = get_store(data_dir)
    profile, history = load_state_or_exit(store)
    _check_premium(profile)
    chosen = _pick_lift(lift, profile, history)

    session = generate_workout(profile, chosen, history)

    if json_out:
        print(json.dumps(session_to_dict(session), indent=2))
        return

    views.print_workout(session, profile)


def _mark_completed(
    session: WorkoutSession,
    main_reps: list[int] | None,
    amrap: int | None,
    assistance_weights: dict[str, float],
    skip_supplemental: bool,
    skip_assistance: bool,
) -> None:
    """Mark a freshly generated session as performed, in place."""
    for ex in session.exercises:
        if ex.type == "Supplemental" and skip_supplemental:
            continue
        if ex.type == "Assistance" and skip_assistance:
            continue
        if ex.type == "Assistance" and ex.name in assistance_weights:
            for s in ex.sets:
                s.weight = assistance_weights[ex.name]

        work_index = 0
        for s in ex.sets:
            s.completed = True
            if ex.type != "Main" or s.is_warmup:
                continue
            if main_reps is not None and work_index < len(main_reps):
                s.actual_reps = main_reps[work_index]
            if s.is_amrap and amrap is not None:
                s.actual_reps = amrap
            work_index += 1
        ex.completed = True
    session.completed = True


@app.command("log-workout")
def log_workout(
    lift: Annotated[Optional[str], typer.Argument(help="Lift (default: next lift this week)")] = None,
    amrap: Annotated[
        Optional[int],
        typer.Option("--amrap", "-a", help="Reps performed on the AMRAP (week 3 plus) set"),
    ] = None,
    reps: Annotated[
        Optional[str],
        typer.Option("--reps", help="Reps performed on the main work sets, e.g. 5,5,8"),
    ] = None,
    assistance_weight: Annotated[
        Optional[list[str]],
        typer.Option("--assistance-weight", "-W", help="EXERCISE=WEIGHT (repeatable)"),
    ] = None,
    skip_supplemental: Annotated[
        bool, typer.Option("--skip-supplemental", help="Supplemental work not done")
    ] = False,
    skip_assistance: Annotated[
        bool, typer.Option("--skip-assistance", help="Assistance work not done")
    ] = False,
    date: Annotated[Optional[str], typer.Option("--date", help="Date (YYYY-MM-DD), default today")] = None,
    minutes: Annotated[int, typer.Option("--minutes", "-m", help="Session duration in minutes")] = 0,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Session notes")] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Log the prescribed workout as performed.

    Every set of the generated session is marked completed; use --reps and
    --amrap to record what you actually did on the main work sets.

      lift531 log-workout squat --amrap 8
      lift531 log-workout bench --reps 5,5,3 -W "Dumbbell Row=60"
    """
    store = get_store(data_dir)
    profile, history = load_state_or_exit(store)
    _check_premium(profile)
    chosen = _pick_lift(lift, profile, history)

    try:
        if date is not None:
            validate_date(date)
        main_reps = parse_reps_string(reps) if reps is not None else None
        weights: dict[str, float] = {}
        for item in assistance_weight or []:
            name, values = parse_name_list(item)
            if len(values) != 1:
                raise ValidationError(f"Use EXERCISE=WEIGHT, got '{item}'")
            weights[name] = float(values[0])
            if weights[name] < 0:
                raise ValidationError(f"Weight must be non-negative: '{item}'")
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if amrap is not None and amrap < 0:
        views.print_error("AMRAP reps must be non-negative")
        raise typer.Exit(1)

    session = generate_workout(profile, chosen, history, date=date)
    _mark_completed(session, main_reps, amrap, weights, skip_supplemental, skip_assistance)
    session.duration_seconds = max(0, minutes) * 60
    session.notes = notes

    result = process_finished_session(profile, history, session)
    store.append_session(result.history[-1])
    store.save_profile(result.profile)

    views.print_workout(result.history[-1], result.profile)
    views.print_success(f"Logged {chosen} for cycle {session.cycle}, week {session.week}.")

    old_max = profile.one_rep_max(chosen)
    new_max = result.profile.one_rep_max(chosen)
    if new_max > old_max:
        views.print_success(
            f"New estimated 1RM for {chosen}: {views.format_weight(new_max, profile.unit)}"
        )

    if result.newly_unlocked is not None:
        achievement = ACHIEVEMENTS_BY_ID.get(result.newly_unlocked)
        label = achievement.name if achievement else result.newly_unlocked
        views.print_success(f"Achievement unlocked: {label}")

    if is_week_complete(result.profile, result.history):
        if result.profile.current_week == DELOAD_WEEK:
            views.print_info("Cycle finished. Run 'lift531 cycle' to review training maxes.")
        else:
            views.print_info("Week complete. Run 'lift531 advance-week' to move on.")


@app.command("log-conditioning")
def log_conditioning(
    activity: Annotated[
        str,
        typer.Option("--activity", help=f"Activity, e.g. {', '.join(CONDITIONING_ACTIVITIES[:3])}"),
    ] = "Running",
    minutes: Annotated[int, typer.Option("--minutes", "-m", help="Duration in minutes")] = 20,
    intensity: Annotated[str, typer.Option("--intensity", help="Easy, Moderate or Hard")] = "Moderate",
    distance: Annotated[Optional[float], typer.Option("--distance", help="Distance covered")] = None,
    distance_unit: Annotated[str, typer.Option("--distance-unit", help="mi, km or m")] = "mi",
    date: Annotated[Optional[str], typer.Option("--date", help="Date (YYYY-MM-DD), default today")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Session notes")] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Log a conditioning (cardio) session."""
    store = get_store(data_dir)
    profile, _ = load_state_or_exit(store)

    if distance_unit not in ("mi", "km", "m"):
        views.print_error("Distance unit must be mi, km or m")
        raise typer.Exit(1)
    try:
        if date is not None:
            validate_date(date)
        data = ConditioningData(
            activity=activity,
            duration_seconds=minutes * 60,
            intensity=intensity,  # type: ignore[arg-type]
            distance=distance,
            distance_unit=distance_unit if distance is not None else None,
            notes=notes,
        )
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    session = build_conditioning_session(profile, data, date=date)
    store.append_session(session)
    views.print_success(f"Logged {activity}: {minutes} min ({intensity}).")


@app.command()
def history(
    limit: Annotated[int, typer.Option("--limit", "-l", help="Show only the last N sessions (0 = all)")] = 0,
    share: Annotated[
        Optional[str],
        typer.Option("--share", "-s", help="Print a text summary of one session (id or unique prefix)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Show training history, or a shareable summary of one session."""
    store = get_store(data_dir)
    profile, sessions = load_state_or_exit(store)

    if share is not None:
        target = _find_session(sessions, share)
        print(workout_summary(target, profile.unit))
        return

    if limit > 0:
        sessions = sessions[-limit:]
    views.print_history(sessions, profile.unit)


def _find_session(sessions: list[WorkoutSession], session_id: str) -> WorkoutSession:
    """Session matching an id prefix; exits with an error unless exactly one matches."""
    matches = [s for s in sessions if s.id.startswith(session_id)]
    if not matches:
        views.print_error(f"No session with id '{session_id}'")
        raise typer.Exit(1)
    if len(matches) > 1:
        views.print_error(f"Id prefix '{session_id}' matches {len(matches)} sessions")
        raise typer.Exit(1)
    return matches[0]


@app.command("delete-session")
def delete_session(
    session_id: Annotated[str, typer.Argument(help="Session id (or unique prefix, see 'history')")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Do not ask for confirmation")] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Delete one session from history."""
    store = get_store(data_dir)
    _, sessions = load_state_or_exit(store)

    target = _find_session(sessions, session_id)
    if not force and not views.confirm_action(f"Delete {target.title} ({target.date})?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_session(target.id)
    views.print_success(f"Deleted {target.title} ({target.date}).")
