"""Profile commands: init, show-profile, set-tm, settings."""

from dataclasses import replace
from typing import Annotated, Optional

import typer

from ...core.config import ASSISTANCE_TEMPLATES, DEFAULT_ROUNDING, DEFAULT_TRAINING_MAXES
from ...core.metrics import (
    initial_training_maxes,
    reset_training_max,
    scale_training_maxes,
    training_max_from_reps,
)
from ...core.models import (
    LIFTS,
    PROGRAMS,
    PROGRESSION_SCHEMES,
    UNITS,
    AssistanceSettings,
    InvalidDomainValue,
    TrainingProfile,
    with_training_maxes,
)
from ...core.programs import get_program
from ...core.schedule import resolve_rounding
from ...io.serializers import (
    ValidationError,
    parse_name_list,
    parse_warmup_string,
    parse_week_values,
)
from .. import views
from ..app import DataDirOption, app, get_store, lift_or_exit, load_state_or_exit


@app.command()
def init(
    data_dir: DataDirOption = None,
    name: Annotated[str, typer.Option("--name", "-n", help="Lifter name")] = "",
    unit: Annotated[str, typer.Option("--unit", "-u", help="Weight unit: lbs or kg")] = "lbs",
    rounding: Annotated[
        Optional[float],
        typer.Option("--rounding", "-r", help="Round weights to this increment (default 5 lbs / 2.5 kg)"),
    ] = None,
    squat: Annotated[Optional[float], typer.Option("--squat", help="Squat 1RM")] = None,
    bench: Annotated[Optional[float], typer.Option("--bench", help="Bench Press 1RM")] = None,
    deadlift: Annotated[Optional[float], typer.Option("--deadlift", help="Deadlift 1RM")] = None,
    press: Annotated[Optional[float], typer.Option("--press", help="Overhead Press 1RM")] = None,
    program: Annotated[
        str,
        typer.Option("--program", "-p", help=f"Program: {', '.join(PROGRAMS)}"),
    ] = "Original",
    scheme: Annotated[
        str,
        typer.Option("--scheme", help="Progression scheme: Standard or Performance"),
    ] = "Standard",
    bodyweight: Annotated[
        float,
        typer.Option("--bodyweight", "-w", help="Bodyweight (for strength standards)"),
    ] = 0.0,
    premium: Annotated[bool, typer.Option("--premium", help="Unlock premium programs")] = False,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing profile without prompting"),
    ] = False,
) -> None:
    """
    Initialize the lifter profile and an empty history.

    Training maxes are seeded at 90% of each one-rep max given.  Lifts
    without a 1RM start from a default training max.

      lift531 init --squat 315 --bench 225 --deadlift 405 --press 135
    """
    store = get_store(data_dir)

    if unit not in UNITS:
        views.print_error("Unit must be 'lbs' or 'kg'")
        raise typer.Exit(1)

    if store.exists() and not force:
        views.print_warning(f"A profile already exists at {store.profile_path}.")
        if not views.confirm_action("Overwrite it? History is kept"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    given = {"Squat": squat, "Bench Press": bench, "Deadlift": deadlift, "Overhead Press": press}
    one_rep_maxes: dict[str, float] = {}
    for lift, value in given.items():
        if value is not None and value < 0:
            views.print_error(f"{lift} 1RM must be non-negative")
            raise typer.Exit(1)
        one_rep_maxes[lift] = value if value is not None else DEFAULT_TRAINING_MAXES[lift]

    training_maxes = initial_training_maxes(one_rep_maxes)
    for lift, value in given.items():
        if value is None:
            training_maxes[lift] = DEFAULT_TRAINING_MAXES[lift]

    try:
        profile = TrainingProfile(
            name=name,
            body_weight=bodyweight,
            unit=unit,  # type: ignore[arg-type]
            rounding=rounding if rounding is not None else DEFAULT_ROUNDING[unit],
            training_maxes=training_maxes,
            one_rep_maxes=one_rep_maxes,
            selected_program=program,  # type: ignore[arg-type]
            progression_scheme=scheme,  # type: ignore[arg-type]
            is_premium=premium,
        )
    except (InvalidDomainValue, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    existing_sessions = len(store.load_history()) if store.history_path.exists() else 0
    store.init(profile)

    views.print_success(f"Initialized profile at {store.profile_path}")
    if existing_sessions:
        views.print_info(f"Kept existing history with {existing_sessions} sessions")
    else:
        views.print_success(f"History file: {store.history_path}")
    views.print_profile(profile, get_program(profile.selected_program))


@app.command("show-profile")
def show_profile(data_dir: DataDirOption = None) -> None:
    """Show cycle position, program and training maxes."""
    store = get_store(data_dir)
    profile, _ = load_state_or_exit(store)
    views.print_profile(profile, get_program(profile.selected_program))


@app.command("set-tm")
def set_tm(
    lift: Annotated[Optional[str], typer.Argument(help="Lift, e.g. squat, bench, deadlift, ohp")] = None,
    value: Annotated[Optional[float], typer.Argument(help="New training max (or rep-max weight with --reps)")] = None,
    reps: Annotated[
        Optional[int],
        typer.Option("--reps", help="Treat VALUE as a weight lifted for this many reps"),
    ] = None,
    reset: Annotated[bool, typer.Option("--reset", help="Apply a -10% reset to LIFT")] = False,
    scale: Annotated[
        Optional[float],
        typer.Option("--scale", help="Scale every training max to this percent, e.g. 90"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Change training maxes.

      lift531 set-tm squat 300            set directly
      lift531 set-tm bench 205 --reps 5   from a 5-rep max (Epley, 90%)
      lift531 set-tm deadlift --reset     -10% on a stalled lift
      lift531 set-tm --scale 90           all lifts to 90% of current
    """
    store = get_store(data_dir)
    profile, _ = load_state_or_exit(store)
    maxes = dict(profile.training_maxes)

    if scale is not None:
        if scale <= 0:
            views.print_error("Scale percent must be positive")
            raise typer.Exit(1)
        maxes = scale_training_maxes(maxes, scale)
    elif lift is None:
        views.print_error("Give a LIFT, or --scale for all lifts")
        raise typer.Exit(1)
    else:
        name = lift_or_exit(lift)
        if reset:
            maxes[name] = reset_training_max(profile.training_max(name))
        elif value is None:
            views.print_error("Give a VALUE, or --reset")
            raise typer.Exit(1)
        elif value < 0:
            views.print_error("Training max must be non-negative")
            raise typer.Exit(1)
        elif reps is not None:
            if reps < 1:
                views.print_error("--reps must be at least 1")
                raise typer.Exit(1)
            maxes[name] = training_max_from_reps(value, reps, resolve_rounding(profile))
        else:
            maxes[name] = value

    profile = with_training_maxes(profile, maxes)
    store.save_profile(profile)

    for name in LIFTS:
        views.console.print(
            f"  {name}: {views.format_weight(profile.training_max(name), profile.unit)}"
        )
    views.print_success("Training maxes updated.")


@app.command()
def settings(
    program: Annotated[Optional[str], typer.Option("--program", "-p", help=f"Program: {', '.join(PROGRAMS)}")] = None,
    scheme: Annotated[Optional[str], typer.Option("--scheme", help=f"Progression: {', '.join(PROGRESSION_SCHEMES)}")] = None,
    unit: Annotated[Optional[str], typer.Option("--unit", "-u", help="Weight unit: lbs or kg")] = None,
    rounding: Annotated[Optional[float], typer.Option("--rounding", "-r", help="Rounding increment")] = None,
    bodyweight: Annotated[Optional[float], typer.Option("--bodyweight", "-w", help="Bodyweight")] = None,
    premium: Annotated[Optional[bool], typer.Option("--premium/--no-premium", help="Premium access")] = None,
    assistance_sets: Annotated[Optional[int], typer.Option("--assistance-sets", help="Sets per assistance exercise")] = None,
    assistance_reps: Annotated[Optional[int], typer.Option("--assistance-reps", help="Reps per assistance set")] = None,
    assistance: Annotated[
        Optional[list[str]],
        typer.Option("--assistance", "-a", help="LIFT=Exercise,Exercise (repeatable)"),
    ] = None,
    template: Annotated[
        Optional[str],
        typer.Option("--template", help=f"Assistance template: {', '.join(ASSISTANCE_TEMPLATES)}"),
    ] = None,
    warmup: Annotated[Optional[str], typer.Option("--warmup", help="Warmup scheme, e.g. 0.4x5,0.5x5,0.6x3")] = None,
    percentages: Annotated[
        Optional[list[str]],
        typer.Option("--percentages", help="WEEK=p1,p2,p3 custom main percentages (repeatable)"),
    ] = None,
    week_reps: Annotated[
        Optional[list[str]],
        typer.Option("--reps", help="WEEK=r1,r2,r3 custom main reps (repeatable)"),
    ] = None,
    lift_order: Annotated[Optional[str], typer.Option("--lift-order", help="Comma-separated lift order")] = None,
    clear_custom: Annotated[
        bool,
        typer.Option("--clear-custom", help="Drop custom percentages, reps, warmups and assistance"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Change program, progression and customization settings."""
    store = get_store(data_dir)
    profile, _ = load_state_or_exit(store)
    changes: dict = {}

    try:
        if clear_custom:
            changes.update(
                custom_percentages=None,
                custom_reps=None,
                custom_assistance=None,
                warmup_settings=None,
            )
        if program is not None:
            changes["selected_program"] = get_program(program).program_id
        if scheme is not None:
            changes["progression_scheme"] = scheme
        if unit is not None:
            changes["unit"] = unit
            if unit != profile.unit and unit in DEFAULT_ROUNDING:
                changes["rounding"] = DEFAULT_ROUNDING[unit]
        if rounding is not None:
            changes["rounding"] = rounding
        if bodyweight is not None:
            changes["body_weight"] = bodyweight
        if premium is not None:
            changes["is_premium"] = premium

        if assistance_sets is not None or assistance_reps is not None:
            current = profile.assistance_settings or AssistanceSettings()
            changes["assistance_settings"] = AssistanceSettings(
                sets=assistance_sets if assistance_sets is not None else current.sets,
                reps=assistance_reps if assistance_reps is not None else current.reps,
            )

        if template is not None:
            if template not in ASSISTANCE_TEMPLATES:
                raise ValidationError(
                    f"Unknown template '{template}'. Valid: {', '.join(ASSISTANCE_TEMPLATES)}"
                )
            changes["custom_assistance"] = {
                lift: list(names) for lift, names in ASSISTANCE_TEMPLATES[template].items()
            }
        if assistance:
            custom = dict(changes.get("custom_assistance") or profile.custom_assistance or {})
            for item in assistance:
                lift_text, names = parse_name_list(item)
                custom[lift_or_exit(lift_text)] = names
            changes["custom_assistance"] = custom

        if warmup is not None:
            changes["warmup_settings"] = parse_warmup_string(warmup)

        if percentages:
            table = dict(changes.get("custom_percentages") or profile.custom_percentages or {})
            for item in percentages:
                week, values = parse_week_values(item, float)
                table[week] = values
            changes["custom_percentages"] = table
        if week_reps:
            table = dict(changes.get("custom_reps") or profile.custom_reps or {})
            for item in week_reps:
                week, values = parse_week_values(item, int)
                table[week] = values
            changes["custom_reps"] = table

        if lift_order is not None:
            changes["lift_order"] = [lift_or_exit(p) for p in lift_order.split(",") if p.strip()]

        if not changes:
            views.print_info("Nothing to change.")
            raise typer.Exit(0)

        updated = replace(profile, **changes)
    except (ValidationError, InvalidDomainValue, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.save_profile(updated)
    views.print_success("Settings updated.")
    views.print_profile(updated, get_program(updated.selected_program))
