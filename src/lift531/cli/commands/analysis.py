"""Analysis and data commands: prs, volume, trend, strength, plates, achievements, export, import."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.config import BAR_WEIGHT
from ...core.metrics import (
    estimated_1rm_trend,
    personal_records,
    strength_level,
    volume_by_week,
)
from ...core.models import LIFTS, UNITS, relevant_history
from ...core.plates import calculate_plates, loaded_weight
from ...io.serializers import ValidationError
from .. import views
from ..app import DataDirOption, app, get_store, lift_or_exit, load_state_or_exit


@app.command()
def prs(
    lift: Annotated[str, typer.Argument(help="Lift, e.g. squat")],
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Heaviest weight lifted for 1, 3, 5 and 10+ reps."""
    store = get_store(data_dir)
    profile, history = load_state_or_exit(store)
    name = lift_or_exit(lift)

    records = personal_records(relevant_history(history, profile.id), name)

    if json_out:
        print(json.dumps({
            "lift": name,
            "records": {
                str(bracket): {"weight": r.weight, "date": r.date}
                for bracket, r in records.items()
            },
        }, indent=2))
        return

    views.print_personal_records(name, records, profile.unit)


@app.command()
def volume(
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Tonnage (weight x reps of completed sets) per cycle/week."""
    store = get_store(data_dir)
    profile, history = load_state_or_exit(store)

    volumes = volume_by_week(relevant_history(history, profile.id))

    if json_out:
        print(json.dumps({"weeks": volumes}, indent=2))
        return

    views.print_volume(volumes, profile.unit)


@app.command()
def trend(
    lift: Annotated[str, typer.Argument(help="Lift, e.g. deadlift")],
    data_dir: DataDirOption = None,
) -> None:
    """Best estimated 1RM per session for a lift."""
    store = get_store(data_dir)
    profile, history = load_state_or_exit(store)
    name = lift_or_exit(lift)

    points = estimated_1rm_trend(relevant_history(history, profile.id), name)
    views.print_trend(name, points, profile.unit)


@app.command()
def strength(data_dir: DataDirOption = None) -> None:
    """Classify each 1RM against bodyweight strength standards."""
    store = get_store(data_dir)
    profile, _ = load_state_or_exit(store)

    if profile.body_weight <= 0:
        views.print_error("Bodyweight not set.")
        views.print_info("Set it with 'lift531 settings --bodyweight N'.")
        raise typer.Exit(1)

    levels = {
        lift: strength_level(lift, profile.one_rep_max(lift), profile.body_weight)
        for lift in LIFTS
    }
    views.print_strength_levels(levels, profile.unit)


@app.command()
def plates(
    weight: Annotated[float, typer.Argument(help="Target bar weight")],
    unit: Annotated[Optional[str], typer.Option("--unit", "-u", help="lbs or kg (default: profile unit)")] = None,
    bar: Annotated[Optional[float], typer.Option("--bar", help="Bar weight override")] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Plates to load on each side of the bar."""
    if unit is None:
        store = get_store(data_dir)
        unit = load_state_or_exit(store)[0].unit if store.exists() else "lbs"
    if unit not in UNITS:
        views.print_error("Unit must be 'lbs' or 'kg'")
        raise typer.Exit(1)

    bar_weight = BAR_WEIGHT[unit] if bar is None else bar
    per_side = calculate_plates(weight, unit, bar_weight=bar_weight)
    loaded = loaded_weight(per_side, bar_weight) if weight >= bar_weight else bar_weight
    views.print_plates(weight, per_side, bar_weight, loaded, unit)


@app.command()
def achievements(data_dir: DataDirOption = None) -> None:
    """List milestones and which are unlocked."""
    store = get_store(data_dir)
    profile, _ = load_state_or_exit(store)
    views.print_achievements(profile)


@app.command()
def export(
    path: Annotated[Path, typer.Argument(help="Output JSON file")],
    data_dir: DataDirOption = None,
) -> None:
    """Export profile and history to one JSON document."""
    store = get_store(data_dir)
    load_state_or_exit(store)

    count = store.export_document(path)
    views.print_success(f"Exported profile and {count} sessions to {path}")


@app.command("import")
def import_data(
    path: Annotated[Path, typer.Argument(help="JSON document written by 'export'")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace existing data without prompting"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Replace profile and history with an exported document."""
    store = get_store(data_dir)

    if not path.exists():
        views.print_error(f"File not found: {path}")
        raise typer.Exit(1)

    if store.exists() and not force:
        views.print_warning(f"This replaces the profile and history in {store.data_dir}.")
        if not views.confirm_action("Continue?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    try:
        profile, count = store.import_document(path)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Imported profile '{profile.name or profile.id}' and {count} sessions.")
