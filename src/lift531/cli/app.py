"""Shared Typer app object, shared option types, and store utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import LIFTS, InvalidDomainValue, TrainingProfile, WorkoutSession
from ..io.profile_store import ProfileStore, get_default_data_dir
from ..io.serializers import ValidationError
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Directory holding profile.json and history.jsonl"),
]

app = typer.Typer(
    name="lift531",
    help="5/3/1 strength program tracker: workouts, progression and milestones.",
    no_args_is_help=True,
)

# Short names accepted on the command line
LIFT_ALIASES: dict[str, str] = {
    "squat": "Squat",
    "sq": "Squat",
    "bench": "Bench Press",
    "bench press": "Bench Press",
    "bp": "Bench Press",
    "deadlift": "Deadlift",
    "dl": "Deadlift",
    "overhead press": "Overhead Press",
    "press": "Overhead Press",
    "ohp": "Overhead Press",
}


def get_store(data_dir: Path | None) -> ProfileStore:
    """Get profile store from path or the default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return ProfileStore(data_dir)


def resolve_lift(text: str) -> str:
    """
    Map user input ("bench", "OHP", "Squat") to a lift name.

    Raises:
        InvalidDomainValue: If the text names no lift
    """
    if text in LIFTS:
        return text
    key = text.strip().lower()
    if key in LIFT_ALIASES:
        return LIFT_ALIASES[key]
    raise InvalidDomainValue(
        f"Unknown lift {text!r}. Valid lifts: {', '.join(LIFTS)}"
    )


def lift_or_exit(text: str) -> str:
    """resolve_lift() for commands: prints the error and exits with code 1."""
    try:
        return resolve_lift(text)
    except InvalidDomainValue as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def load_state_or_exit(store: ProfileStore) -> tuple[TrainingProfile, list[WorkoutSession]]:
    """Load profile and history, or print the problem and exit with code 1."""
    if not store.exists():
        views.print_error(f"Profile not found: {store.profile_path}")
        views.print_info("Run 'init' first to create profile.")
        raise typer.Exit(1)
    try:
        return store.load_profile(), store.load_history()
    except (ValidationError, InvalidDomainValue) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
