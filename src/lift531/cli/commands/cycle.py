"""Progression commands: advance-week, cycle."""

from typing import Annotated, Optional

import typer

from ...core.achievements import ACHIEVEMENTS_BY_ID
from ...core.config import DELOAD_WEEK
from ...core.metrics import reset_training_max
from ...core.models import InvalidDomainValue
from ...core.progression import (
    advance_week as advance_profile_week,
    completed_lifts_this_week,
    confirm_cycle_transition,
    is_week_complete,
    propose_cycle_transition,
)
from ...io.serializers import ValidationError, parse_override
from .. import views
from ..app import DataDirOption, app, get_store, lift_or_exit, load_state_or_exit


@app.command("advance-week")
def advance_week(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Advance even if lifts are missing this week"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Move to the next week of the current cycle."""
    store = get_store(data_dir)
    profile, history = load_state_or_exit(store)

    if profile.current_week == DELOAD_WEEK:
        views.print_error("Week 4 is the last week of the cycle.")
        views.print_info("Run 'lift531 cycle' to review training maxes and start the next cycle.")
        raise typer.Exit(1)

    if not force and not is_week_complete(profile, history):
        done = completed_lifts_this_week(profile, history)
        views.print_warning(f"Only {len(done)} of 4 lifts logged this week.")
        if not views.confirm_action("Advance anyway?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    try:
        updated = advance_profile_week(profile)
    except InvalidDomainValue as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.save_profile(updated)
    label = " (deload)" if updated.current_week == DELOAD_WEEK else ""
    views.print_success(f"Now on cycle {updated.current_cycle}, week {updated.current_week}{label}.")


@app.command()
def cycle(
    apply: Annotated[
        bool,
        typer.Option("--apply", help="Confirm the proposal and start the next cycle"),
    ] = False,
    override: Annotated[
        Optional[list[str]],
        typer.Option("--override", "-o", help="LIFT=TM to replace a proposed value (repeatable)"),
    ] = None,
    reset: Annotated[
        Optional[list[str]],
        typer.Option("--reset", help="Apply a -10% reset to LIFT instead of the proposal (repeatable)"),
    ] = None,
    pass_reps: Annotated[
        Optional[int],
        typer.Option("--pass-reps", help="Week-3 reps needed to progress (Performance scheme)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Review the cycle and propose next-cycle training maxes.

    Without --apply this only prints the report card.

      lift531 cycle
      lift531 cycle --override "Squat=305" --reset bench --apply
    """
    store = get_store(data_dir)
    profile, history = load_state_or_exit(store)

    if profile.current_week != DELOAD_WEEK and not apply:
        views.print_warning(
            f"You are on week {profile.current_week}; the cycle normally ends after week 4."
        )

    proposal = propose_cycle_transition(profile, history, pass_reps=pass_reps)

    try:
        for item in override or []:
            lift_text, value = parse_override(item)
            proposal.override(lift_or_exit(lift_text), value)
        for lift_text in reset or []:
            name = lift_or_exit(lift_text)
            proposal.override(name, reset_training_max(profile.training_max(name)))
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_proposal(proposal, profile)

    if not apply:
        views.print_info("Run again with --apply to start the next cycle with these maxes.")
        return

    updated = confirm_cycle_transition(
        profile,
        proposal.proposed_training_maxes,
        proposal.next_cycle,
        history=history,
    )
    store.save_profile(updated)
    views.print_success(f"Started cycle {updated.current_cycle}, week 1.")

    for achievement_id in sorted(updated.achievements - profile.achievements):
        achievement = ACHIEVEMENTS_BY_ID.get(achievement_id)
        views.print_success(
            f"Achievement unlocked: {achievement.name if achievement else achievement_id}"
        )
