"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workouts, history and progression.
"""

from rich.console import Console
from rich.table import Table

from ..core.achievements import ACHIEVEMENTS
from ..core.metrics import PersonalRecord, StrengthLevel, TrendPoint, session_volume
from ..core.models import LIFTS, TrainingProfile, WorkoutSession
from ..core.programs import ProgramDefinition
from ..core.progression import CycleProposal

console = Console()


def format_weight(weight: float, unit: str) -> str:
    """150.0 -> "150 lbs", 102.5 -> "102.5 kg"."""
    text = f"{weight:g}"
    return f"{text} {unit}"


def _set_kind(s) -> str:
    if s.is_warmup:
        return "warmup"
    if s.is_amrap:
        return "[bold magenta]AMRAP[/bold magenta]"
    return "work"


def format_workout_table(session: WorkoutSession, unit: str) -> Table:
    """
    Create a Rich table listing every set of a prescribed or logged session.

    Args:
        session: Session to display
        unit: Weight unit label

    Returns:
        Rich Table object
    """
    table = Table(title=session.title)

    table.add_column("Exercise", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Set", justify="right", style="dim", width=3)
    table.add_column("Weight", justify="right", style="bold")
    table.add_column("Reps", justify="right")
    table.add_column("Done", justify="center")

    for ex in session.exercises:
        for i, s in enumerate(ex.sets, 1):
            reps = f"{s.reps}+" if s.is_amrap else str(s.reps)
            if s.completed and s.actual_reps is not None and s.actual_reps != s.reps:
                reps = f"{s.actual_reps} ({reps})"
            table.add_row(
                ex.name if i == 1 else "",
                _set_kind(s) if ex.type == "Main" else ex.type.lower(),
                str(i),
                format_weight(s.weight, unit) if s.weight > 0 else "-",
                reps,
                "[green]✓[/green]" if s.completed else "",
            )

    return table


def print_workout(session: WorkoutSession, profile: TrainingProfile) -> None:
    """Print a prescribed session with its context line."""
    console.print(format_workout_table(session, profile.unit))
    tm = profile.training_max(session.lift)
    console.print(
        f"[dim]Program: {session.program_type}  |  "
        f"Training max: {format_weight(tm, profile.unit)}[/dim]"
    )


def format_history_table(sessions: list[WorkoutSession], unit: str) -> Table:
    """
    Create a Rich table displaying session history.

    Args:
        sessions: List of sessions to display
        unit: Weight unit label

    Returns:
        Rich Table object
    """
    table = Table(title="Training History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("C/W", justify="center")
    table.add_column("Lift", style="magenta")
    table.add_column("Top set", justify="right", style="bold")
    table.add_column("Volume", justify="right")
    table.add_column("ID", style="dim")

    for i, session in enumerate(sessions, 1):
        if session.type == "Conditioning" and session.conditioning is not None:
            minutes = session.conditioning.duration_seconds // 60
            top = f"{minutes} min"
            volume = "-"
        else:
            main = session.main_exercise()
            work = [s for s in (main.completed_sets if main else []) if not s.is_warmup]
            if work:
                best = max(work, key=lambda s: (s.weight, s.performed_reps))
                top = f"{best.weight:g} x {best.performed_reps}"
            else:
                top = "-"
            volume = f"{session_volume(session):,.0f}"

        table.add_row(
            str(i),
            session.date,
            f"C{session.cycle}W{session.week}",
            session.lift,
            top,
            volume,
            session.id[:8],
        )

    return table


def print_history(sessions: list[WorkoutSession], unit: str) -> None:
    """
    Print session history to console.

    Args:
        sessions: Sessions to display
        unit: Weight unit label
    """
    if not sessions:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    console.print(format_history_table(sessions, unit))


def print_profile(profile: TrainingProfile, program: ProgramDefinition) -> None:
    """Print the profile summary: position, program and maxes."""
    console.print()
    title = profile.name or profile.id
    console.print(f"[bold cyan]{title}[/bold cyan]")
    week_label = "Deload" if profile.current_week == 4 else "Training"
    console.print(
        f"Cycle {profile.current_cycle}, Week {profile.current_week} ({week_label})"
    )
    premium = " [yellow](premium)[/yellow]" if program.is_premium else ""
    console.print(
        f"Program: {program.display_name}{premium}  |  "
        f"Supplemental: {program.supplemental_label}  |  "
        f"Progression: {profile.progression_scheme}"
    )

    table = Table(show_header=True, header_style="dim")
    table.add_column("Lift", style="cyan")
    table.add_column("Training max", justify="right", style="bold")
    table.add_column("1RM", justify="right")
    for lift in LIFTS:
        table.add_row(
            lift,
            format_weight(profile.training_max(lift), profile.unit),
            format_weight(profile.one_rep_max(lift), profile.unit),
        )
    console.print(table)


def print_proposal(proposal: CycleProposal, profile: TrainingProfile) -> None:
    """Print the cycle report card: week-3 results and proposed training maxes."""
    table = Table(title=f"Cycle {profile.current_cycle} Report Card")
    table.add_column("Lift", style="cyan")
    table.add_column("Week 3 best", justify="right")
    table.add_column("Result")
    table.add_column("Current TM", justify="right")
    table.add_column("New TM", justify="right", style="bold")
    table.add_column("Change", justify="right")

    for lift in LIFTS:
        perf = proposal.per_lift_performance[lift]
        old = profile.training_max(lift)
        new = proposal.proposed_training_maxes.get(lift, old)
        diff = new - old
        if not perf.week3_found:
            result = "[dim]no data (pass)[/dim]"
        elif perf.passed:
            result = "[green]pass[/green]"
        else:
            result = "[red]stall[/red]"
        table.add_row(
            lift,
            f"{perf.reps_achieved} reps" if perf.reps_achieved > 0 else "-",
            result,
            format_weight(old, profile.unit),
            format_weight(new, profile.unit),
            f"[green]+{diff:g}[/green]" if diff > 0 else (f"[red]{diff:g}[/red]" if diff < 0 else "0"),
        )

    console.print(table)


def print_personal_records(lift: str, records: dict[int, PersonalRecord], unit: str) -> None:
    table = Table(title=f"{lift} Personal Records")
    table.add_column("Reps", justify="right", style="cyan")
    table.add_column("Best weight", justify="right", style="bold")
    table.add_column("Date")
    for bracket, record in records.items():
        table.add_row(
            f"{bracket}+",
            format_weight(record.weight, unit) if record.weight > 0 else "-",
            record.date,
        )
    console.print(table)


def print_volume(volumes: dict[str, float], unit: str) -> None:
    """Print tonnage per cycle/week with a simple bar."""
    if not volumes:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    peak = max(volumes.values()) or 1.0
    table = Table(title="Volume by Week")
    table.add_column("Week", style="cyan")
    table.add_column(f"Tonnage ({unit})", justify="right", style="bold")
    table.add_column("")
    for key, volume in volumes.items():
        bar = "█" * int(round(volume / peak * 30))
        table.add_row(key, f"{volume:,.0f}", f"[green]{bar}[/green]")
    console.print(table)


def print_trend(lift: str, points: list[TrendPoint], unit: str) -> None:
    if not points:
        console.print(f"[yellow]No {lift} sessions recorded yet.[/yellow]")
        return
    table = Table(title=f"{lift} Estimated 1RM")
    table.add_column("Date", style="cyan")
    table.add_column("e1RM", justify="right", style="bold")
    for p in points:
        table.add_row(p.date, format_weight(p.estimated_1rm, unit) if p.estimated_1rm else "-")
    console.print(table)


def print_strength_levels(levels: dict[str, StrengthLevel], unit: str) -> None:
    table = Table(title="Strength Standards")
    table.add_column("Lift", style="cyan")
    table.add_column("Level", style="bold")
    table.add_column("xBW", justify="right")
    table.add_column("Next target", justify="right")
    table.add_column("Progress", justify="right")
    for lift, level in levels.items():
        table.add_row(
            lift,
            level.level,
            f"{level.ratio:.2f}",
            format_weight(level.next_target, unit) if level.next_target else "-",
            f"{level.progress:.0f}%",
        )
    console.print(table)


def print_plates(target: float, plates: list[float], bar: float, loaded: float, unit: str) -> None:
    """Print the per-side plate list for a target weight."""
    console.print(f"[bold]{format_weight(target, unit)}[/bold]  (bar {format_weight(bar, unit)})")
    if not plates:
        console.print("[dim]Empty bar.[/dim]")
    else:
        per_side = " + ".join(f"{p:g}" for p in plates)
        console.print(f"Per side: [cyan]{per_side}[/cyan]")
    if loaded != target:
        print_warning(f"Closest loadable weight is {format_weight(loaded, unit)}")


def print_achievements(profile: TrainingProfile) -> None:
    table = Table(title="Achievements")
    table.add_column("", justify="center", width=2)
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for a in ACHIEVEMENTS:
        unlocked = a.id in profile.achievements
        table.add_row(
            "[green]★[/green]" if unlocked else "[dim]·[/dim]",
            a.name if unlocked else f"[dim]{a.name}[/dim]",
            a.description,
        )
    console.print(table)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
