"""
Effective schedule resolution.

Every optional profile setting is resolved against its default exactly once,
before any set is computed.  The generator then works only from the
EffectiveSchedule and never consults the profile's optional fields itself.
"""

from dataclasses import dataclass

from .config import (
    DEFAULT_ASSISTANCE,
    DEFAULT_ASSISTANCE_REPS,
    DEFAULT_ASSISTANCE_SETS,
    DEFAULT_ROUNDING,
    DEFAULT_WARMUP,
    WEEK_PERCENTAGES,
    WEEK_REPS,
)
from .models import TrainingProfile, WarmupSet, validate_lift, validate_week
from .programs import ProgramDefinition, get_program


@dataclass(frozen=True)
class EffectiveSchedule:
    """Fully resolved prescription parameters for one lift in one week."""

    lift: str
    week: int
    percentages: tuple[float, ...]
    reps: tuple[int, ...]
    warmups: tuple[WarmupSet, ...]
    rounding: float
    program: ProgramDefinition
    assistance_names: tuple[str, ...]
    assistance_count: int
    assistance_sets: int
    assistance_reps: int

    @property
    def selected_assistance(self) -> tuple[str, ...]:
        """Assistance names to prescribe: the first max(count, configured) names."""
        return self.assistance_names[: self.assistance_count]


def _week_override(table: dict[int, list] | None, week: int) -> list | None:
    """Return table[week] if it holds a populated 3-entry list, else None."""
    if not table:
        return None
    entry = table.get(week)
    if entry is None:
        # JSON round-trips turn week keys into strings
        entry = table.get(str(week))  # type: ignore[call-overload]
    if entry and len(entry) == 3:
        return list(entry)
    return None


def resolve_rounding(profile: TrainingProfile) -> float:
    """Profile rounding when positive, else the unit default (5 lbs, 2.5 kg)."""
    if profile.rounding and profile.rounding > 0:
        return float(profile.rounding)
    return DEFAULT_ROUNDING[profile.unit]


def resolve_schedule(profile: TrainingProfile, lift: str) -> EffectiveSchedule:
    """
    Resolve the prescription parameters for lift at the profile's current week.

    Args:
        profile: Lifter profile, possibly missing optional settings
        lift: Lift to resolve

    Returns:
        EffectiveSchedule with every default applied

    Raises:
        InvalidDomainValue: If lift or the profile's week is invalid
    """
    validate_lift(lift)
    week = validate_week(profile.current_week)
    program = get_program(profile.selected_program)

    custom_pct = _week_override(profile.custom_percentages, week)
    custom_reps = _week_override(profile.custom_reps, week)
    percentages = tuple(float(p) for p in custom_pct) if custom_pct else WEEK_PERCENTAGES[week]
    reps = tuple(int(r) for r in custom_reps) if custom_reps else WEEK_REPS[week]

    if profile.warmup_settings:
        warmups = tuple(profile.warmup_settings)
    else:
        warmups = tuple(WarmupSet(pct, r) for pct, r in DEFAULT_WARMUP)

    if profile.custom_assistance is not None and lift in profile.custom_assistance:
        names = tuple(profile.custom_assistance[lift])
    else:
        names = tuple(DEFAULT_ASSISTANCE.get(lift, ()))

    settings = profile.assistance_settings
    assistance_sets = (settings.sets if settings and settings.sets else DEFAULT_ASSISTANCE_SETS)
    assistance_reps = (settings.reps if settings and settings.reps else DEFAULT_ASSISTANCE_REPS)

    return EffectiveSchedule(
        lift=lift,
        week=week,
        percentages=percentages,
        reps=reps,
        warmups=warmups,
        rounding=resolve_rounding(profile),
        program=program,
        assistance_names=names,
        assistance_count=max(program.assistance_count, len(names)),
        assistance_sets=assistance_sets,
        assistance_reps=assistance_reps,
    )
