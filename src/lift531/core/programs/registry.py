"""
Program registry.

All supported 5/3/1 variants are registered here.  Use get_program() to
look up a ProgramDefinition by its program_id string.

Programs are loaded from per-program YAML files in the bundled
``src/lift531/programs/`` directory at import time.  If no definition can
be loaded a RuntimeError is raised: the engine cannot generate workouts
without them.

User overrides: place matching files in ``~/.lift531/programs/``.

Supplemental work is produced through SUPPLEMENTAL_BUILDERS, a dispatch
table keyed by ProgramDefinition.supplemental_style.  Adding a variant is a
YAML addition; adding a new supplemental shape is one builder function.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from ..metrics import calculate_weight
from ..models import Exercise, InvalidDomainValue, SetData, TrainingProfile
from .base import ProgramDefinition

if TYPE_CHECKING:
    from ..schedule import EffectiveSchedule


def _build_registry() -> dict[str, ProgramDefinition]:
    from .loader import load_programs_from_yaml

    loaded = load_programs_from_yaml()
    if not loaded:
        raise RuntimeError(
            "lift531: no program definitions could be loaded from YAML. "
            "Check that src/lift531/programs/*.yaml files are present and valid."
        )
    return loaded


PROGRAM_REGISTRY: dict[str, ProgramDefinition] = _build_registry()


def get_program(program_id: str) -> ProgramDefinition:
    """
    Return the ProgramDefinition for the given program_id.

    Args:
        program_id: One of "Original", "BBB", "FSL", "Beginner", "BBS", "Monolith"

    Returns:
        ProgramDefinition for the requested program

    Raises:
        InvalidDomainValue: If program_id is not in the registry
    """
    if program_id not in PROGRAM_REGISTRY:
        valid = ", ".join(PROGRAM_REGISTRY)
        raise InvalidDomainValue(f"Unknown program '{program_id}'. Valid IDs: {valid}")
    return PROGRAM_REGISTRY[program_id]


def requires_premium(profile: TrainingProfile) -> bool:
    """
    True if the profile's selected program is premium-gated and the profile
    has no premium entitlement.

    Generation itself never checks this; callers do, before generating.
    """
    return get_program(profile.selected_program).is_premium and not profile.is_premium


# =============================================================================
# Supplemental dispatch table
# =============================================================================

SupplementalBuilder = Callable[
    [ProgramDefinition, str, float, "EffectiveSchedule"], "Exercise | None"
]


def _supplemental_exercise(
    program: ProgramDefinition,
    lift: str,
    weight: float,
) -> Exercise:
    sets = program.sets_for(lift)
    reps = program.supplemental_reps
    return Exercise(
        name=f"{lift} ({program.supplemental_suffix})",
        type="Supplemental",
        sets=[
            SetData(reps=reps, weight=weight, actual_reps=reps)
            for _ in range(sets)
        ],
    )


def _build_none(
    program: ProgramDefinition,
    lift: str,
    training_max: float,
    schedule: EffectiveSchedule,
) -> Exercise | None:
    return None


def _build_fixed_percent(
    program: ProgramDefinition,
    lift: str,
    training_max: float,
    schedule: EffectiveSchedule,
) -> Exercise | None:
    """Sets at a fixed fraction of training max (Boring But Big: 5x10 @ 50%)."""
    weight = calculate_weight(training_max, program.supplemental_percent, schedule.rounding)
    return _supplemental_exercise(program, lift, weight)


def _build_first_set(
    program: ProgramDefinition,
    lift: str,
    training_max: float,
    schedule: EffectiveSchedule,
) -> Exercise | None:
    """Sets at the week's first main-set percentage (First Set Last)."""
    weight = calculate_weight(training_max, schedule.percentages[0], schedule.rounding)
    return _supplemental_exercise(program, lift, weight)


SUPPLEMENTAL_BUILDERS: dict[str, SupplementalBuilder] = {
    "none": _build_none,
    "fixed_percent": _build_fixed_percent,
    "first_set": _build_first_set,
}


def build_supplemental(
    program: ProgramDefinition,
    lift: str,
    training_max: float,
    schedule: EffectiveSchedule,
) -> Exercise | None:
    """
    Build the Supplemental exercise for one session, or None.

    Args:
        program: Program variant definition
        lift: Lift the session trains
        training_max: Training max for the lift (0 yields 0-weight sets)
        schedule: Resolved schedule supplying percentages and rounding

    Returns:
        Supplemental Exercise, or None when the variant has no supplemental work
    """
    builder = SUPPLEMENTAL_BUILDERS[program.supplemental_style]
    return builder(program, lift, training_max, schedule)
