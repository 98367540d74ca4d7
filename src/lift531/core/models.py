"""
Data models for lift531.

All core dataclasses representing the training profile, prescribed and
completed sessions, and their sets.  Lift, program and unit identities are
closed sets of plain strings; values outside those sets raise
InvalidDomainValue.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Literal, Sequence

LiftType = Literal["Squat", "Bench Press", "Deadlift", "Overhead Press"]
ProgramType = Literal["Original", "BBB", "FSL", "Beginner", "BBS", "Monolith"]
ProgressionScheme = Literal["Standard", "Performance"]
Unit = Literal["lbs", "kg"]
ExerciseType = Literal["Main", "Supplemental", "Assistance"]
SessionKind = Literal["Strength", "Conditioning"]
Intensity = Literal["Easy", "Moderate", "Hard"]

LIFTS: tuple[str, ...] = ("Squat", "Bench Press", "Deadlift", "Overhead Press")
PROGRAMS: tuple[str, ...] = ("Original", "BBB", "FSL", "Beginner", "BBS", "Monolith")
PROGRESSION_SCHEMES: tuple[str, ...] = ("Standard", "Performance")
UNITS: tuple[str, ...] = ("lbs", "kg")
WEEKS: tuple[int, ...] = (1, 2, 3, 4)
CONDITIONING_LIFT = "Conditioning"
ROOT_PROFILE_ID = "root"


class InvalidDomainValue(ValueError):
    """Raised when a value falls outside one of the closed domain sets."""

    pass


def validate_lift(lift: str) -> str:
    """
    Validate a lift identifier.

    Args:
        lift: Lift name, e.g. "Squat" or "Bench Press"

    Returns:
        The lift if valid

    Raises:
        InvalidDomainValue: If lift is not one of the four tracked lifts
    """
    if lift not in LIFTS:
        raise InvalidDomainValue(
            f"Unknown lift {lift!r}. Valid lifts: {', '.join(LIFTS)}"
        )
    return lift


def validate_week(week: int) -> int:
    """
    Validate a week number within the 4-week cycle.

    Raises:
        InvalidDomainValue: If week is not 1, 2, 3 or 4
    """
    if isinstance(week, bool) or week not in WEEKS:
        raise InvalidDomainValue(f"Invalid week {week!r}. Must be one of 1-4")
    return int(week)


@dataclass
class SetData:
    """
    A single set within an exercise.

    The generator pre-fills actual_reps with the target; the lifter edits it
    (AMRAP sets in particular) and flips completed when the set is done.
    """

    reps: int
    weight: float
    completed: bool = False
    is_amrap: bool = False
    is_warmup: bool = False
    actual_reps: int | None = None
    rpe: float | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.actual_reps is not None and self.actual_reps < 0:
            raise ValueError("actual_reps must be non-negative")

    @property
    def performed_reps(self) -> int:
        """Reps to credit this set with: actual_reps when reported, else the target."""
        return self.actual_reps if self.actual_reps is not None else self.reps


@dataclass
class Exercise:
    """One exercise (main lift, supplemental or assistance) and its sets."""

    name: str
    type: ExerciseType
    sets: list[SetData] = field(default_factory=list)
    completed: bool = False
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.type not in ("Main", "Supplemental", "Assistance"):
            raise ValueError(f"Invalid exercise type: {self.type}")

    @property
    def completed_sets(self) -> list[SetData]:
        return [s for s in self.sets if s.completed]


@dataclass
class ConditioningData:
    """Details of a conditioning (cardio) session."""

    activity: str
    duration_seconds: int
    intensity: Intensity = "Moderate"
    distance: float | None = None
    distance_unit: str | None = None  # "mi" | "km" | "m"
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")
        if self.intensity not in ("Easy", "Moderate", "Hard"):
            raise ValueError(f"Invalid intensity: {self.intensity}")


@dataclass
class WorkoutSession:
    """
    One prescribed or completed training session.

    A Strength session holds exactly one Main exercise named after the lift,
    at most one Supplemental exercise and any number of Assistance exercises.
    Conditioning sessions hold no exercises.
    """

    id: str
    date: str  # ISO format: YYYY-MM-DD
    title: str
    cycle: int
    week: int
    lift: str  # LiftType or "Conditioning"
    type: SessionKind = "Strength"
    exercises: list[Exercise] = field(default_factory=list)
    completed: bool = False
    duration_seconds: int = 0
    notes: str | None = None
    program_type: str = "N/A"
    profile_id: str | None = None
    conditioning: ConditioningData | None = None

    def __post_init__(self) -> None:
        if self.type not in ("Strength", "Conditioning"):
            raise ValueError(f"Invalid session type: {self.type}")

    def main_exercise(self) -> Exercise | None:
        """Return the Main exercise named after the session's lift, if any."""
        for ex in self.exercises:
            if ex.type == "Main" and ex.name == self.lift:
                return ex
        return None

    def exercises_of_type(self, exercise_type: str) -> list[Exercise]:
        return [ex for ex in self.exercises if ex.type == exercise_type]


@dataclass(frozen=True)
class WarmupSet:
    """One warmup set: fraction of training max and reps."""

    percentage: float
    reps: int


@dataclass(frozen=True)
class AssistanceSettings:
    """Uniform sets x reps applied to every assistance exercise."""

    sets: int = 3
    reps: int = 10


@dataclass
class TrainingProfile:
    """
    Lifter profile: maxes, position in the cycle and program customizations.

    ``custom_percentages`` / ``custom_reps`` map week number to a 3-entry list
    that fully replaces the default scheme for that week.  ``custom_assistance``
    maps lift to an ordered list of exercise names.  A ``rounding`` of 0
    means the unit default (5 lbs, 2.5 kg).  ``achievements`` only
    ever grows.
    """

    id: str = ROOT_PROFILE_ID
    name: str = ""
    body_weight: float = 0.0
    unit: Unit = "lbs"
    rounding: float = 0.0
    training_maxes: dict[str, float] = field(default_factory=dict)
    one_rep_maxes: dict[str, float] = field(default_factory=dict)
    current_cycle: int = 1
    current_week: int = 1
    selected_program: ProgramType = "Original"
    progression_scheme: ProgressionScheme = "Standard"
    custom_percentages: dict[int, list[float]] | None = None
    custom_reps: dict[int, list[int]] | None = None
    custom_assistance: dict[str, list[str]] | None = None
    assistance_settings: AssistanceSettings | None = None
    warmup_settings: list[WarmupSet] | None = None
    lift_order: list[str] | None = None
    achievements: set[str] = field(default_factory=set)
    is_premium: bool = False

    def __post_init__(self) -> None:
        """Validate profile data."""
        if self.body_weight < 0:
            raise ValueError("body_weight must be non-negative")
        if self.current_cycle < 1:
            raise InvalidDomainValue("current_cycle must be >= 1")
        validate_week(self.current_week)
        if self.selected_program not in PROGRAMS:
            raise InvalidDomainValue(
                f"Invalid selected_program: {self.selected_program!r}. "
                f"Must be one of {', '.join(PROGRAMS)}"
            )
        if self.progression_scheme not in PROGRESSION_SCHEMES:
            raise InvalidDomainValue(
                f"Invalid progression_scheme: {self.progression_scheme!r}"
            )
        if self.unit not in UNITS:
            raise InvalidDomainValue(f"Invalid unit: {self.unit!r}. Must be 'lbs' or 'kg'")
        for lift in (*self.training_maxes, *self.one_rep_maxes):
            validate_lift(lift)

    def training_max(self, lift: str) -> float:
        """Training max for the lift, 0 when the profile has no entry."""
        return self.training_maxes.get(lift) or 0

    def one_rep_max(self, lift: str) -> float:
        """Stored one-rep max for the lift, 0 when the profile has no entry."""
        return self.one_rep_maxes.get(lift) or 0


# ---------------------------------------------------------------------------
# Immutable profile updates
# ---------------------------------------------------------------------------

def with_updated_maxes(profile: TrainingProfile, one_rep_maxes: dict[str, float]) -> TrainingProfile:
    """Return a copy of profile with a new one-rep-max map."""
    return replace(profile, one_rep_maxes=dict(one_rep_maxes))


def with_training_maxes(profile: TrainingProfile, training_maxes: dict[str, float]) -> TrainingProfile:
    """Return a copy of profile with a new training-max map."""
    for lift in training_maxes:
        validate_lift(lift)
    return replace(profile, training_maxes=dict(training_maxes))


def with_advanced_cycle(
    profile: TrainingProfile,
    training_maxes: dict[str, float],
    next_cycle: int,
) -> TrainingProfile:
    """Return a copy of profile moved to week 1 of next_cycle with new training maxes."""
    for lift in training_maxes:
        validate_lift(lift)
    return replace(
        profile,
        training_maxes=dict(training_maxes),
        current_cycle=next_cycle,
        current_week=1,
    )


def with_advanced_week(profile: TrainingProfile, week: int) -> TrainingProfile:
    """Return a copy of profile positioned at the given week of its current cycle."""
    return replace(profile, current_week=validate_week(week))


def with_unlocked_achievements(profile: TrainingProfile, achievements: Iterable[str]) -> TrainingProfile:
    """Return a copy of profile whose achievement set also contains achievements."""
    return replace(profile, achievements=set(profile.achievements) | set(achievements))


# ---------------------------------------------------------------------------
# History attribution
# ---------------------------------------------------------------------------

def belongs_to(session: WorkoutSession, profile_id: str) -> bool:
    """
    True if session is attributed to profile_id.

    Sessions without a profile_id predate multi-profile support and belong
    to the root profile only.
    """
    if session.profile_id is None or session.profile_id == "":
        return profile_id == ROOT_PROFILE_ID
    return session.profile_id == profile_id


def relevant_history(
    history: Sequence[WorkoutSession],
    profile_id: str,
) -> list[WorkoutSession]:
    """Sessions in history attributed to profile_id, in their original order."""
    return [s for s in history if belongs_to(s, profile_id)]
