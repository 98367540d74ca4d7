"""
Configuration constants for the 5/3/1 programming engine.

All fixed schedule tables and default values are centralized here.
Tunable progression parameters can additionally be overridden through
engine.yaml (see core/engine/config_loader.py).
"""

from typing import Final

# =============================================================================
# MAIN-LIFT SCHEDULE (percentages of training max, reps per set)
# =============================================================================

WEEK_PERCENTAGES: Final[dict[int, tuple[float, float, float]]] = {
    1: (0.65, 0.75, 0.85),  # 5/5/5+
    2: (0.70, 0.80, 0.90),  # 3/3/3+
    3: (0.75, 0.85, 0.95),  # 5/3/1+
    4: (0.40, 0.50, 0.60),  # Deload
}

WEEK_REPS: Final[dict[int, tuple[int, int, int]]] = {
    1: (5, 5, 5),
    2: (3, 3, 3),
    3: (5, 3, 1),
    4: (5, 5, 5),
}

AMRAP_WEEK: Final[int] = 3
AMRAP_SET_INDEX: Final[int] = 2
DELOAD_WEEK: Final[int] = 4
WEEKS_PER_CYCLE: Final[int] = 4

# =============================================================================
# WARMUP
# =============================================================================

# (percentage, reps) per set
DEFAULT_WARMUP: Final[tuple[tuple[float, int], ...]] = (
    (0.40, 5),
    (0.50, 5),
    (0.60, 3),
)

# =============================================================================
# ASSISTANCE
# =============================================================================

DEFAULT_ASSISTANCE_SETS: Final[int] = 3
DEFAULT_ASSISTANCE_REPS: Final[int] = 10

DEFAULT_ASSISTANCE: Final[dict[str, tuple[str, ...]]] = {
    "Squat": ("Leg Press", "Leg Curls", "Abs"),
    "Bench Press": ("Dumbbell Row", "Tricep Pushdowns", "Face Pulls"),
    "Deadlift": ("Good Mornings", "Hanging Leg Raise", "Back Extensions"),
    "Overhead Press": ("Chin-ups", "Dips", "Lateral Raises"),
}

ASSISTANCE_TEMPLATES: Final[dict[str, dict[str, tuple[str, ...]]]] = {
    "Balanced": DEFAULT_ASSISTANCE,
    "Bodyweight": {
        "Squat": ("Lunges", "Plank"),
        "Bench Press": ("Push-ups", "Pull-ups"),
        "Deadlift": ("Back Extensions", "Hanging Leg Raise"),
        "Overhead Press": ("Chin-ups", "Dips"),
    },
    "Minimalist": {
        "Squat": ("Abs",),
        "Bench Press": ("Barbell Row",),
        "Deadlift": ("Abs",),
        "Overhead Press": ("Chin-ups",),
    },
    "Bodybuilder": {
        "Squat": ("Leg Press", "Leg Curls", "Bulgarian Split Squat", "Abs"),
        "Bench Press": ("Incline Dumbbell Press", "Dumbbell Row", "Tricep Pushdowns", "Bicep Curls"),
        "Deadlift": ("Good Mornings", "Lunges", "Lat Pulldowns", "Back Extensions"),
        "Overhead Press": ("Dips", "Lateral Raises", "Face Pulls", "Tricep Pushdowns"),
    },
}

# =============================================================================
# ROUNDING
# =============================================================================

DEFAULT_ROUNDING: Final[dict[str, float]] = {
    "lbs": 5.0,
    "kg": 2.5,
}

# =============================================================================
# TRAINING MAX
# =============================================================================

TM_FACTOR: Final[float] = 0.90  # Training max as fraction of 1RM
TM_RESET_FACTOR: Final[float] = 0.90  # Manual -10% reset on a stalled lift
EPLEY_DIVISOR: Final[float] = 30.0

DEFAULT_TRAINING_MAXES: Final[dict[str, float]] = {
    "Squat": 225,
    "Bench Press": 135,
    "Deadlift": 275,
    "Overhead Press": 95,
}

# =============================================================================
# CYCLE PROGRESSION
# =============================================================================

LOWER_BODY_LIFTS: Final[frozenset[str]] = frozenset({"Squat", "Deadlift"})

# unit -> (upper-body increment, lower-body increment)
TM_INCREMENTS: Final[dict[str, tuple[float, float]]] = {
    "lbs": (5.0, 10.0),
    "kg": (2.5, 5.0),
}

PERFORMANCE_PASS_REPS: Final[int] = 3  # Week-3 best reps needed to progress
PERFORMANCE_QUALIFYING_FRACTION: Final[float] = 0.90  # Set must be >= 90% TM to count

# =============================================================================
# ACHIEVEMENTS
# =============================================================================

CONSISTENCY_SESSIONS: Final[int] = 10
COMMITTED_SESSIONS: Final[int] = 50

# unit -> threshold
SQUAT_MILESTONE: Final[dict[str, float]] = {"lbs": 225, "kg": 100}
BENCH_MILESTONE: Final[dict[str, float]] = {"lbs": 135, "kg": 60}
DEADLIFT_MILESTONE: Final[dict[str, float]] = {"lbs": 315, "kg": 140}
TOTAL_MILESTONE: Final[dict[str, float]] = {"lbs": 1000, "kg": 450}

# =============================================================================
# PLATES
# =============================================================================

PLATES: Final[dict[str, tuple[float, ...]]] = {
    "lbs": (45, 35, 25, 10, 5, 2.5),
    "kg": (25, 20, 15, 10, 5, 2.5, 1.25),
}

BAR_WEIGHT: Final[dict[str, float]] = {
    "lbs": 45,
    "kg": 20,
}

# =============================================================================
# STRENGTH STANDARDS (1RM / bodyweight ratio thresholds)
# =============================================================================

STRENGTH_LEVELS: Final[tuple[str, ...]] = (
    "Untrained",
    "Beginner",
    "Novice",
    "Intermediate",
    "Advanced",
    "Elite",
)

STRENGTH_RATIOS: Final[dict[str, tuple[float, ...]]] = {
    "Squat": (0.75, 1.0, 1.5, 2.0, 2.5),
    "Bench Press": (0.5, 0.75, 1.0, 1.5, 2.0),
    "Deadlift": (1.0, 1.25, 1.75, 2.25, 2.75),
    "Overhead Press": (0.35, 0.5, 0.7, 0.9, 1.15),
}

# =============================================================================
# CONDITIONING
# =============================================================================

CONDITIONING_ACTIVITIES: Final[tuple[str, ...]] = (
    "Running",
    "Weighted Walk / Ruck",
    "Prowler / Sled",
    "Hill Sprints",
    "Assault Bike",
    "Rowing",
    "Jump Rope",
    "Cycling",
    "Swimming",
    "Walking",
)
