"""
JSON serialization for training data models.

Handles conversion between dataclasses and JSON-compatible dicts.  Keys
use the camelCase names of the persisted document format
(``trainingMaxes``, ``actualReps``, ``profileId`` ...), so profile.json,
history.jsonl and export documents share one shape.
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.models import (
    CONDITIONING_LIFT,
    LIFTS,
    WEEKS,
    AssistanceSettings,
    ConditioningData,
    Exercise,
    InvalidDomainValue,
    SetData,
    TrainingProfile,
    WarmupSet,
    WorkoutSession,
)

EXPORT_VERSION = 1


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


class InvalidDomainRecord(ValidationError, InvalidDomainValue):
    """Stored data names a lift, week or other closed-set value outside its domain."""

    pass


def rewrap_error(e: Exception, message: str) -> ValidationError:
    """Wrap e with context, keeping the domain-error kind when e is one."""
    if isinstance(e, InvalidDomainValue):
        return InvalidDomainRecord(message)
    return ValidationError(message)


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


# =============================================================================
# Sets and exercises
# =============================================================================

def set_to_dict(s: SetData) -> dict[str, Any]:
    """Convert SetData to a JSON-compatible dict; unset optionals are omitted."""
    d: dict[str, Any] = {
        "reps": s.reps,
        "weight": s.weight,
        "completed": s.completed,
        "isAmrap": s.is_amrap,
        "isWarmup": s.is_warmup,
    }
    if s.actual_reps is not None:
        d["actualReps"] = s.actual_reps
    if s.rpe is not None:
        d["rpe"] = s.rpe
    return d


def dict_to_set(data: dict[str, Any]) -> SetData:
    """
    Convert dict to SetData.

    Raises:
        ValidationError: If data is invalid
    """
    validate_non_negative(data.get("reps", 0), "reps")
    validate_non_negative(data.get("weight", 0), "weight")
    actual = data.get("actualReps")
    if actual is not None:
        validate_non_negative(actual, "actualReps")

    return SetData(
        reps=int(data.get("reps", 0)),
        weight=float(data.get("weight", 0.0)),
        completed=bool(data.get("completed", False)),
        is_amrap=bool(data.get("isAmrap", False)),
        is_warmup=bool(data.get("isWarmup", False)),
        actual_reps=int(actual) if actual is not None else None,
        rpe=float(data["rpe"]) if data.get("rpe") is not None else None,
    )


def exercise_to_dict(ex: Exercise) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": ex.name,
        "type": ex.type,
        "sets": [set_to_dict(s) for s in ex.sets],
        "completed": ex.completed,
    }
    if ex.notes:
        d["notes"] = ex.notes
    return d


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert dict to Exercise.

    Raises:
        ValidationError: If data is invalid
    """
    if data.get("type") not in ("Main", "Supplemental", "Assistance"):
        raise ValidationError(f"Invalid exercise type: {data.get('type')!r}")
    if not data.get("name"):
        raise ValidationError("Exercise name cannot be empty")

    return Exercise(
        name=str(data["name"]),
        type=data["type"],
        sets=[dict_to_set(s) for s in data.get("sets", [])],
        completed=bool(data.get("completed", False)),
        notes=data.get("notes"),
    )


# =============================================================================
# Sessions
# =============================================================================

def conditioning_to_dict(c: ConditioningData) -> dict[str, Any]:
    d: dict[str, Any] = {
        "activity": c.activity,
        "durationSeconds": c.duration_seconds,
        "intensity": c.intensity,
    }
    if c.distance is not None:
        d["distance"] = c.distance
        d["distanceUnit"] = c.distance_unit
    if c.notes:
        d["notes"] = c.notes
    return d


def dict_to_conditioning(data: dict[str, Any]) -> ConditioningData:
    validate_non_negative(data.get("durationSeconds", 0), "durationSeconds")
    if data.get("intensity", "Moderate") not in ("Easy", "Moderate", "Hard"):
        raise ValidationError(f"Invalid intensity: {data.get('intensity')!r}")

    return ConditioningData(
        activity=str(data.get("activity", "")),
        duration_seconds=int(data.get("durationSeconds", 0)),
        intensity=data.get("intensity", "Moderate"),
        distance=float(data["distance"]) if data.get("distance") is not None else None,
        distance_unit=data.get("distanceUnit"),
        notes=data.get("notes"),
    )


def session_to_dict(session: WorkoutSession) -> dict[str, Any]:
    """
    Convert WorkoutSession to JSON-compatible dict.

    Args:
        session: WorkoutSession to convert

    Returns:
        Dict representation
    """
    d: dict[str, Any] = {
        "id": session.id,
        "date": session.date,
        "title": session.title,
        "cycle": session.cycle,
        "week": session.week,
        "lift": session.lift,
        "type": session.type,
        "exercises": [exercise_to_dict(ex) for ex in session.exercises],
        "completed": session.completed,
        "durationSeconds": session.duration_seconds,
        "programType": session.program_type,
    }
    if session.notes:
        d["notes"] = session.notes
    if session.profile_id is not None:
        d["profileId"] = session.profile_id
    if session.conditioning is not None:
        d["conditioningData"] = conditioning_to_dict(session.conditioning)
    return d


def dict_to_session(data: dict[str, Any]) -> WorkoutSession:
    """
    Convert dict to WorkoutSession.

    Args:
        data: Dict representation

    Returns:
        WorkoutSession instance

    Raises:
        ValidationError: If data is invalid
    """
    for key in ("id", "date", "cycle", "week", "lift"):
        if key not in data:
            raise ValidationError(f"Session is missing '{key}'")
    if data.get("type", "Strength") not in ("Strength", "Conditioning"):
        raise ValidationError(f"Invalid session type: {data.get('type')!r}")
    if int(data["cycle"]) < 1:
        raise ValidationError(f"cycle must be >= 1, got {data['cycle']}")
    if int(data["week"]) not in WEEKS:
        raise InvalidDomainRecord(f"week must be 1-4, got {data['week']}")
    if data["lift"] not in LIFTS and data["lift"] != CONDITIONING_LIFT:
        raise InvalidDomainRecord(f"Unknown lift {data['lift']!r}")

    raw_conditioning = data.get("conditioningData")
    return WorkoutSession(
        id=str(data["id"]),
        date=str(data["date"]),
        title=str(data.get("title", "")),
        cycle=int(data["cycle"]),
        week=int(data["week"]),
        lift=str(data["lift"]),
        type=data.get("type", "Strength"),
        exercises=[dict_to_exercise(ex) for ex in data.get("exercises") or []],
        completed=bool(data.get("completed", False)),
        duration_seconds=int(data.get("durationSeconds", 0)),
        notes=data.get("notes"),
        program_type=str(data.get("programType", "N/A")),
        profile_id=data.get("profileId") or None,
        conditioning=dict_to_conditioning(raw_conditioning) if raw_conditioning else None,
    )


def session_to_json_line(session: WorkoutSession) -> str:
    """
    Serialize a session to a single JSON line.

    Returns:
        JSON string (single line, no trailing newline)
    """
    return json.dumps(session_to_dict(session), separators=(",", ":"))


def json_line_to_session(line: str) -> WorkoutSession:
    """
    Deserialize a JSON line to a WorkoutSession.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Session line must be a JSON object")

    return dict_to_session(data)


# =============================================================================
# Profile
# =============================================================================

def _week_table_to_dict(table: dict[int, list] | None) -> dict[str, list] | None:
    if table is None:
        return None
    return {str(week): list(values) for week, values in table.items()}


def _dict_to_week_table(raw: Any, cast: type) -> dict[int, list] | None:
    if not raw:
        return None
    if not isinstance(raw, dict):
        raise ValidationError("Week override tables must be objects keyed by week")
    return {int(week): [cast(v) for v in values] for week, values in raw.items()}


def profile_to_dict(profile: TrainingProfile) -> dict[str, Any]:
    """
    Convert TrainingProfile to JSON-compatible dict.

    Args:
        profile: TrainingProfile to convert

    Returns:
        Dict representation
    """
    d: dict[str, Any] = {
        "id": profile.id,
        "name": profile.name,
        "bodyWeight": profile.body_weight,
        "unit": profile.unit,
        "rounding": profile.rounding,
        "trainingMaxes": dict(profile.training_maxes),
        "oneRepMaxes": dict(profile.one_rep_maxes),
        "currentCycle": profile.current_cycle,
        "currentWeek": profile.current_week,
        "selectedProgram": profile.selected_program,
        "progressionScheme": profile.progression_scheme,
        "achievements": sorted(profile.achievements),
        "isPremium": profile.is_premium,
    }
    if profile.custom_percentages is not None:
        d["customPercentages"] = _week_table_to_dict(profile.custom_percentages)
    if profile.custom_reps is not None:
        d["customReps"] = _week_table_to_dict(profile.custom_reps)
    if profile.custom_assistance is not None:
        d["customAssistance"] = {k: list(v) for k, v in profile.custom_assistance.items()}
    if profile.assistance_settings is not None:
        d["assistanceSettings"] = {
            "sets": profile.assistance_settings.sets,
            "reps": profile.assistance_settings.reps,
        }
    if profile.warmup_settings is not None:
        d["warmupSettings"] = [
            {"percentage": w.percentage, "reps": w.reps} for w in profile.warmup_settings
        ]
    if profile.lift_order is not None:
        d["liftOrder"] = list(profile.lift_order)
    return d


def dict_to_profile(data: dict[str, Any]) -> TrainingProfile:
    """
    Convert dict to TrainingProfile.

    Optional settings that are absent (older documents) fall back to their
    defaults.  Warmup entries written with a ``percent`` key are accepted.

    Args:
        data: Dict representation

    Returns:
        TrainingProfile instance

    Raises:
        ValidationError: If data is invalid
    """
    try:
        raw_assist = data.get("assistanceSettings")
        assistance = (
            AssistanceSettings(sets=int(raw_assist["sets"]), reps=int(raw_assist["reps"]))
            if raw_assist
            else None
        )
        raw_warmups = data.get("warmupSettings")
        warmups = (
            [
                WarmupSet(
                    percentage=float(w.get("percentage", w.get("percent", 0.4))),
                    reps=int(w["reps"]),
                )
                for w in raw_warmups
            ]
            if raw_warmups
            else None
        )
        raw_custom = data.get("customAssistance")

        return TrainingProfile(
            id=str(data.get("id") or "root"),
            name=str(data.get("name", "")),
            body_weight=float(data.get("bodyWeight") or 0.0),
            unit=data.get("unit", "lbs"),
            rounding=float(data.get("rounding") or 0.0),
            training_maxes={k: float(v) for k, v in (data.get("trainingMaxes") or {}).items()},
            one_rep_maxes={k: float(v) for k, v in (data.get("oneRepMaxes") or {}).items()},
            current_cycle=int(data.get("currentCycle", 1)),
            current_week=int(data.get("currentWeek", 1)),
            selected_program=data.get("selectedProgram", "Original"),
            progression_scheme=data.get("progressionScheme", "Standard"),
            custom_percentages=_dict_to_week_table(data.get("customPercentages"), float),
            custom_reps=_dict_to_week_table(data.get("customReps"), int),
            custom_assistance=(
                {k: [str(n) for n in v] for k, v in raw_custom.items()}
                if raw_custom is not None
                else None
            ),
            assistance_settings=assistance,
            warmup_settings=warmups,
            lift_order=list(data["liftOrder"]) if data.get("liftOrder") else None,
            achievements=set(data.get("achievements") or []),
            is_premium=bool(data.get("isPremium", False)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise rewrap_error(e, f"Invalid profile: {e}") from e


# =============================================================================
# Export document
# =============================================================================

def export_to_dict(profile: TrainingProfile, history: list[WorkoutSession]) -> dict[str, Any]:
    """Build the {"version", "profile", "history"} export document."""
    return {
        "version": EXPORT_VERSION,
        "profile": profile_to_dict(profile),
        "history": [session_to_dict(s) for s in history],
    }


def dict_to_export(data: Any) -> tuple[TrainingProfile, list[WorkoutSession]]:
    """
    Parse an export document.

    Raises:
        ValidationError: If the document shape or any record is invalid
    """
    if not isinstance(data, dict) or "profile" not in data:
        raise ValidationError("Export document must be an object with a 'profile' key")
    version = data.get("version", EXPORT_VERSION)
    if version != EXPORT_VERSION:
        raise ValidationError(f"Unsupported export version: {version}")

    profile = dict_to_profile(data["profile"])
    history: list[WorkoutSession] = []
    for i, raw in enumerate(data.get("history") or []):
        try:
            history.append(dict_to_session(raw))
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            raise rewrap_error(e, f"history[{i}]: {e}") from e
    return profile, history


# =============================================================================
# CLI input parsing
# =============================================================================

def parse_reps_string(reps_str: str) -> list[int]:
    """
    Parse the reps performed on the main work sets.

    Formats (comma or space separated):
        "5,5,8"     three sets
        "5 5 8"     same, space separated
        "3x5"       N reps x M sets shorthand (5 sets of 3)

    Args:
        reps_str: Reps string to parse

    Returns:
        List of reps per set

    Raises:
        ValidationError: If format is invalid
    """
    if not reps_str or not reps_str.strip():
        raise ValidationError("Reps string cannot be empty")

    text = reps_str.strip()
    m = re.fullmatch(r"(\d+)\s*[xX×]\s*(\d+)", text)
    if m:
        n_reps, n_sets = int(m.group(1)), int(m.group(2))
        if n_sets < 1:
            raise ValidationError(f"Set count must be positive: {n_sets}")
        return [n_reps] * n_sets

    parts = [p for p in re.split(r"[,\s]+", text) if p]
    reps: list[int] = []
    for part in parts:
        if not re.fullmatch(r"\d+", part):
            raise ValidationError(
                f"Invalid reps value: '{part}'. Use e.g. 5,5,8 or 3x5."
            )
        reps.append(int(part))
    return reps


def parse_override(text: str) -> tuple[str, float]:
    """
    Parse a LIFT=TM override such as "Squat=305" or "Bench Press=200".

    Raises:
        ValidationError: If the value is not of the form NAME=NUMBER
    """
    m = re.fullmatch(r"\s*([A-Za-z ]+?)\s*=\s*([0-9]+(?:\.[0-9]+)?)\s*", text)
    if not m:
        raise ValidationError(f"Invalid override '{text}'. Use LIFT=TM, e.g. Squat=305")
    return m.group(1), float(m.group(2))


def parse_name_list(text: str) -> tuple[str, list[str]]:
    """
    Parse "NAME=a,b,c" into ("NAME", ["a", "b", "c"]).

    Used for assistance assignments such as "Squat=Leg Press,Lunges" and
    assistance weights such as "Leg Press=180".

    Raises:
        ValidationError: If there is no '=' or the name is empty
    """
    if "=" not in text:
        raise ValidationError(f"Invalid value '{text}'. Use NAME=VALUE[,VALUE...]")
    name, _, rest = text.partition("=")
    name = name.strip()
    if not name:
        raise ValidationError(f"Invalid value '{text}': name is empty")
    values = [v.strip() for v in rest.split(",") if v.strip()]
    return name, values


def parse_week_values(text: str, cast: type) -> tuple[int, list]:
    """
    Parse a per-week override such as "3=0.75,0.85,0.95" or "1=5,5,5".

    Returns:
        (week, three values cast with cast)

    Raises:
        ValidationError: If the week is not 1-4 or there are not exactly 3 values
    """
    name, values = parse_name_list(text)
    if not re.fullmatch(r"[1-4]", name):
        raise ValidationError(f"Invalid week '{name}'. Must be 1-4")
    if len(values) != 3:
        raise ValidationError(f"Week {name} needs exactly 3 values, got {len(values)}")
    try:
        parsed = [cast(v) for v in values]
    except ValueError as e:
        raise ValidationError(f"Invalid value in '{text}': {e}") from e
    if any(v < 0 for v in parsed):
        raise ValidationError(f"Values must be non-negative: '{text}'")
    return int(name), parsed


def parse_warmup_string(text: str) -> list[WarmupSet]:
    """
    Parse a warmup scheme: comma-separated PCTxREPS groups.

    Examples:
        "0.4x5,0.5x5,0.6x3"   -> 40%x5, 50%x5, 60%x3
        "40x5, 50x5, 60x3"    percentages above 1 are read as whole percents

    Raises:
        ValidationError: If a group is not of the form PCTxREPS
    """
    groups = [g.strip() for g in text.split(",") if g.strip()]
    if not groups:
        raise ValidationError("Warmup scheme cannot be empty")

    warmups: list[WarmupSet] = []
    for group in groups:
        m = re.fullmatch(r"([0-9]+(?:\.[0-9]+)?)\s*[xX×]\s*(\d+)", group)
        if not m:
            raise ValidationError(
                f"Invalid warmup set '{group}'. Use PCTxREPS, e.g. 0.4x5"
            )
        pct = float(m.group(1))
        if pct > 1:
            pct = pct / 100
        warmups.append(WarmupSet(percentage=pct, reps=int(m.group(2))))
    return warmups
