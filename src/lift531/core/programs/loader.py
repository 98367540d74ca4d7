"""
YAML -> ProgramDefinition loader.

Loads program definitions from individual YAML files in the bundled
``src/lift531/programs/`` directory.  Each file (e.g. bbb.yaml) contains a
flat program definition matching the ProgramDefinition schema.

User overrides: place matching files in ``~/.lift531/programs/``.
A user file is deep-merged over the bundled definition, so only changed
keys need to be listed.  User files without a bundled counterpart are
ignored: the set of program variants is closed.

Usage (internal, called by registry.py):
    from .loader import load_programs_from_yaml
    programs = load_programs_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

import yaml

from ..models import LIFTS, PROGRAMS
from .base import SUPPLEMENTAL_STYLES, ProgramDefinition

_REQUIRED_PROGRAM_FIELDS: frozenset[str] = frozenset(
    {
        "program_id",
        "display_name",
        "description",
        "supplemental_label",
        "is_premium",
        "assistance_count",
        "supplemental_style",
    }
)


def program_from_dict(d: dict) -> ProgramDefinition:
    """Convert a raw dict (from YAML) to a ProgramDefinition.

    Raises ValueError if any required field is absent or a value is out of range.
    """
    missing = _REQUIRED_PROGRAM_FIELDS - set(d)
    if missing:
        raise ValueError(f"ProgramDefinition missing fields: {sorted(missing)}")

    program_id = str(d["program_id"])
    if program_id not in PROGRAMS:
        raise ValueError(f"Unknown program_id {program_id!r}")

    style = str(d["supplemental_style"])
    if style not in SUPPLEMENTAL_STYLES:
        raise ValueError(
            f"supplemental_style must be one of {SUPPLEMENTAL_STYLES}, got {style!r}"
        )

    by_lift_raw = d.get("supplemental_sets_by_lift") or {}
    for lift in by_lift_raw:
        if lift not in LIFTS:
            raise ValueError(f"supplemental_sets_by_lift has unknown lift {lift!r}")

    return ProgramDefinition(
        program_id=program_id,
        display_name=str(d["display_name"]),
        description=str(d["description"]),
        supplemental_label=str(d["supplemental_label"]),
        is_premium=bool(d["is_premium"]),
        assistance_count=int(d["assistance_count"]),
        supplemental_style=style,
        supplemental_sets=int(d.get("supplemental_sets", 0)),
        supplemental_reps=int(d.get("supplemental_reps", 0)),
        supplemental_percent=float(d.get("supplemental_percent", 0.0)),
        supplemental_suffix=str(d.get("supplemental_suffix", "")),
        supplemental_sets_by_lift={k: int(v) for k, v in by_lift_raw.items()},
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} when it is unreadable or not a mapping."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _get_bundled_programs_dir() -> Path | None:
    """Return path to the bundled programs/ data directory, or None if not found."""
    # loader.py lives at src/lift531/core/programs/loader.py
    # three levels up -> src/lift531/
    candidate = Path(__file__).parent.parent.parent / "programs"
    return candidate if candidate.is_dir() else None


def _get_user_programs_dir() -> Path | None:
    """Return ~/.lift531/programs/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift531" / "programs"
    return p if p.is_dir() else None


def load_programs_from_yaml() -> dict[str, ProgramDefinition] | None:
    """Return {program_id: ProgramDefinition} loaded from per-program YAML files.

    Loads each ``<name>.yaml`` from the bundled programs/ directory and
    deep-merges a same-named file from ``~/.lift531/programs/`` over it.

    Returns None when nothing could be loaded so the registry can report it.
    """
    bundled_dir = _get_bundled_programs_dir()
    if bundled_dir is None:
        return None
    user_dir = _get_user_programs_dir()

    result: dict[str, ProgramDefinition] = {}
    for bundled_path in sorted(bundled_dir.glob("*.yaml")):
        raw = _load_yaml_file(bundled_path)
        if not raw:
            warnings.warn(
                f"lift531: could not read program file {bundled_path.name}",
                stacklevel=2,
            )
            continue
        if user_dir is not None:
            user_path = user_dir / bundled_path.name
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    raw = _deep_merge(raw, user_raw)
                else:
                    warnings.warn(
                        f"lift531: ignoring unreadable override {user_path}",
                        stacklevel=2,
                    )
        try:
            program = program_from_dict(raw)
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"lift531: skipping program '{bundled_path.stem}' - {exc}",
                stacklevel=2,
            )
            continue
        result[program.program_id] = program

    return result or None
