"""
YAML -> typed engine config loader.

Loads tunable engine parameters from engine.yaml (bundled with the package)
and optionally merges user overrides from ~/.lift531/engine.yaml.

Usage:
    from lift531.core.engine.config_loader import load_progression_settings
    settings = load_progression_settings()
    settings.pass_reps  # 3

If the bundled YAML cannot be parsed, all lookups return the Python defaults
from config.py (no crash).  If the user override file exists but has parse
errors, a warning is issued and the file is ignored.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..config import (
    PERFORMANCE_PASS_REPS,
    PERFORMANCE_QUALIFYING_FRACTION,
    TM_INCREMENTS,
)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any] | None:
    """Load a single YAML file; return None when it cannot be read or parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        return None
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled engine.yaml, or None if not found."""
    # config_loader.py lives at src/lift531/core/engine/config_loader.py
    candidate = Path(__file__).parent.parent.parent / "engine.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.lift531/engine.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift531" / "engine.yaml"
    return p if p.exists() else None


def load_engine_config() -> dict[str, Any]:
    """
    Load and merge engine configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift531/engine.yaml
    2. User override at ~/.lift531/engine.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled) or {})

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = _load_yaml_file(user)
        if user_cfg is None:
            warnings.warn(
                f"lift531: could not parse {user}; using bundled engine settings",
                stacklevel=2,
            )
        elif user_cfg:
            config = _deep_merge(config, user_cfg)

    return config


@dataclass(frozen=True)
class ProgressionSettings:
    """Resolved tuning for the cycle-transition rules."""

    pass_reps: int = PERFORMANCE_PASS_REPS
    qualifying_fraction: float = PERFORMANCE_QUALIFYING_FRACTION
    # unit -> (upper-body increment, lower-body increment)
    increments: dict[str, tuple[float, float]] | None = None

    def increment_for(self, unit: str, lower_body: bool) -> float:
        table = self.increments or TM_INCREMENTS
        upper, lower = table.get(unit, TM_INCREMENTS["lbs"])
        return lower if lower_body else upper


def load_progression_settings(config: dict[str, Any] | None = None) -> ProgressionSettings:
    """
    Build ProgressionSettings from a merged engine config.

    Args:
        config: Output of load_engine_config(); loaded on demand when None

    Returns:
        ProgressionSettings with config.py defaults for any missing key
    """
    if config is None:
        config = load_engine_config()

    prog = config.get("progression") or {}

    increments: dict[str, tuple[float, float]] = dict(TM_INCREMENTS)
    for unit, values in (prog.get("increments") or {}).items():
        if unit not in increments or not isinstance(values, dict):
            continue
        default_upper, default_lower = increments[unit]
        increments[unit] = (
            float(values.get("upper", default_upper)),
            float(values.get("lower", default_lower)),
        )

    return ProgressionSettings(
        pass_reps=int(prog.get("pass_reps", PERFORMANCE_PASS_REPS)),
        qualifying_fraction=float(
            prog.get("qualifying_fraction", PERFORMANCE_QUALIFYING_FRACTION)
        ),
        increments=increments,
    )
