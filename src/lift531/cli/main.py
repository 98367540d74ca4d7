"""
CLI entry point using Typer.

Command groups:
- profile: init, show-profile, set-tm, settings
- workout: workout, log-workout, log-conditioning, history, delete-session
- cycle: advance-week, cycle
- analysis: prs, volume, trend, strength, plates, achievements, export, import
"""

from .app import app
from .commands import analysis, cycle, profile, workout  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
