"""
Plain-text workout summary for sharing a logged session.
"""

from __future__ import annotations

from .models import WorkoutSession


def workout_summary(session: WorkoutSession, unit: str = "") -> str:
    """
    Render a session as a short text log.

    Strength sessions list each exercise with at least one completed set,
    then every completed set as ``Set N: WEIGHT x REPS`` tagged with
    (AMRAP) and the RPE when recorded.  Conditioning sessions show the
    activity, intensity and distance instead.  Notes come last.

    Args:
        session: Logged session
        unit: Optional unit printed after each set weight

    Returns:
        Multi-line summary text
    """
    lines = [
        "lift531 log",
        f"{session.title} - {session.date}",
        f"Duration: {session.duration_seconds // 60}m",
        "",
    ]

    if session.type == "Conditioning" and session.conditioning is not None:
        cd = session.conditioning
        lines.append(f"Activity: {cd.activity}")
        lines.append(f"Intensity: {cd.intensity}")
        if cd.distance:
            lines.append(f"Distance: {cd.distance:g} {cd.distance_unit or ''}".rstrip())
    else:
        suffix = f" {unit}" if unit else ""
        for ex in session.exercises:
            if not (ex.completed or ex.completed_sets):
                continue
            lines.append(f"- {ex.name}")
            for i, s in enumerate(ex.sets, start=1):
                if not s.completed:
                    continue
                amrap = " (AMRAP)" if s.is_amrap else ""
                rpe = f" @ RPE {s.rpe:g}" if s.rpe else ""
                lines.append(f"   Set {i}: {s.weight:g}{suffix} x {s.performed_reps}{amrap}{rpe}")
            lines.append("")

    if session.notes:
        lines.append(f"Notes: {session.notes}")

    return "\n".join(lines)
