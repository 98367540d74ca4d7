"""
Base types for program variant definitions.

ProgramDefinition describes the supplemental-work shape and assistance
volume of one 5/3/1 variant.  The main-lift schedule is shared by every
variant and lives in config.py.
"""

from dataclasses import dataclass, field

SUPPLEMENTAL_STYLES: tuple[str, ...] = ("none", "fixed_percent", "first_set")


@dataclass(frozen=True)
class ProgramDefinition:
    """
    Full configuration for one program variant.

    supplemental_style selects the builder in the supplemental dispatch table:
      none          no supplemental exercise
      fixed_percent sets x reps at supplemental_percent of TM (BBB)
      first_set     sets x reps at the week's first main-set percentage (FSL)
    """

    # Identity
    program_id: str            # e.g. "BBB"
    display_name: str          # e.g. "Boring But Big"
    description: str
    supplemental_label: str    # e.g. "5x10 @ 50%"
    is_premium: bool

    # Assistance
    assistance_count: int      # minimum number of assistance exercises

    # Supplemental work
    supplemental_style: str
    supplemental_sets: int = 0
    supplemental_reps: int = 0
    supplemental_percent: float = 0.0
    supplemental_suffix: str = ""   # appended to the lift name, e.g. "Squat (BBB)"

    # Per-lift set count overrides, e.g. {"Deadlift": 3}
    supplemental_sets_by_lift: dict[str, int] = field(default_factory=dict)

    def sets_for(self, lift: str) -> int:
        """Supplemental set count for lift, honouring per-lift overrides."""
        return self.supplemental_sets_by_lift.get(lift, self.supplemental_sets)
