"""
Program variant definitions for lift531.

Each variant is described by a ProgramDefinition; the supplemental
dispatch table turns a definition into concrete supplemental work.
"""

from .base import ProgramDefinition
from .registry import PROGRAM_REGISTRY, build_supplemental, get_program, requires_premium

__all__ = [
    "ProgramDefinition",
    "PROGRAM_REGISTRY",
    "build_supplemental",
    "get_program",
    "requires_premium",
]
