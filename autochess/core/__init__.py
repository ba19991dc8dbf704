"""Core game logic: constants, errors, synergies and roster bookkeeping.

The synergy calculator and roster bookkeeping build combat units, so
import them from their modules rather than from this package.
"""

from . import constants
from .errors import (
    AutochessError,
    BoardPositionError,
    CombatStateError,
    InvalidStarLevelError,
    UnknownTemplateError,
)

__all__ = [
    "constants",
    "AutochessError",
    "BoardPositionError",
    "CombatStateError",
    "InvalidStarLevelError",
    "UnknownTemplateError",
]
