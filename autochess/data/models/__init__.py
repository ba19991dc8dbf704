# Data Models
from .unit import UnitTemplate, UnitCost, Ability
from .trait import Trait, TraitBreakpoint, BonusKind

__all__ = [
    "UnitTemplate",
    "UnitCost",
    "Ability",
    "Trait",
    "TraitBreakpoint",
    "BonusKind",
]
