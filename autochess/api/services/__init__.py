"""API services."""

from .combat_service import CombatService

__all__ = [
    "CombatService",
]
