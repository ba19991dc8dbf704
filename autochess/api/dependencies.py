"""
Dependency injection for API services.
"""

from functools import lru_cache

from .config import settings
from .services.combat_service import CombatService


@lru_cache()
def get_combat_service() -> CombatService:
    """Get CombatService singleton."""
    return CombatService(
        default_seed=settings.DEFAULT_SEED,
        tick_interval=settings.LIVE_TICK_INTERVAL,
    )
