"""Combat engine configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from autochess.core import constants


class CombatConfig(BaseSettings):
    """
    Tunables for one combat engine.

    Defaults come from the game constants; every field can be overridden
    through an ``AUTOCHESS_COMBAT_`` prefixed environment variable, e.g.
    ``AUTOCHESS_COMBAT_TICK_MS=50``.
    """

    model_config = SettingsConfigDict(env_prefix="AUTOCHESS_COMBAT_", frozen=True)

    # Board
    board_cols: int = Field(default=constants.BOARD_COLS, ge=1)
    board_rows: int = Field(default=constants.BOARD_ROWS, ge=2)
    player_rows: int = Field(default=constants.PLAYER_ROWS, ge=1)

    # Timing
    tick_ms: int = Field(default=constants.COMBAT_TICK_MS, gt=0)
    max_ticks: int = Field(default=constants.MAX_COMBAT_TICKS, gt=0)

    # Mana
    max_mana: int = Field(default=constants.MAX_MANA, gt=0)
    mana_per_attack: int = Field(default=constants.MANA_PER_ATTACK, ge=0)
    mana_per_damage_taken: int = Field(default=constants.MANA_PER_DAMAGE_TAKEN, ge=0)

    # Round outcome
    base_loss_damage: int = Field(default=constants.BASE_LOSS_DAMAGE, ge=0)

    # Abilities
    default_slow_duration: float = Field(default=constants.DEFAULT_SLOW_DURATION, gt=0)

    @property
    def tick_seconds(self) -> float:
        """Simulated time per tick in seconds."""
        return self.tick_ms / 1000
