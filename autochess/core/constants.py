"""Autochess Game Constants."""

from typing import Final

# =============================================================================
# BOARD
# =============================================================================
# Shared combat board: both sides fight on one BOARD_COLS x BOARD_ROWS grid,
# each side deploys into PLAYER_ROWS rows of it.
BOARD_COLS: Final[int] = 8
BOARD_ROWS: Final[int] = 8
PLAYER_ROWS: Final[int] = 4

# Bench slots for units that are owned but not deployed
BENCH_SIZE: Final[int] = 9

# =============================================================================
# STAR LEVELS
# =============================================================================
MIN_STAR_LEVEL: Final[int] = 1
MAX_STAR_LEVEL: Final[int] = 3

# HP and attack multipliers applied to template stats (floored)
STAR_MULTIPLIER: Final[dict[int, dict[str, float]]] = {
    1: {"hp": 1.0, "attack": 1.0},
    2: {"hp": 1.8, "attack": 1.8},
    3: {"hp": 3.2, "attack": 3.2},
}

# Three identical units of one star level combine into one of the next
COPIES_TO_UPGRADE: Final[int] = 3

# Sell refund as a fraction of (cost * copies represented)
SELL_REFUND_RATE: Final[float] = 1.0

# =============================================================================
# COMBAT
# =============================================================================
COMBAT_TICK_MS: Final[int] = 100
MAX_COMBAT_TICKS: Final[int] = 1000

MAX_MANA: Final[int] = 100
MANA_PER_ATTACK: Final[int] = 10
MANA_PER_DAMAGE_TAKEN: Final[int] = 5

# Attack speed floor (attacks per second) after buffs and slows
MIN_ATTACK_SPEED: Final[float] = 0.1

# Defense stat mitigation: reduction = stat / (stat + DEFENSE_SCALING)
DEFENSE_SCALING: Final[float] = 100.0

# Crits multiply damage by CRIT_BASE_MULTIPLIER + critDamage / 100
CRIT_BASE_MULTIPLIER: Final[float] = 1.5

# =============================================================================
# ABILITIES
# =============================================================================
# Damage falloff per hop for chain abilities (20% per hop)
CHAIN_FALLOFF: Final[float] = 0.2

# Slow duration used when an ability defines a slow without a duration
DEFAULT_SLOW_DURATION: Final[float] = 2.0

# Multi-hit cleaves reach every enemy within this Chebyshev radius
CLEAVE_RADIUS: Final[int] = 1

# =============================================================================
# TRAITS
# =============================================================================
# Standard breakpoints for every trait
TRAIT_THRESHOLDS: Final[tuple[int, ...]] = (2, 4)

# =============================================================================
# PLAYER DAMAGE
# =============================================================================
# Losing player takes BASE_LOSS_DAMAGE + sum of surviving enemy star levels
BASE_LOSS_DAMAGE: Final[int] = 2


def calculate_player_damage(star_levels: list[int], base: int = BASE_LOSS_DAMAGE) -> int:
    """
    Calculate damage dealt to the losing player.

    Args:
        star_levels: Star levels of the winning side's surviving units.
        base: Flat damage for losing the round.

    Returns:
        base plus one point per star of every survivor.
    """
    return base + sum(star_levels)
