"""Combat simulation module for autochess.

This module provides a complete combat simulation system including:
- Grid positioning and greedy movement
- Nearest-enemy targeting
- Attack and ability execution
- Stun and slow status effects
- Synchronous and real-time (asyncio) drivers
"""

# Board
from .board import (
    BoardBounds,
    Position,
    Team,
    build_occupancy,
    mirror_position,
    unit_at,
)

# Config
from .config import CombatConfig

# Combat Units
from .combat_unit import (
    Buffs,
    CombatUnit,
    DamageType,
    StatusEffects,
    UnitState,
    generate_unit_id,
    reset_unit_ids,
)

# Targeting
from .targeting import TargetSelector

# Movement
from .movement import GreedyMovement, MovementPolicy, MovementSystem

# Attack
from .attack import AttackResult, AttackSystem

# Abilities
from .ability import AbilityResult, AbilitySystem

# Combat Engine
from .combat_engine import (
    CombatEngine,
    CombatEvent,
    CombatPhase,
    CombatResult,
    CombatState,
    TickObservation,
    Winner,
)

# Real-time driver
from .realtime import RealtimeCombat

__all__ = [
    # Board
    "BoardBounds",
    "Position",
    "Team",
    "build_occupancy",
    "mirror_position",
    "unit_at",
    # Config
    "CombatConfig",
    # Combat Unit
    "Buffs",
    "CombatUnit",
    "DamageType",
    "StatusEffects",
    "UnitState",
    "generate_unit_id",
    "reset_unit_ids",
    # Targeting
    "TargetSelector",
    # Movement
    "GreedyMovement",
    "MovementPolicy",
    "MovementSystem",
    # Attack
    "AttackResult",
    "AttackSystem",
    # Abilities
    "AbilityResult",
    "AbilitySystem",
    # Combat Engine
    "CombatEngine",
    "CombatEvent",
    "CombatPhase",
    "CombatResult",
    "CombatState",
    "TickObservation",
    "Winner",
    # Real-time
    "RealtimeCombat",
]
