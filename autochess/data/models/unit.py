"""Unit template data model."""

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, Field


class UnitCost(IntEnum):
    """Unit cost tiers."""
    ONE = 1
    TWO = 2
    THREE = 3


class Ability(BaseModel):
    """
    Special ability cast when a unit's mana fills up.

    Every field is optional and the fields combine: an ability with
    damage, stun and aoe deals damage and stuns every enemy it hits.
    """
    name: str
    mana_cost: Optional[int] = Field(default=None, description="Informational only, casts happen at max mana")

    # Magic damage to the current target, or to every enemy with aoe
    damage: Optional[float] = Field(default=None, gt=0)
    aoe: bool = False

    # Crowd control applied alongside damage
    stun: Optional[float] = Field(default=None, gt=0, description="Stun seconds")
    slow: Optional[float] = Field(default=None, gt=0, le=1, description="Attack speed slow fraction")
    duration: Optional[float] = Field(default=None, gt=0, description="Slow/buff duration in seconds")

    # Physical hit for base attack x multiplier
    damage_multiplier: Optional[float] = Field(default=None, gt=0)

    # Self armor buff, or team-wide attack buff with aoe
    armor_bonus: Optional[float] = None
    attack_bonus: Optional[float] = None

    # Chain to the N closest enemies
    chain_targets: Optional[int] = Field(default=None, ge=1)

    # Repeated cleave on adjacent enemies
    hits: Optional[int] = Field(default=None, ge=1)

    teleport: bool = False


class UnitTemplate(BaseModel):
    """Unit template: base stats at 1 star plus traits and ability."""
    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Display name")
    emoji: str = ""
    cost: UnitCost
    hp: int = Field(..., gt=0)
    attack: int = Field(..., ge=0)
    attack_speed: float = Field(..., gt=0, description="Attacks per second")
    range: int = Field(..., ge=1, description="Attack range in grid cells")
    armor: int = Field(..., ge=0)
    magic_resist: int = Field(..., ge=0)
    traits: list[str] = Field(..., min_length=1, description="List of trait IDs")
    ability: Optional[Ability] = None

    model_config = {"use_enum_values": True}
