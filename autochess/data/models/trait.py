"""Trait data model."""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BonusKind(StrEnum):
    """
    Stat a trait breakpoint can grant.

    Each value is the name of the matching field on the combat unit's
    buff accumulator.
    """
    ATTACK = "attack_bonus"
    ARMOR = "armor_bonus"
    MAGIC_RESIST = "magic_resist_bonus"
    ATTACK_SPEED = "attack_speed_bonus"
    HP = "hp_bonus"
    SPELL_POWER = "spell_power"
    CRIT_CHANCE = "crit_chance"
    CRIT_DAMAGE = "crit_damage"
    DAMAGE_REDUCTION = "damage_reduction"
    MAGIC_DAMAGE = "magic_damage"
    MANA_REGEN = "mana_regen"
    RANGE = "range_bonus"


class TraitBreakpoint(BaseModel):
    """A single breakpoint for a trait."""
    count: int = Field(..., ge=1, description="Number of units required")
    bonus: dict[BonusKind, float] = Field(default_factory=dict, description="Stat bonuses granted")


class Trait(BaseModel):
    """Trait shared by several unit templates."""
    id: str = Field(..., description="Unique identifier (lowercase, no spaces)")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="General trait description")
    breakpoints: list[TraitBreakpoint] = Field(..., min_length=1)
    color: str = Field(default="#95a5a6", description="Display color hint")
    icon: str = Field(default="?", description="Display icon")

    @field_validator("breakpoints")
    @classmethod
    def _sort_breakpoints(cls, value: list[TraitBreakpoint]) -> list[TraitBreakpoint]:
        return sorted(value, key=lambda bp: bp.count)

    @property
    def thresholds(self) -> list[int]:
        """Unit counts at which this trait steps up, ascending."""
        return [bp.count for bp in self.breakpoints]

    @property
    def min_units(self) -> int:
        """Minimum units needed to activate this trait."""
        return self.breakpoints[0].count

    @property
    def max_units(self) -> int:
        """Maximum breakpoint for this trait."""
        return self.breakpoints[-1].count

    def get_active_breakpoint(self, count: int) -> Optional[TraitBreakpoint]:
        """Get the highest breakpoint met by a given unit count."""
        active = None
        for bp in self.breakpoints:
            if count >= bp.count:
                active = bp
            else:
                break
        return active

    def get_next_breakpoint(self, count: int) -> Optional[TraitBreakpoint]:
        """Get the first breakpoint above a given unit count."""
        for bp in self.breakpoints:
            if bp.count > count:
                return bp
        return None
