"""Synergy Calculator for autochess.

Counts traits among fielded units, resolves which breakpoints are met,
and folds the resulting bonuses into each unit's buffs.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, TYPE_CHECKING

from autochess.data.loaders import load_trait_table
from autochess.data.models.trait import BonusKind, Trait, TraitBreakpoint

if TYPE_CHECKING:
    from autochess.combat.combat_unit import CombatUnit


# Display format per bonus kind
BONUS_LABELS: dict[BonusKind, str] = {
    BonusKind.ARMOR: "+{} Armor",
    BonusKind.ATTACK: "+{} Attack",
    BonusKind.SPELL_POWER: "+{} Spell Power",
    BonusKind.MANA_REGEN: "+{} Mana Regen",
    BonusKind.CRIT_CHANCE: "+{}% Crit Chance",
    BonusKind.CRIT_DAMAGE: "+{}% Crit Damage",
    BonusKind.HP: "+{} HP",
    BonusKind.DAMAGE_REDUCTION: "{}% Damage Reduction",
    BonusKind.RANGE: "+{} Range",
    BonusKind.MAGIC_DAMAGE: "+{} Magic Damage",
    BonusKind.MAGIC_RESIST: "+{} Magic Resist",
}


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass
class ActiveTrait:
    """Represents a trait present on the board with its current state."""

    trait: Trait
    count: int  # Number of units with this trait
    active_breakpoint: Optional[TraitBreakpoint]  # Current active tier
    next_breakpoint: Optional[TraitBreakpoint]  # Next tier to reach
    is_active: bool  # Whether any breakpoint is met

    @property
    def threshold(self) -> int:
        """Unit count of the active tier, 0 when inactive."""
        return self.active_breakpoint.count if self.active_breakpoint else 0

    @property
    def bonus(self) -> dict[BonusKind, float]:
        return dict(self.active_breakpoint.bonus) if self.active_breakpoint else {}

    @property
    def next_threshold(self) -> int:
        """Next tier to reach, or the top tier once it is met."""
        if self.next_breakpoint is not None:
            return self.next_breakpoint.count
        return self.trait.max_units

    @property
    def progress(self) -> str:
        """Display string like "2/4" or "4/4"."""
        return f"{self.count}/{self.next_threshold}"

    @property
    def style(self) -> str:
        """Return visual style: inactive, bronze, or gold once the top tier is met."""
        if not self.is_active:
            return "inactive"
        if self.threshold == self.trait.max_units:
            return "gold"
        return "bronze"

    def to_dict(self) -> dict:
        return {
            "id": self.trait.id,
            "name": self.trait.name,
            "description": self.trait.description,
            "count": self.count,
            "thresholds": self.trait.thresholds,
            "current_threshold": self.threshold,
            "next_threshold": self.next_threshold,
            "is_active": self.is_active,
            "bonus": {str(k): v for k, v in self.bonus.items()} if self.is_active else None,
            "progress": self.progress,
            "style": self.style,
            "color": self.trait.color,
            "icon": self.trait.icon,
        }


class SynergyCalculator:
    """
    Calculates active synergies from a list of units.

    Only living, on-board units count. Each unit counts once per trait it
    carries, so two copies of the same template count twice.
    """

    def __init__(self, traits: Optional[Mapping[str, Trait]] = None):
        """
        Initialize with a trait table.

        Args:
            traits: Trait table keyed by ID. Defaults to the bundled data.
        """
        self.all_traits: Mapping[str, Trait] = traits if traits is not None else load_trait_table()

    @staticmethod
    def _fielded(units: Iterable["CombatUnit"]) -> list["CombatUnit"]:
        return [u for u in units if u.is_alive and u.is_on_board]

    def compute_trait_counts(self, units: Iterable["CombatUnit"]) -> dict[str, int]:
        """
        Count living, on-board units per trait; a unit counts once per trait.

        Returns:
            Dict mapping trait_id to count, in first-seen order.
        """
        counts: dict[str, int] = {}
        for unit in self._fielded(units):
            for trait_id in dict.fromkeys(unit.traits):
                counts[trait_id] = counts.get(trait_id, 0) + 1
        return counts

    def _build(self, trait_id: str, count: int) -> Optional[ActiveTrait]:
        trait = self.all_traits.get(trait_id)
        if trait is None:
            return None
        active_bp = trait.get_active_breakpoint(count)
        return ActiveTrait(
            trait=trait,
            count=count,
            active_breakpoint=active_bp,
            next_breakpoint=trait.get_next_breakpoint(count),
            is_active=active_bp is not None,
        )

    def compute_active_bonuses(self, counts: Mapping[str, int]) -> dict[str, ActiveTrait]:
        """
        Resolve the highest met breakpoint per trait.

        Traits below their first breakpoint, or unknown to the trait
        table, are absent from the result.
        """
        result: dict[str, ActiveTrait] = {}
        for trait_id, count in counts.items():
            active = self._build(trait_id, count)
            if active is not None and active.is_active:
                result[trait_id] = active
        return result

    def apply_bonuses(
        self,
        units: Iterable["CombatUnit"],
        active: Mapping[str, ActiveTrait],
    ) -> None:
        """
        Add each active trait's bonus to every fielded unit carrying it.

        Accumulates on top of existing buffs; call ``reset_buffs`` first
        to avoid stacking the same bonus twice.
        """
        for unit in self._fielded(units):
            for trait_id in dict.fromkeys(unit.traits):
                active_trait = active.get(trait_id)
                if active_trait is not None:
                    unit.apply_bonus(active_trait.bonus)

    def resolve(self, units: list["CombatUnit"]) -> dict[str, ActiveTrait]:
        """
        Reset buffs, count traits and apply bonuses for one side.

        Returns:
            The active traits that were applied.
        """
        for unit in self._fielded(units):
            unit.reset_buffs()
        active = self.compute_active_bonuses(self.compute_trait_counts(units))
        self.apply_bonuses(units, active)
        return active

    # =========================================================================
    # PLANNING VIEW
    # =========================================================================

    def calculate_synergies(self, units: Iterable["CombatUnit"]) -> list[ActiveTrait]:
        """
        Every trait present on the board, active or not.

        Sorted active traits first, then by unit count descending.
        """
        display = []
        for trait_id, count in self.compute_trait_counts(units).items():
            entry = self._build(trait_id, count)
            if entry is not None:
                display.append(entry)
        display.sort(key=lambda t: (not t.is_active, -t.count))
        return display

    def summarize(self, active: Mapping[str, ActiveTrait]) -> str:
        """Summary like "Warrior (2), Mage (4)"."""
        if not active:
            return "No active synergies"
        return ", ".join(f"{a.trait.name} ({a.count})" for a in active.values())

    def describe_bonus(self, trait_id: str, threshold: int) -> str:
        """
        Human-readable bonus text for a trait tier, e.g. "+25 Armor".

        Returns an empty string when the trait or tier does not exist.
        """
        trait = self.all_traits.get(trait_id)
        if trait is None:
            return ""
        tier = next((bp for bp in trait.breakpoints if bp.count == threshold), None)
        if tier is None:
            return ""

        parts = []
        for kind, value in tier.bonus.items():
            if kind == BonusKind.ATTACK_SPEED:
                parts.append(f"+{round(value * 100)}% Attack Speed")
            else:
                parts.append(BONUS_LABELS[kind].format(_fmt(value)))
        return ", ".join(parts)
