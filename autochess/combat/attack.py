"""Attack System for autochess combat.

Handles basic attack execution including:
- Critical strikes
- Bonus magic damage from buffs
- Mana generation on attack
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math
import random

from autochess.core.constants import CRIT_BASE_MULTIPLIER, MANA_PER_ATTACK
from .combat_unit import DamageType

if TYPE_CHECKING:
    from .combat_unit import CombatUnit


@dataclass
class AttackResult:
    """Result of an attack action."""

    attacker: "CombatUnit"
    defender: "CombatUnit"
    physical_damage: int = 0
    magic_damage: int = 0
    is_crit: bool = False
    defender_died: bool = False

    @property
    def total_damage(self) -> int:
        return self.physical_damage + self.magic_damage

    def to_event_data(self) -> dict:
        return {
            "attacker": self.attacker.id,
            "attacker_name": self.attacker.name,
            "defender": self.defender.id,
            "defender_name": self.defender.name,
            "physical_damage": self.physical_damage,
            "magic_damage": self.magic_damage,
            "total_damage": self.total_damage,
            "is_crit": self.is_crit,
            "defender_hp": self.defender.current_hp,
            "defender_died": self.defender_died,
        }


class AttackSystem:
    """
    Manages basic attacks in combat.

    Usage:
        attack_system = AttackSystem(rng)
        result = attack_system.execute_attack(attacker, target)
    """

    def __init__(self, rng: Optional[random.Random] = None, mana_per_attack: int = MANA_PER_ATTACK):
        """
        Initialize attack system.

        Args:
            rng: Random number generator for deterministic simulation.
            mana_per_attack: Mana the attacker gains per attack.
        """
        self.rng = rng or random.Random()
        self.mana_per_attack = mana_per_attack

    def roll_crit(self, attacker: "CombatUnit") -> bool:
        """Crit roll; no random draw is consumed without crit chance."""
        if attacker.buffs.crit_chance <= 0:
            return False
        return self.rng.random() * 100 < attacker.buffs.crit_chance

    def execute_attack(
        self,
        attacker: "CombatUnit",
        target: "CombatUnit",
    ) -> Optional[AttackResult]:
        """
        Execute a basic attack.

        Physical damage equals effective attack, multiplied by
        ``1.5 + crit_damage / 100`` on a crit. A magic_damage buff adds a
        separate magic hit. The attacker then gains mana.

        Returns:
            AttackResult, or None if the attacker cannot act or the target is dead.
        """
        if not attacker.can_act or not target.is_alive:
            return None

        damage = attacker.attack
        is_crit = self.roll_crit(attacker)
        if is_crit:
            damage = math.floor(damage * (CRIT_BASE_MULTIPLIER + attacker.buffs.crit_damage / 100))

        physical = target.take_damage(damage, DamageType.PHYSICAL, attacker)

        magic = 0
        if attacker.buffs.magic_damage > 0:
            magic = target.take_damage(attacker.buffs.magic_damage, DamageType.MAGIC, attacker)

        attacker.gain_mana(self.mana_per_attack)

        return AttackResult(
            attacker=attacker,
            defender=target,
            physical_damage=physical,
            magic_damage=magic,
            is_crit=is_crit,
            defender_died=not target.is_alive,
        )
