"""Ability System for autochess combat.

Abilities are cast right after a basic attack fills the caster's mana.
Every ability field is an independent effect, so one ability can deal
damage, stun and chain in the same cast.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING
import math

from autochess.core.constants import CHAIN_FALLOFF, CLEAVE_RADIUS, DEFAULT_SLOW_DURATION
from .combat_unit import DamageType, UnitState
from .targeting import TargetSelector

if TYPE_CHECKING:
    from .combat_unit import CombatUnit


@dataclass
class AbilityResult:
    """Result of an ability cast."""

    ability_name: str
    caster_id: str
    total_damage: int = 0
    targets_hit: list[str] = field(default_factory=list)
    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def record(self, event_type: str, **data: Any) -> None:
        self.events.append((event_type, data))


class AbilitySystem:
    """
    Resolves ability casts.

    Usage:
        ability_system = AbilitySystem()
        if ability_system.can_cast(unit):
            result = ability_system.cast(unit, target, enemies, allies)
    """

    def __init__(
        self,
        target_selector: Optional[TargetSelector] = None,
        default_slow_duration: float = DEFAULT_SLOW_DURATION,
    ):
        """
        Initialize ability system.

        Args:
            target_selector: Used to order chain targets by distance.
            default_slow_duration: Slow duration for abilities that give none.
        """
        self.target_selector = target_selector or TargetSelector()
        self.default_slow_duration = default_slow_duration

    def can_cast(self, unit: "CombatUnit") -> bool:
        return unit.ability is not None and unit.is_alive and unit.has_full_mana

    def cast(
        self,
        caster: "CombatUnit",
        target: "CombatUnit",
        enemies: list["CombatUnit"],
        allies: list["CombatUnit"],
    ) -> Optional[AbilityResult]:
        """
        Cast the caster's ability.

        Spends all mana and sets the caster CASTING. Damage values scale
        with ``1 + spell_power / 100`` and are floored.

        Args:
            caster: Unit casting.
            target: Primary target, the defender of the triggering attack.
            enemies: Caster's enemy roster.
            allies: Caster's own roster, caster included.

        Returns:
            AbilityResult with one event per effect, or None without an ability.
        """
        ability = caster.ability
        if ability is None:
            return None

        caster.current_mana = 0
        caster.state = UnitState.CASTING

        result = AbilityResult(ability_name=ability.name, caster_id=caster.id)

        # Snapshot of living enemies at cast start
        living_enemies = [e for e in enemies if e.is_alive]
        spell_power = 1 + caster.buffs.spell_power / 100

        # Magic damage, with crowd control riding on each hit
        if ability.damage:
            victims = living_enemies if ability.aoe else [target]
            base_damage = math.floor(ability.damage * spell_power)
            for victim in victims:
                dealt = victim.take_damage(base_damage, DamageType.MAGIC, caster)
                self._hit(result, caster, victim, dealt)
                result.record(
                    "ability_damage",
                    **self._base_data(caster, victim),
                    damage=dealt,
                )
                if ability.stun:
                    victim.apply_stun(ability.stun)
                if ability.slow:
                    victim.apply_slow(ability.slow, ability.duration or self.default_slow_duration)

        # Physical strike scaling with attack (Backstab)
        if ability.damage_multiplier:
            damage = math.floor(caster.attack * ability.damage_multiplier * spell_power)
            dealt = target.take_damage(damage, DamageType.PHYSICAL, caster)
            self._hit(result, caster, target, dealt)
            result.record("ability_damage", **self._base_data(caster, target), damage=dealt)

        # Self armor, lasts for the rest of the combat
        if ability.armor_bonus:
            caster.buffs.armor_bonus += ability.armor_bonus
            result.record(
                "ability_buff",
                caster=caster.id,
                caster_name=caster.name,
                ability=ability.name,
                effect=f"+{_fmt(ability.armor_bonus)} armor",
            )

        # Team-wide attack
        if ability.attack_bonus and ability.aoe:
            for ally in allies:
                if ally.is_alive:
                    ally.buffs.attack_bonus += ability.attack_bonus
            result.record(
                "ability_buff",
                caster=caster.id,
                caster_name=caster.name,
                ability=ability.name,
                effect=f"+{_fmt(ability.attack_bonus)} attack to all allies",
            )

        # Chain to the closest enemies, losing damage per hop
        if ability.chain_targets and ability.damage:
            base_damage = math.floor(ability.damage * spell_power)
            ordered = self.target_selector.sort_by_distance(caster, living_enemies)
            for index, chain_target in enumerate(ordered[: ability.chain_targets]):
                damage = math.floor(base_damage * (1 - index * CHAIN_FALLOFF))
                dealt = chain_target.take_damage(damage, DamageType.MAGIC, caster)
                self._hit(result, caster, chain_target, dealt)
                result.record(
                    "ability_chain",
                    **self._base_data(caster, chain_target),
                    chain_index=index + 1,
                    damage=dealt,
                )

        # Repeated physical cleave around the caster
        if ability.hits and ability.damage and ability.aoe:
            base_damage = math.floor(ability.damage * spell_power)
            for hit in range(ability.hits):
                for enemy in self.target_selector.get_units_in_range(caster, living_enemies, CLEAVE_RADIUS):
                    dealt = enemy.take_damage(base_damage, DamageType.PHYSICAL, caster)
                    self._hit(result, caster, enemy, dealt)
                    result.record(
                        "ability_hit",
                        **self._base_data(caster, enemy),
                        hit_number=hit + 1,
                        damage=dealt,
                    )

        return result

    @staticmethod
    def _base_data(caster: "CombatUnit", target: "CombatUnit") -> dict[str, Any]:
        return {
            "caster": caster.id,
            "caster_name": caster.name,
            "ability": caster.ability.name,
            "target": target.id,
            "target_name": target.name,
        }

    @staticmethod
    def _hit(result: AbilityResult, caster: "CombatUnit", target: "CombatUnit", dealt: int) -> None:
        result.total_damage += dealt
        if target.id not in result.targets_hit:
            result.targets_hit.append(target.id)


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
