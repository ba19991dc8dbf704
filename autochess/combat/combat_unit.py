"""Combat Unit for autochess.

Manages unit state during combat, including HP, mana, buffs and status
effects. Base stats are derived once from a unit template and a star
level; everything a buff or status touches is computed on read.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum, StrEnum, auto
from itertools import count
from typing import Any, Mapping, Optional
import math

from autochess.combat.board import Position, Team
from autochess.core.constants import (
    DEFENSE_SCALING,
    MANA_PER_DAMAGE_TAKEN,
    MAX_MANA,
    MAX_STAR_LEVEL,
    MIN_ATTACK_SPEED,
    MIN_STAR_LEVEL,
    STAR_MULTIPLIER,
)
from autochess.core.errors import InvalidStarLevelError
from autochess.data.loaders.unit_loader import get_unit_template
from autochess.data.models.unit import Ability, UnitTemplate


_unit_ids = count(1)


def generate_unit_id() -> str:
    """Next ``unit_<n>`` identifier."""
    return f"unit_{next(_unit_ids)}"


def reset_unit_ids() -> None:
    """Restart unit numbering at ``unit_1``. Useful for testing."""
    global _unit_ids
    _unit_ids = count(1)


class UnitState(Enum):
    """Unit combat state."""

    IDLE = auto()  # Waiting, or in range while the attack cools down
    MOVING = auto()  # Stepped toward target this tick
    ATTACKING = auto()  # Performed a basic attack
    CASTING = auto()  # Cast its ability
    DEAD = auto()  # Dead for the rest of the combat


class DamageType(StrEnum):
    """Damage types, each mitigated by its own defense stat."""

    PHYSICAL = "physical"  # Reduced by armor
    MAGIC = "magic"  # Reduced by magic resist


@dataclass
class Buffs:
    """
    Additive stat bonuses from traits and abilities.

    Field names match ``BonusKind`` values, so a trait bonus bundle can be
    applied field by field.
    """

    attack_bonus: float = 0.0
    armor_bonus: float = 0.0
    magic_resist_bonus: float = 0.0
    attack_speed_bonus: float = 0.0
    hp_bonus: float = 0.0
    spell_power: float = 0.0
    crit_chance: float = 0.0  # 0-100
    crit_damage: float = 0.0  # Percent added to the base crit multiplier
    damage_reduction: float = 0.0  # Percent
    magic_damage: float = 0.0  # Flat magic damage added to each basic attack
    mana_regen: float = 0.0  # Added to every mana gain
    range_bonus: float = 0.0

    def add(self, bonus: Mapping[str, float]) -> None:
        """Add a bonus bundle. Keys are ``BonusKind`` members or their values."""
        for key, value in bonus.items():
            name = str(key)
            setattr(self, name, getattr(self, name) + value)

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, 0.0)

    def to_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class StatusEffects:
    """Crowd control on a unit. Durations are in seconds."""

    stunned: bool = False
    stun_duration: float = 0.0
    slowed: bool = False
    slow_amount: float = 0.0  # Fraction of attack speed removed, 0-1
    slow_duration: float = 0.0

    def apply_stun(self, duration: float) -> None:
        self.stunned = True
        self.stun_duration = max(self.stun_duration, duration)

    def apply_slow(self, amount: float, duration: float) -> None:
        self.slowed = True
        self.slow_amount = max(self.slow_amount, amount)
        self.slow_duration = max(self.slow_duration, duration)

    def update(self, delta_time: float) -> None:
        """Decay durations and clear effects that ran out."""
        if self.stunned:
            self.stun_duration -= delta_time
            if self.stun_duration <= 0:
                self.stunned = False
                self.stun_duration = 0.0

        if self.slowed:
            self.slow_duration -= delta_time
            if self.slow_duration <= 0:
                self.slowed = False
                self.slow_amount = 0.0
                self.slow_duration = 0.0

    def clear(self) -> None:
        self.stunned = False
        self.stun_duration = 0.0
        self.slowed = False
        self.slow_amount = 0.0
        self.slow_duration = 0.0


@dataclass(eq=False)
class CombatUnit:
    """
    A unit participating in combat.

    Units compare by identity: two clones of the same template are
    different combatants.
    """

    # Identification
    id: str
    template_id: str
    name: str
    star_level: int
    emoji: str = ""
    cost: int = 1
    team: Optional[Team] = None

    # Base stats (template x star multiplier)
    max_hp: int = 1
    base_attack: int = 0
    attack_speed: float = 1.0  # Attacks per second
    range: int = 1  # Chebyshev cells
    armor: int = 0
    magic_resist: int = 0
    traits: list[str] = field(default_factory=list)
    ability: Optional[Ability] = None

    # Mana
    max_mana: int = MAX_MANA
    mana_per_damage_taken: int = MANA_PER_DAMAGE_TAKEN
    current_mana: float = 0.0

    # Current HP, defaults to effective max HP
    current_hp: Optional[float] = None

    # Position on the board (None if on bench)
    position: Optional[Position] = None

    # Combat state
    state: UnitState = UnitState.IDLE
    target: Optional["CombatUnit"] = field(default=None, repr=False)
    attack_cooldown: float = 0.0  # Seconds until next attack

    buffs: Buffs = field(default_factory=Buffs)
    status: StatusEffects = field(default_factory=StatusEffects)

    # Combat statistics
    damage_dealt: int = 0
    damage_taken: int = 0

    def __post_init__(self) -> None:
        if self.current_hp is None:
            self.current_hp = self.effective_max_hp

    @classmethod
    def from_template(
        cls,
        template_id: str,
        star_level: int = 1,
        position: Optional[Position] = None,
        team: Optional[Team] = None,
    ) -> "CombatUnit":
        """
        Create a unit from a template.

        Args:
            template_id: Unit template ID.
            star_level: Star level (1-3).
            position: Board position, or None to leave it off the board.
            team: Side assignment; the engine overwrites it at combat start.

        Returns:
            New CombatUnit at full HP with zero mana.

        Raises:
            UnknownTemplateError: If the template does not exist.
            InvalidStarLevelError: If star_level is outside 1-3.
        """
        template = get_unit_template(template_id)
        if not MIN_STAR_LEVEL <= star_level <= MAX_STAR_LEVEL:
            raise InvalidStarLevelError(star_level)

        hp, attack = _scaled_stats(template, star_level)
        return cls(
            id=generate_unit_id(),
            template_id=template.id,
            name=template.name,
            emoji=template.emoji,
            cost=template.cost,
            star_level=star_level,
            team=team,
            max_hp=hp,
            base_attack=attack,
            attack_speed=template.attack_speed,
            range=template.range,
            armor=template.armor,
            magic_resist=template.magic_resist,
            traits=list(template.traits),
            ability=template.ability,
            position=position,
        )

    # =========================================================================
    # DERIVED STATS
    # =========================================================================

    @property
    def attack(self) -> float:
        """Effective attack damage including buffs."""
        return self.base_attack + self.buffs.attack_bonus

    @property
    def effective_armor(self) -> float:
        return self.armor + self.buffs.armor_bonus

    @property
    def effective_magic_resist(self) -> float:
        return self.magic_resist + self.buffs.magic_resist_bonus

    @property
    def effective_attack_speed(self) -> float:
        """Attack speed including buffs and slows, never below the floor."""
        speed = self.attack_speed + self.buffs.attack_speed_bonus
        if self.status.slowed:
            speed *= 1 - self.status.slow_amount
        return max(MIN_ATTACK_SPEED, speed)

    @property
    def attack_interval(self) -> float:
        """Time between attacks in seconds."""
        return 1.0 / self.effective_attack_speed

    @property
    def effective_max_hp(self) -> float:
        return self.max_hp + self.buffs.hp_bonus

    @property
    def effective_range(self) -> float:
        return self.range + self.buffs.range_bonus

    @property
    def is_alive(self) -> bool:
        return self.current_hp > 0 and self.state != UnitState.DEAD

    @property
    def is_on_board(self) -> bool:
        return self.position is not None

    @property
    def can_act(self) -> bool:
        """Alive and not stunned."""
        return self.is_alive and not self.status.stunned

    @property
    def hp_percent(self) -> float:
        """HP fraction, 0-1."""
        return self.current_hp / self.effective_max_hp

    @property
    def mana_percent(self) -> float:
        """Mana fraction, 0-1."""
        return self.current_mana / self.max_mana

    @property
    def has_full_mana(self) -> bool:
        return self.current_mana >= self.max_mana

    # =========================================================================
    # COMBAT
    # =========================================================================

    def take_damage(
        self,
        amount: float,
        damage_type: DamageType = DamageType.PHYSICAL,
        source: Optional["CombatUnit"] = None,
    ) -> int:
        """
        Receive damage.

        Armor (physical) or magic resist (magic) reduces the hit by
        ``D / (D + 100)``, then the damage_reduction buff applies as a
        percentage. Any positive hit deals at least 1.

        Args:
            amount: Raw damage amount.
            damage_type: Which defense stat mitigates the hit.
            source: Unit dealing the damage, credited with damage dealt.

        Returns:
            Actual damage taken after mitigation (0 if already dead).
        """
        if not self.is_alive:
            return 0

        defense = (
            self.effective_armor
            if damage_type == DamageType.PHYSICAL
            else self.effective_magic_resist
        )
        reduction = defense / (defense + DEFENSE_SCALING)
        actual = math.floor(amount * (1 - reduction))

        if self.buffs.damage_reduction > 0:
            actual = math.floor(actual * (1 - self.buffs.damage_reduction / 100))

        if amount > 0:
            actual = max(1, actual)

        self.current_hp = max(0, self.current_hp - actual)
        self.damage_taken += actual
        if source is not None:
            source.damage_dealt += actual

        self.gain_mana(self.mana_per_damage_taken)

        if self.current_hp <= 0:
            self.die()

        return actual

    def heal(self, amount: float) -> float:
        """
        Heal the unit, clamped to effective max HP.

        Returns:
            Actual amount healed.
        """
        if not self.is_alive:
            return 0
        healed = min(amount, self.effective_max_hp - self.current_hp)
        self.current_hp += healed
        return healed

    def gain_mana(self, amount: float) -> None:
        """Gain mana plus the mana_regen buff, clamped to max mana."""
        if not self.is_alive:
            return
        self.current_mana = min(self.max_mana, self.current_mana + amount + self.buffs.mana_regen)

    def die(self) -> None:
        self.current_hp = 0
        self.state = UnitState.DEAD
        self.target = None

    def apply_stun(self, duration: float) -> None:
        if not self.is_alive:
            return
        self.status.apply_stun(duration)

    def apply_slow(self, amount: float, duration: float) -> None:
        if not self.is_alive:
            return
        self.status.apply_slow(amount, duration)

    def update_status_effects(self, delta_time: float) -> None:
        self.status.update(delta_time)

    def reset_for_combat(self) -> None:
        """Reset unit state for a new combat. Buffs are left to the caller."""
        self.current_hp = self.effective_max_hp
        self.current_mana = 0.0
        self.state = UnitState.IDLE
        self.target = None
        self.attack_cooldown = 0.0
        self.status.clear()
        self.damage_dealt = 0
        self.damage_taken = 0

    def reset_buffs(self) -> None:
        self.buffs.reset()

    def apply_bonus(self, bonus: Mapping[str, float]) -> None:
        """Add a trait bonus bundle to this unit's buffs."""
        self.buffs.add(bonus)

    # =========================================================================
    # GEOMETRY
    # =========================================================================

    def distance_to(self, other: "CombatUnit") -> float:
        """Chebyshev distance, or infinity if either unit is off the board."""
        if self.position is None or other.position is None:
            return math.inf
        return self.position.distance_to(other.position)

    def is_in_range(self, target: Optional["CombatUnit"] = None) -> bool:
        """Check if target (default: current target) is within effective range."""
        target = target if target is not None else self.target
        if target is None:
            return False
        return self.distance_to(target) <= self.effective_range

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def upgrade(self) -> bool:
        """
        Raise star level by one and re-derive base stats, healing to full.

        Returns:
            True if upgraded, False if already at max star level.
        """
        if self.star_level >= MAX_STAR_LEVEL:
            return False

        self.star_level += 1
        self.max_hp, self.base_attack = _scaled_stats(
            get_unit_template(self.template_id), self.star_level
        )
        self.current_hp = self.effective_max_hp
        return True

    def clone(self) -> "CombatUnit":
        """Copy with a fresh id; buffs and status are copied, not shared."""
        return replace(
            self,
            id=generate_unit_id(),
            traits=list(self.traits),
            target=None,
            buffs=replace(self.buffs),
            status=replace(self.status),
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain snapshot for rendering and the API."""
        return {
            "id": self.id,
            "template_id": self.template_id,
            "name": self.name,
            "emoji": self.emoji,
            "cost": self.cost,
            "star_level": self.star_level,
            "team": self.team.value if self.team else None,
            "traits": list(self.traits),
            "max_hp": self.effective_max_hp,
            "current_hp": self.current_hp,
            "attack": self.attack,
            "attack_speed": self.effective_attack_speed,
            "range": self.effective_range,
            "armor": self.effective_armor,
            "magic_resist": self.effective_magic_resist,
            "current_mana": self.current_mana,
            "max_mana": self.max_mana,
            "position": self.position.to_dict() if self.position else None,
            "state": self.state.name.lower(),
            "stunned": self.status.stunned,
            "slowed": self.status.slowed,
        }

    def __repr__(self) -> str:
        stars = "*" * self.star_level
        hp_pct = int(self.hp_percent * 100) if self.effective_max_hp > 0 else 0
        return f"{self.name}{stars} ({hp_pct}% HP)"


def _scaled_stats(template: UnitTemplate, star_level: int) -> tuple[int, int]:
    multiplier = STAR_MULTIPLIER[star_level]
    return (
        math.floor(template.hp * multiplier["hp"]),
        math.floor(template.attack * multiplier["attack"]),
    )
