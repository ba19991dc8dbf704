"""Tests for CombatUnit."""

import math

import pytest

from autochess.combat.board import Position, Team
from autochess.combat.combat_unit import (
    Buffs,
    CombatUnit,
    DamageType,
    StatusEffects,
    UnitState,
    reset_unit_ids,
)
from autochess.core.constants import MIN_ATTACK_SPEED
from autochess.core.errors import InvalidStarLevelError, UnknownTemplateError


@pytest.fixture
def squire():
    """1-star squire: 550 HP, 50 attack, 20 armor, 10 MR."""
    return CombatUnit.from_template("squire", position=Position(0, 0), team=Team.PLAYER)


class TestCreation:
    """Tests for building units from templates."""

    def test_one_star_stats(self, squire):
        """1-star uses template stats."""
        assert squire.max_hp == 550
        assert squire.base_attack == 50
        assert squire.current_hp == 550
        assert squire.current_mana == 0
        assert squire.traits == ["warrior"]
        assert squire.ability is None

    def test_star_scaling(self):
        """HP and attack scale by 1.8 and 3.2, floored."""
        two = CombatUnit.from_template("squire", star_level=2)
        three = CombatUnit.from_template("squire", star_level=3)

        assert (two.max_hp, two.base_attack) == (990, 90)
        assert (three.max_hp, three.base_attack) == (1760, 160)
        # Other stats do not scale
        assert two.armor == three.armor == 20

    def test_ids_are_sequential(self):
        """Ids follow unit_<n> and restart after reset."""
        reset_unit_ids()
        a = CombatUnit.from_template("squire")
        b = CombatUnit.from_template("squire")

        assert a.id == "unit_1"
        assert b.id == "unit_2"

    def test_unknown_template(self):
        """Unknown template fails fast."""
        with pytest.raises(UnknownTemplateError):
            CombatUnit.from_template("nobody")

    def test_unknown_template_is_key_error(self):
        with pytest.raises(KeyError):
            CombatUnit.from_template("nobody")

    @pytest.mark.parametrize("star", [0, 4])
    def test_invalid_star_level(self, star):
        """Star levels outside 1-3 are rejected."""
        with pytest.raises(InvalidStarLevelError):
            CombatUnit.from_template("squire", star_level=star)

    def test_off_board_by_default(self):
        unit = CombatUnit.from_template("scout")
        assert unit.position is None
        assert unit.is_on_board is False


class TestDamage:
    """Tests for damage mitigation."""

    def test_physical_mitigated_by_armor(self, squire):
        """100 physical vs 20 armor deals floor(100 * 100/120) = 83."""
        dealt = squire.take_damage(100, DamageType.PHYSICAL)

        assert dealt == 83
        assert squire.current_hp == 550 - 83
        assert squire.damage_taken == 83

    def test_magic_mitigated_by_magic_resist(self, squire):
        """100 magic vs 10 MR deals floor(100 * 100/110) = 90."""
        assert squire.take_damage(100, DamageType.MAGIC) == 90

    def test_damage_reduction_applies_after_defense(self, squire):
        """damage_reduction is a percentage of the mitigated hit."""
        squire.buffs.damage_reduction = 10
        assert squire.take_damage(100) == 74  # floor(83 * 0.9)

    def test_minimum_one_damage(self, squire):
        squire.buffs.armor_bonus = 10000
        assert squire.take_damage(1) == 1

    def test_zero_damage_stays_zero(self, squire):
        assert squire.take_damage(0) == 0

    def test_taking_damage_grants_mana(self, squire):
        squire.take_damage(100)
        assert squire.current_mana == 5

    def test_source_credited(self, squire):
        attacker = CombatUnit.from_template("cutthroat")
        squire.take_damage(100, source=attacker)
        assert attacker.damage_dealt == 83

    def test_death(self, squire):
        """Lethal damage kills and clears the target."""
        squire.target = CombatUnit.from_template("scout")
        squire.take_damage(10000)

        assert squire.current_hp == 0
        assert squire.state == UnitState.DEAD
        assert squire.is_alive is False
        assert squire.target is None

    def test_dead_units_ignore_damage(self, squire):
        squire.take_damage(10000)
        assert squire.take_damage(100) == 0
        assert squire.current_mana == 0  # The killing blow grants none


class TestHealing:
    """Tests for healing."""

    def test_heal_restores_missing_hp(self, squire):
        squire.current_hp = 400
        assert squire.heal(100) == 100
        assert squire.current_hp == 500

    def test_heal_clamps_to_max(self, squire):
        squire.current_hp = 500
        assert squire.heal(200) == 50
        assert squire.current_hp == 550

    def test_heal_up_to_buffed_max(self, squire):
        squire.apply_bonus({"hp_bonus": 200})
        squire.current_hp = 550

        assert squire.heal(500) == 200
        assert squire.current_hp == squire.effective_max_hp == 750

    def test_heal_at_full_hp(self, squire):
        assert squire.heal(50) == 0
        assert squire.current_hp == 550

    def test_dead_units_are_not_healed(self, squire):
        squire.die()
        assert squire.heal(100) == 0
        assert squire.current_hp == 0
        assert squire.state == UnitState.DEAD


class TestMana:
    """Tests for mana gain."""

    def test_gain_mana_adds_regen(self, squire):
        squire.buffs.mana_regen = 10
        squire.gain_mana(10)
        assert squire.current_mana == 20

    def test_gain_mana_clamps(self, squire):
        squire.gain_mana(250)
        assert squire.current_mana == squire.max_mana
        assert squire.has_full_mana

    def test_dead_units_gain_nothing(self, squire):
        squire.die()
        squire.gain_mana(10)
        assert squire.current_mana == 0


class TestStatusEffects:
    """Tests for stun and slow."""

    def test_stun_blocks_actions(self, squire):
        squire.apply_stun(1.0)
        assert squire.can_act is False

    def test_stun_wears_off(self, squire):
        squire.apply_stun(1.0)
        squire.update_status_effects(0.5)
        assert squire.status.stunned is True
        squire.update_status_effects(0.5)
        assert squire.status.stunned is False
        assert squire.can_act is True

    def test_stun_keeps_longest_duration(self):
        status = StatusEffects()
        status.apply_stun(2.0)
        status.apply_stun(1.0)
        assert status.stun_duration == 2.0

    def test_slow_reduces_attack_speed(self, squire):
        squire.apply_slow(0.3, 2.0)
        assert squire.effective_attack_speed == pytest.approx(0.7 * 0.7)

    def test_attack_speed_floor(self, squire):
        squire.apply_slow(1.0, 2.0)
        assert squire.effective_attack_speed == pytest.approx(MIN_ATTACK_SPEED)

    def test_slow_expires(self, squire):
        squire.apply_slow(0.3, 0.2)
        squire.update_status_effects(0.1)
        squire.update_status_effects(0.1)
        assert squire.status.slowed is False
        assert squire.effective_attack_speed == pytest.approx(0.7)

    def test_dead_units_are_not_stunned(self, squire):
        squire.die()
        squire.apply_stun(1.0)
        assert squire.status.stunned is False


class TestDerivedStats:
    """Tests for buff-derived stats."""

    def test_buffs_add_to_base(self, squire):
        squire.apply_bonus({"armor_bonus": 25, "attack_bonus": 15, "hp_bonus": 200})

        assert squire.effective_armor == 45
        assert squire.attack == 65
        assert squire.effective_max_hp == 750

    def test_attack_interval(self, squire):
        assert squire.attack_interval == pytest.approx(1 / 0.7)

    def test_range_bonus(self):
        scout = CombatUnit.from_template("scout")
        scout.buffs.range_bonus = 1
        assert scout.effective_range == 4

    def test_buffs_reset(self):
        buffs = Buffs(armor_bonus=25, crit_chance=15)
        buffs.reset()
        assert buffs == Buffs()


class TestGeometry:
    """Tests for distance and range checks."""

    def test_distance_is_chebyshev(self, squire):
        other = CombatUnit.from_template("scout", position=Position(3, 2))
        assert squire.distance_to(other) == 3

    def test_off_board_distance_is_infinite(self, squire):
        other = CombatUnit.from_template("scout")
        assert math.isinf(squire.distance_to(other))

    def test_in_range(self, squire):
        adjacent = CombatUnit.from_template("scout", position=Position(1, 1))
        far = CombatUnit.from_template("scout", position=Position(2, 0))

        assert squire.is_in_range(adjacent) is True
        assert squire.is_in_range(far) is False
        assert squire.is_in_range() is False  # No target


class TestLifecycle:
    """Tests for reset, upgrade and clone."""

    def test_reset_for_combat_fills_buffed_hp(self, squire):
        squire.take_damage(300)
        squire.apply_bonus({"hp_bonus": 200})
        squire.reset_for_combat()

        assert squire.current_hp == 750
        assert squire.current_mana == 0
        assert squire.state == UnitState.IDLE
        assert squire.damage_taken == 0
        assert squire.buffs.hp_bonus == 200  # Buffs are left alone

    def test_upgrade(self, squire):
        assert squire.upgrade() is True
        assert squire.star_level == 2
        assert squire.max_hp == 990
        assert squire.current_hp == 990

    def test_upgrade_at_max(self):
        unit = CombatUnit.from_template("squire", star_level=3)
        assert unit.upgrade() is False
        assert unit.star_level == 3

    def test_clone_is_independent(self, squire):
        copy = squire.clone()
        copy.buffs.armor_bonus = 50
        copy.apply_stun(1.0)

        assert copy.id != squire.id
        assert copy.position == squire.position
        assert squire.buffs.armor_bonus == 0
        assert squire.status.stunned is False

    def test_to_dict(self, squire):
        data = squire.to_dict()
        assert data["template_id"] == "squire"
        assert data["team"] == "player"
        assert data["position"] == {"x": 0, "y": 0}
        assert data["state"] == "idle"

    def test_repr(self, squire):
        assert repr(squire) == "Squire* (100% HP)"
