"""Tests for board geometry and combat configuration."""

import pytest
from pydantic import ValidationError

from autochess.combat.board import (
    BoardBounds,
    Position,
    Team,
    build_occupancy,
    mirror_position,
    unit_at,
)
from autochess.combat.combat_unit import CombatUnit
from autochess.combat.config import CombatConfig


@pytest.fixture
def bounds():
    return BoardBounds(cols=8, rows=8, side_rows=4)


class TestTeam:
    def test_values(self):
        assert Team.PLAYER == "player"
        assert Team.ENEMY == "enemy"

    def test_opponent(self):
        assert Team.PLAYER.opponent is Team.ENEMY
        assert Team.ENEMY.opponent is Team.PLAYER


class TestPosition:
    """Tests for Position."""

    def test_chebyshev_distance(self):
        assert Position(0, 0).distance_to(Position(3, 1)) == 3
        assert Position(2, 2).distance_to(Position(3, 3)) == 1

    def test_offset(self):
        assert Position(3, 3).offset(1, -1) == Position(4, 2)

    def test_is_valid(self):
        assert Position(7, 7).is_valid(8, 8)
        assert not Position(8, 0).is_valid(8, 8)
        assert not Position(0, -1).is_valid(8, 8)

    def test_hashable(self):
        assert len({Position(1, 1), Position(1, 1)}) == 1


class TestBoardBounds:
    """Tests for BoardBounds."""

    def test_from_config(self):
        assert BoardBounds.from_config(CombatConfig()) == BoardBounds(8, 8, 4)

    def test_deploy_rows(self, bounds):
        assert list(bounds.deploy_rows(Team.PLAYER)) == [4, 5, 6, 7]
        assert list(bounds.deploy_rows(Team.ENEMY)) == [0, 1, 2, 3]

    def test_in_deploy_zone(self, bounds):
        assert bounds.in_deploy_zone(Position(0, 4), Team.PLAYER)
        assert not bounds.in_deploy_zone(Position(0, 3), Team.PLAYER)
        assert bounds.in_deploy_zone(Position(0, 3), Team.ENEMY)

    def test_player_front_row(self, bounds):
        """Row 0 of the player's frame is the row next to the midline."""
        assert bounds.to_board(Position(1, 0), Team.PLAYER) == Position(1, 4)
        assert bounds.to_board(Position(1, 3), Team.PLAYER) == Position(1, 7)

    def test_enemy_front_row(self, bounds):
        assert bounds.to_board(Position(1, 0), Team.ENEMY) == Position(1, 3)
        assert bounds.to_board(Position(1, 3), Team.ENEMY) == Position(1, 0)

    def test_to_board_outside_frame(self, bounds):
        with pytest.raises(ValueError):
            bounds.to_board(Position(0, 4), Team.PLAYER)

    def test_mirror(self, bounds):
        assert mirror_position(Position(2, 7), 8) == Position(2, 0)
        assert bounds.mirror(Position(5, 3)) == Position(5, 4)


class TestOccupancy:
    """Tests for occupancy helpers."""

    def test_only_living_on_board_units(self):
        alive = CombatUnit.from_template("squire", position=Position(0, 0))
        dead = CombatUnit.from_template("squire", position=Position(1, 0))
        benched = CombatUnit.from_template("squire")
        dead.die()

        assert build_occupancy([alive, dead, benched]) == {Position(0, 0)}

    def test_unit_at(self):
        unit = CombatUnit.from_template("squire", position=Position(2, 2))
        assert unit_at([unit], Position(2, 2)) is unit
        assert unit_at([unit], Position(0, 0)) is None


class TestCombatConfig:
    """Tests for CombatConfig."""

    def test_defaults(self):
        config = CombatConfig()
        assert config.tick_ms == 100
        assert config.tick_seconds == pytest.approx(0.1)
        assert config.max_ticks == 1000
        assert config.max_mana == 100

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("AUTOCHESS_COMBAT_TICK_MS", "50")
        assert CombatConfig().tick_seconds == pytest.approx(0.05)

    def test_frozen(self):
        config = CombatConfig()
        with pytest.raises(ValidationError):
            config.tick_ms = 10

    def test_rejects_non_positive_tick(self):
        with pytest.raises(ValidationError):
            CombatConfig(tick_ms=0)
