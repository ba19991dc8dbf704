"""Tests for Movement System."""

import pytest

from autochess.combat.board import BoardBounds, Position, Team
from autochess.combat.combat_unit import CombatUnit, UnitState
from autochess.combat.movement import GreedyMovement, MovementPolicy, MovementSystem


@pytest.fixture
def movement():
    return MovementSystem(BoardBounds(8, 8, 4))


def make(x: int, y: int, team: Team = Team.PLAYER) -> CombatUnit:
    return CombatUnit.from_template("squire", position=Position(x, y), team=team)


class TestGreedyMovement:
    """Tests for candidate step ordering."""

    def test_diagonal_first(self):
        steps = GreedyMovement().candidate_steps(Position(3, 3), Position(5, 1))
        assert steps == [Position(4, 2), Position(4, 3), Position(3, 2)]

    def test_horizontal_line(self):
        steps = GreedyMovement().candidate_steps(Position(3, 3), Position(6, 3))
        assert steps == [Position(4, 3), Position(4, 4), Position(4, 2)]

    def test_vertical_line(self):
        steps = GreedyMovement().candidate_steps(Position(3, 3), Position(3, 0))
        assert steps == [Position(3, 2), Position(4, 2), Position(2, 2)]

    def test_same_cell(self):
        assert GreedyMovement().candidate_steps(Position(3, 3), Position(3, 3)) == []


class TestMoveToward:
    """Tests for MovementSystem.move_toward."""

    def test_moves_one_step(self, movement):
        unit = make(3, 7)
        target = make(3, 0, Team.ENEMY)
        occupancy = {unit.position, target.position}

        assert movement.move_toward(unit, target, occupancy) is True
        assert unit.position == Position(3, 6)
        assert unit.state == UnitState.MOVING
        assert Position(3, 7) not in occupancy
        assert Position(3, 6) in occupancy

    def test_blocked_step_uses_next_candidate(self, movement):
        unit = make(3, 7)
        target = make(3, 0, Team.ENEMY)
        occupancy = {unit.position, target.position, Position(3, 6)}

        movement.move_toward(unit, target, occupancy)
        assert unit.position == Position(4, 6)

    def test_off_board_candidates_skipped(self, movement):
        unit = make(7, 7)
        target = make(7, 0, Team.ENEMY)
        occupancy = {unit.position, target.position, Position(7, 6)}

        movement.move_toward(unit, target, occupancy)
        assert unit.position == Position(6, 6)

    def test_fully_blocked_goes_idle(self, movement):
        unit = make(3, 7)
        unit.state = UnitState.MOVING
        target = make(3, 0, Team.ENEMY)
        occupancy = {unit.position, target.position, Position(3, 6), Position(4, 6), Position(2, 6)}

        assert movement.move_toward(unit, target, occupancy) is False
        assert unit.position == Position(3, 7)
        assert unit.state == UnitState.IDLE

    def test_stunned_unit_does_not_move(self, movement):
        unit = make(3, 7)
        unit.apply_stun(1.0)
        target = make(3, 0, Team.ENEMY)

        assert movement.move_toward(unit, target, set()) is False
        assert unit.position == Position(3, 7)
        assert unit.state == UnitState.IDLE

    def test_custom_policy(self):
        class StandStill(MovementPolicy):
            def candidate_steps(self, origin, destination):
                return []

        movement = MovementSystem(BoardBounds(8, 8, 4), StandStill())
        unit = make(3, 7)
        assert movement.move_toward(unit, make(3, 0, Team.ENEMY), set()) is False
