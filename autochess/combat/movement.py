"""Movement System for autochess combat.

Units take one greedy step per tick toward their target. There is no
pathfinding: a unit whose every candidate step is blocked stays put,
and can stay blocked for the rest of the combat.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .board import BoardBounds, Position
from .combat_unit import UnitState

if TYPE_CHECKING:
    from .combat_unit import CombatUnit


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class MovementPolicy(ABC):
    """Produces the ordered cells a unit tries to step into."""

    @abstractmethod
    def candidate_steps(self, origin: Position, destination: Position) -> list[Position]:
        """
        Cells to try, most preferred first.

        Bounds and occupancy are checked by the caller.
        """


class GreedyMovement(MovementPolicy):
    """
    One-cell step toward the destination.

    With both deltas non-zero: diagonal, then horizontal, then vertical.
    Along a straight line: the direct step, then the two diagonals that
    still make progress.
    """

    def candidate_steps(self, origin: Position, destination: Position) -> list[Position]:
        dx = _sign(destination.x - origin.x)
        dy = _sign(destination.y - origin.y)

        if dx != 0 and dy != 0:
            return [origin.offset(dx, dy), origin.offset(dx, 0), origin.offset(0, dy)]
        if dx != 0:
            return [origin.offset(dx, 0), origin.offset(dx, 1), origin.offset(dx, -1)]
        if dy != 0:
            return [origin.offset(0, dy), origin.offset(1, dy), origin.offset(-1, dy)]
        return []


class MovementSystem:
    """
    Unit movement manager.

    Usage:
        movement = MovementSystem(bounds)
        moved = movement.move_toward(unit, unit.target, occupancy)
    """

    def __init__(self, bounds: BoardBounds, policy: MovementPolicy | None = None):
        """
        Initialize movement system.

        Args:
            bounds: Board dimensions used to reject off-board steps.
            policy: Step ordering; greedy by default.
        """
        self.bounds = bounds
        self.policy = policy or GreedyMovement()

    def move_toward(
        self,
        unit: "CombatUnit",
        target: "CombatUnit",
        occupancy: set[Position],
    ) -> bool:
        """
        Step unit one cell toward target.

        Takes the first in-bounds, unoccupied candidate, moves the unit's
        cell in ``occupancy`` and sets it MOVING. When every candidate is
        blocked the unit goes IDLE.

        Returns:
            True if the unit moved.
        """
        if not unit.can_act or unit.position is None or target is None or target.position is None:
            return False

        origin = unit.position
        candidates = self.policy.candidate_steps(origin, target.position)
        if not candidates:
            return False

        for step in candidates:
            if self.bounds.contains(step) and step not in occupancy:
                occupancy.discard(origin)
                occupancy.add(step)
                unit.position = step
                unit.state = UnitState.MOVING
                return True

        unit.state = UnitState.IDLE
        return False
