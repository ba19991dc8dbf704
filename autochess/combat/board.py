"""Board geometry for autochess combat.

Both sides fight on one rectangular grid. Distance is Chebyshev (a
diagonal step costs the same as a straight one), so a unit's range is
the size of the square around it that it can reach.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .combat_unit import CombatUnit
    from .config import CombatConfig


class Team(StrEnum):
    """Side identification."""

    PLAYER = "player"  # Deploys into the bottom rows
    ENEMY = "enemy"  # Deploys into the top rows

    @property
    def opponent(self) -> "Team":
        return Team.ENEMY if self is Team.PLAYER else Team.PLAYER


@dataclass(frozen=True)
class Position:
    """
    Grid cell in shared board space.

    Attributes:
        x: Column index (0 = left).
        y: Row index (0 = top, the enemy's back row).
    """

    x: int
    y: int

    def distance_to(self, other: "Position") -> int:
        """Chebyshev distance in grid cells."""
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def offset(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def is_valid(self, cols: int, rows: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= self.x < cols and 0 <= self.y < rows

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}

    def __repr__(self) -> str:
        return f"Pos({self.x}, {self.y})"


@dataclass(frozen=True)
class BoardBounds:
    """Board dimensions plus the rows each side deploys into."""

    cols: int
    rows: int
    side_rows: int

    @classmethod
    def from_config(cls, config: "CombatConfig") -> "BoardBounds":
        return cls(cols=config.board_cols, rows=config.board_rows, side_rows=config.player_rows)

    def contains(self, position: Position) -> bool:
        return position.is_valid(self.cols, self.rows)

    def deploy_rows(self, team: Team) -> range:
        """Rows a side may deploy into: the player owns the bottom, the enemy the top."""
        if team is Team.PLAYER:
            return range(self.rows - self.side_rows, self.rows)
        return range(0, self.side_rows)

    def in_deploy_zone(self, position: Position, team: Team) -> bool:
        return self.contains(position) and position.y in self.deploy_rows(team)

    def mirror(self, position: Position) -> Position:
        """Mirror a position across the board's horizontal midline."""
        return mirror_position(position, self.rows)

    def to_board(self, position: Position, team: Team) -> Position:
        """
        Translate a position from a side's own deployment frame into board space.

        In its own frame every side sees row 0 as its front line. The
        player's frame sits on the bottom half; the enemy's is the mirror
        image on the top half.

        Raises:
            ValueError: If the position is outside the side's own frame.
        """
        if not position.is_valid(self.cols, self.side_rows):
            raise ValueError(f"Position {position} outside a {self.cols}x{self.side_rows} deploy zone")
        shared = Position(position.x, position.y + self.rows - self.side_rows)
        if team is Team.ENEMY:
            return self.mirror(shared)
        return shared


def mirror_position(position: Position, rows: int) -> Position:
    """
    Mirror a position across the horizontal midline.

    Used by callers that lay out the enemy roster from their own side of
    the board: a unit on row 7 (player back row) lands on row 0.

    Args:
        position: Position in the caller's own frame.
        rows: Total board rows.

    Returns:
        Position in shared board space.
    """
    return Position(position.x, rows - 1 - position.y)


def build_occupancy(units: Iterable["CombatUnit"]) -> set[Position]:
    """Cells held by living, on-board units."""
    return {u.position for u in units if u.is_alive and u.position is not None}


def unit_at(units: Iterable["CombatUnit"], position: Position) -> Optional["CombatUnit"]:
    """First living unit standing on a cell, if any."""
    for unit in units:
        if unit.is_alive and unit.position == position:
            return unit
    return None
