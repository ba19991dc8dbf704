"""Player Units Management for autochess.

Manages a player's owned units on bench and board, combines copies into
higher star levels, and turns the deployed board into a combat roster.
Positions here are in the player's own deployment frame: row 0 is the
front line.
"""

from typing import Optional, TYPE_CHECKING
from dataclasses import dataclass, field
from itertools import count

from autochess.core.constants import (
    BENCH_SIZE,
    BOARD_COLS,
    COPIES_TO_UPGRADE,
    MAX_STAR_LEVEL,
    MIN_STAR_LEVEL,
    PLAYER_ROWS,
    SELL_REFUND_RATE,
)
from autochess.core.errors import BoardPositionError, InvalidStarLevelError
from autochess.data.loaders import get_unit_template
from autochess.data.models.unit import UnitTemplate

if TYPE_CHECKING:
    from autochess.combat.board import BoardBounds, Team
    from autochess.combat.combat_unit import CombatUnit
    from autochess.core.synergy_calculator import SynergyCalculator, ActiveTrait


_instance_ids = count(1)


@dataclass(eq=False)
class UnitInstance:
    """
    A unit owned by a player.
    Tracks template, star level and board position.
    """

    template: UnitTemplate
    star_level: int = 1
    position: Optional[tuple[int, int]] = None  # (x, y) on board, None if on bench
    id: str = field(default_factory=lambda: f"owned_{next(_instance_ids)}")

    def __post_init__(self) -> None:
        if not MIN_STAR_LEVEL <= self.star_level <= MAX_STAR_LEVEL:
            raise InvalidStarLevelError(self.star_level)

    @classmethod
    def from_template_id(cls, template_id: str, star_level: int = 1) -> "UnitInstance":
        return cls(template=get_unit_template(template_id), star_level=star_level)

    @property
    def template_id(self) -> str:
        return self.template.id

    @property
    def copies(self) -> int:
        """One-star copies this instance represents (1, 3 or 9)."""
        return COPIES_TO_UPGRADE ** (self.star_level - 1)

    def get_sell_value(self) -> int:
        """
        Calculate sell value based on cost and star level.
        1-star: cost, 2-star: cost*3, 3-star: cost*9

        Returns:
            Gold value when sold.
        """
        return int(self.template.cost * self.copies * SELL_REFUND_RATE)

    def is_on_board(self) -> bool:
        """Check if unit is on the board."""
        return self.position is not None

    def __repr__(self) -> str:
        stars = "*" * self.star_level
        return f"{self.template.name} {stars}"


class PlayerUnits:
    """
    Manages a player's owned units (bench + board).
    """

    def __init__(
        self,
        bench_size: int = BENCH_SIZE,
        board_width: int = BOARD_COLS,
        board_height: int = PLAYER_ROWS,
        synergy_calculator: Optional["SynergyCalculator"] = None,
    ):
        """Initialize empty bench and board."""
        self.bench_size = bench_size
        self.board_width = board_width
        self.board_height = board_height
        self.bench: list[Optional[UnitInstance]] = [None] * bench_size
        self.board: dict[tuple[int, int], UnitInstance] = {}  # (x, y) -> unit
        self._synergy_calculator = synergy_calculator

    def add_to_bench(self, template_id: str) -> Optional[UnitInstance]:
        """
        Add a one-star copy to the first empty bench slot.

        Three copies of the same template and star level combine right
        away; the result may combine again (three 2-stars into a 3-star).

        Args:
            template_id: Unit template to add.

        Returns:
            The instance now holding the copy (possibly upgraded), or None if bench is full.

        Raises:
            UnknownTemplateError: If the template does not exist.
        """
        template = get_unit_template(template_id)
        for i, slot in enumerate(self.bench):
            if slot is None:
                instance = UnitInstance(template=template)
                self.bench[i] = instance
                upgraded = self._try_auto_upgrade(template_id)
                return upgraded or instance

        return None  # Bench full

    def _instances_of(self, template_id: str, star_level: int) -> list[UnitInstance]:
        """Board units first, then bench, so a deployed copy keeps its cell when combining."""
        on_board = [u for u in self.board.values() if u.template_id == template_id]
        on_bench = [u for u in self.bench if u is not None and u.template_id == template_id]
        return [u for u in on_board + on_bench if u.star_level == star_level]

    def _try_auto_upgrade(self, template_id: str) -> Optional[UnitInstance]:
        """
        Combine copies while any star level has enough of them.

        Returns:
            The last upgraded instance, or None if nothing combined.
        """
        upgraded = None
        for star_level in range(MIN_STAR_LEVEL, MAX_STAR_LEVEL):
            candidates = self._instances_of(template_id, star_level)
            while len(candidates) >= COPIES_TO_UPGRADE:
                group = candidates[:COPIES_TO_UPGRADE]
                candidates = candidates[COPIES_TO_UPGRADE:]
                upgraded = self._perform_upgrade(group)
        return upgraded

    def _perform_upgrade(self, instances: list[UnitInstance]) -> UnitInstance:
        """
        Combine copies into one, keeping the first.

        Args:
            instances: COPIES_TO_UPGRADE instances of one template and star level.

        Returns:
            The upgraded instance.
        """
        upgraded = instances[0]
        upgraded.star_level += 1
        for instance in instances[1:]:
            self._remove(instance)
        return upgraded

    def can_upgrade(self, template_id: str) -> bool:
        """Check if any star level holds enough copies to combine."""
        return any(
            len(self._instances_of(template_id, star)) >= COPIES_TO_UPGRADE
            for star in range(MIN_STAR_LEVEL, MAX_STAR_LEVEL)
        )

    def _remove(self, instance: UnitInstance) -> None:
        for i, bench_instance in enumerate(self.bench):
            if bench_instance is instance:
                self.bench[i] = None
                return
        if instance.position is not None and self.board.get(instance.position) is instance:
            del self.board[instance.position]
            instance.position = None

    def sell(self, instance: UnitInstance) -> int:
        """
        Sell a unit from bench or board.

        Returns:
            Gold value received.
        """
        gold = instance.get_sell_value()
        self._remove(instance)
        return gold

    def sell_from_bench(self, slot_index: int) -> tuple[Optional[UnitInstance], int]:
        """
        Sell a unit from a specific bench slot.

        Returns:
            Tuple of (sold instance, gold received) or (None, 0) if empty.
        """
        if slot_index < 0 or slot_index >= self.bench_size:
            return None, 0

        instance = self.bench[slot_index]
        if instance is None:
            return None, 0

        return instance, self.sell(instance)

    def place_on_board(self, instance: UnitInstance, x: int, y: int) -> None:
        """
        Place a unit on the board at position (x, y), moving it from the
        bench or from another cell.

        Raises:
            BoardPositionError: If (x, y) is outside the deployment zone or occupied.
        """
        if not (0 <= x < self.board_width and 0 <= y < self.board_height):
            raise BoardPositionError(
                f"Position ({x}, {y}) outside the {self.board_width}x{self.board_height} board"
            )

        pos = (x, y)
        occupant = self.board.get(pos)
        if occupant is not None and occupant is not instance:
            raise BoardPositionError(f"Position ({x}, {y}) already holds {occupant!r}")

        for i, bench_instance in enumerate(self.bench):
            if bench_instance is instance:
                self.bench[i] = None
                break
        if instance.position is not None:
            self.board.pop(instance.position, None)

        self.board[pos] = instance
        instance.position = pos

    def remove_from_board(self, x: int, y: int) -> Optional[UnitInstance]:
        """
        Remove a unit from the board and return it to the bench.

        Returns:
            The removed instance, or None if position empty.
        """
        instance = self.board.pop((x, y), None)
        if instance is None:
            return None

        instance.position = None

        for i, slot in enumerate(self.bench):
            if slot is None:
                self.bench[i] = instance
                break

        # If bench full, the caller decides (sell it, usually)
        return instance

    def get_board_count(self) -> int:
        return len(self.board)

    def get_bench_count(self) -> int:
        return sum(1 for slot in self.bench if slot is not None)

    def get_board_units(self) -> list[UnitInstance]:
        """Board units ordered front row first, then left to right."""
        return [self.board[pos] for pos in sorted(self.board, key=lambda p: (p[1], p[0]))]

    def get_bench_units(self) -> list[Optional[UnitInstance]]:
        """Get bench slots (including None for empty)."""
        return self.bench.copy()

    def get_all_instances(self) -> list[UnitInstance]:
        return [slot for slot in self.bench if slot is not None] + list(self.board.values())

    def has_bench_space(self) -> bool:
        return any(slot is None for slot in self.bench)

    def to_combat_units(
        self,
        bounds: Optional["BoardBounds"] = None,
        team: Optional["Team"] = None,
    ) -> list["CombatUnit"]:
        """
        Build a combat roster from the deployed board.

        Args:
            bounds: Combat board; defaults to the standard board.
            team: Side the roster fights for; defaults to the player.

        Returns:
            One CombatUnit per board unit, placed in shared board space.
        """
        from autochess.combat.board import BoardBounds, Position, Team
        from autochess.combat.combat_unit import CombatUnit

        bounds = bounds or BoardBounds(self.board_width, 2 * self.board_height, self.board_height)
        team = team or Team.PLAYER
        return [
            CombatUnit.from_template(
                instance.template_id,
                instance.star_level,
                position=bounds.to_board(Position(*instance.position), team),
                team=team,
            )
            for instance in self.get_board_units()
        ]

    def __repr__(self) -> str:
        return f"PlayerUnits(bench={self.get_bench_count()}/{self.bench_size}, board={self.get_board_count()})"

    # Synergy-related methods

    def _get_synergy_calculator(self) -> "SynergyCalculator":
        """Lazy-load synergy calculator."""
        if self._synergy_calculator is None:
            from autochess.core.synergy_calculator import SynergyCalculator
            self._synergy_calculator = SynergyCalculator()
        return self._synergy_calculator

    def get_active_synergies(self) -> list["ActiveTrait"]:
        """Planning view of the board's traits, active first."""
        return self._get_synergy_calculator().calculate_synergies(self.to_combat_units())
