"""Targeting System for autochess combat.

Units always go for the nearest living enemy on the board. Ties are
broken by roster order: the enemy listed first wins.
"""

from typing import Optional, Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from .combat_unit import CombatUnit


class TargetSelector:
    """
    Target selection for basic attacks and abilities.

    Usage:
        selector = TargetSelector()
        target = selector.find_target(unit, enemy_roster)
    """

    def valid_targets(self, enemies: Iterable["CombatUnit"]) -> list["CombatUnit"]:
        """Living, on-board enemies in roster order."""
        return [e for e in enemies if e.is_alive and e.is_on_board]

    def find_target(
        self,
        unit: "CombatUnit",
        enemies: Iterable["CombatUnit"],
    ) -> Optional["CombatUnit"]:
        """
        Pick the nearest enemy and store it as the unit's target.

        Args:
            unit: The unit looking for a target.
            enemies: Enemy roster, in roster order.

        Returns:
            The selected target, or None if no valid enemy exists.
        """
        if not unit.is_alive:
            unit.target = None
            return None

        candidates = self.valid_targets(enemies)
        # min() keeps the first of equal keys, which gives the roster-order tie-break
        target = min(candidates, key=unit.distance_to, default=None)
        unit.target = target
        return target

    def needs_new_target(self, unit: "CombatUnit") -> bool:
        """Targets are only re-acquired once the current one is gone."""
        return unit.target is None or not unit.target.is_alive

    def sort_by_distance(
        self,
        unit: "CombatUnit",
        candidates: Iterable["CombatUnit"],
    ) -> list["CombatUnit"]:
        """Candidates ordered closest first; stable for equal distances."""
        return sorted(candidates, key=unit.distance_to)

    def get_units_in_range(
        self,
        unit: "CombatUnit",
        candidates: Iterable["CombatUnit"],
        radius: float,
    ) -> list["CombatUnit"]:
        """Living candidates within a Chebyshev radius of unit."""
        return [c for c in candidates if c.is_alive and unit.distance_to(c) <= radius]
