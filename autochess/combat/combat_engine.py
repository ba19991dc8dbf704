"""Combat Engine for autochess.

The main combat simulation loop that orchestrates all combat systems:
- Roster cloning, trait bonuses and initialization
- Combat tick (status, targeting, attacking, abilities, movement)
- Win condition checking
- Result calculation

The same ``tick`` drives both the synchronous batch mode (``run_sync``)
and the real-time driver in ``realtime.py``.
"""

from dataclasses import dataclass, field
from enum import Enum, StrEnum, auto
from typing import Any, Callable, Optional
import logging
import random

from autochess.core.constants import calculate_player_damage
from autochess.core.errors import BoardPositionError, CombatStateError
from autochess.core.synergy_calculator import ActiveTrait, SynergyCalculator
from .ability import AbilitySystem
from .attack import AttackSystem
from .board import BoardBounds, Position, Team, build_occupancy
from .combat_unit import CombatUnit, UnitState
from .config import CombatConfig
from .movement import MovementPolicy, MovementSystem
from .targeting import TargetSelector


logger = logging.getLogger(__name__)


class CombatPhase(Enum):
    """Combat phases."""

    NOT_STARTED = auto()  # Constructed, no rosters yet
    RUNNING = auto()  # Combat in progress
    ENDED = auto()  # Winner decided, result available
    CANCELLED = auto()  # Stopped from outside, no result


class Winner(StrEnum):
    """Combat outcome."""

    PLAYER = "player"
    ENEMY = "enemy"
    DRAW = "draw"


@dataclass(frozen=True)
class CombatEvent:
    """One tick-stamped combat log entry."""

    tick: int
    type: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"tick": self.tick, "type": self.type, "data": self.data}


@dataclass(frozen=True)
class CombatResult:
    """Result of a combat round."""

    winner: Winner
    damage_to_loser: int
    damage_to_player: int
    damage_to_enemy: int
    surviving_player_units: tuple[CombatUnit, ...]
    surviving_enemy_units: tuple[CombatUnit, ...]
    total_ticks: int
    combat_log: tuple[CombatEvent, ...]

    def to_dict(self, include_log: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "winner": self.winner.value,
            "damage_to_loser": self.damage_to_loser,
            "damage_to_player": self.damage_to_player,
            "damage_to_enemy": self.damage_to_enemy,
            "surviving_player_units": [u.to_dict() for u in self.surviving_player_units],
            "surviving_enemy_units": [u.to_dict() for u in self.surviving_enemy_units],
            "total_ticks": self.total_ticks,
        }
        if include_log:
            data["combat_log"] = [e.to_dict() for e in self.combat_log]
        return data


@dataclass(frozen=True)
class TickObservation:
    """Both rosters after a tick, for rendering."""

    tick: int
    player_units: tuple[CombatUnit, ...]
    enemy_units: tuple[CombatUnit, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "player_units": [u.to_dict() for u in self.player_units],
            "enemy_units": [u.to_dict() for u in self.enemy_units],
        }


@dataclass
class CombatState:
    """Current state of combat."""

    phase: CombatPhase = CombatPhase.NOT_STARTED
    current_tick: int = 0

    # Combat events log
    events: list[CombatEvent] = field(default_factory=list)


TickListener = Callable[[TickObservation], None]


class CombatEngine:
    """
    Main combat simulation engine.

    Usage:
        engine = CombatEngine(seed=42)
        result = engine.run_sync(player_units, enemy_units)

    Or step-by-step:
        engine.start(player_units, enemy_units)
        while engine.tick():
            pass
        result = engine.result
    """

    def __init__(
        self,
        config: Optional[CombatConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        synergy_calculator: Optional[SynergyCalculator] = None,
        movement_policy: Optional[MovementPolicy] = None,
    ):
        """
        Initialize combat engine.

        Args:
            config: Engine tunables; defaults read from the environment.
            seed: Random seed for deterministic simulation. Ignored when rng is given.
            rng: Random source shared by the shuffle and crit rolls.
            synergy_calculator: Trait resolver; one per engine by default.
            movement_policy: Step ordering; greedy by default.
        """
        self.config = config or CombatConfig()
        self.rng = rng or random.Random(seed)
        self.bounds = BoardBounds.from_config(self.config)

        # Subsystems
        self.synergy_calculator = synergy_calculator or SynergyCalculator()
        self.target_selector = TargetSelector()
        self.movement = MovementSystem(self.bounds, movement_policy)
        self.attack_system = AttackSystem(self.rng, self.config.mana_per_attack)
        self.ability_system = AbilitySystem(
            self.target_selector, self.config.default_slow_duration
        )

        # Called after every tick that leaves the combat running
        self.on_tick: Optional[TickListener] = None

        self._clear()

    def _clear(self) -> None:
        """Clear all combat state."""
        self.player_units: list[CombatUnit] = []
        self.enemy_units: list[CombatUnit] = []
        self.occupancy: set[Position] = set()
        self.active_traits: dict[Team, dict[str, ActiveTrait]] = {}
        self.result: Optional[CombatResult] = None
        self.state = CombatState()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(
        self,
        player_units: list[CombatUnit],
        enemy_units: list[CombatUnit],
    ) -> Optional[CombatResult]:
        """
        Set up a combat from two rosters.

        Positioned units are cloned, tagged with their side, given their
        side's trait bonuses and reset to full HP. The caller's units are
        never modified. A side with no positioned units decides the
        combat immediately.

        Returns:
            The result if the combat was decided without a tick, else None.

        Raises:
            CombatStateError: If a combat is already running.
            BoardPositionError: If a unit stands off the board or on a taken cell.
        """
        if self.state.phase == CombatPhase.RUNNING:
            raise CombatStateError("Combat already running; stop it before starting another")

        self._clear()
        self.player_units = self._prepare_roster(player_units, Team.PLAYER)
        self.enemy_units = self._prepare_roster(enemy_units, Team.ENEMY)
        self._check_positions()

        self.occupancy = build_occupancy(self.all_units)
        self.state.phase = CombatPhase.RUNNING

        self._log_event("combat_start", {
            "player_unit_count": len(self.player_units),
            "enemy_unit_count": len(self.enemy_units),
        })
        for team in (Team.PLAYER, Team.ENEMY):
            for trait_id, active in self.active_traits[team].items():
                self._log_event("trait_active", {
                    "team": team.value,
                    "trait": trait_id,
                    "name": active.trait.name,
                    "count": active.count,
                    "threshold": active.threshold,
                    "bonus": {str(k): v for k, v in active.bonus.items()},
                })

        logger.debug(
            "Combat started: %d player units vs %d enemy units",
            len(self.player_units),
            len(self.enemy_units),
        )

        if not self.player_units or not self.enemy_units:
            self._determine_winner()
            return self.result
        return None

    def _prepare_roster(self, units: list[CombatUnit], team: Team) -> list[CombatUnit]:
        roster = [u.clone() for u in units if u.is_on_board]
        for unit in roster:
            unit.team = team
            unit.max_mana = self.config.max_mana
            unit.mana_per_damage_taken = self.config.mana_per_damage_taken
            # Starting HP ignores buffs carried over from an earlier combat
            unit.reset_buffs()
            unit.reset_for_combat()

        # HP stays at the unbuffed maximum; hp_bonus only raises the cap
        self.active_traits[team] = self.synergy_calculator.resolve(roster)
        return roster

    def _check_positions(self) -> None:
        seen: set[Position] = set()
        for unit in self.all_units:
            if not self.bounds.contains(unit.position):
                raise BoardPositionError(f"{unit.name} ({unit.id}) is off the board at {unit.position}")
            if unit.position in seen:
                raise BoardPositionError(f"Two units share cell {unit.position}")
            seen.add(unit.position)

    def stop(self) -> None:
        """Cancel a running combat. No result is produced."""
        if self.state.phase == CombatPhase.RUNNING:
            self.state.phase = CombatPhase.CANCELLED
            logger.debug("Combat cancelled at tick %d", self.state.current_tick)

    def run_sync(
        self,
        player_units: list[CombatUnit],
        enemy_units: list[CombatUnit],
        max_ticks: Optional[int] = None,
    ) -> CombatResult:
        """
        Run combat to completion without waiting between ticks.

        Args:
            player_units: Player roster.
            enemy_units: Enemy roster.
            max_ticks: Tick cap; defaults to the configured max_ticks.

        Returns:
            CombatResult. A combat with survivors on both sides at the
            cap ends as a draw.
        """
        max_ticks = max_ticks if max_ticks is not None else self.config.max_ticks

        result = self.start(player_units, enemy_units)
        if result is not None:
            return result

        while self.state.phase == CombatPhase.RUNNING and self.state.current_tick < max_ticks:
            self.tick()

        self.finish_at_cap(max_ticks)
        return self.result

    def finish_at_cap(self, max_ticks: int) -> None:
        """
        End a running combat that reached its tick cap.

        A side without survivors still loses; otherwise the combat is a draw.
        """
        if self.state.phase != CombatPhase.RUNNING:
            return
        if self.is_over():
            self._determine_winner()
        else:
            logger.info(
                "Combat hit the %d tick cap with survivors on both sides, ending as a draw",
                max_ticks,
            )
            self._end_combat(Winner.DRAW)

    # =========================================================================
    # TICK
    # =========================================================================

    def tick(self) -> bool:
        """
        Execute one combat tick.

        Returns:
            True if combat is still running, False if finished.
        """
        if self.state.phase != CombatPhase.RUNNING:
            return False

        self.state.current_tick += 1

        if self.is_over():
            self._determine_winner()
            return False

        self.occupancy = build_occupancy(self.all_units)

        # Shuffle unit order for fairness
        living = [u for u in self.all_units if u.is_alive]
        self.rng.shuffle(living)

        delta_time = self.config.tick_seconds
        for unit in living:
            self._update_unit(unit, delta_time)

        if self.on_tick is not None:
            self.on_tick(self.observe())

        return True

    def _update_unit(self, unit: CombatUnit, delta_time: float) -> None:
        """Update a single unit for one tick."""
        if not unit.is_alive:
            return

        unit.update_status_effects(delta_time)
        if not unit.can_act:
            return

        if self.target_selector.needs_new_target(unit):
            self.target_selector.find_target(unit, self._enemies_of(unit))
        if unit.target is None:
            return

        if unit.attack_cooldown > 0:
            unit.attack_cooldown -= delta_time

        if unit.is_in_range():
            if unit.attack_cooldown <= 0:
                unit.attack_cooldown = unit.attack_interval
                unit.state = UnitState.ATTACKING
                self._attack(unit, unit.target)
            else:
                unit.state = UnitState.IDLE
        else:
            self._move(unit)

    def _attack(self, attacker: CombatUnit, defender: CombatUnit) -> None:
        result = self.attack_system.execute_attack(attacker, defender)
        if result is None:
            return
        self._log_event("attack", result.to_event_data())

        if self.ability_system.can_cast(attacker):
            cast = self.ability_system.cast(
                attacker,
                defender,
                self._enemies_of(attacker),
                self._allies_of(attacker),
            )
            for event_type, data in cast.events:
                self._log_event(event_type, data)

    def _move(self, unit: CombatUnit) -> None:
        origin = unit.position
        if self.movement.move_toward(unit, unit.target, self.occupancy):
            self._log_event("move", {
                "unit": unit.id,
                "unit_name": unit.name,
                "from": origin.to_dict(),
                "to": unit.position.to_dict(),
            })

    # =========================================================================
    # OUTCOME
    # =========================================================================

    def is_over(self) -> bool:
        """Check if either side has no living units."""
        return not self.living(Team.PLAYER) or not self.living(Team.ENEMY)

    def _determine_winner(self) -> None:
        alive_player = self.living(Team.PLAYER)
        alive_enemy = self.living(Team.ENEMY)

        if not alive_player and not alive_enemy:
            self._end_combat(Winner.DRAW)
        elif not alive_player:
            self._end_combat(Winner.ENEMY, self._calculate_player_damage(alive_enemy))
        else:
            self._end_combat(Winner.PLAYER, self._calculate_player_damage(alive_player))

    def _calculate_player_damage(self, winning_units: list[CombatUnit]) -> int:
        """Base loss damage plus one per star of each surviving winner."""
        return calculate_player_damage(
            [u.star_level for u in winning_units],
            base=self.config.base_loss_damage,
        )

    def _end_combat(self, winner: Winner, damage_to_loser: int = 0) -> None:
        """End combat with a winner and freeze the result."""
        self.state.phase = CombatPhase.ENDED
        survivors_player = tuple(self.living(Team.PLAYER))
        survivors_enemy = tuple(self.living(Team.ENEMY))

        self._log_event("combat_end", {
            "winner": winner.value,
            "damage_to_loser": damage_to_loser,
            "total_ticks": self.state.current_tick,
            "surviving_player_units": len(survivors_player),
            "surviving_enemy_units": len(survivors_enemy),
        })

        self.result = CombatResult(
            winner=winner,
            damage_to_loser=damage_to_loser,
            damage_to_player=damage_to_loser if winner == Winner.ENEMY else 0,
            damage_to_enemy=damage_to_loser if winner == Winner.PLAYER else 0,
            surviving_player_units=survivors_player,
            surviving_enemy_units=survivors_enemy,
            total_ticks=self.state.current_tick,
            combat_log=tuple(self.state.events),
        )
        logger.debug(
            "Combat ended after %d ticks: winner=%s damage=%d",
            self.state.current_tick,
            winner.value,
            damage_to_loser,
        )

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def all_units(self) -> list[CombatUnit]:
        return self.player_units + self.enemy_units

    @property
    def events(self) -> list[CombatEvent]:
        return list(self.state.events)

    @property
    def current_tick(self) -> int:
        return self.state.current_tick

    @property
    def phase(self) -> CombatPhase:
        return self.state.phase

    def is_finished(self) -> bool:
        """Check if combat ended or was cancelled."""
        return self.state.phase in (CombatPhase.ENDED, CombatPhase.CANCELLED)

    def roster(self, team: Team) -> list[CombatUnit]:
        return self.player_units if team == Team.PLAYER else self.enemy_units

    def living(self, team: Team) -> list[CombatUnit]:
        return [u for u in self.roster(team) if u.is_alive]

    def _enemies_of(self, unit: CombatUnit) -> list[CombatUnit]:
        return self.roster(unit.team.opponent)

    def _allies_of(self, unit: CombatUnit) -> list[CombatUnit]:
        return self.roster(unit.team)

    def observe(self) -> TickObservation:
        return TickObservation(
            tick=self.state.current_tick,
            player_units=tuple(self.player_units),
            enemy_units=tuple(self.enemy_units),
        )

    def get_state(self) -> dict[str, Any]:
        """Current state of all units, for rendering."""
        return {
            "phase": self.state.phase.name.lower(),
            "tick": self.state.current_tick,
            "player_units": [u.to_dict() for u in self.player_units],
            "enemy_units": [u.to_dict() for u in self.enemy_units],
            "result": self.result.to_dict(include_log=False) if self.result else None,
        }

    def _log_event(self, event_type: str, data: dict[str, Any]) -> None:
        """Log a combat event."""
        self.state.events.append(CombatEvent(self.state.current_tick, event_type, data))
