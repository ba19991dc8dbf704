"""
Combat simulation service.
"""

from typing import List, Optional
import asyncio
import logging

from autochess.combat import (
    CombatConfig,
    CombatEngine,
    CombatResult,
    CombatUnit,
    Position,
    RealtimeCombat,
    Team,
)
from autochess.combat.combat_engine import TickListener
from autochess.core.errors import AutochessError
from autochess.core.synergy_calculator import SynergyCalculator
from ..schemas.combat import (
    ActiveTraitSchema,
    CombatResultSchema,
    SimulateCombatRequest,
    SynergyResponse,
    UnitPlacement,
)


logger = logging.getLogger(__name__)


class CombatService:
    """Combat simulation service."""

    def __init__(
        self,
        config: Optional[CombatConfig] = None,
        default_seed: Optional[int] = None,
        tick_interval: Optional[float] = None,
    ):
        """
        Args:
            config: Engine tunables shared by every battle.
            default_seed: Seed used when a request brings none.
            tick_interval: Wall-clock seconds between real-time ticks;
                defaults to the simulated tick length.
        """
        self.config = config or CombatConfig()
        self.default_seed = default_seed
        self.tick_interval = tick_interval
        self.synergy_calculator = SynergyCalculator()

    def _new_engine(self, seed: Optional[int]) -> CombatEngine:
        return CombatEngine(
            config=self.config,
            seed=seed if seed is not None else self.default_seed,
            synergy_calculator=self.synergy_calculator,
        )

    @staticmethod
    def build_units(placements: List[UnitPlacement], team: Team) -> List[CombatUnit]:
        """
        Create combat units from request placements.

        Raises:
            UnknownTemplateError: If a template does not exist.
            InvalidStarLevelError: If a star level is outside 1-3.
        """
        return [
            CombatUnit.from_template(
                p.template_id,
                p.star_level,
                position=Position(p.x, p.y),
                team=team,
            )
            for p in placements
        ]

    def simulate(self, request: SimulateCombatRequest) -> CombatResultSchema:
        """
        Run one battle to completion without waiting between ticks.

        Args:
            request: Both boards plus optional seed and tick cap.

        Returns:
            Result with the combat log unless the request leaves it out.
        """
        player = self.build_units(request.player.units, Team.PLAYER)
        enemy = self.build_units(request.enemy.units, Team.ENEMY)

        engine = self._new_engine(request.seed)
        result = engine.run_sync(player, enemy, max_ticks=request.max_ticks)
        return self.to_schema(result, include_log=request.include_log)

    async def resolve_battle(
        self,
        player: List[CombatUnit],
        enemy: List[CombatUnit],
        seed: Optional[int] = None,
        on_tick: Optional[TickListener] = None,
    ) -> CombatResult:
        """
        Resolve a battle in real time, falling back to batch mode.

        Ticks arrive at the configured cadence and are reported to
        ``on_tick``. If the real-time run fails for any reason other than
        bad input, the failure is logged and the same rosters are replayed
        with ``run_sync``, which reports no ticks.

        Raises:
            AutochessError: For invalid rosters; these are not retried.
        """
        engine = self._new_engine(seed)
        engine.on_tick = on_tick
        runner = RealtimeCombat(
            engine, max_ticks=self.config.max_ticks, interval=self.tick_interval
        )
        try:
            return await runner.run(player, enemy)
        except AutochessError:
            raise
        except asyncio.CancelledError:
            runner.stop()
            raise
        except Exception:
            logger.exception("Real-time combat failed, falling back to synchronous resolution")
            runner.stop()

        return self._new_engine(seed).run_sync(player, enemy)

    def synergies(self, placements: List[UnitPlacement]) -> SynergyResponse:
        """Planning view of one board's traits."""
        units = self.build_units(placements, Team.PLAYER)
        traits = self.synergy_calculator.calculate_synergies(units)
        active = {t.trait.id: t for t in traits if t.is_active}
        return SynergyResponse(
            traits=[
                ActiveTraitSchema(
                    **t.to_dict(),
                    bonus_text=self.synergy_calculator.describe_bonus(t.trait.id, t.threshold),
                )
                for t in traits
            ],
            summary=self.synergy_calculator.summarize(active),
        )

    @staticmethod
    def to_schema(result: CombatResult, include_log: bool = True) -> CombatResultSchema:
        return CombatResultSchema(**result.to_dict(include_log=include_log))
