"""Real-time combat driver.

Feeds an engine's ``tick`` from an asyncio task on a wall-clock timer, so a
client can watch the battle unfold. The timer only paces the ticks; each tick
still advances simulated time by ``config.tick_seconds``. The result arrives
through a future that resolves once.
"""

from typing import Optional
import asyncio
import logging

from autochess.core.errors import CombatStateError
from .combat_engine import CombatEngine, CombatResult
from .combat_unit import CombatUnit


logger = logging.getLogger(__name__)


class RealtimeCombat:
    """
    Drives one combat in real time.

    Usage:
        runner = RealtimeCombat(engine)
        result = await runner.run(player_units, enemy_units)

    Or, to keep control while the combat runs:
        future = runner.start(player_units, enemy_units)
        ...
        runner.stop()  # future stays pending, engine is CANCELLED
    """

    def __init__(
        self,
        engine: CombatEngine,
        max_ticks: Optional[int] = None,
        interval: Optional[float] = None,
    ):
        """
        Args:
            engine: Engine to drive.
            max_ticks: Optional tick cap, resolved like ``run_sync``'s. None runs
                until a side falls or ``stop`` is called.
            interval: Wall-clock seconds between ticks. Defaults to the
                engine's simulated tick length.
        """
        self.engine = engine
        self.max_ticks = max_ticks
        self.interval = engine.config.tick_seconds if interval is None else interval
        self._task: Optional[asyncio.Task] = None
        self._future: Optional[asyncio.Future] = None

    @property
    def future(self) -> Optional["asyncio.Future[CombatResult]"]:
        return self._future

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(
        self,
        player_units: list[CombatUnit],
        enemy_units: list[CombatUnit],
    ) -> "asyncio.Future[CombatResult]":
        """
        Start the combat and schedule its ticks on the running loop.

        Must be called from a coroutine. A runner drives a single combat.

        Returns:
            Future resolved with the CombatResult when the combat ends.

        Raises:
            CombatStateError: If this runner was already started.
        """
        if self._future is not None:
            raise CombatStateError("Real-time combat already started on this runner")

        loop = asyncio.get_running_loop()
        self._future = loop.create_future()

        result = self.engine.start(player_units, enemy_units)
        if result is not None:
            self._future.set_result(result)
            return self._future

        self._task = loop.create_task(self._run())
        return self._future

    async def run(
        self,
        player_units: list[CombatUnit],
        enemy_units: list[CombatUnit],
    ) -> CombatResult:
        """Start the combat and wait for its result."""
        return await self.start(player_units, enemy_units)

    def stop(self) -> None:
        """Cancel the combat. The future is left unresolved."""
        self.engine.stop()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("Real-time combat stopped at tick %d", self.engine.current_tick)

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                if not self.engine.tick():
                    break
                if self.max_ticks is not None and self.engine.current_tick >= self.max_ticks:
                    self.engine.finish_at_cap(self.max_ticks)
                    break
        except Exception as exc:
            # Hand the failure to whoever awaits the result
            if not self._future.done():
                self._future.set_exception(exc)
            return

        if self.engine.result is not None and not self._future.done():
            self._future.set_result(self.engine.result)
