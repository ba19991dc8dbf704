"""Tests for the real-time combat driver."""

import asyncio

import pytest

from autochess.combat.board import Position
from autochess.combat.combat_engine import CombatEngine, CombatPhase, Winner
from autochess.combat.combat_unit import CombatUnit
from autochess.combat.config import CombatConfig
from autochess.combat.realtime import RealtimeCombat
from autochess.core.errors import CombatStateError


def duel():
    return (
        [CombatUnit.from_template("squire", position=Position(3, 3))],
        [CombatUnit.from_template("apprentice", position=Position(3, 0))],
    )


FAST = 0.001  # wall-clock seconds between ticks


def fast_engine() -> CombatEngine:
    return CombatEngine(seed=3)


def fast_runner(engine: CombatEngine, **kwargs) -> RealtimeCombat:
    return RealtimeCombat(engine, interval=FAST, **kwargs)


class TestRealtimeCombat:
    """Tests for RealtimeCombat."""

    def test_run_matches_batch_mode(self):
        runner = fast_runner(fast_engine())
        result = asyncio.run(runner.run(*duel()))

        assert result.winner == Winner.PLAYER
        assert result.total_ticks == 124
        assert result.surviving_player_units[0].current_hp == 150
        assert runner.running is False

    def test_ticks_reach_listener(self):
        engine = fast_engine()
        ticks = []
        engine.on_tick = lambda observation: ticks.append(observation.tick)

        asyncio.run(fast_runner(engine).run(*duel()))

        assert ticks == list(range(1, 124))

    def test_empty_side_resolves_immediately(self):
        async def scenario():
            runner = fast_runner(fast_engine())
            future = runner.start([], duel()[1])
            assert future.done()
            assert runner.running is False
            return await future

        result = asyncio.run(scenario())
        assert result.winner == Winner.ENEMY
        assert result.total_ticks == 0

    def test_stop_leaves_future_pending(self):
        async def scenario():
            engine = fast_engine()
            runner = RealtimeCombat(engine, interval=0.005)
            future = runner.start(*duel())
            await asyncio.sleep(0.02)
            runner.stop()
            stopped_at = engine.current_tick
            await asyncio.sleep(0.02)
            return engine, future, stopped_at

        engine, future, stopped_at = asyncio.run(scenario())

        assert future.done() is False
        assert engine.phase == CombatPhase.CANCELLED
        assert engine.current_tick == stopped_at
        assert engine.result is None

    def test_second_start_rejected(self):
        async def scenario():
            runner = fast_runner(fast_engine())
            runner.start(*duel())
            try:
                runner.start(*duel())
            finally:
                runner.stop()

        with pytest.raises(CombatStateError):
            asyncio.run(scenario())

    def test_tick_cap(self):
        runner = fast_runner(fast_engine(), max_ticks=5)
        result = asyncio.run(runner.run(*duel()))

        assert result.winner == Winner.DRAW
        assert result.total_ticks == 5

    def test_tick_failure_reaches_awaiter(self):
        engine = fast_engine()

        def explode(observation):
            raise RuntimeError("renderer crashed")

        engine.on_tick = explode

        with pytest.raises(RuntimeError, match="renderer crashed"):
            asyncio.run(fast_runner(engine).run(*duel()))

    def test_start_needs_running_loop(self):
        with pytest.raises(RuntimeError):
            fast_runner(fast_engine()).start(*duel())

    def test_timer_does_not_change_simulated_time(self):
        engine = CombatEngine(config=CombatConfig(tick_ms=100), seed=3)
        runner = RealtimeCombat(engine, interval=0.0005)

        assert runner.interval == 0.0005
        result = asyncio.run(runner.run(*duel()))

        assert engine.config.tick_seconds == 0.1
        assert result.total_ticks == engine.run_sync(*duel()).total_ticks == 124

    def test_interval_defaults_to_tick_length(self):
        engine = CombatEngine(config=CombatConfig(tick_ms=50))
        assert RealtimeCombat(engine).interval == 0.05
