"""Tests for the combat service."""

import asyncio
import logging

import pytest

from autochess.api.services.combat_service import CombatService
from autochess.combat import CombatConfig, CombatUnit, Position, Winner
from autochess.core.errors import BoardPositionError


def duel():
    return (
        [CombatUnit.from_template("squire", position=Position(3, 3))],
        [CombatUnit.from_template("apprentice", position=Position(3, 0))],
    )


@pytest.fixture
def service():
    return CombatService(default_seed=5, tick_interval=0.001)


class TestResolveBattle:
    """Tests for CombatService.resolve_battle."""

    def test_real_time(self, service):
        ticks = []
        result = asyncio.run(service.resolve_battle(*duel(), on_tick=ticks.append))

        assert result.winner == Winner.PLAYER
        assert result.total_ticks == 124
        assert len(ticks) == 123

    def test_falls_back_to_batch_mode(self, service, caplog):
        def broken_renderer(observation):
            raise RuntimeError("renderer crashed")

        with caplog.at_level(logging.ERROR):
            result = asyncio.run(service.resolve_battle(*duel(), on_tick=broken_renderer))

        assert result.winner == Winner.PLAYER
        assert result.total_ticks == 124
        assert "falling back" in caplog.text
        assert "renderer crashed" in caplog.text

    def test_bad_rosters_are_not_retried(self, service):
        player, enemy = duel()
        enemy[0].position = Position(3, 3)

        with pytest.raises(BoardPositionError):
            asyncio.run(service.resolve_battle(player, enemy))

    def test_real_time_cap(self):
        service = CombatService(config=CombatConfig(max_ticks=5), tick_interval=0.001)
        result = asyncio.run(service.resolve_battle(*duel()))

        assert result.winner == Winner.DRAW
        assert result.total_ticks == 5
