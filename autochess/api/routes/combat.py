"""
Combat simulation API routes.
"""

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
import asyncio
import logging

from autochess.combat import Team, TickObservation
from autochess.core.errors import AutochessError, UnknownTemplateError
from ..schemas.combat import (
    CombatResultSchema,
    SimulateCombatRequest,
    SynergyRequest,
    SynergyResponse,
)
from ..schemas.common import ErrorResponse
from ..services.combat_service import CombatService
from ..dependencies import get_combat_service
from ..websocket.handlers import manager

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


def _http_error(exc: AutochessError) -> HTTPException:
    status = 404 if isinstance(exc, UnknownTemplateError) else 400
    return HTTPException(status_code=status, detail=str(exc))


@router.post("/simulate", response_model=CombatResultSchema, responses=ERROR_RESPONSES)
async def simulate_combat(
    request: SimulateCombatRequest,
    service: CombatService = Depends(get_combat_service),
):
    """
    Simulate one battle between two boards.

    Runs to completion without real-time delay and returns the result
    with its combat log.
    """
    try:
        return service.simulate(request)
    except AutochessError as e:
        raise _http_error(e)


@router.post("/synergies", response_model=SynergyResponse, responses=ERROR_RESPONSES)
async def get_synergies(
    request: SynergyRequest,
    service: CombatService = Depends(get_combat_service),
):
    """Trait display for one board, active traits first."""
    try:
        return service.synergies(request.units)
    except AutochessError as e:
        raise _http_error(e)


@router.websocket("/live")
async def live_combat(
    websocket: WebSocket,
    channel: str = "default",
    service: CombatService = Depends(get_combat_service),
):
    """
    Stream a battle tick by tick.

    The client sends one SimulateCombatRequest as JSON. Every client on the
    channel receives ``{"type": "tick", ...}`` messages, then one
    ``{"type": "result", ...}``. Bad requests get ``{"type": "error"}``.
    """
    await manager.connect(websocket, channel)
    logger.debug("Client joined channel %s (%d watching)", channel, manager.channel_size(channel))
    battle = None
    try:
        payload = await websocket.receive_json()
        try:
            request = SimulateCombatRequest.model_validate(payload)
            player = service.build_units(request.player.units, Team.PLAYER)
            enemy = service.build_units(request.enemy.units, Team.ENEMY)
        except (ValidationError, AutochessError) as e:
            await websocket.send_json({"type": "error", "detail": str(e)})
            return

        queue: asyncio.Queue = asyncio.Queue()

        def on_tick(observation: TickObservation) -> None:
            queue.put_nowait({"type": "tick", **observation.to_dict()})

        battle = asyncio.create_task(
            service.resolve_battle(player, enemy, seed=request.seed, on_tick=on_tick)
        )
        battle.add_done_callback(lambda _: queue.put_nowait(None))

        while True:
            message = await queue.get()
            if message is None:
                break
            await manager.broadcast(channel, message)

        try:
            result = await battle
        except AutochessError as e:
            await websocket.send_json({"type": "error", "detail": str(e)})
            return

        await manager.broadcast(channel, {
            "type": "result",
            "result": result.to_dict(include_log=request.include_log),
        })
    except WebSocketDisconnect:
        logger.debug("Live combat client left channel %s", channel)
    finally:
        if battle is not None and not battle.done():
            battle.cancel()
        manager.disconnect(websocket, channel)
