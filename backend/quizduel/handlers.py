"""Inbound socket events.

One handler per event name. Handlers validate the payload, call the
controller and return the messages to deliver. Only ``join_room`` and
``create_room`` report failures back to the sender; every other rejected or
malformed event is dropped.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List

from pydantic import ValidationError

from .events import Outbound, to_player
from .exceptions import GameError
from .game import GameController
from .schemas import AnswerIn, CreateRoomIn, ErrorOut, JoinRoomIn, LeaveRoomIn, StartGameIn

logger = logging.getLogger(__name__)

Handler = Callable[[GameController, str, Any], Awaitable[List[Outbound]]]


def _error(player_id: str, message: str) -> List[Outbound]:
    return [to_player(player_id, "error", ErrorOut(message=message))]


async def handle_create_room(controller: GameController, player_id: str, data: Any) -> List[Outbound]:
    try:
        payload = CreateRoomIn.model_validate(data)
    except ValidationError:
        return _error(player_id, "Invalid request.")
    try:
        return await controller.create_room(
            player_id, payload.name, payload.num_questions, payload.allow_flags
        )
    except GameError as exc:
        logger.error("Could not create room for %s: %s", player_id, exc)
        return _error(player_id, exc.message)


async def handle_join_room(controller: GameController, player_id: str, data: Any) -> List[Outbound]:
    try:
        payload = JoinRoomIn.model_validate(data)
    except ValidationError:
        return _error(player_id, "Invalid request.")
    try:
        return await controller.join_room(player_id, payload.room_code, payload.name)
    except GameError as exc:
        logger.info("Join of %s by %s refused: %s", payload.room_code, player_id, exc.message)
        return _error(player_id, exc.message)


async def handle_start_game(controller: GameController, player_id: str, data: Any) -> List[Outbound]:
    payload = StartGameIn.model_validate(data)
    return await controller.start_game(player_id, payload.room_code)


async def handle_answer(controller: GameController, player_id: str, data: Any) -> List[Outbound]:
    payload = AnswerIn.model_validate(data)
    return await controller.answer(player_id, payload.room_code, payload.question_index, payload.choice)


async def handle_leave_room(controller: GameController, player_id: str, data: Any) -> List[Outbound]:
    payload = LeaveRoomIn.model_validate(data)
    return await controller.leave_room(player_id, payload.room_code)


async def handle_ping(controller: GameController, player_id: str, data: Any) -> List[Outbound]:
    return [to_player(player_id, "pong", {})]


HANDLERS: Dict[str, Handler] = {
    "create_room": handle_create_room,
    "join_room": handle_join_room,
    "start_game": handle_start_game,
    "answer": handle_answer,
    "leave_room": handle_leave_room,
    "ping": handle_ping,
}


async def dispatch(controller: GameController, player_id: str, raw: str) -> List[Outbound]:
    """Route one raw text frame ``{"event": ..., "data": {...}}`` to its handler."""

    try:
        frame = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring non-JSON frame from %s", player_id)
        return []
    if not isinstance(frame, dict):
        logger.warning("Ignoring non-object frame from %s", player_id)
        return []

    event = frame.get("event")
    handler = HANDLERS.get(event) if isinstance(event, str) else None
    if handler is None:
        logger.warning("Ignoring unknown event %r from %s", event, player_id)
        return []

    data = frame.get("data")
    try:
        return await handler(controller, player_id, {} if data is None else data)
    except ValidationError as exc:
        logger.warning("Ignoring malformed %s from %s: %d errors", event, player_id, exc.error_count())
        return []
