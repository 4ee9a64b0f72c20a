from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable

from fastapi import WebSocket, WebSocketDisconnect

from .events import Outbound

logger = logging.getLogger(__name__)


class ConnectionHub:
    """Open sockets by connection id. The connection id doubles as the player id."""

    def __init__(self):
        self._sockets: Dict[str, WebSocket] = {}

    def __len__(self) -> int:
        return len(self._sockets)

    async def connect(self, ws: WebSocket) -> str:
        await ws.accept()
        player_id = uuid.uuid4().hex
        self._sockets[player_id] = ws
        return player_id

    def disconnect(self, player_id: str) -> None:
        self._sockets.pop(player_id, None)

    async def send(self, player_id: str, frame: dict[str, Any]) -> bool:
        ws = self._sockets.get(player_id)
        if ws is None:
            return False
        try:
            await ws.send_json(frame)
        except (WebSocketDisconnect, RuntimeError) as exc:
            # socket went away between lookup and send; its own loop cleans up
            logger.warning("Dropping %s for %s: %s", frame.get("event"), player_id, exc)
            self.disconnect(player_id)
            return False
        return True

    async def deliver(self, messages: Iterable[Outbound]) -> None:
        for message in messages:
            frame = message.frame()
            for player_id in message.recipients:
                await self.send(player_id, frame)
