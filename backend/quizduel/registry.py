from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, Dict, List, Optional

from .exceptions import RoomCodeExhausted
from .models import Room

logger = logging.getLogger(__name__)

# no I, L, O, 0 or 1 so codes can be read out loud
ROOM_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"


def generate_room_code(length: int = 6) -> str:
    """Random code; uniqueness is the registry's job."""

    return "".join(random.choices(ROOM_CODE_ALPHABET, k=length))


class RoomRegistry:
    """Active rooms by code, plus one lock per room.

    Map-level changes (insert/remove) go through ``self._lock``. Everything that
    mutates a room itself is expected to run under :meth:`lock` for that code.
    """

    def __init__(
        self,
        *,
        code_length: int = 6,
        max_attempts: int = 100,
        code_factory: Optional[Callable[[int], str]] = None,
    ):
        self._rooms: Dict[str, Room] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock = asyncio.Lock()
        self._code_length = code_length
        self._max_attempts = max_attempts
        self._code_factory = code_factory or generate_room_code

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        return code in self._rooms

    def _allocate_code(self) -> str:
        for _ in range(self._max_attempts):
            code = self._code_factory(self._code_length)
            if code not in self._rooms:
                return code
            logger.warning("Room code collision on %s, retrying", code)
        raise RoomCodeExhausted()

    async def create(self, factory: Callable[[str], Room]) -> Room:
        """Allocate a fresh code and register the room ``factory`` builds for it.

        The room only becomes visible through :meth:`get` once ``factory`` has
        returned a complete object.
        """

        async with self._lock:
            code = self._allocate_code()
            room = factory(code)
            self._locks[code] = asyncio.Lock()
            self._rooms[code] = room
        return room

    def get(self, code: str) -> Optional[Room]:
        return self._rooms.get(code)

    async def remove(self, code: str) -> Optional[Room]:
        async with self._lock:
            self._locks.pop(code, None)
            room = self._rooms.pop(code, None)
        if room is not None:
            logger.info("Room %s removed", code)
        return room

    def lock(self, code: str) -> asyncio.Lock:
        self._locks.setdefault(code, asyncio.Lock())
        return self._locks[code]

    def rooms_with_player(self, player_id: str) -> List[str]:
        return [code for code, room in list(self._rooms.items()) if player_id in room.players]
