from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, List, Optional, Sequence

from .answers import apply_answer, evaluate_answer
from .config import Settings
from .events import Outbound, to_player, to_room
from .exceptions import GameError, InvalidState, RoomFull, RoomNotFound
from .models import MAX_PLAYERS, Fact, PlayerSession, Room, RoomStatus
from .pack import build_pack
from .projection import public_state
from .registry import RoomRegistry
from .results import evaluate_finish
from .rng import hash_seed
from .schemas import AnswerUpdateOut, GameFinishedOut, GameStartedOut, RoomCreatedOut
from .utils import clean_name, now_ms

logger = logging.getLogger(__name__)


class GameController:
    """Applies inbound events to rooms and says what to send back.

    Each operation runs under the lock of the room it touches and returns the
    messages to deliver, in order. Nothing here talks to the network.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        facts: Sequence[Fact],
        *,
        clock: Callable[[], int] = now_ms,
        default_num_questions: int = 20,
        max_num_questions: int = 50,
        name_max_length: int = 18,
    ):
        self.registry = registry
        self.facts = tuple(facts)
        self.clock = clock
        self.default_num_questions = default_num_questions
        self.max_num_questions = max_num_questions
        self.name_max_length = name_max_length

    @classmethod
    def from_settings(
        cls,
        registry: RoomRegistry,
        facts: Sequence[Fact],
        settings: Settings,
        clock: Callable[[], int] = now_ms,
    ) -> "GameController":
        return cls(
            registry,
            facts,
            clock=clock,
            default_num_questions=settings.DEFAULT_NUM_QUESTIONS,
            max_num_questions=settings.MAX_NUM_QUESTIONS,
            name_max_length=settings.NAME_MAX_LENGTH,
        )

    @asynccontextmanager
    async def _locked(self, code: str) -> AsyncIterator[Optional[Room]]:
        room = self.registry.get(code)
        if room is None:
            yield None
            return
        async with self.registry.lock(code):
            # the room may have been dropped while we waited
            yield room if self.registry.get(code) is room else None

    def _num_questions(self, requested: Optional[int]) -> int:
        if requested is None:
            return self.default_num_questions
        return max(1, min(requested, self.max_num_questions))

    def _room_state(self, room: Room) -> Outbound:
        return to_room(room, "room_state", public_state(room))

    async def create_room(
        self,
        player_id: str,
        name: Optional[str] = None,
        num_questions: Optional[int] = None,
        allow_flags: Optional[bool] = None,
    ) -> List[Outbound]:
        n = self._num_questions(num_questions)
        flags = True if allow_flags is None else allow_flags
        display_name = clean_name(name, "Player 1", self.name_max_length)
        created_at = self.clock()

        def build(code: str) -> Room:
            seed_input = f"{code}:{created_at}"
            seed = hash_seed(seed_input)
            logger.info(
                "Creating room %s seed=%d seed_input=%r questions=%d flags=%s",
                code, seed, seed_input, n, flags,
            )
            return Room(
                code=code,
                seed=seed,
                pack=build_pack(self.facts, seed, n, flags),
                created_at=created_at,
                players={player_id: PlayerSession(id=player_id, display_name=display_name)},
            )

        room = await self.registry.create(build)
        async with self._locked(room.code) as locked:
            if locked is None:
                return []
            return [
                to_player(player_id, "room_created", RoomCreatedOut(room_code=room.code)),
                self._room_state(room),
            ]

    async def join_room(self, player_id: str, code: str, name: Optional[str] = None) -> List[Outbound]:
        """Add a second player. Raises ``RoomNotFound``, ``InvalidState`` or ``RoomFull``."""

        async with self._locked(code) as room:
            if room is None:
                raise RoomNotFound(code)
            if player_id in room.players:
                return [self._room_state(room)]
            if room.status is not RoomStatus.LOBBY:
                raise InvalidState()
            if room.is_full:
                raise RoomFull()

            room.players[player_id] = PlayerSession(
                id=player_id,
                display_name=clean_name(name, "Player 2", self.name_max_length),
            )
            logger.info("Player %s joined room %s", player_id, code)
            return [self._room_state(room)]

    async def start_game(self, player_id: str, code: str) -> List[Outbound]:
        async with self._locked(code) as room:
            if room is None or player_id not in room.players:
                return []
            if room.status is not RoomStatus.LOBBY or len(room.players) != MAX_PLAYERS:
                logger.debug("Ignoring start for room %s (%s, %d players)", code, room.status.value, len(room.players))
                return []

            # clean slate for both players
            for session in room.players.values():
                session.reset()
            room.started_at = self.clock()
            room.advance(RoomStatus.PLAYING)
            logger.info("Room %s started at %d", code, room.started_at)

            return [
                to_room(room, "game_started", GameStartedOut(pack=list(room.pack), started_at=room.started_at)),
                self._room_state(room),
            ]

    async def answer(self, player_id: str, code: str, question_index: int, choice: str) -> List[Outbound]:
        async with self._locked(code) as room:
            if room is None:
                return []
            session = room.players.get(player_id)
            if session is None:
                return []

            elapsed = self.clock() - room.started_at if room.started_at is not None else 0
            try:
                delta = evaluate_answer(session, room.pack, question_index, choice, elapsed, room.status)
            except GameError as exc:
                logger.debug("Rejected answer from %s in room %s: %s", player_id, code, exc)
                return []

            apply_answer(session, delta)
            messages = [
                to_room(
                    room,
                    "answer_update",
                    AnswerUpdateOut(
                        player_id=player_id,
                        question_index=question_index,
                        choice=choice,
                        was_correct=delta.record.was_correct,
                        correct_answer=delta.correct_answer,
                    ),
                )
            ]
            if not delta.finished:
                return messages

            messages.append(self._room_state(room))
            result = evaluate_finish(room)
            if result is not None:
                messages.append(
                    to_room(
                        room,
                        "game_finished",
                        GameFinishedOut(results=list(result.results), winner_id=result.winner_id),
                    )
                )
                messages.append(self._room_state(room))
            return messages

    async def leave_room(self, player_id: str, code: str) -> List[Outbound]:
        async with self._locked(code) as room:
            if room is None or room.players.pop(player_id, None) is None:
                return []
            logger.info("Player %s left room %s", player_id, code)
            if room.is_empty:
                await self.registry.remove(code)
                return []
            # a departure mid-game does not end it
            return [self._room_state(room)]

    async def disconnect(self, player_id: str) -> List[Outbound]:
        messages: List[Outbound] = []
        for code in self.registry.rooms_with_player(player_id):
            messages.extend(await self.leave_room(player_id, code))
        return messages
