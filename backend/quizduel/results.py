from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .models import MAX_PLAYERS, PlayerSession, ResultEntry, Room, RoomStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameResult:
    results: Tuple[ResultEntry, ...]

    @property
    def winner_id(self) -> str:
        return self.results[0].id


def rank_players(players: Iterable[PlayerSession]) -> List[ResultEntry]:
    """Most correct answers first, then the faster finish.

    Every player must have finished; an unfinished one raises ``ValueError``.
    """

    players = list(players)
    unfinished = [p.id for p in players if p.finished_at_ms is None]
    if unfinished:
        raise ValueError(f"Cannot rank unfinished players: {', '.join(unfinished)}")
    entries = [
        ResultEntry(
            id=p.id,
            name=p.display_name,
            correct_count=p.correct_count,
            finished_at_ms=p.finished_at_ms,
        )
        for p in players
    ]
    return sorted(entries, key=lambda e: (-e.correct_count, e.finished_at_ms))


def evaluate_finish(room: Room) -> Optional[GameResult]:
    """Close the game once both players are through the whole pack.

    Returns ``None`` while anyone is still answering, and on every call after
    the room has already finished.
    """

    if room.status is not RoomStatus.PLAYING:
        return None
    players = list(room.players.values())
    if len(players) != MAX_PLAYERS:
        return None
    if any(p.finished_at_ms is None for p in players):
        return None

    ranked = tuple(rank_players(players))
    room.advance(RoomStatus.FINISHED)
    room.results = ranked
    logger.info("Room %s finished, winner %s", room.code, ranked[0].id)
    return GameResult(ranked)
