from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple, Union

from .models import Room, WireModel

Payload = Union[WireModel, dict]


@dataclass(frozen=True)
class Outbound:
    """One message for the transport to deliver.

    Recipients are fixed when the message is built, so a room broadcast goes
    to whoever was in the room at that moment.
    """

    event: str
    data: dict[str, Any]
    recipients: Tuple[str, ...]

    def frame(self) -> dict[str, Any]:
        return {"event": self.event, "data": self.data}


def _as_dict(payload: Payload) -> dict[str, Any]:
    return payload.wire() if isinstance(payload, WireModel) else dict(payload)


def to_room(room: Room, event: str, payload: Payload) -> Outbound:
    return Outbound(event, _as_dict(payload), tuple(room.players))


def to_player(player_id: str, event: str, payload: Payload) -> Outbound:
    return Outbound(event, _as_dict(payload), (player_id,))
