from .models import Room
from .schemas import PlayerOut, RoomStateOut


def public_state(room: Room) -> RoomStateOut:
    """Everything both players may see. No seed, no answers, no choices."""

    return RoomStateOut(
        room_code=room.code,
        status=room.status,
        players=[
            PlayerOut(
                id=pid,
                name=p.display_name,
                correct_count=p.correct_count,
                answered_count=len(p.answers),
                finished_at_ms=p.finished_at_ms,
            )
            for pid, p in room.players.items()
        ],
        total=len(room.pack),
        started_at=room.started_at,
    )
