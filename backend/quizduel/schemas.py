from __future__ import annotations

from typing import List, Optional

from pydantic import StrictInt, field_validator

from .models import Question, ResultEntry, RoomStatus, WireModel


# ---- inbound ----

class CreateRoomIn(WireModel):
    name: Optional[str] = None
    num_questions: Optional[int] = None
    allow_flags: Optional[bool] = None


class RoomRefIn(WireModel):
    room_code: str = ""

    @field_validator("room_code", mode="before")
    @classmethod
    def _normalise_code(cls, value):
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip().upper()
        return value


class JoinRoomIn(RoomRefIn):
    name: Optional[str] = None


class StartGameIn(RoomRefIn):
    pass


class AnswerIn(RoomRefIn):
    question_index: StrictInt
    choice: str


class LeaveRoomIn(RoomRefIn):
    pass


# ---- outbound ----

class PlayerOut(WireModel):
    id: str
    name: str
    correct_count: int
    answered_count: int
    finished_at_ms: Optional[int] = None


class RoomStateOut(WireModel):
    room_code: str
    status: RoomStatus
    players: List[PlayerOut]
    total: int
    started_at: Optional[int] = None


class RoomCreatedOut(WireModel):
    room_code: str


class GameStartedOut(WireModel):
    pack: List[Question]
    started_at: int


class AnswerUpdateOut(WireModel):
    player_id: str
    question_index: int
    choice: str
    was_correct: bool
    correct_answer: str


class GameFinishedOut(WireModel):
    results: List[ResultEntry]
    winner_id: str


class ConnectedOut(WireModel):
    player_id: str


class ErrorOut(WireModel):
    message: str
