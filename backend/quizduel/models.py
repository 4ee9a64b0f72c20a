from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from .exceptions import InvalidState


class WireModel(BaseModel):
    """Base for anything that goes over the socket: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Topic(str, Enum):
    CAPITAL = "capital"
    LANGUAGE = "language"
    DEMONYM = "demonym"
    GOVERNMENT = "government"
    ECONOMY = "economy"
    FLAG = "flag"


class Fact(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    code: str
    capital: str
    language: str
    demonym: str
    government: str
    economy: str


class Question(WireModel):
    model_config = ConfigDict(frozen=True)

    topic: Topic
    prompt: str
    flag_glyph: Optional[str] = None
    options: Tuple[str, ...]
    answer: str

    @model_serializer(mode="wrap")
    def _omit_missing_glyph(self, handler):
        data = handler(self)
        for key in ("flag_glyph", "flagGlyph"):
            if key in data and data[key] is None:
                del data[key]
        return data


Pack = Tuple[Question, ...]


class AnswerRecord(WireModel):
    model_config = ConfigDict(frozen=True)

    question_index: int
    choice: str
    was_correct: bool
    elapsed_ms: int


class PlayerSession(BaseModel):
    id: str
    display_name: str
    correct_count: int = 0
    answers: List[AnswerRecord] = Field(default_factory=list)
    finished_at_ms: Optional[int] = None

    def has_answered(self, question_index: int) -> bool:
        return any(a.question_index == question_index for a in self.answers)

    def reset(self) -> None:
        self.correct_count = 0
        self.answers = []
        self.finished_at_ms = None


class ResultEntry(WireModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    correct_count: int
    finished_at_ms: int


class RoomStatus(str, Enum):
    LOBBY = "lobby"
    PLAYING = "playing"
    FINISHED = "finished"


# lobby -> playing -> finished, nothing else
_NEXT_STATUS = {
    RoomStatus.LOBBY: RoomStatus.PLAYING,
    RoomStatus.PLAYING: RoomStatus.FINISHED,
}

MAX_PLAYERS = 2


class Room(BaseModel):
    code: str
    seed: int
    pack: Tuple[Question, ...]
    status: RoomStatus = RoomStatus.LOBBY
    created_at: int
    started_at: Optional[int] = None
    players: Dict[str, PlayerSession] = Field(default_factory=dict)
    results: Optional[Tuple[ResultEntry, ...]] = None

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    @property
    def is_empty(self) -> bool:
        return not self.players

    def advance(self, status: RoomStatus) -> None:
        if _NEXT_STATUS.get(self.status) != status:
            raise InvalidState(f"Cannot move room {self.code} from {self.status.value} to {status.value}")
        self.status = status
