"""Game rule violations.

All of them are local to a single inbound event: the event is rejected and
neither the room nor the other player is affected.
"""

from __future__ import annotations


class GameError(Exception):
    message = "Request rejected."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RoomNotFound(GameError):
    message = "Room not found."

    def __init__(self, room_code: str):
        self.room_code = room_code
        super().__init__()


class InvalidState(GameError):
    """Action attempted in the wrong lifecycle phase."""

    message = "Game already started."


class RoomFull(GameError):
    message = "Room is full."


class OutOfRangeQuestion(GameError):
    def __init__(self, question_index: int, total: int):
        self.question_index = question_index
        super().__init__(f"Question {question_index} is outside 0..{total - 1}")


class DuplicateAnswer(GameError):
    def __init__(self, question_index: int):
        self.question_index = question_index
        super().__init__(f"Question {question_index} already answered")


class RoomCodeExhausted(GameError):
    message = "Could not allocate a room code."
