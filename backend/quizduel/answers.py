from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .exceptions import DuplicateAnswer, InvalidState, OutOfRangeQuestion
from .models import AnswerRecord, PlayerSession, Question, RoomStatus


@dataclass(frozen=True)
class AnswerDelta:
    record: AnswerRecord
    correct_count: int
    finished_at_ms: Optional[int]
    correct_answer: str

    @property
    def finished(self) -> bool:
        return self.finished_at_ms is not None


def evaluate_answer(
    session: PlayerSession,
    pack: Sequence[Question],
    question_index: int,
    choice: str,
    elapsed_ms: int,
    status: RoomStatus = RoomStatus.PLAYING,
) -> AnswerDelta:
    """Work out what accepting this answer would change, without changing it.

    Raises ``InvalidState`` outside of play, ``OutOfRangeQuestion`` for an index
    outside the pack and ``DuplicateAnswer`` when the index was already answered.
    """

    if status is not RoomStatus.PLAYING:
        raise InvalidState(f"Answers are only accepted while playing, room is {status.value}")
    if not 0 <= question_index < len(pack):
        raise OutOfRangeQuestion(question_index, len(pack))
    if session.has_answered(question_index):
        raise DuplicateAnswer(question_index)

    question = pack[question_index]
    was_correct = choice == question.answer
    record = AnswerRecord(
        question_index=question_index,
        choice=choice,
        was_correct=was_correct,
        elapsed_ms=elapsed_ms,
    )
    answered = len(session.answers) + 1
    return AnswerDelta(
        record=record,
        correct_count=session.correct_count + (1 if was_correct else 0),
        finished_at_ms=elapsed_ms if answered == len(pack) else None,
        correct_answer=question.answer,
    )


def apply_answer(session: PlayerSession, delta: AnswerDelta) -> None:
    session.answers.append(delta.record)
    session.correct_count = delta.correct_count
    # written once, never moved afterwards
    if delta.finished and session.finished_at_ms is None:
        session.finished_at_ms = delta.finished_at_ms
