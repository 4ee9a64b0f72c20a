"""Deterministic quiz pack generation.

A pack is a pure function of ``(facts, seed, num_questions, allow_flags)``.
All randomness comes from a single :class:`Mulberry32` stream per build, drawn
in a fixed order: the country sample first, then for each question its topic,
its distractors and the final option shuffle. Changing that order changes
every pack ever generated for a given seed.
"""
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .models import Fact, Pack, Question, Topic
from .rng import Mulberry32, pick, shuffle, unique_sample

TOPICS: Tuple[Topic, ...] = tuple(Topic)
OPTION_COUNT = 4

FLAG_PLACEHOLDER = "\U0001F3F3\uFE0F"
REGIONAL_INDICATOR_A = 0x1F1E6

_PROMPTS: Dict[Topic, str] = {
    Topic.CAPITAL: "What is the capital of {name}?",
    Topic.LANGUAGE: "What language is spoken in {name}?",
    Topic.DEMONYM: "A person from {name} is...",
    Topic.GOVERNMENT: "What type of government does {name} have?",
    Topic.ECONOMY: "A key part of {name}'s economy is...",
    Topic.FLAG: "Which country does this flag belong to?",
}


def _attribute(topic: Topic) -> str:
    # the flag question asks for the country itself
    return "name" if topic is Topic.FLAG else topic.value


def code_to_flag(code: str | None) -> str:
    """Map a two-letter country code to its regional indicator pair."""

    if not code or len(code) != 2:
        return FLAG_PLACEHOLDER
    code = code.upper()
    if not all("A" <= ch <= "Z" for ch in code):
        return FLAG_PLACEHOLDER
    return "".join(chr(REGIONAL_INDICATOR_A + ord(ch) - ord("A")) for ch in code)


def make_options(correct: str, pool: Sequence[str], n: int, rng: Mulberry32) -> List[str]:
    """Draw distinct distractors from ``pool`` and shuffle them in with ``correct``.

    When the pool holds fewer than ``n`` distinct values the result is shorter
    than ``n`` instead of looping forever.
    """

    target = min(n, len(set(pool) | {correct}))
    options = [correct]
    used = {correct}
    while len(options) < target:
        value = pick(pool, rng)
        if value not in used:
            used.add(value)
            options.append(value)
    return list(shuffle(options, rng))


def build_question(fact: Fact, topic: Topic, pool: Sequence[str], rng: Mulberry32) -> Question:
    correct = getattr(fact, _attribute(topic))
    options = make_options(correct, pool, OPTION_COUNT, rng)
    return Question(
        topic=topic,
        prompt=_PROMPTS[topic].format(name=fact.name),
        flag_glyph=code_to_flag(fact.code) if topic is Topic.FLAG else None,
        options=tuple(options),
        answer=correct,
    )


def build_pack(facts: Sequence[Fact], seed: int, num_questions: int = 20, allow_flags: bool = True) -> Pack:
    if not facts:
        raise ValueError("Cannot build a pack from an empty fact table")
    if num_questions < 1:
        raise ValueError(f"num_questions must be positive, got {num_questions}")

    rng = Mulberry32(seed)
    topics = TOPICS if allow_flags else tuple(t for t in TOPICS if t is not Topic.FLAG)
    pools = {t: tuple(getattr(f, _attribute(t)) for f in facts) for t in topics}

    # spread distinct countries across the pack before any repeats
    countries = unique_sample(facts, min(num_questions, len(facts)), rng)

    pack = []
    for i in range(num_questions):
        fact = countries[i % len(countries)]
        topic = pick(topics, rng)
        pack.append(build_question(fact, topic, pools[topic], rng))
    return tuple(pack)
