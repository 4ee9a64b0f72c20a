"""Seeded pseudo-random helpers.

Everything that has to be reproducible from a seed (pack content, option
order) draws from :class:`Mulberry32`. The arithmetic is pinned to unsigned
32-bit integers so a given seed yields the same stream on every platform.
"""
from __future__ import annotations

from typing import List, MutableSequence, Sequence, TypeVar

T = TypeVar("T")

_MASK = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


class Mulberry32:
    def __init__(self, seed: int):
        self.seed = seed & _MASK
        self._state = self.seed

    def reset(self) -> None:
        self._state = self.seed

    def random(self) -> float:
        """Return the next float in [0, 1)."""

        self._state = (self._state + 0x6D2B79F5) & _MASK
        x = self._state
        x = _imul(x ^ (x >> 15), x | 1)
        x ^= (x + _imul(x ^ (x >> 7), x | 61)) & _MASK
        return ((x ^ (x >> 14)) & _MASK) / 4294967296

    __call__ = random


def hash_seed(text: str) -> int:
    """32-bit FNV-1a over the code points of ``text``."""

    h = _FNV_OFFSET
    for ch in text:
        h ^= ord(ch)
        h = _imul(h, _FNV_PRIME)
    return h


def pick(items: Sequence[T], rng: Mulberry32) -> T:
    return items[int(rng.random() * len(items))]


def shuffle(items: MutableSequence[T], rng: Mulberry32) -> MutableSequence[T]:
    # Fisher-Yates, walking down from the last index
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def unique_sample(items: Sequence[T], n: int, rng: Mulberry32) -> List[T]:
    copy = list(items)
    shuffle(copy, rng)
    return copy[:n]
