"""
Module: common.rng

Purpose:
    Deterministic pseudorandom stream for session generation. A session
    identifier string is hashed to a 32-bit seed (xmur3) which initialises
    a mulberry32 generator producing floats in [0, 1).

Key Classes:
    - SessionRng: Seeded stream with next(), shuffle() and pick_one()

Key Functions:
    - hash_seed(): 32-bit string hash used to seed the stream

Used By:
    - builder.controller: One stream per generated session
    - builder.questions: Fact/option sampling and shuffling
    - builder.pbq: Step/right-column shuffling and template picks

Invariants:
    - Identical seed string => bit-identical output sequence
    - Strings are hashed as UTF-16 code units, so ids produced by other
      clients of the same seed scheme reproduce the same sessions
"""

from __future__ import annotations

import math
from typing import List, Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32-bit integer multiply."""
    return (a * b) & _MASK32


def _utf16_units(text: str) -> List[int]:
    data = text.encode("utf-16-le")
    return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)]


def hash_seed(text: str) -> int:
    """
    Hash a seed string to an unsigned 32-bit integer (xmur3).

    Args:
        text: Seed string (usually a session id)

    Returns:
        Integer in [0, 2**32)

    Example:
        >>> hash_seed("220-1201-abc") == hash_seed("220-1201-abc")
        True
    """
    units = _utf16_units(text)
    h = (1779033703 ^ len(units)) & _MASK32
    for unit in units:
        h = _imul(h ^ unit, 3432918353)
        h = ((h << 13) | (h >> 19)) & _MASK32

    h = _imul(h ^ (h >> 16), 2246822507)
    h = _imul(h ^ (h >> 13), 3266489909)
    h ^= h >> 16
    return h & _MASK32


class SessionRng:
    """
    Seeded pseudorandom stream (mulberry32).

    Not thread-safe; one logical stream per session.

    Attributes:
        seed: Original seed string

    Example:
        >>> rng = SessionRng("demo")
        >>> 0.0 <= rng.next() < 1.0
        True
    """

    def __init__(self, seed: str) -> None:
        self.seed = seed
        self._state = hash_seed(seed)

    def next(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    def randint_below(self, upper: int) -> int:
        """Return floor(next() * upper)."""
        return math.floor(self.next() * upper)

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """
        Fisher-Yates shuffle returning a new list.

        Consumes exactly one value per swap position (len - 1 values).
        """
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.randint_below(i + 1)
            result[i], result[j] = result[j], result[i]
        return result

    def pick_one(self, items: Sequence[T]) -> T:
        """Return items[floor(next() * len(items))]."""
        if not items:
            raise IndexError("cannot pick from an empty sequence")
        return items[self.randint_below(len(items))]

    def __repr__(self) -> str:
        return f"SessionRng({self.seed!r})"
