"""Common utilities shared across the toolkit."""

from __future__ import annotations

from .constants import (
    EXAM_DURATION_SECONDS,
    EXAM_QUESTION_COUNT,
    MAX_PBQ_COUNT,
    MIN_MATCH_RIGHT_POOL,
)
from .rng import SessionRng, hash_seed

__all__ = [
    "EXAM_DURATION_SECONDS",
    "EXAM_QUESTION_COUNT",
    "MAX_PBQ_COUNT",
    "MIN_MATCH_RIGHT_POOL",
    "SessionRng",
    "hash_seed",
]
