"""
Module: scoring

Purpose:
    Answer evaluation with per-type correctness semantics.
"""

from .scorer import (
    EVALUATORS,
    ORDER_KEY,
    PAIRS_KEY,
    count_unanswered,
    is_correct,
    round_percent,
    score,
    score_exam,
)

__all__ = [
    "EVALUATORS",
    "ORDER_KEY",
    "PAIRS_KEY",
    "count_unanswered",
    "is_correct",
    "round_percent",
    "score",
    "score_exam",
]
