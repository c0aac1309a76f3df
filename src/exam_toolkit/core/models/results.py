"""
Module: results

Purpose:
    Provides ExamResult - the immutable score of one session - and its
    per-domain and per-question parts.

Key Classes:
    - DomainScore: correct/total tally for one domain label
    - ScoredQuestion: correctness flag for one question
    - ExamResult: Overall percent plus breakdowns

Used By:
    - scoring.scorer: Produces results
    - analytics.attempts: Builds attempt records from results
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class DomainScore:
    domain: str
    correct: int
    total: int

    def to_dict(self) -> dict:
        return {"domain": self.domain, "correct": self.correct, "total": self.total}

    @classmethod
    def from_dict(cls, data: dict) -> DomainScore:
        return cls(domain=data["domain"], correct=int(data["correct"]), total=int(data["total"]))


@dataclass(frozen=True)
class ScoredQuestion:
    question_id: str
    is_correct: bool

    def to_dict(self) -> dict:
        return {"question_id": self.question_id, "is_correct": self.is_correct}

    @classmethod
    def from_dict(cls, data: dict) -> ScoredQuestion:
        return cls(question_id=data["question_id"], is_correct=bool(data["is_correct"]))


@dataclass(frozen=True)
class ExamResult:
    """
    Score of one exam session (immutable, derived).

    Attributes:
        percent: Overall score with one decimal digit
        correct_count: Number of correct questions
        total: Number of questions scored
        by_domain: Per-domain tallies in first-appearance order
        scored: Per-question correctness in session order

    Invariants:
        - correct_count == sum(1 for s in scored if s.is_correct)
        - total == len(scored)
    """

    percent: float
    correct_count: int
    total: int
    by_domain: Tuple[DomainScore, ...]
    scored: Tuple[ScoredQuestion, ...]

    @property
    def correctness(self) -> Dict[str, bool]:
        """Map of question id to correctness."""
        return {s.question_id: s.is_correct for s in self.scored}

    def to_dict(self) -> dict:
        return {
            "percent": self.percent,
            "correct_count": self.correct_count,
            "total": self.total,
            "by_domain": [d.to_dict() for d in self.by_domain],
            "scored": [s.to_dict() for s in self.scored],
        }

    @classmethod
    def from_dict(cls, data: dict) -> ExamResult:
        return cls(
            percent=float(data["percent"]),
            correct_count=int(data["correct_count"]),
            total=int(data["total"]),
            by_domain=tuple(DomainScore.from_dict(d) for d in data.get("by_domain", [])),
            scored=tuple(ScoredQuestion.from_dict(s) for s in data.get("scored", [])),
        )
