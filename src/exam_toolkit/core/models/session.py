"""
Module: session

Purpose:
    Provides SessionConfig (learner-chosen generation options) and
    ExamSession (the immutable generated exam).

Key Classes:
    - SessionConfig: Requested PBQ count and hint-display flag
    - ExamSession: Session id, variant, timestamp, duration, questions

Used By:
    - builder.controller: Produces sessions
    - scoring.scorer: Consumes sessions
    - analytics.attempts: Per-objective breakdowns
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from exam_toolkit.common.constants import MAX_PBQ_COUNT

from .questions import Question, QuestionType


def clamp_pbq_count(requested: int) -> int:
    """Clamp a requested PBQ count into [0, MAX_PBQ_COUNT]."""
    return max(0, min(int(requested), MAX_PBQ_COUNT))


@dataclass(frozen=True)
class SessionConfig:
    """
    Generation options for one session (immutable).

    The requested PBQ count is stored exactly as given so the session
    records what the learner asked for; the builder only ever uses
    effective_pbq_count.

    Attributes:
        pbq_count: Requested performance-based question count
        show_objective_hints: Whether review UIs show objective hints

    Example:
        >>> SessionConfig(pbq_count=40).effective_pbq_count
        12
    """

    pbq_count: int = 0
    show_objective_hints: bool = False

    @property
    def effective_pbq_count(self) -> int:
        return clamp_pbq_count(self.pbq_count)

    def to_dict(self) -> dict:
        return {
            "pbq_count": self.pbq_count,
            "show_objective_hints": self.show_objective_hints,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SessionConfig:
        return cls(
            pbq_count=int(data.get("pbq_count", 0)),
            show_objective_hints=bool(data.get("show_objective_hints", False)),
        )


@dataclass(frozen=True)
class ExamSession:
    """
    Generated exam session (immutable).

    Owned exclusively by the caller once returned; nothing in the toolkit
    mutates a session after building it.

    Attributes:
        session_id: Seed string the session was generated from
        exam: Exam variant id
        created_at: ISO-8601 UTC creation timestamp
        duration_seconds: Fixed exam duration
        config: Generation options
        questions: Ordered questions
    """

    session_id: str
    exam: str
    created_at: str
    duration_seconds: int
    config: SessionConfig
    questions: Tuple[Question, ...]

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def pbq_count(self) -> int:
        """Number of performance-based questions actually in the session."""
        return sum(1 for q in self.questions if q.is_pbq)

    def type_counts(self) -> Dict[QuestionType, int]:
        return dict(Counter(q.type for q in self.questions))

    def get_question(self, question_id: str) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "exam": self.exam,
            "created_at": self.created_at,
            "duration_seconds": self.duration_seconds,
            "config": self.config.to_dict(),
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> ExamSession:
        return cls(
            session_id=data["session_id"],
            exam=data["exam"],
            created_at=data["created_at"],
            duration_seconds=int(data["duration_seconds"]),
            config=SessionConfig.from_dict(data.get("config", {})),
            questions=tuple(Question.from_dict(q) for q in data.get("questions", [])),
        )

    def __repr__(self) -> str:
        return (
            f"ExamSession({self.session_id!r}, exam={self.exam}, "
            f"questions={self.question_count}, pbqs={self.pbq_count})"
        )
