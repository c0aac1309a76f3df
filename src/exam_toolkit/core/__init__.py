"""
Practice Exam Core Package

Shared data models, schema validation and serialization for sessions and
results. Generation lives in exam_toolkit.builder, scoring in
exam_toolkit.scoring.
"""

from .models import (
    DomainBlueprint,
    ExamResult,
    ExamSession,
    ObjectiveMeta,
    Question,
    QuestionType,
    SessionConfig,
)

__all__ = [
    "DomainBlueprint",
    "ExamResult",
    "ExamSession",
    "ObjectiveMeta",
    "Question",
    "QuestionType",
    "SessionConfig",
]
