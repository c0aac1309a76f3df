"""
Core Models Package

Immutable data models shared by the builder, scorer and analytics.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses. This ensures:
1. A session can never be altered after it is handed to the caller
2. Equality is structural, so a reloaded session compares equal
3. Every model serializes to plain JSON data via to_dict()
"""

from .objectives import DomainBlueprint, ObjectiveMeta, objective_domain_number
from .questions import (
    MatchPayload,
    Option,
    OrderPayload,
    PbqKind,
    Question,
    QuestionType,
)
from .session import ExamSession, SessionConfig, clamp_pbq_count
from .results import DomainScore, ExamResult, ScoredQuestion

__all__ = [
    "DomainBlueprint",
    "ObjectiveMeta",
    "objective_domain_number",
    "MatchPayload",
    "Option",
    "OrderPayload",
    "PbqKind",
    "Question",
    "QuestionType",
    "ExamSession",
    "SessionConfig",
    "clamp_pbq_count",
    "DomainScore",
    "ExamResult",
    "ScoredQuestion",
]
