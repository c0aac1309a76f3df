"""
Module: builder.questions

Purpose:
    Single/multi-select question synthesis: curated per-objective
    handlers with a generic bullet-pool fallback.

Key Functions:
    - build_mcq(): Build one question for an objective id
    - curated(): Register a curated handler

Key Classes:
    - QuestionContext: Per-session synthesis state
    - IdGenerator: Session-scoped question ids

Used By:
    - builder.controller: Session building
"""

from .context import IdGenerator, QuestionContext
from .factory import GENERIC_BEST_PRACTICE, build_mcq, generic_question
from .options import FILLER_DISTRACTORS, make_multi, make_single
from .registry import CURATED_HANDLERS, HandlerKey, QuestionHandler, curated, get_handler

__all__ = [
    "IdGenerator",
    "QuestionContext",
    "build_mcq",
    "generic_question",
    "GENERIC_BEST_PRACTICE",
    "FILLER_DISTRACTORS",
    "make_single",
    "make_multi",
    "CURATED_HANDLERS",
    "HandlerKey",
    "QuestionHandler",
    "curated",
    "get_handler",
]
