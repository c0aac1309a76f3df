"""
Module: builder

Purpose:
    Exam session generation: weighted allocation, MCQ synthesis, PBQ
    substitution and the orchestrating controller.

Key Functions:
    - create_session(): Build a fresh session for a variant
    - build_session(): Replay a session from its id
    - allocate_by_weight(): Largest-remainder domain allocation

Key Classes:
    - ExamResources: Static inputs for one variant
    - BuildError: Unresolvable resources
"""

from .allocation import allocate_by_weight
from .controller import (
    BuildError,
    ExamResources,
    build_session,
    create_session,
    load_exam_resources,
    new_session_id,
)

__all__ = [
    "allocate_by_weight",
    "BuildError",
    "ExamResources",
    "build_session",
    "create_session",
    "load_exam_resources",
    "new_session_id",
]
