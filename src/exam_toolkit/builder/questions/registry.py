"""
Module: builder.questions.registry

Purpose:
    Registry of curated question handlers keyed by (exam, objective id).
    Handlers register themselves with the @curated decorator; the question
    factory consults the registry before falling back to generic synthesis.

Key Functions:
    - curated(): Decorator registering a handler
    - get_handler(): Registry lookup

Key Classes:
    - QuestionHandler: Handler call signature
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

from exam_toolkit.common.objectives import ResolvedObjective
from exam_toolkit.core.models.questions import Question

from .context import QuestionContext

logger = logging.getLogger(__name__)

HandlerKey = Tuple[str, str]

# handler(ctx, objective, question_id) -> Question
QuestionHandler = Callable[[QuestionContext, ResolvedObjective, str], Question]

_HANDLERS: Dict[HandlerKey, QuestionHandler] = {}

# Read-only view over every registered handler
CURATED_HANDLERS: Mapping[HandlerKey, QuestionHandler] = MappingProxyType(_HANDLERS)


def curated(exam: str, objective_id: str) -> Callable[[QuestionHandler], QuestionHandler]:
    """
    Register a hand-authored handler for one objective of one exam.

    Raises:
        ValueError: If a handler is already registered for the pair

    Example:
        >>> @curated("220-1202", "4.3")
        ... def backup_rule(ctx, objective, question_id):
        ...     ...
    """
    key = (exam, objective_id)

    def decorator(handler: QuestionHandler) -> QuestionHandler:
        if key in _HANDLERS:
            raise ValueError(f"Curated handler already registered for {exam} {objective_id}")
        _HANDLERS[key] = handler
        logger.debug(f"Registered curated handler {handler.__name__} for {exam} {objective_id}")
        return handler

    return decorator


def get_handler(
    exam: str,
    objective_id: str,
    handlers: Optional[Mapping[HandlerKey, QuestionHandler]] = None,
) -> Optional[QuestionHandler]:
    table = CURATED_HANDLERS if handlers is None else handlers
    return table.get((exam, objective_id))
