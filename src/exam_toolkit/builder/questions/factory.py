"""
Module: builder.questions.factory

Purpose:
    Build one single/multi-select question for an objective id. Curated
    handlers are consulted first; everything else goes through generic
    synthesis over the objective's bullets.

Key Functions:
    - build_mcq(): Entry point used by the session builder
    - generic_question(): Bullet-pool fallback handler

Dependencies:
    - builder.questions.registry: Curated handler lookup
    - builder.questions.options: Option padding and shuffling

Used By:
    - builder.controller: Step 4 of session building
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from exam_toolkit.common.objectives import ResolvedObjective
from exam_toolkit.core.models.questions import Question

from . import curated as _curated  # noqa: F401  (registers curated handlers)
from .context import QuestionContext
from .options import make_single, unique
from .registry import HandlerKey, QuestionHandler, get_handler

logger = logging.getLogger(__name__)

GENERIC_BEST_PRACTICE = "Implement least privilege"


def generic_question(ctx: QuestionContext, objective: ResolvedObjective, question_id: str) -> Question:
    """
    Bullet-pool question: one bullet is the correct fact, up to three
    others are distractors, fillers pad the rest.

    With no bullets the correct answer is a generic best practice.
    """
    bullets = unique(objective.bullets)
    title = objective.title
    prompt = f"Which option is MOST directly associated with: {title}"

    if not bullets:
        return make_single(
            ctx, question_id, objective,
            prompt=prompt,
            correct_text=GENERIC_BEST_PRACTICE,
            distractors=[],
            explanation=f"This question drills objective {objective.objective_id}.",
        )

    focus = ctx.rng.pick_one(bullets)
    distractors = ctx.rng.shuffle([b for b in bullets if b != focus])[:3]
    return make_single(
        ctx, question_id, objective,
        prompt=prompt,
        correct_text=focus,
        distractors=distractors,
        explanation=f"This item appears under objective {objective.objective_id}: {title}.",
        focus=focus,
    )


def build_mcq(
    ctx: QuestionContext,
    objective_id: str,
    handlers: Optional[Mapping[HandlerKey, QuestionHandler]] = None,
) -> Question:
    """
    Build a single/multi-select question for `objective_id`.

    Args:
        ctx: Session synthesis state
        objective_id: Objective id like "2.1"
        handlers: Curated handler table; None = every registered handler

    Returns:
        Question with a non-empty prompt, 2-4 options and a non-empty
        correct subset of its option ids
    """
    question_id = ctx.ids("q")
    objective = ctx.resolve(objective_id)
    if not objective.cataloged:
        logger.debug(f"No metadata for {ctx.exam} objective {objective_id}; using fallback title")

    handler = get_handler(ctx.exam, objective_id, handlers) or generic_question
    return handler(ctx, objective, question_id)
