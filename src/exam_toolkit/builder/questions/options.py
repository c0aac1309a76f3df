"""
Module: builder.questions.options

Purpose:
    Turn option texts into a finished single/multi-select Question:
    de-duplicate, pad with filler distractors, assign ids o1..oN and
    shuffle through the session stream.

Key Functions:
    - make_single(): One correct option
    - make_multi(): Several correct options

Invariants:
    - 2-4 options; correct texts are always present
    - ids are assigned before the final shuffle, so an option's id
      says nothing about its position
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from exam_toolkit.common.objectives import ResolvedObjective
from exam_toolkit.core.models.questions import Option, Question, QuestionType

from .context import QuestionContext

MAX_OPTIONS = 4

FILLER_DISTRACTORS = ("Reinstall the OS", "Disable IPv6", "Replace the monitor")


def unique(texts: Sequence[str]) -> List[str]:
    """De-duplicate, keeping first-seen order and dropping blanks."""
    seen = set()
    result = []
    for text in texts:
        if text and text not in seen:
            seen.add(text)
            result.append(text)
    return result


def _option_texts(correct: Sequence[str], distractors: Sequence[str]) -> List[str]:
    correct_set = set(correct)
    wrong = [t for t in unique(distractors) if t not in correct_set]
    texts = unique(correct) + wrong[: max(0, MAX_OPTIONS - len(unique(correct)))]
    for filler in FILLER_DISTRACTORS:
        if len(texts) >= MAX_OPTIONS:
            break
        if filler not in texts:
            texts.append(filler)
    return texts


def _build(
    ctx: QuestionContext,
    question_id: str,
    objective: ResolvedObjective,
    qtype: QuestionType,
    prompt: str,
    correct_texts: Sequence[str],
    distractors: Sequence[str],
    explanation: str,
    focus: Optional[str],
) -> Question:
    texts = ctx.rng.shuffle(_option_texts(correct_texts, distractors))
    options = ctx.rng.shuffle([Option(id=f"o{i + 1}", text=t) for i, t in enumerate(texts)])
    wanted = set(correct_texts)
    correct = tuple(o.id for o in options if o.text in wanted)

    return Question(
        id=question_id,
        exam=ctx.exam,
        domain=objective.domain,
        objective=objective.objective_id,
        objective_title=objective.title,
        objective_bullets=objective.bullets,
        type=qtype,
        prompt=prompt,
        correct=correct,
        explanation=explanation,
        options=tuple(options),
        focus=focus,
    )


def make_single(
    ctx: QuestionContext,
    question_id: str,
    objective: ResolvedObjective,
    prompt: str,
    correct_text: str,
    distractors: Sequence[str],
    explanation: str,
    focus: Optional[str] = None,
) -> Question:
    """Build a single-select question with `correct_text` as the answer."""
    return _build(
        ctx, question_id, objective, QuestionType.SINGLE,
        prompt, [correct_text], distractors, explanation, focus,
    )


def make_multi(
    ctx: QuestionContext,
    question_id: str,
    objective: ResolvedObjective,
    prompt: str,
    correct_texts: Sequence[str],
    distractors: Sequence[str],
    explanation: str,
    focus: Optional[str] = None,
) -> Question:
    """Build a multi-select question; every text in `correct_texts` must be picked."""
    if len(unique(correct_texts)) >= MAX_OPTIONS:
        raise ValueError(f"Multi-select needs fewer than {MAX_OPTIONS} correct answers")
    return _build(
        ctx, question_id, objective, QuestionType.MULTI,
        prompt, correct_texts, distractors, explanation, focus,
    )
