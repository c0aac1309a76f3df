"""
Module: scoring.scorer

Purpose:
    Score a session against externally collected answers. Pure and
    idempotent: the same inputs always give an equal result and nothing
    is mutated.

Key Functions:
    - score(): Session + answers -> ExamResult (alias score_exam)
    - is_correct(): Evaluate one question
    - count_unanswered(): Live unanswered count for progress displays

Used By:
    - exam_toolkit.cli: score command
    - exam_toolkit (package root): score export

Invariants:
    - Missing or malformed submissions score incorrect, never raise
    - per-question results keep session order
    - per-domain tallies keep first-appearance order
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from exam_toolkit.core.models import (
    DomainScore,
    ExamResult,
    ExamSession,
    Question,
    QuestionType,
    ScoredQuestion,
)

logger = logging.getLogger(__name__)

AnswerMap = Mapping[str, Optional[Sequence[str]]]
PbqStateMap = Mapping[str, Mapping[str, Any]]

ORDER_KEY = "order"
PAIRS_KEY = "pairs"


def _string_list(value: Any) -> Optional[List[str]]:
    """Return value as a list of strings, None if it is not one."""
    if not isinstance(value, (list, tuple)):
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return list(value)


def _pbq_entry(pbq_state: PbqStateMap, question_id: str, key: str) -> Optional[List[str]]:
    state = pbq_state.get(question_id)
    if not isinstance(state, Mapping):
        return None
    return _string_list(state.get(key))


def _eval_choice(question: Question, answers: AnswerMap, pbq_state: PbqStateMap) -> bool:
    submitted = _string_list(answers.get(question.id) or [])
    if submitted is None:
        return False
    # Multiset comparison: a repeated option id never matches
    return sorted(submitted) == sorted(question.correct)


def _eval_order(question: Question, answers: AnswerMap, pbq_state: PbqStateMap) -> bool:
    submitted = _pbq_entry(pbq_state, question.id, ORDER_KEY)
    return submitted is not None and submitted == list(question.correct)


def _eval_match(question: Question, answers: AnswerMap, pbq_state: PbqStateMap) -> bool:
    submitted = _pbq_entry(pbq_state, question.id, PAIRS_KEY)
    return submitted is not None and sorted(submitted) == sorted(question.correct)


Evaluator = Callable[[Question, AnswerMap, PbqStateMap], bool]

EVALUATORS: Dict[QuestionType, Evaluator] = {
    QuestionType.SINGLE: _eval_choice,
    QuestionType.MULTI: _eval_choice,
    QuestionType.PBQ_ORDER: _eval_order,
    QuestionType.PBQ_MATCH: _eval_match,
}

_missing = set(QuestionType) - set(EVALUATORS)
if _missing:
    raise RuntimeError(f"Question types without an evaluator: {sorted(t.value for t in _missing)}")


def is_correct(
    question: Question,
    answers: AnswerMap,
    pbq_state: Optional[PbqStateMap] = None,
) -> bool:
    """Evaluate one question against the submitted answers."""
    return EVALUATORS[question.type](question, answers or {}, pbq_state or {})


def round_percent(correct: int, total: int) -> float:
    """
    Percentage with one decimal digit, halves rounded up.

    Example:
        >>> round_percent(2, 3)
        66.7
    """
    if total <= 0:
        return 0.0
    return math.floor(correct * 1000 / total + 0.5) / 10


def score(
    session: ExamSession,
    answers: AnswerMap,
    pbq_state: Optional[PbqStateMap] = None,
) -> ExamResult:
    """
    Score every question of a session.

    Args:
        session: Generated session
        answers: {question_id: [option_id, ...]} for single/multi questions
        pbq_state: {question_id: {"order": [...]}} or {question_id: {"pairs": [...]}}

    Returns:
        ExamResult with overall percent and per-domain/per-question breakdowns

    Example:
        >>> result = score(session, {q.id: list(q.correct) for q in session.questions})
        >>> result.percent
        100.0
    """
    answers = answers or {}
    pbq_state = pbq_state or {}

    scored: List[ScoredQuestion] = []
    tallies: Dict[str, List[int]] = {}
    for question in session.questions:
        ok = is_correct(question, answers, pbq_state)
        tally = tallies.setdefault(question.domain, [0, 0])
        tally[1] += 1
        if ok:
            tally[0] += 1
        scored.append(ScoredQuestion(question_id=question.id, is_correct=ok))

    correct_count = sum(1 for s in scored if s.is_correct)
    total = len(scored)
    result = ExamResult(
        percent=round_percent(correct_count, total),
        correct_count=correct_count,
        total=total,
        by_domain=tuple(
            DomainScore(domain=domain, correct=c, total=t)
            for domain, (c, t) in tallies.items()
        ),
        scored=tuple(scored),
    )
    logger.debug(f"Scored {session.session_id}: {correct_count}/{total} ({result.percent}%)")
    return result


score_exam = score


def _is_answered(question: Question, answers: AnswerMap, pbq_state: PbqStateMap) -> bool:
    if question.type is QuestionType.PBQ_ORDER:
        return bool(_pbq_entry(pbq_state, question.id, ORDER_KEY))
    if question.type is QuestionType.PBQ_MATCH:
        return bool(_pbq_entry(pbq_state, question.id, PAIRS_KEY))
    return bool(answers.get(question.id))


def count_unanswered(
    session: ExamSession,
    answers: AnswerMap,
    pbq_state: Optional[PbqStateMap] = None,
) -> int:
    """Number of questions with no submission at all."""
    answers = answers or {}
    pbq_state = pbq_state or {}
    return sum(1 for q in session.questions if not _is_answered(q, answers, pbq_state))
