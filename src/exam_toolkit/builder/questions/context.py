"""
Module: builder.questions.context

Purpose:
    Per-session state threaded through question synthesis: the seeded
    random stream, the objective catalog and the question id counter.

Key Classes:
    - IdGenerator: "<session>-<prefix>-<n>" ids with one shared counter
    - QuestionContext: Everything a handler needs to build a question
"""

from __future__ import annotations

from dataclasses import dataclass

from exam_toolkit.common.objectives import ObjectiveCatalog, ResolvedObjective, resolve_objective
from exam_toolkit.common.rng import SessionRng


class IdGenerator:
    """
    Sequential question ids scoped to one session.

    MCQs and PBQs share the counter, so ids stay unique across types.

    Example:
        >>> ids = IdGenerator("220-1201-abc")
        >>> ids("q"), ids("pbq")
        ('220-1201-abc-q-1', '220-1201-abc-pbq-2')
    """

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self._counter = 0

    def __call__(self, prefix: str) -> str:
        self._counter += 1
        return f"{self.session_id}-{prefix}-{self._counter}"

    @property
    def issued(self) -> int:
        return self._counter


@dataclass
class QuestionContext:
    """
    Mutable per-session synthesis state.

    Attributes:
        exam: Exam variant id
        rng: Session random stream (consumed in place)
        catalog: Objective metadata lookup
        ids: Question id generator
    """

    exam: str
    rng: SessionRng
    catalog: ObjectiveCatalog
    ids: IdGenerator

    def resolve(self, objective_id: str) -> ResolvedObjective:
        return resolve_objective(self.catalog, self.exam, objective_id)
