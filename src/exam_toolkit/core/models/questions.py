"""
Module: questions

Purpose:
    Provides the Question dataclass - an immutable, fully denormalized
    exam item - together with its option and PBQ payload types.

Key Classes:
    - QuestionType: single / multi / pbq-order / pbq-match
    - PbqKind: ORDER / MATCH tag for performance-based payloads
    - Option: Selectable option (id + text)
    - OrderPayload / MatchPayload: Tagged PBQ payloads
    - Question: Complete question record

Used By:
    - builder.questions: MCQ synthesis
    - builder.pbq: PBQ template instantiation
    - scoring.scorer: Per-type evaluation
    - core.utils.serialization: JSON round trip

Invariants:
    - single/multi: 2-4 options, correct ids are a non-empty subset of option ids
    - pbq-order carries an OrderPayload, pbq-match carries a MatchPayload
    - Objective title/bullets are copied at creation so review screens never
      need the catalog again
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from exam_toolkit.common.constants import MIN_MATCH_RIGHT_POOL


class QuestionType(str, Enum):
    """Type tag for a question."""
    SINGLE = "single"
    MULTI = "multi"
    PBQ_ORDER = "pbq-order"
    PBQ_MATCH = "pbq-match"

    def __str__(self) -> str:
        return self.value

    @property
    def is_pbq(self) -> bool:
        return self in (QuestionType.PBQ_ORDER, QuestionType.PBQ_MATCH)


class PbqKind(str, Enum):
    """Structural kind of a performance-based question."""
    ORDER = "order"
    MATCH = "match"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Option:
    """Selectable option or PBQ item (id + display text)."""

    id: str
    text: str

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict) -> Option:
        return cls(id=data["id"], text=data["text"])


def _options_to_list(options: Tuple[Option, ...]) -> list:
    return [o.to_dict() for o in options]


def _options_from_list(items: list) -> Tuple[Option, ...]:
    return tuple(Option.from_dict(item) for item in items)


@dataclass(frozen=True)
class OrderPayload:
    """
    Presented (shuffled) steps of an ORDER performance question.

    Attributes:
        items: Steps in presented order, ids s1..sN
    """

    items: Tuple[Option, ...]

    @property
    def kind(self) -> PbqKind:
        return PbqKind.ORDER

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "items": _options_to_list(self.items)}


@dataclass(frozen=True)
class MatchPayload:
    """
    Columns of a MATCH performance question.

    Attributes:
        left_label: Heading for the left column (e.g. "Connector")
        right_label: Heading for the right column (e.g. "Usage")
        left: Left items in canonical pair order, ids l1..lN
        right: Right pool (correct values + distractors), ids r1..rM
    """

    left_label: str
    right_label: str
    left: Tuple[Option, ...]
    right: Tuple[Option, ...]

    @property
    def kind(self) -> PbqKind:
        return PbqKind.MATCH

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "left_label": self.left_label,
            "right_label": self.right_label,
            "left": _options_to_list(self.left),
            "right": _options_to_list(self.right),
        }


PbqPayload = Union[OrderPayload, MatchPayload]


def payload_from_dict(data: dict) -> PbqPayload:
    """Rebuild a PBQ payload from its tagged dictionary form."""
    kind = PbqKind(data["kind"])
    if kind is PbqKind.ORDER:
        return OrderPayload(items=_options_from_list(data.get("items", [])))
    if kind is PbqKind.MATCH:
        return MatchPayload(
            left_label=data.get("left_label", ""),
            right_label=data.get("right_label", ""),
            left=_options_from_list(data.get("left", [])),
            right=_options_from_list(data.get("right", [])),
        )
    raise ValueError(f"Unhandled PBQ kind: {kind}")


_PAYLOAD_FOR_TYPE = {
    QuestionType.PBQ_ORDER: OrderPayload,
    QuestionType.PBQ_MATCH: MatchPayload,
}


@dataclass(frozen=True)
class Question:
    """
    Complete exam question (immutable).

    Attributes:
        id: Unique id like "220-1201-lx3k9-a1b2c3-q-17"
        exam: Exam variant id like "220-1201"
        domain: Resolved display domain label like "2.0 Networking"
        objective: Objective id like "2.1"
        objective_title: Objective statement at creation time
        objective_bullets: Objective bullets at creation time
        type: Question type tag
        prompt: Question text
        correct: Canonical answer - option ids (single/multi), ordered step
            texts (pbq-order) or "left=>right" strings (pbq-match)
        explanation: Review explanation
        options: Options for single/multi questions
        focus: Fact the question was built around, if any
        pbq: PBQ payload for performance-based questions

    Example:
        >>> q.type
        <QuestionType.SINGLE: 'single'>
        >>> set(q.correct) <= set(q.option_ids)
        True
    """

    id: str
    exam: str
    domain: str
    objective: str
    objective_title: str
    objective_bullets: Tuple[str, ...]
    type: QuestionType
    prompt: str
    correct: Tuple[str, ...]
    explanation: str
    options: Tuple[Option, ...] = ()
    focus: Optional[str] = None
    pbq: Optional[PbqPayload] = None

    def __post_init__(self) -> None:
        """Validate question shape on construction."""
        if not self.prompt:
            raise ValueError(f"Question {self.id} has an empty prompt")
        if not self.correct:
            raise ValueError(f"Question {self.id} has no correct answer")

        if self.type.is_pbq:
            expected = _PAYLOAD_FOR_TYPE[self.type]
            if not isinstance(self.pbq, expected):
                raise ValueError(
                    f"Question {self.id} of type {self.type} needs a {expected.__name__}"
                )
            if isinstance(self.pbq, MatchPayload):
                minimum = max(MIN_MATCH_RIGHT_POOL, len(self.pbq.left) + 1)
                if len(self.pbq.right) < minimum:
                    raise ValueError(
                        f"Question {self.id} right pool has {len(self.pbq.right)} "
                        f"entries, needs at least {minimum}"
                    )
            return

        if self.pbq is not None:
            raise ValueError(f"Question {self.id} of type {self.type} cannot carry a PBQ payload")
        if not (2 <= len(self.options) <= 4):
            raise ValueError(f"Question {self.id} must have 2-4 options: {len(self.options)}")
        invalid = set(self.correct) - set(self.option_ids)
        if invalid:
            raise ValueError(f"Question {self.id} correct ids not among options: {invalid}")

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def option_ids(self) -> Tuple[str, ...]:
        return tuple(o.id for o in self.options)

    @property
    def is_pbq(self) -> bool:
        return self.type.is_pbq

    def option_text(self, option_id: str) -> Optional[str]:
        """Display text for an option id, None if not present."""
        for option in self.options:
            if option.id == option_id:
                return option.text
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "exam": self.exam,
            "domain": self.domain,
            "objective": self.objective,
            "objective_title": self.objective_title,
            "objective_bullets": list(self.objective_bullets),
            "type": self.type.value,
            "prompt": self.prompt,
            "correct": list(self.correct),
            "explanation": self.explanation,
        }
        if self.options:
            d["options"] = _options_to_list(self.options)
        if self.focus is not None:
            d["focus"] = self.focus
        if self.pbq is not None:
            d["pbq"] = self.pbq.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        return cls(
            id=data["id"],
            exam=data["exam"],
            domain=data["domain"],
            objective=data["objective"],
            objective_title=data.get("objective_title", ""),
            objective_bullets=tuple(data.get("objective_bullets", [])),
            type=QuestionType(data["type"]),
            prompt=data["prompt"],
            correct=tuple(data["correct"]),
            explanation=data.get("explanation", ""),
            options=_options_from_list(data.get("options", [])),
            focus=data.get("focus"),
            pbq=payload_from_dict(data["pbq"]) if data.get("pbq") else None,
        )

    def __repr__(self) -> str:
        return f"Question({self.id!r}, type={self.type.value}, objective={self.objective!r})"
