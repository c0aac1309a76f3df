"""
Module: builder.pbq.templates

Purpose:
    Performance-based question templates. A template is immutable data
    (parsed from a plugin's pbq_templates.json); instantiating it with the
    session stream produces a Question with a shuffled presentation.

Key Classes:
    - OrderTemplate: Canonical step sequence
    - MatchTemplate: Canonical left/right pairs plus right-column distractors
    - TemplateValidationError: Malformed template data

Key Functions:
    - parse_template(): Validate one raw template dict
    - instantiate_template(): Template -> Question, dispatched on PbqKind

Invariants:
    - ORDER: correct == canonical steps; presented items are s1..sN
    - MATCH: right pool size == max(4, pairs + 1) and contains every
      correct right value; correct == "left=>right" strings
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Tuple, Union

from exam_toolkit.common.constants import MIN_MATCH_RIGHT_POOL
from exam_toolkit.common.objectives import ObjectiveCatalog, resolve_objective
from exam_toolkit.common.rng import SessionRng
from exam_toolkit.core.models.questions import (
    MatchPayload,
    Option,
    OrderPayload,
    PbqKind,
    Question,
    QuestionType,
)

PAIR_SEPARATOR = "=>"

DEFAULT_MATCH_EXPLANATION = "Match each item to the best answer based on the objective."
DEFAULT_ORDER_EXPLANATION = "Put the steps in the order the procedure is carried out."


class TemplateValidationError(ValueError):
    """Raised when PBQ template data is malformed."""


def encode_pair(left: str, right: str) -> str:
    """
    Canonical encoding of one match pair.

    Example:
        >>> encode_pair("RJ-45", "Ethernet")
        'RJ-45=>Ethernet'
    """
    return f"{left}{PAIR_SEPARATOR}{right}"


def _unique(values) -> list:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


@dataclass(frozen=True)
class OrderTemplate:
    """
    ORDER template: reconstruct a procedure's step sequence.

    Attributes:
        template_id: Unique id within the variant
        objective: Objective id the template drills
        prompt: Question text
        steps: Steps in canonical order
        explanation: Review explanation
    """

    template_id: str
    objective: str
    prompt: str
    steps: Tuple[str, ...]
    explanation: str = DEFAULT_ORDER_EXPLANATION

    @property
    def kind(self) -> PbqKind:
        return PbqKind.ORDER


@dataclass(frozen=True)
class MatchPair:
    left: str
    right: str

    @property
    def encoded(self) -> str:
        return encode_pair(self.left, self.right)


@dataclass(frozen=True)
class MatchTemplate:
    """
    MATCH template: pair each left item with a right value.

    Attributes:
        template_id: Unique id within the variant
        objective: Objective id the template drills
        prompt: Question text
        left_label: Left column heading
        right_label: Right column heading
        pairs: Canonical pairs, in left-column order
        distractors: Extra right-column values
        explanation: Review explanation
    """

    template_id: str
    objective: str
    prompt: str
    left_label: str
    right_label: str
    pairs: Tuple[MatchPair, ...]
    distractors: Tuple[str, ...] = ()
    explanation: str = DEFAULT_MATCH_EXPLANATION

    @property
    def kind(self) -> PbqKind:
        return PbqKind.MATCH

    @property
    def right_pool_size(self) -> int:
        return max(MIN_MATCH_RIGHT_POOL, len(self.pairs) + 1)


PbqTemplate = Union[OrderTemplate, MatchTemplate]


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────

def _require_str(data: Mapping[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise TemplateValidationError(f"{where}: '{key}' must be a non-empty string")
    return value


def _str_list(data: Mapping[str, Any], key: str, where: str) -> Tuple[str, ...]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        raise TemplateValidationError(f"{where}: '{key}' must be a list of non-empty strings")
    return tuple(value)


def _parse_order(data: Mapping[str, Any], where: str) -> OrderTemplate:
    steps = _str_list(data, "steps", where)
    if len(steps) < 2:
        raise TemplateValidationError(f"{where}: an order template needs at least 2 steps")
    if len(set(steps)) != len(steps):
        raise TemplateValidationError(f"{where}: order steps must be unique")
    return OrderTemplate(
        template_id=_require_str(data, "id", where),
        objective=_require_str(data, "objective", where),
        prompt=_require_str(data, "prompt", where),
        steps=steps,
        explanation=data.get("explanation") or DEFAULT_ORDER_EXPLANATION,
    )


def _parse_match(data: Mapping[str, Any], where: str) -> MatchTemplate:
    raw_pairs = data.get("pairs")
    if not isinstance(raw_pairs, list) or not raw_pairs:
        raise TemplateValidationError(f"{where}: 'pairs' must be a non-empty list")

    pairs = []
    for i, raw in enumerate(raw_pairs):
        if not isinstance(raw, dict):
            raise TemplateValidationError(f"{where}: pairs[{i}] must be an object")
        left = _require_str(raw, "left", f"{where} pairs[{i}]")
        right = _require_str(raw, "right", f"{where} pairs[{i}]")
        if PAIR_SEPARATOR in left or PAIR_SEPARATOR in right:
            raise TemplateValidationError(f"{where}: pairs[{i}] may not contain '{PAIR_SEPARATOR}'")
        pairs.append(MatchPair(left=left, right=right))

    lefts = [p.left for p in pairs]
    if len(set(lefts)) != len(lefts):
        raise TemplateValidationError(f"{where}: left items must be unique")

    template = MatchTemplate(
        template_id=_require_str(data, "id", where),
        objective=_require_str(data, "objective", where),
        prompt=_require_str(data, "prompt", where),
        left_label=_require_str(data, "left_label", where),
        right_label=_require_str(data, "right_label", where),
        pairs=tuple(pairs),
        distractors=_str_list(data, "distractors", where),
        explanation=data.get("explanation") or DEFAULT_MATCH_EXPLANATION,
    )

    available = len(_unique([p.right for p in pairs] + list(template.distractors)))
    if available < template.right_pool_size:
        raise TemplateValidationError(
            f"{where}: right column needs {template.right_pool_size} distinct values, "
            f"pairs and distractors provide {available}"
        )
    return template


_PARSERS: Dict[PbqKind, Callable[[Mapping[str, Any], str], PbqTemplate]] = {
    PbqKind.ORDER: _parse_order,
    PbqKind.MATCH: _parse_match,
}


def parse_template(data: Mapping[str, Any], where: str = "template") -> PbqTemplate:
    """
    Validate one raw template dict.

    Raises:
        TemplateValidationError: If the kind is unknown or fields are malformed
    """
    if not isinstance(data, Mapping):
        raise TemplateValidationError(f"{where}: must be an object")
    try:
        kind = PbqKind(data.get("kind"))
    except ValueError:
        raise TemplateValidationError(f"{where}: unknown kind {data.get('kind')!r}") from None
    return _PARSERS[kind](data, where)


# ─────────────────────────────────────────────────────────────────────────────
# Instantiation
# ─────────────────────────────────────────────────────────────────────────────

def _instantiate_order(
    template: OrderTemplate,
    rng: SessionRng,
    question_id: str,
    exam: str,
    catalog: ObjectiveCatalog,
) -> Question:
    objective = resolve_objective(catalog, exam, template.objective)
    items = tuple(Option(id=f"s{i + 1}", text=t) for i, t in enumerate(rng.shuffle(template.steps)))
    return Question(
        id=question_id,
        exam=exam,
        domain=objective.domain,
        objective=template.objective,
        objective_title=objective.title,
        objective_bullets=objective.bullets,
        type=QuestionType.PBQ_ORDER,
        prompt=template.prompt,
        correct=tuple(template.steps),
        explanation=template.explanation,
        pbq=OrderPayload(items=items),
    )


def _instantiate_match(
    template: MatchTemplate,
    rng: SessionRng,
    question_id: str,
    exam: str,
    catalog: ObjectiveCatalog,
) -> Question:
    objective = resolve_objective(catalog, exam, template.objective)
    rights = _unique(p.right for p in template.pairs)
    extras = [d for d in _unique(template.distractors) if d not in rights]
    chosen = rng.shuffle(extras)[: max(0, template.right_pool_size - len(rights))]
    pool = rng.shuffle(rights + chosen)

    return Question(
        id=question_id,
        exam=exam,
        domain=objective.domain,
        objective=template.objective,
        objective_title=objective.title,
        objective_bullets=objective.bullets,
        type=QuestionType.PBQ_MATCH,
        prompt=template.prompt,
        correct=tuple(p.encoded for p in template.pairs),
        explanation=template.explanation,
        pbq=MatchPayload(
            left_label=template.left_label,
            right_label=template.right_label,
            left=tuple(Option(id=f"l{i + 1}", text=p.left) for i, p in enumerate(template.pairs)),
            right=tuple(Option(id=f"r{i + 1}", text=t) for i, t in enumerate(pool)),
        ),
    )


_INSTANTIATORS: Dict[PbqKind, Callable[..., Question]] = {
    PbqKind.ORDER: _instantiate_order,
    PbqKind.MATCH: _instantiate_match,
}

_missing = set(PbqKind) - set(_INSTANTIATORS) | set(PbqKind) - set(_PARSERS)
if _missing:
    raise RuntimeError(f"PBQ kinds without a handler: {sorted(k.value for k in _missing)}")


def instantiate_template(
    template: PbqTemplate,
    rng: SessionRng,
    question_id: str,
    exam: str,
    catalog: ObjectiveCatalog,
) -> Question:
    """
    Produce a Question from a template using the session stream.

    Args:
        template: Parsed template
        rng: Session stream (consumed)
        question_id: Id for the new question
        exam: Exam variant id
        catalog: Objective lookup for the denormalized title/bullets
    """
    return _INSTANTIATORS[template.kind](template, rng, question_id, exam, catalog)
