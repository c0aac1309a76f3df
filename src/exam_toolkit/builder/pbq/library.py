"""
Module: builder.pbq.library

Purpose:
    The immutable set of PBQ templates for one exam variant, with uniform
    selection at substitution time.

Key Classes:
    - PbqLibrary: Template tuple plus pick()/instantiate()

Key Functions:
    - load_pbq_library(): Parse a plugin's pbq_templates.json
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Tuple

from exam_toolkit.common.objectives import ObjectiveCatalog
from exam_toolkit.common.rng import SessionRng
from exam_toolkit.core.models.questions import PbqKind, Question
from exam_toolkit.plugins import load_pbq_template_data

from .templates import PbqTemplate, TemplateValidationError, instantiate_template, parse_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PbqLibrary:
    """
    Curated PBQ templates for one exam variant (immutable).

    Attributes:
        exam: Exam variant id
        templates: Templates in declaration order
    """

    exam: str
    templates: Tuple[PbqTemplate, ...] = ()

    def __post_init__(self) -> None:
        ids = Counter(t.template_id for t in self.templates)
        duplicates = sorted(tid for tid, n in ids.items() if n > 1)
        if duplicates:
            raise TemplateValidationError(f"Duplicate PBQ template ids for {self.exam}: {duplicates}")

    @classmethod
    def from_data(cls, exam: str, data: Iterable[Mapping[str, Any]]) -> PbqLibrary:
        """Parse raw template dicts; raises TemplateValidationError on bad data."""
        templates = tuple(
            parse_template(raw, where=f"{exam} templates[{i}]")
            for i, raw in enumerate(data)
        )
        return cls(exam=exam, templates=templates)

    def __len__(self) -> int:
        return len(self.templates)

    def __bool__(self) -> bool:
        return bool(self.templates)

    def by_kind(self, kind: PbqKind) -> Tuple[PbqTemplate, ...]:
        return tuple(t for t in self.templates if t.kind is kind)

    def pick(self, rng: SessionRng) -> PbqTemplate:
        """Uniformly pick a template (consumes one value)."""
        return rng.pick_one(self.templates)

    def instantiate(
        self,
        template: PbqTemplate,
        rng: SessionRng,
        question_id: str,
        catalog: ObjectiveCatalog,
    ) -> Question:
        return instantiate_template(template, rng, question_id, self.exam, catalog)


def load_pbq_library(exam: str) -> PbqLibrary:
    """
    Build the template library for an exam variant from its plugin.

    Raises:
        UnsupportedCodeError: If the exam is not registered
        MissingResourcesError: If pbq_templates.json is missing or unreadable
        TemplateValidationError: If a template is malformed
    """
    library = PbqLibrary.from_data(exam, load_pbq_template_data(exam))
    logger.debug(
        f"Loaded {len(library)} PBQ templates for {exam} "
        f"({len(library.by_kind(PbqKind.ORDER))} order, {len(library.by_kind(PbqKind.MATCH))} match)"
    )
    return library
