"""
Module: common.objectives

Purpose:
    Read-only objective catalog consumed by the session builder. Defines
    the catalog interface, an in-memory implementation backed by plugin
    snapshots, and the enrichment helper that applies graceful fallbacks
    for objectives with no metadata.

Key Classes:
    - ObjectiveCatalog: Interface (protocol) the builder depends on
    - StaticObjectiveCatalog: Immutable in-memory catalog
    - ResolvedObjective: Title/bullets/domain after fallbacks

Key Functions:
    - load_catalog(): Build a catalog from plugin objectives.json files
    - resolve_objective(): Metadata lookup with fallbacks
    - placeholder_objective_id(): Objective id used for empty domains

Dependencies:
    - exam_toolkit.plugins: Objective snapshots per exam variant

Used By:
    - builder.questions: MCQ synthesis
    - builder.pbq: PBQ instantiation
    - builder.controller: Per-domain objective sampling
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

from exam_toolkit.core.models.objectives import ObjectiveMeta, objective_domain_number
from exam_toolkit.plugins import load_objectives_data, supported_exam_codes

logger = logging.getLogger(__name__)


__all__ = [
    "ObjectiveCatalog",
    "StaticObjectiveCatalog",
    "ResolvedObjective",
    "load_catalog",
    "resolve_objective",
    "placeholder_objective_id",
]


class ObjectiveCatalog(Protocol):
    """Synchronous, in-memory objective lookup."""

    def get_objective_meta(self, exam: str, objective_id: str) -> Optional[ObjectiveMeta]:
        ...

    def list_objectives_by_domain(self, exam: str, domain_id: str) -> List[str]:
        ...


class StaticObjectiveCatalog:
    """
    Immutable catalog over {exam: {objective_id: ObjectiveMeta}}.

    Objective ids keep their declaration order, which is the order
    list_objectives_by_domain() returns them in.

    Example:
        >>> catalog = StaticObjectiveCatalog({"220-1201": {"2.1": ObjectiveMeta("Ports")}})
        >>> catalog.list_objectives_by_domain("220-1201", "2.0")
        ['2.1']
    """

    def __init__(self, objectives: Mapping[str, Mapping[str, ObjectiveMeta]]) -> None:
        self._objectives = MappingProxyType({
            exam: MappingProxyType(dict(entries))
            for exam, entries in objectives.items()
        })

    @classmethod
    def from_data(cls, data: Mapping[str, Mapping[str, dict]]) -> StaticObjectiveCatalog:
        """Build from raw {exam: {objective_id: {domain, title, bullets}}} data."""
        return cls({
            exam: {oid: ObjectiveMeta.from_dict(meta) for oid, meta in entries.items()}
            for exam, entries in data.items()
        })

    @classmethod
    def empty(cls) -> StaticObjectiveCatalog:
        return cls({})

    @property
    def exams(self) -> Tuple[str, ...]:
        return tuple(self._objectives.keys())

    def objective_ids(self, exam: str) -> List[str]:
        return list(self._objectives.get(exam, {}).keys())

    def get_objective_meta(self, exam: str, objective_id: str) -> Optional[ObjectiveMeta]:
        return self._objectives.get(exam, {}).get(objective_id)

    def list_objectives_by_domain(self, exam: str, domain_id: str) -> List[str]:
        return [
            oid for oid in self.objective_ids(exam)
            if objective_domain_number(oid) == domain_id
        ]

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._objectives.values())


def load_catalog(codes: Optional[Iterable[str]] = None) -> StaticObjectiveCatalog:
    """
    Build a catalog from plugin objective snapshots.

    Args:
        codes: Exam codes to include. None = every registered plugin.

    Raises:
        UnsupportedCodeError: If a requested code is not registered
        MissingResourcesError: If a plugin's objectives.json is missing
    """
    selected = list(codes) if codes is not None else supported_exam_codes()
    data: Dict[str, Dict[str, dict]] = {code: load_objectives_data(code) for code in selected}
    catalog = StaticObjectiveCatalog.from_data(data)
    logger.debug(f"Loaded objective catalog with {len(catalog)} objectives for {selected}")
    return catalog


@dataclass(frozen=True)
class ResolvedObjective:
    """Objective metadata after fallbacks are applied."""
    objective_id: str
    title: str
    bullets: Tuple[str, ...]
    domain: str
    cataloged: bool


def resolve_objective(catalog: ObjectiveCatalog, exam: str, objective_id: str) -> ResolvedObjective:
    """
    Look up an objective, degrading gracefully when it is unknown.

    Unknown ids get the title "Objective <id>", no bullets and a domain
    label derived from the id's numeric prefix ("2.7" -> "2.0").
    """
    meta = catalog.get_objective_meta(exam, objective_id)
    derived_domain = objective_domain_number(objective_id)
    if meta is None:
        return ResolvedObjective(
            objective_id=objective_id,
            title=f"Objective {objective_id}",
            bullets=(),
            domain=derived_domain,
            cataloged=False,
        )
    return ResolvedObjective(
        objective_id=objective_id,
        title=meta.title or f"Objective {objective_id}",
        bullets=tuple(meta.bullets),
        domain=meta.domain or derived_domain,
        cataloged=True,
    )


def placeholder_objective_id(domain_id: str) -> str:
    """
    Objective id used when a domain has no cataloged objectives.

    Example:
        >>> placeholder_objective_id("3.0")
        '3.1'
    """
    return f"{domain_id.split('.')[0]}.1"
