"""
Module: builder.controller

Purpose:
    Orchestrate session building.
    Seed → Allocate → Sample objectives → Synthesize MCQs
    → Substitute PBQs → Shuffle

Key Functions:
    - create_session(): Main entry point; fresh session id
    - build_session(): Deterministic replay for a given session id
    - load_exam_resources(): Resolve a variant's static inputs from plugins
    - new_session_id(): "<variant>-<base36 ms>-<6 random base36>"

Key Classes:
    - ExamResources: Blueprint, catalog, PBQ library and curated handlers
    - BuildError: Exception for unresolvable resources

Dependencies:
    - builder.allocation: Domain allocation
    - builder.questions: MCQ synthesis
    - builder.pbq: PBQ templates
    - exam_toolkit.plugins: Variant resources

Used By:
    - exam_toolkit.cli: generate command
    - exam_toolkit (package root): create_session export

Invariants:
    - len(session.questions) == EXAM_QUESTION_COUNT
    - session.pbq_count == min(effective PBQ count, slots) when the
      variant has templates
    - identical session id + resources + config => equal sessions
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Mapping, Optional, Tuple

from exam_toolkit.common.constants import EXAM_DURATION_SECONDS, EXAM_QUESTION_COUNT
from exam_toolkit.common.identifiers import epoch_millis, iso_utc_millis, random_base36, to_base36, utc_now
from exam_toolkit.common.objectives import ObjectiveCatalog, load_catalog, placeholder_objective_id
from exam_toolkit.common.rng import SessionRng
from exam_toolkit.core.models import DomainBlueprint, ExamSession, Question, SessionConfig
from exam_toolkit.plugins import MissingResourcesError, get_exam_plugin

from .allocation import allocate_by_weight
from .pbq import PbqLibrary, TemplateValidationError, load_pbq_library
from .questions import CURATED_HANDLERS, HandlerKey, IdGenerator, QuestionContext, QuestionHandler, build_mcq

logger = logging.getLogger(__name__)

SESSION_SUFFIX_LENGTH = 6


class BuildError(Exception):
    """Error resolving the inputs of a session build."""
    pass


@dataclass(frozen=True)
class ExamResources:
    """
    Static inputs for one exam variant (immutable).

    Attributes:
        exam: Exam variant id
        blueprint: Weighted domains in declaration order
        catalog: Objective metadata lookup
        pbq_library: PBQ templates for the variant
        handlers: Curated MCQ handlers
    """

    exam: str
    blueprint: Tuple[DomainBlueprint, ...]
    catalog: ObjectiveCatalog
    pbq_library: PbqLibrary
    handlers: Mapping[HandlerKey, QuestionHandler] = field(default_factory=lambda: CURATED_HANDLERS)


def load_exam_resources(exam: str) -> ExamResources:
    """
    Resolve an exam variant's blueprint, catalog and PBQ library.

    Raises:
        BuildError: If the variant is unknown or its plugin data is unusable
    """
    try:
        plugin = get_exam_plugin(exam)
        catalog = load_catalog([plugin.code])
        library = load_pbq_library(plugin.code)
    except (MissingResourcesError, TemplateValidationError) as e:
        raise BuildError(f"Cannot load resources for {exam}: {e}") from e

    return ExamResources(
        exam=plugin.code,
        blueprint=plugin.blueprint,
        catalog=catalog,
        pbq_library=library,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Session identity
# ─────────────────────────────────────────────────────────────────────────────

def new_session_id(exam: str, now_ms: Optional[int] = None) -> str:
    """Fresh session id; the only non-deterministic step of session creation."""
    if now_ms is None:
        now_ms = epoch_millis()
    return f"{exam}-{to_base36(now_ms)}-{random_base36(SESSION_SUFFIX_LENGTH)}"


# ─────────────────────────────────────────────────────────────────────────────
# Pipeline
# ─────────────────────────────────────────────────────────────────────────────

def select_pbq_slots(rng: SessionRng, slot_count: int, wanted: int) -> List[int]:
    """
    Draw `wanted` distinct slot indices uniformly, in draw order.

    Rejection sampling over floor(next() * slot_count); repeats are redrawn.
    """
    wanted = min(wanted, slot_count)
    chosen: List[int] = []
    seen = set()
    while len(chosen) < wanted:
        index = rng.randint_below(slot_count)
        if index not in seen:
            seen.add(index)
            chosen.append(index)
    return chosen


def build_session(
    session_id: str,
    exam: str,
    config: SessionConfig,
    *,
    resources: ExamResources,
    created_at: str,
) -> ExamSession:
    """
    Build the session for a given id (deterministic).

    Pipeline:
    1. Seed the stream from the session id
    2. Allocate EXAM_QUESTION_COUNT slots over the blueprint
    3. Per domain slot: pick an objective, synthesize an MCQ
    4. Replace min(effective PBQ count, slots) random slots with PBQs
    5. Shuffle the whole list

    Args:
        session_id: Seed string
        exam: Exam variant id
        config: Generation options
        resources: Variant blueprint, catalog and templates
        created_at: Timestamp recorded on the session

    Returns:
        ExamSession with exactly EXAM_QUESTION_COUNT questions
    """
    rng = SessionRng(session_id)
    ids = IdGenerator(session_id)
    catalog = resources.catalog
    ctx = QuestionContext(exam=exam, rng=rng, catalog=catalog, ids=ids)

    allocation = allocate_by_weight(EXAM_QUESTION_COUNT, resources.blueprint)
    logger.debug(f"Allocation for {session_id}: {allocation}")

    questions: List[Question] = []
    for row in resources.blueprint:
        count = allocation.get(row.domain_id, 0)
        objective_ids = catalog.list_objectives_by_domain(exam, row.domain_id)
        if count and not objective_ids:
            logger.warning(
                f"No objectives cataloged for {exam} domain {row.domain_id}; "
                f"using placeholder {placeholder_objective_id(row.domain_id)}"
            )
        for _ in range(count):
            if objective_ids:
                objective_id = rng.pick_one(objective_ids)
            else:
                objective_id = placeholder_objective_id(row.domain_id)
            questions.append(build_mcq(ctx, objective_id, resources.handlers))

    wanted = min(config.effective_pbq_count, len(questions))
    library = resources.pbq_library
    if wanted and not library:
        logger.warning(f"No PBQ templates for {exam}; requested {wanted} PBQs skipped")
        wanted = 0

    for index in select_pbq_slots(rng, len(questions), wanted):
        template = library.pick(rng)
        questions[index] = library.instantiate(template, rng, ids("pbq"), catalog)

    session = ExamSession(
        session_id=session_id,
        exam=exam,
        created_at=created_at,
        duration_seconds=EXAM_DURATION_SECONDS,
        config=config,
        questions=tuple(rng.shuffle(questions)[:EXAM_QUESTION_COUNT]),
    )
    logger.debug(f"Built {session!r}")
    return session


def create_session(
    exam: str,
    config: Optional[SessionConfig] = None,
    *,
    resources: Optional[ExamResources] = None,
    now: Optional[datetime] = None,
) -> ExamSession:
    """
    Generate a new exam session.

    Args:
        exam: Exam variant id like "220-1201"
        config: Generation options (default: no PBQs, no hints)
        resources: Preloaded variant resources; None = load from plugins
        now: Creation time (default: current UTC time)

    Returns:
        Fresh ExamSession

    Raises:
        BuildError: If resources are not given and cannot be loaded

    Example:
        >>> session = create_session("220-1201", SessionConfig(pbq_count=5))
        >>> session.question_count, session.pbq_count
        (90, 5)
    """
    config = config or SessionConfig()
    if resources is None:
        resources = load_exam_resources(exam)
    moment = now or utc_now()

    start_time = time.perf_counter()
    session_id = new_session_id(exam, epoch_millis(moment))
    session = build_session(
        session_id,
        exam,
        config,
        resources=resources,
        created_at=iso_utc_millis(moment),
    )
    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Created session {session_id}: {session.question_count} questions, "
        f"{session.pbq_count} PBQs in {elapsed:.3f}s"
    )
    return session
