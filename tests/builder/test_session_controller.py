"""
Unit Tests for Session Building

Tests for build_session/create_session: size, determinism, PBQ
substitution bounds and graceful degradation on missing data.
"""

import logging
import re
from collections import Counter
from datetime import datetime, timezone

import pytest

from exam_toolkit.builder import (
    BuildError,
    ExamResources,
    build_session,
    create_session,
    load_exam_resources,
    new_session_id,
)
from exam_toolkit.builder.allocation import allocate_by_weight
from exam_toolkit.builder.controller import select_pbq_slots
from exam_toolkit.builder.pbq import PbqLibrary
from exam_toolkit.builder.questions import CURATED_HANDLERS
from exam_toolkit.common.constants import EXAM_DURATION_SECONDS, EXAM_QUESTION_COUNT
from exam_toolkit.common.objectives import StaticObjectiveCatalog
from exam_toolkit.common.rng import SessionRng
from exam_toolkit.core.models import DomainBlueprint, ObjectiveMeta, QuestionType, SessionConfig

CREATED_AT = "2026-10-01T12:00:00.000Z"


def _build(resources, session_id="220-1201-test-abc123", pbq=0):
    return build_session(
        session_id,
        resources.exam,
        SessionConfig(pbq_count=pbq),
        resources=resources,
        created_at=CREATED_AT,
    )


class TestBuildSession:
    """Tests for build_session."""

    def test_build_when_called_then_exactly_ninety_questions(self, resources):
        session = _build(resources)

        assert session.question_count == EXAM_QUESTION_COUNT
        assert session.duration_seconds == EXAM_DURATION_SECONDS
        assert session.created_at == CREATED_AT

    def test_build_when_called_then_question_ids_unique(self, resources):
        session = _build(resources, pbq=8)

        ids = [q.id for q in session.questions]
        assert len(set(ids)) == len(ids)
        assert all(i.startswith("220-1201-test-abc123-") for i in ids)

    def test_build_when_same_id_then_equal_sessions(self, resources):
        """Replaying a session id reproduces the session exactly."""
        assert _build(resources, pbq=5) == _build(resources, pbq=5)

    def test_build_when_different_ids_then_sessions_differ(self, resources):
        a = _build(resources, session_id="220-1201-a")
        b = _build(resources, session_id="220-1201-b")

        assert [q.prompt for q in a.questions] != [q.prompt for q in b.questions]

    def test_build_when_no_pbqs_then_domain_counts_follow_allocation(self, resources):
        """Without PBQs every domain contributes exactly its allocated count."""
        session = _build(resources)

        by_domain = Counter(q.objective.split(".")[0] + ".0" for q in session.questions)
        assert dict(by_domain) == allocate_by_weight(EXAM_QUESTION_COUNT, resources.blueprint)

    def test_build_when_domain_uncataloged_then_placeholder_objective(self, resources, caplog):
        """Domain 4.0 has no cataloged objectives in the fixture catalog."""
        with caplog.at_level(logging.WARNING):
            session = _build(resources)

        placeholders = [q for q in session.questions if q.objective == "4.1"]
        assert len(placeholders) == 10
        assert all(q.objective_title == "Objective 4.1" for q in placeholders)
        assert all(q.domain == "4.0" for q in placeholders)
        assert "domain 4.0" in caplog.text

    @pytest.mark.parametrize("requested,expected", [(0, 0), (1, 1), (5, 5), (12, 12), (40, 12), (-3, 0)])
    def test_build_when_pbqs_requested_then_count_clamped(self, resources, requested, expected):
        session = _build(resources, pbq=requested)

        assert session.pbq_count == expected
        assert session.question_count == EXAM_QUESTION_COUNT
        assert session.config.pbq_count == requested

    def test_build_when_pbqs_then_types_are_order_or_match(self, resources):
        session = _build(resources, pbq=12)

        counts = session.type_counts()
        assert counts.get(QuestionType.PBQ_ORDER, 0) + counts.get(QuestionType.PBQ_MATCH, 0) == 12
        for question in session.questions:
            if question.is_pbq:
                assert question.pbq is not None
                assert "-pbq-" in question.id

    def test_build_when_library_empty_then_pbqs_skipped(self, blueprint, catalog, caplog):
        resources = ExamResources(
            exam="220-1201",
            blueprint=blueprint,
            catalog=catalog,
            pbq_library=PbqLibrary("220-1201"),
        )

        with caplog.at_level(logging.WARNING):
            session = _build(resources, pbq=6)

        assert session.pbq_count == 0
        assert session.question_count == EXAM_QUESTION_COUNT
        assert "No PBQ templates" in caplog.text

    def test_build_when_catalog_empty_then_still_complete(self, blueprint):
        """Every domain falls back to placeholders; build never fails."""
        resources = ExamResources(
            exam="220-1201",
            blueprint=blueprint,
            catalog=StaticObjectiveCatalog.empty(),
            pbq_library=PbqLibrary("220-1201"),
            handlers={},
        )

        session = _build(resources)

        assert session.question_count == EXAM_QUESTION_COUNT
        assert {q.objective for q in session.questions} == {"1.1", "2.1", "3.1", "4.1", "5.1"}
        for question in session.questions:
            assert 2 <= len(question.options) <= 4
            assert set(question.correct) <= set(question.option_ids)

    def test_build_when_curated_bullet_blank_then_still_complete(self):
        resources = ExamResources(
            exam="220-1202",
            blueprint=(DomainBlueprint("2.0", "Security", 1),),
            catalog=StaticObjectiveCatalog({
                "220-1202": {"2.4": ObjectiveMeta("Malware", ("", "Trojan"), "2.0 Security")},
            }),
            pbq_library=PbqLibrary("220-1202"),
        )

        session = _build(resources, session_id="a")

        assert session.question_count == EXAM_QUESTION_COUNT
        assert {q.option_text(q.correct[0]) for q in session.questions} == {"Trojan"}


class TestExamResources:

    def test_resources_when_handlers_omitted_then_curated_registry(self, blueprint, catalog):
        resources = ExamResources(
            exam="220-1201",
            blueprint=blueprint,
            catalog=catalog,
            pbq_library=PbqLibrary("220-1201"),
        )

        assert resources.handlers is CURATED_HANDLERS
        assert ("220-1201", "2.1") in resources.handlers


class TestSelectPbqSlots:

    def test_select_when_wanted_then_distinct_indices(self):
        slots = select_pbq_slots(SessionRng("slots"), 90, 12)

        assert len(slots) == len(set(slots)) == 12
        assert all(0 <= s < 90 for s in slots)

    def test_select_when_wanted_exceeds_slots_then_capped(self):
        slots = select_pbq_slots(SessionRng("slots"), 3, 10)

        assert sorted(slots) == [0, 1, 2]

    def test_select_when_zero_wanted_then_empty(self):
        assert select_pbq_slots(SessionRng("slots"), 90, 0) == []


class TestCreateSession:
    """Tests for create_session and session ids."""

    def test_create_when_now_given_then_id_and_timestamp_from_it(self, resources):
        now = datetime(2026, 10, 1, 12, 0, 0, 250000, tzinfo=timezone.utc)

        session = create_session("220-1201", SessionConfig(pbq_count=3), resources=resources, now=now)

        assert re.fullmatch(r"220-1201-[0-9a-z]+-[0-9a-z]{6}", session.session_id)
        assert session.created_at == "2026-10-01T12:00:00.250Z"
        assert session.pbq_count == 3

    def test_create_when_session_replayed_then_equal(self, resources):
        """A created session can be rebuilt from its id alone."""
        session = create_session("220-1201", SessionConfig(pbq_count=4), resources=resources)

        replay = build_session(
            session.session_id,
            session.exam,
            session.config,
            resources=resources,
            created_at=session.created_at,
        )

        assert replay == session

    def test_create_when_config_omitted_then_no_pbqs(self, resources):
        session = create_session("220-1201", resources=resources)

        assert session.pbq_count == 0
        assert session.config == SessionConfig()

    def test_new_session_id_when_time_given_then_base36_millis(self):
        session_id = new_session_id("220-1202", now_ms=36 ** 3)

        assert session_id.startswith("220-1202-1000-")
        assert len(session_id.rsplit("-", 1)[1]) == 6


class TestBundledVariants:
    """End-to-end builds against the bundled plugins."""

    @pytest.mark.parametrize("exam", ["220-1201", "220-1202"])
    def test_create_when_bundled_variant_then_complete_session(self, exam):
        session = create_session(exam, SessionConfig(pbq_count=5))

        assert session.exam == exam
        assert session.question_count == EXAM_QUESTION_COUNT
        assert session.pbq_count == 5

    def test_load_resources_when_unknown_exam_then_build_error(self):
        with pytest.raises(BuildError, match="220-9999"):
            load_exam_resources("220-9999")
