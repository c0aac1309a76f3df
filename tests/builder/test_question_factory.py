"""
Unit Tests for MCQ Synthesis

Tests for the generic bullet-pool handler, option building, id generation
and curated-handler dispatch.
"""

import pytest

from exam_toolkit.builder.questions import (
    CURATED_HANDLERS,
    FILLER_DISTRACTORS,
    GENERIC_BEST_PRACTICE,
    IdGenerator,
    QuestionContext,
    build_mcq,
    make_multi,
    make_single,
)
from exam_toolkit.common.objectives import StaticObjectiveCatalog
from exam_toolkit.common.rng import SessionRng
from exam_toolkit.core.models import ObjectiveMeta, QuestionType


def _ctx(catalog, exam="220-1201", seed="factory-seed"):
    return QuestionContext(exam=exam, rng=SessionRng(seed), catalog=catalog, ids=IdGenerator(seed))


def _assert_well_formed(question):
    assert question.prompt
    assert 2 <= len(question.options) <= 4
    assert question.correct
    assert set(question.correct) <= set(question.option_ids)
    assert len(set(question.option_ids)) == len(question.options)


class TestIdGenerator:

    def test_ids_when_prefixes_mixed_then_counter_shared(self):
        ids = IdGenerator("220-1201-abc")

        assert ids("q") == "220-1201-abc-q-1"
        assert ids("pbq") == "220-1201-abc-pbq-2"
        assert ids("q") == "220-1201-abc-q-3"
        assert ids.issued == 3


class TestGenericQuestion:
    """Tests for bullet-pool synthesis."""

    def test_build_when_bullets_then_correct_is_a_bullet(self, catalog):
        ctx = _ctx(catalog)

        question = build_mcq(ctx, "1.1")

        _assert_well_formed(question)
        assert question.type is QuestionType.SINGLE
        assert len(question.correct) == 1
        answer = question.option_text(question.correct[0])
        assert answer in question.objective_bullets
        assert question.focus == answer
        assert "Install mobile device hardware." in question.prompt

    def test_build_when_bullets_then_denormalizes_objective(self, catalog):
        question = build_mcq(_ctx(catalog), "3.2")

        assert question.objective == "3.2"
        assert question.domain == "3.0 Hardware"
        assert question.objective_title == "Summarize cable types."
        assert question.objective_bullets == ("RJ-45", "RJ-11", "LC/SC/ST", "USB-C")
        assert question.exam == "220-1201"

    def test_build_when_two_bullets_then_padded_with_fillers(self, catalog):
        """Objective 2.2 has two bullets; fillers bring the options up to four."""
        question = build_mcq(_ctx(catalog), "2.2")

        _assert_well_formed(question)
        texts = [o.text for o in question.options]
        assert len(texts) == 4
        assert set(texts) - {"802.11ac", "WPA3"} <= set(FILLER_DISTRACTORS)

    def test_build_when_objective_unknown_then_generic_best_practice(self, catalog):
        """No metadata: fallback title, derived domain, generic answer."""
        question = build_mcq(_ctx(catalog), "4.2")

        _assert_well_formed(question)
        assert question.objective_title == "Objective 4.2"
        assert question.domain == "4.0"
        assert question.option_text(question.correct[0]) == GENERIC_BEST_PRACTICE
        assert question.focus is None

    def test_build_when_same_seed_then_identical_question(self, catalog):
        a = build_mcq(_ctx(catalog, seed="same"), "1.1")
        b = build_mcq(_ctx(catalog, seed="same"), "1.1")

        assert a == b

    def test_build_when_called_then_uses_session_scoped_id(self, catalog):
        ctx = _ctx(catalog, seed="220-1201-xyz")

        first = build_mcq(ctx, "1.1")
        second = build_mcq(ctx, "3.2")

        assert first.id == "220-1201-xyz-q-1"
        assert second.id == "220-1201-xyz-q-2"


class TestHandlerDispatch:
    """Tests for curated-handler lookup."""

    def test_build_when_curated_key_then_handler_used(self, catalog):
        question = build_mcq(_ctx(catalog), "2.1")

        assert question.prompt.startswith("Which port is associated with")

    def test_build_when_handlers_table_empty_then_generic_used(self, catalog):
        """An explicit empty table disables curated handlers."""
        question = build_mcq(_ctx(catalog), "2.1", handlers={})

        assert question.prompt.startswith("Which option is MOST directly associated with")

    def test_build_when_custom_handler_then_called_with_resolved_objective(self, catalog):
        seen = {}

        def handler(ctx, objective, question_id):
            seen["objective"] = objective
            return make_single(
                ctx, question_id, objective,
                prompt="Custom?",
                correct_text="Yes",
                distractors=["No"],
                explanation="Custom handler.",
            )

        question = build_mcq(_ctx(catalog), "5.5", handlers={("220-1201", "5.5"): handler})

        assert question.prompt == "Custom?"
        assert seen["objective"].title == "Apply the troubleshooting methodology."

    def test_registry_when_imported_then_contains_curated_handlers(self):
        assert ("220-1201", "2.1") in CURATED_HANDLERS
        assert ("220-1202", "4.3") in CURATED_HANDLERS

    def test_registry_when_mutated_then_raises(self):
        """The exported registry is a read-only view."""
        with pytest.raises(TypeError):
            CURATED_HANDLERS[("x", "1.1")] = lambda *a: None


class TestOptionBuilding:
    """Tests for make_single/make_multi."""

    @pytest.fixture
    def objective(self, catalog):
        return _ctx(catalog).resolve("3.2")

    def test_make_single_when_duplicate_distractors_then_deduplicated(self, catalog, objective):
        question = make_single(
            _ctx(catalog), "q-1", objective,
            prompt="Pick one",
            correct_text="A",
            distractors=["B", "B", "A", "", "C"],
            explanation="",
        )

        texts = [o.text for o in question.options]
        assert len(texts) == len(set(texts)) == 4
        assert {"A", "B", "C"} <= set(texts)
        assert question.option_text(question.correct[0]) == "A"

    def test_make_single_when_many_distractors_then_capped_at_four(self, catalog, objective):
        question = make_single(
            _ctx(catalog), "q-1", objective,
            prompt="Pick one",
            correct_text="A",
            distractors=["B", "C", "D", "E", "F"],
            explanation="",
        )

        assert len(question.options) == 4
        assert "A" in [o.text for o in question.options]

    def test_make_single_when_built_then_ids_are_o1_to_o4(self, catalog, objective):
        question = make_single(
            _ctx(catalog), "q-1", objective,
            prompt="Pick one",
            correct_text="A",
            distractors=["B", "C", "D"],
            explanation="",
        )

        assert sorted(question.option_ids) == ["o1", "o2", "o3", "o4"]

    def test_make_multi_when_two_correct_then_both_ids_correct(self, catalog, objective):
        question = make_multi(
            _ctx(catalog), "q-1", objective,
            prompt="Pick two",
            correct_texts=["RAID 5", "RAID 10"],
            distractors=["RAID 0", "RAID 1"],
            explanation="",
        )

        assert question.type is QuestionType.MULTI
        assert sorted(question.option_text(c) for c in question.correct) == ["RAID 10", "RAID 5"]

    def test_make_multi_when_four_correct_then_raises(self, catalog, objective):
        with pytest.raises(ValueError):
            make_multi(
                _ctx(catalog), "q-1", objective,
                prompt="Pick all",
                correct_texts=["A", "B", "C", "D"],
                distractors=[],
                explanation="",
            )


def test_build_when_catalog_empty_then_every_question_well_formed():
    """Every domain falls back to generic synthesis without failing."""
    ctx = _ctx(StaticObjectiveCatalog.empty(), exam="220-1202")

    for oid in ("1.1", "2.1", "3.1", "4.1"):
        _assert_well_formed(build_mcq(ctx, oid, handlers={}))

    assert ctx.ids.issued == 4


def test_build_when_meta_has_empty_title_then_fallback_title():
    catalog = StaticObjectiveCatalog({"220-1201": {"1.2": ObjectiveMeta("", ("Docking station",))}})

    question = build_mcq(_ctx(catalog), "1.2")

    assert question.objective_title == "Objective 1.2"
