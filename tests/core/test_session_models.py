"""
Unit Tests for Session Models

Tests for SessionConfig, ExamSession and ExamResult helpers.
"""

import pytest

from exam_toolkit.core.models import (
    DomainScore,
    ExamResult,
    ExamSession,
    Option,
    Question,
    QuestionType,
    ScoredQuestion,
    SessionConfig,
    clamp_pbq_count,
)


def _question(qid, qtype=QuestionType.SINGLE):
    return Question(
        id=qid, exam="220-1202", domain="4.0 Operational Procedures", objective="4.3",
        objective_title="Backups", objective_bullets=(),
        type=qtype, prompt="Which rule?", correct=("o1",), explanation="",
        options=(Option("o1", "3-2-1 rule"), Option("o2", "RAID 0")),
    )


class TestSessionConfig:

    @pytest.mark.parametrize("requested,effective", [(-1, 0), (0, 0), (7, 7), (12, 12), (13, 12), (99, 12)])
    def test_effective_when_requested_then_clamped(self, requested, effective):
        config = SessionConfig(pbq_count=requested)

        assert config.effective_pbq_count == effective
        assert config.pbq_count == requested

    def test_clamp_when_called_then_bounds_zero_to_twelve(self):
        assert clamp_pbq_count(-4) == 0
        assert clamp_pbq_count(40) == 12

    def test_from_dict_when_keys_missing_then_defaults(self):
        assert SessionConfig.from_dict({}) == SessionConfig()


class TestExamSession:

    @pytest.fixture
    def session(self):
        return ExamSession(
            session_id="220-1202-abc-def",
            exam="220-1202",
            created_at="2026-10-01T00:00:00.000Z",
            duration_seconds=5400,
            config=SessionConfig(pbq_count=1, show_objective_hints=True),
            questions=(_question("a"), _question("b", QuestionType.MULTI)),
        )

    def test_counts_when_no_pbqs_then_zero(self, session):
        assert session.question_count == 2
        assert session.pbq_count == 0
        assert session.type_counts() == {QuestionType.SINGLE: 1, QuestionType.MULTI: 1}

    def test_get_question_when_id_known_then_returned(self, session):
        assert session.get_question("b").type is QuestionType.MULTI
        assert session.get_question("zzz") is None

    def test_from_dict_when_round_tripped_then_equal(self, session):
        assert ExamSession.from_dict(session.to_dict()) == session


class TestExamResult:

    def test_correctness_when_scored_then_maps_ids(self):
        result = ExamResult(
            percent=50.0,
            correct_count=1,
            total=2,
            by_domain=(DomainScore("4.0 Operational Procedures", 1, 2),),
            scored=(ScoredQuestion("a", True), ScoredQuestion("b", False)),
        )

        assert result.correctness == {"a": True, "b": False}
        assert ExamResult.from_dict(result.to_dict()) == result
