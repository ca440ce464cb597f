"""
Unit Tests for QuestionResult and Direct-Mark Clamping

Tests for the label/direct tagged union and bounds handling.
"""

import pytest

from grade_engine.core.errors import OutOfBoundsMark, UnknownLabelError
from grade_engine.core.models.marks import QuestionResult, check_bounds, clamp_direct_mark
from grade_engine.core.models.questions import Question


@pytest.fixture
def question() -> Question:
    return Question("q1", "Explain photosynthesis", position=1, max_mark=10)


class TestClampDirectMark:
    """Tests for clamp_direct_mark."""

    def test_clamp_when_negative_then_zero(self, question):
        assert clamp_direct_mark(question, -5) == 0

    def test_clamp_when_above_max_then_max(self, question):
        assert clamp_direct_mark(question, question.max_mark + 100) == question.max_mark

    def test_clamp_when_within_bounds_then_unchanged(self, question):
        assert clamp_direct_mark(question, 7) == 7
        assert clamp_direct_mark(question, 7.5) == 7.5

    def test_clamp_when_on_bounds_then_unchanged(self, question):
        assert clamp_direct_mark(question, 0) == 0
        assert clamp_direct_mark(question, 10) == 10


class TestQuestionResult:
    """Tests for QuestionResult dataclass."""

    # ─────────────────────────────────────────────────────────────────────────
    # Constructor Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_label_source_without_label_then_raises_error(self):
        with pytest.raises(ValueError, match="has no label"):
            QuestionResult("q1", 3, "label")

    def test_init_when_direct_source_with_label_then_raises_error(self):
        with pytest.raises(ValueError, match="carries a label"):
            QuestionResult("q1", 3, "direct", label="attempted_poorly")

    def test_init_when_invalid_source_then_raises_error(self):
        with pytest.raises(ValueError, match="Invalid mark source"):
            QuestionResult("q1", 3, "guess")  # type: ignore[arg-type]

    def test_init_when_negative_mark_then_raises_error(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            QuestionResult("q1", -1, "direct")

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Method Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_from_label_when_known_label_then_derives_mark(self, question, policy):
        result = QuestionResult.from_label(question, "attempted_poorly", policy)
        assert result.awarded_mark == 3
        assert result.source == "label"
        assert result.label == "attempted_poorly"

    def test_from_label_when_unknown_label_then_raises_error(self, question, policy):
        with pytest.raises(UnknownLabelError):
            QuestionResult.from_label(question, "excellent", policy)

    def test_direct_when_above_max_then_clamped(self, question):
        result = QuestionResult.direct(question, 42)
        assert result.awarded_mark == 10
        assert result.source == "direct"
        assert result.label is None

    def test_direct_when_equal_to_label_mark_then_source_stays_direct(self, question):
        """A direct 3 is still a direct mark, not a 'poorly' label."""
        result = QuestionResult.direct(question, 3)
        assert result.source == "direct"

    # ─────────────────────────────────────────────────────────────────────────
    # Bounds and Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def test_check_bounds_when_above_max_then_raises_out_of_bounds(self, question):
        with pytest.raises(OutOfBoundsMark) as excinfo:
            check_bounds(QuestionResult("q1", 11, "direct"), question)
        assert isinstance(excinfo.value, AssertionError)
        assert excinfo.value.max_mark == 10

    def test_to_dict_when_direct_then_omits_label(self):
        d = QuestionResult("q1", 7, "direct").to_dict()
        assert d == {"question_id": "q1", "awarded_mark": 7, "source": "direct"}

    def test_from_dict_when_label_then_restores_label(self):
        data = {"question_id": "q1", "awarded_mark": 3, "source": "label", "label": "attempted_poorly"}
        assert QuestionResult.from_dict(data) == QuestionResult("q1", 3, "label", "attempted_poorly")

    def test_repr_when_label_then_shows_label(self):
        assert "attempted_poorly" in repr(QuestionResult("q1", 3, "label", "attempted_poorly"))
