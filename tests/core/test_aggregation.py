"""
Unit Tests for Result Aggregation

Tests for totals, percentages and invariant checks.
"""

import pytest

from grade_engine.core.aggregation import Aggregate, aggregate, percentage_of
from grade_engine.core.errors import AggregationInvariantViolation
from grade_engine.core.models.marks import QuestionResult
from grade_engine.core.models.questions import Question, QuestionCatalog


class TestPercentageOf:
    """Tests for percentage_of helper."""

    def test_percentage_when_zero_max_then_zero(self):
        assert percentage_of(0, 0) == 0.0

    def test_percentage_when_thirds_then_one_decimal(self):
        assert percentage_of(1, 3) == 33.3
        assert percentage_of(2, 3) == 66.7

    def test_percentage_when_half_tenth_then_rounds_up(self):
        """1/8 = 12.5% exactly; 1/16 = 6.25% rounds to 6.3."""
        assert percentage_of(1, 8) == 12.5
        assert percentage_of(1, 16) == 6.3

    def test_percentage_when_exact_half_tenth_not_representable_then_rounds_up(self):
        """23/80 is exactly 28.75%, which a binary float would round down."""
        assert percentage_of(23, 80) == 28.8
        assert percentage_of(41, 80) == 51.3
        assert percentage_of(51, 80) == 63.8


class TestAggregate:
    """Tests for aggregate()."""

    def test_aggregate_when_no_results_then_zero(self, catalog):
        totals = aggregate(catalog, [])
        assert totals == Aggregate(total_mark=0, percentage=0.0, max_total=20, graded_count=0)

    def test_aggregate_when_one_full_one_ungraded_then_half(self, catalog):
        """Ungraded questions count 0 but stay in the denominator."""
        totals = aggregate(catalog, [QuestionResult("q1", 10, "label", "attempted_fully")])
        assert totals.total_mark == 10
        assert totals.percentage == 50.0
        assert totals.graded_count == 1

    def test_aggregate_when_mixed_sources_then_sums_all(self, catalog):
        totals = aggregate(catalog, [
            QuestionResult("q1", 7, "direct"),
            QuestionResult("q2", 3, "label", "attempted_poorly"),
        ])
        assert totals.total_mark == 10
        assert totals.percentage == 50.0

    def test_aggregate_when_empty_catalog_then_zero_percentage(self):
        totals = aggregate(QuestionCatalog.of("e1", []), [])
        assert totals.percentage == 0.0
        assert totals.max_total == 0

    def test_aggregate_when_zero_mark_catalog_then_zero_percentage(self):
        catalog = QuestionCatalog.of("e1", [Question("q1", "", position=1, max_mark=0)])
        totals = aggregate(catalog, [QuestionResult("q1", 0, "direct")])
        assert totals.percentage == 0.0

    def test_aggregate_when_fractional_marks_then_total_within_max(self):
        catalog = QuestionCatalog.of("e1", [
            Question("a", "", position=1, max_mark=0.1),
            Question("b", "", position=2, max_mark=0.2),
        ])
        totals = aggregate(catalog, [
            QuestionResult("b", 0.2, "direct"),
            QuestionResult("a", 0.1, "direct"),
        ])
        assert totals.total_mark == catalog.max_total
        assert totals.percentage == 100.0

    # ─────────────────────────────────────────────────────────────────────────
    # Invariant Violations
    # ─────────────────────────────────────────────────────────────────────────

    def test_aggregate_when_mark_above_max_then_raises_violation(self, catalog):
        """A mark above its question's maximum is an upstream bug."""
        with pytest.raises(AggregationInvariantViolation, match="outside"):
            aggregate(catalog, [QuestionResult("q1", 15, "direct")])

    def test_aggregate_when_unknown_question_then_raises_violation(self, catalog):
        with pytest.raises(AggregationInvariantViolation, match="unknown question"):
            aggregate(catalog, [QuestionResult("q9", 1, "direct")])

    def test_aggregate_when_question_graded_twice_then_raises_violation(self, catalog):
        with pytest.raises(AggregationInvariantViolation, match="more than once"):
            aggregate(catalog, [
                QuestionResult("q1", 1, "direct"),
                QuestionResult("q1", 2, "direct"),
            ])
