"""
Module: aggregation

Purpose:
    Pure result aggregation: combine per-question marks into a total and
    a percentage over the full catalog, checking every invariant on the
    way. The one place totals are computed.

Key Functions:
    - aggregate(catalog, results): Total, percentage and max total
    - percentage_of(total, max_total): One-decimal half-up percentage

Dependencies:
    - dataclasses (std)
    - decimal (std)
    - logging (std)

Used By:
    - core.models.results
    - session
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Union

from .errors import AggregationInvariantViolation
from .models.marks import QuestionResult
from .models.questions import QuestionCatalog, sum_marks
from .policy import round_half_up

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class Aggregate:
    """
    Aggregated marks for one student on one exam.

    Attributes:
        total_mark: Sum of awarded marks (ungraded questions count 0)
        percentage: total/max_total*100 to one decimal, 0 when max_total is 0
        max_total: Sum of max marks over the full catalog
        graded_count: Number of questions with a result
    """

    total_mark: Number
    percentage: float
    max_total: Number
    graded_count: int = 0


def percentage_of(total: Number, max_total: Number) -> float:
    """
    Percentage rounded half-up to one decimal place.

    Example:
        >>> percentage_of(1, 3)
        33.3
        >>> percentage_of(23, 80)
        28.8
        >>> percentage_of(5, 0)
        0.0
    """
    if max_total == 0:
        return 0.0
    exact = Decimal(str(total)) / Decimal(str(max_total)) * 100
    return round_half_up(exact, 1)


def aggregate(
    catalog: QuestionCatalog,
    results: Iterable[QuestionResult],
) -> Aggregate:
    """
    Aggregate per-question results against a catalog.

    Args:
        catalog: Full question catalog for the exam
        results: Results present so far (any subset of the catalog)

    Returns:
        Aggregate with total, percentage and max total

    Raises:
        AggregationInvariantViolation: If a result references a question
            outside the catalog, a question is graded twice, any mark lies
            outside its question's bounds, or the total lies outside
            [0, max_total]. No aggregate is reported in that case.
    """
    marks: list[Number] = []
    seen: set[str] = set()

    for result in results:
        question = catalog.get(result.question_id)
        if question is None:
            raise AggregationInvariantViolation(
                f"Result for unknown question {result.question_id!r} "
                f"in exam {catalog.exam_id!r}"
            )
        if result.question_id in seen:
            raise AggregationInvariantViolation(
                f"Question {result.question_id!r} graded more than once"
            )
        if not (0 <= result.awarded_mark <= question.max_mark):
            raise AggregationInvariantViolation(
                f"Mark {result.awarded_mark} for {result.question_id!r} "
                f"outside [0, {question.max_mark}]"
            )
        seen.add(result.question_id)
        marks.append(result.awarded_mark)

    total = sum_marks(marks)

    max_total = catalog.max_total
    if max_total < 0:
        raise AggregationInvariantViolation(
            f"Catalog {catalog.exam_id!r} has negative max total {max_total}"
        )
    if not (0 <= total <= max_total):
        raise AggregationInvariantViolation(
            f"Total {total} outside [0, {max_total}] for exam {catalog.exam_id!r}"
        )

    aggregated = Aggregate(
        total_mark=total,
        percentage=percentage_of(total, max_total),
        max_total=max_total,
        graded_count=len(seen),
    )
    logger.debug(
        f"Aggregated {catalog.exam_id}: {aggregated.total_mark}/{max_total} "
        f"({aggregated.percentage}%), {aggregated.graded_count}/{len(catalog)} graded"
    )
    return aggregated
