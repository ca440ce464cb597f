"""
Module: results

Purpose:
    Provides the ExamResult dataclass - the complete graded outcome for
    one (exam, student) pair. This is both what a result store returns
    on load and what it receives on save.

Key Functions:
    - ExamResult.build(catalog, student_id, results, remark): Aggregate and build
    - ExamResult.empty(catalog, student_id): Ungraded result
    - ExamResult.answer_status: Derived not/partially/fully answered
    - ExamResult.to_dict() / ExamResult.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - .marks.QuestionResult
    - core.aggregation (imported lazily)

Used By:
    - session
    - store
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Literal, Optional, Union

from .marks import QuestionResult

if TYPE_CHECKING:
    from .questions import QuestionCatalog

Number = Union[int, float]
AnswerStatus = Literal["not_answered", "partially_answered", "fully_answered"]


@dataclass(frozen=True)
class ExamResult:
    """
    Graded outcome for one student on one exam (immutable).

    Attributes:
        exam_id: Exam identifier
        student_id: Student identifier
        question_results: Results in catalog order, ungraded questions absent
        total_mark: Sum of awarded marks
        percentage: Percentage of the catalog maximum, one decimal
        max_total: Catalog maximum the percentage was computed against
        remark: Optional free-text remark

    Invariants:
        - built through build() so total and percentage come from the
          aggregator; from_dict() trusts the stored values
        - at most one result per question
    """

    exam_id: str
    student_id: str
    question_results: tuple[QuestionResult, ...] = ()
    total_mark: Number = 0
    percentage: float = 0.0
    max_total: Number = 0
    remark: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate result on construction."""
        if not self.exam_id:
            raise ValueError("exam_id must be non-empty")
        if not self.student_id:
            raise ValueError("student_id must be non-empty")
        ids = [r.question_id for r in self.question_results]
        if len(ids) != len(set(ids)):
            raise ValueError(
                f"Duplicate question results for student {self.student_id!r}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def build(
        cls,
        catalog: QuestionCatalog,
        student_id: str,
        results: Iterable[QuestionResult] = (),
        remark: Optional[str] = None,
    ) -> ExamResult:
        """
        Aggregate results against the catalog and build the record.

        Results are reordered to catalog order.

        Raises:
            AggregationInvariantViolation: If the results are inconsistent
                with the catalog
        """
        from ..aggregation import aggregate

        results = tuple(results)
        totals = aggregate(catalog, results)
        order = {qid: index for index, qid in enumerate(catalog.question_ids)}
        ordered = tuple(sorted(results, key=lambda r: order[r.question_id]))
        return cls(
            exam_id=catalog.exam_id,
            student_id=student_id,
            question_results=ordered,
            total_mark=totals.total_mark,
            percentage=totals.percentage,
            max_total=totals.max_total,
            remark=remark,
        )

    @classmethod
    def empty(cls, catalog: QuestionCatalog, student_id: str) -> ExamResult:
        """Result with no graded questions."""
        return cls.build(catalog, student_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties (NEVER stored)
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def answer_status(self) -> AnswerStatus:
        """
        How much of the exam was answered.

        Returns:
            "not_answered" when nothing scored, "fully_answered" when the
            total reaches a positive maximum, else "partially_answered"
        """
        if not self.question_results or self.total_mark == 0:
            return "not_answered"
        if self.max_total > 0 and self.total_mark >= self.max_total:
            return "fully_answered"
        return "partially_answered"

    @property
    def graded_question_ids(self) -> tuple[str, ...]:
        return tuple(r.question_id for r in self.question_results)

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def get(self, question_id: str) -> Optional[QuestionResult]:
        """
        Find the result for a question.

        Returns:
            Matching QuestionResult or None when ungraded
        """
        for result in self.question_results:
            if result.question_id == question_id:
                return result
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to dictionary.

        answer_status is written for consumers that only read the summary;
        it is ignored on load and recalculated.
        """
        d = {
            "exam_id": self.exam_id,
            "student_id": self.student_id,
            "question_results": [r.to_dict() for r in self.question_results],
            "total_mark": self.total_mark,
            "percentage": self.percentage,
            "max_total": self.max_total,
            "answer_status": self.answer_status,
        }
        if self.remark is not None:
            d["remark"] = self.remark
        return d

    @classmethod
    def from_dict(cls, data: dict) -> ExamResult:
        return cls(
            exam_id=data["exam_id"],
            student_id=data["student_id"],
            question_results=tuple(
                QuestionResult.from_dict(item)
                for item in data.get("question_results", [])
            ),
            total_mark=data.get("total_mark", 0),
            percentage=data.get("percentage", 0.0),
            max_total=data.get("max_total", 0),
            remark=data.get("remark"),
        )

    def __repr__(self) -> str:
        return (
            f"ExamResult({self.exam_id!r}, student={self.student_id!r}, "
            f"marks={self.total_mark}/{self.max_total}, {self.percentage}%)"
        )
