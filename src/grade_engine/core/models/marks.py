"""
Module: marks

Purpose:
    Provides the QuestionResult dataclass - the per-question outcome for
    one student - and the direct-mark clamp. A result is a tagged union:
    either derived from an assessment label or entered directly.

Key Functions:
    - QuestionResult.from_label(question, label, policy): Label-derived mark
    - QuestionResult.direct(question, requested): Clamped direct mark
    - clamp_direct_mark(question, requested): Bounds rule for typed marks
    - check_bounds(result, question): Internal assertion on a mark

Dependencies:
    - dataclasses (std)
    - typing (std)

Used By:
    - core.aggregation
    - core.models.results
    - session
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Optional, Union

from ..errors import OutOfBoundsMark
from .questions import Question

if TYPE_CHECKING:
    from ..policy import AssessmentPolicy

Number = Union[int, float]
MarkSource = Literal["label", "direct"]


def clamp_direct_mark(question: Question, requested: Number) -> Number:
    """
    Clamp a typed mark into [0, question.max_mark].

    Out-of-range entries are clamped, not rejected.

    Example:
        >>> q = Question("q1", "", 1, max_mark=10)
        >>> clamp_direct_mark(q, -5), clamp_direct_mark(q, 110), clamp_direct_mark(q, 7)
        (0, 10, 7)
    """
    if requested < 0:
        return 0
    if requested > question.max_mark:
        return question.max_mark
    return requested


@dataclass(frozen=True)
class QuestionResult:
    """
    Outcome for one question (immutable).

    Attributes:
        question_id: Question this result refers to
        awarded_mark: Mark awarded, never negative
        source: How the mark was determined
            - "label": Derived from an assessment label via the policy
            - "direct": Typed in by the grader
        label: Assessment label, present only when source == "label"

    Invariants:
        - awarded_mark >= 0
        - label is set iff source == "label"
        - upper bound is checked against the question (check_bounds)
    """

    question_id: str
    awarded_mark: Number
    source: MarkSource
    label: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate result on construction."""
        if self.source not in ("label", "direct"):
            raise ValueError(f"Invalid mark source: {self.source}")
        if self.source == "label" and not self.label:
            raise ValueError(f"Label result for {self.question_id!r} has no label")
        if self.source == "direct" and self.label is not None:
            raise ValueError(f"Direct result for {self.question_id!r} carries a label")
        if self.awarded_mark < 0:
            raise ValueError(f"Marks cannot be negative: {self.awarded_mark} ({self.question_id!r})")

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_label(
        cls,
        question: Question,
        label: str,
        policy: AssessmentPolicy,
    ) -> QuestionResult:
        """
        Derive a result from an assessment label.

        Raises:
            UnknownLabelError: If label is not in the policy
        """
        mark = policy.awarded_mark(label, question.max_mark)
        result = cls(
            question_id=question.question_id,
            awarded_mark=mark,
            source="label",
            label=label,
        )
        check_bounds(result, question)
        return result

    @classmethod
    def direct(cls, question: Question, requested: Number) -> QuestionResult:
        """Create a direct-entry result with the mark clamped to bounds."""
        result = cls(
            question_id=question.question_id,
            awarded_mark=clamp_direct_mark(question, requested),
            source="direct",
        )
        check_bounds(result, question)
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        d = {
            "question_id": self.question_id,
            "awarded_mark": self.awarded_mark,
            "source": self.source,
        }
        if self.label is not None:
            d["label"] = self.label
        return d

    @classmethod
    def from_dict(cls, data: dict) -> QuestionResult:
        return cls(
            question_id=data["question_id"],
            awarded_mark=data["awarded_mark"],
            source=data["source"],
            label=data.get("label"),
        )

    def __repr__(self) -> str:
        if self.source == "label":
            return f"QuestionResult({self.question_id!r}, {self.awarded_mark}, label={self.label!r})"
        return f"QuestionResult({self.question_id!r}, {self.awarded_mark}, direct)"


def check_bounds(result: QuestionResult, question: Question) -> None:
    """
    Assert a result's mark lies within its question's bounds.

    Raises:
        OutOfBoundsMark: If 0 <= awarded_mark <= max_mark does not hold
    """
    if not (0 <= result.awarded_mark <= question.max_mark):
        raise OutOfBoundsMark(question.question_id, result.awarded_mark, question.max_mark)
