"""
Module: questions

Purpose:
    Provides the Question and QuestionCatalog dataclasses. A catalog is
    the ordered, read-only list of questions for one exam. The engine
    never mutates it during a grading session.

Key Functions:
    - QuestionCatalog.max_total: Cached property, sum of question max marks
    - QuestionCatalog.get(question_id): Find a question by id
    - QuestionCatalog.require(question_id): Find or raise KeyError
    - Question.to_dict() / Question.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - functools (std)

Used By:
    - core.models.marks
    - core.aggregation
    - session
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cached_property
from typing import Iterable, Iterator, Optional, Sequence, Union

Number = Union[int, float]


def sum_marks(values: Iterable[Number]) -> Number:
    """Sum marks, exactly rounded and order-independent when any is a float."""
    values = list(values)
    if all(isinstance(v, int) for v in values):
        return sum(values)
    return math.fsum(values)


@dataclass(frozen=True)
class Question:
    """
    Single gradable item (immutable).

    Attributes:
        question_id: Identifier, unique within the exam
        text: Display text
        position: Ordinal position used for stable ordering
        max_mark: Maximum mark, non-negative

    Example:
        >>> q = Question("q1", "Define osmosis", position=1, max_mark=4)
        >>> q.max_mark
        4
    """

    question_id: str
    text: str
    position: int
    max_mark: Number

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if not self.question_id:
            raise ValueError("question_id must be non-empty")
        if self.max_mark < 0:
            raise ValueError(
                f"max_mark cannot be negative: {self.max_mark} ({self.question_id!r})"
            )

    def to_dict(self) -> dict:
        return {
            "question_id": self.question_id,
            "text": self.text,
            "position": self.position,
            "max_mark": self.max_mark,
        }

    @classmethod
    def from_dict(cls, data: dict, *, default_position: int = 0) -> Question:
        return cls(
            question_id=data["question_id"],
            text=data.get("text", ""),
            position=data.get("position", default_position),
            max_mark=data["max_mark"],
        )

    def __repr__(self) -> str:
        return f"Question({self.question_id!r}, max={self.max_mark})"


@dataclass(frozen=True)
class QuestionCatalog:
    """
    Ordered questions for one exam (immutable).

    Questions are held sorted by position; ties keep input order.

    Attributes:
        exam_id: Exam the catalog belongs to
        questions: Questions in position order

    Invariants:
        - question ids are unique
        - max_total is always calculated, never stored
    """

    exam_id: str
    questions: tuple[Question, ...]

    def __post_init__(self) -> None:
        """Validate and normalise ordering on construction."""
        if not self.exam_id:
            raise ValueError("exam_id must be non-empty")

        ordered = tuple(sorted(self.questions, key=lambda q: q.position))
        object.__setattr__(self, "questions", ordered)

        seen: set[str] = set()
        duplicates = []
        for question in ordered:
            if question.question_id in seen:
                duplicates.append(question.question_id)
            seen.add(question.question_id)
        if duplicates:
            raise ValueError(
                f"Duplicate question ids in exam {self.exam_id!r}: {duplicates}"
            )

    @classmethod
    def of(cls, exam_id: str, questions: Sequence[Question]) -> QuestionCatalog:
        return cls(exam_id=exam_id, questions=tuple(questions))

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties (NEVER stored)
    # ─────────────────────────────────────────────────────────────────────────

    @cached_property
    def max_total(self) -> Number:
        """Sum of max marks over the full catalog."""
        return sum_marks(q.max_mark for q in self.questions)

    @cached_property
    def _by_id(self) -> dict[str, Question]:
        return {q.question_id: q for q in self.questions}

    @property
    def question_ids(self) -> tuple[str, ...]:
        return tuple(q.question_id for q in self.questions)

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def get(self, question_id: str) -> Optional[Question]:
        """
        Find a question by id.

        Args:
            question_id: Question identifier

        Returns:
            Matching Question or None
        """
        return self._by_id.get(question_id)

    def require(self, question_id: str) -> Question:
        """
        Find a question by id or raise.

        Raises:
            KeyError: If the question is not in this catalog
        """
        question = self.get(question_id)
        if question is None:
            raise KeyError(
                f"Question {question_id!r} is not in exam {self.exam_id!r}"
            )
        return question

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._by_id

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions)

    def __len__(self) -> int:
        return len(self.questions)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Serialize to dictionary. max_total is NOT stored."""
        return {
            "exam_id": self.exam_id,
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> QuestionCatalog:
        """
        Deserialize from dictionary.

        Questions without a position keep their list order.
        """
        questions = tuple(
            Question.from_dict(item, default_position=index)
            for index, item in enumerate(data.get("questions", []))
        )
        return cls(exam_id=data["exam_id"], questions=questions)

    def __repr__(self) -> str:
        return (
            f"QuestionCatalog({self.exam_id!r}, questions={len(self.questions)}, "
            f"max_total={self.max_total})"
        )
