"""
Module: errors

Purpose:
    Exception taxonomy for the grading engine. Every error the engine
    raises derives from GradingError so callers can catch the family
    without catching unrelated exceptions.

Key Classes:
    - UnknownLabelError: Assessment label not in the configured policy
    - OutOfBoundsMark: Internal assertion on a computed mark
    - AggregationInvariantViolation: Totals cannot be reported correctly
    - PersistenceError: Result store failure (load or save)
    - SessionStateError: Operation not valid in the session's state

Used By:
    - core.policy
    - core.models.marks
    - core.aggregation
    - session
    - store
"""

from __future__ import annotations


class GradingError(Exception):
    """Base class for all grading engine errors."""


class UnknownLabelError(GradingError, KeyError):
    """
    Raised when an assessment label is not in the configured set.

    Never replaced by a zero mark.
    """

    def __init__(self, label: str, known: tuple[str, ...] = ()):
        super().__init__(label)
        self.label = label
        self.known = known

    def __str__(self) -> str:
        if self.known:
            return f"Unknown assessment label {self.label!r} (expected one of {list(self.known)})"
        return f"Unknown assessment label {self.label!r}"


class OutOfBoundsMark(GradingError, AssertionError):
    """Computed mark fell outside [0, max_mark]. Indicates an engine bug."""

    def __init__(self, question_id: str, mark: float, max_mark: float):
        super().__init__(
            f"Mark {mark} for question {question_id!r} outside [0, {max_mark}]"
        )
        self.question_id = question_id
        self.mark = mark
        self.max_mark = max_mark


class AggregationInvariantViolation(GradingError):
    """
    Aggregation found inconsistent inputs.

    Fatal: the engine refuses to report a total rather than report a
    wrong one.
    """


class PersistenceError(GradingError):
    """Result store could not load or save a record."""

    def __init__(self, message: str, exam_id: str = "", student_id: str = ""):
        super().__init__(message)
        self.exam_id = exam_id
        self.student_id = student_id


class SessionStateError(GradingError, RuntimeError):
    """Operation is not valid in the session's current state."""
