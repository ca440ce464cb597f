"""
Module: store.base

Purpose:
    The ResultStore interface consumed by grading sessions. Both
    operations are asynchronous; a store never merges question results,
    it replaces the whole record.

Key Classes:
    - ResultStore: Abstract load/save interface
    - SaveConfirmation: What a successful save returns

Used By:
    - session.GradingSession
    - store.memory, store.json_store
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.errors import PersistenceError
from ..core.models.results import ExamResult


@dataclass(frozen=True)
class SaveConfirmation:
    """
    Acknowledgement of a full-replace save.

    Attributes:
        exam_id: Exam the record belongs to
        student_id: Student the record belongs to
        revision: Number of saves of this record, starting at 1
        saved_at: When the store accepted the record (UTC)
    """

    exam_id: str
    student_id: str
    revision: int
    saved_at: datetime


class ResultStore(ABC):
    """
    Persistence boundary for exam results.

    load() returns None when no record exists; that is the signal to
    start a fresh draft, not an error. Failures raise PersistenceError.
    Concurrent saves of the same record are last-write-wins.
    """

    @abstractmethod
    async def load(self, exam_id: str, student_id: str) -> Optional[ExamResult]:
        """
        Load the stored result for (exam, student).

        Returns:
            ExamResult, or None if nothing is stored

        Raises:
            PersistenceError: If the store cannot be read
        """

    @abstractmethod
    async def save(
        self,
        exam_id: str,
        student_id: str,
        result: ExamResult,
    ) -> SaveConfirmation:
        """
        Replace the stored result for (exam, student) with result.

        Raises:
            PersistenceError: If the record cannot be written
        """

    @staticmethod
    def check_identity(exam_id: str, student_id: str, result: ExamResult) -> None:
        """Refuse to file a result under another exam or student."""
        if (result.exam_id, result.student_id) != (exam_id, student_id):
            raise PersistenceError(
                f"Result for ({result.exam_id!r}, {result.student_id!r}) "
                f"cannot be saved as ({exam_id!r}, {student_id!r})",
                exam_id=exam_id,
                student_id=student_id,
            )
