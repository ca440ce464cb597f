"""
Module: store.memory

Purpose:
    In-process ResultStore. Records are held in serialized form, so a
    loaded result never shares state with the one that was saved.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from ..core.models.results import ExamResult
from ..core.utils.serialization import deserialize_exam_result, serialize_exam_result
from .base import ResultStore, SaveConfirmation

logger = logging.getLogger(__name__)


class InMemoryResultStore(ResultStore):
    """Dictionary-backed store keyed by (exam_id, student_id)."""

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self._revisions: Dict[Tuple[str, str], int] = {}

    async def load(self, exam_id: str, student_id: str) -> Optional[ExamResult]:
        data = self._records.get((exam_id, student_id))
        if data is None:
            return None
        return deserialize_exam_result(data)

    async def save(
        self,
        exam_id: str,
        student_id: str,
        result: ExamResult,
    ) -> SaveConfirmation:
        self.check_identity(exam_id, student_id, result)
        key = (exam_id, student_id)
        self._records[key] = serialize_exam_result(result)
        self._revisions[key] = self._revisions.get(key, 0) + 1
        logger.debug(f"Stored {exam_id}/{student_id} revision {self._revisions[key]}")
        return SaveConfirmation(
            exam_id=exam_id,
            student_id=student_id,
            revision=self._revisions[key],
            saved_at=datetime.now(timezone.utc),
        )

    def raw(self, exam_id: str, student_id: str) -> Optional[Dict[str, Any]]:
        """Stored payload for (exam, student), for inspection."""
        return self._records.get((exam_id, student_id))

    def __len__(self) -> int:
        return len(self._records)
