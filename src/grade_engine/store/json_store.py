"""
Module: store.json_store

Purpose:
    ResultStore backed by one JSON file per (exam, student) record under a
    results directory. Blocking file I/O runs in the default executor so
    the store's coroutines never block the event loop.

Layout:
    <results_dir>/<exam_id>/<student_id>.json

Dependencies:
    - portalocker (via store.file_locking)

Used By:
    - config.GradingConfig.create_store
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from ..core.errors import PersistenceError
from ..core.models.results import ExamResult
from ..core.schemas.validator import ValidationError
from ..core.utils.serialization import deserialize_exam_result, serialize_exam_result
from .base import ResultStore, SaveConfirmation
from .file_locking import locked_read_json, locked_update_json

logger = logging.getLogger(__name__)

REVISION_KEY = "_revision"


def _safe_name(identifier: str) -> str:
    # Dots are encoded too so "." and ".." can never name a directory.
    return quote(identifier, safe="").replace(".", "%2E")


class JsonFileResultStore(ResultStore):
    """
    File-per-record result store.

    Args:
        results_dir: Root directory for result files (created on demand)
        strict: Validate loaded records against the full JSON Schema
    """

    def __init__(self, results_dir: Path, *, strict: bool = False) -> None:
        self.results_dir = Path(results_dir)
        self.strict = strict

    def path_for(self, exam_id: str, student_id: str) -> Path:
        return self.results_dir / _safe_name(exam_id) / f"{_safe_name(student_id)}.json"

    async def load(self, exam_id: str, student_id: str) -> Optional[ExamResult]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._load_sync, exam_id, student_id)

    async def save(
        self,
        exam_id: str,
        student_id: str,
        result: ExamResult,
    ) -> SaveConfirmation:
        self.check_identity(exam_id, student_id, result)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._save_sync, exam_id, student_id, result)

    # ─────────────────────────────────────────────────────────────────────────
    # Blocking implementations
    # ─────────────────────────────────────────────────────────────────────────

    def _load_sync(self, exam_id: str, student_id: str) -> Optional[ExamResult]:
        path = self.path_for(exam_id, student_id)
        try:
            data = locked_read_json(path)
        except json.JSONDecodeError as e:
            raise PersistenceError(
                f"Result file is corrupted: {path}: {e}",
                exam_id=exam_id,
                student_id=student_id,
            ) from e
        except OSError as e:
            raise PersistenceError(
                f"Failed to read result file {path}: {e}",
                exam_id=exam_id,
                student_id=student_id,
            ) from e

        if data is None:
            logger.debug(f"No stored result for {exam_id}/{student_id}")
            return None
        if not isinstance(data, dict):
            raise PersistenceError(
                f"Stored result {path} is not a JSON object",
                exam_id=exam_id,
                student_id=student_id,
            )

        data.pop(REVISION_KEY, None)
        try:
            return deserialize_exam_result(data, strict=self.strict)
        except ValidationError as e:
            raise PersistenceError(
                f"Stored result {path} is invalid at {e.path or '<root>'}: {e}",
                exam_id=exam_id,
                student_id=student_id,
            ) from e

    def _save_sync(
        self,
        exam_id: str,
        student_id: str,
        result: ExamResult,
    ) -> SaveConfirmation:
        path = self.path_for(exam_id, student_id)
        record = serialize_exam_result(result)

        def next_record(current):
            record[REVISION_KEY] = self._current_revision(path, current) + 1
            return record

        try:
            revision = locked_update_json(path, next_record)[REVISION_KEY]
        except OSError as e:
            raise PersistenceError(
                f"Failed to write result file {path}: {e}",
                exam_id=exam_id,
                student_id=student_id,
            ) from e

        logger.info(f"Saved result {exam_id}/{student_id} (revision {revision})")
        return SaveConfirmation(
            exam_id=exam_id,
            student_id=student_id,
            revision=revision,
            saved_at=datetime.now(timezone.utc),
        )

    @staticmethod
    def _current_revision(path: Path, data) -> int:
        """Revision of the existing record; unreadable records count as 0."""
        if data is None:
            return 0
        if not isinstance(data, dict):
            logger.warning(f"Overwriting unreadable result file {path}: not a JSON object")
            return 0
        revision = data.get(REVISION_KEY, 0)
        return revision if isinstance(revision, int) else 0
