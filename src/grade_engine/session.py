"""
Module: session

Purpose:
    GradingSession - the draft/saved lifecycle for grading one student at
    a time against a fixed question catalog. Every edit goes through one
    commit path that re-aggregates, so totals can never go stale.

Key Classes:
    - SessionState: UNLOADED → DRAFT ⇄ SAVED, CLOSED on close()
    - GradingSession: open / edit / save / close

Lifecycle:
    open(student) loads any stored record and seeds the draft by question
    id. Edits build a new ExamResult; if aggregation rejects it the
    previous draft stays in place. save() sends the full result to the
    store and only promotes the state to SAVED once the store confirms.

Dependencies:
    - core (models, policy, aggregation)
    - store.ResultStore

Used By:
    - Whatever transport hosts the grading UI
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional, Union

from .core.errors import PersistenceError, SessionStateError
from .core.models.marks import QuestionResult
from .core.models.questions import QuestionCatalog
from .core.models.results import ExamResult
from .core.policy import AssessmentPolicy
from .store.base import ResultStore, SaveConfirmation

logger = logging.getLogger(__name__)

Number = Union[int, float]


class SessionState(Enum):
    """Lifecycle state of a grading session."""

    UNLOADED = "unloaded"
    DRAFT = "draft"
    SAVED = "saved"
    CLOSED = "closed"


class GradingSession:
    """
    Grading session for one exam catalog.

    The session owns its draft; nothing is shared between sessions. The
    catalog and policy are fixed for the session's lifetime.

    Args:
        catalog: Questions of the exam being graded
        policy: Label → fraction table used for label grading
        store: Where results are loaded from and saved to

    Example:
        >>> session = GradingSession(catalog, policy, store)
        >>> await session.open("student-7")
        >>> session.grade_with_label("q1", "well_written")
        >>> session.set_direct_mark("q2", 7)
        >>> await session.save()
    """

    def __init__(
        self,
        catalog: QuestionCatalog,
        policy: AssessmentPolicy,
        store: ResultStore,
    ) -> None:
        self.catalog = catalog
        self.policy = policy
        self.store = store
        self._state = SessionState.UNLOADED
        self._result: Optional[ExamResult] = None
        self._baseline: Optional[ExamResult] = None

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def exam_id(self) -> str:
        return self.catalog.exam_id

    @property
    def student_id(self) -> Optional[str]:
        return self._result.student_id if self._result else None

    @property
    def result(self) -> ExamResult:
        """Current draft (or saved) result."""
        return self._require_open()

    @property
    def baseline(self) -> Optional[ExamResult]:
        """Last result loaded from or confirmed by the store, if any."""
        return self._baseline

    @property
    def total_mark(self) -> Number:
        return self.result.total_mark

    @property
    def percentage(self) -> float:
        return self.result.percentage

    def question_result(self, question_id: str) -> Optional[QuestionResult]:
        """
        Result for one question, or None while it is ungraded.

        Raises:
            KeyError: If the question is not in the catalog
        """
        self.catalog.require(question_id)
        return self.result.get(question_id)

    def _require_open(self) -> ExamResult:
        if self._state is SessionState.CLOSED:
            raise SessionStateError("Grading session is closed")
        if self._result is None:
            raise SessionStateError("No student loaded; call open() first")
        return self._result

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    async def open(self, student_id: str) -> ExamResult:
        """
        Load a student's result into a fresh draft.

        Any unsaved draft for the previous student is discarded. If the
        load fails the previous draft is kept.

        Returns:
            The seeded draft

        Raises:
            PersistenceError: If the store cannot load the record
            UnknownLabelError: If the stored record uses a label the
                current policy does not know
            SessionStateError: If the session is closed
        """
        if self._state is SessionState.CLOSED:
            raise SessionStateError("Grading session is closed")
        if not student_id:
            raise ValueError("student_id must be non-empty")

        stored = await self.store.load(self.exam_id, student_id)

        if stored is None:
            draft = ExamResult.empty(self.catalog, student_id)
            logger.info(f"Opened {self.exam_id}/{student_id}: no stored result")
        else:
            draft = self._seed(student_id, stored)
            logger.info(
                f"Opened {self.exam_id}/{student_id}: "
                f"{len(draft.question_results)} graded, {draft.total_mark}/{draft.max_total}"
            )

        if self._state is SessionState.DRAFT and self._result is not None:
            logger.debug(f"Discarding unsaved draft for {self._result.student_id}")

        self._result = draft
        self._baseline = stored
        self._state = SessionState.DRAFT
        return draft

    def close(self) -> None:
        """End the session, discarding any unsaved draft."""
        self._result = None
        self._baseline = None
        self._state = SessionState.CLOSED

    async def save(self) -> SaveConfirmation:
        """
        Send the full current result to the store.

        Saving an unchanged result is not suppressed; the store simply
        receives the same record again.

        Returns:
            The store's confirmation

        Raises:
            PersistenceError: Propagated from the store; the session
                stays in DRAFT with all marks intact
            SessionStateError: If no student is loaded
        """
        snapshot = self._require_open()
        confirmation = await self.store.save(
            snapshot.exam_id, snapshot.student_id, snapshot
        )

        self._baseline = snapshot
        # Edits made while the save was in flight keep the session in DRAFT.
        if self._result is snapshot:
            self._state = SessionState.SAVED
        logger.info(
            f"Saved {snapshot.exam_id}/{snapshot.student_id}: "
            f"{snapshot.total_mark}/{snapshot.max_total} ({snapshot.percentage}%)"
        )
        return confirmation

    # ─────────────────────────────────────────────────────────────────────────
    # Edits
    # ─────────────────────────────────────────────────────────────────────────

    def grade_with_label(self, question_id: str, label: str) -> QuestionResult:
        """
        Grade a question with an assessment label.

        Replaces any direct mark previously entered for the question.

        Raises:
            UnknownLabelError: If label is not in the policy
            KeyError: If the question is not in the catalog
        """
        current = self._require_open()
        question = self.catalog.require(question_id)
        result = QuestionResult.from_label(question, label, self.policy)
        self._commit(current, self._with(current, result), current.remark)
        return result

    def set_direct_mark(self, question_id: str, requested: Number) -> Number:
        """
        Enter a mark directly, clamped to [0, max_mark].

        Clears any assessment label previously chosen for the question.

        Returns:
            The validated (clamped) mark

        Raises:
            KeyError: If the question is not in the catalog
        """
        current = self._require_open()
        question = self.catalog.require(question_id)
        result = QuestionResult.direct(question, requested)
        self._commit(current, self._with(current, result), current.remark)
        return result.awarded_mark

    def clear_question(self, question_id: str) -> None:
        """Return a question to ungraded."""
        current = self._require_open()
        self.catalog.require(question_id)
        results = self._as_map(current)
        if results.pop(question_id, None) is None:
            return
        self._commit(current, results, current.remark)

    def set_remark(self, remark: Optional[str]) -> None:
        current = self._require_open()
        self._commit(current, self._as_map(current), remark or None)

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _as_map(result: ExamResult) -> Dict[str, QuestionResult]:
        return {r.question_id: r for r in result.question_results}

    def _with(self, current: ExamResult, result: QuestionResult) -> Dict[str, QuestionResult]:
        results = self._as_map(current)
        results[result.question_id] = result
        return results

    def _commit(
        self,
        current: ExamResult,
        results: Dict[str, QuestionResult],
        remark: Optional[str],
    ) -> None:
        """Re-aggregate and swap in the new draft; on error keep the old one."""
        updated = ExamResult.build(
            self.catalog, current.student_id, results.values(), remark=remark
        )
        self._result = updated
        self._state = SessionState.DRAFT
        logger.debug(
            f"Recomputed {updated.exam_id}/{updated.student_id}: "
            f"{updated.total_mark}/{updated.max_total} ({updated.percentage}%)"
        )

    def _seed(self, student_id: str, stored: ExamResult) -> ExamResult:
        """
        Rebuild a stored record against the current catalog and policy.

        Results for questions no longer in the catalog are dropped, label
        marks are re-derived and direct marks re-clamped.
        """
        if stored.exam_id != self.exam_id or stored.student_id != student_id:
            raise PersistenceError(
                f"Store returned ({stored.exam_id!r}, {stored.student_id!r}) "
                f"for ({self.exam_id!r}, {student_id!r})",
                exam_id=self.exam_id,
                student_id=student_id,
            )

        seeded = []
        for previous in stored.question_results:
            question = self.catalog.get(previous.question_id)
            if question is None:
                logger.warning(
                    f"Dropping stored result for {previous.question_id!r}: "
                    f"not in exam {self.exam_id!r}"
                )
                continue
            if previous.source == "label":
                current = QuestionResult.from_label(question, previous.label, self.policy)
            else:
                current = QuestionResult.direct(question, previous.awarded_mark)
            if current.awarded_mark != previous.awarded_mark:
                logger.warning(
                    f"Stored mark for {previous.question_id!r} changed on load: "
                    f"{previous.awarded_mark} -> {current.awarded_mark}"
                )
            seeded.append(current)

        draft = ExamResult.build(self.catalog, student_id, seeded, remark=stored.remark)
        if (draft.total_mark, draft.percentage) != (stored.total_mark, stored.percentage):
            logger.warning(
                f"Stored totals for {self.exam_id}/{student_id} were "
                f"{stored.total_mark} ({stored.percentage}%), recomputed "
                f"{draft.total_mark} ({draft.percentage}%)"
            )
        return draft
