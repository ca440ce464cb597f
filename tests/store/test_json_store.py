"""
Unit Tests for JsonFileResultStore

Tests for on-disk layout, revisions and error wrapping.
"""

import asyncio
import json

import pytest

from grade_engine.core.errors import PersistenceError
from grade_engine.core.models.marks import QuestionResult
from grade_engine.core.models.results import ExamResult
from grade_engine.store.json_store import REVISION_KEY, JsonFileResultStore


@pytest.fixture
def json_store(tmp_path) -> JsonFileResultStore:
    return JsonFileResultStore(tmp_path / "results", strict=True)


@pytest.fixture
def sample_result(catalog) -> ExamResult:
    return ExamResult.build(catalog, "s1", [
        QuestionResult("q1", 7, "direct"),
        QuestionResult("q2", 3, "label", "attempted_poorly"),
    ], remark="Show working")


class TestJsonFileResultStore:
    """Tests for the JSON file store."""

    # ─────────────────────────────────────────────────────────────────────────
    # Layout
    # ─────────────────────────────────────────────────────────────────────────

    def test_path_for_when_plain_ids_then_exam_dir_and_student_file(self, json_store, tmp_path):
        assert json_store.path_for("exam-1", "s_1") == tmp_path / "results" / "exam-1" / "s_1.json"

    def test_path_for_when_ids_contain_separators_then_stays_inside_root(self, json_store, tmp_path):
        path = json_store.path_for("../etc", "a/b")
        assert path.parent.parent == tmp_path / "results"
        assert "/" not in path.name

    # ─────────────────────────────────────────────────────────────────────────
    # Load / Save
    # ─────────────────────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_load_when_no_file_then_returns_none(self, json_store):
        assert await json_store.load("exam-midterm", "s1") is None

    @pytest.mark.asyncio
    async def test_save_when_loaded_back_then_equal(self, json_store, sample_result):
        await json_store.save("exam-midterm", "s1", sample_result)
        loaded = await json_store.load("exam-midterm", "s1")
        assert loaded == sample_result

    @pytest.mark.asyncio
    async def test_save_when_repeated_then_revision_increments(self, json_store, sample_result):
        first = await json_store.save("exam-midterm", "s1", sample_result)
        second = await json_store.save("exam-midterm", "s1", sample_result)
        assert (first.revision, second.revision) == (1, 2)

        data = json.loads(json_store.path_for("exam-midterm", "s1").read_text(encoding="utf-8"))
        assert data[REVISION_KEY] == 2
        assert data["answer_status"] == "partially_answered"

    @pytest.mark.asyncio
    async def test_save_when_replacing_then_old_results_gone(self, json_store, catalog, sample_result):
        await json_store.save("exam-midterm", "s1", sample_result)
        await json_store.save("exam-midterm", "s1", ExamResult.empty(catalog, "s1"))
        loaded = await json_store.load("exam-midterm", "s1")
        assert loaded.question_results == ()
        assert loaded.remark is None

    @pytest.mark.asyncio
    async def test_save_when_identity_mismatch_then_raises_persistence_error(self, json_store, sample_result):
        with pytest.raises(PersistenceError):
            await json_store.save("exam-midterm", "someone-else", sample_result)

    # ─────────────────────────────────────────────────────────────────────────
    # Error Wrapping
    # ─────────────────────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_load_when_file_corrupted_then_raises_persistence_error(self, json_store):
        path = json_store.path_for("exam-midterm", "s1")
        path.parent.mkdir(parents=True)
        path.write_text("{truncated", encoding="utf-8")
        with pytest.raises(PersistenceError, match="corrupted") as excinfo:
            await json_store.load("exam-midterm", "s1")
        assert excinfo.value.student_id == "s1"

    @pytest.mark.asyncio
    async def test_load_when_record_invalid_then_raises_persistence_error(self, json_store):
        path = json_store.path_for("exam-midterm", "s1")
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"schema_version": 1, "exam_id": "exam-midterm"}), encoding="utf-8")
        with pytest.raises(PersistenceError, match="invalid"):
            await json_store.load("exam-midterm", "s1")

    @pytest.mark.asyncio
    async def test_save_when_unreadable_existing_file_then_overwrites(self, json_store, sample_result):
        path = json_store.path_for("exam-midterm", "s1")
        path.parent.mkdir(parents=True)
        path.write_text("garbage", encoding="utf-8")
        confirmation = await json_store.save("exam-midterm", "s1", sample_result)
        assert confirmation.revision == 1
        assert await json_store.load("exam-midterm", "s1") == sample_result

    @pytest.mark.asyncio
    async def test_load_when_file_holds_json_array_then_raises_persistence_error(self, json_store):
        path = json_store.path_for("exam-midterm", "s1")
        path.parent.mkdir(parents=True)
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(PersistenceError, match="not a JSON object"):
            await json_store.load("exam-midterm", "s1")

    @pytest.mark.asyncio
    async def test_save_when_existing_file_holds_json_array_then_overwrites(self, json_store, sample_result):
        path = json_store.path_for("exam-midterm", "s1")
        path.parent.mkdir(parents=True)
        path.write_text("[1]", encoding="utf-8")
        confirmation = await json_store.save("exam-midterm", "s1", sample_result)
        assert confirmation.revision == 1
        assert await json_store.load("exam-midterm", "s1") == sample_result

    # ─────────────────────────────────────────────────────────────────────────
    # Revisions
    # ─────────────────────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_save_when_concurrent_then_revisions_distinct(self, json_store, sample_result):
        """Each save reads and bumps the revision under the same lock."""
        confirmations = await asyncio.gather(*[
            json_store.save("exam-midterm", "s1", sample_result) for _ in range(5)
        ])
        assert sorted(c.revision for c in confirmations) == [1, 2, 3, 4, 5]
        data = json.loads(json_store.path_for("exam-midterm", "s1").read_text(encoding="utf-8"))
        assert data[REVISION_KEY] == 5
