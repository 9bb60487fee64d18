"""
Test: ResultStore in-memory and JSON-lines persistence.
"""
from datetime import datetime, timezone

import pytest

from exam_app.core.models import QuizResult
from exam_app.core.services.result_store import QuizResultRecord, ResultSaveError, ResultStore


def make_result(result_id="r1", student_id="alice", quiz_id="quiz-1", score=2, auto_submitted=False):
    return QuizResult(
        id=result_id,
        quiz_id=quiz_id,
        student_id=student_id,
        score=score,
        total=3,
        submitted_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        auto_submitted=auto_submitted,
    )


class TestInMemory:
    def test_save_and_list(self):
        store = ResultStore()
        store.save_result(make_result())
        assert store.has_result("r1")
        assert store.list_results() == [make_result()]

    def test_saving_same_id_twice_keeps_one(self):
        store = ResultStore()
        store.save_result(make_result(score=2))
        store.save_result(make_result(score=3))
        assert [result.score for result in store.list_results()] == [2]

    def test_filters(self):
        store = ResultStore()
        store.save_result(make_result("r1", student_id="alice", quiz_id="q1"))
        store.save_result(make_result("r2", student_id="bob", quiz_id="q1"))
        store.save_result(make_result("r3", student_id="alice", quiz_id="q2"))
        assert [r.id for r in store.list_results(student_id="alice")] == ["r1", "r3"]
        assert [r.id for r in store.list_results(quiz_id="q1")] == ["r1", "r2"]
        assert [r.id for r in store.list_results("alice", "q2")] == ["r3"]

    def test_best_score(self):
        store = ResultStore()
        assert store.best_score("alice", "quiz-1") is None
        store.save_result(make_result("r1", score=1))
        store.save_result(make_result("r2", score=3))
        store.save_result(make_result("r3", score=2))
        assert store.best_score("alice", "quiz-1") == 3


class TestFileBackend:
    def test_appends_one_line_per_result(self, tmp_path):
        path = tmp_path / "results.jsonl"
        store = ResultStore(path)
        store.save_result(make_result("r1"))
        store.save_result(make_result("r2", auto_submitted=True))
        store.save_result(make_result("r1"))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert QuizResultRecord.model_validate_json(lines[1]).auto_submitted is True

    def test_reload_from_file(self, tmp_path):
        path = tmp_path / "results.jsonl"
        ResultStore(path).save_result(make_result("r1", score=3))

        reloaded = ResultStore(path)
        assert reloaded.list_results() == [make_result("r1", score=3)]

    def test_truncated_last_line_is_skipped(self, tmp_path, caplog):
        path = tmp_path / "results.jsonl"
        ResultStore(path).save_result(make_result("r1"))
        with path.open("a", encoding="utf-8") as handle:
            handle.write('{"id": "a", "quiz_id": "q", "stud')

        reloaded = ResultStore(path)

        assert [result.id for result in reloaded.list_results()] == ["r1"]
        assert "line 2" in caplog.text

        reloaded.save_result(make_result("r2"))
        assert [result.id for result in ResultStore(path).list_results()] == ["r1", "r2"]

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "data" / "results.jsonl"
        ResultStore(path).save_result(make_result())
        assert path.exists()

    def test_write_failure_raises_with_result(self, unwritable_store):
        result = make_result()
        with pytest.raises(ResultSaveError) as excinfo:
            unwritable_store.save_result(result)
        assert excinfo.value.result is result
        assert not unwritable_store.has_result("r1")


class TestRecord:
    def test_record_round_trip_keeps_fields(self):
        result = make_result(auto_submitted=True)
        assert QuizResultRecord.from_result(result).to_result() == result
