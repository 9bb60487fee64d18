"""
Test: ExamManager sessions, auto-submit via tick_sessions, and pending result retry.
"""
import pytest

from conftest import make_quiz
from exam_app.core.exam_manager import ExamManager
from exam_app.core.models import SessionState
from exam_app.core.services.assessment_session import AssessmentSession
from exam_app.core.services.result_store import ResultSaveError


def _expire(manager, session_id, seconds):
    for _ in range(seconds):
        manager.tick_sessions()
    return manager.get_session(session_id)


class TestCatalog:
    def test_catalog_delegation(self, manager):
        assert manager.has_quizzes()
        manager.load_quizzes([make_quiz(quiz_id="a", course_id="art")])
        assert [quiz.id for quiz in manager.list_quizzes()] == ["a"]
        assert manager.list_quizzes("art")[0].course_id == "art"
        manager.reset_catalog()
        assert not manager.has_quizzes()

    def test_add_quiz_records_author(self, manager):
        stored = manager.add_quiz(make_quiz(quiz_id="b"), created_by="prof")
        assert manager.get_quiz("b").created_by == "prof"
        assert stored.updated_at is not None


class TestSessions:
    def test_start_and_answer(self, manager):
        snapshot = manager.start_session("quiz-1", "alice")
        assert snapshot.state is SessionState.IN_PROGRESS
        snapshot = manager.select_answer(snapshot.session_id, 0, 1)
        assert snapshot.answers == {0: 1}
        snapshot = manager.toggle_flag(snapshot.session_id, 2)
        assert snapshot.flagged == frozenset({2})
        snapshot = manager.navigate(snapshot.session_id, 9)
        assert snapshot.current_index == 2

    def test_start_unknown_quiz_raises(self, manager):
        with pytest.raises(KeyError):
            manager.start_session("missing", "alice")

    def test_unknown_session_raises(self, manager):
        with pytest.raises(KeyError):
            manager.get_session("missing")

    def test_submit_persists_result(self, manager):
        session_id = manager.start_session("quiz-1", "alice").session_id
        manager.select_answer(session_id, 0, 1)
        result = manager.submit_session(session_id)
        assert result.score == 1
        assert manager.list_results(student_id="alice") == [result]
        assert manager.get_best_score("alice", "quiz-1") == 1

    def test_double_submit_saves_once(self, manager):
        session_id = manager.start_session("quiz-1", "alice").session_id
        first = manager.submit_session(session_id)
        second = manager.submit_session(session_id)
        assert first is second
        assert len(manager.list_results()) == 1

    def test_abandon_removes_session(self, manager):
        session_id = manager.start_session("quiz-1", "alice").session_id
        manager.abandon_session(session_id)
        assert manager.get_active_session_count() == 0
        assert manager.list_results() == []
        with pytest.raises(KeyError):
            manager.abandon_session(session_id)

    def test_session_quiz_survives_catalog_delete(self, manager):
        session_id = manager.start_session("quiz-1", "alice").session_id
        manager.delete_quiz("quiz-1")
        assert manager.get_session_quiz(session_id).id == "quiz-1"
        assert manager.submit_session(session_id).total == 3


class TestTickSessions:
    def test_expiry_auto_submits_and_saves(self, manager):
        session_id = manager.start_session("quiz-1", "alice").session_id
        manager.select_answer(session_id, 0, 1)

        assert manager.get_active_session_count() == 1
        snapshot = _expire(manager, session_id, 5 * 60 - 1)
        assert snapshot.state is SessionState.IN_PROGRESS
        assert snapshot.remaining_seconds == 1

        expired = manager.tick_sessions()

        assert len(expired) == 1
        assert expired[0].auto_submitted is True
        assert expired[0].score == 1
        assert manager.get_session(session_id).state is SessionState.SUBMITTED
        assert manager.list_results() == expired
        assert manager.get_active_session_count() == 0

    def test_submitted_sessions_are_not_ticked(self, manager):
        session_id = manager.start_session("quiz-1", "alice").session_id
        manager.submit_session(session_id)
        before = manager.get_session(session_id).remaining_seconds
        assert manager.tick_sessions() == []
        assert manager.get_session(session_id).remaining_seconds == before


class TestSessionEviction:
    @pytest.fixture
    def short_memory_manager(self, sample_quiz):
        exam_manager = ExamManager(session_retention_seconds=0)
        exam_manager.add_quiz(sample_quiz)
        return exam_manager

    def test_saved_sessions_are_dropped_after_retention(self, short_memory_manager):
        for _ in range(100):
            session_id = short_memory_manager.start_session("quiz-1", "alice").session_id
            short_memory_manager.submit_session(session_id)
        assert short_memory_manager.get_session_count() == 100

        short_memory_manager.tick_sessions()

        assert short_memory_manager.get_session_count() == 0
        assert len(short_memory_manager.list_results()) == 100
        with pytest.raises(KeyError):
            short_memory_manager.get_session(session_id)

    def test_running_sessions_are_kept(self, short_memory_manager):
        short_memory_manager.start_session("quiz-1", "alice")
        short_memory_manager.tick_sessions()
        assert short_memory_manager.get_session_count() == 1

    def test_recent_submissions_stay_readable(self, manager):
        session_id = manager.start_session("quiz-1", "alice").session_id
        manager.submit_session(session_id)
        manager.tick_sessions()
        assert manager.get_session(session_id).state is SessionState.SUBMITTED

    def test_unsaved_sessions_are_kept(self, unwritable_store, sample_quiz):
        exam_manager = ExamManager(result_store=unwritable_store, session_retention_seconds=0)
        exam_manager.add_quiz(sample_quiz)
        session_id = exam_manager.start_session("quiz-1", "alice").session_id
        with pytest.raises(ResultSaveError):
            exam_manager.submit_session(session_id)

        exam_manager.tick_sessions()

        assert exam_manager.get_session(session_id).state is SessionState.SUBMITTED


class TestPendingResults:
    @pytest.fixture
    def failing_manager(self, unwritable_store, sample_quiz):
        exam_manager = ExamManager(result_store=unwritable_store)
        exam_manager.add_quiz(sample_quiz)
        return exam_manager

    def test_failed_submit_keeps_result_pending(self, failing_manager):
        session_id = failing_manager.start_session("quiz-1", "alice").session_id
        with pytest.raises(ResultSaveError) as excinfo:
            failing_manager.submit_session(session_id)
        assert failing_manager.get_pending_results() == [excinfo.value.result]
        assert failing_manager.list_results() == []
        assert failing_manager.get_session(session_id).state is SessionState.SUBMITTED

    def test_retry_saves_once_and_clears_pending(self, failing_manager, tmp_path):
        session_id = failing_manager.start_session("quiz-1", "alice").session_id
        with pytest.raises(ResultSaveError) as excinfo:
            failing_manager.submit_session(session_id)
        result_id = excinfo.value.result.id
        assert not failing_manager.has_result(result_id)

        with pytest.raises(ResultSaveError):
            failing_manager.retry_result_save(result_id)
        assert len(failing_manager.get_pending_results()) == 1

        (tmp_path / "blocker").unlink()
        saved = failing_manager.retry_result_save(result_id)

        assert saved.id == result_id
        assert failing_manager.has_result(result_id)
        assert failing_manager.get_pending_results() == []
        assert failing_manager.list_results() == [saved]
        lines = (tmp_path / "blocker" / "results.jsonl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        with pytest.raises(KeyError):
            failing_manager.retry_result_save(result_id)

    def test_expired_session_failure_is_pending(self, failing_manager):
        session_id = failing_manager.start_session("quiz-1", "alice").session_id
        _expire(failing_manager, session_id, 5 * 60)
        assert failing_manager.get_session(session_id).state is SessionState.SUBMITTED
        assert len(failing_manager.get_pending_results()) == 1

    def test_retry_pending_saves(self, failing_manager, tmp_path):
        session_id = failing_manager.start_session("quiz-1", "alice").session_id
        with pytest.raises(ResultSaveError):
            failing_manager.submit_session(session_id)
        assert failing_manager.retry_pending_saves() == []

        (tmp_path / "blocker").unlink()
        saved = failing_manager.retry_pending_saves()
        assert len(saved) == 1
        assert failing_manager.get_pending_results() == []

    def test_ensure_saved_after_pending_entry_is_gone(self, failing_manager, tmp_path):
        session = AssessmentSession(student_id="bob")
        session.start(failing_manager.get_quiz("quiz-1"))
        result = session.submit()
        with pytest.raises(ResultSaveError):
            failing_manager.save_result(result)
        (tmp_path / "blocker").unlink()
        failing_manager.retry_pending_saves()

        with pytest.raises(KeyError):
            failing_manager.retry_result_save(result.id)
        assert failing_manager.ensure_result_saved(result) is result
        assert failing_manager.list_results(student_id="bob") == [result]

    def test_ensure_saved_never_reports_an_unsaved_result(self, failing_manager):
        session = AssessmentSession(student_id="bob")
        session.start(failing_manager.get_quiz("quiz-1"))
        result = session.submit()

        with pytest.raises(ResultSaveError):
            failing_manager.ensure_result_saved(result)
        assert not failing_manager.has_result(result.id)
        assert failing_manager.get_pending_results() == [result]

    def test_save_result_from_client_session(self, manager):
        session = AssessmentSession(student_id="bob")
        session.start(manager.get_quiz("quiz-1"))
        result = session.submit()
        manager.save_result(result)
        assert manager.list_results(student_id="bob") == [result]
