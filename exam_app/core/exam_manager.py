"""Business logic for quizzes, sessions and results shared between UI and API."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from threading import Lock

from exam_app.constants.quiz_constants import SUBMITTED_SESSION_RETENTION_SECONDS
from exam_app.core.models import Quiz, QuizResult, SessionSnapshot, SessionState
from exam_app.core.services.assessment_session import AssessmentSession
from exam_app.core.services.quiz_repository import QuizRepository
from exam_app.core.services.result_store import ResultSaveError, ResultStore

logger = logging.getLogger(__name__)


class ExamManager:
    """Facade for exam services: catalog, server-held sessions and results."""

    def __init__(
        self,
        result_store: ResultStore | None = None,
        session_retention_seconds: int = SUBMITTED_SESSION_RETENTION_SECONDS,
    ) -> None:
        self._lock = Lock()
        # Submitted sessions stay readable for review this long after submission.
        self._session_retention = timedelta(seconds=session_retention_seconds)

        # Services
        self._repository = QuizRepository()
        self._results = result_store or ResultStore()
        self._sessions: dict[str, AssessmentSession] = {}
        self._pending_results: dict[str, QuizResult] = {}

    # --- Quiz Catalog Delegation ---

    def load_quizzes(self, quizzes: list[Quiz]) -> None:
        with self._lock:
            self._repository.load_quizzes(quizzes)

    def add_quiz(self, quiz: Quiz, created_by: str | None = None) -> Quiz:
        with self._lock:
            return self._repository.add_quiz(quiz, created_by)

    def delete_quiz(self, quiz_id: str) -> None:
        with self._lock:
            self._repository.delete_quiz(quiz_id)

    def get_quiz(self, quiz_id: str) -> Quiz:
        with self._lock:
            return self._repository.get_quiz(quiz_id)

    def list_quizzes(self, course_id: str | None = None) -> list[Quiz]:
        with self._lock:
            return self._repository.list_quizzes(course_id)

    def has_quizzes(self) -> bool:
        with self._lock:
            return self._repository.has_quizzes()

    def reset_catalog(self) -> None:
        with self._lock:
            self._repository.clear()

    # --- Server-held Sessions ---

    def start_session(self, quiz_id: str, student_id: str) -> SessionSnapshot:
        with self._lock:
            quiz = self._repository.get_quiz(quiz_id)
            session = AssessmentSession(student_id=student_id)
            session.start(quiz)
            self._sessions[session.session_id] = session
            return session.snapshot()

    def get_session(self, session_id: str) -> SessionSnapshot:
        with self._lock:
            return self._session(session_id).snapshot()

    def get_session_quiz(self, session_id: str) -> Quiz:
        with self._lock:
            quiz = self._session(session_id).quiz
            if quiz is None:
                raise RuntimeError("Session has not been started.")
            return quiz

    def select_answer(self, session_id: str, question_index: int, option_index: int) -> SessionSnapshot:
        with self._lock:
            session = self._session(session_id)
            session.select_answer(question_index, option_index)
            return session.snapshot()

    def toggle_flag(self, session_id: str, question_index: int) -> SessionSnapshot:
        with self._lock:
            session = self._session(session_id)
            session.toggle_flag(question_index)
            return session.snapshot()

    def navigate(self, session_id: str, target_index: int) -> SessionSnapshot:
        with self._lock:
            session = self._session(session_id)
            session.navigate(target_index)
            return session.snapshot()

    def submit_session(self, session_id: str) -> QuizResult:
        """Submit a server-held session and persist its result.

        Raises ``ResultSaveError`` when persistence fails; the result is kept
        for ``retry_result_save``.
        """
        with self._lock:
            result = self._session(session_id).submit()
            self._persist(result)
            return result

    def abandon_session(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                raise KeyError(f"Session {session_id!r} not found")
            session.abandon()

    def tick_sessions(self) -> list[QuizResult]:
        """Advance every running session by one second.

        Returns the results of sessions that ran out of time on this tick.
        Saving failures are logged and left pending. Submitted sessions whose
        result is saved are dropped once the retention window has passed.
        """
        expired: list[QuizResult] = []
        with self._lock:
            for session in self._sessions.values():
                if session.state is not SessionState.IN_PROGRESS:
                    continue
                result = session.tick()
                if result is None:
                    continue
                expired.append(result)
                try:
                    self._persist(result)
                except ResultSaveError:
                    logger.error("Auto-submitted result %s for session %s not saved", result.id, session.session_id)
            self._evict_finished_sessions()
        return expired

    def get_active_session_count(self) -> int:
        with self._lock:
            return sum(1 for s in self._sessions.values() if s.is_active())

    def get_session_count(self) -> int:
        """Number of server-held sessions, including submitted ones kept for review."""
        with self._lock:
            return len(self._sessions)

    # --- Results ---

    def save_result(self, result: QuizResult) -> None:
        """Persist a result produced by any session owner."""
        with self._lock:
            self._persist(result)

    def retry_result_save(self, result_id: str) -> QuizResult:
        with self._lock:
            result = self._pending_results.get(result_id)
            if result is None:
                raise KeyError(f"No pending result {result_id!r}")
            self._persist(result)
            return result

    def ensure_result_saved(self, result: QuizResult) -> QuizResult:
        """Persist a result unless the store already holds it.

        Works whether or not the result is still pending, so a client that
        kept its own copy can always retry with it.
        """
        with self._lock:
            if not self._results.has_result(result.id):
                self._persist(result)
            return result

    def retry_pending_saves(self) -> list[QuizResult]:
        """Try every pending result once. Returns the ones that were saved."""
        saved: list[QuizResult] = []
        with self._lock:
            for result in list(self._pending_results.values()):
                try:
                    self._persist(result)
                except ResultSaveError:
                    continue
                saved.append(result)
        return saved

    def has_result(self, result_id: str) -> bool:
        with self._lock:
            return self._results.has_result(result_id)

    def get_pending_results(self) -> list[QuizResult]:
        with self._lock:
            return list(self._pending_results.values())

    def list_results(
        self,
        student_id: str | None = None,
        quiz_id: str | None = None,
    ) -> list[QuizResult]:
        with self._lock:
            return self._results.list_results(student_id, quiz_id)

    def get_best_score(self, student_id: str, quiz_id: str) -> int | None:
        with self._lock:
            return self._results.best_score(student_id, quiz_id)

    # --- Internals (caller holds the lock) ---

    def _session(self, session_id: str) -> AssessmentSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id!r} not found")
        return session

    def _evict_finished_sessions(self) -> None:
        cutoff = datetime.now(timezone.utc) - self._session_retention
        stale = [
            session_id
            for session_id, session in self._sessions.items()
            if session.result is not None
            and session.result.id not in self._pending_results
            and session.result.submitted_at <= cutoff
        ]
        for session_id in stale:
            del self._sessions[session_id]
        if stale:
            logger.info("Dropped %s finished sessions", len(stale))

    def _persist(self, result: QuizResult) -> None:
        try:
            self._results.save_result(result)
        except ResultSaveError:
            self._pending_results[result.id] = result
            logger.warning("Result %s kept pending for retry", result.id)
            raise
        self._pending_results.pop(result.id, None)
