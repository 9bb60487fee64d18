"""Service for driving one student through a timed quiz attempt."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from uuid import uuid4

from exam_app.core.models import (
    Question,
    QuestionStatus,
    Quiz,
    QuizResult,
    SessionSnapshot,
    SessionState,
)

logger = logging.getLogger(__name__)


class EmptyQuizError(ValueError):
    """Raised when a session is started on a quiz without questions."""


class AssessmentSession:
    """Manages the answers, flags, countdown and score of one quiz attempt.

    The session never schedules anything itself. Whoever owns it (a Qt timer,
    the server ticker, a test) calls ``tick()`` once per elapsed second.
    """

    def __init__(self, student_id: str, session_id: str | None = None) -> None:
        self.session_id: str = session_id or uuid4().hex
        self.student_id: str = student_id
        self._state: SessionState = SessionState.NOT_STARTED
        self._quiz: Quiz | None = None
        self._current_index: int = 0
        self._answers: dict[int, int] = {}
        self._flagged: set[int] = set()
        self._remaining_seconds: int = 0
        self._result: QuizResult | None = None
        self._abandoned: bool = False

    # --- Lifecycle ---

    def start(self, quiz: Quiz, time_budget_seconds: int | None = None) -> None:
        if self._state is not SessionState.NOT_STARTED or self._abandoned:
            raise RuntimeError("Session has already been started.")
        if not quiz.questions:
            raise EmptyQuizError("Quiz must contain at least one question.")

        self._quiz = quiz
        self._current_index = 0
        self._answers = {}
        self._flagged = set()
        if time_budget_seconds is None:
            time_budget_seconds = quiz.time_limit_minutes * 60
        self._remaining_seconds = max(0, int(time_budget_seconds))
        self._result = None
        self._state = SessionState.IN_PROGRESS
        logger.info(
            "Session %s started quiz %s for %s with %ss",
            self.session_id,
            quiz.id,
            self.student_id,
            self._remaining_seconds,
        )

    def submit(self) -> QuizResult:
        """Finalize the attempt. Repeated calls return the first result."""
        return self._finalize(auto_submitted=False)

    def tick(self) -> QuizResult | None:
        """Consume one second. Returns the result if this tick ran the clock out."""
        if not self.is_active():
            return None
        if self._remaining_seconds > 0:
            self._remaining_seconds -= 1
        if self._remaining_seconds == 0:
            logger.info("Session %s ran out of time; submitting", self.session_id)
            return self._finalize(auto_submitted=True)
        return None

    def abandon(self) -> None:
        """Discard an unfinished attempt. A submitted session keeps its result.

        The state stays where it was; ``is_abandoned()`` and the snapshot's
        ``abandoned`` flag mark the attempt as closed.
        """
        if not self.is_active():
            return
        logger.info("Session %s abandoned", self.session_id)
        self._abandoned = True
        self._answers.clear()
        self._flagged.clear()
        self._remaining_seconds = 0

    def is_active(self) -> bool:
        return self._state is SessionState.IN_PROGRESS and not self._abandoned

    def is_abandoned(self) -> bool:
        return self._abandoned

    # --- Answers and flags ---

    def select_answer(self, question_index: int, option_index: int) -> None:
        self._require_in_progress()
        question = self._question_at(question_index)
        if not 0 <= option_index < len(question.options):
            raise ValueError(f"Option index {option_index} out of range")
        self._answers[question_index] = option_index

    def toggle_flag(self, question_index: int) -> bool:
        """Flip the review flag. Returns True when the question is now flagged."""
        self._require_in_progress()
        self._question_at(question_index)
        if question_index in self._flagged:
            self._flagged.discard(question_index)
            return False
        self._flagged.add(question_index)
        return True

    # --- Navigation ---

    def navigate(self, target_index: int) -> int:
        quiz = self._require_quiz()
        self._require_not_abandoned()
        self._current_index = max(0, min(quiz.question_count - 1, target_index))
        return self._current_index

    def previous(self) -> int:
        if self.can_go_previous():
            return self.navigate(self._current_index - 1)
        return self._current_index

    def next(self) -> int:
        if self.can_go_next():
            return self.navigate(self._current_index + 1)
        return self._current_index

    def can_go_previous(self) -> bool:
        return self._quiz is not None and self._current_index > 0

    def can_go_next(self) -> bool:
        return self._quiz is not None and self._current_index < self._quiz.question_count - 1

    # --- Read access ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def quiz(self) -> Quiz | None:
        return self._quiz

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def answers(self) -> dict[int, int]:
        return dict(self._answers)

    @property
    def flagged(self) -> frozenset[int]:
        return frozenset(self._flagged)

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def result(self) -> QuizResult | None:
        return self._result

    def question_count(self) -> int:
        return self._quiz.question_count if self._quiz else 0

    def answered_count(self) -> int:
        return len(self._answers)

    def question_status(self, question_index: int) -> QuestionStatus:
        return self.snapshot().question_status(question_index)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            quiz_id=self._quiz.id if self._quiz else None,
            student_id=self.student_id,
            state=self._state,
            current_index=self._current_index,
            answers=dict(self._answers),
            flagged=frozenset(self._flagged),
            remaining_seconds=self._remaining_seconds,
            question_count=self.question_count(),
            result=self._result,
            abandoned=self._abandoned,
        )

    # --- Internals ---

    def _finalize(self, auto_submitted: bool) -> QuizResult:
        if self._result is not None:
            return self._result
        quiz = self._require_quiz()
        self._require_not_abandoned()
        if self._state is not SessionState.IN_PROGRESS:
            raise RuntimeError("Session is not in progress.")

        score = sum(
            1
            for index, question in enumerate(quiz.questions)
            if self._answers.get(index) == question.correct_index
        )
        self._result = QuizResult(
            id=uuid4().hex,
            quiz_id=quiz.id,
            student_id=self.student_id,
            score=score,
            total=quiz.question_count,
            submitted_at=datetime.now(timezone.utc),
            auto_submitted=auto_submitted,
        )
        self._state = SessionState.SUBMITTED
        logger.info(
            "Session %s submitted: %s/%s%s",
            self.session_id,
            score,
            quiz.question_count,
            " (time expired)" if auto_submitted else "",
        )
        return self._result

    def _require_quiz(self) -> Quiz:
        if self._quiz is None:
            raise RuntimeError("Session has not been started.")
        return self._quiz

    def _require_in_progress(self) -> None:
        self._require_quiz()
        self._require_not_abandoned()
        if self._state is SessionState.SUBMITTED:
            raise RuntimeError("Session has already been submitted.")

    def _require_not_abandoned(self) -> None:
        if self._abandoned:
            raise RuntimeError("Session has been abandoned.")

    def _question_at(self, question_index: int) -> Question:
        quiz = self._require_quiz()
        if not 0 <= question_index < quiz.question_count:
            raise ValueError(f"Question index {question_index} out of range")
        return quiz.questions[question_index]
