"""Service for managing the catalog of quizzes."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from uuid import uuid4

from exam_app.constants.quiz_constants import OPTIONS_PER_QUESTION
from exam_app.core.models import Question, Quiz


class QuizRepository:
    """Validates and stores quizzes keyed by id, in insertion order."""

    def __init__(self) -> None:
        self._quizzes: dict[str, Quiz] = {}

    def add_quiz(self, quiz: Quiz, created_by: str | None = None) -> Quiz:
        """Validate a quiz and store it, replacing any quiz with the same id."""
        prepared = self._prepare_quiz(quiz, created_by)
        self._quizzes[prepared.id] = prepared
        return prepared

    def load_quizzes(self, quizzes: list[Quiz]) -> None:
        """Replace the whole catalog."""
        prepared = [self._prepare_quiz(quiz, quiz.created_by) for quiz in quizzes]
        self._quizzes = {quiz.id: quiz for quiz in prepared}

    def get_quiz(self, quiz_id: str) -> Quiz:
        try:
            return self._quizzes[quiz_id]
        except KeyError:
            raise KeyError(f"Quiz {quiz_id!r} not found") from None

    def list_quizzes(self, course_id: str | None = None) -> list[Quiz]:
        if course_id is None:
            return list(self._quizzes.values())
        return [quiz for quiz in self._quizzes.values() if quiz.course_id == course_id]

    def delete_quiz(self, quiz_id: str) -> None:
        if quiz_id not in self._quizzes:
            raise KeyError(f"Quiz {quiz_id!r} not found")
        del self._quizzes[quiz_id]

    def has_quizzes(self) -> bool:
        return bool(self._quizzes)

    def get_quiz_count(self) -> int:
        return len(self._quizzes)

    def clear(self) -> None:
        self._quizzes = {}

    def _prepare_quiz(self, quiz: Quiz, created_by: str | None) -> Quiz:
        """Validate and normalize a quiz before storage."""
        title = quiz.title.strip()
        if not title:
            raise ValueError("Quiz title must not be empty.")
        course_id = quiz.course_id.strip()
        if not course_id:
            raise ValueError("Quiz must belong to a course.")
        time_limit = self._validate_time_limit(quiz.time_limit_minutes)
        if not quiz.questions:
            raise ValueError("Quiz must contain at least one question.")

        questions = tuple(self._prepare_question(question) for question in quiz.questions)
        return replace(
            quiz,
            id=quiz.id.strip() or uuid4().hex,
            course_id=course_id,
            title=title,
            time_limit_minutes=time_limit,
            questions=questions,
            created_by=created_by if created_by is not None else quiz.created_by,
            updated_at=datetime.now(timezone.utc),
        )

    def _prepare_question(self, question: Question) -> Question:
        options = self._validate_options(question.options)
        if not 0 <= question.correct_index < len(options):
            raise ValueError(
                f"Correct option index must be between 0 and {len(options) - 1}."
            )
        text = question.text.strip()
        if not text:
            raise ValueError("Question text must not be empty.")
        explanation = (question.explanation or "").strip() or None
        return Question(
            id=question.id.strip() or uuid4().hex,
            text=text,
            options=options,
            correct_index=question.correct_index,
            explanation=explanation,
        )

    @staticmethod
    def _validate_options(options: tuple[str, ...] | list[str]) -> tuple[str, ...]:
        if len(options) != OPTIONS_PER_QUESTION:
            raise ValueError(f"Each question must have exactly {OPTIONS_PER_QUESTION} options.")
        cleaned = tuple(option.strip() for option in options)
        if any(not option for option in cleaned):
            raise ValueError("Option text cannot be empty.")
        return cleaned

    @staticmethod
    def _validate_time_limit(time_limit_minutes: int) -> int:
        if isinstance(time_limit_minutes, bool) or not isinstance(time_limit_minutes, int):
            raise ValueError("Time limit must be provided as an integer number of minutes.")
        if time_limit_minutes <= 0:
            raise ValueError("Time limit must be a positive integer.")
        return time_limit_minutes
