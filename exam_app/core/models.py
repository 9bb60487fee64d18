"""Domain models for the exam application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class UserRole(Enum):
    """Closed set of roles that can use the console."""

    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"


class SessionState(Enum):
    """Lifecycle of a timed assessment session."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class QuestionStatus(Enum):
    """Palette status of a single question inside a running session."""

    CURRENT = "current"
    FLAGGED = "flagged"
    ANSWERED = "answered"
    NOT_VISITED = "not_visited"


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with exactly four options."""

    id: str
    text: str
    options: tuple[str, ...]
    correct_index: int
    explanation: str | None = None


@dataclass(frozen=True, slots=True)
class Quiz:
    """A timed quiz attached to a course. Immutable once a session starts."""

    id: str
    course_id: str
    title: str
    time_limit_minutes: int
    questions: tuple[Question, ...]
    created_by: str | None = None
    updated_at: datetime | None = None

    @property
    def question_count(self) -> int:
        return len(self.questions)


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Outcome of one submitted session. Created exactly once."""

    id: str
    quiz_id: str
    student_id: str
    score: int
    total: int
    submitted_at: datetime
    auto_submitted: bool = False


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Immutable copy of a session handed to UI and API consumers."""

    session_id: str
    quiz_id: str | None
    student_id: str
    state: SessionState
    current_index: int
    answers: dict[int, int] = field(default_factory=dict)
    flagged: frozenset[int] = frozenset()
    remaining_seconds: int = 0
    question_count: int = 0
    result: QuizResult | None = None
    abandoned: bool = False

    def question_status(self, question_index: int) -> QuestionStatus:
        """Palette status; the current question wins over flagged over answered."""
        if question_index == self.current_index:
            return QuestionStatus.CURRENT
        if question_index in self.flagged:
            return QuestionStatus.FLAGGED
        if question_index in self.answers:
            return QuestionStatus.ANSWERED
        return QuestionStatus.NOT_VISITED


@dataclass(frozen=True, slots=True)
class ReviewRow:
    """Per-question breakdown shown after submission."""

    index: int
    question_text: str
    chosen_option: str | None
    correct_option: str
    is_correct: bool
    explanation: str | None = None
