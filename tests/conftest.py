"""
Shared test fixtures for the exam application.
Quizzes are built in memory; file backed stores live under tmp_path.
"""
import pytest

from exam_app.core.exam_manager import ExamManager
from exam_app.core.models import Question, Quiz
from exam_app.core.services.result_store import ResultStore


def make_question(position, correct_index, explanation=None):
    return Question(
        id=f"q{position}",
        text=f"Question {position}?",
        options=(f"{position}-a", f"{position}-b", f"{position}-c", f"{position}-d"),
        correct_index=correct_index,
        explanation=explanation,
    )


def make_quiz(correct_indexes=(1, 0, 2), quiz_id="quiz-1", course_id="math-101", time_limit_minutes=5):
    return Quiz(
        id=quiz_id,
        course_id=course_id,
        title="Sample quiz",
        time_limit_minutes=time_limit_minutes,
        questions=tuple(
            make_question(position, correct)
            for position, correct in enumerate(correct_indexes, start=1)
        ),
    )


@pytest.fixture
def sample_quiz():
    """Three questions whose correct options are [1, 0, 2]."""
    return make_quiz()


@pytest.fixture
def manager(sample_quiz):
    """Manager with an in-memory result store and the sample quiz loaded."""
    exam_manager = ExamManager()
    exam_manager.add_quiz(sample_quiz)
    return exam_manager


@pytest.fixture
def unwritable_store(tmp_path):
    """File-backed store whose target cannot be created: its parent is a file."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    return ResultStore(blocker / "results.jsonl")
