"""
Test: QuizRepository validation and catalog operations.
"""
from dataclasses import replace

import pytest

from conftest import make_question, make_quiz
from exam_app.core.services.quiz_repository import QuizRepository


@pytest.fixture
def repository():
    return QuizRepository()


class TestAddQuiz:
    def test_add_and_get(self, repository, sample_quiz):
        stored = repository.add_quiz(sample_quiz, created_by="prof")
        assert repository.get_quiz("quiz-1") is stored
        assert stored.created_by == "prof"
        assert stored.updated_at is not None
        assert stored.question_count == 3

    def test_blank_id_gets_generated(self, repository, sample_quiz):
        stored = repository.add_quiz(replace(sample_quiz, id="  "))
        assert stored.id.strip()
        assert repository.get_quiz(stored.id) is stored

    def test_same_id_replaces(self, repository, sample_quiz):
        repository.add_quiz(sample_quiz)
        repository.add_quiz(replace(sample_quiz, title="Renamed"))
        assert repository.get_quiz_count() == 1
        assert repository.get_quiz("quiz-1").title == "Renamed"

    def test_strips_text_and_blank_explanation(self, repository, sample_quiz):
        question = replace(
            make_question(1, 0),
            text="  What?  ",
            options=(" a ", "b", "c", "d"),
            explanation="   ",
        )
        stored = repository.add_quiz(replace(sample_quiz, title="  Title ", questions=(question,)))
        assert stored.title == "Title"
        assert stored.questions[0].text == "What?"
        assert stored.questions[0].options[0] == "a"
        assert stored.questions[0].explanation is None

    @pytest.mark.parametrize(
        "changes",
        [
            {"title": "   "},
            {"course_id": ""},
            {"time_limit_minutes": 0},
            {"time_limit_minutes": -3},
            {"time_limit_minutes": True},
            {"time_limit_minutes": 1.5},
            {"questions": ()},
        ],
    )
    def test_rejects_invalid_quiz(self, repository, sample_quiz, changes):
        with pytest.raises(ValueError):
            repository.add_quiz(replace(sample_quiz, **changes))
        assert not repository.has_quizzes()

    @pytest.mark.parametrize(
        "changes",
        [
            {"options": ("a", "b", "c")},
            {"options": ("a", "b", "c", " ")},
            {"correct_index": 4},
            {"correct_index": -1},
            {"text": ""},
        ],
    )
    def test_rejects_invalid_question(self, repository, sample_quiz, changes):
        question = replace(make_question(1, 0), **changes)
        with pytest.raises(ValueError):
            repository.add_quiz(replace(sample_quiz, questions=(question,)))


class TestCatalog:
    def test_list_filters_by_course(self, repository):
        repository.add_quiz(make_quiz(quiz_id="a", course_id="math"))
        repository.add_quiz(make_quiz(quiz_id="b", course_id="physics"))
        repository.add_quiz(make_quiz(quiz_id="c", course_id="math"))
        assert [quiz.id for quiz in repository.list_quizzes()] == ["a", "b", "c"]
        assert [quiz.id for quiz in repository.list_quizzes("math")] == ["a", "c"]
        assert repository.list_quizzes("history") == []

    def test_get_unknown_raises_key_error(self, repository):
        with pytest.raises(KeyError):
            repository.get_quiz("missing")

    def test_delete(self, repository, sample_quiz):
        repository.add_quiz(sample_quiz)
        repository.delete_quiz("quiz-1")
        assert not repository.has_quizzes()
        with pytest.raises(KeyError):
            repository.delete_quiz("quiz-1")

    def test_load_replaces_catalog(self, repository, sample_quiz):
        repository.add_quiz(sample_quiz)
        repository.load_quizzes([make_quiz(quiz_id="x"), make_quiz(quiz_id="y")])
        assert [quiz.id for quiz in repository.list_quizzes()] == ["x", "y"]

    def test_load_is_all_or_nothing(self, repository, sample_quiz):
        repository.add_quiz(sample_quiz)
        with pytest.raises(ValueError):
            repository.load_quizzes([make_quiz(quiz_id="x"), replace(sample_quiz, title="")])
        assert [quiz.id for quiz in repository.list_quizzes()] == ["quiz-1"]

    def test_clear(self, repository, sample_quiz):
        repository.add_quiz(sample_quiz)
        repository.clear()
        assert repository.get_quiz_count() == 0
