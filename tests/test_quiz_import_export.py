"""
Test: plain-text quiz import and export.
"""
from dataclasses import replace
from textwrap import dedent

import pytest

from conftest import make_quiz
from exam_app.core.quiz_exporter import save_quiz_to_file, serialize_quiz
from exam_app.core.quiz_importer import (
    QuizImportError,
    load_quiz_from_file,
    load_quizzes_from_directory,
    parse_quiz_text,
)

VALID_QUIZ = dedent(
    """\
    TITLE: Angles
    COURSE: math-101
    TIMELIMIT: 10

    Q: What is $30^o$ in radians?
    A: \\frac{\\pi}{2}
    B: \\frac{\\pi}{6}
    C: \\frac{\\pi}{4}
    D: \\frac{\\pi}{3}
    CORRECT: b
    EXPLANATION: $180^o$ is $\\pi$ radians.
    Divide by six.

    ---

    Q: Which is a right angle?
    Measured in degrees.
    A: 45
    B: 60
    C: 90
    D: 180
    CORRECT: C
    """
)


class TestParse:
    def test_parses_header_and_questions(self):
        quiz = parse_quiz_text(VALID_QUIZ)
        assert quiz.title == "Angles"
        assert quiz.course_id == "math-101"
        assert quiz.time_limit_minutes == 10
        assert quiz.id == ""
        assert quiz.question_count == 2

    def test_parses_question_fields(self):
        first, second = parse_quiz_text(VALID_QUIZ).questions
        assert first.id == "q1"
        assert first.correct_index == 1
        assert first.options[1] == "\\frac{\\pi}{6}"
        assert first.explanation == "$180^o$ is $\\pi$ radians.\nDivide by six."
        assert second.text == "Which is a right angle?\nMeasured in degrees."
        assert second.correct_index == 2
        assert second.explanation is None

    def test_optional_id(self):
        quiz = parse_quiz_text("ID: angles-1\n" + VALID_QUIZ)
        assert quiz.id == "angles-1"

    @pytest.mark.parametrize(
        "text, message",
        [
            ("", "empty"),
            ("TITLE: T\nCOURSE: c\nTIMELIMIT: 5\n", "any questions"),
            ("TITLE: T\nTIMELIMIT: 5\n\nQ: x\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: A\n", "COURSE"),
            ("TITLE: T\nCOURSE: c\nTIMELIMIT: soon\n\nQ: x\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: A\n", "integer"),
            ("TITLE: T\nCOURSE: c\nTIMELIMIT: 0\n\nQ: x\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: A\n", "positive"),
            ("Q: x\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: A\n", "header"),
        ],
    )
    def test_header_errors(self, text, message):
        with pytest.raises(QuizImportError, match=message):
            parse_quiz_text(text)

    @pytest.mark.parametrize(
        "block, message",
        [
            ("A: 1\nB: 2\nC: 3\nD: 4\nCORRECT: A", "question text missing"),
            ("Q: x\nA: 1\nB: 2\nC: 3\nCORRECT: A", "exactly four options"),
            ("Q: x\nA: 1\nB: 2\nC: 3\nD: 4", "CORRECT is required"),
            ("Q: x\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: E", "one of A, B, C, or D"),
        ],
    )
    def test_question_errors(self, block, message):
        text = f"TITLE: T\nCOURSE: c\nTIMELIMIT: 5\n\n{block}\n"
        with pytest.raises(QuizImportError, match=message):
            parse_quiz_text(text)


class TestExport:
    def test_serialize_layout(self):
        text = serialize_quiz(make_quiz(correct_indexes=(2,)))
        assert text.startswith("TITLE: Sample quiz\nCOURSE: math-101\nTIMELIMIT: 5\nID: quiz-1\n")
        assert "\n\n---\n\nQ: Question 1?\n" in text
        assert "CORRECT: C" in text
        assert text.endswith("\n")

    def test_serialize_empty_quiz_raises(self):
        with pytest.raises(ValueError):
            serialize_quiz(replace(make_quiz(), questions=()))

    def test_export_then_import_gives_equal_quiz(self, tmp_path):
        quiz = parse_quiz_text("ID: angles-1\n" + VALID_QUIZ)
        path = tmp_path / "nested" / "angles.txt"
        save_quiz_to_file(path, quiz)
        imported = load_quiz_from_file(path)
        assert imported.quiz == quiz
        assert imported.source_path == path

    def test_multi_paragraph_text_survives_round_trip(self):
        quiz = make_quiz(correct_indexes=(1, 3))
        first = replace(
            quiz.questions[0],
            text="First paragraph.\n\nSecond paragraph?",
            options=("plain", "two\n\nparagraphs", "c", "d"),
            explanation="Because.\n\nSee chapter $2$.",
        )
        quiz = replace(quiz, questions=(first, quiz.questions[1]))

        parsed = parse_quiz_text(serialize_quiz(quiz))

        assert parsed.questions[0].text == "First paragraph.\n\nSecond paragraph?"
        assert parsed.questions[0].options[1] == "two\n\nparagraphs"
        assert parsed.questions[0].explanation == "Because.\n\nSee chapter $2$."
        assert parsed == quiz

    def test_blank_lines_split_blocks_without_separators(self):
        text = "TITLE: T\nCOURSE: c\nTIMELIMIT: 5\n\nQ: one\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: A\n\nQ: two\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: D\n"
        assert [q.text for q in parse_quiz_text(text).questions] == ["one", "two"]


class TestDirectoryLoad:
    def test_skips_broken_files(self, tmp_path, caplog):
        (tmp_path / "b_valid.txt").write_text(VALID_QUIZ, encoding="utf-8")
        (tmp_path / "a_broken.txt").write_text("TITLE: only\n", encoding="utf-8")
        (tmp_path / "notes.md").write_text(VALID_QUIZ, encoding="utf-8")

        imported = load_quizzes_from_directory(tmp_path)

        assert [item.source_path.name for item in imported] == ["b_valid.txt"]
        assert "a_broken.txt" in caplog.text

    def test_empty_directory(self, tmp_path):
        assert load_quizzes_from_directory(tmp_path) == []
