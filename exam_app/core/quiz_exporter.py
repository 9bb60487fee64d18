"""Utilities for exporting quizzes to the plain-text format used for imports."""

from __future__ import annotations

from pathlib import Path

from exam_app.constants.quiz_constants import OPTION_LETTERS
from exam_app.core.models import Question, Quiz


def save_quiz_to_file(file_path: Path, quiz: Quiz) -> None:
    """Persist the provided quiz to disk in the text import format."""

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_quiz(quiz), encoding="utf-8")


def serialize_quiz(quiz: Quiz) -> str:
    if not quiz.questions:
        raise ValueError("Cannot export an empty quiz.")

    header = [
        f"TITLE: {quiz.title}",
        f"COURSE: {quiz.course_id}",
        f"TIMELIMIT: {quiz.time_limit_minutes}",
    ]
    if quiz.id:
        header.append(f"ID: {quiz.id}")
    blocks = ["\n".join(header)]
    blocks.extend(_serialize_question(question) for question in quiz.questions)
    return "\n\n---\n\n".join(blocks) + "\n"


def _serialize_question(question: Question) -> str:
    lines: list[str] = []

    question_lines = question.text.splitlines() or [question.text]
    lines.append(f"Q: {question_lines[0]}")
    lines.extend(question_lines[1:])

    for idx, letter in enumerate(OPTION_LETTERS):
        option_text = question.options[idx] if idx < len(question.options) else ""
        option_lines = option_text.splitlines() or [option_text]
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])

    lines.append(f"CORRECT: {OPTION_LETTERS[question.correct_index]}")

    if question.explanation:
        explanation_lines = question.explanation.splitlines()
        lines.append(f"EXPLANATION: {explanation_lines[0]}")
        lines.extend(explanation_lines[1:])

    return "\n".join(lines)
