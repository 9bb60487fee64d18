"""Post-submission review helpers and countdown formatting."""

from __future__ import annotations

from collections.abc import Mapping

from exam_app.constants.quiz_constants import TIME_WARNING_THRESHOLD_SECONDS
from exam_app.core.models import Quiz, ReviewRow


def build_review(quiz: Quiz, answers: Mapping[int, int]) -> list[ReviewRow]:
    """Return one row per question; unanswered questions are shown as skipped."""
    rows: list[ReviewRow] = []
    for index, question in enumerate(quiz.questions):
        chosen_index = answers.get(index)
        chosen_option = None
        if chosen_index is not None and 0 <= chosen_index < len(question.options):
            chosen_option = question.options[chosen_index]
        rows.append(
            ReviewRow(
                index=index,
                question_text=question.text,
                chosen_option=chosen_option,
                correct_option=question.options[question.correct_index],
                is_correct=chosen_index == question.correct_index,
                explanation=question.explanation,
            )
        )
    return rows


def format_remaining(seconds: int) -> str:
    """Format a countdown as ``m:ss``."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def is_time_running_low(seconds: int) -> bool:
    return seconds < TIME_WARNING_THRESHOLD_SECONDS
