"""Filesystem locations used by the exam application."""

from pathlib import Path

RESULTS_FILE_PATH: Path = Path("exam_results.jsonl")
DEFAULT_QUIZ_DIRECTORY: Path = Path("quizzes")
