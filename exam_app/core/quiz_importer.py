"""Utilities for importing quizzes from a human-friendly text file.

File format (blocks separated by blank lines or '---'). The first block is
the quiz header, every following block is one question. When a file uses
'---' separators, blank lines inside a question are kept as paragraph breaks:

    TITLE: Quiz title
    COURSE: course identifier
    TIMELIMIT: minutes
    ID: optional quiz identifier

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D
    EXPLANATION: optional text shown in the result review

Example:

    TITLE: Arithmetic warm-up
    COURSE: math-101
    TIMELIMIT: 10

    Q: What is $2 + 2$?
    A: 3
    B: 4
    C: 5
    D: 22
    CORRECT: B
    EXPLANATION: Two pairs make four.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from exam_app.constants.quiz_constants import OPTION_LETTERS
from exam_app.core.models import Question, Quiz

logger = logging.getLogger(__name__)


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for the imported quiz and where it came from."""

    source_path: Path
    quiz: Quiz


_HEADER_KEYS = ("TITLE", "COURSE", "TIMELIMIT", "ID")


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    return ImportedQuiz(source_path=file_path, quiz=parse_quiz_text(text))


def load_quizzes_from_directory(directory: Path) -> list[ImportedQuiz]:
    """Import every ``*.txt`` quiz in a directory, skipping broken files."""
    imported: list[ImportedQuiz] = []
    for file_path in sorted(directory.glob("*.txt")):
        try:
            imported.append(load_quiz_from_file(file_path))
        except (OSError, QuizImportError) as exc:
            logger.warning("Skipping quiz file %s: %s", file_path, exc)
    return imported


def parse_quiz_text(text: str) -> Quiz:
    blocks = _split_blocks(text)
    if not blocks:
        raise QuizImportError("Quiz file is empty.")

    header = _parse_header(blocks[0])
    questions = tuple(
        _parse_block(block, position) for position, block in enumerate(blocks[1:], start=1)
    )
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")

    return Quiz(
        id=header.get("ID", ""),
        course_id=header["COURSE"],
        title=header["TITLE"],
        time_limit_minutes=_parse_time_limit(header["TIMELIMIT"]),
        questions=questions,
    )


def _split_blocks(text: str) -> list[str]:
    lines = text.splitlines()
    # In files that use '---', a blank line only ends a block right before a
    # new question, so multi-paragraph markdown stays in its section.
    uses_separators = any(line.strip() == "---" for line in lines)
    blocks: list[str] = []
    current_block: list[str] = []
    for line_number, raw_line in enumerate(lines):
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            if uses_separators and not _opens_new_block(lines, line_number + 1):
                current_block.append("")
                continue
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _opens_new_block(lines: list[str], start: int) -> bool:
    for raw_line in lines[start:]:
        stripped = raw_line.strip()
        if stripped:
            return stripped == "---" or stripped.upper().startswith("Q:")
    return True


def _parse_header(block: str) -> dict[str, str]:
    header: dict[str, str] = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        key, separator, value = line.partition(":")
        key = key.strip().upper()
        if not separator or key not in _HEADER_KEYS:
            raise QuizImportError(
                f"Quiz header must start with TITLE, COURSE and TIMELIMIT lines, got '{line}'."
            )
        header[key] = value.strip()

    for required in ("TITLE", "COURSE", "TIMELIMIT"):
        if not header.get(required):
            raise QuizImportError(f"Quiz header is missing {required}.")
    return header


def _parse_time_limit(raw_value: str) -> int:
    try:
        minutes = int(raw_value)
    except ValueError as exc:
        raise QuizImportError("TIMELIMIT must be an integer number of minutes.") from exc
    if minutes <= 0:
        raise QuizImportError("TIMELIMIT must be a positive integer.")
    return minutes


def _parse_block(block: str, position: int) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    explanation_lines: list[str] = []
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            # Paragraph break inside the open section
            if current_section == "Q":
                question_lines.append("")
            elif current_section == "EXPLANATION":
                explanation_lines.append("")
            elif current_section in OPTION_LETTERS:
                options[current_section] += "\n"
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("EXPLANATION:"):
            explanation_lines = [line.split(":", 1)[1].strip()]
            current_section = "EXPLANATION"
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section == "EXPLANATION":
            explanation_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Question {position}: text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError(f"Question {position}: question text missing (Q: ...)")
    if len(options) != len(OPTION_LETTERS):
        raise QuizImportError(
            f"Question {position}: each question must define exactly four options (A-D)."
        )

    option_list = tuple(options.get(letter, "").strip() for letter in OPTION_LETTERS)
    if any(not opt for opt in option_list):
        raise QuizImportError(f"Question {position}: option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError(f"Question {position}: CORRECT is required.")
    if correct_letter not in OPTION_LETTERS:
        raise QuizImportError(f"Question {position}: CORRECT must be one of A, B, C, or D.")

    explanation = "\n".join(explanation_lines).strip() or None
    return Question(
        id=f"q{position}",
        text=question_text,
        options=option_list,
        correct_index=OPTION_LETTERS.index(correct_letter),
        explanation=explanation,
    )
