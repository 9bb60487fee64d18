"""Create-only store for submitted quiz results."""

from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError

from exam_app.core.models import QuizResult

logger = logging.getLogger(__name__)


class ResultSaveError(Exception):
    """Raised when a finished result could not be persisted.

    The computed result travels with the exception so the caller can retry
    without asking the student to take the quiz again.
    """

    def __init__(self, message: str, result: QuizResult) -> None:
        super().__init__(message)
        self.result = result


class QuizResultRecord(BaseModel):
    """Serialized form of a result, one JSON object per line."""

    id: str
    quiz_id: str
    student_id: str
    score: int
    total: int
    submitted_at: datetime
    auto_submitted: bool = False

    @classmethod
    def from_result(cls, result: QuizResult) -> "QuizResultRecord":
        return cls(
            id=result.id,
            quiz_id=result.quiz_id,
            student_id=result.student_id,
            score=result.score,
            total=result.total,
            submitted_at=result.submitted_at,
            auto_submitted=result.auto_submitted,
        )

    def to_result(self) -> QuizResult:
        return QuizResult(
            id=self.id,
            quiz_id=self.quiz_id,
            student_id=self.student_id,
            score=self.score,
            total=self.total,
            submitted_at=self.submitted_at,
            auto_submitted=self.auto_submitted,
        )


class ResultStore:
    """Keeps results in memory and, optionally, appends them to a JSON-lines file."""

    def __init__(self, file_path: Path | None = None) -> None:
        self._file_path = file_path
        self._results: dict[str, QuizResult] = {}
        self._needs_newline = False
        if file_path is not None and file_path.exists():
            self._load(file_path)

    def save_result(self, result: QuizResult) -> None:
        """Record a result once. Saving an already stored id does nothing."""
        if result.id in self._results:
            return
        if self._file_path is not None:
            line = QuizResultRecord.from_result(result).model_dump_json()
            try:
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                with self._file_path.open("a", encoding="utf-8") as handle:
                    handle.write(("\n" if self._needs_newline else "") + line + "\n")
            except OSError as exc:
                logger.warning("Could not write result %s: %s", result.id, exc)
                raise ResultSaveError("Could not save result.", result) from exc
            self._needs_newline = False
        self._results[result.id] = result

    def has_result(self, result_id: str) -> bool:
        return result_id in self._results

    def list_results(
        self,
        student_id: str | None = None,
        quiz_id: str | None = None,
    ) -> list[QuizResult]:
        return [
            result
            for result in self._results.values()
            if (student_id is None or result.student_id == student_id)
            and (quiz_id is None or result.quiz_id == quiz_id)
        ]

    def best_score(self, student_id: str, quiz_id: str) -> int | None:
        scores = [result.score for result in self.list_results(student_id, quiz_id)]
        return max(scores) if scores else None

    def _load(self, file_path: Path) -> None:
        text = file_path.read_text(encoding="utf-8")
        # An interrupted append leaves the file without its final newline.
        self._needs_newline = bool(text) and not text.endswith("\n")
        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            if not raw_line.strip():
                continue
            try:
                record = QuizResultRecord.model_validate_json(raw_line)
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed result on line %s of %s: %s",
                    line_number,
                    file_path,
                    exc.errors()[0]["msg"],
                )
                continue
            self._results[record.id] = record.to_result()
        logger.info("Loaded %s results from %s", len(self._results), file_path)
