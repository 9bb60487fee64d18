"""FastAPI server that exposes the quiz catalog, assessment sessions and results."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Response
from pydantic import BaseModel
import uvicorn

from exam_app.constants.about import APP_NAME, APP_VERSION
from exam_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from exam_app.core.exam_manager import ExamManager
from exam_app.core.markdown_math_renderer import renderer
from exam_app.core.models import Quiz, QuizResult, SessionSnapshot, SessionState
from exam_app.core.services.assessment_session import EmptyQuizError
from exam_app.core.services.result_review import (
    build_review,
    format_remaining,
    is_time_running_low,
)
from exam_app.core.services.result_store import ResultSaveError

logger = logging.getLogger(__name__)

_SAVE_FAILED_DETAIL = "Could not save result. Please retry."


class StartSessionPayload(BaseModel):
    """Payload schema for starting a quiz attempt."""

    quiz_id: str
    student_id: str


class AnswerPayload(BaseModel):
    """Payload schema for selecting an option."""

    option_index: int


class NavigatePayload(BaseModel):
    """Payload schema for moving to another question."""

    target_index: int


def _get_exam_manager_dependency(exam_manager: ExamManager):
    def dependency() -> ExamManager:
        return exam_manager

    return dependency


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0]) if exc.args else "Not found") from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


def _quiz_summary(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.id,
        "course_id": quiz.course_id,
        "title": quiz.title,
        "time_limit_minutes": quiz.time_limit_minutes,
        "question_count": quiz.question_count,
    }


def _quiz_for_taking(quiz: Quiz) -> dict[str, object]:
    """Quiz payload with rendered text and without correct answers."""
    payload = _quiz_summary(quiz)
    payload["questions"] = [
        {
            "id": question.id,
            "text": question.text,
            "question_html": renderer.render_fragment(question.text),
            "options": list(question.options),
        }
        for question in quiz.questions
    ]
    return payload


def _result_payload(result: QuizResult) -> dict[str, object]:
    return {
        "id": result.id,
        "quiz_id": result.quiz_id,
        "student_id": result.student_id,
        "score": result.score,
        "total": result.total,
        "submitted_at": result.submitted_at.isoformat(),
        "auto_submitted": result.auto_submitted,
    }


def _session_payload(snapshot: SessionSnapshot, manager: ExamManager) -> dict[str, object]:
    palette = [snapshot.question_status(index).value for index in range(snapshot.question_count)]
    payload: dict[str, object] = {
        "session_id": snapshot.session_id,
        "quiz_id": snapshot.quiz_id,
        "student_id": snapshot.student_id,
        "state": snapshot.state.value,
        "current_index": snapshot.current_index,
        "question_count": snapshot.question_count,
        "answers": {str(k): v for k, v in sorted(snapshot.answers.items())},
        "flagged": sorted(snapshot.flagged),
        "remaining_seconds": snapshot.remaining_seconds,
        "remaining_display": format_remaining(snapshot.remaining_seconds),
        "time_running_low": is_time_running_low(snapshot.remaining_seconds),
        "palette": palette,
        "result": None,
        "review": None,
    }
    if snapshot.state is SessionState.SUBMITTED and snapshot.result is not None:
        payload["result"] = _result_payload(snapshot.result)
        quiz = manager.get_session_quiz(snapshot.session_id)
        payload["review"] = [
            {
                "index": row.index,
                "question_text": row.question_text,
                "your_answer": row.chosen_option,
                "correct_answer": row.correct_option,
                "is_correct": row.is_correct,
                "explanation": row.explanation,
            }
            for row in build_review(quiz, snapshot.answers)
        ]
    return payload


def create_api_app(exam_manager: ExamManager) -> FastAPI:
    """Create a FastAPI application wired to the provided exam manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    exam_manager_dep = _get_exam_manager_dependency(exam_manager)

    @app.get("/health")
    def health(manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        return {
            "status": "ok",
            "active_sessions": manager.get_active_session_count(),
            "pending_results": len(manager.get_pending_results()),
        }

    @app.get("/quizzes")
    def list_quizzes(
        course_id: str | None = None,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> list[dict[str, object]]:
        return [_quiz_summary(quiz) for quiz in manager.list_quizzes(course_id)]

    @app.get("/quizzes/{quiz_id}")
    def get_quiz(quiz_id: str, manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        with _translate_errors():
            quiz = manager.get_quiz(quiz_id)
        return _quiz_for_taking(quiz)

    @app.post("/sessions", status_code=201)
    def start_session(
        payload: StartSessionPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        student_id = payload.student_id.strip()
        if not student_id:
            raise HTTPException(status_code=422, detail="Student id must not be empty.")
        try:
            snapshot = manager.start_session(payload.quiz_id, student_id)
        except EmptyQuizError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
        return _session_payload(snapshot, manager)

    @app.get("/sessions/{session_id}")
    def get_session(session_id: str, manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        with _translate_errors():
            snapshot = manager.get_session(session_id)
            return _session_payload(snapshot, manager)

    @app.put("/sessions/{session_id}/answers/{question_index}")
    def select_answer(
        session_id: str,
        question_index: int,
        payload: AnswerPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        with _translate_errors():
            snapshot = manager.select_answer(session_id, question_index, payload.option_index)
        return _session_payload(snapshot, manager)

    @app.post("/sessions/{session_id}/flags/{question_index}")
    def toggle_flag(
        session_id: str,
        question_index: int,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        with _translate_errors():
            snapshot = manager.toggle_flag(session_id, question_index)
        return _session_payload(snapshot, manager)

    @app.post("/sessions/{session_id}/navigate")
    def navigate(
        session_id: str,
        payload: NavigatePayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        with _translate_errors():
            snapshot = manager.navigate(session_id, payload.target_index)
            return _session_payload(snapshot, manager)

    @app.post("/sessions/{session_id}/submit")
    def submit_session(session_id: str, manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        try:
            with _translate_errors():
                manager.submit_session(session_id)
        except ResultSaveError as exc:
            raise HTTPException(
                status_code=503,
                detail={"message": _SAVE_FAILED_DETAIL, "result_id": exc.result.id},
            ) from exc
        with _translate_errors():
            return _session_payload(manager.get_session(session_id), manager)

    @app.delete("/sessions/{session_id}", status_code=204)
    def abandon_session(session_id: str, manager: ExamManager = Depends(exam_manager_dep)) -> Response:
        with _translate_errors():
            manager.abandon_session(session_id)
        return Response(status_code=204)

    @app.get("/results")
    def list_results(
        student_id: str | None = None,
        quiz_id: str | None = None,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> list[dict[str, object]]:
        return [_result_payload(result) for result in manager.list_results(student_id, quiz_id)]

    @app.post("/results/{result_id}/retry")
    def retry_result(result_id: str, manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        try:
            with _translate_errors():
                result = manager.retry_result_save(result_id)
        except ResultSaveError as exc:
            raise HTTPException(
                status_code=503,
                detail={"message": _SAVE_FAILED_DETAIL, "result_id": exc.result.id},
            ) from exc
        return _result_payload(result)

    return app


def start_api_server(
    exam_manager: ExamManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(exam_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="ExamApiServer", daemon=True)
    thread.start()
    logger.info("API server listening on %s:%s", host, port)
    return thread
