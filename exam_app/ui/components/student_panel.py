"""Component for browsing, taking and reviewing quizzes as a student."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.quiz_constants import OPTION_LETTERS
from exam_app.constants.ui_constants import (
    NO_QUIZZES_MESSAGE,
    PALETTE_COLUMNS,
    SAVE_FAILED_MESSAGE,
    STUDENT_BACK_BUTTON,
    STUDENT_EXIT_BUTTON,
    STUDENT_FLAG_BUTTON,
    STUDENT_FLAGGED_BUTTON,
    STUDENT_NEXT_BUTTON,
    STUDENT_PREV_BUTTON,
    STUDENT_RETRY_SAVE_BUTTON,
    STUDENT_START_BUTTON,
    STUDENT_SUBMIT_BUTTON,
    TICK_INTERVAL_MS,
)
from exam_app.core.exam_manager import ExamManager
from exam_app.core.markdown_math_renderer import renderer
from exam_app.core.models import QuizResult
from exam_app.core.services.assessment_session import AssessmentSession, EmptyQuizError
from exam_app.core.services.result_review import (
    build_review,
    format_remaining,
    is_time_running_low,
)
from exam_app.core.services.result_store import ResultSaveError
from exam_app.styling.styles import Styles
from exam_app.ui.dialog_helpers import (
    confirm_leave_quiz,
    confirm_submit,
    show_error,
    show_warning,
)

logger = logging.getLogger(__name__)

_LIST_PAGE, _TAKE_PAGE, _RESULT_PAGE = range(3)


class StudentPanel(QWidget):
    """UI component that runs a client-held assessment session."""

    def __init__(self, exam_manager: ExamManager, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.exam_manager = exam_manager
        self._student_id: str = ""
        self._session: AssessmentSession | None = None
        self._unsaved_result: QuizResult | None = None
        self._palette_buttons: list[QPushButton] = []

        self._build_ui()
        self._configure_tick_timer()

    # --- Layout ---

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)
        self.pages = QStackedWidget(self)
        self.pages.addWidget(self._build_list_page())
        self.pages.addWidget(self._build_take_page())
        self.pages.addWidget(self._build_result_page())
        layout.addWidget(self.pages)

    def _build_list_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        self.quiz_list = QListWidget(page)
        self.quiz_list.itemDoubleClicked.connect(lambda _: self._handle_start_quiz())
        layout.addWidget(self.quiz_list, stretch=1)

        self.empty_label = QLabel(NO_QUIZZES_MESSAGE, page)
        self.empty_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.empty_label)

        self.start_button = QPushButton(STUDENT_START_BUTTON, page)
        self.start_button.clicked.connect(self._handle_start_quiz)
        layout.addWidget(self.start_button)
        return page

    def _build_take_page(self) -> QWidget:
        page = QWidget(self)
        root = QVBoxLayout()
        page.setLayout(root)

        header = QHBoxLayout()
        self.quiz_title_label = QLabel("", page)
        self.quiz_title_label.setStyleSheet(Styles.get_large_label_style())
        header.addWidget(self.quiz_title_label)
        header.addStretch()
        self.timer_label = QLabel("", page)
        header.addWidget(self.timer_label)
        root.addLayout(header)

        body = QHBoxLayout()
        question_column = QVBoxLayout()

        progress_row = QHBoxLayout()
        self.progress_label = QLabel("", page)
        progress_row.addWidget(self.progress_label)
        progress_row.addStretch()
        self.flag_button = QPushButton(STUDENT_FLAG_BUTTON, page)
        self.flag_button.setCheckable(True)
        self.flag_button.clicked.connect(self._handle_toggle_flag)
        progress_row.addWidget(self.flag_button)
        question_column.addLayout(progress_row)

        self.question_view = QWebEngineView(page)
        question_column.addWidget(self.question_view, stretch=1)

        self.option_buttons: list[QPushButton] = []
        for index, letter in enumerate(OPTION_LETTERS):
            button = QPushButton(letter, page)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked, i=index: self._handle_select_option(i))
            question_column.addWidget(button)
            self.option_buttons.append(button)

        nav_row = QHBoxLayout()
        self.prev_button = QPushButton(STUDENT_PREV_BUTTON, page)
        self.prev_button.clicked.connect(self._handle_previous)
        nav_row.addWidget(self.prev_button)
        self.leave_button = QPushButton(STUDENT_EXIT_BUTTON, page)
        self.leave_button.clicked.connect(self._handle_leave_quiz)
        nav_row.addWidget(self.leave_button)
        nav_row.addStretch()
        self.next_button = QPushButton(STUDENT_NEXT_BUTTON, page)
        self.next_button.clicked.connect(self._handle_next)
        nav_row.addWidget(self.next_button)
        self.submit_button = QPushButton(STUDENT_SUBMIT_BUTTON, page)
        self.submit_button.clicked.connect(self._handle_submit_clicked)
        nav_row.addWidget(self.submit_button)
        question_column.addLayout(nav_row)

        body.addLayout(question_column, stretch=3)

        palette_group = QGroupBox("Question Palette", page)
        palette_group.setMinimumWidth(220)
        self.palette_grid = QGridLayout()
        palette_group.setLayout(self.palette_grid)
        body.addWidget(palette_group, stretch=1)

        root.addLayout(body, stretch=1)
        return page

    def _build_result_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        self.score_label = QLabel("", page)
        self.score_label.setAlignment(Qt.AlignCenter)
        self.score_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.score_label)

        self.save_status_label = QLabel("", page)
        self.save_status_label.setWordWrap(True)
        layout.addWidget(self.save_status_label)

        self.retry_save_button = QPushButton(STUDENT_RETRY_SAVE_BUTTON, page)
        self.retry_save_button.clicked.connect(self._handle_retry_save)
        self.retry_save_button.setVisible(False)
        layout.addWidget(self.retry_save_button)

        self.review_container = QWidget(page)
        self.review_layout = QVBoxLayout()
        self.review_container.setLayout(self.review_layout)
        scroll = QScrollArea(page)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.review_container)
        layout.addWidget(scroll, stretch=1)

        self.back_button = QPushButton(STUDENT_BACK_BUTTON, page)
        self.back_button.clicked.connect(self._handle_back_to_list)
        layout.addWidget(self.back_button)
        return page

    def _configure_tick_timer(self) -> None:
        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(TICK_INTERVAL_MS)
        self.tick_timer.timeout.connect(self._handle_tick)

    # --- Public API ---

    def set_student(self, student_id: str) -> None:
        self._student_id = student_id

    def refresh_quizzes(self) -> None:
        self.quiz_list.clear()
        quizzes = self.exam_manager.list_quizzes()
        for quiz in quizzes:
            item = QListWidgetItem(
                f"{quiz.title}  ({quiz.course_id})  ·  {quiz.time_limit_minutes} mins  ·  "
                f"{quiz.question_count} questions",
                self.quiz_list,
            )
            item.setData(Qt.UserRole, quiz.id)
        self.empty_label.setVisible(not quizzes)
        self.start_button.setEnabled(bool(quizzes))

    def is_taking_quiz(self) -> bool:
        return self._session is not None and self._session.is_active()

    def abandon_active_session(self) -> None:
        """Stop the clock and discard an unfinished attempt."""
        self.tick_timer.stop()
        if self._session is not None and self._session.is_active():
            self._session.abandon()
        self._session = None
        self.pages.setCurrentIndex(_LIST_PAGE)

    # --- Quiz list ---

    def _handle_start_quiz(self) -> None:
        item = self.quiz_list.currentItem()
        if item is None:
            show_warning(self, "No quiz selected", "Select a quiz to start.")
            return
        try:
            quiz = self.exam_manager.get_quiz(item.data(Qt.UserRole))
        except KeyError as exc:
            show_error(self, "Quiz unavailable", str(exc))
            self.refresh_quizzes()
            return

        session = AssessmentSession(student_id=self._student_id)
        try:
            session.start(quiz)
        except EmptyQuizError as exc:
            show_warning(self, "Quiz unavailable", str(exc))
            return

        self._session = session
        self._unsaved_result = None
        self.quiz_title_label.setText(quiz.title)
        self._rebuild_palette(quiz.question_count)
        self.pages.setCurrentIndex(_TAKE_PAGE)
        self._render_current_question()
        self._update_timer_label()
        self.tick_timer.start()

    # --- Taking ---

    def _handle_tick(self) -> None:
        if self._session is None:
            self.tick_timer.stop()
            return
        result = self._session.tick()
        self._update_timer_label()
        if result is not None:
            self._finish(result, timed_out=True)

    def _handle_select_option(self, option_index: int) -> None:
        if not self.is_taking_quiz():
            return
        self._session.select_answer(self._session.current_index, option_index)
        self._render_current_question()

    def _handle_toggle_flag(self) -> None:
        if not self.is_taking_quiz():
            return
        self._session.toggle_flag(self._session.current_index)
        self._render_current_question()

    def _handle_previous(self) -> None:
        if self._session is not None:
            self._session.previous()
            self._render_current_question()

    def _handle_next(self) -> None:
        if self._session is not None:
            self._session.next()
            self._render_current_question()

    def _handle_palette_click(self, question_index: int) -> None:
        if self._session is not None:
            self._session.navigate(question_index)
            self._render_current_question()

    def _handle_submit_clicked(self) -> None:
        if not self.is_taking_quiz():
            return
        session = self._session
        unanswered = session.question_count() - session.answered_count()
        if not confirm_submit(self, unanswered, len(session.flagged)):
            return
        if not session.is_active():
            # The clock ran out while the dialog was open.
            return
        self._finish(session.submit(), timed_out=False)

    def _handle_leave_quiz(self) -> None:
        if not self.is_taking_quiz() or not confirm_leave_quiz(self):
            return
        if not self.is_taking_quiz():
            return
        self.abandon_active_session()
        self.refresh_quizzes()

    def _render_current_question(self) -> None:
        session = self._session
        if session is None or session.quiz is None:
            return
        index = session.current_index
        question = session.quiz.questions[index]
        total = session.question_count()

        self.progress_label.setText(f"Question {index + 1} / {total}")
        self.question_view.setHtml(renderer.render_question_document(question.text, question.options))

        chosen = session.answers.get(index)
        for option_index, button in enumerate(self.option_buttons):
            text = question.options[option_index] if option_index < len(question.options) else ""
            button.setText(f"{OPTION_LETTERS[option_index]}. {text}")
            button.setChecked(chosen == option_index)

        flagged = index in session.flagged
        self.flag_button.setChecked(flagged)
        self.flag_button.setText(STUDENT_FLAGGED_BUTTON if flagged else STUDENT_FLAG_BUTTON)

        self.prev_button.setEnabled(session.can_go_previous())
        on_last = not session.can_go_next()
        self.next_button.setVisible(not on_last)
        self.submit_button.setVisible(on_last)

        for question_index, button in enumerate(self._palette_buttons):
            button.setStyleSheet(Styles.get_palette_button_style(session.question_status(question_index)))

    def _rebuild_palette(self, question_count: int) -> None:
        while self.palette_grid.count():
            item = self.palette_grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._palette_buttons = []
        for index in range(question_count):
            button = QPushButton(str(index + 1), self)
            button.clicked.connect(lambda _checked, i=index: self._handle_palette_click(i))
            row, column = divmod(index, PALETTE_COLUMNS)
            self.palette_grid.addWidget(button, row, column)
            self._palette_buttons.append(button)

    def _update_timer_label(self) -> None:
        if self._session is None:
            self.timer_label.setText("")
            return
        remaining = self._session.remaining_seconds
        self.timer_label.setText(format_remaining(remaining))
        self.timer_label.setStyleSheet(Styles.get_timer_style(is_time_running_low(remaining)))

    # --- Result ---

    def _finish(self, result: QuizResult, timed_out: bool) -> None:
        self.tick_timer.stop()
        self._show_result(result, timed_out)
        self._save_result(result)

    def _save_result(self, result: QuizResult) -> None:
        try:
            self.exam_manager.save_result(result)
        except ResultSaveError:
            self._unsaved_result = result
            self.save_status_label.setText(SAVE_FAILED_MESSAGE)
            self.save_status_label.setStyleSheet(Styles.get_result_style(False))
            self.retry_save_button.setVisible(True)
            return
        self._unsaved_result = None
        self.save_status_label.setText("Result saved.")
        self.save_status_label.setStyleSheet(Styles.get_result_style(True))
        self.retry_save_button.setVisible(False)

    def _handle_retry_save(self) -> None:
        if self._unsaved_result is None:
            return
        result = self._unsaved_result
        try:
            self.exam_manager.ensure_result_saved(result)
        except ResultSaveError:
            show_warning(self, "Save failed", SAVE_FAILED_MESSAGE)
            return
        logger.info("Result %s saved on retry", result.id)
        self._unsaved_result = None
        self.save_status_label.setText("Result saved.")
        self.save_status_label.setStyleSheet(Styles.get_result_style(True))
        self.retry_save_button.setVisible(False)

    def _show_result(self, result: QuizResult, timed_out: bool) -> None:
        session = self._session
        prefix = "Time is up! " if timed_out else ""
        self.score_label.setText(f"{prefix}You scored {result.score} / {result.total}")

        while self.review_layout.count():
            item = self.review_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        if session is not None and session.quiz is not None:
            for row in build_review(session.quiz, session.answers):
                lines = [
                    f"{row.index + 1}. {row.question_text}",
                    f"Your answer: {row.chosen_option or 'Skipped'}",
                    f"Correct answer: {row.correct_option}",
                ]
                if row.explanation:
                    lines.append(f"Explanation: {row.explanation}")
                label = QLabel("\n".join(lines), self.review_container)
                label.setWordWrap(True)
                label.setStyleSheet(Styles.get_result_style(row.is_correct))
                self.review_layout.addWidget(label)
        self.review_layout.addStretch()
        self.pages.setCurrentIndex(_RESULT_PAGE)

    def _handle_back_to_list(self) -> None:
        self._session = None
        self._unsaved_result = None
        self.save_status_label.setText("")
        self.retry_save_button.setVisible(False)
        self.refresh_quizzes()
        self.pages.setCurrentIndex(_LIST_PAGE)
