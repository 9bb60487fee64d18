"""Component for authoring and managing quizzes as an instructor or admin."""

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import Qt
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.quiz_constants import DEFAULT_TIME_LIMIT_MINUTES, OPTION_LETTERS
from exam_app.constants.ui_constants import (
    EDITOR_ADD_QUESTION_BUTTON,
    EDITOR_DELETE_QUIZ_BUTTON,
    EDITOR_EDIT_QUIZ_BUTTON,
    EDITOR_NEW_QUIZ_BUTTON,
    EDITOR_NEXT_BUTTON,
    EDITOR_PREV_BUTTON,
    EDITOR_REMOVE_QUESTION_BUTTON,
    EDITOR_SAVE_QUIZ_BUTTON,
    PLACEHOLDER_EXPLANATION,
    PLACEHOLDER_QUESTION,
)
from exam_app.core.exam_manager import ExamManager
from exam_app.core.markdown_math_renderer import renderer
from exam_app.core.models import Question, Quiz
from exam_app.ui.dialog_helpers import (
    confirm_delete_quiz,
    confirm_discard_draft,
    show_error,
    show_info,
    show_warning,
)


@dataclass(slots=True)
class QuestionDraft:
    """Editable question state before the quiz is saved."""

    id: str = ""
    text: str = ""
    options: tuple[str, ...] = ("", "", "", "")
    correct_index: int = 0
    explanation: str = ""


class InstructorPanel(QWidget):
    """UI component for creating, editing, and deleting quizzes."""

    def __init__(self, exam_manager: ExamManager, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.exam_manager = exam_manager
        self._author: str | None = None
        self._editing_quiz_id: str = ""
        self._drafts: list[QuestionDraft] = []
        self._current_index: int = -1
        self._has_unsaved_changes: bool = False
        self._loading_fields: bool = False

        self._build_ui()
        self.reset_draft()

    def _build_ui(self) -> None:
        layout = QHBoxLayout()
        self.setLayout(layout)

        # Catalog column
        catalog_group = QGroupBox("Quizzes", self)
        catalog_layout = QVBoxLayout()
        catalog_group.setLayout(catalog_layout)
        self.quiz_list = QListWidget(self)
        catalog_layout.addWidget(self.quiz_list, stretch=1)
        self.edit_quiz_button = QPushButton(EDITOR_EDIT_QUIZ_BUTTON, self)
        self.edit_quiz_button.clicked.connect(self._handle_edit_selected)
        catalog_layout.addWidget(self.edit_quiz_button)
        self.delete_quiz_button = QPushButton(EDITOR_DELETE_QUIZ_BUTTON, self)
        self.delete_quiz_button.clicked.connect(self._handle_delete_selected)
        catalog_layout.addWidget(self.delete_quiz_button)
        layout.addWidget(catalog_group, stretch=1)

        # Editor column
        editor = QVBoxLayout()

        meta_row = QHBoxLayout()
        self.title_input = QLineEdit(self)
        self.title_input.setPlaceholderText("Quiz title")
        self.title_input.textChanged.connect(self._on_meta_changed)
        meta_row.addWidget(self.title_input, stretch=2)
        self.course_input = QLineEdit(self)
        self.course_input.setPlaceholderText("Course id")
        self.course_input.textChanged.connect(self._on_meta_changed)
        meta_row.addWidget(self.course_input, stretch=1)
        self.time_limit_spinbox = QSpinBox(self)
        self.time_limit_spinbox.setRange(1, 600)
        self.time_limit_spinbox.setSuffix(" min")
        self.time_limit_spinbox.valueChanged.connect(lambda _: self._on_meta_changed())
        meta_row.addWidget(self.time_limit_spinbox)
        editor.addLayout(meta_row)

        action_row = QHBoxLayout()
        self.new_quiz_button = QPushButton(EDITOR_NEW_QUIZ_BUTTON, self)
        self.new_quiz_button.clicked.connect(self._handle_new_quiz)
        action_row.addWidget(self.new_quiz_button)
        self.add_question_button = QPushButton(EDITOR_ADD_QUESTION_BUTTON, self)
        self.add_question_button.clicked.connect(self._handle_add_question)
        action_row.addWidget(self.add_question_button)
        self.remove_question_button = QPushButton(EDITOR_REMOVE_QUESTION_BUTTON, self)
        self.remove_question_button.clicked.connect(self._handle_remove_question)
        action_row.addWidget(self.remove_question_button)
        self.prev_button = QPushButton(EDITOR_PREV_BUTTON, self)
        self.prev_button.clicked.connect(lambda: self._navigate_drafts(-1))
        action_row.addWidget(self.prev_button)
        self.next_button = QPushButton(EDITOR_NEXT_BUTTON, self)
        self.next_button.clicked.connect(lambda: self._navigate_drafts(1))
        action_row.addWidget(self.next_button)
        editor.addLayout(action_row)

        self.question_input = QPlainTextEdit(self)
        self.question_input.setPlaceholderText(PLACEHOLDER_QUESTION)
        self.question_input.textChanged.connect(self._on_question_changed)
        editor.addWidget(self.question_input)

        options_row = QHBoxLayout()
        self.option_inputs: list[QLineEdit] = []
        for letter in OPTION_LETTERS:
            option_input = QLineEdit(self)
            option_input.setPlaceholderText(f"Option {letter}")
            option_input.textChanged.connect(self._on_question_changed)
            options_row.addWidget(option_input)
            self.option_inputs.append(option_input)
        editor.addLayout(options_row)

        selector_row = QHBoxLayout()
        selector_row.addWidget(QLabel("Correct option:", self))
        self.correct_option_combo = QComboBox(self)
        for index, letter in enumerate(OPTION_LETTERS):
            self.correct_option_combo.addItem(letter, userData=index)
        self.correct_option_combo.currentIndexChanged.connect(self._on_question_changed)
        selector_row.addWidget(self.correct_option_combo)
        selector_row.addStretch()
        editor.addLayout(selector_row)

        self.explanation_input = QLineEdit(self)
        self.explanation_input.setPlaceholderText(PLACEHOLDER_EXPLANATION)
        self.explanation_input.textChanged.connect(self._on_question_changed)
        editor.addWidget(self.explanation_input)

        self.preview_view = QWebEngineView(self)
        editor.addWidget(self.preview_view, stretch=1)

        bottom_row = QHBoxLayout()
        self.status_label = QLabel("", self)
        bottom_row.addWidget(self.status_label, stretch=1)
        self.save_quiz_button = QPushButton(EDITOR_SAVE_QUIZ_BUTTON, self)
        self.save_quiz_button.clicked.connect(self._handle_save_quiz)
        bottom_row.addWidget(self.save_quiz_button)
        editor.addLayout(bottom_row)

        layout.addLayout(editor, stretch=3)

    # --- Public API ---

    def set_author(self, author: str | None) -> None:
        self._author = author

    def refresh_quizzes(self) -> None:
        self.quiz_list.clear()
        for quiz in self.exam_manager.list_quizzes():
            item = QListWidgetItem(
                f"{quiz.title} ({quiz.course_id}) · {quiz.question_count} Qs · {quiz.time_limit_minutes} mins",
                self.quiz_list,
            )
            item.setData(Qt.UserRole, quiz.id)
            if quiz.created_by:
                item.setToolTip(f"Created by {quiz.created_by}")

    def selected_quiz_id(self) -> str | None:
        item = self.quiz_list.currentItem()
        return item.data(Qt.UserRole) if item is not None else None

    def has_unsaved_changes(self) -> bool:
        return self._has_unsaved_changes

    def reset_draft(self) -> None:
        self._editing_quiz_id = ""
        self._drafts = [QuestionDraft()]
        self._current_index = 0
        self._loading_fields = True
        self.title_input.clear()
        self.course_input.clear()
        self.time_limit_spinbox.setValue(DEFAULT_TIME_LIMIT_MINUTES)
        self._loading_fields = False
        self._populate_fields(self._drafts[0])
        self._has_unsaved_changes = False
        self.status_label.setText("Ready to create a new quiz.")

    def load_quiz(self, quiz: Quiz) -> None:
        self._editing_quiz_id = quiz.id
        self._drafts = [
            QuestionDraft(
                id=question.id,
                text=question.text,
                options=question.options,
                correct_index=question.correct_index,
                explanation=question.explanation or "",
            )
            for question in quiz.questions
        ] or [QuestionDraft()]
        self._current_index = 0
        self._loading_fields = True
        self.title_input.setText(quiz.title)
        self.course_input.setText(quiz.course_id)
        self.time_limit_spinbox.setValue(quiz.time_limit_minutes)
        self._loading_fields = False
        self._populate_fields(self._drafts[0])
        self._has_unsaved_changes = False
        self._update_status(f"Editing '{quiz.title}'.")

    # --- Handlers ---

    def _handle_new_quiz(self) -> None:
        if self._has_unsaved_changes and not confirm_discard_draft(self):
            return
        self.reset_draft()

    def _handle_add_question(self) -> None:
        self._drafts.append(QuestionDraft())
        self._current_index = len(self._drafts) - 1
        self._populate_fields(self._drafts[self._current_index])
        self._has_unsaved_changes = True
        self._update_status("Added a new question.")

    def _handle_remove_question(self) -> None:
        if len(self._drafts) <= 1:
            show_info(self, "Cannot remove", "A quiz needs at least one question.")
            return
        self._drafts.pop(self._current_index)
        self._current_index = min(self._current_index, len(self._drafts) - 1)
        self._populate_fields(self._drafts[self._current_index])
        self._has_unsaved_changes = True
        self._update_status("Removed question.")

    def _navigate_drafts(self, step: int) -> None:
        target = max(0, min(len(self._drafts) - 1, self._current_index + step))
        self._current_index = target
        self._populate_fields(self._drafts[target])
        self._update_status()

    def _handle_save_quiz(self) -> None:
        quiz = Quiz(
            id=self._editing_quiz_id,
            course_id=self.course_input.text(),
            title=self.title_input.text(),
            time_limit_minutes=int(self.time_limit_spinbox.value()),
            questions=tuple(
                Question(
                    id=draft.id,
                    text=draft.text,
                    options=draft.options,
                    correct_index=draft.correct_index,
                    explanation=draft.explanation or None,
                )
                for draft in self._drafts
            ),
        )
        try:
            saved = self.exam_manager.add_quiz(quiz, created_by=self._author)
        except ValueError as exc:
            show_warning(self, "Invalid quiz", str(exc))
            return
        self._editing_quiz_id = saved.id
        self._has_unsaved_changes = False
        self.refresh_quizzes()
        self._update_status(f"Saved '{saved.title}' with {saved.question_count} questions.")

    def _handle_edit_selected(self) -> None:
        quiz_id = self.selected_quiz_id()
        if quiz_id is None:
            show_info(self, "No selection", "Select a quiz to edit.")
            return
        if self._has_unsaved_changes and not confirm_discard_draft(self):
            return
        try:
            self.load_quiz(self.exam_manager.get_quiz(quiz_id))
        except KeyError as exc:
            show_error(self, "Quiz unavailable", str(exc))
            self.refresh_quizzes()

    def _handle_delete_selected(self) -> None:
        item = self.quiz_list.currentItem()
        if item is None:
            show_info(self, "No selection", "Select a quiz to delete.")
            return
        quiz_id = item.data(Qt.UserRole)
        try:
            quiz = self.exam_manager.get_quiz(quiz_id)
        except KeyError as exc:
            show_error(self, "Delete failed", str(exc))
            self.refresh_quizzes()
            return
        if not confirm_delete_quiz(self, quiz.title):
            return
        self.exam_manager.delete_quiz(quiz_id)
        if quiz_id == self._editing_quiz_id:
            self.reset_draft()
        self.refresh_quizzes()

    # --- Field syncing ---

    def _on_meta_changed(self) -> None:
        if not self._loading_fields:
            self._has_unsaved_changes = True

    def _on_question_changed(self) -> None:
        if self._loading_fields or not 0 <= self._current_index < len(self._drafts):
            return
        draft = self._drafts[self._current_index]
        draft.text = self.question_input.toPlainText().strip()
        draft.options = tuple(field.text() for field in self.option_inputs)
        draft.correct_index = int(self.correct_option_combo.currentData() or 0)
        draft.explanation = self.explanation_input.text().strip()
        self._has_unsaved_changes = True
        self._refresh_preview(draft)

    def _populate_fields(self, draft: QuestionDraft) -> None:
        self._loading_fields = True
        self.question_input.setPlainText(draft.text)
        for field, text in zip(self.option_inputs, draft.options):
            field.setText(text)
        self.correct_option_combo.setCurrentIndex(draft.correct_index)
        self.explanation_input.setText(draft.explanation)
        self._loading_fields = False
        self._refresh_preview(draft)
        self.prev_button.setEnabled(self._current_index > 0)
        self.next_button.setEnabled(self._current_index < len(self._drafts) - 1)

    def _refresh_preview(self, draft: QuestionDraft) -> None:
        html = renderer.render_question_document(
            draft.text,
            draft.options,
            explanation=draft.explanation or None,
        )
        self.preview_view.setHtml(html)

    def _update_status(self, message: str | None = None) -> None:
        position = f"Question {self._current_index + 1} of {len(self._drafts)}."
        self.status_label.setText(f"{message} {position}" if message else position)
