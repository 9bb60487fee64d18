"""Qt main window dispatching between the student and instructor views."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from exam_app.constants.storage_constants import DEFAULT_QUIZ_DIRECTORY
from exam_app.constants.ui_constants import (
    DEFAULT_STUDENT_NAME,
    EXPORT_DIALOG_TITLE,
    EXPORT_FILE_FILTER,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    ROLE_LABELS,
    TOP_BUTTON_ABOUT,
    TOP_BUTTON_EXPORT,
    TOP_BUTTON_HELP,
    TOP_BUTTON_IMPORT,
    WINDOW_TITLE,
)
from exam_app.core.exam_manager import ExamManager
from exam_app.core.models import UserRole
from exam_app.core.quiz_exporter import save_quiz_to_file
from exam_app.core.quiz_importer import (
    QuizImportError,
    load_quiz_from_file,
    load_quizzes_from_directory,
)
from exam_app.styling.styles import Styles
from exam_app.ui.components.instructor_panel import InstructorPanel
from exam_app.ui.components.student_panel import StudentPanel
from exam_app.ui.dialog_helpers import (
    confirm_leave_quiz,
    show_error,
    show_info,
    show_warning,
)

logger = logging.getLogger(__name__)

# Stacked page shown for each role. Admins share the instructor view.
ROLE_VIEW_INDEX: dict[UserRole, int] = {
    UserRole.STUDENT: 0,
    UserRole.INSTRUCTOR: 1,
    UserRole.ADMIN: 1,
}


class ExamMainWindow(QMainWindow):
    """Main Qt window holding the role picker and the role views."""

    def __init__(self, exam_manager: ExamManager, default_quiz_directory: Path | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.exam_manager = exam_manager
        self._role = UserRole.STUDENT
        self._last_export_path: Path | None = None

        self._build_ui()
        self._apply_styles()
        self._auto_load_default_quizzes(default_quiz_directory or DEFAULT_QUIZ_DIRECTORY)
        self._set_role(UserRole.STUDENT)

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_top_bar(root_layout)

        self.view_stack = QStackedWidget(self)
        self.student_panel = StudentPanel(self.exam_manager, self)
        self.instructor_panel = InstructorPanel(self.exam_manager, self)
        self.view_stack.addWidget(self.student_panel)
        self.view_stack.addWidget(self.instructor_panel)
        root_layout.addWidget(self.view_stack)

    def _build_top_bar(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        button_row.addWidget(QLabel("Name:", self))
        self.name_input = QLineEdit(self)
        self.name_input.setText(DEFAULT_STUDENT_NAME)
        self.name_input.editingFinished.connect(self._handle_name_changed)
        button_row.addWidget(self.name_input)

        button_row.addWidget(QLabel("Role:", self))
        self.role_combo = QComboBox(self)
        for role in UserRole:
            self.role_combo.addItem(ROLE_LABELS[role.value], userData=role)
        self.role_combo.currentIndexChanged.connect(self._handle_role_changed)
        button_row.addWidget(self.role_combo)

        self.import_button = QPushButton(TOP_BUTTON_IMPORT, self)
        self.import_button.clicked.connect(self._handle_import_quiz)
        button_row.addWidget(self.import_button)

        self.export_button = QPushButton(TOP_BUTTON_EXPORT, self)
        self.export_button.clicked.connect(self._handle_export_quiz)
        button_row.addWidget(self.export_button)

        button_row.addStretch()

        self.about_button = QPushButton(TOP_BUTTON_ABOUT, self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton(TOP_BUTTON_HELP, self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        layout.addLayout(button_row)

    # --- Role dispatch ---

    def _current_user(self) -> str:
        return self.name_input.text().strip() or DEFAULT_STUDENT_NAME

    def _handle_name_changed(self) -> None:
        self.student_panel.set_student(self._current_user())
        self.instructor_panel.set_author(self._current_user())

    def _handle_role_changed(self, index: int) -> None:
        role = self.role_combo.itemData(index)
        if role is None or role is self._role:
            return
        if self.student_panel.is_taking_quiz():
            if not confirm_leave_quiz(self):
                self.role_combo.blockSignals(True)
                self.role_combo.setCurrentIndex(list(UserRole).index(self._role))
                self.role_combo.blockSignals(False)
                return
            if self.student_panel.is_taking_quiz():
                self.student_panel.abandon_active_session()
        self._set_role(role)

    def _set_role(self, role: UserRole) -> None:
        self._role = role
        manages_quizzes = role is not UserRole.STUDENT
        self.import_button.setEnabled(manages_quizzes)
        self.export_button.setEnabled(manages_quizzes)
        self._handle_name_changed()
        if manages_quizzes:
            self.instructor_panel.refresh_quizzes()
        else:
            self.student_panel.refresh_quizzes()
        self.view_stack.setCurrentIndex(ROLE_VIEW_INDEX[role])
        logger.info("Console switched to %s view", role.value)

    # --- Import / export ---

    def _handle_import_quiz(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(Path.home()),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            imported = load_quiz_from_file(Path(file_path))
        except (OSError, QuizImportError) as exc:
            show_error(self, "Import failed", str(exc))
            return

        try:
            quiz = self.exam_manager.add_quiz(imported.quiz, created_by=self._current_user())
        except ValueError as exc:
            show_error(self, "Quiz rejected", str(exc))
            return

        self.instructor_panel.refresh_quizzes()
        self.instructor_panel.load_quiz(quiz)
        show_info(
            self,
            "Quiz imported",
            f"Imported '{quiz.title}' with {quiz.question_count} questions.",
        )

    def _handle_export_quiz(self) -> None:
        quiz_id = self.instructor_panel.selected_quiz_id()
        if quiz_id is None:
            show_warning(self, "No quiz", "Select a saved quiz in the list to export it.")
            return
        try:
            quiz = self.exam_manager.get_quiz(quiz_id)
        except KeyError as exc:
            show_error(self, "Export failed", str(exc))
            return

        default_path = self._last_export_path or (Path.cwd() / f"{quiz.course_id}_{quiz.title}.txt")
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            EXPORT_DIALOG_TITLE,
            str(default_path),
            EXPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            save_quiz_to_file(Path(file_path), quiz)
        except (OSError, ValueError) as exc:
            show_error(self, "Export failed", str(exc))
            return

        self._last_export_path = Path(file_path)
        show_info(self, "Quiz saved", f"Quiz exported to {file_path}.")

    def _auto_load_default_quizzes(self, directory: Path) -> None:
        if not directory.is_dir():
            return
        loaded = 0
        for imported in load_quizzes_from_directory(directory):
            try:
                self.exam_manager.add_quiz(imported.quiz)
            except ValueError as exc:
                logger.warning("Skipping %s: %s", imported.source_path, exc)
                continue
            loaded += 1
        logger.info("Auto-loaded %s quizzes from %s", loaded, directory)

    # --- Info ---

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style())

    def closeEvent(self, event) -> None:
        if self.student_panel.is_taking_quiz():
            self.student_panel.abandon_active_session()
        super().closeEvent(event)
