"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "ExamQt Console"
PLACEHOLDER_QUESTION: str = "Enter your question text (supports Markdown + LaTeX)."
PLACEHOLDER_EXPLANATION: str = "Explanation shown after submission (optional)."
DEFAULT_STUDENT_NAME: str = "student"
TICK_INTERVAL_MS: int = 1000

ROLE_LABELS: dict[str, str] = {
    "STUDENT": "Student",
    "INSTRUCTOR": "Instructor",
    "ADMIN": "Admin",
}

TOP_BUTTON_IMPORT: str = "Import Quiz"
TOP_BUTTON_EXPORT: str = "Export Quiz"
TOP_BUTTON_ABOUT: str = "About ExamQt"
TOP_BUTTON_HELP: str = "Help"

IMPORT_DIALOG_TITLE: str = "Select quiz file"
IMPORT_FILE_FILTER: str = "Quiz files (*.txt);;All files (*.*)"
EXPORT_DIALOG_TITLE: str = "Save quiz to file"
EXPORT_FILE_FILTER: str = "Quiz files (*.txt);;All files (*.*)"

STUDENT_START_BUTTON: str = "Start"
STUDENT_PREV_BUTTON: str = "Previous"
STUDENT_NEXT_BUTTON: str = "Next"
STUDENT_SUBMIT_BUTTON: str = "Submit Test"
STUDENT_EXIT_BUTTON: str = "Leave Quiz"
STUDENT_FLAG_BUTTON: str = "Mark for Review"
STUDENT_FLAGGED_BUTTON: str = "Marked for Review"
STUDENT_BACK_BUTTON: str = "Back to Quizzes"
STUDENT_RETRY_SAVE_BUTTON: str = "Retry Saving Result"
NO_QUIZZES_MESSAGE: str = "No quizzes available yet."
SAVE_FAILED_MESSAGE: str = "Could not save your result. Your answers are kept; press Retry to try again."

EDITOR_NEW_QUIZ_BUTTON: str = "New Quiz"
EDITOR_ADD_QUESTION_BUTTON: str = "Add Question"
EDITOR_REMOVE_QUESTION_BUTTON: str = "Remove Question"
EDITOR_PREV_BUTTON: str = "Previous Question"
EDITOR_NEXT_BUTTON: str = "Next Question"
EDITOR_SAVE_QUIZ_BUTTON: str = "Save Quiz"
EDITOR_DELETE_QUIZ_BUTTON: str = "Delete Selected Quiz"
EDITOR_EDIT_QUIZ_BUTTON: str = "Edit Selected Quiz"

PALETTE_COLUMNS: int = 4
