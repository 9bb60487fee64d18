"""Qt UI components for the exam console."""

from .dialog_helpers import (
    confirm_delete_quiz,
    confirm_discard_draft,
    confirm_leave_quiz,
    confirm_submit,
    show_error,
    show_info,
    show_warning,
)
from .main_window import ROLE_VIEW_INDEX, ExamMainWindow

__all__ = [
    "ExamMainWindow",
    "ROLE_VIEW_INDEX",
    "confirm_delete_quiz",
    "confirm_discard_draft",
    "confirm_leave_quiz",
    "confirm_submit",
    "show_error",
    "show_info",
    "show_warning",
]
