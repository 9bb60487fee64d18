"""Helper functions for common dialog patterns in the console."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def _ask(parent: QWidget, title: str, message: str) -> bool:
    reply = QMessageBox.question(
        parent,
        title,
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_submit(parent: QWidget, unanswered: int, flagged: int) -> bool:
    """Ask before submitting, mentioning unanswered and flagged questions.

    Args:
        parent: Parent widget for the dialog
        unanswered: Number of questions without an answer
        flagged: Number of questions marked for review

    Returns:
        True if user confirmed, False otherwise
    """
    details = []
    if unanswered:
        details.append(f"{unanswered} question(s) unanswered (counted as incorrect)")
    if flagged:
        details.append(f"{flagged} question(s) marked for review")
    message = "Submit the test now?"
    if details:
        message += "\n\n" + "\n".join(details)
    return _ask(parent, "Confirm Submit", message)


def confirm_leave_quiz(parent: QWidget) -> bool:
    """Warn that leaving discards the attempt."""
    return _ask(
        parent,
        "Leave Quiz",
        "Leaving now discards this attempt and nothing will be saved. Continue?",
    )


def confirm_delete_quiz(parent: QWidget, title: str) -> bool:
    return _ask(parent, "Confirm Delete", f"Are you sure you want to delete '{title}'?")


def confirm_discard_draft(parent: QWidget) -> bool:
    return _ask(parent, "Discard Draft", "The current quiz draft is not saved. Discard it?")


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
