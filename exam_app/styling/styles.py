"""Centralized Qt stylesheets for the console."""

from exam_app.core.models import QuestionStatus

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow, QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:checked {{
                background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
            }}
            QLineEdit, QPlainTextEdit, QSpinBox, QComboBox, QListWidget {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
        """

    @staticmethod
    def get_palette_button_style(status: QuestionStatus, theme: Theme = Theme.LIGHT) -> str:
        background = ColorPalette.PALETTE_NOT_VISITED_BG.get(theme)
        border = ColorPalette.BORDER_PRIMARY.get(theme)
        if status is QuestionStatus.CURRENT:
            border = ColorPalette.PALETTE_CURRENT_BORDER.get(theme)
        elif status is QuestionStatus.FLAGGED:
            background = ColorPalette.PALETTE_FLAGGED_BG.get(theme)
            border = ColorPalette.PALETTE_FLAGGED_BORDER.get(theme)
        elif status is QuestionStatus.ANSWERED:
            background = ColorPalette.PALETTE_ANSWERED_BG.get(theme)
            border = ColorPalette.PALETTE_ANSWERED_BORDER.get(theme)
        width = 2 if status is QuestionStatus.CURRENT else 1
        return (
            f"background-color: {background}; border: {width}px solid {border}; "
            "border-radius: 4px; min-width: 36px; min-height: 36px;"
        )

    @staticmethod
    def get_timer_style(running_low: bool, theme: Theme = Theme.LIGHT) -> str:
        color = ColorPalette.ERROR.get(theme) if running_low else ColorPalette.TEXT_PRIMARY.get(theme)
        return f"font-family: monospace; font-size: 16pt; font-weight: bold; color: {color};"

    @staticmethod
    def get_result_style(is_correct: bool, theme: Theme = Theme.LIGHT) -> str:
        color = ColorPalette.SUCCESS.get(theme) if is_correct else ColorPalette.ERROR.get(theme)
        return f"color: {color};"

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"
