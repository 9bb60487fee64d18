"""Color palette for the ExamQt console supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the console."""

    TEXT_PRIMARY = ThemeColors(light="#111827", dark="#F5F5F5")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")

    BORDER_PRIMARY = ThemeColors(light="#D1D5DB", dark="#555555")

    BUTTON_PRIMARY_BG = ThemeColors(light="#2563EB", dark="#4A9EFF")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#000000")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F3F4F6", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E5E7EB", dark="#505050")

    # Question palette states
    PALETTE_CURRENT_BORDER = ThemeColors(light="#2563EB", dark="#4A9EFF")
    PALETTE_FLAGGED_BG = ThemeColors(light="#FEF3C7", dark="#5C4A12")
    PALETTE_FLAGGED_BORDER = ThemeColors(light="#FBBF24", dark="#FFC83D")
    PALETTE_ANSWERED_BG = ThemeColors(light="#DCFCE7", dark="#1F4D2B")
    PALETTE_ANSWERED_BORDER = ThemeColors(light="#4ADE80", dark="#6FCF6F")
    PALETTE_NOT_VISITED_BG = ThemeColors(light="#FFFFFF", dark="#2D2D2D")

    SUCCESS = ThemeColors(light="#15803D", dark="#6FCF6F")
    ERROR = ThemeColors(light="#DC2626", dark="#FF6B6B")
