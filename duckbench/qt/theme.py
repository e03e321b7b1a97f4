"""
Theme system for DuckBench PyQt6 GUI.

Uses Qt's built-in Fusion style with the standard palette or a dark one.
"""

from PyQt6.QtGui import QPalette, QColor
from PyQt6.QtWidgets import QApplication, QStyleFactory

Role = QPalette.ColorRole

_DARK_PALETTE = {
    Role.Window: (53, 53, 53),
    Role.WindowText: (255, 255, 255),
    Role.Base: (35, 35, 35),
    Role.AlternateBase: (45, 45, 45),
    Role.Text: (255, 255, 255),
    Role.Button: (53, 53, 53),
    Role.ButtonText: (255, 255, 255),
    Role.ToolTipBase: (25, 25, 25),
    Role.ToolTipText: (255, 255, 255),
    Role.PlaceholderText: (140, 140, 140),
    Role.Highlight: (42, 130, 218),
    Role.HighlightedText: (0, 0, 0),
}

# Greyed out pager buttons and actions
_DARK_DISABLED = {
    Role.WindowText: (120, 120, 120),
    Role.Text: (120, 120, 120),
    Role.ButtonText: (120, 120, 120),
}


class Theme:
    """Theme manager using Qt's Fusion style."""

    _is_dark: bool = True

    @classmethod
    def is_dark(cls) -> bool:
        return cls._is_dark

    @classmethod
    def set_dark(cls, dark: bool) -> None:
        cls._is_dark = dark

    @classmethod
    def apply(cls, app: QApplication) -> None:
        """Apply Fusion style with the palette for the current mode."""
        app.setStyle(QStyleFactory.create("Fusion"))
        if cls._is_dark:
            app.setPalette(cls._dark_palette())
        else:
            app.setPalette(app.style().standardPalette())

    @staticmethod
    def _dark_palette() -> QPalette:
        palette = QPalette()
        for role, rgb in _DARK_PALETTE.items():
            palette.setColor(role, QColor(*rgb))
        for role, rgb in _DARK_DISABLED.items():
            palette.setColor(QPalette.ColorGroup.Disabled, role, QColor(*rgb))
        return palette

    @classmethod
    def toggle(cls, app: QApplication) -> None:
        cls._is_dark = not cls._is_dark
        cls.apply(app)

    @classmethod
    def current(cls):
        """Get message colors for current theme."""
        return DarkColors() if cls._is_dark else LightColors()


class DarkColors:
    error = "#f48771"
    error_background = "#5a1d1d"
    muted = "#9d9d9d"


class LightColors:
    error = "#a1260d"
    error_background = "#f2dede"
    muted = "#6f6f6f"
