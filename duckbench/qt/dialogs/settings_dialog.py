"""
Settings Dialog for DuckBench PyQt6 GUI.

Provides interface for configuring application settings.
"""

from typing import Optional
from PyQt6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QFormLayout,
    QWidget,
    QSpinBox,
    QComboBox,
    QCheckBox,
    QLabel,
    QGroupBox,
    QDialogButtonBox,
)

from ...result_view import DEFAULT_PAGE_SIZE, MIN_COLUMN_WIDTH, PAGE_SIZES
from ...settings import get_bool_setting, get_int_setting, set_setting


class SettingsDialog(QDialog):
    """Dialog for application settings."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setWindowTitle("Settings")
        self.setMinimumWidth(400)
        self.setModal(True)

        self._setup_ui()
        self._load_settings()

    def _setup_ui(self) -> None:
        """Set up the user interface."""
        layout = QVBoxLayout(self)
        layout.setSpacing(16)

        # Appearance group
        appearance_group = QGroupBox("Appearance")
        appearance_layout = QFormLayout(appearance_group)
        appearance_layout.setSpacing(12)

        self.spin_font_size = QSpinBox()
        self.spin_font_size.setRange(8, 24)
        self.spin_font_size.setSuffix(" pt")
        appearance_layout.addRow("Font Size:", self.spin_font_size)

        layout.addWidget(appearance_group)

        # Results group
        results_group = QGroupBox("Results")
        results_layout = QFormLayout(results_group)
        results_layout.setSpacing(12)

        self.combo_page_size = QComboBox()
        for size in PAGE_SIZES:
            self.combo_page_size.addItem(f"{size} rows", size)
        results_layout.addRow("Default Page Size:", self.combo_page_size)

        self.spin_column_width = QSpinBox()
        self.spin_column_width.setRange(MIN_COLUMN_WIDTH, 1000)
        self.spin_column_width.setSuffix(" px")
        results_layout.addRow("Default Column Width:", self.spin_column_width)

        layout.addWidget(results_group)

        # Files group
        files_group = QGroupBox("Files")
        files_layout = QVBoxLayout(files_group)

        self.chk_read_only = QCheckBox("Open database files read-only")
        files_layout.addWidget(self.chk_read_only)

        desc = QLabel("Applies to files opened after the change.")
        desc.setWordWrap(True)
        desc.setProperty("subheading", True)
        files_layout.addWidget(desc)

        layout.addWidget(files_group)

        layout.addStretch()

        # Dialog buttons
        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok |
            QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._save_and_close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _load_settings(self) -> None:
        """Load current settings."""
        self.spin_font_size.setValue(get_int_setting("font_size", 13))

        page_size = get_int_setting("page_size", DEFAULT_PAGE_SIZE)
        if page_size not in PAGE_SIZES:
            page_size = DEFAULT_PAGE_SIZE
        self.combo_page_size.setCurrentIndex(PAGE_SIZES.index(page_size))

        self.spin_column_width.setValue(get_int_setting("column_width", 150))
        self.chk_read_only.setChecked(get_bool_setting("read_only"))

    def _save_and_close(self) -> None:
        """Save settings and close."""
        set_setting("font_size", str(self.spin_font_size.value()))
        set_setting("page_size", str(self.combo_page_size.currentData()))
        set_setting("column_width", str(self.spin_column_width.value()))
        set_setting("read_only", "1" if self.chk_read_only.isChecked() else "0")
        self.accept()
