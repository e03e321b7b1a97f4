"""
Main application window for DuckBench PyQt6 GUI.

Provides the primary interface with menu bar, recent files and
one tab per open DuckDB database file.
"""

import json
import logging
import os
from typing import List, Optional
from PyQt6.QtCore import QSettings, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QKeySequence, QCloseEvent
from PyQt6.QtWidgets import (
    QMainWindow,
    QStatusBar,
    QMessageBox,
    QApplication,
    QFileDialog,
    QMenu,
)

from .theme import Theme
from .tab_widget import TabContainer
from .icons import get_file_icon
from .tabs import DatabaseTab
from ..settings import (
    add_recent_file,
    clear_recent_files,
    get_bool_setting,
    get_int_setting,
    get_recent_files,
    get_setting,
    remove_recent_file,
    set_setting,
)

logger = logging.getLogger(__name__)

FILE_FILTER = "DuckDB databases (*.duckdb *.db *.ddb);;All files (*)"


class MainWindow(QMainWindow):
    """Main application window."""

    theme_changed = pyqtSignal()

    def __init__(self, restore_session: bool = True):
        super().__init__()

        from ..version import __version__
        self.setWindowTitle(f"DuckBench v{__version__}")
        self.setMinimumSize(1024, 600)

        # Load theme preference
        Theme.set_dark(get_bool_setting("dark_mode"))
        Theme.apply(QApplication.instance())

        # Build UI
        self._create_actions()
        self._create_menu_bar()
        self._create_central_widget()
        self._create_status_bar()

        # Restore window state
        self._restore_state(restore_session)

        self.theme_changed.connect(self._on_theme_changed)

    def _create_actions(self) -> None:
        """Create menu actions."""
        self.action_open = QAction("Open Database...", self)
        self.action_open.setShortcut(QKeySequence.StandardKey.Open)
        self.action_open.triggered.connect(self._show_open_dialog)

        self.action_close_tab = QAction("Close Tab", self)
        self.action_close_tab.setShortcut(QKeySequence("Ctrl+W"))
        self.action_close_tab.triggered.connect(self._close_current_tab)

        self.action_dark_mode = QAction("Dark Mode", self)
        self.action_dark_mode.setCheckable(True)
        self.action_dark_mode.setChecked(Theme.is_dark())
        self.action_dark_mode.triggered.connect(self._toggle_dark_mode)

        self.action_settings = QAction("Settings...", self)
        self.action_settings.setShortcut(QKeySequence("Ctrl+,"))
        self.action_settings.triggered.connect(self._show_settings)

        self.action_reset_layout = QAction("Reset Layout", self)
        self.action_reset_layout.triggered.connect(self._reset_layout)

        self.action_exit = QAction("Exit", self)
        self.action_exit.setShortcut(QKeySequence("Alt+F4"))
        self.action_exit.triggered.connect(self.close)

        # Help menu actions
        self.action_about = QAction("About", self)
        self.action_about.triggered.connect(self._show_about)

    def _create_menu_bar(self) -> None:
        """Create the menu bar."""
        menu_bar = self.menuBar()

        # File menu
        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.action_open)
        self.recent_menu = QMenu("Open Recent", self)
        self.recent_menu.aboutToShow.connect(self._populate_recent_menu)
        file_menu.addMenu(self.recent_menu)
        file_menu.addAction(self.action_close_tab)
        file_menu.addSeparator()
        file_menu.addAction(self.action_dark_mode)
        file_menu.addAction(self.action_settings)
        file_menu.addAction(self.action_reset_layout)
        file_menu.addSeparator()
        file_menu.addAction(self.action_exit)

        # Help menu
        help_menu = menu_bar.addMenu("&Help")
        help_menu.addAction(self.action_about)

    def _create_central_widget(self) -> None:
        """Create the main content area."""
        self.tab_container = TabContainer()
        self.tab_container.tab_closed.connect(self._on_tab_closed)
        self.setCentralWidget(self.tab_container)

    def _create_status_bar(self) -> None:
        """Create the status bar."""
        self.status_bar = QStatusBar()
        self.status_bar.setFixedHeight(22)
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready")

    # ── Window state ────────────────────────────────────────────

    def _restore_state(self, restore_session: bool) -> None:
        """Restore window geometry and, optionally, the open files."""
        settings = QSettings("DuckBench", "DuckBench")

        geometry = settings.value("geometry")
        if geometry:
            self.restoreGeometry(geometry)
        else:
            self.resize(1400, 900)
            self._center_on_screen()

        if restore_session:
            # Reopen files after window is shown
            QTimer.singleShot(100, self._restore_session)

    def _center_on_screen(self) -> None:
        screen = QApplication.primaryScreen().geometry()
        self.move(
            (screen.width() - self.width()) // 2,
            (screen.height() - self.height()) // 2
        )

    def _restore_session(self) -> None:
        """Reopen the files that were open at last exit."""
        raw = get_setting("open_files")
        if not raw:
            return
        try:
            paths = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed open_files setting")
            return

        for path in paths:
            if isinstance(path, str) and os.path.isfile(path):
                self.open_database(path)
            else:
                logger.info("Skipping missing file from last session: %s", path)

    def _save_state(self) -> None:
        """Save window geometry, layout and open files."""
        settings = QSettings("DuckBench", "DuckBench")
        settings.setValue("geometry", self.saveGeometry())

        # Save the table list / work area split of the current tab as ratio
        tab = self.tab_container.currentWidget()
        if isinstance(tab, DatabaseTab):
            sizes = tab.splitter.sizes()
            total = sum(sizes)
            if total > 100:
                set_setting("layout_main_ratio", f"{sizes[0] / total:.4f}")

        set_setting("dark_mode", "1" if Theme.is_dark() else "0")
        set_setting("open_files", json.dumps(self.tab_container.open_paths()))

    def _apply_tab_layout(self, tab: DatabaseTab) -> None:
        """Apply the saved split ratio to a new tab."""
        ratio_str = get_setting("layout_main_ratio")
        if not ratio_str:
            return
        try:
            ratio = float(ratio_str)
        except ValueError:
            return
        if 0.05 <= ratio <= 0.95:
            total = self.width()
            tab.splitter.setSizes([int(ratio * total), int((1 - ratio) * total)])

    def closeEvent(self, event: QCloseEvent) -> None:
        """Handle window close."""
        self._save_state()
        self.tab_container.close_all_tabs()
        event.accept()

    # ── Files ───────────────────────────────────────────────────

    def open_database(self, path: str) -> Optional[DatabaseTab]:
        """Open a database file in a tab, or focus its existing tab."""
        path = os.path.abspath(os.path.expanduser(path))

        index = self.tab_container.find_tab(path)
        if index >= 0:
            self.tab_container.setCurrentIndex(index)
            return self.tab_container.widget(index)

        read_only = get_bool_setting("read_only")
        logger.info("Opening %s (read_only=%s)", path, read_only)
        tab = DatabaseTab(path, read_only=read_only)
        self._apply_tab_layout(tab)

        title = os.path.basename(path)
        index = self.tab_container.add_tab(tab, title)
        self.tab_container.setTabIcon(index, get_file_icon(read_only))
        self.tab_container.setTabToolTip(index, path)

        set_setting("last_directory", os.path.dirname(path))
        # Files that failed to open stay out of Open Recent
        if tab.host.open_error is None:
            add_recent_file(path)
        return tab

    def open_files(self, paths: List[str]) -> None:
        """Open several database files, e.g. from the command line."""
        for path in paths:
            self.open_database(path)

    def _show_open_dialog(self) -> None:
        directory = get_setting("last_directory") or os.path.expanduser("~")
        paths, _ = QFileDialog.getOpenFileNames(
            self, "Open Database", directory, FILE_FILTER
        )
        self.open_files(paths)

    def _populate_recent_menu(self) -> None:
        """Fill the recent files menu."""
        self.recent_menu.clear()
        recent = get_recent_files()
        if not recent:
            empty = self.recent_menu.addAction("No Recent Files")
            empty.setEnabled(False)
            return

        for path in recent:
            action = self.recent_menu.addAction(path)
            action.triggered.connect(lambda checked=False, p=path: self._open_recent(p))

        self.recent_menu.addSeparator()
        clear = self.recent_menu.addAction("Clear Recent Files")
        clear.triggered.connect(clear_recent_files)

    def _open_recent(self, path: str) -> None:
        if not os.path.isfile(path):
            remove_recent_file(path)
            QMessageBox.warning(self, "File Not Found", f"{path}\n\nThe file no longer exists.")
            return
        self.open_database(path)

    def _close_current_tab(self) -> None:
        self.tab_container.close_tab(self.tab_container.currentIndex())

    def _on_tab_closed(self, db_path: str) -> None:
        logger.info("Closed %s", db_path)

    # ── Appearance ──────────────────────────────────────────────

    def _toggle_dark_mode(self) -> None:
        """Toggle dark/light mode."""
        Theme.toggle(QApplication.instance())
        self.action_dark_mode.setChecked(Theme.is_dark())
        self.theme_changed.emit()

    def _on_theme_changed(self) -> None:
        """Handle theme change - update child widgets."""
        for i in range(self.tab_container.count()):
            tab = self.tab_container.widget(i)
            if isinstance(tab, DatabaseTab):
                tab.update_theme()

    def _show_settings(self) -> None:
        """Show settings dialog."""
        from .dialogs import SettingsDialog
        dialog = SettingsDialog(self)
        if dialog.exec():
            self._apply_font_size()

    def _apply_font_size(self) -> None:
        """Apply current font size setting to all open tabs."""
        size = get_int_setting("font_size", 13)
        for i in range(self.tab_container.count()):
            tab = self.tab_container.widget(i)
            if isinstance(tab, DatabaseTab):
                tab.set_font_size(size)
        self.status_bar.showMessage(f"Font size set to {size}", 3000)

    def _reset_layout(self) -> None:
        """Reset window layout to defaults."""
        self.resize(1400, 900)
        self._center_on_screen()

        set_setting("layout_main_ratio", "")
        for i in range(self.tab_container.count()):
            tab = self.tab_container.widget(i)
            if isinstance(tab, DatabaseTab):
                tab.splitter.setSizes([250, 1000])

        set_setting("font_size", "13")
        self._apply_font_size()
        self.status_bar.showMessage("Layout reset to defaults", 3000)

    def _show_about(self) -> None:
        """Show about dialog."""
        from ..version import __version__
        QMessageBox.about(
            self,
            "About DuckBench",
            f"<h3>DuckBench</h3>"
            f"<p>Version {__version__}</p>"
            f"<p>A viewer for DuckDB database files.</p>"
            f"<p>Browse tables, run SQL and page through results.</p>"
        )

    def set_status(self, message: str, timeout: int = 0) -> None:
        """Set status bar message."""
        self.status_bar.showMessage(message, timeout)
