"""
Tab Container Widget for DuckBench PyQt6 GUI.

Holds one tab per open database file, with close buttons, middle-click
close, reordering and a context menu. Closing a tab disposes its session.
"""

from typing import Optional, List
from PyQt6.QtCore import Qt, pyqtSignal, QPoint
from PyQt6.QtGui import QMouseEvent, QAction
from PyQt6.QtWidgets import (
    QTabWidget,
    QTabBar,
    QWidget,
    QMenu,
)


class DocumentTabBar(QTabBar):
    """Tab bar with reordering, close buttons and middle-click close."""

    tab_close_requested = pyqtSignal(int)

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setMovable(True)
        self.setTabsClosable(True)
        self.setExpanding(False)
        self.setElideMode(Qt.TextElideMode.ElideMiddle)
        self.setUsesScrollButtons(True)
        self.setDocumentMode(True)

        self.tabCloseRequested.connect(self.tab_close_requested.emit)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Close on middle-click."""
        if event.button() == Qt.MouseButton.MiddleButton:
            index = self.tabAt(event.pos())
            if index >= 0:
                self.tab_close_requested.emit(index)
                return

        super().mousePressEvent(event)


class TabContainer(QTabWidget):
    """Container for database document tabs."""

    tab_closed = pyqtSignal(str)  # db_path

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._tab_bar = DocumentTabBar(self)
        self.setTabBar(self._tab_bar)

        self._tab_bar.tab_close_requested.connect(self.close_tab)

        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

        self.setDocumentMode(True)

    def add_tab(self, widget: QWidget, title: str) -> int:
        """Add a new tab and make it current."""
        index = self.addTab(widget, title)
        self.setCurrentIndex(index)
        return index

    def find_tab(self, db_path: str) -> int:
        """Get the index of the tab showing db_path, or -1."""
        for i in range(self.count()):
            widget = self.widget(i)
            if getattr(widget, 'db_path', None) == db_path:
                return i
        return -1

    def open_paths(self) -> List[str]:
        """Get the database paths of all tabs in tab order."""
        paths = []
        for i in range(self.count()):
            db_path = getattr(self.widget(i), 'db_path', None)
            if db_path:
                paths.append(db_path)
        return paths

    def close_tab(self, index: int) -> None:
        """Close tab at index and release its session."""
        if index < 0 or index >= self.count():
            return

        widget = self.widget(index)
        db_path = getattr(widget, 'db_path', '')
        if hasattr(widget, 'cleanup'):
            widget.cleanup()

        self.removeTab(index)
        if widget is not None:
            widget.deleteLater()
        self.tab_closed.emit(db_path)

    def close_all_tabs(self) -> None:
        """Close all tabs."""
        for i in range(self.count() - 1, -1, -1):
            self.close_tab(i)

    def _show_context_menu(self, pos: QPoint) -> None:
        """Show context menu for tab."""
        index = self._tab_bar.tabAt(pos)
        if index < 0:
            return

        menu = QMenu(self)

        close_action = QAction("Close Tab", self)
        close_action.triggered.connect(lambda: self.close_tab(index))
        menu.addAction(close_action)

        close_others = QAction("Close Other Tabs", self)
        close_others.triggered.connect(lambda: self._close_other_tabs(index))
        close_others.setEnabled(self.count() > 1)
        menu.addAction(close_others)

        close_all = QAction("Close All Tabs", self)
        close_all.triggered.connect(self.close_all_tabs)
        menu.addAction(close_all)

        menu.exec(self.mapToGlobal(pos))

    def _close_other_tabs(self, keep_index: int) -> None:
        """Close all tabs except the specified one."""
        for i in range(self.count() - 1, -1, -1):
            if i != keep_index:
                self.close_tab(i)
