"""
Database Tab Widget for DuckBench PyQt6 GUI.

One tab per open database file: table list, query editor and a paginated
results grid with draggable column widths. All result state lives in a
ResultView; this module only renders it and forwards user actions.
"""

from typing import Any, Dict, List, Optional
from PyQt6.QtCore import Qt, QTimer, QSize, pyqtSignal
from PyQt6.QtGui import (
    QColor,
    QCursor,
    QFont,
    QKeySequence,
    QMouseEvent,
    QShortcut,
)
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QSplitter,
    QToolBar,
    QToolButton,
    QPlainTextEdit,
    QTableWidget,
    QTableWidgetItem,
    QListWidget,
    QListWidgetItem,
    QLabel,
    QComboBox,
    QMenu,
    QHeaderView,
    QAbstractItemView,
    QApplication,
    QFrame,
)

from ..host import SessionHost
from ..icons import get_table_icon, make_icon
from ..theme import Theme
from ... import protocol
from ...errors import ValidationError
from ...result_view import (
    DEFAULT_COLUMN_WIDTH,
    DEFAULT_PAGE_SIZE,
    MIN_COLUMN_WIDTH,
    PAGE_SIZES,
    ResultView,
    ViewState,
    format_value,
    is_numeric,
)
from ...settings import get_int_setting


class QueryEditor(QPlainTextEdit):
    """Plain SQL input with an execute shortcut."""

    execute_requested = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        font = QFont("JetBrains Mono", get_int_setting("font_size", 13))
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.setFont(font)

        self.setTabStopDistance(40)
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.setPlaceholderText("SELECT * FROM table_name;")

        # F5 or Ctrl+Enter - Execute
        for keys in ("F5", "Ctrl+Return"):
            shortcut = QShortcut(QKeySequence(keys), self)
            shortcut.activated.connect(self.execute_requested.emit)

    def set_font_size(self, size: int) -> None:
        """Set the editor font size."""
        font = self.font()
        font.setPointSize(size)
        self.setFont(font)


class ResizableHeader(QHeaderView):
    """Horizontal header whose section edges can be dragged.

    Qt's own interactive resizing is disabled; the drag is reported through
    signals so the owner decides the resulting width.
    """

    resize_started = pyqtSignal(int, int)  # logical index, pointer x
    resize_moved = pyqtSignal(int)  # pointer x
    resize_finished = pyqtSignal()

    GRIP = 4

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(Qt.Orientation.Horizontal, parent)
        self._resizing = -1

        self.setSectionsClickable(True)
        self.setMouseTracking(True)
        self.setStretchLastSection(False)
        self.setMinimumSectionSize(MIN_COLUMN_WIDTH)
        self.setSectionResizeMode(QHeaderView.ResizeMode.Fixed)

    def _edge_at(self, x: int) -> int:
        """Get the logical section whose right edge is under x, or -1."""
        for visual in range(self.count()):
            logical = self.logicalIndex(visual)
            if self.isSectionHidden(logical):
                continue
            right = self.sectionViewportPosition(logical) + self.sectionSize(logical)
            if abs(x - right) <= self.GRIP:
                return logical
        return -1

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            logical = self._edge_at(int(event.position().x()))
            if logical >= 0:
                self._resizing = logical
                self.resize_started.emit(logical, int(event.globalPosition().x()))
                event.accept()
                return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._resizing >= 0:
            self.resize_moved.emit(int(event.globalPosition().x()))
            event.accept()
            return
        if self._edge_at(int(event.position().x())) >= 0:
            self.setCursor(QCursor(Qt.CursorShape.SplitHCursor))
        else:
            self.unsetCursor()
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if self._resizing >= 0:
            self._resizing = -1
            self.resize_finished.emit()
            event.accept()
            return
        super().mouseReleaseEvent(event)


class ResultsTable(QTableWidget):
    """Table widget showing one page of query results."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setAlternatingRowColors(True)
        self.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectItems)
        self.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.setHorizontalScrollMode(QAbstractItemView.ScrollMode.ScrollPerPixel)

        self.resize_header = ResizableHeader(self)
        self.setHorizontalHeader(self.resize_header)
        self.verticalHeader().setDefaultSectionSize(24)

        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

        shortcut_copy = QShortcut(QKeySequence("Ctrl+C"), self)
        shortcut_copy.setContext(Qt.ShortcutContext.WidgetWithChildrenShortcut)
        shortcut_copy.activated.connect(lambda: self._copy(with_headers=False))

    def _show_context_menu(self, pos) -> None:
        """Show context menu."""
        menu = QMenu(self)
        menu.addAction("Copy", lambda: self._copy(with_headers=False), QKeySequence("Ctrl+C"))
        menu.addAction("Copy with Headers", lambda: self._copy(with_headers=True))
        menu.addSeparator()
        menu.addAction("Select All", self.selectAll, QKeySequence("Ctrl+A"))
        menu.exec(self.mapToGlobal(pos))

    def _copy(self, with_headers: bool) -> None:
        """Copy selected cells to clipboard as tab-separated text."""
        selection = self.selectedRanges()
        if not selection:
            return

        rows = set()
        cols = set()
        for sel_range in selection:
            rows.update(range(sel_range.topRow(), sel_range.bottomRow() + 1))
            cols.update(range(sel_range.leftColumn(), sel_range.rightColumn() + 1))
        rows = sorted(rows)
        cols = sorted(cols)

        lines = []
        if with_headers:
            headers = []
            for col in cols:
                header = self.horizontalHeaderItem(col)
                headers.append(header.text() if header else "")
            lines.append("\t".join(headers))
        for row in rows:
            row_data = []
            for col in cols:
                item = self.item(row, col)
                row_data.append(item.text() if item else "")
            lines.append("\t".join(row_data))

        QApplication.clipboard().setText("\n".join(lines))

    def content_width(self, logical_index: int) -> int:
        """Width that fits the header and cell text of a column."""
        header = self.horizontalHeaderItem(logical_index)
        header_text = header.text() if header else ""
        fm = self.fontMetrics()
        max_width = fm.horizontalAdvance(header_text) + 30

        for row in range(self.rowCount()):
            item = self.item(row, logical_index)
            if item:
                max_width = max(max_width, fm.horizontalAdvance(item.text()) + 20)

        return max(50, min(max_width, 600))

    def load_page(self, columns: List[str], rows: List[Dict[str, Any]],
                  widths: List[int], first_row: int = 0) -> None:
        """Load one page of rows into the table."""
        self.clear()
        self.setColumnCount(len(columns))
        self.setHorizontalHeaderLabels(columns)
        self.setRowCount(len(rows))
        self.setVerticalHeaderLabels([str(first_row + i + 1) for i in range(len(rows))])

        null_color = QColor(Theme.current().muted)
        for row_idx, row in enumerate(rows):
            for col_idx, column in enumerate(columns):
                value = row.get(column)
                item = QTableWidgetItem(format_value(value))

                if is_numeric(value):
                    item.setTextAlignment(
                        Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
                    )
                elif value is None:
                    item.setForeground(null_color)

                self.setItem(row_idx, col_idx, item)

        for col_idx, width in enumerate(widths):
            self.setColumnWidth(col_idx, width)


class DatabaseTab(QWidget):
    """Tab widget for browsing and querying one database file."""

    def __init__(self, db_path: str, read_only: bool = False,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.db_path = db_path
        self.read_only = read_only
        self._resize_index = -1

        page_size = get_int_setting("page_size", DEFAULT_PAGE_SIZE)
        if page_size not in PAGE_SIZES:
            page_size = DEFAULT_PAGE_SIZE

        self.host = SessionHost(db_path, read_only=read_only, parent=self)
        self.view = ResultView(
            self.host.post_message,
            page_size=page_size,
            default_column_width=get_int_setting("column_width", DEFAULT_COLUMN_WIDTH),
        )

        self._setup_ui()
        self._connect_signals()
        self._render()

        # The view is ready once the event loop picks it up
        QTimer.singleShot(0, self.host.ready)

    def _setup_ui(self) -> None:
        """Set up the user interface."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # Query editor (create before toolbar since toolbar references it)
        self.editor = QueryEditor()

        self._create_toolbar()
        layout.addWidget(self.toolbar)

        # Main splitter (tables / work area)
        self.splitter = QSplitter(Qt.Orientation.Horizontal)
        self.splitter.setHandleWidth(3)
        self.splitter.setChildrenCollapsible(False)
        self.splitter.addWidget(self._create_tables_panel())

        # Work splitter (editor / results)
        self.work_splitter = QSplitter(Qt.Orientation.Vertical)
        self.work_splitter.setHandleWidth(3)
        self.work_splitter.addWidget(self.editor)
        self.work_splitter.addWidget(self._create_results_widget())
        self.work_splitter.setSizes([200, 600])

        self.splitter.addWidget(self.work_splitter)
        self.splitter.setSizes([220, 1000])

        layout.addWidget(self.splitter)

    def _create_toolbar(self) -> None:
        """Create the toolbar."""
        self.toolbar = QToolBar()
        self.toolbar.setMovable(False)
        self.toolbar.setIconSize(QSize(24, 24))

        ic = "#ddd"  # icon color
        tb_style = Qt.ToolButtonStyle.ToolButtonTextUnderIcon

        def _tb(text, icon_name, icon_color=ic):
            btn = QToolButton()
            btn.setText(text)
            btn.setIcon(make_icon(icon_name, icon_color, size=24))
            btn.setToolButtonStyle(tb_style)
            btn.setAutoRaise(True)
            return btn

        self.btn_execute = _tb("Execute", "play", "#fff")
        self.btn_execute.setProperty("primary", True)
        self.btn_execute.setToolTip("Execute query (F5)")
        self.btn_execute.clicked.connect(self.execute_query)
        self.toolbar.addWidget(self.btn_execute)

        self.btn_clear = _tb("Clear", "clear")
        self.btn_clear.setToolTip("Clear query and results")
        self.btn_clear.clicked.connect(self.clear)
        self.toolbar.addWidget(self.btn_clear)

        stretch = QWidget()
        stretch.setSizePolicy(
            stretch.sizePolicy().Policy.Expanding,
            stretch.sizePolicy().verticalPolicy()
        )
        self.toolbar.addWidget(stretch)

        self.lbl_busy = QLabel("Working...")
        self.lbl_busy.setContentsMargins(8, 0, 8, 0)
        self.lbl_busy.hide()
        self.toolbar.addWidget(self.lbl_busy)

        label = self.db_path + (" (read-only)" if self.read_only else "")
        self.lbl_file = QLabel(label)
        self.lbl_file.setProperty("subheading", True)
        self.toolbar.addWidget(self.lbl_file)

    def _create_tables_panel(self) -> QWidget:
        """Create the table list panel."""
        panel = QWidget()
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        header = QHBoxLayout()
        header.addWidget(QLabel("Tables"))
        header.addStretch()
        self.btn_refresh = QToolButton()
        self.btn_refresh.setIcon(make_icon("refresh"))
        self.btn_refresh.setAutoRaise(True)
        self.btn_refresh.setToolTip("Refresh table list")
        self.btn_refresh.clicked.connect(self.refresh_tables)
        header.addWidget(self.btn_refresh)
        layout.addLayout(header)

        self.tables_list = QListWidget()
        self.tables_list.setToolTip("Click a table to select all of its rows")
        layout.addWidget(self.tables_list)

        self.tables_status = QLabel()
        self.tables_status.setWordWrap(True)
        self.tables_status.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(self.tables_status)

        return panel

    def _create_results_widget(self) -> QWidget:
        """Create the results area."""
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        layout.addWidget(self._create_results_controls())

        self.error_label = QLabel()
        self.error_label.setWordWrap(True)
        self.error_label.setContentsMargins(8, 6, 8, 6)
        self.error_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        self.results_table = ResultsTable()
        layout.addWidget(self.results_table)

        self.results_status = QLabel()
        self.results_status.setProperty("subheading", True)
        self.results_status.setContentsMargins(8, 4, 8, 4)
        layout.addWidget(self.results_status)

        return widget

    def _create_results_controls(self) -> QWidget:
        """Create the pagination control bar."""
        controls = QFrame()
        layout = QHBoxLayout(controls)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(4)

        self.combo_page_size = QComboBox()
        for size in PAGE_SIZES:
            self.combo_page_size.addItem(f"{size} rows", size)
        self.combo_page_size.setCurrentIndex(PAGE_SIZES.index(self.view.page_size))
        layout.addWidget(self.combo_page_size)

        layout.addStretch()

        self.lbl_records = QLabel()
        layout.addWidget(self.lbl_records)
        layout.addSpacing(12)
        self.lbl_page = QLabel()
        layout.addWidget(self.lbl_page)
        layout.addSpacing(8)

        self.btn_prev = QToolButton()
        self.btn_prev.setIcon(make_icon("chevron_left"))
        self.btn_prev.setAutoRaise(True)
        self.btn_prev.setToolTip("Previous page")
        layout.addWidget(self.btn_prev)

        self.btn_next = QToolButton()
        self.btn_next.setIcon(make_icon("chevron_right"))
        self.btn_next.setAutoRaise(True)
        self.btn_next.setToolTip("Next page")
        layout.addWidget(self.btn_next)

        return controls

    def _connect_signals(self) -> None:
        """Connect signals."""
        self.host.message.connect(self._on_host_message)
        self.host.busy_changed.connect(self.lbl_busy.setVisible)

        self.editor.execute_requested.connect(self.execute_query)
        self.tables_list.itemClicked.connect(self._on_table_clicked)

        self.btn_prev.clicked.connect(self.previous_page)
        self.btn_next.clicked.connect(self.next_page)
        self.combo_page_size.currentIndexChanged.connect(self._on_page_size_changed)

        header = self.results_table.resize_header
        header.resize_started.connect(self._on_resize_started)
        header.resize_moved.connect(self._on_resize_moved)
        header.resize_finished.connect(self.view.end_resize)
        header.sectionDoubleClicked.connect(self._auto_fit_column)

    # ── Actions ───────────────────────────────────────────────

    def set_sql(self, sql: str) -> None:
        """Set the query text."""
        self.editor.setPlainText(sql)

    def execute_query(self) -> None:
        """Submit the editor text as a query."""
        if self.view.submit_query(self.editor.toPlainText()):
            self._set_status("Executing query...")
        elif isinstance(self.view.error, ValidationError):
            self._set_status(str(self.view.error))
        self._render()

    def clear(self) -> None:
        """Clear the query text and results."""
        if self.view.clear():
            self.editor.clear()
            self._render()

    def refresh_tables(self) -> None:
        """Request a fresh table list."""
        if self.view.refresh_tables():
            self._set_status("Loading tables...")
        self._render_tables()
        self._render_controls()

    def previous_page(self) -> None:
        if self.view.previous_page():
            self._render_results()

    def next_page(self) -> None:
        if self.view.next_page():
            self._render_results()

    def _on_page_size_changed(self, index: int) -> None:
        size = self.combo_page_size.itemData(index)
        if size is None or size == self.view.page_size:
            return
        self.view.set_page_size(size)
        self._render_results()

    def _on_table_clicked(self, item: QListWidgetItem) -> None:
        self.editor.setPlainText(self.view.select_table(item.text()))
        self.editor.setFocus()

    def _on_resize_started(self, index: int, x: int) -> None:
        columns = self.view.columns
        if index >= len(columns):
            return
        self._resize_index = index
        self.view.begin_resize(columns[index], x, self.results_table.columnWidth(index))

    def _on_resize_moved(self, x: int) -> None:
        width = self.view.drag_resize(x)
        if width is None:
            return
        self.results_table.setColumnWidth(self._resize_index, width)

    def _auto_fit_column(self, index: int) -> None:
        """Fit a column to its content on header double-click."""
        columns = self.view.columns
        if index >= len(columns):
            return
        width = self.view.set_column_width(
            columns[index], self.results_table.content_width(index))
        self.results_table.setColumnWidth(index, width)

    def _on_host_message(self, message: protocol.Message) -> None:
        """Apply a response from the session host."""
        kind = message.get("type")
        self.view.handle_message(message)

        if kind in (protocol.TABLES_RESULT, protocol.TABLES_ERROR, protocol.UPDATE):
            self._render_tables()
            self._render_controls()
            if kind == protocol.TABLES_ERROR:
                self._set_status(f"Error: {message.get('error', '')}")
            return

        self._render()
        if kind == protocol.QUERY_RESULT:
            self._set_status(self.view.record_info)
        elif kind == protocol.QUERY_ERROR:
            self._set_status(f"Error: {message.get('error', '')}")
        elif kind == protocol.CONNECTION_ERROR:
            self._set_status(f"Connection failed: {message.get('error', '')}")

    # ── Rendering ─────────────────────────────────────────────

    def _render(self) -> None:
        self._render_controls()
        self._render_results()
        self._render_tables()

    def _render_controls(self) -> None:
        view = self.view
        self.btn_execute.setEnabled(view.can_submit)
        self.btn_clear.setEnabled(view.state is not ViewState.LOADING)
        self.btn_refresh.setEnabled(
            view.connected and view.tables.state is not ViewState.LOADING)

    def _render_results(self) -> None:
        view = self.view
        colors = Theme.current()

        if view.error is not None:
            self.error_label.setText(f"Error: {view.error}")
            self.error_label.setStyleSheet(
                f"color: {colors.error}; background-color: {colors.error_background};")
            self.error_label.show()
        else:
            self.error_label.hide()

        columns = view.columns
        self.results_table.load_page(
            columns, view.visible_rows,
            [view.column_width(column) for column in columns],
            first_row=view.page_start,
        )

        has_page = bool(view.rows) or view.state is ViewState.DISPLAYING
        self.lbl_records.setText(view.record_info if has_page else "")
        self.lbl_page.setText(view.page_info if has_page else "")
        self.btn_prev.setEnabled(view.can_go_previous)
        self.btn_next.setEnabled(view.can_go_next)

        self.combo_page_size.blockSignals(True)
        self.combo_page_size.setCurrentIndex(PAGE_SIZES.index(view.page_size))
        self.combo_page_size.blockSignals(False)

        if view.state is ViewState.LOADING:
            self.results_status.setText("Executing query...")
        elif view.state is ViewState.DISPLAYING and not view.rows:
            self.results_status.setText("No results.")
        else:
            self.results_status.setText("")

    def _render_tables(self) -> None:
        tables = self.view.tables

        self.tables_list.clear()
        icon = get_table_icon()
        for name in tables.tables:
            self.tables_list.addItem(QListWidgetItem(icon, name))

        if tables.state is ViewState.LOADING:
            self.tables_status.setText("Loading tables...")
        elif tables.state is ViewState.ERROR:
            self.tables_status.setText(f"Error: {tables.error}")
        elif tables.state is ViewState.DISPLAYING and not tables.tables:
            self.tables_status.setText("No tables found.")
        else:
            self.tables_status.setText("")
        self.tables_status.setVisible(bool(self.tables_status.text()))

    def _set_status(self, message: str) -> None:
        """Set status message."""
        main_window = self.window()
        if hasattr(main_window, 'set_status'):
            main_window.set_status(message)

    def set_font_size(self, size: int) -> None:
        self.editor.set_font_size(size)

    def update_theme(self) -> None:
        """Update theme colors."""
        self._render_results()

    def cleanup(self) -> None:
        """Release the database session."""
        self.host.dispose()
