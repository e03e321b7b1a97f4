"""
Result view state for a DuckBench document.

Holds the full result set of the last query and derives everything the
results grid shows from it: the visible page, the record and page labels,
and the width of every column. Only new queries and table listings go
back to the session host; paging, page-size changes and column resizing
are resolved locally.

A failed query restores the rows, page and column widths that were on
screen when it was submitted, so the previous results stay browsable
beneath the error message.
"""

import datetime
import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from . import protocol
from .errors import ConnectionError, QueryError, SessionError, ValidationError

logger = logging.getLogger(__name__)

PAGE_SIZES = (10, 25, 50, 100)
DEFAULT_PAGE_SIZE = 25
DEFAULT_COLUMN_WIDTH = 150
MIN_COLUMN_WIDTH = 20

EMPTY_QUERY_MESSAGE = "Enter a SQL query to execute."

_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

Row = Dict[str, Any]


class ViewState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    DISPLAYING = "displaying"
    ERROR = "error"


def quote_identifier(name: str) -> str:
    """Quote a table name unless it is a plain identifier."""
    if _PLAIN_IDENTIFIER.match(name):
        return name
    return '"' + name.replace('"', '""') + '"'


def format_value(value: Any) -> str:
    """Render a cell value as grid text."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


def is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class TableList:
    """Table listing with its own request cycle."""

    def __init__(self):
        self.state = ViewState.IDLE
        self.tables: List[str] = []
        self.error: Optional[SessionError] = None


class _ResizeGesture:
    def __init__(self, column: str, start_x: int, start_width: int):
        self.column = column
        self.start_x = start_x
        self.start_width = start_width


class ResultView:
    """Client-side state machine for query results.

    send is called with each request message for the session host.
    Responses are fed back through handle_message().
    """

    def __init__(self, send: Callable[[protocol.Message], None],
                 page_size: int = DEFAULT_PAGE_SIZE,
                 default_column_width: int = DEFAULT_COLUMN_WIDTH,
                 minimum_column_width: int = MIN_COLUMN_WIDTH):
        if page_size not in PAGE_SIZES:
            raise ValueError(f"Unsupported page size: {page_size}")
        self._send = send
        self.page_size = page_size
        self.minimum_column_width = minimum_column_width
        self.default_column_width = max(minimum_column_width, default_column_width)

        self.state = ViewState.IDLE
        self.rows: List[Row] = []
        self.current_page = 1
        self.column_widths: Dict[str, int] = {}
        self.error: Optional[SessionError] = None
        self.query_text = ""
        self.connected = True
        self.tables = TableList()

        self._resize: Optional[_ResizeGesture] = None
        # (page, widths) on screen when the outstanding query was submitted
        self._previous: Optional[Tuple[int, Dict[str, int]]] = None

        self._handlers = {
            protocol.QUERY_RESULT: self._on_query_result,
            protocol.QUERY_ERROR: self._on_query_error,
            protocol.TABLES_RESULT: self._on_tables_result,
            protocol.TABLES_ERROR: self._on_tables_error,
            protocol.UPDATE: self._on_update,
            protocol.CONNECTION_ERROR: self._on_connection_error,
        }

    # ── Queries ───────────────────────────────────────────────

    @property
    def can_submit(self) -> bool:
        return self.connected and self.state is not ViewState.LOADING

    def submit_query(self, sql: Optional[str] = None) -> bool:
        """Send the query text to the host. Returns True if a request was sent."""
        if sql is not None:
            self.query_text = sql
        if not self.can_submit:
            logger.debug("Query submission ignored in state %s", self.state.value)
            return False

        text = self.query_text.strip()
        if not text:
            self.error = ValidationError(EMPTY_QUERY_MESSAGE)
            self.state = ViewState.ERROR
            return False

        self._previous = (self.current_page, dict(self.column_widths))
        self.current_page = 1
        self.column_widths = {}
        self._resize = None
        self.error = None
        self.state = ViewState.LOADING
        self._send(protocol.query_request(text))
        return True

    def clear(self) -> bool:
        """Drop the query text and held results."""
        if self.state is ViewState.LOADING:
            return False
        self.query_text = ""
        self.rows = []
        self.current_page = 1
        self.column_widths = {}
        self._resize = None
        self.error = None
        self.state = ViewState.IDLE
        return True

    # ── Tables ────────────────────────────────────────────────

    def refresh_tables(self) -> bool:
        if not self.connected or self.tables.state is ViewState.LOADING:
            return False
        self.tables.state = ViewState.LOADING
        self.tables.error = None
        self._send(protocol.list_tables_request())
        return True

    def select_table(self, name: str) -> str:
        """Put a SELECT for table name into the query text."""
        self.query_text = f"SELECT * FROM {quote_identifier(name)};"
        return self.query_text

    # ── Inbound messages ──────────────────────────────────────

    def handle_message(self, message: protocol.Message) -> None:
        handler = self._handlers.get(message.get("type"))
        if handler is None:
            logger.warning("Ignoring message of unknown type %r", message.get("type"))
            return
        handler(message)

    def _on_query_result(self, message: protocol.Message) -> None:
        if self.state is not ViewState.LOADING:
            logger.warning("Discarding query result with no query outstanding")
            return
        self.rows = list(message.get("results") or [])
        self.current_page = 1
        self._previous = None
        self.error = None
        self.state = ViewState.DISPLAYING

    def _on_query_error(self, message: protocol.Message) -> None:
        if self.state is not ViewState.LOADING:
            logger.warning("Discarding query error with no query outstanding")
            return
        self._restore_previous()
        self.error = QueryError(message.get("error", ""))
        self.state = ViewState.ERROR

    def _on_tables_result(self, message: protocol.Message) -> None:
        if self.tables.state is not ViewState.LOADING:
            logger.warning("Discarding table list with no listing outstanding")
            return
        self.tables.tables = list(message.get("tables") or [])
        self.tables.error = None
        self.tables.state = ViewState.DISPLAYING

    def _on_tables_error(self, message: protocol.Message) -> None:
        if self.tables.state is not ViewState.LOADING:
            logger.warning("Discarding table list error with no listing outstanding")
            return
        self.tables.error = QueryError(message.get("error", ""))
        self.tables.state = ViewState.ERROR

    def _on_update(self, message: protocol.Message) -> None:
        self.refresh_tables()

    def _on_connection_error(self, message: protocol.Message) -> None:
        error = ConnectionError(message.get("error", ""))
        self.connected = False
        if self.state is ViewState.LOADING:
            self._restore_previous()
        self.error = error
        self.state = ViewState.ERROR
        self.tables.error = error
        self.tables.state = ViewState.ERROR

    def _restore_previous(self) -> None:
        if self._previous is not None:
            page, widths = self._previous
            self.column_widths = widths
            self.current_page = min(max(1, page), self.total_pages)
        self._previous = None

    # ── Pagination ────────────────────────────────────────────

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def total_pages(self) -> int:
        return max(1, -(-len(self.rows) // self.page_size))

    @property
    def page_start(self) -> int:
        return (self.current_page - 1) * self.page_size

    @property
    def page_end(self) -> int:
        return min(self.page_start + self.page_size, len(self.rows))

    @property
    def visible_rows(self) -> List[Row]:
        return self.rows[self.page_start:self.page_end]

    @property
    def can_go_previous(self) -> bool:
        return self.current_page > 1

    @property
    def can_go_next(self) -> bool:
        return self.current_page < self.total_pages

    def previous_page(self) -> bool:
        if not self.can_go_previous:
            return False
        self.current_page -= 1
        return True

    def next_page(self) -> bool:
        if not self.can_go_next:
            return False
        self.current_page += 1
        return True

    def set_page_size(self, size: int) -> None:
        if size not in PAGE_SIZES:
            raise ValueError(f"Unsupported page size: {size}")
        self.page_size = size
        self.current_page = 1

    @property
    def record_info(self) -> str:
        if not self.rows:
            return "0 records"
        return f"{self.page_start + 1:,}-{self.page_end:,} of {len(self.rows):,} records"

    @property
    def page_info(self) -> str:
        return f"Page {self.current_page:,} of {self.total_pages:,}"

    # ── Columns ───────────────────────────────────────────────

    @property
    def columns(self) -> List[str]:
        return list(self.rows[0].keys()) if self.rows else []

    def column_width(self, column: str) -> int:
        return self.column_widths.get(column, self.default_column_width)

    def set_column_width(self, column: str, width: int) -> int:
        """Store a width for column, floored at the minimum. Returns it."""
        width = max(self.minimum_column_width, int(width))
        self.column_widths[column] = width
        return width

    def table_width(self) -> int:
        return sum(self.column_width(column) for column in self.columns)

    @property
    def is_resizing(self) -> bool:
        return self._resize is not None

    def begin_resize(self, column: str, pointer_x: int,
                     start_width: Optional[int] = None) -> None:
        if start_width is None:
            start_width = self.column_width(column)
        self._resize = _ResizeGesture(column, pointer_x, start_width)

    def drag_resize(self, pointer_x: int) -> Optional[int]:
        """Apply pointer movement to the column being resized.

        Returns the new width, or None when no resize is active.
        """
        gesture = self._resize
        if gesture is None:
            return None
        return self.set_column_width(
            gesture.column, gesture.start_width + (pointer_x - gesture.start_x))

    def end_resize(self) -> None:
        self._resize = None
