"""DuckDB query session bound to a single database file."""

import datetime
import logging
import threading
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import duckdb

from .errors import ConnectionError, QueryError

logger = logging.getLogger(__name__)

TABLES_QUERY = "SHOW TABLES"


def to_scalar(value: Any) -> Any:
    """Convert an engine value into one of the row scalar types."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime.date, datetime.time)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="backslashreplace")
    # UUID, INTERVAL, LIST, STRUCT, MAP and friends
    return str(value)


def unique_column_names(names: List[str]) -> List[str]:
    """Make column names unique by suffixing repeats with _1, _2, ..."""
    seen = set()
    result = []
    for name in names:
        candidate = name
        n = 0
        while candidate in seen:
            n += 1
            candidate = f"{name}_{n}"
        seen.add(candidate)
        result.append(candidate)
    return result


class QuerySession:
    """One open connection to a DuckDB file.

    All operations on the connection are serialized through a lock, so the
    session can be driven from a worker thread while the owner closes it
    from another.
    """

    def __init__(self, path, read_only: bool = False):
        self.path = str(path)
        self.read_only = read_only
        self._conn: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.Lock()
        self._connect()

    @classmethod
    def open(cls, path, read_only: bool = False) -> "QuerySession":
        """Open a session on the database file at path."""
        return cls(path, read_only=read_only)

    def _connect(self) -> None:
        if not Path(self.path).is_file():
            raise ConnectionError(f"Database file not found: {self.path}")
        try:
            self._conn = duckdb.connect(self.path, read_only=self.read_only)
        except (duckdb.Error, OSError) as e:
            logger.info("Failed to open %s: %s", self.path, e)
            raise ConnectionError(str(e)) from e
        logger.info("Opened %s%s", self.path, " (read-only)" if self.read_only else "")

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _require_open(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise ConnectionError(f"Session for {self.path} is closed")
        return self._conn

    def list_tables(self) -> List[str]:
        """Get table names in catalog order."""
        with self._lock:
            conn = self._require_open()
            try:
                rows = conn.execute(TABLES_QUERY).fetchall()
            except duckdb.Error as e:
                logger.info("Table listing failed for %s: %s", self.path, e)
                raise QueryError(str(e)) from e
        return [row[0] for row in rows]

    def execute_query(self, sql: str) -> List[Dict[str, Any]]:
        """Run sql exactly as given and return every row as a dict.

        Statements that produce no result set return an empty list.
        """
        if not sql or not sql.strip():
            raise QueryError("No SQL statement to execute")

        with self._lock:
            conn = self._require_open()
            logger.debug("Executing on %s: %s", self.path, sql[:200])
            try:
                cursor = conn.execute(sql)
                description = cursor.description
                rows = cursor.fetchall() if description else []
            except duckdb.Error as e:
                logger.info("Query failed on %s: %s", self.path, e)
                raise QueryError(str(e)) from e

        if not description:
            return []
        columns = unique_column_names([col[0] for col in description])
        return [
            dict(zip(columns, (to_scalar(value) for value in row)))
            for row in rows
        ]

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        with self._lock:
            conn, self._conn = self._conn, None
        if conn is None:
            return
        try:
            conn.close()
        except duckdb.Error as e:
            logger.warning("Error closing %s: %s", self.path, e)
        else:
            logger.info("Closed %s", self.path)

    def __enter__(self) -> "QuerySession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<QuerySession {self.path!r} {state}>"
