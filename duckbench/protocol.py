"""Messages exchanged between a document view and its session host.

Every message is a plain dict with a "type" key. Requests flow from the
view to the host, responses flow back. A request produces exactly one
response; no request ids are carried since a view keeps at most one
query outstanding.
"""

from typing import Any, Dict, List

from .errors import ConnectionError, QueryError

# Requests (view -> host)
QUERY = "query"
LIST_TABLES = "listTables"

# Responses (host -> view)
QUERY_RESULT = "queryResult"
QUERY_ERROR = "queryError"
TABLES_RESULT = "tablesResult"
TABLES_ERROR = "tablesError"
UPDATE = "update"
CONNECTION_ERROR = "connectionError"

REQUEST_TYPES = frozenset({QUERY, LIST_TABLES})
RESPONSE_TYPES = frozenset({
    QUERY_RESULT, QUERY_ERROR, TABLES_RESULT, TABLES_ERROR,
    UPDATE, CONNECTION_ERROR,
})

Message = Dict[str, Any]


def query_request(sql: str) -> Message:
    return {"type": QUERY, "sql": sql}


def list_tables_request() -> Message:
    return {"type": LIST_TABLES}


def query_result(rows: List[Dict[str, Any]]) -> Message:
    return {"type": QUERY_RESULT, "results": rows}


def query_error(error: str) -> Message:
    return {"type": QUERY_ERROR, "error": error}


def tables_result(tables: List[str]) -> Message:
    return {"type": TABLES_RESULT, "tables": tables}


def tables_error(error: str) -> Message:
    return {"type": TABLES_ERROR, "error": error}


def update_message(db_path: str) -> Message:
    return {"type": UPDATE, "dbPath": db_path}


def connection_error(error: str) -> Message:
    return {"type": CONNECTION_ERROR, "error": error}


def handle_request(session, message: Message) -> Message:
    """Run one request against session and build its response.

    Session errors become error messages; they never propagate. A request
    of unknown type raises ValueError.
    """
    kind = message.get("type")

    if kind == QUERY:
        try:
            rows = session.execute_query(message.get("sql", ""))
        except ConnectionError as e:
            return connection_error(str(e))
        except QueryError as e:
            return query_error(str(e))
        return query_result(rows)

    if kind == LIST_TABLES:
        try:
            tables = session.list_tables()
        except ConnectionError as e:
            return connection_error(str(e))
        except QueryError as e:
            return tables_error(str(e))
        return tables_result(tables)

    raise ValueError(f"Unknown request type: {kind}")
