"""Error types raised by database sessions and the result view."""


class SessionError(Exception):
    """Base class for DuckBench session errors."""


class ConnectionError(SessionError):
    """The database connection could not be established or is closed.

    Fatal to the session: no further operations are possible.
    """


class QueryError(SessionError):
    """A single query failed. The session remains usable."""


class ValidationError(SessionError):
    """Client-side input error. Never sent to the session."""
