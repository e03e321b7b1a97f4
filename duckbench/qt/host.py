"""
Session host for DuckBench PyQt6 GUI.

Owns the QuerySession of one open document and answers request messages
from its view on a background thread, one request at a time.
"""

import logging
from collections import deque
from typing import Deque, Optional

from PyQt6.QtCore import QObject, QThread, Qt, pyqtSignal

from ..errors import ConnectionError
from ..protocol import (
    REQUEST_TYPES,
    Message,
    connection_error,
    handle_request,
    update_message,
)
from ..session import QuerySession

logger = logging.getLogger(__name__)


class RequestWorker(QThread):
    """Background thread running one request against the session."""

    response = pyqtSignal(object)  # response message

    def __init__(self, session: QuerySession, message: Message):
        super().__init__()
        self.session = session
        self.message = message

    def run(self) -> None:
        """Execute the request in background."""
        self.response.emit(handle_request(self.session, self.message))


class SessionHost(QObject):
    """Bridges a document view and its database session.

    Incoming requests are queued and executed in arrival order. Responses
    are delivered through the message signal on the GUI thread.
    """

    message = pyqtSignal(object)  # response message
    busy_changed = pyqtSignal(bool)
    _deferred = pyqtSignal(object)  # response delivered on the next event loop pass

    def __init__(self, db_path: str, read_only: bool = False,
                 parent: Optional[QObject] = None):
        super().__init__(parent)

        self.db_path = db_path
        self._session: Optional[QuerySession] = None
        self._open_error: Optional[str] = None
        self._pending: Deque[Message] = deque()
        self._worker: Optional[RequestWorker] = None
        self._disposed = False

        self._deferred.connect(self._on_response, Qt.ConnectionType.QueuedConnection)

        try:
            self._session = QuerySession.open(db_path, read_only=read_only)
        except ConnectionError as e:
            self._open_error = str(e)

    @property
    def is_connected(self) -> bool:
        return self._session is not None and self._session.is_open

    @property
    def is_busy(self) -> bool:
        return self._worker is not None

    @property
    def open_error(self) -> Optional[str]:
        return self._open_error

    def ready(self) -> None:
        """Tell the view it can start issuing requests."""
        if self._disposed:
            return
        if self._open_error is not None:
            self.message.emit(connection_error(self._open_error))
        else:
            self.message.emit(update_message(self.db_path))

    def post_message(self, message: Message) -> None:
        """Accept a request message from the view."""
        if self._disposed:
            logger.debug("Dropping %s request for disposed host", message.get("type"))
            return
        if message.get("type") not in REQUEST_TYPES:
            logger.warning("Dropping request of unknown type %r", message.get("type"))
            return
        if not self.is_connected:
            # Delivered from the event loop, after the sender's transition
            response = connection_error(
                self._open_error or f"Session for {self.db_path} is closed")
            self._deferred.emit(response)
            return

        self._pending.append(message)
        self._start_next()

    def _start_next(self) -> None:
        if self._worker is not None or not self._pending:
            return
        message = self._pending.popleft()
        self._worker = RequestWorker(self._session, message)
        self._worker.response.connect(self._on_response)
        self._worker.finished.connect(self._on_worker_finished)
        self.busy_changed.emit(True)
        self._worker.start()

    def _on_response(self, response: Message) -> None:
        if self._disposed:
            logger.debug("Discarding %s response after dispose", response.get("type"))
            return
        self.message.emit(response)

    def _on_worker_finished(self) -> None:
        worker, self._worker = self._worker, None
        if worker is not None:
            worker.deleteLater()
        if self._disposed:
            return
        if self._pending:
            self._start_next()
        else:
            self.busy_changed.emit(False)

    def dispose(self) -> None:
        """Release the session. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._pending.clear()
        if self._worker is not None and self._worker.isRunning():
            self._worker.wait()
        if self._session is not None:
            self._session.close()
