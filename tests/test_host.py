"""Tests for SessionHost request handling on a worker thread."""

import time

import pytest

QtCore = pytest.importorskip("PyQt6.QtCore")

from duckbench import protocol  # noqa: E402
from duckbench.qt.host import SessionHost  # noqa: E402


def wait_for(condition, timeout=10.0):
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() > deadline:
            raise AssertionError("timed out waiting for host")
        QtCore.QCoreApplication.processEvents()
        time.sleep(0.005)


@pytest.fixture
def host_for(qapp):
    hosts = []

    def make(path, **kwargs):
        host = SessionHost(str(path), **kwargs)
        received = []
        host.message.connect(received.append)
        hosts.append(host)
        return host, received

    yield make
    for host in hosts:
        host.dispose()


def test_ready_announces_file(db_path, host_for):
    host, received = host_for(db_path)
    host.ready()
    assert received == [{"type": "update", "dbPath": str(db_path)}]


def test_ready_reports_open_failure(tmp_path, host_for):
    host, received = host_for(tmp_path / "missing.duckdb")
    assert not host.is_connected
    host.ready()
    assert received[0]["type"] == "connectionError"


def test_requests_answered_in_order(db_path, host_for):
    host, received = host_for(db_path)
    host.post_message(protocol.query_request("SELECT 1 AS x"))
    host.post_message(protocol.list_tables_request())
    host.post_message(protocol.query_request("SELECT * FROM missing_table"))
    wait_for(lambda: len(received) == 3 and not host.is_busy)

    assert [m["type"] for m in received] == ["queryResult", "tablesResult", "queryError"]
    assert received[0]["results"] == [{"x": 1}]
    assert received[1]["tables"] == ["customers", "orders"]


def test_request_after_failed_open(tmp_path, host_for):
    host, received = host_for(tmp_path / "missing.duckdb")
    host.post_message(protocol.query_request("SELECT 1"))
    # Not answered inside the caller's transition
    assert received == []
    wait_for(lambda: received)
    assert [m["type"] for m in received] == ["connectionError"]
    assert "missing.duckdb" in received[0]["error"]


def test_view_submission_completes_before_connection_error(tmp_path, host_for):
    from duckbench.result_view import ResultView, ViewState

    host, received = host_for(tmp_path / "missing.duckdb")
    view = ResultView(host.post_message)
    host.message.connect(view.handle_message)

    assert view.submit_query("SELECT 1")
    assert view.state is ViewState.LOADING
    assert view.connected

    wait_for(lambda: received)
    assert view.state is ViewState.ERROR
    assert not view.connected


def test_deferred_error_dropped_after_dispose(tmp_path, host_for):
    host, received = host_for(tmp_path / "missing.duckdb")
    host.post_message(protocol.list_tables_request())
    host.dispose()
    QtCore.QCoreApplication.processEvents()
    assert received == []


def test_unknown_request_dropped(db_path, host_for):
    host, received = host_for(db_path)
    host.post_message({"type": "queryResult", "results": []})
    assert not host.is_busy
    assert received == []


def test_dispose_waits_and_silences(db_path, host_for):
    host, received = host_for(db_path)
    host.post_message(protocol.query_request("SELECT count(*) AS n FROM range(100000)"))
    host.dispose()
    host.dispose()
    assert not host.is_connected

    QtCore.QCoreApplication.processEvents()
    host.post_message(protocol.list_tables_request())
    QtCore.QCoreApplication.processEvents()
    assert received == []
