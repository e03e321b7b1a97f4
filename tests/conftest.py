"""Shared fixtures for DuckBench tests."""

import os

import duckdb
import pytest


@pytest.fixture
def db_path(tmp_path):
    """A DuckDB file with two small tables."""
    path = tmp_path / "shop.duckdb"
    conn = duckdb.connect(str(path))
    conn.execute("CREATE TABLE customers (id INTEGER, name VARCHAR)")
    conn.execute("INSERT INTO customers VALUES (1, 'Ada'), (2, 'Grace'), (3, NULL)")
    conn.execute("CREATE TABLE orders (id INTEGER, customer_id INTEGER, total DECIMAL(10, 2))")
    conn.execute("INSERT INTO orders VALUES (10, 1, 19.99), (11, 2, 5.00)")
    conn.close()
    return path


class Channel:
    """Records the request messages a view sends."""

    def __init__(self):
        self.sent = []

    def __call__(self, message):
        self.sent.append(message)

    @property
    def last(self):
        return self.sent[-1] if self.sent else None


@pytest.fixture
def channel():
    return Channel()


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "config" / "duckbench.db"


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for every Qt test, without a display."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    QtWidgets = pytest.importorskip("PyQt6.QtWidgets")
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def settings_store(settings_path, monkeypatch):
    """Point the module-level settings helpers at a throwaway store."""
    from duckbench import settings

    store = settings.SettingsStore(settings_path)
    monkeypatch.setattr(settings, "_store", store)
    return store
