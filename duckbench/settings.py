"""SQLite store for application settings and recently opened files."""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path.home() / ".config" / "duckbench" / "duckbench.db"
MAX_RECENT_FILES = 10

DEFAULTS = {
    "dark_mode": "1",
    "font_size": "13",
    "page_size": "25",
    "column_width": "150",
    "read_only": "0",
    "log_level": "WARNING",
}


class SettingsStore:
    def __init__(self, db_path=None):
        if db_path is None:
            db_path = DEFAULT_DB_PATH
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_conn(self):
        return sqlite3.connect(self.db_path)

    def _init_db(self):
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS recent_files (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    path TEXT NOT NULL UNIQUE
                )
            """)
            conn.commit()

    # Settings methods
    def get_setting(self, key, default=None):
        with self._get_conn() as conn:
            cursor = conn.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = cursor.fetchone()
        if row:
            return row[0]
        if default is not None:
            return default
        return DEFAULTS.get(key)

    def set_setting(self, key, value):
        with self._get_conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                (key, str(value))
            )
            conn.commit()

    def get_int_setting(self, key, default=0):
        value = self.get_setting(key)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_bool_setting(self, key, default=False):
        value = self.get_setting(key)
        if value is None:
            return default
        return value == "1"

    # Recent file methods
    def add_recent_file(self, path):
        """Move path to the top of the recent list, trimming the oldest."""
        path = str(path)
        with self._get_conn() as conn:
            conn.execute("DELETE FROM recent_files WHERE path = ?", (path,))
            conn.execute("INSERT INTO recent_files (path) VALUES (?)", (path,))
            conn.execute(
                """DELETE FROM recent_files WHERE id NOT IN (
                       SELECT id FROM recent_files ORDER BY id DESC LIMIT ?
                   )""",
                (MAX_RECENT_FILES,)
            )
            conn.commit()

    def get_recent_files(self):
        with self._get_conn() as conn:
            cursor = conn.execute("SELECT path FROM recent_files ORDER BY id DESC")
            return [row[0] for row in cursor.fetchall()]

    def remove_recent_file(self, path):
        with self._get_conn() as conn:
            conn.execute("DELETE FROM recent_files WHERE path = ?", (str(path),))
            conn.commit()

    def clear_recent_files(self):
        with self._get_conn() as conn:
            conn.execute("DELETE FROM recent_files")
            conn.commit()


_store = None


def _get_db():
    global _store
    if _store is None:
        _store = SettingsStore()
    return _store


def get_setting(key, default=None):
    return _get_db().get_setting(key, default)


def set_setting(key, value):
    _get_db().set_setting(key, value)


def get_int_setting(key, default=0):
    return _get_db().get_int_setting(key, default)


def get_bool_setting(key, default=False):
    return _get_db().get_bool_setting(key, default)


def add_recent_file(path):
    _get_db().add_recent_file(path)


def get_recent_files():
    return _get_db().get_recent_files()


def remove_recent_file(path):
    _get_db().remove_recent_file(path)


def clear_recent_files():
    _get_db().clear_recent_files()
