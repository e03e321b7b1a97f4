"""Tests for QuerySession against real DuckDB files."""

import datetime
import threading

import duckdb
import pytest

from duckbench.errors import ConnectionError, QueryError, SessionError
from duckbench.protocol import handle_request, query_request
from duckbench.result_view import format_value
from duckbench.session import QuerySession, to_scalar, unique_column_names


class TestOpen:
    def test_open_existing_file(self, db_path):
        session = QuerySession.open(db_path)
        assert session.is_open
        session.close()

    def test_missing_file_raises_connection_error(self, tmp_path):
        with pytest.raises(ConnectionError):
            QuerySession.open(tmp_path / "nope.duckdb")

    def test_missing_file_is_not_created(self, tmp_path):
        path = tmp_path / "nope.duckdb"
        with pytest.raises(ConnectionError):
            QuerySession.open(path)
        assert not path.exists()

    def test_corrupt_file_raises_connection_error(self, tmp_path):
        path = tmp_path / "garbage.duckdb"
        path.write_bytes(b"this is not a duckdb database" * 200)
        with pytest.raises(ConnectionError) as exc_info:
            QuerySession.open(path)
        assert isinstance(exc_info.value.__cause__, duckdb.Error)

    def test_connection_error_is_session_error(self):
        assert issubclass(ConnectionError, SessionError)
        assert issubclass(QueryError, SessionError)

    def test_context_manager_closes(self, db_path):
        with QuerySession.open(db_path) as session:
            assert session.list_tables()
        assert not session.is_open


class TestListTables:
    def test_lists_all_tables(self, db_path):
        with QuerySession.open(db_path) as session:
            assert session.list_tables() == ["customers", "orders"]

    def test_empty_database(self, tmp_path):
        path = tmp_path / "empty.duckdb"
        duckdb.connect(str(path)).close()
        with QuerySession.open(path) as session:
            assert session.list_tables() == []

    def test_sees_table_created_by_query(self, db_path):
        with QuerySession.open(db_path) as session:
            session.execute_query("CREATE TABLE notes (body VARCHAR)")
            assert "notes" in session.list_tables()


class TestExecuteQuery:
    def test_single_value(self, db_path):
        with QuerySession.open(db_path) as session:
            assert session.execute_query("SELECT 1 AS x") == [{"x": 1}]

    def test_rows_in_result_order(self, db_path):
        with QuerySession.open(db_path) as session:
            rows = session.execute_query("SELECT id, name FROM customers ORDER BY id")
        assert rows == [
            {"id": 1, "name": "Ada"},
            {"id": 2, "name": "Grace"},
            {"id": 3, "name": None},
        ]

    def test_column_order_preserved(self, db_path):
        with QuerySession.open(db_path) as session:
            rows = session.execute_query("SELECT name, id FROM customers LIMIT 1")
        assert list(rows[0].keys()) == ["name", "id"]

    def test_empty_result(self, db_path):
        with QuerySession.open(db_path) as session:
            assert session.execute_query("SELECT * FROM customers WHERE id > 100") == []

    def test_statement_without_result_set(self, db_path):
        with QuerySession.open(db_path) as session:
            result = session.execute_query("CREATE TABLE t (a INTEGER)")
        assert isinstance(result, list)

    def test_unknown_table_raises_query_error(self, db_path):
        with QuerySession.open(db_path) as session:
            with pytest.raises(QueryError) as exc_info:
                session.execute_query("SELECT * FROM missing_table")
        assert "missing_table" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, duckdb.Error)

    def test_session_usable_after_query_error(self, db_path):
        with QuerySession.open(db_path) as session:
            with pytest.raises(QueryError):
                session.execute_query("SELEC 1")
            assert session.execute_query("SELECT 2 AS y") == [{"y": 2}]

    @pytest.mark.parametrize("sql", ["", "   ", "\n\t"])
    def test_blank_sql_raises_query_error(self, db_path, sql):
        with QuerySession.open(db_path) as session:
            with pytest.raises(QueryError):
                session.execute_query(sql)

    def test_decimal_becomes_float(self, db_path):
        with QuerySession.open(db_path) as session:
            rows = session.execute_query("SELECT total FROM orders ORDER BY id")
        assert rows == [{"total": 19.99}, {"total": 5.0}]
        assert isinstance(rows[0]["total"], float)

    def test_temporal_and_boolean_values(self, db_path):
        sql = "SELECT DATE '2024-02-29' AS d, TIMESTAMP '2024-01-01 12:30:00' AS ts, true AS b"
        with QuerySession.open(db_path) as session:
            (row,) = session.execute_query(sql)
        assert row["d"] == datetime.date(2024, 2, 29)
        assert row["ts"] == datetime.datetime(2024, 1, 1, 12, 30)
        assert row["b"] is True

    @pytest.mark.parametrize("sql,scalar_type,text", [
        ("TIMESTAMPTZ '2024-01-01 00:00:00+00'", datetime.datetime, "2024-01-01 00:00:00+00:00"),
        ("TIME '13:45:30'", datetime.time, "13:45:30"),
        ("INTERVAL '1 day 2 hours'", str, "1 day, 2:00:00"),
        ("'6d5c8f1e-2b0a-4c3e-9f7d-1a2b3c4d5e6f'::UUID", str,
         "6d5c8f1e-2b0a-4c3e-9f7d-1a2b3c4d5e6f"),
    ])
    def test_engine_types_to_row_values(self, db_path, sql, scalar_type, text):
        with QuerySession.open(db_path) as session:
            session.execute_query("SET TimeZone = 'UTC'")
            (row,) = session.execute_query(f"SELECT {sql} AS v")
        assert isinstance(row["v"], scalar_type)
        assert format_value(row["v"]) == text

    def test_timestamptz_column_is_timezone_aware(self, db_path):
        with QuerySession.open(db_path) as session:
            session.execute_query("SET TimeZone = 'UTC'")
            session.execute_query("CREATE TABLE events (ts TIMESTAMPTZ)")
            session.execute_query("INSERT INTO events VALUES ('2024-01-01 00:00:00+00')")
            response = handle_request(session, query_request("SELECT * FROM events"))
        assert response["type"] == "queryResult"
        (row,) = response["results"]
        assert row["ts"].utcoffset() == datetime.timedelta(0)
        assert row["ts"].replace(tzinfo=None) == datetime.datetime(2024, 1, 1)

    def test_nested_values_become_text(self, db_path):
        with QuerySession.open(db_path) as session:
            (row,) = session.execute_query("SELECT [1, 2, 3] AS xs")
        assert isinstance(row["xs"], str)

    def test_duplicate_column_names_are_kept(self, db_path):
        with QuerySession.open(db_path) as session:
            (row,) = session.execute_query("SELECT 1 AS a, 2 AS a, 3 AS a")
        assert row == {"a": 1, "a_1": 2, "a_2": 3}

    def test_read_only_rejects_writes(self, db_path):
        with QuerySession.open(db_path, read_only=True) as session:
            with pytest.raises(QueryError):
                session.execute_query("CREATE TABLE t (a INTEGER)")
            assert session.list_tables() == ["customers", "orders"]


class TestClose:
    def test_close_twice(self, db_path):
        session = QuerySession.open(db_path)
        session.close()
        session.close()
        assert not session.is_open

    def test_query_after_close(self, db_path):
        session = QuerySession.open(db_path)
        session.close()
        with pytest.raises(ConnectionError):
            session.execute_query("SELECT 1")

    def test_list_tables_after_close(self, db_path):
        session = QuerySession.open(db_path)
        session.close()
        with pytest.raises(ConnectionError):
            session.list_tables()

    def test_repr_shows_state(self, db_path):
        session = QuerySession.open(db_path)
        assert "open" in repr(session)
        session.close()
        assert "closed" in repr(session)


class TestConcurrency:
    def test_queries_from_several_threads(self, db_path):
        results = []
        errors = []

        with QuerySession.open(db_path) as session:
            def worker(n):
                try:
                    results.append(session.execute_query(f"SELECT {n} AS n"))
                except SessionError as e:
                    errors.append(e)

            threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert errors == []
        assert sorted(r[0]["n"] for r in results) == list(range(8))


class TestHelpers:
    def test_unique_column_names(self):
        assert unique_column_names(["a", "b", "a"]) == ["a", "b", "a_1"]

    def test_unique_column_names_avoids_existing_suffix(self):
        assert unique_column_names(["a", "a_1", "a"]) == ["a", "a_1", "a_2"]

    def test_to_scalar_blob(self):
        assert to_scalar(b"abc") == "abc"
        assert to_scalar(b"\xff") == "\\xff"

    def test_to_scalar_passthrough(self):
        assert to_scalar(None) is None
        assert to_scalar(3) == 3
        assert to_scalar("x") == "x"
