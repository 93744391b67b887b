import types

import pytest

from sqlvariant.adapters import AdapterConfigurationError, AdapterExecutionError
from sqlvariant.adapters.postgres import PostgresAdapter
from sqlvariant.dialects import AnsiDialect
from sqlvariant.utils import get_correlation_id, set_correlation_id


class FakeDriverError(Exception):
    pass


class FakeColumn:
    def __init__(self, name, type_code):
        self.name = name
        self.type_code = type_code


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self.statements = []
        self.correlation_ids = []
        self.description = None
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def execute(self, sql, params=None):
        self.statements.append((sql, params))
        self.correlation_ids.append(get_correlation_id())
        if self.connection.fail:
            raise FakeDriverError("relation does not exist")
        if sql.startswith("SELECT * FROM"):
            self.description = [FakeColumn(name, oid) for name, oid in self.connection.columns]

    def fetchall(self):
        return list(self.connection.catalog.items())


class FakeConnection:
    def __init__(self, columns, catalog=None, fail=False):
        self.columns = columns
        self.catalog = catalog or {}
        self.fail = fail
        self.cursors = []
        self.info = types.SimpleNamespace(
            server_version=150004, user="app", host="", port=5432, dbname="analytics"
        )

    def cursor(self):
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor


class FakeTypes:
    def __init__(self, known):
        self.known = known

    def get(self, oid):
        name = self.known.get(oid)
        if name is None:
            return None
        return types.SimpleNamespace(name=name)


@pytest.fixture
def fake_driver(monkeypatch):
    driver = types.SimpleNamespace(
        Error=FakeDriverError,
        adapters=types.SimpleNamespace(types=FakeTypes({23: "int4", 25: "text"})),
    )
    monkeypatch.setattr("sqlvariant.adapters.postgres._load_driver", lambda: driver)
    return driver


def test_column_types_resolves_known_oids(fake_driver):
    connection = FakeConnection([("id", 23), ("name", 25)])
    adapter = PostgresAdapter(connection)
    assert adapter.column_types("public.users") == {"id": "int4", "name": "text"}
    cursor = connection.cursors[0]
    assert cursor.statements == [("SELECT * FROM public.users LIMIT 0", None)]
    assert cursor.closed


def test_column_types_falls_back_to_pg_type(fake_driver):
    connection = FakeConnection([("id", 23), ("tags", 99001)], catalog={99001: "citext"})
    adapter = PostgresAdapter(connection)
    assert adapter.column_types("Users") == {"id": "int4", "tags": "citext"}
    statements = connection.cursors[0].statements
    assert statements[0][0] == 'SELECT * FROM "Users" LIMIT 0'
    assert "pg_catalog.pg_type" in statements[1][0]
    assert statements[1][1] == ([99001],)


def test_column_types_reports_unresolved_oids(fake_driver):
    connection = FakeConnection([("blob", 424242)])
    with pytest.raises(AdapterExecutionError):
        PostgresAdapter(connection).column_types("t")


def test_driver_errors_are_wrapped_and_cursor_released(fake_driver):
    connection = FakeConnection([], fail=True)
    with pytest.raises(AdapterExecutionError) as excinfo:
        PostgresAdapter(connection).column_types("missing")
    assert isinstance(excinfo.value.__cause__, FakeDriverError)
    assert connection.cursors[0].closed


def test_missing_driver_raises(monkeypatch):
    monkeypatch.setattr("sqlvariant.adapters.postgres._load_driver", lambda: None)
    adapter = PostgresAdapter(FakeConnection([]))
    with pytest.raises(AdapterConfigurationError):
        adapter.column_types("t")


def test_adapter_requires_probe_capability():
    with pytest.raises(AdapterConfigurationError):
        PostgresAdapter(FakeConnection([]), dialect=AnsiDialect())


def test_describe_reports_localhost_for_socket_connections():
    adapter = PostgresAdapter(FakeConnection([]))
    assert adapter.describe() == "postgres 15.4 [app@localhost:5432/analytics]"


def test_describe_formats_legacy_versions():
    connection = FakeConnection([])
    connection.info.server_version = 90624
    connection.info.host = "db.internal"
    assert PostgresAdapter(connection).describe() == "postgres 9.6.24 [app@db.internal:5432/analytics]"


def test_column_type_queries_share_the_caller_correlation_id(fake_driver):
    set_correlation_id("req-1")
    connection = FakeConnection([("id", 23), ("payload", 3802)], catalog={3802: "jsonb"})
    PostgresAdapter(connection).column_types("events")
    cursor = connection.cursors[0]
    assert len(cursor.statements) == 2
    assert cursor.correlation_ids == ["req-1", "req-1"]
    assert get_correlation_id() == "req-1"
