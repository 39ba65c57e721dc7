import importlib
import sys
import uuid
from typing import Any

import pytest

from db_scaffold.dialects import (
    ColumnMetadata,
    PostgresDialectReader,
    SqlServerDialectReader,
)


class FakeResult:
    """Stand-in for a SQLAlchemy ``CursorResult``."""

    def __init__(self, rows: list[dict[str, Any]] | None = None, rowcount: int = 0) -> None:
        self._rows = list(rows or [])
        self.rowcount = rowcount

    def mappings(self) -> "FakeResult":
        return self

    def all(self) -> list[dict[str, Any]]:
        return list(self._rows)

    def first(self) -> dict[str, Any] | None:
        return self._rows[0] if self._rows else None


class RecordingConnection:
    """Records executed statements and replays queued results."""

    def __init__(self, *results: FakeResult) -> None:
        self.statements: list[tuple[str, dict[str, Any]]] = []
        self._results = list(results)

    def execute(self, statement, params=None) -> FakeResult:
        self.statements.append((str(statement), dict(params or {})))
        if self._results:
            return self._results.pop(0)
        return FakeResult()


def _static_reader(base):
    class StaticReader(base):
        """Dialect reader answering metadata from a dict instead of a database."""

        def __init__(self, tables: dict[str, list[ColumnMetadata]], schema=None):
            super().__init__(schema)
            self.tables = tables
            self.column_requests: list[str] = []

        def list_tables(self, connection):
            return sorted(self.tables)

        def list_columns(self, connection, table):
            self.column_requests.append(table)
            return list(self.tables.get(table, []))

    return StaticReader


@pytest.fixture
def fake_result():
    return FakeResult


@pytest.fixture
def recording_connection():
    return RecordingConnection


@pytest.fixture(params=[SqlServerDialectReader, PostgresDialectReader], ids=["mssql", "postgresql"])
def dialect_cls(request):
    return request.param


@pytest.fixture
def static_postgres_reader():
    return _static_reader(PostgresDialectReader)


@pytest.fixture
def static_sqlserver_reader():
    return _static_reader(SqlServerDialectReader)


@pytest.fixture
def users_columns():
    return [
        ColumnMetadata("Id", "int", is_nullable=False, is_identity=True, has_default=False),
        ColumnMetadata("Email", "varchar", is_nullable=False, is_identity=False, has_default=False),
        ColumnMetadata("CreatedAt", "datetime", is_nullable=False, is_identity=False, has_default=True),
    ]


@pytest.fixture
def logs_columns():
    return [
        ColumnMetadata("Message", "varchar", is_nullable=True, is_identity=False, has_default=False),
        ColumnMetadata("Level", "int", is_nullable=False, is_identity=False, has_default=False),
    ]


@pytest.fixture
def generated_package(tmp_path, monkeypatch):
    """A fresh importable package directory for generated modules."""
    namespace = f"scaffold_{uuid.uuid4().hex}"
    package_dir = tmp_path / namespace
    package_dir.mkdir()
    monkeypatch.syspath_prepend(str(tmp_path))

    def load(module_name: str):
        importlib.invalidate_caches()
        return importlib.import_module(f"{namespace}.{module_name}")

    yield namespace, package_dir, load

    for name in [m for m in sys.modules if m == namespace or m.startswith(f"{namespace}.")]:
        del sys.modules[name]
