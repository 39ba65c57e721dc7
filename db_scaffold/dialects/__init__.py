"""Dialect readers - per-engine metadata queries, type mapping and SQL text."""

from __future__ import annotations

from typing import Final

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from ..shared import ConfigurationError
from .base import ColumnMetadata, DialectReader, UNKNOWN_TYPE_PREFIX
from .postgres import POSTGRES_TYPES, PostgresDialectReader
from .sqlserver import SQLSERVER_TYPES, SqlServerDialectReader

DIALECTS: Final[dict[str, type[DialectReader]]] = {
    SqlServerDialectReader.name: SqlServerDialectReader,
    PostgresDialectReader.name: PostgresDialectReader,
}

_ALIASES: Final[dict[str, str]] = {
    "sqlserver": "mssql",
    "postgres": "postgresql",
    "pg": "postgresql",
}


def get_dialect(name: str, schema: str | None = None) -> DialectReader:
    """Create the dialect reader registered under ``name``.

    Raises:
        ConfigurationError: If no dialect is registered under that name.
    """
    key = _ALIASES.get(name.lower(), name.lower())
    try:
        reader_cls = DIALECTS[key]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported dialect '{name}' (choose from {', '.join(sorted(DIALECTS))})",
            option="dialect",
        ) from None
    return reader_cls(schema)


def dialect_for_url(connection_string: str, schema: str | None = None) -> DialectReader:
    """Pick the dialect reader matching a SQLAlchemy connection URL."""
    try:
        url = make_url(connection_string)
    except ArgumentError as e:
        raise ConfigurationError(f"Invalid connection string: {e}", option="connection_string") from e
    return get_dialect(url.get_backend_name(), schema)


__all__ = [
    "ColumnMetadata",
    "DialectReader",
    "UNKNOWN_TYPE_PREFIX",
    "PostgresDialectReader",
    "SqlServerDialectReader",
    "POSTGRES_TYPES",
    "SQLSERVER_TYPES",
    "DIALECTS",
    "get_dialect",
    "dialect_for_url",
]
