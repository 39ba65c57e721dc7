"""Dialect reader contract shared by every supported database engine.

A dialect reader answers two kinds of questions:

- metadata: which base tables exist and what columns they have, read
  through an open SQLAlchemy connection;
- SQL text: pure string builders for the statements embedded into the
  generated accessor functions.

The renderer and the orchestrator only talk to this interface, so adding
an engine means adding one subclass and registering it.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Final, Mapping, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from ..shared import DatabaseConnectionError

UNKNOWN_TYPE_PREFIX: Final[str] = "UNKNOWN_"

_NON_IDENTIFIER = re.compile(r"\W", re.ASCII)


@dataclass(frozen=True, slots=True)
class ColumnMetadata:
    """One database column as reported by the catalog."""

    name: str
    native_type: str
    is_nullable: bool
    is_identity: bool
    has_default: bool
    is_read_only: bool = False


def _escape_braces(value: str) -> str:
    """Escape literal braces so a string survives ``str.format``."""
    return value.replace("{", "{{").replace("}", "}}")


class DialectReader(ABC):
    """Capability set for one database engine."""

    name: ClassVar[str]
    default_schema: ClassVar[str]
    type_map: ClassVar[Mapping[str, str]]

    # str.format templates the generated code applies to column names
    # chosen at call time, after doubling ``quote_close`` inside the name.
    quote_template: ClassVar[str]
    output_column_template: ClassVar[str]
    quote_close: ClassVar[str]

    def __init__(self, schema: str | None = None) -> None:
        self.schema = schema or self.default_schema

    def __repr__(self) -> str:
        return f"{type(self).__name__}(schema={self.schema!r})"

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    # Catalog queries: one ``table_name`` row per base table, and one row
    # per column of a table in ordinal order.
    tables_query: ClassVar[str]
    columns_query: ClassVar[str]

    def columns_query_params(self, table: str) -> dict[str, Any]:
        return {"schema": self.schema, "table_name": table}

    def _fetch(
        self,
        connection: Connection,
        query: str,
        params: Mapping[str, Any],
        table: str | None = None,
    ) -> list[Mapping[str, Any]]:
        try:
            result = connection.execute(text(query), dict(params))
            return list(result.mappings().all())
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(f"Metadata query failed: {e}", table) from e

    def list_tables(self, connection: Connection) -> list[str]:
        """List base tables of the configured schema in alphabetical order.

        Raises:
            DatabaseConnectionError: If the catalog query fails.
        """
        rows = self._fetch(connection, self.tables_query, {"schema": self.schema})
        return [str(row["table_name"]) for row in rows]

    def list_columns(self, connection: Connection, table: str) -> list[ColumnMetadata]:
        """List the columns of ``table`` in native ordinal order.

        Returns an empty list for a table the catalog knows nothing about.

        Raises:
            DatabaseConnectionError: If the catalog query fails.
        """
        rows = self._fetch(
            connection,
            self.columns_query,
            self.columns_query_params(table),
            table,
        )
        return [
            ColumnMetadata(
                name=str(row["column_name"]),
                native_type=str(row["column_type"]),
                is_nullable=bool(row["is_nullable"]),
                is_identity=bool(row["is_identity"]),
                has_default=bool(row["has_default"]),
                is_read_only=bool(row.get("is_read_only", False)),
            )
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Type mapping
    # ------------------------------------------------------------------

    def map_type(self, native_type: str) -> str:
        """Map a native column type to a Python type name.

        Never fails: unmapped types come back as an ``UNKNOWN_`` placeholder
        that stays a single identifier token in the generated source.
        """
        mapped = self.type_map.get(native_type.strip().lower())
        if mapped:
            return mapped
        placeholder = _NON_IDENTIFIER.sub("_", native_type.strip()) or "type"
        return f"{UNKNOWN_TYPE_PREFIX}{placeholder}"

    # ------------------------------------------------------------------
    # SQL text
    # ------------------------------------------------------------------

    def escape_identifier(self, identifier: str) -> str:
        return identifier.replace(self.quote_close, self.quote_close * 2)

    def quote_identifier(self, identifier: str) -> str:
        """Quote a table or column name."""
        return self.quote_template.format(self.escape_identifier(identifier))

    def output_column(self, column: str) -> str:
        """Render one column of the read-back clause."""
        return self.output_column_template.format(self.escape_identifier(column))

    @abstractmethod
    def advanced_insert_query(self, table: str) -> str:
        """Insert template with ``{columns}``, ``{values}`` and ``{output}`` fields."""

    @abstractmethod
    def default_values_insert_query(self, table: str) -> str:
        """Insert template with an ``{output}`` field for rows with no written column."""

    @abstractmethod
    def advanced_insert_output_text(self) -> str:
        """Read-back clause template with a ``{columns}`` field.

        The clause carries its own leading space so it can be dropped
        entirely when nothing is read back.
        """

    def qualified_table(self, table: str) -> str:
        return f"{self.quote_identifier(self.schema)}.{self.quote_identifier(table)}"

    def _column_list(self, columns: Sequence[str]) -> str:
        if not columns:
            return "*"
        return ", ".join(self.quote_identifier(column) for column in columns)

    def _assignment(self, column: str) -> str:
        return f"{self.quote_identifier(column)} = :{column}"

    def select_all_query(self, table: str, columns: Sequence[str]) -> str:
        return f"SELECT {self._column_list(columns)} FROM {self.qualified_table(table)}"

    def select_where_query(self, table: str, columns: Sequence[str]) -> str:
        """Select template with a ``{where_clause}`` field."""
        select_all = _escape_braces(self.select_all_query(table, columns))
        return f"{select_all} WHERE {{where_clause}}"

    def select_by_id_query(self, table: str, columns: Sequence[str], identity: str) -> str:
        return (
            f"{self.select_all_query(table, columns)} "
            f"WHERE {self.quote_identifier(identity)} = :id"
        )

    def update_query(self, table: str, identity: str, columns: Sequence[str]) -> str:
        set_clause = ", ".join(self._assignment(column) for column in columns)
        return (
            f"UPDATE {self.qualified_table(table)} SET {set_clause} "
            f"WHERE {self._assignment(identity)}"
        )

    def delete_query(self, table: str, identity: str) -> str:
        return f"DELETE FROM {self.qualified_table(table)} WHERE {self._assignment(identity)}"

    def output_clause(self, columns: Sequence[str]) -> str:
        """Render the read-back clause for a fixed column list."""
        if not columns:
            return ""
        output_columns = ", ".join(self.output_column(column) for column in columns)
        return self.advanced_insert_output_text().format(columns=output_columns)

    def basic_insert_query(
        self,
        table: str,
        write_columns: Sequence[str],
        read_columns: Sequence[str],
    ) -> str:
        output = self.output_clause(read_columns)
        if not write_columns:
            return self.default_values_insert_query(table).format(output=output)
        return self.advanced_insert_query(table).format(
            columns=self._column_list(write_columns),
            values=", ".join(f":{column}" for column in write_columns),
            output=output,
        )
