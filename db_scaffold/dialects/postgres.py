"""Postgres dialect reader."""

from __future__ import annotations

from typing import Final

from .base import DialectReader, _escape_braces

# Type mappings from Postgres types to Python types
POSTGRES_TYPES: Final[dict[str, str]] = {
    "bigint": "int",
    "int8": "int",
    "serial8": "int",
    "bigserial": "int",
    "integer": "int",
    "int": "int",
    "int4": "int",
    "serial": "int",
    "serial4": "int",
    "smallint": "int",
    "int2": "int",
    "smallserial": "int",
    "serial2": "int",
    "boolean": "bool",
    "bool": "bool",
    "bytea": "bytes",
    "char": "str",
    "character": "str",
    "character varying": "str",
    "varchar": "str",
    "text": "str",
    "citext": "str",
    "name": "str",
    "xml": "str",
    "inet": "str",
    "cidr": "str",
    "date": "datetime.date",
    "timestamp": "datetime.datetime",
    "timestamp without time zone": "datetime.datetime",
    "timestamp with time zone": "datetime.datetime",
    "timestamptz": "datetime.datetime",
    "time": "datetime.time",
    "time without time zone": "datetime.time",
    "time with time zone": "datetime.time",
    "interval": "datetime.timedelta",
    "numeric": "decimal.Decimal",
    "decimal": "decimal.Decimal",
    "money": "decimal.Decimal",
    "double precision": "float",
    "float8": "float",
    "real": "float",
    "float4": "float",
    "uuid": "uuid.UUID",
    "json": "Any",
    "jsonb": "Any",
}


class PostgresDialectReader(DialectReader):
    """Reads ``information_schema.columns`` and emits ``RETURNING`` clauses."""

    name = "postgresql"
    default_schema = "public"
    type_map = POSTGRES_TYPES

    quote_template = '"{}"'
    output_column_template = '"{}"'
    quote_close = '"'

    tables_query = """SELECT table_name
FROM information_schema.tables
WHERE table_type = 'BASE TABLE'
    AND table_schema = :schema
ORDER BY table_name"""

    # serial and identity columns both own a sequence
    columns_query = """SELECT
    col.column_name AS column_name,
    col.data_type AS column_type,
    (col.is_nullable = 'YES') AS is_nullable,
    (pg_get_serial_sequence(format('%I.%I', col.table_schema, col.table_name), col.column_name) IS NOT NULL) AS is_identity,
    (col.column_default IS NOT NULL) AS has_default,
    (col.is_generated = 'ALWAYS') AS is_read_only
FROM information_schema.columns col
WHERE col.table_schema = :schema
    AND col.table_name = :table_name
ORDER BY col.ordinal_position"""

    def advanced_insert_query(self, table: str) -> str:
        target = _escape_braces(self.qualified_table(table))
        return f"INSERT INTO {target} ({{columns}}) VALUES ({{values}}){{output}}"

    def default_values_insert_query(self, table: str) -> str:
        target = _escape_braces(self.qualified_table(table))
        return f"INSERT INTO {target} DEFAULT VALUES{{output}}"

    def advanced_insert_output_text(self) -> str:
        return " RETURNING {columns}"
