"""SQL Server dialect reader."""

from __future__ import annotations

from typing import Any, Final

from .base import DialectReader, _escape_braces

# Type mappings from SQL Server types to Python types
SQLSERVER_TYPES: Final[dict[str, str]] = {
    "bigint": "int",
    "int": "int",
    "smallint": "int",
    "tinyint": "int",
    "bit": "bool",
    "decimal": "decimal.Decimal",
    "numeric": "decimal.Decimal",
    "money": "decimal.Decimal",
    "smallmoney": "decimal.Decimal",
    "float": "float",
    "real": "float",
    "char": "str",
    "nchar": "str",
    "varchar": "str",
    "nvarchar": "str",
    "text": "str",
    "ntext": "str",
    "xml": "str",
    "sysname": "str",
    "binary": "bytes",
    "varbinary": "bytes",
    "image": "bytes",
    "timestamp": "bytes",
    "rowversion": "bytes",
    "date": "datetime.date",
    "datetime": "datetime.datetime",
    "datetime2": "datetime.datetime",
    "smalldatetime": "datetime.datetime",
    "datetimeoffset": "datetime.datetime",
    "time": "datetime.time",
    "uniqueidentifier": "uuid.UUID",
}


class SqlServerDialectReader(DialectReader):
    """Reads ``sys.columns`` and emits ``OUTPUT INSERTED`` read-back clauses."""

    name = "mssql"
    default_schema = "dbo"
    type_map = SQLSERVER_TYPES

    quote_template = "[{}]"
    output_column_template = "INSERTED.[{}]"
    quote_close = "]"

    tables_query = """SELECT TABLE_NAME AS table_name
FROM INFORMATION_SCHEMA.TABLES
WHERE TABLE_TYPE = 'BASE TABLE'
    AND TABLE_SCHEMA = :schema
ORDER BY TABLE_NAME"""

    # rowversion columns are maintained by the server and cannot be written
    columns_query = """SELECT col.[name] AS column_name
    ,typ.[name] AS column_type
    ,col.is_nullable AS is_nullable
    ,col.is_identity AS is_identity
    ,CASE WHEN col.default_object_id = 0 THEN 0 ELSE 1 END AS has_default
    ,CASE WHEN col.is_computed = 1 OR typ.[name] IN ('timestamp', 'rowversion') THEN 1 ELSE 0 END AS is_read_only
FROM sys.columns col
JOIN sys.types typ ON col.system_type_id = typ.system_type_id
    AND col.user_type_id = typ.user_type_id
WHERE col.object_id = OBJECT_ID(:qualified_name)
ORDER BY col.column_id"""

    def columns_query_params(self, table: str) -> dict[str, Any]:
        return {"qualified_name": self.qualified_table(table)}

    def advanced_insert_query(self, table: str) -> str:
        target = _escape_braces(self.qualified_table(table))
        return f"INSERT INTO {target} ({{columns}}){{output}} VALUES ({{values}})"

    def default_values_insert_query(self, table: str) -> str:
        target = _escape_braces(self.qualified_table(table))
        return f"INSERT INTO {target}{{output}} DEFAULT VALUES"

    def advanced_insert_output_text(self) -> str:
        return " OUTPUT {columns}"
