from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from db_scaffold.dialects import (
    DIALECTS,
    ColumnMetadata,
    PostgresDialectReader,
    SqlServerDialectReader,
    dialect_for_url,
    get_dialect,
)
from db_scaffold.shared.errors import ConfigurationError, DatabaseConnectionError

USERS_COLUMNS = ["Id", "Email", "CreatedAt"]


class TestMapType:
    @pytest.mark.parametrize(
        "native, expected",
        [
            ("int", "int"),
            ("bigint", "int"),
            ("bit", "bool"),
            ("nvarchar", "str"),
            ("datetime2", "datetime.datetime"),
            ("date", "datetime.date"),
            ("time", "datetime.time"),
            ("money", "decimal.Decimal"),
            ("uniqueidentifier", "uuid.UUID"),
            ("varbinary", "bytes"),
            ("float", "float"),
        ],
    )
    def test_sqlserver_types(self, native, expected):
        assert SqlServerDialectReader().map_type(native) == expected

    @pytest.mark.parametrize(
        "native, expected",
        [
            ("integer", "int"),
            ("character varying", "str"),
            ("timestamp without time zone", "datetime.datetime"),
            ("timestamptz", "datetime.datetime"),
            ("interval", "datetime.timedelta"),
            ("double precision", "float"),
            ("uuid", "uuid.UUID"),
            ("jsonb", "Any"),
            ("bytea", "bytes"),
            ("boolean", "bool"),
        ],
    )
    def test_postgres_types(self, native, expected):
        assert PostgresDialectReader().map_type(native) == expected

    def test_case_insensitive(self):
        assert SqlServerDialectReader().map_type("NVARCHAR") == "str"
        assert PostgresDialectReader().map_type(" Integer ") == "int"

    def test_unknown_type_placeholder(self):
        assert SqlServerDialectReader().map_type("geography") == "UNKNOWN_geography"

    def test_unknown_type_is_single_token(self):
        mapped = PostgresDialectReader().map_type("USER-DEFINED")
        assert mapped == "UNKNOWN_USER_DEFINED"
        assert mapped.isidentifier()

    @pytest.mark.parametrize("native", ["", "   ", "?", "tsvector", "int[]", "x" * 200])
    def test_mapper_is_total(self, dialect_cls, native):
        mapped = dialect_cls().map_type(native)
        assert mapped
        assert isinstance(mapped, str)


class TestSqlServerQueries:
    def setup_method(self):
        self.dialect = SqlServerDialectReader()

    def test_select_all(self):
        assert (
            self.dialect.select_all_query("Users", USERS_COLUMNS)
            == "SELECT [Id], [Email], [CreatedAt] FROM [dbo].[Users]"
        )

    def test_select_all_without_columns(self):
        assert self.dialect.select_all_query("Empty", []) == "SELECT * FROM [dbo].[Empty]"

    def test_select_where(self):
        query = self.dialect.select_where_query("Users", ["Id"])
        assert query == "SELECT [Id] FROM [dbo].[Users] WHERE {where_clause}"
        assert query.format(where_clause="[Id] > :min") == (
            "SELECT [Id] FROM [dbo].[Users] WHERE [Id] > :min"
        )

    def test_select_by_id(self):
        assert (
            self.dialect.select_by_id_query("Users", USERS_COLUMNS, "Id")
            == "SELECT [Id], [Email], [CreatedAt] FROM [dbo].[Users] WHERE [Id] = :id"
        )

    def test_update(self):
        assert (
            self.dialect.update_query("Users", "Id", ["Email", "CreatedAt"])
            == "UPDATE [dbo].[Users] SET [Email] = :Email, [CreatedAt] = :CreatedAt WHERE [Id] = :Id"
        )

    def test_delete(self):
        assert self.dialect.delete_query("Users", "Id") == "DELETE FROM [dbo].[Users] WHERE [Id] = :Id"

    def test_basic_insert_with_output(self):
        assert (
            self.dialect.basic_insert_query("Users", ["Email"], ["Id"])
            == "INSERT INTO [dbo].[Users] ([Email]) OUTPUT INSERTED.[Id] VALUES (:Email)"
        )

    def test_basic_insert_without_output(self):
        assert (
            self.dialect.basic_insert_query("Logs", ["Message", "Level"], [])
            == "INSERT INTO [dbo].[Logs] ([Message], [Level]) VALUES (:Message, :Level)"
        )

    def test_basic_insert_default_values(self):
        assert (
            self.dialect.basic_insert_query("Counters", [], ["Id"])
            == "INSERT INTO [dbo].[Counters] OUTPUT INSERTED.[Id] DEFAULT VALUES"
        )

    def test_advanced_insert_templates(self):
        template = self.dialect.advanced_insert_query("Users")
        output = self.dialect.advanced_insert_output_text().format(columns="INSERTED.[Id]")
        assert template.format(columns="[Email]", values=":Email", output=output) == (
            "INSERT INTO [dbo].[Users] ([Email]) OUTPUT INSERTED.[Id] VALUES (:Email)"
        )
        assert template.format(columns="[Email]", values=":Email", output="") == (
            "INSERT INTO [dbo].[Users] ([Email]) VALUES (:Email)"
        )

    def test_default_values_template(self):
        assert self.dialect.default_values_insert_query("Users").format(output="") == (
            "INSERT INTO [dbo].[Users] DEFAULT VALUES"
        )

    def test_runtime_templates(self):
        assert self.dialect.quote_template.format("Email") == "[Email]"
        assert self.dialect.output_column_template.format("Id") == "INSERTED.[Id]"

    def test_quote_identifier_escapes(self):
        assert self.dialect.quote_identifier("odd]name") == "[odd]]name]"

    def test_custom_schema(self):
        dialect = SqlServerDialectReader("sales")
        assert dialect.select_all_query("Orders", ["Id"]) == "SELECT [Id] FROM [sales].[Orders]"


class TestPostgresQueries:
    def setup_method(self):
        self.dialect = PostgresDialectReader()

    def test_select_all(self):
        assert (
            self.dialect.select_all_query("users", ["id", "email"])
            == 'SELECT "id", "email" FROM "public"."users"'
        )

    def test_select_by_id(self):
        assert (
            self.dialect.select_by_id_query("users", ["id"], "id")
            == 'SELECT "id" FROM "public"."users" WHERE "id" = :id'
        )

    def test_update(self):
        assert (
            self.dialect.update_query("users", "id", ["email"])
            == 'UPDATE "public"."users" SET "email" = :email WHERE "id" = :id'
        )

    def test_delete(self):
        assert self.dialect.delete_query("users", "id") == 'DELETE FROM "public"."users" WHERE "id" = :id'

    def test_basic_insert_returning(self):
        assert (
            self.dialect.basic_insert_query("users", ["email"], ["id", "version"])
            == 'INSERT INTO "public"."users" ("email") VALUES (:email) RETURNING "id", "version"'
        )

    def test_basic_insert_default_values(self):
        assert (
            self.dialect.basic_insert_query("counters", [], ["id"])
            == 'INSERT INTO "public"."counters" DEFAULT VALUES RETURNING "id"'
        )

    def test_advanced_insert_template(self):
        template = self.dialect.advanced_insert_query("users")
        output = self.dialect.advanced_insert_output_text().format(columns='"id"')
        assert template.format(columns='"email"', values=":email", output=output) == (
            'INSERT INTO "public"."users" ("email") VALUES (:email) RETURNING "id"'
        )

    def test_quote_identifier_escapes(self):
        assert self.dialect.quote_identifier('we"ird') == '"we""ird"'

    def test_braces_in_table_name_survive_templates(self):
        template = self.dialect.select_where_query("a{b}", [])
        assert template.format(where_clause="x = 1") == 'SELECT * FROM "public"."a{b}" WHERE x = 1'

        insert = self.dialect.advanced_insert_query("a{b}")
        assert insert.format(columns='"x"', values=":x", output="") == (
            'INSERT INTO "public"."a{b}" ("x") VALUES (:x)'
        )


class TestMetadataQueries:
    def test_list_tables(self, recording_connection, fake_result):
        connection = recording_connection(
            fake_result([{"table_name": "Logs"}, {"table_name": "Users"}])
        )

        tables = SqlServerDialectReader().list_tables(connection)

        assert tables == ["Logs", "Users"]
        sql, params = connection.statements[0]
        assert "INFORMATION_SCHEMA.TABLES" in sql
        assert "BASE TABLE" in sql
        assert params == {"schema": "dbo"}

    def test_list_columns_sqlserver(self, recording_connection, fake_result):
        connection = recording_connection(
            fake_result([
                {
                    "column_name": "Id",
                    "column_type": "int",
                    "is_nullable": 0,
                    "is_identity": 1,
                    "has_default": 0,
                    "is_read_only": 0,
                },
                {
                    "column_name": "Version",
                    "column_type": "rowversion",
                    "is_nullable": 0,
                    "is_identity": 0,
                    "has_default": 0,
                    "is_read_only": 1,
                },
            ])
        )

        columns = SqlServerDialectReader().list_columns(connection, "Users")

        assert columns == [
            ColumnMetadata("Id", "int", False, True, False, False),
            ColumnMetadata("Version", "rowversion", False, False, False, True),
        ]
        sql, params = connection.statements[0]
        assert "sys.columns" in sql
        assert params == {"qualified_name": "[dbo].[Users]"}

    def test_list_columns_postgres(self, recording_connection, fake_result):
        connection = recording_connection(
            fake_result([
                {
                    "column_name": "email",
                    "column_type": "text",
                    "is_nullable": True,
                    "is_identity": False,
                    "has_default": False,
                    "is_read_only": False,
                },
            ])
        )

        columns = PostgresDialectReader("crm").list_columns(connection, "contacts")

        assert columns == [ColumnMetadata("email", "text", True, False, False, False)]
        sql, params = connection.statements[0]
        assert "ORDER BY col.ordinal_position" in sql
        assert params == {"schema": "crm", "table_name": "contacts"}

    def test_list_columns_empty(self, dialect_cls, recording_connection, fake_result):
        connection = recording_connection(fake_result([]))
        assert dialect_cls().list_columns(connection, "Missing") == []

    def test_query_failure_raises_connection_error(self, dialect_cls):
        connection = MagicMock()
        connection.execute.side_effect = OperationalError("SELECT", {}, Exception("boom"))

        with pytest.raises(DatabaseConnectionError) as exc_info:
            dialect_cls().list_columns(connection, "Users")

        assert exc_info.value.table == "Users"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_list_tables_failure(self, dialect_cls):
        connection = MagicMock()
        connection.execute.side_effect = OperationalError("SELECT", {}, Exception("denied"))

        with pytest.raises(DatabaseConnectionError):
            dialect_cls().list_tables(connection)


class TestRegistry:
    def test_registered_dialects(self):
        assert set(DIALECTS) == {"mssql", "postgresql"}

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("mssql", SqlServerDialectReader),
            ("sqlserver", SqlServerDialectReader),
            ("postgresql", PostgresDialectReader),
            ("Postgres", PostgresDialectReader),
        ],
    )
    def test_get_dialect(self, name, expected):
        assert isinstance(get_dialect(name), expected)

    def test_get_dialect_schema(self):
        assert get_dialect("postgresql", "crm").schema == "crm"
        assert get_dialect("mssql").schema == "dbo"

    def test_get_dialect_unknown(self):
        with pytest.raises(ConfigurationError) as exc_info:
            get_dialect("oracle")
        assert exc_info.value.option == "dialect"

    def test_dialect_for_url(self):
        assert isinstance(
            dialect_for_url("postgresql+psycopg://user:pw@localhost/shop"),
            PostgresDialectReader,
        )
        assert isinstance(
            dialect_for_url("mssql+pyodbc://user:pw@dsn"),
            SqlServerDialectReader,
        )

    def test_dialect_for_url_invalid(self):
        with pytest.raises(ConfigurationError):
            dialect_for_url("not a url")

    def test_dialect_for_url_unsupported_backend(self):
        with pytest.raises(ConfigurationError):
            dialect_for_url("sqlite:///shop.db")
