from unittest.mock import MagicMock, patch

import psycopg
import pytest
from psycopg.conninfo import conninfo_to_dict
from psycopg.rows import dict_row

from pgmodel_tools.db_codegen.introspect import (
    COLUMNS_QUERY,
    ConnectionSettings,
    fetch_tables,
    introspect,
)
from pgmodel_tools.shared.errors import IntrospectionError
from pgmodel_tools.shared.models import Table


def _rows():
    return [
        {
            "table_schema": "public",
            "table_name": "user_accounts",
            "column_name": "id",
            "ordinal_position": 1,
            "is_nullable": False,
            "udt_name": "int4",
            "col_comment": "",
        },
        {
            "table_schema": "public",
            "table_name": "user_accounts",
            "column_name": "tags",
            "ordinal_position": 2,
            "is_nullable": True,
            "udt_name": "_text",
            "col_comment": "Free-form labels",
        },
    ]


def _mock_connection(rows):
    cursor = MagicMock()
    cursor.fetchall.return_value = rows
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    return conn, cursor


class TestConnectionSettings:
    def test_from_env_defaults(self):
        settings = ConnectionSettings.from_env({})
        assert settings == ConnectionSettings()
        assert settings.host == "localhost"
        assert settings.port == "5432"
        assert settings.sslmode == "prefer"

    def test_from_env(self):
        settings = ConnectionSettings.from_env(
            {
                "PGHOST": "db.internal",
                "PGPORT": "6543",
                "PGDATABASE": "app",
                "PGUSER": "codegen",
                "PGPASSWORD": "secret",
                "PGSSLMODE": "require",
            }
        )
        assert settings == ConnectionSettings(
            "db.internal", "6543", "app", "codegen", "secret", "require"
        )

    def test_with_overrides_ignores_none(self):
        settings = ConnectionSettings(host="a").with_overrides(host=None, dbname="app")
        assert settings.host == "a"
        assert settings.dbname == "app"

    def test_conninfo(self):
        settings = ConnectionSettings("db", "5433", "app", "codegen", "secret", "disable")
        params = conninfo_to_dict(settings.conninfo())
        assert params == {
            "host": "db",
            "port": "5433",
            "dbname": "app",
            "user": "codegen",
            "password": "secret",
            "sslmode": "disable",
        }

    def test_conninfo_without_password(self):
        params = conninfo_to_dict(ConnectionSettings().conninfo())
        assert "password" not in params

    def test_password_hidden(self):
        settings = ConnectionSettings(password="secret")
        assert "secret" not in repr(settings)
        assert "secret" not in settings.target
        assert settings.target == "postgres@localhost:5432/postgres"


class TestFetchTables:
    def test_fetch_tables(self):
        conn, cursor = _mock_connection(_rows())

        tables = fetch_tables(conn)

        conn.cursor.assert_called_once_with(row_factory=dict_row)
        cursor.execute.assert_called_once_with(COLUMNS_QUERY, {"schemas": ["public"]})
        assert len(tables) == 1
        assert tables[0].qualified_name == "public.user_accounts"
        assert tables[0].columns[1].sql_type == "_text"
        assert tables[0].columns[1].comment == "Free-form labels"

    def test_fetch_tables_schemas(self):
        conn, cursor = _mock_connection([])

        assert fetch_tables(conn, ("audit", "public")) == []
        cursor.execute.assert_called_once_with(
            COLUMNS_QUERY, {"schemas": ["audit", "public"]}
        )

    def test_query_orders_by_schema_table_position(self):
        assert "ORDER BY c.table_schema, c.table_name, c.ordinal_position" in COLUMNS_QUERY


class TestIntrospect:
    @patch("pgmodel_tools.db_codegen.introspect.fetch_tables")
    @patch("pgmodel_tools.db_codegen.introspect.psycopg.connect")
    def test_introspect(self, mock_connect, mock_fetch):
        conn = MagicMock()
        mock_connect.return_value.__enter__.return_value = conn
        mock_fetch.return_value = [Table("public", "users")]
        settings = ConnectionSettings(host="db")

        tables = introspect(settings, ["public"])

        assert tables == [Table("public", "users")]
        mock_connect.assert_called_once_with(settings.conninfo())
        mock_fetch.assert_called_once_with(conn, ["public"])
        mock_connect.return_value.__exit__.assert_called_once()

    @patch("pgmodel_tools.db_codegen.introspect.psycopg.connect")
    def test_connection_failure(self, mock_connect):
        mock_connect.side_effect = psycopg.OperationalError("connection refused")

        with pytest.raises(IntrospectionError) as exc_info:
            introspect(ConnectionSettings(host="db", password="secret"))

        message = str(exc_info.value)
        assert "connection refused" in message
        assert "postgres@db:5432/postgres" in message
        assert "secret" not in message

    @patch("pgmodel_tools.db_codegen.introspect.fetch_tables")
    @patch("pgmodel_tools.db_codegen.introspect.psycopg.connect")
    def test_query_failure_releases_connection(self, mock_connect, mock_fetch):
        mock_fetch.side_effect = psycopg.ProgrammingError("bad query")
        mock_connect.return_value.__exit__.return_value = False

        with pytest.raises(IntrospectionError, match="bad query"):
            introspect(ConnectionSettings())

        mock_connect.return_value.__exit__.assert_called_once()
