"""Database catalog introspection for the Go model generator."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Final, Sequence

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row

from ..shared import IntrospectionError, Table, group_columns

DEFAULT_SCHEMAS: Final[tuple[str, ...]] = ("public",)

# col_description() takes the attribute number, which information_schema
# reports as ordinal_position.
COLUMNS_QUERY: Final[str] = """
SELECT
    c.table_schema,
    c.table_name,
    c.column_name,
    c.ordinal_position,
    c.is_nullable = 'YES' AS is_nullable,
    c.udt_name,
    COALESCE(
        col_description(
            format('%%I.%%I', c.table_schema, c.table_name)::regclass::oid,
            c.ordinal_position
        ),
        ''
    ) AS col_comment
FROM information_schema.columns AS c
WHERE c.table_schema::text = ANY(%(schemas)s::text[])
ORDER BY c.table_schema, c.table_name, c.ordinal_position
"""


@dataclass(frozen=True)
class ConnectionSettings:
    """Connection parameters, read from the libpq environment variables."""

    host: str = "localhost"
    port: str = "5432"
    dbname: str = "postgres"
    user: str = "postgres"
    password: str = field(default="", repr=False)
    sslmode: str = "prefer"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ConnectionSettings:
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=env.get("PGHOST") or defaults.host,
            port=env.get("PGPORT") or defaults.port,
            dbname=env.get("PGDATABASE") or defaults.dbname,
            user=env.get("PGUSER") or defaults.user,
            password=env.get("PGPASSWORD") or defaults.password,
            sslmode=env.get("PGSSLMODE") or defaults.sslmode,
        )

    def with_overrides(self, **overrides: Any) -> ConnectionSettings:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def conninfo(self) -> str:
        params = {
            "host": self.host,
            "port": self.port,
            "dbname": self.dbname,
            "user": self.user,
            "sslmode": self.sslmode,
        }
        if self.password:
            params["password"] = self.password
        return make_conninfo(**params)

    @property
    def target(self) -> str:
        """Human-readable target, safe to print."""
        return f"{self.user}@{self.host}:{self.port}/{self.dbname}"


def fetch_tables(
    conn: psycopg.Connection,
    schemas: Sequence[str] = DEFAULT_SCHEMAS,
) -> list[Table]:
    """Run the catalog query on an open connection and build the tables.

    Tables come back ordered by schema then table name, columns by ordinal
    position.
    """
    with conn.cursor(row_factory=dict_row) as cur:
        cur.execute(COLUMNS_QUERY, {"schemas": list(schemas)})
        rows = cur.fetchall()
    return group_columns(rows)


def introspect(
    settings: ConnectionSettings,
    schemas: Sequence[str] = DEFAULT_SCHEMAS,
) -> list[Table]:
    """Connect, read the catalog and disconnect.

    Raises:
        IntrospectionError: If connecting or querying fails.
    """
    try:
        with psycopg.connect(settings.conninfo()) as conn:
            return fetch_tables(conn, schemas)
    except psycopg.Error as e:
        raise IntrospectionError(
            f"Failed to introspect database: {e}",
            settings.target,
        ) from e
