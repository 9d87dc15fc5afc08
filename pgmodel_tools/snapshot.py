#!/usr/bin/env python3
"""
Capture a database schema as a YAML snapshot.

The snapshot records every table and column the generator consumes, so Go
models can later be rendered with `generate --snapshot` without a database.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from pgmodel_tools.db_codegen.introspect import (
    DEFAULT_SCHEMAS,
    ConnectionSettings,
    introspect,
)
from pgmodel_tools.db_codegen.main import add_connection_arguments
from pgmodel_tools.shared import SchemaError, dump_snapshot

DEFAULT_SNAPSHOT = Path("schema_snapshot.yaml")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Write the current database schema to a YAML snapshot",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_SNAPSHOT,
        help=f"Snapshot file to write (default: {DEFAULT_SNAPSHOT})",
    )
    add_connection_arguments(parser)

    args = parser.parse_args(argv)
    schemas = args.schemas or list(DEFAULT_SCHEMAS)

    settings = ConnectionSettings.from_env().with_overrides(
        host=args.host,
        port=args.port,
        dbname=args.dbname,
        user=args.user,
        sslmode=args.sslmode,
    )

    try:
        print(f"Introspecting {settings.target} (schemas: {', '.join(schemas)})")
        tables = introspect(settings, schemas)
        dump_snapshot(tables, args.output)
    except SchemaError as e:
        raise SystemExit(f"Error: {e}") from e

    column_count = sum(len(table.columns) for table in tables)
    print(f"Wrote {len(tables)} table(s), {column_count} column(s) to {args.output}")


if __name__ == "__main__":
    main()
