"""Schema snapshot loading and dumping."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import yaml

from .errors import SchemaError, SchemaValidationError
from .models import Table


def load_schema(schema_path: Path) -> dict[str, Any]:
    """Load a schema snapshot document from a YAML file.

    Args:
        schema_path: Path to the snapshot file.

    Returns:
        The parsed snapshot dictionary.

    Raises:
        SchemaError: If the file cannot be read or parsed.
    """
    try:
        content = schema_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"Failed to read schema file: {e}", str(schema_path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML: {e}", str(schema_path)) from e

    if not isinstance(data, dict):
        raise SchemaError("Schema root must be a mapping", str(schema_path))

    return data


def load_snapshot(schema_path: Path) -> list[Table]:
    """Load the tables recorded in a schema snapshot.

    Tables are returned in file order.

    Raises:
        SchemaError: If the file cannot be read or parsed.
        SchemaValidationError: If the document has the wrong shape.
    """
    data = load_schema(schema_path)
    raw_tables = data.get("tables")
    if not isinstance(raw_tables, list):
        raise SchemaValidationError(
            "schema must provide a 'tables' list",
            str(schema_path),
        )

    tables: list[Table] = []
    for raw in raw_tables:
        if not isinstance(raw, dict):
            raise SchemaValidationError(
                "each table entry must be a mapping",
                str(schema_path),
            )
        tables.append(Table.from_mapping(raw, str(schema_path)))
    return tables


def dump_snapshot(tables: Sequence[Table], schema_path: Path) -> None:
    """Write tables to a YAML snapshot, preserving their order."""
    document = {"tables": [table.to_mapping() for table in tables]}
    try:
        schema_path.parent.mkdir(parents=True, exist_ok=True)
        schema_path.write_text(
            yaml.safe_dump(document, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
    except OSError as e:
        raise SchemaError(f"Failed to write schema file: {e}", str(schema_path)) from e
