"""Shared utilities for pgmodel tools."""

from .schema_loader import (
    load_schema,
    load_snapshot,
    dump_snapshot,
)
from .naming import (
    to_go_name,
    COMMON_INITIALISMS,
)
from .models import (
    Column,
    Table,
    group_columns,
)
from .errors import (
    SchemaError,
    SchemaValidationError,
    IntrospectionError,
    FormatterError,
)

__all__ = [
    # Snapshot loading
    "load_schema",
    "load_snapshot",
    "dump_snapshot",
    # Naming utilities
    "to_go_name",
    "COMMON_INITIALISMS",
    # Schema model
    "Column",
    "Table",
    "group_columns",
    # Errors
    "SchemaError",
    "SchemaValidationError",
    "IntrospectionError",
    "FormatterError",
]
