"""DB Code Generator - Generates Go model structs from a PostgreSQL schema."""

from .main import (
    StructField,
    GeneratorContext,
    go_type_for,
    render_table,
    render_document,
    generate,
    GO_TYPE_RULES,
)
from .introspect import (
    ConnectionSettings,
    fetch_tables,
)

__all__ = [
    "StructField",
    "GeneratorContext",
    "go_type_for",
    "render_table",
    "render_document",
    "generate",
    "GO_TYPE_RULES",
    "ConnectionSettings",
    "fetch_tables",
]
