"""
DB Code Generator - Generates Go model structs from a PostgreSQL schema.

This module provides:
- SQL type to Go type mapping
- One struct declaration per table, one field per column
- Rendering from a live database or from a YAML schema snapshot
- Atomic output writes with optional gofmt post-processing
"""

from __future__ import annotations

import argparse
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Final, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..shared import (
    FormatterError,
    SchemaError,
    SchemaValidationError,
    Table,
    load_snapshot,
    to_go_name,
)
from .introspect import DEFAULT_SCHEMAS, ConnectionSettings, introspect

# Placeholder for types with no better mapping.
DYNAMIC_GO_TYPE: Final[str] = "interface{}"

# Ordered (substrings, Go type) rules, first match wins. Several rules
# overlap ("interval" contains "int"), so the order is part of the contract.
GO_TYPE_RULES: Final[tuple[tuple[tuple[str, ...], str], ...]] = (
    (("int", "numeric"), "int64"),
    (("float",), "float64"),
    (("varchar", "text"), "string"),
    (("bool",), "bool"),
    (("time", "date"), "time.Time"),
    (("interval",), "time.Duration"),
    (("bytea",), "[]byte"),
)

DEFAULT_PACKAGE: Final[str] = "models"
DEFAULT_OUTPUT: Final[Path] = Path("models_genpg.go")
FORMATTER_COMMAND: Final[tuple[str, ...]] = ("gofmt", "-s", "-w")

# Template configuration
TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"


@dataclass(frozen=True, slots=True)
class StructField:
    """A rendered struct field."""

    name: str
    go_type: str
    comment: str


@dataclass
class GeneratorContext:
    """Context for code generation with cached resources."""

    legacy_short_segments: bool = False
    template_env: Environment = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        # Pre-compile templates
        self._struct_template = self.template_env.get_template("struct.go.j2")
        self._document_template = self.template_env.get_template("models.go.j2")

    @property
    def struct_template(self):
        return self._struct_template

    @property
    def document_template(self):
        return self._document_template

    def go_name(self, value: str) -> str:
        return to_go_name(value, self.legacy_short_segments)


@lru_cache(maxsize=256)
def _base_go_type(sql_type: str) -> str:
    for needles, go_type in GO_TYPE_RULES:
        if any(needle in sql_type for needle in needles):
            return go_type
    return DYNAMIC_GO_TYPE


def go_type_for(sql_type: str, is_nullable: bool) -> str:
    """Map a PostgreSQL type name to a Go type expression.

    Args:
        sql_type: Internal type name (``udt_name``), e.g. ``int4`` or
            ``_varchar``. A leading underscore marks an array type.
        is_nullable: Whether the column accepts NULL.

    Returns:
        The Go type. Arrays become slices and are never pointer-wrapped;
        other nullable columns become pointers, except ``bytea`` and the
        ``interface{}`` placeholder, which already have a nil value.
    """
    go_type = _base_go_type(sql_type)
    is_array = sql_type.startswith("_")

    if is_array and sql_type != "bytea":
        return f"[]{go_type}"
    if is_nullable and sql_type != "bytea" and go_type != DYNAMIC_GO_TYPE:
        return f"*{go_type}"
    return go_type


def _field_comment(table_name: str, column_name: str, comment: str) -> str:
    text = " ".join(comment.splitlines()) if comment else ""
    source = f"// [{table_name}.{column_name}]"
    return f"{source} {text}" if text else source


def _build_fields(table: Table, ctx: GeneratorContext) -> list[StructField]:
    fields: list[StructField] = []
    for column in table.columns:
        name = ctx.go_name(column.column_name)
        if not name:
            raise SchemaValidationError(
                "column name does not produce a Go identifier",
                field=column.source_name,
            )
        fields.append(
            StructField(
                name=name,
                go_type=go_type_for(column.sql_type, column.is_nullable),
                comment=_field_comment(table.name, column.column_name, column.comment),
            )
        )
    return fields


def render_table(table: Table, ctx: GeneratorContext | None = None) -> str:
    """Render the struct declaration for a single table.

    Raises:
        SchemaValidationError: If the table or a column name normalizes to
            an empty identifier.
    """
    ctx = ctx or GeneratorContext()
    struct_name = ctx.go_name(table.name)
    if not struct_name:
        raise SchemaValidationError(
            "table name does not produce a Go identifier",
            field=table.qualified_name,
        )

    return ctx.struct_template.render(
        struct_name=struct_name,
        qualified_name=table.qualified_name,
        fields=_build_fields(table, ctx),
    )


def render_document(
    tables: Sequence[Table],
    package_name: str = DEFAULT_PACKAGE,
    ctx: GeneratorContext | None = None,
) -> str:
    """Render the full Go source file for the given tables.

    Tables are emitted in the order supplied; tables without columns are
    skipped.
    """
    ctx = ctx or GeneratorContext()
    blocks = [render_table(table, ctx) for table in tables if table.columns]
    return ctx.document_template.render(package_name=package_name, blocks=blocks)


def _run_formatter(path: Path) -> None:
    executable = shutil.which(FORMATTER_COMMAND[0])
    if executable is None:
        raise FormatterError(
            FORMATTER_COMMAND[0],
            "executable not found on PATH (use --no-format to skip)",
            str(path),
        )
    result = subprocess.run(
        [executable, *FORMATTER_COMMAND[1:], str(path)],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise FormatterError(
            " ".join(FORMATTER_COMMAND),
            result.stderr.strip() or f"exit status {result.returncode}",
            str(path),
        )


def _match_output_mode(tmp_path: Path, output_path: Path) -> None:
    """Give the temporary file the mode the destination would normally get.

    mkstemp creates files as 0600; an existing destination keeps its mode,
    a new one follows the process umask.
    """
    if output_path.exists():
        shutil.copymode(output_path, tmp_path)
        return
    umask = os.umask(0)
    os.umask(umask)
    os.chmod(tmp_path, 0o666 & ~umask)


def generate(
    tables: Sequence[Table],
    output_path: Path,
    package_name: str = DEFAULT_PACKAGE,
    run_formatter: bool = True,
    ctx: GeneratorContext | None = None,
) -> int:
    """Generate the Go models file.

    The document is written to a temporary file next to ``output_path``,
    formatted, then moved into place. On failure the destination is left
    untouched.

    Args:
        tables: Tables in introspection order.
        output_path: Destination ``.go`` file.
        package_name: Go package declared by the file.
        run_formatter: Whether to run ``gofmt -s -w`` on the result.
        ctx: Generator context; a default one is created when omitted.

    Returns:
        Number of struct declarations written.
    """
    ctx = ctx or GeneratorContext()
    document = render_document(tables, package_name, ctx)
    content = f"// created at {datetime.now().isoformat(sep=' ')}\n{document}"

    output_path = output_path.resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{output_path.stem}.", suffix=".go", dir=output_path.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        if run_formatter:
            _run_formatter(tmp_path)
        _match_output_mode(tmp_path, output_path)
        os.replace(tmp_path, output_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    return sum(1 for table in tables if table.columns)


def _load_tables(args: argparse.Namespace) -> list[Table]:
    if args.snapshot is not None:
        return load_snapshot(args.snapshot)

    settings = ConnectionSettings.from_env().with_overrides(
        host=args.host,
        port=args.port,
        dbname=args.dbname,
        user=args.user,
        sslmode=args.sslmode,
    )
    print(f"Introspecting {settings.target} (schemas: {', '.join(args.schemas)})")
    return introspect(settings, args.schemas)


def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add database connection and schema selection flags."""
    parser.add_argument("--host", help="Database host (default: $PGHOST)")
    parser.add_argument("--port", help="Database port (default: $PGPORT)")
    parser.add_argument("--dbname", help="Database name (default: $PGDATABASE)")
    parser.add_argument("--user", help="Database user (default: $PGUSER)")
    parser.add_argument("--sslmode", help="SSL mode (default: $PGSSLMODE)")
    parser.add_argument(
        "--schema",
        dest="schemas",
        action="append",
        default=None,
        help="Schema to introspect; repeat for several (default: public)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate Go model structs from a PostgreSQL schema",
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Render from a YAML schema snapshot instead of a live database",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"Generated Go file (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--package",
        dest="package_name",
        default=DEFAULT_PACKAGE,
        help=f"Go package name (default: {DEFAULT_PACKAGE})",
    )
    parser.add_argument(
        "--no-format",
        action="store_true",
        help="Do not run gofmt on the generated file",
    )
    parser.add_argument(
        "--legacy-short-segments",
        action="store_true",
        help="Upper-case every name segment of three characters or fewer",
    )
    add_connection_arguments(parser)

    args = parser.parse_args(argv)
    args.schemas = args.schemas or list(DEFAULT_SCHEMAS)

    try:
        tables = _load_tables(args)
        ctx = GeneratorContext(legacy_short_segments=args.legacy_short_segments)
        count = generate(
            tables,
            args.output,
            package_name=args.package_name,
            run_formatter=not args.no_format,
            ctx=ctx,
        )

        print(f"Generated {count} struct(s) into {args.output}")
    except (SchemaError, OSError) as e:
        raise SystemExit(f"Error: {e}") from e


if __name__ == "__main__":
    main()
