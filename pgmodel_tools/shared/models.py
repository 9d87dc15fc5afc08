"""In-memory model of introspected tables and columns."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from typing import Any, Iterable, Mapping

from .errors import SchemaValidationError


@dataclass(frozen=True, slots=True)
class Column:
    """A single column as reported by the database catalog."""

    ordinal_position: int
    table_name: str
    column_name: str
    is_nullable: bool
    sql_type: str
    comment: str = ""

    def __post_init__(self) -> None:
        if self.ordinal_position < 1:
            raise SchemaValidationError(
                f"ordinal position must be >= 1, got {self.ordinal_position}",
                field=f"{self.table_name}.{self.column_name}",
            )
        if self.comment is None:
            object.__setattr__(self, "comment", "")

    @property
    def source_name(self) -> str:
        """Raw ``table.column`` reference used in provenance comments."""
        return f"{self.table_name}.{self.column_name}"


@dataclass(frozen=True, slots=True)
class Table:
    """A table and its columns in ordinal order."""

    schema: str
    name: str
    columns: tuple[Column, ...] = ()

    def __post_init__(self) -> None:
        columns = tuple(self.columns)
        object.__setattr__(self, "columns", columns)

        previous = 0
        for column in columns:
            if column.ordinal_position <= previous:
                raise SchemaValidationError(
                    "columns must be in strictly increasing ordinal order "
                    f"({column.ordinal_position} follows {previous})",
                    field=f"{self.qualified_name}.{column.column_name}",
                )
            previous = column.ordinal_position

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}"

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        schema_path: str | None = None,
    ) -> Table:
        """Build a table from its snapshot representation.

        Raises:
            SchemaValidationError: If required keys are missing or malformed.
        """
        name = data.get("name")
        if not name:
            raise SchemaValidationError("table is missing required 'name'", schema_path)

        raw_columns = data.get("columns", [])
        if not isinstance(raw_columns, list):
            raise SchemaValidationError(
                "'columns' must be a list",
                schema_path,
                field=str(name),
            )

        columns: list[Column] = []
        for index, raw in enumerate(raw_columns, start=1):
            if not isinstance(raw, Mapping) or not raw.get("name"):
                raise SchemaValidationError(
                    f"column #{index} must be a mapping with a 'name'",
                    schema_path,
                    field=str(name),
                )

            column_field = f"{name}.{raw['name']}"
            if not raw.get("type"):
                raise SchemaValidationError(
                    "column is missing required 'type'",
                    schema_path,
                    field=column_field,
                )

            position = raw.get("position", index)
            if isinstance(position, bool) or not isinstance(position, int):
                raise SchemaValidationError(
                    f"'position' must be an integer, got {position!r}",
                    schema_path,
                    field=column_field,
                )
            nullable = raw.get("nullable", False)
            if not isinstance(nullable, bool):
                raise SchemaValidationError(
                    f"'nullable' must be true or false, got {nullable!r}",
                    schema_path,
                    field=column_field,
                )
            columns.append(
                Column(
                    ordinal_position=position,
                    table_name=str(name),
                    column_name=str(raw["name"]),
                    is_nullable=nullable,
                    sql_type=str(raw["type"]),
                    comment=str(raw.get("comment") or ""),
                )
            )

        return cls(
            schema=str(data.get("schema") or "public"),
            name=str(name),
            columns=tuple(columns),
        )

    def to_mapping(self) -> dict[str, Any]:
        """Return the snapshot representation of this table."""
        return {
            "schema": self.schema,
            "name": self.name,
            "columns": [
                {
                    "name": col.column_name,
                    "position": col.ordinal_position,
                    "nullable": col.is_nullable,
                    "type": col.sql_type,
                    "comment": col.comment,
                }
                for col in self.columns
            ],
        }


def group_columns(rows: Iterable[Mapping[str, Any]]) -> list[Table]:
    """Fold flat catalog rows into tables.

    Rows must already be ordered by schema, table name and ordinal position;
    table order is preserved as delivered.
    """

    def _key(row: Mapping[str, Any]) -> tuple[str, str]:
        return (row["table_schema"], row["table_name"])

    tables: list[Table] = []
    for (schema, name), group in groupby(rows, key=_key):
        columns = tuple(
            Column(
                ordinal_position=int(row["ordinal_position"]),
                table_name=name,
                column_name=row["column_name"],
                is_nullable=bool(row["is_nullable"]),
                sql_type=row["udt_name"],
                comment=row.get("col_comment") or "",
            )
            for row in group
        )
        tables.append(Table(schema=schema, name=name, columns=columns))
    return tables
