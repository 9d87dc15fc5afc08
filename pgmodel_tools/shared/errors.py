"""Custom exceptions for pgmodel tools."""

from __future__ import annotations


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    def __init__(self, message: str, schema_path: str | None = None) -> None:
        self.schema_path = schema_path
        full_message = f"{message}" if not schema_path else f"[{schema_path}] {message}"
        super().__init__(full_message)


class SchemaValidationError(SchemaError):
    """Raised when a schema or introspected table fails validation."""

    def __init__(
        self,
        message: str,
        schema_path: str | None = None,
        field: str | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"Field '{field}': {message}"
        super().__init__(message, schema_path)


class IntrospectionError(SchemaError):
    """Raised when the database catalog cannot be read."""

    def __init__(self, message: str, target: str | None = None) -> None:
        self.target = target
        if target:
            message = f"{message} (target: {target})"
        super().__init__(message)


class FormatterError(SchemaError):
    """Raised when the external source formatter fails."""

    def __init__(
        self,
        command: str,
        detail: str,
        output_path: str | None = None,
    ) -> None:
        self.command = command
        self.detail = detail
        super().__init__(f"Formatter '{command}' failed: {detail}", output_path)
