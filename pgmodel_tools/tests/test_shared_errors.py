from pgmodel_tools.shared.errors import (
    FormatterError,
    IntrospectionError,
    SchemaError,
    SchemaValidationError,
)


class TestSchemaError:
    def test_init_no_path(self):
        error = SchemaError("test message")
        assert str(error) == "test message"
        assert error.schema_path is None

    def test_init_with_path(self):
        error = SchemaError("test message", "path/to/schema.yaml")
        assert str(error) == "[path/to/schema.yaml] test message"
        assert error.schema_path == "path/to/schema.yaml"


class TestSchemaValidationError:
    def test_init_no_field_no_path(self):
        error = SchemaValidationError("validation failed")
        assert str(error) == "validation failed"
        assert error.field is None
        assert error.schema_path is None

    def test_init_with_field(self):
        error = SchemaValidationError("invalid value", field="users.id")
        assert str(error) == "Field 'users.id': invalid value"
        assert error.field == "users.id"

    def test_init_with_field_and_path(self):
        error = SchemaValidationError("invalid value", "schema.yaml", "name")
        assert str(error) == "[schema.yaml] Field 'name': invalid value"
        assert error.field == "name"
        assert error.schema_path == "schema.yaml"


class TestIntrospectionError:
    def test_init(self):
        error = IntrospectionError("connection refused")
        assert str(error) == "connection refused"
        assert error.target is None
        assert isinstance(error, SchemaError)

    def test_init_with_target(self):
        error = IntrospectionError("connection refused", "app@db:5432/app")
        assert str(error) == "connection refused (target: app@db:5432/app)"
        assert error.target == "app@db:5432/app"


class TestFormatterError:
    def test_init(self):
        error = FormatterError("gofmt", "exit status 2")
        assert str(error) == "Formatter 'gofmt' failed: exit status 2"
        assert error.command == "gofmt"
        assert error.detail == "exit status 2"

    def test_init_with_path(self):
        error = FormatterError("gofmt -s -w", "syntax error", "models.go")
        assert str(error) == "[models.go] Formatter 'gofmt -s -w' failed: syntax error"
        assert error.schema_path == "models.go"
