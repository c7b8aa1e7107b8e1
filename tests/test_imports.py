"""Tests for verifying import styles work correctly."""


class TestFlatImports:
    """Verify flat imports from klaw_schema work."""

    def test_result_types(self) -> None:
        """Test importing Result types from root."""
        from klaw_schema import Err, Ok, Result

        assert Ok(42).unwrap() == 42
        assert Err('error').is_err()
        result: Result[int, str] = Ok(1)
        assert result.is_ok()

    def test_schema_constructors(self) -> None:
        """Test importing schema constructors from root."""
        from klaw_schema import array, integer, lazy, object_, string, union

        schema = object_({'tags': array(union([string(), integer()]))})
        assert schema.parse({'tags': ['a', 1]}).is_ok()
        assert callable(lazy)

    def test_errors(self) -> None:
        """Test importing errors and formatters from root."""
        from klaw_schema import InvalidSchemaError, SchemaError, ValidationError, flatten_error, treeify_error

        assert issubclass(InvalidSchemaError, SchemaError)
        assert issubclass(ValidationError, Exception)
        assert callable(flatten_error)
        assert callable(treeify_error)

    def test_configuration(self) -> None:
        """Test importing configuration and logging from root."""
        from klaw_schema import configure, configure_logging, get_config, get_logger

        assert callable(configure)
        assert callable(configure_logging)
        assert get_config() is not None
        assert get_logger() is not None

    def test_version(self) -> None:
        """Test the package exposes a version."""
        import klaw_schema

        assert klaw_schema.__version__ == '0.1.0'


class TestSubmoduleImports:
    """Verify submodule imports work."""

    def test_schemas(self) -> None:
        """Test importing schema classes from klaw_schema.schemas."""
        from klaw_schema.schemas import ObjectSchema, StringSchema, string

        assert isinstance(string(), StringSchema)
        assert ObjectSchema is not None

    def test_checks(self) -> None:
        """Test importing checks from klaw_schema.checks."""
        from klaw_schema.checks import Check, MaxSize, MinSize, Regex

        assert issubclass(MinSize, Check)
        assert issubclass(MaxSize, Check)
        assert issubclass(Regex, Check)

    def test_errors(self) -> None:
        """Test importing formatters from klaw_schema.errors."""
        from klaw_schema.errors import format_error, prettify_error, to_dot_path

        assert to_dot_path(('a', 0)) == 'a[0]'
        assert callable(format_error)
        assert callable(prettify_error)


class TestAllExports:
    """Verify __all__ matches the package namespace."""

    def test_all_names_resolve(self) -> None:
        """Every name in __all__ is importable."""
        import klaw_schema

        for name in klaw_schema.__all__:
            assert hasattr(klaw_schema, name), name
