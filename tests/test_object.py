"""Tests for object schemas: modes, missing keys, and shape helpers."""

import dataclasses

import msgspec
import pytest

from klaw_schema import (
    InvalidSchemaError,
    IssueCode,
    ObjectMode,
    Ok,
    integer,
    loose_object,
    object_,
    optional,
    strict_object,
    string,
)


class Point(msgspec.Struct):
    x: int
    y: int


@dataclasses.dataclass
class Named:
    name: str


class TestObjectParsing:
    """Tests for field parsing and missing keys."""

    def test_parses_fields(self, user_schema) -> None:
        """Known fields are parsed into a new dict."""
        assert user_schema.parse({'name': 'Ada', 'age': 36}) == Ok({'name': 'Ada', 'age': 36})

    def test_optional_field_may_be_missing(self, user_schema) -> None:
        """Absent optional keys are left out of the output."""
        assert user_schema.parse({'name': 'Ada'}) == Ok({'name': 'Ada'})

    def test_optional_field_explicit_none(self, user_schema) -> None:
        """An explicit None for an optional key is kept."""
        assert user_schema.parse({'name': 'Ada', 'age': None}) == Ok({'name': 'Ada', 'age': None})

    def test_missing_required_key(self, user_schema) -> None:
        """A missing required key is invalid_type at its path."""
        [issue] = user_schema.parse({}).error.issues
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.path == ('name',)
        assert issue.expected == 'string'

    def test_missing_non_optional_key(self) -> None:
        """A key made non-optional reports expected non_optional."""
        schema = object_({'hi': optional(string()).non_optional()})
        [issue] = schema.parse({}).error.issues
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.path == ('hi',)
        assert issue.expected == 'non_optional'

    def test_missing_key_gets_default(self) -> None:
        """A missing key with a default is filled in."""
        schema = object_({'role': string().default('user')})
        assert schema.parse({}) == Ok({'role': 'user'})

    def test_missing_key_gets_prefault(self) -> None:
        """A missing key with a prefault is filled in after validation."""
        schema = object_({'role': string().to_upper_case().prefault('user')})
        assert schema.parse({}) == Ok({'role': 'USER'})

    def test_collects_all_field_issues(self) -> None:
        """Every failing field is reported."""
        schema = object_({'a': integer(), 'b': integer(), 'c': integer()})
        result = schema.parse({'a': 'x', 'c': 'y'})
        assert [issue.path for issue in result.error.issues] == [('a',), ('b',), ('c',)]

    def test_rejects_non_objects(self) -> None:
        """Lists and scalars are invalid_type with expected object."""
        [issue] = object_({}).parse([]).error.issues
        assert issue.expected == 'object'

    def test_struct_input(self) -> None:
        """msgspec Structs are read field by field."""
        schema = object_({'x': integer(), 'y': integer()})
        assert schema.parse(Point(1, 2)) == Ok({'x': 1, 'y': 2})

    def test_dataclass_input(self) -> None:
        """Dataclass instances are read field by field."""
        assert object_({'name': string()}).parse(Named('Ada')) == Ok({'name': 'Ada'})


class TestUnknownKeys:
    """Tests for strip, strict, passthrough, and catchall."""

    def test_strip_is_default_and_silent(self) -> None:
        """Unknown keys are dropped without issues."""
        schema = object_({'a': integer()})
        assert schema.mode is ObjectMode.STRIP
        assert schema.parse({'a': 1, 'b': 2}) == Ok({'a': 1})

    def test_strict_reports_each_key(self) -> None:
        """Strict mode reports one issue per unknown key, each at its own path."""
        schema = strict_object({'a': integer()})
        issues = schema.parse({'a': 1, 'b': 2, 'c': 3}).error.issues
        assert [issue.code for issue in issues] == [IssueCode.UNRECOGNIZED_KEYS] * 2
        assert [issue.path for issue in issues] == [('b',), ('c',)]
        assert [issue.properties['keys'] for issue in issues] == [['b'], ['c']]
        assert issues[0].message == 'Unrecognized key: "b"'

    def test_strict_method(self) -> None:
        """strict() switches mode on a copy."""
        base = object_({'a': integer()})
        assert base.strict().parse({'a': 1, 'b': 2}).is_err()
        assert base.parse({'a': 1, 'b': 2}).is_ok()

    def test_passthrough(self) -> None:
        """Passthrough keeps unknown keys as they are."""
        assert loose_object({'a': integer()}).parse({'a': 1, 'b': 'x'}) == Ok({'a': 1, 'b': 'x'})
        assert object_({}).passthrough().strip().parse({'b': 1}) == Ok({})

    def test_catchall(self) -> None:
        """A catchall validates and keeps every unknown key."""
        schema = strict_object({'a': integer()}).catchall(integer())
        assert schema.parse({'a': 1, 'b': 2}) == Ok({'a': 1, 'b': 2})
        [issue] = schema.parse({'a': 1, 'b': 'x'}).error.issues
        assert issue.path == ('b',)
        assert issue.code is IssueCode.INVALID_TYPE


class TestShapeHelpers:
    """Tests for pick, omit, extend, merge, partial, required, keyof."""

    def test_pick_and_omit(self) -> None:
        """pick keeps and omit drops keys."""
        schema = object_({'a': integer(), 'b': integer(), 'c': integer()})
        assert list(schema.pick('a', 'c').shape) == ['a', 'c']
        assert list(schema.omit('b').shape) == ['a', 'c']

    def test_pick_unknown_key_raises(self) -> None:
        """Unknown keys are a schema error."""
        with pytest.raises(InvalidSchemaError):
            object_({'a': integer()}).pick('z')

    def test_pick_on_refined_object_raises(self) -> None:
        """Objects with checks cannot be picked or omitted."""
        schema = object_({'a': integer()}).refine(lambda value: True)
        with pytest.raises(InvalidSchemaError):
            schema.pick('a')
        with pytest.raises(InvalidSchemaError):
            schema.omit('a')

    def test_extend(self) -> None:
        """extend adds and replaces keys."""
        schema = object_({'a': integer()}).extend({'a': string(), 'b': integer()})
        assert schema.parse({'a': 'x', 'b': 1}) == Ok({'a': 'x', 'b': 1})

    def test_extend_refined_object_overwrite_raises(self) -> None:
        """A refined object cannot have its keys overwritten."""
        schema = object_({'a': integer()}).refine(lambda value: True)
        assert 'b' in schema.extend({'b': integer()}).shape
        with pytest.raises(InvalidSchemaError):
            schema.extend({'a': string()})

    def test_merge(self) -> None:
        """merge takes keys and mode from the other object."""
        merged = object_({'a': integer()}).merge(strict_object({'b': integer()}))
        assert merged.mode is ObjectMode.STRICT
        assert merged.parse({'a': 1, 'b': 2}) == Ok({'a': 1, 'b': 2})
        assert merged.parse({'a': 1, 'b': 2, 'c': 3}).is_err()

    def test_partial(self) -> None:
        """partial makes keys optional."""
        schema = object_({'a': integer(), 'b': integer()})
        assert schema.partial().parse({}) == Ok({})
        [issue] = schema.partial('a').parse({}).error.issues
        assert issue.path == ('b',)

    def test_required(self) -> None:
        """required makes keys reject missing values."""
        schema = object_({'a': integer().optional(), 'b': integer().optional()})
        [issue] = schema.required('a').parse({}).error.issues
        assert issue.path == ('a',)
        assert issue.expected == 'non_optional'

    def test_keyof(self) -> None:
        """keyof is an enum of the keys."""
        keys = object_({'a': integer(), 'b': integer()}).keyof()
        assert keys.parse('a') == Ok('a')
        assert keys.parse('c').error.issues[0].code is IssueCode.INVALID_VALUE

    def test_helpers_do_not_modify_original(self) -> None:
        """Shape helpers return new schemas."""
        base = object_({'a': integer()})
        base.extend({'b': integer()})
        base.partial()
        base.strict()
        assert list(base.shape) == ['a']
        assert base.mode is ObjectMode.STRIP
        assert base.parse({}).is_err()

    def test_object_size_counts_keys(self) -> None:
        """min/max on objects count output keys."""
        schema = loose_object({}).max(1)
        assert schema.parse({'a': 1}).is_ok()
        assert schema.parse({'a': 1, 'b': 2}).error.issues[0].message == (
            'Too big: expected object to have at most 1 keys'
        )
