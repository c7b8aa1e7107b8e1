"""Tests for array, set, map, and record schemas."""

import enum

import pytest
from hypothesis import given

from klaw_schema import (
    IssueCode,
    ObjectValueMarker,
    Ok,
    array,
    enum as enum_schema,
    integer,
    literal,
    loose_record,
    map_,
    number,
    partial_record,
    record,
    set_,
    string,
)
from tests.strategies import int_records, string_lists


class Field(enum.Enum):
    ID = 'id'
    NAME = 'name'


class TestArraySchema:
    """Tests for arrays."""

    def test_parses_elements(self) -> None:
        """Every element is parsed."""
        assert array(string().trim()).parse([' a ', 'b']) == Ok(['a', 'b'])

    def test_keeps_tuple_kind(self) -> None:
        """Tuples in, tuples out."""
        assert array(integer()).parse((1, 2)) == Ok((1, 2))

    def test_returns_fresh_list(self) -> None:
        """The output is a new container."""
        data = [1, 2]
        result = array(integer()).must_parse(data)
        assert result == data
        assert result is not data

    @pytest.mark.parametrize('value', ['abc', b'abc', {'a': 1}, 3])
    def test_rejects_non_sequences(self, value) -> None:
        """Strings, bytes, mappings, and scalars are not arrays."""
        [issue] = array(string()).parse(value).error.issues
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.expected == 'array'

    def test_element_paths(self) -> None:
        """Element issues carry their index."""
        result = array(array(integer())).parse([[1], [2, 'x']])
        assert [issue.path for issue in result.error.issues] == [(1, 1)]

    def test_size_checks(self) -> None:
        """min, max, length, non_empty count items."""
        assert array(integer()).min(2).parse([1]).error.issues[0].message == (
            'Too small: expected array to have at least 2 items'
        )
        assert array(integer()).max(1).parse([1, 2]).is_err()
        assert array(integer()).length(2).parse([1, 2]).is_ok()
        assert array(integer()).non_empty().parse([]).is_err()

    def test_size_checks_skip_after_element_failure(self) -> None:
        """Checks only run once the elements are valid."""
        codes = [issue.code for issue in array(integer()).min(5).parse(['x']).error.issues]
        assert codes == [IssueCode.INVALID_TYPE]

    def test_unwrap(self) -> None:
        """unwrap returns the element schema."""
        element = string()
        assert array(element).unwrap() is element

    @given(string_lists)
    def test_any_list_of_strings(self, value) -> None:
        """Lists of strings always parse unchanged."""
        assert array(string()).parse(value) == Ok(value)


class TestSetSchema:
    """Tests for sets."""

    def test_parses_members(self) -> None:
        """Set members are parsed and the kind is kept."""
        assert set_(integer()).parse({1, 2}) == Ok({1, 2})
        assert set_(integer()).parse(frozenset({1})) == Ok(frozenset({1}))

    def test_rejects_lists(self) -> None:
        """Lists are not sets."""
        assert set_(integer()).parse([1]).is_err()

    def test_member_path(self) -> None:
        """Invalid members are reported under a path naming the member."""
        [issue] = set_(integer()).parse({'x'}).error.issues
        assert issue.path == ('x',)

    def test_unhashable_path_marker(self) -> None:
        """Members that are not str or int use an object marker."""
        [issue] = set_(integer()).parse({1.5}).error.issues
        assert issue.path == (ObjectValueMarker(1.5),)

    def test_size(self) -> None:
        """min counts members."""
        assert set_(integer()).min(2).parse({1}).error.issues[0].message == (
            'Too small: expected set to have at least 2 items'
        )


class TestMapSchema:
    """Tests for maps with arbitrary keys."""

    def test_parses_keys_and_values(self) -> None:
        """Both keys and values are parsed."""
        assert map_(integer(), string()).parse({1: 'a'}) == Ok({1: 'a'})
        assert map_(string().to_upper_case(), integer()).parse({'a': 1}) == Ok({'A': 1})

    def test_key_and_value_issues(self) -> None:
        """Key issues are tagged with location=key, value issues are not."""
        schema = map_(string().min(3), integer().min(10))
        issues = schema.parse({'ab': 5, 'cd': 8}).error.issues
        assert [(issue.path, issue.code) for issue in issues] == [
            (('ab',), IssueCode.TOO_SMALL),
            (('ab',), IssueCode.TOO_SMALL),
            (('cd',), IssueCode.TOO_SMALL),
            (('cd',), IssueCode.TOO_SMALL),
        ]
        assert issues[0].properties['location'] == 'key'
        assert issues[0].properties['origin'] == 'string'
        assert 'location' not in issues[1].properties
        assert issues[1].properties['origin'] == 'number'

    def test_non_string_key_path(self) -> None:
        """Float keys use an object marker in the path."""
        [issue] = map_(number(), string()).parse({1.5: 1}).error.issues
        assert issue.path == (ObjectValueMarker(1.5),)

    def test_counts_entries(self) -> None:
        """min and max count entries, not key lengths."""
        schema = map_(string(), integer()).min(2).max(2)
        assert schema.parse({'a': 1, 'b': 2}).is_ok()
        assert schema.parse({'abcdef': 1}).is_err()
        assert schema.parse({'a': 1, 'b': 2, 'c': 3}).is_err()

    def test_rejects_non_mappings(self) -> None:
        """Lists are not maps."""
        assert map_(string(), integer()).parse([('a', 1)]).error.issues[0].expected == 'map'


class TestRecordSchema:
    """Tests for string-keyed records."""

    def test_parses_entries(self) -> None:
        """Values are parsed under their keys."""
        assert record(string(), integer()).parse({'a': 1, 'b': 2}) == Ok({'a': 1, 'b': 2})

    def test_invalid_key(self) -> None:
        """A key the key schema rejects yields invalid_key with nested issues."""
        [issue] = record(string().min(2), integer()).parse({'a': 1}).error.issues
        assert issue.code is IssueCode.INVALID_KEY
        assert issue.path == ('a',)
        assert issue.message == 'Invalid key in record'
        [nested] = issue.properties['issues']
        assert nested.code is IssueCode.TOO_SMALL

    def test_counts_entries(self) -> None:
        """Size checks count entries."""
        assert record(string(), integer()).max(1).parse({'aaaa': 1}).is_ok()
        assert record(string(), integer()).max(1).parse({'a': 1, 'b': 2}).is_err()

    def test_enum_keys_are_exhaustive(self) -> None:
        """Every enum key must be present."""
        schema = record(enum_schema(['id', 'name']), string())
        assert schema.parse({'id': 'x', 'name': 'y'}).is_ok()
        [issue] = schema.parse({'id': 'x'}).error.issues
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.path == ('name',)

    def test_enum_keys_reject_extras(self) -> None:
        """Keys outside the enum are unrecognized."""
        schema = record(enum_schema(['id']), string())
        [issue] = schema.parse({'id': 'x', 'other': 'y'}).error.issues
        assert issue.code is IssueCode.UNRECOGNIZED_KEYS
        assert issue.properties['keys'] == ['other']

    def test_python_enum_keys(self) -> None:
        """Enum classes close the key set by their values."""
        schema = record(enum_schema(Field), integer())
        assert schema.parse({'id': 1, 'name': 2}).is_ok()
        assert schema.parse({'id': 1}).is_err()

    def test_literal_keys(self) -> None:
        """Literal key schemas also close the key set."""
        schema = record(literal('a', 'b'), integer())
        assert schema.parse({'a': 1, 'b': 2}) == Ok({'a': 1, 'b': 2})
        assert schema.parse({'a': 1}).error.issues[0].path == ('b',)

    def test_partial_record(self) -> None:
        """Partial records skip the missing-key check."""
        assert partial_record(enum_schema(['id', 'name']), string()).parse({'id': 'x'}) == Ok({'id': 'x'})
        assert record(enum_schema(['id', 'name']), string()).partial().parse({}) == Ok({})

    def test_loose_record(self) -> None:
        """Loose records keep rejected keys without validating them."""
        schema = loose_record(string().starts_with('x_'), integer())
        assert schema.parse({'x_a': 1, 'other': 'raw'}) == Ok({'x_a': 1, 'other': 'raw'})
        assert schema.is_loose

    @given(int_records)
    def test_any_int_record(self, value) -> None:
        """String-keyed int mappings always parse unchanged."""
        assert record(string(), integer()).parse(value) == Ok(value)
