"""Tests for union, xor, discriminated union, and intersection."""

import pytest

from klaw_schema import (
    IntersectionSchema,
    InvalidSchemaError,
    IssueCode,
    Ok,
    UnionSchema,
    array,
    discriminated_union,
    enum,
    integer,
    intersection,
    literal,
    nil,
    number,
    object_,
    string,
    union,
    xor,
)


class TestUnion:
    """Tests for first-match unions."""

    def test_first_match_wins(self) -> None:
        """Options are tried in order."""
        schema = union([number(), integer().transform(lambda value: value * 2)])
        assert schema.parse(2) == Ok(2)
        assert union([string(), integer()]).parse(3) == Ok(3)

    def test_no_match_collects_option_issues(self) -> None:
        """A single invalid_union issue holds every option's issues."""
        [issue] = union([string(), integer()]).parse(1.5).error.issues
        assert issue.code is IssueCode.INVALID_UNION
        assert issue.message == 'Invalid input: no union member matched'
        errors = issue.properties['errors']
        assert len(errors) == 2
        assert [option[0].code for option in errors] == [IssueCode.INVALID_TYPE, IssueCode.INVALID_TYPE]

    def test_nil_reaches_options(self) -> None:
        """Nil is handed to the options."""
        assert union([string(), nil()]).parse(None) == Ok(None)
        assert union([string(), integer()]).parse(None).is_err()

    def test_or_method(self) -> None:
        """or_ builds a two-option union."""
        schema = string().or_(integer())
        assert isinstance(schema, UnionSchema)
        assert schema.parse('a') == Ok('a')

    def test_requires_options(self) -> None:
        """Empty and non-schema options are rejected."""
        with pytest.raises(InvalidSchemaError):
            union([])
        with pytest.raises(InvalidSchemaError):
            union([string(), 3])


class TestXor:
    """Tests for exclusive unions."""

    def test_exactly_one_match(self) -> None:
        """One matching option succeeds."""
        schema = xor([string(), integer()])
        assert schema.parse('a') == Ok('a')

    def test_several_matches_fail(self) -> None:
        """Two matching options yield invalid_xor with the count."""
        [issue] = xor([string(), string().max(3)]).parse('ab').error.issues
        assert issue.code is IssueCode.INVALID_XOR
        assert issue.properties['count'] == 2
        assert issue.message == 'Invalid input: expected exactly one union member to match, 2 matched'

    def test_string_or_number(self) -> None:
        """A number matches only the number option."""
        assert xor([string(), number()]).parse(5) == Ok(5)

    def test_overlapping_options(self) -> None:
        """A string starting with the prefix matches both options."""
        [issue] = xor([string(), string().starts_with('a')]).parse('abc').error.issues
        assert issue.code is IssueCode.INVALID_XOR
        assert issue.properties['count'] == 2

    def test_one_of_two_matches(self) -> None:
        """When only one option accepts, its output is returned."""
        assert xor([string(), string().max(3)]).parse('abcdef') == Ok('abcdef')

    def test_no_match(self) -> None:
        """No matching option is invalid_union."""
        [issue] = xor([string(), string().max(3)]).parse(1).error.issues
        assert issue.code is IssueCode.INVALID_UNION


class TestDiscriminatedUnion:
    """Tests for unions selected by a tag field."""

    @pytest.fixture
    def schema(self):
        return discriminated_union(
            'ok',
            [
                object_({'ok': literal(True), 'value': integer()}),
                object_({'ok': literal(1), 'error': string()}),
            ],
        )

    def test_bool_and_int_tags_are_distinct(self, schema) -> None:
        """True and 1 select different options."""
        assert schema.parse({'ok': True, 'value': 3}) == Ok({'ok': True, 'value': 3})
        assert schema.parse({'ok': 1, 'error': 'boom'}) == Ok({'ok': 1, 'error': 'boom'})

    def test_only_selected_option_reports(self, schema) -> None:
        """Issues come from the selected option alone."""
        [issue] = schema.parse({'ok': True, 'value': 'x'}).error.issues
        assert issue.path == ('value',)
        assert issue.code is IssueCode.INVALID_TYPE

    def test_unknown_tag(self, schema) -> None:
        """An unknown tag is invalid_union at the discriminator key."""
        [issue] = schema.parse({'ok': 'maybe'}).error.issues
        assert issue.code is IssueCode.INVALID_UNION
        assert issue.path == ('ok',)
        assert issue.message == 'Invalid input: No matching discriminator'
        assert issue.properties['discriminator'] == 'ok'

    def test_missing_tag(self, schema) -> None:
        """A missing tag behaves like an unknown one."""
        assert schema.parse({}).error.issues[0].path == ('ok',)

    def test_unhashable_tag(self, schema) -> None:
        """Unhashable tags do not raise."""
        assert schema.parse({'ok': []}).error.issues[0].code is IssueCode.INVALID_UNION

    def test_non_object_input(self, schema) -> None:
        """Non-objects are invalid_type."""
        [issue] = schema.parse(3).error.issues
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.expected == 'object'

    def test_enum_discriminator(self) -> None:
        """Enum tag fields contribute each of their values."""
        schema = discriminated_union(
            'kind',
            [
                object_({'kind': enum(['a', 'b']), 'n': integer()}),
                object_({'kind': literal('c'), 's': string()}),
            ],
        )
        assert schema.parse({'kind': 'b', 'n': 1}) == Ok({'kind': 'b', 'n': 1})
        assert schema.parse({'kind': 'c', 's': 'x'}) == Ok({'kind': 'c', 's': 'x'})

    def test_invalid_definitions(self) -> None:
        """Options must be objects with a distinct literal or enum tag."""
        with pytest.raises(InvalidSchemaError):
            discriminated_union('k', [object_({'k': string()})])
        with pytest.raises(InvalidSchemaError):
            discriminated_union('k', [object_({'k': literal('a')}), object_({'k': literal('a')})])
        with pytest.raises(InvalidSchemaError):
            discriminated_union('k', [string()])
        with pytest.raises(InvalidSchemaError):
            discriminated_union('k', [])


class TestIntersection:
    """Tests for intersections."""

    def test_merges_objects(self) -> None:
        """Object outputs are merged key by key."""
        schema = intersection(object_({'a': string()}), object_({'b': integer()}))
        assert schema.parse({'a': 'x', 'b': 1}) == Ok({'a': 'x', 'b': 1})

    def test_reports_both_sides(self) -> None:
        """Issues from both schemas are reported."""
        schema = intersection(object_({'a': string()}), object_({'b': integer()}))
        result = schema.parse({})
        assert [issue.path for issue in result.error.issues] == [('a',), ('b',)]

    def test_merge_conflict(self) -> None:
        """Disagreeing outputs yield invalid_value at the conflicting path."""
        schema = intersection(object_({'a': string().trim()}), object_({'a': string()}))
        [issue] = schema.parse({'a': ' x '}).error.issues
        assert issue.code is IssueCode.INVALID_VALUE
        assert issue.path == ('a',)
        assert issue.message == 'Invalid input: intersection results could not be merged'

    def test_equal_scalars(self) -> None:
        """Equal scalar outputs merge to themselves."""
        assert intersection(number(), number().min(0)).parse(3) == Ok(3)

    def test_list_length_conflict(self) -> None:
        """Lists of different lengths cannot merge."""
        schema = intersection(array(integer()), array(integer()).transform(lambda value: value[:1]))
        assert schema.parse([1, 2]).error.issues[0].code is IssueCode.INVALID_VALUE

    def test_and_method(self) -> None:
        """and_ builds an intersection."""
        schema = object_({'a': string()}).and_(object_({'b': integer()}))
        assert isinstance(schema, IntersectionSchema)
        assert schema.parse({'a': 'x', 'b': 2}) == Ok({'a': 'x', 'b': 2})
