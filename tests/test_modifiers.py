"""Tests for nil handling and the modifier algebra (optional, nilable, default, prefault)."""

import pytest

from klaw_schema import (
    IssueCode,
    Ok,
    array,
    integer,
    nilable,
    non_optional,
    nullish,
    object_,
    optional,
    string,
    with_default,
    with_prefault,
)


def _codes(result):
    return [issue.code for issue in result.error.issues]


class TestNilHandling:
    """Outcome of a nil input for each single modifier."""

    def test_bare_rejects_nil(self) -> None:
        """A bare schema reports invalid_type for nil."""
        [issue] = string().parse(None).error.issues
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.expected == 'string'

    @pytest.mark.parametrize('modifier', ['optional', 'nilable', 'nullish'])
    def test_optional_family_yields_none(self, modifier) -> None:
        """optional, nilable, and nullish accept nil as None."""
        schema = getattr(string(), modifier)()
        assert schema.parse(None) == Ok(None)

    @pytest.mark.parametrize('modifier', ['optional', 'nilable', 'nullish'])
    def test_optional_family_still_validates(self, modifier) -> None:
        """Non-nil input is still validated."""
        schema = getattr(string().min(2), modifier)()
        assert _codes(schema.parse('a')) == [IssueCode.TOO_SMALL]

    def test_non_optional_rejects_nil(self) -> None:
        """non_optional reports expected non_optional."""
        [issue] = string().optional().non_optional().parse(None).error.issues
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.expected == 'non_optional'
        assert issue.message == 'Invalid input: expected a value, received nil'

    def test_non_optional_clears_optional(self) -> None:
        """non_optional overrides optional and nilable flags."""
        schema = string().nullish().non_optional()
        assert not schema.is_optional()
        assert not schema.is_nilable()

    def test_optional_after_non_optional_reenables(self) -> None:
        """The latest flag wins."""
        assert string().non_optional().optional().parse(None) == Ok(None)

    def test_exact_optional_rejects_explicit_nil(self) -> None:
        """exact_optional tolerates a missing key but not nil."""
        schema = object_({'nick': string().exact_optional()})
        assert schema.parse({}) == Ok({})
        assert _codes(schema.parse({'nick': None})) == [IssueCode.INVALID_TYPE]

    def test_zero_is_not_nil(self) -> None:
        """Falsy values are ordinary input."""
        assert integer().default(5).parse(0) == Ok(0)
        assert string().default('x').parse('') == Ok('')


class TestDefault:
    """Tests for default and default_func."""

    def test_default_for_nil(self) -> None:
        """Nil yields the default."""
        assert string().default('d').parse(None) == Ok('d')

    def test_default_bypasses_checks(self) -> None:
        """The default is returned without validation."""
        assert string().min(5).default('x').parse(None) == Ok('x')

    def test_default_does_not_touch_valid_input(self) -> None:
        """Non-nil input is validated normally."""
        schema = string().min(5).default('fallback')
        assert _codes(schema.parse('abc')) == [IssueCode.TOO_SMALL]

    def test_default_func_called_per_parse(self) -> None:
        """default_func runs on every nil parse."""
        calls = []

        def factory():
            calls.append(1)
            return len(calls)

        schema = integer().default_func(factory)
        assert schema.parse(None) == Ok(1)
        assert schema.parse(None) == Ok(2)
        assert schema.parse(7) == Ok(7)
        assert len(calls) == 2

    def test_mutable_default_is_copied(self) -> None:
        """Each parse gets its own copy of a mutable default."""
        default = ['a', 'b']
        schema = array(string()).default(default)
        first = schema.must_parse(None)
        second = schema.must_parse(None)
        assert first is not second
        first[0] = 'modified'
        assert second[0] == 'a'
        assert default == ['a', 'b']

    def test_default_none_is_a_value(self) -> None:
        """A default of None counts as a default."""
        assert string().default(None).parse(None) == Ok(None)

    def test_default_beats_prefault(self) -> None:
        """With both set, the default wins and checks are bypassed."""
        schema = string().min(10).default('d').prefault('p')
        assert schema.parse(None) == Ok('d')

    def test_default_beats_optional_flag(self) -> None:
        """Default on the same schema as optional wins for nil."""
        assert string().optional().default('d').parse(None) == Ok('d')


class TestPrefault:
    """Tests for prefault and prefault_func."""

    def test_prefault_is_validated(self) -> None:
        """The prefault passes through checks."""
        assert string().prefault('fallback').parse(None) == Ok('fallback')
        assert _codes(string().min(10).prefault('short').parse(None)) == [IssueCode.TOO_SMALL]

    def test_prefault_runs_overwrites(self) -> None:
        """Overwrite checks apply to the prefault."""
        assert string().trim().prefault('  p  ').parse(None) == Ok('p')

    def test_prefault_no_fallback_for_invalid_input(self) -> None:
        """Invalid non-nil input is not rescued by the prefault."""
        assert _codes(string().prefault('p').parse(5)) == [IssueCode.INVALID_TYPE]

    def test_prefault_func(self) -> None:
        """prefault_func produces the substitute on each use."""
        schema = integer().min(0).prefault_func(lambda: 3)
        assert schema.parse(None) == Ok(3)

    def test_prefault_matches_parse_of_value(self) -> None:
        """prefault(v).parse(nil) equals parse(v)."""
        base = integer().min(0)
        for value in (5, -1, 'x'):
            prefaulted = base.prefault(value).parse(None)
            direct = base.parse(value)
            assert prefaulted.is_ok() == direct.is_ok()
            if direct.is_ok():
                assert prefaulted == direct
            else:
                assert [i.code for i in prefaulted.error.issues] == [i.code for i in direct.error.issues]


class TestWrapperPrecedence:
    """Tests for wrapper schemas and their order-dependent outcomes."""

    def test_nilable_over_default(self) -> None:
        """The outer nilable consumes nil."""
        assert nilable(string().default('d')).parse(None) == Ok(None)

    def test_default_over_nilable(self) -> None:
        """The outer default wins over an inner nilable."""
        assert with_default(string().nilable(), 'd').parse(None) == Ok('d')

    def test_optional_over_default(self) -> None:
        """The outer optional returns None; unwrapping exposes the default."""
        schema = optional(with_default(string(), 'v'))
        assert schema.parse(None) == Ok(None)
        assert schema.unwrap().parse(None) == Ok('v')

    def test_default_over_optional(self) -> None:
        """The outer default wins over an inner optional."""
        schema = with_default(optional(string()), 'fallback')
        assert schema.parse(None) == Ok('fallback')
        assert schema.unwrap().parse(None) == Ok(None)

    def test_multiple_defaults_outer_wins(self) -> None:
        """Nested defaults resolve to the outermost."""
        schema = with_default(with_default(string(), 'inner'), 'outer')
        assert schema.parse(None) == Ok('outer')

    def test_default_factory_wrapper(self) -> None:
        """with_default accepts a factory."""
        assert with_default(array(integer()), factory=list).parse(None) == Ok([])

    def test_prefault_wrapper_validates(self) -> None:
        """with_prefault substitutes and validates through the inner schema."""
        assert with_prefault(string().to_upper_case(), 'p').parse(None) == Ok('P')
        assert _codes(with_prefault(string(), 5).parse(None)) == [IssueCode.INVALID_TYPE]

    def test_non_optional_wrapper(self) -> None:
        """non_optional rejects nil whatever the inner schema allows."""
        schema = non_optional(string().optional())
        [issue] = schema.parse(None).error.issues
        assert issue.expected == 'non_optional'
        assert schema.parse('x') == Ok('x')

    def test_nullish_wrapper(self) -> None:
        """nullish accepts nil and validates other input."""
        schema = nullish(integer())
        assert schema.parse(None) == Ok(None)
        assert schema.is_optional()
        assert schema.is_nilable()
        assert _codes(schema.parse('x')) == [IssueCode.INVALID_TYPE]

    def test_wrappers_report_inner_expected(self) -> None:
        """Wrapper schemas name the inner type in issues."""
        assert optional(integer()).expected == 'int'


class TestTransformInteraction:
    """Tests for defaults and prefaults flowing into transforms."""

    def test_default_short_circuits_transform(self) -> None:
        """A source default is returned without calling the transform."""
        schema = string().default('default').prefault('fallback').transform(lambda value: value.upper())
        assert schema.parse(None) == Ok('default')

    def test_prefault_flows_through_transform(self) -> None:
        """A source prefault is parsed and transformed."""
        schema = string().prefault('fallback').transform(lambda value: value.upper())
        assert schema.parse(None) == Ok('FALLBACK')

    def test_transform_runs_on_valid_input(self) -> None:
        """Valid input reaches the transform."""
        schema = string().default('default').transform(lambda value: value.upper())
        assert schema.parse('abc') == Ok('ABC')


class TestImmutability:
    """Modifiers never change the receiver."""

    def test_modifiers_return_new_schemas(self) -> None:
        """Every modifier leaves the original schema as it was."""
        base = string()
        derived = [
            base.optional(),
            base.nilable(),
            base.nullish(),
            base.non_optional(),
            base.default('x'),
            base.prefault('y'),
            base.min(3),
            base.refine(lambda value: True),
            base.describe('text'),
            base.coerce(),
        ]
        assert all(schema is not base for schema in derived)
        assert base.internals.is_bare
        assert base.description is None
        assert base.parse(None).is_err()
        assert base.parse('ab') == Ok('ab')
