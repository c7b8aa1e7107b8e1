"""Tests for the Ok / Err result carrier."""

import pytest
from hypothesis import given

from klaw_schema import Err, Ok, ValidationError, string
from klaw_schema.result import is_err, is_ok
from tests.strategies import integers


class TestOkCreation:
    """Tests for Ok instantiation and basic properties."""

    def test_ok_creation(self) -> None:
        """Ok wraps a value."""
        assert Ok(42).value == 42

    def test_ok_with_none(self) -> None:
        """Ok can wrap None."""
        assert Ok(None).value is None

    def test_ok_is_frozen(self) -> None:
        """Ok instances are immutable."""
        ok = Ok(42)
        with pytest.raises(AttributeError):
            ok.value = 100  # type: ignore[misc]


class TestErrCreation:
    """Tests for Err instantiation and basic properties."""

    def test_err_with_exception(self) -> None:
        """Err keeps the exact exception object."""
        exc = ValueError('boom')
        assert Err(exc).error is exc

    def test_err_is_frozen(self) -> None:
        """Err instances are immutable."""
        err = Err(ValueError('boom'))
        with pytest.raises(AttributeError):
            err.error = ValueError('other')  # type: ignore[misc]


class TestResultQuerying:
    """Tests for is_ok / is_err and the type guards."""

    def test_ok_queries(self) -> None:
        """Ok reports success."""
        assert Ok(1).is_ok() is True
        assert Ok(1).is_err() is False
        assert is_ok(Ok(1))
        assert not is_err(Ok(1))

    def test_err_queries(self) -> None:
        """Err reports failure."""
        err = Err(ValueError('x'))
        assert err.is_ok() is False
        assert err.is_err() is True
        assert is_err(err)
        assert not is_ok(err)


class TestResultUnwrap:
    """Tests for unwrap, unwrap_or, unwrap_err, ok, err."""

    def test_ok_unwrap(self) -> None:
        """Ok.unwrap returns the value."""
        assert Ok('v').unwrap() == 'v'

    def test_err_unwrap_raises_carried_exception(self) -> None:
        """Err.unwrap raises the exception it holds."""
        exc = ValueError('bad')
        with pytest.raises(ValueError, match='bad') as info:
            Err(exc).unwrap()
        assert info.value is exc

    def test_unwrap_or(self) -> None:
        """unwrap_or falls back only for Err."""
        assert Ok(1).unwrap_or(2) == 1
        assert Err(ValueError()).unwrap_or(2) == 2

    def test_unwrap_err(self) -> None:
        """unwrap_err returns the error of Err and raises for Ok."""
        exc = ValueError()
        assert Err(exc).unwrap_err() is exc
        with pytest.raises(RuntimeError):
            Ok(1).unwrap_err()

    def test_ok_and_err_accessors(self) -> None:
        """ok() and err() return the matching side or None."""
        exc = ValueError()
        assert Ok(1).ok() == 1
        assert Ok(1).err() is None
        assert Err(exc).ok() is None
        assert Err(exc).err() is exc


class TestResultMapping:
    """Tests for map and map_err."""

    def test_map_transforms_ok(self) -> None:
        """map applies to Ok values."""
        assert Ok(2).map(lambda x: x * 3) == Ok(6)

    def test_map_skips_err(self) -> None:
        """map leaves Err untouched."""
        err = Err(ValueError())
        assert err.map(lambda x: x * 3) is err

    def test_map_err_transforms_err(self) -> None:
        """map_err converts the error."""
        mapped = Err(ValueError('a')).map_err(lambda e: RuntimeError(str(e)))
        assert isinstance(mapped.error, RuntimeError)
        assert str(mapped.error) == 'a'

    def test_map_err_skips_ok(self) -> None:
        """map_err leaves Ok untouched."""
        ok = Ok(1)
        assert ok.map_err(lambda e: RuntimeError()) is ok

    @given(integers)
    def test_map_identity(self, value) -> None:
        """Mapping the identity function changes nothing."""
        assert Ok(value).map(lambda x: x) == Ok(value)


class TestParseResults:
    """Tests for results returned by Schema.parse."""

    def test_match_on_parse_result(self) -> None:
        """Parse results support structural pattern matching."""
        match string().parse('hi'):
            case Ok(value):
                assert value == 'hi'
            case Err():
                pytest.fail('expected Ok')

    def test_failed_parse_carries_validation_error(self) -> None:
        """A failed parse yields Err(ValidationError)."""
        result = string().parse(1)
        assert isinstance(result, Err)
        assert isinstance(result.error, ValidationError)

    def test_repr(self) -> None:
        """Ok and Err have readable reprs."""
        assert repr(Ok(1)) == 'Ok(1)'
        assert repr(Err(ValueError('x'))) == "Err(ValueError('x'))"
