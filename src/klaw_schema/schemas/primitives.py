"""Primitive schemas: string, integer, number, boolean, date and datetime."""

from __future__ import annotations

import datetime as dt
import math
import re
from collections.abc import Iterable
from typing import Any, ClassVar, Self, Unpack

from klaw_schema import _coerce
from klaw_schema.checks.formats import datetime_pattern, format_check, is_jwt, is_url, time_pattern
from klaw_schema.checks.numeric import Finite, GreaterThan, LessThan, MultipleOf
from klaw_schema.checks.strings import (
    EndsWith,
    Includes,
    Regex,
    StartsWith,
    compile_pattern,
    lowercase_overwrite,
    trim_overwrite,
    uppercase_overwrite,
)
from klaw_schema.context import ParseContext
from klaw_schema.engine import NOT_MATCHED, fail
from klaw_schema.errors import InvalidSchemaError
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.issues import ErrorOverride, invalid_value, too_big, too_small
from klaw_schema.result import Ok
from klaw_schema.schemas.base import Schema, SchemaParams, SizedMixin, make_internals

__all__ = [
    'INT_BOUNDS',
    'STRINGBOOL_FALSY',
    'STRINGBOOL_TRUTHY',
    'BooleanSchema',
    'DateSchema',
    'IntegerSchema',
    'NumberSchema',
    'StringBoolSchema',
    'StringSchema',
    'base64',
    'boolean',
    'cuid',
    'cuid2',
    'date',
    'date_time',
    'e164',
    'email',
    'float32',
    'float64',
    'float_',
    'guid',
    'hex_',
    'int8',
    'int16',
    'int32',
    'int64',
    'integer',
    'ipv4',
    'ipv6',
    'iso_date',
    'iso_datetime',
    'iso_duration',
    'iso_time',
    'jwt',
    'nanoid',
    'number',
    'string',
    'stringbool',
    'uint',
    'uint8',
    'uint16',
    'uint32',
    'uint64',
    'ulid',
    'url',
    'uuid',
]


# --- String ---


class StringSchema(SizedMixin, Schema[str]):
    """Strings. Lengths count code points, not bytes."""

    _size_origin: ClassVar[str] = 'string'

    def _coerce(self, value: Any) -> Any:
        return _coerce.to_str(value)

    def _extract(self, value: Any) -> Any:
        return value if isinstance(value, str) else NOT_MATCHED

    def _strict_shortcut(self, value: Any) -> bool:
        return isinstance(value, str)

    def starts_with(self, prefix: str, *, error: ErrorOverride | None = None) -> Self:
        return self._with_check(StartsWith(prefix=prefix, error=error))

    def ends_with(self, suffix: str, *, error: ErrorOverride | None = None) -> Self:
        return self._with_check(EndsWith(suffix=suffix, error=error))

    def includes(self, substring: str, *, position: int = 0, error: ErrorOverride | None = None) -> Self:
        return self._with_check(Includes(includes=substring, position=position, error=error))

    def regex(self, pattern: str | re.Pattern[str], *, error: ErrorOverride | None = None) -> Self:
        """Require a match for ``pattern`` anywhere in the string.

        Raises:
            InvalidPatternError: If ``pattern`` does not compile.
        """
        return self._with_check(Regex(pattern=compile_pattern(pattern), error=error))

    def trim(self) -> Self:
        return self._with_check(trim_overwrite())

    def to_lower_case(self) -> Self:
        return self._with_check(lowercase_overwrite())

    def to_upper_case(self) -> Self:
        return self._with_check(uppercase_overwrite())

    def lowercase(self, *, error: ErrorOverride | None = None) -> Self:
        """Require the string to already be lowercase."""
        return self.format('lowercase', error=error)

    def uppercase(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('uppercase', error=error)

    def format(self, name: str, predicate: Any = None, *, error: ErrorOverride | None = None) -> Self:
        """Add the named format check (see ``klaw_schema.checks.FORMATS``)."""
        return self._with_check(format_check(name, predicate, error=error))

    # Formats

    def email(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('email', error=error)

    def url(
        self,
        *,
        protocol: str | re.Pattern[str] | None = None,
        hostname: str | re.Pattern[str] | None = None,
        error: ErrorOverride | None = None,
    ) -> Self:
        """Require an absolute URL, optionally constraining scheme and host by pattern."""
        protocol_re = compile_pattern(protocol) if protocol is not None else None
        hostname_re = compile_pattern(hostname) if hostname is not None else None
        if protocol_re is None and hostname_re is None:
            return self.format('url', error=error)
        return self.format(
            'url',
            lambda value: is_url(value, protocol=protocol_re, hostname=hostname_re),
            error=error,
        )

    def uuid(self, *, version: int | None = None, error: ErrorOverride | None = None) -> Self:
        """Require an RFC 9562 UUID, optionally of a specific version (1-8)."""
        if version is None:
            return self.format('uuid', error=error)
        if not 1 <= version <= 8:
            msg = f'UUID version must be between 1 and 8, got {version}'
            raise InvalidSchemaError(msg)
        pattern = re.compile(
            rf'^[0-9a-fA-F]{{8}}-[0-9a-fA-F]{{4}}-{version}[0-9a-fA-F]{{3}}-[89abAB][0-9a-fA-F]{{3}}-[0-9a-fA-F]{{12}}$'
        )
        return self.format('uuid', lambda value: pattern.fullmatch(value) is not None, error=error)

    def guid(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('guid', error=error)

    def cuid(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('cuid', error=error)

    def cuid2(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('cuid2', error=error)

    def ulid(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('ulid', error=error)

    def xid(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('xid', error=error)

    def ksuid(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('ksuid', error=error)

    def nanoid(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('nanoid', error=error)

    def ipv4(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('ipv4', error=error)

    def ipv6(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('ipv6', error=error)

    def cidrv4(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('cidrv4', error=error)

    def cidrv6(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('cidrv6', error=error)

    def json(self, *, error: ErrorOverride | None = None) -> Self:
        """Require a string holding valid JSON."""
        return self.format('json_string', error=error)

    def emoji(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('emoji', error=error)

    def jwt(self, *, alg: str | None = None, error: ErrorOverride | None = None) -> Self:
        if alg is None:
            return self.format('jwt', error=error)
        return self.format('jwt', lambda value: is_jwt(value, alg), error=error)

    def base64(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('base64', error=error)

    def base64url(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('base64url', error=error)

    def hex(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('hex', error=error)

    def e164(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('e164', error=error)

    def iso_datetime(
        self,
        *,
        offset: bool = False,
        local: bool = False,
        precision: int | None = None,
        error: ErrorOverride | None = None,
    ) -> Self:
        """Require an ISO 8601 datetime string (kept as a string).

        Args:
            offset: Also accept ``+hh:mm`` offsets besides ``Z``.
            local: Also accept datetimes without a zone designator.
            precision: Fractional-second digits (see ``time_pattern``).
            error: Error override.
        """
        if not (offset or local or precision is not None):
            return self.format('datetime', error=error)
        pattern = datetime_pattern(offset=offset, local=local, precision=precision)
        return self.format('datetime', lambda value: pattern.fullmatch(value) is not None, error=error)

    def iso_date(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('date', error=error)

    def iso_time(self, *, precision: int | None = None, error: ErrorOverride | None = None) -> Self:
        if precision is None:
            return self.format('time', error=error)
        pattern = re.compile(f'^{time_pattern(precision)}$')
        return self.format('time', lambda value: pattern.fullmatch(value) is not None, error=error)

    def iso_duration(self, *, error: ErrorOverride | None = None) -> Self:
        return self.format('duration', error=error)


# --- Numbers ---


INT_BOUNDS: dict[str, tuple[int, int]] = {
    'int8': (-(2**7), 2**7 - 1),
    'int16': (-(2**15), 2**15 - 1),
    'int32': (-(2**31), 2**31 - 1),
    'int64': (-(2**63), 2**63 - 1),
    'uint8': (0, 2**8 - 1),
    'uint16': (0, 2**16 - 1),
    'uint32': (0, 2**32 - 1),
    'uint64': (0, 2**64 - 1),
}

FLOAT32_MAX = 3.4028234663852886e38
MAX_SAFE_INTEGER = 2**53 - 1


class _NumericMixin:
    """Comparison modifiers shared by integer and number schemas."""

    def gt(self, value: int | float, *, error: ErrorOverride | None = None) -> Self:
        return self._with_check(GreaterThan(value=value, inclusive=False, error=error))  # type: ignore[attr-defined]

    def gte(self, value: int | float, *, error: ErrorOverride | None = None) -> Self:
        return self._with_check(GreaterThan(value=value, inclusive=True, error=error))  # type: ignore[attr-defined]

    def lt(self, value: int | float, *, error: ErrorOverride | None = None) -> Self:
        return self._with_check(LessThan(value=value, inclusive=False, error=error))  # type: ignore[attr-defined]

    def lte(self, value: int | float, *, error: ErrorOverride | None = None) -> Self:
        return self._with_check(LessThan(value=value, inclusive=True, error=error))  # type: ignore[attr-defined]

    def min(self, value: int | float, *, error: ErrorOverride | None = None) -> Self:
        """Inclusive lower bound; alias of ``gte``."""
        return self.gte(value, error=error)

    def max(self, value: int | float, *, error: ErrorOverride | None = None) -> Self:
        """Inclusive upper bound; alias of ``lte``."""
        return self.lte(value, error=error)

    def positive(self, *, error: ErrorOverride | None = None) -> Self:
        return self.gt(0, error=error)

    def negative(self, *, error: ErrorOverride | None = None) -> Self:
        return self.lt(0, error=error)

    def non_negative(self, *, error: ErrorOverride | None = None) -> Self:
        return self.gte(0, error=error)

    def non_positive(self, *, error: ErrorOverride | None = None) -> Self:
        return self.lte(0, error=error)

    def multiple_of(self, step: int | float, *, error: ErrorOverride | None = None) -> Self:
        """Require an exact multiple of ``step``.

        Raises:
            InvalidSchemaError: If ``step`` is not positive.
        """
        if step <= 0:
            msg = f'multiple_of step must be positive, got {step}'
            raise InvalidSchemaError(msg)
        return self._with_check(MultipleOf(step=step, error=error))  # type: ignore[attr-defined]

    def step(self, step: int | float, *, error: ErrorOverride | None = None) -> Self:
        return self.multiple_of(step, error=error)

    def safe(self, *, error: ErrorOverride | None = None) -> Self:
        """Restrict to the range exactly representable as a double."""
        return self.gte(-MAX_SAFE_INTEGER, error=error).lte(MAX_SAFE_INTEGER, error=error)


def _range_issue(value: int | float, lower: int | float, upper: int | float, format: str, error: Any) -> Any:
    if value < lower:
        return fail(too_small('number', lower, value, format=format, inst=error))
    if value > upper:
        return fail(too_big('number', upper, value, format=format, inst=error))
    return None


class IntegerSchema(_NumericMixin, Schema[int]):
    """Integers, optionally restricted to a machine width (``int8`` ... ``uint64``)."""

    def __init__(self, internals: Internals, format: str | None = None) -> None:
        super().__init__(internals)
        self._format = format

    @property
    def format(self) -> str | None:
        return self._format

    @property
    def expected(self) -> str:
        return self._format or TypeTag.INTEGER.value

    def _coerce(self, value: Any) -> Any:
        return _coerce.to_int(value)

    def _extract(self, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, int):
            return NOT_MATCHED
        return value

    def _strict_shortcut(self, value: Any) -> bool:
        return self._format is None and isinstance(value, int) and not isinstance(value, bool)

    def _validate(self, value: int, ctx: ParseContext) -> Any:
        if self._format is not None:
            lower, upper = INT_BOUNDS[self._format]
            if (issue := _range_issue(value, lower, upper, self._format, self.internals.error)) is not None:
                return issue
        return Ok(value)


class NumberSchema(_NumericMixin, Schema[float]):
    """Real numbers (ints and floats, never bools). NaN is rejected."""

    def __init__(self, internals: Internals, format: str | None = None) -> None:
        super().__init__(internals)
        self._format = format

    @property
    def format(self) -> str | None:
        return self._format

    def _coerce(self, value: Any) -> Any:
        return _coerce.to_float(value)

    def _extract(self, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return NOT_MATCHED
        if isinstance(value, float) and math.isnan(value):
            return NOT_MATCHED
        return value

    def _strict_shortcut(self, value: Any) -> bool:
        return self._format is None and isinstance(value, float) and not math.isnan(value)

    def _validate(self, value: float, ctx: ParseContext) -> Any:
        if self._format == 'float32' and math.isfinite(value):
            if (issue := _range_issue(value, -FLOAT32_MAX, FLOAT32_MAX, 'float32', self.internals.error)) is not None:
                return issue
        return Ok(value)

    def finite(self, *, error: ErrorOverride | None = None) -> Self:
        return self._with_check(Finite(error=error))

    def int(self, *, error: ErrorOverride | None = None) -> Self:
        """Require an integral value."""
        return self.multiple_of(1, error=error)


# --- Boolean ---


class BooleanSchema(Schema[bool]):
    def _coerce(self, value: Any) -> Any:
        return _coerce.to_bool(value)

    def _extract(self, value: Any) -> Any:
        return value if isinstance(value, bool) else NOT_MATCHED

    def _strict_shortcut(self, value: Any) -> bool:
        return isinstance(value, bool)


# --- String booleans ---

STRINGBOOL_TRUTHY = ('true', '1', 'yes', 'on', 'y', 'enabled')
STRINGBOOL_FALSY = ('false', '0', 'no', 'off', 'n', 'disabled')


class StringBoolSchema(Schema[bool]):
    """Strings such as ``'yes'`` or ``'off'`` read as booleans.

    Strings outside both word lists fail with ``invalid_value``. With coercion on,
    numbers are read through their text form (``1`` is ``'1'``); booleans are never
    accepted as input.
    """

    def __init__(
        self,
        internals: Internals,
        truthy: Iterable[str],
        falsy: Iterable[str],
        case_sensitive: bool = False,
    ) -> None:
        super().__init__(internals)
        truthy, falsy = tuple(truthy), tuple(falsy)
        self._case_sensitive = case_sensitive
        self._words = (*truthy, *falsy)
        self._truthy = frozenset(self._normalize(word) for word in truthy)
        self._falsy = frozenset(self._normalize(word) for word in falsy)
        if self._truthy & self._falsy:
            msg = f'stringbool words cannot be both truthy and falsy: {sorted(self._truthy & self._falsy)}'
            raise InvalidSchemaError(msg)

    @property
    def truthy(self) -> frozenset[str]:
        return self._truthy

    @property
    def falsy(self) -> frozenset[str]:
        return self._falsy

    def _normalize(self, text: str) -> str:
        return text if self._case_sensitive else text.lower()

    def _coerce(self, value: Any) -> Any:
        if isinstance(value, bool):
            return NOT_MATCHED
        return _coerce.to_str(value)

    def _extract(self, value: Any) -> Any:
        return value if isinstance(value, str) else NOT_MATCHED

    def _validate(self, value: str, ctx: ParseContext) -> Any:
        word = self._normalize(value)
        if word in self._truthy:
            return Ok(True)
        if word in self._falsy:
            return Ok(False)
        return fail(invalid_value(self._words, value, inst=self.internals.error))

    def _strict_shortcut(self, value: Any) -> bool:
        return isinstance(value, bool)


# --- Dates ---


class DateSchema(Schema[dt.date]):
    """``datetime.datetime`` values, or plain ``datetime.date`` values with ``date()``."""

    def __init__(self, internals: Internals, kind: type[dt.date] = dt.datetime) -> None:
        super().__init__(internals)
        self._kind = kind

    @property
    def expected(self) -> str:
        return 'datetime' if self._kind is dt.datetime else 'date'

    def _coerce(self, value: Any) -> Any:
        if self._kind is dt.datetime:
            return _coerce.to_datetime(value)
        return _coerce.to_date(value)

    def _extract(self, value: Any) -> Any:
        if self._kind is dt.datetime:
            return value if isinstance(value, dt.datetime) else NOT_MATCHED
        if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
            return value
        return NOT_MATCHED

    def _strict_shortcut(self, value: Any) -> bool:
        return self._extract(value) is not NOT_MATCHED

    def min(self, bound: dt.date, *, error: ErrorOverride | None = None) -> Self:
        """Inclusive lower bound."""
        return self._with_check(GreaterThan(value=bound, inclusive=True, origin='date', error=error))

    def max(self, bound: dt.date, *, error: ErrorOverride | None = None) -> Self:
        """Inclusive upper bound."""
        return self._with_check(LessThan(value=bound, inclusive=True, origin='date', error=error))


# --- Constructors ---


def string(**params: Unpack[SchemaParams]) -> StringSchema:
    """Schema accepting strings.

    Example:
        ```python
        string().min(3).max(20).parse('klaw')  # Ok('klaw')
        string(coerce=True).parse(1.5)  # Ok('1.5')
        ```
    """
    return StringSchema(make_internals(TypeTag.STRING, **params))


def integer(**params: Unpack[SchemaParams]) -> IntegerSchema:
    """Schema accepting Python ints (bools excluded)."""
    return IntegerSchema(make_internals(TypeTag.INTEGER, **params))


def _sized_int(format: str, params: SchemaParams) -> IntegerSchema:
    return IntegerSchema(make_internals(TypeTag.INTEGER, **params), format=format)


def int8(**params: Unpack[SchemaParams]) -> IntegerSchema:
    return _sized_int('int8', params)


def int16(**params: Unpack[SchemaParams]) -> IntegerSchema:
    return _sized_int('int16', params)


def int32(**params: Unpack[SchemaParams]) -> IntegerSchema:
    return _sized_int('int32', params)


def int64(**params: Unpack[SchemaParams]) -> IntegerSchema:
    return _sized_int('int64', params)


def uint8(**params: Unpack[SchemaParams]) -> IntegerSchema:
    return _sized_int('uint8', params)


def uint16(**params: Unpack[SchemaParams]) -> IntegerSchema:
    return _sized_int('uint16', params)


def uint32(**params: Unpack[SchemaParams]) -> IntegerSchema:
    return _sized_int('uint32', params)


def uint64(**params: Unpack[SchemaParams]) -> IntegerSchema:
    return _sized_int('uint64', params)


def uint(**params: Unpack[SchemaParams]) -> IntegerSchema:
    """Unsigned 64-bit integer."""
    return _sized_int('uint64', params)


def number(**params: Unpack[SchemaParams]) -> NumberSchema:
    """Schema accepting ints and floats (not bools, not NaN)."""
    return NumberSchema(make_internals(TypeTag.NUMBER, **params))


def float_(**params: Unpack[SchemaParams]) -> NumberSchema:
    return number(**params)


def float32(**params: Unpack[SchemaParams]) -> NumberSchema:
    """Numbers within single-precision range."""
    return NumberSchema(make_internals(TypeTag.NUMBER, **params), format='float32')


def float64(**params: Unpack[SchemaParams]) -> NumberSchema:
    return NumberSchema(make_internals(TypeTag.NUMBER, **params), format='float64')


def boolean(**params: Unpack[SchemaParams]) -> BooleanSchema:
    return BooleanSchema(make_internals(TypeTag.BOOL, **params))


def stringbool(
    truthy: Iterable[str] | None = None,
    falsy: Iterable[str] | None = None,
    *,
    case_sensitive: bool = False,
    **params: Unpack[SchemaParams],
) -> StringBoolSchema:
    """Schema reading boolean words from strings.

    Args:
        truthy: Words parsed as True; defaults to ``STRINGBOOL_TRUTHY``.
        falsy: Words parsed as False; defaults to ``STRINGBOOL_FALSY``.
        case_sensitive: Match words exactly instead of ignoring case.
        **params: Common schema parameters.

    Example:
        ```python
        stringbool().parse('Yes')  # Ok(True)
        stringbool(truthy=['si'], falsy=['no']).parse('si')  # Ok(True)
        ```
    """
    return StringBoolSchema(
        make_internals(TypeTag.STRINGBOOL, **params),
        truthy=tuple(truthy) if truthy else STRINGBOOL_TRUTHY,
        falsy=tuple(falsy) if falsy else STRINGBOOL_FALSY,
        case_sensitive=case_sensitive,
    )


def date_time(**params: Unpack[SchemaParams]) -> DateSchema:
    """Schema accepting ``datetime.datetime`` values; coercion reads epochs and ISO strings."""
    return DateSchema(make_internals(TypeTag.DATE, **params), kind=dt.datetime)


def date(**params: Unpack[SchemaParams]) -> DateSchema:
    """Schema accepting ``datetime.date`` values (datetimes are rejected)."""
    return DateSchema(make_internals(TypeTag.DATE, **params), kind=dt.date)


# String format shortcuts


def email(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).email()


def url(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).url()


def uuid(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).uuid()


def guid(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).guid()


def cuid(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).cuid()


def cuid2(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).cuid2()


def ulid(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).ulid()


def nanoid(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).nanoid()


def ipv4(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).ipv4()


def ipv6(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).ipv6()


def jwt(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).jwt()


def base64(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).base64()


def hex_(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).hex()


def e164(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).e164()


def iso_datetime(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).iso_datetime()


def iso_date(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).iso_date()


def iso_time(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).iso_time()


def iso_duration(**params: Unpack[SchemaParams]) -> StringSchema:
    return string(**params).iso_duration()
