"""Alternatives: union (first match wins), xor (exactly one match), discriminated union."""

from __future__ import annotations

import enum as _enum
from collections.abc import Sequence
from typing import Any, Unpack

import msgspec

from klaw_schema.context import ParseContext
from klaw_schema.engine import NOT_MATCHED, ParseResult, fail
from klaw_schema.errors import InvalidSchemaError
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.issues import RawIssue, invalid_union, invalid_xor
from klaw_schema.result import Ok
from klaw_schema.schemas.base import Schema, SchemaParams, make_internals
from klaw_schema.schemas.object import ObjectSchema, object_fields
from klaw_schema.schemas.special import EnumSchema, LiteralSchema

__all__ = [
    'DiscriminatedUnionSchema',
    'UnionSchema',
    'XorSchema',
    'discriminated_union',
    'union',
    'xor',
]


def _require_options(options: Sequence[Any], kind: str) -> tuple[Schema[Any], ...]:
    if not options:
        msg = f'{kind} requires at least one option'
        raise InvalidSchemaError(msg)
    for option in options:
        if not isinstance(option, Schema):
            msg = f'{kind} options must be schemas, got {type(option).__name__}'
            raise InvalidSchemaError(msg)
    return tuple(options)


class UnionSchema[T](Schema[T]):
    """Tries each option in order and returns the first success.

    When every option fails, a single ``invalid_union`` issue carries each
    option's issues under ``properties['errors']``.
    """

    _delegates_nil = True

    def __init__(self, internals: Internals, options: Sequence[Schema[Any]]) -> None:
        super().__init__(internals)
        self._options = tuple(options)

    @property
    def options(self) -> tuple[Schema[Any], ...]:
        return self._options

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        failures: list[list[RawIssue]] = []
        for option in self._options:
            result = option._run(value, ctx)
            if isinstance(result, Ok):
                return result
            failures.append(list(result.error.issues))
        return fail(invalid_union(failures, value, inst=self.internals.error))


class XorSchema[T](Schema[T]):
    """Exclusive union: succeeds only when exactly one option accepts the input.

    Every option runs. With no match the failure is ``invalid_union`` (as for a
    plain union); with several matches it is ``invalid_xor`` with ``count``.
    """

    _delegates_nil = True

    def __init__(self, internals: Internals, options: Sequence[Schema[Any]]) -> None:
        super().__init__(internals)
        self._options = tuple(options)

    @property
    def options(self) -> tuple[Schema[Any], ...]:
        return self._options

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        matches: list[Any] = []
        failures: list[list[RawIssue]] = []
        for option in self._options:
            result = option._run(value, ctx)
            if isinstance(result, Ok):
                matches.append(result.value)
            else:
                failures.append(list(result.error.issues))
        if len(matches) == 1:
            return Ok(matches[0])
        if not matches:
            return fail(invalid_union(failures, value, inst=self.internals.error))
        return fail(invalid_xor(len(matches), value, inst=self.internals.error))


def _discriminator_values(schema: Schema[Any]) -> list[Any] | None:
    match schema:
        case LiteralSchema():
            return list(schema.values)
        case EnumSchema():
            values: list[Any] = []
            for option in schema.options:
                values.append(option)
                if isinstance(option, _enum.Enum):
                    values.append(option.value)
            return values
        case _:
            return None


def _index_key(value: Any) -> tuple[type, Any]:
    # Keyed by type too, so True and 1 stay distinct
    return (type(value), value)


class DiscriminatedUnionSchema(Schema[dict[str, Any]]):
    """Union of object schemas told apart by the literal value at ``discriminator``.

    The option is chosen by lookup, so only that option's issues are reported.
    """

    def __init__(self, internals: Internals, discriminator: str, options: Sequence[ObjectSchema]) -> None:
        super().__init__(internals)
        self._discriminator = discriminator
        self._options = tuple(options)
        self._lookup = self._build_lookup()

    @property
    def discriminator(self) -> str:
        return self._discriminator

    @property
    def options(self) -> tuple[ObjectSchema, ...]:
        return self._options

    @property
    def expected(self) -> str:
        return 'object'

    def _build_lookup(self) -> dict[tuple[type, Any], ObjectSchema]:
        lookup: dict[tuple[type, Any], ObjectSchema] = {}
        for index, option in enumerate(self._options):
            if not isinstance(option, ObjectSchema):
                msg = f'discriminated union option {index} is not an object schema'
                raise InvalidSchemaError(msg)
            child = option.shape.get(self._discriminator)
            values = _discriminator_values(child) if child is not None else None
            if not values:
                msg = f'discriminated union option {index} has no literal or enum {self._discriminator!r} field'
                raise InvalidSchemaError(msg)
            for value in values:
                key = _index_key(value)
                if key in lookup:
                    msg = f'duplicate discriminator value {value!r} for {self._discriminator!r}'
                    raise InvalidSchemaError(msg)
                lookup[key] = option
        return lookup

    def _extract(self, value: Any) -> Any:
        return NOT_MATCHED if object_fields(value) is None else value

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        fields = object_fields(value) or {}
        tag = fields.get(self._discriminator)
        try:
            option = self._lookup.get(_index_key(tag))
        except TypeError:
            option = None
        if option is None:
            issue = invalid_union(
                [],
                value,
                inst=self.internals.error,
                note='No matching discriminator',
                discriminator=self._discriminator,
            )
            return fail(msgspec.structs.replace(issue, path=(self._discriminator,)))
        return option._run(value, ctx)


# --- Constructors ---


def union[T](options: Sequence[Schema[Any]], **params: Unpack[SchemaParams]) -> UnionSchema[T]:
    """Schema accepting input matched by any of ``options`` (first match wins).

    Example:
        ```python
        union([string(), integer()]).parse(3)  # Ok(3)
        ```

    Raises:
        InvalidSchemaError: If ``options`` is empty or holds a non-schema.
    """
    return UnionSchema(make_internals(TypeTag.UNION, **params), _require_options(options, 'union'))


def xor[T](options: Sequence[Schema[Any]], **params: Unpack[SchemaParams]) -> XorSchema[T]:
    """Schema accepting input matched by exactly one of ``options``."""
    return XorSchema(make_internals(TypeTag.XOR, **params), _require_options(options, 'xor'))


def discriminated_union(
    discriminator: str,
    options: Sequence[ObjectSchema],
    **params: Unpack[SchemaParams],
) -> DiscriminatedUnionSchema:
    """Union of object schemas selected by the value at key ``discriminator``.

    Example:
        ```python
        shape = discriminated_union('kind', [
            object_({'kind': literal('circle'), 'radius': number()}),
            object_({'kind': literal('square'), 'side': number()}),
        ])
        shape.parse({'kind': 'square', 'side': 2})  # Ok({'kind': 'square', 'side': 2})
        ```

    Raises:
        InvalidSchemaError: If an option is not an object, lacks a literal or enum
            discriminator, or repeats another option's discriminator value.
    """
    _require_options(options, 'discriminated_union')
    return DiscriminatedUnionSchema(make_internals(TypeTag.UNION, **params), discriminator, options)
