"""Key/value containers: maps with arbitrary keys and records with string keys."""

from __future__ import annotations

import enum as _enum
from collections.abc import Mapping
from typing import Any, ClassVar, Self, Unpack

import msgspec

from klaw_schema.context import ParseContext
from klaw_schema.engine import NOT_MATCHED, IssueCollector, ParseResult
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.issues import invalid_key, invalid_type, unrecognized_keys, with_properties
from klaw_schema.schemas.array import path_segment
from klaw_schema.schemas.base import Schema, SchemaParams, SizedMixin, make_internals
from klaw_schema.schemas.special import EnumSchema, LiteralSchema

__all__ = [
    'MapSchema',
    'RecordSchema',
    'loose_record',
    'map_',
    'mapping',
    'partial_record',
    'record',
]


class MapSchema[K, V](SizedMixin, Schema[dict[K, V]]):
    """Mappings whose keys match ``key`` and values match ``value``.

    Issues from either side are reported under the entry's key; issues raised
    by the key schema also carry ``location='key'``.
    """

    _size_origin: ClassVar[str] = 'map'

    def __init__(self, internals: Internals, key: Schema[K], value: Schema[V]) -> None:
        super().__init__(internals)
        self._key = key
        self._value = value

    @property
    def key_schema(self) -> Schema[K]:
        return self._key

    @property
    def value_schema(self) -> Schema[V]:
        return self._value

    def _extract(self, value: Any) -> Any:
        return value if isinstance(value, Mapping) else NOT_MATCHED

    def _validate(self, value: Mapping[Any, Any], ctx: ParseContext) -> ParseResult:
        collector = IssueCollector(ctx)
        out: dict[Any, Any] = {}
        for raw_key, raw_value in value.items():
            segment = path_segment(raw_key)
            key_result = self._key._run(raw_key, ctx)
            if key_result.is_err():
                collector.add(*with_properties(key_result.error.prefixed(segment).issues, location='key'))
                if collector.should_stop:
                    break
            value_result = self._value._run(raw_value, ctx)
            value_ok = collector.absorb(value_result, segment)
            if key_result.is_ok() and value_ok:
                out[key_result.value] = value_result.value
            if collector.should_stop:
                break
        return collector.finish(out)


def _exhaustive_keys(schema: Schema[Any]) -> list[str] | None:
    """The closed key set of an enum or literal key schema, when every option is a string."""
    match schema:
        case EnumSchema():
            options = [option.value if isinstance(option, _enum.Enum) else option for option in schema.options]
        case LiteralSchema():
            options = list(schema.values)
        case _:
            return None
    if all(isinstance(option, str) for option in options):
        return options
    return None


class RecordSchema[V](SizedMixin, Schema[dict[str, V]]):
    """String-keyed mappings.

    With an enum or literal key schema the key set is closed: every key must be
    present (unless the record is partial) and no other key is allowed. A loose
    record keeps keys the key schema rejects, unvalidated.
    """

    _size_origin: ClassVar[str] = 'record'

    def __init__(
        self,
        internals: Internals,
        key: Schema[str],
        value: Schema[V],
        *,
        partial: bool = False,
        loose: bool = False,
    ) -> None:
        super().__init__(internals)
        self._key = key
        self._value = value
        self._partial = partial
        self._loose = loose

    @property
    def key_schema(self) -> Schema[str]:
        return self._key

    @property
    def value_schema(self) -> Schema[V]:
        return self._value

    @property
    def is_loose(self) -> bool:
        return self._loose

    def partial(self) -> Self:
        """Skip the missing-key check of closed key sets."""
        clone = self._with_internals(self.internals)
        clone._partial = True
        return clone

    def _extract(self, value: Any) -> Any:
        return value if isinstance(value, Mapping) else NOT_MATCHED

    def _validate(self, value: Mapping[Any, Any], ctx: ParseContext) -> ParseResult:
        collector = IssueCollector(ctx)
        allowed = _exhaustive_keys(self._key)
        if allowed is not None:
            extra = [key for key in value if key not in allowed]
            if extra and not self._loose:
                collector.add(unrecognized_keys([str(key) for key in extra], value))
            if not self._partial:
                for key in allowed:
                    if key not in value:
                        missing = invalid_type(self._value.expected, None)
                        collector.add(msgspec.structs.replace(missing, path=(key,)))
            if collector.should_stop:
                return collector.finish(None)

        out: dict[str, Any] = {}
        for raw_key, raw_value in value.items():
            segment = path_segment(raw_key)
            key_result = self._key._run(raw_key, ctx)
            if key_result.is_err():
                if self._loose:
                    out[raw_key] = raw_value
                    continue
                if allowed is None:
                    issue = invalid_key('record', key_result.error.issues, raw_key, inst=self.internals.error)
                    collector.add(msgspec.structs.replace(issue, path=(segment,)))
                if collector.should_stop:
                    break
                continue
            value_result = self._value._run(raw_value, ctx)
            if collector.absorb(value_result, segment):
                out[key_result.value] = value_result.value
            if collector.should_stop:
                break
        return collector.finish(out)


# --- Constructors ---


def map_[K, V](key: Schema[K], value: Schema[V], **params: Unpack[SchemaParams]) -> MapSchema[K, V]:
    """Schema accepting mappings with arbitrary (hashable) keys.

    Example:
        ```python
        map_(integer(), string()).parse({1: 'a'})  # Ok({1: 'a'})
        ```
    """
    return MapSchema(make_internals(TypeTag.MAP, **params), key, value)


mapping = map_


def record[V](key: Schema[str], value: Schema[V], **params: Unpack[SchemaParams]) -> RecordSchema[V]:
    """Schema accepting string-keyed mappings.

    Example:
        ```python
        record(string(), integer()).parse({'a': 1})  # Ok({'a': 1})
        record(enum(['id', 'name']), string()).parse({'id': 'x'})  # Err: invalid_type at ['name']
        ```
    """
    return RecordSchema(make_internals(TypeTag.RECORD, **params), key, value)


def partial_record[V](key: Schema[str], value: Schema[V], **params: Unpack[SchemaParams]) -> RecordSchema[V]:
    """Record whose closed key set may be incomplete."""
    return RecordSchema(make_internals(TypeTag.RECORD, **params), key, value, partial=True)


def loose_record[V](key: Schema[str], value: Schema[V], **params: Unpack[SchemaParams]) -> RecordSchema[V]:
    """Record that keeps entries whose key the key schema rejects, without validating them."""
    return RecordSchema(make_internals(TypeTag.RECORD, **params), key, value, loose=True)
