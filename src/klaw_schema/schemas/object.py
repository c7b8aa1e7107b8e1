"""Object schemas: fixed string keys mapped to child schemas."""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any, ClassVar, Self, Unpack

import msgspec

from klaw_schema.context import ParseContext
from klaw_schema.engine import NOT_MATCHED, IssueCollector, ParseResult
from klaw_schema.errors import InvalidSchemaError
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.issues import invalid_type, unrecognized_keys
from klaw_schema.schemas.base import Schema, SchemaParams, SizedMixin, make_internals
from klaw_schema.schemas.special import EnumSchema, enum

__all__ = [
    'ObjectMode',
    'ObjectSchema',
    'loose_object',
    'object_',
    'object_fields',
    'strict_object',
]

type Shape = Mapping[str, Schema[Any]]


class ObjectMode(StrEnum):
    """What happens to keys the shape does not name."""

    STRIP = 'strip'
    STRICT = 'strict'
    PASSTHROUGH = 'passthrough'


def object_fields(value: Any) -> dict[str, Any] | None:
    """Read a mapping, msgspec Struct, or dataclass instance as a plain dict."""
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, msgspec.Struct):
        return {name: getattr(value, name) for name in value.__struct_fields__}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
    return None


class ObjectSchema(SizedMixin, Schema[dict[str, Any]]):
    """Mappings with a known set of string keys.

    Unknown keys are dropped (``strip``, the default), rejected with one
    ``unrecognized_keys`` issue per key (``strict``), or kept (``passthrough``).
    A catchall schema validates and keeps every unknown key regardless of mode.

    Input may be a mapping, a msgspec Struct, or a dataclass instance; the output
    is always a new dict.

    Example:
        ```python
        user = object_({'name': string(), 'age': integer().optional()})
        user.parse({'name': 'Ada', 'extra': 1})  # Ok({'name': 'Ada'})
        user.strict().parse({'name': 'Ada', 'extra': 1})  # Err: unrecognized_keys at ['extra']
        ```
    """

    _size_origin: ClassVar[str] = 'object'

    def __init__(
        self,
        internals: Internals,
        shape: Shape,
        *,
        mode: ObjectMode = ObjectMode.STRIP,
        catchall: Schema[Any] | None = None,
    ) -> None:
        super().__init__(internals)
        self._shape: dict[str, Schema[Any]] = dict(shape)
        self._mode = mode
        self._catchall = catchall

    # --- Introspection ---

    @property
    def shape(self) -> dict[str, Schema[Any]]:
        return dict(self._shape)

    @property
    def mode(self) -> ObjectMode:
        return self._mode

    @property
    def catchall_schema(self) -> Schema[Any] | None:
        return self._catchall

    def keyof(self) -> EnumSchema:
        """Enum schema over the shape's keys."""
        return enum(list(self._shape))

    # --- Parsing ---

    def _extract(self, value: Any) -> Any:
        fields = object_fields(value)
        return NOT_MATCHED if fields is None else fields

    def _validate(self, value: dict[str, Any], ctx: ParseContext) -> ParseResult:
        collector = IssueCollector(ctx)
        out: dict[str, Any] = {}

        for key, child in self._shape.items():
            if key in value:
                result = child._run(value[key], ctx)
            elif child._fills_missing():
                result = child._run(None, ctx)
            elif child.is_optional():
                continue
            else:
                expected = 'non_optional' if child.internals.non_optional else child.expected
                collector.add(msgspec.structs.replace(invalid_type(expected, None), path=(key,)))
                if collector.should_stop:
                    break
                continue
            if collector.absorb(result, key):
                out[key] = result.value
            if collector.should_stop:
                break

        if not collector.should_stop:
            self._handle_unknown(value, out, collector, ctx)
        return collector.finish(out)

    def _handle_unknown(
        self,
        value: dict[str, Any],
        out: dict[str, Any],
        collector: IssueCollector,
        ctx: ParseContext,
    ) -> None:
        for key, item in value.items():
            if key in self._shape:
                continue
            if self._catchall is not None:
                result = self._catchall._run(item, ctx)
                if collector.absorb(result, key):
                    out[key] = result.value
            elif self._mode is ObjectMode.STRICT:
                issue = unrecognized_keys([key], value, inst=self.internals.error)
                collector.add(msgspec.structs.replace(issue, path=(key,)))
            elif self._mode is ObjectMode.PASSTHROUGH:
                out[key] = item
            if collector.should_stop:
                return

    # --- Unknown-key modes ---

    def _derive(self, **attributes: Any) -> Self:
        clone = copy.copy(self)
        for name, attribute in attributes.items():
            setattr(clone, f'_{name}', attribute)
        return clone

    def strict(self) -> Self:
        return self._derive(mode=ObjectMode.STRICT)

    def strip(self) -> Self:
        return self._derive(mode=ObjectMode.STRIP)

    def passthrough(self) -> Self:
        return self._derive(mode=ObjectMode.PASSTHROUGH)

    def catchall(self, schema: Schema[Any]) -> Self:
        """Validate every unknown key with ``schema`` and keep it."""
        return self._derive(catchall=schema)

    # --- Shape helpers ---

    def _new(self, shape: Shape, params: SchemaParams, **options: Any) -> ObjectSchema:
        options.setdefault('mode', self._mode)
        options.setdefault('catchall', self._catchall)
        return ObjectSchema(make_internals(TypeTag.OBJECT, **params), shape, **options)

    def _require_keys(self, keys: Iterable[str]) -> list[str]:
        keys = list(keys)
        unknown = [key for key in keys if key not in self._shape]
        if unknown:
            msg = f'Unrecognized keys: {unknown}'
            raise InvalidSchemaError(msg)
        return keys

    def _reject_refined(self, operation: str) -> None:
        if self.internals.checks:
            msg = f'{operation} cannot be used on object schemas containing refinements'
            raise InvalidSchemaError(msg)

    def pick(self, *keys: str, **params: Unpack[SchemaParams]) -> ObjectSchema:
        """New object with only ``keys``.

        Raises:
            InvalidSchemaError: If a key is unknown or this object has checks.
        """
        self._reject_refined('pick')
        return self._new({key: self._shape[key] for key in self._require_keys(keys)}, params)

    def omit(self, *keys: str, **params: Unpack[SchemaParams]) -> ObjectSchema:
        """New object without ``keys``.

        Raises:
            InvalidSchemaError: If a key is unknown or this object has checks.
        """
        self._reject_refined('omit')
        dropped = set(self._require_keys(keys))
        return self._new({key: child for key, child in self._shape.items() if key not in dropped}, params)

    def extend(self, shape: Shape, **params: Unpack[SchemaParams]) -> ObjectSchema:
        """New object with ``shape`` added; later keys replace earlier ones.

        Raises:
            InvalidSchemaError: If this object has checks and ``shape`` overrides a key.
        """
        if self.internals.checks and any(key in self._shape for key in shape):
            msg = 'extend cannot overwrite keys of object schemas containing refinements'
            raise InvalidSchemaError(msg)
        return self._new({**self._shape, **shape}, params)

    def merge(self, other: ObjectSchema, **params: Unpack[SchemaParams]) -> ObjectSchema:
        """Combine two objects; ``other`` wins on shared keys, mode and catchall. Checks are dropped."""
        return self._new(
            {**self._shape, **other._shape}, params, mode=other._mode, catchall=other._catchall
        )

    def partial(self, *keys: str) -> ObjectSchema:
        """Make ``keys`` (default: every key) optional."""
        targets = set(self._require_keys(keys)) if keys else set(self._shape)
        shape = {key: child.optional() if key in targets else child for key, child in self._shape.items()}
        return self._derive(shape=shape)

    def required(self, *keys: str) -> ObjectSchema:
        """Make ``keys`` (default: every key) reject missing and nil values."""
        targets = set(self._require_keys(keys)) if keys else set(self._shape)
        shape = {key: child.non_optional() if key in targets else child for key, child in self._shape.items()}
        return self._derive(shape=shape)


# --- Constructors ---


def object_(shape: Shape, **params: Unpack[SchemaParams]) -> ObjectSchema:
    """Object schema that strips unknown keys."""
    return ObjectSchema(make_internals(TypeTag.OBJECT, **params), shape)


def strict_object(shape: Shape, **params: Unpack[SchemaParams]) -> ObjectSchema:
    """Object schema that rejects unknown keys."""
    return ObjectSchema(make_internals(TypeTag.OBJECT, **params), shape, mode=ObjectMode.STRICT)


def loose_object(shape: Shape, **params: Unpack[SchemaParams]) -> ObjectSchema:
    """Object schema that keeps unknown keys."""
    return ObjectSchema(make_internals(TypeTag.OBJECT, **params), shape, mode=ObjectMode.PASSTHROUGH)
