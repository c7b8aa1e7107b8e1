"""Schemas for fixed value sets and the degenerate kinds: any, unknown, never, nil."""

from __future__ import annotations

import enum as _enum
from collections.abc import Iterable, Mapping
from typing import Any, Unpack

from klaw_schema.context import ParseContext
from klaw_schema.engine import NOT_MATCHED, fail
from klaw_schema.errors import InvalidSchemaError
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.issues import invalid_value
from klaw_schema.result import Ok
from klaw_schema.schemas.base import Schema, SchemaParams, make_internals

__all__ = [
    'AnySchema',
    'EnumSchema',
    'LiteralSchema',
    'NeverSchema',
    'NilSchema',
    'any_',
    'enum',
    'literal',
    'never',
    'nil',
    'none',
    'unknown',
]


def _same_value(left: Any, right: Any) -> bool:
    """Equality that never confuses bool with int (``True != 1`` here)."""
    return left is right or (type(left) is type(right) and left == right)


class AnySchema(Schema[Any]):
    """Accepts every non-nil value unchanged (``any`` and ``unknown``)."""

    def _strict_shortcut(self, value: Any) -> bool:
        return value is not None


class NeverSchema(Schema[Any]):
    """Rejects every input."""

    _delegates_nil = True

    def _extract(self, value: Any) -> Any:
        return NOT_MATCHED


class NilSchema(Schema[None]):
    """Accepts only None."""

    _delegates_nil = True

    def _extract(self, value: Any) -> Any:
        return value if value is None else NOT_MATCHED


class LiteralSchema(Schema[Any]):
    """Accepts one of a fixed set of values, compared by type and value."""

    def __init__(self, internals: Internals, values: tuple[Any, ...]) -> None:
        super().__init__(internals)
        self._values = values

    @property
    def values(self) -> tuple[Any, ...]:
        return self._values

    @property
    def value(self) -> Any:
        """The single literal value.

        Raises:
            InvalidSchemaError: If the schema holds several values.
        """
        if len(self._values) != 1:
            msg = f'literal has {len(self._values)} values'
            raise InvalidSchemaError(msg)
        return self._values[0]

    @property
    def _delegates_nil(self) -> bool:  # type: ignore[override]
        return any(value is None for value in self._values)

    @property
    def expected(self) -> str:
        return 'literal'

    def _validate(self, value: Any, ctx: ParseContext) -> Any:
        if self._strict_shortcut(value):
            return Ok(value)
        return fail(invalid_value(self._values, value, inst=self.internals.error))

    def _strict_shortcut(self, value: Any) -> bool:
        return any(_same_value(value, candidate) for candidate in self._values)


class EnumSchema(Schema[Any]):
    """Accepts one of a set of named values.

    Options taken from a Python ``Enum`` class are members; such a schema accepts
    a member or its raw value and always returns the member.
    """

    def __init__(self, internals: Internals, entries: Mapping[str, Any]) -> None:
        super().__init__(internals)
        self._entries = dict(entries)

    @property
    def options(self) -> list[Any]:
        return list(self._entries.values())

    @property
    def enum(self) -> dict[str, Any]:
        """Name to option mapping."""
        return dict(self._entries)

    def _lookup(self, value: Any) -> Any:
        for option in self._entries.values():
            if _same_value(option, value):
                return option
            if isinstance(option, _enum.Enum) and _same_value(option.value, value):
                return option
        return NOT_MATCHED

    def _validate(self, value: Any, ctx: ParseContext) -> Any:
        option = self._lookup(value)
        if option is NOT_MATCHED:
            raw_values = [item.value if isinstance(item, _enum.Enum) else item for item in self._entries.values()]
            return fail(invalid_value(raw_values, value, inst=self.internals.error))
        return Ok(option)

    def _strict_shortcut(self, value: Any) -> bool:
        return any(option is value for option in self._entries.values())

    def extract(self, names: Iterable[str], **params: Unpack[SchemaParams]) -> EnumSchema:
        """New enum limited to ``names``.

        Raises:
            InvalidSchemaError: If a name is not part of this enum.
        """
        wanted = list(names)
        self._require_known(wanted)
        return EnumSchema(make_internals(TypeTag.ENUM, **params), {name: self._entries[name] for name in wanted})

    def exclude(self, names: Iterable[str], **params: Unpack[SchemaParams]) -> EnumSchema:
        """New enum without ``names``."""
        dropped = set(names)
        self._require_known(dropped)
        kept = {name: option for name, option in self._entries.items() if name not in dropped}
        return EnumSchema(make_internals(TypeTag.ENUM, **params), kept)

    def _require_known(self, names: Iterable[str]) -> None:
        missing = sorted(set(names) - self._entries.keys())
        if missing:
            msg = f'Unknown enum keys: {missing}'
            raise InvalidSchemaError(msg)


# --- Constructors ---


def any_(**params: Unpack[SchemaParams]) -> AnySchema:
    """Schema accepting any non-nil value."""
    return AnySchema(make_internals(TypeTag.ANY, **params))


def unknown(**params: Unpack[SchemaParams]) -> AnySchema:
    return AnySchema(make_internals(TypeTag.UNKNOWN, **params))


def never(**params: Unpack[SchemaParams]) -> NeverSchema:
    """Schema rejecting everything, nil included."""
    return NeverSchema(make_internals(TypeTag.NEVER, **params))


def nil(**params: Unpack[SchemaParams]) -> NilSchema:
    """Schema accepting only None."""
    return NilSchema(make_internals(TypeTag.NIL, **params))


none = nil


def literal(*values: Any, **params: Unpack[SchemaParams]) -> LiteralSchema:
    """Schema accepting exactly the given values.

    Comparison is type-strict: ``literal(1)`` rejects ``True`` and ``1.0``.

    Raises:
        InvalidSchemaError: If no value is given.
    """
    if not values:
        msg = 'literal requires at least one value'
        raise InvalidSchemaError(msg)
    return LiteralSchema(make_internals(TypeTag.LITERAL, **params), tuple(values))


def enum(values: type[_enum.Enum] | Mapping[str, Any] | Iterable[Any], **params: Unpack[SchemaParams]) -> EnumSchema:
    """Schema accepting one of a set of values.

    Args:
        values: An ``Enum`` class, a mapping of names to values, or plain values
            (each value is named by its string form).
        **params: Common schema parameters.

    Example:
        ```python
        class Color(Enum):
            RED = 'red'
            BLUE = 'blue'

        enum(Color).parse('red')  # Ok(Color.RED)
        enum(['a', 'b']).parse('c')  # Err(invalid_value)
        ```

    Raises:
        InvalidSchemaError: If no values are given.
    """
    if isinstance(values, type) and issubclass(values, _enum.Enum):
        entries: dict[str, Any] = {member.name: member for member in values}
    elif isinstance(values, Mapping):
        entries = dict(values)
    else:
        entries = {str(value): value for value in values}
    if not entries:
        msg = 'enum requires at least one value'
        raise InvalidSchemaError(msg)
    return EnumSchema(make_internals(TypeTag.ENUM, **params), entries)
