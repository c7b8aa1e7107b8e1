"""Homogeneous collections: arrays (lists and tuples) and sets."""

from __future__ import annotations

from collections.abc import Sequence, Set
from typing import Any, ClassVar, Unpack

from klaw_schema.context import ParseContext
from klaw_schema.engine import NOT_MATCHED, IssueCollector, ParseResult
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.issues import ObjectValueMarker, PathSegment
from klaw_schema.schemas.base import Schema, SchemaParams, SizedMixin, make_internals

__all__ = [
    'ArraySchema',
    'SetSchema',
    'array',
    'path_segment',
    'set_',
]


def path_segment(value: Any) -> PathSegment:
    """Path segment for a key or set member: str and int as-is, anything else marked."""
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return value
    return ObjectValueMarker(value)


class ArraySchema[T](SizedMixin, Schema[list[T]]):
    """Sequences whose items all match ``element``.

    Lists stay lists and tuples stay tuples; any other non-string sequence is
    returned as a list.
    """

    _size_origin: ClassVar[str] = 'array'

    def __init__(self, internals: Internals, element: Schema[T]) -> None:
        super().__init__(internals)
        self._element = element

    @property
    def element(self) -> Schema[T]:
        return self._element

    def unwrap(self) -> Schema[T]:
        return self._element

    def _extract(self, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return value
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            return list(value)
        return NOT_MATCHED

    def _validate(self, value: Sequence[Any], ctx: ParseContext) -> ParseResult:
        collector = IssueCollector(ctx)
        items: list[Any] = []
        for index, item in enumerate(value):
            result = self._element._run(item, ctx)
            if collector.absorb(result, index):
                items.append(result.value)
            if collector.should_stop:
                break
        return collector.finish(tuple(items) if isinstance(value, tuple) else items)


class SetSchema[T](SizedMixin, Schema[set[T]]):
    """Sets and frozensets whose members all match ``element``; the kind is kept."""

    _size_origin: ClassVar[str] = 'set'

    def __init__(self, internals: Internals, element: Schema[T]) -> None:
        super().__init__(internals)
        self._element = element

    @property
    def element(self) -> Schema[T]:
        return self._element

    def unwrap(self) -> Schema[T]:
        return self._element

    def _extract(self, value: Any) -> Any:
        return value if isinstance(value, Set) else NOT_MATCHED

    def _validate(self, value: Set[Any], ctx: ParseContext) -> ParseResult:
        collector = IssueCollector(ctx)
        members: list[Any] = []
        for member in value:
            result = self._element._run(member, ctx)
            if collector.absorb(result, path_segment(member)):
                members.append(result.value)
            if collector.should_stop:
                break
        return collector.finish(frozenset(members) if isinstance(value, frozenset) else set(members))


def array[T](element: Schema[T], **params: Unpack[SchemaParams]) -> ArraySchema[T]:
    """Schema accepting sequences of ``element``.

    Example:
        ```python
        array(integer()).min(1).parse([1, 2, 3])  # Ok([1, 2, 3])
        array(integer()).parse([1, 'x'])  # Err: invalid_type at [1]
        ```
    """
    return ArraySchema(make_internals(TypeTag.ARRAY, **params), element)


def set_[T](element: Schema[T], **params: Unpack[SchemaParams]) -> SetSchema[T]:
    """Schema accepting sets of ``element``."""
    return SetSchema(make_internals(TypeTag.SET, **params), element)
