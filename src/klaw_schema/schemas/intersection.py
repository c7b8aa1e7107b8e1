"""Intersection: input must satisfy both schemas; the outputs are merged."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Unpack

import msgspec

from klaw_schema.context import ParseContext
from klaw_schema.engine import IssueCollector, ParseResult, fail
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.issues import PathSegment, invalid_value
from klaw_schema.result import Ok
from klaw_schema.schemas.base import Schema, SchemaParams, make_internals

__all__ = [
    'IntersectionSchema',
    'MergeConflict',
    'intersection',
    'merge_values',
]


class MergeConflict(Exception):
    """Two parsed values cannot be merged; ``path`` points at the disagreement."""

    def __init__(self, path: tuple[PathSegment, ...]) -> None:
        super().__init__(f'Unmergeable values at {list(path)}')
        self.path = path


def merge_values(left: Any, right: Any, path: tuple[PathSegment, ...] = ()) -> Any:
    """Merge two parsed values.

    Mappings merge key by key (recursively on shared keys), equal-length lists
    and tuples merge item by item, and anything else must compare equal.

    Raises:
        MergeConflict: If the values disagree.
    """
    if left is right:
        return left
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        merged = dict(left)
        for key, value in right.items():
            merged[key] = merge_values(left[key], value, (*path, key)) if key in left else value
        return merged
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            raise MergeConflict(path)
        items = [merge_values(a, b, (*path, index)) for index, (a, b) in enumerate(zip(left, right, strict=True))]
        return tuple(items) if isinstance(left, tuple) else items
    if type(left) is type(right) and left == right:
        return left
    raise MergeConflict(path)


class IntersectionSchema[T](Schema[T]):
    """Runs both schemas on the same input and merges their outputs.

    Issues from both sides are reported. A merge conflict yields
    ``invalid_value`` at the conflicting path.
    """

    _delegates_nil = True

    def __init__(self, internals: Internals, left: Schema[Any], right: Schema[Any]) -> None:
        super().__init__(internals)
        self._left = left
        self._right = right

    @property
    def left(self) -> Schema[Any]:
        return self._left

    @property
    def right(self) -> Schema[Any]:
        return self._right

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        collector = IssueCollector(ctx)
        left = self._left._run(value, ctx)
        collector.absorb(left)
        if collector.should_stop:
            return collector.finish(None)
        right = self._right._run(value, ctx)
        collector.absorb(right)
        if collector.issues:
            return collector.finish(None)
        try:
            merged = merge_values(left.value, right.value)
        except MergeConflict as conflict:
            issue = invalid_value(
                [],
                value,
                inst=self.internals.error,
                note='intersection results could not be merged',
            )
            return fail(msgspec.structs.replace(issue, path=conflict.path))
        return Ok(merged)


def intersection[T](left: Schema[Any], right: Schema[Any], **params: Unpack[SchemaParams]) -> IntersectionSchema[T]:
    """Schema accepting input valid for both ``left`` and ``right``.

    Example:
        ```python
        named = object_({'name': string()}).passthrough()
        aged = object_({'age': integer()}).passthrough()
        intersection(named, aged).parse({'name': 'Ada', 'age': 36})  # Ok({'name': 'Ada', 'age': 36})
        ```
    """
    return IntersectionSchema(make_internals(TypeTag.INTERSECTION, **params), left, right)
