"""Fixed-position sequences with an optional rest schema."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Unpack

from klaw_schema.context import ParseContext
from klaw_schema.engine import NOT_MATCHED, IssueCollector, ParseResult, fail
from klaw_schema.errors import InvalidSchemaError
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.issues import too_big, too_small
from klaw_schema.schemas.base import Schema, SchemaParams, make_internals

__all__ = [
    'TupleSchema',
    'tuple_',
]


class TupleSchema(Schema[tuple[Any, ...]]):
    """Sequences validated position by position.

    Trailing optional items may be left out; items beyond the declared ones
    are validated against ``rest`` or, without one, rejected with ``too_big``.
    Tuples stay tuples and lists stay lists.
    """

    def __init__(self, internals: Internals, items: Sequence[Schema[Any]], rest: Schema[Any] | None) -> None:
        super().__init__(internals)
        self._items = tuple(items)
        self._rest = rest
        self._required = max((index + 1 for index, item in enumerate(self._items) if not item.is_optional()), default=0)

    @property
    def items(self) -> tuple[Schema[Any], ...]:
        return self._items

    @property
    def rest_schema(self) -> Schema[Any] | None:
        return self._rest

    def rest(self, schema: Schema[Any]) -> TupleSchema:
        """Validate every item past the declared ones with ``schema``."""
        return TupleSchema(self.internals, self._items, _checked_rest(schema))

    def _extract(self, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return value
        return NOT_MATCHED

    def _validate(self, value: Sequence[Any], ctx: ParseContext) -> ParseResult:
        error = self.internals.error
        if len(value) < self._required:
            return fail(too_small('array', self._required, value, inst=error))
        if self._rest is None and len(value) > len(self._items):
            return fail(too_big('array', len(self._items), value, inst=error))

        collector = IssueCollector(ctx)
        out: list[Any] = []
        for index, item in enumerate(self._items):
            if index < len(value):
                result = item._run(value[index], ctx)
            elif item._fills_missing():
                result = item._run(None, ctx)
            else:
                break
            if collector.absorb(result, index):
                out.append(result.value)
            if collector.should_stop:
                return collector.finish(None)

        if self._rest is not None:
            for index in range(len(self._items), len(value)):
                result = self._rest._run(value[index], ctx)
                if collector.absorb(result, index):
                    out.append(result.value)
                if collector.should_stop:
                    break
        return collector.finish(tuple(out) if isinstance(value, tuple) else out)


def _checked_rest(rest: Any) -> Schema[Any] | None:
    if rest is not None and not isinstance(rest, Schema):
        msg = f'tuple rest must be a schema, got {type(rest).__name__}'
        raise InvalidSchemaError(msg)
    return rest


def tuple_(items: Sequence[Schema[Any]], rest: Schema[Any] | None = None, **params: Unpack[SchemaParams]) -> TupleSchema:
    """Schema accepting fixed-position sequences.

    Example:
        ```python
        point = tuple_([number(), number(), string().optional()])
        point.parse((1, 2))  # Ok((1, 2))
        point.parse([1])  # Err: too_small (expected at least 2 items)
        ```

    Raises:
        InvalidSchemaError: If an item or ``rest`` is not a schema.
    """
    for item in items:
        if not isinstance(item, Schema):
            msg = f'tuple items must be schemas, got {type(item).__name__}'
            raise InvalidSchemaError(msg)
    return TupleSchema(make_internals(TypeTag.TUPLE, **params), items, _checked_rest(rest))
