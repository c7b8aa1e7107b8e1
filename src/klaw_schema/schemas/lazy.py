"""Lazy schemas for recursive structures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Unpack

from klaw_schema._logging import get_logger
from klaw_schema._sync import CellState, OnceCell
from klaw_schema.context import ParseContext
from klaw_schema.engine import ParseResult, fail
from klaw_schema.errors import InvalidSchemaError
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.issues import invalid_type
from klaw_schema.result import Err, Ok
from klaw_schema.schemas.base import Schema, SchemaParams, make_internals

__all__ = [
    'LazySchema',
    'lazy',
]

log = get_logger(__name__)

# Property carried by the nil issue a lazy schema raises, naming that schema's cell
ANCHOR_PROPERTY = '_lazy_anchor'


class LazySchema[T](Schema[T]):
    """Defers building the real schema until the first parse.

    The factory runs at most once, even under concurrent first parses, and its
    result is shared by every clone of this schema.

    When nil reaches the lazy schema itself it raises an ``invalid_type`` issue
    (expected ``lazy``) tagged with its cell. If every issue the inner schema
    reports carries that tag, the failure is only the recursion bottoming out:
    the lazy schema accepts the original input and runs its own checks on it.
    """

    _delegates_nil = True

    def __init__(self, internals: Internals, factory: Callable[[], Schema[T]], cell: OnceCell[Schema[T]]) -> None:
        super().__init__(internals)
        self._factory = factory
        self._cell = cell

    @property
    def state(self) -> CellState:
        return self._cell.state

    @property
    def inner(self) -> Schema[T]:
        """The resolved schema; resolves it on first access.

        Raises:
            InvalidSchemaError: If the factory returns something other than a schema.
        """
        return self._cell.get_or_init(self._resolve)

    def unwrap(self) -> Schema[T]:
        return self.inner

    def _resolve(self) -> Schema[T]:
        schema = self._factory()
        if not isinstance(schema, Schema):
            msg = f'lazy factory must return a schema, got {type(schema).__name__}'
            raise InvalidSchemaError(msg)
        log.debug('lazy.resolve', schema=type(schema).__name__, expected=schema.expected)
        return schema

    def _is_anchor(self, issues: Any) -> bool:
        return bool(issues) and all(issue.properties.get(ANCHOR_PROPERTY) is self._cell for issue in issues)

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is None:
            properties = {ANCHOR_PROPERTY: self._cell}
            return fail(invalid_type(TypeTag.LAZY.value, None, inst=self.internals.error, **properties))
        result = self.inner._run(value, ctx)
        if isinstance(result, Err) and self._is_anchor(result.error.issues):
            return Ok(value)
        return result


def lazy[T](factory: Callable[[], Schema[T]], **params: Unpack[SchemaParams]) -> LazySchema[T]:
    """Schema resolved from ``factory`` on first use.

    Example:
        ```python
        node = lazy(lambda: object_({'value': integer(), 'next': node.optional()}))
        node.parse({'value': 1, 'next': {'value': 2, 'next': None}})
        ```
    """
    return LazySchema(make_internals(TypeTag.LAZY, **params), factory, OnceCell())
