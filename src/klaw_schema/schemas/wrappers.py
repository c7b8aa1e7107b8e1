"""Modifier wrappers: optional, nilable, nullish, non-optional, default, prefault.

The ``Schema`` methods of the same names set flags on a clone; the functions
here wrap a schema instead, so the wrapper's rule applies before the inner
schema's own modifiers. See the nil-handling table in ``engine``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Unpack

from klaw_schema.context import ParseContext
from klaw_schema.engine import ParseResult
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.schemas.base import Schema, SchemaParams, make_internals

__all__ = [
    'DefaultSchema',
    'NilableSchema',
    'NonOptionalSchema',
    'OptionalSchema',
    'PrefaultSchema',
    'WrapperSchema',
    'nilable',
    'non_optional',
    'nullish',
    'optional',
    'with_default',
    'with_prefault',
]


class WrapperSchema[T](Schema[T]):
    """A schema delegating every non-nil input to ``inner``."""

    _delegates_nil = True

    def __init__(self, internals: Internals, inner: Schema[Any]) -> None:
        super().__init__(internals)
        self._inner = inner

    @property
    def inner(self) -> Schema[Any]:
        return self._inner

    def unwrap(self) -> Schema[Any]:
        return self._inner

    @property
    def expected(self) -> str:
        return self._inner.expected

    def is_optional(self) -> bool:
        if self.internals.non_optional:
            return False
        return super().is_optional() or self._inner.is_optional()

    def is_nilable(self) -> bool:
        if self.internals.non_optional:
            return False
        return super().is_nilable() or self._inner.is_nilable()

    def _fills_missing(self) -> bool:
        if self.internals.non_optional:
            return False
        return super()._fills_missing() or self._inner._fills_missing()

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        return self._inner._run(value, ctx)


class OptionalSchema[T](WrapperSchema[T | None]):
    """Nil and missing keys yield None; the inner schema, and any default it has, never sees nil."""

    def _fills_missing(self) -> bool:
        return Schema._fills_missing(self)


class NilableSchema[T](WrapperSchema[T | None]):
    """An explicit nil yields None; the inner schema never sees it."""

    def _fills_missing(self) -> bool:
        return Schema._fills_missing(self)


class NonOptionalSchema[T](WrapperSchema[T]):
    """Nil is rejected with expected ``non_optional``, whatever the inner schema allows."""

    def is_optional(self) -> bool:
        return False

    def is_nilable(self) -> bool:
        return False


class DefaultSchema[T](WrapperSchema[T]):
    """Nil yields the default without running the inner schema."""


class PrefaultSchema[T](WrapperSchema[T]):
    """Nil is replaced by the prefault, which the inner schema then validates."""


# --- Constructors ---


def optional[T](schema: Schema[T], **params: Unpack[SchemaParams]) -> OptionalSchema[T]:
    """Wrap ``schema`` so nil and missing keys are accepted.

    Example:
        ```python
        optional(string()).parse(None)  # Ok(None)
        ```
    """
    return OptionalSchema(make_internals(TypeTag.OPTIONAL, optional=True, **params), schema)


def nilable[T](schema: Schema[T], **params: Unpack[SchemaParams]) -> NilableSchema[T]:
    """Wrap ``schema`` so an explicit nil is accepted."""
    return NilableSchema(make_internals(TypeTag.NILABLE, nilable=True, **params), schema)


def nullish[T](schema: Schema[T], **params: Unpack[SchemaParams]) -> OptionalSchema[T]:
    """Wrap ``schema`` so it is both optional and nilable."""
    return OptionalSchema(make_internals(TypeTag.OPTIONAL, optional=True, nilable=True, **params), schema)


def non_optional[T](schema: Schema[T], **params: Unpack[SchemaParams]) -> NonOptionalSchema[T]:
    """Wrap ``schema`` so nil is always rejected."""
    return NonOptionalSchema(make_internals(TypeTag.NON_OPTIONAL, non_optional=True, **params), schema)


def with_default[T](
    schema: Schema[T],
    value: Any = None,
    *,
    factory: Callable[[], Any] | None = None,
    **params: Unpack[SchemaParams],
) -> DefaultSchema[T]:
    """Wrap ``schema`` so nil yields ``value`` (or ``factory()``) unvalidated."""
    if factory is not None:
        internals = make_internals(TypeTag.DEFAULT, default_factory=factory, **params)
    else:
        internals = make_internals(TypeTag.DEFAULT, default=value, **params)
    return DefaultSchema(internals, schema)


def with_prefault[T](
    schema: Schema[T],
    value: Any = None,
    *,
    factory: Callable[[], Any] | None = None,
    **params: Unpack[SchemaParams],
) -> PrefaultSchema[T]:
    """Wrap ``schema`` so nil is replaced by ``value`` (or ``factory()``) and then validated."""
    if factory is not None:
        internals = make_internals(TypeTag.PREFAULT, prefault_factory=factory, **params)
    else:
        internals = make_internals(TypeTag.PREFAULT, prefault=value, **params)
    return PrefaultSchema(internals, schema)
