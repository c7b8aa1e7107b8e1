"""Pipelines: schema-to-schema pipes and value transforms."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from klaw_schema.context import ParseContext, RefinementContext
from klaw_schema.engine import ParseResult, fail
from klaw_schema.errors import InvalidSchemaError
from klaw_schema.internals import UNSET, Internals, TypeTag
from klaw_schema.result import Err, Ok
from klaw_schema.schemas.base import Schema, make_internals

__all__ = [
    'PipeSchema',
    'TransformSchema',
    'pipe',
    'transform',
]


class PipeSchema[T](Schema[T]):
    """Parses with ``source``, then parses that output with ``target``."""

    _delegates_nil = True

    def __init__(self, internals: Internals, source: Schema[Any], target: Schema[T]) -> None:
        super().__init__(internals)
        self._source = source
        self._target = target

    @classmethod
    def create(cls, source: Schema[Any], target: Schema[T]) -> PipeSchema[T]:
        if not isinstance(target, Schema):
            msg = f'pipe target must be a schema, got {type(target).__name__}'
            raise InvalidSchemaError(msg)
        return cls(make_internals(TypeTag.PIPE), source, target)

    @property
    def source(self) -> Schema[Any]:
        return self._source

    @property
    def target(self) -> Schema[T]:
        return self._target

    @property
    def expected(self) -> str:
        return self._source.expected

    def is_optional(self) -> bool:
        return super().is_optional() or self._source.is_optional()

    def _fills_missing(self) -> bool:
        return super()._fills_missing() or self._source._fills_missing()

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        result = self._source._run(value, ctx)
        if isinstance(result, Err):
            return result
        return self._target._run(result.value, ctx)


def _takes_context(fn: Callable[..., Any]) -> bool:
    """True when ``fn`` accepts a second positional argument (the RefinementContext)."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return False
    positional = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


class TransformSchema[T](Schema[T]):
    """Parses with ``source`` and maps the output through ``fn``.

    ``fn`` receives the parsed value, plus a ``RefinementContext`` when it takes
    two arguments; issues added to the context fail the parse. A nil input
    answered by the source's default skips ``fn``.
    """

    _delegates_nil = True

    def __init__(self, internals: Internals, source: Schema[Any], fn: Callable[..., T]) -> None:
        super().__init__(internals)
        self._source = source
        self._fn = fn
        self._with_context = _takes_context(fn)

    @classmethod
    def create(cls, source: Schema[Any], fn: Callable[..., T]) -> TransformSchema[T]:
        if not callable(fn):
            msg = f'transform expects a callable, got {type(fn).__name__}'
            raise InvalidSchemaError(msg)
        return cls(make_internals(TypeTag.TRANSFORM), source, fn)

    @property
    def source(self) -> Schema[Any]:
        return self._source

    @property
    def expected(self) -> str:
        return self._source.expected

    def is_optional(self) -> bool:
        return super().is_optional() or self._source.is_optional()

    def _fills_missing(self) -> bool:
        return super()._fills_missing() or self._source._fills_missing()

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is None:
            default = self._source._nil_default()
            if default is not UNSET:
                return Ok(default)
        result = self._source._run(value, ctx)
        if isinstance(result, Err):
            return result
        if not self._with_context:
            return Ok(self._fn(result.value))
        refinement_ctx = RefinementContext(result.value, ctx)
        output = self._fn(result.value, refinement_ctx)
        if refinement_ctx.issues:
            return fail(*refinement_ctx.issues)
        return Ok(output)


def pipe[T](source: Schema[Any], target: Schema[T]) -> PipeSchema[T]:
    """Schema parsing with ``source`` and then with ``target``.

    Example:
        ```python
        port = pipe(string().transform(int), integer().min(1).max(65535))
        port.parse('8080')  # Ok(8080)
        ```
    """
    return PipeSchema.create(source, target)


def transform[T](source: Schema[Any], fn: Callable[..., T]) -> TransformSchema[T]:
    """Schema parsing with ``source`` and mapping the result through ``fn``."""
    return TransformSchema.create(source, fn)
