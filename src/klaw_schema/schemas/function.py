"""Function schemas: validate the arguments and return value of a callable."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Unpack

import wrapt

from klaw_schema.context import ParseContext
from klaw_schema.engine import NOT_MATCHED, ParseResult
from klaw_schema.errors import InvalidSchemaError
from klaw_schema.internals import Internals, TypeTag
from klaw_schema.result import Ok
from klaw_schema.schemas.base import Schema, SchemaParams, make_internals
from klaw_schema.schemas.tuple import TupleSchema, tuple_

__all__ = [
    'FunctionSchema',
    'function_',
]


class FunctionSchema(Schema[Callable[..., Any]]):
    """Describes a callable by its positional arguments and its return value.

    ``implement`` wraps a function so every call validates its positional
    arguments against ``input`` and its result against ``output``, raising
    ``ValidationError`` on failure. Parsing a callable returns it implemented.
    Keyword arguments are passed through unvalidated.
    """

    def __init__(self, internals: Internals, input: TupleSchema | None, output: Schema[Any] | None) -> None:
        super().__init__(internals)
        self._input = input
        self._output = output

    @property
    def input_schema(self) -> TupleSchema | None:
        return self._input

    @property
    def output_schema(self) -> Schema[Any] | None:
        return self._output

    def args(self, *schemas: Schema[Any]) -> FunctionSchema:
        """Copy with the positional arguments described by ``schemas``."""
        return FunctionSchema(self.internals, tuple_(schemas), self._output)

    def returns(self, schema: Schema[Any]) -> FunctionSchema:
        """Copy with the return value described by ``schema``."""
        return FunctionSchema(self.internals, self._input, schema)

    def _extract(self, value: Any) -> Any:
        return value if callable(value) else NOT_MATCHED

    def _validate(self, value: Callable[..., Any], ctx: ParseContext) -> ParseResult:
        return Ok(self.implement(value))

    def _parse_args(self, args: tuple[Any, ...]) -> tuple[Any, ...]:
        if self._input is None:
            return args
        return tuple(self._input.must_parse(args))

    def _parse_result(self, result: Any) -> Any:
        if self._output is None:
            return result
        return self._output.must_parse(result)

    def implement[**P, R](self, fn: Callable[P, R]) -> Callable[P, R]:
        """Wrap ``fn`` with argument and return-value validation.

        Example:
            ```python
            add = function_(input=[integer(), integer()], output=integer())

            @add.implement
            def plus(a, b):
                return a + b

            plus(1, 2)  # 3
            plus(1, 'x')  # raises ValidationError (invalid_type at [1])
            ```

        Raises:
            ValidationError: From the wrapped function, on invalid arguments or result.
        """

        @wrapt.decorator
        def wrapper(
            wrapped: Callable[..., R],
            instance: Any,
            args: tuple[Any, ...],
            kwargs: dict[str, Any],
        ) -> R:
            return self._parse_result(wrapped(*self._parse_args(args), **kwargs))

        return wrapper(fn)

    def implement_async[**P, R](self, fn: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        """``implement`` for coroutine functions; the awaited result is validated."""

        @wrapt.decorator
        async def wrapper(
            wrapped: Callable[..., Awaitable[R]],
            instance: Any,
            args: tuple[Any, ...],
            kwargs: dict[str, Any],
        ) -> R:
            return self._parse_result(await wrapped(*self._parse_args(args), **kwargs))

        return wrapper(fn)


def function_(
    input: TupleSchema | Sequence[Schema[Any]] | None = None,
    output: Schema[Any] | None = None,
    **params: Unpack[SchemaParams],
) -> FunctionSchema:
    """Schema describing a callable.

    Args:
        input: Tuple schema (or list of schemas) for the positional arguments.
        output: Schema for the return value.
        **params: Common schema parameters.

    Raises:
        InvalidSchemaError: If ``output`` is not a schema.
    """
    if input is not None and not isinstance(input, TupleSchema):
        input = tuple_(list(input))
    if output is not None and not isinstance(output, Schema):
        msg = f'function output must be a schema, got {type(output).__name__}'
        raise InvalidSchemaError(msg)
    return FunctionSchema(make_internals(TypeTag.FUNCTION, **params), input, output)
