"""Schema base class: parse entry points, modifiers, and composition helpers.

Every modifier returns a new schema around cloned internals; the receiver is
never changed, so schemas can be shared freely between threads and parses.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Self, TypedDict

from klaw_schema.checks.base import Overwrite, PayloadCheck, refinement
from klaw_schema.checks.sizes import ExactSize, MaxSize, MinSize
from klaw_schema.context import DEFAULT_CONTEXT, ParseContext, ParsePayload
from klaw_schema.engine import parse_complex, parse_complex_strict
from klaw_schema.errors import ValidationError
from klaw_schema.internals import UNSET, Internals, TypeTag
from klaw_schema.issues import ErrorOverride, IssueBag, PathSegment
from klaw_schema.registry import global_registry
from klaw_schema.result import Err, Ok, Result

if TYPE_CHECKING:
    from klaw_schema.checks.base import Check
    from klaw_schema.context import RefinementContext
    from klaw_schema.schemas.intersection import IntersectionSchema
    from klaw_schema.schemas.pipe import PipeSchema, TransformSchema
    from klaw_schema.schemas.union import UnionSchema

__all__ = [
    'Schema',
    'SchemaParams',
    'SizedMixin',
    'make_internals',
]

type ParseResult = Result[Any, IssueBag]


class SchemaParams(TypedDict, total=False):
    """Keyword parameters accepted by every schema constructor."""

    error: ErrorOverride | None
    coerce: bool
    description: str | None
    meta: Mapping[str, Any] | None


def make_internals(
    tag: TypeTag,
    *,
    error: ErrorOverride | None = None,
    coerce: bool = False,
    description: str | None = None,
    meta: Mapping[str, Any] | None = None,
    **flags: Any,
) -> Internals:
    """Build internals from the parameters every schema constructor accepts."""
    return Internals(
        tag,
        error=error,
        coerce=coerce,
        description=description,
        meta=dict(meta or {}),
        **flags,
    )


class Schema[T]:
    """Immutable description of accepted data.

    Subclasses customise parsing through the engine hooks:

    - ``_coerce(value)``: convert foreign input when ``coerce`` is set.
    - ``_extract(value)``: return the canonical value or ``NOT_MATCHED``.
    - ``_validate(value, ctx)``: validate children or ranges, returning a result.

    Example:
        ```python
        from klaw_schema import integer, object_, string

        user = object_({'name': string().min(1), 'age': integer().min(0).optional()})
        user.parse({'name': 'Ada'})  # Ok({'name': 'Ada'})
        user.must_parse({'name': ''})  # raises ValidationError (too_small at ['name'])
        ```
    """

    _delegates_nil: ClassVar[bool] = False

    def __init__(self, internals: Internals) -> None:
        self._internals = internals
        if internals.description is not None or internals.meta:
            self._register_metadata()

    # --- Engine hooks ---

    def _coerce(self, value: Any) -> Any:
        return value

    def _extract(self, value: Any) -> Any:
        return value

    def _validate(self, value: Any, ctx: ParseContext) -> ParseResult:
        return Ok(value)

    def _strict_shortcut(self, value: Any) -> bool:
        return False

    def _run(self, value: Any, ctx: ParseContext) -> ParseResult:
        """Parse without finalizing issues; used by parent schemas."""
        return parse_complex(self, value, ctx)

    # --- Introspection ---

    @property
    def internals(self) -> Internals:
        return self._internals

    @property
    def type(self) -> TypeTag:
        return self._internals.type

    @property
    def expected(self) -> str:
        """Name used as ``expected`` in type issues."""
        return self._internals.type.value

    @property
    def description(self) -> str | None:
        return self._internals.description

    @property
    def metadata(self) -> dict[str, Any]:
        """Metadata registered for this schema instance, falling back to its internals."""
        entry = global_registry.get(self)
        if entry is not None:
            return entry
        return self._metadata_entry()

    def is_optional(self) -> bool:
        """True when a missing value (absent key, nil) is accepted."""
        internals = self._internals
        return not internals.non_optional and (internals.optional or internals.exact_optional)

    def is_nilable(self) -> bool:
        """True when an explicit nil is accepted."""
        return not self._internals.non_optional and self._internals.nilable

    def _fills_missing(self) -> bool:
        """True when a missing value is replaced by a default or prefault."""
        internals = self._internals
        return not internals.non_optional and (internals.has_default or internals.has_prefault)

    def _nil_default(self) -> Any:
        """The default this schema would return for nil, or UNSET."""
        internals = self._internals
        if internals.non_optional or not internals.has_default:
            return UNSET
        return internals.resolve_default()

    # --- Parsing ---

    def parse(self, value: Any, ctx: ParseContext | None = None) -> Result[T, ValidationError]:
        """Parse ``value``.

        Args:
            value: Arbitrary input.
            ctx: Per-call options (error override, fail-fast, input reporting).

        Returns:
            ``Ok(parsed)`` or ``Err(ValidationError)``; never raises for bad input.
        """
        ctx = ctx or DEFAULT_CONTEXT
        return _finish(self._run(value, ctx), ctx)

    def must_parse(self, value: Any, ctx: ParseContext | None = None) -> T:
        """Parse ``value`` and return the result.

        Raises:
            ValidationError: If the value does not match the schema.
        """
        return self.parse(value, ctx).unwrap()

    def strict_parse(self, value: T, ctx: ParseContext | None = None) -> Result[T, ValidationError]:
        """Parse a value already of the output type.

        With no modifiers or checks configured, a value of the right type is
        returned as the very same object.
        """
        ctx = ctx or DEFAULT_CONTEXT
        return _finish(parse_complex_strict(self, value, ctx), ctx)

    def must_strict_parse(self, value: T, ctx: ParseContext | None = None) -> T:
        """``strict_parse`` that raises ValidationError on failure."""
        return self.strict_parse(value, ctx).unwrap()

    # --- Cloning ---

    def _with_internals(self, internals: Internals) -> Self:
        clone = copy.copy(self)
        clone._internals = internals
        return clone

    def _clone(self, **changes: Any) -> Self:
        return self._with_internals(self._internals.clone(**changes))

    def _with_check(self, check: Check) -> Self:
        return self._with_internals(self._internals.with_check(check))

    # --- Modifiers ---

    def optional(self) -> Self:
        """Accept nil and missing keys, yielding None."""
        return self._clone(optional=True)

    def nilable(self) -> Self:
        """Accept an explicit nil, yielding None."""
        return self._clone(nilable=True)

    def nullish(self) -> Self:
        """Both optional and nilable."""
        return self._clone(optional=True, nilable=True)

    def non_optional(self) -> Self:
        """Reject nil unconditionally, overriding optional and nilable."""
        return self._clone(non_optional=True)

    def exact_optional(self) -> Self:
        """Accept a missing key but reject an explicit nil."""
        return self._clone(exact_optional=True, optional=False, nilable=False)

    def default(self, value: Any) -> Self:
        """Return ``value`` for nil input without validating it.

        Mutable defaults are deep-copied on every use.
        """
        return self._clone(default=value)

    def default_func(self, fn: Callable[[], Any]) -> Self:
        """Call ``fn`` for every nil input and return its result unvalidated."""
        return self._clone(default_factory=fn)

    def prefault(self, value: Any) -> Self:
        """Substitute ``value`` for nil input and validate it like any input."""
        return self._clone(prefault=value)

    def prefault_func(self, fn: Callable[[], Any]) -> Self:
        """Call ``fn`` for every nil input and validate its result."""
        return self._clone(prefault_factory=fn)

    def error(self, error: ErrorOverride) -> Self:
        """Set the error override used for this schema's issues."""
        return self._clone(error=error)

    def coerce(self, enabled: bool = True) -> Self:
        return self._clone(coerce=enabled)

    # --- Metadata ---

    def describe(self, description: str) -> Self:
        """Attach a description (stored on the internals and in the global registry)."""
        return self._with_internals_registered(self._internals.clone(description=description))

    def meta(self, data: Mapping[str, Any]) -> Self:
        """Attach free-form metadata (merged over existing metadata)."""
        return self._with_internals_registered(self._internals.clone(meta={**self._internals.meta, **data}))

    def _metadata_entry(self) -> dict[str, Any]:
        entry: dict[str, Any] = dict(self._internals.meta)
        if self._internals.description is not None:
            entry['description'] = self._internals.description
        return entry

    def _register_metadata(self) -> None:
        global_registry.add(self, self._metadata_entry())

    def _with_internals_registered(self, internals: Internals) -> Self:
        clone = self._with_internals(internals)
        clone._register_metadata()
        return clone

    # --- Checks ---

    def refine(
        self,
        fn: Callable[[T], bool],
        message: str | None = None,
        *,
        error: ErrorOverride | None = None,
        abort: bool = False,
        path: Sequence[PathSegment] = (),
        when: Callable[[ParsePayload], bool] | None = None,
        **params: Any,
    ) -> Self:
        """Add a predicate check; a falsy result produces a ``custom`` issue.

        Args:
            fn: Predicate over the parsed value.
            message: Message of the produced issue.
            error: Error override (string or callable) used when no message is given.
            abort: Skip later checks when this one fails.
            path: Extra path appended below this schema's position.
            when: Run the check only when this predicate accepts the payload.
            **params: Extra properties recorded on the issue.
        """
        return self._with_check(
            refinement(fn, message, error=error, abort=abort, path=path, when=when, **params)
        )

    def check(
        self,
        fn: Callable[[ParsePayload], None],
        *,
        abort: bool = False,
        when: Callable[[ParsePayload], bool] | None = None,
    ) -> Self:
        """Add a check that receives the payload and reports issues itself."""
        return self._with_check(PayloadCheck(fn=fn, abort=abort, when=when))

    def overwrite(self, fn: Callable[[T], T]) -> Self:
        """Add a check that replaces the value with ``fn(value)``; the type must not change."""
        return self._with_check(Overwrite(fn=fn))

    def with_check(self, check: Check) -> Self:
        """Append an already-built check."""
        return self._with_check(check)

    # --- Composition ---

    def transform[U](self, fn: Callable[[T], U] | Callable[[T, RefinementContext], U]) -> TransformSchema[U]:
        """Parse with this schema, then map the output through ``fn``."""
        from klaw_schema.schemas.pipe import TransformSchema

        return TransformSchema.create(self, fn)

    def pipe[U](self, target: Schema[U]) -> PipeSchema[U]:
        """Parse with this schema, then parse its output with ``target``."""
        from klaw_schema.schemas.pipe import PipeSchema

        return PipeSchema.create(self, target)

    def or_[U](self, other: Schema[U]) -> UnionSchema[T | U]:
        """Union of this schema and ``other``."""
        from klaw_schema.schemas.union import union

        return union([self, other])

    def and_[U](self, other: Schema[U]) -> IntersectionSchema[Any]:
        """Intersection of this schema and ``other``."""
        from klaw_schema.schemas.intersection import intersection

        return intersection(self, other)

    def __repr__(self) -> str:
        flags = [
            name
            for name in ('optional', 'nilable', 'non_optional', 'exact_optional', 'coerce')
            if getattr(self._internals, name)
        ]
        suffix = f' [{", ".join(flags)}]' if flags else ''
        return f'<{type(self).__name__} {self.expected}{suffix}>'


def _finish[T](result: ParseResult, ctx: ParseContext) -> Result[T, ValidationError]:
    if isinstance(result, Ok):
        return result
    return Err(ValidationError.from_raw(result.error.issues, ctx))


class SizedMixin:
    """Length/size modifiers for schemas whose values have a size.

    ``_size_origin`` names the measured kind (``string``, ``array``, ``file``, ...)
    and selects the unit used in messages.
    """

    _size_origin: ClassVar[str]

    def min(self, minimum: int, *, error: ErrorOverride | None = None, abort: bool = False) -> Self:
        """Require at least ``minimum`` characters, items, keys, or bytes."""
        return self._with_check(MinSize(minimum=minimum, origin=self._size_origin, error=error, abort=abort))  # type: ignore[attr-defined]

    def max(self, maximum: int, *, error: ErrorOverride | None = None, abort: bool = False) -> Self:
        """Require at most ``maximum`` characters, items, keys, or bytes."""
        return self._with_check(MaxSize(maximum=maximum, origin=self._size_origin, error=error, abort=abort))  # type: ignore[attr-defined]

    def length(self, size: int, *, error: ErrorOverride | None = None, abort: bool = False) -> Self:
        """Require exactly ``size`` characters, items, keys, or bytes."""
        return self._with_check(ExactSize(size=size, origin=self._size_origin, error=error, abort=abort))  # type: ignore[attr-defined]

    def non_empty(self, *, error: ErrorOverride | None = None) -> Self:
        """Shorthand for ``min(1)``."""
        return self.min(1, error=error)
