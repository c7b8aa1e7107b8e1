"""The parse driver shared by every schema.

``parse_complex`` runs the fixed pipeline:

1. nil handling (non-optional, default, prefault, optional/nilable),
2. coercion when the schema's ``coerce`` flag is set,
3. extraction of the canonical representation,
4. type-specific validation (children, ranges),
5. the uniform check chain.

Schemas plug into it through a handful of hooks (``_coerce``, ``_extract``,
``_validate``); combinators that need nil to reach their children set
``_delegates_nil``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

import msgspec

from klaw_schema.context import ParseContext, ParsePayload
from klaw_schema.issues import ErrorOverride, IssueBag, PathSegment, RawIssue, invalid_type, non_optional
from klaw_schema.result import Err, Ok, Result

if TYPE_CHECKING:
    from klaw_schema.checks.base import Check
    from klaw_schema.schemas.base import Schema

__all__ = [
    'NOT_MATCHED',
    'ParseResult',
    'IssueCollector',
    'Substitute',
    'apply_checks',
    'fail',
    'parse_complex',
    'parse_complex_strict',
    'resolve_nil',
]

type ParseResult = Result[Any, IssueBag]


class _NotMatched:
    def __repr__(self) -> str:
        return 'NOT_MATCHED'


# Returned by extractors and coercers when the input is not of the schema's kind
NOT_MATCHED: Final = _NotMatched()


@dataclass(slots=True, frozen=True)
class Substitute:
    """Nil was replaced by a prefault value that must now be validated."""

    value: Any


def fail(*issues: RawIssue) -> Err[IssueBag]:
    """Wrap raw issues as an internal parse failure."""
    return Err(IssueBag(issues))


def resolve_nil(schema: Schema[Any], ctx: ParseContext) -> Ok[Any] | Err[IssueBag] | Substitute | None:
    """Apply the modifier rules to a nil input.

    Returns:
        ``Ok``/``Err`` when the modifiers settle the outcome, ``Substitute`` when a
        prefault replaces nil, or None when no modifier applies.
    """
    internals = schema.internals
    if internals.non_optional:
        return fail(non_optional(inst=internals.error))
    if internals.has_default:
        return Ok(internals.resolve_default())
    if internals.has_prefault:
        return Substitute(internals.resolve_prefault())
    if internals.optional or internals.nilable:
        return Ok(None)
    return None


def apply_checks(
    value: Any,
    checks: Sequence[Check],
    ctx: ParseContext,
    error: ErrorOverride | None = None,
) -> ParseResult:
    """Run checks in order against ``value``.

    Every check runs even after earlier failures, unless the context is
    fail-fast or the failing check is marked ``abort``. Issues without an
    error override of their own inherit the schema's ``error``.
    """
    if not checks:
        return Ok(value)
    payload = ParsePayload(value)
    for check in checks:
        if not check.applies_to(payload):
            continue
        before = len(payload.issues)
        check.run(payload)
        if len(payload.issues) > before and (check.abort or ctx.fail_fast):
            break
    if not payload.issues:
        return Ok(payload.value)
    issues = payload.issues
    if error is not None:
        issues = [issue if issue.inst is not None else msgspec.structs.replace(issue, inst=error) for issue in issues]
    return Err(IssueBag(issues))


def parse_complex(schema: Schema[Any], value: Any, ctx: ParseContext) -> ParseResult:
    """Run the full parse pipeline for ``schema``."""
    internals = schema.internals

    if value is None:
        outcome = resolve_nil(schema, ctx)
        match outcome:
            case Substitute(value=substituted):
                value = substituted
            case None if not schema._delegates_nil:
                return fail(invalid_type(schema.expected, None, inst=internals.error))
            case None:
                pass
            case _:
                return outcome

    if internals.coerce and value is not None:
        coerced = schema._coerce(value)
        if coerced is NOT_MATCHED:
            return fail(invalid_type(schema.expected, value, inst=internals.error, coerce=True))
        value = coerced

    extracted = schema._extract(value)
    if extracted is NOT_MATCHED:
        return fail(invalid_type(schema.expected, value, inst=internals.error))

    result = schema._validate(extracted, ctx)
    if result.is_err():
        return result
    return apply_checks(result.value, internals.checks, ctx, internals.error)


def parse_complex_strict(schema: Schema[Any], value: Any, ctx: ParseContext) -> ParseResult:
    """Parse a value already typed as the schema's output.

    A schema without modifiers or checks returns such a value untouched, so
    the caller gets back the very same object.
    """
    if schema.internals.is_bare and schema._strict_shortcut(value):
        return Ok(value)
    return parse_complex(schema, value, ctx)


class IssueCollector:
    """Accumulates child issues for container validators.

    Example:
        ```python
        collector = IssueCollector(ctx)
        for index, item in enumerate(items):
            result = element._run(item, ctx)
            if collector.absorb(result, index):
                out.append(result.value)
            if collector.should_stop:
                break
        return collector.finish(out)
        ```
    """

    __slots__ = ('ctx', 'issues')

    def __init__(self, ctx: ParseContext) -> None:
        self.ctx = ctx
        self.issues: list[RawIssue] = []

    def absorb(self, result: ParseResult, *segments: PathSegment) -> bool:
        """Record a child result; return True when it succeeded."""
        if isinstance(result, Ok):
            return True
        self.issues.extend(result.error.prefixed(*segments).issues)
        return False

    def add(self, *issues: RawIssue) -> None:
        self.issues.extend(issues)

    @property
    def should_stop(self) -> bool:
        return self.ctx.fail_fast and bool(self.issues)

    def finish(self, value: Any) -> ParseResult:
        if self.issues:
            return Err(IssueBag(self.issues))
        return Ok(value)
