"""Error types, issue finalization, and error formatters.

``SchemaError`` covers malformed schema construction and is raised immediately.
``ValidationError`` is the aggregate returned (inside ``Err``) by a failing parse;
``ValidationFailure`` is its struct twin for code that prefers plain data.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Any

import msgspec

from klaw_schema.config import SchemaConfig, get_config
from klaw_schema.context import DEFAULT_CONTEXT, ParseContext
from klaw_schema.issues import ErrorOverride, Issue, ObjectValueMarker, PathSegment, RawIssue, nested_issue_lists
from klaw_schema.messages import default_message

__all__ = [
    'ErrorTree',
    'FlattenedError',
    'InvalidPatternError',
    'InvalidSchemaError',
    'SchemaError',
    'ValidationError',
    'ValidationFailure',
    'finalize_issue',
    'finalize_issues',
    'flatten_error',
    'format_error',
    'prettify_error',
    'to_dot_path',
    'treeify_error',
]


# --- Construction errors ---


class SchemaError(Exception):
    """A schema was constructed with an invalid definition."""


class InvalidPatternError(SchemaError):
    """A regular expression given to a schema does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f'Invalid pattern {pattern!r}: {reason}')


class InvalidSchemaError(SchemaError):
    """A schema definition is inconsistent (bad bounds, options, discriminators)."""


# --- Finalization ---


def _resolve_override(override: ErrorOverride | None, raw: RawIssue) -> str | None:
    if override is None:
        return None
    if callable(override):
        return override(raw) or None
    return override or None


def finalize_issue(
    raw: RawIssue,
    ctx: ParseContext = DEFAULT_CONTEXT,
    config: SchemaConfig | None = None,
) -> Issue:
    """Turn a raw issue into its final form.

    The message is taken from the first source that yields one: the issue's own
    message, the producing schema or check's error override, the parse context's
    error override, the global ``custom_error``, and finally the default table.

    Args:
        raw: The raw issue, with its fully accumulated path.
        ctx: The parse context of the outermost parse call.
        config: Global configuration (the active one when omitted).

    Returns:
        The finalized issue.
    """
    config = config or get_config()
    message = (
        raw.message
        or _resolve_override(raw.inst, raw)
        or _resolve_override(ctx.error, raw)
        or _resolve_override(config.custom_error, raw)
        or default_message(raw)
    )

    properties = {key: value for key, value in raw.properties.items() if not key.startswith('_')}
    for key, nested in nested_issue_lists(properties).items():
        if nested and isinstance(nested[0], list):
            properties[key] = [finalize_issues(option, ctx, config) for option in nested]
        else:
            properties[key] = finalize_issues(nested, ctx, config)

    report_input = ctx.report_input and config.report_input
    return Issue(
        raw.code,
        raw.path,
        message,
        expected=raw.expected,
        input=raw.input if report_input else None,
        properties=properties,
    )


def finalize_issues(
    raws: Sequence[RawIssue],
    ctx: ParseContext = DEFAULT_CONTEXT,
    config: SchemaConfig | None = None,
) -> list[Issue]:
    """Finalize a sequence of raw issues, preserving order."""
    config = config or get_config()
    return [finalize_issue(raw, ctx, config) for raw in raws]


# --- Aggregate ---


class ValidationFailure(msgspec.Struct, frozen=True):
    """Failed parse - struct variant of ValidationError."""

    issues: list[Issue]

    def to_exception(self) -> ValidationError:
        """Convert to exception for raise-based code."""
        return ValidationError(self.issues)


class ValidationError(Exception):
    """A parse failed; ``issues`` lists every detected problem in order.

    Attributes:
        issues: The finalized issues (never empty).
    """

    def __init__(self, issues: Sequence[Issue]) -> None:
        if not issues:
            msg = 'ValidationError requires at least one issue'
            raise ValueError(msg)
        self.issues = list(issues)
        super().__init__(prettify_error(self))

    @classmethod
    def from_raw(cls, raws: Sequence[RawIssue], ctx: ParseContext = DEFAULT_CONTEXT) -> ValidationError:
        """Finalize raw issues and wrap them."""
        return cls(finalize_issues(raws, ctx))

    def to_struct(self) -> ValidationFailure:
        """Convert to struct for Result-based code."""
        return ValidationFailure(list(self.issues))

    def flatten(self) -> FlattenedError:
        """Shortcut for ``flatten_error(self)``."""
        return flatten_error(self)

    def treeify(self) -> ErrorTree:
        """Shortcut for ``treeify_error(self)``."""
        return treeify_error(self)

    def __repr__(self) -> str:
        return f'ValidationError({len(self.issues)} issue(s): {[issue.code.value for issue in self.issues]})'


# --- Formatters ---

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def to_dot_path(path: Sequence[PathSegment]) -> str:
    """Render a path as ``user.tags[0]["odd key"]``."""
    parts: list[str] = []
    for index, segment in enumerate(path):
        match segment:
            case bool() | ObjectValueMarker():
                parts.append(f'[{segment}]')
            case int():
                parts.append(f'[{segment}]')
            case str() if index == 0:
                parts.append(segment)
            case str() if _IDENTIFIER.match(segment):
                parts.append(f'.{segment}')
            case _:
                parts.append(f'["{segment}"]')
    return ''.join(parts)


def _message(issue: Issue) -> str:
    return issue.message


def prettify_error(error: ValidationError | Sequence[Issue]) -> str:
    """Render issues as ``path: message`` entries joined by ``; ``."""
    issues = error.issues if isinstance(error, ValidationError) else error
    if not issues:
        return 'Validation failed'
    entries = []
    for issue in issues:
        if issue.path:
            entries.append(f'{to_dot_path(issue.path)}: {issue.message}')
        else:
            entries.append(issue.message)
    return '; '.join(entries)


class FlattenedError(msgspec.Struct):
    """Issues split into top-level messages and messages per first path segment."""

    form_errors: list[str] = msgspec.field(default_factory=list)
    field_errors: dict[str, list[str]] = msgspec.field(default_factory=dict)


def flatten_error(
    error: ValidationError,
    mapper: Callable[[Issue], str] = _message,
) -> FlattenedError:
    """Flatten issues one level deep.

    Example:
        ```python
        result = object_({'name': string(), 'age': integer()}).parse({'age': 'x'})
        flatten_error(result.error).field_errors
        # {'name': ['Invalid input: expected string, received nil'],
        #  'age': ['Invalid input: expected int, received string']}
        ```
    """
    flattened = FlattenedError()
    for issue in error.issues:
        if not issue.path:
            flattened.form_errors.append(mapper(issue))
            continue
        flattened.field_errors.setdefault(str(issue.path[0]), []).append(mapper(issue))
    return flattened


# Larger int segments are keyed under properties instead of padding items
_MAX_ITEM_INDEX = 10_000


class ErrorTree(msgspec.Struct):
    """Issues arranged along their paths."""

    errors: list[str] = msgspec.field(default_factory=list)
    properties: dict[str, ErrorTree] = msgspec.field(default_factory=dict)
    items: list[ErrorTree] = msgspec.field(default_factory=list)


def treeify_error(
    error: ValidationError,
    mapper: Callable[[Issue], str] = _message,
) -> ErrorTree:
    """Build a tree mirroring the input's shape, with messages at each node.

    Negative or very large int segments (map keys) are keyed under ``properties``.
    """
    tree = ErrorTree()
    for issue in error.issues:
        node = tree
        for segment in issue.path:
            if isinstance(segment, int) and not isinstance(segment, bool) and 0 <= segment <= _MAX_ITEM_INDEX:
                while len(node.items) <= segment:
                    node.items.append(ErrorTree())
                node = node.items[segment]
            else:
                node = node.properties.setdefault(str(segment), ErrorTree())
        node.errors.append(mapper(issue))
    return tree


def format_error(
    error: ValidationError,
    mapper: Callable[[Issue], str] = _message,
) -> dict[str, Any]:
    """Build nested dicts keyed by path segment, each holding an ``_errors`` list."""
    formatted: dict[str, Any] = {'_errors': []}
    for issue in error.issues:
        node = formatted
        for segment in issue.path:
            node = node.setdefault(str(segment), {'_errors': []})
        node['_errors'].append(mapper(issue))
    return formatted
