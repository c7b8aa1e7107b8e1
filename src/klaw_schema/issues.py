"""Issue records: raw issues raised during parsing and their finalized form.

Raw issues are created at the point of failure and bubble up through container
schemas, which prepend their own position to each issue's path. They are turned
into ``Issue`` records exactly once, when the outermost ``parse`` builds its
``ValidationError``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from enum import StrEnum
from typing import Any

import msgspec

__all__ = [
    'ErrorOverride',
    'Issue',
    'IssueBag',
    'IssueCode',
    'ObjectValueMarker',
    'PathSegment',
    'RawIssue',
    'custom',
    'invalid_element',
    'invalid_format',
    'invalid_key',
    'invalid_type',
    'invalid_union',
    'invalid_value',
    'invalid_xor',
    'nested_issue_lists',
    'non_optional',
    'not_multiple_of',
    'prefix_issues',
    'too_big',
    'too_small',
    'unrecognized_keys',
    'with_properties',
]


class IssueCode(StrEnum):
    """Machine-readable issue codes."""

    INVALID_TYPE = 'invalid_type'
    INVALID_FORMAT = 'invalid_format'
    INVALID_VALUE = 'invalid_value'
    TOO_SMALL = 'too_small'
    TOO_BIG = 'too_big'
    NOT_MULTIPLE_OF = 'not_multiple_of'
    INVALID_KEY = 'invalid_key'
    INVALID_ELEMENT = 'invalid_element'
    INVALID_UNION = 'invalid_union'
    INVALID_XOR = 'invalid_xor'
    UNRECOGNIZED_KEYS = 'unrecognized_keys'
    NOT_FOUND = 'not_found'
    INVALID_SCHEMA = 'invalid_schema'
    CUSTOM = 'custom'


class ObjectValueMarker(msgspec.Struct, frozen=True):
    """Path segment standing in for a key that is neither a string nor an integer.

    Map and set schemas use it when the offending key (or set element) cannot be
    expressed as a plain path segment.
    """

    value: Any

    def __str__(self) -> str:
        return f'<{self.value!r}>'


type PathSegment = str | int | ObjectValueMarker

# A string, or a callable receiving the raw issue and returning a message or None
type ErrorOverride = str | Callable[[RawIssue], str | None]


class RawIssue(msgspec.Struct, frozen=True):
    """An issue as captured at the point of failure.

    Attributes:
        code: The issue code.
        input: The offending input value.
        expected: Expected type or format name, when meaningful.
        message: An explicit message that wins over every other message source.
        path: Location of the issue, outermost segment first.
        properties: Code-specific details (bounds, allowed values, nested issues).
        inst: Error override of the schema or check that produced the issue.
    """

    code: IssueCode
    input: Any = None
    expected: str | None = None
    message: str | None = None
    path: tuple[PathSegment, ...] = ()
    properties: dict[str, Any] = msgspec.field(default_factory=dict)
    inst: ErrorOverride | None = None


class Issue(msgspec.Struct, frozen=True):
    """A finalized issue: the stable shape handed to error consumers.

    Attributes:
        code: The issue code.
        path: Location of the issue, outermost segment first.
        message: Human-readable message.
        expected: Expected type or format name, when meaningful.
        input: The offending input (None when input reporting is disabled).
        properties: Code-specific details.
    """

    code: IssueCode
    path: tuple[PathSegment, ...]
    message: str
    expected: str | None = None
    input: Any = None
    properties: dict[str, Any] = msgspec.field(default_factory=dict)


class IssueBag(Exception):
    """Carrier for raw issues on the error side of an internal parse result."""

    def __init__(self, issues: Sequence[RawIssue]) -> None:
        self.issues = list(issues)
        super().__init__(f'{len(self.issues)} issue(s)')

    def prefixed(self, *segments: PathSegment) -> IssueBag:
        """Return a bag whose issues have ``segments`` prepended to their paths."""
        return IssueBag(prefix_issues(self.issues, *segments))


def prefix_issues(issues: Iterable[RawIssue], *segments: PathSegment) -> list[RawIssue]:
    """Prepend path segments to every issue, preserving order."""
    if not segments:
        return list(issues)
    return [msgspec.structs.replace(issue, path=(*segments, *issue.path)) for issue in issues]


def with_properties(issues: Iterable[RawIssue], **properties: Any) -> list[RawIssue]:
    """Merge extra properties into every issue."""
    return [
        msgspec.structs.replace(issue, properties={**issue.properties, **properties}) for issue in issues
    ]


# --- Creators ---


def invalid_type(
    expected: str,
    input: Any,
    *,
    inst: ErrorOverride | None = None,
    **properties: Any,
) -> RawIssue:
    """Create an ``invalid_type`` issue."""
    return RawIssue(
        IssueCode.INVALID_TYPE,
        input=input,
        expected=expected,
        properties=properties,
        inst=inst,
    )


def non_optional(input: Any = None, *, inst: ErrorOverride | None = None) -> RawIssue:
    """Create the ``invalid_type`` issue emitted when nil meets a non-optional schema."""
    return invalid_type('non_optional', input, inst=inst)


def invalid_value(
    values: Sequence[Any],
    input: Any,
    *,
    inst: ErrorOverride | None = None,
    **properties: Any,
) -> RawIssue:
    """Create an ``invalid_value`` issue listing the accepted values."""
    return RawIssue(
        IssueCode.INVALID_VALUE,
        input=input,
        properties={'values': list(values), **properties},
        inst=inst,
    )


def too_small(
    origin: str,
    minimum: Any,
    input: Any,
    *,
    inclusive: bool = True,
    exact: bool = False,
    inst: ErrorOverride | None = None,
    **properties: Any,
) -> RawIssue:
    """Create a ``too_small`` issue.

    Args:
        origin: What was measured (``string``, ``array``, ``number``, ``file``, ...).
        minimum: The violated lower bound.
        input: The offending value.
        inclusive: Whether the bound itself is allowed.
        exact: Whether the bound came from an exact-length constraint.
        inst: Error override of the producing check.
        **properties: Extra details.
    """
    return RawIssue(
        IssueCode.TOO_SMALL,
        input=input,
        expected=origin,
        properties={'origin': origin, 'minimum': minimum, 'inclusive': inclusive, 'exact': exact, **properties},
        inst=inst,
    )


def too_big(
    origin: str,
    maximum: Any,
    input: Any,
    *,
    inclusive: bool = True,
    exact: bool = False,
    inst: ErrorOverride | None = None,
    **properties: Any,
) -> RawIssue:
    """Create a ``too_big`` issue. Arguments mirror ``too_small``."""
    return RawIssue(
        IssueCode.TOO_BIG,
        input=input,
        expected=origin,
        properties={'origin': origin, 'maximum': maximum, 'inclusive': inclusive, 'exact': exact, **properties},
        inst=inst,
    )


def invalid_format(
    format: str,
    input: Any,
    *,
    inst: ErrorOverride | None = None,
    **properties: Any,
) -> RawIssue:
    """Create an ``invalid_format`` issue for a named string format."""
    return RawIssue(
        IssueCode.INVALID_FORMAT,
        input=input,
        expected=format,
        properties={'format': format, **properties},
        inst=inst,
    )


def not_multiple_of(divisor: Any, input: Any, *, inst: ErrorOverride | None = None) -> RawIssue:
    """Create a ``not_multiple_of`` issue."""
    return RawIssue(
        IssueCode.NOT_MULTIPLE_OF,
        input=input,
        expected='number',
        properties={'divisor': divisor},
        inst=inst,
    )


def unrecognized_keys(keys: Sequence[str], input: Any, *, inst: ErrorOverride | None = None) -> RawIssue:
    """Create an ``unrecognized_keys`` issue."""
    return RawIssue(
        IssueCode.UNRECOGNIZED_KEYS,
        input=input,
        properties={'keys': list(keys)},
        inst=inst,
    )


def invalid_union(
    errors: Sequence[Sequence[RawIssue]],
    input: Any,
    *,
    inst: ErrorOverride | None = None,
    **properties: Any,
) -> RawIssue:
    """Create an ``invalid_union`` issue carrying the per-option issue lists."""
    return RawIssue(
        IssueCode.INVALID_UNION,
        input=input,
        expected='union',
        properties={'errors': [list(option) for option in errors], **properties},
        inst=inst,
    )


def invalid_xor(count: int, input: Any, *, inst: ErrorOverride | None = None) -> RawIssue:
    """Create an ``invalid_xor`` issue for an exclusive union matched ``count`` times."""
    return RawIssue(
        IssueCode.INVALID_XOR,
        input=input,
        expected='xor',
        properties={'count': count},
        inst=inst,
    )


def invalid_key(
    origin: str,
    issues: Sequence[RawIssue],
    input: Any,
    *,
    inst: ErrorOverride | None = None,
) -> RawIssue:
    """Create an ``invalid_key`` issue wrapping the key schema's issues."""
    return RawIssue(
        IssueCode.INVALID_KEY,
        input=input,
        properties={'origin': origin, 'issues': list(issues)},
        inst=inst,
    )


def invalid_element(
    origin: str,
    key: Any,
    issues: Sequence[RawIssue],
    input: Any,
    *,
    inst: ErrorOverride | None = None,
) -> RawIssue:
    """Create an ``invalid_element`` issue wrapping an element's issues."""
    return RawIssue(
        IssueCode.INVALID_ELEMENT,
        input=input,
        properties={'origin': origin, 'key': key, 'issues': list(issues)},
        inst=inst,
    )


def custom(
    input: Any,
    *,
    message: str | None = None,
    path: Sequence[PathSegment] = (),
    inst: ErrorOverride | None = None,
    **properties: Any,
) -> RawIssue:
    """Create a ``custom`` issue, as produced by refinements."""
    return RawIssue(
        IssueCode.CUSTOM,
        input=input,
        message=message,
        path=tuple(path),
        properties=dict(properties),
        inst=inst,
    )


def _is_raw_issue_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, RawIssue) for item in value)


def nested_issue_lists(properties: Mapping[str, Any]) -> dict[str, Any]:
    """Return the entries of ``properties`` that hold nested raw issues."""
    nested: dict[str, Any] = {}
    for key, value in properties.items():
        if _is_raw_issue_list(value) or (
            isinstance(value, list) and value and all(_is_raw_issue_list(item) for item in value)
        ):
            nested[key] = value
    return nested
