"""Per-call parse configuration and the mutable payload threaded through checks."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from klaw_schema.issues import ErrorOverride, IssueCode, PathSegment, RawIssue

__all__ = [
    'DEFAULT_CONTEXT',
    'ParseContext',
    'ParsePayload',
    'RefinementContext',
]


@dataclass(frozen=True)
class ParseContext:
    """Read-only, per-call parse configuration.

    Attributes:
        error: Error override applied to issues that carry no more specific message.
        fail_fast: Stop at the first issue instead of collecting every issue.
        report_input: Keep the offending input on finalized issues.
        extra: Free-form values for callers layering their own behaviour on parse.
    """

    error: ErrorOverride | None = None
    fail_fast: bool = False
    report_input: bool = True
    extra: Mapping[str, Any] = field(default_factory=dict)


DEFAULT_CONTEXT = ParseContext()


class ParsePayload:
    """The value under validation plus the issues collected so far.

    Created for each check pass and discarded when it returns. Only overwrite
    checks may replace ``value``.
    """

    __slots__ = ('issues', 'value')

    def __init__(self, value: Any, issues: list[RawIssue] | None = None) -> None:
        self.value = value
        self.issues: list[RawIssue] = issues if issues is not None else []

    def add_issue(self, issue: RawIssue) -> None:
        """Append a raw issue."""
        self.issues.append(issue)

    def add_issue_with_code(
        self,
        code: IssueCode,
        message: str | None = None,
        *,
        path: Sequence[PathSegment] = (),
        inst: ErrorOverride | None = None,
        **properties: Any,
    ) -> None:
        """Build and append an issue for the current value."""
        self.issues.append(
            RawIssue(
                code,
                input=self.value,
                message=message,
                path=tuple(path),
                properties=dict(properties),
                inst=inst,
            )
        )

    def has_issues(self) -> bool:
        return bool(self.issues)

    def __repr__(self) -> str:
        return f'ParsePayload(value={self.value!r}, issues={len(self.issues)})'


class RefinementContext:
    """Handle given to transforms so they can report issues instead of raising.

    Example:
        ```python
        def to_port(value: str, ctx: RefinementContext) -> int | None:
            if not value.isdigit():
                ctx.add_issue('not a port number')
                return None
            return int(value)

        schema = string().transform(to_port)
        ```
    """

    __slots__ = ('issues', 'parse_context', 'value')

    def __init__(self, value: Any, parse_context: ParseContext) -> None:
        self.value = value
        self.parse_context = parse_context
        self.issues: list[RawIssue] = []

    def add_issue(
        self,
        message: str | None = None,
        *,
        code: IssueCode = IssueCode.CUSTOM,
        path: Sequence[PathSegment] = (),
        input: Any = None,
        **properties: Any,
    ) -> None:
        """Report an issue for the value being transformed."""
        self.issues.append(
            RawIssue(
                code,
                input=self.value if input is None else input,
                message=message,
                path=tuple(path),
                properties=dict(properties),
            )
        )
