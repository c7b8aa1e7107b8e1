"""Check abstraction: units of validation run after a schema's validator."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

from klaw_schema.context import ParsePayload
from klaw_schema.issues import ErrorOverride, PathSegment, custom

__all__ = [
    'Check',
    'Overwrite',
    'PayloadCheck',
    'Refinement',
    'refinement',
]


@dataclass(frozen=True, slots=True, kw_only=True)
class Check:
    """A pluggable predicate over a parse payload.

    Subclasses implement ``run``, which may inspect ``payload.value`` and append
    issues but must not replace the value (only ``Overwrite`` does that).

    Attributes:
        error: Error override for issues this check produces.
        abort: Stop running later checks when this one fails.
        when: Predicate deciding whether the check runs for a payload.
    """

    kind: ClassVar[str] = 'check'

    error: ErrorOverride | None = None
    abort: bool = False
    when: Callable[[ParsePayload], bool] | None = None

    def run(self, payload: ParsePayload) -> None:
        raise NotImplementedError

    def applies_to(self, payload: ParsePayload) -> bool:
        return self.when is None or self.when(payload)


@dataclass(frozen=True, slots=True, kw_only=True)
class Overwrite(Check):
    """Replace the payload value with ``fn(value)`` (trim, case normalization)."""

    kind: ClassVar[str] = 'overwrite'

    fn: Callable[[Any], Any]
    name: str = 'overwrite'

    def run(self, payload: ParsePayload) -> None:
        payload.value = self.fn(payload.value)


@dataclass(frozen=True, slots=True, kw_only=True)
class Refinement(Check):
    """Custom predicate; a falsy result adds a ``custom`` issue.

    Attributes:
        fn: Predicate receiving the parsed value.
        message: Message for the produced issue.
        path: Path appended below the schema's own position.
        params: Extra properties attached to the issue.
    """

    kind: ClassVar[str] = 'custom'

    fn: Callable[[Any], bool]
    message: str | None = None
    path: tuple[PathSegment, ...] = ()
    params: dict[str, Any] = field(default_factory=dict)

    def run(self, payload: ParsePayload) -> None:
        if not self.fn(payload.value):
            payload.add_issue(
                custom(payload.value, message=self.message, path=self.path, inst=self.error, **self.params)
            )


@dataclass(frozen=True, slots=True, kw_only=True)
class PayloadCheck(Check):
    """Check built from a callable that receives the payload itself.

    The callable reports problems with ``payload.add_issue`` or
    ``payload.add_issue_with_code``.
    """

    kind: ClassVar[str] = 'custom'

    fn: Callable[[ParsePayload], None]

    def run(self, payload: ParsePayload) -> None:
        self.fn(payload)


def refinement(
    fn: Callable[[Any], bool],
    message: str | None = None,
    *,
    error: ErrorOverride | None = None,
    abort: bool = False,
    path: Sequence[PathSegment] = (),
    when: Callable[[ParsePayload], bool] | None = None,
    **params: Any,
) -> Refinement:
    """Build a Refinement from loose arguments."""
    return Refinement(
        fn=fn,
        message=message,
        error=error,
        abort=abort,
        path=tuple(path),
        when=when,
        params=params,
    )
