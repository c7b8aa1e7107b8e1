"""Length and size checks for strings, containers, and files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from klaw_schema.checks.base import Check
from klaw_schema.checks.files import file_size
from klaw_schema.context import ParsePayload
from klaw_schema.issues import ErrorOverride, RawIssue, invalid_value, too_big, too_small

__all__ = [
    'ExactSize',
    'MaxSize',
    'MinSize',
    'measure',
    'unmeasurable',
]


def measure(value: Any, origin: str) -> int | None:
    """Size of ``value`` in the unit of ``origin``.

    Strings count code points, containers count entries, files count bytes.
    None means the size could not be determined.
    """
    if origin == 'file':
        return file_size(value)
    return len(value)


def unmeasurable(input: Any, *, inst: ErrorOverride | None = None) -> RawIssue:
    return invalid_value([], input, note='size could not be determined', inst=inst)


@dataclass(frozen=True, slots=True, kw_only=True)
class MinSize(Check):
    """Size must be at least ``minimum`` (inclusive)."""

    kind: ClassVar[str] = 'min_size'

    minimum: int
    origin: str = 'string'

    def run(self, payload: ParsePayload) -> None:
        actual = measure(payload.value, self.origin)
        if actual is None:
            payload.add_issue(unmeasurable(payload.value, inst=self.error))
        elif actual < self.minimum:
            payload.add_issue(too_small(self.origin, self.minimum, payload.value, inst=self.error))


@dataclass(frozen=True, slots=True, kw_only=True)
class MaxSize(Check):
    """Size must be at most ``maximum`` (inclusive)."""

    kind: ClassVar[str] = 'max_size'

    maximum: int
    origin: str = 'string'

    def run(self, payload: ParsePayload) -> None:
        actual = measure(payload.value, self.origin)
        if actual is None:
            payload.add_issue(unmeasurable(payload.value, inst=self.error))
        elif actual > self.maximum:
            payload.add_issue(too_big(self.origin, self.maximum, payload.value, inst=self.error))


@dataclass(frozen=True, slots=True, kw_only=True)
class ExactSize(Check):
    """Size must equal ``size``."""

    kind: ClassVar[str] = 'size_equals'

    size: int
    origin: str = 'string'

    def run(self, payload: ParsePayload) -> None:
        actual = measure(payload.value, self.origin)
        if actual is None:
            payload.add_issue(unmeasurable(payload.value, inst=self.error))
        elif actual < self.size:
            payload.add_issue(too_small(self.origin, self.size, payload.value, exact=True, inst=self.error))
        elif actual > self.size:
            payload.add_issue(too_big(self.origin, self.size, payload.value, exact=True, inst=self.error))
