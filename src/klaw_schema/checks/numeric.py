"""Range and divisibility checks for numbers and dates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from klaw_schema.checks.base import Check
from klaw_schema.context import ParsePayload
from klaw_schema.issues import ErrorOverride, IssueCode, RawIssue, invalid_value, not_multiple_of, too_big, too_small

__all__ = [
    'Finite',
    'GreaterThan',
    'LessThan',
    'MultipleOf',
    'incomparable',
    'is_multiple_of',
]


def incomparable(bound: Any, input: Any, *, inst: ErrorOverride | None = None) -> RawIssue:
    """Issue for a value that cannot be ordered against ``bound`` (naive vs aware datetimes)."""
    return invalid_value([], input, note=f'expected a value comparable with {bound}', bound=bound, inst=inst)


@dataclass(frozen=True, slots=True, kw_only=True)
class GreaterThan(Check):
    """Value must be above ``value`` (or equal to it when ``inclusive``)."""

    kind: ClassVar[str] = 'greater_than'

    value: Any
    inclusive: bool = True
    origin: str = 'number'

    def run(self, payload: ParsePayload) -> None:
        current = payload.value
        try:
            failed = current < self.value if self.inclusive else current <= self.value
        except TypeError:
            payload.add_issue(incomparable(self.value, current, inst=self.error))
            return
        if failed:
            payload.add_issue(too_small(self.origin, self.value, current, inclusive=self.inclusive, inst=self.error))


@dataclass(frozen=True, slots=True, kw_only=True)
class LessThan(Check):
    """Value must be below ``value`` (or equal to it when ``inclusive``)."""

    kind: ClassVar[str] = 'less_than'

    value: Any
    inclusive: bool = True
    origin: str = 'number'

    def run(self, payload: ParsePayload) -> None:
        current = payload.value
        try:
            failed = current > self.value if self.inclusive else current >= self.value
        except TypeError:
            payload.add_issue(incomparable(self.value, current, inst=self.error))
            return
        if failed:
            payload.add_issue(too_big(self.origin, self.value, current, inclusive=self.inclusive, inst=self.error))


def is_multiple_of(value: int | float, step: int | float) -> bool:
    """Divisibility test that is exact for decimal literals like ``0.3`` and ``0.1``."""
    if isinstance(value, int) and isinstance(step, int):
        return value % step == 0
    try:
        return Decimal(str(value)) % Decimal(str(step)) == 0
    except InvalidOperation:
        return False


@dataclass(frozen=True, slots=True, kw_only=True)
class MultipleOf(Check):
    """Value must be an exact multiple of ``step``."""

    kind: ClassVar[str] = 'multiple_of'

    step: int | float

    def run(self, payload: ParsePayload) -> None:
        if not is_multiple_of(payload.value, self.step):
            payload.add_issue(not_multiple_of(self.step, payload.value, inst=self.error))


@dataclass(frozen=True, slots=True, kw_only=True)
class Finite(Check):
    """Rejects infinities."""

    kind: ClassVar[str] = 'finite'

    def run(self, payload: ParsePayload) -> None:
        if isinstance(payload.value, float) and math.isinf(payload.value):
            payload.add_issue(
                RawIssue(IssueCode.INVALID_TYPE, input=payload.value, expected='number', inst=self.error)
            )
