"""String content checks and the overwrite-style normalizers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from klaw_schema.checks.base import Check, Overwrite
from klaw_schema.context import ParsePayload
from klaw_schema.errors import InvalidPatternError
from klaw_schema.issues import invalid_format

__all__ = [
    'EndsWith',
    'Includes',
    'Regex',
    'StartsWith',
    'compile_pattern',
    'lowercase_overwrite',
    'trim_overwrite',
    'uppercase_overwrite',
]


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a pattern, raising InvalidPatternError instead of re.error."""
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc


@dataclass(frozen=True, slots=True, kw_only=True)
class Regex(Check):
    """The string must contain a match for ``pattern`` (use anchors for full matches)."""

    kind: ClassVar[str] = 'string_format'

    pattern: re.Pattern[str]
    format: str = 'regex'

    def run(self, payload: ParsePayload) -> None:
        if self.pattern.search(payload.value) is None:
            payload.add_issue(
                invalid_format(self.format, payload.value, pattern=self.pattern.pattern, inst=self.error)
            )


@dataclass(frozen=True, slots=True, kw_only=True)
class StartsWith(Check):
    kind: ClassVar[str] = 'string_format'

    prefix: str

    def run(self, payload: ParsePayload) -> None:
        if not payload.value.startswith(self.prefix):
            payload.add_issue(invalid_format('starts_with', payload.value, prefix=self.prefix, inst=self.error))


@dataclass(frozen=True, slots=True, kw_only=True)
class EndsWith(Check):
    kind: ClassVar[str] = 'string_format'

    suffix: str

    def run(self, payload: ParsePayload) -> None:
        if not payload.value.endswith(self.suffix):
            payload.add_issue(invalid_format('ends_with', payload.value, suffix=self.suffix, inst=self.error))


@dataclass(frozen=True, slots=True, kw_only=True)
class Includes(Check):
    """The string must contain ``includes``, searching from ``position``."""

    kind: ClassVar[str] = 'string_format'

    includes: str
    position: int = 0

    def run(self, payload: ParsePayload) -> None:
        if self.includes not in payload.value[self.position :]:
            payload.add_issue(invalid_format('includes', payload.value, includes=self.includes, inst=self.error))


def trim_overwrite() -> Overwrite:
    return Overwrite(fn=str.strip, name='trim')


def lowercase_overwrite() -> Overwrite:
    return Overwrite(fn=str.lower, name='to_lower_case')


def uppercase_overwrite() -> Overwrite:
    return Overwrite(fn=str.upper, name='to_upper_case')
