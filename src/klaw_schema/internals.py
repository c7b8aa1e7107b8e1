"""The immutable configuration block every schema carries."""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from klaw_schema.checks.base import Check
    from klaw_schema.issues import ErrorOverride

__all__ = [
    'UNSET',
    'Internals',
    'TypeTag',
]


class TypeTag(StrEnum):
    """Kind of a schema. Also used as the ``expected`` name in type issues."""

    STRING = 'string'
    NUMBER = 'number'
    INTEGER = 'int'
    BOOL = 'bool'
    STRINGBOOL = 'stringbool'
    DATE = 'date'
    ARRAY = 'array'
    SET = 'set'
    MAP = 'map'
    RECORD = 'record'
    OBJECT = 'object'
    TUPLE = 'tuple'
    UNION = 'union'
    XOR = 'xor'
    INTERSECTION = 'intersection'
    OPTIONAL = 'optional'
    NILABLE = 'nilable'
    NON_OPTIONAL = 'non_optional'
    DEFAULT = 'default'
    PREFAULT = 'prefault'
    PIPE = 'pipe'
    TRANSFORM = 'transform'
    REFINE = 'refine'
    LAZY = 'lazy'
    FILE = 'file'
    ANY = 'any'
    UNKNOWN = 'unknown'
    NEVER = 'never'
    NIL = 'nil'
    LITERAL = 'literal'
    ENUM = 'enum'
    FUNCTION = 'function'


class _Unset:
    """Sentinel for an absent default or prefault (None is a legal value)."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'UNSET'

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Unset:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Unset:
        return self


UNSET: Final = _Unset()


@dataclass(frozen=True)
class Internals:
    """Per-schema configuration.

    Instances are never mutated; ``clone`` returns a modified copy. Checks are
    immutable, so the tuple holding them is shared freely between clones.

    Attributes:
        type: Kind of the schema.
        checks: Checks run after validation, in append order.
        optional: Nil (or a missing key) yields None.
        nilable: An explicit nil yields None.
        non_optional: Nil is always rejected, overriding optional and nilable.
        exact_optional: A missing key is accepted but an explicit nil is not.
        coerce: Convert input of another kind before extraction.
        default: Value returned for nil input, bypassing validation.
        default_factory: Zero-argument callable producing the default on each use.
        prefault: Value substituted for nil input and then validated.
        prefault_factory: Zero-argument callable producing the prefault on each use.
        error: Error override for issues produced by this schema.
        description: Free-text description.
        meta: Free-form metadata.
    """

    type: TypeTag
    checks: tuple[Check, ...] = ()
    optional: bool = False
    nilable: bool = False
    non_optional: bool = False
    exact_optional: bool = False
    coerce: bool = False
    default: Any = UNSET
    default_factory: Callable[[], Any] | None = None
    prefault: Any = UNSET
    prefault_factory: Callable[[], Any] | None = None
    error: ErrorOverride | None = None
    description: str | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)

    def clone(self, **changes: Any) -> Internals:
        """Return a copy with ``changes`` applied.

        Flag and value pairs that exclude each other are kept consistent: setting
        ``non_optional`` clears ``optional`` and ``nilable`` (and the reverse),
        and a concrete default or prefault replaces its factory (and the reverse).
        """
        if changes.get('non_optional'):
            changes.setdefault('optional', False)
            changes.setdefault('nilable', False)
        elif changes.get('optional') or changes.get('nilable'):
            changes.setdefault('non_optional', False)
        if 'default' in changes:
            changes.setdefault('default_factory', None)
        elif changes.get('default_factory') is not None:
            changes['default'] = UNSET
        if 'prefault' in changes:
            changes.setdefault('prefault_factory', None)
        elif changes.get('prefault_factory') is not None:
            changes['prefault'] = UNSET
        return replace(self, **changes)

    def with_check(self, check: Check) -> Internals:
        """Return a copy with ``check`` appended."""
        return replace(self, checks=(*self.checks, check))

    @property
    def has_default(self) -> bool:
        return self.default is not UNSET or self.default_factory is not None

    @property
    def has_prefault(self) -> bool:
        return self.prefault is not UNSET or self.prefault_factory is not None

    @property
    def is_bare(self) -> bool:
        """True when no modifier would change how a value is parsed."""
        return not (
            self.checks
            or self.optional
            or self.nilable
            or self.non_optional
            or self.coerce
            or self.has_default
            or self.has_prefault
        )

    def resolve_default(self) -> Any:
        """Produce the default value for one use.

        Factories run on every call; concrete values are deep-copied so callers
        cannot mutate the stored default through a parse result.
        """
        if self.default_factory is not None:
            return self.default_factory()
        return copy.deepcopy(self.default)

    def resolve_prefault(self) -> Any:
        """Produce the prefault value for one use."""
        if self.prefault_factory is not None:
            return self.prefault_factory()
        return copy.deepcopy(self.prefault)
