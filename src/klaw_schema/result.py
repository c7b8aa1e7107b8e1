"""Ok / Err result carrier returned by ``Schema.parse``.

A successful parse yields ``Ok(value)``; a failed one yields ``Err(ValidationError)``.
Internally the same carrier moves raw issues between schemas, with an
``IssueBag`` on the error side.

Example:
    ```python
    from klaw_schema import Err, Ok, string

    match string().min(3).parse('hi'):
        case Ok(value):
            print(value)
        case Err(error):
            print(error.issues[0].code)  # too_small
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeGuard

__all__ = [
    'Err',
    'Ok',
    'Result',
    'is_err',
    'is_ok',
]


@dataclass(slots=True, frozen=True)
class Ok[T]:
    """Successful parse result.

    Attributes:
        value: The parsed output value.
    """

    value: T
    __match_args__ = ('value',)

    def is_ok(self) -> bool:
        """Return True, indicating this is a successful result."""
        return True

    def is_err(self) -> bool:
        """Return False, indicating this is not an error result."""
        return False

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Transform the value using a function.

        Args:
            f: A callable that takes the value and returns a new value of type U.

        Returns:
            Ok[U]: A new Ok containing the transformed value.
        """
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], BaseException]) -> Ok[T]:
        """Transform the error (no-op for Ok)."""
        return self

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return the contained value (the default is unused for Ok)."""
        return self.value

    def unwrap_err(self) -> BaseException:
        """Raise because Ok holds no error.

        Raises:
            RuntimeError: Always.
        """
        msg = f'Called unwrap_err on Ok: {self.value!r}'
        raise RuntimeError(msg)

    def ok(self) -> T | None:
        """Return the value."""
        return self.value

    def err(self) -> BaseException | None:
        """Return None."""
        return None

    def __repr__(self) -> str:
        return f'Ok({self.value!r})'


@dataclass(slots=True, frozen=True)
class Err[E: BaseException]:
    """Failed parse result.

    Attributes:
        error: The exception describing the failure.
    """

    error: E
    __match_args__ = ('error',)

    def is_ok(self) -> bool:
        """Return False, indicating this is not a successful result."""
        return False

    def is_err(self) -> bool:
        """Return True, indicating this is an error result."""
        return True

    def map[U](self, f: Callable[[Any], U]) -> Err[E]:
        """Transform the value (no-op for Err)."""
        return self

    def map_err[F: BaseException](self, f: Callable[[E], F]) -> Err[F]:
        """Transform the error using a function.

        Args:
            f: A callable that takes the error and returns a new exception.

        Returns:
            Err[F]: A new Err containing the transformed error.
        """
        return Err(f(self.error))

    def unwrap(self) -> Any:
        """Raise the contained error.

        Raises:
            E: The contained exception.
        """
        raise self.error

    def unwrap_or(self, default: Any) -> Any:
        """Return the provided default."""
        return default

    def unwrap_err(self) -> E:
        """Return the contained error."""
        return self.error

    def ok(self) -> Any | None:
        """Return None."""
        return None

    def err(self) -> E | None:
        """Return the error."""
        return self.error

    def __repr__(self) -> str:
        return f'Err({self.error!r})'


type Result[T, E: BaseException] = Ok[T] | Err[E]


def is_ok[T, E: BaseException](r: Result[T, E]) -> TypeGuard[Ok[T]]:
    """Type guard for the Ok variant.

    Args:
        r: The result to check.

    Returns:
        True if r is Ok.
    """
    return isinstance(r, Ok)


def is_err[T, E: BaseException](r: Result[T, E]) -> TypeGuard[Err[E]]:
    """Type guard for the Err variant.

    Args:
        r: The result to check.

    Returns:
        True if r is Err.
    """
    return isinstance(r, Err)
