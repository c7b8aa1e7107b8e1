"""aiologic-backed computed-once cell used to memoize lazy schemas.

aiologic locks work from threads and from event loops alike, so a lazy schema
shared between worker threads and async tasks still resolves exactly once.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

import aiologic

__all__ = ['CellState', 'OnceCell']


class CellState(Enum):
    """Resolution state of a OnceCell."""

    UNRESOLVED = 'unresolved'
    RESOLVING = 'resolving'
    RESOLVED = 'resolved'


class OnceCell[T]:
    """A cell written exactly once by the first caller of ``get_or_init``.

    Concurrent first callers block on the lock; exactly one runs the
    initializer and every caller observes its result. If the initializer
    raises, the cell returns to ``UNRESOLVED`` and the exception propagates.

    Examples:
        >>> cell: OnceCell[int] = OnceCell()
        >>> cell.get_or_init(lambda: 42)
        42
        >>> cell.get_or_init(lambda: 100)
        42
    """

    __slots__ = ('_lock', '_state', '_value')

    def __init__(self) -> None:
        self._lock = aiologic.Lock()
        self._value: T | None = None
        self._state = CellState.UNRESOLVED

    @property
    def state(self) -> CellState:
        return self._state

    def is_set(self) -> bool:
        """Check if the value has been initialized."""
        return self._state is CellState.RESOLVED

    def get(self) -> T | None:
        """Get the value if set, otherwise None."""
        return self._value if self.is_set() else None

    def get_or_init(self, init: Callable[[], T]) -> T:
        """Get the value, or initialize it with the given function.

        Args:
            init: Function to call to initialize the value.

        Returns:
            The stored or newly initialized value.
        """
        if self._state is CellState.RESOLVED:
            return self._value  # type: ignore[return-value]

        with self._lock:
            if self._state is not CellState.RESOLVED:
                self._state = CellState.RESOLVING
                try:
                    self._value = init()
                except BaseException:
                    self._state = CellState.UNRESOLVED
                    raise
                self._state = CellState.RESOLVED
            return self._value  # type: ignore[return-value]
