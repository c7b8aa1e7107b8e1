"""Process-wide metadata registry fed by ``Schema.describe`` and ``Schema.meta``.

Entries are keyed weakly by schema instance, so registering metadata never keeps
a schema alive. The registry is descriptive only: parsing never reads it.
"""

from __future__ import annotations

import weakref
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import aiologic

from klaw_schema._logging import get_logger

if TYPE_CHECKING:
    from klaw_schema.schemas.base import Schema

__all__ = [
    'GlobalRegistry',
    'global_registry',
]

log = get_logger(__name__)


class GlobalRegistry:
    """Thread-safe mapping from schema instances to metadata dicts.

    Example:
        ```python
        from klaw_schema import global_registry, string

        email = string().describe('Contact address')
        global_registry.get(email)  # {'description': 'Contact address'}
        ```
    """

    __slots__ = ('_entries', '_lock')

    def __init__(self) -> None:
        self._lock = aiologic.Lock()
        self._entries: weakref.WeakKeyDictionary[Schema[Any], dict[str, Any]] = weakref.WeakKeyDictionary()

    def add(self, schema: Schema[Any], meta: Mapping[str, Any]) -> None:
        """Register metadata for ``schema``, merging over any existing entry."""
        with self._lock:
            merged = {**self._entries.get(schema, {}), **meta}
            self._entries[schema] = merged
        log.debug('registry.add', schema=type(schema).__name__, keys=sorted(meta))

    def get(self, schema: Schema[Any]) -> dict[str, Any] | None:
        """Return a copy of the metadata registered for ``schema``."""
        with self._lock:
            entry = self._entries.get(schema)
            return dict(entry) if entry is not None else None

    def has(self, schema: Schema[Any]) -> bool:
        with self._lock:
            return schema in self._entries

    def remove(self, schema: Schema[Any]) -> None:
        with self._lock:
            self._entries.pop(schema, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


global_registry = GlobalRegistry()
