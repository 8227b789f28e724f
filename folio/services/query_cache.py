"""Keyed read cache with explicit staleness (invalidate-and-refetch)."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: Any
    stale: bool = False


class QueryCache:
    """Caches collection reads until a write marks them stale.

    Writers never patch cached values; they call :meth:`invalidate` and the
    next :meth:`fetch` reloads from the source of truth.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}

    async def fetch(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for *key*, loading it when missing or stale.

        A failing loader leaves the previous entry (and its staleness) as is.
        """
        entry = self._entries.get(key)
        if entry is not None and not entry.stale:
            return entry.value
        value = await loader()
        self._entries[key] = _Entry(value)
        logger.debug("Loaded query %r", key)
        return value

    def invalidate(self, key: Optional[str] = None) -> None:
        """Mark *key* stale, or every key when *key* is None."""
        targets = [key] if key is not None else list(self._entries)
        for k in targets:
            entry = self._entries.get(k)
            if entry is not None:
                entry.stale = True

    def is_stale(self, key: str) -> bool:
        """True when *key* was never loaded or has been invalidated."""
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def peek(self, key: str) -> Optional[Any]:
        """Cached value without loading (may be stale), or None."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def clear(self) -> None:
        self._entries.clear()
