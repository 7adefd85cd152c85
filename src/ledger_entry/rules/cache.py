"""In-memory repository → loaded rules cache."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from ledger_entry.rules.types import LoadedRules

logger = logging.getLogger(__name__)


class RuleCache:
    """Per-repository cache of merged rules and account catalogs.

    Owned by the caller and passed by reference to the loader, the
    learner and any command that writes rule files. Concurrent misses
    for the same repository share a single load. A load that overlaps an
    invalidation is returned to its caller but never cached.
    """

    def __init__(self) -> None:
        self._entries: dict[str, LoadedRules] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._generations: dict[str, int] = {}

    def get(self, repository_id: str) -> LoadedRules | None:
        """Return the cached rules or None."""
        return self._entries.get(repository_id)

    def put(self, repository_id: str, loaded: LoadedRules) -> None:
        self._entries[repository_id] = loaded

    def invalidate(self, repository_id: str) -> bool:
        """Drop the entry for a repository. Returns True if one was cached."""
        self._generations[repository_id] = self._generations.get(repository_id, 0) + 1
        return self._entries.pop(repository_id, None) is not None

    def clear(self) -> None:
        for repository_id in self._generations:
            self._generations[repository_id] += 1
        self._entries.clear()

    async def get_or_load(
        self,
        repository_id: str,
        loader: Callable[[], Awaitable[LoadedRules]],
    ) -> LoadedRules:
        """Return the cached entry, calling ``loader`` once on a miss."""
        cached = self._entries.get(repository_id)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(repository_id, asyncio.Lock())
        async with lock:
            cached = self._entries.get(repository_id)
            if cached is not None:
                return cached
            generation = self._generations.setdefault(repository_id, 0)
            loaded = await loader()
            if self._generations[repository_id] == generation:
                self._entries[repository_id] = loaded
            else:
                logger.debug("Rules for %s invalidated during load, not caching", repository_id)
            return loaded

    def __contains__(self, repository_id: object) -> bool:
        return repository_id in self._entries

    @property
    def size(self) -> int:
        """Number of cached repositories."""
        return len(self._entries)
