"""Bounded, insertion-ordered store for cached feature responses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from geoid.db import models as db_models

log = logging.getLogger(__name__)


class FeatureCacheStoreProtocol(Protocol):
    """Protocol interface for the feature cache store.

    The store is append/evict only: entries are added by the orchestrator
    on a cache miss and leave through the TTL sweep or FIFO eviction.
    There is no update or delete-by-key.
    """

    ttl_seconds: float
    max_entries: int

    def sweep_expired(self, now: float) -> int: ...

    def insert(self, entry: db_models.CacheEntry) -> None: ...

    def entries(self) -> tuple[db_models.CacheEntry, ...]: ...

    def clear(self) -> None: ...

    def __len__(self) -> int: ...


class InMemoryFeatureCacheStore(FeatureCacheStoreProtocol):
    """Process-local FIFO store with a time-to-live.

    Entries are kept in insertion order, which is also recency order since
    entries are never refreshed. Contents are lost when the process exits.
    """

    def __init__(self, ttl_seconds: float = 300.0, max_entries: int = 10) -> None:
        """Initialize an empty store.

        Args:
            ttl_seconds: Age at which an entry expires.
            max_entries: Capacity; inserting beyond it evicts the oldest.

        Raises:
            ValueError: if ``ttl_seconds`` is not positive or
                ``max_entries`` is below 1.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_seconds = float(ttl_seconds)
        self.max_entries = int(max_entries)
        self._entries: list[db_models.CacheEntry] = []

    def sweep_expired(self, now: float) -> int:
        """Drop every entry whose age has reached the TTL.

        Args:
            now: Current clock reading, same clock as entry timestamps.

        Returns:
            Number of entries removed.
        """
        before = len(self._entries)
        self._entries[:] = [
            e for e in self._entries if now - e.timestamp < self.ttl_seconds
        ]
        removed = before - len(self._entries)
        if removed:
            log.debug("Swept %d expired feature cache entries", removed)
        return removed

    def insert(self, entry: db_models.CacheEntry) -> None:
        """Append ``entry``; evict the single oldest entry when over capacity.

        Eviction ignores expiry state and read history.
        """
        self._entries.append(entry)
        if len(self._entries) > self.max_entries:
            evicted = self._entries.pop(0)
            log.debug("Evicted oldest feature cache entry %s", evicted.bounds)

    def entries(self) -> tuple[db_models.CacheEntry, ...]:
        """Snapshot of entries in insertion order."""
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
