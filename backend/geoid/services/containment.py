"""Containment lookup over the feature cache store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from geoid.utils import bounds as geo_bounds

if TYPE_CHECKING:
    from geoid.db import models as db_models
    from geoid.db.cache_store import FeatureCacheStoreProtocol


class ContainmentMatcher:
    """Finds a live cache entry whose padded bounds cover a viewport.

    The scan is linear over a small, capped store and walks entries in
    insertion order; the first covering entry wins.
    """

    def __init__(self, store: FeatureCacheStoreProtocol) -> None:
        self.store = store

    def find(
        self,
        bounds: geo_bounds.ViewportBounds,
        now: float,
    ) -> db_models.CacheEntry | None:
        """Return the first live entry containing ``bounds``.

        Expired entries are swept from the store before the scan.

        Args:
            bounds: Requested (unpadded) viewport.
            now: Current clock reading.

        Returns:
            The matching entry, or None on a cache miss.
        """
        self.store.sweep_expired(now)
        for entry in self.store.entries():
            if geo_bounds.contains(entry.bounds, bounds):
                return entry
        return None
