"""Viewport-scoped cache in front of the geological features lookup.

Panning or zooming the explore map produces a stream of slightly
different viewports. Querying the upstream for each of them is slow and
rate limited, so :class:`FeatureService` keeps recent responses keyed by
a padded copy of the viewport they were fetched for. A later viewport
that fits inside a live padded rectangle is answered from memory.

Request flow:
    1. Sweep expired entries, then look for an entry whose padded bounds
       contain the requested viewport. A hit returns immediately.
    2. On a miss, fetch the exact (unpadded) viewport from the upstream.
    3. On success store the response under the padded viewport and return
       it. On failure store nothing, log, and return an empty result.

Concurrent misses for overlapping viewports are not coalesced: each one
fetches and each one inserts its own entry.

Example:
    Build the service by hand (the application factory does this once):
        >>> from geoid.db.cache_store import InMemoryFeatureCacheStore
        >>> from geoid.services.feature_service import FeatureService
        >>> from geoid.services.features_client import GeologicalFeaturesClient
        >>> from geoid.utils.bounds import ViewportBounds
        >>> service = FeatureService(
        ...     provider=GeologicalFeaturesClient("http://localhost:5000"),
        ...     store=InMemoryFeatureCacheStore(ttl_seconds=300, max_entries=10),
        ... )
        >>> result = await service.get_features(ViewportBounds(0, 0, 1, 1))
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

from geoid.db import models as db_models
from geoid.services.containment import ContainmentMatcher
from geoid.services.features_client import ProviderError
from geoid.utils import bounds as geo_bounds

if TYPE_CHECKING:
    from geoid.db.cache_store import FeatureCacheStoreProtocol

log = logging.getLogger(__name__)

DEFAULT_PADDING_FRACTION = 0.2


class FeaturesProviderProtocol(Protocol):
    """Upstream lookup used on a cache miss.

    Implementations raise :class:`ProviderError` for every failure they
    can recognise.
    """

    async def fetch_features(
        self, bounds: geo_bounds.ViewportBounds
    ) -> db_models.FeaturesResult: ...


class FeatureService:
    """Fetch-and-populate orchestrator for geological features.

    The service owns its store; nothing else should mutate it.
    """

    def __init__(
        self,
        provider: FeaturesProviderProtocol,
        store: FeatureCacheStoreProtocol,
        padding_fraction: float = DEFAULT_PADDING_FRACTION,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the service.

        Args:
            provider: Upstream features lookup.
            store: Cache store owned by this service.
            padding_fraction: Fraction of height/width added to each side of
                a fetched viewport before it is stored.
            clock: Monotonic seconds source used for entry timestamps.

        Raises:
            InvalidBoundsError: if ``padding_fraction`` is negative.
        """
        if padding_fraction < 0:
            raise geo_bounds.InvalidBoundsError("padding_fraction must be >= 0")
        self.provider = provider
        self.store = store
        self.padding_fraction = float(padding_fraction)
        self._clock = clock
        self._matcher = ContainmentMatcher(store)
        self.hits = 0
        self.misses = 0
        self.failures = 0

    async def get_features(
        self,
        bounds: geo_bounds.ViewportBounds,
    ) -> db_models.FeaturesResult:
        """Return features and formations covering ``bounds``.

        Never raises for upstream problems; a failed fetch yields an empty
        result, which callers cannot tell apart from an empty region.

        Args:
            bounds: Requested viewport.

        Returns:
            FeaturesResult with the cached or freshly fetched payload.
        """
        cached = self._matcher.find(bounds, self._clock())
        if cached is not None:
            self.hits += 1
            log.debug(
                "Using cached fault data (%d features) for %s",
                len(cached.features),
                bounds,
            )
            return db_models.FeaturesResult(
                features=cached.features,
                formations=cached.formations,
            )

        self.misses += 1
        try:
            result = await self.provider.fetch_features(bounds)
        except ProviderError as exc:
            self.failures += 1
            log.warning("Error fetching geological features for %s: %s", bounds, exc)
            return db_models.FeaturesResult.empty()

        entry = db_models.CacheEntry(
            bounds=geo_bounds.pad(bounds, self.padding_fraction),
            features=tuple(result.features),
            formations=tuple(result.formations),
            timestamp=self._clock(),
        )
        self.store.insert(entry)
        return db_models.FeaturesResult(
            features=entry.features,
            formations=entry.formations,
        )

    def stats(self) -> dict[str, Any]:
        """Cache occupancy, policy and counters."""
        self.store.sweep_expired(self._clock())
        return {
            "entries": len(self.store),
            "max_entries": self.store.max_entries,
            "ttl_seconds": self.store.ttl_seconds,
            "padding_fraction": self.padding_fraction,
            "hits": self.hits,
            "misses": self.misses,
            "failures": self.failures,
            "cached_bounds": [e.bounds.to_dict() for e in self.store.entries()],
        }
