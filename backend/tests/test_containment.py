"""Unit tests for the containment matcher.

Key coverage:
    - Expired entries are purged before the scan and never returned.
    - The first containing entry in insertion order wins.
    - A query that no entry covers is a miss (None), not an error.

See Also:
    - backend/geoid/services/containment.py for the implementation.
"""

from __future__ import annotations

from geoid.db import cache_store
from geoid.db import models as db_models
from geoid.services import containment
from geoid.utils import bounds as geo_bounds


def _entry(
    bounds: tuple[float, float, float, float], timestamp: float = 0.0
) -> db_models.CacheEntry:
    return db_models.CacheEntry(
        bounds=geo_bounds.ViewportBounds(*bounds),
        features=(),
        formations=(),
        timestamp=timestamp,
    )


def test_find_returns_containing_entry() -> None:
    store = cache_store.InMemoryFeatureCacheStore()
    entry = _entry((-0.2, -0.2, 1.2, 1.2))
    store.insert(entry)
    matcher = containment.ContainmentMatcher(store)
    assert matcher.find(geo_bounds.ViewportBounds(0.1, 0.1, 1.1, 1.1), now=1.0) is entry


def test_find_miss_returns_none() -> None:
    store = cache_store.InMemoryFeatureCacheStore()
    store.insert(_entry((0, 0, 1, 1)))
    matcher = containment.ContainmentMatcher(store)
    assert matcher.find(geo_bounds.ViewportBounds(0.5, 0.5, 1.5, 1.5), now=1.0) is None


def test_find_empty_store() -> None:
    matcher = containment.ContainmentMatcher(cache_store.InMemoryFeatureCacheStore())
    assert matcher.find(geo_bounds.ViewportBounds(0, 0, 1, 1), now=0.0) is None


def test_first_match_in_insertion_order_wins() -> None:
    """Test that overlapping coverage resolves to the earliest insertion."""
    store = cache_store.InMemoryFeatureCacheStore()
    loose = _entry((-10, -10, 10, 10))
    tight = _entry((-1, -1, 1, 1))
    store.insert(loose)
    store.insert(tight)
    matcher = containment.ContainmentMatcher(store)
    assert matcher.find(geo_bounds.ViewportBounds(0, 0, 0.5, 0.5), now=1.0) is loose


def test_expired_entry_not_returned_and_purged() -> None:
    store = cache_store.InMemoryFeatureCacheStore(ttl_seconds=300)
    store.insert(_entry((-1, -1, 2, 2), timestamp=0.0))
    matcher = containment.ContainmentMatcher(store)
    query = geo_bounds.ViewportBounds(0, 0, 1, 1)

    assert matcher.find(query, now=299.0) is not None
    assert matcher.find(query, now=300.0) is None
    assert len(store) == 0


def test_expired_match_falls_through_to_live_one() -> None:
    store = cache_store.InMemoryFeatureCacheStore(ttl_seconds=300)
    stale = _entry((-5, -5, 5, 5), timestamp=0.0)
    live = _entry((-2, -2, 2, 2), timestamp=250.0)
    store.insert(stale)
    store.insert(live)
    matcher = containment.ContainmentMatcher(store)
    assert matcher.find(geo_bounds.ViewportBounds(0, 0, 1, 1), now=320.0) is live
    assert store.entries() == (live,)
