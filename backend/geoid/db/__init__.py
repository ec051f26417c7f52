"""Payload models and the viewport cache store.

``models`` holds the feature, formation, POI and cache entry types;
``cache_store`` holds the bounded in-memory store the feature service
owns.

Example:
    Create a store for a feature service:
        >>> from geoid.db.cache_store import InMemoryFeatureCacheStore
        >>> store = InMemoryFeatureCacheStore(ttl_seconds=300, max_entries=10)
"""
