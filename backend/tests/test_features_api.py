"""API endpoint tests for the /api/features endpoints.

This module covers:
    - Viewport requests by explicit edges and by center point,
    - Cache hits across repeated and panned requests,
    - 400 responses for incomplete or inverted bounds,
    - Empty responses when the upstream fails,
    - The cache statistics and feature type label endpoints.

The feature service is always injected using dependency overrides with a
recording fake provider, so no upstream traffic is made.

See Also:
    - backend/geoid/api/features.py for API implementation,
    - backend/geoid/services/feature_service.py for cache behaviour.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi import testclient

from geoid import main
from geoid.api import features as api_features
from geoid.core import config
from geoid.db import cache_store
from geoid.services import feature_service
from geoid.utils import bounds as geo_bounds

if TYPE_CHECKING:
    from collections.abc import Iterator

    from conftest import FakeClock, FakeProvider


def _make_client(
    provider: FakeProvider, clock: FakeClock
) -> tuple[testclient.TestClient, feature_service.FeatureService]:
    service = feature_service.FeatureService(
        provider=provider,
        store=cache_store.InMemoryFeatureCacheStore(),
        clock=clock,
    )
    app = main.create_app(config.Settings())
    app.dependency_overrides[api_features._get_feature_service] = lambda: service
    return testclient.TestClient(app), service


@pytest.fixture
def client_and_service(
    provider: FakeProvider, clock: FakeClock
) -> Iterator[tuple[testclient.TestClient, feature_service.FeatureService]]:
    client, service = _make_client(provider, clock)
    with client:
        yield client, service
    client.app.dependency_overrides.clear()  # type: ignore[attr-defined]


def test_get_features_by_edges(
    client_and_service: tuple[testclient.TestClient, feature_service.FeatureService],
    provider: FakeProvider,
) -> None:
    """Test a viewport request returns the upstream payload in wire format."""
    client, _ = client_and_service
    response = client.get(
        "/api/features",
        params={"minLat": 36.0, "minLng": -121.0, "maxLat": 37.0, "maxLng": -120.0},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["features"][0]["featureType"] == "strike_slip_fault"
    assert data["features"][0]["strokeWidth"] == 3
    assert data["formations"][0]["name"] == "Franciscan Complex"
    assert provider.calls == [geo_bounds.ViewportBounds(36.0, -121.0, 37.0, -120.0)]


def test_repeat_and_panned_requests_hit_cache(
    client_and_service: tuple[testclient.TestClient, feature_service.FeatureService],
    provider: FakeProvider,
) -> None:
    client, service = client_and_service
    params = {"minLat": 36.0, "minLng": -121.0, "maxLat": 37.0, "maxLng": -120.0}
    client.get("/api/features", params=params)
    client.get("/api/features", params=params)
    client.get(
        "/api/features",
        params={"minLat": 35.9, "minLng": -121.1, "maxLat": 37.1, "maxLng": -119.9},
    )

    assert len(provider.calls) == 1
    assert service.hits == 2


def test_get_features_by_center(
    client_and_service: tuple[testclient.TestClient, feature_service.FeatureService],
    provider: FakeProvider,
) -> None:
    client, _ = client_and_service
    response = client.get("/api/features", params={"lat": 36.5, "lng": -120.5})

    assert response.status_code == 200
    assert provider.calls == [geo_bounds.ViewportBounds(36.0, -121.0, 37.0, -120.0)]


def test_get_features_by_center_with_radius(
    client_and_service: tuple[testclient.TestClient, feature_service.FeatureService],
    provider: FakeProvider,
) -> None:
    client, _ = client_and_service
    client.get("/api/features", params={"lat": 10, "lng": 20, "radius": 2})
    assert provider.calls == [geo_bounds.ViewportBounds(8.0, 18.0, 12.0, 22.0)]


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"minLat": 0, "minLng": 0, "maxLat": 1},
        {"lat": 10},
        {"minLat": 2, "minLng": 0, "maxLat": 1, "maxLng": 1},
        {"minLat": 0, "minLng": 5, "maxLat": 1, "maxLng": 1},
        {"lat": 0, "lng": 0, "radius": -1},
    ],
    ids=[
        "no-params",
        "missing-edge",
        "missing-lng",
        "inverted-lat",
        "inverted-lng",
        "negative-radius",
    ],
)
def test_get_features_bad_bounds_400(
    client_and_service: tuple[testclient.TestClient, feature_service.FeatureService],
    provider: FakeProvider,
    params: dict[str, float],
) -> None:
    """Test that invalid viewports are rejected before any upstream call."""
    client, _ = client_and_service
    response = client.get("/api/features", params=params)
    assert response.status_code == 400
    assert provider.calls == []


def test_get_features_non_numeric_422(
    client_and_service: tuple[testclient.TestClient, feature_service.FeatureService],
) -> None:
    client, _ = client_and_service
    response = client.get(
        "/api/features",
        params={"minLat": "north", "minLng": 0, "maxLat": 1, "maxLng": 1},
    )
    assert response.status_code == 422


@pytest.mark.parametrize(
    "params",
    [{"lat": 95, "lng": 0}, {"lat": 0, "lng": -200}],
    ids=["lat-range", "lng-range"],
)
def test_get_features_center_out_of_range_422(
    client_and_service: tuple[testclient.TestClient, feature_service.FeatureService],
    provider: FakeProvider,
    params: dict[str, float],
) -> None:
    """Test that a center outside WGS84 ranges never reaches the upstream."""
    client, service = client_and_service
    response = client.get("/api/features", params=params)
    assert response.status_code == 422
    assert provider.calls == []
    assert len(service.store) == 0


def test_get_features_upstream_failure_is_empty(
    failing_provider: FakeProvider, clock: FakeClock
) -> None:
    """Test that an upstream failure yields 200 with empty lists."""
    client, service = _make_client(failing_provider, clock)
    response = client.get(
        "/api/features",
        params={"minLat": 0, "minLng": 0, "maxLat": 1, "maxLng": 1},
    )

    assert response.status_code == 200
    assert response.json() == {"features": [], "formations": []}
    assert len(service.store) == 0


def test_cache_stats_endpoint(
    client_and_service: tuple[testclient.TestClient, feature_service.FeatureService],
) -> None:
    client, _ = client_and_service
    client.get(
        "/api/features",
        params={"minLat": 0, "minLng": 0, "maxLat": 1, "maxLng": 1},
    )

    response = client.get("/api/features/cache")

    assert response.status_code == 200
    stats = response.json()
    assert stats["entries"] == 1
    assert stats["max_entries"] == 10
    assert stats["ttl_seconds"] == 300.0
    assert stats["misses"] == 1
    assert stats["cached_bounds"][0]["maxLat"] == pytest.approx(1.2)


def test_feature_types_endpoint() -> None:
    client = testclient.TestClient(main.create_app(config.Settings()))
    response = client.get("/api/features/types")
    assert response.status_code == 200
    assert response.json()["normal_fault"] == "Normal Fault"
