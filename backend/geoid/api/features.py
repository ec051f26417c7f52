"""Geological feature endpoints backed by the viewport cache.

The explore map calls these endpoints every time the visible region
changes. Requests are answered from the in-memory viewport cache when a
recently fetched, padded region covers them, and from the upstream
geological-features service otherwise.

Example:
    Request features for the visible map region:
        >>> response = client.get(
        ...     "/api/features",
        ...     params={"minLat": 36.0, "minLng": -121.0,
        ...             "maxLat": 37.0, "maxLng": -120.0},
        ... )
        >>> response.json()
        >>> # {"features": [{"id": ..., "featureType": "strike_slip_fault",
        >>> #                "coordinates": [...], ...}],
        >>> #  "formations": [{"name": ..., "age": ..., ...}]}

    Or for a square window around a point:
        >>> client.get("/api/features", params={"lat": 36.5, "lng": -120.5})
"""

from __future__ import annotations

from typing import Any

import fastapi

from geoid.services import feature_service, poi_service
from geoid.utils import bounds as geo_bounds

router = fastapi.APIRouter(prefix="/api/features", tags=["features"])


def _get_feature_service(request: fastapi.Request) -> feature_service.FeatureService:
    """Resolve the feature service owned by the running application.

    Args:
        request: Incoming request (injected by FastAPI).

    Returns:
        FeatureService attached to ``app.state`` by the application factory.
    """
    return request.app.state.feature_service


def _resolve_bounds(
    min_lat: float | None,
    min_lng: float | None,
    max_lat: float | None,
    max_lng: float | None,
    lat: float | None,
    lng: float | None,
    radius: float | None,
) -> geo_bounds.ViewportBounds:
    """Build the requested viewport from explicit edges or a center point.

    Raises:
        HTTPException: 400 if neither form is complete or the values
            violate the rectangle invariants.
    """
    edges = (min_lat, min_lng, max_lat, max_lng)
    try:
        if all(v is not None for v in edges):
            return geo_bounds.ViewportBounds(*edges)  # type: ignore[arg-type]
        if lat is not None and lng is not None:
            return geo_bounds.from_center(lat, lng, 0.5 if radius is None else radius)
    except geo_bounds.InvalidBoundsError as exc:
        raise fastapi.HTTPException(status_code=400, detail=str(exc)) from exc
    raise fastapi.HTTPException(
        status_code=400,
        detail="Provide viewport bounds (minLat,minLng,maxLat,maxLng) or center (lat,lng)",
    )


@router.get("")
async def get_features(
    min_lat: float | None = fastapi.Query(None, alias="minLat"),
    min_lng: float | None = fastapi.Query(None, alias="minLng"),
    max_lat: float | None = fastapi.Query(None, alias="maxLat"),
    max_lng: float | None = fastapi.Query(None, alias="maxLng"),
    lat: float | None = fastapi.Query(None, ge=-90, le=90),
    lng: float | None = fastapi.Query(None, ge=-180, le=180),
    radius: float | None = None,
    service: feature_service.FeatureService = fastapi.Depends(_get_feature_service),  # noqa: B008
) -> dict[str, list[dict[str, Any]]]:
    """Return geological features and formations for a viewport.

    Upstream failures are not surfaced: the response is then an empty
    feature and formation list.

    Args:
        min_lat: Southern edge in degrees (query ``minLat``).
        min_lng: Western edge in degrees (query ``minLng``).
        max_lat: Northern edge in degrees (query ``maxLat``).
        max_lng: Eastern edge in degrees (query ``maxLng``).
        lat: Center latitude, used when edges are not given.
        lng: Center longitude, used when edges are not given.
        radius: Half-width of the center window in degrees (default 0.5).
        service: Feature service (injected via FastAPI Depends).

    Returns:
        Dictionary with ``features`` and ``formations`` lists.

    Raises:
        HTTPException: 400 for missing or invalid bounds.
    """
    bounds = _resolve_bounds(min_lat, min_lng, max_lat, max_lng, lat, lng, radius)
    result = await service.get_features(bounds)
    return result.to_dict()


@router.get("/cache")
async def get_cache_stats(
    service: feature_service.FeatureService = fastapi.Depends(_get_feature_service),  # noqa: B008
) -> dict[str, Any]:
    """Report viewport cache occupancy, policy and hit/miss counters."""
    return service.stats()


@router.get("/types")
async def get_feature_types() -> dict[str, str]:
    """Display labels for each known feature type."""
    return dict(poi_service.FEATURE_TYPE_LABELS)
