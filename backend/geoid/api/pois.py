"""Explore-map POI and fault deep-dive endpoints.

Example:
    List POIs within 25 km of a point:
        >>> response = client.get(
        ...     "/api/pois", params={"lat": 36.5, "lng": -120.5, "radius": 25}
        ... )
        >>> response.json()[0]["display"]
        >>> # {"label": "Rock Formation", "icon": "layers", "color": "#E07856"}

    Ask for background content about a fault:
        >>> client.post(
        ...     "/api/fault-deep-dive",
        ...     json={"faultName": "San Andreas", "faultProperties": {}},
        ... ).json()
        >>> # {"content": {"whatHappened": ..., ...}} or {"content": null}
"""

from __future__ import annotations

from typing import Any

import fastapi
import pydantic

from geoid.db import models as db_models
from geoid.services import poi_service

router = fastapi.APIRouter(prefix="/api", tags=["pois"])


class FaultDeepDiveRequest(pydantic.BaseModel):
    fault_name: str = pydantic.Field(alias="faultName", min_length=1)
    fault_properties: dict[str, Any] = pydantic.Field(
        default_factory=dict, alias="faultProperties"
    )
    user_lat: float | None = pydantic.Field(default=None, alias="userLat", ge=-90, le=90)
    user_lng: float | None = pydantic.Field(
        default=None, alias="userLng", ge=-180, le=180
    )
    macrostrat_context: list[dict[str, Any]] | None = pydantic.Field(
        default=None, alias="macrostratContext"
    )


def _get_poi_service(request: fastapi.Request) -> poi_service.POIService:
    """Resolve the POI service owned by the running application."""
    return request.app.state.poi_service


def _poi_to_response(poi: db_models.GeologicalPOI) -> dict[str, Any]:
    data = poi.to_dict()
    data["display"] = {
        "label": poi_service.poi_type_label(poi.type),
        "icon": poi_service.poi_type_icon(poi.type),
        "color": poi.color or poi_service.poi_type_color(poi.type),
    }
    return data


@router.get("/pois")
async def list_nearby_pois(
    lat: float = fastapi.Query(..., ge=-90, le=90),
    lng: float = fastapi.Query(..., ge=-180, le=180),
    radius: float = fastapi.Query(50.0, gt=0),
    service: poi_service.POIService = fastapi.Depends(_get_poi_service),  # noqa: B008
) -> list[dict[str, Any]]:
    """List geological points of interest around a location.

    Args:
        lat: Center latitude in degrees.
        lng: Center longitude in degrees.
        radius: Search radius in kilometres.
        service: POI service (injected via FastAPI Depends).

    Returns:
        POI dictionaries with a ``display`` block for marker rendering.
        Empty when the upstream lookup fails.
    """
    pois = await service.get_nearby_pois(lat, lng, radius)
    return [_poi_to_response(poi) for poi in pois]


@router.get("/pois/types")
async def list_poi_types() -> dict[str, dict[str, str]]:
    """Marker label, icon and color for each POI type."""
    return {k: dict(v) for k, v in poi_service.POI_DISPLAY.items()}


@router.post("/fault-deep-dive")
async def fault_deep_dive(
    body: FaultDeepDiveRequest,
    service: poi_service.POIService = fastapi.Depends(_get_poi_service),  # noqa: B008
) -> dict[str, dict[str, Any] | None]:
    """Return generated background content for a selected fault.

    Args:
        body: Fault name, its properties and optional user context.
        service: POI service (injected via FastAPI Depends).

    Returns:
        ``{"content": {...}}``, or ``{"content": None}`` when unavailable.
    """
    formations = (
        [db_models.FormationSummary.from_dict(f) for f in body.macrostrat_context]
        if body.macrostrat_context is not None
        else None
    )
    content = await service.get_fault_deep_dive(
        fault_name=body.fault_name,
        fault_properties=body.fault_properties,
        user_lat=body.user_lat,
        user_lng=body.user_lng,
        formations=formations,
    )
    return {"content": content}
