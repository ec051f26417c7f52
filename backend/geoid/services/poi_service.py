"""Explore-map points of interest and fault background content.

Thin wrappers over the upstream ``/api/explore-pois`` and
``/api/fault-deep-dive`` endpoints, plus the display catalog (labels,
icons, colors) the map uses for POI markers and fault lines. Upstream
failures degrade to an empty list or None; they are logged, never raised.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Protocol

from geoid.db import models as db_models
from geoid.services.features_client import ProviderError

if TYPE_CHECKING:
    from collections.abc import Sequence

log = logging.getLogger(__name__)

POI_DISPLAY: dict[str, dict[str, str]] = {
    "formation": {"icon": "layers", "color": "#E07856", "label": "Rock Formation"},
    "fossil_site": {"icon": "archive", "color": "#8B4513", "label": "Fossil Site"},
    "mineral_deposit": {
        "icon": "hexagon",
        "color": "#9370DB",
        "label": "Mineral Deposit",
    },
    "outcrop": {"icon": "map-pin", "color": "#2E8B57", "label": "Outcrop"},
    "landmark": {"icon": "flag", "color": "#4169E1", "label": "Geological Landmark"},
}

FEATURE_TYPE_LABELS: dict[str, str] = {
    "normal_fault": "Normal Fault",
    "thrust_fault": "Thrust Fault",
    "strike_slip_fault": "Strike-Slip Fault",
    "fold": "Fold",
    "contact": "Geological Contact",
    "unconformity": "Unconformity",
}


def normalize_poi_type(poi_type: str | None) -> str:
    """Map unknown POI types to ``formation``."""
    return poi_type if poi_type in db_models.POI_TYPES else "formation"


def poi_type_label(poi_type: str) -> str:
    return POI_DISPLAY.get(poi_type, {}).get("label", "Point of Interest")


def poi_type_icon(poi_type: str) -> str:
    return POI_DISPLAY.get(poi_type, {}).get("icon", "map-pin")


def poi_type_color(poi_type: str) -> str:
    return POI_DISPLAY.get(poi_type, {}).get("color", "#808080")


def feature_type_label(feature_type: str) -> str:
    return FEATURE_TYPE_LABELS.get(feature_type, "Geological Feature")


class POIProviderProtocol(Protocol):
    async def fetch_pois(
        self, lat: float, lng: float, radius_km: float
    ) -> list[db_models.GeologicalPOI]: ...

    async def fetch_fault_deep_dive(
        self, request_body: dict[str, Any]
    ) -> dict[str, Any] | None: ...


class POIService:
    """Nearby POI lookup and fault deep-dive passthrough."""

    def __init__(self, provider: POIProviderProtocol) -> None:
        self.provider = provider

    async def get_nearby_pois(
        self,
        lat: float,
        lng: float,
        radius_km: float = 50.0,
    ) -> list[db_models.GeologicalPOI]:
        """Return POIs around a point with normalized types.

        Args:
            lat: Center latitude in degrees.
            lng: Center longitude in degrees.
            radius_km: Search radius in kilometres.

        Returns:
            POIs from the upstream, or an empty list if the lookup failed.
        """
        try:
            pois = await self.provider.fetch_pois(lat, lng, radius_km)
        except ProviderError as exc:
            log.warning("Server POI fetch failed near (%.4f, %.4f): %s", lat, lng, exc)
            return []
        return [
            dataclasses.replace(poi, type=normalize_poi_type(poi.type)) for poi in pois
        ]

    async def get_fault_deep_dive(
        self,
        fault_name: str,
        fault_properties: dict[str, Any],
        user_lat: float | None = None,
        user_lng: float | None = None,
        formations: Sequence[db_models.FormationSummary] | None = None,
    ) -> dict[str, Any] | None:
        """Fetch generated background content for a fault.

        Args:
            fault_name: Display name of the fault.
            fault_properties: Upstream properties of the selected feature.
            user_lat: Optional user latitude for local context.
            user_lng: Optional user longitude for local context.
            formations: Optional nearby formations for context.

        Returns:
            The content object, or None if unavailable or the request failed.
        """
        body: dict[str, Any] = {
            "faultName": fault_name,
            "faultProperties": fault_properties,
            "userLat": user_lat,
            "userLng": user_lng,
            "macrostratContext": (
                [f.to_dict() for f in formations] if formations is not None else None
            ),
        }
        try:
            return await self.provider.fetch_fault_deep_dive(body)
        except ProviderError as exc:
            log.warning("Error fetching fault deep dive for %r: %s", fault_name, exc)
            return None
