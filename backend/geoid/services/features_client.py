"""HTTP client for the upstream geological data service.

The upstream service aggregates fault lines (USGS Quaternary faults and
state surveys), stratigraphic formations and explore-map POIs. This module
wraps its three endpoints with an ``httpx.AsyncClient`` and turns every
transport problem, non-2xx status or malformed body into a single
:class:`ProviderError`, so callers only have one failure to handle.

Example:
    Fetch features for a viewport:
        >>> from geoid.services.features_client import GeologicalFeaturesClient
        >>> from geoid.utils.bounds import ViewportBounds
        >>> client = GeologicalFeaturesClient("http://localhost:5000")
        >>> result = await client.fetch_features(
        ...     ViewportBounds(36.0, -121.0, 37.0, -120.0)
        ... )
        >>> # GET http://localhost:5000/api/geological-features
        >>> #     ?minLat=36.0000&minLng=-121.0000&maxLat=37.0000&maxLng=-120.0000
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from geoid.db import models as db_models

if TYPE_CHECKING:
    from geoid.utils.bounds import ViewportBounds

log = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised when the upstream service cannot produce a usable response.

    Covers connection errors and timeouts, non-2xx statuses, bodies that
    are not JSON objects and records that do not parse.
    """


def _records(data: dict[str, Any], key: str) -> list[Any]:
    """Return ``data[key]`` as a list; absent or null means empty."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ProviderError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _describe_sources(sources: object) -> str:
    if not isinstance(sources, dict):
        return "none"
    parts = [
        f"{name}: {count}"
        for name, count in sources.items()
        if name != "total" and count
    ]
    return ", ".join(parts) or "none"


class GeologicalFeaturesClient:
    """Async client for the upstream geological data endpoints."""

    FEATURES_PATH = "/api/geological-features"
    POIS_PATH = "/api/explore-pois"
    FAULT_DEEP_DIVE_PATH = "/api/fault-deep-dive"

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Upstream service root, e.g. ``http://localhost:5000``.
            timeout: Per-request timeout in seconds.
            client: Optional preconfigured ``httpx.AsyncClient``; its own
                ``base_url`` is used when given.
        """
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request_json(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"{method} {path} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{method} {path} failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"{method} {path} returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise ProviderError(
                f"{method} {path} returned {type(data).__name__}, expected object"
            )
        return data

    async def fetch_features(self, bounds: ViewportBounds) -> db_models.FeaturesResult:
        """Fetch features and formations for the exact ``bounds``.

        Missing ``features``/``formations`` keys yield empty sequences.

        Raises:
            ProviderError: on any transport, status or payload problem.
        """
        data = await self._request_json(
            "GET",
            self.FEATURES_PATH,
            params=bounds.to_query_params(),
        )
        try:
            features = tuple(
                db_models.GeologicalFeature.from_dict(item)
                for item in _records(data, "features")
            )
            formations = tuple(
                db_models.FormationSummary.from_dict(item)
                for item in _records(data, "formations")
            )
        except db_models.PayloadError as exc:
            raise ProviderError(f"Malformed features payload: {exc}") from exc

        log.info(
            "Fetched %d fault features (%s), %d formations",
            len(features),
            _describe_sources(data.get("sources")),
            len(formations),
        )
        return db_models.FeaturesResult(features=features, formations=formations)

    async def fetch_pois(
        self,
        lat: float,
        lng: float,
        radius_km: float,
    ) -> list[db_models.GeologicalPOI]:
        """Fetch explore-map POIs around a point.

        Raises:
            ProviderError: on any transport, status or payload problem.
        """
        data = await self._request_json(
            "GET",
            self.POIS_PATH,
            params={
                "lat": f"{lat:.4f}",
                "lng": f"{lng:.4f}",
                "radius": f"{radius_km:g}",
            },
        )
        try:
            pois = [db_models.GeologicalPOI.from_dict(p) for p in _records(data, "pois")]
        except db_models.PayloadError as exc:
            raise ProviderError(f"Malformed POI payload: {exc}") from exc
        if pois:
            log.info(
                "Loaded %d POIs from %s",
                len(pois),
                _describe_sources(data.get("sources")),
            )
        return pois

    async def fetch_fault_deep_dive(
        self,
        request_body: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Request generated background content for a fault.

        Returns:
            The ``content`` object, or None when the upstream has none.

        Raises:
            ProviderError: on any transport, status or payload problem.
        """
        data = await self._request_json(
            "POST",
            self.FAULT_DEEP_DIVE_PATH,
            json=request_body,
        )
        content = data.get("content")
        if content is not None and not isinstance(content, dict):
            raise ProviderError("'content' must be an object")
        return content
