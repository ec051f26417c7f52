"""FastAPI application entrypoint and configuration.

This module provides the application factory. It configures logging,
builds the upstream HTTP client, the viewport cache store and the
services that use them, and attaches those services to ``app.state`` so
each application instance owns exactly one cache.

Example:
    The application can be run with uvicorn:
        $ uvicorn geoid.main:app --reload

    Or built with explicit settings:
        >>> from geoid.core.config import Settings
        >>> from geoid.main import create_app
        >>> app = create_app(Settings(features_api_base_url="http://upstream:5000"))
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import fastapi
from fastapi.middleware import cors

from geoid.api import features, pois
from geoid.core import config, logging_setup
from geoid.db import cache_store
from geoid.services import feature_service, features_client, poi_service

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


def create_app(settings: config.Settings | None = None) -> fastapi.FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings; defaults to :func:`config.get_settings`.

    Returns:
        Configured FastAPI application instance ready for ASGI server.
    """
    settings = settings or config.get_settings()
    logging_setup.setup_logging(settings.log_level, settings.log_json)

    client = features_client.GeologicalFeaturesClient(
        settings.features_base_url,
        timeout=settings.request_timeout_seconds,
    )
    store = cache_store.InMemoryFeatureCacheStore(
        ttl_seconds=settings.cache_ttl_seconds,
        max_entries=settings.max_cache_entries,
    )

    @contextlib.asynccontextmanager
    async def lifespan(_app: fastapi.FastAPI) -> AsyncIterator[None]:
        yield
        await client.aclose()

    app = fastapi.FastAPI(title="GeoID Features", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.feature_service = feature_service.FeatureService(
        provider=client,
        store=store,
        padding_fraction=settings.cache_padding_fraction,
    )
    app.state.poi_service = poi_service.POIService(provider=client)

    app.include_router(features.router)
    app.include_router(pois.router)

    app.add_middleware(
        cors.CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:  # type: ignore[misc]
        """Health check endpoint for monitoring and load balancers.

        Returns:
            Dictionary with status "ok" if the service is running.
        """
        return {"status": "ok"}

    return app


app = create_app()
