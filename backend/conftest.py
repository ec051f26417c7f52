"""Pytest configuration and shared fakes for the backend test suite."""

from __future__ import annotations

import asyncio
import pathlib
import sys
from typing import Any

import pytest

BACKEND_ROOT = pathlib.Path(__file__).resolve().parent

if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from geoid.db import models as db_models  # noqa: E402
from geoid.services.features_client import ProviderError  # noqa: E402


class FakeClock:
    """Manually advanced clock standing in for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """Records every upstream call and replays a canned response."""

    def __init__(
        self,
        result: db_models.FeaturesResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.result = result or db_models.FeaturesResult.empty()
        self.error = error
        self.calls: list[Any] = []
        self.poi_calls: list[tuple[float, float, float]] = []
        self.deep_dive_calls: list[dict[str, Any]] = []
        self.pois: list[db_models.GeologicalPOI] = []
        self.deep_dive: dict[str, Any] | None = None

    async def fetch_features(self, bounds: Any) -> db_models.FeaturesResult:
        self.calls.append(bounds)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.result

    async def fetch_pois(
        self, lat: float, lng: float, radius_km: float
    ) -> list[db_models.GeologicalPOI]:
        self.poi_calls.append((lat, lng, radius_km))
        if self.error is not None:
            raise self.error
        return list(self.pois)

    async def fetch_fault_deep_dive(
        self, request_body: dict[str, Any]
    ) -> dict[str, Any] | None:
        self.deep_dive_calls.append(request_body)
        if self.error is not None:
            raise self.error
        return self.deep_dive


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_result() -> db_models.FeaturesResult:
    feature = db_models.GeologicalFeature.from_dict(
        {
            "id": "usgs-1",
            "name": "San Andreas fault zone",
            "featureType": "strike_slip_fault",
            "description": "Right-lateral strike-slip fault",
            "coordinates": [
                {"latitude": 36.1, "longitude": -120.6},
                {"latitude": 36.4, "longitude": -120.9},
            ],
            "properties": {"slipRate": "Greater than 5.0 mm/yr"},
            "color": "#7B1FA2",
            "strokeWidth": 3,
        }
    )
    formation = db_models.FormationSummary.from_dict(
        {
            "name": "Franciscan Complex",
            "age": "Jurassic to Cretaceous",
            "lithology": "greywacke, chert",
            "environment": "subduction zone",
            "source": "Macrostrat",
        }
    )
    return db_models.FeaturesResult(features=(feature,), formations=(formation,))


@pytest.fixture
def provider(sample_result: db_models.FeaturesResult) -> FakeProvider:
    return FakeProvider(result=sample_result)


@pytest.fixture
def failing_provider() -> FakeProvider:
    return FakeProvider(
        error=ProviderError("GET /api/geological-features returned HTTP 500")
    )


@pytest.fixture
def empty_provider() -> FakeProvider:
    return FakeProvider()
