"""Data models for geological features, formations and cache entries.

This module defines the payload types the features service passes around.
Features and formations come from the upstream geological-features
endpoint and are treated as opaque by the cache: every type keeps a fixed
set of known fields plus an ``extra`` mapping holding any keys it does not
model, so ``from_dict(d).to_dict()`` reproduces the upstream JSON.

Example:
    Parse an upstream feature and serialise it back:
        >>> from geoid.db.models import GeologicalFeature
        >>> feature = GeologicalFeature.from_dict({
        ...     "id": "usgs-123",
        ...     "name": "San Andreas",
        ...     "featureType": "strike_slip_fault",
        ...     "coordinates": [{"latitude": 36.0, "longitude": -120.5}],
        ...     "strokeWidth": 3,
        ...     "slipRate": "25 mm/yr",
        ... })
        >>> feature.extra
        mappingproxy({'slipRate': '25 mm/yr'})
        >>> feature.to_dict()["slipRate"]
        '25 mm/yr'
"""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Mapping
from typing import Any, Literal, NamedTuple

from geoid.utils.bounds import ViewportBounds

FeatureType = Literal[
    "normal_fault",
    "thrust_fault",
    "strike_slip_fault",
    "fold",
    "contact",
    "unconformity",
]
POIType = Literal[
    "formation",
    "fossil_site",
    "mineral_deposit",
    "outcrop",
    "landmark",
]

FEATURE_TYPES: tuple[str, ...] = (
    "normal_fault",
    "thrust_fault",
    "strike_slip_fault",
    "fold",
    "contact",
    "unconformity",
)
POI_TYPES: tuple[str, ...] = (
    "formation",
    "fossil_site",
    "mineral_deposit",
    "outcrop",
    "landmark",
)


class PayloadError(ValueError):
    """Raised when an upstream record is not shaped like the expected type."""


def _require_mapping(data: object, kind: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise PayloadError(f"{kind} must be a JSON object, got {type(data).__name__}")
    return data


def _split(
    data: dict[str, Any], known: tuple[str, ...]
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Partition ``data`` into known fields and everything else."""
    fields = {k: data[k] for k in known if k in data}
    extra = {k: v for k, v in data.items() if k not in known}
    return fields, extra


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def _freeze(instance: object, *names: str) -> None:
    """Replace mapping fields with read-only copies shared safely by cache hits."""
    for name in names:
        value = getattr(instance, name)
        object.__setattr__(instance, name, types.MappingProxyType(dict(value)))


@dataclasses.dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float

    @classmethod
    def from_dict(cls, data: object) -> Coordinate:
        mapping = _require_mapping(data, "Coordinate")
        try:
            return cls(
                latitude=float(mapping["latitude"]),
                longitude=float(mapping["longitude"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise PayloadError(f"Malformed coordinate: {mapping!r}") from exc

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclasses.dataclass(frozen=True, slots=True)
class GeologicalFeature:
    """A mapped fault, fold or contact line.

    Attributes:
        id: Upstream identifier.
        name: Display name (e.g. fault name).
        feature_type: One of :data:`FEATURE_TYPES`; stored verbatim.
        description: Free text.
        coordinates: Ordered polyline vertices.
        color: Display stroke color (``#RRGGBB``).
        stroke_width: Display stroke weight.
        properties: Free-form upstream attributes (age, slip sense, ...).
        extra: Top-level keys not modelled above.
    """

    id: str | None = None
    name: str | None = None
    feature_type: str | None = None
    description: str | None = None
    coordinates: tuple[Coordinate, ...] = ()
    color: str | None = None
    stroke_width: float | None = None
    properties: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    extra: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "properties", "extra")

    _KNOWN = (
        "id",
        "name",
        "featureType",
        "description",
        "coordinates",
        "color",
        "strokeWidth",
        "properties",
    )

    @classmethod
    def from_dict(cls, data: object) -> GeologicalFeature:
        """Parse an upstream feature record.

        Raises:
            PayloadError: if the record, its coordinates or its properties
                are not shaped as expected.
        """
        mapping = _require_mapping(data, "GeologicalFeature")
        fields, extra = _split(mapping, cls._KNOWN)
        coords = fields.get("coordinates") or []
        if not isinstance(coords, list):
            raise PayloadError("GeologicalFeature.coordinates must be a list")
        properties = fields.get("properties") or {}
        _require_mapping(properties, "GeologicalFeature.properties")
        return cls(
            id=fields.get("id"),
            name=fields.get("name"),
            feature_type=fields.get("featureType"),
            description=fields.get("description"),
            coordinates=tuple(Coordinate.from_dict(c) for c in coords),
            color=fields.get("color"),
            stroke_width=fields.get("strokeWidth"),
            properties=dict(properties),
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        out = _compact(
            {
                "id": self.id,
                "name": self.name,
                "featureType": self.feature_type,
                "description": self.description,
                "color": self.color,
                "strokeWidth": self.stroke_width,
            }
        )
        out["coordinates"] = [c.to_dict() for c in self.coordinates]
        out["properties"] = dict(self.properties)
        out.update(self.extra)
        return out


@dataclasses.dataclass(frozen=True, slots=True)
class FormationSummary:
    """Stratigraphic formation summary attached to a features response."""

    name: str | None = None
    age: str | None = None
    lithology: str | None = None
    environment: str | None = None
    source: str | None = None
    extra: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "extra")

    _KNOWN = ("name", "age", "lithology", "environment", "source")

    @classmethod
    def from_dict(cls, data: object) -> FormationSummary:
        mapping = _require_mapping(data, "FormationSummary")
        fields, extra = _split(mapping, cls._KNOWN)
        return cls(**fields, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        out = _compact(
            {
                "name": self.name,
                "age": self.age,
                "lithology": self.lithology,
                "environment": self.environment,
                "source": self.source,
            }
        )
        out.update(self.extra)
        return out


@dataclasses.dataclass(frozen=True, slots=True)
class GeologicalPOI:
    """Point of interest shown as a marker on the explore map."""

    id: str
    name: str
    latitude: float
    longitude: float
    type: str = "formation"
    description: str = ""
    rock_type: str | None = None
    age: str | None = None
    period: str | None = None
    color: str | None = None
    image_url: str | None = None
    source: str | None = None
    extra: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "extra")

    _KNOWN = (
        "id",
        "name",
        "description",
        "latitude",
        "longitude",
        "type",
        "rockType",
        "age",
        "period",
        "color",
        "imageUrl",
        "source",
    )

    @classmethod
    def from_dict(cls, data: object) -> GeologicalPOI:
        mapping = _require_mapping(data, "GeologicalPOI")
        fields, extra = _split(mapping, cls._KNOWN)
        try:
            return cls(
                id=str(fields["id"]),
                name=str(fields["name"]),
                latitude=float(fields["latitude"]),
                longitude=float(fields["longitude"]),
                type=str(fields.get("type") or "formation"),
                description=str(fields.get("description") or ""),
                rock_type=fields.get("rockType"),
                age=fields.get("age"),
                period=fields.get("period"),
                color=fields.get("color"),
                image_url=fields.get("imageUrl"),
                source=fields.get("source"),
                extra=extra,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise PayloadError(f"Malformed POI: {mapping!r}") from exc

    def to_dict(self) -> dict[str, Any]:
        out = _compact(
            {
                "id": self.id,
                "name": self.name,
                "description": self.description,
                "latitude": self.latitude,
                "longitude": self.longitude,
                "type": self.type,
                "rockType": self.rock_type,
                "age": self.age,
                "period": self.period,
                "color": self.color,
                "imageUrl": self.image_url,
                "source": self.source,
            }
        )
        out.update(self.extra)
        return out


@dataclasses.dataclass(frozen=True, slots=True)
class CacheEntry:
    """One cached upstream response.

    Attributes:
        bounds: Padded rectangle the entry answers for.
        features: Features returned for the unpadded request.
        formations: Formations returned for the unpadded request.
        timestamp: Insertion instant in clock seconds.
    """

    bounds: ViewportBounds
    features: tuple[GeologicalFeature, ...]
    formations: tuple[FormationSummary, ...]
    timestamp: float


class FeaturesResult(NamedTuple):
    features: tuple[GeologicalFeature, ...]
    formations: tuple[FormationSummary, ...]

    @classmethod
    def empty(cls) -> FeaturesResult:
        return cls(features=(), formations=())

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "features": [f.to_dict() for f in self.features],
            "formations": [f.to_dict() for f in self.formations],
        }
