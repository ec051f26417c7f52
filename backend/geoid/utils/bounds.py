"""Viewport rectangle geometry in WGS84 degrees.

This module defines the ViewportBounds rectangle used throughout the
service and the pure functions the feature cache relies on: containment
tests, symmetric padding and construction from a center point. Rectangles
are axis-aligned in latitude/longitude and use closed-interval semantics,
so a rectangle touching an edge of another still counts as contained.

Example:
    Check whether a padded cache window covers a new viewport:
        >>> from geoid.utils.bounds import ViewportBounds, contains, pad
        >>> requested = ViewportBounds(0.0, 0.0, 1.0, 1.0)
        >>> cached = pad(requested, 0.2)
        >>> cached
        ViewportBounds(min_lat=-0.2, min_lng=-0.2, max_lat=1.2, max_lng=1.2)
        >>> contains(cached, ViewportBounds(0.1, 0.1, 1.1, 1.1))
        True
"""

from __future__ import annotations

import dataclasses
import math
from typing import Any


class InvalidBoundsError(ValueError):
    """Raised when a rectangle is inverted or holds non-finite values.

    Containment results over malformed rectangles would be silently wrong,
    so construction fails fast instead.
    """


def validate(
    min_lat: float,
    min_lng: float,
    max_lat: float,
    max_lng: float,
) -> None:
    """Check the rectangle invariants.

    Args:
        min_lat: Southern edge in degrees.
        min_lng: Western edge in degrees.
        max_lat: Northern edge in degrees.
        max_lng: Eastern edge in degrees.

    Raises:
        InvalidBoundsError: if any value is NaN/infinite, or if
            ``min_lat > max_lat`` or ``min_lng > max_lng``.
    """
    values = (min_lat, min_lng, max_lat, max_lng)
    if not all(math.isfinite(v) for v in values):
        raise InvalidBoundsError(f"Bounds must be finite numbers, got {values}")
    if min_lat > max_lat:
        raise InvalidBoundsError(
            f"minLat ({min_lat}) must not exceed maxLat ({max_lat})"
        )
    if min_lng > max_lng:
        raise InvalidBoundsError(
            f"minLng ({min_lng}) must not exceed maxLng ({max_lng})"
        )


@dataclasses.dataclass(frozen=True, slots=True)
class ViewportBounds:
    """Axis-aligned lat/lng rectangle.

    Attributes:
        min_lat: Southern edge in degrees.
        min_lng: Western edge in degrees.
        max_lat: Northern edge in degrees.
        max_lng: Eastern edge in degrees.
    """

    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float

    def __post_init__(self) -> None:
        for name in ("min_lat", "min_lng", "max_lat", "max_lng"):
            object.__setattr__(self, name, float(getattr(self, name)))
        validate(self.min_lat, self.min_lng, self.max_lat, self.max_lng)

    @property
    def height(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def width(self) -> float:
        return self.max_lng - self.min_lng

    @property
    def center(self) -> tuple[float, float]:
        """Return the rectangle center as ``(lat, lng)``."""
        return (
            0.5 * (self.min_lat + self.max_lat),
            0.5 * (self.min_lng + self.max_lng),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ViewportBounds:
        """Build bounds from the camelCase wire form.

        Raises:
            InvalidBoundsError: if a key is missing or a value is not numeric.
        """
        try:
            edges = [float(data[k]) for k in ("minLat", "minLng", "maxLat", "maxLng")]
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidBoundsError(f"Malformed bounds: {data!r}") from exc
        return cls(*edges)

    def to_dict(self) -> dict[str, float]:
        return {
            "minLat": self.min_lat,
            "minLng": self.min_lng,
            "maxLat": self.max_lat,
            "maxLng": self.max_lng,
        }

    def to_query_params(self) -> dict[str, str]:
        """Format edges to four decimals for upstream query strings."""
        return {key: f"{value:.4f}" for key, value in self.to_dict().items()}


def contains(outer: ViewportBounds, inner: ViewportBounds) -> bool:
    """Return True if ``inner`` lies entirely within ``outer``.

    Shared edges count as contained.
    """
    return (
        inner.min_lat >= outer.min_lat
        and inner.min_lng >= outer.min_lng
        and inner.max_lat <= outer.max_lat
        and inner.max_lng <= outer.max_lng
    )


def pad(bounds: ViewportBounds, fraction: float) -> ViewportBounds:
    """Expand ``bounds`` outward by ``fraction`` of its height and width.

    Each edge moves by ``height * fraction`` (latitude) or
    ``width * fraction`` (longitude). A zero-height or zero-width rectangle
    stays zero-sized on that axis.

    Args:
        bounds: Rectangle to expand.
        fraction: Non-negative padding fraction (0.2 adds 20% per side).

    Returns:
        New padded rectangle. ``pad(b, 0)`` equals ``b``.

    Raises:
        InvalidBoundsError: if ``fraction`` is negative or not finite.
    """
    if not math.isfinite(fraction) or fraction < 0:
        raise InvalidBoundsError(
            f"Padding fraction must be a non-negative number, got {fraction}"
        )
    d_lat = bounds.height * fraction
    d_lng = bounds.width * fraction
    return ViewportBounds(
        min_lat=bounds.min_lat - d_lat,
        min_lng=bounds.min_lng - d_lng,
        max_lat=bounds.max_lat + d_lat,
        max_lng=bounds.max_lng + d_lng,
    )


def from_center(lat: float, lng: float, radius_deg: float = 0.5) -> ViewportBounds:
    """Square window of ``radius_deg`` around a center point.

    Mirrors how the upstream features endpoint turns ``lat``/``lng``/``radius``
    queries into a bounding box.
    """
    if not math.isfinite(radius_deg) or radius_deg < 0:
        raise InvalidBoundsError(
            f"Radius must be a non-negative number, got {radius_deg}"
        )
    return ViewportBounds(
        min_lat=lat - radius_deg,
        min_lng=lng - radius_deg,
        max_lat=lat + radius_deg,
        max_lng=lng + radius_deg,
    )
