"""Coordinate normalization to EPSG:4326 and running bounding boxes."""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pyproj import Transformer

from models.errors import InvalidCoordinatesError, LatitudeBoundsError, LongitudeBoundsError

CANONICAL_PROJECTION = "EPSG:4326"
_GEOGRAPHIC_ALIASES = {"EPSG:4326", "WGS84"}

# [min_lon, max_lat, max_lon, min_lat]
BoundingBox = List[float]


@lru_cache
def _transformer(source: str) -> Transformer:
    return Transformer.from_crs(source, CANONICAL_PROJECTION, always_xy=True)


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidCoordinatesError(value)
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinatesError(value) from exc
    if not math.isfinite(parsed):
        raise InvalidCoordinatesError(value)
    return parsed


class Coordinates:
    """A point in any pyproj-supported projection, exposed in EPSG:4326."""

    __slots__ = ("x", "y", "proj", "_projected")

    def __init__(self, x: Any, y: Any, proj: Optional[str] = None) -> None:
        self.x = _as_float(x)
        self.y = _as_float(y)
        self.proj = proj or CANONICAL_PROJECTION
        if self.proj.upper() in _GEOGRAPHIC_ALIASES:
            self._projected = (self.x, self.y)
        else:
            self._projected = _transformer(self.proj).transform(self.x, self.y)

        if not -90 <= self.latitude <= 90:
            raise LatitudeBoundsError(self.latitude)
        if not -180 <= self.longitude <= 180:
            raise LongitudeBoundsError(self.longitude)

    @property
    def latitude(self) -> float:
        return self._projected[1]

    @property
    def longitude(self) -> float:
        return self._projected[0]

    def json(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "proj": CANONICAL_PROJECTION,
        }

    def __repr__(self) -> str:
        return f"Coordinates(longitude={self.longitude}, latitude={self.latitude})"


def update_bounds(bounds: Optional[BoundingBox], coordinates: Coordinates) -> BoundingBox:
    """Return a new box widened to include ``coordinates``.

    A missing box is seeded as the degenerate box at the point.
    """
    lon, lat = coordinates.longitude, coordinates.latitude
    if bounds is None:
        return [lon, lat, lon, lat]
    min_lon, max_lat, max_lon, min_lat = bounds
    return [min(min_lon, lon), max(max_lat, lat), max(max_lon, lon), min(min_lat, lat)]


def merge_bounds(first: Optional[BoundingBox], second: Optional[BoundingBox]) -> Optional[BoundingBox]:
    """Return the smallest box covering both, or ``None`` when neither exists."""
    if first is None or second is None:
        remaining = first if second is None else second
        return list(remaining) if remaining is not None else None
    return [
        min(first[0], second[0]),
        max(first[1], second[1]),
        max(first[2], second[2]),
        min(first[3], second[3]),
    ]
