"""Point measurements and the deduplicating store that collects them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from models.coordinates import BoundingBox, Coordinates, update_bounds
from models.serialize import strip_nulls
from models.timestamp import Timestamp

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Measurement:
    """A single normalized reading for one sensor."""

    sensor_id: str
    timestamp: Timestamp
    value: float
    coordinates: Optional[Coordinates] = None

    @property
    def key(self) -> str:
        return f"{self.sensor_id}-{self.timestamp}"

    def json(self) -> Dict[str, Any]:
        return strip_nulls(
            {
                "sensor_id": self.sensor_id,
                "timestamp": str(self.timestamp),
                "value": self.value,
                "coordinates": self.coordinates.json() if self.coordinates else None,
            }
        )


class Measurements:
    """Measurements keyed by sensor and timestamp; a repeated key overwrites."""

    def __init__(self) -> None:
        self._measurements: Dict[str, Measurement] = {}
        self.from_: Optional[Timestamp] = None
        self.to: Optional[Timestamp] = None
        self.bounds: Optional[BoundingBox] = None

    def add(self, measurement: Measurement) -> None:
        if measurement.coordinates is not None:
            self.bounds = update_bounds(self.bounds, measurement.coordinates)
        self.from_ = measurement.timestamp.lesser_of(self.from_)
        self.to = measurement.timestamp.greater_of(self.to)
        self._measurements[measurement.key] = measurement
        logger.debug("Added measurement %s (total: %d)", measurement.key, len(self._measurements))

    def __len__(self) -> int:
        return len(self._measurements)

    def __iter__(self) -> Iterator[Measurement]:
        return iter(self._measurements.values())

    def json(self) -> Iterator[Dict[str, Any]]:
        return (measurement.json() for measurement in self._measurements.values())
