"""Keyed container for the Location -> System -> Sensor -> Flag hierarchy."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from models.coordinates import BoundingBox, update_bounds
from models.location import Location
from models.sensor import Sensor


class EntityGraph:
    """Owns every location of a run plus an id index of their sensors.

    Entities only ever point downwards; the sensor index is a lookup by id so
    callers can find a sensor without walking every system.
    """

    def __init__(self) -> None:
        self._locations: Dict[str, Location] = {}
        self._sensors: Dict[str, Sensor] = {}
        self.bounds: Optional[BoundingBox] = None

    def add_location(self, location: Location) -> Location:
        existing = self._locations.get(location.location_id)
        if existing is not None:
            return existing
        if location.coordinates is not None:
            self.bounds = update_bounds(self.bounds, location.coordinates)
        self._locations[location.location_id] = location
        return location

    def get_location(self, location_id: str) -> Optional[Location]:
        return self._locations.get(location_id)

    def index_sensor(self, sensor: Sensor) -> Sensor:
        return self._sensors.setdefault(sensor.sensor_id, sensor)

    def get_sensor(self, sensor_id: str) -> Optional[Sensor]:
        return self._sensors.get(sensor_id)

    def __len__(self) -> int:
        return len(self._locations)

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locations.values())

    @property
    def systems_count(self) -> int:
        return sum(len(location.systems) for location in self)

    @property
    def sensors_count(self) -> int:
        return sum(len(system.sensors) for location in self for system in location.systems.values())

    @property
    def flags_count(self) -> int:
        return sum(len(sensor.flags) for sensor in self._sensors.values())

    def json(self) -> List[Dict[str, Any]]:
        return [location.json() for location in self]
