from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from models.sensor import Sensor
from models.serialize import strip_nulls

logger = logging.getLogger(__name__)

DEFAULT_NAME = "default"


class System:
    """An instrument installed at a location; owns its sensors."""

    def __init__(
        self,
        system_id: str,
        location_id: str,
        manufacturer_name: Optional[str] = None,
        model_name: Optional[str] = None,
    ) -> None:
        self.system_id = system_id
        self.location_id = location_id
        self.manufacturer_name = manufacturer_name or DEFAULT_NAME
        self.model_name = model_name or DEFAULT_NAME
        self.sensors: Dict[str, Sensor] = {}

    def add_sensor(self, sensor: Sensor) -> Sensor:
        """Insert ``sensor`` unless one with the same id exists; return the stored one."""
        existing = self.sensors.get(sensor.sensor_id)
        if existing is not None:
            return existing
        logger.debug("Adding sensor %s to system %s", sensor.sensor_id, self.system_id)
        self.sensors[sensor.sensor_id] = sensor
        return sensor

    def json(self) -> Dict[str, Any]:
        return strip_nulls(
            {
                "system_id": self.system_id,
                "manufacturer_name": self.manufacturer_name,
                "model_name": self.model_name,
                "sensors": [sensor.json() for sensor in self.sensors.values()],
            }
        )
