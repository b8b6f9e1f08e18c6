from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from models.coordinates import Coordinates
from models.identity import clean_key, system_id
from models.serialize import strip_nulls
from models.system import System

logger = logging.getLogger(__name__)


class Location:
    """A monitoring site. Core attributes are fixed once created; systems grow."""

    def __init__(
        self,
        location_id: str,
        provider: str,
        site_id: Any,
        site_name: Optional[str] = None,
        coordinates: Optional[Coordinates] = None,
        ismobile: Optional[bool] = None,
        owner: Optional[str] = None,
        label: Optional[str] = None,
        license: Optional[str] = None,
        averaging_interval_secs: Optional[float] = None,
        logging_interval_secs: Optional[float] = None,
        sensor_status: Optional[str] = None,
    ) -> None:
        self.location_id = location_id
        self.provider = provider
        self.site_id = site_id
        self.site_name = site_name
        self.coordinates = coordinates
        self.ismobile = ismobile
        self.owner = owner
        self.label = label
        self.license = license
        self.averaging_interval_secs = averaging_interval_secs
        self.logging_interval_secs = (
            logging_interval_secs if logging_interval_secs is not None else averaging_interval_secs
        )
        self.sensor_status = sensor_status
        self.systems: Dict[str, System] = {}

    def get_system(self, manufacturer: Any = None, model: Any = None) -> System:
        """Get or create the system for a manufacturer/model pair."""
        manufacturer = clean_key(manufacturer)
        model = clean_key(model)
        key = system_id(self.location_id, manufacturer, model)
        system = self.systems.get(key)
        if system is None:
            logger.debug("Adding system %s to location %s", key, self.location_id)
            system = System(
                system_id=key,
                location_id=self.location_id,
                manufacturer_name=manufacturer,
                model_name=model,
            )
            self.systems[key] = system
        return system

    def json(self) -> Dict[str, Any]:
        return strip_nulls(
            {
                "location_id": self.location_id,
                "site_id": self.site_id,
                "site_name": self.site_name,
                "coordinates": self.coordinates.json() if self.coordinates else None,
                "ismobile": self.ismobile,
                "systems": [system.json() for system in self.systems.values()],
            }
        )
