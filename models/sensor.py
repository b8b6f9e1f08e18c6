from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from models.flag import Flag
from models.identity import flag_id
from models.measurand import Measurand
from models.serialize import strip_nulls

logger = logging.getLogger(__name__)


class Sensor:
    """One measured parameter on a system, owning its flags."""

    def __init__(
        self,
        sensor_id: str,
        system_id: str,
        measurand: Measurand,
        averaging_interval_secs: Optional[float] = None,
        logging_interval_secs: Optional[float] = None,
        status: Optional[str] = None,
        instance: Optional[str] = None,
        version_date: Optional[str] = None,
    ) -> None:
        self.sensor_id = sensor_id
        self.system_id = system_id
        self.measurand = measurand
        self.averaging_interval_secs = averaging_interval_secs
        self.logging_interval_secs = (
            logging_interval_secs if logging_interval_secs is not None else averaging_interval_secs
        )
        self.status = status
        self.instance = instance
        self.version_date = version_date
        self.flags: Dict[str, Flag] = {}

    def add_flag(
        self,
        flag_name: str,
        datetime_from: Optional[str] = None,
        datetime_to: Optional[str] = None,
        note: Optional[str] = None,
        key: Optional[str] = None,
    ) -> Flag:
        """Get or create the flag identified by ``key`` (derived when absent)."""
        key = key or flag_id(self.sensor_id, flag_name, datetime_from)
        flag = self.flags.get(key)
        if flag is None:
            flag = Flag(
                sensor_id=self.sensor_id,
                flag_name=flag_name,
                datetime_from=datetime_from,
                datetime_to=datetime_to,
                note=note,
                key=key,
            )
            logger.debug("Adding flag %s to sensor %s", key, self.sensor_id)
            self.flags[key] = flag
        return flag

    def json(self) -> Dict[str, Any]:
        return strip_nulls(
            {
                "sensor_id": self.sensor_id,
                "parameter": self.measurand.parameter,
                "units": self.measurand.unit,
                "averaging_interval_secs": self.averaging_interval_secs,
                "logging_interval_secs": self.logging_interval_secs,
                "status": self.status,
                "instance": self.instance,
                "version_date": self.version_date,
                "flags": [flag.json() for flag in self.flags.values()],
            }
        )
