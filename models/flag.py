from __future__ import annotations

from typing import Any, Dict, Optional

from models.identity import flag_id
from models.serialize import strip_nulls


class Flag:
    """A named status interval attached to one sensor."""

    def __init__(
        self,
        sensor_id: str,
        flag_name: str,
        datetime_from: Optional[str] = None,
        datetime_to: Optional[str] = None,
        note: Optional[str] = None,
        key: Optional[str] = None,
    ) -> None:
        self.sensor_id = sensor_id
        self.flag_name = flag_name
        self.datetime_from = datetime_from
        self.datetime_to = datetime_to
        self.note = note
        self.flag_id = key or flag_id(sensor_id, flag_name, datetime_from)

    def json(self) -> Dict[str, Any]:
        return strip_nulls(
            {
                "flag_id": self.flag_id,
                "datetime_from": self.datetime_from,
                "datetime_to": self.datetime_to,
                "flag_name": self.flag_name,
                "note": self.note,
            }
        )
