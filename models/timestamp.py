"""Timezone-aware timestamps parsed from provider values."""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone as dt_timezone, tzinfo
from functools import total_ordering
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.errors import InvalidTimestampError

TimestampInput = Union[str, int, float, datetime, "Timestamp"]

_DIRECTIVE = re.compile(r"%.")


def _format_has_offset(fmt: str) -> bool:
    if "%z" in fmt or "%Z" in fmt:
        return True
    return "Z" in _DIRECTIVE.sub("", fmt)


def get_zone(name: str) -> tzinfo:
    """Look up an IANA zone, raising ``InvalidTimestampError`` for unknown names."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimestampError(f"Unknown timezone {name!r}.") from exc


def _render(value: datetime) -> str:
    if value.microsecond:
        return value.isoformat()
    return value.isoformat(timespec="seconds")


@total_ordering
class Timestamp:
    """An immutable instant plus the zone it should be rendered in.

    ``timezone`` is the zone used to interpret input that carries no offset.
    ``location_timezone`` is the zone ``str()`` renders in; it defaults to
    ``timezone``, then to the offset carried by the input, then to UTC.
    """

    __slots__ = ("_value", "_render_zone", "format", "timezone", "location_timezone")

    def __init__(
        self,
        value: TimestampInput,
        format: Optional[str] = None,
        timezone: Optional[str] = None,
        location_timezone: Optional[str] = None,
    ) -> None:
        if isinstance(value, Timestamp):
            self._value = value._value
            self.format = value.format
            self.timezone = value.timezone
            self.location_timezone = location_timezone or value.location_timezone
            self._render_zone = get_zone(location_timezone) if location_timezone else value._render_zone
            return

        if format and timezone and _format_has_offset(format):
            raise InvalidTimestampError(
                f"Format {format!r} carries its own offset and cannot be combined with timezone {timezone!r}."
            )
        if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
            raise InvalidTimestampError("Timestamp input is required.")

        self.format = format
        self.timezone = timezone
        self.location_timezone = location_timezone or timezone
        zone = get_zone(timezone) if timezone else None
        render_zone = get_zone(self.location_timezone) if self.location_timezone else None

        if isinstance(value, (int, float)):
            parsed = self._from_epoch(value)
            render_zone = render_zone or dt_timezone.utc
        elif isinstance(value, datetime):
            if value.tzinfo is None:
                if zone is None:
                    raise InvalidTimestampError("Naive datetime input requires a timezone.")
                value = value.replace(tzinfo=zone)
            parsed = value
        elif isinstance(value, str):
            parsed = self._from_string(value.strip(), format, zone)
        else:
            raise InvalidTimestampError(f"Unsupported timestamp input of type {type(value).__name__}.")

        self._value = parsed
        self._render_zone = render_zone or parsed.tzinfo

    @staticmethod
    def _from_epoch(value: Union[int, float]) -> datetime:
        if not math.isfinite(value):
            raise InvalidTimestampError(f"Invalid epoch value {value!r}.")
        try:
            return datetime.fromtimestamp(value, tz=dt_timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidTimestampError(f"Invalid epoch value {value!r}.") from exc

    @staticmethod
    def _from_string(value: str, fmt: Optional[str], zone: Optional[tzinfo]) -> datetime:
        try:
            if fmt is None:
                candidate = value[:-1] + "+00:00" if value[-1] in "Zz" else value
                parsed = datetime.fromisoformat(candidate)
            else:
                parsed = datetime.strptime(value, fmt)
        except ValueError as exc:
            raise InvalidTimestampError(
                f"Could not parse {value!r} with format {fmt or 'ISO-8601'!r}."
            ) from exc

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=zone or dt_timezone.utc)
        return parsed

    def to_datetime(self) -> datetime:
        return self._value.astimezone(self._render_zone)

    def is_greater_than(self, other: "Timestamp") -> bool:
        return self._value > other._value

    def is_less_than(self, other: "Timestamp") -> bool:
        return self._value < other._value

    def greater_of(self, other: Optional["Timestamp"]) -> "Timestamp":
        if other is None:
            return self
        return self if self._value >= other._value else other

    def lesser_of(self, other: Optional["Timestamp"]) -> "Timestamp":
        if other is None:
            return self
        return self if self._value <= other._value else other

    def to_utc(self) -> str:
        rendered = _render(self._value.astimezone(dt_timezone.utc))
        return rendered[: -len("+00:00")] + "Z"

    def to_local(self) -> str:
        return _render(self._value.astimezone())

    def __str__(self) -> str:
        return _render(self.to_datetime())

    def __repr__(self) -> str:
        return f"Timestamp({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other: "Timestamp") -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._value < other._value

    def __hash__(self) -> int:
        return hash(self._value)
