"""Normalization of raw provider payloads into the ingest entity graph."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from models.config import ClientConfig
from models.coordinates import Coordinates
from models.errors import ERROR, ConfigurationError, MissingAttributeError, NoDataError, severity_of
from models.fields import Record, resolve, resolve_number
from models.flag import Flag
from models.graph import EntityGraph
from models.identity import clean_key, location_id, sensor_id
from models.location import Location
from models.measurand import Measurand, MeasurandTable
from models.measurement import Measurement, Measurements
from models.sensor import Sensor
from models.serialize import is_blank, truthy
from models.timestamp import Timestamp
from services.aggregator import Aggregator, RunSummary
from services.run_log import RunLog
from settings import get_settings
from sources.parsers import PARSERS
from sources.readers import READERS

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v0.1"
MATCHING_METHOD = "ingest-id"
SECTIONS = ("locations", "sensors", "measurements", "flags")


class RunStage(str, Enum):
    """Lifecycle of one ingest run."""

    idle = "idle"
    fetching = "fetching"
    processing_locations = "processing_locations"
    processing_sensors = "processing_sensors"
    processing_measurements = "processing_measurements"
    processing_flags = "processing_flags"
    done = "done"


class Normalizer:
    """Turns provider payloads into locations, systems, sensors, flags and measurements.

    Configuration is supplied up front, as keyword overrides, or later through
    :meth:`configure`. All graph mutation happens on the calling thread; only
    the fetch of named sub-sources runs concurrently.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        aggregator: Optional[Aggregator] = None,
        **overrides: Any,
    ) -> None:
        base = config or ClientConfig()
        self.config = base.merged(**overrides) if overrides else base
        self.aggregator = aggregator or Aggregator()
        self.stage = RunStage.idle
        self.graph = EntityGraph()
        self.measurements = Measurements()
        self.log = RunLog(self.config.provider)
        self.measurands = MeasurandTable(self.config.parameters)

    def configure(self, **overrides: Any) -> None:
        """Merge ``overrides`` over the current configuration."""
        self.config = self.config.merged(**overrides)
        self.measurands = MeasurandTable(self.config.parameters)
        self.log.provider = self.config.provider

    @property
    def provider(self) -> Optional[str]:
        return self.config.provider

    # ------------------------------------------------------------------
    # fetching

    def fetch(self) -> Dict[str, Any]:
        """Load the configured resources, normalize them and return the ingest document."""
        payload = self.load_resources()
        self.process(payload)
        return self.data()

    def load_resources(self) -> Dict[str, Any]:
        self.stage = RunStage.fetching
        resource = self.config.resource
        if resource is None:
            raise ConfigurationError("No resource configured to fetch.")
        if isinstance(resource, Mapping):
            return self._load_indexed(resource)
        return self._as_sections(self._read(None, resource))

    def _load_indexed(self, resources: Mapping[str, Any]) -> Dict[str, Any]:
        workers = max(1, min(get_settings().fetch_workers, len(resources)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {name: executor.submit(self._read, name, source) for name, source in resources.items()}
            parsed = {name: future.result() for name, future in futures.items()}

        ordered = sorted(parsed, key=lambda name: SECTIONS.index(name) if name in SECTIONS else len(SECTIONS))
        payload: Dict[str, Any] = {}
        for name in ordered:
            part = parsed[name]
            if isinstance(part, Mapping) and any(section in part for section in SECTIONS):
                payload.update({key: value for key, value in part.items() if key in SECTIONS})
            elif part:
                payload[name] = part
        if not payload:
            raise NoDataError(f"No data was returned from {', '.join(resources)}.")
        return payload

    def _read(self, name: Optional[str], resource: Any) -> Any:
        reader = self._method(name, self.config.reader, READERS, "reader")
        parser = self._method(name, self.config.parser, PARSERS, "parser")
        options = self._reader_options(name)
        logger.debug("Loading %s from %s", name or "resource", resource, extra={"provider": self.provider})
        return parser(reader(resource, options))

    def _reader_options(self, name: Optional[str]) -> Mapping[str, Any]:
        """Options for one read; a map keyed by sub-source names applies per source."""
        options = self.config.reader_options
        resources = self.config.resource
        if name is None or not isinstance(resources, Mapping):
            return options
        if any(key in resources and isinstance(value, Mapping) for key, value in options.items()):
            return options.get(name) or {}
        return options

    @staticmethod
    def _method(name: Optional[str], method: Any, registry: Mapping[str, Callable[..., Any]], kind: str) -> Callable[..., Any]:
        if isinstance(method, Mapping):
            if name not in method:
                raise ConfigurationError(f"No {kind} configured for {name!r}.")
            method = method[name]
        if callable(method):
            return method
        if method not in registry:
            raise ConfigurationError(f"Unknown {kind} {method!r}; available: {', '.join(registry)}.")
        return registry[method]

    @staticmethod
    def _as_sections(payload: Any) -> Dict[str, Any]:
        if not payload:
            raise NoDataError("No data was returned from the resource.")
        if isinstance(payload, Mapping):
            if all(key in SECTIONS for key in payload):
                return dict(payload)
            return {"measurements": [payload]}
        return {"measurements": list(payload)}

    # ------------------------------------------------------------------
    # processing

    def process(self, payload: Optional[Mapping[str, Any]]) -> None:
        """Normalize every present section, always in locations-first order."""
        if not payload:
            raise NoDataError("No data was returned to process.")
        if not isinstance(payload, Mapping) or not any(section in payload for section in SECTIONS):
            found = ", ".join(map(str, payload)) if isinstance(payload, Mapping) else type(payload).__name__
            raise ConfigurationError(f"Payload has none of the sections {', '.join(SECTIONS)}; found {found}.")
        if not self.provider:
            raise ConfigurationError("A provider is required before processing.")

        handlers = (
            ("locations", RunStage.processing_locations, self.process_locations),
            ("sensors", RunStage.processing_sensors, self.process_sensors),
            ("measurements", RunStage.processing_measurements, self.process_measurements),
            ("flags", RunStage.processing_flags, self.process_flags),
        )
        for section, stage, handler in handlers:
            rows = payload.get(section)
            if rows is None:
                continue
            self.stage = stage
            handler([rows] if isinstance(rows, Mapping) else list(rows))
        self.stage = RunStage.done
        logger.info(
            "Normalized payload",
            extra={"provider": self.provider, "stage": self.stage.value, "measures": len(self.measurements)},
        )

    def process_locations(self, rows: List[Record]) -> None:
        logger.info("Processing %d location(s)", len(rows), extra={"provider": self.provider})
        for row_number, row in enumerate(rows, start=1):
            self._guard("location", row_number, self.add_location, row)

    def process_sensors(self, rows: List[Record]) -> None:
        logger.info("Processing %d sensor(s)", len(rows), extra={"provider": self.provider})
        for row_number, row in enumerate(rows, start=1):
            self._guard("sensor", row_number, self.add_sensor, row)

    def process_measurements(self, rows: List[Record]) -> None:
        if not rows:
            return
        long_format = self.is_long_format(rows[0])
        logger.info(
            "Processing %d measurement row(s) in %s format",
            len(rows),
            "long" if long_format else "wide",
            extra={"provider": self.provider},
        )
        for row_number, row in enumerate(rows, start=1):
            try:
                timestamp = self.get_datetime(row)
                readings = self._readings(row, long_format)
            except Exception as exc:
                self._skip("measurement", row_number, exc)
                continue
            for parameter_key, value in readings:
                self._guard("measurement", row_number, self.add_measurement, row, parameter_key, value, timestamp)

    def process_flags(self, rows: List[Record]) -> None:
        logger.info("Processing %d flag(s)", len(rows), extra={"provider": self.provider})
        for row_number, row in enumerate(rows, start=1):
            self._guard("flag", row_number, self.add_flag, row)

    def _guard(self, kind: str, row_number: int, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception as exc:
            self._skip(kind, row_number, exc)
            return None

    def _skip(self, kind: str, row_number: int, exc: Exception) -> None:
        self.log.capture(
            exc,
            prefix=f"Skipping {kind} row {row_number}: ",
            row_number=row_number,
            stage=self.stage.value,
        )
        if self.config.strict and severity_of(exc) == ERROR:
            raise exc

    def is_long_format(self, row: Any) -> bool:
        """Decide the batch layout from its first row."""
        if self.config.long_format:
            return True
        if not isinstance(row, Mapping):
            return False
        try:
            return self.config.parameter_name_key.present_in(row) and self.config.parameter_value_key.present_in(row)
        except Exception as exc:
            self.log.warning(
                f"Could not detect long format from the first row, reading rows as wide: {exc!r}",
                exc,
                reason=type(exc).__name__,
                stage=self.stage.value,
            )
            return False

    def _readings(self, row: Record, long_format: bool) -> List[Tuple[Any, Any]]:
        if long_format:
            return [(resolve(row, self.config.parameter_name_key), resolve(row, self.config.parameter_value_key))]
        return [(key, row.get(key)) for key in self.measurands.keys()]

    # ------------------------------------------------------------------
    # entities

    def location_id(self, data: Record) -> str:
        return location_id(self.provider, resolve(data, self.config.location_id_key))

    def get_datetime(self, row: Record) -> Timestamp:
        raw = resolve(row, self.config.datetime_key)
        if is_blank(raw):
            raise MissingAttributeError(f"datetime (looking in {self.config.datetime_key})")
        return self._timestamp(raw)

    def _timestamp(self, raw: Any) -> Timestamp:
        return Timestamp(
            raw,
            format=self.config.datetime_format,
            timezone=self.config.timezone,
            location_timezone=self.config.location_timezone,
        )

    def _coordinates(self, data: Record) -> Optional[Coordinates]:
        x = resolve(data, self.config.x_geometry_key)
        y = resolve(data, self.config.y_geometry_key)
        if is_blank(x) and is_blank(y):
            return None
        return Coordinates(x, y, resolve(data, self.config.geometry_projection_key))

    def add_location(self, data: Record) -> Location:
        """Get the location for ``data``, creating it on first reference."""
        key = self.location_id(data)
        existing = self.graph.get_location(key)
        if existing is not None:
            return existing

        config = self.config
        ismobile = resolve(data, config.is_mobile_key)
        location = Location(
            location_id=key,
            provider=self.provider,
            site_id=resolve(data, config.location_id_key),
            site_name=resolve(data, config.location_label_key),
            coordinates=self._coordinates(data),
            ismobile=None if ismobile is None else truthy(ismobile),
            owner=resolve(data, config.owner_key),
            label=resolve(data, config.location_label_key),
            license=resolve(data, config.license_key),
            averaging_interval_secs=resolve_number(data, config.averaging_interval_key),
            logging_interval_secs=resolve_number(data, config.logging_interval_key),
            sensor_status=resolve(data, config.sensor_status_key),
        )
        logger.debug("Adding location %s", key, extra={"location_id": key})
        return self.graph.add_location(location)

    def add_sensor(self, data: Record, measurand: Optional[Measurand] = None) -> Sensor:
        """Get the sensor for ``data``, creating its location and system as needed.

        Averaging interval, logging interval and status fall back to the
        location's values at creation time.
        """
        config = self.config
        if measurand is None:
            measurand = self.measurands.lookup(resolve(data, config.parameter_name_key))
        location = self.add_location(data)
        instance = resolve(data, config.instance_key)
        version_date = resolve(data, config.version_date_key)
        key = sensor_id(location.location_id, measurand.parameter, instance, version_date)
        existing = self.graph.get_sensor(key)
        if existing is not None:
            return existing

        averaging = resolve_number(data, config.averaging_interval_key)
        logging_interval = resolve_number(data, config.logging_interval_key)
        status = resolve(data, config.sensor_status_key)
        system = location.get_system(
            resolve(data, config.manufacturer_key),
            resolve(data, config.model_key),
        )
        sensor = Sensor(
            sensor_id=key,
            system_id=system.system_id,
            measurand=measurand,
            averaging_interval_secs=averaging if averaging is not None else location.averaging_interval_secs,
            logging_interval_secs=(
                logging_interval if logging_interval is not None else location.logging_interval_secs
            ),
            status=status if status is not None else location.sensor_status,
            instance=None if clean_key(instance) is None else str(instance),
            version_date=None if clean_key(version_date) is None else str(version_date),
        )
        logger.debug("Adding sensor %s", key, extra={"location_id": location.location_id, "sensor_id": key})
        return self.graph.index_sensor(system.add_sensor(sensor))

    def add_measurement(self, row: Record, parameter_key: Any, value: Any, timestamp: Timestamp) -> Measurement:
        measurand = self.measurands.lookup(parameter_key)
        number = measurand.process(value)
        sensor = self.add_sensor(row, measurand)
        location = self.add_location(row)
        measurement = Measurement(
            sensor_id=sensor.sensor_id,
            timestamp=timestamp,
            value=number,
            coordinates=self._coordinates(row) if location.ismobile else None,
        )
        self.measurements.add(measurement)
        return measurement

    def add_flag(self, data: Record) -> Flag:
        config = self.config
        sensor = self.add_sensor(data)
        starts = resolve(data, config.flag_start_key)
        ends = resolve(data, config.flag_end_key)
        return sensor.add_flag(
            flag_name=resolve(data, config.flag_name_key),
            datetime_from=None if is_blank(starts) else str(self._timestamp(starts)),
            datetime_to=None if is_blank(ends) else str(self._timestamp(ends)),
            note=resolve(data, config.flag_note_key),
            key=resolve(data, config.flag_id_key),
        )

    # ------------------------------------------------------------------
    # output

    def data(self) -> Dict[str, Any]:
        """Render the ingest document; empty fields are omitted."""
        return {
            "meta": {
                "schema": SCHEMA_VERSION,
                "source": self.provider,
                "matching_method": MATCHING_METHOD,
            },
            "locations": self.graph.json(),
            "measurements": list(self.measurements.json()),
        }

    def summary(self) -> RunSummary:
        return self.aggregator.summarize(self.provider, self.graph, self.measurements, self.log)

