"""Provider configuration consumed by the normalizer."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Callable, Dict, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, InstanceOf, field_validator

from models.fields import FieldKey, as_field
from models.timestamp import get_zone


def _coerce_field(value: Any) -> FieldKey:
    try:
        return as_field(value)
    except TypeError as exc:
        raise ValueError(str(exc)) from exc


FieldKeyType = Annotated[InstanceOf[FieldKey], BeforeValidator(_coerce_field)]
Method = Union[str, Callable[..., Any]]
ResourceSpec = Union[str, Path, Dict[str, Any]]


class ParameterMapping(BaseModel):
    """Canonical parameter and unit for one provider parameter key."""

    model_config = ConfigDict(frozen=True)

    parameter: str
    unit: str
    transform: Optional[Callable[[Any], Any]] = None


class ClientConfig(BaseModel):
    """Everything needed to interpret one provider's payloads.

    Every ``*_key`` accepts either a column name or a callable receiving the
    whole raw record.
    """

    model_config = ConfigDict(
        extra="forbid",
        arbitrary_types_allowed=True,
        validate_default=True,
        protected_namespaces=(),
    )

    provider: Optional[str] = None
    resource: Optional[ResourceSpec] = None
    reader: Union[Method, Dict[str, Method]] = "api"
    parser: Union[Method, Dict[str, Method]] = "json"
    reader_options: Dict[str, Any] = Field(default_factory=dict)

    long_format: bool = False
    strict: bool = False
    timezone: Optional[str] = None
    location_timezone: Optional[str] = None
    datetime_format: Optional[str] = None

    parameters: Dict[str, ParameterMapping] = Field(default_factory=dict)

    location_id_key: FieldKeyType = "location"
    location_label_key: FieldKeyType = "label"
    parameter_name_key: FieldKeyType = "parameter"
    parameter_value_key: FieldKeyType = "value"
    x_geometry_key: FieldKeyType = "x"
    y_geometry_key: FieldKeyType = "y"
    geometry_projection_key: FieldKeyType = "projection"
    manufacturer_key: FieldKeyType = "manufacturer_name"
    model_key: FieldKeyType = "model_name"
    owner_key: FieldKeyType = "owner_name"
    datetime_key: FieldKeyType = "datetime"
    license_key: FieldKeyType = "license"
    is_mobile_key: FieldKeyType = "is_mobile"
    logging_interval_key: FieldKeyType = "logging_interval_seconds"
    averaging_interval_key: FieldKeyType = "averaging_interval_seconds"
    sensor_status_key: FieldKeyType = "status"
    instance_key: FieldKeyType = "instance"
    version_date_key: FieldKeyType = "version_date"
    flag_id_key: FieldKeyType = "flag_id"
    flag_name_key: FieldKeyType = "flag"
    flag_start_key: FieldKeyType = "starts"
    flag_end_key: FieldKeyType = "ends"
    flag_note_key: FieldKeyType = "note"

    @field_validator("timezone", "location_timezone")
    @classmethod
    def _known_zone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            get_zone(value)
        return value

    def merged(self, **overrides: Any) -> "ClientConfig":
        """Return a validated copy with ``overrides`` applied over current values."""
        return type(self)(**{**dict(self), **overrides})
