"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.config import ClientConfig, ParameterMapping
from models.errors import ConfigurationError


class ParameterSpec(BaseModel):
    """Canonical parameter and unit for one provider column or parameter name."""

    parameter: str
    unit: str


class TransformRequest(BaseModel):
    """Provider configuration plus an already-fetched payload."""

    model_config = ConfigDict(extra="forbid")

    provider: str = Field(..., min_length=1)
    long_format: bool = False
    strict: bool = False
    timezone: Optional[str] = None
    location_timezone: Optional[str] = None
    datetime_format: Optional[str] = None
    keys: Dict[str, str] = Field(
        default_factory=dict,
        description="Overrides for record keys, e.g. {'location_id_key': 'station'}.",
    )
    parameters: Dict[str, ParameterSpec] = Field(default_factory=dict)
    data: Dict[str, Any] = Field(
        ..., description="Payload with any of the locations, sensors, measurements and flags sections."
    )

    def to_config(self) -> ClientConfig:
        misplaced = sorted(name for name in self.keys if not name.endswith("_key"))
        if misplaced:
            raise ConfigurationError(f"Only field key settings belong under keys, got: {', '.join(misplaced)}.")
        return ClientConfig(
            provider=self.provider,
            long_format=self.long_format,
            strict=self.strict,
            timezone=self.timezone,
            location_timezone=self.location_timezone,
            datetime_format=self.datetime_format,
            parameters={
                key: ParameterMapping(parameter=spec.parameter, unit=spec.unit)
                for key, spec in self.parameters.items()
            },
            **self.keys,
        )


class RunSummaryModel(BaseModel):
    """Counts for one normalization run."""

    model_config = ConfigDict(populate_by_name=True)

    source_name: Optional[str] = None
    locations: int = Field(..., ge=0)
    systems: int = Field(..., ge=0)
    sensors: int = Field(..., ge=0)
    flags: int = Field(..., ge=0)
    measures: int = Field(..., ge=0)
    errors: Dict[str, int] = Field(default_factory=dict)
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    bounds: Optional[List[float]] = None


class RowIssue(BaseModel):
    """A row that was skipped, with the severity it was recorded under."""

    category: str
    message: str


class TransformResponse(BaseModel):
    """Ingest document, run summary and the skipped-row log."""

    document: Dict[str, Any]
    summary: RunSummaryModel
    issues: List[RowIssue] = Field(default_factory=list)
