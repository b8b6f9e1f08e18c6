"""Run summary derived from the built graph, measurement store and run log."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from models.coordinates import BoundingBox, merge_bounds
from models.graph import EntityGraph
from models.measurement import Measurements
from services.run_log import RunLog


@dataclass
class RunSummary:
    """Counts for one normalization run."""

    source_name: Optional[str] = None
    locations: int = 0
    systems: int = 0
    sensors: int = 0
    flags: int = 0
    measures: int = 0
    errors: Dict[str, int] = field(default_factory=dict)
    from_: Optional[str] = None
    to: Optional[str] = None
    bounds: Optional[BoundingBox] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "source_name": self.source_name,
            "locations": self.locations,
            "systems": self.systems,
            "sensors": self.sensors,
            "flags": self.flags,
            "measures": self.measures,
            "errors": dict(self.errors),
            "from": self.from_,
            "to": self.to,
            "bounds": list(self.bounds) if self.bounds is not None else None,
        }


class Aggregator:
    """Pure summary component that can be unit tested in isolation."""

    def summarize(
        self,
        provider: Optional[str],
        graph: EntityGraph,
        measurements: Measurements,
        run_log: RunLog,
    ) -> RunSummary:
        return RunSummary(
            source_name=provider,
            locations=len(graph),
            systems=graph.systems_count,
            sensors=graph.sensors_count,
            flags=graph.flags_count,
            measures=len(measurements),
            errors=run_log.counts(),
            from_=measurements.from_.to_utc() if measurements.from_ else None,
            to=measurements.to.to_utc() if measurements.to else None,
            bounds=merge_bounds(graph.bounds, measurements.bounds),
        )
