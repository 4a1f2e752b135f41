"""
Open311 Sync - Time-Series Point Model
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TimeSeriesPoint:
    """A single timestamped measurement: indexed tags plus typed fields."""

    measurement: str
    tags: dict[str, str]
    fields: dict[str, Any]
    time: datetime | None = None
    precision: str = "s"

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to the point dict accepted by ``InfluxDBClient.write_points``.

        A point without a time is sent without one and stamped by the server.
        """
        point: dict[str, Any] = {
            "measurement": self.measurement,
            "tags": dict(self.tags),
            "fields": dict(self.fields),
        }
        if self.time is not None:
            point["time"] = self.time
        return point
