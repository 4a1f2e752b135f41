"""
Open311 Sync - Open311 Record Mapper

Maps service requests onto time-series points, one point per request.

Tags (indexed):
    service_request_id, service_code, service_name, agency_responsible, status
Fields:
    status_notes, description, updated, address, lat, long
Time:
    requested_datetime parsed as RFC3339, second precision

Values are copied verbatim. A request whose requested_datetime cannot be
parsed still produces a point; it carries no time and the database stamps it
on arrival.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from src.datasets.open311.models import ServiceRequest
from src.shared.errors import TimestampParseError
from src.shared.temporal import parse_rfc3339
from src.sinks.models import TimeSeriesPoint

logger = logging.getLogger(__name__)

PRECISION = "s"


class ServiceRequestMapper:
    """Builds TimeSeriesPoints for a single measurement."""

    def __init__(self, measurement: str):
        self.measurement = measurement
        self.invalid_timestamps = 0

    def map_request(self, request: ServiceRequest) -> TimeSeriesPoint:
        """Map one service request onto one point."""
        try:
            requested_time = parse_rfc3339(request.requested_datetime)
        except TimestampParseError as e:
            logger.warning(
                f"Unparseable requested_datetime for request {request.service_request_id}: {e}",
                extra={"service_request_id": request.service_request_id},
            )
            self.invalid_timestamps += 1
            requested_time = None

        return TimeSeriesPoint(
            measurement=self.measurement,
            tags={
                "service_request_id": request.service_request_id,
                "service_code": request.service_code,
                "service_name": request.service_name,
                "agency_responsible": request.agency_responsible,
                "status": request.status,
            },
            fields={
                "status_notes": request.status_notes,
                "description": request.description,
                "updated": request.updated_datetime,
                "address": request.address,
                "lat": request.lat,
                "long": request.long,
            },
            time=requested_time,
            precision=PRECISION,
        )

    def map_requests(self, requests: Sequence[ServiceRequest]) -> list[TimeSeriesPoint]:
        """Map requests in order; the output is index-aligned with the input."""
        self.invalid_timestamps = 0
        points = [self.map_request(request) for request in requests]

        if self.invalid_timestamps:
            logger.warning(
                f"{self.invalid_timestamps} of {len(points)} points have no timestamp",
                extra={"invalid_timestamps": self.invalid_timestamps},
            )
        logger.debug(f"Mapped {len(points)} service requests to points")
        return points


def map_service_requests(
    requests: Sequence[ServiceRequest], measurement: str
) -> list[TimeSeriesPoint]:
    """Convenience function for mapping a batch of service requests."""
    return ServiceRequestMapper(measurement).map_requests(requests)
