"""
Open311 Sync - Open311 Dataset

Components for Open311 GeoReport v2 service request data.
"""

from src.datasets.open311.ingest import Open311Ingester
from src.datasets.open311.models import ServiceRequest
from src.datasets.open311.transform import ServiceRequestMapper, map_service_requests

__all__ = [
    "Open311Ingester",
    "ServiceRequest",
    "ServiceRequestMapper",
    "map_service_requests",
]
