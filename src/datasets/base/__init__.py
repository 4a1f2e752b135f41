"""
Open311 Sync - Base Classes for Datasets

Abstract base classes that source implementations inherit from.

Usage:
    from src.datasets.base import BaseIngester, IngestionResult

    class Open311Ingester(BaseIngester):
        def fetch_data(self) -> list[ServiceRequest]:
            ...
"""

from src.datasets.base.ingester import BaseIngester, IngestionResult

__all__ = [
    "BaseIngester",
    "IngestionResult",
]
