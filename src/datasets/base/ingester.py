"""
Open311 Sync - Base Ingester

Abstract base class for source ingesters. Provides a consistent interface
for fetching records from a source with:
- Typed errors raised from fetch_data()
- Structured result reporting from run()

Usage:
    class Open311Ingester(BaseIngester):
        def fetch_data(self) -> list[ServiceRequest]:
            ...
        def get_primary_key(self) -> str:
            return "service_request_id"
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from src.shared.config import Settings, get_config

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    """Result of a data ingestion operation."""

    dataset: str
    execution_date: str
    rows_fetched: int
    duration_seconds: float = 0.0
    success: bool = True
    error_message: str | None = None
    error: Exception | None = field(default=None, repr=False)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for logging."""
        return {
            "dataset": self.dataset,
            "execution_date": self.execution_date,
            "rows_fetched": self.rows_fetched,
            "duration_seconds": self.duration_seconds,
            "success": self.success,
            "error_message": self.error_message,
            "metadata": self.metadata,
        }


class BaseIngester(ABC):
    """
    Abstract base class for source ingestion.

    Subclasses must implement:
    - fetch_data(): Fetch records from the source
    - get_primary_key(): Return the primary key field
    - get_dataset_name(): Return the dataset name
    """

    def __init__(self, config: Settings | None = None):
        """
        Initialize the ingester.

        Args:
            config: Configuration object (uses default if not provided)
        """
        self.config = config or get_config()
        self._data: list[Any] | None = None

    @abstractmethod
    def fetch_data(self) -> list[Any]:
        """
        Fetch every record the source currently exposes.

        Returns:
            Records in source order

        Raises:
            PipelineError: On any transport or decoding failure
        """
        pass

    @abstractmethod
    def get_primary_key(self) -> str:
        """
        Get the primary key field name.

        Returns:
            Field that uniquely identifies each record
        """
        pass

    @abstractmethod
    def get_dataset_name(self) -> str:
        """
        Get the dataset name.

        Returns:
            Dataset name (e.g., "open311_requests")
        """
        pass

    def get_api_endpoint(self) -> str | None:
        """
        Get the API endpoint for this dataset (optional).

        Returns:
            API endpoint URL or None if not applicable
        """
        return None

    def run(self, execution_date: str) -> IngestionResult:
        """
        Run the ingestion process.

        Errors are not raised; they are reported on the result.

        Args:
            execution_date: Execution date in YYYY-MM-DD format

        Returns:
            IngestionResult with details about the ingestion
        """
        start_time = time.time()
        dataset_name = self.get_dataset_name()

        logger.info(
            f"Starting ingestion for {dataset_name}",
            extra={"dataset": dataset_name, "execution_date": execution_date},
        )

        try:
            records = self.fetch_data()
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"Ingestion failed for {dataset_name}: {e}",
                extra={"dataset": dataset_name, "error": str(e)},
                exc_info=True,
            )
            return IngestionResult(
                dataset=dataset_name,
                execution_date=execution_date,
                rows_fetched=0,
                duration_seconds=duration,
                success=False,
                error_message=str(e),
                error=e,
            )

        self._data = records
        result = IngestionResult(
            dataset=dataset_name,
            execution_date=execution_date,
            rows_fetched=len(records),
            duration_seconds=time.time() - start_time,
            success=True,
            metadata={
                "primary_key": self.get_primary_key(),
                "endpoint": self.get_api_endpoint(),
            },
        )

        logger.info(
            f"Ingestion complete for {dataset_name}: {len(records)} rows",
            extra=result.to_dict(),
        )
        return result

    def get_data(self) -> list[Any] | None:
        """Get the most recently fetched records."""
        return self._data
