"""
Open311 Sync - Pipeline Runner

Runs one full sync: load the influx config, fetch every service request,
map them to points and write the batch. Stages run strictly in order:

    loading -> fetching -> mapping -> writing -> done

Any fatal error stops the run at its stage and is reported on the returned
PipelineResult instead of being raised.

Usage:
    from src.pipeline.runner import run_pipeline

    result = run_pipeline()
    if not result.success:
        ...
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from src.datasets.open311 import Open311Ingester, ServiceRequestMapper
from src.shared.config import Settings, get_config, load_influx_config
from src.shared.errors import PipelineError
from src.sinks import InfluxWriter

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of a pipeline run."""

    execution_date: str
    stage: str = "idle"
    success: bool = False
    records_fetched: int = 0
    points_written: int = 0
    invalid_timestamps: int = 0
    duration_seconds: float = 0.0
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for logging."""
        return {
            "execution_date": self.execution_date,
            "stage": self.stage,
            "success": self.success,
            "records_fetched": self.records_fetched,
            "points_written": self.points_written,
            "invalid_timestamps": self.invalid_timestamps,
            "duration_seconds": self.duration_seconds,
            "error_message": self.error_message,
            "metadata": self.metadata,
        }


def _run_stages(
    result: PipelineResult,
    config: Settings | None,
    config_path: str | Path | None,
) -> None:
    """Run every stage, recording progress on ``result``. Raises on failure."""
    result.stage = "loading"
    config = config or get_config()
    config_path = Path(config_path or config.influx.config_file)
    logger.debug(f"Loading influx config from {config_path}")
    influx_config = load_influx_config(config_path)
    result.metadata["database"] = influx_config.database
    result.metadata["measurement"] = influx_config.measurement

    result.stage = "fetching"
    ingester = Open311Ingester(config)
    ingestion = ingester.run(result.execution_date)
    if not ingestion.success:
        raise ingestion.error
    service_requests = ingester.get_data()
    result.records_fetched = ingestion.rows_fetched

    result.stage = "mapping"
    mapper = ServiceRequestMapper(influx_config.measurement)
    points = mapper.map_requests(service_requests)
    result.invalid_timestamps = mapper.invalid_timestamps

    result.stage = "writing"
    writer = InfluxWriter(influx_config, precision=config.influx.precision)
    result.points_written = writer.write(points)

    result.stage = "done"


def run_pipeline(
    config_path: str | Path | None = None,
    config: Settings | None = None,
) -> PipelineResult:
    """
    Run the Open311 to InfluxDB sync once.

    Args:
        config_path: Influx config file (defaults to ``influx.config_file``)
        config: Pipeline settings (uses default if not provided)

    Returns:
        PipelineResult describing how far the run got
    """
    start_time = time.time()
    result = PipelineResult(execution_date=datetime.now(UTC).strftime("%Y-%m-%d"))
    logger.info("Starting Open311 sync", extra={"execution_date": result.execution_date})

    try:
        _run_stages(result, config, config_path)
        result.success = True
    except PipelineError as e:
        result.stage = e.stage
        result.error_message = str(e)
        logger.error(
            f"Open311 sync aborted during {e.stage}: {e}",
            extra={"stage": e.stage, "error_type": type(e).__name__},
        )
    except Exception as e:
        result.error_message = str(e)
        logger.error(
            f"Open311 sync failed unexpectedly during {result.stage}: {e}",
            extra={"stage": result.stage, "error_type": type(e).__name__},
            exc_info=True,
        )

    result.duration_seconds = time.time() - start_time
    if result.success:
        logger.info(
            f"Open311 sync complete: {result.points_written} points written",
            extra=result.to_dict(),
        )
    return result
