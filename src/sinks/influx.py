"""
Open311 Sync - InfluxDB Writer

Writes a batch of time-series points to an InfluxDB 1.x database through the
``influxdb`` client. One connection per invocation, one write call per batch,
no retries.

Usage:
    from src.sinks.influx import InfluxWriter

    writer = InfluxWriter(influx_config)
    written = writer.write(points)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from urllib.parse import urlparse

import requests
from influxdb import InfluxDBClient
from influxdb.exceptions import InfluxDBClientError, InfluxDBServerError

from src.shared.config import InfluxConfig
from src.shared.errors import SinkWriteError
from src.sinks.models import TimeSeriesPoint

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 8086, "https": 8086}

CLIENT_ERRORS = (
    InfluxDBClientError,
    InfluxDBServerError,
    requests.exceptions.RequestException,
)


class InfluxWriter:
    """Batch writer for a single InfluxDB database."""

    def __init__(self, config: InfluxConfig, precision: str = "s"):
        self.config = config
        self.precision = precision

    def _client_kwargs(self) -> dict:
        """Translate the InfluxHost URL into InfluxDBClient arguments."""
        url = urlparse(self.config.host)
        return {
            "host": url.hostname,
            "port": url.port or DEFAULT_PORTS[url.scheme],
            "ssl": url.scheme == "https",
            "verify_ssl": url.scheme == "https",
            "path": url.path.strip("/"),
            "username": self.config.username,
            "password": self.config.password,
            "database": self.config.database,
            "retries": 1,
        }

    def connect(self) -> InfluxDBClient:
        """
        Open a client and check the server is reachable.

        Raises:
            SinkWriteError: If the server cannot be reached
        """
        client = InfluxDBClient(**self._client_kwargs())
        try:
            version = client.ping()
        except CLIENT_ERRORS as e:
            client.close()
            raise SinkWriteError(
                f"Could not connect to InfluxDB at {self.config.host}: {e}"
            ) from e

        logger.debug(f"Connected to InfluxDB {version} at {self.config.host}")
        return client

    def write(self, points: Sequence[TimeSeriesPoint]) -> int:
        """
        Write all points in a single batch.

        Args:
            points: Points to write

        Returns:
            Number of points written

        Raises:
            SinkWriteError: If connecting or writing fails
        """
        if not points:
            logger.info("No points to write")
            return 0

        client = self.connect()
        try:
            client.write_points(
                [point.to_dict() for point in points],
                time_precision=self.precision,
                database=self.config.database,
            )
        except CLIENT_ERRORS as e:
            raise SinkWriteError(
                f"Failed to write {len(points)} points to {self.config.database}: {e}"
            ) from e
        finally:
            client.close()

        logger.info(
            f"Wrote {len(points)} points to {self.config.database}",
            extra={
                "database": self.config.database,
                "measurement": self.config.measurement,
                "points": len(points),
            },
        )
        return len(points)
