"""
Open311 Sync - Sinks

Time-series point model and the InfluxDB batch writer.
"""

from src.sinks.influx import InfluxWriter
from src.sinks.models import TimeSeriesPoint

__all__ = ["InfluxWriter", "TimeSeriesPoint"]
