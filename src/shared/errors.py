"""
Open311 Sync - Pipeline Errors

Every fatal failure raised by a pipeline stage is a PipelineError carrying the
name of the stage it came from, so the runner can report where a run stopped.
TimestampParseError is the one non-fatal error: the mapper logs it and keeps
going.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors that abort a pipeline run."""

    stage: str = "pipeline"

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class ConfigLoadError(PipelineError):
    """Raised when the influx configuration file is missing or invalid."""

    stage = "loading"


class SourceFetchError(PipelineError):
    """Raised on a transport failure or a non-200 response from the source."""

    stage = "fetching"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(PipelineError):
    """Raised when the source body is not a JSON array of service requests."""

    stage = "fetching"


class SinkWriteError(PipelineError):
    """Raised when the database connection or the batch write fails."""

    stage = "writing"


class TimestampParseError(ValueError):
    """Raised when a timestamp string is not valid RFC3339."""

    def __init__(self, value: str, reason: str):
        self.value = value
        super().__init__(f"Invalid RFC3339 timestamp {value!r}: {reason}")
