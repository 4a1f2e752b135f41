from src.shared.config import InfluxConfig, Settings, get_config, load_influx_config
from src.shared.errors import (
    ConfigLoadError,
    DecodeError,
    PipelineError,
    SinkWriteError,
    SourceFetchError,
    TimestampParseError,
)

__all__ = [
    "get_config",
    "load_influx_config",
    "Settings",
    "InfluxConfig",
    "PipelineError",
    "ConfigLoadError",
    "SourceFetchError",
    "DecodeError",
    "SinkWriteError",
    "TimestampParseError",
]
