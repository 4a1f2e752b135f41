"""
Open311 Sync - Configuration Loader

Pydantic-based configuration management with:
- Environment-based pipeline settings (dev/prod)
- YAML file loading with inheritance
- Environment variable overrides
- A strict, five-field InfluxDB configuration file holding the credentials

Usage:
    from src.shared.config import get_config, load_influx_config

    config = get_config()  # Uses O311_ENVIRONMENT env var
    config = get_config("prod")  # Explicit environment

    endpoint = config.source.endpoint
    influx = load_influx_config(config.influx.config_file)
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from src.shared.errors import ConfigLoadError

# =============================================================================
# Configuration Models
# =============================================================================


class ProjectConfig(BaseModel):
    """Project metadata configuration."""

    name: str = "open311-sync"
    version: str = "0.1.0"
    description: str = "Open311 service requests to InfluxDB"


class SourceConfig(BaseModel):
    """Open311 source endpoint configuration."""

    endpoint: str = "http://311.austintexas.gov/open311/v2/requests.json"
    timeout_seconds: int = 60
    dataset: str = "open311_requests"


class InfluxSettings(BaseModel):
    """Where to find the influx credentials file and how to write points."""

    config_file: str = "config.json"
    precision: Literal["s"] = "s"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "json"

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept level names in any case."""
        return v.upper() if isinstance(v, str) else v


class InfluxConfig(BaseModel):
    """
    Connection credentials and write target for InfluxDB.

    Mirrors the config file one-to-one. Every field is required and the
    record is immutable once loaded.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    username: str = Field(alias="InfluxUsername")
    password: str = Field(alias="InfluxPassword")
    host: str = Field(alias="InfluxHost")
    database: str = Field(alias="InfluxDatabase")
    measurement: str = Field(alias="InfluxMeasurement")

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Require an http(s) URL with a network location."""
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"} or not parsed.hostname:
            raise ValueError(f"InfluxHost must be an http(s) URL, got {v!r}")
        try:
            parsed.port
        except ValueError as e:
            raise ValueError(f"InfluxHost has an invalid port: {v!r}") from e
        return v

    def __repr__(self) -> str:
        return (
            f"InfluxConfig(username={self.username!r}, password='***', host={self.host!r}, "
            f"database={self.database!r}, measurement={self.measurement!r})"
        )

    __str__ = __repr__


# Keys recognised in the influx config file, also honoured as env overrides
INFLUX_CONFIG_KEYS = (
    "InfluxUsername",
    "InfluxPassword",
    "InfluxHost",
    "InfluxDatabase",
    "InfluxMeasurement",
)


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """
    Main pipeline settings.

    Loads configuration from:
    1. YAML files in configs/environments/
    2. Environment variables (O311_ prefix, __ for nesting)

    Environment variables take precedence over YAML values.
    """

    model_config = SettingsConfigDict(
        env_prefix="O311_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Environment
    environment: Literal["dev", "prod"] = "dev"

    # Configuration sections
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    influx: InfluxSettings = Field(default_factory=InfluxSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"dev", "prod"}
        if v not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs; env vars must win over them
        return env_settings, init_settings, dotenv_settings, file_secret_settings


# =============================================================================
# Configuration Loading Functions
# =============================================================================


def _get_config_dir() -> Path:
    """Get the configuration directory path."""
    # Try relative path from the project root
    config_dir = Path(__file__).parent.parent.parent / "configs"
    if config_dir.exists():
        return config_dir

    # Try from current working directory
    config_dir = Path.cwd() / "configs"
    if config_dir.exists():
        return config_dir

    raise FileNotFoundError(
        "Could not find configs directory. Ensure you're running from the project root."
    )


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents."""
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_config_for_environment(environment: str) -> dict[str, Any]:
    """Load and merge configuration for a specific environment."""
    config_dir = _get_config_dir()
    env_dir = config_dir / "environments"

    base_config = _load_yaml_file(env_dir / "base.yaml")
    env_config = _load_yaml_file(env_dir / f"{environment}.yaml")

    # Remove inheritance marker if present
    env_config.pop("_inherit", None)

    merged = _deep_merge(base_config, env_config)
    merged["environment"] = environment

    return merged


@lru_cache(maxsize=4)
def get_config(environment: str | None = None) -> Settings:
    """
    Get pipeline settings for the specified environment.

    Args:
        environment: Environment name (dev, prod).
                    If None, uses O311_ENVIRONMENT env var, defaulting to "dev".

    Returns:
        Settings: Validated configuration object.
    """
    if environment is None:
        environment = os.getenv("O311_ENVIRONMENT", "dev")

    yaml_config = _load_config_for_environment(environment)

    return Settings(**yaml_config)


def reload_config(environment: str | None = None) -> Settings:
    """
    Reload configuration, clearing the cache.

    Useful for testing or when config files have changed.
    """
    get_config.cache_clear()
    return get_config(environment)


# =============================================================================
# Influx Configuration File
# =============================================================================


def _read_config_file(path: Path) -> Any:
    """Parse a JSON or YAML config file based on its suffix."""
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(f)
        return json.load(f)


def load_influx_config(path: str | Path) -> InfluxConfig:
    """
    Load the InfluxDB configuration file.

    Any of the five recognised keys set in the process environment overrides
    the value from the file. Nothing is defaulted: a missing key is an error.

    Args:
        path: Path to a JSON (or YAML) file with the Influx* keys

    Returns:
        InfluxConfig with all five fields populated

    Raises:
        ConfigLoadError: If the file is missing, malformed or incomplete
    """
    path = Path(path)

    try:
        raw = _read_config_file(path)
    except FileNotFoundError as e:
        raise ConfigLoadError(f"Config file not found: {path}") from e
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Could not parse config file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigLoadError(
            f"Config file {path} must contain a mapping, got {type(raw).__name__}"
        )

    overrides = {key: os.environ[key] for key in INFLUX_CONFIG_KEYS if key in os.environ}
    values = {**raw, **overrides}

    try:
        return InfluxConfig.model_validate(values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigLoadError(f"Invalid config file {path}: {problems}") from e
