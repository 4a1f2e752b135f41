"""
Tests for the configuration loader.

Covers the pipeline settings (YAML + env overrides) and the strict influx
config file.
"""

import json

import pytest
from pydantic import ValidationError

from src.shared.config import (
    InfluxConfig,
    Settings,
    get_config,
    load_influx_config,
    reload_config,
)
from src.shared.errors import ConfigLoadError

# =============================================================================
# Pipeline settings
# =============================================================================


def test_get_config_dev(test_config):
    """Test dev settings are merged over base.yaml."""
    assert isinstance(test_config, Settings)
    assert test_config.environment == "dev"
    assert test_config.logging.format == "text"
    assert test_config.source.endpoint.endswith("/open311/v2/requests.json")
    assert test_config.influx.config_file == "config.json"


def test_get_config_prod():
    """Test prod settings keep JSON logging."""
    config = reload_config("prod")

    assert config.environment == "prod"
    assert config.logging.format == "json"


def test_get_config_is_cached():
    """Test repeated calls return the same object."""
    reload_config("dev")

    assert get_config("dev") is get_config("dev")


def test_env_var_overrides_yaml(monkeypatch):
    """Test O311_ environment variables take precedence over YAML."""
    monkeypatch.setenv("O311_SOURCE__TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("O311_INFLUX__CONFIG_FILE", "/etc/open311/config.json")

    config = reload_config("dev")

    assert config.source.timeout_seconds == 5
    assert config.influx.config_file == "/etc/open311/config.json"
    assert config.source.endpoint.endswith("/open311/v2/requests.json")


def test_invalid_environment():
    """Test an unknown environment is rejected."""
    with pytest.raises(ValueError, match="Invalid environment"):
        Settings(environment="staging")


# =============================================================================
# Influx config file
# =============================================================================


def test_load_influx_config(influx_config_file):
    """Test a complete file populates all five fields."""
    config = load_influx_config(influx_config_file)

    assert isinstance(config, InfluxConfig)
    assert config.username == "writer"
    assert config.password == "s3cret"
    assert config.host == "http://influx.example.com:8086"
    assert config.database == "open311"
    assert config.measurement == "service_requests"


def test_load_influx_config_yaml(tmp_path, influx_values):
    """Test YAML files are accepted too."""
    path = tmp_path / "config.yaml"
    path.write_text("\n".join(f"{k}: {v}" for k, v in influx_values.items()))

    config = load_influx_config(path)

    assert config.database == "open311"


def test_load_influx_config_is_immutable(influx_config_file):
    """Test the loaded config cannot be modified."""
    config = load_influx_config(influx_config_file)

    with pytest.raises(ValidationError):
        config.database = "other"


def test_load_influx_config_hides_password(influx_config_file):
    """Test the password never appears in the repr."""
    config = load_influx_config(influx_config_file)

    assert "s3cret" not in repr(config)


def test_load_influx_config_missing_file(tmp_path):
    """Test a missing file raises ConfigLoadError."""
    with pytest.raises(ConfigLoadError, match="not found"):
        load_influx_config(tmp_path / "nope.json")


def test_load_influx_config_malformed(tmp_path):
    """Test malformed JSON raises ConfigLoadError."""
    path = tmp_path / "config.json"
    path.write_text('{"InfluxUsername": ')

    with pytest.raises(ConfigLoadError, match="Could not parse"):
        load_influx_config(path)


def test_load_influx_config_not_utf8(tmp_path):
    """Test a file that is not UTF-8 text raises ConfigLoadError."""
    path = tmp_path / "config.json"
    path.write_bytes(b'{"InfluxUsername": "\xff\xfe"}')

    with pytest.raises(ConfigLoadError, match="Could not parse"):
        load_influx_config(path)


def test_load_influx_config_not_a_mapping(tmp_path):
    """Test a JSON array is rejected."""
    path = tmp_path / "config.json"
    path.write_text("[]")

    with pytest.raises(ConfigLoadError, match="must contain a mapping"):
        load_influx_config(path)


def test_load_influx_config_missing_field(tmp_path, influx_values):
    """Test a missing field is not defaulted."""
    del influx_values["InfluxMeasurement"]
    path = tmp_path / "config.json"
    path.write_text(json.dumps(influx_values))

    with pytest.raises(ConfigLoadError, match="InfluxMeasurement"):
        load_influx_config(path)


def test_load_influx_config_bad_host(tmp_path, influx_values):
    """Test InfluxHost must be an http(s) URL."""
    influx_values["InfluxHost"] = "influx.example.com:8086"
    path = tmp_path / "config.json"
    path.write_text(json.dumps(influx_values))

    with pytest.raises(ConfigLoadError, match="InfluxHost"):
        load_influx_config(path)


def test_load_influx_config_env_override(monkeypatch, influx_config_file):
    """Test environment variables override values from the file."""
    monkeypatch.setenv("InfluxPassword", "from-env")

    config = load_influx_config(influx_config_file)

    assert config.password == "from-env"
    assert config.username == "writer"


def test_load_influx_config_env_fills_missing_field(monkeypatch, tmp_path, influx_values):
    """Test a field absent from the file can come from the environment."""
    del influx_values["InfluxPassword"]
    path = tmp_path / "config.json"
    path.write_text(json.dumps(influx_values))
    monkeypatch.setenv("InfluxPassword", "from-env")

    config = load_influx_config(path)

    assert config.password == "from-env"


def test_get_config_reads_environment_variable(monkeypatch):
    """Test O311_ENVIRONMENT selects the environment when none is given."""
    monkeypatch.setenv("O311_ENVIRONMENT", "prod")
    get_config.cache_clear()

    config = get_config()

    assert config.environment == "prod"


def test_logging_level_case_insensitive():
    """Test log level names are normalised to upper case."""
    config = Settings(logging={"level": "debug", "format": "text"})

    assert config.logging.level == "DEBUG"


def test_invalid_logging_level(monkeypatch):
    """Test an unknown log level fails when settings load."""
    monkeypatch.setenv("O311_LOGGING__LEVEL", "verbose")

    with pytest.raises(ValidationError, match="level"):
        reload_config("dev")
