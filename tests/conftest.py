"""
Open311 Sync - Pytest Configuration and Fixtures

Shared fixtures for all tests:
- Configuration fixtures
- Sample Open311 payloads
- Mock fixtures for external services
"""

import json
import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

# Tests pick their environment explicitly; an inherited value would override it
os.environ.pop("O311_ENVIRONMENT", None)

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def configs_dir(project_root: Path) -> Path:
    """Get the configs directory."""
    return project_root / "configs"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def test_config() -> Any:
    """Get test configuration."""
    from src.shared.config import get_config, reload_config

    # Ensure fresh config for tests
    reload_config("dev")
    return get_config("dev")


@pytest.fixture
def influx_values() -> dict[str, str]:
    """Contents of a complete influx config file."""
    return {
        "InfluxUsername": "writer",
        "InfluxPassword": "s3cret",
        "InfluxHost": "http://influx.example.com:8086",
        "InfluxDatabase": "open311",
        "InfluxMeasurement": "service_requests",
    }


@pytest.fixture
def influx_config_file(tmp_path: Path, influx_values: dict[str, str]) -> Path:
    """Write a complete influx config file and return its path."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(influx_values))
    return path


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_open311_payload() -> list[dict[str, Any]]:
    """Two service requests in Open311 GeoReport v2 format."""
    return [
        {
            "service_request_id": "20-00012345",
            "status": "open",
            "service_name": "Pothole Repair",
            "service_code": "SBPOTREP",
            "agency_responsible": "Transportation & Public Works",
            "description": "Large pothole in the right lane",
            "requested_datetime": "2020-01-15T10:30:00Z",
            "updated_datetime": "2020-01-16T08:00:00-06:00",
            "address": "100 Congress Ave, Austin, TX",
            "lat": 30.2638,
            "long": -97.7446,
            "media_url": "http://example.com/photo.jpg",
        },
        {
            "service_request_id": "20-00012346",
            "status": "closed",
            "service_name": "Loose Dog",
            "service_code": "ACLONAG",
            "agency_responsible": "Animal Services",
            "requested_datetime": "2020-01-15T11:45:10-06:00",
            "updated_datetime": "2020-01-15T15:02:00-06:00",
            "address": "2000 E Riverside Dr, Austin, TX",
            "lat": 30.2399,
            "long": -97.7271,
            "status_notes": "Animal returned to owner",
        },
    ]


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_open311_api(mocker: Any, sample_open311_payload: list[dict[str, Any]]) -> Any:
    """Mock the Open311 endpoint returning the sample payload."""
    mock_response = mocker.MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = sample_open311_payload
    mock_get = mocker.patch("src.datasets.open311.ingest.requests.get", return_value=mock_response)
    return mock_get


@pytest.fixture
def mock_influx_client(mocker: Any) -> Any:
    """Mock the InfluxDB client class used by the writer."""
    mock_client_class = mocker.patch("src.sinks.influx.InfluxDBClient")
    mock_client_class.return_value.ping.return_value = "1.8.10"
    mock_client_class.return_value.write_points.return_value = True
    return mock_client_class


# =============================================================================
# Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def cleanup_env() -> Generator[None, None, None]:
    """Clean up environment variables and cached settings after each test."""
    from src.shared.config import get_config

    original_env = os.environ.copy()
    yield
    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)
    get_config.cache_clear()
