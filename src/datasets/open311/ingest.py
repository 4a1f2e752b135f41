"""
Open311 Sync - Open311 Ingester

Fetches the full list of service requests from an Open311 GeoReport v2
endpoint.

Data Source:
    Austin 311 Open311 API
    http://311.austintexas.gov/open311/v2/requests.json

Configuration:
    Endpoint and timeout loaded from the ``source`` settings section
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from src.datasets.base import BaseIngester
from src.datasets.open311.models import ServiceRequest
from src.shared.config import Settings
from src.shared.errors import DecodeError, SourceFetchError

logger = logging.getLogger(__name__)

PRIMARY_KEY = "service_request_id"


class Open311Ingester(BaseIngester):
    """
    Ingester for Open311 service request data.

    Issues a single unauthenticated GET with no query parameters. The upstream
    API decides how many records come back; nothing is paged or filtered here.
    """

    def __init__(self, config: Settings | None = None):
        """Initialize the ingester from the source settings."""
        super().__init__(config)
        self.api_url = self.config.source.endpoint
        self.timeout = self.config.source.timeout_seconds

    def get_dataset_name(self) -> str:
        """Return dataset name."""
        return self.config.source.dataset

    def get_primary_key(self) -> str:
        """Return the primary key field."""
        return PRIMARY_KEY

    def get_api_endpoint(self) -> str:
        """Get the Open311 requests endpoint."""
        return self.api_url

    def _get(self) -> requests.Response:
        """Issue the GET request, raising SourceFetchError on failure."""
        try:
            response = requests.get(self.api_url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SourceFetchError(f"Request to {self.api_url} failed: {e}") from e

        if response.status_code != 200:
            raise SourceFetchError(
                f"HTTP {response.status_code} from {self.api_url}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    def _decode(self, response: requests.Response) -> list[ServiceRequest]:
        """Decode the response body into service requests."""
        try:
            data: Any = response.json()
        except ValueError as e:
            raise DecodeError(f"Response from {self.api_url} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise DecodeError(
                f"Expected a JSON array from {self.api_url}, got {type(data).__name__}"
            )

        records = []
        for index, item in enumerate(data):
            try:
                records.append(ServiceRequest.model_validate(item))
            except ValidationError as e:
                raise DecodeError(f"Record {index} is not a service request: {e}") from e
        return records

    def fetch_data(self) -> list[ServiceRequest]:
        """Fetch every service request from the Open311 endpoint."""
        logger.info(f"Fetching service requests from {self.api_url}")

        response = self._get()
        records = self._decode(response)

        logger.info(f"Decoded {len(records)} service requests")
        return records

