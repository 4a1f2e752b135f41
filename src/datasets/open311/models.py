"""
Open311 Sync - Open311 Record Models

Shape of one element of an Open311 GeoReport v2 ``requests.json`` response.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

STRING_FIELDS = (
    "service_request_id",
    "status",
    "service_name",
    "service_code",
    "agency_responsible",
    "description",
    "requested_datetime",
    "updated_datetime",
    "address",
    "status_notes",
)


class ServiceRequest(BaseModel):
    """
    A single civic service request as published by the Open311 endpoint.

    Absent or null keys decode to the zero value ("" or 0.0). Keys this
    pipeline does not use (media_url, zipcode, ...) are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    service_request_id: str = ""
    status: str = ""
    service_name: str = ""
    service_code: str = ""
    agency_responsible: str = ""
    description: str = ""
    requested_datetime: str = ""
    updated_datetime: str = ""
    address: str = ""
    lat: float = 0.0
    long: float = 0.0
    status_notes: str = ""

    @field_validator(*STRING_FIELDS, mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("lat", "long", mode="before")
    @classmethod
    def null_to_zero(cls, v: Any) -> Any:
        return 0.0 if v is None else v
