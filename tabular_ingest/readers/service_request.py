"""
Service request (311) reader.

Keeps the identifying and locating columns of each request. The request
id, status, service name and request time are required; agency, zip and
coordinates are frequently blank in published 311 data, so a blank value
there becomes ``None`` without invalidating the record. A value that is
present but malformed (``lat=abc``, ``zipcode=1910``) still does.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tabular_ingest.readers._common import (
    normalize_zip,
    parse_latitude,
    parse_longitude,
    parse_timestamp,
)
from tabular_ingest.records import FilteredRow, RecordSpec


@dataclass(frozen=True)
class ServiceRequestRecord:
    service_request_id: int
    status: str
    service_name: str
    agency_responsible: str | None
    requested_datetime: datetime | None
    zip_code: str | None
    lat: float | None
    lon: float | None
    valid: bool = True


def build_service_request(row: FilteredRow) -> ServiceRequestRecord:
    return ServiceRequestRecord(
        service_request_id=row.integer("service_request_id"),
        status=row.text("status"),
        service_name=row.text("service_name"),
        agency_responsible=row.text("agency_responsible", default=None, required=False),
        requested_datetime=row.convert("requested_datetime", parse_timestamp, default=None),
        zip_code=row.convert("zipcode", normalize_zip, default=None, required=False),
        lat=row.convert("lat", parse_latitude, default=None, required=False),
        lon=row.convert("lon", parse_longitude, default=None, required=False),
        valid=row.valid,
    )


SERVICE_REQUEST_SPEC: RecordSpec[ServiceRequestRecord] = RecordSpec(
    name="service_request",
    used_columns=(
        "service_request_id",
        "status",
        "service_name",
        "agency_responsible",
        "requested_datetime",
        "zipcode",
        "lat",
        "lon",
    ),
    build_record=build_service_request,
)
