"""
Property assessment reader.

Property files are wide (dozens of columns per parcel); only the zip
code, the assessed market value and the livable area are kept.

Zip codes are often stored as 9-digit ZIP+4 values and are reduced to
their 5-digit prefix.
"""

from __future__ import annotations

from dataclasses import dataclass

from tabular_ingest.readers._common import normalize_zip, parse_amount
from tabular_ingest.records import FilteredRow, RecordSpec


@dataclass(frozen=True)
class PropertyRecord:
    zip_code: str
    market_value: float
    total_livable_area: float
    valid: bool = True


def build_property(row: FilteredRow) -> PropertyRecord:
    return PropertyRecord(
        zip_code=row.convert("zip_code", normalize_zip, default=""),
        market_value=row.convert("market_value", parse_amount, default=0.0),
        total_livable_area=row.convert("total_livable_area", parse_amount, default=0.0),
        valid=row.valid,
    )


PROPERTY_SPEC: RecordSpec[PropertyRecord] = RecordSpec(
    name="property",
    used_columns=("zip_code", "market_value", "total_livable_area"),
    build_record=build_property,
)
