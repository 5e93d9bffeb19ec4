"""Shared field parsers for the bundled readers.

All of them follow the ``parse(value, column)`` convention expected by
``FilteredRow.convert`` and raise ``FieldConversionError`` on bad input.
"""

from __future__ import annotations

from datetime import datetime

from tabular_ingest.exceptions import FieldConversionError
from tabular_ingest.transforms.numbers import parse_decimal, parse_integer


def normalize_zip(value: str, column: str = "zip_code") -> str:
    """Reduce a US zip (``19104`` or ``191041234`` / ``19104-1234``) to 5 digits."""
    prefix = value.strip()[:5]
    if len(prefix) != 5 or not prefix.isdigit():
        raise FieldConversionError(column, value, "not a 5-digit zip code")
    return prefix


def parse_count(value: str, column: str) -> int:
    """Non-negative integer."""
    count = parse_integer(value, column)
    if count < 0:
        raise FieldConversionError(column, value, "negative count")
    return count


def parse_amount(value: str, column: str) -> float:
    """Non-negative decimal."""
    amount = parse_decimal(value, column)
    if amount < 0:
        raise FieldConversionError(column, value, "negative amount")
    return amount


def parse_latitude(value: str, column: str) -> float:
    lat = parse_decimal(value, column)
    if not -90.0 <= lat <= 90.0:
        raise FieldConversionError(column, value, "latitude out of range")
    return lat


def parse_longitude(value: str, column: str) -> float:
    lon = parse_decimal(value, column)
    if not -180.0 <= lon <= 180.0:
        raise FieldConversionError(column, value, "longitude out of range")
    return lon


def parse_timestamp(value: str, column: str) -> datetime:
    """ISO 8601 timestamp; a trailing ``Z`` is read as UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise FieldConversionError(column, value, "not an ISO 8601 timestamp") from None
