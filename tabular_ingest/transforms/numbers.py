"""
Number parsing for field values.

Public datasets write numbers in several ways:
- Comma as thousand separator (e.g., "25,200", "257,149,317")
- Surrounding whitespace (e.g., "0.62 ")
- Empty strings for missing values

Each function here cleans one raw field and converts it, raising
``FieldConversionError`` on failure. The raise is caught one level up in
``FilteredRow`` and recorded as an invalid record; nothing here ever
aborts a parse session.
"""

from __future__ import annotations

import math

from tabular_ingest.exceptions import FieldConversionError


def clean_numeric(value: str) -> str:
    """Strip whitespace and thousand separators."""
    return value.strip().replace(",", "")


def parse_integer(value: str, column: str) -> int:
    """Parse an integer field.

    Accepts integral floats such as ``"1200.0"`` (common in exports that
    went through a spreadsheet) but rejects ``"12.5"``.

    Raises:
        FieldConversionError: If the value is empty or not an integer.
    """
    cleaned = clean_numeric(value)
    if not cleaned:
        raise FieldConversionError(column, value, "missing value")
    try:
        return int(cleaned)
    except ValueError:
        pass
    number = parse_decimal(value, column)
    if not number.is_integer():
        raise FieldConversionError(column, value, "not an integer")
    return int(number)


def parse_decimal(value: str, column: str) -> float:
    """Parse a finite floating point field.

    Raises:
        FieldConversionError: If the value is empty, not numeric, or
            ``nan``/``inf``.
    """
    cleaned = clean_numeric(value)
    if not cleaned:
        raise FieldConversionError(column, value, "missing value")
    try:
        number = float(cleaned)
    except ValueError:
        raise FieldConversionError(column, value, "not a number") from None
    if not math.isfinite(number):
        raise FieldConversionError(column, value, "not a finite number")
    return number
