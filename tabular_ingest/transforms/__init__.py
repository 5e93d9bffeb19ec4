"""
Transforms sub-package for tabular-ingest.

Field-level conversions applied while a record is being built:
  - numbers.py: Strip separators, parse integers and decimals.

Each conversion raises ``FieldConversionError`` on bad input so the
caller can decide whether the failure invalidates the record.
"""
