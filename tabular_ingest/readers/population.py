"""
Population reader.

Input: one row per zip code with at least ``zip_code`` and ``population``
columns (any other columns are dropped by the column filter).
"""

from __future__ import annotations

from dataclasses import dataclass

from tabular_ingest.readers._common import normalize_zip, parse_count
from tabular_ingest.records import FilteredRow, RecordSpec


@dataclass(frozen=True)
class PopulationRecord:
    zip_code: str
    population: int
    valid: bool = True


def build_population(row: FilteredRow) -> PopulationRecord:
    zip_code = row.convert("zip_code", normalize_zip, default="")
    population = row.convert("population", parse_count, default=0)
    return PopulationRecord(zip_code=zip_code, population=population, valid=row.valid)


POPULATION_SPEC: RecordSpec[PopulationRecord] = RecordSpec(
    name="population",
    used_columns=("zip_code", "population"),
    build_record=build_population,
)
