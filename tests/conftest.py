"""
Shared test fixtures for tabular-ingest tests.

Unit tests work on in-memory byte strings; integration tests write small
files to ``tmp_path`` through the ``write_file`` fixture.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

_POPULATION_CSV = (
    b"zip_code,population,state\n"
    b"19104,51808,PA\n"
    b"19103,24254,PA\n"
    b"1910,100,PA\n"
    b"19102,,PA\n"
)

_PROPERTY_CSV = (
    b"objectid,location,market_value,total_livable_area,zip_code,owner_1\n"
    b'1,"100 MAIN ST, UNIT 2",250000,1200,191041234,"SMITH, JOHN"\n'
    b'2,"5 ""THE"" PLAZA",1000000,3000.5,19103,"ACME ""LLC"""\n'
    b"3,7 ELM ST,abc,900,19104,JONES\n"
)

_SERVICE_REQUEST_CSV = (
    b"objectid,service_request_id,status,status_notes,service_name,"
    b"agency_responsible,requested_datetime,zipcode,lat,lon\n"
    b'1,1001,Closed,"Multi-line\nnote, with comma",Pothole Repair,Streets,'
    b"2024-03-01 09:15:00,19104,39.95,-75.19\n"
    b"2,1002,Open,,Graffiti Removal,,2024-03-02T10:00:00Z,,,\n"
    b"3,,Open,,Illegal Dumping,Streets,yesterday,19104,91.0,-75.1\n"
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def population_csv() -> bytes:
    """Population file: two good rows, a short zip and a blank population."""
    return _POPULATION_CSV


@pytest.fixture()
def property_csv() -> bytes:
    """Property file with quoted addresses and owners; one bad market value."""
    return _PROPERTY_CSV


@pytest.fixture()
def service_request_csv() -> bytes:
    """311 file with a multi-line note, blank optionals and one bad row."""
    return _SERVICE_REQUEST_CSV


@pytest.fixture()
def write_file(tmp_path: Path) -> Callable[[str, bytes], Path]:
    """Write *data* to ``tmp_path / name`` and return the path."""

    def _write(name: str, data: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (reads and writes files)",
    )
