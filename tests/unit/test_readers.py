"""
Unit tests for the bundled readers and the reader registry
(tabular_ingest.readers).
"""

from __future__ import annotations

import io
from datetime import datetime, timezone

import pytest

from tabular_ingest.exceptions import FieldConversionError, UnknownReaderError
from tabular_ingest.pipeline import ExtractionPipeline
from tabular_ingest.readers._common import normalize_zip, parse_timestamp
from tabular_ingest.readers.population import POPULATION_SPEC, PopulationRecord
from tabular_ingest.readers.property import PROPERTY_SPEC, PropertyRecord
from tabular_ingest.readers.registry import available_readers, get_reader, register_reader
from tabular_ingest.readers.service_request import SERVICE_REQUEST_SPEC
from tabular_ingest.records import RecordSpec


def _records(data: bytes, spec: RecordSpec) -> list:
    return list(ExtractionPipeline(io.BytesIO(data), spec))


class TestCommonParsers:

    @pytest.mark.parametrize("value", ["19104", "191041234", "19104-1234", " 19104 "])
    def test_normalize_zip(self, value):
        assert normalize_zip(value) == "19104"

    @pytest.mark.parametrize("value", ["1910", "ABCDE", ""])
    def test_normalize_zip_rejects(self, value):
        with pytest.raises(FieldConversionError, match="zip"):
            normalize_zip(value)

    def test_parse_timestamp_with_z(self):
        ts = parse_timestamp("2024-03-02T10:00:00Z", "t")
        assert ts == datetime(2024, 3, 2, 10, 0, tzinfo=timezone.utc)

    def test_parse_timestamp_rejects_garbage(self):
        with pytest.raises(FieldConversionError):
            parse_timestamp("yesterday", "t")


class TestPopulationReader:

    def test_records(self, population_csv):
        records = _records(population_csv, POPULATION_SPEC)
        assert records[0] == PopulationRecord("19104", 51808, True)
        assert records[1] == PopulationRecord("19103", 24254, True)

    def test_bad_zip_is_invalid_not_fatal(self, population_csv):
        records = _records(population_csv, POPULATION_SPEC)
        assert records[2].valid is False
        assert records[2].zip_code == ""
        assert records[2].population == 100

    def test_blank_population_defaults_and_invalidates(self, population_csv):
        record = _records(population_csv, POPULATION_SPEC)[3]
        assert record == PopulationRecord("19102", 0, False)

    def test_negative_population_invalid(self):
        records = _records(b"zip_code,population\n19104,-5\n", POPULATION_SPEC)
        assert records[0].valid is False

    def test_missing_column_invalidates_every_record(self):
        records = _records(b"zip_code\n19104\n19103\n", POPULATION_SPEC)
        assert [r.valid for r in records] == [False, False]


class TestPropertyReader:

    def test_quoted_fields_do_not_shift_columns(self, property_csv):
        records = _records(property_csv, PROPERTY_SPEC)
        assert records[0] == PropertyRecord("19104", 250000.0, 1200.0, True)
        assert records[1] == PropertyRecord("19103", 1000000.0, 3000.5, True)

    def test_bad_market_value(self, property_csv):
        record = _records(property_csv, PROPERTY_SPEC)[2]
        assert record.valid is False
        assert record.market_value == 0.0
        assert record.total_livable_area == 900.0


class TestServiceRequestReader:

    def test_multiline_note_is_one_row(self, service_request_csv):
        records = _records(service_request_csv, SERVICE_REQUEST_SPEC)
        assert len(records) == 3
        first = records[0]
        assert first.valid
        assert first.service_request_id == 1001
        assert first.status == "Closed"
        assert first.service_name == "Pothole Repair"
        assert first.agency_responsible == "Streets"
        assert first.requested_datetime == datetime(2024, 3, 1, 9, 15)
        assert first.zip_code == "19104"
        assert first.lat == pytest.approx(39.95)
        assert first.lon == pytest.approx(-75.19)

    def test_blank_optionals_stay_valid(self, service_request_csv):
        second = _records(service_request_csv, SERVICE_REQUEST_SPEC)[1]
        assert second.valid
        assert second.agency_responsible is None
        assert second.zip_code is None
        assert second.lat is None
        assert second.lon is None

    def test_bad_required_fields_invalidate(self, service_request_csv):
        third = _records(service_request_csv, SERVICE_REQUEST_SPEC)[2]
        assert third.valid is False
        assert third.service_request_id == 0
        assert third.requested_datetime is None
        assert third.lat is None  # 91.0 is out of range


class TestRegistry:

    def test_bundled_readers(self):
        assert available_readers() == ["population", "property", "service_request"]
        assert get_reader("population") is POPULATION_SPEC

    def test_unknown_reader(self):
        with pytest.raises(UnknownReaderError, match="Available readers"):
            get_reader("parking")

    def test_register_reader(self):
        spec = RecordSpec("custom_test", ("a",), build_record=lambda row: row)
        register_reader(spec)
        try:
            assert get_reader("custom_test") is spec
            with pytest.raises(ValueError, match="already registered"):
                register_reader(spec)
            register_reader(spec, replace=True)
        finally:
            from tabular_ingest.readers import registry

            registry._READERS.pop("custom_test", None)
