"""
Unit tests for the exporter (tabular_ingest.export).

Tests DataFrame construction from records, CSV and Parquet export,
directory creation and error handling using pytest's tmp_path fixture.
"""

from __future__ import annotations

import pandas as pd
import pytest

from tabular_ingest.exceptions import ExportError
from tabular_ingest.export import export_records, records_to_frame
from tabular_ingest.readers.population import PopulationRecord


def _make_records() -> list[PopulationRecord]:
    return [
        PopulationRecord("19104", 51808),
        PopulationRecord("19103", 24254),
        PopulationRecord("", 100, valid=False),
    ]


class TestRecordsToFrame:

    def test_columns_follow_record_fields(self):
        df = records_to_frame(_make_records())
        assert list(df.columns) == ["zip_code", "population", "valid"]
        assert len(df) == 3
        assert df["population"].tolist() == [51808, 24254, 100]
        assert df["valid"].tolist() == [True, True, False]

    def test_accepts_generator(self):
        df = records_to_frame(r for r in _make_records())
        assert len(df) == 3

    def test_empty(self):
        assert len(records_to_frame([])) == 0

    def test_non_dataclass_rejected(self):
        with pytest.raises(ExportError, match="dataclass"):
            records_to_frame([{"zip_code": "19104"}])


class TestExportCSV:

    def test_basic_csv_export(self, tmp_path):
        path = export_records(_make_records(), tmp_path / "pop.csv", output_format="csv")
        assert path.endswith("pop.csv")
        loaded = pd.read_csv(path, dtype={"zip_code": str})
        assert list(loaded.columns) == ["zip_code", "population", "valid"]
        assert loaded["zip_code"].iloc[0] == "19104"
        assert loaded["population"].iloc[1] == 24254

    def test_creates_parent_directory(self, tmp_path):
        out = tmp_path / "a" / "b" / "pop.csv"
        export_records(_make_records(), out, output_format="csv")
        assert out.exists()


class TestExportParquet:

    def test_parquet_round_trip(self, tmp_path):
        path = export_records(_make_records(), tmp_path / "pop.parquet")
        loaded = pd.read_parquet(path)
        assert loaded["zip_code"].tolist() == ["19104", "19103", ""]
        assert loaded["population"].tolist() == [51808, 24254, 100]
        assert loaded["valid"].tolist() == [True, True, False]


class TestExportErrors:

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ExportError, match="Unsupported output format"):
            export_records(_make_records(), tmp_path / "pop.json", output_format="json")

    def test_write_failure_wrapped(self, tmp_path):
        """A directory in place of the output file makes the write fail."""
        target = tmp_path / "pop.csv"
        target.mkdir()
        with pytest.raises(ExportError, match="Failed to write"):
            export_records(_make_records(), target, output_format="csv")
