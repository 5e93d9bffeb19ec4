"""
tabular-ingest: streaming extraction of typed records from delimited text.

Public API surface:

- ``open_records(path, reader, ...)`` -- **recommended entry point**.
  Context manager that opens a file and yields an ``ExtractionPipeline``;
  iterate it to stream records one row at a time.

- ``read_records(path, reader, ...)`` -- convenience wrapper that collects
  every record into a list.

- ``extract(config_path)`` -- YAML-driven run: read the configured input
  with the configured reader and export the records to CSV/Parquet.

``reader`` is either a registered reader name (``"population"``,
``"property"``, ``"service_request"``) or any ``RecordSpec``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from tabular_ingest.config import ExtractConfig, ParserConfig, load_config
from tabular_ingest.export import export_records
from tabular_ingest.header import HeaderIndex
from tabular_ingest.pipeline import ColumnFilter, ExtractionPipeline, valid_only
from tabular_ingest.readers.registry import available_readers, get_reader, register_reader
from tabular_ingest.records import FilteredRow, RecordSpec, defaults_from_mapping

__all__ = [
    "open_records",
    "read_records",
    "extract",
    "ExtractionPipeline",
    "ColumnFilter",
    "HeaderIndex",
    "FilteredRow",
    "RecordSpec",
    "ParserConfig",
    "ExtractConfig",
    "defaults_from_mapping",
    "valid_only",
    "get_reader",
    "register_reader",
    "available_readers",
]

logger = logging.getLogger(__name__)


def _resolve_spec(reader: str | RecordSpec) -> RecordSpec:
    if isinstance(reader, RecordSpec):
        return reader
    return get_reader(reader)


@contextmanager
def open_records(
    path: str | Path,
    reader: str | RecordSpec,
    config: ParserConfig | None = None,
) -> Iterator[ExtractionPipeline]:
    """Open *path* and yield a pipeline streaming its records.

    The file is closed when the ``with`` block exits, even if iteration
    stopped early.

    Examples::

        with tabular_ingest.open_records("population.csv", "population") as records:
            total = sum(r.population for r in records if r.valid)

    Raises:
        FileNotFoundError: If *path* does not exist.
        UnknownReaderError: If *reader* is an unknown name.
    """
    spec = _resolve_spec(reader)
    logger.info("open_records() -- path=%s, reader=%s", path, spec.name)
    with open(path, "rb") as f:
        yield ExtractionPipeline(f, spec, config)


def read_records(
    path: str | Path,
    reader: str | RecordSpec,
    config: ParserConfig | None = None,
    drop_invalid: bool = False,
) -> list[Any]:
    """Read every record of *path* into a list.

    Args:
        path: Delimited text file.
        reader: Registered reader name or a ``RecordSpec``.
        config: Parser settings. Defaults to ``ParserConfig()``.
        drop_invalid: If True, records with ``valid=False`` are left out.
    """
    with open_records(path, reader, config) as records:
        if drop_invalid:
            return list(valid_only(records))
        return list(records)


def extract(config_path: str | Path) -> str:
    """Run the extraction described by an extract config YAML file.

    Orchestration:
      1. ``load_config()`` -> ``ExtractConfig`` (Pydantic validation on load).
      2. ``get_reader()`` for the configured reader.
      3. Stream records from the input file.
      4. ``export_records()`` to the configured output.

    Returns:
        Path of the written output file.

    Raises:
        FileNotFoundError: If the config or input file does not exist.
        pydantic.ValidationError: If the config fails validation.
        UnknownReaderError: If the configured reader is not registered.
        ExportError: If writing the output fails.
    """
    logger.info("extract() -- config_path=%s", config_path)
    config = load_config(config_path)

    with open_records(config.source.input_path, config.source.reader, config.parser) as records:
        stream = valid_only(records) if config.output.drop_invalid else records
        written = export_records(
            stream,
            output_path=config.output.output_path,
            output_format=config.output.output_format,
        )

    logger.info("Extraction complete: wrote %s", written)
    return written
