"""
Column filter and extraction pipeline.

The pipeline pulls one row at a time through a fixed sequence:

1. **Tokenize**: ``Tokenizer.next_row()`` produces a raw row.
2. **Header**: the very first row becomes the ``HeaderIndex`` and is not
   turned into a record.
3. **Filter**: ``ColumnFilter.project()`` keeps only the RecordSpec's used
   columns, substituting defaults for columns the row lacks.
4. **Build**: the RecordSpec's ``build_record`` turns the ``FilteredRow`` into a
   typed record.

Only one raw row is alive at a time and every retained record holds at
most ``len(used_columns)`` values, however wide the file is.

The pipeline owns its buffer, tokenizer and header index. Nothing is
shared at module level, so independent pipelines can run on separate
threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import BinaryIO, Generic, Iterable, Iterator, Sequence, TypeVar

from tabular_ingest.config import ParserConfig
from tabular_ingest.header import HeaderIndex
from tabular_ingest.records import FilteredRow, RecordSpec
from tabular_ingest.source import BufferedSource
from tabular_ingest.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ColumnFilter:
    """Projects raw rows onto a RecordSpec's used columns.

    Column positions are looked up in the header once, when the filter is
    created. Defaults are resolved once per column as well.

    Attributes:
        missing_columns: Used columns that the header does not contain.
            Every row gets the default value for these.
    """

    def __init__(self, header: HeaderIndex, spec: RecordSpec) -> None:
        used = spec.used_columns
        self._positions = tuple(header.position_of(column) for column in used)
        self._defaults = tuple(spec.default_value(column) for column in used)
        self._slots = MappingProxyType({column: i for i, column in enumerate(used)})
        self.missing_columns = tuple(
            column for column, pos in zip(used, self._positions) if pos is None
        )

    def project(self, raw_row: Sequence[str]) -> FilteredRow:
        """Return the used-column values of *raw_row*, in declared order.

        A position past the end of a short (ragged) row resolves to the
        column's default, as does a column missing from the header.
        """
        width = len(raw_row)
        values = [
            raw_row[pos] if pos is not None and pos < width else default
            for pos, default in zip(self._positions, self._defaults)
        ]
        return FilteredRow(self._slots, values)


@dataclass
class PipelineStats:
    """Counters for one extraction session."""

    rows_read: int = 0
    records_built: int = 0
    records_invalid: int = 0
    blank_rows_skipped: int = 0


class ExtractionPipeline(Generic[R]):
    """Lazy, forward-only sequence of typed records from a byte stream.

    Use ``parse_next()`` to pull records one at a time, or iterate the
    pipeline directly. The sequence cannot be rewound; reopen the source
    to start again.

    Args:
        stream: Binary stream positioned at the header row.
        spec: The reader's ``RecordSpec``.
        config: Parser settings. Defaults to ``ParserConfig()``.
    """

    def __init__(
        self,
        stream: BinaryIO,
        spec: RecordSpec[R],
        config: ParserConfig | None = None,
    ) -> None:
        self.spec = spec
        self.config = config if config is not None else ParserConfig()
        self.stats = PipelineStats()
        self._source = BufferedSource(stream, buffer_size=self.config.buffer_size)
        self._tokenizer = Tokenizer.from_config(self._source, self.config)
        self._header: HeaderIndex | None = None
        self._filter: ColumnFilter | None = None
        self._finished = False

    @property
    def header(self) -> HeaderIndex:
        """The session's header index, read from the stream on first access.

        Raises:
            EmptyStreamError: If the stream is empty.
        """
        if self._header is None:
            self._read_header()
        return self._header

    @property
    def column_filter(self) -> ColumnFilter:
        if self._filter is None:
            self._read_header()
        return self._filter

    def _read_header(self) -> None:
        self._header = HeaderIndex.from_tokenizer(
            self._tokenizer,
            duplicates=self.config.duplicate_headers,
            strip_names=self.config.strip_header_names,
        )
        self._filter = ColumnFilter(self._header, self.spec)
        if self._filter.missing_columns:
            logger.warning(
                "Reader '%s': column(s) %s not in header, using defaults",
                self.spec.name,
                list(self._filter.missing_columns),
            )

    def parse_next(self) -> R | None:
        """Return the next record, or ``None`` once the stream is exhausted.

        Raises:
            EmptyStreamError: On the first call, if the stream is empty.
            MalformedQuotingError: In strict quoting mode.
            FieldDecodeError: With ``encoding_errors="strict"``.
            SourceReadError: If the underlying stream fails.
            TypeError: If ``build_record`` returns ``None``.
        """
        column_filter = self.column_filter
        if self._finished:
            return None

        while True:
            row = self._tokenizer.next_row()
            if row is None:
                self._finished = True
                logger.info(
                    "Reader '%s': %d rows read, %d records (%d invalid)",
                    self.spec.name,
                    self.stats.rows_read,
                    self.stats.records_built,
                    self.stats.records_invalid,
                )
                return None

            self.stats.rows_read += 1
            if self.config.skip_blank_lines and len(row) == 1 and not row[0]:
                self.stats.blank_rows_skipped += 1
                continue

            record = self.spec.build_record(column_filter.project(row))
            if record is None:
                raise TypeError(
                    f"RecordSpec '{self.spec.name}': build_record returned None "
                    f"for the row at line {self._tokenizer.row_line}"
                )
            self.stats.records_built += 1
            if not getattr(record, "valid", True):
                self.stats.records_invalid += 1
                logger.debug(
                    "Reader '%s': invalid record at line %d",
                    self.spec.name,
                    self._tokenizer.row_line,
                )
            return record

    def __iter__(self) -> Iterator[R]:
        while True:
            record = self.parse_next()
            if record is None:
                return
            yield record


def valid_only(records: Iterable[R]) -> Iterator[R]:
    """Lazily drop records whose ``valid`` flag is false."""
    for record in records:
        if getattr(record, "valid", True):
            yield record
