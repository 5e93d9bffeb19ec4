"""
Custom exception hierarchy for tabular-ingest.

Two families live here:

- **Structural** errors (``SourceReadError``, ``EmptyStreamError``,
  ``MalformedQuotingError``, ``FieldDecodeError``, ``DuplicateHeaderError``)
  abort the whole parse session.
- **Per-field** errors (``FieldConversionError``) never escape a session.
  They are absorbed into the record's ``valid`` flag so one bad row does
  not discard the rest of a large file.
"""


class TabularIngestError(Exception):
    """Base exception for all tabular-ingest errors."""


class SourceReadError(TabularIngestError, OSError):
    """Raised when the underlying byte stream fails to read.

    Subclasses ``OSError`` so callers already handling ``IOError`` from
    file objects keep working. Not retried by the parser.
    """


class EmptyStreamError(TabularIngestError):
    """Raised when the stream holds no header row at all."""


class MalformedQuotingError(TabularIngestError):
    """Raised in strict quoting mode when a quoted field is malformed.

    For example ``"abc"x`` (a byte after the closing quote that is not a
    delimiter or line terminator), or end of stream inside a quoted field.
    """


class FieldDecodeError(TabularIngestError):
    """Raised when a field's bytes are not valid in the configured encoding.

    Only raised with ``encoding_errors="strict"``; the default ``"replace"``
    substitutes U+FFFD and keeps the session going.
    """

    def __init__(self, line_number: int, reason: str) -> None:
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Undecodable field in row starting at line {line_number}: {reason}")


class DuplicateHeaderError(TabularIngestError):
    """Raised when the header repeats a column name under the ``reject`` policy."""


class FieldConversionError(TabularIngestError):
    """A single field could not be converted to its target type.

    Carries the column name and the raw value so callers can report it.
    """

    def __init__(self, column: str, value: str, reason: str) -> None:
        self.column = column
        self.value = value
        self.reason = reason
        super().__init__(f"Column '{column}': {reason} (value={value!r})")


class UnknownReaderError(TabularIngestError):
    """Raised when a reader name is not present in the registry."""


class ConfigValidationError(TabularIngestError):
    """Raised when an extract config file is empty or semantically invalid."""


class ExportError(TabularIngestError):
    """Raised when the exporter fails to write output files.

    For example, permission errors, disk full, or unsupported format.
    """
