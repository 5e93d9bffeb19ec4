"""
Row tokenizer for RFC 4180 style delimited text.

A three-state machine reads bytes from a ``BufferedSource`` and assembles
one row (a list of decoded field strings) per ``next_row()`` call:

- ``UNQUOTED``: plain field content; the delimiter closes the field, a
  line terminator (``\\n``, ``\\r\\n`` or a lone ``\\r``) closes the row,
  and a quote switches to ``QUOTED`` without being stored.
- ``QUOTED``: everything is literal, including delimiters and newlines,
  until a quote arrives.
- ``QUOTE_PENDING``: the quote just seen is either half of an escaped
  ``""`` (another quote follows) or the end of the quoted section
  (a delimiter, terminator or end of stream follows).

Any other byte after a closing quote is malformed. In lenient mode the
field is closed anyway and that byte starts the next field; in strict
mode ``MalformedQuotingError`` is raised. End of stream inside a quoted
field is treated the same way.

Field bytes accumulate in a ``bytearray`` (amortized growth) and are
decoded once when the field closes. Undecodable bytes become U+FFFD by
default; with ``encoding_errors="strict"`` they raise ``FieldDecodeError``. The delimiter and quote are single
ASCII bytes, which never occur inside a multi-byte UTF-8 sequence, so
working on raw bytes is safe for UTF-8 input.
"""

from __future__ import annotations

import enum
import logging

from tabular_ingest.config import ParserConfig
from tabular_ingest.exceptions import FieldDecodeError, MalformedQuotingError
from tabular_ingest.source import BufferedSource

logger = logging.getLogger(__name__)

_LF = 0x0A
_CR = 0x0D


class TokenizerState(enum.Enum):
    UNQUOTED = "unquoted"
    QUOTED = "quoted"
    QUOTE_PENDING = "quote_pending"


class Tokenizer:
    """Turns a byte source into a stream of raw rows.

    Attributes:
        rows_emitted: Number of rows returned by ``next_row()`` so far.
        line_number: 1-based physical line the tokenizer is currently on.
        row_line: Line on which the most recent row started.
    """

    def __init__(
        self,
        source: BufferedSource,
        delimiter: str = ",",
        quote: str = '"',
        strict_quoting: bool = False,
        encoding: str = "utf-8",
        encoding_errors: str = "replace",
    ) -> None:
        self._source = source
        self._delimiter = ord(delimiter)
        self._quote = ord(quote)
        self._strict = strict_quoting
        self._encoding = encoding
        self._encoding_errors = encoding_errors
        self.rows_emitted = 0
        self.line_number = 1
        self.row_line = 1

    @classmethod
    def from_config(cls, source: BufferedSource, config: ParserConfig) -> Tokenizer:
        return cls(
            source,
            delimiter=config.delimiter,
            quote=config.quote_char,
            strict_quoting=config.strict_quoting,
            encoding=config.encoding,
            encoding_errors=config.encoding_errors,
        )

    def next_row(self) -> list[str] | None:
        """Read and return the next row, or ``None`` at clean end of stream.

        A final row without a trailing line terminator is still returned.

        Raises:
            MalformedQuotingError: In strict mode, on malformed quoting.
            FieldDecodeError: With ``encoding_errors="strict"``, on bytes
                that are not valid in the configured encoding.
            SourceReadError: If the underlying stream fails.
        """
        source = self._source
        if source.peek() is None:
            return None

        consume = source.consume
        delimiter = self._delimiter
        quote = self._quote
        self.row_line = self.line_number

        fields: list[str] = []
        field = bytearray()
        state = TokenizerState.UNQUOTED

        while True:
            byte = consume()

            if state is TokenizerState.UNQUOTED:
                if byte is None or byte == _LF or byte == _CR:
                    self._end_line(byte)
                    fields.append(self._decode(field))
                    break
                if byte == delimiter:
                    fields.append(self._decode(field))
                    field = bytearray()
                elif byte == quote:
                    state = TokenizerState.QUOTED
                else:
                    field.append(byte)

            elif state is TokenizerState.QUOTED:
                if byte is None:
                    self._malformed(
                        f"end of stream inside quoted field (row starting at line {self.row_line})"
                    )
                    fields.append(self._decode(field))
                    break
                if byte == quote:
                    state = TokenizerState.QUOTE_PENDING
                else:
                    if byte == _LF:
                        self.line_number += 1
                    field.append(byte)

            else:  # QUOTE_PENDING
                if byte == quote:
                    field.append(quote)
                    state = TokenizerState.QUOTED
                elif byte == delimiter:
                    fields.append(self._decode(field))
                    field = bytearray()
                    state = TokenizerState.UNQUOTED
                elif byte is None or byte == _LF or byte == _CR:
                    self._end_line(byte)
                    fields.append(self._decode(field))
                    break
                else:
                    self._malformed(
                        f"unexpected byte {chr(byte)!r} after closing quote "
                        f"on line {self.line_number}"
                    )
                    fields.append(self._decode(field))
                    field = bytearray((byte,))
                    state = TokenizerState.UNQUOTED

        self.rows_emitted += 1
        return fields

    def _end_line(self, byte: int | None) -> None:
        """Account for a row terminator, folding ``\\r\\n`` into one."""
        if byte is None:
            return
        if byte == _CR and self._source.peek() == _LF:
            self._source.consume()
        self.line_number += 1

    def _decode(self, field: bytearray) -> str:
        try:
            return field.decode(self._encoding, errors=self._encoding_errors)
        except UnicodeDecodeError as exc:
            raise FieldDecodeError(self.row_line, str(exc)) from exc

    def _malformed(self, message: str) -> None:
        if self._strict:
            raise MalformedQuotingError(message)
        logger.debug("Lenient quoting: %s", message)
