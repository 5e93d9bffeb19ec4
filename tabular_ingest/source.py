"""
Buffered byte source for the tokenizer.

Wraps any binary stream (an open file, ``io.BytesIO``, a pipe) and hands
out one byte at a time from a preallocated read-ahead buffer. The stream
is only touched when the buffer runs dry, so the per-byte cost is an index
bump instead of a system call.

``peek()`` gives one byte of lookahead without consuming it; the tokenizer
uses it to tell ``\\r\\n`` apart from a lone ``\\r``.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from tabular_ingest.config import DEFAULT_BUFFER_SIZE
from tabular_ingest.exceptions import SourceReadError

logger = logging.getLogger(__name__)


class BufferedSource:
    """Fixed-size read-ahead buffer over a binary stream.

    Attributes:
        bytes_consumed: Total bytes handed out by ``consume()`` so far.
    """

    def __init__(self, stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self._stream = stream
        self._buffer = bytearray(buffer_size)
        self._readinto = getattr(stream, "readinto", None)
        self._pos = 0
        self._end = 0
        self._eof = False
        self.bytes_consumed = 0

    @property
    def at_eof(self) -> bool:
        """True once the stream is exhausted and every buffered byte is consumed."""
        return self.peek() is None

    def refill(self) -> int:
        """Load the next chunk from the stream into the buffer.

        Returns:
            Number of bytes read; ``0`` at end of stream.

        Raises:
            SourceReadError: If the underlying read fails.
        """
        if self._eof:
            return 0
        try:
            if self._readinto is not None:
                n = self._readinto(self._buffer)
            else:
                chunk = self._stream.read(len(self._buffer))
                n = len(chunk)
                self._buffer[:n] = chunk
        except OSError as exc:
            raise SourceReadError(f"Failed to read from source: {exc}") from exc

        # Non-blocking streams may return None when no data is ready; this
        # source is blocking-only, so treat it like end of stream.
        n = n or 0
        self._pos = 0
        self._end = n
        if n == 0:
            self._eof = True
        logger.debug("Refilled buffer with %d bytes", n)
        return n

    def peek(self) -> int | None:
        """Return the next byte without consuming it, or ``None`` at end of stream."""
        if self._pos >= self._end and self.refill() == 0:
            return None
        return self._buffer[self._pos]

    def consume(self) -> int | None:
        """Return the next byte and advance past it, or ``None`` at end of stream."""
        if self._pos >= self._end and self.refill() == 0:
            return None
        byte = self._buffer[self._pos]
        self._pos += 1
        self.bytes_consumed += 1
        return byte
