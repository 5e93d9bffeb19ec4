"""
Header index: column name -> position in the raw row.

Built once per session from the first row the tokenizer produces and
never rebuilt afterwards. Every later row is projected through the same
index, so a column keeps the same position for the life of the session.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterator, Literal, Sequence

from tabular_ingest.exceptions import DuplicateHeaderError, EmptyStreamError
from tabular_ingest.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

DuplicatePolicy = Literal["last_wins", "reject"]

_BOM = "\ufeff"


class HeaderIndex:
    """Immutable mapping from column name to position.

    Duplicate names are resolved by *duplicates*:

    - ``"last_wins"``: the rightmost occurrence owns the name.
    - ``"reject"``: raise ``DuplicateHeaderError``.
    """

    __slots__ = ("_columns", "_positions")

    def __init__(self, names: Sequence[str], duplicates: DuplicatePolicy = "last_wins") -> None:
        positions: dict[str, int] = {}
        repeated: list[str] = []
        for i, name in enumerate(names):
            if name in positions:
                repeated.append(name)
            positions[name] = i

        if repeated:
            if duplicates == "reject":
                raise DuplicateHeaderError(
                    f"Header repeats column name(s) {sorted(set(repeated))}"
                )
            logger.warning(
                "Header repeats column name(s) %s; last occurrence wins",
                sorted(set(repeated)),
            )

        self._columns = tuple(names)
        self._positions = MappingProxyType(positions)

    @classmethod
    def from_tokenizer(
        cls,
        tokenizer: Tokenizer,
        duplicates: DuplicatePolicy = "last_wins",
        strip_names: bool = True,
    ) -> HeaderIndex:
        """Read exactly one row from *tokenizer* and index it as the header.

        A leading UTF-8 byte order mark is removed from the first name.

        Raises:
            EmptyStreamError: If the stream has no rows.
        """
        row = tokenizer.next_row()
        if row is None:
            raise EmptyStreamError("Stream is empty: no header row to read")

        row[0] = row[0].lstrip(_BOM)
        if strip_names:
            row = [name.strip() for name in row]

        header = cls(row, duplicates=duplicates)
        logger.info("Built header index with %d columns", len(header))
        return header

    @property
    def columns(self) -> tuple[str, ...]:
        """Header names in file order, duplicates included."""
        return self._columns

    def position_of(self, name: str) -> int | None:
        """Return the position of column *name*, or ``None`` if absent."""
        return self._positions.get(name)

    def as_dict(self) -> dict[str, int]:
        return dict(self._positions)

    def __contains__(self, name: object) -> bool:
        return name in self._positions

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __repr__(self) -> str:
        return f"HeaderIndex({list(self._columns)!r})"
