"""
Record-building contract for tabular-ingest.

A reader does not subclass anything. It hands the pipeline a
``RecordSpec``: a small bundle of three capabilities

1. ``used_columns``: which columns to keep from each row.
2. ``default_value(column)``: what to use when a row lacks a column.
3. ``build_record(row)``: turn one ``FilteredRow`` into a typed record.

Typed records are caller-defined; the only thing the pipeline looks at is
an optional boolean ``valid`` attribute.

``FilteredRow`` carries the conversion accessors (``text``, ``integer``,
``number``). They never raise: a bad value is recorded in
``row.errors`` and the supplied default is returned, so ``build_record``
just passes ``valid=row.valid`` into the record it builds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterator, Mapping, Sequence, TypeVar

from tabular_ingest.exceptions import FieldConversionError
from tabular_ingest.transforms.numbers import parse_decimal, parse_integer

R = TypeVar("R")
T = TypeVar("T")


def empty_default(column: str) -> str:
    """Default-value policy that substitutes an empty string."""
    return ""


def defaults_from_mapping(
    mapping: Mapping[str, str], fallback: str = ""
) -> Callable[[str], str]:
    """Build a default-value policy from a column -> value mapping."""
    defaults = dict(mapping)

    def default_value(column: str) -> str:
        return defaults.get(column, fallback)

    return default_value


@dataclass(frozen=True)
class RecordSpec(Generic[R]):
    """Capabilities a reader supplies to ``ExtractionPipeline``.

    Attributes:
        name: Short identifier, used by the reader registry and in logs.
        used_columns: Columns kept from each row, in the order the
            ``FilteredRow`` presents them. Must be non-empty and unique.
        build_record: Builds one record from one ``FilteredRow``.
        default_value: Value substituted when a used column is missing
            from the header or from a short row.
    """

    name: str
    used_columns: tuple[str, ...]
    build_record: Callable[[FilteredRow], R]
    default_value: Callable[[str], str] = empty_default

    def __post_init__(self) -> None:
        columns = tuple(self.used_columns)
        if not columns:
            raise ValueError(f"RecordSpec '{self.name}' declares no used columns")
        if len(set(columns)) != len(columns):
            raise ValueError(f"RecordSpec '{self.name}' repeats a used column: {columns}")
        object.__setattr__(self, "used_columns", columns)


class FilteredRow:
    """One row projected down to a RecordSpec's used columns.

    Values are addressable by position (declared order) or by column name.
    """

    __slots__ = ("_slots", "_values", "errors")

    def __init__(self, slots: Mapping[str, int], values: Sequence[str]) -> None:
        self._slots = slots
        self._values = values
        self.errors: list[FieldConversionError] = []

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self._slots)

    @property
    def valid(self) -> bool:
        """True when no conversion on this row has failed."""
        return not self.errors

    def __getitem__(self, key: int | str) -> str:
        if isinstance(key, str):
            return self._values[self._slots[key]]
        return self._values[key]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def get(self, column: str, default: str | None = None) -> str | None:
        slot = self._slots.get(column)
        return default if slot is None else self._values[slot]

    def as_dict(self) -> dict[str, str]:
        return {column: self._values[slot] for column, slot in self._slots.items()}

    def __repr__(self) -> str:
        return f"FilteredRow({self.as_dict()!r})"

    # -- Conversion accessors ------------------------------------------------

    def text(self, column: str, default: str = "", required: bool = True) -> str:
        """Return the stripped value, or *default* if blank.

        A blank required value marks the row invalid.
        """
        value = self[column].strip()
        if value:
            return value
        if required:
            self.errors.append(FieldConversionError(column, self[column], "missing value"))
        return default

    def integer(self, column: str, default: T = 0, required: bool = True) -> int | T:
        return self._convert(column, parse_integer, default, required)

    def number(self, column: str, default: T = 0.0, required: bool = True) -> float | T:
        return self._convert(column, parse_decimal, default, required)

    def convert(
        self,
        column: str,
        parse: Callable[[str, str], T],
        default: T,
        required: bool = True,
    ) -> T:
        """Apply a custom ``parse(value, column)`` that raises ``FieldConversionError``."""
        return self._convert(column, parse, default, required)

    def _convert(self, column, parse, default, required):
        value = self[column]
        if not value.strip():
            if required:
                self.errors.append(FieldConversionError(column, value, "missing value"))
            return default
        try:
            return parse(value, column)
        except FieldConversionError as exc:
            self.errors.append(exc)
            return default
