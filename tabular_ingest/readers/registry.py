"""
Reader registry: maps reader names to their ``RecordSpec``.

The bundled readers are registered lazily on first lookup to avoid import
cycles. Callers can add their own with ``register_reader()``; each
registry lookup returns the same immutable spec, so sharing specs across
sessions is safe.

The registry itself is a process-wide dict and is not synchronised.
Register custom readers at import time, before any sessions start on
other threads.
"""

from __future__ import annotations

import logging

from tabular_ingest.exceptions import UnknownReaderError
from tabular_ingest.records import RecordSpec

logger = logging.getLogger(__name__)

_READERS: dict[str, RecordSpec] = {}


def _get_reader_map() -> dict[str, RecordSpec]:
    """Lazily register the bundled readers."""
    if not _READERS:
        from tabular_ingest.readers.population import POPULATION_SPEC
        from tabular_ingest.readers.property import PROPERTY_SPEC
        from tabular_ingest.readers.service_request import SERVICE_REQUEST_SPEC

        for spec in (POPULATION_SPEC, PROPERTY_SPEC, SERVICE_REQUEST_SPEC):
            _READERS.setdefault(spec.name, spec)
    return _READERS


def register_reader(spec: RecordSpec, replace: bool = False) -> None:
    """Register *spec* under ``spec.name``.

    Raises:
        ValueError: If the name is taken and *replace* is False.
    """
    readers = _get_reader_map()
    if spec.name in readers and not replace:
        raise ValueError(f"Reader '{spec.name}' is already registered")
    readers[spec.name] = spec
    logger.debug("Registered reader '%s'", spec.name)


def get_reader(name: str) -> RecordSpec:
    """Return the spec registered as *name*.

    Raises:
        UnknownReaderError: If no reader has that name.
    """
    readers = _get_reader_map()
    try:
        return readers[name]
    except KeyError:
        raise UnknownReaderError(
            f"Unknown reader '{name}'. Available readers: {sorted(readers)}"
        ) from None


def available_readers() -> list[str]:
    return sorted(_get_reader_map())
