"""
Readers sub-package for tabular-ingest.

Each module defines a record dataclass and the ``RecordSpec`` that builds
it from a filtered row:

  - population.py: PopulationRecord (zip code -> population).
  - property.py: PropertyRecord (zip code, market value, livable area).
  - service_request.py: ServiceRequestRecord (311 requests).

registry.py maps reader names to specs so configs can refer to them by name.
"""
