"""
Module: deadline_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    deadline calculation engines.  This is the canonical import surface for
    higher layers (deadline_services).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import deadline_kernel/domain, deadline_kernel/exceptions and
    deadline_kernel/logging_config (and sibling engine modules).
    MUST NOT import deadline_services or deadline_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Trigger dates and holiday catalogs are passed in explicitly.
    - Decimal-only arithmetic: day counts use ``Decimal``; floats are
      converted on entry.
    - Determinism: identical inputs and catalogs always produce identical
      results.

Failure modes:
    - ValidationError subclasses on malformed calculation input.
    - CalculationError (including SkipLimitExceededError) when a calculation
      cannot complete.

Audit relevance:
    Every deadline calculation is traced via the ``@traced_engine``
    decorator (see ``deadline_engines.tracer``), emitting
    DEADLINE_ENGINE_TRACE log records that include engine name, version,
    input fingerprint, and duration.

Usage:
    from deadline_engines import DeadlineEngine, HolidayCatalog
    from deadline_engines.federal_holidays import holidays_for_year
"""

from deadline_engines.bulk import BulkCalculationCoordinator, BulkItemOutcome
from deadline_engines.calendar import (
    DEFAULT_MAX_CONSECUTIVE_SKIPS,
    CatalogStatus,
    DayClassifier,
    HolidayCatalog,
    WeekendAdjuster,
)
from deadline_engines.deadline import DeadlineEngine
from deadline_engines.federal_holidays import (
    FederalHoliday,
    as_holiday_records,
    holidays_for_year,
    holidays_for_years,
    last_weekday,
    nth_weekday,
)
from deadline_engines.tracer import compute_input_fingerprint, traced_engine
from deadline_engines.units import UnitConverter

__all__ = [
    "BulkCalculationCoordinator",
    "BulkItemOutcome",
    "CatalogStatus",
    "DEFAULT_MAX_CONSECUTIVE_SKIPS",
    "DayClassifier",
    "DeadlineEngine",
    "FederalHoliday",
    "HolidayCatalog",
    "UnitConverter",
    "WeekendAdjuster",
    "as_holiday_records",
    "compute_input_fingerprint",
    "holidays_for_year",
    "holidays_for_years",
    "last_weekday",
    "nth_weekday",
    "traced_engine",
]
