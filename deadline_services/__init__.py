"""
deadline_services -- Package init and public API.

Responsibility:
    Stateful orchestration that composes the pure deadline engines
    (deadline_engines/) with repositories, configuration and wall-clock
    time.  This is the **only** layer that loads holiday data on the
    calculation path or decides when to persist an audit record.

Architecture position:
    Services -- stateful orchestration over engines + kernel.

    Dependency direction:
        deadline_services/ -> deadline_engines/  (allowed)
        deadline_services/ -> deadline_kernel/   (allowed)
        deadline_services/ -> deadline_config/   (allowed)
        deadline_engines/  -> deadline_services/ (FORBIDDEN)
        deadline_kernel/   -> deadline_services/ (FORBIDDEN)

Invariants enforced:
    - Layer isolation: deadline_kernel and deadline_engines must never
      import from this package.
    - DI transparency: repositories and clocks are injected; no service
      self-constructs its storage.

Audit relevance:
    - This package is the canonical import surface for external consumers.
"""

from deadline_kernel.logging_config import get_logger

logger = get_logger("services")

from deadline_services.calculation_service import (
    BulkCalculationReport,
    CalculationOutcome,
    CalculationRequest,
    DeadlineCalculationService,
)
from deadline_services.catalog_loader import HolidayCatalogLoader
from deadline_services.holiday_seeding import HolidaySeedService, seed_in_memory

__all__ = [
    "BulkCalculationReport",
    "CalculationOutcome",
    "CalculationRequest",
    "DeadlineCalculationService",
    "HolidayCatalogLoader",
    "HolidaySeedService",
    "seed_in_memory",
]
