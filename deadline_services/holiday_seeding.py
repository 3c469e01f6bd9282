"""
deadline_services.holiday_seeding -- Seeds holiday stores with federal holidays.

Responsibility:
    Bridge the pure federal holiday generator (``deadline_engines``) and the
    holiday stores: the SQL tables via ``HolidayService`` and the in-memory
    repository used by tests and the CLI.

Architecture position:
    Services -- the kernel's HolidayService cannot import engines, so the
    generator and the store meet here.

Invariants enforced:
    - Seeding is idempotent: re-seeding a year inserts nothing.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from sqlalchemy.orm import Session

from deadline_engines.federal_holidays import as_holiday_records
from deadline_kernel.domain.repository import InMemoryDeadlineRepository
from deadline_kernel.logging_config import get_logger
from deadline_kernel.services.holiday_service import HolidayService

logger = get_logger("services.holiday_seeding")


def years_for_trigger(trigger_year: int, years_ahead: int) -> range:
    """The trigger year and the ``years_ahead`` years after it, capped at ``date.max``."""
    return range(trigger_year, min(trigger_year + years_ahead, date.max.year) + 1)


class HolidaySeedService:
    """Seeds the SQL holiday table with generated federal holidays."""

    def __init__(self, session: Session):
        self._holidays = HolidayService(session)

    def seed_federal_holidays(self, years: Iterable[int]) -> int:
        """Insert missing federal holidays for ``years``; returns rows inserted."""
        return self._holidays.seed_holidays(as_holiday_records(years))


def seed_in_memory(repository: InMemoryDeadlineRepository, years: Iterable[int]) -> int:
    """Add missing federal holidays for ``years`` to an in-memory repository."""
    years = list(years)
    added = repository.add_holidays(as_holiday_records(years))
    logger.debug("in_memory_holidays_seeded", extra={
        "years": years,
        "inserted": added,
    })
    return added
