"""
Module: deadline_engines.calendar
Responsibility:
    Day classification for deadline counting: the per-jurisdiction holiday
    catalog, the weekend/holiday classifier, and the adjuster that moves a
    landing date to the next working day.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Catalogs are built by the service layer and injected; nothing here
    fetches holiday data.

Invariants enforced:
    - A HolidayCatalog is read-only after construction (mapping proxy over
      tuples), so one catalog may be shared by concurrent readers.
    - Only holidays with ``affects_courts`` block a day.
    - ``WeekendAdjuster.next_valid_day`` never returns a weekend or a
      court-affecting holiday; it gives up with ``SkipLimitExceededError``
      after ``max_consecutive_skips`` blocked days.

Failure modes:
    - SkipLimitExceededError from ``next_valid_day`` against a catalog that
      blocks every day.

Audit relevance:
    ``CatalogStatus`` separates "jurisdiction has no holidays" (LOADED and
    empty) from "holiday data failed to load" (LOAD_FAILED), so the engine
    can warn instead of silently ignoring court holidays.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from deadline_kernel.domain.values import HolidayRecord
from deadline_kernel.exceptions import SkipLimitExceededError
from deadline_kernel.logging_config import get_logger

logger = get_logger("engines.calendar")

DEFAULT_MAX_CONSECUTIVE_SKIPS = 366

_ONE_DAY = timedelta(days=1)


class CatalogStatus(str, Enum):
    """How a jurisdiction's holiday catalog came to be."""

    NOT_REQUESTED = "not_requested"
    LOADED = "loaded"
    LOAD_FAILED = "load_failed"


def date_key(day: date) -> str:
    return day.isoformat()


@dataclass(frozen=True)
class HolidayCatalog:
    """
    Date-indexed holidays observed by one jurisdiction.

    Contract:
        ``by_date`` maps ISO date strings to the holidays on that date.
        Construct through ``build``, ``unavailable`` or ``not_requested``.
    Guarantees:
        - O(1) lookup per date.
        - Immutable after construction.
    """

    jurisdiction_id: str | None
    by_date: Mapping[str, tuple[HolidayRecord, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    status: CatalogStatus = CatalogStatus.LOADED
    failure_reason: str | None = None

    @classmethod
    def build(cls, jurisdiction_id: str, records: Iterable[HolidayRecord]) -> HolidayCatalog:
        """Index the active records that apply to ``jurisdiction_id``."""
        index: dict[str, list[HolidayRecord]] = {}
        for record in records:
            if not record.is_active or not record.applies_to(jurisdiction_id):
                continue
            index.setdefault(date_key(record.date), []).append(record)

        catalog = cls(
            jurisdiction_id=jurisdiction_id,
            by_date=MappingProxyType({k: tuple(v) for k, v in index.items()}),
            status=CatalogStatus.LOADED,
        )
        logger.debug("holiday_catalog_built", extra={
            "jurisdiction_id": jurisdiction_id,
            "holiday_dates": len(catalog.by_date),
        })
        return catalog

    @classmethod
    def unavailable(cls, jurisdiction_id: str, reason: str) -> HolidayCatalog:
        """Empty catalog standing in for holiday data that failed to load."""
        return cls(
            jurisdiction_id=jurisdiction_id,
            status=CatalogStatus.LOAD_FAILED,
            failure_reason=reason,
        )

    @classmethod
    def not_requested(cls) -> HolidayCatalog:
        """Empty catalog for a calculation without a jurisdiction."""
        return cls(jurisdiction_id=None, status=CatalogStatus.NOT_REQUESTED)

    @property
    def is_available(self) -> bool:
        return self.status != CatalogStatus.LOAD_FAILED

    def holidays_on(self, day: date) -> tuple[HolidayRecord, ...]:
        return self.by_date.get(date_key(day), ())

    def blocks_courts(self, day: date) -> bool:
        """True if a court-affecting holiday falls on ``day``."""
        return any(h.affects_courts for h in self.holidays_on(day))

    def __len__(self) -> int:
        return len(self.by_date)


class DayClassifier:
    """
    Classifies calendar days as weekends and/or observed holidays.

    Contract:
        ``catalogs`` maps jurisdiction ids to their catalogs.  A missing
        jurisdiction id, or one without a catalog, has no holidays.
    """

    def __init__(self, catalogs: Mapping[str, HolidayCatalog] | None = None):
        self._catalogs: Mapping[str, HolidayCatalog] = MappingProxyType(dict(catalogs or {}))

    @staticmethod
    def is_weekend(day: date) -> bool:
        """Saturday or Sunday."""
        return day.weekday() >= 5

    def is_holiday(self, day: date, jurisdiction_id: str | None) -> bool:
        """True if the jurisdiction observes a court-affecting holiday on ``day``."""
        if not jurisdiction_id:
            return False
        catalog = self._catalogs.get(jurisdiction_id)
        return catalog is not None and catalog.blocks_courts(day)

    def catalog_for(self, jurisdiction_id: str | None) -> HolidayCatalog | None:
        if not jurisdiction_id:
            return None
        return self._catalogs.get(jurisdiction_id)


class WeekendAdjuster:
    """Moves a landing date forward to the next working day."""

    def __init__(
        self,
        classifier: DayClassifier,
        max_consecutive_skips: int = DEFAULT_MAX_CONSECUTIVE_SKIPS,
    ):
        self.classifier = classifier
        self.max_consecutive_skips = max_consecutive_skips

    def is_blocked(self, day: date, jurisdiction_id: str | None) -> bool:
        return self.classifier.is_weekend(day) or self.classifier.is_holiday(day, jurisdiction_id)

    def next_valid_day(self, day: date, jurisdiction_id: str | None) -> date:
        """
        First day on or after ``day`` that is neither a weekend nor a
        court-affecting holiday of ``jurisdiction_id``.

        Raises:
            SkipLimitExceededError: more than ``max_consecutive_skips``
                blocked days in a row.
        """
        current = day
        skipped = 0
        while self.is_blocked(current, jurisdiction_id):
            skipped += 1
            if skipped > self.max_consecutive_skips:
                raise SkipLimitExceededError(
                    day.isoformat(), self.max_consecutive_skips, jurisdiction_id,
                )
            current += _ONE_DAY
        return current
