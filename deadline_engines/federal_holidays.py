"""
Module: deadline_engines.federal_holidays
Responsibility:
    Generate the fixed set of ten US federal holidays for a year, used to
    seed holiday stores.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Exactly ten holidays per year, in calendar order.
    - Dates are the statutory dates, not observed-on-weekday shifts.
    - Weekdays use ``datetime`` numbering: Monday=0 ... Sunday=6.

Usage:
    from deadline_engines.federal_holidays import holidays_for_year

    [h.name for h in holidays_for_year(2024)][-2:]
    # ["Thanksgiving", "Christmas Day"]
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable
from uuid import NAMESPACE_URL, uuid5

from deadline_kernel.domain.values import HolidayRecord, HolidayType

MONDAY = calendar.MONDAY
THURSDAY = calendar.THURSDAY


@dataclass(frozen=True)
class FederalHoliday:
    """A named federal holiday on a specific date."""

    name: str
    date: date


def nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    """Date of the ``n``-th ``weekday`` in ``month`` (1-based ``n``)."""
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset + (n - 1) * 7)


def last_weekday(year: int, month: int, weekday: int) -> date:
    """Date of the last ``weekday`` in ``month``."""
    last = date(year, month, calendar.monthrange(year, month)[1])
    offset = (last.weekday() - weekday) % 7
    return last - timedelta(days=offset)


def holidays_for_year(year: int) -> list[FederalHoliday]:
    """The ten standard federal holidays of ``year``."""
    return [
        FederalHoliday("New Year's Day", date(year, 1, 1)),
        FederalHoliday("Martin Luther King Jr. Day", nth_weekday(year, 1, MONDAY, 3)),
        FederalHoliday("Presidents' Day", nth_weekday(year, 2, MONDAY, 3)),
        FederalHoliday("Memorial Day", last_weekday(year, 5, MONDAY)),
        FederalHoliday("Independence Day", date(year, 7, 4)),
        FederalHoliday("Labor Day", nth_weekday(year, 9, MONDAY, 1)),
        FederalHoliday("Columbus Day", nth_weekday(year, 10, MONDAY, 2)),
        FederalHoliday("Veterans Day", date(year, 11, 11)),
        FederalHoliday("Thanksgiving", nth_weekday(year, 11, THURSDAY, 4)),
        FederalHoliday("Christmas Day", date(year, 12, 25)),
    ]


def holidays_for_years(years: Iterable[int]) -> list[FederalHoliday]:
    return [h for year in sorted(set(years)) for h in holidays_for_year(year)]


def as_holiday_records(years: Iterable[int]) -> list[HolidayRecord]:
    """
    Federal holidays as court-affecting ``HolidayRecord``s for seeding.

    Record ids are name-based UUIDs so regenerating a year yields the same ids.
    """
    return [
        HolidayRecord(
            id=uuid5(NAMESPACE_URL, f"federal-holiday:{h.date.isoformat()}:{h.name}"),
            date=h.date,
            name=h.name,
            type=HolidayType.FEDERAL,
            jurisdictions=frozenset(),
            affects_courts=True,
            is_active=True,
        )
        for h in holidays_for_years(years)
    ]
