"""
Module: deadline_engines.units
Responsibility:
    Convert a (quantity, unit) time limit into a day count.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import deadline_kernel/domain and deadline_kernel/exceptions.

Invariants enforced:
    - Decimal-only arithmetic: sub-day units produce exact-as-possible
      fractional day counts, never floats.
    - DAYS is the identity, WEEKS is x7.
    - In APPROXIMATE month mode MONTHS is x30 and YEARS is x365.  This is a
      known divergence from calendar-anniversary semantics and is always
      reported through ``approximation_warning``.

Failure modes:
    - UnsupportedUnitError for a unit outside ``TimeUnit``.
    - InvalidTimeLimitError for a quantity that is not a finite number.

Usage:
    from deadline_engines.units import UnitConverter
    from deadline_kernel.domain.values import TimeUnit

    UnitConverter().to_days(2, TimeUnit.WEEKS)  # Decimal("14")
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal, InvalidOperation

from deadline_kernel.domain.values import MonthMode, TimeUnit
from deadline_kernel.exceptions import InvalidTimeLimitError, UnsupportedUnitError

MINUTES_PER_DAY = Decimal(1440)
HOURS_PER_DAY = Decimal(24)
DAYS_PER_WEEK = Decimal(7)
APPROX_DAYS_PER_MONTH = Decimal(30)
APPROX_DAYS_PER_YEAR = Decimal(365)


def to_decimal(value: object) -> Decimal:
    """Coerce an int, float, str or Decimal quantity to a finite Decimal."""
    if isinstance(value, bool):
        raise InvalidTimeLimitError(value)
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidTimeLimitError(value) from None
    if not result.is_finite():
        raise InvalidTimeLimitError(value)
    return result


def coerce_unit(unit: object) -> TimeUnit:
    try:
        return TimeUnit(unit)
    except ValueError:
        raise UnsupportedUnitError(unit) from None


def format_days(days: Decimal) -> str:
    """Render a day count without exponent notation or trailing zeros."""
    if days == days.to_integral_value():
        return str(int(days))
    return format(days.normalize(), "f")


def add_months(anchor: date, months: int) -> date:
    """Calendar anniversary ``months`` after ``anchor``, clamped to month end."""
    year, month_index = divmod(anchor.month - 1 + months, 12)
    year += anchor.year
    month = month_index + 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class UnitConverter:
    """
    Convert time limits to days.

    Contract:
        Pure functions -- no I/O.
    Guarantees:
        - ``to_days`` is deterministic for identical arguments.
        - In CALENDAR month mode, a whole number of MONTHS or YEARS with an
          anchor date converts to the exact day distance to the calendar
          anniversary; anything else uses the fixed-size approximation.
    """

    def __init__(self, month_mode: MonthMode = MonthMode.APPROXIMATE):
        self.month_mode = MonthMode(month_mode)

    def to_days(
        self,
        quantity: Decimal | int | float | str,
        unit: TimeUnit | str,
        anchor: date | None = None,
    ) -> Decimal:
        """
        Convert ``quantity`` ``unit`` into a (possibly fractional) day count.

        Args:
            quantity: Size of the time limit.
            unit: Unit of the time limit.
            anchor: Trigger date; only consulted in CALENDAR month mode.
        """
        amount = to_decimal(quantity)
        unit = coerce_unit(unit)

        if unit == TimeUnit.MINUTES:
            return amount / MINUTES_PER_DAY
        if unit == TimeUnit.HOURS:
            return amount / HOURS_PER_DAY
        if unit == TimeUnit.DAYS:
            return amount
        if unit == TimeUnit.WEEKS:
            return amount * DAYS_PER_WEEK

        months_per_unit = 1 if unit == TimeUnit.MONTHS else 12
        if self._uses_calendar(amount, anchor):
            target = add_months(anchor, int(amount) * months_per_unit)
            return Decimal((target - anchor).days)

        if unit == TimeUnit.MONTHS:
            return amount * APPROX_DAYS_PER_MONTH
        return amount * APPROX_DAYS_PER_YEAR

    def approximation_warning(
        self,
        quantity: Decimal | int | float | str,
        unit: TimeUnit | str,
        anchor: date | None = None,
    ) -> str | None:
        """Documented-limitation warning for fixed-size MONTHS/YEARS, else None."""
        unit = coerce_unit(unit)
        if unit not in (TimeUnit.MONTHS, TimeUnit.YEARS):
            return None
        if self._uses_calendar(to_decimal(quantity), anchor):
            return None
        if unit == TimeUnit.MONTHS:
            return "Time limit in months approximated as 30 days per month"
        return "Time limit in years approximated as 365 days per year"

    def _uses_calendar(self, amount: Decimal, anchor: date | None) -> bool:
        return (
            self.month_mode == MonthMode.CALENDAR
            and anchor is not None
            and amount == amount.to_integral_value()
        )
