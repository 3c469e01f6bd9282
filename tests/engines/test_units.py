"""
Tests for the time-limit unit converter.

Covers:
- Fixed conversions for every unit
- Calendar month mode (anniversaries, end-of-month clamping)
- Approximation warnings
- Invalid quantities and units
"""

from datetime import date
from decimal import Decimal

import pytest

from deadline_engines.units import (
    UnitConverter,
    add_months,
    coerce_unit,
    format_days,
    to_decimal,
)
from deadline_kernel.domain.values import MonthMode, TimeUnit
from deadline_kernel.exceptions import InvalidTimeLimitError, UnsupportedUnitError


class TestFixedConversions:
    """Tests for the approximate (default) conversions."""

    def setup_method(self):
        self.converter = UnitConverter()

    def test_days_is_identity(self):
        assert self.converter.to_days(10, TimeUnit.DAYS) == Decimal("10")

    def test_minutes_produce_fractional_days(self):
        assert self.converter.to_days(1440, TimeUnit.MINUTES) == Decimal("1")
        assert self.converter.to_days(720, TimeUnit.MINUTES) == Decimal("0.5")

    def test_hours_produce_fractional_days(self):
        assert self.converter.to_days(12, TimeUnit.HOURS) == Decimal("0.5")
        assert self.converter.to_days(48, TimeUnit.HOURS) == Decimal("2")

    def test_weeks_multiply_by_seven(self):
        assert self.converter.to_days(2, TimeUnit.WEEKS) == Decimal("14")

    def test_months_approximate_thirty_days(self):
        assert self.converter.to_days(2, TimeUnit.MONTHS) == Decimal("60")

    def test_years_approximate_365_days(self):
        assert self.converter.to_days(1, TimeUnit.YEARS) == Decimal("365")

    def test_string_unit_accepted(self):
        assert self.converter.to_days(3, "WEEKS") == Decimal("21")

    def test_anchor_ignored_in_approximate_mode(self):
        days = self.converter.to_days(1, TimeUnit.MONTHS, anchor=date(2024, 2, 1))
        assert days == Decimal("30")


class TestCalendarMonthMode:
    """Tests for anniversary-based month and year conversion."""

    def setup_method(self):
        self.converter = UnitConverter(MonthMode.CALENDAR)

    def test_month_to_anniversary(self):
        days = self.converter.to_days(1, TimeUnit.MONTHS, anchor=date(2024, 3, 15))
        assert days == Decimal("31")

    def test_month_end_is_clamped(self):
        """Jan 31 + 1 month lands on Feb 29 in a leap year."""
        days = self.converter.to_days(1, TimeUnit.MONTHS, anchor=date(2024, 1, 31))
        assert days == Decimal("29")

    def test_leap_year_is_366_days(self):
        days = self.converter.to_days(1, TimeUnit.YEARS, anchor=date(2024, 1, 1))
        assert days == Decimal("366")

    def test_fractional_months_fall_back_to_approximation(self):
        days = self.converter.to_days(Decimal("1.5"), TimeUnit.MONTHS, anchor=date(2024, 1, 1))
        assert days == Decimal("45")

    def test_missing_anchor_falls_back_to_approximation(self):
        assert self.converter.to_days(1, TimeUnit.MONTHS) == Decimal("30")


class TestApproximationWarning:
    """Tests for the month/year approximation warning."""

    def test_months_warning(self):
        warning = UnitConverter().approximation_warning(1, TimeUnit.MONTHS)
        assert warning == "Time limit in months approximated as 30 days per month"

    def test_years_warning(self):
        warning = UnitConverter().approximation_warning(1, TimeUnit.YEARS)
        assert warning == "Time limit in years approximated as 365 days per year"

    @pytest.mark.parametrize("unit", [TimeUnit.MINUTES, TimeUnit.HOURS, TimeUnit.DAYS, TimeUnit.WEEKS])
    def test_exact_units_have_no_warning(self, unit):
        assert UnitConverter().approximation_warning(1, unit) is None

    def test_calendar_mode_with_anchor_has_no_warning(self):
        converter = UnitConverter(MonthMode.CALENDAR)
        assert converter.approximation_warning(2, TimeUnit.MONTHS, anchor=date(2024, 1, 1)) is None


class TestHelpers:
    """Tests for the module-level helpers."""

    def test_add_months_across_year_end(self):
        assert add_months(date(2023, 12, 15), 2) == date(2024, 2, 15)

    def test_add_months_clamps_to_shorter_month(self):
        assert add_months(date(2023, 3, 31), 1) == date(2023, 4, 30)

    def test_format_days_integral(self):
        assert format_days(Decimal("14.000")) == "14"

    def test_format_days_fractional(self):
        assert format_days(Decimal("1.50")) == "1.5"

    def test_to_decimal_from_float(self):
        assert to_decimal(2.5) == Decimal("2.5")

    @pytest.mark.parametrize("value", ["ten", None, True, float("nan"), float("inf")])
    def test_to_decimal_rejects_non_numbers(self, value):
        with pytest.raises(InvalidTimeLimitError):
            to_decimal(value)

    def test_coerce_unit_rejects_unknown(self):
        with pytest.raises(UnsupportedUnitError) as exc_info:
            coerce_unit("FORTNIGHTS")
        assert exc_info.value.code == "UNSUPPORTED_TIME_UNIT"
        assert exc_info.value.unit == "FORTNIGHTS"
