"""Selectors for the deadline kernel (read side)."""

from deadline_kernel.selectors.calculation_selector import CalculationSelector
from deadline_kernel.selectors.holiday_selector import HolidaySelector

__all__ = [
    "CalculationSelector",
    "HolidaySelector",
]
