"""
Unit tests for the typed exception hierarchy.
"""

import pytest

from deadline_kernel.exceptions import (
    BatchSizeError,
    CalculationError,
    DeadlineKernelError,
    HolidayDataUnavailableError,
    ImmutabilityViolationError,
    InvalidTimeLimitError,
    InvalidTriggerDateError,
    SkipLimitExceededError,
    UnsupportedMethodError,
    UnsupportedUnitError,
    ValidationError,
)


@pytest.mark.parametrize("exc,code,parent", [
    (InvalidTimeLimitError(0), "INVALID_TIME_LIMIT", ValidationError),
    (InvalidTriggerDateError("x"), "INVALID_TRIGGER_DATE", ValidationError),
    (UnsupportedUnitError("FORTNIGHTS"), "UNSUPPORTED_TIME_UNIT", ValidationError),
    (UnsupportedMethodError("LUNAR"), "UNSUPPORTED_CALCULATION_METHOD", ValidationError),
    (BatchSizeError(0, 1, 100), "BATCH_SIZE_OUT_OF_RANGE", ValidationError),
    (HolidayDataUnavailableError("US-CA-SF", "timeout"), "HOLIDAY_DATA_UNAVAILABLE", DeadlineKernelError),
    (SkipLimitExceededError("2024-01-01", 366, None), "SKIP_LIMIT_EXCEEDED", CalculationError),
    (ImmutabilityViolationError("CalculationAudit", "1", "no"), "IMMUTABILITY_VIOLATION", DeadlineKernelError),
])
def test_codes_and_hierarchy(exc, code, parent):
    assert exc.code == code
    assert isinstance(exc, parent)
    assert isinstance(exc, DeadlineKernelError)


def test_structured_attributes():
    exc = SkipLimitExceededError("2024-01-01", 366, "US-CA-SF")

    assert exc.start_date == "2024-01-01"
    assert exc.limit == 366
    assert exc.jurisdiction_id == "US-CA-SF"
    assert "366" in str(exc)


def test_batch_size_message():
    exc = BatchSizeError(101, 1, 100)

    assert str(exc) == "Bulk calculation requires between 1 and 100 items, got 101"


def test_holiday_unavailable_keeps_reason():
    exc = HolidayDataUnavailableError("US-CA-SF", "timed out after 5.0s")

    assert exc.reason == "timed out after 5.0s"
    assert "US-CA-SF" in str(exc)
