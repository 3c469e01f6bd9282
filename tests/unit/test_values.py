"""
Unit tests for the domain value objects.
"""

from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from deadline_kernel.domain.values import (
    CalculationInput,
    CalculationResult,
    CalculationStep,
    HolidayRecord,
    HolidayType,
    JurisdictionInfo,
    SkippedDetails,
    StepAction,
)


class TestSkippedDetails:

    def test_total_sums_every_reason(self):
        assert SkippedDetails(weekends=4, holidays=2, custom_skipped=1).total == 7

    def test_defaults_to_zero(self):
        assert SkippedDetails().total == 0


class TestCalculationResult:

    def test_failed_result(self):
        result = CalculationResult.failed(date(2024, 1, 1), "Time limit must be positive")

        assert result.calculated_date == date(2024, 1, 1)
        assert result.actual_days == Decimal(0)
        assert result.skipped_days == 0
        assert result.calculation_steps == ()
        assert result.warnings == ("Error: Time limit must be positive",)
        assert result.is_error

    def test_failed_result_without_usable_date(self):
        assert CalculationResult.failed("garbage", "bad").calculated_date is None

    def test_error_ignores_ordinary_warnings(self):
        result = CalculationResult(
            calculated_date=date(2024, 1, 15),
            actual_days=Decimal(10),
            skipped_days=0,
            skipped_details=SkippedDetails(),
            warnings=("Deadline fell on weekend, adjusted to next business day",),
        )

        assert result.error is None
        assert not result.is_error

    def test_steps_with_action(self):
        steps = (
            CalculationStep(date(2024, 1, 1), StepAction.STARTING_DATE, "Starting from trigger date"),
            CalculationStep(date(2024, 1, 2), StepAction.COUNTED, "Day 1 of 2"),
            CalculationStep(date(2024, 1, 3), StepAction.COUNTED, "Day 2 of 2"),
        )
        result = CalculationResult(
            calculated_date=date(2024, 1, 3),
            actual_days=Decimal(2),
            skipped_days=0,
            skipped_details=SkippedDetails(),
            calculation_steps=steps,
        )

        assert result.steps_with_action(StepAction.COUNTED) == steps[1:]

    def test_frozen(self):
        result = CalculationResult.failed(None, "x")

        with pytest.raises(FrozenInstanceError):
            result.skipped_days = 3


class TestHolidayRecord:

    def test_federal_applies_everywhere(self):
        record = HolidayRecord(id="h1", date=date(2024, 7, 4), name="Independence Day", type=HolidayType.FEDERAL)

        assert record.applies_to("US-CA-SF")
        assert record.applies_to("anything")

    def test_local_applies_only_where_listed(self):
        record = HolidayRecord(
            id="h2",
            date=date(2024, 3, 29),
            name="Cesar Chavez Day",
            type=HolidayType.STATE,
            jurisdictions=frozenset({"US-CA-SF"}),
        )

        assert record.applies_to("US-CA-SF")
        assert not record.applies_to("US-NY-NYC")


class TestJurisdictionInfo:

    def test_settings_are_read_only(self):
        source = {"courtName": "Superior Court"}
        info = JurisdictionInfo(id="US-CA-SF", settings=source)
        source["courtName"] = "Changed"

        assert info.settings["courtName"] == "Superior Court"
        with pytest.raises(TypeError):
            info.settings["courtName"] = "Changed"


class TestCalculationInput:

    def test_custom_rules_are_read_only(self):
        source = {"serviceByMail": True}
        calculation_input = CalculationInput(date(2024, 1, 1), 10, custom_rules=source)
        source["serviceByMail"] = False

        assert calculation_input.custom_rules == {"serviceByMail": True}
        with pytest.raises(TypeError):
            calculation_input.custom_rules["extraDays"] = 5

    def test_missing_custom_rules_stay_none(self):
        assert CalculationInput(date(2024, 1, 1), 10).custom_rules is None
