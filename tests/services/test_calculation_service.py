"""
Tests for the DeadlineCalculationService.

Covers:
- Single calculations with catalog and jurisdiction loading
- Optional saving of audit records
- Configuration wiring (month mode, skip ceiling, batch bounds)
- Bulk calculations: isolation, saving, summary counts
- Error wrapping and log correlation
"""

from datetime import date

import pytest

from deadline_config.schema import DeadlineConfig, EngineSettings
from deadline_engines.deadline import DeadlineEngine
from deadline_kernel.domain.values import (
    CalculationInput,
    CalculationMethod,
    MonthMode,
    TimeUnit,
)
from deadline_kernel.exceptions import (
    BatchSizeError,
    CalculationError,
    InvalidTimeLimitError,
    SkipLimitExceededError,
)
from deadline_services.calculation_service import (
    CalculationRequest,
    DeadlineCalculationService,
)

from tests.conftest import FIXED_NOW, TEST_JURISDICTION


def court_input(**overrides) -> CalculationInput:
    fields = dict(
        trigger_date=date(2024, 1, 1),
        time_limit=10,
        calculation_method=CalculationMethod.COURT_DAYS,
        jurisdiction_id=TEST_JURISDICTION,
    )
    fields.update(overrides)
    return CalculationInput(**fields)


def config_with(**engine_settings) -> DeadlineConfig:
    return DeadlineConfig(config_id="test", version=1, engine=EngineSettings(**engine_settings))


@pytest.fixture
def service(repository, deterministic_clock):
    return DeadlineCalculationService(repository, clock=deterministic_clock)


class TestCalculate:
    """Tests for single calculations."""

    def test_court_days_use_repository_holidays(self, service):
        outcome = service.calculate(court_input())

        assert outcome.result.calculated_date == date(2024, 1, 16)
        assert outcome.result.skipped_details.holidays == 1
        assert outcome.record is None
        assert outcome.succeeded

    def test_jurisdiction_summary(self, service):
        outcome = service.calculate(court_input())

        assert outcome.jurisdiction.id == TEST_JURISDICTION
        assert outcome.jurisdiction.time_zone == "America/Los_Angeles"

    def test_without_jurisdiction(self, service):
        outcome = service.calculate(court_input(
            jurisdiction_id=None, calculation_method=CalculationMethod.BUSINESS_DAYS,
        ))

        assert outcome.result.calculated_date == date(2024, 1, 15)
        assert outcome.jurisdiction is None

    def test_save_creates_record(self, service, repository):
        outcome = service.calculate(court_input(), save=True, case_id="CASE-7", rule_id="FRCP-12")

        assert outcome.record is not None
        assert outcome.record.case_id == "CASE-7"
        assert outcome.record.rule_id == "FRCP-12"
        assert outcome.record.created_at == FIXED_NOW
        assert outcome.record.result == outcome.result
        assert repository.audit_records == (outcome.record,)

    def test_repeated_saves_are_distinct(self, service, repository):
        first = service.calculate(court_input(), save=True)
        second = service.calculate(court_input(), save=True)

        assert first.record.id != second.record.id
        assert len(repository.audit_records) == 2

    def test_validation_error_propagates_and_nothing_is_saved(self, service, repository):
        with pytest.raises(InvalidTimeLimitError):
            service.calculate(court_input(time_limit=0), save=True)

        assert repository.audit_records == ()

    def test_unexpected_error_is_wrapped(self, service, monkeypatch):
        class ExplodingEngine(DeadlineEngine):
            def calculate_deadline(self, calculation_input):
                raise RuntimeError("boom")

        monkeypatch.setattr(service, "build_engine", lambda catalogs=None: ExplodingEngine())

        with pytest.raises(CalculationError, match="boom"):
            service.calculate(court_input())

    def test_logs_carry_correlation(self, service, captured_logs):
        service.calculate(court_input(), case_id="CASE-7")

        calculated = [r for r in captured_logs() if r["message"] == "deadline_calculated"][0]
        assert calculated["jurisdiction_id"] == TEST_JURISDICTION
        assert calculated["case_id"] == "CASE-7"
        assert calculated["correlation_id"]


class TestConfiguration:
    """Tests for engine settings flowing from configuration."""

    def test_calendar_month_mode(self, repository):
        service = DeadlineCalculationService(repository, config_with(month_mode=MonthMode.CALENDAR))

        outcome = service.calculate(CalculationInput(
            trigger_date=date(2024, 1, 31),
            time_limit=1,
            time_limit_unit=TimeUnit.MONTHS,
            calculation_method=CalculationMethod.CALENDAR_DAYS,
        ))

        assert outcome.result.calculated_date == date(2024, 2, 29)

    def test_skip_ceiling(self, repository):
        service = DeadlineCalculationService(repository, config_with(max_consecutive_skips=1))

        with pytest.raises(SkipLimitExceededError):
            service.calculate(court_input(trigger_date=date(2024, 1, 5), time_limit=1))

    def test_batch_bounds(self, repository):
        service = DeadlineCalculationService(repository, config_with(bulk_max_items=2))

        with pytest.raises(BatchSizeError) as exc_info:
            service.calculate_bulk([court_input()] * 3)

        assert exc_info.value.maximum == 2
        assert exc_info.value.size == 3


class TestCalculateBulk:
    """Tests for bulk calculations."""

    def test_isolates_bad_items(self, service):
        report = service.calculate_bulk([
            court_input(),
            court_input(time_limit=0),
            court_input(calculation_method=CalculationMethod.CALENDAR_DAYS),
        ])

        assert report.total == 3
        assert report.successful == 2
        assert report.failed == 1
        assert report.outcomes[1].error.startswith("Error:")
        assert report.outcomes[0].result.calculated_date == date(2024, 1, 16)
        assert report.outcomes[2].result.calculated_date == date(2024, 1, 11)

    def test_accepts_requests_with_references(self, service, repository):
        report = service.calculate_bulk([
            CalculationRequest(court_input(), case_id="CASE-1", rule_id="R-1"),
            CalculationRequest(court_input(time_limit=3), case_id="CASE-2"),
        ], save=True)

        assert [o.record.case_id for o in report.outcomes] == ["CASE-1", "CASE-2"]
        assert len(repository.audit_records) == 2

    def test_not_saved_by_default(self, service, repository):
        report = service.calculate_bulk([court_input()])

        assert report.outcomes[0].record is None
        assert repository.audit_records == ()

    def test_failed_save_only_affects_that_item(self, service, repository, captured_logs):
        original = repository.save_audit_record

        def flaky_save(calculation_input, result, case_id=None, rule_id=None):
            if case_id == "BROKEN":
                raise RuntimeError("disk full")
            return original(calculation_input, result, case_id=case_id, rule_id=rule_id)

        repository.save_audit_record = flaky_save
        report = service.calculate_bulk([
            CalculationRequest(court_input(), case_id="OK-1"),
            CalculationRequest(court_input(), case_id="BROKEN"),
            CalculationRequest(court_input(), case_id="OK-2"),
        ], save=True)

        assert [o.record is not None for o in report.outcomes] == [True, False, True]
        assert report.successful == 3
        errors = [r for r in captured_logs() if r["message"] == "bulk_item_save_failed"]
        assert errors[0]["item_index"] == 1

    def test_empty_batch_rejected(self, service):
        with pytest.raises(BatchSizeError):
            service.calculate_bulk([])

    def test_default_upper_bound(self, service):
        with pytest.raises(BatchSizeError):
            service.calculate_bulk([court_input()] * 101)

    def test_jurisdictions_loaded_once(self, service, repository):
        calls = []
        original = repository.fetch_holidays

        def counting_fetch(jurisdiction_id):
            calls.append(jurisdiction_id)
            return original(jurisdiction_id)

        repository.fetch_holidays = counting_fetch
        service.calculate_bulk([court_input()] * 5)

        assert calls == [TEST_JURISDICTION]
