"""
Module: deadline_engines.deadline
Responsibility:
    Compute a legal deadline from a trigger date and a time limit, recording
    every counted and skipped day as an audit step.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Holiday catalogs are injected by the caller; the engine never loads them.

Invariants enforced:
    - ``skipped_days == weekends + holidays + custom_skipped`` for every
      result (derived from ``SkippedDetails.total``).
    - BUSINESS_DAYS and COURT_DAYS never COUNT a weekend; COURT_DAYS never
      COUNTS a court-affecting holiday.
    - CALENDAR_DAYS is never adjusted: the deadline is the trigger date plus
      the whole-day count.
    - No counting loop runs unbounded: more than ``max_consecutive_skips``
      skipped days in a row raise ``SkipLimitExceededError``.

Failure modes:
    - ValidationError subclasses for malformed input (raised before counting).
    - SkipLimitExceededError for a catalog that blocks every day.
    - CalculationError wrapping any other unexpected failure (for example a
      deadline past ``date.max``).

Audit relevance:
    The step list is the explanation a reviewer reads to verify a deadline:
    STARTING_DATE, TIME_LIMIT, one SKIPPED/COUNTED step per visited day,
    FINAL_DATE, and WEEKEND_ADJUSTMENT when the landing day was moved.
    Known limitations (unit approximation, missing holiday data) are
    reported as warnings rather than errors.

Usage:
    from datetime import date
    from deadline_engines.deadline import DeadlineEngine
    from deadline_kernel.domain.values import CalculationInput

    result = DeadlineEngine().calculate_deadline(
        CalculationInput(trigger_date=date(2024, 1, 1), time_limit=10),
    )
    result.calculated_date  # date(2024, 1, 15)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Mapping

from deadline_engines.calendar import (
    DEFAULT_MAX_CONSECUTIVE_SKIPS,
    CatalogStatus,
    DayClassifier,
    HolidayCatalog,
    WeekendAdjuster,
)
from deadline_engines.tracer import traced_engine
from deadline_engines.units import UnitConverter, coerce_unit, format_days, to_decimal
from deadline_kernel.domain.values import (
    CalculationInput,
    CalculationMethod,
    CalculationResult,
    CalculationStep,
    MonthMode,
    SkippedDetails,
    StepAction,
    TimeUnit,
)
from deadline_kernel.exceptions import (
    CalculationError,
    DeadlineKernelError,
    InvalidTimeLimitError,
    InvalidTriggerDateError,
    SkipLimitExceededError,
    UnsupportedMethodError,
)
from deadline_kernel.logging_config import get_logger

logger = get_logger("engines.deadline")

_ONE_DAY = timedelta(days=1)

CUSTOM_METHOD_WARNING = "Custom calculation method not fully implemented"
WEEKEND_ADJUSTMENT_WARNING = "Deadline fell on weekend, adjusted to next business day"
NO_JURISDICTION_WARNING = "No jurisdiction provided; court holidays were not applied"


def holiday_unavailable_warning(jurisdiction_id: str) -> str:
    return (
        f"Holiday data unavailable for jurisdiction {jurisdiction_id}; "
        "holidays were not applied"
    )


def truncation_warning(days: Decimal, whole_days: int) -> str:
    return f"Fractional day count {format_days(days)} truncated to {whole_days} calendar days"


def describe_date(day: date) -> str:
    """Human-readable date used in FINAL_DATE steps, e.g. ``Mon Jan 15 2024``."""
    return day.strftime("%a %b %d %Y")


@dataclass(frozen=True)
class ValidatedInput:
    """Normalised view of a CalculationInput after validation."""

    trigger_date: date
    time_limit: Decimal
    unit: TimeUnit
    method: CalculationMethod
    jurisdiction_id: str | None


@dataclass
class _Tally:
    """Mutable accumulator for a single calculation."""

    steps: list[CalculationStep] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    weekends: int = 0
    holidays: int = 0

    def step(self, day: date, action: StepAction, reason: str) -> None:
        self.steps.append(CalculationStep(date=day, action=action, reason=reason))

    def details(self) -> SkippedDetails:
        return SkippedDetails(weekends=self.weekends, holidays=self.holidays)


class DeadlineEngine:
    """
    Deadline calculator.

    Contract:
        ``catalogs`` maps jurisdiction ids to pre-loaded holiday catalogs.
        The engine holds no other state, so one instance may serve many
        calculations that share those catalogs.
    Guarantees:
        - ``calculate_deadline`` is deterministic for identical inputs and
          catalogs.
        - Returned results are frozen.
    Non-goals:
        - ``include_weekends``, ``include_holidays``, ``business_days_only``
          and ``custom_rules`` do not change the counting; the method does.
    """

    def __init__(
        self,
        catalogs: Mapping[str, HolidayCatalog] | None = None,
        month_mode: MonthMode = MonthMode.APPROXIMATE,
        max_consecutive_skips: int = DEFAULT_MAX_CONSECUTIVE_SKIPS,
    ):
        self.classifier = DayClassifier(catalogs)
        self.converter = UnitConverter(month_mode)
        self.adjuster = WeekendAdjuster(self.classifier, max_consecutive_skips)
        self.max_consecutive_skips = max_consecutive_skips

    @traced_engine("deadline", "1.0", fingerprint_fields=("calculation_input",))
    def calculate_deadline(self, calculation_input: CalculationInput) -> CalculationResult:
        """
        Calculate the deadline for ``calculation_input``.

        Raises:
            ValidationError: malformed input.
            CalculationError: the calculation could not complete.
        """
        validated = self.validate(calculation_input)
        try:
            result = self._calculate(validated)
        except DeadlineKernelError:
            raise
        except (OverflowError, ValueError, ArithmeticError) as exc:
            raise CalculationError(
                f"Deadline calculation failed for trigger date "
                f"{validated.trigger_date.isoformat()}: {exc}"
            ) from exc

        logger.info("deadline_calculated", extra={
            "trigger_date": validated.trigger_date.isoformat(),
            "calculated_date": result.calculated_date.isoformat(),
            "calculation_method": validated.method.value,
            "jurisdiction_id": validated.jurisdiction_id,
            "skipped_days": result.skipped_days,
            "warning_count": len(result.warnings),
        })
        return result

    def validate(self, calculation_input: CalculationInput) -> ValidatedInput:
        """Check and normalise the input fields the engine depends on."""
        trigger = calculation_input.trigger_date
        if isinstance(trigger, datetime):
            trigger = trigger.date()
        if not isinstance(trigger, date):
            raise InvalidTriggerDateError(trigger)

        if calculation_input.time_limit is None:
            raise InvalidTimeLimitError(None)
        time_limit = to_decimal(calculation_input.time_limit)
        if time_limit <= 0:
            raise InvalidTimeLimitError(calculation_input.time_limit)

        unit = coerce_unit(calculation_input.time_limit_unit)
        try:
            method = CalculationMethod(calculation_input.calculation_method)
        except ValueError:
            raise UnsupportedMethodError(calculation_input.calculation_method) from None

        return ValidatedInput(
            trigger_date=trigger,
            time_limit=time_limit,
            unit=unit,
            method=method,
            jurisdiction_id=calculation_input.jurisdiction_id or None,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _calculate(self, validated: ValidatedInput) -> CalculationResult:
        trigger = validated.trigger_date
        method = validated.method
        days = self.converter.to_days(validated.time_limit, validated.unit, anchor=trigger)

        tally = _Tally()
        approximation = self.converter.approximation_warning(
            validated.time_limit, validated.unit, anchor=trigger,
        )
        if approximation:
            tally.warnings.append(approximation)
        self._holiday_warnings(validated, tally)

        tally.step(trigger, StepAction.STARTING_DATE, "Starting from trigger date")
        tally.step(
            trigger,
            StepAction.TIME_LIMIT,
            f"Adding {format_days(validated.time_limit)} {validated.unit.value.lower()} "
            f"({format_days(days)} days)",
        )

        if method in (CalculationMethod.BUSINESS_DAYS, CalculationMethod.COURT_DAYS):
            current, actual_days = self._count_working_days(validated, days, tally)
        else:
            if method == CalculationMethod.CUSTOM:
                tally.warnings.append(CUSTOM_METHOD_WARNING)
            current, actual_days = self._add_calendar_days(trigger, days, tally)

        tally.step(current, StepAction.FINAL_DATE, f"Deadline calculated: {describe_date(current)}")

        calculated = current
        if self._needs_adjustment(current, validated):
            adjusted = self.adjuster.next_valid_day(current, validated.jurisdiction_id)
            if adjusted != current:
                tally.warnings.append(WEEKEND_ADJUSTMENT_WARNING)
                tally.step(adjusted, StepAction.WEEKEND_ADJUSTMENT, "Moved to next business day")
                calculated = adjusted

        details = tally.details()
        return CalculationResult(
            calculated_date=calculated,
            actual_days=actual_days,
            skipped_days=details.total,
            skipped_details=details,
            calculation_steps=tuple(tally.steps),
            warnings=tuple(tally.warnings),
        )

    def _holiday_warnings(self, validated: ValidatedInput, tally: _Tally) -> None:
        if validated.method == CalculationMethod.CALENDAR_DAYS:
            return
        jurisdiction_id = validated.jurisdiction_id
        if jurisdiction_id is None:
            if validated.method == CalculationMethod.COURT_DAYS:
                tally.warnings.append(NO_JURISDICTION_WARNING)
            return
        catalog = self.classifier.catalog_for(jurisdiction_id)
        if catalog is not None and catalog.status == CatalogStatus.LOAD_FAILED:
            tally.warnings.append(holiday_unavailable_warning(jurisdiction_id))

    def _add_calendar_days(
        self, trigger: date, days: Decimal, tally: _Tally,
    ) -> tuple[date, Decimal]:
        whole_days = int(days)
        if whole_days != days:
            tally.warnings.append(truncation_warning(days, whole_days))
        return trigger + timedelta(days=whole_days), days

    def _count_working_days(
        self, validated: ValidatedInput, target: Decimal, tally: _Tally,
    ) -> tuple[date, Decimal]:
        check_holidays = validated.method == CalculationMethod.COURT_DAYS
        jurisdiction_id = validated.jurisdiction_id
        target_label = format_days(target)

        current = validated.trigger_date
        counted = 0
        consecutive_skips = 0
        while counted < target:
            current += _ONE_DAY

            if self.classifier.is_weekend(current):
                reason = "Weekend"
                tally.weekends += 1
            elif check_holidays and self.classifier.is_holiday(current, jurisdiction_id):
                reason = "Holiday"
                tally.holidays += 1
            else:
                counted += 1
                consecutive_skips = 0
                tally.step(current, StepAction.COUNTED, f"Day {counted} of {target_label}")
                continue

            tally.step(current, StepAction.SKIPPED, reason)
            consecutive_skips += 1
            if consecutive_skips > self.max_consecutive_skips:
                raise SkipLimitExceededError(
                    validated.trigger_date.isoformat(),
                    self.max_consecutive_skips,
                    jurisdiction_id,
                )

        return current, Decimal(counted)

    def _needs_adjustment(self, day: date, validated: ValidatedInput) -> bool:
        if validated.method == CalculationMethod.CALENDAR_DAYS:
            return False
        if self.classifier.is_weekend(day):
            return True
        return (
            validated.method == CalculationMethod.COURT_DAYS
            and self.classifier.is_holiday(day, validated.jurisdiction_id)
        )
