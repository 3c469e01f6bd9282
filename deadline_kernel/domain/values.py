"""
Values -- Pure domain value objects and DTOs for deadline calculation.

Responsibility:
    Defines the closed enumerations (units, methods, step actions, holiday
    types) and the immutable data structures that flow through a
    calculation: CalculationInput (request), CalculationStep and
    CalculationResult (engine output), HolidayRecord and JurisdictionInfo
    (reference data), CalculationAuditRecord (persistence boundary).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Free of ORM dependencies.  ``from_model()`` converters live in the
    selectors/services that own the ORM boundary.

Invariants enforced:
    - ``SkippedDetails.total`` is the only way to derive ``skipped_days``,
      so ``skipped_days == weekends + holidays + custom_skipped`` holds by
      construction for every engine result.
    - All DTOs are frozen; sequences are tuples and mappings are
      read-only proxies.

Failure modes:
    - None at construction.  CalculationInput deliberately accepts
      malformed values so the bulk coordinator can report them per item;
      validation belongs to the engine.

Audit relevance:
    CalculationResult.calculation_steps IS the audit trail of a deadline:
    every counted or skipped day, with the reason, in date order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping
from uuid import UUID

ERROR_PREFIX = "Error:"


class TimeUnit(str, Enum):
    """Unit in which a time limit is expressed."""

    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"
    WEEKS = "WEEKS"
    MONTHS = "MONTHS"
    YEARS = "YEARS"


class CalculationMethod(str, Enum):
    """Counting method applied to a time limit."""

    CALENDAR_DAYS = "CALENDAR_DAYS"
    BUSINESS_DAYS = "BUSINESS_DAYS"
    COURT_DAYS = "COURT_DAYS"
    CUSTOM = "CUSTOM"


class StepAction(str, Enum):
    """Kind of entry recorded in a calculation's audit trail."""

    STARTING_DATE = "STARTING_DATE"
    TIME_LIMIT = "TIME_LIMIT"
    SKIPPED = "SKIPPED"
    COUNTED = "COUNTED"
    FINAL_DATE = "FINAL_DATE"
    WEEKEND_ADJUSTMENT = "WEEKEND_ADJUSTMENT"


class HolidayType(str, Enum):
    """Origin of a holiday record."""

    FEDERAL = "FEDERAL"
    STATE = "STATE"
    COURT = "COURT"
    CUSTOM = "CUSTOM"


class MonthMode(str, Enum):
    """How MONTHS and YEARS are converted into days."""

    APPROXIMATE = "approximate"  # 30 / 365 days
    CALENDAR = "calendar"  # calendar anniversary of the trigger date


def _freeze_mapping(data: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class CalculationInput:
    """
    A single deadline request.

    Contract:
        Built per request and discarded afterwards.  Field values are not
        checked here; ``DeadlineEngine`` validates them in step 1 so that a
        malformed item inside a batch still produces a per-item result.

    Non-goals:
        - ``include_weekends``, ``include_holidays`` and
          ``business_days_only`` are advisory: the counting method alone
          decides which days are skipped.
        - ``custom_rules`` is carried opaquely for the audit trail.
    """

    trigger_date: date
    time_limit: Decimal | int
    time_limit_unit: TimeUnit = TimeUnit.DAYS
    calculation_method: CalculationMethod = CalculationMethod.BUSINESS_DAYS
    include_weekends: bool = True
    include_holidays: bool = True
    business_days_only: bool = False
    jurisdiction_id: str | None = None
    custom_rules: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if isinstance(self.custom_rules, Mapping):
            object.__setattr__(self, "custom_rules", _freeze_mapping(self.custom_rules))


@dataclass(frozen=True)
class CalculationStep:
    """One entry in the audit trail of a calculation."""

    date: date
    action: StepAction
    reason: str


@dataclass(frozen=True)
class SkippedDetails:
    """Per-reason counters of days skipped while counting."""

    weekends: int = 0
    holidays: int = 0
    custom_skipped: int = 0

    @property
    def total(self) -> int:
        return self.weekends + self.holidays + self.custom_skipped


@dataclass(frozen=True)
class CalculationResult:
    """
    Outcome of one deadline calculation.

    Contract:
        Frozen snapshot produced by ``DeadlineEngine`` (or by the bulk
        coordinator for a failed item).
    Guarantees:
        - ``skipped_days == skipped_details.total``.
        - ``calculation_steps`` and ``warnings`` keep insertion order.
    """

    calculated_date: date | None
    actual_days: Decimal
    skipped_days: int
    skipped_details: SkippedDetails
    calculation_steps: tuple[CalculationStep, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def error(self) -> str | None:
        """The first ``"Error:"``-prefixed warning, if any."""
        for warning in self.warnings:
            if warning.startswith(ERROR_PREFIX):
                return warning
        return None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def steps_with_action(self, action: StepAction) -> tuple[CalculationStep, ...]:
        return tuple(s for s in self.calculation_steps if s.action == action)

    @classmethod
    def failed(cls, trigger_date: Any, message: str) -> CalculationResult:
        """Result substituted for an item that raised during a bulk run."""
        return cls(
            calculated_date=trigger_date if isinstance(trigger_date, date) else None,
            actual_days=Decimal(0),
            skipped_days=0,
            skipped_details=SkippedDetails(),
            calculation_steps=(),
            warnings=(f"{ERROR_PREFIX} {message}",),
        )


@dataclass(frozen=True)
class HolidayRecord:
    """An observed holiday as stored in the holiday store."""

    id: UUID | str
    date: date
    name: str
    type: HolidayType
    jurisdictions: frozenset[str] = frozenset()
    affects_courts: bool = True
    is_active: bool = True

    def applies_to(self, jurisdiction_id: str) -> bool:
        """Federal holidays apply everywhere; others only where listed."""
        return self.type == HolidayType.FEDERAL or jurisdiction_id in self.jurisdictions


@dataclass(frozen=True)
class JurisdictionInfo:
    """Settings of the legal venue governing a calculation."""

    id: str
    settings: Mapping[str, Any] = field(default_factory=lambda: _freeze_mapping(None))
    business_hours: Mapping[str, Any] = field(default_factory=lambda: _freeze_mapping(None))
    time_zone: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings", _freeze_mapping(self.settings))
        object.__setattr__(self, "business_hours", _freeze_mapping(self.business_hours))


@dataclass(frozen=True)
class CalculationAuditRecord:
    """Immutable snapshot of a saved calculation."""

    id: UUID
    input: CalculationInput
    result: CalculationResult
    created_at: datetime
    case_id: str | None = None
    rule_id: str | None = None
