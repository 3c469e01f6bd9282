"""Pure domain layer: value objects, DTOs, clock and repository port."""

from deadline_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from deadline_kernel.domain.repository import DeadlineRepository, InMemoryDeadlineRepository
from deadline_kernel.domain.values import (
    ERROR_PREFIX,
    CalculationAuditRecord,
    CalculationInput,
    CalculationMethod,
    CalculationResult,
    CalculationStep,
    HolidayRecord,
    HolidayType,
    JurisdictionInfo,
    MonthMode,
    SkippedDetails,
    StepAction,
    TimeUnit,
)

__all__ = [
    "ERROR_PREFIX",
    "CalculationAuditRecord",
    "CalculationInput",
    "CalculationMethod",
    "CalculationResult",
    "CalculationStep",
    "Clock",
    "DeadlineRepository",
    "DeterministicClock",
    "HolidayRecord",
    "HolidayType",
    "InMemoryDeadlineRepository",
    "JurisdictionInfo",
    "MonthMode",
    "SkippedDetails",
    "StepAction",
    "SystemClock",
    "TimeUnit",
]
