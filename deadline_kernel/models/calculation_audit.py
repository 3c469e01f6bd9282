"""
Module: deadline_kernel.models.calculation_audit
Responsibility: ORM persistence for saved deadline calculations.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/values.py only.

Invariants enforced:
    - Append-only: no UPDATE or DELETE (ORM listeners in db/immutability.py).
    - Each save creates a distinct row; there is no idempotency key.
    - The full input and the full result (including every calculation
      step) are stored, so the deadline can be explained without rerunning
      the engine against a holiday table that may since have changed.

Failure modes:
    - ImmutabilityViolationError on any UPDATE/DELETE attempt.

Audit relevance:
    This table IS the audit trail for deadlines that were relied upon.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, Date, DateTime, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from deadline_kernel.db.base import Base
from deadline_kernel.domain.values import (
    CalculationAuditRecord,
    CalculationInput,
    CalculationMethod,
    CalculationResult,
    CalculationStep,
    SkippedDetails,
    StepAction,
    TimeUnit,
)


def steps_to_json(steps: tuple[CalculationStep, ...]) -> list[dict[str, Any]]:
    return [
        {"date": s.date.isoformat(), "action": s.action.value, "reason": s.reason}
        for s in steps
    ]


def steps_from_json(data: list[dict[str, Any]] | None) -> tuple[CalculationStep, ...]:
    return tuple(
        CalculationStep(
            date=date.fromisoformat(item["date"]),
            action=StepAction(item["action"]),
            reason=item.get("reason", ""),
        )
        for item in data or ()
    )


class CalculationAuditModel(Base):
    """
    Immutable snapshot of one calculation's input and result.

    Contract:
        Rows are written once by ``AuditRecorder`` and never modified.
        ``case_id`` and ``rule_id`` are opaque references owned by the
        practice-management system.
    """

    __tablename__ = "deadline_calculations"

    __table_args__ = (
        Index("idx_calc_case", "case_id"),
        Index("idx_calc_rule", "rule_id"),
        Index("idx_calc_created", "created_at"),
    )

    # -- input snapshot --
    trigger_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    time_limit: Mapped[Decimal] = mapped_column(Numeric(18, 9), nullable=False)
    time_limit_unit: Mapped[str] = mapped_column(String(20), nullable=False)
    calculation_method: Mapped[str] = mapped_column(String(20), nullable=False)
    include_weekends: Mapped[bool] = mapped_column(Boolean, nullable=False)
    include_holidays: Mapped[bool] = mapped_column(Boolean, nullable=False)
    business_days_only: Mapped[bool] = mapped_column(Boolean, nullable=False)
    jurisdiction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    custom_rules: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # -- result snapshot --
    calculated_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    actual_days: Mapped[Decimal] = mapped_column(Numeric(18, 9), nullable=False)
    skipped_days: Mapped[int] = mapped_column(BigInteger, nullable=False)
    skipped_details: Mapped[dict] = mapped_column(JSON, nullable=False)
    calculation_steps: Mapped[list] = mapped_column(JSON, nullable=False)
    warnings: Mapped[list] = mapped_column(JSON, nullable=False)

    # -- references --
    case_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    rule_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<CalculationAudit {self.id} {self.calculation_method} -> {self.calculated_date}>"

    @classmethod
    def from_calculation(
        cls,
        calculation_input: CalculationInput,
        result: CalculationResult,
        created_at: datetime,
        case_id: str | None = None,
        rule_id: str | None = None,
    ) -> "CalculationAuditModel":
        details = result.skipped_details
        return cls(
            trigger_date=calculation_input.trigger_date,
            time_limit=Decimal(str(calculation_input.time_limit)),
            time_limit_unit=TimeUnit(calculation_input.time_limit_unit).value,
            calculation_method=CalculationMethod(calculation_input.calculation_method).value,
            include_weekends=calculation_input.include_weekends,
            include_holidays=calculation_input.include_holidays,
            business_days_only=calculation_input.business_days_only,
            jurisdiction_id=calculation_input.jurisdiction_id,
            custom_rules=dict(calculation_input.custom_rules) if calculation_input.custom_rules else None,
            calculated_date=result.calculated_date,
            actual_days=result.actual_days,
            skipped_days=result.skipped_days,
            skipped_details={
                "weekends": details.weekends,
                "holidays": details.holidays,
                "customSkipped": details.custom_skipped,
            },
            calculation_steps=steps_to_json(result.calculation_steps),
            warnings=list(result.warnings),
            case_id=case_id,
            rule_id=rule_id,
            created_at=created_at,
        )

    def to_record(self) -> CalculationAuditRecord:
        details = self.skipped_details or {}
        return CalculationAuditRecord(
            id=self.id,
            input=CalculationInput(
                trigger_date=self.trigger_date,
                time_limit=self.time_limit,
                time_limit_unit=TimeUnit(self.time_limit_unit),
                calculation_method=CalculationMethod(self.calculation_method),
                include_weekends=self.include_weekends,
                include_holidays=self.include_holidays,
                business_days_only=self.business_days_only,
                jurisdiction_id=self.jurisdiction_id,
                custom_rules=self.custom_rules,
            ),
            result=CalculationResult(
                calculated_date=self.calculated_date,
                actual_days=self.actual_days,
                skipped_days=self.skipped_days,
                skipped_details=SkippedDetails(
                    weekends=details.get("weekends", 0),
                    holidays=details.get("holidays", 0),
                    custom_skipped=details.get("customSkipped", 0),
                ),
                calculation_steps=steps_from_json(self.calculation_steps),
                warnings=tuple(self.warnings or ()),
            ),
            created_at=self.created_at,
            case_id=self.case_id,
            rule_id=self.rule_id,
        )
