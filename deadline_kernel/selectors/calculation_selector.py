"""
Module: deadline_kernel.selectors.calculation_selector
Responsibility: Read access to saved calculations.
Architecture position: Kernel > Selectors.
"""

from uuid import UUID

from sqlalchemy import select

from deadline_kernel.domain.values import CalculationAuditRecord
from deadline_kernel.models.calculation_audit import CalculationAuditModel
from deadline_kernel.selectors.base import BaseSelector


class CalculationSelector(BaseSelector[CalculationAuditModel]):
    """Queries over saved calculations, oldest first."""

    def get(self, record_id: UUID) -> CalculationAuditRecord | None:
        row = self.session.get(CalculationAuditModel, record_id)
        return row.to_record() if row is not None else None

    def for_case(self, case_id: str) -> tuple[CalculationAuditRecord, ...]:
        rows = self.session.scalars(
            select(CalculationAuditModel)
            .where(CalculationAuditModel.case_id == case_id)
            .order_by(CalculationAuditModel.created_at)
        ).all()
        return tuple(row.to_record() for row in rows)

    def count(self) -> int:
        return len(self.session.scalars(select(CalculationAuditModel.id)).all())
