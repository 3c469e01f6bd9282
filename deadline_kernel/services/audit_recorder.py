"""
AuditRecorder -- persists a calculation's input and result on request.

Responsibility:
    Writes one ``CalculationAuditModel`` row per call and returns the
    frozen ``CalculationAuditRecord`` DTO.

Architecture position:
    Kernel > Services -- imperative shell.  Called by
    ``SqlDeadlineRepository.save_audit_record``.

Invariants enforced:
    - Flush-only: never commits or rolls back the outer transaction.  Each
      save runs in its own SAVEPOINT, so a failed flush discards only that
      row and leaves the session usable for the next save.
    - No idempotency key: saving the same calculation twice creates two
      distinct rows.
    - ``created_at`` comes from the injected Clock.

Failure modes:
    - Driver errors (IntegrityError, OperationalError, StatementError)
      propagate to the caller after the savepoint is rolled back.

Audit relevance:
    Every save is logged with the record id, case and rule references.
"""

from sqlalchemy.orm import Session

from deadline_kernel.domain.clock import Clock, SystemClock
from deadline_kernel.domain.values import (
    CalculationAuditRecord,
    CalculationInput,
    CalculationResult,
)
from deadline_kernel.logging_config import get_logger
from deadline_kernel.models.calculation_audit import CalculationAuditModel
from deadline_kernel.services.base import BaseService

logger = get_logger("services.audit_recorder")


class AuditRecorder(BaseService[CalculationAuditModel]):
    """Append-only writer for saved calculations."""

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def save_calculation(
        self,
        calculation_input: CalculationInput,
        result: CalculationResult,
        case_id: str | None = None,
        rule_id: str | None = None,
    ) -> CalculationAuditRecord:
        """
        Persist a snapshot of ``calculation_input`` and ``result``.

        Postconditions:
            - A new row exists in the session (flushed, not committed).
            - On failure the session holds none of this call's changes.
            - The returned record mirrors the stored row.
        """
        model = CalculationAuditModel.from_calculation(
            calculation_input,
            result,
            created_at=self._clock.now(),
            case_id=case_id,
            rule_id=rule_id,
        )
        savepoint = self.session.begin_nested()
        try:
            self.session.add(model)
            self.session.flush()
        except Exception:
            savepoint.rollback()
            raise
        savepoint.commit()

        logger.info("calculation_saved", extra={
            "record_id": str(model.id),
            "case_id": case_id,
            "rule_id": rule_id,
            "calculation_method": model.calculation_method,
            "calculated_date": result.calculated_date,
            "has_error": result.is_error,
        })
        return model.to_record()
