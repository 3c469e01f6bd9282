"""
SqlDeadlineRepository -- DeadlineRepository over a SQLAlchemy session.

Responsibility:
    Adapts the read selectors and the AuditRecorder to the narrow
    ``DeadlineRepository`` port used by the calculation service.

Architecture position:
    Kernel > Services -- imperative shell.

Invariants enforced:
    - Flush-only writes (via AuditRecorder).
    - Driver errors during holiday reads are re-raised as
      ``HolidayDataUnavailableError`` so the loader can degrade cleanly.
"""

from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from deadline_kernel.domain.clock import Clock
from deadline_kernel.domain.repository import DeadlineRepository
from deadline_kernel.domain.values import (
    CalculationAuditRecord,
    CalculationInput,
    CalculationResult,
    HolidayRecord,
    JurisdictionInfo,
)
from deadline_kernel.exceptions import HolidayDataUnavailableError
from deadline_kernel.selectors.holiday_selector import HolidaySelector
from deadline_kernel.services.audit_recorder import AuditRecorder


class SqlDeadlineRepository(DeadlineRepository):
    """
    Contract:
        The caller owns ``session`` and its transaction.  Because the
        catalog loader may call ``fetch_holidays`` from a worker thread,
        pass a session that is not used concurrently elsewhere.  The
        repository is not ``thread_safe``: after a timed-out holiday read
        the service leaves the session alone until that read returns.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self.session = session
        self._holidays = HolidaySelector(session)
        self._recorder = AuditRecorder(session, clock)

    def fetch_holidays(self, jurisdiction_id: str) -> Sequence[HolidayRecord]:
        try:
            return self._holidays.active_for_jurisdiction(jurisdiction_id)
        except SQLAlchemyError as exc:
            raise HolidayDataUnavailableError(jurisdiction_id, str(exc)) from exc

    def fetch_jurisdiction(self, jurisdiction_id: str) -> JurisdictionInfo | None:
        return self._holidays.jurisdiction(jurisdiction_id)

    def save_audit_record(
        self,
        calculation_input: CalculationInput,
        result: CalculationResult,
        case_id: str | None = None,
        rule_id: str | None = None,
    ) -> CalculationAuditRecord:
        return self._recorder.save_calculation(calculation_input, result, case_id, rule_id)
