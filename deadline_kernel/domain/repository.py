"""
DeadlineRepository -- the narrow I/O port of the deadline kernel.

Responsibility:
    Declares the three operations the calculation shell needs from the
    outside world: fetch a jurisdiction's holidays, fetch its settings, and
    persist a calculation for audit.  Engines never see this port; the
    service layer turns what it returns into a ``HolidayCatalog`` before
    any counting begins.

Architecture position:
    Kernel > Domain -- interface definitions plus an in-memory
    implementation.  The SQLAlchemy implementation lives in
    ``deadline_kernel.services.sql_repository``.

Invariants enforced:
    - ``fetch_holidays`` returns only active holidays that are FEDERAL or
      list the jurisdiction.
    - ``save_audit_record`` always creates a new record (no idempotency key).

Failure modes:
    - Implementations raise ``HolidayDataUnavailableError`` (or let driver
      errors escape) when holiday data cannot be read; the catalog loader
      converts either into a LOAD_FAILED catalog.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Iterable, Sequence
from uuid import uuid4

from deadline_kernel.domain.clock import Clock, SystemClock
from deadline_kernel.domain.values import (
    CalculationAuditRecord,
    CalculationInput,
    CalculationResult,
    HolidayRecord,
    JurisdictionInfo,
)


class DeadlineRepository(ABC):
    """
    Persistence and reference-data port for deadline calculation.

    Contract:
        Implementations are called from the service layer only.  Reads may
        run on a worker thread (the catalog loader bounds them with a
        timeout), so implementations must not rely on thread-local state
        set by the caller.

        ``thread_safe`` declares whether the repository tolerates a timed-out
        read still running on its worker thread while the caller carries
        on.  When it is False the loader stops using the repository until
        that read has finished.
    """

    thread_safe: bool = False

    @abstractmethod
    def fetch_holidays(self, jurisdiction_id: str) -> Sequence[HolidayRecord]:
        """Active holidays where the jurisdiction is listed or the type is FEDERAL."""
        ...

    @abstractmethod
    def fetch_jurisdiction(self, jurisdiction_id: str) -> JurisdictionInfo | None:
        """Settings for a jurisdiction, or None if it is unknown."""
        ...

    @abstractmethod
    def save_audit_record(
        self,
        calculation_input: CalculationInput,
        result: CalculationResult,
        case_id: str | None = None,
        rule_id: str | None = None,
    ) -> CalculationAuditRecord:
        """Persist a new, immutable audit record and return it."""
        ...


class InMemoryDeadlineRepository(DeadlineRepository):
    """
    Dictionary-backed repository for tests, the CLI and local tooling.

    Guarantees:
        - Same filtering semantics as the SQL implementation.
        - Saved records are returned in insertion order by ``audit_records``.
    """

    thread_safe = True

    def __init__(
        self,
        holidays: Iterable[HolidayRecord] = (),
        jurisdictions: Iterable[JurisdictionInfo] = (),
        clock: Clock | None = None,
    ):
        self._holidays: list[HolidayRecord] = list(holidays)
        self._jurisdictions: dict[str, JurisdictionInfo] = {j.id: j for j in jurisdictions}
        self._audit_records: list[CalculationAuditRecord] = []
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()

    def add_holidays(self, holidays: Iterable[HolidayRecord]) -> int:
        """Add holidays, skipping any with the same (date, name, type). Returns the count added."""
        added = 0
        with self._lock:
            existing = {(h.date, h.name, h.type) for h in self._holidays}
            for holiday in holidays:
                key = (holiday.date, holiday.name, holiday.type)
                if key in existing:
                    continue
                self._holidays.append(holiday)
                existing.add(key)
                added += 1
        return added

    def add_jurisdiction(self, jurisdiction: JurisdictionInfo) -> None:
        with self._lock:
            self._jurisdictions[jurisdiction.id] = jurisdiction

    def fetch_holidays(self, jurisdiction_id: str) -> Sequence[HolidayRecord]:
        with self._lock:
            return tuple(
                h for h in self._holidays
                if h.is_active and h.applies_to(jurisdiction_id)
            )

    def fetch_jurisdiction(self, jurisdiction_id: str) -> JurisdictionInfo | None:
        with self._lock:
            return self._jurisdictions.get(jurisdiction_id)

    def save_audit_record(
        self,
        calculation_input: CalculationInput,
        result: CalculationResult,
        case_id: str | None = None,
        rule_id: str | None = None,
    ) -> CalculationAuditRecord:
        record = CalculationAuditRecord(
            id=uuid4(),
            input=calculation_input,
            result=result,
            created_at=self._clock.now(),
            case_id=case_id,
            rule_id=rule_id,
        )
        with self._lock:
            self._audit_records.append(record)
        return record

    @property
    def audit_records(self) -> tuple[CalculationAuditRecord, ...]:
        with self._lock:
            return tuple(self._audit_records)
