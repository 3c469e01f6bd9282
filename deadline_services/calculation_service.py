"""
deadline_services.calculation_service -- Single and bulk deadline calculation.

Responsibility:
    Compose the holiday catalog loader, the pure ``DeadlineEngine`` and the
    repository's audit writer into the two operations callers use:
    ``calculate`` for one request and ``calculate_bulk`` for a batch.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Engine settings come from ``deadline_config``; the repository and clock
    are injected.

Invariants enforced:
    - Catalogs are loaded once per distinct jurisdiction per call and shared
      by every item of a batch.
    - Bulk output has the same length and order as the input; one failing
      item (calculation or save) never aborts the batch.
    - Batch size is bounded by ``engine.bulk_min_items`` and
      ``engine.bulk_max_items``.
    - Audit records are written only when ``save`` is requested, one at a
      time in input order.

Failure modes:
    - ValidationError / CalculationError propagate from ``calculate``.
    - BatchSizeError from ``calculate_bulk`` for an out-of-range batch.
    - Save failures propagate from ``calculate``; in bulk they are logged
      and leave that item's ``record`` as None.
    - A save is skipped (``record`` None, ``calculation_save_skipped``
      logged) while a timed-out holiday fetch is still running against a
      repository that is not thread-safe.

Audit relevance:
    Every call runs inside a ``LogContext`` carrying a correlation id, so
    the engine trace, catalog warnings and ``calculation_saved`` entries of
    one request can be joined.

Usage:
    from deadline_services import DeadlineCalculationService

    service = DeadlineCalculationService(repository, config)
    outcome = service.calculate(calculation_input, save=True, case_id="CASE-1")
    outcome.result.calculated_date
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence
from uuid import uuid4

from deadline_config.schema import DeadlineConfig, EngineSettings
from deadline_engines.bulk import BulkCalculationCoordinator
from deadline_engines.calendar import HolidayCatalog
from deadline_engines.deadline import DeadlineEngine
from deadline_kernel.domain.clock import Clock, SystemClock
from deadline_kernel.domain.repository import DeadlineRepository
from deadline_kernel.domain.values import (
    CalculationAuditRecord,
    CalculationInput,
    CalculationResult,
    JurisdictionInfo,
)
from deadline_kernel.exceptions import BatchSizeError, CalculationError, DeadlineKernelError
from deadline_kernel.logging_config import LogContext, get_logger
from deadline_services.catalog_loader import HolidayCatalogLoader

logger = get_logger("services.calculation")


@dataclass(frozen=True)
class CalculationRequest:
    """One item of a bulk request: the input plus its audit references."""

    input: CalculationInput
    case_id: str | None = None
    rule_id: str | None = None


@dataclass(frozen=True)
class CalculationOutcome:
    """Result of one calculation, with its saved record when requested."""

    input: CalculationInput
    result: CalculationResult
    record: CalculationAuditRecord | None = None
    jurisdiction: JurisdictionInfo | None = None

    @property
    def error(self) -> str | None:
        return self.result.error

    @property
    def succeeded(self) -> bool:
        return not self.result.is_error


@dataclass(frozen=True)
class BulkCalculationReport:
    """Per-item outcomes of a bulk request, in input order."""

    outcomes: tuple[CalculationOutcome, ...]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def successful(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return self.total - self.successful


class DeadlineCalculationService:
    """
    Calculation entrypoint for API handlers and the CLI.

    Contract:
        Receives the repository, configuration and clock via constructor
        injection.  The only state kept between calls is the loader's
        list of abandoned holiday fetches.
    Guarantees:
        - ``calculate`` returns a frozen ``CalculationOutcome``.
        - ``calculate_bulk`` returns one outcome per request.
    Non-goals:
        - Does not commit; when the repository wraps a session the caller
          owns the transaction.
    """

    def __init__(
        self,
        repository: DeadlineRepository,
        config: DeadlineConfig | None = None,
        clock: Clock | None = None,
    ):
        self.repository = repository
        self.settings: EngineSettings = config.engine if config else EngineSettings()
        self.clock = clock or SystemClock()
        self.loader = HolidayCatalogLoader(
            repository, timeout_seconds=self.settings.holiday_fetch_timeout_seconds,
        )

    def build_engine(self, catalogs: dict[str, HolidayCatalog] | None = None) -> DeadlineEngine:
        return DeadlineEngine(
            catalogs=catalogs,
            month_mode=self.settings.month_mode,
            max_consecutive_skips=self.settings.max_consecutive_skips,
        )

    def calculate(
        self,
        calculation_input: CalculationInput,
        save: bool = False,
        case_id: str | None = None,
        rule_id: str | None = None,
    ) -> CalculationOutcome:
        """
        Calculate one deadline, optionally saving the audit record.

        Raises:
            ValidationError: malformed input.
            CalculationError: the engine could not complete.
        """
        jurisdiction_id = calculation_input.jurisdiction_id
        with LogContext.bind(
            correlation_id=str(uuid4()),
            jurisdiction_id=jurisdiction_id,
            case_id=case_id,
            rule_id=rule_id,
        ):
            catalogs = self.loader.load_many([jurisdiction_id])
            jurisdiction = self.loader.load_jurisdiction(jurisdiction_id)
            engine = self.build_engine(catalogs)

            try:
                result = engine.calculate_deadline(calculation_input)
            except DeadlineKernelError:
                raise
            except Exception as exc:
                raise CalculationError(f"Deadline calculation failed: {exc}") from exc

            record = None
            if save and self._repository_available(case_id):
                record = self.repository.save_audit_record(
                    calculation_input, result, case_id=case_id, rule_id=rule_id,
                )

            return CalculationOutcome(calculation_input, result, record, jurisdiction)

    def calculate_bulk(
        self,
        requests: Sequence[CalculationRequest | CalculationInput],
        save: bool = False,
    ) -> BulkCalculationReport:
        """
        Calculate a batch of deadlines, isolating per-item failures.

        Raises:
            BatchSizeError: batch outside the configured bounds.
        """
        items = [r if isinstance(r, CalculationRequest) else CalculationRequest(r) for r in requests]
        size = len(items)
        if not self.settings.bulk_min_items <= size <= self.settings.bulk_max_items:
            raise BatchSizeError(size, self.settings.bulk_min_items, self.settings.bulk_max_items)

        with LogContext.bind(correlation_id=str(uuid4())):
            jurisdiction_ids = [getattr(i.input, "jurisdiction_id", None) for i in items]
            catalogs = self.loader.load_many(jurisdiction_ids)
            jurisdictions = {
                jid: self.loader.load_jurisdiction(jid) for jid in catalogs
            }
            coordinator = BulkCalculationCoordinator(self.build_engine(catalogs))
            results = coordinator.calculate_bulk_deadlines([i.input for i in items])

            outcomes = []
            for index, (item, result) in enumerate(zip(items, results)):
                record = self._save_item(index, item, result) if save else None
                outcomes.append(CalculationOutcome(
                    item.input, result, record,
                    jurisdictions.get(getattr(item.input, "jurisdiction_id", None)),
                ))

            report = BulkCalculationReport(tuple(outcomes))
            logger.info("bulk_request_completed", extra={
                "total_items": report.total,
                "successful_items": report.successful,
                "failed_items": report.failed,
                "saved": save,
            })
            return report

    def _save_item(
        self, index: int, item: CalculationRequest, result: CalculationResult,
    ) -> CalculationAuditRecord | None:
        if not self._repository_available(item.case_id, index):
            return None
        try:
            return self.repository.save_audit_record(
                item.input, result, case_id=item.case_id, rule_id=item.rule_id,
            )
        except Exception as exc:
            logger.error("bulk_item_save_failed", extra={
                "item_index": index,
                "case_id": item.case_id,
                "error_message": str(exc),
            })
            return None

    def _repository_available(self, case_id: str | None, item_index: int | None = None) -> bool:
        if not self.loader.repository_busy:
            return True
        logger.error("calculation_save_skipped", extra={
            "item_index": item_index,
            "case_id": case_id,
            "reason": "holiday fetch still running",
        })
        return False
