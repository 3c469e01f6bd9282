"""
deadline_services.catalog_loader -- Loads holiday catalogs with a bounded wait.

Responsibility:
    Fetch a jurisdiction's holidays through the ``DeadlineRepository`` port
    and build the pure ``HolidayCatalog`` the engine consumes.  Also loads
    jurisdiction settings for the response summary.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    The only place holiday I/O happens on the calculation path.

Invariants enforced:
    - A holiday fetch never blocks longer than ``timeout_seconds``; the fetch
      runs on a worker thread and is abandoned on timeout.
    - A failed or timed-out fetch never fails a calculation: the loader
      returns an empty LOAD_FAILED catalog and the engine reports it as a
      warning.
    - No jurisdiction id means no fetch (NOT_REQUESTED).
    - While an abandoned fetch is still running against a repository that
      is not ``thread_safe``, the loader makes no further repository calls;
      ``repository_busy`` reports this to the calculation service.

Failure modes:
    - None propagate from ``load``.  Timeouts and repository errors are
      logged as ``holiday_catalog_load_failed`` with the reason.

Audit relevance:
    The LOAD_FAILED status is carried into the result warnings, so a saved
    calculation records that holidays were not applied.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Iterable, Sequence

from deadline_engines.calendar import HolidayCatalog
from deadline_kernel.domain.repository import DeadlineRepository
from deadline_kernel.domain.values import HolidayRecord, JurisdictionInfo
from deadline_kernel.exceptions import HolidayDataUnavailableError
from deadline_kernel.logging_config import get_logger

logger = get_logger("services.catalog_loader")

DEFAULT_FETCH_TIMEOUT_SECONDS = 5.0


class HolidayCatalogLoader:
    """
    Builds holiday catalogs from a repository.

    Contract:
        Receives the repository via constructor injection.
    Guarantees:
        - ``load`` always returns a catalog.
        - ``load_many`` loads each distinct jurisdiction once.
    """

    def __init__(
        self,
        repository: DeadlineRepository,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
    ):
        self.repository = repository
        self.timeout_seconds = timeout_seconds
        self._abandoned: list[Future] = []

    @property
    def repository_busy(self) -> bool:
        """True while a timed-out fetch may still be using a non-thread-safe repository."""
        if self.repository.thread_safe:
            return False
        self._abandoned = [f for f in self._abandoned if not f.done()]
        return bool(self._abandoned)

    def load(self, jurisdiction_id: str | None) -> HolidayCatalog:
        """Catalog for ``jurisdiction_id``; NOT_REQUESTED when it is empty."""
        if not jurisdiction_id:
            return HolidayCatalog.not_requested()

        try:
            records = self._fetch_with_timeout(jurisdiction_id)
        except HolidayDataUnavailableError as exc:
            logger.warning("holiday_catalog_load_failed", extra={
                "jurisdiction_id": jurisdiction_id,
                "reason": exc.reason,
            })
            return HolidayCatalog.unavailable(jurisdiction_id, exc.reason)

        return HolidayCatalog.build(jurisdiction_id, records)

    def load_many(self, jurisdiction_ids: Iterable[str | None]) -> dict[str, HolidayCatalog]:
        """Catalogs keyed by jurisdiction id, skipping empty ids."""
        catalogs: dict[str, HolidayCatalog] = {}
        for jurisdiction_id in jurisdiction_ids:
            if jurisdiction_id and jurisdiction_id not in catalogs:
                catalogs[jurisdiction_id] = self.load(jurisdiction_id)
        return catalogs

    def load_jurisdiction(self, jurisdiction_id: str | None) -> JurisdictionInfo | None:
        """Jurisdiction settings, or None when absent or unreadable."""
        if not jurisdiction_id:
            return None
        if self.repository_busy:
            logger.warning("jurisdiction_load_skipped", extra={
                "jurisdiction_id": jurisdiction_id,
                "reason": "holiday fetch still running",
            })
            return None
        try:
            return self.repository.fetch_jurisdiction(jurisdiction_id)
        except Exception as exc:
            logger.warning("jurisdiction_load_failed", extra={
                "jurisdiction_id": jurisdiction_id,
                "reason": str(exc),
            })
            return None

    def _fetch_with_timeout(self, jurisdiction_id: str) -> Sequence[HolidayRecord]:
        if self.repository_busy:
            raise HolidayDataUnavailableError(
                jurisdiction_id, "an earlier holiday fetch is still running",
            )
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="holiday-fetch")
        try:
            future = executor.submit(self.repository.fetch_holidays, jurisdiction_id)
            return list(future.result(timeout=self.timeout_seconds))
        except FutureTimeoutError:
            self._abandoned.append(future)
            raise HolidayDataUnavailableError(
                jurisdiction_id, f"timed out after {self.timeout_seconds}s",
            ) from None
        except HolidayDataUnavailableError:
            raise
        except Exception as exc:
            raise HolidayDataUnavailableError(jurisdiction_id, str(exc)) from exc
        finally:
            # Do not wait for a fetch that has timed out.
            executor.shutdown(wait=False, cancel_futures=True)
