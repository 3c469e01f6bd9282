"""
Tests for the HolidayCatalogLoader.

Covers:
- Loading from the in-memory repository
- NOT_REQUESTED without a jurisdiction
- Degradation to LOAD_FAILED on repository errors and timeouts
- Jurisdiction settings lookup
"""

import threading
import time
from datetime import date

from deadline_engines.calendar import CatalogStatus
from deadline_kernel.domain.repository import InMemoryDeadlineRepository
from deadline_kernel.exceptions import HolidayDataUnavailableError
from deadline_services.catalog_loader import HolidayCatalogLoader

from tests.conftest import TEST_JURISDICTION


class FailingRepository(InMemoryDeadlineRepository):
    def __init__(self, exc: Exception):
        super().__init__()
        self.exc = exc

    def fetch_holidays(self, jurisdiction_id):
        raise self.exc

    def fetch_jurisdiction(self, jurisdiction_id):
        raise self.exc


class BlockingRepository(InMemoryDeadlineRepository):
    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def fetch_holidays(self, jurisdiction_id):
        self.release.wait(timeout=5)
        return ()


class SharedSessionRepository(BlockingRepository):
    thread_safe = False


class TestLoad:
    """Tests for HolidayCatalogLoader.load."""

    def test_loads_catalog(self, repository):
        catalog = HolidayCatalogLoader(repository).load(TEST_JURISDICTION)

        assert catalog.status == CatalogStatus.LOADED
        assert catalog.jurisdiction_id == TEST_JURISDICTION
        assert catalog.blocks_courts(date(2024, 12, 25))

    def test_no_jurisdiction_is_not_requested(self, repository):
        assert HolidayCatalogLoader(repository).load(None).status == CatalogStatus.NOT_REQUESTED
        assert HolidayCatalogLoader(repository).load("").status == CatalogStatus.NOT_REQUESTED

    def test_repository_error_degrades(self, captured_logs):
        loader = HolidayCatalogLoader(FailingRepository(RuntimeError("connection refused")))

        catalog = loader.load(TEST_JURISDICTION)

        assert catalog.status == CatalogStatus.LOAD_FAILED
        assert catalog.failure_reason == "connection refused"
        failures = [r for r in captured_logs() if r["message"] == "holiday_catalog_load_failed"]
        assert failures[0]["jurisdiction_id"] == TEST_JURISDICTION

    def test_holiday_data_unavailable_keeps_reason(self):
        repo = FailingRepository(HolidayDataUnavailableError(TEST_JURISDICTION, "table missing"))

        catalog = HolidayCatalogLoader(repo).load(TEST_JURISDICTION)

        assert catalog.failure_reason == "table missing"

    def test_timeout_degrades(self):
        repo = BlockingRepository()
        try:
            catalog = HolidayCatalogLoader(repo, timeout_seconds=0.05).load(TEST_JURISDICTION)
        finally:
            repo.release.set()

        assert catalog.status == CatalogStatus.LOAD_FAILED
        assert "timed out" in catalog.failure_reason

    def test_thread_safe_repository_never_busy(self):
        repo = BlockingRepository()
        loader = HolidayCatalogLoader(repo, timeout_seconds=0.05)
        try:
            loader.load(TEST_JURISDICTION)
            assert not loader.repository_busy
        finally:
            repo.release.set()

    def test_stalled_fetch_blocks_further_repository_calls(self):
        repo = SharedSessionRepository()
        loader = HolidayCatalogLoader(repo, timeout_seconds=0.05)
        try:
            loader.load(TEST_JURISDICTION)

            assert loader.repository_busy
            assert loader.load_jurisdiction(TEST_JURISDICTION) is None
            assert "still running" in loader.load(TEST_JURISDICTION).failure_reason
        finally:
            repo.release.set()

        deadline = time.monotonic() + 5
        while loader.repository_busy and time.monotonic() < deadline:
            time.sleep(0.01)
        assert not loader.repository_busy
        assert loader.load(TEST_JURISDICTION).status == CatalogStatus.LOADED


class TestLoadMany:
    """Tests for HolidayCatalogLoader.load_many."""

    def test_each_jurisdiction_loaded_once(self, repository):
        calls = []
        original = repository.fetch_holidays

        def counting_fetch(jurisdiction_id):
            calls.append(jurisdiction_id)
            return original(jurisdiction_id)

        repository.fetch_holidays = counting_fetch
        catalogs = HolidayCatalogLoader(repository).load_many(
            [TEST_JURISDICTION, None, "US-NY", TEST_JURISDICTION],
        )

        assert sorted(catalogs) == sorted(["US-NY", TEST_JURISDICTION])
        assert sorted(calls) == sorted(["US-NY", TEST_JURISDICTION])


class TestLoadJurisdiction:
    """Tests for HolidayCatalogLoader.load_jurisdiction."""

    def test_known_jurisdiction(self, repository):
        info = HolidayCatalogLoader(repository).load_jurisdiction(TEST_JURISDICTION)

        assert info.time_zone == "America/Los_Angeles"
        assert info.settings["courtName"] == "Superior Court"

    def test_unknown_and_missing(self, repository):
        loader = HolidayCatalogLoader(repository)

        assert loader.load_jurisdiction("US-NY") is None
        assert loader.load_jurisdiction(None) is None

    def test_error_yields_none(self):
        loader = HolidayCatalogLoader(FailingRepository(RuntimeError("down")))

        assert loader.load_jurisdiction(TEST_JURISDICTION) is None
