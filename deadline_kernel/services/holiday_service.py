"""
HolidayService -- maintains the holiday and jurisdiction reference tables.

Responsibility:
    Seeds holiday records (typically the generated federal set) without
    creating duplicates, deactivates holidays, and registers jurisdictions.

Architecture position:
    Kernel > Services -- imperative shell.  The federal set itself is
    generated by ``deadline_engines.federal_holidays``; this service only
    stores what it is given.

Invariants enforced:
    - Flush-only: never commits or rolls back the session.
    - Seeding is idempotent on (date, name, type).
    - Holidays are deactivated, never deleted.
"""

from typing import Iterable

from sqlalchemy import select

from deadline_kernel.domain.values import HolidayRecord, JurisdictionInfo
from deadline_kernel.logging_config import get_logger
from deadline_kernel.models.holiday import HolidayModel
from deadline_kernel.models.jurisdiction import JurisdictionModel
from deadline_kernel.services.base import BaseService

logger = get_logger("services.holiday")


class HolidayService(BaseService[HolidayModel]):
    """Write-side operations on holidays and jurisdictions."""

    def seed_holidays(self, records: Iterable[HolidayRecord]) -> int:
        """
        Insert holidays that are not already stored.

        Returns:
            Number of rows inserted.
        """
        records = list(records)
        if not records:
            return 0

        dates = {r.date for r in records}
        existing = {
            (row.holiday_date, row.name, row.holiday_type)
            for row in self.session.scalars(
                select(HolidayModel).where(HolidayModel.holiday_date.in_(dates))
            )
        }

        inserted = 0
        for record in records:
            key = (record.date, record.name, record.type.value)
            if key in existing:
                continue
            self.session.add(HolidayModel(
                holiday_date=record.date,
                name=record.name,
                holiday_type=record.type.value,
                jurisdictions=sorted(record.jurisdictions),
                affects_courts=record.affects_courts,
                is_active=record.is_active,
            ))
            existing.add(key)
            inserted += 1

        self.session.flush()
        logger.info("holidays_seeded", extra={
            "offered": len(records),
            "inserted": inserted,
        })
        return inserted

    def deactivate(self, holiday_id) -> bool:
        """Mark a holiday inactive. Returns False if it does not exist."""
        row = self.session.get(HolidayModel, holiday_id)
        if row is None:
            return False
        row.is_active = False
        self.session.flush()
        logger.info("holiday_deactivated", extra={"holiday_id": str(holiday_id)})
        return True

    def register_jurisdiction(self, info: JurisdictionInfo, name: str | None = None) -> None:
        """Insert or update a jurisdiction's settings."""
        row = self.session.scalars(
            select(JurisdictionModel).where(JurisdictionModel.code == info.id)
        ).one_or_none()
        if row is None:
            row = JurisdictionModel(code=info.id, name=name or info.id)
            self.session.add(row)
        elif name is not None:
            row.name = name
        row.settings = dict(info.settings)
        row.business_hours = dict(info.business_hours)
        row.time_zone = info.time_zone
        self.session.flush()
        logger.info("jurisdiction_registered", extra={"jurisdiction_id": info.id})
