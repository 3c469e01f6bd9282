"""
Module: deadline_kernel.selectors.holiday_selector
Responsibility: Read access to holidays and jurisdiction settings.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Only active holidays are returned.
    - A holiday is returned for a jurisdiction when it is FEDERAL or lists
      that jurisdiction.  The list membership test runs in Python so the
      same query works on PostgreSQL JSON and SQLite JSON columns.

Audit relevance:
    This is the query whose result decides which days a COURT_DAYS
    calculation skips.
"""

from sqlalchemy import select

from deadline_kernel.domain.values import HolidayRecord, JurisdictionInfo
from deadline_kernel.logging_config import get_logger
from deadline_kernel.models.holiday import HolidayModel
from deadline_kernel.models.jurisdiction import JurisdictionModel
from deadline_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.holiday")


class HolidaySelector(BaseSelector[HolidayModel]):
    """Queries over the holiday and jurisdiction tables."""

    def active_for_jurisdiction(self, jurisdiction_id: str) -> tuple[HolidayRecord, ...]:
        """Active holidays that apply to ``jurisdiction_id``, ordered by date."""
        rows = self.session.scalars(
            select(HolidayModel)
            .where(HolidayModel.is_active.is_(True))
            .order_by(HolidayModel.holiday_date, HolidayModel.name)
        ).all()

        records = tuple(
            record for record in (row.to_record() for row in rows)
            if record.applies_to(jurisdiction_id)
        )
        logger.debug("holidays_selected", extra={
            "jurisdiction_id": jurisdiction_id,
            "active_rows": len(rows),
            "applicable": len(records),
        })
        return records

    def jurisdiction(self, jurisdiction_id: str) -> JurisdictionInfo | None:
        row = self.session.scalars(
            select(JurisdictionModel).where(JurisdictionModel.code == jurisdiction_id)
        ).one_or_none()
        return row.to_info() if row is not None else None
