"""
Module: deadline_kernel.models.holiday
Responsibility: ORM persistence for observed holidays used by court-day counting.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/values.py only.

Invariants enforced:
    - (date, name, holiday_type) is unique, so seeding the federal set for a
      year twice cannot double-count a holiday.
    - Only rows with is_active=True are ever read into a HolidayCatalog.

Audit relevance:
    A COURT_DAYS deadline is only as correct as this table.  Deactivating a
    holiday (is_active=False) is preferred over deleting it so earlier
    calculations stay explainable.
"""

from datetime import date

from sqlalchemy import JSON, Boolean, Date, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from deadline_kernel.db.base import Base
from deadline_kernel.domain.values import HolidayRecord, HolidayType


class HolidayModel(Base):
    """
    Holiday observed by one or more jurisdictions.

    Contract:
        FEDERAL holidays apply to every jurisdiction regardless of the
        ``jurisdictions`` list; all other types apply only to the listed
        jurisdiction ids.
    """

    __tablename__ = "holidays"

    __table_args__ = (
        UniqueConstraint("holiday_date", "name", "holiday_type", name="uq_holiday_date_name_type"),
        Index("idx_holiday_date", "holiday_date"),
        Index("idx_holiday_active", "is_active"),
    )

    holiday_date: Mapped[date] = mapped_column(Date, nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    holiday_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=HolidayType.CUSTOM.value,
    )

    # List of jurisdiction codes; ignored for FEDERAL rows
    jurisdictions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    affects_courts: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Holiday {self.holiday_date.isoformat()} {self.name} ({self.holiday_type})>"

    def to_record(self) -> HolidayRecord:
        return HolidayRecord(
            id=self.id,
            date=self.holiday_date,
            name=self.name,
            type=HolidayType(self.holiday_type),
            jurisdictions=frozenset(self.jurisdictions or ()),
            affects_courts=self.affects_courts,
            is_active=self.is_active,
        )
