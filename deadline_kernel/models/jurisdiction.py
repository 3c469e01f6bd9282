"""
Module: deadline_kernel.models.jurisdiction
Responsibility: ORM persistence for the legal venues whose calendars govern
    deadline calculations.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/values.py only.

Invariants enforced:
    - code is unique; it is the jurisdiction id used by callers and listed
      in ``HolidayModel.jurisdictions``.
"""

from sqlalchemy import JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from deadline_kernel.db.base import Base
from deadline_kernel.domain.values import JurisdictionInfo


class JurisdictionModel(Base):
    """Legal venue with its settings, business hours and time zone."""

    __tablename__ = "jurisdictions"

    __table_args__ = (
        UniqueConstraint("code", name="uq_jurisdiction_code"),
    )

    code: Mapped[str] = mapped_column(String(100), nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    settings: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    business_hours: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    time_zone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<Jurisdiction {self.code}>"

    def to_info(self) -> JurisdictionInfo:
        return JurisdictionInfo(
            id=self.code,
            settings=self.settings or {},
            business_hours=self.business_hours or {},
            time_zone=self.time_zone,
        )
