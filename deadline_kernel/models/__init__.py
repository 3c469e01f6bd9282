"""ORM models for the deadline kernel."""

from deadline_kernel.models.calculation_audit import CalculationAuditModel
from deadline_kernel.models.holiday import HolidayModel
from deadline_kernel.models.jurisdiction import JurisdictionModel

__all__ = [
    "CalculationAuditModel",
    "HolidayModel",
    "JurisdictionModel",
]
