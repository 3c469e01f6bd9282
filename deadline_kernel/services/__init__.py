"""Services for the deadline kernel (write side)."""

from deadline_kernel.services.audit_recorder import AuditRecorder
from deadline_kernel.services.holiday_service import HolidayService
from deadline_kernel.services.sql_repository import SqlDeadlineRepository

__all__ = [
    "AuditRecorder",
    "HolidayService",
    "SqlDeadlineRepository",
]
