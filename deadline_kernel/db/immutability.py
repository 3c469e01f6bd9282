"""
ORM-Level Immutability Enforcement for saved calculations.

===============================================================================
WHY THIS EXISTS
===============================================================================

A saved deadline calculation is evidence of what the firm relied on.  It
must never be edited in place: a corrected deadline is a NEW row, and the
old row stays to show what was known at the time.

SQLAlchemy fires events before UPDATE/DELETE operations reach the database.
We register listeners that intercept these events:

    session.flush()
         |
         v
    [before_update event] --> _check_calculation_audit_update() --> ImmutabilityViolationError
         |
         v
    [before_delete event] --> _check_calculation_audit_delete() --> ImmutabilityViolationError
         |
         v
    SQL sent to database (only if checks pass)

===============================================================================
PROTECTED ENTITIES
===============================================================================

Entity                 | When Immutable         | Why
-----------------------|------------------------|--------------------------------
CalculationAuditModel  | ALWAYS (from creation) | Audit trail of relied-on deadlines

Holidays and jurisdictions are reference data and stay editable; saved
calculations carry their full step trail so later edits cannot change them.

===============================================================================
USAGE
===============================================================================

    from deadline_kernel.db.immutability import register_immutability_listeners
    register_immutability_listeners()  # Called once at startup

To temporarily disable (TESTS ONLY - never in production):

    from deadline_kernel.db.immutability import unregister_immutability_listeners
    unregister_immutability_listeners()
"""

from sqlalchemy import event

from deadline_kernel.exceptions import ImmutabilityViolationError
from deadline_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _check_calculation_audit_update(mapper, connection, target):
    """Prevent any updates to saved calculations."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "CalculationAudit",
            "entity_id": str(target.id),
            "operation": "UPDATE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="CalculationAudit",
        entity_id=str(target.id),
        reason="Saved calculations are immutable and cannot be modified",
    )


def _check_calculation_audit_delete(mapper, connection, target):
    """Prevent deletion of saved calculations."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "CalculationAudit",
            "entity_id": str(target.id),
            "operation": "DELETE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="CalculationAudit",
        entity_id=str(target.id),
        reason="Saved calculations cannot be deleted",
    )


def register_immutability_listeners():
    """
    Register all immutability enforcement event listeners.

    Idempotent: listeners already registered are not added twice.
    """
    from deadline_kernel.models.calculation_audit import CalculationAuditModel

    for event_name, listener in (
        ("before_update", _check_calculation_audit_update),
        ("before_delete", _check_calculation_audit_delete),
    ):
        if not event.contains(CalculationAuditModel, event_name, listener):
            event.listen(CalculationAuditModel, event_name, listener)


def _safe_remove_listener(target, event_name, listener_fn):
    """Remove an event listener, ignoring if not registered."""
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove immutability enforcement event listeners.

    WARNING: Only use this in tests where you need to intentionally
    violate immutability rules to verify detection.
    """
    from deadline_kernel.models.calculation_audit import CalculationAuditModel

    _safe_remove_listener(CalculationAuditModel, "before_update", _check_calculation_audit_update)
    _safe_remove_listener(CalculationAuditModel, "before_delete", _check_calculation_audit_delete)
