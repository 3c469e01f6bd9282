"""
Typed Exception Hierarchy for the Deadline Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

A wrong deadline can mean a missed filing. Callers must be able to tell a
malformed request apart from an engine failure without parsing messages:

    try:
        result = engine.calculate_deadline(calculation_input)
    except InvalidTimeLimitError as e:
        api_response(code=e.code, time_limit=e.time_limit)
    except CalculationError as e:
        log.error(f"Calculation failed: {e.code}")

Every exception carries:
  1. A TYPED class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    DeadlineKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidTimeLimitError
    |   +-- InvalidTriggerDateError
    |   +-- UnsupportedUnitError
    |   +-- UnsupportedMethodError
    |   +-- BatchSizeError
    |
    +-- HolidayDataUnavailableError
    |
    +-- CalculationError
    |   +-- SkipLimitExceededError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                           | When Raised
----------------|--------------------------------|--------------------------------------
Validation      | INVALID_TIME_LIMIT             | time_limit missing, NaN or <= 0
                | INVALID_TRIGGER_DATE           | trigger_date missing or not a date
                | UNSUPPORTED_TIME_UNIT          | Unit outside the TimeUnit enum
                | UNSUPPORTED_CALCULATION_METHOD | Method outside CalculationMethod
                | BATCH_SIZE_OUT_OF_RANGE        | Bulk request outside 1..max items
----------------|--------------------------------|--------------------------------------
Holiday data    | HOLIDAY_DATA_UNAVAILABLE       | Holiday store failed or timed out
----------------|--------------------------------|--------------------------------------
Calculation     | CALCULATION_ERROR              | Unexpected failure in the engine
                | SKIP_LIMIT_EXCEEDED            | Too many consecutive skipped days
----------------|--------------------------------|--------------------------------------
Immutability    | IMMUTABILITY_VIOLATION         | Modifying a saved calculation

===============================================================================
HANDLING RULES
===============================================================================

- ValidationError is raised before any counting happens and is never retried.
- HolidayDataUnavailableError never fails a calculation: the catalog loader
  converts it into an empty, LOAD_FAILED catalog and the engine records a
  warning on the result.
- CalculationError propagates on the single-item path.  The bulk coordinator
  turns it into an ``"Error: <message>"`` warning for that item only.
- Weekend adjustments and unit approximations are warnings, never errors.
"""


class DeadlineKernelError(Exception):
    """
    Base exception for all deadline kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "DEADLINE_KERNEL_ERROR"


# Validation exceptions


class ValidationError(DeadlineKernelError):
    """Base exception for malformed calculation input."""

    code: str = "VALIDATION_ERROR"


class InvalidTimeLimitError(ValidationError):
    """Time limit is missing, not a number, or not strictly positive."""

    code: str = "INVALID_TIME_LIMIT"

    def __init__(self, time_limit: object):
        self.time_limit = time_limit
        super().__init__(f"Time limit must be a positive number, got {time_limit!r}")


class InvalidTriggerDateError(ValidationError):
    """Trigger date is missing or cannot be interpreted as a calendar date."""

    code: str = "INVALID_TRIGGER_DATE"

    def __init__(self, trigger_date: object):
        self.trigger_date = trigger_date
        super().__init__(f"Trigger date must be a valid date, got {trigger_date!r}")


class UnsupportedUnitError(ValidationError):
    """Time limit unit is not one of the supported units."""

    code: str = "UNSUPPORTED_TIME_UNIT"

    def __init__(self, unit: object):
        self.unit = unit
        super().__init__(f"Unsupported time limit unit: {unit!r}")


class UnsupportedMethodError(ValidationError):
    """Calculation method is not one of the supported methods."""

    code: str = "UNSUPPORTED_CALCULATION_METHOD"

    def __init__(self, method: object):
        self.method = method
        super().__init__(f"Unsupported calculation method: {method!r}")


class BatchSizeError(ValidationError):
    """Bulk request has too few or too many items."""

    code: str = "BATCH_SIZE_OUT_OF_RANGE"

    def __init__(self, size: int, minimum: int, maximum: int):
        self.size = size
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Bulk calculation requires between {minimum} and {maximum} items, got {size}"
        )


# Holiday data exceptions


class HolidayDataUnavailableError(DeadlineKernelError):
    """
    Holiday records could not be loaded for a jurisdiction.

    Never surfaces from a calculation: the loader degrades to an empty
    catalog and the engine reports the gap as a warning.
    """

    code: str = "HOLIDAY_DATA_UNAVAILABLE"

    def __init__(self, jurisdiction_id: str, reason: str):
        self.jurisdiction_id = jurisdiction_id
        self.reason = reason
        super().__init__(
            f"Holiday data unavailable for jurisdiction {jurisdiction_id}: {reason}"
        )


# Calculation exceptions


class CalculationError(DeadlineKernelError):
    """Unexpected failure inside the deadline engine."""

    code: str = "CALCULATION_ERROR"


class SkipLimitExceededError(CalculationError):
    """
    Too many consecutive days were skipped while counting or adjusting.

    Raised instead of looping forever against a holiday catalog that
    blocks every day.
    """

    code: str = "SKIP_LIMIT_EXCEEDED"

    def __init__(self, start_date: str, limit: int, jurisdiction_id: str | None):
        self.start_date = start_date
        self.limit = limit
        self.jurisdiction_id = jurisdiction_id
        super().__init__(
            f"More than {limit} consecutive non-working days after {start_date}"
            f" (jurisdiction={jurisdiction_id})"
        )


# Immutability exceptions


class ImmutabilityError(DeadlineKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """
    Attempted to modify or delete an immutable record.

    Saved calculations are append-only: a correction is a new row.
    """

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )
