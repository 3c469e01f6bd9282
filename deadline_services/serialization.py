"""
deadline_services.serialization -- Wire format for calculation requests and responses.

Responsibility:
    Parse camelCase JSON payloads into ``CalculationInput`` /
    ``CalculationRequest`` and render outcomes back into the JSON response
    shapes served to API and CLI callers.

Architecture position:
    Services -- boundary adapters.  Pure functions; no I/O.

Invariants enforced:
    - Every date leaves as an ISO-8601 string.
    - Day counts leave as JSON numbers (integers when integral).
    - Wire defaults: unit DAYS, method BUSINESS_DAYS, includeWeekends and
      includeHolidays true, businessDaysOnly false, save false.
    - A bulk item counts as failed when its result carries an
      ``"Error:"``-prefixed warning.

Failure modes:
    - ValidationError subclasses for malformed payloads (wrong types,
      unknown enum values, unparseable dates, out-of-range batch size).
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from deadline_kernel.domain.values import (
    CalculationAuditRecord,
    CalculationInput,
    CalculationMethod,
    CalculationResult,
    JurisdictionInfo,
    TimeUnit,
)
from deadline_kernel.exceptions import (
    BatchSizeError,
    DeadlineKernelError,
    InvalidTimeLimitError,
    InvalidTriggerDateError,
    UnsupportedMethodError,
    UnsupportedUnitError,
    ValidationError,
)
from deadline_services.calculation_service import (
    BulkCalculationReport,
    CalculationOutcome,
    CalculationRequest,
)

# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_trigger_date(value: Any) -> date:
    """Accept a date, a datetime, or an ISO-8601 date/datetime string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            if "T" in value:
                return datetime.fromisoformat(value).date()
            return date.fromisoformat(value)
        except ValueError:
            raise InvalidTriggerDateError(value) from None
    raise InvalidTriggerDateError(value)


def _parse_time_limit(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidTimeLimitError(value)
    amount = Decimal(str(value))
    if not amount.is_finite() or amount <= 0:
        raise InvalidTimeLimitError(value)
    return amount


def _parse_flag(payload: Mapping[str, Any], key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be a boolean, got {value!r}")
    return value


def _parse_optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string, got {value!r}")
    return value


def parse_calculation_input(payload: Mapping[str, Any]) -> CalculationInput:
    """
    Build a CalculationInput from a camelCase payload.

    Raises:
        ValidationError: payload is not an object or a field is malformed.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(f"Calculation payload must be an object, got {type(payload).__name__}")

    if "triggerDate" not in payload:
        raise InvalidTriggerDateError(None)
    if "timeLimit" not in payload:
        raise InvalidTimeLimitError(None)

    unit = payload.get("timeLimitUnit", TimeUnit.DAYS.value)
    try:
        unit = TimeUnit(unit)
    except ValueError:
        raise UnsupportedUnitError(unit) from None

    method = payload.get("calculationMethod", CalculationMethod.BUSINESS_DAYS.value)
    try:
        method = CalculationMethod(method)
    except ValueError:
        raise UnsupportedMethodError(method) from None

    custom_rules = payload.get("customRules")
    if custom_rules is not None and not isinstance(custom_rules, Mapping):
        raise ValidationError(f"customRules must be an object, got {custom_rules!r}")

    return CalculationInput(
        trigger_date=parse_trigger_date(payload["triggerDate"]),
        time_limit=_parse_time_limit(payload["timeLimit"]),
        time_limit_unit=unit,
        calculation_method=method,
        include_weekends=_parse_flag(payload, "includeWeekends", True),
        include_holidays=_parse_flag(payload, "includeHolidays", True),
        business_days_only=_parse_flag(payload, "businessDaysOnly", False),
        jurisdiction_id=_parse_optional_str(payload, "jurisdictionId"),
        custom_rules=custom_rules,
    )


def parse_calculation_request(payload: Mapping[str, Any]) -> tuple[CalculationRequest, bool]:
    """Parse a single-calculation request; returns the request and its save flag."""
    request = CalculationRequest(
        input=parse_calculation_input(payload),
        case_id=_parse_optional_str(payload, "caseId"),
        rule_id=_parse_optional_str(payload, "ruleId"),
    )
    return request, _parse_flag(payload, "saveCalculation", False)


def parse_bulk_request(
    payload: Mapping[str, Any],
    min_items: int = 1,
    max_items: int = 100,
) -> tuple[list[CalculationRequest], bool]:
    """
    Parse ``{calculations: [...], saveCalculations}``.

    Raises:
        BatchSizeError: fewer than ``min_items`` or more than ``max_items``.
        ValidationError: any item is malformed.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(f"Bulk payload must be an object, got {type(payload).__name__}")
    calculations = payload.get("calculations")
    if not isinstance(calculations, list):
        raise ValidationError("calculations must be a list")
    if not min_items <= len(calculations) <= max_items:
        raise BatchSizeError(len(calculations), min_items, max_items)

    requests = [parse_calculation_request(item)[0] for item in calculations]
    return requests, _parse_flag(payload, "saveCalculations", False)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _number(value: Decimal | int | float) -> int | float:
    if isinstance(value, int):
        return value
    value = Decimal(str(value))
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def input_to_dict(calculation_input: CalculationInput) -> dict[str, Any]:
    return {
        "triggerDate": _iso(calculation_input.trigger_date),
        "timeLimit": _number(calculation_input.time_limit),
        "timeLimitUnit": TimeUnit(calculation_input.time_limit_unit).value,
        "calculationMethod": CalculationMethod(calculation_input.calculation_method).value,
        "jurisdictionId": calculation_input.jurisdiction_id,
    }


def result_to_dict(result: CalculationResult) -> dict[str, Any]:
    details = result.skipped_details
    return {
        "calculatedDate": _iso(result.calculated_date),
        "actualDays": _number(result.actual_days),
        "skippedDays": result.skipped_days,
        "skippedDetails": {
            "weekends": details.weekends,
            "holidays": details.holidays,
            "customSkipped": details.custom_skipped,
        },
        "warnings": list(result.warnings),
        "calculationSteps": [
            {"date": _iso(step.date), "action": step.action.value, "reason": step.reason}
            for step in result.calculation_steps
        ],
    }


def record_to_dict(record: CalculationAuditRecord | None) -> dict[str, Any] | None:
    if record is None:
        return None
    return {"id": str(record.id), "createdAt": _iso(record.created_at)}


def jurisdiction_to_dict(info: JurisdictionInfo | None) -> dict[str, Any] | None:
    if info is None:
        return None
    return {
        "id": info.id,
        "settings": dict(info.settings),
        "businessHours": dict(info.business_hours),
        "timeZone": info.time_zone,
    }


def outcome_to_response(outcome: CalculationOutcome) -> dict[str, Any]:
    """Single-calculation response body."""
    return {
        "input": input_to_dict(outcome.input),
        "result": result_to_dict(outcome.result),
        "calculation": record_to_dict(outcome.record),
        "jurisdiction": jurisdiction_to_dict(outcome.jurisdiction),
    }


def _safe_input_to_dict(calculation_input: CalculationInput) -> dict[str, Any]:
    try:
        return input_to_dict(calculation_input)
    except (ValueError, ArithmeticError, AttributeError):
        # Malformed inputs are echoed as given.
        return {
            "triggerDate": str(calculation_input.trigger_date),
            "timeLimit": str(calculation_input.time_limit),
            "timeLimitUnit": str(calculation_input.time_limit_unit),
            "calculationMethod": str(calculation_input.calculation_method),
            "jurisdictionId": calculation_input.jurisdiction_id,
        }


def bulk_report_to_response(report: BulkCalculationReport) -> dict[str, Any]:
    """Bulk response body: per-item entries plus the success summary."""
    return {
        "calculations": [
            {
                "input": _safe_input_to_dict(outcome.input),
                "result": result_to_dict(outcome.result),
                "calculation": record_to_dict(outcome.record),
                "error": outcome.error,
            }
            for outcome in report.outcomes
        ],
        "summary": {
            "total": report.total,
            "successful": report.successful,
            "failed": report.failed,
        },
    }


def error_to_dict(exc: DeadlineKernelError) -> dict[str, Any]:
    return {"error": exc.code, "message": str(exc)}
