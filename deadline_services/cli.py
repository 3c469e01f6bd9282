"""
Command-line deadline calculator.

Runs one calculation against an in-memory holiday store seeded with the
federal holidays of the trigger year and the years the deadline can reach,
and prints the single-calculation JSON response.

Usage:
    deadline-calc --trigger-date 2024-01-01 --time-limit 10
    deadline-calc --trigger-date 2024-11-20 --time-limit 5 --method COURT_DAYS --jurisdiction US-FED
    deadline-calc --trigger-date 2024-01-31 --time-limit 1 --unit MONTHS --config my.yaml
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

import yaml

from deadline_config import get_active_config
from deadline_engines.units import UnitConverter
from deadline_kernel.domain.repository import InMemoryDeadlineRepository
from deadline_kernel.domain.values import CalculationMethod, TimeUnit
from deadline_kernel.exceptions import DeadlineKernelError, ValidationError
from deadline_kernel.logging_config import configure_logging
from deadline_services.calculation_service import DeadlineCalculationService
from deadline_services.holiday_seeding import seed_in_memory, years_for_trigger
from deadline_services.serialization import (
    error_to_dict,
    outcome_to_response,
    parse_calculation_request,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2

# Working days per year used to size the federal holiday horizon.
_WORKING_DAYS_PER_YEAR = 250


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deadline-calc",
        description="Calculate a legal deadline from a trigger date and a time limit.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--trigger-date", required=True,
        help="Trigger date, ISO-8601 (e.g. 2024-01-01)",
    )
    parser.add_argument(
        "--time-limit", required=True, type=float,
        help="Size of the time limit (must be positive)",
    )
    parser.add_argument(
        "--unit", default=TimeUnit.DAYS.value,
        choices=[u.value for u in TimeUnit],
        help="Time limit unit (default: DAYS)",
    )
    parser.add_argument(
        "--method", default=CalculationMethod.BUSINESS_DAYS.value,
        choices=[m.value for m in CalculationMethod],
        help="Counting method (default: BUSINESS_DAYS)",
    )
    parser.add_argument(
        "--jurisdiction", default=None,
        help="Jurisdiction id; federal holidays apply to every jurisdiction",
    )
    parser.add_argument(
        "--config", default=None,
        help="Configuration YAML (default: $DEADLINE_CONFIG or packaged defaults)",
    )
    return parser


def _time_limit(value: float) -> int | float:
    return int(value) if value.is_integer() else value


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = get_active_config(args.config)
    except (FileNotFoundError, ValueError, KeyError, yaml.YAMLError) as exc:
        print(f"ERROR: Cannot load configuration: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(level=config.engine.log_level, stream=sys.stderr)

    payload = {
        "triggerDate": args.trigger_date,
        "timeLimit": _time_limit(args.time_limit),
        "timeLimitUnit": args.unit,
        "calculationMethod": args.method,
    }
    if args.jurisdiction:
        payload["jurisdictionId"] = args.jurisdiction

    try:
        request, _ = parse_calculation_request(payload)
        calculation_input = request.input

        days = UnitConverter(config.engine.month_mode).to_days(
            calculation_input.time_limit,
            calculation_input.time_limit_unit,
            anchor=calculation_input.trigger_date,
        )
        years_ahead = max(
            config.engine.federal_holiday_years_ahead,
            int(days / _WORKING_DAYS_PER_YEAR) + 1,
        )
        repository = InMemoryDeadlineRepository()
        seed_in_memory(
            repository, years_for_trigger(calculation_input.trigger_date.year, years_ahead),
        )

        outcome = DeadlineCalculationService(repository, config).calculate(calculation_input)
    except ValidationError as exc:
        print(json.dumps(error_to_dict(exc), indent=2), file=sys.stderr)
        return EXIT_INVALID_INPUT
    except DeadlineKernelError as exc:
        print(json.dumps(error_to_dict(exc), indent=2), file=sys.stderr)
        return EXIT_FAILURE

    print(json.dumps(outcome_to_response(outcome), indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
