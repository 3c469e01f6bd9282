"""
Module: deadline_engines.bulk
Responsibility:
    Run many deadline calculations against one engine, isolating failures so
    that one bad item never aborts the batch.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Output has the same length and order as the input.
    - Items are processed sequentially, in input order.
    - A failing item yields a result whose only warning is
      ``"Error: <message>"``, with zero counters and no steps.

Failure modes:
    - None escape ``calculate_bulk_deadlines``; every per-item exception is
      captured in that item's result.

Usage:
    from deadline_engines.bulk import BulkCalculationCoordinator

    results = BulkCalculationCoordinator(engine).calculate_bulk_deadlines(inputs)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from deadline_engines.deadline import DeadlineEngine
from deadline_kernel.domain.values import CalculationInput, CalculationResult
from deadline_kernel.logging_config import get_logger

logger = get_logger("engines.bulk")

UNHANDLED_EXCEPTION = "UNHANDLED_EXCEPTION"


@dataclass(frozen=True)
class BulkItemOutcome:
    """Result of one item of a bulk run."""

    index: int
    input: CalculationInput
    result: CalculationResult
    error_code: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error_code is None


class BulkCalculationCoordinator:
    """Sequential bulk runner over a single ``DeadlineEngine``."""

    def __init__(self, engine: DeadlineEngine):
        self.engine = engine

    def run(self, inputs: Sequence[CalculationInput]) -> list[BulkItemOutcome]:
        """Calculate every input, keeping the failure code of failed items."""
        outcomes: list[BulkItemOutcome] = []
        failed = 0

        for index, calculation_input in enumerate(inputs):
            try:
                result = self.engine.calculate_deadline(calculation_input)
                error_code = None
            except Exception as exc:
                failed += 1
                error_code = getattr(exc, "code", UNHANDLED_EXCEPTION)
                logger.warning("bulk_item_failed", extra={
                    "item_index": index,
                    "error_code": error_code,
                    "error_message": str(exc),
                })
                result = CalculationResult.failed(
                    getattr(calculation_input, "trigger_date", None), str(exc),
                )
            outcomes.append(BulkItemOutcome(index, calculation_input, result, error_code))

        logger.info("bulk_calculation_completed", extra={
            "total_items": len(outcomes),
            "failed_items": failed,
        })
        return outcomes

    def calculate_bulk_deadlines(
        self, inputs: Sequence[CalculationInput],
    ) -> list[CalculationResult]:
        """One result per input, in input order."""
        return [outcome.result for outcome in self.run(inputs)]
