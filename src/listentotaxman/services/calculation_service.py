"""Submit validated scenarios to the calculation service in order.

Requests go out one at a time. The first failure stops the run, so later
scenarios are never submitted, and the error names the scenario that caused
it. Nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from listentotaxman.client import CalculationError
from listentotaxman.models import (
    ComparisonOption,
    ComparisonResult,
    TaxRequest,
    TaxResponse,
)

_LOGGER = logging.getLogger(__name__)


class Calculator(Protocol):
    """Anything able to turn a request into a response."""

    def calculate_tax(self, request: TaxRequest) -> TaxResponse: ...


class ScenarioCalculationError(CalculationError):
    """A calculation failure attributed to one labelled scenario."""

    def __init__(self, label: str | None, cause: CalculationError) -> None:
        if label is None:
            message = f"failed to calculate tax: {cause.message}"
        else:
            message = f"failed to calculate tax for option '{label}': {cause.message}"
        super().__init__(cause.category, message, status=cause.status)
        self.label = label


def calculate_single(request: TaxRequest, calculator: Calculator) -> TaxResponse:
    """Run a single, unlabelled calculation."""

    try:
        return calculator.calculate_tax(request)
    except CalculationError as exc:
        _LOGGER.debug("Calculation failed (%s): %s", exc.category, exc.message)
        raise ScenarioCalculationError(None, exc) from exc


def run_comparison(
    options: Sequence[ComparisonOption], calculator: Calculator
) -> list[ComparisonResult]:
    """Calculate every option and pair each response with its scenario."""

    results: list[ComparisonResult] = []
    for position, option in enumerate(options, start=1):
        _LOGGER.debug(
            "Submitting scenario %d/%d '%s'", position, len(options), option.label
        )
        try:
            response = calculator.calculate_tax(option.request)
        except CalculationError as exc:
            _LOGGER.debug(
                "Scenario '%s' failed (%s); skipping %d remaining",
                option.label,
                exc.category,
                len(options) - position,
            )
            raise ScenarioCalculationError(option.label, exc) from exc
        results.append(
            ComparisonResult(
                label=option.label, request=option.request, response=response
            )
        )
    return results


__all__ = [
    "Calculator",
    "ScenarioCalculationError",
    "calculate_single",
    "run_comparison",
]
