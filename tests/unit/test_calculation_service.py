"""Unit tests for sequential scenario submission."""

from __future__ import annotations

import pytest

from listentotaxman.client import CalculationError
from listentotaxman.models import ComparisonOption, TaxRequest, TaxResponse
from listentotaxman.services.calculation_service import (
    ScenarioCalculationError,
    calculate_single,
    run_comparison,
)


class RecordingCalculator:
    def __init__(self, fail_on: int | None = None) -> None:
        self.fail_on = fail_on
        self.requests: list[TaxRequest] = []

    def calculate_tax(self, request: TaxRequest) -> TaxResponse:
        self.requests.append(request)
        if self.fail_on is not None and request.gross_wage == self.fail_on:
            raise CalculationError("status", "API returned status 500: boom", status=500)
        return TaxResponse(gross_pay=float(request.gross_wage), tax_year=2024)


def _options(*wages: int) -> list[ComparisonOption]:
    return [
        ComparisonOption(
            label=f"S{wage}", request=TaxRequest(year="2024", gross_wage=wage)
        )
        for wage in wages
    ]


def test_results_preserve_scenario_order() -> None:
    calculator = RecordingCalculator()

    results = run_comparison(_options(3, 1, 2), calculator)

    assert [result.label for result in results] == ["S3", "S1", "S2"]
    assert [result.response.gross_pay for result in results] == [3, 1, 2]
    assert results[0].request.gross_wage == 3


def test_first_failure_stops_remaining_scenarios() -> None:
    calculator = RecordingCalculator(fail_on=2)

    with pytest.raises(ScenarioCalculationError) as excinfo:
        run_comparison(_options(1, 2, 3), calculator)

    assert [request.gross_wage for request in calculator.requests] == [1, 2]
    error = excinfo.value
    assert error.label == "S2"
    assert error.category == "status"
    assert error.status == 500
    assert str(error) == (
        "failed to calculate tax for option 'S2': API returned status 500: boom"
    )


def test_single_calculation_failure_is_unlabelled() -> None:
    calculator = RecordingCalculator(fail_on=5)

    with pytest.raises(CalculationError) as excinfo:
        calculate_single(TaxRequest(year="2024", gross_wage=5), calculator)

    assert str(excinfo.value) == "failed to calculate tax: API returned status 500: boom"


def test_single_calculation_returns_response() -> None:
    response = calculate_single(
        TaxRequest(year="2024", gross_wage=9), RecordingCalculator()
    )

    assert response.gross_pay == 9
