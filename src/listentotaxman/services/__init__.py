"""Service-layer helpers behind the listentotaxman commands."""

from .calculation_service import ScenarioCalculationError, calculate_single, run_comparison
from .defaults import default_tax_year, prepare_tax_request, resolve_tax_request
from .period import adjust_for_period, resolve_period
from .request_parser import (
    ScenarioGrammarError,
    check_scenario_count,
    parse_comparison_args,
    split_comparison_args,
)
from .response_builder import build_check_payload, build_comparison_payload
from .validation import RequestValidationError, validate_tax_request

__all__ = [
    "RequestValidationError",
    "ScenarioCalculationError",
    "ScenarioGrammarError",
    "adjust_for_period",
    "build_check_payload",
    "build_comparison_payload",
    "calculate_single",
    "check_scenario_count",
    "default_tax_year",
    "parse_comparison_args",
    "prepare_tax_request",
    "resolve_period",
    "resolve_tax_request",
    "run_comparison",
    "split_comparison_args",
    "validate_tax_request",
]
