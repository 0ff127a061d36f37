"""Utilities for validating the configuration file and surfacing issues."""

from __future__ import annotations

from pathlib import Path

from listentotaxman.services.period import PERIODS
from listentotaxman.services.validation import validate_student_loan_plan

from .loader import default_config_path, load_config
from .schema import ConfigDefaults, ConfigurationError


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_year(year: str) -> list[str]:
    if not year:
        return []
    if len(year) != 4 or not year.isdigit():
        return [_format_scope("defaults.year", f"'{year}' is not a 4-digit year")]
    return []


def _validate_partner_income(defaults: ConfigDefaults) -> list[str]:
    errors: list[str] = []
    if defaults.partner_income < 0:
        errors.append(_format_scope("defaults.partner-income", "cannot be negative"))
    elif defaults.partner_income > 0 and not defaults.married:
        errors.append(
            _format_scope(
                "defaults.partner-income",
                "is only applied when defaults.married is true",
            )
        )
    return errors


def validate_defaults(defaults: ConfigDefaults) -> list[str]:
    """Return a list of issues found in the configured defaults."""

    errors: list[str] = []

    if defaults.period and defaults.period not in PERIODS:
        errors.append(
            _format_scope(
                "defaults.period",
                f"'{defaults.period}' must be one of: {', '.join(PERIODS)}",
            )
        )

    plan_error = validate_student_loan_plan(defaults.student_loan)
    if plan_error:
        errors.append(_format_scope("defaults.student-loan", plan_error))

    errors.extend(_validate_year(defaults.year))
    errors.extend(_validate_partner_income(defaults))

    if defaults.income:
        errors.append(
            _format_scope(
                "defaults.income",
                "is ignored; income must be passed with --income on every calculation",
            )
        )

    return errors


def report(path: Path | None = None) -> int:
    """Print a validation report for the configuration file; return an exit code."""

    config_file = path or default_config_path()
    if not config_file.exists():
        print(f"[{config_file}] not found; built-in defaults apply")
        return 0

    try:
        configuration = load_config(config_file)
    except ConfigurationError as error:
        print(f"[{config_file}] failed to load configuration: {error}")
        return 1

    issues = validate_defaults(configuration.defaults)
    if issues:
        print(f"[{config_file}] {len(issues)} issue(s) detected:")
        for issue in issues:
            print(f"  - {issue}")
        return 1

    print(f"[{config_file}] OK")
    return 0


__all__ = ["report", "validate_defaults"]
