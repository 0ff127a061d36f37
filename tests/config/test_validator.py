"""Tests for the configuration validator and its report."""

from __future__ import annotations

from pathlib import Path

from listentotaxman.config.schema import ConfigDefaults
from listentotaxman.config.validator import report, validate_defaults


def test_built_in_defaults_are_valid() -> None:
    assert validate_defaults(ConfigDefaults()) == []


def test_validator_flags_unknown_period_and_plan() -> None:
    errors = validate_defaults(
        ConfigDefaults(period="fortnightly", **{"student-loan": "plan9"})
    )

    assert any(error.startswith("defaults.period:") for error in errors)
    assert any(
        error.startswith("defaults.student-loan:") and "plan9" in error
        for error in errors
    )


def test_validator_flags_year_and_partner_income() -> None:
    errors = validate_defaults(ConfigDefaults(year="24", **{"partner-income": 5000}))

    assert "defaults.year: '24' is not a 4-digit year" in errors
    assert any("defaults.married is true" in error for error in errors)


def test_validator_flags_ignored_income() -> None:
    errors = validate_defaults(ConfigDefaults(income=40000))

    assert any(error.startswith("defaults.income: is ignored") for error in errors)


def test_report_for_missing_file(isolated_config: Path, capsys) -> None:
    assert report() == 0
    assert "not found; built-in defaults apply" in capsys.readouterr().out


def test_report_lists_issues(isolated_config: Path, capsys) -> None:
    isolated_config.write_text("defaults:\n  period: fortnightly\n", encoding="utf-8")

    assert report() == 1
    output = capsys.readouterr().out
    assert "1 issue(s) detected:" in output
    assert "  - defaults.period:" in output


def test_report_ok(isolated_config: Path, capsys) -> None:
    isolated_config.write_text("defaults:\n  period: weekly\n", encoding="utf-8")

    assert report() == 0
    assert capsys.readouterr().out.strip().endswith("OK")


def test_report_load_failure(isolated_config: Path, capsys) -> None:
    isolated_config.write_text("defaults: [\n", encoding="utf-8")

    assert report() == 1
    assert "failed to load configuration" in capsys.readouterr().out
