"""Command-line entry point for the listentotaxman client."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Callable, Sequence
from typing import Final

from rich.console import Console

from listentotaxman.client import CalculationError, TaxCalculatorClient
from listentotaxman.config import validator as config_validator
from listentotaxman.config.loader import load_defaults
from listentotaxman.display import render_comparison, render_detailed, render_summary
from listentotaxman.models import ComparisonResult
from listentotaxman.services import (
    adjust_for_period,
    build_check_payload,
    build_comparison_payload,
    calculate_single,
    check_scenario_count,
    prepare_tax_request,
    resolve_period,
    run_comparison,
    split_comparison_args,
)
from listentotaxman.services.defaults import Clock
from listentotaxman.services.request_parser import COMMAND, build_comparison_options
from listentotaxman.services.response_builder import dumps
from listentotaxman.version import get_project_version

PROG: Final = "listentotaxman"
LOG_LEVEL_ENV: Final = "LISTENTOTAXMAN_LOG_LEVEL"

ClientFactory = Callable[[], TaxCalculatorClient]

_LOGGER = logging.getLogger(__name__)

# argparse destination -> flag name understood by the resolver
_CHECK_FLAG_NAMES: Final = {
    "year": "year",
    "region": "region",
    "age": "age",
    "pension": "pension",
    "income": "income",
    "student_loan": "student-loan",
    "extra": "extra",
    "tax_code": "tax-code",
    "married": "married",
    "blind": "blind",
    "no_ni": "no-ni",
    "partner_income": "partner-income",
}

COMPARE_HELP: Final = f"""\
usage: {PROG} compare [--period PERIOD] [--json] [--verbose]
         --option LABEL --income AMOUNT [flags]
         --option LABEL --income AMOUNT [flags] ...

Compare tax calculations across job offers, salary levels or pension
contributions. Each --option group is one scenario and accepts the per-option
flags below. Between 2 and 4 options are required.

global flags (apply to all options):
  --period PERIOD       yearly, monthly, weekly, daily or hourly
  --json                output a JSON comparison object
  --verbose             show the detailed breakdown including tax brackets

per-option flags (use after each --option):
  --income INT          gross annual salary (required)
  --year YEAR           tax year (defaults to the current tax year)
  --region REGION       tax region (default: uk, alias: england)
  --age AGE             age (default: 0)
  --pension VALUE       pension contribution, e.g. 3% or 3000
  --student-loan PLAN   plan1, plan2, plan4, postgraduate or scottish
  --extra INT           extra income or deductions
  --tax-code CODE       tax code, e.g. 1257L
  --married             married status (enables marriage allowance)
  --blind               blind person's allowance
  --no-ni               exempt from National Insurance
  --partner-income INT  partner's gross wage (requires --married)

--married, --blind and --no-ni may be followed by a value: true, yes, y or 1
enable the switch, any other value (e.g. false or no) disables it and overrides
the configuration file.

A flag value may not itself start with "--"; such a value is read as the
next flag.

example:
  {PROG} compare --period monthly \\
    --option "Current Job" --income 100000 --pension 3% \\
    --option "New Offer" --income 120000 --pension 5%
"""


def _configure_logging() -> None:
    level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _add_check_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--income", help="Gross annual salary (required)")
    parser.add_argument("--year", help="Tax year (defaults to current tax year)")
    parser.add_argument("--region", help="Tax region (default: uk)")
    parser.add_argument("--age", help="Age (default: 0)")
    parser.add_argument("--pension", help="Pension contribution (e.g., 3%% or 3000)")
    parser.add_argument(
        "--student-loan",
        help="Student loan plan (plan1, plan2, plan4, postgraduate, scottish)",
    )
    parser.add_argument("--extra", help="Extra income/deductions")
    parser.add_argument("--tax-code", help="Tax code (e.g., 1257L, K12)")
    parser.add_argument(
        "--married",
        action="store_true",
        default=None,
        help="Married status (enables marriage allowance)",
    )
    parser.add_argument(
        "--blind", action="store_true", default=None, help="Blind person's allowance"
    )
    parser.add_argument(
        "--no-ni",
        action="store_true",
        default=None,
        help="Exempt from National Insurance",
    )
    parser.add_argument(
        "--partner-income", help="Partner's gross wage (requires --married)"
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--verbose", action="store_true", help="Show detailed breakdown"
    )
    parser.add_argument(
        "--period",
        help="Display period (yearly, monthly, weekly, daily, hourly) (default: yearly)",
    )


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Calculate UK tax and national insurance using the listentotaxman.com API."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    check = subparsers.add_parser(
        "check",
        help="Check tax calculation for a given salary",
        description="Calculate UK tax and national insurance for a given salary.",
    )
    _add_check_arguments(check)

    subparsers.add_parser(
        COMMAND,
        help="Compare tax calculations across multiple scenarios",
        add_help=False,
    )
    subparsers.add_parser("version", help="Print the version number")
    subparsers.add_parser(
        "config", help="Validate the configuration file and report issues"
    )
    return parser


def check_flags_from_namespace(args: argparse.Namespace) -> dict[str, str]:
    """Convert parsed ``check`` arguments into resolver flag names and values."""

    flags: dict[str, str] = {}
    for attribute, name in _CHECK_FLAG_NAMES.items():
        value = getattr(args, attribute, None)
        if value is None or value == "":
            continue
        flags[name] = "true" if value is True else str(value)
    return flags


def run_check(
    args: argparse.Namespace,
    *,
    client_factory: ClientFactory,
    console: Console,
    clock: Clock | None = None,
) -> int:
    defaults = load_defaults()
    request = prepare_tax_request(check_flags_from_namespace(args), defaults, clock=clock)
    period = resolve_period(args.period, defaults)

    with client_factory() as calculator:
        response = calculate_single(request, calculator)

    adjusted = adjust_for_period(response, period)
    if args.json:
        print(dumps(build_check_payload(adjusted)))
    elif args.verbose:
        render_detailed(console, adjusted, period, request)
    else:
        render_summary(console, adjusted, period, request)
    return 0


def run_compare(
    argv: Sequence[str],
    *,
    client_factory: ClientFactory,
    console: Console,
    clock: Clock | None = None,
) -> int:
    """Run the compare command; ``argv`` includes the program and command tokens."""

    if any(token in ("-h", "--help") for token in argv):
        print(COMPARE_HELP, end="")
        return 0

    defaults = load_defaults()
    parsed = split_comparison_args(argv)
    check_scenario_count(len(parsed.scenarios))
    options = build_comparison_options(parsed.scenarios, defaults, clock=clock)
    period = resolve_period(parsed.period, defaults)

    _LOGGER.debug("Comparing %d scenarios per %s", len(options), period)
    with client_factory() as calculator:
        results = run_comparison(options, calculator)

    normalised = [
        ComparisonResult(
            label=result.label,
            request=result.request,
            response=adjust_for_period(result.response, period),
        )
        for result in results
    ]
    if parsed.json_output:
        print(dumps(build_comparison_payload(normalised, period)))
    else:
        render_comparison(console, normalised, period, parsed.verbose)
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    client_factory: ClientFactory | None = None,
    console: Console | None = None,
    clock: Clock | None = None,
) -> int:
    """Entry point for the ``listentotaxman`` console script."""

    _configure_logging()
    arguments = list(sys.argv[1:] if argv is None else argv)
    factory = client_factory or TaxCalculatorClient
    output = console or Console()

    try:
        if arguments and arguments[0] == COMMAND:
            return run_compare(
                [PROG, *arguments], client_factory=factory, console=output, clock=clock
            )

        parser = _build_argument_parser()
        args = parser.parse_args(arguments)

        if args.command == "check":
            return run_check(args, client_factory=factory, console=output, clock=clock)
        if args.command == "version":
            print(f"{PROG} version {get_project_version()}")
            return 0
        if args.command == "config":
            return config_validator.report()
    except (ValueError, CalculationError) as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1

    parser.print_help()  # pragma: no cover - subcommand is required
    return 1  # pragma: no cover


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
