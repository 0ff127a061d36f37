"""Side-by-side table for multi-scenario comparisons."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from listentotaxman.models import ComparisonResult, TaxResponse
from listentotaxman.services.period import period_label

from .formatting import format_currency, status_parts, truncate_label

Row = tuple[str, Callable[[TaxResponse], float]]

SUMMARY_ROWS: tuple[Row, ...] = (
    ("Gross Salary", lambda r: r.gross_pay),
    ("Tax Paid", lambda r: r.tax_paid),
    ("National Insurance", lambda r: r.national_insurance),
    ("Student Loan", lambda r: r.student_loan_repayment),
    ("Pension (You)", lambda r: r.pension_you),
    ("Net Pay", lambda r: r.net_pay),
)

VERBOSE_ROWS: tuple[Row, ...] = (
    ("Gross Salary", lambda r: r.gross_pay),
    ("Additional Gross", lambda r: r.additional_gross),
    ("Tax Free Allowance", lambda r: r.tax_free_allowance),
    ("Taxable Pay", lambda r: r.taxable_pay),
    ("Basic Rate Tax", lambda r: r.bracket_amount("0")),
    ("Higher Rate Tax", lambda r: r.bracket_amount("1")),
    ("Additional Rate Tax", lambda r: r.bracket_amount("2")),
    ("Total Tax", lambda r: r.tax_paid),
    ("National Insurance", lambda r: r.national_insurance),
    ("Student Loan", lambda r: r.student_loan_repayment),
    ("Pension (You)", lambda r: r.pension_you),
    ("Pension Claimback", lambda r: r.pension_claimback),
    ("Net Pay", lambda r: r.net_pay),
)

EMPLOYER_ROWS: tuple[Row, ...] = (
    ("Employer's NI", lambda r: r.employers_ni),
    ("Pension (HMRC)", lambda r: r.pension_hmrc),
    ("Total Cost", lambda r: r.total_cost),
)


def rows_for(verbose: bool) -> tuple[Row, ...]:
    """Return the row definitions shown above the employer cost section."""

    return VERBOSE_ROWS if verbose else SUMMARY_ROWS


def build_comparison_table(
    results: Sequence[ComparisonResult], period: str, verbose: bool = False
) -> Table:
    """Build the comparison table from results already normalised to ``period``."""

    table = Table(
        title=f"Comparison - {period_label(period)}",
        box=box.DOUBLE,
        show_header=True,
    )
    table.add_column("Field", min_width=20)
    for result in results:
        table.add_column(
            Text(truncate_label(result.label)), justify="right", min_width=12
        )

    statuses = ["•".join(status_parts(result.request, short=True)) for result in results]
    if any(statuses):
        table.add_row("Status", *statuses)
        table.add_section()

    for name, extract in rows_for(verbose):
        table.add_row(name, *(format_currency(extract(r.response)) for r in results))

    table.add_section()
    for name, extract in EMPLOYER_ROWS:
        table.add_row(name, *(format_currency(extract(r.response)) for r in results))

    return table


def render_comparison(
    console: Console,
    results: Sequence[ComparisonResult],
    period: str,
    verbose: bool = False,
) -> None:
    console.print(build_comparison_table(results, period, verbose))


__all__ = [
    "EMPLOYER_ROWS",
    "SUMMARY_ROWS",
    "VERBOSE_ROWS",
    "build_comparison_table",
    "render_comparison",
    "rows_for",
]
