"""Renderers for a single calculation result."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table

from listentotaxman.models import TaxRequest, TaxResponse
from listentotaxman.services.period import period_label

from .formatting import format_currency, format_rate, status_parts

_BRACKET_LABELS = (("0", "Basic Rate"), ("1", "Higher Rate"), ("2", "Additional"))


def render_summary(
    console: Console, response: TaxResponse, period: str, request: TaxRequest
) -> None:
    """Print the summary table; ``response`` must already be normalised."""

    status = status_parts(request)
    table = Table(
        title=(
            f"Tax Calculation for {response.tax_year} ({response.tax_region})"
            f" - {period_label(period)}"
        ),
        caption=" • ".join(status) if status else None,
        box=box.DOUBLE,
        show_header=False,
    )
    table.add_column("Field", min_width=25)
    table.add_column("Amount", justify="right", min_width=18)

    table.add_row("Gross Salary", format_currency(response.gross_pay))
    table.add_row("Taxable Pay", format_currency(response.taxable_pay))
    table.add_row("Tax Paid", format_currency(response.tax_paid))
    table.add_row("National Insurance", format_currency(response.national_insurance))
    if response.student_loan_repayment > 0:
        table.add_row("Student Loan", format_currency(response.student_loan_repayment))
    table.add_row("Pension (You)", format_currency(response.pension_you))
    table.add_row("Net Pay", format_currency(response.net_pay))

    table.add_section()
    table.add_row("Employer's NI", format_currency(response.employers_ni))
    table.add_row("Pension (HMRC)", format_currency(response.pension_hmrc))
    table.add_row("Total Cost", format_currency(response.total_cost))

    console.print(table)


def _line(console: Console, label: str, amount: float, indent: int = 2) -> None:
    console.print(
        f"{' ' * indent}{label + ':':<{21 - indent}}{format_currency(amount):>15}",
        highlight=False,
        markup=False,
    )


def render_detailed(
    console: Console, response: TaxResponse, period: str, request: TaxRequest
) -> None:
    """Print a sectioned breakdown; ``response`` must already be normalised."""

    def heading(text: str) -> None:
        console.print(text, highlight=False, markup=False)

    heading(
        f"Tax Year: {response.tax_year} ({response.tax_region}) - {period_label(period)}"
    )
    if response.tax_code:
        heading(f"Tax Code: {response.tax_code}")
    status = status_parts(request)
    if status:
        heading(f"Status: {' • '.join(status)}")
    console.print()

    heading("Income:")
    _line(console, "Gross Salary", response.gross_pay)
    if response.additional_gross > 0:
        _line(console, "Additional Gross", response.additional_gross)
    _line(console, "Tax Free Allowance", response.tax_free_allowance)
    _line(console, "Taxable Pay", response.taxable_pay)
    console.print()

    heading("Tax Breakdown:")
    for key, name in _BRACKET_LABELS:
        bracket = response.tax_due.get(key)
        if bracket is not None and bracket.amount > 0:
            _line(console, f"{name} ({format_rate(bracket.rate)})", bracket.amount)
    _line(console, "Total Tax", response.tax_paid)
    console.print()

    heading("Deductions:")
    _line(console, "National Insurance", response.national_insurance)
    if response.student_loan_repayment > 0:
        _line(console, "Student Loan", response.student_loan_repayment)
    _line(console, "Pension (You)", response.pension_you)
    _line(console, "Total Deductions", response.total_deductions)
    console.print()

    _line(console, "Net Pay", response.net_pay, indent=0)
    console.print()

    heading("Employer Costs:")
    _line(console, "Employer's NI", response.employers_ni)
    _line(console, "Pension (HMRC)", response.pension_hmrc)
    _line(console, "Total Cost", response.total_cost)

    previous = response.previous
    if previous is not None:
        console.print()
        heading(f"Previous Year ({previous.tax_year}):")
        _line(console, "Gross Salary", previous.gross_pay)
        _line(console, "Net Pay", previous.net_pay)
        _line(console, "Net Pay Change", response.net_pay - previous.net_pay)


__all__ = ["render_detailed", "render_summary"]
