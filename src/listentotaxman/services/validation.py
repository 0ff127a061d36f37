"""Structural and cross-field checks applied to resolved requests."""

from __future__ import annotations

import re
from typing import Final

from listentotaxman.models import TaxRequest

STUDENT_LOAN_PLANS: Final = ("plan1", "plan2", "plan4", "postgraduate", "scottish")

_NUMERIC = re.compile(r"[+-]?[0-9]+")


class RequestValidationError(ValueError):
    """Raised when a scenario's parameters cannot be submitted."""


def _scoped(label: str | None, message: str) -> str:
    if label is None:
        return message
    return f"option '{label}': {message}"


def parse_whole_number(name: str, value: str) -> int:
    """Parse an optionally signed base-10 integer flag value."""

    text = value.strip()
    if not _NUMERIC.fullmatch(text):
        raise RequestValidationError(f"{name} must be a valid number: {value}")
    return int(text)


def validate_student_loan_plan(plan: str) -> str | None:
    """Return an error message for an unknown plan, ``None`` when acceptable."""

    if not plan or plan in STUDENT_LOAN_PLANS:
        return None
    return (
        f"invalid student loan plan: {plan} "
        f"(must be one of: {', '.join(STUDENT_LOAN_PLANS)})"
    )


def validate_tax_request(request: TaxRequest, label: str | None = None) -> TaxRequest:
    """Check ``request`` in a fixed order and raise on the first violation.

    ``label`` only scopes the error message; single checks pass ``None``.
    Nothing is clamped or coerced, so the request is returned unchanged.
    """

    year = request.year
    if len(year) != 4:
        raise RequestValidationError(
            _scoped(label, f"year must be a 4-digit number, got: {year}")
        )
    if not _NUMERIC.fullmatch(year):
        raise RequestValidationError(
            _scoped(label, f"year must be a valid number: {year}")
        )

    if request.gross_wage <= 0:
        raise RequestValidationError(_scoped(label, "income must be greater than 0"))

    if request.partner_gross_wage > 0 and not request.is_married:
        raise RequestValidationError(
            _scoped(
                label,
                "--partner-income requires --married flag\n"
                f"Hint: Use --married --partner-income {request.partner_gross_wage}",
            )
        )

    if request.partner_gross_wage < 0:
        raise RequestValidationError(
            _scoped(label, "--partner-income cannot be negative")
        )

    plan_error = validate_student_loan_plan(request.plan)
    if plan_error:
        raise RequestValidationError(_scoped(label, plan_error))

    return request


__all__ = [
    "RequestValidationError",
    "STUDENT_LOAN_PLANS",
    "parse_whole_number",
    "validate_student_loan_plan",
    "validate_tax_request",
]
