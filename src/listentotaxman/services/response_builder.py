"""Utilities for serialising calculation results as JSON documents."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from typing import Any

from listentotaxman.models import ComparisonResult, TaxResponse

Extractor = Callable[[TaxResponse], float]

# Output key -> accessor, in the order fields appear in the JSON document.
COMPARISON_FIELDS: tuple[tuple[str, Extractor], ...] = (
    ("gross_pay", lambda r: r.gross_pay),
    ("taxable_pay", lambda r: r.taxable_pay),
    ("additional_gross", lambda r: r.additional_gross),
    ("tax_free_allowance", lambda r: r.tax_free_allowance),
    ("tax_paid", lambda r: r.tax_paid),
    ("national_insurance", lambda r: r.national_insurance),
    ("student_loan", lambda r: r.student_loan_repayment),
    ("pension_you", lambda r: r.pension_you),
    ("pension_hmrc", lambda r: r.pension_hmrc),
    ("pension_claimback", lambda r: r.pension_claimback),
    ("net_pay", lambda r: r.net_pay),
    ("employers_ni", lambda r: r.employers_ni),
    ("total_cost", lambda r: r.total_cost),
    ("gross_sacrifice", lambda r: r.gross_sacrifice),
    ("childcare_amount", lambda r: r.childcare_amount),
    ("tax_free_married", lambda r: r.tax_free_married),
    ("tax_free_marriage_allowance", lambda r: r.tax_free_marriage_allowance),
    ("basic_rate_tax", lambda r: r.bracket_amount("0")),
    ("higher_rate_tax", lambda r: r.bracket_amount("1")),
    ("additional_rate_tax", lambda r: r.bracket_amount("2")),
)


def build_check_payload(response: TaxResponse) -> dict[str, Any]:
    """Return the wire-shaped mapping for a single (normalised) response.

    The innermost ``previous`` key is dropped rather than emitted as ``null``.
    """

    payload = response.model_dump(mode="json")
    node: dict[str, Any] | None = payload
    while node is not None:
        previous = node.get("previous")
        if previous is None:
            node.pop("previous", None)
        node = previous
    return payload


def build_comparison_payload(
    results: Sequence[ComparisonResult], period: str
) -> dict[str, Any]:
    """Return a comparison document keyed by field, then by scenario label.

    ``results`` must already be normalised to ``period``. Labels are used as
    keys, so scenarios sharing a label collapse onto the last one.
    """

    comparison = {
        name: {result.label: extract(result.response) for result in results}
        for name, extract in COMPARISON_FIELDS
    }
    metadata = {
        result.label: {
            "tax_year": result.response.tax_year,
            "tax_region": result.response.tax_region,
            "tax_code": result.response.tax_code,
        }
        for result in results
    }
    return {"period": period, "comparison": comparison, "metadata": metadata}


def dumps(payload: Any) -> str:
    """Serialise ``payload`` the way the CLI prints it."""

    return json.dumps(payload, indent=2, ensure_ascii=False)


__all__ = [
    "COMPARISON_FIELDS",
    "build_check_payload",
    "build_comparison_payload",
    "dumps",
]
