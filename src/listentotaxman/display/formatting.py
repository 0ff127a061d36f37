"""Formatting helpers shared by the table renderers."""

from __future__ import annotations

from listentotaxman.models import TaxRequest

MAX_LABEL_LENGTH = 11


def format_currency(amount: float) -> str:
    """Return ``amount`` as pounds with thousands separators, e.g. ``£1,234.50``."""

    return f"£{amount:,.2f}"


def format_rate(rate: float) -> str:
    """Return a bracket rate as a whole percentage label."""

    return f"{rate * 100:.0f}%"


def truncate_label(label: str, width: int = MAX_LABEL_LENGTH) -> str:
    if len(label) > width:
        return label[: width - 1] + "…"
    return label


def status_parts(request: TaxRequest, *, short: bool = False) -> list[str]:
    """Return the status markers enabled on ``request``."""

    markers = (
        (request.is_married, "M", "Married"),
        (request.is_blind, "B", "Blind Allowance"),
        (request.is_ni_exempt, "NI", "NI Exempt"),
    )
    return [abbrev if short else name for enabled, abbrev, name in markers if enabled]


__all__ = [
    "MAX_LABEL_LENGTH",
    "format_currency",
    "format_rate",
    "status_parts",
    "truncate_label",
]
