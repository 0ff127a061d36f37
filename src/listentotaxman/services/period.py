"""Display periods and rescaling of results into them."""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

from listentotaxman.config.schema import ConfigDefaults
from listentotaxman.models import MONETARY_FIELDS, TaxResponse

from .validation import RequestValidationError

YEARLY: Final = "yearly"

PERIOD_DIVISORS: Mapping[str, float] = MappingProxyType(
    {
        YEARLY: 1.0,
        "monthly": 12.0,
        "weekly": 52.0,
        "daily": 365.0,
        # 52 weeks of 40 hours
        "hourly": 2080.0,
    }
)

PERIODS: Final = tuple(PERIOD_DIVISORS)


def period_divisor(period: str) -> float:
    """Return the divisor for ``period``; unknown names behave like yearly."""

    return PERIOD_DIVISORS.get(period, 1.0)


def period_label(period: str) -> str:
    """Return the capitalised label shown in table headers."""

    if period not in PERIOD_DIVISORS:
        return "Yearly"
    return period.capitalize()


def validate_period(period: str) -> str:
    if period not in PERIOD_DIVISORS:
        raise RequestValidationError(
            f"invalid period: {period} (must be one of: {', '.join(PERIODS)})"
        )
    return period


def resolve_period(flag_value: str | None, defaults: ConfigDefaults) -> str:
    """Pick the display period (flag, then config, then yearly) and validate it."""

    if flag_value:
        period = flag_value
    elif defaults.period:
        period = defaults.period
    else:
        period = YEARLY
    return validate_period(period)


def adjust_for_period(response: TaxResponse, period: str) -> TaxResponse:
    """Return ``response`` with every monetary amount expressed per ``period``.

    Yearly results are returned as-is (the same object). Bracket rates are left
    untouched while bracket amounts scale with everything else, and a linked
    previous-year result is rescaled recursively.
    """

    if period == YEARLY:
        return response

    divisor = period_divisor(period)

    updates: dict[str, object] = {
        name: getattr(response, name) / divisor for name in MONETARY_FIELDS
    }
    updates["tax_due"] = {
        key: bracket.model_copy(update={"amount": bracket.amount / divisor})
        for key, bracket in response.tax_due.items()
    }
    if response.previous is not None:
        updates["previous"] = adjust_for_period(response.previous, period)

    return response.model_copy(update=updates)


__all__ = [
    "PERIODS",
    "PERIOD_DIVISORS",
    "YEARLY",
    "adjust_for_period",
    "period_divisor",
    "period_label",
    "resolve_period",
    "validate_period",
]
