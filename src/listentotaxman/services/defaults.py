"""Layering of flag, configuration and built-in defaults into a request.

Every field resolves in the same order: an explicit flag value wins, then a
non-empty configuration default, then a hard-coded fallback. Two fields
deviate. Income never falls back to configuration and must be given per
scenario. Year falls back to the tax year in progress according to the
supplied clock instead of a constant.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Callable, Final

from listentotaxman.config.schema import ConfigDefaults
from listentotaxman.models import PRESENT, TaxRequest

from .validation import (
    RequestValidationError,
    parse_whole_number,
    validate_tax_request,
)

Clock = Callable[[], datetime]

DEFAULT_REGION: Final = "uk"
DEFAULT_AGE: Final = "0"

REGION_ALIASES: Final = {"england": "uk"}

_TRUTHY: Final = frozenset({"true", "yes", "y", "1"})


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def default_tax_year(now: datetime) -> str:
    """Return the tax year in progress at ``now``.

    UK tax years roll over at the start of April 5 (UTC). Exactly midnight
    still belongs to the old year; any later instant on April 5 belongs to the
    new one.
    """

    boundary = datetime(now.year, 4, 5, tzinfo=timezone.utc)
    if now.tzinfo is None:
        boundary = boundary.replace(tzinfo=None)
    if now > boundary:
        return str(now.year)
    return str(now.year - 1)


def normalise_region(region: str) -> str:
    """Rewrite region aliases to the identifier the service understands."""

    return REGION_ALIASES.get(region, region)


def _resolve_text(
    flags: Mapping[str, str], name: str, configured: str, fallback: str = ""
) -> str:
    if name in flags:
        return flags[name]
    if configured:
        return configured
    return fallback


def _resolve_number(flags: Mapping[str, str], name: str, configured: int) -> int:
    if name in flags:
        return parse_whole_number(name, flags[name])
    return configured or 0


def _resolve_presence(flags: Mapping[str, str], name: str, configured: bool) -> str:
    if name in flags:
        enabled = flags[name].strip().lower() in _TRUTHY
    else:
        enabled = configured
    return PRESENT if enabled else ""


def resolve_tax_request(
    flags: Mapping[str, str],
    defaults: ConfigDefaults,
    *,
    clock: Clock | None = None,
) -> TaxRequest:
    """Build a fully populated request from per-scenario ``flags``.

    ``flags`` maps flag names without their ``--`` prefix (``"tax-code"``) to
    raw string values; switches given without a value carry ``"true"``.
    Unknown names are ignored. Raises :class:`RequestValidationError` when
    income is missing or a numeric flag cannot be parsed.
    """

    if "year" in flags:
        year = flags["year"]
    elif defaults.year:
        year = defaults.year
    else:
        year = default_tax_year((clock or utc_now)())

    region = _resolve_text(flags, "region", defaults.region, DEFAULT_REGION)
    extra = _resolve_number(flags, "extra", defaults.extra)

    if "income" not in flags:
        raise RequestValidationError("income is required")
    gross_wage = parse_whole_number("income", flags["income"])

    return TaxRequest(
        year=year,
        tax_region=normalise_region(region),
        age=_resolve_text(flags, "age", defaults.age, DEFAULT_AGE),
        pension=_resolve_text(flags, "pension", defaults.pension),
        gross_wage=gross_wage,
        plan=_resolve_text(flags, "student-loan", defaults.student_loan),
        extra=extra,
        tax_code=_resolve_text(flags, "tax-code", defaults.tax_code),
        married=_resolve_presence(flags, "married", defaults.married),
        blind=_resolve_presence(flags, "blind", defaults.blind),
        exempt_ni=_resolve_presence(flags, "no-ni", defaults.no_ni),
        partner_gross_wage=_resolve_number(
            flags, "partner-income", defaults.partner_income
        ),
    )


def prepare_tax_request(
    flags: Mapping[str, str],
    defaults: ConfigDefaults,
    *,
    label: str | None = None,
    clock: Clock | None = None,
) -> TaxRequest:
    """Resolve and validate one scenario, naming it in any error raised."""

    try:
        request = resolve_tax_request(flags, defaults, clock=clock)
    except RequestValidationError as exc:
        if label is None:
            raise
        raise RequestValidationError(f"option '{label}': {exc}") from exc
    return validate_tax_request(request, label)


__all__ = [
    "Clock",
    "DEFAULT_AGE",
    "DEFAULT_REGION",
    "REGION_ALIASES",
    "default_tax_year",
    "normalise_region",
    "prepare_tax_request",
    "resolve_tax_request",
    "utc_now",
]
