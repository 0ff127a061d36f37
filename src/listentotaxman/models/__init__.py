"""Typed models shared by the resolver, invoker and renderers.

Wire-facing request and response shapes are Pydantic models so remote
payloads are validated in one place; the per-run pairing of labels with
requests and responses uses lightweight frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass

from .api import (
    MONETARY_FIELDS,
    PRESENT,
    TaxBracket,
    TaxRequest,
    TaxResponse,
    format_validation_error,
)

__all__ = [
    "MONETARY_FIELDS",
    "PRESENT",
    "ComparisonOption",
    "ComparisonResult",
    "TaxBracket",
    "TaxRequest",
    "TaxResponse",
    "format_validation_error",
]


@dataclass(frozen=True)
class ComparisonOption:
    """One labelled scenario awaiting calculation."""

    label: str
    request: TaxRequest


@dataclass(frozen=True)
class ComparisonResult:
    """A scenario paired with the response the service returned for it."""

    label: str
    request: TaxRequest
    response: TaxResponse
