"""Pydantic models describing the calculation service wire format."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "MONETARY_FIELDS",
    "PRESENT",
    "TaxBracket",
    "TaxRequest",
    "TaxResponse",
    "format_validation_error",
]

# Marker the service expects for enabled boolean options; disabled options are
# sent as empty strings and dropped from the payload.
PRESENT = "y"

# Every top-level monetary amount on ``TaxResponse``; rates live only inside
# ``tax_due`` brackets.
MONETARY_FIELDS: tuple[str, ...] = (
    "taxable_pay",
    "gross_pay",
    "additional_gross",
    "tax_free_allowance",
    "tax_paid",
    "national_insurance",
    "net_pay",
    "student_loan_repayment",
    "pension_hmrc",
    "pension_you",
    "pension_claimback",
    "employers_ni",
    "tax_free_married",
    "tax_free_marriage_allowance",
    "gross_sacrifice",
    "childcare_amount",
)


class TaxRequest(BaseModel):
    """Fully resolved parameters for one calculation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: str = ""
    tax_region: str = "uk"
    age: str = "0"
    pension: str = ""
    gross_wage: int = 0
    plan: str = ""
    extra: int = 0
    tax_code: str = ""
    married: str = ""
    blind: str = ""
    exempt_ni: str = ""
    partner_gross_wage: int = 0
    response: str = "json"
    time: str = "1"

    @property
    def is_married(self) -> bool:
        return self.married == PRESENT

    @property
    def is_blind(self) -> bool:
        return self.blind == PRESENT

    @property
    def is_ni_exempt(self) -> bool:
        return self.exempt_ni == PRESENT

    def to_payload(self) -> dict[str, Any]:
        """Return the mapping submitted to the calculation service."""

        payload: dict[str, Any] = {
            "response": self.response,
            "year": self.year,
            "taxregion": self.tax_region,
            "age": self.age,
            "pension": self.pension,
            "time": self.time,
            "grosswage": self.gross_wage,
        }
        optional: dict[str, Any] = {
            "plan": self.plan,
            "extra": self.extra,
            "taxcode": self.tax_code,
            "married": self.married,
            "blind": self.blind,
            "exNI": self.exempt_ni,
            "partnerGrossWage": self.partner_gross_wage,
        }
        payload.update({key: value for key, value in optional.items() if value})
        return payload


class TaxBracket(BaseModel):
    """Tax owed at a single marginal rate."""

    model_config = ConfigDict(frozen=True)

    rate: float = 0.0
    amount: float = 0.0

    @field_validator("rate", "amount", mode="before")
    @classmethod
    def _null_as_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class TaxResponse(BaseModel):
    """Calculation result returned by the service.

    ``previous`` links the figures the service computed for the prior tax
    year. The chain is finite and acyclic; its depth is decided remotely.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    tax_year: int = 0
    taxable_pay: float = 0.0
    gross_pay: float = 0.0
    additional_gross: float = 0.0
    tax_free_allowance: float = 0.0
    tax_paid: float = 0.0
    tax_due: dict[str, TaxBracket] = Field(default_factory=dict)
    national_insurance: float = 0.0
    net_pay: float = 0.0
    student_loan_repayment: float = 0.0
    pension_hmrc: float = 0.0
    pension_you: float = 0.0
    pension_claimback: float = 0.0
    employers_ni: float = 0.0
    tax_free_married: float = 0.0
    tax_region: str = ""
    tax_code: str = ""
    tax_free_marriage_allowance: float = 0.0
    gross_sacrifice: float = 0.0
    childcare_pre2011: Any = None
    debug: Any = None
    childcare_amount: float = 0.0
    previous: TaxResponse | None = None

    @field_validator("tax_due", mode="before")
    @classmethod
    def _normalise_tax_due(cls, value: Any) -> Any:
        # PHP encodes an empty associative array as ``[]`` and a dense one as a
        # list, so accept both shapes and key them by position.
        if value is None:
            return {}
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            return {str(index): bracket for index, bracket in enumerate(value)}
        if isinstance(value, Mapping):
            return {str(key): bracket for key, bracket in value.items()}
        return value

    @field_validator("previous", mode="before")
    @classmethod
    def _normalise_previous(cls, value: Any) -> Any:
        if not isinstance(value, (BaseModel, Mapping)) and not value:
            return None
        return value

    # The service sends null for amounts it did not compute.
    @field_validator(*MONETARY_FIELDS, mode="before")
    @classmethod
    def _null_amount_as_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("tax_region", "tax_code", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    def bracket_amount(self, key: str) -> float:
        """Return the amount taxed in bracket ``key`` or ``0.0`` when absent."""

        bracket = self.tax_due.get(key)
        return bracket.amount if bracket is not None else 0.0

    @property
    def total_cost(self) -> float:
        """Employer's total cost: gross pay plus employer NI and pension."""

        return self.gross_pay + self.employers_ni + self.pension_hmrc

    @property
    def total_deductions(self) -> float:
        return (
            self.tax_paid
            + self.national_insurance
            + self.student_loan_repayment
            + self.pension_you
        )


TaxResponse.model_rebuild()


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation response: {details}"
