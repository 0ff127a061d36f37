"""Unit tests for the wire models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from listentotaxman.models import TaxRequest, TaxResponse


def test_payload_always_carries_required_keys() -> None:
    payload = TaxRequest(year="2024", gross_wage=25000).to_payload()

    assert payload == {
        "response": "json",
        "year": "2024",
        "taxregion": "uk",
        "age": "0",
        "pension": "",
        "time": "1",
        "grosswage": 25000,
    }


def test_payload_includes_optional_keys_when_set() -> None:
    payload = TaxRequest(
        year="2024",
        gross_wage=25000,
        extra=500,
        tax_code="K12",
        blind="y",
        exempt_ni="y",
        married="y",
        partner_gross_wage=9000,
    ).to_payload()

    assert payload["extra"] == 500
    assert payload["taxcode"] == "K12"
    assert payload["blind"] == "y"
    assert payload["exNI"] == "y"
    assert payload["partnerGrossWage"] == 9000
    assert "plan" not in payload


def test_request_rejects_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        TaxRequest(colour="blue")


def test_response_accepts_list_brackets_and_null_text() -> None:
    response = TaxResponse.model_validate(
        {
            "tax_due": [{"rate": 0.2, "amount": 10}, {"rate": 0.4, "amount": 5}],
            "tax_code": None,
            "previous": [],
        }
    )

    assert response.bracket_amount("1") == 5
    assert response.bracket_amount("2") == 0
    assert response.tax_code == ""
    assert response.previous is None


def test_response_totals(sample_response: TaxResponse) -> None:
    assert sample_response.total_cost == 100000 + 13800 + 1200
    assert sample_response.total_deductions == pytest.approx(27432 + 4010.6 + 3000)


def test_null_amounts_read_as_zero() -> None:
    response = TaxResponse.model_validate(
        {
            "gross_pay": 1200,
            "childcare_amount": None,
            "net_pay": 600,
            "tax_due": {"0": {"rate": 0.2, "amount": None}, "1": {"rate": None}},
            "previous": {"tax_year": 2023, "pension_you": None},
        }
    )

    assert response.childcare_amount == 0.0
    assert response.net_pay == 600
    assert response.bracket_amount("0") == 0.0
    assert response.tax_due["0"].rate == 0.2
    assert response.tax_due["1"].rate == 0.0
    assert response.previous is not None
    assert response.previous.pension_you == 0.0
