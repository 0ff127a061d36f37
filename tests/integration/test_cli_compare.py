"""End-to-end tests for the ``compare`` command."""

from __future__ import annotations

import json
from io import StringIO

import httpx
import pytest
from rich.console import Console

from listentotaxman.cli import main
from listentotaxman.client import TaxCalculatorClient


class FakeService:
    """Answer each request with the sample payload scaled to its gross wage."""

    def __init__(self, sample_payload: dict, fail_on: int | None = None) -> None:
        self.sample_payload = sample_payload
        self.fail_on = fail_on
        self.wages: list[int] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.wages.append(body["grosswage"])
        if body["grosswage"] == self.fail_on:
            return httpx.Response(502, text="bad gateway")
        payload = dict(self.sample_payload, gross_pay=body["grosswage"])
        return httpx.Response(200, json=payload)

    def factory(self):
        return TaxCalculatorClient(httpx.Client(transport=httpx.MockTransport(self)))


@pytest.fixture()
def service(sample_payload: dict) -> FakeService:
    return FakeService(sample_payload)


def test_compare_json_output(service: FakeService, clock, capsys) -> None:
    exit_code = main(
        [
            "compare",
            "--period",
            "monthly",
            "--json",
            "--option",
            "Current",
            "--income",
            "120000",
            "--option",
            "Offer",
            "--income",
            "60000",
        ],
        client_factory=service.factory,
        clock=clock,
    )

    assert exit_code == 0
    assert service.wages == [120000, 60000]
    document = json.loads(capsys.readouterr().out)
    assert document["period"] == "monthly"
    assert document["comparison"]["gross_pay"] == {"Current": 10000, "Offer": 5000}
    assert document["metadata"]["Offer"]["tax_code"] == "1257L"


def test_compare_renders_table(service: FakeService, clock) -> None:
    buffer = StringIO()
    console = Console(file=buffer, width=120, color_system=None)

    exit_code = main(
        [
            "compare",
            "--option",
            "Current Job",
            "--income",
            "100000",
            "--married",
            "--option",
            "Much Better Offer",
            "--income",
            "120000",
            "--verbose",
        ],
        client_factory=service.factory,
        console=console,
        clock=clock,
    )

    output = buffer.getvalue()
    assert exit_code == 0
    assert "Comparison - Yearly" in output
    assert "Much Bette…" in output
    assert "Basic Rate Tax" in output
    assert "£120,000.00" in output


def test_compare_validates_every_option_before_submitting(
    service: FakeService, clock, capsys
) -> None:
    exit_code = main(
        [
            "compare",
            "--option",
            "A",
            "--income",
            "1000",
            "--option",
            "B",
            "--income",
            "2000",
            "--student-loan",
            "plan7",
        ],
        client_factory=service.factory,
        clock=clock,
    )

    assert exit_code == 1
    assert service.wages == []
    assert capsys.readouterr().err.startswith(
        "Error: option 'B': invalid student loan plan: plan7"
    )


def test_compare_stops_at_first_failed_option(sample_payload: dict, clock, capsys) -> None:
    service = FakeService(sample_payload, fail_on=2000)

    exit_code = main(
        [
            "compare",
            "--option",
            "A",
            "--income",
            "1000",
            "--option",
            "B",
            "--income",
            "2000",
            "--option",
            "C",
            "--income",
            "3000",
        ],
        client_factory=service.factory,
        clock=clock,
    )

    assert exit_code == 1
    assert service.wages == [1000, 2000]
    assert capsys.readouterr().err.strip() == (
        "Error: failed to calculate tax for option 'B': "
        "API returned status 502: bad gateway"
    )


@pytest.mark.parametrize(
    ("argv", "message"),
    [
        (["compare"], "Error: no options specified"),
        (
            ["compare", "--option", "Solo", "--income", "1"],
            "Error: at least 2 options required for comparison",
        ),
        (
            ["compare"] + ["--option", "X", "--income", "1"] * 5,
            "Error: maximum 4 options supported for comparison (found 5)",
        ),
        (
            ["compare", "--period", "fortnightly", "--option", "A", "--income", "1",
             "--option", "B", "--income", "2"],
            "Error: invalid period: fortnightly",
        ),
    ],
)
def test_compare_rejects_bad_invocations(
    argv: list[str], message: str, service: FakeService, clock, capsys
) -> None:
    assert main(argv, client_factory=service.factory, clock=clock) == 1
    assert capsys.readouterr().err.startswith(message)
    assert service.wages == []


def test_compare_help(capsys) -> None:
    assert main(["compare", "--help"]) == 0
    assert "--option LABEL" in capsys.readouterr().out


def test_compare_help_documents_switch_values(capsys) -> None:
    assert main(["compare", "-h"]) == 0
    assert "(e.g. false or no) disables it" in capsys.readouterr().out


def test_compare_switch_value_overrides_configuration(
    service: FakeService, isolated_config, clock, capsys
) -> None:
    isolated_config.write_text("defaults:\n  married: true\n", encoding="utf-8")
    sent: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content))
        return service(request)

    exit_code = main(
        [
            "compare",
            "--json",
            "--option",
            "Single",
            "--income",
            "1000",
            "--married",
            "false",
            "--option",
            "Married",
            "--income",
            "2000",
        ],
        client_factory=lambda: TaxCalculatorClient(
            httpx.Client(transport=httpx.MockTransport(handler))
        ),
        clock=clock,
    )

    assert exit_code == 0
    assert "married" not in sent[0]
    assert sent[1]["married"] == "y"
