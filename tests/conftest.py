"""Test configuration utilities and shared fixtures."""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from listentotaxman.config.loader import CONFIG_ENV_VAR  # noqa: E402
from listentotaxman.config.schema import ConfigDefaults  # noqa: E402
from listentotaxman.models import TaxResponse  # noqa: E402

DATA_DIR = Path(__file__).resolve().parent / "data"


class FakeClock:
    """Deterministic clock for exercising the tax-year fallback."""

    def __init__(self, moment: datetime) -> None:
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment


@pytest.fixture()
def sample_payload() -> dict:
    return json.loads((DATA_DIR / "sample_response.json").read_text(encoding="utf-8"))


@pytest.fixture()
def sample_response(sample_payload: dict) -> TaxResponse:
    return TaxResponse.model_validate(sample_payload)


@pytest.fixture()
def defaults() -> ConfigDefaults:
    return ConfigDefaults()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the configuration lookup at an empty temporary location."""

    config_path = tmp_path / "config.yaml"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    return config_path
