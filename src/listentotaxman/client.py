"""HTTP client for the listentotaxman calculation service."""

from __future__ import annotations

import json
import logging
from typing import Any, Final

import httpx
from pydantic import ValidationError

from listentotaxman.models import TaxRequest, TaxResponse, format_validation_error

API_URL: Final = "https://listentotaxman.com/ws/tax/index.js.php"
DEFAULT_TIMEOUT: Final = 10.0

# The service reads a JSON document from the body but insists on a form
# content type.
_HEADERS: Final = {"Content-Type": "application/x-www-form-urlencoded"}

_LOGGER = logging.getLogger(__name__)


class CalculationError(RuntimeError):
    """Raised when a calculation could not be obtained from the service.

    ``category`` is one of ``transport``, ``status`` or ``parse``; ``status``
    carries the HTTP status code when the service answered.
    """

    def __init__(self, category: str, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.category = category
        self.message = message
        self.status = status


class TaxCalculatorClient:
    """Submit resolved requests to the remote calculator, one at a time."""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        *,
        url: str = API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)
        self._url = url

    def __enter__(self) -> "TaxCalculatorClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client when this instance created it."""

        if self._owns_client:
            self._http.close()

    def calculate_tax(self, request: TaxRequest) -> TaxResponse:
        """Return the service's calculation for ``request``."""

        body = json.dumps(request.to_payload())
        _LOGGER.debug(
            "POST %s year=%s region=%s", self._url, request.year, request.tax_region
        )

        try:
            response = self._http.post(self._url, content=body, headers=_HEADERS)
        except httpx.HTTPError as exc:
            raise CalculationError(
                "transport", f"failed to execute request: {exc}"
            ) from exc

        _LOGGER.debug("Service answered with status %s", response.status_code)
        if response.status_code != httpx.codes.OK:
            raise CalculationError(
                "status",
                f"API returned status {response.status_code}: {response.text}",
                status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise CalculationError(
                "parse", f"failed to parse response: {exc}", status=response.status_code
            ) from exc

        try:
            return TaxResponse.model_validate(data)
        except ValidationError as exc:
            raise CalculationError(
                "parse", format_validation_error(exc), status=response.status_code
            ) from exc


__all__ = ["API_URL", "CalculationError", "DEFAULT_TIMEOUT", "TaxCalculatorClient"]
