"""Live exchange rates from the Frankfurter API (https://www.frankfurter.app/docs/)."""

import logging
from decimal import Decimal
from typing import Any, Optional

import requests

from sling_ledger.config.settings import FRANKFURTER_URL
from sling_ledger.providers.exchange_rate_provider import RateProviderError

logger = logging.getLogger(__name__)


class FrankfurterRateProvider:
    """Fetch latest rates for a base currency; no API key required."""

    def __init__(
        self,
        base_url: str = FRANKFURTER_URL,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch_rates(self, base: str) -> dict[str, Decimal]:
        base = base.upper()
        payload = self._request("/latest", params={"from": base})

        rates_raw = payload.get("rates")
        if not isinstance(rates_raw, dict):
            raise RateProviderError(f"Frankfurter payload missing rates for {base}")

        rates = {code.upper(): Decimal(str(value)) for code, value in rates_raw.items()}
        rates[base] = Decimal("1")
        logger.info("Fetched %d live rates for base %s", len(rates), base)
        return rates

    def _request(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request("GET", url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as exc:
            raise RateProviderError(f"Frankfurter request timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise RateProviderError("Frankfurter request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise RateProviderError("Frankfurter returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise RateProviderError("Frankfurter returned unexpected payload type")
        return payload
