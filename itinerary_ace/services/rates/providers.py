from __future__ import annotations

"""Concrete rate providers and factory.

'exchangerate-api' calls ExchangeRate-API v6 (`<base_url>/<key>/latest/<BASE>`);
'static' returns DEFAULT_RATES (settings.exchange_rate_provider = "static").
"""
import logging
from typing import Dict, Optional

from itinerary_ace.services.http_client import HttpError, get_json
from .base import LatestRates, RateProvider, RateProviderError

logger = logging.getLogger("itinerary_ace.rates.providers")

# USD -> X fallback rates used when the API is unreachable.
DEFAULT_RATES: Dict[str, float] = {
    "THB": 36.50,
    "MYR": 4.70,
    "SGD": 1.35,
    "VND": 25000.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 157.00,
}


class StaticRateProvider(RateProvider):
    name = "static"

    def fetch_latest(self, base_currency: str) -> LatestRates:  # type: ignore[override]
        if base_currency.upper() != "USD":
            raise RateProviderError(f"static rates are only quoted against USD, not {base_currency}")
        return LatestRates(base_currency="USD", rates=dict(DEFAULT_RATES))


class ExchangeRateApiProvider(RateProvider):
    name = "exchangerate-api"

    def __init__(self, base_url: str, api_key: str, *, timeout: float = 5.0, retries: int = 2):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._retries = retries

    def _url(self, base_currency: str) -> str:
        return f"{self._base_url}/{self._api_key}/latest/{base_currency.upper()}"

    def fetch_latest(self, base_currency: str) -> LatestRates:  # type: ignore[override]
        try:
            data = get_json(
                self._url(base_currency),
                timeout=self._timeout,
                retries=self._retries,
                redact_values=[self._api_key],
            )
        except HttpError as e:
            raise RateProviderError(str(e)) from e
        if data.get("result") != "success":
            # API reports errors in-band, e.g. {"result": "error", "error-type": "invalid-key"}
            raise RateProviderError(f"API error: {data.get('error-type', 'unknown error')}")
        raw = data.get("conversion_rates") or {}
        rates: Dict[str, float] = {}
        for code, value in raw.items():
            try:
                rate = float(value)
            except (TypeError, ValueError):
                logger.debug("skipping non-numeric rate for %s", code)
                continue
            if rate > 0:
                rates[str(code).upper()] = rate
        last_update: Optional[int] = data.get("time_last_update_unix")
        return LatestRates(
            base_currency=base_currency.upper(), rates=rates, last_update_unix=last_update
        )


def make_rate_provider(
    kind: str, *, base_url: str = "", api_key: Optional[str] = None, timeout: float = 5.0
) -> RateProvider:
    if kind == "static":
        return StaticRateProvider()
    if kind == "exchangerate-api":
        if not api_key:
            raise ValueError("exchangerate-api provider needs an API key")
        return ExchangeRateApiProvider(base_url, api_key, timeout=timeout)
    raise ValueError(f"Unknown rate provider kind '{kind}'")
