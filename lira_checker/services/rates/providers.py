from __future__ import annotations

"""Concrete rate providers and factory.

'fastforex' talks to api.fastforex.io (fetch-all endpoint, token required).
'static' serves fixed placeholder rates derived from a USD table so the
service can run offline.
"""
import logging
import math
from typing import Any, Callable, Dict, Optional

import httpx
from pydantic import ValidationError

from lira_checker.core.config import Settings
from lira_checker.core.errors import UpstreamFetchError
from lira_checker.models.rates import ProviderPayload
from lira_checker.services.http_client import HttpError, get_json
from .base import RateProvider

logger = logging.getLogger("lira_checker.providers")

# Units of currency per 1 USD
_STATIC_USD_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92635,
    "GBP": 0.81512,
    "CHF": 0.91922,
    "JPY": 130.73,
    "TRY": 19.0848,
    "MZN": 63.8963,
    "INR": 82.3815,
    "CNY": 6.8669,
}


def _as_rate(value: Any) -> Optional[float]:
    """Positive finite float for value, or None (null, text, bools, zero...)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    rate = float(value)
    if not math.isfinite(rate) or rate <= 0:
        return None
    return rate


class StaticRateProvider(RateProvider):
    name = "static"

    def __init__(self, usd_rates: Optional[Dict[str, float]] = None):
        self._usd_rates = dict(usd_rates or _STATIC_USD_RATES)

    async def fetch_rates(self, base_currency: str) -> Dict[str, float]:  # type: ignore[override]
        base = base_currency.upper()
        base_per_usd = self._usd_rates.get(base)
        if base_per_usd is None:
            raise UpstreamFetchError(f"static provider has no rates for {base}")
        # Cross through USD: 1 base = (1 / base_per_usd) USD
        usd_per_base = 1.0 / base_per_usd
        return {
            code: round(usd_per_base * per_usd, 5)
            for code, per_usd in self._usd_rates.items()
            if code != base
        }


class FastForexRateProvider(RateProvider):
    name = "fastforex"

    def __init__(
        self,
        api_token: str,
        *,
        base_url: str = "https://api.fastforex.io",
        timeout: float = 10.0,
        retries: int = 0,
        backoff: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_token = api_token
        self._url = base_url.rstrip("/") + "/fetch-all"
        self._retries = retries
        self._backoff = backoff
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout), transport=transport
        )

    async def fetch_rates(self, base_currency: str) -> Dict[str, float]:  # type: ignore[override]
        base = base_currency.upper()
        try:
            data = await get_json(
                self._client,
                self._url,
                params={"from": base, "api_key": self._api_token},
                retries=self._retries,
                backoff=self._backoff,
            )
        except HttpError as e:
            raise UpstreamFetchError(f"Unable to fetch currency info for {base}: {e}") from e
        try:
            payload = ProviderPayload.model_validate(data)
        except ValidationError as e:
            raise UpstreamFetchError(f"Malformed rate payload for {base}: {e}") from e
        if payload.base.upper() != base:
            raise UpstreamFetchError(
                f"Provider answered for base {payload.base}, expected {base}"
            )

        rates: Dict[str, float] = {}
        for code, value in payload.results.items():
            rate = _as_rate(value)
            if rate is None:
                logger.warning("dropping invalid rate %s=%r for %s", code, value, base)
                continue
            rates[code.upper()] = rate
        if not rates:
            raise UpstreamFetchError(f"Provider returned no usable rates for {base}")
        return rates

    async def aclose(self) -> None:
        await self._client.aclose()


_PROVIDER_REGISTRY: Dict[str, Callable[[Settings], RateProvider]] = {
    "static": lambda settings: StaticRateProvider(),
    "fastforex": lambda settings: FastForexRateProvider(
        settings.currency_api_token,
        base_url=settings.currency_api_base_url,
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
        backoff=settings.http_backoff_seconds,
    ),
}


def make_rate_provider(kind: str, settings: Settings) -> RateProvider:
    factory = _PROVIDER_REGISTRY.get(kind)
    if not factory:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    return factory(settings)
