"""Alpha Vantage GLOBAL_QUOTE client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import ConfigurationError, TransportError
from .models import Update

logger = logging.getLogger(__name__)

ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"
QUOTE_FIELD = "Global Quote"
PRICE_FIELD = "05. price"
PREVIOUS_CLOSE_FIELD = "08. previous close"


class QuoteClient:
    """Fetches one quote per call from Alpha Vantage and turns it into an Update.

    fetch() has three outcomes:
      - an Update, when the provider returned a usable quote
      - None, when the response is well-formed but carries no usable data
        (unknown symbol, rate-limit placeholder, previous close of zero)
      - TransportError, when the request failed or the body is not the
        expected schema

    Every request is bounded by ``timeout`` seconds so one slow symbol
    cannot stall a poll cycle.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = ALPHA_VANTAGE_URL,
    ) -> None:
        api_key = api_key.strip()
        if not api_key:
            raise ConfigurationError("missing ALPHA_VANTAGE_KEY")
        self._api_key = api_key
        self._base_url = base_url
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def fetch(self, symbol: str) -> Update | None:
        if not symbol:
            raise ValueError("symbol must be non-empty")

        params = {"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self._api_key}
        try:
            response = await self._client.get(self._base_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            # str(e) embeds the request URL, which carries the API key
            raise TransportError(symbol, f"provider returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportError(symbol, f"request failed: {type(e).__name__}") from e
        except ValueError as e:
            raise TransportError(symbol, f"invalid JSON body: {e}") from e

        return self._parse(symbol, payload)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    # --- Internal ---

    @staticmethod
    def _parse(symbol: str, payload: Any) -> Update | None:
        if not isinstance(payload, dict):
            raise TransportError(symbol, f"expected JSON object, got {type(payload).__name__}")

        quote = payload.get(QUOTE_FIELD)
        if not quote:
            # Unknown symbols come back as {"Global Quote": {}}; throttled
            # requests as {"Note": ...} or {"Information": ...}.
            logger.debug("No quote data for %s: %s", symbol, sorted(payload))
            return None
        if not isinstance(quote, dict):
            raise TransportError(symbol, f"{QUOTE_FIELD!r} is not an object")

        price = _parse_number(symbol, quote, PRICE_FIELD)
        if quote.get(PREVIOUS_CLOSE_FIELD) is None:
            logger.debug("No previous close for %s, skipping", symbol)
            return None
        previous = _parse_number(symbol, quote, PREVIOUS_CLOSE_FIELD)
        if previous == 0:
            logger.debug("Previous close is zero for %s, skipping", symbol)
            return None

        return Update.from_quote(symbol, price, previous)


def _parse_number(symbol: str, quote: dict, field: str) -> float:
    raw = quote.get(field)
    if raw is None:
        raise TransportError(symbol, f"missing field {field!r}")
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise TransportError(symbol, f"field {field!r} is not numeric: {raw!r}") from e
