"""
Yahoo Finance quote source implementation.

Uses the Yahoo Finance REST API (https://financeapi.net/) to fetch live
quotes and regional trending symbols, rotating through the configured API
keys when one is rejected or rate limited.
"""

import decimal
import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import requests

from folio_ledger.models import AssetClass, Quote
from folio_ledger.quotes.base import (
    QuoteNotFoundError,
    QuoteSource,
    QuoteSourceError,
    QuoteTransportError,
)

logger = logging.getLogger(__name__)


class YahooQuoteSource(QuoteSource):
    """
    Quote source backed by the Yahoo Finance API.

    Features:
    - Fetches live quotes via the v6 quote endpoint
    - Batches multi-symbol requests
    - Rotates API keys on 401/403/429 responses
    - Retries timeouts and connection errors with a linear back-off
    """

    DEFAULT_BASE_URL = "https://yfapi.net"
    QUOTE_ENDPOINT = "/v6/finance/quote"
    TRENDING_ENDPOINT = "/v1/finance/trending/{region}"

    # Symbols per quote request
    BATCH_SIZE = 10

    # Status codes that mean the current key is unusable
    KEY_REJECTED_STATUSES = (401, 403, 429)

    QUOTE_TYPES = {
        "EQUITY": AssetClass.EQUITY,
        "CURRENCY": AssetClass.CURRENCY,
    }

    def __init__(
        self,
        api_keys: list[str],
        base_url: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
    ):
        """
        Initialize the Yahoo Finance quote source.

        Args:
            api_keys: API keys, tried in order
            base_url: API base URL (defaults to https://yfapi.net)
            max_retries: Maximum attempts for timeouts and connection errors
            retry_delay: Base delay between attempts (seconds)
            timeout: Per-request timeout (seconds)

        Raises:
            QuoteSourceError: If no API key is provided
        """
        keys = [key for key in api_keys if key]
        if not keys:
            raise QuoteSourceError(
                "Yahoo Finance API key is not configured. Please set it using one of:\n"
                "  1. Environment variable: export YFAPI_API_KEYS=key1,key2\n"
                "  2. .env file: YFAPI_API_KEYS=key1,key2\n"
                "  3. settings YAML: api_keys: [key1, key2]\n"
            )

        self._api_keys = keys
        self._key_index = 0
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "YahooFinance"

    @property
    def active_key(self) -> str:
        """The API key the next request will use."""
        return self._api_keys[self._key_index]

    def get_quote(self, symbol: str) -> Quote:
        symbol = symbol.strip()
        data = self._make_request(
            self.QUOTE_ENDPOINT,
            {"region": "US", "lang": "en", "symbols": symbol},
        )
        quotes = self._parse_quotes(data)

        if not quotes:
            raise QuoteNotFoundError(f"No quote returned for symbol: {symbol}")

        for quote in quotes:
            if quote.symbol == symbol:
                return quote
        return quotes[0]

    def get_quotes(self, symbols: list[str]) -> list[Quote]:
        symbols = [s.strip() for s in symbols if s and s.strip()]
        if not symbols:
            return []

        by_symbol: dict[str, Quote] = {}
        unique = list(dict.fromkeys(symbols))

        for i in range(0, len(unique), self.BATCH_SIZE):
            batch = unique[i:i + self.BATCH_SIZE]
            try:
                data = self._make_request(
                    self.QUOTE_ENDPOINT,
                    {"region": "US", "lang": "en", "symbols": ",".join(batch)},
                )
                for quote in self._parse_quotes(data):
                    by_symbol[quote.symbol] = quote
            except QuoteSourceError as e:
                logger.warning("Quote batch %s failed: %s", batch, e)
                continue

        missing = [s for s in unique if s not in by_symbol]
        if missing:
            logger.warning("No quotes returned for: %s", missing)

        return [by_symbol[s] for s in symbols if s in by_symbol]

    def get_trending(self, region: str) -> list[str]:
        data = self._make_request(
            self.TRENDING_ENDPOINT.format(region=region),
            {"region": region},
        )

        if not isinstance(data, dict):
            raise QuoteTransportError("Unexpected trending response format")

        symbols = []
        finance = data.get("finance") or {}
        for result in finance.get("result") or []:
            for item in result.get("quotes") or []:
                symbol = item.get("symbol")
                if symbol:
                    symbols.append(symbol)

        return symbols

    def _make_request(self, path: str, params: dict) -> Any:
        """
        Make an HTTP GET request with key rotation and retry logic.

        Args:
            path: Endpoint path relative to the base URL
            params: Query parameters

        Returns:
            Parsed JSON response

        Raises:
            QuoteNotFoundError: On a 404 response
            QuoteTransportError: On request failure or invalid JSON
        """
        url = f"{self._base_url}{path}"
        last_error = None
        attempt = 0
        keys_rejected = 0

        while attempt < self._max_retries:
            headers = {"x-api-key": self.active_key, "accept": "application/json"}

            try:
                response = requests.get(
                    url, params=params, headers=headers, timeout=self._timeout
                )
            except requests.exceptions.Timeout:
                last_error = "Request timeout"
            except requests.exceptions.RequestException as e:
                last_error = str(e)
            else:
                if response.status_code in self.KEY_REJECTED_STATUSES:
                    keys_rejected += 1
                    if keys_rejected >= len(self._api_keys):
                        raise QuoteTransportError(
                            f"All {len(self._api_keys)} API keys were rejected "
                            f"(last status {response.status_code})"
                        )
                    logger.warning(
                        "API key %d rejected with status %d, rotating",
                        self._key_index,
                        response.status_code,
                    )
                    self._rotate_key()
                    continue

                if response.status_code == 404:
                    raise QuoteNotFoundError(f"Not found: {url} {params}")

                try:
                    response.raise_for_status()
                except requests.exceptions.HTTPError as e:
                    raise QuoteTransportError(f"Yahoo Finance API error: {e}")

                try:
                    return response.json()
                except ValueError as e:
                    raise QuoteTransportError(
                        f"Invalid JSON response from Yahoo Finance API: {e}"
                    )

            attempt += 1
            if attempt < self._max_retries:
                time.sleep(self._retry_delay * attempt)

        raise QuoteTransportError(
            f"Failed to fetch data from Yahoo Finance after {self._max_retries} attempts: {last_error}"
        )

    def _rotate_key(self) -> None:
        self._key_index = (self._key_index + 1) % len(self._api_keys)

    def _parse_quotes(self, data: Any) -> list[Quote]:
        """Parse a v6 quote response, skipping malformed entries."""
        if not isinstance(data, dict):
            raise QuoteTransportError("Unexpected quote response format")

        response = data.get("quoteResponse") or {}
        if response.get("error"):
            raise QuoteTransportError(f"Yahoo Finance API error: {response['error']}")

        quotes = []
        for item in response.get("result") or []:
            try:
                quotes.append(self._parse_quote(item))
            except (KeyError, TypeError, ValueError, decimal.InvalidOperation) as e:
                logger.warning("Skipping malformed quote %r: %s", item.get("symbol"), e)
                continue

        return quotes

    def _parse_quote(self, item: dict) -> Quote:
        symbol = item["symbol"]
        timestamp = item.get("regularMarketTime")

        return Quote(
            symbol=symbol,
            name=item.get("longName") or item.get("shortName") or symbol,
            asset_class=self.QUOTE_TYPES.get(
                item.get("quoteType"), AssetClass.CRYPTOCURRENCY
            ),
            price=_to_decimal(item["regularMarketPrice"]),
            previous_close=_to_decimal(item.get("regularMarketPreviousClose")),
            open_price=_to_decimal(item.get("regularMarketOpen")),
            change=_to_decimal(item.get("regularMarketChange")),
            change_pct=_to_decimal(item.get("regularMarketChangePercent")),
            timestamp=(
                datetime.fromtimestamp(int(timestamp)) if timestamp else datetime.now()
            ),
        )


def _to_decimal(value: Any) -> Decimal:
    """Convert a JSON number to Decimal (missing values become zero)."""
    if value is None:
        return Decimal("0")
    return Decimal(str(value))
