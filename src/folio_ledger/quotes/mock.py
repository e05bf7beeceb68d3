"""
Deterministic quote source for tests and offline sessions.

Returns pre-packaged values for every query and never touches the network.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from folio_ledger.models import AssetClass, Quote
from folio_ledger.quotes.base import QuoteNotFoundError, QuoteSource


class MockQuoteSource(QuoteSource):
    """
    Quote source returning fixed values per symbol.

    Every symbol is quoted at `default_price` unless overridden in `prices`.
    Names and asset classes default to "Fake Asset" and Equity. All requested
    symbols are recorded in `requested`, in call order.

    Example:
        >>> source = MockQuoteSource(prices={"AAPL": Decimal("180")})
        >>> source.get_quote("AAPL").price
        Decimal('180')
    """

    DEFAULT_NAME = "Fake Asset"

    TRENDING = {
        "US": ["AAPL", "MSFT"],
    }

    def __init__(
        self,
        prices: Optional[dict[str, Decimal]] = None,
        names: Optional[dict[str, str]] = None,
        asset_classes: Optional[dict[str, AssetClass]] = None,
        default_price: Decimal = Decimal("155.0"),
        unknown: Optional[set[str]] = None,
    ):
        """
        Initialize the mock quote source.

        Args:
            prices: Per-symbol price overrides
            names: Per-symbol name overrides
            asset_classes: Per-symbol asset class overrides
            default_price: Price for symbols without an override
            unknown: Symbols that raise QuoteNotFoundError
        """
        self.prices = dict(prices or {})
        self.names = dict(names or {})
        self.asset_classes = dict(asset_classes or {})
        self.default_price = default_price
        self.unknown = set(unknown or ())
        self.requested: list[str] = []

    @property
    def name(self) -> str:
        return "Mock"

    def get_quote(self, symbol: str) -> Quote:
        self.requested.append(symbol)
        return self._build_quote(symbol, change_pct=Decimal("3"))

    def get_quotes(self, symbols: list[str]) -> list[Quote]:
        quotes = []
        for offset, symbol in enumerate(symbols, start=1):
            self.requested.append(symbol)
            try:
                quotes.append(
                    self._build_quote(symbol, change_pct=Decimal(3 + offset))
                )
            except QuoteNotFoundError:
                continue
        return quotes

    def get_trending(self, region: str) -> list[str]:
        return list(self.TRENDING.get(region, []))

    def set_price(self, symbol: str, price: Decimal) -> None:
        """Change the quoted price of a symbol."""
        self.prices[symbol] = price

    def _build_quote(self, symbol: str, change_pct: Decimal) -> Quote:
        if symbol in self.unknown:
            raise QuoteNotFoundError(f"Unknown symbol: {symbol}")

        return Quote(
            symbol=symbol,
            name=self.names.get(symbol, self.DEFAULT_NAME),
            asset_class=self.asset_classes.get(symbol, AssetClass.EQUITY),
            price=self.prices.get(symbol, self.default_price),
            previous_close=Decimal("125"),
            open_price=Decimal("150.0"),
            change=Decimal("5.5"),
            change_pct=change_pct,
            timestamp=datetime.now(),
        )
