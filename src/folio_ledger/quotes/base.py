"""
Abstract base class for quote sources.

Defines the narrow interface the ledger and the reports consume, so that a
live market adapter and a deterministic test double are interchangeable.
"""

from abc import ABC, abstractmethod

from folio_ledger.models import Quote


class QuoteSourceError(Exception):
    """Raised when a quote source encounters an error."""
    pass


class QuoteNotFoundError(QuoteSourceError):
    """Raised when a symbol is unknown to the quote source."""
    pass


class QuoteTransportError(QuoteSourceError):
    """Raised when a request fails or its response cannot be parsed."""
    pass


class QuoteSource(ABC):
    """
    Abstract base class for market quote sources.

    Implementations must provide methods to fetch:
    - A quote for one symbol
    - Quotes for a list of symbols
    - The trending symbols for a region
    """

    @abstractmethod
    def get_quote(self, symbol: str) -> Quote:
        """
        Fetch the current quote for a single symbol.

        Args:
            symbol: Ticker symbol

        Returns:
            Quote for the symbol

        Raises:
            QuoteNotFoundError: If the symbol is unknown
            QuoteTransportError: If the request fails
        """
        pass

    @abstractmethod
    def get_quotes(self, symbols: list[str]) -> list[Quote]:
        """
        Fetch current quotes for several symbols.

        Args:
            symbols: List of ticker symbols

        Returns:
            Quotes in input order. Symbols that could not be quoted are
            omitted, so the list may be shorter than the input.
        """
        pass

    @abstractmethod
    def get_trending(self, region: str) -> list[str]:
        """
        Get trending symbols for a region.

        Args:
            region: Region code, e.g. "US"

        Returns:
            List of ticker symbols
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this quote source."""
        pass
