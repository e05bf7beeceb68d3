"""
Quote sources for live and simulated market prices.

Provides a narrow pluggable interface (single quote, many quotes, trending
symbols) with a live Yahoo Finance adapter and a deterministic test double.
"""

from folio_ledger.quotes.base import (
    QuoteNotFoundError,
    QuoteSource,
    QuoteSourceError,
    QuoteTransportError,
)
from folio_ledger.quotes.mock import MockQuoteSource
from folio_ledger.quotes.yahoo import YahooQuoteSource

__all__ = [
    "QuoteSource",
    "QuoteSourceError",
    "QuoteNotFoundError",
    "QuoteTransportError",
    "MockQuoteSource",
    "YahooQuoteSource",
]
