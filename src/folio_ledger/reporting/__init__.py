"""
Reporting module for the portfolio ledger.

Provides valuation, per-symbol, per-class, name-search and date-range
reports, plus plain-text formatters for each.
"""

from folio_ledger.reporting.summaries import PortfolioReporter
from folio_ledger.reporting.formatters import (
    format_investments,
    format_name_matches,
    format_purchases,
    format_quote,
    format_sales,
)

__all__ = [
    "PortfolioReporter",
    "format_investments",
    "format_name_matches",
    "format_purchases",
    "format_quote",
    "format_sales",
]
