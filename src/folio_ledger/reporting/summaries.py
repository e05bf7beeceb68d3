"""
Valuation and reporting over the ledger.

All reports are read-only. They combine the cost data stored on the ledger
with quotes fetched at report time; nothing is cached, so each symbol or row
a report touches issues its own quote call. Rows that cannot be priced, or
whose averages would divide by zero, are logged and left out.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from folio_ledger.ledger.manager import Ledger
from folio_ledger.models import (
    AssetClass,
    InvestmentSummary,
    Lot,
    NameMatchSummary,
    PurchaseInRange,
    Quote,
    SaleInRange,
)
from folio_ledger.quotes.base import QuoteSource, QuoteSourceError
from folio_ledger.reporting.holdings import (
    acquired_between,
    aggregate_by_symbol,
    filter_lots_by_class,
    weighted_average_cost,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


class PortfolioReporter:
    """
    Read-only valuation and report queries over a Ledger.

    Args:
        ledger: Ledger to report on
        quote_source: Quote source for live prices (defaults to the ledger's)
    """

    def __init__(self, ledger: Ledger, quote_source: Optional[QuoteSource] = None):
        self._ledger = ledger
        self._quote_source = quote_source or ledger.quote_source

    def portfolio_value(self) -> Decimal:
        """
        Current market value of every open lot.

        Issues one quote call per lot, even when symbols repeat. Lots that
        cannot be quoted are left out of the total.

        Returns:
            Sum of live price * units over the open lots
        """
        total = Decimal("0")
        for lot in self._ledger.lots:
            quote = self._fetch_quote(lot.symbol)
            if quote is None:
                continue
            total += quote.price * lot.units
        return total

    def list_all_investments(self) -> list[InvestmentSummary]:
        """Summarize every held symbol against its live price."""
        return self._summarize(self._ledger.lots)

    def list_by_type(self, asset_class: AssetClass | str) -> list[InvestmentSummary]:
        """
        Summarize held symbols of one asset class.

        Args:
            asset_class: AssetClass, or its exact name ("Equity",
                "Currency", "Cryptocurrency")
        """
        return self._summarize(filter_lots_by_class(self._ledger.lots, asset_class))

    def list_by_name(self, terms: list[str]) -> list[NameMatchSummary]:
        """
        Summarize the lots matching each search term.

        A lot matches when the term is a case-sensitive substring of its name
        or symbol. Every term is totalled on its own. Symbol, name and current
        price are those of the last matching lot.

        Args:
            terms: Search terms, e.g. ["MSFT", "Bitco"]

        Returns:
            One summary per term with at least one match
        """
        lots = self._ledger.lots
        summaries = []

        for term in terms:
            matches = [lot for lot in lots if term in lot.name or term in lot.symbol]
            if not matches:
                continue

            try:
                average_cost = weighted_average_cost(matches)
            except (ZeroDivisionError, InvalidOperation):
                logger.warning("No units held matching %r, skipping", term)
                continue

            last = matches[-1]
            quote = self._fetch_quote(last.symbol)
            if quote is None:
                continue

            summaries.append(
                NameMatchSummary(
                    term=term,
                    symbol=last.symbol,
                    name=last.name,
                    average_cost=average_cost,
                    current_price=quote.price,
                    total_units=sum(lot.units for lot in matches),
                    match_count=len(matches),
                )
            )

        return summaries

    def list_purchases_in_range(
        self,
        start: date | datetime,
        end: date | datetime,
    ) -> list[PurchaseInRange]:
        """
        Open lots acquired strictly between `start` and `end`.

        Each row carries two percentages: `change_pct` (price move relative to
        cost) and `cost_to_price_pct` (unit cost as a share of the current
        price).

        Returns:
            Rows ordered oldest to most recent
        """
        rows = []
        for lot in acquired_between(self._ledger.lots, start, end):
            quote = self._fetch_quote(lot.symbol)
            if quote is None:
                continue

            difference = quote.price - lot.unit_cost
            try:
                change_pct = difference / lot.unit_cost * HUNDRED
                cost_to_price_pct = lot.unit_cost / quote.price * HUNDRED
            except (ZeroDivisionError, InvalidOperation):
                logger.warning("Zero cost or price for lot %s, skipping", lot.lot_id)
                continue

            rows.append(
                PurchaseInRange(
                    lot=lot,
                    current_price=quote.price,
                    difference=difference,
                    change_pct=change_pct,
                    cost_to_price_pct=cost_to_price_pct,
                )
            )

        return rows

    def list_sales_in_range(
        self,
        start: date | datetime,
        end: date | datetime,
    ) -> list[SaleInRange]:
        """
        Sales of lots acquired strictly between `start` and `end`.

        The average cost on each row spans every sale of that symbol, whether
        or not it falls in the window. Profit/loss compares that average with
        the current live price, not the price recorded at sale time.

        Returns:
            Rows ordered oldest to most recent acquisition
        """
        sales = self._ledger.sales
        sales_by_symbol = aggregate_by_symbol(sales)
        rows = []

        for sale in acquired_between(sales, start, end):
            try:
                average_cost = weighted_average_cost(sales_by_symbol[sale.symbol])
            except (ZeroDivisionError, InvalidOperation):
                logger.warning("No units sold for %s, skipping", sale.symbol)
                continue

            quote = self._fetch_quote(sale.symbol)
            if quote is None:
                continue

            profit_loss = quote.price - average_cost
            try:
                profit_loss_pct = profit_loss / average_cost * HUNDRED
            except (ZeroDivisionError, InvalidOperation):
                logger.warning("Zero average cost for %s, skipping", sale.symbol)
                continue

            rows.append(
                SaleInRange(
                    sale=sale,
                    average_cost=average_cost,
                    current_price=quote.price,
                    profit_loss=profit_loss,
                    profit_loss_pct=profit_loss_pct,
                )
            )

        return rows

    def _summarize(self, lots: list[Lot]) -> list[InvestmentSummary]:
        """One summary per symbol, in first-encountered order."""
        summaries = []

        for symbol, symbol_lots in aggregate_by_symbol(lots).items():
            try:
                average_cost = weighted_average_cost(symbol_lots)
            except (ZeroDivisionError, InvalidOperation):
                logger.warning("No units held for %s, skipping", symbol)
                continue

            quote = self._fetch_quote(symbol)
            if quote is None:
                continue

            difference = quote.price - average_cost
            try:
                difference_pct = difference / average_cost * HUNDRED
            except (ZeroDivisionError, InvalidOperation):
                logger.warning("Zero average cost for %s, skipping", symbol)
                continue

            first = symbol_lots[0]
            summaries.append(
                InvestmentSummary(
                    symbol=symbol,
                    name=first.name,
                    asset_class=first.asset_class,
                    average_cost=average_cost,
                    current_price=quote.price,
                    total_units=sum(lot.units for lot in symbol_lots),
                    difference=difference,
                    difference_pct=difference_pct,
                )
            )

        return summaries

    def _fetch_quote(self, symbol: str) -> Optional[Quote]:
        try:
            return self._quote_source.get_quote(symbol)
        except QuoteSourceError as e:
            logger.warning("Could not fetch quote for %s: %s", symbol, e)
            return None
