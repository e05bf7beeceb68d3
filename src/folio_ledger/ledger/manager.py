"""
Cash and position ledger.

The Ledger owns the cash balance, the open lots and the realized sale
records. It is the only component that mutates them; everything else reads
copies through its accessors.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from folio_ledger.ledger.selection import allocate_sale, held_units
from folio_ledger.logging.decision_log import DecisionLogger
from folio_ledger.models import AssetClass, Lot, Quote, SoldLot
from folio_ledger.quotes.base import QuoteSource, QuoteSourceError

logger = logging.getLogger(__name__)


class InvalidAmountError(ValueError):
    """Raised when a deposit amount is not positive."""
    pass


class Ledger:
    """
    Cash balance plus open lots and sales history.

    Business conditions (insufficient funds, insufficient units) are reported
    by returning False and leave every piece of state unchanged. Quote source
    failures are logged and reported the same way.

    Not thread-safe: callers that share a ledger must serialize mutations.

    Example:
        >>> ledger = Ledger(MockQuoteSource(), balance=Decimal("2000"))
        >>> ledger.record_purchase("AAPL", 3)
        True
        >>> ledger.balance
        Decimal('1535.0')
    """

    def __init__(
        self,
        quote_source: QuoteSource,
        balance: Decimal = Decimal("0"),
        decision_logger: Optional[DecisionLogger] = None,
    ):
        """
        Initialize the ledger.

        Args:
            quote_source: Source of live prices for purchases and sales
            balance: Opening cash balance
            decision_logger: Optional audit log for successful mutations
        """
        self._quote_source = quote_source
        self._balance = Decimal(balance)
        self._lots: list[Lot] = []
        self._sales: list[SoldLot] = []
        self._decision_logger = decision_logger

    @property
    def quote_source(self) -> QuoteSource:
        return self._quote_source

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def lots(self) -> list[Lot]:
        """Copy of the open lots, in purchase order."""
        return list(self._lots)

    @property
    def sales(self) -> list[SoldLot]:
        """Copy of the realized sale records, oldest first."""
        return list(self._sales)

    def units_held(self, symbol: str) -> int:
        """Total units of `symbol` across all open lots."""
        return held_units(self._lots, symbol)

    def add_funds(self, amount: Decimal) -> None:
        """
        Add cash to the balance.

        Args:
            amount: Amount to deposit

        Raises:
            InvalidAmountError: If amount is not greater than zero
        """
        amount = Decimal(amount)
        if amount <= 0:
            raise InvalidAmountError(
                f"Deposit must be greater than 0, got {amount}"
            )

        self._balance += amount

        if self._decision_logger:
            self._decision_logger.log_funds_added(amount, self._balance)

    def withdraw_funds(self, amount: Decimal) -> bool:
        """
        Withdraw cash from the balance.

        Args:
            amount: Amount to withdraw

        Returns:
            True if withdrawn, False if the amount is negative or the
            balance is insufficient
        """
        amount = Decimal(amount)
        if amount < 0 or amount > self._balance:
            return False

        self._balance -= amount

        if self._decision_logger:
            self._decision_logger.log_funds_withdrawn(amount, self._balance)
        return True

    def record_purchase(self, symbol: str, units: Decimal | int) -> bool:
        """
        Buy `units` of `symbol` at the live price.

        Fractional requests are truncated to whole units. The new lot takes its
        name, class, timestamp and unit cost from the quote.

        Args:
            symbol: Symbol to buy
            units: Units requested

        Returns:
            True if purchased, False if the request is not a positive whole
            unit count, the quote could not be fetched, or funds are short
        """
        whole_units = int(units)
        if whole_units <= 0:
            return False

        quote = self._fetch_quote(symbol)
        if quote is None:
            return False

        cost = quote.price * whole_units
        if cost > self._balance:
            return False

        lot = Lot.create(
            symbol=quote.symbol,
            name=quote.name,
            asset_class=quote.asset_class,
            acquired_at=quote.timestamp,
            unit_cost=quote.price,
            units=whole_units,
        )
        self._balance -= cost
        self._lots.append(lot)

        if self._decision_logger:
            self._decision_logger.log_purchase_recorded(lot, self._balance)
        return True

    def record_sale(self, symbol: str, units: int) -> bool:
        """
        Sell `units` of `symbol` at the live price.

        Lots are consumed cheapest cost basis first (see
        `folio_ledger.ledger.selection`). The balance is credited with the
        single sale price times `units`, however many lots are touched.

        Args:
            symbol: Symbol to sell
            units: Units to sell

        Returns:
            True if sold, False if not enough units are held, there are no
            open lots, or the quote could not be fetched
        """
        if units <= 0 or int(units) != units:
            return False
        units = int(units)

        if not self._lots or held_units(self._lots, symbol) < units:
            return False

        quote = self._fetch_quote(symbol)
        if quote is None:
            return False

        allocation = allocate_sale(
            self._lots,
            symbol,
            units,
            sale_price=quote.price,
            sold_at=quote.timestamp,
        )
        if allocation is None:
            return False

        self._lots = allocation.remaining_lots
        self._sales.extend(allocation.sold_lots)
        self._balance += quote.price * units

        if self._decision_logger:
            self._decision_logger.log_sale_recorded(
                symbol, units, quote.price, allocation.sold_lots, self._balance
            )
        return True

    def record_historical_purchase(
        self,
        symbol: str,
        name: str,
        asset_class: AssetClass,
        units: Decimal | int,
        acquired_at: datetime,
        unit_cost: Decimal,
    ) -> Lot:
        """
        Add a prior holding without touching the balance or the quote source.

        Units are truncated to whole units, as for live purchases.

        Returns:
            The lot that was added
        """
        lot = Lot.create(
            symbol=symbol,
            name=name,
            asset_class=asset_class,
            acquired_at=acquired_at,
            unit_cost=Decimal(unit_cost),
            units=int(units),
        )
        self._lots.append(lot)
        return lot

    def get_asset_information(self, symbols: list[str]) -> list[Quote]:
        """
        Fetch live quotes for a list of symbols.

        Returns:
            Quotes in input order, or an empty list if the source fails
        """
        try:
            return self._quote_source.get_quotes(symbols)
        except QuoteSourceError as e:
            logger.warning("Could not fetch quotes for %s: %s", symbols, e)
            return []

    def _fetch_quote(self, symbol: str) -> Optional[Quote]:
        try:
            return self._quote_source.get_quote(symbol)
        except QuoteSourceError as e:
            logger.warning("Could not fetch quote for %s: %s", symbol, e)
            return None
