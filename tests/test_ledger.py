"""
Tests for the cash and position ledger.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from folio_ledger.ledger import (
    DEFAULT_HISTORY,
    InvalidAmountError,
    Ledger,
    seed_ledger,
)
from folio_ledger.models import ActionType, AssetClass
from folio_ledger.quotes import MockQuoteSource


def _ledger_with_aapl(balance: str) -> tuple[Ledger, MockQuoteSource]:
    """Ledger holding two AAPL lots of 20 units at $155.576."""
    source = MockQuoteSource()
    ledger = Ledger(source, balance=Decimal(balance))
    for _ in range(2):
        ledger.record_historical_purchase(
            symbol="AAPL",
            name="Apple Inc.",
            asset_class=AssetClass.EQUITY,
            units=20,
            acquired_at=datetime(2023, 3, 6),
            unit_cost=Decimal("155.576"),
        )
    return ledger, source


class TestFunds:
    """Tests for deposits and withdrawals."""

    def test_new_ledger_starts_empty(self, ledger):
        """Test that a ledger without a balance starts at zero with no lots."""
        assert ledger.balance == Decimal("0")
        assert ledger.lots == []
        assert ledger.sales == []

    @pytest.mark.parametrize(
        "start,deposit,expected",
        [
            ("0", "100", "100"),
            ("50", "25.50", "75.50"),
            ("1000", "0.01", "1000.01"),
        ],
    )
    def test_add_funds(self, mock_quote_source, start, deposit, expected):
        """Test that deposits increase the balance by the amount."""
        ledger = Ledger(mock_quote_source, balance=Decimal(start))
        ledger.add_funds(Decimal(deposit))
        assert ledger.balance == Decimal(expected)

    @pytest.mark.parametrize("amount", ["0", "-10"])
    def test_add_funds_rejects_non_positive(self, ledger, amount):
        """Test that zero or negative deposits raise and leave the balance alone."""
        with pytest.raises(InvalidAmountError):
            ledger.add_funds(Decimal(amount))
        assert ledger.balance == Decimal("0")

    @pytest.mark.parametrize(
        "start,withdrawal,expected",
        [
            ("50", "25", "25"),
            ("150", "50", "100"),
            ("2000", "700", "1300"),
            ("50000", "47000", "3000"),
        ],
    )
    def test_withdraw_funds(self, mock_quote_source, start, withdrawal, expected):
        """Test that withdrawals within the balance succeed."""
        ledger = Ledger(mock_quote_source, balance=Decimal(start))
        assert ledger.withdraw_funds(Decimal(withdrawal)) is True
        assert ledger.balance == Decimal(expected)

    def test_withdraw_entire_balance(self, mock_quote_source):
        """Test that the whole balance can be withdrawn."""
        ledger = Ledger(mock_quote_source, balance=Decimal("100"))
        assert ledger.withdraw_funds(Decimal("100")) is True
        assert ledger.balance == Decimal("0")

    def test_withdraw_insufficient_funds(self, mock_quote_source):
        """Test that overdrawing fails and leaves the balance unchanged."""
        ledger = Ledger(mock_quote_source, balance=Decimal("100"))
        assert ledger.withdraw_funds(Decimal("100.01")) is False
        assert ledger.balance == Decimal("100")

    def test_withdraw_negative_amount(self, mock_quote_source):
        """Test that a negative withdrawal is rejected."""
        ledger = Ledger(mock_quote_source, balance=Decimal("100"))
        assert ledger.withdraw_funds(Decimal("-5")) is False
        assert ledger.balance == Decimal("100")


class TestRecordPurchase:
    """Tests for purchases at the live price."""

    @pytest.mark.parametrize(
        "balance,units,expected",
        [
            ("500", 3, "35"),
            ("1000", 6, "70"),
            ("25000", 46, "17870"),
            ("50000", 80, "37600"),
        ],
    )
    def test_purchase_debits_balance(self, mock_quote_source, balance, units, expected):
        """Test that a purchase debits price * units at $155."""
        ledger = Ledger(mock_quote_source, balance=Decimal(balance))
        assert ledger.record_purchase("AAPL", units) is True
        assert ledger.balance == Decimal(expected)

    def test_purchase_creates_lot_from_quote(self, mock_quote_source):
        """Test that the new lot takes name, class and cost from the quote."""
        ledger = Ledger(mock_quote_source, balance=Decimal("2000"))

        assert ledger.record_purchase("AAPL", 3)

        assert ledger.balance == Decimal("1535.0")
        assert len(ledger.lots) == 1
        lot = ledger.lots[0]
        assert lot.symbol == "AAPL"
        assert lot.name == "Fake Asset"
        assert lot.asset_class == AssetClass.EQUITY
        assert lot.unit_cost == Decimal("155.0")
        assert lot.units == 3

    def test_purchases_are_never_merged(self, mock_quote_source):
        """Test that two purchases of one symbol create two lots."""
        ledger = Ledger(mock_quote_source, balance=Decimal("2000"))
        ledger.record_purchase("AAPL", 2)
        ledger.record_purchase("AAPL", 4)

        assert [lot.units for lot in ledger.lots] == [2, 4]
        assert ledger.units_held("AAPL") == 6

    def test_purchase_insufficient_funds(self, mock_quote_source):
        """Test that a purchase costing more than the balance fails unchanged."""
        ledger = Ledger(mock_quote_source, balance=Decimal("300"))

        assert ledger.record_purchase("AAPL", 2) is False
        assert ledger.balance == Decimal("300")
        assert ledger.lots == []

    def test_purchase_exact_balance(self, mock_quote_source):
        """Test that a purchase costing exactly the balance succeeds."""
        ledger = Ledger(mock_quote_source, balance=Decimal("310"))

        assert ledger.record_purchase("AAPL", 2) is True
        assert ledger.balance == Decimal("0")

    def test_fractional_units_are_truncated(self, mock_quote_source):
        """Test that fractional requests buy the whole-unit part only."""
        ledger = Ledger(mock_quote_source, balance=Decimal("1000"))

        assert ledger.record_purchase("AAPL", Decimal("2.9")) is True
        assert ledger.lots[0].units == 2
        assert ledger.balance == Decimal("690.0")

    @pytest.mark.parametrize("units", [0, Decimal("0.5"), -3])
    def test_purchase_without_whole_units(self, mock_quote_source, units):
        """Test that requests truncating to zero or below fail."""
        ledger = Ledger(mock_quote_source, balance=Decimal("1000"))

        assert ledger.record_purchase("AAPL", units) is False
        assert ledger.lots == []
        assert mock_quote_source.requested == []

    def test_purchase_unknown_symbol(self):
        """Test that a quote failure fails the purchase unchanged."""
        source = MockQuoteSource(unknown={"NOPE"})
        ledger = Ledger(source, balance=Decimal("1000"))

        assert ledger.record_purchase("NOPE", 1) is False
        assert ledger.balance == Decimal("1000")
        assert ledger.lots == []


class TestRecordSale:
    """Tests for sales at the live price."""

    @pytest.mark.parametrize(
        "balance,units,expected",
        [
            ("50", 1, "205"),
            ("150", 2, "460"),
            ("2000", 3, "2465"),
            ("50000", 10, "51550"),
            ("50000", 20, "53100"),
            ("50000", 21, "53255"),
        ],
    )
    def test_sale_credits_balance(self, balance, units, expected):
        """Test that a sale credits price * units at $155."""
        ledger, _ = _ledger_with_aapl(balance)

        assert ledger.record_sale("AAPL", units) is True
        assert ledger.balance == Decimal(expected)

    def test_sale_spanning_lots(self):
        """Test that selling 21 of 2x20 units leaves one lot of 19."""
        ledger, _ = _ledger_with_aapl("50000")
        first, second = ledger.lots

        assert ledger.record_sale("AAPL", 21)

        assert len(ledger.lots) == 1
        assert ledger.lots[0].lot_id == second.lot_id
        assert ledger.lots[0].units == 19
        assert [(s.lot_id, s.units) for s in ledger.sales] == [
            (first.lot_id, 20),
            (second.lot_id, 1),
        ]

    def test_sale_records_price_and_cost(self, seeded_ledger):
        """Test that sale records carry the lot cost and the sale price."""
        seeded_ledger.record_sale("AAPL", 5)

        sale = seeded_ledger.sales[0]
        assert sale.unit_cost == Decimal("155.576")
        assert sale.sale_price == Decimal("155.0")
        assert sale.acquired_at == datetime(2023, 3, 6)
        assert sale.units == 5

    def test_sale_exhausting_holdings(self, seeded_ledger):
        """Test that selling every unit removes all lots."""
        assert seeded_ledger.record_sale("AAPL", 40) is True
        assert seeded_ledger.lots == []
        assert seeded_ledger.units_held("AAPL") == 0

    def test_sale_cheapest_lot_first(self, mock_quote_source):
        """Test that the lowest-cost lot is consumed first."""
        ledger = Ledger(mock_quote_source)
        expensive = ledger.record_historical_purchase(
            "MSFT", "Microsoft", AssetClass.EQUITY, 5, datetime(2022, 1, 1), Decimal("300")
        )
        cheap = ledger.record_historical_purchase(
            "MSFT", "Microsoft", AssetClass.EQUITY, 5, datetime(2023, 1, 1), Decimal("200")
        )

        assert ledger.record_sale("MSFT", 3)

        units_by_lot = {lot.lot_id: lot.units for lot in ledger.lots}
        assert units_by_lot == {expensive.lot_id: 5, cheap.lot_id: 2}
        assert ledger.sales[0].lot_id == cheap.lot_id

    def test_sale_insufficient_units(self, seeded_ledger):
        """Test that overselling fails and leaves all state unchanged."""
        lots_before = seeded_ledger.lots

        assert seeded_ledger.record_sale("AAPL", 41) is False
        assert seeded_ledger.balance == Decimal("50000")
        assert seeded_ledger.lots == lots_before
        assert seeded_ledger.sales == []

    def test_sale_with_no_lots(self, mock_quote_source):
        """Test that selling from an empty ledger fails without a quote call."""
        ledger = Ledger(mock_quote_source, balance=Decimal("100"))

        assert ledger.record_sale("AAPL", 1) is False
        assert ledger.balance == Decimal("100")
        assert mock_quote_source.requested == []

    def test_sale_of_unheld_symbol(self, seeded_ledger):
        """Test that selling a symbol that is not held fails."""
        assert seeded_ledger.record_sale("MSFT", 1) is False
        assert seeded_ledger.units_held("AAPL") == 40

    @pytest.mark.parametrize("units", [0, -1, Decimal("1.5")])
    def test_sale_rejects_non_whole_units(self, seeded_ledger, units):
        """Test that zero, negative and fractional sales are rejected."""
        assert seeded_ledger.record_sale("AAPL", units) is False
        assert seeded_ledger.units_held("AAPL") == 40

    def test_sale_quote_failure(self):
        """Test that a quote failure fails the sale unchanged."""
        ledger, source = _ledger_with_aapl("100")
        source.unknown.add("AAPL")

        assert ledger.record_sale("AAPL", 1) is False
        assert ledger.balance == Decimal("100")
        assert ledger.units_held("AAPL") == 40

    def test_purchase_then_sale_restores_balance(self, mock_quote_source):
        """Test that buying and selling at one price is cash neutral."""
        ledger = Ledger(mock_quote_source, balance=Decimal("1000"))

        assert ledger.record_purchase("AAPL", 4)
        assert ledger.record_sale("AAPL", 4)

        assert ledger.balance == Decimal("1000")
        assert ledger.lots == []
        assert len(ledger.sales) == 1

    def test_sold_units_match_units_bought(self):
        """Test that selling out over several sales books every unit bought once."""
        source = MockQuoteSource()
        ledger = Ledger(source, balance=Decimal("100000"))
        purchases = [("120", 7), ("95", 4), ("150", 9), ("95", 5)]
        for price, units in purchases:
            source.set_price("MSFT", Decimal(price))
            assert ledger.record_purchase("MSFT", units)
        total_bought = sum(units for _, units in purchases)

        source.set_price("MSFT", Decimal("130"))
        held = total_bought
        for units in (3, 8, 1, 6, 7):
            assert ledger.record_sale("MSFT", units)
            held -= units
            assert ledger.units_held("MSFT") == held

        assert ledger.lots == []
        assert sum(s.units for s in ledger.sales if s.symbol == "MSFT") == total_bought
        assert [s.unit_cost for s in ledger.sales] == sorted(s.unit_cost for s in ledger.sales)

    def test_accessors_return_copies(self, seeded_ledger):
        """Test that mutating the returned lists does not touch the ledger."""
        seeded_ledger.lots.clear()
        seeded_ledger.sales.append(None)

        assert len(seeded_ledger.lots) == 2
        assert seeded_ledger.sales == []


class TestGetAssetInformation:
    """Tests for multi-symbol quote lookups."""

    def test_returns_quotes_in_order(self, ledger):
        """Test that quotes come back in request order."""
        quotes = ledger.get_asset_information(["AAPL", "MSFT"])
        assert [q.symbol for q in quotes] == ["AAPL", "MSFT"]

    def test_skips_unknown_symbols(self):
        """Test that unknown symbols are left out."""
        ledger = Ledger(MockQuoteSource(unknown={"NOPE"}))
        quotes = ledger.get_asset_information(["NOPE", "AAPL"])
        assert [q.symbol for q in quotes] == ["AAPL"]


class TestDecisionLogging:
    """Tests for audit logging of ledger mutations."""

    def test_mutations_are_logged(self, mock_quote_source, decision_logger):
        """Test that each successful mutation writes one entry."""
        ledger = Ledger(mock_quote_source, decision_logger=decision_logger)

        ledger.add_funds(Decimal("1000"))
        ledger.withdraw_funds(Decimal("100"))
        ledger.record_purchase("AAPL", 2)
        ledger.record_sale("AAPL", 1)

        action_types = [e.action_type for e in decision_logger.read_log()]
        assert action_types == [
            ActionType.FUNDS_ADDED,
            ActionType.FUNDS_WITHDRAWN,
            ActionType.PURCHASE_RECORDED,
            ActionType.SALE_RECORDED,
        ]

    def test_failed_mutations_are_not_logged(self, mock_quote_source, decision_logger):
        """Test that rejected operations leave the log empty."""
        ledger = Ledger(mock_quote_source, decision_logger=decision_logger)

        ledger.withdraw_funds(Decimal("1"))
        ledger.record_purchase("AAPL", 1)
        ledger.record_sale("AAPL", 1)

        assert decision_logger.read_log() == []


class TestSeedLedger:
    """Tests for bootstrapping prior holdings."""

    def test_default_history(self, ledger):
        """Test that the built-in history adds four lots without cash."""
        lots = seed_ledger(ledger, DEFAULT_HISTORY)

        assert [lot.symbol for lot in lots] == ["TSLA", "AAPL", "NVDA", "BTC-USD"]
        assert ledger.balance == Decimal("0")
        assert ledger.units_held("TSLA") == 10
        assert ledger.units_held("AAPL") == 20
        assert ledger.units_held("NVDA") == 12

    def test_fractional_seed_truncates_to_zero(self, ledger):
        """Test that the fractional Bitcoin holding becomes a zero-unit lot."""
        seed_ledger(ledger, DEFAULT_HISTORY)

        btc = [lot for lot in ledger.lots if lot.symbol == "BTC-USD"]
        assert len(btc) == 1
        assert btc[0].units == 0
        assert btc[0].asset_class == AssetClass.CRYPTOCURRENCY

    def test_seed_does_not_quote(self, ledger, mock_quote_source):
        """Test that seeding never calls the quote source."""
        seed_ledger(ledger, DEFAULT_HISTORY)
        assert mock_quote_source.requested == []

    def test_seed_is_logged(self, ledger, decision_logger):
        """Test that seeding writes a history entry."""
        seed_ledger(ledger, DEFAULT_HISTORY, decision_logger)

        entries = decision_logger.filter_by_action_type(ActionType.HISTORY_SEEDED)
        assert len(entries) == 1
        assert entries[0].details["num_lots"] == 4
        assert entries[0].details["symbols"] == ["AAPL", "BTC-USD", "NVDA", "TSLA"]
