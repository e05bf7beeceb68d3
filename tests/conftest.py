"""
Pytest fixtures for the portfolio ledger tests.

Provides common test data and utilities used across test modules.
"""

from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from folio_ledger.ledger import Ledger
from folio_ledger.logging import DecisionLogger
from folio_ledger.models import AssetClass, Lot, SoldLot
from folio_ledger.quotes import MockQuoteSource


@pytest.fixture
def mock_quote_source() -> MockQuoteSource:
    """Mock quote source pricing every symbol at $155."""
    return MockQuoteSource()


@pytest.fixture
def decision_logger(tmp_path) -> DecisionLogger:
    """Decision logger writing to a temporary directory."""
    return DecisionLogger(tmp_path / "decision_log.jsonl")


@pytest.fixture
def ledger(mock_quote_source) -> Ledger:
    """Empty ledger over the mock quote source."""
    return Ledger(mock_quote_source)


@pytest.fixture
def seeded_ledger(mock_quote_source) -> Ledger:
    """
    Ledger holding two AAPL lots of 20 units at $155.576.

    Opens with a $50,000 balance.
    """
    ledger = Ledger(mock_quote_source, balance=Decimal("50000"))
    for _ in range(2):
        ledger.record_historical_purchase(
            symbol="AAPL",
            name="Apple Inc.",
            asset_class=AssetClass.EQUITY,
            units=20,
            acquired_at=datetime(2023, 3, 6),
            unit_cost=Decimal("155.576"),
        )
    return ledger


@pytest.fixture
def make_lot():
    """Factory for lots with sensible defaults."""
    return _make_lot


@pytest.fixture
def make_sold_lot():
    """Factory for sale records with sensible defaults."""
    return _make_sold_lot


def _make_lot(
    symbol: str = "AAPL",
    unit_cost: str = "100",
    units: int = 10,
    acquired_at: datetime = datetime(2023, 1, 15),
    name: str = "Apple Inc.",
    asset_class: AssetClass = AssetClass.EQUITY,
) -> Lot:
    """Build a lot with sensible defaults."""
    return Lot.create(
        symbol=symbol,
        name=name,
        asset_class=asset_class,
        acquired_at=acquired_at,
        unit_cost=Decimal(unit_cost),
        units=units,
    )


def _make_sold_lot(
    symbol: str = "AAPL",
    unit_cost: str = "100",
    units: int = 10,
    acquired_at: datetime = datetime(2023, 1, 15),
    sale_price: str = "150",
    sold_at: datetime = datetime(2024, 1, 15),
) -> SoldLot:
    """Build a sale record with sensible defaults."""
    return SoldLot.from_lot(
        _make_lot(symbol=symbol, unit_cost=unit_cost, units=units, acquired_at=acquired_at),
        units=units,
        sale_price=Decimal(sale_price),
        sold_at=sold_at,
    )


@pytest.fixture
def sample_quote_item() -> dict:
    """A single entry from a Yahoo Finance v6 quote response."""
    return {
        "symbol": "AAPL",
        "longName": "Apple Inc.",
        "shortName": "Apple",
        "quoteType": "EQUITY",
        "regularMarketPrice": 189.84,
        "regularMarketPreviousClose": 187.15,
        "regularMarketOpen": 188.0,
        "regularMarketChange": 2.69,
        "regularMarketChangePercent": 1.4373,
        "regularMarketTime": 1700000000,
    }


@pytest.fixture
def mock_response():
    """Factory for mocked requests responses."""
    def _make(status_code: int = 200, payload=None, json_error: bool = False):
        response = MagicMock()
        response.status_code = status_code
        if json_error:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        else:
            response.json.return_value = payload
        return response

    return _make
