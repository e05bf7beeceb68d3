"""
Bootstrapping of known prior holdings.

Prior purchases are added straight to the open lots, bypassing the live-quote
purchase path and leaving the cash balance untouched.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from folio_ledger.ledger.manager import Ledger
from folio_ledger.logging.decision_log import DecisionLogger
from folio_ledger.models import AssetClass, Lot, SeedPurchase


DEFAULT_HISTORY: list[SeedPurchase] = [
    SeedPurchase(
        symbol="TSLA",
        name="Tesla Inc.",
        asset_class=AssetClass.EQUITY,
        units=Decimal("10"),
        acquired_at=datetime(2021, 10, 1),
        unit_cost=Decimal("755.22"),
    ),
    SeedPurchase(
        symbol="AAPL",
        name="Apple Inc.",
        asset_class=AssetClass.EQUITY,
        units=Decimal("20"),
        acquired_at=datetime(2023, 3, 6),
        unit_cost=Decimal("155.576"),
    ),
    SeedPurchase(
        symbol="NVDA",
        name="NVIDIA Corporation",
        asset_class=AssetClass.EQUITY,
        units=Decimal("12"),
        acquired_at=datetime(2021, 4, 14),
        unit_cost=Decimal("152.77"),
    ),
    # Truncates to a zero-unit lot
    SeedPurchase(
        symbol="BTC-USD",
        name="Bitcoin USD",
        asset_class=AssetClass.CRYPTOCURRENCY,
        units=Decimal("0.0445881"),
        acquired_at=datetime(2021, 2, 9),
        unit_cost=Decimal("2000"),
    ),
]


def seed_ledger(
    ledger: Ledger,
    purchases: list[SeedPurchase],
    decision_logger: Optional[DecisionLogger] = None,
) -> list[Lot]:
    """
    Record each prior purchase on the ledger.

    Args:
        ledger: Ledger to populate
        purchases: Prior holdings, in the order they should be added
        decision_logger: Optional audit log

    Returns:
        The lots that were added
    """
    lots = [
        ledger.record_historical_purchase(
            symbol=p.symbol,
            name=p.name,
            asset_class=p.asset_class,
            units=p.units,
            acquired_at=p.acquired_at,
            unit_cost=p.unit_cost,
        )
        for p in purchases
    ]

    if decision_logger:
        decision_logger.log_history_seeded(lots)

    return lots
