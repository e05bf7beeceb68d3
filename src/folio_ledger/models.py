"""
Core data models for the portfolio ledger.

This module defines the fundamental data structures used throughout the system,
including open lots, realized sale records, market quotes, report rows and the
application configuration. All monetary quantities use Decimal for precision;
unit counts are whole numbers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
import uuid


class AssetClass(Enum):
    """Asset class of a quoted or held instrument."""
    EQUITY = "Equity"
    CURRENCY = "Currency"
    CRYPTOCURRENCY = "Cryptocurrency"


class ActionType(Enum):
    """Types of logged actions for the decision log."""
    CONFIG_LOADED = "CONFIG_LOADED"
    FUNDS_ADDED = "FUNDS_ADDED"
    FUNDS_WITHDRAWN = "FUNDS_WITHDRAWN"
    PURCHASE_RECORDED = "PURCHASE_RECORDED"
    SALE_RECORDED = "SALE_RECORDED"
    HISTORY_SEEDED = "HISTORY_SEEDED"


@dataclass
class Lot:
    """
    Represents a single open lot.

    A lot tracks one discrete acquisition of an asset at a specific time and
    cost. Purchases of the same symbol are never merged, so the cost basis of
    every acquisition is preserved.

    Attributes:
        lot_id: Unique identifier for this lot
        symbol: Ticker symbol of the asset
        name: Full display name of the asset
        asset_class: Equity, Currency or Cryptocurrency
        acquired_at: Timestamp of the acquisition
        unit_cost: Price paid per unit at acquisition
        units: Units currently held
    """
    lot_id: str
    symbol: str
    name: str
    asset_class: AssetClass
    acquired_at: datetime
    unit_cost: Decimal
    units: int

    @classmethod
    def create(
        cls,
        symbol: str,
        name: str,
        asset_class: AssetClass,
        acquired_at: datetime,
        unit_cost: Decimal,
        units: int,
    ) -> "Lot":
        """Factory method to create a new Lot with auto-generated ID."""
        return cls(
            lot_id=str(uuid.uuid4()),
            symbol=symbol,
            name=name,
            asset_class=asset_class,
            acquired_at=acquired_at,
            unit_cost=unit_cost,
            units=units,
        )

    @property
    def total_cost(self) -> Decimal:
        """Total cost basis for this lot (units * unit_cost)."""
        return self.unit_cost * self.units


@dataclass(frozen=True)
class SoldLot:
    """
    Immutable record of units sold out of a lot.

    One record is created for every portion of a lot consumed by a sale.

    Attributes:
        lot_id: ID of the lot the units came from
        symbol: Ticker symbol
        name: Full display name
        asset_class: Asset class of the lot
        acquired_at: Original acquisition timestamp of the lot
        unit_cost: Per-unit cost basis of the lot
        units: Units sold
        sale_price: Price per unit received
        sold_at: Timestamp of the sale quote
    """
    lot_id: str
    symbol: str
    name: str
    asset_class: AssetClass
    acquired_at: datetime
    unit_cost: Decimal
    units: int
    sale_price: Decimal
    sold_at: datetime

    @classmethod
    def from_lot(
        cls,
        lot: Lot,
        units: int,
        sale_price: Decimal,
        sold_at: datetime,
    ) -> "SoldLot":
        """Create a SoldLot for `units` taken out of `lot`."""
        return cls(
            lot_id=lot.lot_id,
            symbol=lot.symbol,
            name=lot.name,
            asset_class=lot.asset_class,
            acquired_at=lot.acquired_at,
            unit_cost=lot.unit_cost,
            units=units,
            sale_price=sale_price,
            sold_at=sold_at,
        )

    @property
    def proceeds(self) -> Decimal:
        """Cash received for this portion (units * sale_price)."""
        return self.sale_price * self.units


@dataclass(frozen=True)
class Quote:
    """
    Point-in-time price snapshot for a symbol.

    Attributes:
        symbol: Ticker symbol
        name: Full display name
        asset_class: Asset class reported by the source
        price: Current market price
        previous_close: Previous session close
        open_price: Session opening price
        change: Absolute change on the session
        change_pct: Percent change on the session
        timestamp: Time the quote was taken
    """
    symbol: str
    name: str
    asset_class: AssetClass
    price: Decimal
    previous_close: Decimal
    open_price: Decimal
    change: Decimal
    change_pct: Decimal
    timestamp: datetime


@dataclass
class InvestmentSummary:
    """
    Per-symbol holding summary against the live price.

    Attributes:
        symbol: Ticker symbol
        name: Full display name (from the first lot encountered)
        asset_class: Asset class
        average_cost: Unit-weighted average cost across all open lots
        current_price: Live price
        total_units: Units held across all open lots
        difference: current_price - average_cost
        difference_pct: difference / average_cost * 100
    """
    symbol: str
    name: str
    asset_class: AssetClass
    average_cost: Decimal
    current_price: Decimal
    total_units: int
    difference: Decimal
    difference_pct: Decimal


@dataclass
class NameMatchSummary:
    """Lots matched by one search term."""
    term: str
    symbol: str
    name: str
    average_cost: Decimal
    current_price: Decimal
    total_units: int
    match_count: int


@dataclass
class PurchaseInRange:
    """
    One open lot acquired inside a date window.

    Attributes:
        lot: The open lot
        current_price: Live price
        difference: current_price - unit_cost
        change_pct: difference / unit_cost * 100
        cost_to_price_pct: unit_cost / current_price * 100
    """
    lot: Lot
    current_price: Decimal
    difference: Decimal
    change_pct: Decimal
    cost_to_price_pct: Decimal


@dataclass
class SaleInRange:
    """
    One sale record whose lot was acquired inside a date window.

    Attributes:
        sale: The realized sale record
        average_cost: Unit-weighted average cost over every sale of the symbol
        current_price: Live price
        profit_loss: current_price - average_cost
        profit_loss_pct: profit_loss / average_cost * 100
    """
    sale: SoldLot
    average_cost: Decimal
    current_price: Decimal
    profit_loss: Decimal
    profit_loss_pct: Decimal


@dataclass
class SeedPurchase:
    """A known prior holding used to bootstrap the ledger."""
    symbol: str
    name: str
    asset_class: AssetClass
    units: Decimal
    acquired_at: datetime
    unit_cost: Decimal


@dataclass
class AppConfig:
    """
    Application configuration loaded from YAML.

    Attributes:
        base_url: Quote service base URL
        api_keys: API keys for the quote service, tried in order
        in_test: Use the deterministic quote double instead of the live service
        in_development: Development mode flag
        initial_balance: Opening cash balance
        decision_log: Path of the JSONL decision log
        seed_file: Optional CSV of prior holdings to load at start-up
    """
    base_url: str = "https://yfapi.net"
    api_keys: list[str] = field(default_factory=list)
    in_test: bool = False
    in_development: bool = False
    initial_balance: Decimal = Decimal("1000")
    decision_log: str = "output/decision_log.jsonl"
    seed_file: Optional[str] = None


@dataclass
class DecisionLogEntry:
    """
    Entry for the append-only decision log.

    Attributes:
        timestamp: When the action occurred
        action_type: Type of action
        details: JSON-serializable details dictionary
    """
    timestamp: datetime
    action_type: ActionType
    details: dict

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        details: dict,
    ) -> "DecisionLogEntry":
        """Factory method with auto-generated timestamp."""
        return cls(
            timestamp=datetime.now(),
            action_type=action_type,
            details=details,
        )
