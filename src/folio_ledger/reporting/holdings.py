"""
Grouping and filtering helpers for lots and sale records.
"""

from collections import defaultdict
from datetime import date, datetime, time
from decimal import Decimal
from typing import Iterable, TypeVar

from folio_ledger.models import AssetClass, Lot, SoldLot

LotLike = TypeVar("LotLike", Lot, SoldLot)


def aggregate_by_symbol(
    lots: Iterable[LotLike],
) -> dict[str, list[LotLike]]:
    """
    Group lots by symbol.

    Args:
        lots: Lots or sale records

    Returns:
        Dictionary mapping symbol to its lots, keyed in first-encountered order
    """
    holdings: dict[str, list[LotLike]] = defaultdict(list)
    for lot in lots:
        holdings[lot.symbol].append(lot)
    return dict(holdings)


def weighted_average_cost(lots: Iterable[Lot | SoldLot]) -> Decimal:
    """
    Unit-weighted average cost: total cost divided by total units.

    Raises:
        ZeroDivisionError: If the lots hold no units
    """
    total_cost = Decimal("0")
    total_units = 0
    for lot in lots:
        total_cost += lot.unit_cost * lot.units
        total_units += lot.units
    if total_units == 0:
        raise ZeroDivisionError("lots hold no units")
    return total_cost / total_units


def filter_lots_by_class(
    lots: Iterable[Lot],
    asset_class: AssetClass | str,
) -> list[Lot]:
    """
    Filter lots to one asset class.

    A string is matched exactly against the class name, e.g. "Equity".
    """
    if isinstance(asset_class, AssetClass):
        asset_class = asset_class.value
    return [lot for lot in lots if lot.asset_class.value == asset_class]


def acquired_between(
    lots: Iterable[LotLike],
    start: date | datetime,
    end: date | datetime,
) -> list[LotLike]:
    """
    Lots acquired strictly after `start` and strictly before `end`.

    Returns:
        Matching lots ordered oldest to most recent
    """
    start_at = as_datetime(start)
    end_at = as_datetime(end)
    matched = [lot for lot in lots if start_at < lot.acquired_at < end_at]
    return sorted(matched, key=lambda lot: lot.acquired_at)


def as_datetime(value: date | datetime) -> datetime:
    """Promote a date to midnight of that day."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)
