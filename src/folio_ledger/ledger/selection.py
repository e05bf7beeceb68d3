"""
Lot selection for sales.

Decides which open lots a sale consumes and in what order, and computes the
resulting sale records. Among lots of the sold symbol the cheapest cost basis
is consumed first: a sale is booked at one quoted price for all units, so this
order maximizes the profit recorded on the sale.

The functions here never mutate their inputs. `allocate_sale` returns a new
open-lot list that the ledger swaps in once the whole sale has succeeded.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from folio_ledger.models import Lot, SoldLot


@dataclass
class SaleAllocation:
    """
    Outcome of allocating a sale across open lots.

    Attributes:
        remaining_lots: Open lots after the sale, in their original order
        sold_lots: One sale record per portion of a lot consumed
    """
    remaining_lots: list[Lot]
    sold_lots: list[SoldLot]

    @property
    def units_sold(self) -> int:
        return sum(s.units for s in self.sold_lots)


def held_units(lots: list[Lot], symbol: str) -> int:
    """
    Calculate total units held for a symbol across all lots.

    Args:
        lots: List of open lots
        symbol: Symbol to total

    Returns:
        Total units held
    """
    return sum(lot.units for lot in lots if lot.symbol == symbol)


def order_for_sale(lots: list[Lot]) -> list[Lot]:
    """
    Order lots by symbol, then by unit cost (cheapest first).

    The sort is stable, so lots with equal cost keep their insertion order.
    """
    return sorted(lots, key=lambda lot: (lot.symbol, lot.unit_cost))


def allocate_sale(
    lots: list[Lot],
    symbol: str,
    units: int,
    sale_price: Decimal,
    sold_at: datetime,
) -> Optional[SaleAllocation]:
    """
    Allocate a sale of `units` of `symbol` across the open lots.

    Lots are consumed cheapest first. A lot smaller than what is left to sell
    is consumed whole and dropped from the open set; otherwise the remainder
    is taken from it and the lot stays open with the reduced count (or is
    dropped if that leaves zero).

    Args:
        lots: Current open lots
        symbol: Symbol to sell
        units: Units to sell
        sale_price: Price per unit for every unit in this sale
        sold_at: Timestamp recorded on the sale records

    Returns:
        SaleAllocation, or None if fewer than `units` are held (the sale is
        rejected whole, never partially filled)
    """
    if units <= 0 or not lots or held_units(lots, symbol) < units:
        return None

    remaining = units
    consumed: dict[str, int] = {}
    sold_lots: list[SoldLot] = []

    for lot in order_for_sale(lots):
        if remaining == 0:
            break
        if lot.symbol != symbol or lot.units == 0:
            continue

        taken = min(lot.units, remaining)
        sold_lots.append(SoldLot.from_lot(lot, taken, sale_price, sold_at))
        consumed[lot.lot_id] = taken
        remaining -= taken

    remaining_lots = []
    for lot in lots:
        taken = consumed.get(lot.lot_id, 0)
        if taken == 0:
            remaining_lots.append(lot)
        elif lot.units > taken:
            remaining_lots.append(replace(lot, units=lot.units - taken))

    return SaleAllocation(remaining_lots=remaining_lots, sold_lots=sold_lots)
