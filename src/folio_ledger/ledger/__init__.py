"""
Ledger module for the portfolio ledger.

Provides the cash and position ledger, lot selection for sales, and
bootstrapping of prior holdings.
"""

from folio_ledger.ledger.manager import InvalidAmountError, Ledger
from folio_ledger.ledger.selection import (
    SaleAllocation,
    allocate_sale,
    held_units,
    order_for_sale,
)
from folio_ledger.ledger.seed import DEFAULT_HISTORY, seed_ledger

__all__ = [
    "Ledger",
    "InvalidAmountError",
    "SaleAllocation",
    "allocate_sale",
    "held_units",
    "order_for_sale",
    "DEFAULT_HISTORY",
    "seed_ledger",
]
