"""
Portfolio ledger (folio-ledger)

Tracks a cash balance and a set of purchased positions held as discrete
cost-basis lots. Supports buying and selling named assets at live market
prices, selects lots for each sale deterministically (cheapest cost basis
first), and produces valuation and historical reports from fresh quotes.
"""

__version__ = "0.1.0"
