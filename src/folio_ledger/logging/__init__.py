"""
Decision logging module for the portfolio ledger.

Provides append-only decision logging for audit and reproducibility.
"""

from folio_ledger.logging.decision_log import DecimalEncoder, DecisionLogger

__all__ = [
    "DecimalEncoder",
    "DecisionLogger",
]
