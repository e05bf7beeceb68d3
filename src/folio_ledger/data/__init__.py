"""
Data ingestion and export module for the portfolio ledger.

Provides loading of prior holdings from CSV and CSV export of lots, sales
and investment summaries.
"""

from folio_ledger.data.loaders import (
    DataLoadError,
    load_seed_purchases,
    save_investments,
    save_lots,
    save_sales,
)
from folio_ledger.data.schemas import (
    INVESTMENTS_SCHEMA,
    LOTS_SCHEMA,
    SALES_SCHEMA,
    SEED_SCHEMA,
)

__all__ = [
    "DataLoadError",
    "load_seed_purchases",
    "save_investments",
    "save_lots",
    "save_sales",
    "INVESTMENTS_SCHEMA",
    "LOTS_SCHEMA",
    "SALES_SCHEMA",
    "SEED_SCHEMA",
]
