"""
Data loading and saving functions for CSV files.

Handles ingestion of prior holdings used to seed the ledger, and CSV export
of open lots, sales history and investment summaries.
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path

import pandas as pd

from folio_ledger.models import (
    AssetClass,
    InvestmentSummary,
    Lot,
    SeedPurchase,
    SoldLot,
)
from folio_ledger.data.schemas import (
    FileSchema,
    INVESTMENTS_SCHEMA,
    LOTS_SCHEMA,
    SALES_SCHEMA,
    SEED_SCHEMA,
)


class DataLoadError(Exception):
    """Raised when data cannot be loaded or is invalid."""
    pass


def load_seed_purchases(file_path: str | Path) -> list[SeedPurchase]:
    """
    Load prior holdings from CSV file.

    Args:
        file_path: Path to CSV file with columns: symbol, name, asset_class,
                   units, acquired_at, unit_cost

    Returns:
        List of SeedPurchase objects, in file order

    Raises:
        DataLoadError: If file cannot be loaded or a row is invalid
    """
    file_path = Path(file_path)
    # Read as strings so costs keep their exact decimal digits
    df = _load_csv(file_path, SEED_SCHEMA, dtype=str)

    purchases = []
    for index, row in df.iterrows():
        if row[SEED_SCHEMA.required_columns].isna().any():
            raise DataLoadError(f"Missing values in seed row {index} in {file_path}")

        try:
            purchases.append(
                SeedPurchase(
                    symbol=str(row["symbol"]).strip(),
                    name=str(row["name"]).strip(),
                    asset_class=AssetClass(str(row["asset_class"]).strip()),
                    units=Decimal(str(row["units"]).strip()),
                    acquired_at=pd.Timestamp(row["acquired_at"]).to_pydatetime(),
                    unit_cost=Decimal(str(row["unit_cost"]).strip()),
                )
            )
        except (ValueError, InvalidOperation) as e:
            raise DataLoadError(f"Invalid seed row {index} in {file_path}: {e}")

    return purchases


def save_lots(
    lots: list[Lot],
    output_path: str | Path,
) -> Path:
    """
    Save open lots to CSV file.

    Args:
        lots: List of Lot objects to save
        output_path: Path for output CSV file

    Returns:
        Path to the saved file
    """
    records = []
    for lot in lots:
        records.append({
            "lot_id": lot.lot_id,
            "symbol": lot.symbol,
            "name": lot.name,
            "asset_class": lot.asset_class.value,
            "units": lot.units,
            "unit_cost": float(lot.unit_cost),
            "acquired_at": lot.acquired_at.isoformat(),
        })

    return _save_csv(records, LOTS_SCHEMA, output_path)


def save_sales(
    sales: list[SoldLot],
    output_path: str | Path,
) -> Path:
    """
    Save sales history to CSV file.

    Args:
        sales: List of SoldLot objects to save
        output_path: Path for output CSV file

    Returns:
        Path to the saved file
    """
    records = []
    for sale in sales:
        records.append({
            "lot_id": sale.lot_id,
            "symbol": sale.symbol,
            "name": sale.name,
            "asset_class": sale.asset_class.value,
            "units": sale.units,
            "unit_cost": float(sale.unit_cost),
            "sale_price": float(sale.sale_price),
            "acquired_at": sale.acquired_at.isoformat(),
            "sold_at": sale.sold_at.isoformat(),
        })

    return _save_csv(records, SALES_SCHEMA, output_path)


def save_investments(
    summaries: list[InvestmentSummary],
    output_path: str | Path,
) -> Path:
    """
    Save investment summaries to CSV file.

    Args:
        summaries: List of InvestmentSummary objects
        output_path: Path for output CSV file

    Returns:
        Path to the saved file
    """
    records = []
    for s in summaries:
        records.append({
            "symbol": s.symbol,
            "name": s.name,
            "asset_class": s.asset_class.value,
            "average_cost": float(s.average_cost),
            "current_price": float(s.current_price),
            "total_units": s.total_units,
            "difference": float(s.difference),
            "difference_pct": float(s.difference_pct),
        })

    return _save_csv(records, INVESTMENTS_SCHEMA, output_path)


def _save_csv(records: list[dict], schema: FileSchema, output_path: str | Path) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(records, columns=schema.all_columns)
    df.to_csv(output_path, index=False)

    return output_path


def _load_csv(file_path: Path, schema: FileSchema, **read_kwargs) -> pd.DataFrame:
    """
    Load a CSV file and validate against schema.

    Args:
        file_path: Path to CSV file
        schema: Expected file schema
        **read_kwargs: Extra arguments for pandas.read_csv

    Returns:
        Loaded DataFrame

    Raises:
        DataLoadError: If file cannot be loaded or has missing columns
    """
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        df = pd.read_csv(file_path, **read_kwargs)
    except Exception as e:
        raise DataLoadError(f"Failed to load CSV file {file_path}: {e}")

    # Validate columns
    is_valid, missing = schema.validate_columns(df.columns.tolist())
    if not is_valid:
        raise DataLoadError(
            f"File {file_path} is missing required columns: {missing}"
        )

    return df
