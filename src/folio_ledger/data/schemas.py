"""
Data schemas for CSV file validation.

Defines expected columns and data types for seed input and report exports.
"""

from dataclasses import dataclass


@dataclass
class ColumnSchema:
    """Schema definition for a single column."""
    name: str
    dtype: str  # pandas dtype string
    required: bool = True
    nullable: bool = False


@dataclass
class FileSchema:
    """Schema definition for a file."""
    name: str
    columns: list[ColumnSchema]
    description: str

    @property
    def required_columns(self) -> list[str]:
        """Get list of required column names."""
        return [c.name for c in self.columns if c.required]

    @property
    def all_columns(self) -> list[str]:
        """Get list of all column names."""
        return [c.name for c in self.columns]

    def validate_columns(self, df_columns: list[str]) -> tuple[bool, list[str]]:
        """
        Validate that a dataframe has the required columns.

        Args:
            df_columns: List of column names from the dataframe

        Returns:
            Tuple of (is_valid, list of missing columns)
        """
        missing = [col for col in self.required_columns if col not in df_columns]
        return len(missing) == 0, missing


# Seed purchases (input)
SEED_SCHEMA = FileSchema(
    name="seed_purchases",
    description="Prior holdings used to bootstrap the ledger",
    columns=[
        ColumnSchema(name="symbol", dtype="str", required=True),
        ColumnSchema(name="name", dtype="str", required=True),
        ColumnSchema(name="asset_class", dtype="str", required=True),
        ColumnSchema(name="units", dtype="float64", required=True),
        ColumnSchema(name="acquired_at", dtype="datetime64[ns]", required=True),
        ColumnSchema(name="unit_cost", dtype="float64", required=True),
    ],
)

# Open lots (output)
LOTS_SCHEMA = FileSchema(
    name="lots",
    description="Open lots with cost basis",
    columns=[
        ColumnSchema(name="lot_id", dtype="str", required=True),
        ColumnSchema(name="symbol", dtype="str", required=True),
        ColumnSchema(name="name", dtype="str", required=True),
        ColumnSchema(name="asset_class", dtype="str", required=True),
        ColumnSchema(name="units", dtype="int64", required=True),
        ColumnSchema(name="unit_cost", dtype="float64", required=True),
        ColumnSchema(name="acquired_at", dtype="datetime64[ns]", required=True),
    ],
)

# Sales history (output)
SALES_SCHEMA = FileSchema(
    name="sales",
    description="Realized sale records",
    columns=[
        ColumnSchema(name="lot_id", dtype="str", required=True),
        ColumnSchema(name="symbol", dtype="str", required=True),
        ColumnSchema(name="name", dtype="str", required=True),
        ColumnSchema(name="asset_class", dtype="str", required=True),
        ColumnSchema(name="units", dtype="int64", required=True),
        ColumnSchema(name="unit_cost", dtype="float64", required=True),
        ColumnSchema(name="sale_price", dtype="float64", required=True),
        ColumnSchema(name="acquired_at", dtype="datetime64[ns]", required=True),
        ColumnSchema(name="sold_at", dtype="datetime64[ns]", required=True),
    ],
)

# Investment summary (output)
INVESTMENTS_SCHEMA = FileSchema(
    name="investments",
    description="Per-symbol holdings against the live price",
    columns=[
        ColumnSchema(name="symbol", dtype="str", required=True),
        ColumnSchema(name="name", dtype="str", required=True),
        ColumnSchema(name="asset_class", dtype="str", required=True),
        ColumnSchema(name="average_cost", dtype="float64", required=True),
        ColumnSchema(name="current_price", dtype="float64", required=True),
        ColumnSchema(name="total_units", dtype="int64", required=True),
        ColumnSchema(name="difference", dtype="float64", required=True),
        ColumnSchema(name="difference_pct", dtype="float64", required=True),
    ],
)
