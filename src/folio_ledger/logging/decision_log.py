"""
Append-only decision logging for the portfolio ledger.

Every successful ledger mutation is logged with a timestamp and its details
to support auditability and reproducibility.
"""

import json
from datetime import datetime, date
from decimal import Decimal
from pathlib import Path
from typing import Any

from folio_ledger.models import (
    ActionType,
    AppConfig,
    DecisionLogEntry,
    Lot,
    SoldLot,
)


class DecisionLogger:
    """
    Append-only decision logger.

    Writes all decisions to a JSONL file for audit purposes.
    Each line is a complete JSON object representing one action.
    """

    def __init__(self, log_path: str | Path):
        """
        Initialize the decision logger.

        Args:
            log_path: Path to the log file (will be created if not exists)
        """
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, entry: DecisionLogEntry) -> None:
        """
        Write a decision log entry.

        Args:
            entry: DecisionLogEntry to write
        """
        record = {
            "timestamp": entry.timestamp.isoformat(),
            "action_type": entry.action_type.value,
            "details": entry.details,
        }

        with open(self.log_path, "a") as f:
            f.write(json.dumps(record, cls=DecimalEncoder) + "\n")

    def log_funds_added(self, amount: Decimal, balance: Decimal) -> None:
        """Log a deposit and the resulting balance."""
        self._log_action(
            ActionType.FUNDS_ADDED,
            {"amount": str(amount), "balance": str(balance)},
        )

    def log_funds_withdrawn(self, amount: Decimal, balance: Decimal) -> None:
        """Log a withdrawal and the resulting balance."""
        self._log_action(
            ActionType.FUNDS_WITHDRAWN,
            {"amount": str(amount), "balance": str(balance)},
        )

    def log_purchase_recorded(self, lot: Lot, balance: Decimal) -> None:
        """
        Log a purchase.

        Args:
            lot: The lot created by the purchase
            balance: Balance after the purchase
        """
        details = {
            "lot_id": lot.lot_id,
            "symbol": lot.symbol,
            "units": lot.units,
            "unit_cost": str(lot.unit_cost),
            "total_cost": str(lot.total_cost),
            "acquired_at": lot.acquired_at.isoformat(),
            "balance": str(balance),
        }
        self._log_action(ActionType.PURCHASE_RECORDED, details)

    def log_sale_recorded(
        self,
        symbol: str,
        units: int,
        sale_price: Decimal,
        sold_lots: list[SoldLot],
        balance: Decimal,
    ) -> None:
        """
        Log a sale and the lots it consumed.

        Args:
            symbol: Symbol sold
            units: Units sold
            sale_price: Price per unit received
            sold_lots: Sale records created, one per lot touched
            balance: Balance after the sale
        """
        details = {
            "symbol": symbol,
            "units": units,
            "sale_price": str(sale_price),
            "proceeds": str(sale_price * units),
            "lots": [
                {"lot_id": s.lot_id, "units": s.units, "unit_cost": str(s.unit_cost)}
                for s in sold_lots
            ],
            "balance": str(balance),
        }
        self._log_action(ActionType.SALE_RECORDED, details)

    def log_history_seeded(self, lots: list[Lot]) -> None:
        """Log bootstrapping of prior holdings."""
        details = {
            "num_lots": len(lots),
            "symbols": sorted(set(lot.symbol for lot in lots)),
            "total_cost": str(sum((lot.total_cost for lot in lots), Decimal("0"))),
        }
        self._log_action(ActionType.HISTORY_SEEDED, details)

    def log_config_loaded(self, config: AppConfig, config_path: str) -> None:
        """
        Log configuration loading.

        API keys are never written, only their count.
        """
        details = {
            "config_path": config_path,
            "base_url": config.base_url,
            "api_key_count": len(config.api_keys),
            "in_test": config.in_test,
            "in_development": config.in_development,
            "initial_balance": str(config.initial_balance),
        }
        self._log_action(ActionType.CONFIG_LOADED, details)

    def _log_action(self, action_type: ActionType, details: dict) -> None:
        self.log(DecisionLogEntry.create(action_type=action_type, details=details))

    def read_log(self) -> list[DecisionLogEntry]:
        """
        Read all entries from the log file.

        Returns:
            List of DecisionLogEntry objects
        """
        if not self.log_path.exists():
            return []

        entries = []
        with open(self.log_path, "r") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                record = json.loads(line)
                entries.append(
                    DecisionLogEntry(
                        timestamp=datetime.fromisoformat(record["timestamp"]),
                        action_type=ActionType(record["action_type"]),
                        details=record.get("details", {}),
                    )
                )

        return entries

    def filter_by_action_type(
        self,
        action_type: ActionType,
    ) -> list[DecisionLogEntry]:
        """
        Get log entries of a specific action type.

        Args:
            action_type: Action type to filter by

        Returns:
            Filtered list of entries
        """
        return [e for e in self.read_log() if e.action_type == action_type]


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal and date types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (date, datetime)):
            return obj.isoformat()
        return super().default(obj)

