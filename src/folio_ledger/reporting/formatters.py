"""
Plain-text rendering of report rows.

Each formatter returns a string ready for the terminal; an empty list of rows
renders as an empty string.
"""

from decimal import Decimal

from folio_ledger.models import (
    InvestmentSummary,
    NameMatchSummary,
    PurchaseInRange,
    Quote,
    SaleInRange,
)

SEPARATOR = "-" * 40


def _format_currency(value: Decimal, precision: int = 2) -> str:
    """Format currency value."""
    return f"${value:,.{precision}f}"


def _format_pct(value: Decimal, precision: int = 2) -> str:
    """Format percentage value."""
    return f"{value:.{precision}f}%"


def format_investments(summaries: list[InvestmentSummary]) -> str:
    """Render one line per held symbol."""
    lines = []
    for s in summaries:
        lines.append(
            f"Name: {s.name} Symbol: {s.symbol} "
            f"Average Purchase Price: {_format_currency(s.average_cost)} "
            f"Current Value: {_format_currency(s.current_price)} "
            f"Amount of Assets: {s.total_units} "
            f"Difference between Average Purchase Price and Current Value: "
            f"{_format_currency(s.difference)} ({_format_pct(s.difference_pct)})"
        )
    return "\n".join(lines)


def format_name_matches(summaries: list[NameMatchSummary]) -> str:
    """Render one block per search term."""
    blocks = []
    for s in summaries:
        blocks.append("\n".join([
            SEPARATOR,
            f"Search: {s.term}",
            f"Asset Name: {s.name}",
            f"Asset Symbol: {s.symbol}",
            f"Asset Average Purchase Cost: {_format_currency(s.average_cost)}",
            f"Asset Value: {_format_currency(s.current_price)}",
            f"Asset Amount: {s.total_units} ({s.match_count} lots)",
        ]))
    return "\n".join(blocks)


def format_purchases(rows: list[PurchaseInRange]) -> str:
    """Render one block per purchase."""
    blocks = []
    for row in rows:
        blocks.append("\n".join([
            SEPARATOR,
            f"Name: {row.lot.name} ({row.lot.symbol})",
            f"Date: {row.lot.acquired_at:%Y-%m-%d %H:%M:%S}",
            f"Units: {row.lot.units}",
            f"Cost: {_format_currency(row.lot.unit_cost)}",
            f"Current Price: {_format_currency(row.current_price)}",
            f"Difference: {_format_currency(row.difference)} ({_format_pct(row.change_pct)})",
            f"Cost as % of Price: {_format_pct(row.cost_to_price_pct)}",
        ]))
    return "\n".join(blocks)


def format_sales(rows: list[SaleInRange]) -> str:
    """Render one line per sale record."""
    lines = []
    for row in rows:
        lines.append(
            f"Name: {row.sale.name} Symbol: {row.sale.symbol} "
            f"Units: {row.sale.units} "
            f"Average Purchase Price: {_format_currency(row.average_cost)} "
            f"Sale Price: {_format_currency(row.sale.sale_price)} "
            f"Profit/Loss: {_format_currency(row.profit_loss)} "
            f"({_format_pct(row.profit_loss_pct)})"
        )
    return "\n".join(lines)


def format_quote(quote: Quote) -> str:
    """Render a single quote."""
    return "\n".join([
        SEPARATOR,
        f"Name: {quote.name}",
        f"Asset Symbol: {quote.symbol}",
        f"Asset Type: {quote.asset_class.value}",
        f"Asset Quote Timestamp: {quote.timestamp:%Y-%m-%d %H:%M:%S}",
        f"Asset Quote Value: {_format_currency(quote.price)}",
        f"Regular Market Change: {quote.change}",
        f"Regular Market Change Percentage: {_format_pct(quote.change_pct)}",
        f"Regular Market Previous Close: {_format_currency(quote.previous_close)}",
        f"Regular Market Open: {_format_currency(quote.open_price)}",
        SEPARATOR,
    ])
