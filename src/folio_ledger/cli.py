"""
Command-line interface for the portfolio ledger.

Provides commands for:
- menu: Interactive session (funds, buy, sell, quotes, reports)
- quote: Print live quotes for symbols
- trending: Print trending symbols for a region
- summary: Value the seeded portfolio and optionally export it to CSV

Every session starts from the configured opening balance plus the seeded
prior holdings; nothing is kept between runs.
"""

import logging
import sys
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Optional

import click

from folio_ledger import __version__
from folio_ledger.config import (
    DEFAULT_SETTINGS_FILE,
    ConfigurationError,
    build_quote_source,
    default_app_config,
    load_app_config,
)
from folio_ledger.data import DataLoadError, load_seed_purchases, save_investments, save_lots
from folio_ledger.ledger import DEFAULT_HISTORY, Ledger, seed_ledger
from folio_ledger.logging import DecisionLogger
from folio_ledger.models import AppConfig
from folio_ledger.quotes import QuoteSourceError
from folio_ledger.reporting import (
    PortfolioReporter,
    format_investments,
    format_name_matches,
    format_purchases,
    format_quote,
    format_sales,
)


MENU_OPTIONS = [
    ("0", "Add Funds"),
    ("1", "Withdraw Funds"),
    ("2", "Purchase Asset"),
    ("3", "Sell Asset"),
    ("4", "Get quote of Asset"),
    ("5", "Full Value of your portfolio"),
    ("6", "View Investments"),
    ("7", "Filter Assets by Type"),
    ("8", "Search Assets by Name or Symbol"),
    ("9", "Filter Purchases by Date"),
    ("10", "Filter Sales by Date"),
    ("11", "Exit"),
]
EXIT_CHOICE = "11"


@click.group()
@click.version_option(version=__version__, prog_name="folio-ledger")
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(),
    default=str(DEFAULT_SETTINGS_FILE),
    help="Path to settings YAML file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """
    Portfolio ledger.

    Tracks cash and cost-basis lots, buys and sells at live prices, and
    reports valuations against fresh quotes.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app_config = load_app_config(config_path)
    except ConfigurationError as e:
        click.echo(f"{e}", err=True)
        click.echo("Deferring to development and test settings (mock data).", err=True)
        app_config = default_app_config()
        config_path = None

    ctx.obj = {"config": app_config, "config_path": config_path}


def _build_session(ctx: click.Context) -> tuple[Ledger, PortfolioReporter]:
    """Create a seeded ledger and its reporter from the loaded settings."""
    app_config: AppConfig = ctx.obj["config"]
    config_path: Optional[str] = ctx.obj["config_path"]

    decision_logger = DecisionLogger(app_config.decision_log)
    if config_path:
        decision_logger.log_config_loaded(app_config, config_path)

    try:
        quote_source = build_quote_source(app_config)
    except QuoteSourceError as e:
        click.echo(f"Error creating quote source: {e}", err=True)
        sys.exit(1)

    if app_config.seed_file:
        try:
            purchases = load_seed_purchases(app_config.seed_file)
        except DataLoadError as e:
            click.echo(f"Error loading seed file: {e}", err=True)
            sys.exit(1)
    else:
        purchases = DEFAULT_HISTORY

    ledger = Ledger(
        quote_source,
        balance=app_config.initial_balance,
        decision_logger=decision_logger,
    )
    seed_ledger(ledger, purchases, decision_logger)

    return ledger, PortfolioReporter(ledger)


@main.command()
@click.argument("symbols", nargs=-1, required=True)
@click.pass_context
def quote(ctx: click.Context, symbols: tuple[str, ...]):
    """Print live quotes for SYMBOLS."""
    ledger, _ = _build_session(ctx)

    quotes = ledger.get_asset_information(list(symbols))
    if not quotes:
        click.echo("No quotes found.", err=True)
        sys.exit(1)

    for q in quotes:
        click.echo(format_quote(q))


@main.command()
@click.argument("region")
@click.pass_context
def trending(ctx: click.Context, region: str):
    """Print trending symbols for REGION (e.g. US)."""
    ledger, _ = _build_session(ctx)

    try:
        symbols = ledger.quote_source.get_trending(region)
    except QuoteSourceError as e:
        click.echo(f"Error fetching trending symbols: {e}", err=True)
        sys.exit(1)

    if not symbols:
        click.echo(f"No trending symbols for region {region}.")
        return

    for symbol in symbols:
        click.echo(symbol)


@main.command()
@click.option(
    "--export-dir", "-o",
    type=click.Path(),
    default=None,
    help="Write lots and investment summary CSVs to this directory",
)
@click.pass_context
def summary(ctx: click.Context, export_dir: Optional[str]):
    """
    Value the seeded portfolio.

    Prints the cash balance, market value and per-symbol summary.
    """
    ledger, reporter = _build_session(ctx)

    investments = reporter.list_all_investments()

    click.echo(f"Balance:         ${ledger.balance:,.2f}")
    click.echo(f"Portfolio value: ${reporter.portfolio_value():,.2f}")
    click.echo(f"Open lots:       {len(ledger.lots)}")
    click.echo()
    click.echo(format_investments(investments))

    if export_dir:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_dir = Path(export_dir)
        lots_path = save_lots(ledger.lots, out_dir / f"lots_{stamp}.csv")
        investments_path = save_investments(investments, out_dir / f"investments_{stamp}.csv")
        click.echo()
        click.echo(f"  Lots saved: {lots_path}")
        click.echo(f"  Investments saved: {investments_path}")


@main.command()
@click.pass_context
def menu(ctx: click.Context):
    """Interactive session over a seeded ledger."""
    ledger, reporter = _build_session(ctx)

    handlers: dict[str, Callable[[Ledger, PortfolioReporter], None]] = {
        "0": _menu_add_funds,
        "1": _menu_withdraw_funds,
        "2": _menu_purchase,
        "3": _menu_sell,
        "4": _menu_quote,
        "5": _menu_value,
        "6": _menu_investments,
        "7": _menu_by_type,
        "8": _menu_by_name,
        "9": _menu_purchases_in_range,
        "10": _menu_sales_in_range,
    }

    click.echo("Welcome to the portfolio management system")
    while True:
        click.echo()
        click.echo("----Menu----")
        click.echo(f"Balance: ${ledger.balance:,.2f}")
        for key, label in MENU_OPTIONS:
            click.echo(f"{key}. {label}")

        choice = click.prompt("Choice", type=str).strip()
        if choice == EXIT_CHOICE:
            break

        handler = handlers.get(choice)
        if handler is None:
            click.echo(f"Unknown option: {choice}")
            continue

        try:
            handler(ledger, reporter)
        except ValueError as e:
            click.echo(f"Invalid input: {e}")


def _prompt_decimal(text: str) -> Decimal:
    raw = click.prompt(text, type=str).strip()
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"not a number: {raw}")
    if not value.is_finite():
        raise ValueError(f"not a finite number: {value}")
    return value


def _prompt_date(text: str) -> datetime:
    return datetime.strptime(click.prompt(text, type=str).strip(), "%Y-%m-%d")


def _prompt_int(text: str) -> int:
    raw = click.prompt(text, type=str).strip()
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"not a whole number: {raw}")


def _prompt_list(text: str) -> list[str]:
    """Collect entries until the user enters 'n'."""
    items = []
    while True:
        item = click.prompt(f"{text} (enter n to stop)", type=str)
        if item == "n":
            return items
        items.append(item)


def _menu_add_funds(ledger: Ledger, reporter: PortfolioReporter) -> None:
    ledger.add_funds(_prompt_decimal("Amount of funds to deposit"))


def _menu_withdraw_funds(ledger: Ledger, reporter: PortfolioReporter) -> None:
    if not ledger.withdraw_funds(_prompt_decimal("Amount of funds to withdraw")):
        click.echo("Insufficient funds.")


def _menu_purchase(ledger: Ledger, reporter: PortfolioReporter) -> None:
    symbol = click.prompt("Asset to purchase", type=str).strip()
    units = _prompt_decimal("Amount to purchase")
    if ledger.record_purchase(symbol, units):
        click.echo(f"Purchased {int(units)} {symbol}.")
    else:
        click.echo("Purchase failed: insufficient funds or no quote available.")


def _menu_sell(ledger: Ledger, reporter: PortfolioReporter) -> None:
    symbol = click.prompt("Asset to sell", type=str).strip()
    units = _prompt_int("Amount to sell")
    if ledger.record_sale(symbol, units):
        click.echo(f"Sold {units} {symbol}.")
    else:
        click.echo("Sale failed: insufficient units held or no quote available.")


def _menu_quote(ledger: Ledger, reporter: PortfolioReporter) -> None:
    symbols = _prompt_list("Asset to get a quote of")
    for q in ledger.get_asset_information(symbols):
        click.echo(format_quote(q))


def _menu_value(ledger: Ledger, reporter: PortfolioReporter) -> None:
    click.echo(f"Value of portfolio: ${reporter.portfolio_value():,.2f}")


def _menu_investments(ledger: Ledger, reporter: PortfolioReporter) -> None:
    click.echo(format_investments(reporter.list_all_investments()))


def _menu_by_type(ledger: Ledger, reporter: PortfolioReporter) -> None:
    asset_class = click.prompt("Type of investment (Equity, Currency, Cryptocurrency)", type=str)
    click.echo(format_investments(reporter.list_by_type(asset_class.strip())))


def _menu_by_name(ledger: Ledger, reporter: PortfolioReporter) -> None:
    terms = _prompt_list("Search")
    click.echo(format_name_matches(reporter.list_by_name(terms)))


def _menu_purchases_in_range(ledger: Ledger, reporter: PortfolioReporter) -> None:
    start = _prompt_date("Start date (YYYY-MM-DD)")
    end = _prompt_date("End date (YYYY-MM-DD)")
    click.echo(format_purchases(reporter.list_purchases_in_range(start, end)))


def _menu_sales_in_range(ledger: Ledger, reporter: PortfolioReporter) -> None:
    start = _prompt_date("Start date (YYYY-MM-DD)")
    end = _prompt_date("End date (YYYY-MM-DD)")
    click.echo(format_sales(reporter.list_sales_in_range(start, end)))


if __name__ == "__main__":
    main()
