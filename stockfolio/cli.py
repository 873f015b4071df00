"""Command-line interface for managing portfolios and quotes."""

import argparse
import logging
import sys

import pandas as pd

from .config import Config, setup_logging
from .data_sources.alpha_vantage import get_quote, refresh_prices
from .holdings import Holding, Portfolio, find_portfolio, validate_new_holding
from .merge import merge_or_append
from .portfolio import load_portfolios, save_portfolios
from .report import holdings_frame, portfolios_frame

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """A user-facing error that ends the command with status 1."""


def build_cfg_from_args(args) -> Config:
    # Start from environment/.env defaults.
    cfg = Config.from_env()

    # Override defaults with CLI flags if they were provided.
    if getattr(args, "portfolio_file", None):
        cfg.portfolio_file = args.portfolio_file
    if getattr(args, "api_key", None):
        cfg.api_key = args.api_key
    if getattr(args, "no_fallback", False):
        cfg.use_fallback = False

    return cfg


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Stockfolio CLI")
    p.add_argument("--portfolio-file")
    p.add_argument("--api-key")
    p.add_argument("--no-fallback", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list")

    show = sub.add_parser("show")
    show.add_argument("name")

    create = sub.add_parser("create")
    create.add_argument("name")
    create.add_argument("--description", default="")

    # Add command: look up the quote, then merge into any existing position.
    add = sub.add_parser("add")
    add.add_argument("name")
    add.add_argument("symbol")
    add.add_argument("quantity", type=int)
    add.add_argument("price", type=float)

    remove = sub.add_parser("remove")
    remove.add_argument("name")
    remove.add_argument("symbol")

    quote = sub.add_parser("quote")
    quote.add_argument("symbol")

    refresh = sub.add_parser("refresh")
    refresh.add_argument("name", nargs="?")

    return p


def _require_portfolio(portfolios, name: str) -> Portfolio:
    portfolio = find_portfolio(portfolios, name)
    if portfolio is None:
        raise CommandError(f"Portfolio '{name}' not found.")
    return portfolio


def _save(cfg: Config, portfolios) -> None:
    try:
        save_portfolios(cfg.portfolio_file, portfolios)
    except OSError as exc:
        raise CommandError(f"Could not save portfolios: {exc}") from exc


def cmd_list(cfg: Config, args) -> None:
    portfolios = load_portfolios(cfg.portfolio_file)
    if not portfolios:
        print("No portfolios found.")
        return
    print(portfolios_frame(portfolios).to_string(index=False))


def cmd_show(cfg: Config, args) -> None:
    portfolio = _require_portfolio(load_portfolios(cfg.portfolio_file), args.name)
    print(f"{portfolio.name}: {portfolio.description}")
    if portfolio.holdings:
        print(holdings_frame(portfolio).to_string(index=False))
    else:
        print("No holdings in this portfolio.")
    summary = pd.Series(
        {
            "Total Cost": portfolio.total_cost,
            "Current Value": portfolio.total_value,
            "Gain/Loss": portfolio.total_gain_loss,
            "Gain/Loss %": portfolio.total_percent_gain_loss,
        }
    )
    print(summary.round(2).to_string())


def cmd_create(cfg: Config, args) -> None:
    name = args.name.strip()
    if not name:
        raise CommandError("Portfolio name cannot be empty.")
    portfolios = load_portfolios(cfg.portfolio_file)
    if find_portfolio(portfolios, name) is not None:
        raise CommandError(f"Portfolio '{name}' already exists.")
    portfolios.append(Portfolio(name=name, description=args.description))
    _save(cfg, portfolios)
    print(f"Portfolio '{name}' created.")


def cmd_add(cfg: Config, args) -> None:
    portfolios = load_portfolios(cfg.portfolio_file)
    portfolio = _require_portfolio(portfolios, args.name)
    symbol = args.symbol.strip().upper()

    quote = get_quote(symbol, cfg)
    if quote is None:
        raise CommandError(f"No quote found for {symbol}.")

    holding = Holding(
        symbol=symbol,
        name=quote.name,
        quantity=args.quantity,
        purchase_price=args.price,
        current_price=quote.price,
    )
    try:
        validate_new_holding(holding)
        merge_or_append(portfolio, holding)
    except ValueError as exc:
        raise CommandError(str(exc)) from exc
    _save(cfg, portfolios)
    print(f"Added {args.quantity} shares of {symbol} to {portfolio.name}.")
    print(f"Current price: {quote.price:.2f} ({quote.source})")


def cmd_remove(cfg: Config, args) -> None:
    portfolios = load_portfolios(cfg.portfolio_file)
    portfolio = _require_portfolio(portfolios, args.name)
    symbol = args.symbol.strip().upper()
    if portfolio.remove_holding(symbol) is None:
        raise CommandError(f"{symbol} is not held in {portfolio.name}.")
    _save(cfg, portfolios)
    print(f"Removed {symbol} from {portfolio.name}.")


def cmd_quote(cfg: Config, args) -> None:
    quote = get_quote(args.symbol, cfg)
    if quote is None:
        raise CommandError(f"No quote found for {args.symbol.upper()}.")
    print(f"{quote.symbol} ({quote.name}): {quote.price:.2f} [{quote.source}]")


def cmd_refresh(cfg: Config, args) -> None:
    portfolios = load_portfolios(cfg.portfolio_file)
    if args.name:
        targets = [_require_portfolio(portfolios, args.name)]
    else:
        targets = portfolios

    # Quote each symbol once even if several portfolios hold it.
    cache = {}

    def lookup(symbol):
        if symbol not in cache:
            cache[symbol] = get_quote(symbol, cfg)
        return cache[symbol]

    updated = sum(refresh_prices(p, lookup) for p in targets)
    _save(cfg, portfolios)
    print(f"Updated {updated} holding(s).")


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "create": cmd_create,
    "add": cmd_add,
    "remove": cmd_remove,
    "quote": cmd_quote,
    "refresh": cmd_refresh,
}


def main(argv=None) -> int:
    # Enable console logging early.
    setup_logging()
    args = build_parser().parse_args(argv)
    cfg = build_cfg_from_args(args)

    try:
        COMMANDS[args.cmd](cfg, args)
    except CommandError as exc:
        logger.debug("Command %s failed: %s", args.cmd, exc)
        print(exc, file=sys.stderr)
        return 1
    return 0
