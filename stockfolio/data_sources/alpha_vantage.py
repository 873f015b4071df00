"""Alpha Vantage quote source with a static fallback table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Optional

import requests

from ..config import Config
from ..holdings import Portfolio
from ..parser import parse_object
from ..values import ValueObject, get_float, get_object, get_text

logger = logging.getLogger(__name__)

SOURCE_API = "alpha_vantage"
SOURCE_FALLBACK = "fallback"

# Well-known tickers used when the API is unavailable or rate limited.
FALLBACK_QUOTES = MappingProxyType(
    {
        "AAPL": ("Apple Inc.", 213.32),
        "MSFT": ("Microsoft Corporation", 425.35),
        "GOOGL": ("Alphabet Inc.", 172.45),
        "AMZN": ("Amazon.com Inc.", 178.25),
        "META": ("Meta Platforms Inc.", 485.15),
        "TSLA": ("Tesla Inc.", 177.40),
        "NFLX": ("Netflix Inc.", 624.55),
        "JPM": ("JPMorgan Chase & Co.", 189.70),
        "V": ("Visa Inc.", 275.85),
        "JNJ": ("Johnson & Johnson", 147.95),
    }
)


@dataclass(frozen=True)
class Quote:
    symbol: str
    name: str
    price: float
    source: str = SOURCE_API


Fetch = Callable[..., str]


def fetch_raw(url: str, params: Optional[dict] = None, timeout: float = 10.0) -> str:
    """GET a URL and return the response body as text."""
    r = requests.get(url, params=params, timeout=timeout)
    r.raise_for_status()
    return r.text


def fallback_quote(symbol: str) -> Optional[Quote]:
    """Return the built-in quote for a well-known symbol, if there is one."""
    entry = FALLBACK_QUOTES.get(symbol.upper())
    if entry is None:
        return None
    name, price = entry
    return Quote(symbol=symbol.upper(), name=name, price=price, source=SOURCE_FALLBACK)


def _query(cfg: Config, fetch: Fetch, function: str, symbol: str) -> ValueObject:
    params = {"function": function, "symbol": symbol, "apikey": cfg.api_key}
    body = fetch(cfg.base_url, params=params, timeout=cfg.request_timeout)
    return parse_object(body)


def get_company_name(symbol: str, cfg: Config, fetch: Fetch = fetch_raw) -> str:
    """Look up the company name, defaulting to the symbol itself."""
    try:
        data = _query(cfg, fetch, "OVERVIEW", symbol)
    except requests.RequestException as exc:
        logger.warning("%s: company overview request failed: %s", symbol, exc)
        return symbol
    return get_text(data, "Name", symbol) or symbol


def get_quote(symbol: str, cfg: Config, fetch: Fetch = fetch_raw) -> Optional[Quote]:
    """
    Fetch the latest price for a symbol.
    Falls back to the static table when the response is empty or malformed,
    or when the request fails; returns None if no quote is available at all.
    """
    symbol = symbol.strip().upper()
    logger.info("Fetching quote for %s", symbol)
    try:
        data = _query(cfg, fetch, "GLOBAL_QUOTE", symbol)
    except requests.RequestException as exc:
        logger.warning("%s: quote request failed: %s", symbol, exc)
        return _fallback(symbol, cfg)

    quote_data = get_object(data, "Global Quote")
    if not quote_data:
        # Unknown symbols and rate-limit notes both come back without a quote.
        logger.warning("%s: response had no quote data", symbol)
        return _fallback(symbol, cfg)

    try:
        price = get_float(quote_data, "05. price", 0.0)
    except ValueError as exc:
        logger.warning("%s: unreadable price: %s", symbol, exc)
        return _fallback(symbol, cfg)

    name = get_company_name(symbol, cfg, fetch)
    return Quote(symbol=symbol, name=name, price=price)


def _fallback(symbol: str, cfg: Config) -> Optional[Quote]:
    if not cfg.use_fallback:
        return None
    quote = fallback_quote(symbol)
    if quote is None:
        logger.warning("%s: no fallback quote available", symbol)
    return quote


def refresh_prices(
    portfolio: Portfolio, lookup: Callable[[str], Optional[Quote]]
) -> int:
    """Update current prices from ``lookup``; returns how many holdings changed."""
    updated = 0
    for holding in portfolio.holdings:
        quote = lookup(holding.symbol)
        if quote is None:
            logger.warning("%s: no quote, keeping %.2f", holding.symbol, holding.current_price)
            continue
        holding.set_current_price(quote.price)
        updated += 1
    if updated:
        portfolio.touch()
    return updated
