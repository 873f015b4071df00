"""Line-oriented record format for persisted portfolios.

Layout (UTF-8, one record per ``\\n``-terminated line)::

    Growth,Long term; mostly tech
    AAPL,Apple Inc.,10,150.00,213.32
    MSFT,Microsoft Corporation,5,300.00,425.35
    ---
    Income,
    JNJ,Johnson & Johnson,20,140.50,147.95

Each section starts with a ``name,description`` header followed by one
``symbol,name,quantity,purchase_price,current_price`` line per holding.
Commas in descriptions and holding names are written as semicolons and read
back as commas, so a literal semicolon does not survive a round trip.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, List, Optional

from .holdings import Clock, Holding, Portfolio
from .merge import merge_or_append

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "---"
HOLDING_FIELDS = 5

_CENTS = Decimal("0.01")

# Only \n, \r and \r\n end a record; other Unicode breaks belong to the text.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
# Control characters and space; a line of only these is blank.
_BLANK_CHARS = "".join(chr(c) for c in range(0x21))
_INT_FIELD = re.compile(r"[+-]?[0-9]+")
_PRICE_FIELD = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:NaN|Infinity)"
)


def format_price(value: float) -> str:
    """Format a price with two decimals, rounding half up."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    # repr() gives the shortest decimal form, so 1.005 rounds to 1.01.
    amount = Decimal(repr(value))
    with localcontext() as ctx:
        # Room for every integer digit plus the two decimals.
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return str(amount.quantize(_CENTS, rounding=ROUND_HALF_UP))


def parse_quantity(field: str) -> int:
    if not _INT_FIELD.fullmatch(field):
        raise ValueError(f"invalid quantity: {field!r}")
    return int(field)


def parse_price(field: str) -> float:
    text = field.strip()
    if not _PRICE_FIELD.fullmatch(text):
        raise ValueError(f"invalid price: {field!r}")
    return float(text)


def escape_text(text: str) -> str:
    return text.replace(",", ";")


def unescape_text(text: str) -> str:
    return text.replace(";", ",")


def encode_holding(holding: Holding) -> str:
    return ",".join(
        [
            holding.symbol,
            escape_text(holding.name),
            str(int(holding.quantity)),
            format_price(holding.purchase_price),
            format_price(holding.current_price),
        ]
    )


def encode_portfolio(portfolio: Portfolio) -> str:
    lines = [f"{portfolio.name},{escape_text(portfolio.description)}"]
    lines.extend(encode_holding(h) for h in portfolio.holdings)
    return "".join(line + "\n" for line in lines)


def encode(portfolios: Iterable[Portfolio]) -> str:
    """Render portfolios to file text, separated by ``---`` lines."""
    sections = [encode_portfolio(p) for p in portfolios]
    return (SECTION_SEPARATOR + "\n").join(sections)


def decode_holding(line: str, clock: Clock = dt.datetime.now) -> Holding:
    """Parse one holding line; raises ValueError on a malformed line."""
    values = line.split(",")
    if len(values) < HOLDING_FIELDS:
        raise ValueError(
            f"expected {HOLDING_FIELDS} fields, got {len(values)}: {line!r}"
        )
    # Extra trailing fields are ignored.
    symbol, name, quantity, purchase_price, current_price = values[:HOLDING_FIELDS]
    return Holding(
        symbol=symbol,
        name=unescape_text(name),
        quantity=parse_quantity(quantity),
        purchase_price=parse_price(purchase_price),
        current_price=parse_price(current_price),
        clock=clock,
    )


def decode_header(line: str, clock: Clock = dt.datetime.now) -> Portfolio:
    name, _, description = line.partition(",")
    return Portfolio(name=name, description=unescape_text(description), clock=clock)


def decode(text: str, clock: Clock = dt.datetime.now) -> List[Portfolio]:
    """Parse file text back into portfolios, skipping malformed holding lines."""
    portfolios: List[Portfolio] = []
    current: Optional[Portfolio] = None

    for lineno, line in enumerate(_LINE_BREAK.split(text), start=1):
        if not line.strip(_BLANK_CHARS):
            continue

        if line == SECTION_SEPARATOR:
            if current is not None:
                portfolios.append(current)
            current = None
            continue

        if current is None:
            current = decode_header(line, clock)
            continue

        try:
            merge_or_append(current, decode_holding(line, clock))
        except ValueError as exc:
            logger.warning("Line %d: skipping holding record: %s", lineno, exc)

    if current is not None:
        portfolios.append(current)
    return portfolios
