"""Add holdings to a portfolio, averaging repeat purchases of a symbol."""

import logging

from .holdings import Holding, Portfolio

logger = logging.getLogger(__name__)


class MergeError(ValueError):
    """Raised when two lots cannot be combined into one position."""


def merge_or_append(portfolio: Portfolio, holding: Holding) -> None:
    """
    Append ``holding`` or fold it into the existing position for its symbol.
    A merge sums the quantities and recomputes the purchase price as the
    quantity-weighted average; the existing current price is kept.
    """
    existing = portfolio.find(holding.symbol)
    if existing is None:
        portfolio.holdings.append(holding)
        portfolio.touch()
        return

    total_qty = existing.quantity + holding.quantity
    if total_qty == 0:
        raise MergeError(
            f"{holding.symbol}: merged quantity is zero, cannot average price"
        )
    avg_price = (
        existing.quantity * existing.purchase_price
        + holding.quantity * holding.purchase_price
    ) / total_qty

    logger.debug(
        "%s: merging %d @ %.4f into %d @ %.4f",
        holding.symbol,
        holding.quantity,
        holding.purchase_price,
        existing.quantity,
        existing.purchase_price,
    )
    existing.quantity = total_qty
    existing.purchase_price = avg_price
    portfolio.touch()
