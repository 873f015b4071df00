"""Portfolio and holding entities.

Both entities take a ``clock`` (any zero-argument callable returning a
datetime) and stamp their timestamps from it whenever they change, so tests
can pin time without patching the datetime module.
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional

Clock = Callable[[], dt.datetime]


@dataclass
class Holding:
    """A position in one instrument."""

    symbol: str
    name: str
    quantity: int
    purchase_price: float
    current_price: Optional[float] = None
    clock: Clock = field(default=dt.datetime.now, repr=False, compare=False)
    last_updated: Optional[dt.datetime] = field(default=None, compare=False)

    def __post_init__(self):
        # Until a quote arrives the position is valued at cost.
        if self.current_price is None:
            self.current_price = self.purchase_price
        if self.last_updated is None:
            self.last_updated = self.clock()

    def set_current_price(self, price: float) -> None:
        self.current_price = price
        self.last_updated = self.clock()

    @property
    def current_value(self) -> float:
        return self.quantity * self.current_price

    @property
    def cost_basis(self) -> float:
        return self.quantity * self.purchase_price

    @property
    def gain_loss(self) -> float:
        return self.current_value - self.cost_basis

    @property
    def percent_gain_loss(self) -> float:
        cost = self.cost_basis
        if cost == 0:
            return 0.0
        return self.gain_loss / cost * 100


def validate_new_holding(holding: Holding) -> None:
    """Reject holdings the application layer should never create."""
    if not holding.symbol:
        raise ValueError("Symbol cannot be empty.")
    if holding.quantity <= 0:
        raise ValueError("Quantity must be positive.")
    if not math.isfinite(holding.purchase_price) or holding.purchase_price <= 0:
        raise ValueError("Price must be positive.")


@dataclass
class Portfolio:
    """A named, ordered collection of holdings, unique by symbol.

    Add holdings through ``merge.merge_or_append`` so a repeated symbol is
    averaged into the existing position instead of appended.
    """

    name: str
    description: str = ""
    holdings: List[Holding] = field(default_factory=list)
    clock: Clock = field(default=dt.datetime.now, repr=False, compare=False)
    created_at: Optional[dt.datetime] = field(default=None, compare=False)
    last_updated: Optional[dt.datetime] = field(default=None, compare=False)

    def __post_init__(self):
        now = self.clock()
        if self.created_at is None:
            self.created_at = now
        if self.last_updated is None:
            self.last_updated = now

    def touch(self) -> None:
        """Record that the portfolio changed."""
        self.last_updated = self.clock()

    def rename(self, name: str) -> None:
        self.name = name
        self.touch()

    def set_description(self, description: str) -> None:
        self.description = description
        self.touch()

    def find(self, symbol: str) -> Optional[Holding]:
        for holding in self.holdings:
            if holding.symbol == symbol:
                return holding
        return None

    def remove_holding(self, symbol: str) -> Optional[Holding]:
        """Remove and return the holding for ``symbol``, if present."""
        holding = self.find(symbol)
        if holding is None:
            return None
        self.holdings.remove(holding)
        self.touch()
        return holding

    @property
    def total_value(self) -> float:
        return sum(h.current_value for h in self.holdings)

    @property
    def total_cost(self) -> float:
        return sum(h.cost_basis for h in self.holdings)

    @property
    def total_gain_loss(self) -> float:
        return self.total_value - self.total_cost

    @property
    def total_percent_gain_loss(self) -> float:
        cost = self.total_cost
        if cost <= 0:
            return 0.0
        return self.total_gain_loss / cost * 100


def find_portfolio(portfolios: List[Portfolio], name: str) -> Optional[Portfolio]:
    """Look up a portfolio by exact name, then case-insensitively."""
    for portfolio in portfolios:
        if portfolio.name == name:
            return portfolio
    wanted = name.lower()
    for portfolio in portfolios:
        if portfolio.name.lower() == wanted:
            return portfolio
    return None
