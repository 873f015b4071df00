"""Tabular views of portfolios for console output."""

from typing import Sequence

import pandas as pd

from .holdings import Portfolio

HOLDING_COLUMNS = [
    "symbol",
    "name",
    "quantity",
    "purchase_price",
    "current_price",
    "cost_basis",
    "current_value",
    "gain_loss",
    "gain_loss_pct",
]

PORTFOLIO_COLUMNS = [
    "name",
    "description",
    "holdings",
    "total_cost",
    "total_value",
    "gain_loss",
    "gain_loss_pct",
]


def holdings_frame(portfolio: Portfolio) -> pd.DataFrame:
    """One row per holding with stored and derived figures."""
    rows = [
        {
            "symbol": h.symbol,
            "name": h.name,
            "quantity": h.quantity,
            "purchase_price": h.purchase_price,
            "current_price": h.current_price,
            "cost_basis": h.cost_basis,
            "current_value": h.current_value,
            "gain_loss": h.gain_loss,
            "gain_loss_pct": h.percent_gain_loss,
        }
        for h in portfolio.holdings
    ]
    return pd.DataFrame(rows, columns=HOLDING_COLUMNS)


def portfolios_frame(portfolios: Sequence[Portfolio]) -> pd.DataFrame:
    """One summary row per portfolio, in catalog order."""
    rows = [
        {
            "name": p.name,
            "description": p.description,
            "holdings": len(p.holdings),
            "total_cost": p.total_cost,
            "total_value": p.total_value,
            "gain_loss": p.total_gain_loss,
            "gain_loss_pct": p.total_percent_gain_loss,
        }
        for p in portfolios
    ]
    return pd.DataFrame(rows, columns=PORTFOLIO_COLUMNS)
