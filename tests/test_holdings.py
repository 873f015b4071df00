import pytest

from stockfolio.holdings import Holding, Portfolio, find_portfolio, validate_new_holding


def test_holding_derived_figures() -> None:
    h = Holding("AAPL", "Apple Inc.", 10, 100.0, current_price=120.0)
    assert h.current_value == 1200.0
    assert h.cost_basis == 1000.0
    assert h.gain_loss == 200.0
    assert h.percent_gain_loss == pytest.approx(20.0)


def test_holding_percent_gain_loss_is_zero_without_cost() -> None:
    h = Holding("FREE", "Gifted shares", 0, 0.0, current_price=50.0)
    assert h.cost_basis == 0
    assert h.percent_gain_loss == 0.0


def test_holding_current_price_defaults_to_purchase_price(clock) -> None:
    h = Holding("MSFT", "Microsoft Corporation", 5, 300.0, clock=clock)
    assert h.current_price == 300.0
    assert h.last_updated == clock.now


def test_set_current_price_stamps_last_updated(clock) -> None:
    h = Holding("MSFT", "Microsoft Corporation", 5, 300.0, clock=clock)
    later = clock.advance(minutes=5)
    h.set_current_price(310.0)
    assert h.current_price == 310.0
    assert h.last_updated == later


def test_portfolio_timestamps_follow_mutations(clock) -> None:
    p = Portfolio("Growth", "Tech", clock=clock)
    created = clock.now
    assert p.created_at == created
    assert p.last_updated == created

    renamed_at = clock.advance(hours=1)
    p.rename("Growth 2")
    assert p.name == "Growth 2"
    assert p.last_updated == renamed_at

    described_at = clock.advance(hours=1)
    p.set_description("Mostly tech")
    assert p.description == "Mostly tech"
    assert p.last_updated == described_at
    assert p.created_at == created


def test_remove_holding(clock) -> None:
    p = Portfolio("Growth", clock=clock)
    aapl = Holding("AAPL", "Apple Inc.", 10, 100.0, clock=clock)
    p.holdings.append(aapl)

    removed_at = clock.advance(minutes=1)
    assert p.remove_holding("AAPL") is aapl
    assert p.holdings == []
    assert p.last_updated == removed_at


def test_remove_missing_holding_leaves_timestamp(clock) -> None:
    p = Portfolio("Growth", clock=clock)
    before = p.last_updated
    clock.advance(minutes=1)
    assert p.remove_holding("NOPE") is None
    assert p.last_updated == before


def test_portfolio_totals() -> None:
    p = Portfolio(
        "Mixed",
        holdings=[
            Holding("AAPL", "Apple Inc.", 10, 100.0, current_price=150.0),
            Holding("TSLA", "Tesla Inc.", 2, 250.0, current_price=200.0),
        ],
    )
    assert p.total_cost == 1500.0
    assert p.total_value == 1900.0
    assert p.total_gain_loss == 400.0
    assert p.total_percent_gain_loss == pytest.approx(400.0 / 1500.0 * 100)


def test_empty_portfolio_totals_are_zero() -> None:
    p = Portfolio("Empty")
    assert p.total_value == 0
    assert p.total_percent_gain_loss == 0.0


def test_find_portfolio_prefers_exact_then_case_insensitive() -> None:
    upper = Portfolio("GROWTH")
    exact = Portfolio("Growth")
    portfolios = [upper, exact]
    assert find_portfolio(portfolios, "Growth") is exact
    assert find_portfolio(portfolios, "growth") is upper
    assert find_portfolio(portfolios, "Income") is None


@pytest.mark.parametrize(
    "holding",
    [
        Holding("", "Blank", 1, 1.0),
        Holding("AAPL", "Apple Inc.", 0, 1.0),
        Holding("AAPL", "Apple Inc.", -3, 1.0),
        Holding("AAPL", "Apple Inc.", 1, 0.0),
        Holding("AAPL", "Apple Inc.", 10, float("nan")),
        Holding("AAPL", "Apple Inc.", 10, float("inf")),
        Holding("AAPL", "Apple Inc.", 10, float("-inf")),
    ],
)
def test_validate_new_holding_rejects_bad_input(holding) -> None:
    with pytest.raises(ValueError):
        validate_new_holding(holding)


def test_validate_new_holding_accepts_positive_lot() -> None:
    validate_new_holding(Holding("AAPL", "Apple Inc.", 1, 0.01))
