import pytest

from stockfolio import codec
from stockfolio.holdings import Holding, Portfolio
from stockfolio.portfolio import load_portfolios, save_portfolios


def _catalog():
    growth = Portfolio("Growth", "Long term")
    growth.holdings.append(Holding("AAPL", "Apple Inc.", 10, 150.0, current_price=213.32))
    return [growth, Portfolio("Income", "Dividends"), Portfolio("Cash", "")]


def test_load_missing_file_returns_empty(tmp_path) -> None:
    assert load_portfolios(tmp_path / "does-not-exist.csv") == []


def test_load_unreadable_path_returns_empty(tmp_path) -> None:
    # A directory exists but cannot be read as a file.
    assert load_portfolios(tmp_path) == []


def test_save_then_load_round_trips_order(tmp_path) -> None:
    path = tmp_path / "portfolios.csv"
    catalog = _catalog()
    save_portfolios(path, catalog)

    loaded = load_portfolios(path)
    assert [p.name for p in loaded] == ["Growth", "Income", "Cash"]
    assert loaded == catalog


def test_save_writes_encoded_bytes(tmp_path) -> None:
    path = tmp_path / "portfolios.csv"
    catalog = _catalog()
    save_portfolios(path, catalog)
    assert path.read_bytes() == codec.encode(catalog).encode("utf-8")


def test_save_creates_parent_directories(tmp_path) -> None:
    path = tmp_path / "nested" / "data" / "portfolios.csv"
    save_portfolios(str(path), _catalog())
    assert path.exists()


def test_save_rewrites_the_whole_file(tmp_path) -> None:
    path = tmp_path / "portfolios.csv"
    save_portfolios(path, _catalog())
    save_portfolios(path, [Portfolio("Only", "one")])
    assert path.read_text(encoding="utf-8") == "Only,one\n"


def test_save_failure_propagates(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(OSError):
        save_portfolios(blocker / "portfolios.csv", _catalog())


def test_load_keeps_utf8_names(tmp_path) -> None:
    path = tmp_path / "portfolios.csv"
    path.write_text("Épargne,Économies\nNESN,Nestlé S.A.,3,100.00,98.50\n", encoding="utf-8")
    [p] = load_portfolios(path)
    assert p.description == "Économies"
    assert p.holdings[0].name == "Nestlé S.A."
