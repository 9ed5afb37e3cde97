from decimal import Decimal

import pytest

from rebalancer_config import set_config
from index_rebalancer import (
    EmptyIndex,
    IndexRebalancer,
    InsufficientData,
    InvalidCashAmount,
    rebalance_current_portfolio,
    rebalance_index,
)
from conftest import make_config


@pytest.fixture
def rebalancer(app_config):
    return IndexRebalancer(app_config)


def _by_symbol(orders):
    return {order.symbol: order for order in orders}


def test_rebalance_index(rebalancer, two_stock_config):
    result = rebalancer.rebalance_index(two_stock_config)

    orders = _by_symbol(result.orders)
    assert len(result.orders) == 2
    assert (orders["AAPL"].shares, orders["AAPL"].value) == (60, Decimal("6000"))
    assert (orders["MSFT"].shares, orders["MSFT"].value) == (20, Decimal("4000"))
    assert result.total_value == Decimal("10000")
    assert result.total_commission == 0
    assert result.remaining_cash == 0
    assert result.missing_symbols == []


def test_rebalance_index_skips_missing_price(rebalancer):
    config = make_config(
        index=[("AAPL", "0.6"), ("MSFT", "0.4")],
        prices=[("AAPL", 100)],
        cash=10000,
    )
    result = rebalancer.rebalance_index(config)

    assert [(o.symbol, o.shares) for o in result.orders] == [("AAPL", 60)]
    assert result.remaining_cash == Decimal("4000")
    assert result.missing_symbols == ["MSFT"]


def test_rebalance_index_skips_zero_price(rebalancer):
    config = make_config(
        index=[("AAPL", "0.6"), ("MSFT", "0.4")],
        prices=[("AAPL", 0), ("MSFT", 200)],
        cash=10000,
    )
    result = rebalancer.rebalance_index(config)
    assert [(o.symbol, o.shares) for o in result.orders] == [("MSFT", 20)]


@pytest.mark.parametrize("cash,weights", [
    (0, ("0.6", "0.4")),
    (10000, (0, 0)),
])
def test_rebalance_index_nothing_to_allocate(rebalancer, cash, weights):
    config = make_config(
        index=[("AAPL", weights[0]), ("MSFT", weights[1])],
        prices=[("AAPL", 100), ("MSFT", 200)],
        cash=cash,
    )
    result = rebalancer.rebalance_index(config)

    assert result.orders == []
    assert result.total_value == 0
    assert result.total_commission == 0
    assert result.remaining_cash == Decimal(cash)


def test_rebalance_index_with_commission(rebalancer):
    config = make_config(index=[("AAPL", 1)], prices=[("AAPL", 100)], cash=10000, include_commission=True)
    result = rebalancer.rebalance_index(config)

    assert result.orders[0].shares == 100
    assert result.orders[0].commission == Decimal("25")
    assert result.total_commission == Decimal("25")
    # Whole cash was allocated, so commission pushes the balance negative
    assert result.remaining_cash == Decimal("-25")


def test_rebalance_index_without_commission(rebalancer):
    config = make_config(index=[("AAPL", 1)], prices=[("AAPL", 100)], cash=10000)
    result = rebalancer.rebalance_index(config)
    assert result.orders[0].commission == 0
    assert result.total_commission == 0


@pytest.mark.parametrize("include_commission", [False, True])
def test_rebalance_index_conserves_cash(rebalancer, include_commission):
    config = make_config(
        index=[("AAPL", "0.3"), ("MSFT", "0.2"), ("GOOGL", "0.1")],
        prices=[("AAPL", 100), ("MSFT", 200), ("GOOGL", 300)],
        cash=10000,
        include_commission=include_commission,
    )
    result = rebalancer.rebalance_index(config)

    assert len(result.orders) == 3
    assert Decimal("9500") < result.total_value <= Decimal("10000")
    assert result.total_value + result.total_commission + result.remaining_cash == config.cash
    if not include_commission:
        assert result.total_value + result.remaining_cash == config.cash


def test_rebalance_index_is_proportional(rebalancer):
    price = Decimal("7")
    config = make_config(
        index=[("A", "0.15"), ("B", "0.35"), ("C", "0.5")],
        prices=[("A", price), ("B", price), ("C", price)],
        cash="12345",
    )
    result = rebalancer.rebalance_index(config)

    weights = {w.symbol: w.weight for w in config.index_weights}
    for order in result.orders:
        ideal = config.cash * weights[order.symbol]
        assert ideal - price < order.value <= ideal


def test_rebalance_index_rejects_empty_index(rebalancer):
    with pytest.raises(EmptyIndex):
        rebalancer.rebalance_index(make_config(cash=10000))


def test_rebalance_index_rejects_invalid_cash(rebalancer, two_stock_config):
    config = two_stock_config.model_copy(update={"cash": Decimal("-1")})
    with pytest.raises(InvalidCashAmount) as exc_info:
        rebalancer.rebalance_index(config)
    assert exc_info.value.value == Decimal("-1")


def test_rebalance_current_portfolio_sells_overweight(rebalancer):
    config = make_config(
        index=[("AAPL", "0.5"), ("MSFT", "0.5")],
        prices=[("AAPL", 100), ("MSFT", 200)],
        holdings=[("AAPL", 100, 100), ("MSFT", 100, 200)],
        cash=0,
    )
    result = rebalancer.rebalance_current_portfolio(config)

    assert [(o.symbol, o.shares, o.price, o.value) for o in result.sells] == [
        ("MSFT", 25, Decimal("200"), Decimal("5000")),
    ]
    assert [(o.symbol, o.shares, o.price, o.value) for o in result.buys] == [
        ("AAPL", 50, Decimal("100"), Decimal("5000")),
    ]
    assert result.total_sell_value == Decimal("5000")
    assert result.total_buy_value == Decimal("5000")
    assert result.cash_after_selling == Decimal("5000")
    assert result.cash_after_buying == 0


def test_rebalance_current_portfolio_buys_with_cash(rebalancer):
    config = make_config(
        index=[("AAPL", "0.6"), ("MSFT", "0.4")],
        prices=[("AAPL", 100), ("MSFT", 200)],
        holdings=[("AAPL", 100, 100), ("MSFT", 20, 200)],
        cash=5000,
    )
    result = rebalancer.rebalance_current_portfolio(config)

    buys = _by_symbol(result.buys)
    assert result.sells == []
    assert buys["AAPL"].shares == 14
    assert buys["MSFT"].shares == 18
    assert result.cash_after_selling == Decimal("5000")
    assert result.cash_after_buying == 0

    final = {p.symbol: p.shares for p in result.final}
    assert final == {"AAPL": 114, "MSFT": 38}


def test_rebalance_current_portfolio_cash_flow_with_commission(rebalancer):
    config = make_config(
        index=[("AAPL", "0.5"), ("MSFT", "0.5")],
        prices=[("AAPL", 100), ("MSFT", 200)],
        holdings=[("AAPL", 100, 100), ("MSFT", 100, 200)],
        cash=0,
        include_commission=True,
    )
    result = rebalancer.rebalance_current_portfolio(config)

    assert result.total_sell_commission == Decimal("12.5")
    assert result.total_buy_commission == Decimal("12.5")
    assert result.cash_after_selling == Decimal("4987.5")
    assert result.cash_after_buying == Decimal("-25")
    assert result.cash_after_buying == (
        config.cash
        + result.total_sell_value - result.total_sell_commission
        - result.total_buy_value - result.total_buy_commission
    )


def test_rebalance_current_portfolio_already_balanced(rebalancer):
    config = make_config(
        index=[("AAPL", "0.6"), ("MSFT", "0.4")],
        prices=[("AAPL", 100), ("MSFT", 200)],
        holdings=[("AAPL", 60, 80), ("MSFT", 20, 150)],
        cash=0,
    )
    result = rebalancer.rebalance_current_portfolio(config)

    assert result.sells == []
    assert result.buys == []
    assert {p.symbol: p.shares for p in result.final} == {"AAPL": 60, "MSFT": 20}
    assert result.cash_after_buying == 0


def test_rebalance_current_portfolio_missing_price(rebalancer):
    config = make_config(
        index=[("AAPL", "0.6"), ("MSFT", "0.4")],
        prices=[("AAPL", 100)],
        holdings=[("AAPL", 10, 100), ("XYZ", 5, 40)],
        cash=0,
    )
    result = rebalancer.rebalance_current_portfolio(config)

    symbols = {o.symbol for o in result.sells + result.buys} | {p.symbol for p in result.final}
    assert "MSFT" not in symbols
    assert "XYZ" not in symbols
    assert result.missing_symbols == ["MSFT", "XYZ"]


def test_rebalance_current_portfolio_never_buys_and_sells_same_symbol(rebalancer):
    config = make_config(
        index=[("A", "0.1"), ("B", "0.2"), ("C", "0.3"), ("D", "0.4")],
        prices=[("A", "12.5"), ("B", "47.3"), ("C", "8.9"), ("D", "150"), ("E", "33")],
        holdings=[("A", 900, 10), ("B", 3, 40), ("C", 120, 9), ("E", 40, 30)],
        cash="2500.75",
    )
    result = rebalancer.rebalance_current_portfolio(config)

    sold = {o.symbol for o in result.sells}
    bought = {o.symbol for o in result.buys}
    assert sold.isdisjoint(bought)
    assert "E" in sold
    assert all(o.shares > 0 for o in result.sells + result.buys)
    assert all(o.value == o.shares * o.price for o in result.sells + result.buys)
    assert sum(p.realized_weight for p in result.final) <= 1


def test_rebalance_current_portfolio_rejects_zero_total_weight(rebalancer):
    config = make_config(
        index=[("AAPL", 0)],
        prices=[("AAPL", 100)],
        holdings=[("AAPL", 10, 100)],
    )
    with pytest.raises(InsufficientData):
        rebalancer.rebalance_current_portfolio(config)


def test_rebalance_current_portfolio_validates_before_calculating(rebalancer):
    with pytest.raises(EmptyIndex):
        rebalancer.rebalance_current_portfolio(make_config(holdings=[("AAPL", 10, 100)]))
    with pytest.raises(InvalidCashAmount):
        rebalancer.rebalance_current_portfolio(make_config(index=[("AAPL", 1)], cash="2000000000"))


@pytest.mark.parametrize("cash", ["1", "99.99", "1000", "123456.78"])
def test_no_zero_share_orders(rebalancer, cash):
    config = make_config(
        index=[("A", "0.05"), ("B", "0.25"), ("C", "0.7")],
        prices=[("A", "40"), ("B", "3.5"), ("C", "999")],
        holdings=[("B", 7, 3)],
        cash=cash,
    )
    index_result = rebalancer.rebalance_index(config)
    portfolio_result = rebalancer.rebalance_current_portfolio(config)

    for order in index_result.orders + portfolio_result.sells + portfolio_result.buys:
        assert order.shares > 0


def test_module_level_entry_points(app_config, two_stock_config):
    assert rebalance_index(two_stock_config, app_config).total_value == Decimal("10000")

    set_config(app_config)
    result = rebalance_current_portfolio(two_stock_config)
    assert {o.symbol: o.shares for o in result.buys} == {"AAPL": 60, "MSFT": 20}
