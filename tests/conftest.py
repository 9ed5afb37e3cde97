from decimal import Decimal

import pytest

import rebalancer_config.loader as config_loader
from rebalancer_config import AppConfig
from index_rebalancer import Holding, IndexWeight, PriceQuote, RebalanceConfig


@pytest.fixture(autouse=True)
def reset_config_singleton(monkeypatch):
    """Every test starts without a loaded configuration."""
    monkeypatch.setattr(config_loader, "_config", None)


@pytest.fixture
def app_config():
    return AppConfig()


def make_config(index=(), prices=(), holdings=(), cash="0", include_commission=False):
    """Build a RebalanceConfig from (symbol, weight), (symbol, price) and (symbol, shares, cost) tuples."""
    return RebalanceConfig(
        include_commission=include_commission,
        cash=Decimal(str(cash)),
        index_weights=[IndexWeight(symbol=s, weight=Decimal(str(w))) for s, w in index],
        prices=[PriceQuote(symbol=s, name=f"{s} Ltd.", price=Decimal(str(p))) for s, p in prices],
        holdings=[Holding(symbol=s, shares=n, price=Decimal(str(c))) for s, n, c in holdings],
    )


@pytest.fixture
def two_stock_config():
    return make_config(
        index=[("AAPL", "0.6"), ("MSFT", "0.4")],
        prices=[("AAPL", 100), ("MSFT", 200)],
        cash=10000,
    )
