from decimal import Decimal
from typing import List
from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


# Input models
class IndexWeight(_Record):
    """Target allocation fraction of one index constituent"""
    symbol: str
    weight: Decimal


class PriceQuote(_Record):
    """Latest known price for a symbol"""
    symbol: str
    name: str = ""
    price: Decimal


class Holding(_Record):
    """Currently owned position; price is the cost basis, not the market price"""
    symbol: str
    shares: int
    price: Decimal


class RebalanceConfig(_Record):
    """Input bundle for every rebalance calculation"""
    include_commission: bool = False
    cash: Decimal
    index_weights: List[IndexWeight] = Field(default_factory=list)
    holdings: List[Holding] = Field(default_factory=list)
    prices: List[PriceQuote] = Field(default_factory=list)


class ValidatedRebalanceConfig(RebalanceConfig):
    """Rebalance input that passed config-level validation"""
    missing_symbols: List[str] = Field(default_factory=list)


# Output models
class Order(_Record):
    """Buy or sell instruction for a whole number of shares"""
    symbol: str
    shares: int
    price: Decimal
    value: Decimal
    commission: Decimal = Decimal("0")


class FinalPosition(_Record):
    """Post-rebalance position snapshot"""
    symbol: str
    shares: int
    value: Decimal
    commission: Decimal = Decimal("0")
    price: Decimal
    target_weight: Decimal
    realized_weight: Decimal


class RebalanceResult(_Record):
    """Result of rebalancing an existing portfolio"""
    sells: List[Order]
    buys: List[Order]
    final: List[FinalPosition]
    cash_after_selling: Decimal
    cash_after_buying: Decimal
    total_sell_value: Decimal
    total_buy_value: Decimal
    total_sell_commission: Decimal
    total_buy_commission: Decimal
    missing_symbols: List[str] = Field(default_factory=list)


class IndexRebalanceResult(_Record):
    """Result of investing cash directly into an index"""
    orders: List[Order]
    total_value: Decimal
    total_commission: Decimal
    remaining_cash: Decimal
    missing_symbols: List[str] = Field(default_factory=list)
