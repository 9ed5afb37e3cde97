"""Target share, order and final position calculation"""

from decimal import Decimal
from typing import Dict, List, Optional
import logging
from rebalancer_config import AppConfig, get_config
from .commission import CommissionCalculator
from .exceptions import InsufficientData
from .models import (
    FinalPosition,
    Holding,
    IndexWeight,
    Order,
    PriceQuote,
    RebalanceConfig,
)


def create_price_map(prices: List[PriceQuote]) -> Dict[str, Decimal]:
    return {quote.symbol: quote.price for quote in prices}


def create_weight_map(index_weights: List[IndexWeight]) -> Dict[str, Decimal]:
    return {item.symbol: item.weight for item in index_weights}


def create_current_shares_map(holdings: List[Holding]) -> Dict[str, int]:
    return {holding.symbol: holding.shares for holding in holdings}


def total_weight(index_weights: List[IndexWeight]) -> Decimal:
    return sum((item.weight for item in index_weights), Decimal("0"))


def total_portfolio_value(config: RebalanceConfig, price_map: Optional[Dict[str, Decimal]] = None) -> Decimal:
    """Cash plus holdings valued at latest price; unpriced holdings count as zero"""
    price_map = create_price_map(config.prices) if price_map is None else price_map
    holdings_value = sum(
        (holding.shares * price_map[holding.symbol]
         for holding in config.holdings if holding.symbol in price_map),
        Decimal("0"),
    )
    return config.cash + holdings_value


def _usable_price(price_map: Dict[str, Decimal], symbol: str) -> Optional[Decimal]:
    price = price_map.get(symbol)
    if price is None or price <= 0:
        return None
    return price


class RebalanceCalculator:
    """Calculate target shares and the orders needed to reach them"""

    def __init__(self, config: Optional[AppConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or get_config()
        self.logger = logger or logging.getLogger(__name__)
        self.commission = CommissionCalculator(self.config.commission)

    def calculate_target_shares(self, config: RebalanceConfig) -> Dict[str, int]:
        """
        Whole-share target per priced index symbol.
        Shares are truncated so no symbol is allotted more than its share of
        total value. Symbols without a usable price are left out entirely.
        """
        price_map = create_price_map(config.prices)
        weight_sum = total_weight(config.index_weights)
        if weight_sum == 0:
            raise InsufficientData("Total index weight is zero")

        portfolio_value = total_portfolio_value(config, price_map)
        self.logger.debug(f"Target shares based on total value {portfolio_value:,.2f} and weight sum {weight_sum}")

        targets = {}
        for item in config.index_weights:
            price = _usable_price(price_map, item.symbol)
            if price is None:
                continue
            target_value = portfolio_value * (item.weight / weight_sum)
            targets[item.symbol] = int(target_value / price)
        return targets

    def calculate_sell_orders(self, config: RebalanceConfig, target_shares: Dict[str, int]) -> List[Order]:
        """Sell the excess of every holding above its target, at the current price"""
        price_map = create_price_map(config.prices)
        orders = []

        for holding in config.holdings:
            price = _usable_price(price_map, holding.symbol)
            target = target_shares.get(holding.symbol, 0)
            if price is None or holding.shares <= target:
                continue
            orders.append(self._make_order(holding.symbol, holding.shares - target, price, config.include_commission))

        return orders

    def calculate_buy_orders(self, config: RebalanceConfig, target_shares: Dict[str, int]) -> List[Order]:
        """Buy the shortfall of every target above the shares currently held"""
        price_map = create_price_map(config.prices)
        current_map = create_current_shares_map(config.holdings)
        orders = []

        for symbol, target in target_shares.items():
            price = _usable_price(price_map, symbol)
            held = current_map.get(symbol, 0)
            if price is None or target <= held:
                continue
            orders.append(self._make_order(symbol, target - held, price, config.include_commission))

        return orders

    def calculate_final_positions(self, config: RebalanceConfig, target_shares: Dict[str, int]) -> List[FinalPosition]:
        """
        Post-rebalance snapshot of every target position.
        Realized weight is measured against total portfolio value with
        commission left in the denominator.
        """
        price_map = create_price_map(config.prices)
        weight_map = create_weight_map(config.index_weights)
        portfolio_value = total_portfolio_value(config, price_map)
        positions = []

        for symbol, shares in target_shares.items():
            price = _usable_price(price_map, symbol)
            if price is None:
                continue
            value = shares * price
            positions.append(FinalPosition(
                symbol=symbol,
                shares=shares,
                value=value,
                commission=Decimal("0"),
                price=price,
                target_weight=weight_map.get(symbol, Decimal("0")),
                realized_weight=value / portfolio_value if portfolio_value > 0 else Decimal("0"),
            ))

        return positions

    def calculate_index_orders(self, config: RebalanceConfig) -> List[Order]:
        """
        Orders investing cash alone across the index.
        Callers must short-circuit zero cash or zero total weight first.
        """
        price_map = create_price_map(config.prices)
        weight_sum = total_weight(config.index_weights)
        orders = []

        for item in config.index_weights:
            price = _usable_price(price_map, item.symbol)
            if price is None:
                continue
            target_value = config.cash * (item.weight / weight_sum)
            shares = int(target_value / price)
            if shares <= 0:
                self.logger.debug(f"Skipping {item.symbol}: target value {target_value:,.2f} below one share @ {price}")
                continue
            orders.append(self._make_order(item.symbol, shares, price, config.include_commission))

        return orders

    def _make_order(self, symbol: str, shares: int, price: Decimal, include_commission: bool) -> Order:
        commission = self.commission.calculate(price, shares) if include_commission else Decimal("0")
        self.logger.debug(f"Order {symbol}: {shares:,} shares @ {price} (commission {commission})")
        return Order(
            symbol=symbol,
            shares=shares,
            price=price,
            value=shares * price,
            commission=commission,
        )
