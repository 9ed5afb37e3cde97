"""Brokerage commission schedule"""

from decimal import Decimal
from typing import Optional
from rebalancer_config import CommissionConfig, get_config


class CommissionCalculator:
    """Commission per trade: flat per-share fee below the minimum price, percentage of value otherwise"""

    def __init__(self, config: Optional[CommissionConfig] = None):
        self.config = config or get_config().commission

    def calculate(self, price: Decimal, shares: int) -> Decimal:
        if price < self.config.minimum_price:
            return self.config.fixed_rate * shares
        return price * shares * self.config.percentage_rate
