"""Rebalance entry points: index-only and current-portfolio"""

from decimal import Decimal
from typing import List, Optional
import logging
from rebalancer_config import AppConfig, get_config
from .calculator import RebalanceCalculator, total_weight
from .exceptions import InsufficientData
from .models import IndexRebalanceResult, Order, RebalanceConfig, RebalanceResult
from .validation import InputValidator


def _sum_values(orders: List[Order]) -> Decimal:
    return sum((order.value for order in orders), Decimal("0"))


def _sum_commissions(orders: List[Order]) -> Decimal:
    return sum((order.commission for order in orders), Decimal("0"))


class IndexRebalancer:
    """Validate inputs, then compute orders and the resulting cash flow"""

    def __init__(self, config: Optional[AppConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or get_config()
        self.logger = logger or logging.getLogger(__name__)
        self.validator = InputValidator(self.config.validation, logger=self.logger)
        self.calculator = RebalanceCalculator(self.config, logger=self.logger)

    def rebalance_index(self, config: RebalanceConfig) -> IndexRebalanceResult:
        """Invest cash across the index from scratch, ignoring current holdings"""
        validated = self.validator.validate_rebalance_config(config)
        self._warn_missing(validated.missing_symbols)
        self.logger.info(f"Starting index rebalance with cash {config.cash:,.2f}")

        if config.cash == 0 or total_weight(config.index_weights) == 0:
            self.logger.info("Nothing to allocate: cash or total index weight is zero")
            return IndexRebalanceResult(
                orders=[],
                total_value=Decimal("0"),
                total_commission=Decimal("0"),
                remaining_cash=config.cash,
                missing_symbols=validated.missing_symbols,
            )

        orders = self.calculator.calculate_index_orders(config)
        total_value = _sum_values(orders)
        total_commission = _sum_commissions(orders)
        remaining_cash = config.cash - total_value - total_commission

        self.logger.info(
            f"Index rebalance: {len(orders)} orders, value {total_value:,.2f}, "
            f"commission {total_commission:,.2f}, remaining cash {remaining_cash:,.2f}"
        )
        if remaining_cash < 0:
            self.logger.warning(f"Commission exceeds leftover cash: remaining cash {remaining_cash:,.2f}")

        return IndexRebalanceResult(
            orders=orders,
            total_value=total_value,
            total_commission=total_commission,
            remaining_cash=remaining_cash,
            missing_symbols=validated.missing_symbols,
        )

    def rebalance_current_portfolio(self, config: RebalanceConfig) -> RebalanceResult:
        """
        Move current holdings plus cash toward the index weights.
        Sells are assumed to settle before buys, so sale proceeds fund purchases.
        """
        validated = self.validator.validate_rebalance_config(config, include_holdings=True)
        if total_weight(config.index_weights) == 0:
            self.logger.error("Cannot rebalance portfolio: total index weight is zero")
            raise InsufficientData("Total index weight is zero")
        self._warn_missing(validated.missing_symbols)
        self.logger.info(
            f"Starting portfolio rebalance with cash {config.cash:,.2f} and {len(config.holdings)} holdings"
        )

        target_shares = self.calculator.calculate_target_shares(config)
        sells = self.calculator.calculate_sell_orders(config, target_shares)
        buys = self.calculator.calculate_buy_orders(config, target_shares)
        final = self.calculator.calculate_final_positions(config, target_shares)

        total_sell_value = _sum_values(sells)
        total_sell_commission = _sum_commissions(sells)
        cash_after_selling = config.cash + total_sell_value - total_sell_commission

        total_buy_value = _sum_values(buys)
        total_buy_commission = _sum_commissions(buys)
        cash_after_buying = cash_after_selling - total_buy_value - total_buy_commission

        self.logger.info(f"Sells: {len(sells)} orders, value {total_sell_value:,.2f}, commission {total_sell_commission:,.2f}")
        self.logger.info(f"Cash after selling: {cash_after_selling:,.2f}")
        self.logger.info(f"Buys: {len(buys)} orders, value {total_buy_value:,.2f}, commission {total_buy_commission:,.2f}")
        self.logger.info(f"Cash after buying: {cash_after_buying:,.2f}")

        return RebalanceResult(
            sells=sells,
            buys=buys,
            final=final,
            cash_after_selling=cash_after_selling,
            cash_after_buying=cash_after_buying,
            total_sell_value=total_sell_value,
            total_buy_value=total_buy_value,
            total_sell_commission=total_sell_commission,
            total_buy_commission=total_buy_commission,
            missing_symbols=validated.missing_symbols,
        )

    def _warn_missing(self, missing_symbols: List[str]):
        if missing_symbols:
            self.logger.warning(f"No price data for symbols (skipped): {', '.join(missing_symbols)}")


def rebalance_index(config: RebalanceConfig, app_config: Optional[AppConfig] = None) -> IndexRebalanceResult:
    return IndexRebalancer(app_config).rebalance_index(config)


def rebalance_current_portfolio(config: RebalanceConfig, app_config: Optional[AppConfig] = None) -> RebalanceResult:
    return IndexRebalancer(app_config).rebalance_current_portfolio(config)
