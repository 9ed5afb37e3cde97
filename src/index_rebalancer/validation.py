"""Input validation for rebalance calculations.

The allocation entry points only check cash and index presence. The
per-field validators are for data-import paths that want stricter checks.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Literal, Optional

from rebalancer_config import ValidationConfig, get_config
from .exceptions import (
    EmptyIndex,
    EmptyPortfolio,
    InsufficientData,
    InvalidCashAmount,
    InvalidPrice,
    InvalidShares,
    InvalidSymbol,
    InvalidWeight,
    MissingPriceData,
)
from .models import IndexWeight, RebalanceConfig, ValidatedRebalanceConfig


def find_missing_symbols(config: RebalanceConfig, include_holdings: bool = False) -> List[str]:
    """Symbols that will be skipped because they have no usable price.

    Covers index symbols, plus held symbols when include_holdings is set.
    Order follows first appearance.
    """
    priced = {quote.symbol for quote in config.prices if quote.price > 0}
    symbols = [item.symbol for item in config.index_weights]
    if include_holdings:
        symbols.extend(holding.symbol for holding in config.holdings)

    missing = []
    for symbol in symbols:
        if symbol not in priced and symbol not in missing:
            missing.append(symbol)
    return missing


class InputValidator:
    """Validate cash, symbols, prices, shares and weights against configured bounds"""

    def __init__(self, config: Optional[ValidationConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or get_config().validation
        self.logger = logger or logging.getLogger(__name__)

    def validate_cash_amount(self, cash: Decimal) -> Decimal:
        if cash < self.config.minimum_cash_amount or cash > self.config.maximum_cash_amount:
            raise InvalidCashAmount(cash)
        return cash

    def validate_symbol(self, symbol: Optional[str]) -> str:
        if symbol is None:
            raise InvalidSymbol("")
        if not symbol.strip():
            raise InvalidSymbol(symbol)
        if not self.config.min_symbol_length <= len(symbol) <= self.config.max_symbol_length:
            raise InvalidSymbol(symbol)
        return symbol

    def validate_price(self, price: Decimal) -> Decimal:
        if price < self.config.minimum_price or price > self.config.maximum_price:
            raise InvalidPrice(price)
        return price

    def validate_shares(self, shares: int) -> int:
        if shares < self.config.minimum_shares or shares > self.config.maximum_shares:
            raise InvalidShares(shares)
        return shares

    def validate_weight(self, weight: Decimal) -> Decimal:
        if weight < self.config.minimum_weight or weight > self.config.maximum_weight:
            raise InvalidWeight(weight)
        return weight

    def validate_index_not_empty(self, index_weights: Iterable[IndexWeight]) -> List[IndexWeight]:
        index_weights = list(index_weights)
        if not index_weights:
            raise EmptyIndex()
        return index_weights

    def validate_rebalance_config(self, config: RebalanceConfig,
                                  include_holdings: bool = False) -> ValidatedRebalanceConfig:
        """
        Config-level validation run before any allocation math.
        Checks cash bounds first, then that the index is non-empty.
        Individual prices and weights are not re-validated.
        """
        try:
            self.validate_cash_amount(config.cash)
            self.validate_index_not_empty(config.index_weights)
        except (InvalidCashAmount, EmptyIndex) as e:
            self.logger.error(f"Rebalance config rejected: {e}")
            raise

        return ValidatedRebalanceConfig(
            include_commission=config.include_commission,
            cash=config.cash,
            index_weights=config.index_weights,
            holdings=config.holdings,
            prices=config.prices,
            missing_symbols=find_missing_symbols(config, include_holdings=include_holdings),
        )

    def validate_inputs(self, config: RebalanceConfig, kind: Literal['index', 'current'],
                        require_all_prices: bool = False) -> List[str]:
        """
        Pre-flight checks for calling layers before a rebalance is requested.
        Returns the symbols lacking price data so the caller can warn about
        them, or raises MissingPriceData when require_all_prices is set.
        """
        if not config.index_weights:
            self.logger.error("No index records found")
            raise EmptyIndex()
        if not config.prices:
            self.logger.error("No stock price records found")
            raise InsufficientData("No stock price records found")
        if kind == 'current' and not config.holdings:
            self.logger.error("No current portfolio records found")
            raise EmptyPortfolio()

        missing = find_missing_symbols(config, include_holdings=(kind == 'current'))
        if missing:
            if require_all_prices:
                self.logger.error(f"No price data for symbols: {', '.join(missing)}")
                raise MissingPriceData(missing)
            self.logger.warning(f"No price data for symbols: {', '.join(missing)}")

        return missing
