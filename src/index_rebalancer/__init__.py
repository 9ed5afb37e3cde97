from .calculator import (
    RebalanceCalculator,
    create_current_shares_map,
    create_price_map,
    create_weight_map,
    total_portfolio_value,
)
from .commission import CommissionCalculator
from .models import (
    # Input models
    IndexWeight,
    PriceQuote,
    Holding,
    RebalanceConfig,
    ValidatedRebalanceConfig,
    # Result models
    Order,
    FinalPosition,
    RebalanceResult,
    IndexRebalanceResult,
)
from .exceptions import (
    RebalanceValidationError,
    InvalidCashAmount,
    InvalidSymbol,
    MissingPriceData,
    EmptyIndex,
    EmptyPortfolio,
    InsufficientData,
    InvalidWeight,
    InvalidPrice,
    InvalidShares,
)
from .rebalancer import IndexRebalancer, rebalance_index, rebalance_current_portfolio
from .validation import InputValidator, find_missing_symbols

__version__ = "1.0.0"

__all__ = [
    "RebalanceCalculator",
    "CommissionCalculator",
    "IndexRebalancer",
    "InputValidator",
    "rebalance_index",
    "rebalance_current_portfolio",
    "find_missing_symbols",
    "create_price_map",
    "create_weight_map",
    "create_current_shares_map",
    "total_portfolio_value",
    "IndexWeight",
    "PriceQuote",
    "Holding",
    "RebalanceConfig",
    "ValidatedRebalanceConfig",
    "Order",
    "FinalPosition",
    "RebalanceResult",
    "IndexRebalanceResult",
    "RebalanceValidationError",
    "InvalidCashAmount",
    "InvalidSymbol",
    "MissingPriceData",
    "EmptyIndex",
    "EmptyPortfolio",
    "InsufficientData",
    "InvalidWeight",
    "InvalidPrice",
    "InvalidShares",
    "__version__",
]
