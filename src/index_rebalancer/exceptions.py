from typing import Any, List


class RebalanceValidationError(ValueError):
    """Base class for rebalance input validation failures"""

    def __init__(self, value: Any = None, message: str = ""):
        self.value = value
        super().__init__(message or f"{self.__class__.__name__}: {value!r}")


class InvalidCashAmount(RebalanceValidationError):
    """Raised when cash lies outside the configured bounds"""
    pass


class InvalidSymbol(RebalanceValidationError):
    """Raised when a symbol is blank or has an unsupported length"""
    pass


class MissingPriceData(RebalanceValidationError):
    """Raised by callers that require a price for every symbol"""

    def __init__(self, symbols: List[str]):
        super().__init__(list(symbols), f"No price data for: {', '.join(symbols)}")


class EmptyIndex(RebalanceValidationError):
    """Raised when the index has no constituents"""

    def __init__(self):
        super().__init__(None, "Index contains no records")


class EmptyPortfolio(RebalanceValidationError):
    """Raised when a current-portfolio rebalance has no holdings"""

    def __init__(self):
        super().__init__(None, "Current portfolio contains no records")


class InsufficientData(RebalanceValidationError):
    """Raised when inputs are present but cannot support a calculation"""

    def __init__(self, message: str):
        super().__init__(message, message)


class InvalidWeight(RebalanceValidationError):
    """Raised when an index weight lies outside the configured bounds"""
    pass


class InvalidPrice(RebalanceValidationError):
    """Raised when a price lies outside the configured bounds"""
    pass


class InvalidShares(RebalanceValidationError):
    """Raised when a share count lies outside the configured bounds"""
    pass
