"""Errors raised for invalid VaR inputs and configuration."""

from __future__ import annotations


class VarInputError(ValueError):
    """Base class for caller-input errors rejected before any computation."""


class MissingDataError(VarInputError):
    def __init__(self) -> None:
        super().__init__("Historical data is required")


class NonFiniteDataError(VarInputError):
    def __init__(self) -> None:
        super().__init__(
            "Historical data must be a one-dimensional series of finite numbers"
        )


class InsufficientDataError(VarInputError):
    def __init__(self, required: int, actual: int) -> None:
        self.required = required
        self.actual = actual
        super().__init__(
            f"Need at least {required} data points for reliable VaR calculation"
        )


class InvalidConfidenceLevelError(VarInputError):
    def __init__(self, confidence_level: object) -> None:
        self.confidence_level = confidence_level
        super().__init__(
            f"Confidence level must be strictly between 0 and 1, got {confidence_level}"
        )


class EmptyPortfolioError(VarInputError):
    def __init__(self) -> None:
        super().__init__("Portfolio must contain at least one trade")


class MisalignedPortfolioError(VarInputError):
    def __init__(self, expected: int, actual: int, index: int) -> None:
        self.expected = expected
        self.actual = actual
        self.index = index
        super().__init__(
            "All trades must have the same number of data points "
            f"(trade {index} has {actual}, expected {expected})"
        )


class RequestValidationError(VarInputError):
    pass


class ConfigurationError(ValueError):
    pass


class DuplicateTradeError(VarInputError):
    def __init__(self, trade_id: str) -> None:
        self.trade_id = trade_id
        super().__init__(f"Trade id {trade_id!r} appears more than once in the portfolio")
