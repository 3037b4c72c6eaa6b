"""Historical-simulation Value-at-Risk for single trades and portfolios.

Modules:
- config: engine settings and environment loading
- errors: input and configuration errors
- validation: precondition checks shared by every calculation
- var: interpolated percentile, single-series VaR, the engine
- portfolio: period-aligned P&L aggregation, trade and portfolio models
- cache: result cache keyed by identifier and confidence level
- audit: in-memory audit trail
- service: request/response models around the engine
- plotting: P&L distribution and VaR charts
"""

from .config import VarSettings
from .errors import (
    ConfigurationError,
    DuplicateTradeError,
    EmptyPortfolioError,
    InsufficientDataError,
    InvalidConfidenceLevelError,
    MisalignedPortfolioError,
    MissingDataError,
    NonFiniteDataError,
    RequestValidationError,
    VarInputError,
)
from .portfolio import Portfolio, Trade, aggregate_pnl
from .var import (
    HistoricalVarEngine,
    VarResult,
    historical_var,
    interpolated_percentile,
    summarize_var,
)

__all__ = [
    "ConfigurationError",
    "DuplicateTradeError",
    "EmptyPortfolioError",
    "HistoricalVarEngine",
    "InsufficientDataError",
    "InvalidConfidenceLevelError",
    "MisalignedPortfolioError",
    "MissingDataError",
    "NonFiniteDataError",
    "Portfolio",
    "RequestValidationError",
    "Trade",
    "VarInputError",
    "VarResult",
    "VarSettings",
    "aggregate_pnl",
    "historical_var",
    "interpolated_percentile",
    "summarize_var",
]
