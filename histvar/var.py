from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .config import DEFAULT_MIN_DATA_POINTS, VarSettings
from .portfolio import aggregate_pnl
from .validation import validate_input

logger = logging.getLogger(__name__)

HISTORICAL_SIMULATION = "HISTORICAL_SIMULATION"


@dataclass(frozen=True, slots=True)
class VarResult:
    """Container for a single historical-simulation VaR estimate."""

    confidence: float
    percentile: float
    observations: int
    quantile: float
    var: float
    method: str = HISTORICAL_SIMULATION


def interpolated_percentile(sorted_values: Sequence[float], percentile: float) -> float:
    """Linearly interpolated order statistic of an ascending sample.

    The fractional index is ``percentile * (n - 1)``. When it lands exactly on an
    index the order statistic is returned untouched; otherwise the two
    neighbouring order statistics are blended by the fractional part.
    """
    n = len(sorted_values)
    if n == 0:
        raise ValueError("Cannot take a percentile of an empty sample")
    if not 0.0 <= percentile <= 1.0:
        raise ValueError(f"Percentile must be within [0, 1], got {percentile}")
    position = percentile * (n - 1)
    lower = int(math.floor(position))
    upper = int(math.ceil(position))
    if lower == upper:
        return float(sorted_values[lower])
    low_value = float(sorted_values[lower])
    high_value = float(sorted_values[upper])
    return low_value + (position - lower) * (high_value - low_value)


def summarize_var(
    pnl_series: Sequence[float] | np.ndarray,
    confidence: float,
    min_data_points: int = DEFAULT_MIN_DATA_POINTS,
) -> VarResult:
    """Validate, sort a private copy and read the loss-tail order statistic.

    VaR is reported as ``abs(q)`` where ``q`` is the interpolated quantile at
    ``1 - confidence``. A tail quantile that is still a gain therefore yields
    the magnitude of that gain, not zero.
    """
    values, level = validate_input(pnl_series, confidence, min_data_points)
    values.sort(kind="stable")
    percentile = 1.0 - level
    q = interpolated_percentile(values, percentile)
    result = VarResult(
        confidence=level,
        percentile=percentile,
        observations=int(values.size),
        quantile=q,
        var=abs(q),
    )
    logger.debug(
        "Historical VaR over %d observations at %.4f: quantile=%.6f var=%.6f",
        result.observations,
        level,
        q,
        result.var,
    )
    return result


def historical_var(
    pnl_series: Sequence[float] | np.ndarray,
    confidence: float,
    min_data_points: int = DEFAULT_MIN_DATA_POINTS,
) -> float:
    """Historical VaR as a non-negative loss magnitude at the given confidence."""
    return summarize_var(pnl_series, confidence, min_data_points).var


class HistoricalVarEngine:
    """Stateless historical-simulation VaR engine.

    Parameters
    ----------
    settings:
            Engine settings; only ``min_data_points`` is consulted. Defaults to
            ``VarSettings()`` (five points).

    Instances hold no mutable state and may be shared across threads.
    """

    def __init__(self, settings: VarSettings | None = None):
        self.settings = settings or VarSettings()

    @property
    def min_data_points(self) -> int:
        return self.settings.min_data_points

    def summarize_trade(
        self, historical_pnl: Sequence[float] | np.ndarray, confidence_level: float
    ) -> VarResult:
        return summarize_var(historical_pnl, confidence_level, self.min_data_points)

    def calculate_trade_var(
        self, historical_pnl: Sequence[float] | np.ndarray, confidence_level: float
    ) -> float:
        """VaR magnitude of one trade's P&L series."""
        return self.summarize_trade(historical_pnl, confidence_level).var

    def summarize_portfolio(
        self,
        trades_pnl: Sequence[Sequence[float] | np.ndarray],
        confidence_level: float,
    ) -> VarResult:
        combined = aggregate_pnl(trades_pnl)
        return summarize_var(combined, confidence_level, self.min_data_points)

    def calculate_portfolio_var(
        self,
        trades_pnl: Sequence[Sequence[float] | np.ndarray],
        confidence_level: float,
    ) -> float:
        """VaR magnitude of the period-aligned sum of several trades' P&L.

        Only the aggregate length is checked against ``min_data_points``.
        """
        return self.summarize_portfolio(trades_pnl, confidence_level).var
