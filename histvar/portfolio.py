from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Sequence

import numpy as np
import pandas as pd

from .errors import (
    DuplicateTradeError,
    EmptyPortfolioError,
    MisalignedPortfolioError,
    MissingDataError,
    NonFiniteDataError,
)

if TYPE_CHECKING:
    from .var import HistoricalVarEngine

logger = logging.getLogger(__name__)


def _trade_columns(
    trades_pnl: Sequence[Sequence[float] | np.ndarray] | pd.DataFrame | None,
) -> List[object]:
    if trades_pnl is None:
        return []
    if isinstance(trades_pnl, pd.DataFrame):
        return [trades_pnl[c] for c in trades_pnl.columns]
    return list(trades_pnl)


def aggregate_pnl(
    trades_pnl: Sequence[Sequence[float] | np.ndarray] | pd.DataFrame | None,
) -> np.ndarray:
    """Sum P&L across trades period by period into one synthetic series.

    Trades are added one at a time in the order given, so the i-th output equals
    ``trades[0][i] + trades[1][i] + ...``. Period alignment (same calendar
    periods in the same order) is the caller's responsibility; only equal lengths
    are checked. A DataFrame is read column by column, one column per trade.
    """
    columns = _trade_columns(trades_pnl)
    if not columns:
        raise EmptyPortfolioError()

    arrays: List[np.ndarray] = []
    for trade in columns:
        if trade is None:
            raise MissingDataError()
        try:
            values = np.array(trade, dtype=float)
        except (TypeError, ValueError, OverflowError) as exc:
            raise NonFiniteDataError() from exc
        if values.ndim != 1:
            raise NonFiniteDataError()
        arrays.append(values)

    periods = arrays[0].size
    for index, values in enumerate(arrays):
        if values.size != periods:
            raise MisalignedPortfolioError(
                expected=periods, actual=int(values.size), index=index
            )

    total = arrays[0].copy()
    for values in arrays[1:]:
        total = total + values
    logger.debug("Aggregated %d trades over %d periods", len(arrays), periods)
    return total


@dataclass(frozen=True)
class Trade:
    """A single trade and its historical P&L.

    Attributes
    ----------
    trade_id: str
            Identifier unique within a portfolio.
    pnl: tuple of float
            One observation per historical period, oldest first.
    """

    trade_id: str
    pnl: tuple[float, ...]

    @classmethod
    def from_series(cls, trade_id: str, pnl: Sequence[float]) -> "Trade":
        return cls(trade_id=trade_id, pnl=tuple(float(x) for x in pnl))

    @property
    def periods(self) -> int:
        return len(self.pnl)


class Portfolio:
    """An ordered collection of trades sharing the same observation periods.

    Parameters
    ----------
    trades:
            List of `Trade` instances.
    """

    def __init__(self, trades: Sequence[Trade] = ()):
        self.trades: List[Trade] = []
        for trade in trades:
            self.add(trade)

    def add(self, trade: Trade) -> None:
        """Append a trade; ids must be unique within the portfolio."""
        if any(t.trade_id == trade.trade_id for t in self.trades):
            raise DuplicateTradeError(trade.trade_id)
        self.trades.append(trade)

    def trade_ids(self) -> List[str]:
        """Return trade ids in portfolio order."""
        return [t.trade_id for t in self.trades]

    def pnl_series(self) -> List[tuple[float, ...]]:
        return [t.pnl for t in self.trades]

    def pnl_frame(self) -> pd.DataFrame:
        """Return a DataFrame of P&L, one column per trade, one row per period."""
        if not self.trades:
            return pd.DataFrame()
        expected = self.trades[0].periods
        for index, t in enumerate(self.trades):
            if t.periods != expected:
                raise MisalignedPortfolioError(
                    expected=expected, actual=t.periods, index=index
                )
        data: Dict[str, List[float]] = {t.trade_id: list(t.pnl) for t in self.trades}
        return pd.DataFrame(data)

    def aggregate(self) -> np.ndarray:
        """Period-aligned portfolio P&L."""
        return aggregate_pnl(self.pnl_series())

    def var_table(
        self, engine: "HistoricalVarEngine", confidence_level: float
    ) -> pd.DataFrame:
        """Standalone VaR per trade next to the portfolio VaR.

        The last two rows hold the sum of standalone VaRs and the portfolio VaR;
        ``table.attrs["diversification_benefit"]`` is their difference.
        """
        portfolio_var = engine.calculate_portfolio_var(
            self.pnl_series(), confidence_level
        )
        rows = []
        for t in self.trades:
            rows.append(
                {
                    "Trade": t.trade_id,
                    "VaR": engine.calculate_trade_var(t.pnl, confidence_level),
                }
            )
        df = pd.DataFrame(rows)
        standalone = float(df["VaR"].sum())
        summary = pd.DataFrame(
            [
                {"Trade": "Sum of standalone", "VaR": standalone},
                {"Trade": "Portfolio", "VaR": portfolio_var},
            ]
        )
        table = pd.concat([df, summary], ignore_index=True)
        table.attrs["diversification_benefit"] = standalone - portfolio_var
        table.attrs["confidence_level"] = float(confidence_level)
        return table
