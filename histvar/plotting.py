from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

if TYPE_CHECKING:
    from matplotlib.axes import Axes

    from .var import HistoricalVarEngine


STYLE = "seaborn-v0_8-whitegrid"


def _new_figure(figsize: tuple[float, float], show: bool) -> Figure:
    # Only figures meant for display are registered with pyplot.
    if show:
        return plt.figure(figsize=figsize)
    return Figure(figsize=figsize)


def plot_pnl_histogram(
    pnl: Sequence[float] | pd.Series,
    var_abs: float,
    confidence: float,
    bins: int = 50,
    show: bool = False,
) -> Optional["Axes"]:
    """Plot histogram of P&L with the VaR threshold marked at ``-var_abs``.

    Returns the Axes. Unless ``show`` is set, the figure is not tracked by
    pyplot, so nothing needs closing.
    """
    values = pd.Series(pnl, dtype=float).dropna()
    if values.empty:
        return None
    with plt.style.context(STYLE):
        fig = _new_figure((8, 4), show)
        ax = fig.subplots()
        ax.hist(values.values, bins=bins, color="#69b3a2", alpha=0.7)
        ax.axvline(
            -var_abs,
            color="red",
            linestyle="--",
            label=f"Historical VaR @ {confidence:.2%}",
        )
        ax.set_title("Distribution of P&L")
        ax.set_xlabel("P&L per period")
        ax.set_ylabel("Count")
        ax.legend(loc="best")
        fig.tight_layout()
    if show:
        plt.show()
    return ax


def plot_var_by_confidence(
    pnl: Sequence[float] | pd.Series,
    levels: Sequence[float],
    engine: "HistoricalVarEngine",
    show: bool = False,
) -> Optional["Axes"]:
    """Plot historical VaR across a range of confidence levels."""
    if len(levels) == 0:
        return None
    ordered = np.sort(np.asarray(levels, dtype=float))
    var_values = [engine.calculate_trade_var(pnl, float(c)) for c in ordered]
    with plt.style.context(STYLE):
        fig = _new_figure((8, 4), show)
        ax = fig.subplots()
        ax.plot(ordered, var_values, marker="o", label="Historical VaR")
        ax.set_title("VaR by Confidence Level")
        ax.set_xlabel("Confidence level")
        ax.set_ylabel("VaR")
        ax.legend(loc="best")
        fig.tight_layout()
    if show:
        plt.show()
    return ax
